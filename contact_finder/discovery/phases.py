"""
Phase Executors: one specialised provider search per phase.

Each executor builds its prompt, calls the provider, parses the answer and
turns every plausible {name, role} pair into a scored Candidate tagged with
the phase. Provider and parse failures stop at this boundary: the phase
yields zero candidates and reports why.

The orchestrator iterates DEFAULT_PHASES; adding a phase means appending a
PhaseDescriptor (and its executor class), not touching the orchestrator.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Type

from pydantic import ValidationError

from contact_finder.common.error_handling import ContactDiscoveryError
from contact_finder.discovery import lexicon, prompts
from contact_finder.discovery.provider import CompletionProvider
from contact_finder.discovery.response_parser import ResponseParser
from contact_finder.discovery.types import Candidate, Industry, PhaseTag, RawPair, SearchOptions
from contact_finder.discovery.validator import CandidateValidator

logger = logging.getLogger(__name__)

LEADERSHIP_BONUS = 15
LEADERSHIP_CAP = 95
INDUSTRY_TITLE_BONUS = 10
INDUSTRY_TITLE_CAP = 92


def _bounded_bonus(probability: int, bonus: int, cap: int) -> int:
    # The cap applies to the result, even when an earlier bonus went higher
    return min(cap, probability + bonus)


@dataclass
class PhaseResult:
    """Outcome of one phase execution."""
    phase: PhaseTag
    candidates: List[Candidate] = field(default_factory=list)
    raw_count: int = 0
    error: Optional[str] = None
    duration_ms: int = 0

    @property
    def failed(self) -> bool:
        return self.error is not None


class PhaseExecutor:
    """Base executor; subclasses supply the prompt and the response key."""

    phase: PhaseTag
    response_key: str
    system_prompt: str
    response_format: str

    def __init__(
        self,
        provider: CompletionProvider,
        validator: Optional[CandidateValidator] = None,
        parser: Optional[ResponseParser] = None,
    ):
        self.provider = provider
        self.validator = validator or CandidateValidator()
        self.parser = parser or ResponseParser()
        self.logger = logging.getLogger(__name__)

    @property
    def source(self) -> str:
        return f"ai_{self.phase.value}"

    def build_prompt(self, company_name: str, industry: Optional[Industry], custom_target: Optional[str]) -> str:
        raise NotImplementedError

    def format_hint(self, custom_target: Optional[str]) -> str:
        return self.response_format

    def run(
        self,
        company_name: str,
        industry: Optional[Industry] = None,
        custom_target: Optional[str] = None,
    ) -> List[Candidate]:
        return self.execute(company_name, industry, custom_target).candidates

    def execute(
        self,
        company_name: str,
        industry: Optional[Industry] = None,
        custom_target: Optional[str] = None,
    ) -> PhaseResult:
        """
        Run the phase end to end.

        Never raises for provider or parse problems; those come back as
        PhaseResult.error with no candidates.
        """
        started = time.monotonic()

        def elapsed() -> int:
            return int((time.monotonic() - started) * 1000)

        try:
            raw_text = self.provider.complete(
                self.system_prompt,
                self.build_prompt(company_name, industry, custom_target),
                self.format_hint(custom_target),
            )
            pairs = self.parser.parse_strict(raw_text, preferred_key=self.response_key)
        except ContactDiscoveryError as e:
            self.logger.warning(f"{self.phase.value} search failed for {company_name}: {e}")
            return PhaseResult(self.phase, error=f"{type(e).__name__}: {e}", duration_ms=elapsed())
        except Exception as e:
            # Custom providers may raise their own transport errors
            self.logger.warning(f"{self.phase.value} search failed for {company_name}: {type(e).__name__}: {e}")
            return PhaseResult(self.phase, error=f"{type(e).__name__}: {e}", duration_ms=elapsed())

        candidates = self.score_pairs(pairs, company_name, industry)
        self.logger.info(
            f"{self.phase.value}: {len(candidates)}/{len(pairs)} candidates kept for {company_name}"
        )
        return PhaseResult(self.phase, candidates=candidates, raw_count=len(pairs), duration_ms=elapsed())

    def score_pairs(
        self,
        pairs: Iterable[RawPair],
        company_name: str,
        industry: Optional[Industry],
    ) -> List[Candidate]:
        """Validate raw pairs and build tagged candidates; rejects are dropped."""
        candidates = []
        for pair in pairs:
            result = self.validator.score(pair.name, pair.role, company_name, industry)
            if result.reject:
                continue

            probability = self.adjust_probability(result.score, pair.role, industry)
            try:
                candidates.append(Candidate(
                    name=pair.name,
                    role=pair.role,
                    probability=probability,
                    name_confidence_score=result.score,
                    verification_source=self.source,
                    completed_searches=[self.phase.value],
                ))
            except ValidationError as e:
                self.logger.debug(f"Dropped invalid candidate {pair.name!r}: {e}")
        return candidates

    def adjust_probability(self, score: int, role: Optional[str], industry: Optional[Industry]) -> int:
        probability = score
        if industry and lexicon.is_industry_specific_role(role, industry):
            probability = _bounded_bonus(probability, INDUSTRY_TITLE_BONUS, INDUSTRY_TITLE_CAP)
        return probability


class LeadershipPhase(PhaseExecutor):
    phase = PhaseTag.LEADERSHIP
    response_key = "leaders"
    system_prompt = prompts.SYSTEM_PROMPT_LEADERSHIP
    response_format = prompts.FORMAT_LEADERSHIP

    def build_prompt(self, company_name, industry, custom_target):
        return prompts.build_leadership_prompt(company_name, industry)

    def adjust_probability(self, score, role, industry):
        probability = score
        if lexicon.is_leadership_role(role):
            probability = _bounded_bonus(probability, LEADERSHIP_BONUS, LEADERSHIP_CAP)
        if industry and lexicon.is_industry_specific_role(role, industry):
            probability = _bounded_bonus(probability, INDUSTRY_TITLE_BONUS, INDUSTRY_TITLE_CAP)
        return probability


class DepartmentHeadsPhase(PhaseExecutor):
    phase = PhaseTag.DEPARTMENT_HEAD
    response_key = "departmentLeaders"
    system_prompt = prompts.SYSTEM_PROMPT_DEPARTMENT_HEADS
    response_format = prompts.FORMAT_DEPARTMENT_HEADS

    def build_prompt(self, company_name, industry, custom_target):
        return prompts.build_department_heads_prompt(company_name, industry)


class MiddleManagementPhase(PhaseExecutor):
    phase = PhaseTag.MIDDLE_MANAGEMENT
    response_key = "managers"
    system_prompt = prompts.SYSTEM_PROMPT_MIDDLE_MANAGEMENT
    response_format = prompts.FORMAT_MIDDLE_MANAGEMENT

    def build_prompt(self, company_name, industry, custom_target):
        return prompts.build_middle_management_prompt(company_name, industry)


class CustomTargetPhase(PhaseExecutor):
    phase = PhaseTag.CUSTOM_TARGET
    response_key = "targetContacts"
    system_prompt = prompts.SYSTEM_PROMPT_CUSTOM_TARGET
    response_format = ""

    def build_prompt(self, company_name, industry, custom_target):
        return prompts.build_custom_target_prompt(company_name, custom_target or "", industry)

    def format_hint(self, custom_target):
        return prompts.custom_target_format(custom_target or "")

    def execute(self, company_name, industry=None, custom_target=None):
        if not custom_target or not custom_target.strip():
            return PhaseResult(self.phase, error="no target specified")
        return super().execute(company_name, industry, custom_target.strip())


@dataclass(frozen=True)
class PhaseDescriptor:
    """
    One entry of the ordered phase list.

    Attributes:
        phase: Provenance tag
        label: Human-readable name used in traces and logs
        executor: Executor class, instantiated once per orchestrator
        is_enabled: options -> whether the caller wants this phase
        target: options -> custom target text (None for fixed phases)
        disabled_reason: Skip reason recorded when is_enabled is False
    """
    phase: PhaseTag
    label: str
    executor: Type[PhaseExecutor]
    is_enabled: Callable[[SearchOptions], bool]
    target: Callable[[SearchOptions], Optional[str]] = lambda options: None
    disabled_reason: str = "disabled"


DEFAULT_PHASES: tuple = (
    PhaseDescriptor(
        phase=PhaseTag.LEADERSHIP,
        label="Core Leadership",
        executor=LeadershipPhase,
        is_enabled=lambda options: options.enable_core_leadership,
    ),
    PhaseDescriptor(
        phase=PhaseTag.DEPARTMENT_HEAD,
        label="Department Heads",
        executor=DepartmentHeadsPhase,
        is_enabled=lambda options: options.enable_department_heads,
    ),
    PhaseDescriptor(
        phase=PhaseTag.MIDDLE_MANAGEMENT,
        label="Middle Management",
        executor=MiddleManagementPhase,
        is_enabled=lambda options: options.enable_middle_management,
    ),
    PhaseDescriptor(
        phase=PhaseTag.CUSTOM_TARGET,
        label="Custom Search",
        executor=CustomTargetPhase,
        is_enabled=lambda options: options.active_custom_target() is not None,
        target=lambda options: options.active_custom_target(),
        disabled_reason="disabled or no target specified",
    ),
)


def build_executors(
    provider: CompletionProvider,
    phases: Iterable[PhaseDescriptor] = DEFAULT_PHASES,
    validator: Optional[CandidateValidator] = None,
    parser: Optional[ResponseParser] = None,
) -> Dict[PhaseTag, PhaseExecutor]:
    """Instantiate one executor per phase, sharing validator and parser."""
    validator = validator or CandidateValidator()
    parser = parser or ResponseParser()
    return {
        descriptor.phase: descriptor.executor(provider, validator=validator, parser=parser)
        for descriptor in phases
    }
