"""
Search Orchestrator: decision-maker discovery for one company.

State machine (strictly forward, at most one fallback round):

    READY
      -> for each phase: SUFFICIENCY_CHECK -> SKIPPED | EXECUTING -> EXECUTED
      -> POST_FILTER -> FALLBACK_CHECK -> FALLBACK_EXECUTING -> FALLBACK_MERGED
                                        | NO_FALLBACK
      -> CUSTOM_SCORE (only with an active custom target)
      -> FINALIZE -> DONE

Any unexpected exception ends the run in FAILED with no candidates. search()
reports that explicitly; find_decision_makers() just returns [].
"""

import concurrent.futures
import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from contact_finder.common.config import Config
from contact_finder.common.error_handling import ErrorCollector, OrchestrationError, PhaseFailure, safe_execute
from contact_finder.common.logger import get_logger
from contact_finder.discovery.deduplicator import dedupe
from contact_finder.discovery.fallback import FallbackArbiter
from contact_finder.discovery.industry import resolve_industry
from contact_finder.discovery.phases import DEFAULT_PHASES, PhaseDescriptor, build_executors
from contact_finder.discovery.provider import CompletionProvider, LangChainCompletionProvider
from contact_finder.discovery.response_parser import ResponseParser
from contact_finder.discovery.role_scorer import CustomRoleScorer
from contact_finder.discovery.tracer import DelayEvent, FallbackEvent, PhaseEvent, SessionTrace, SessionTracer
from contact_finder.discovery.types import Candidate, SearchOptions
from contact_finder.discovery.validator import CandidateValidator

logger = logging.getLogger(__name__)

OptionsLike = Union[SearchOptions, Mapping[str, Any], None]


class OrchestratorState(str, Enum):
    READY = "ready"
    SUFFICIENCY_CHECK = "sufficiency_check"
    SKIPPED = "skipped"
    EXECUTING = "executing"
    EXECUTED = "executed"
    POST_FILTER = "post_filter"
    FALLBACK_CHECK = "fallback_check"
    FALLBACK_EXECUTING = "fallback_executing"
    FALLBACK_MERGED = "fallback_merged"
    NO_FALLBACK = "no_fallback"
    CUSTOM_SCORE = "custom_score"
    FINALIZE = "finalize"
    DONE = "done"
    FAILED = "failed"


@dataclass
class DiscoveryOutcome:
    """
    Result of one orchestration call.

    success=False means the pipeline itself broke (candidates is then empty);
    success=True with no candidates means nobody plausible was found.
    Recoverable per-phase failures are listed in phase_errors either way.
    """
    company_name: str
    candidates: List[Candidate] = field(default_factory=list)
    trace: Optional[SessionTrace] = None
    success: bool = True
    error: Optional[str] = None
    exception: Optional[OrchestrationError] = None
    phase_errors: List[PhaseFailure] = field(default_factory=list)
    states_visited: List[OrchestratorState] = field(default_factory=list)

    def error_summary(self) -> dict:
        """Failure counts by severity and recoverability."""
        return ErrorCollector(self.phase_errors).summary()


def _orchestration_error(exc: Exception) -> OrchestrationError:
    # Keep the original exception reachable as __cause__
    error = OrchestrationError(f"{type(exc).__name__}: {exc}")
    error.__cause__ = exc
    return error


class SearchOrchestrator:
    """Runs the phase sequence, fallback round and re-ranking for a company."""

    def __init__(
        self,
        provider: Optional[CompletionProvider] = None,
        tracer: Optional[SessionTracer] = None,
        arbiter: Optional[FallbackArbiter] = None,
        role_scorer: Optional[CustomRoleScorer] = None,
        validator: Optional[CandidateValidator] = None,
        parser: Optional[ResponseParser] = None,
        phases: Sequence[PhaseDescriptor] = DEFAULT_PHASES,
        phase_delay_seconds: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            provider: Completion provider (default: LangChain client from Config)
            tracer: Session tracer, may be shared across orchestrators
            arbiter: Fallback arbiter (default uses Config delays and ``sleep``)
            role_scorer: Custom role re-ranker
            validator: Candidate validator shared by all phases
            parser: Response parser shared by all phases
            phases: Ordered phase descriptors
            phase_delay_seconds: Pause after an executed phase (default Config)
            sleep: Sleep function, injectable for tests
        """
        self.provider = provider or LangChainCompletionProvider()
        self.tracer = tracer or SessionTracer()
        self.arbiter = arbiter or FallbackArbiter(sleep=sleep)
        self.role_scorer = role_scorer or CustomRoleScorer()
        self.phases = tuple(phases)
        self.executors = build_executors(self.provider, self.phases, validator, parser)
        self.phase_delay_seconds = (
            Config.phase_delay_seconds() if phase_delay_seconds is None else phase_delay_seconds
        )
        self.sleep = sleep

    # ===== Public API =====

    def search(
        self,
        company_name: str,
        options: OptionsLike = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> DiscoveryOutcome:
        """
        Discover decision makers at a company.

        Never raises; an unexpected failure yields success=False.
        """
        states = [OrchestratorState.READY]
        errors = ErrorCollector()
        session_id: Optional[str] = None

        try:
            opts = SearchOptions.coerce(options)
            session_id = self.tracer.start_session(company_name, opts)
            log = get_logger(__name__, session_id=session_id, company_name=company_name)
            log.info("Searching decision makers")

            industry = resolve_industry(company_name, opts.industry)
            log.info(f"Industry context: {industry.value if industry else 'unknown'}")

            pool = self._run_primary_phases(
                company_name, opts, industry, session_id, states, errors, cancel_event, log
            )

            states.append(OrchestratorState.POST_FILTER)
            primary = self._filter_and_rank(dedupe(pool), opts)

            states.append(OrchestratorState.FALLBACK_CHECK)
            final = self._run_fallback(
                company_name, opts, industry, primary, session_id, states, errors, cancel_event, log
            )

            target = opts.active_custom_target()
            if target:
                states.append(OrchestratorState.CUSTOM_SCORE)
                final = self.role_scorer.rescan(final, target, opts.max_contacts)

            states.append(OrchestratorState.FINALIZE)
            final = self._filter_and_rank(final, opts)
            trace = self.tracer.end_session(session_id, final)
            states.append(OrchestratorState.DONE)

            log.info(
                f"Found {len(final)} validated contacts "
                f"({trace.api_calls} provider calls, {trace.duration_ms}ms)"
            )
            if errors.errors:
                log.warning(f"Completed with phase failures: {errors.summary()}")
            return DiscoveryOutcome(
                company_name=company_name,
                candidates=final,
                trace=trace,
                success=True,
                phase_errors=list(errors.errors),
                states_visited=states,
            )

        except Exception as e:
            failure = _orchestration_error(e)
            logger.exception(f"Decision maker search failed for {company_name}: {failure}")
            trace = None
            if session_id is not None:
                try:
                    trace = self.tracer.end_session(session_id, [])
                except KeyError:
                    pass  # Already closed before the failure
            errors.add_error(
                phase="orchestration",
                operation="search",
                message=str(e),
                severity="critical",
                recoverable=False,
                exception=failure,
            )
            states.append(OrchestratorState.FAILED)
            return DiscoveryOutcome(
                company_name=company_name,
                candidates=[],
                trace=trace,
                success=False,
                error=str(failure),
                exception=failure,
                phase_errors=list(errors.errors),
                states_visited=states,
            )

    def find_decision_makers(self, company_name: str, options: OptionsLike = None) -> List[Candidate]:
        """Ranked candidates for a company; [] on any unrecoverable failure."""
        return safe_execute(
            lambda: self.search(company_name, options).candidates,
            operation_name=f"find_decision_makers({company_name})",
            logger=logger,
            fallback=[],
            critical=True,
        )

    def find_decision_makers_batch(
        self,
        companies: Iterable[str],
        options: OptionsLike = None,
        max_workers: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Dict[str, DiscoveryOutcome]:
        """
        Search several companies concurrently.

        Each company runs its own sequential orchestration; one failure never
        affects another. Duplicate company names are searched once.
        """
        unique = list(dict.fromkeys(companies))
        if not unique:
            return {}

        opts = SearchOptions.coerce(options)
        workers = max(1, min(max_workers or Config.BATCH_MAX_WORKERS, len(unique)))
        outcomes: Dict[str, DiscoveryOutcome] = {}

        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self.search, company, opts, cancel_event): company
                for company in unique
            }
            for future in concurrent.futures.as_completed(futures):
                company = futures[future]
                try:
                    outcomes[company] = future.result()
                except Exception as e:
                    logger.error(f"Batch search failed for {company}: {e}")
                    failure = _orchestration_error(e)
                    outcomes[company] = DiscoveryOutcome(
                        company_name=company, success=False, error=str(failure), exception=failure,
                    )

        # Input order
        return {company: outcomes[company] for company in unique}

    # ===== Steps =====

    @staticmethod
    def _cancelled(cancel_event: Optional[threading.Event]) -> bool:
        return cancel_event is not None and cancel_event.is_set()

    def _filter_and_rank(self, candidates: Sequence[Candidate], opts: SearchOptions) -> List[Candidate]:
        kept = [c for c in candidates if c.probability >= opts.minimum_confidence]
        return sorted(kept, key=lambda c: c.probability, reverse=True)[:opts.max_contacts]

    def _run_primary_phases(self, company_name, opts, industry, session_id, states, errors, cancel_event, log):
        pool: List[Candidate] = []

        for index, descriptor in enumerate(self.phases):
            states.append(OrchestratorState.SUFFICIENCY_CHECK)

            skip_reason = None
            if not descriptor.is_enabled(opts):
                skip_reason = descriptor.disabled_reason
            elif self._cancelled(cancel_event):
                skip_reason = "cancelled"
            elif not self.arbiter.should_continue_searching(pool, descriptor.label):
                skip_reason = "sufficient contacts found"

            if skip_reason is not None:
                self.tracer.record(session_id, PhaseEvent(
                    phase_name=descriptor.label,
                    enabled=descriptor.is_enabled(opts),
                    executed=False,
                    skip_reason=skip_reason,
                ))
                states.append(OrchestratorState.SKIPPED)
                log.for_phase(descriptor.label).debug(f"Skipped: {skip_reason}")
                continue

            states.append(OrchestratorState.EXECUTING)
            log.for_phase(descriptor.label).info("Running search")
            result = self.executors[descriptor.phase].execute(company_name, industry, descriptor.target(opts))
            pool.extend(result.candidates)

            if result.failed:
                errors.add_error(
                    phase=descriptor.phase.value,
                    operation="phase_search",
                    message=result.error,
                    severity="medium",
                )

            self.tracer.record(session_id, PhaseEvent(
                phase_name=descriptor.label,
                enabled=True,
                executed=True,
                failure_reason=result.error,
                result_count=len(result.candidates),
                high_quality_count=self.arbiter.high_quality_count(result.candidates),
                duration_ms=result.duration_ms,
            ))
            states.append(OrchestratorState.EXECUTED)

            if self._more_phases_may_run(index, opts, pool, cancel_event):
                self.sleep(self.phase_delay_seconds)
                self.tracer.record(session_id, DelayEvent(int(self.phase_delay_seconds * 1000)))

        return pool

    def _more_phases_may_run(self, index, opts, pool, cancel_event) -> bool:
        if self._cancelled(cancel_event):
            return False
        upcoming = [d for d in self.phases[index + 1:] if d.is_enabled(opts)]
        if not upcoming:
            return False
        return self.arbiter.should_continue_searching(pool, upcoming[0].label)

    def _run_fallback(self, company_name, opts, industry, primary, session_id, states, errors, cancel_event, log):
        analysis = self.arbiter.analyze_fallback_needs(primary, opts)

        if not analysis.should_trigger_fallback or self._cancelled(cancel_event):
            reasoning = (
                "cancelled before fallback" if analysis.should_trigger_fallback
                else f"{analysis.reasoning}. No fallback needed"
            )
            self.tracer.record(session_id, FallbackEvent(triggered=False, reasoning=reasoning))
            states.append(OrchestratorState.NO_FALLBACK)
            return primary

        states.append(OrchestratorState.FALLBACK_EXECUTING)
        log = log.for_phase("fallback")
        log.info(f"Triggered: {analysis.reasoning}")
        started = time.monotonic()

        run = self.arbiter.execute_fallback_searches(
            company_name,
            analysis.recommended_fallbacks,
            industry,
            self.executors,
            cancel_event=cancel_event,
        )
        for result in run.results:
            if result.failed:
                errors.add_error(
                    phase=f"fallback:{result.phase.value}",
                    operation="phase_search",
                    message=result.error,
                    severity="low",
                )

        if run.phases_run:
            self.tracer.record(
                session_id, DelayEvent(int(self.arbiter.delay_seconds * 1000) * len(run.phases_run))
            )
        self.tracer.record(session_id, FallbackEvent(
            triggered=True,
            reasoning=analysis.reasoning,
            phases_run=tuple(tag.value for tag in run.phases_run),
            added_count=len(run.candidates),
            duration_ms=int((time.monotonic() - started) * 1000),
        ))

        validated = [c for c in run.candidates if c.probability >= opts.minimum_confidence]
        merged = self.arbiter.optimize_contact_results(primary, validated, opts.max_contacts)
        states.append(OrchestratorState.FALLBACK_MERGED)
        log.info(f"Merged: {len(primary)} -> {len(merged)} contacts")
        return merged


# ===== Module-level convenience =====

_default_orchestrator: Optional[SearchOrchestrator] = None
_default_lock = threading.Lock()


def get_default_orchestrator() -> SearchOrchestrator:
    """Process-wide orchestrator built from Config, created on first use."""
    global _default_orchestrator
    with _default_lock:
        if _default_orchestrator is None:
            _default_orchestrator = SearchOrchestrator()
        return _default_orchestrator


def find_decision_makers(company_name: str, options: OptionsLike = None) -> List[Candidate]:
    """
    Find ranked decision makers at a company.

    Usage:
        from contact_finder import find_decision_makers

        contacts = find_decision_makers("Acme Robotics", {"max_contacts": 5})
        rows = [c.to_dict() for c in contacts]
    """
    return safe_execute(
        lambda: get_default_orchestrator().find_decision_makers(company_name, options),
        operation_name="find_decision_makers",
        logger=logger,
        fallback=[],
        critical=True,
    )
