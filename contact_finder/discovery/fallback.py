"""
Fallback Arbiter: when to stop searching early, and when to search more.

Thresholds:
    MINIMUM  5   below this the result is a critical shortage
    OPTIMAL 10   below this (with few high-quality contacts) coverage is thin
    MAXIMUM 15   at or above this no further phase runs

A candidate is high quality at probability >= 70. Supplemental searches only
ever re-run phases the caller had disabled; nothing new is invented.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from contact_finder.common.config import Config
from contact_finder.discovery.deduplicator import dedupe
from contact_finder.discovery.phases import PhaseExecutor, PhaseResult
from contact_finder.discovery.types import Candidate, Industry, PhaseTag, SearchOptions

logger = logging.getLogger(__name__)


@dataclass
class FallbackAnalysis:
    current_count: int
    should_trigger_fallback: bool
    reasoning: str
    recommended_fallbacks: List[PhaseTag] = field(default_factory=list)


@dataclass
class FallbackRun:
    """What execute_fallback_searches actually did."""
    candidates: List[Candidate] = field(default_factory=list)
    phases_run: List[PhaseTag] = field(default_factory=list)
    results: List[PhaseResult] = field(default_factory=list)
    cancelled: bool = False


class FallbackArbiter:
    """Sufficiency checks and supplemental (fallback) searches."""

    MINIMUM = 5
    OPTIMAL = 10
    MAXIMUM = 15
    HIGH_QUALITY_PROBABILITY = 70
    EARLY_STOP_HIGH_QUALITY = 8
    FALLBACK_HIGH_QUALITY_TARGET = 5

    def __init__(
        self,
        delay_seconds: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.logger = logging.getLogger(__name__)
        self.delay_seconds = Config.fallback_delay_seconds() if delay_seconds is None else delay_seconds
        self.sleep = sleep

    def high_quality_count(self, candidates: Sequence[Candidate]) -> int:
        return sum(1 for c in candidates if c.probability >= self.HIGH_QUALITY_PROBABILITY)

    def should_continue_searching(self, candidates: Sequence[Candidate], upcoming_label: str) -> bool:
        """
        Sufficiency check made before each phase after the first.

        Returns False when the pool already holds MAXIMUM candidates, or
        at least OPTIMAL of which EARLY_STOP_HIGH_QUALITY are high quality.
        """
        count = len(candidates)
        if count >= self.MAXIMUM:
            self.logger.info(f"Stopping {upcoming_label} search: already {count} contacts (max {self.MAXIMUM})")
            return False

        quality = self.high_quality_count(candidates)
        if quality >= self.EARLY_STOP_HIGH_QUALITY and count >= self.OPTIMAL:
            self.logger.info(f"Stopping {upcoming_label} search: already {quality} high-quality contacts")
            return False

        return True

    def analyze_fallback_needs(self, final_primary: Sequence[Candidate], options: SearchOptions) -> FallbackAnalysis:
        """
        Decide whether a supplemental round is warranted after the primary phases.

        Only phases the caller disabled can be recommended (leadership first,
        then department heads on a severe shortage).
        """
        count = len(final_primary)
        quality = self.high_quality_count(final_primary)
        reasoning = f"Found {count} contacts ({quality} high-quality)"
        recommended: List[PhaseTag] = []

        if count < self.MINIMUM:
            if not options.enable_core_leadership:
                recommended.append(PhaseTag.LEADERSHIP)
            if not options.enable_department_heads and count < 3:
                recommended.append(PhaseTag.DEPARTMENT_HEAD)
            reasoning += f". Critical shortage - need minimum {self.MINIMUM} contacts"
        elif count < self.OPTIMAL and quality < self.FALLBACK_HIGH_QUALITY_TARGET:
            if not options.enable_core_leadership:
                recommended.append(PhaseTag.LEADERSHIP)
            reasoning += (
                f". Below optimal threshold - need {self.OPTIMAL} contacts "
                f"or {self.FALLBACK_HIGH_QUALITY_TARGET}+ high-quality"
            )

        return FallbackAnalysis(
            current_count=count,
            should_trigger_fallback=bool(recommended),
            reasoning=reasoning,
            recommended_fallbacks=recommended,
        )

    def execute_fallback_searches(
        self,
        company_name: str,
        recommended: Sequence[PhaseTag],
        industry: Optional[Industry],
        executors: Mapping[PhaseTag, PhaseExecutor],
        cancel_event: Optional[threading.Event] = None,
    ) -> FallbackRun:
        """
        Run the recommended phases sequentially, with a delay before each.

        A failing phase contributes nothing; the others still run. A set
        cancel_event stops the loop before the next search starts.
        """
        run = FallbackRun()

        for tag in recommended:
            if cancel_event is not None and cancel_event.is_set():
                self.logger.info(f"Fallback searches cancelled for {company_name}")
                run.cancelled = True
                break

            executor = executors.get(tag)
            if executor is None:
                self.logger.warning(f"No executor for fallback phase {tag.value}")
                continue

            self.sleep(self.delay_seconds)
            self.logger.info(f"Executing fallback search: {tag.value} for {company_name}")

            result = executor.execute(company_name, industry)
            run.phases_run.append(tag)
            run.results.append(result)
            if result.failed:
                self.logger.warning(f"Fallback search {tag.value} failed: {result.error}")
                continue
            run.candidates.extend(result.candidates)

        self.logger.info(f"Fallback complete: {len(run.candidates)} additional contacts for {company_name}")
        return run

    def optimize_contact_results(
        self,
        primary: Sequence[Candidate],
        fallback: Sequence[Candidate],
        max_contacts: int,
    ) -> List[Candidate]:
        """Merge via dedupe, sort by probability descending, truncate."""
        merged = dedupe(list(primary) + list(fallback))
        ranked = sorted(merged, key=lambda c: c.probability, reverse=True)[:max_contacts]
        self.logger.debug(
            f"Contact optimization: {len(primary) + len(fallback)} -> {len(merged)} -> {len(ranked)}"
        )
        return ranked
