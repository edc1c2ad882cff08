"""
Centralized error handling for contact discovery.

Defines the exception taxonomy used across the pipeline and a small
collector that records recoverable per-phase failures so they can be
reported alongside (possibly partial) results.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")


class ContactDiscoveryError(Exception):
    """Base class for all contact discovery errors."""


class ProviderError(ContactDiscoveryError):
    """The intelligence provider call failed (network, HTTP, timeout, auth)."""


class ParseError(ContactDiscoveryError):
    """The provider answered, but not with the expected structured text."""


class OrchestrationError(ContactDiscoveryError):
    """An unexpected failure escaped the per-phase error boundaries."""


@dataclass
class PhaseFailure:
    """
    Structured record of a recoverable failure during a search.

    Mirrors what is written to the session trace, with enough detail to
    aggregate failures across a batch of companies.
    """

    phase: str  # e.g. "leadership", "fallback:department_head"
    operation: str  # e.g. "provider_call", "response_parse"
    message: str
    severity: str = "medium"  # "critical", "high", "medium", "low"
    recoverable: bool = True
    exception_type: Optional[str] = None
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "phase": self.phase,
            "operation": self.operation,
            "message": self.message,
            "severity": self.severity,
            "recoverable": self.recoverable,
            "exception_type": self.exception_type,
            "timestamp": self.timestamp,
        }


class ErrorCollector:
    """Collects failures during a single orchestration call."""

    def __init__(self, errors: Optional[Iterable[PhaseFailure]] = None):
        self.errors: List[PhaseFailure] = list(errors or [])

    def add_error(
        self,
        phase: str,
        operation: str,
        message: str,
        severity: str = "medium",
        recoverable: bool = True,
        exception: Optional[BaseException] = None,
    ) -> None:
        """Convenience method to add an error with parameters."""
        self.errors.append(
            PhaseFailure(
                phase=phase,
                operation=operation,
                message=message,
                severity=severity,
                recoverable=recoverable,
                exception_type=type(exception).__name__ if exception else None,
            )
        )

    def summary(self) -> dict:
        """Get error summary statistics."""
        by_severity = {"critical": 0, "high": 0, "medium": 0, "low": 0}
        for error in self.errors:
            if error.severity in by_severity:
                by_severity[error.severity] += 1
        return {
            "total": len(self.errors),
            "by_severity": by_severity,
            "recoverable": sum(1 for e in self.errors if e.recoverable),
            "non_recoverable": sum(1 for e in self.errors if not e.recoverable),
        }


def safe_execute(
    func: Callable[..., T],
    *args,
    operation_name: str = "operation",
    logger: Optional[logging.Logger] = None,
    fallback: Any = None,
    critical: bool = False,
    **kwargs,
) -> T:
    """
    Execute a function, logging and returning ``fallback`` on any exception.

    Used at the fail-empty boundaries of the pipeline, where one company's
    failure must not abort a batch.

    Usage:
        contacts = safe_execute(
            orchestrator.find_decision_makers,
            "Acme Robotics",
            operation_name="decision maker search",
            fallback=[],
        )
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    try:
        return func(*args, **kwargs)
    except Exception as e:
        log_level = logging.ERROR if critical else logging.WARNING
        logger.log(
            log_level,
            f"[{operation_name}] Failed: {e}",
            exc_info=critical,
        )
        return fallback
