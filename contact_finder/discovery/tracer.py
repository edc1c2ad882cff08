"""
Session tracer: structured, per-call record of a discovery run.

One session per orchestration call. Events are appended while the session
is open; closing it freezes everything into an immutable SessionTrace that
the caller may log, store or discard.

Optionally every event is also emitted as a JSON line on stdout, for log
shippers:

    {"timestamp": "...Z", "event": "phase_executed", "session_id": "...",
     "phase": "leadership", "result_count": 3, "duration_ms": 812}
"""

import json
import logging
import re
import sys
import threading
import time
import uuid
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, TextIO, Tuple, Union

from contact_finder.common.config import Config
from contact_finder.discovery.types import Candidate, SearchOptions

logger = logging.getLogger(__name__)

HIGH_QUALITY_PROBABILITY = 70


class EventType(str, Enum):
    """Trace event types."""
    SESSION_START = "session_start"
    PHASE_EXECUTED = "phase_executed"
    PHASE_SKIPPED = "phase_skipped"
    PHASE_FAILED = "phase_failed"
    FALLBACK = "fallback"
    RATE_LIMIT_DELAY = "rate_limit_delay"
    SESSION_END = "session_end"


@dataclass
class LogEvent:
    """JSON-line event with optional fields."""
    timestamp: str
    event: str
    session_id: str
    company: Optional[str] = None
    phase: Optional[str] = None
    status: Optional[str] = None
    result_count: Optional[int] = None
    duration_ms: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    def to_json(self) -> str:
        """Convert to JSON string, excluding None values."""
        data = {k: v for k, v in asdict(self).items() if v is not None}
        return json.dumps(data, default=str)


@dataclass(frozen=True)
class PhaseEvent:
    phase_name: str
    enabled: bool
    executed: bool
    skip_reason: Optional[str] = None
    failure_reason: Optional[str] = None
    result_count: int = 0
    high_quality_count: int = 0
    duration_ms: int = 0


@dataclass(frozen=True)
class FallbackEvent:
    triggered: bool
    reasoning: str
    phases_run: Tuple[str, ...] = ()
    added_count: int = 0
    duration_ms: int = 0


@dataclass(frozen=True)
class DelayEvent:
    """A rate-limiting pause inserted between provider calls."""
    delay_ms: int


TraceEvent = Union[PhaseEvent, FallbackEvent, DelayEvent]


@dataclass(frozen=True)
class SessionTrace:
    """Immutable record of one orchestration call."""
    session_id: str
    company_name: str
    options: Mapping[str, Any]
    started_at: str
    phase_events: Tuple[PhaseEvent, ...] = ()
    fallback_event: Optional[FallbackEvent] = None
    final_count: int = 0
    final_high_quality_count: int = 0
    rate_limit_delay_ms: int = 0
    duration_ms: int = 0
    closed: bool = False

    @property
    def api_calls(self) -> int:
        """Provider calls made: executed phases plus fallback searches."""
        calls = sum(1 for event in self.phase_events if event.executed)
        if self.fallback_event is not None:
            calls += len(self.fallback_event.phases_run)
        return calls

    def efficiency_report(self) -> Dict[str, Any]:
        """
        Rate how productive the provider calls were.

        efficiency = contacts per call x 10, capped at 100. Recommendations
        flag phases that ran but found nobody, an unproductive fallback, and
        heavy API use with few results.
        """
        calls = self.api_calls
        contacts_per_call = self.final_count / calls if calls else 0.0
        recommendations: List[str] = []

        unproductive = [e.phase_name for e in self.phase_events if e.executed and e.result_count == 0]
        if unproductive:
            recommendations.append(f"Consider disabling: {', '.join(unproductive)}")

        if self.fallback_event is not None and self.fallback_event.triggered and self.fallback_event.added_count == 0:
            recommendations.append("Fallback searches were unproductive - consider adjusting thresholds")

        if calls >= 4 and self.final_count < 5:
            recommendations.append("High API usage with low results - optimize search configuration")

        return {
            "api_calls": calls,
            "contacts_per_call": round(contacts_per_call, 2),
            "efficiency": min(round(contacts_per_call * 10), 100),
            "recommendations": recommendations,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(replace(self, options={}))
        data["options"] = dict(self.options)
        data["api_calls"] = self.api_calls
        return data


@dataclass
class _OpenSession:
    trace: SessionTrace
    started: float
    phase_events: List[PhaseEvent] = field(default_factory=list)
    fallback_event: Optional[FallbackEvent] = None
    delay_ms: int = 0


def _slug(company_name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", company_name.lower()).strip("-")
    return slug[:32] or "company"


class SessionTracer:
    """
    Thread-safe, session-keyed, append-only trace store.

    Only open sessions are held; end_session hands the frozen trace to the
    caller and forgets it. Events for unknown or closed sessions are ignored.
    """

    def __init__(self, emit_json: Optional[bool] = None, stream: Optional[TextIO] = None):
        """
        Args:
            emit_json: Emit every event as a JSON line (default Config.TRACE_EMIT_JSON)
            stream: Where JSON lines go (default stdout)
        """
        self.emit_json = Config.TRACE_EMIT_JSON if emit_json is None else emit_json
        self.stream = stream
        self._sessions: Dict[str, _OpenSession] = {}
        self._lock = threading.Lock()

    # ===== Emission =====

    def _now(self) -> str:
        return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

    def _emit(self, event: LogEvent) -> None:
        if self.emit_json:
            print(event.to_json(), file=self.stream or sys.stdout, flush=True)

    def _emit_trace_event(self, session_id: str, event: TraceEvent) -> None:
        if isinstance(event, PhaseEvent):
            if event.executed:
                kind = EventType.PHASE_FAILED if event.failure_reason else EventType.PHASE_EXECUTED
            else:
                kind = EventType.PHASE_SKIPPED
            self._emit(LogEvent(
                timestamp=self._now(),
                event=kind.value,
                session_id=session_id,
                phase=event.phase_name,
                status="executed" if event.executed else "skipped",
                result_count=event.result_count,
                duration_ms=event.duration_ms,
                metadata={"reason": event.skip_reason} if event.skip_reason else None,
                error=event.failure_reason,
            ))
        elif isinstance(event, FallbackEvent):
            self._emit(LogEvent(
                timestamp=self._now(),
                event=EventType.FALLBACK.value,
                session_id=session_id,
                status="triggered" if event.triggered else "not_needed",
                result_count=event.added_count,
                duration_ms=event.duration_ms,
                metadata={"reasoning": event.reasoning, "phases_run": list(event.phases_run)},
            ))
        elif isinstance(event, DelayEvent):
            self._emit(LogEvent(
                timestamp=self._now(),
                event=EventType.RATE_LIMIT_DELAY.value,
                session_id=session_id,
                duration_ms=event.delay_ms,
            ))

    # ===== Session lifecycle =====

    def start_session(
        self,
        company_name: str,
        options: Union[SearchOptions, Mapping[str, Any], None] = None,
    ) -> str:
        """Open a session and return its id (``<company-slug>_<ms>_<uuid8>``)."""
        if isinstance(options, SearchOptions):
            snapshot = options.model_dump(mode="json")
        else:
            snapshot = dict(options or {})

        session_id = f"{_slug(company_name)}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"
        started_at = self._now()
        trace = SessionTrace(
            session_id=session_id,
            company_name=company_name,
            options=MappingProxyType(snapshot),
            started_at=started_at,
        )
        with self._lock:
            self._sessions[session_id] = _OpenSession(trace=trace, started=time.monotonic())

        self._emit(LogEvent(
            timestamp=started_at,
            event=EventType.SESSION_START.value,
            session_id=session_id,
            company=company_name,
            metadata=snapshot,
        ))
        return session_id

    def record(self, session_id: str, event: TraceEvent) -> bool:
        """
        Append an event to an open session.

        Returns:
            False when the session is unknown or already closed (event dropped)
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                logger.debug(f"Dropping event for unknown session {session_id}")
                return False
            if isinstance(event, PhaseEvent):
                session.phase_events.append(event)
            elif isinstance(event, FallbackEvent):
                session.fallback_event = event
            elif isinstance(event, DelayEvent):
                session.delay_ms += event.delay_ms
            else:
                raise TypeError(f"Unsupported trace event: {type(event).__name__}")

        self._emit_trace_event(session_id, event)
        return True

    def _snapshot(self, session: _OpenSession, **updates: Any) -> SessionTrace:
        return replace(
            session.trace,
            phase_events=tuple(session.phase_events),
            fallback_event=session.fallback_event,
            rate_limit_delay_ms=session.delay_ms,
            duration_ms=int((time.monotonic() - session.started) * 1000),
            **updates,
        )

    def get_trace(self, session_id: str) -> Optional[SessionTrace]:
        """Snapshot of an open session, or None."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            return self._snapshot(session)

    def end_session(self, session_id: str, final_candidates: Sequence[Candidate] = ()) -> SessionTrace:
        """
        Close the session and return its frozen trace.

        Raises:
            KeyError: If the session is unknown or already closed
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
            if session is None:
                raise KeyError(f"Unknown or closed session: {session_id}")
            trace = self._snapshot(
                session,
                final_count=len(final_candidates),
                final_high_quality_count=sum(
                    1 for c in final_candidates if c.probability >= HIGH_QUALITY_PROBABILITY
                ),
                closed=True,
            )

        self._emit(LogEvent(
            timestamp=self._now(),
            event=EventType.SESSION_END.value,
            session_id=session_id,
            company=trace.company_name,
            result_count=trace.final_count,
            duration_ms=trace.duration_ms,
            metadata={"api_calls": trace.api_calls, "high_quality": trace.final_high_quality_count},
        ))
        return trace

    def open_sessions(self) -> int:
        with self._lock:
            return len(self._sessions)
