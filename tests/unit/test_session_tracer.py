"""
Unit tests for the session tracer module.
"""

import json
import threading
from dataclasses import FrozenInstanceError
from io import StringIO

import pytest

from contact_finder.discovery.tracer import (
    DelayEvent,
    EventType,
    FallbackEvent,
    LogEvent,
    PhaseEvent,
    SessionTrace,
    SessionTracer,
)
from contact_finder.discovery.types import Candidate, SearchOptions


def candidate(name, probability):
    return Candidate(
        name=name,
        role="Director",
        probability=probability,
        name_confidence_score=probability,
        verification_source="ai_leadership",
        completed_searches=["leadership"],
    )


@pytest.fixture
def tracer():
    return SessionTracer(emit_json=False)


class TestLogEvent:
    """Tests for LogEvent dataclass."""

    def test_to_json_includes_required_fields(self):
        """Should include timestamp, event, and session_id."""
        event = LogEvent(
            timestamp="2026-10-18T10:00:00Z",
            event="session_start",
            session_id="acme_1_abcd1234",
        )
        result = json.loads(event.to_json())

        assert result["timestamp"] == "2026-10-18T10:00:00Z"
        assert result["event"] == "session_start"
        assert result["session_id"] == "acme_1_abcd1234"

    def test_to_json_excludes_none_values(self):
        """Should exclude fields that are None."""
        event = LogEvent(
            timestamp="2026-10-18T10:00:00Z",
            event="phase_executed",
            session_id="acme_1_abcd1234",
            phase="Core Leadership",
            status=None,  # Should be excluded
            duration_ms=None,  # Should be excluded
        )
        result = json.loads(event.to_json())

        assert result["phase"] == "Core Leadership"
        assert "status" not in result
        assert "duration_ms" not in result


class TestSessionLifecycle:
    """Tests for opening, recording and closing sessions."""

    def test_session_id_shape(self, tracer):
        session_id = tracer.start_session("Acme Robotics, Inc.", SearchOptions())
        slug, millis, suffix = session_id.rsplit("_", 2)
        assert slug == "acme-robotics-inc"
        assert millis.isdigit()
        assert len(suffix) == 8

    def test_session_ids_unique(self, tracer):
        assert tracer.start_session("Acme") != tracer.start_session("Acme")

    def test_options_snapshot_read_only(self, tracer):
        session_id = tracer.start_session("Acme", SearchOptions(max_contacts=4))
        trace = tracer.get_trace(session_id)
        assert trace.options["max_contacts"] == 4
        with pytest.raises(TypeError):
            trace.options["max_contacts"] = 9

    def test_events_appended_in_order(self, tracer):
        session_id = tracer.start_session("Acme")
        tracer.record(session_id, PhaseEvent("Core Leadership", enabled=True, executed=True, result_count=2))
        tracer.record(session_id, DelayEvent(50))
        tracer.record(session_id, PhaseEvent("Department Heads", enabled=False, executed=False, skip_reason="disabled"))
        tracer.record(session_id, FallbackEvent(triggered=False, reasoning="Found 2 contacts. No fallback needed"))

        trace = tracer.end_session(session_id, [candidate("Jane Smith", 95), candidate("Bob Jones", 60)])

        assert [e.phase_name for e in trace.phase_events] == ["Core Leadership", "Department Heads"]
        assert trace.rate_limit_delay_ms == 50
        assert trace.fallback_event.triggered is False
        assert trace.final_count == 2
        assert trace.final_high_quality_count == 1
        assert trace.closed is True

    def test_closed_trace_is_immutable(self, tracer):
        session_id = tracer.start_session("Acme")
        trace = tracer.end_session(session_id)
        with pytest.raises(FrozenInstanceError):
            trace.final_count = 10

    def test_end_session_forgets_session(self, tracer):
        session_id = tracer.start_session("Acme")
        tracer.end_session(session_id)
        assert tracer.open_sessions() == 0
        assert tracer.get_trace(session_id) is None
        with pytest.raises(KeyError):
            tracer.end_session(session_id)

    def test_record_after_close_is_dropped(self, tracer):
        session_id = tracer.start_session("Acme")
        trace = tracer.end_session(session_id)
        assert tracer.record(session_id, DelayEvent(10)) is False
        assert trace.rate_limit_delay_ms == 0

    def test_unsupported_event_rejected(self, tracer):
        session_id = tracer.start_session("Acme")
        with pytest.raises(TypeError):
            tracer.record(session_id, {"phase": "leadership"})

    def test_concurrent_sessions_isolated(self, tracer):
        ids = []

        def run(company):
            session_id = tracer.start_session(company)
            ids.append(session_id)
            for _ in range(20):
                tracer.record(session_id, DelayEvent(1))

        threads = [threading.Thread(target=run, args=(f"Company {i}",)) for i in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        traces = [tracer.end_session(session_id) for session_id in ids]
        assert all(trace.rate_limit_delay_ms == 20 for trace in traces)


class TestEfficiencyReport:
    """Tests for the API-efficiency summary."""

    def make_trace(self, phase_events, fallback_event=None, final_count=0):
        return SessionTrace(
            session_id="s",
            company_name="Acme",
            options={},
            started_at="2026-10-18T10:00:00Z",
            phase_events=tuple(phase_events),
            fallback_event=fallback_event,
            final_count=final_count,
            closed=True,
        )

    def test_api_calls_count_executed_and_fallback(self):
        trace = self.make_trace(
            [
                PhaseEvent("Core Leadership", True, True, result_count=3),
                PhaseEvent("Department Heads", False, False, skip_reason="disabled"),
            ],
            FallbackEvent(True, "shortage", phases_run=("department_head",), added_count=2),
            final_count=5,
        )
        report = trace.efficiency_report()

        assert trace.api_calls == 2
        assert report["api_calls"] == 2
        assert report["contacts_per_call"] == 2.5
        assert report["efficiency"] == 25
        assert report["recommendations"] == []

    def test_recommends_disabling_empty_phases(self):
        trace = self.make_trace([
            PhaseEvent("Core Leadership", True, True, result_count=4),
            PhaseEvent("Middle Management", True, True, result_count=0),
        ], final_count=4)
        assert "Consider disabling: Middle Management" in trace.efficiency_report()["recommendations"]

    def test_flags_unproductive_fallback(self):
        trace = self.make_trace(
            [PhaseEvent("Department Heads", True, True, result_count=1)],
            FallbackEvent(True, "shortage", phases_run=("leadership",), added_count=0),
            final_count=1,
        )
        recommendations = trace.efficiency_report()["recommendations"]
        assert "Fallback searches were unproductive - consider adjusting thresholds" in recommendations

    def test_flags_heavy_usage(self):
        trace = self.make_trace(
            [PhaseEvent(label, True, True, result_count=1) for label in ("A", "B", "C", "D")],
            final_count=3,
        )
        recommendations = trace.efficiency_report()["recommendations"]
        assert "High API usage with low results - optimize search configuration" in recommendations

    def test_no_calls(self):
        report = self.make_trace([]).efficiency_report()
        assert report["api_calls"] == 0
        assert report["efficiency"] == 0

    def test_to_dict_is_json_serializable(self):
        trace = self.make_trace([PhaseEvent("Core Leadership", True, True, result_count=1)], final_count=1)
        data = trace.to_dict()
        assert data["api_calls"] == 1
        json.dumps(data)


class TestJsonEmission:
    """Tests for JSON-line output."""

    def test_emits_one_line_per_event(self):
        stream = StringIO()
        tracer = SessionTracer(emit_json=True, stream=stream)

        session_id = tracer.start_session("Acme", SearchOptions())
        tracer.record(session_id, PhaseEvent("Core Leadership", True, True, result_count=2, duration_ms=12))
        tracer.record(session_id, PhaseEvent("Department Heads", True, True, failure_reason="ProviderError: boom"))
        tracer.record(session_id, PhaseEvent("Middle Management", False, False, skip_reason="disabled"))
        tracer.record(session_id, DelayEvent(50))
        tracer.end_session(session_id)

        events = [json.loads(line) for line in stream.getvalue().splitlines()]
        assert [e["event"] for e in events] == [
            EventType.SESSION_START.value,
            EventType.PHASE_EXECUTED.value,
            EventType.PHASE_FAILED.value,
            EventType.PHASE_SKIPPED.value,
            EventType.RATE_LIMIT_DELAY.value,
            EventType.SESSION_END.value,
        ]
        assert all(e["session_id"] == session_id for e in events)
        assert events[2]["error"] == "ProviderError: boom"
        assert events[3]["metadata"] == {"reason": "disabled"}

    def test_silent_when_disabled(self, capsys):
        tracer = SessionTracer(emit_json=False)
        tracer.end_session(tracer.start_session("Acme"))
        assert capsys.readouterr().out == ""
