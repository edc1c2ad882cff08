"""
Global fixtures for all unit tests.

This conftest provides:
- Environment variable isolation (prevents credential leakage and real calls)
- A scripted fake provider keyed by response key ("leaders", "managers", ...)
- An orchestrator factory wired to the fake provider with no real sleeping
"""

import json
import os
from typing import Dict, List, Union

import pytest

# Set test environment BEFORE any imports so Config never picks up real values
os.environ["PERPLEXITY_API_KEY"] = "pplx-test-mock-key"
os.environ["TRACE_EMIT_JSON"] = "false"

from contact_finder.common.config import Config
from contact_finder.discovery.orchestrator import SearchOrchestrator
from contact_finder.discovery.tracer import SessionTracer


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """
    Isolate tests from real credentials and configuration.

    Config reads the environment at import time, so the class attributes
    are patched as well.
    """
    monkeypatch.setenv("PERPLEXITY_API_KEY", "pplx-test-mock-key")
    monkeypatch.setenv("TRACE_EMIT_JSON", "false")
    monkeypatch.setattr(Config, "PERPLEXITY_API_KEY", "pplx-test-mock-key")
    monkeypatch.setattr(Config, "TRACE_EMIT_JSON", False)
    monkeypatch.setattr(Config, "PHASE_DELAY_MS", 0)
    monkeypatch.setattr(Config, "FALLBACK_DELAY_MS", 0)


class ScriptedProvider:
    """
    Fake CompletionProvider.

    Responses are looked up by the response key the phase asks for (found in
    the format hint). A value may be a dict/list (serialized to JSON), a raw
    string, or an exception instance to raise.
    """

    KEYS = ("departmentLeaders", "targetContacts", "leaders", "managers")

    def __init__(self, responses: Dict[str, Union[dict, str, Exception]] = None):
        self.responses = dict(responses or {})
        self.calls: List[dict] = []

    def _key_for(self, hint: str) -> str:
        for key in self.KEYS:
            if f'"{key}"' in hint:
                return key
        return ""

    def complete(self, system_prompt: str, user_prompt: str, response_format_hint: str) -> str:
        key = self._key_for(response_format_hint)
        self.calls.append({
            "key": key,
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "hint": response_format_hint,
        })
        response = self.responses.get(key, {key: []})
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return response
        return json.dumps(response)

    @property
    def keys_called(self) -> List[str]:
        return [call["key"] for call in self.calls]


@pytest.fixture
def make_provider():
    """Factory: ScriptedProvider(responses)."""
    return ScriptedProvider


@pytest.fixture
def sleeps():
    """Records requested sleeps instead of sleeping."""
    return []


@pytest.fixture
def make_orchestrator(sleeps):
    """Factory: orchestrator over a ScriptedProvider with recorded sleeps."""

    def _make(provider, **kwargs):
        kwargs.setdefault("tracer", SessionTracer(emit_json=False))
        kwargs.setdefault("sleep", sleeps.append)
        return SearchOrchestrator(provider=provider, **kwargs)

    return _make
