"""
Unit tests for contact_finder/discovery/phases.py and prompts.py
"""

import pytest

from contact_finder.common.error_handling import ProviderError
from contact_finder.discovery import prompts
from contact_finder.discovery.phases import (
    DEFAULT_PHASES,
    CustomTargetPhase,
    DepartmentHeadsPhase,
    LeadershipPhase,
    MiddleManagementPhase,
    build_executors,
)
from contact_finder.discovery.types import Industry, PhaseTag, SearchOptions

ACME_LEADERS = {
    "leaders": [
        {"name": "Jane Smith", "role": "CEO"},
        {"name": "Engineering Team", "role": "Dept"},
        {"name": "John Doe", "role": "CEO"},
    ]
}


# ===== TESTS: Prompts =====

class TestPrompts:
    """Tests for prompt construction."""

    def test_every_user_prompt_forbids_fabrication(self):
        built = [
            prompts.build_leadership_prompt("Acme Robotics"),
            prompts.build_department_heads_prompt("Acme Robotics"),
            prompts.build_middle_management_prompt("Acme Robotics"),
            prompts.build_custom_target_prompt("Acme Robotics", "Head of Growth"),
        ]
        for prompt in built:
            assert "Acme Robotics" in prompt
            assert prompts.NO_FABRICATION in prompt

    def test_industry_context_added(self):
        prompt = prompts.build_leadership_prompt("Acme Robotics", Industry.TECHNOLOGY)
        assert "technology industry" in prompt
        assert "industry" not in prompts.build_leadership_prompt("Initech")

    def test_department_list_follows_industry(self):
        assert "Data Science" in prompts.build_department_heads_prompt("Acme Robotics", Industry.TECHNOLOGY)
        assert "Human Resources" in prompts.build_department_heads_prompt("Initech")

    def test_middle_management_lists_industry_roles(self):
        prompt = prompts.build_middle_management_prompt("Northbridge Capital", Industry.FINANCIAL)
        assert "- Portfolio manager" in prompt

    def test_custom_target_format(self):
        hint = prompts.custom_target_format("Head of Growth")
        assert '"targetContacts"' in hint
        assert "Head of Growth or related position" in hint


# ===== TESTS: Phase Execution =====

class TestLeadershipPhase:
    """Tests for the core leadership executor."""

    def test_scores_and_tags_candidates(self, make_provider):
        provider = make_provider({"leaders": ACME_LEADERS})
        result = LeadershipPhase(provider).execute("Acme Robotics", Industry.TECHNOLOGY)

        assert result.failed is False
        assert result.raw_count == 3
        by_name = {c.name: c for c in result.candidates}
        assert "John Doe" not in by_name

        jane = by_name["Jane Smith"]
        assert jane.name_confidence_score == 84
        assert jane.probability == 95
        assert jane.verification_source == "ai_leadership"
        assert jane.completed_searches == ["leadership"]

        assert by_name["Engineering Team"].probability == 0

    def test_sends_phase_prompts(self, make_provider):
        provider = make_provider()
        LeadershipPhase(provider).execute("Acme Robotics", Industry.TECHNOLOGY)

        call = provider.calls[0]
        assert call["system_prompt"] == prompts.SYSTEM_PROMPT_LEADERSHIP
        assert call["hint"] == prompts.FORMAT_LEADERSHIP
        assert "Acme Robotics" in call["user_prompt"]

    def test_leadership_bonus_capped(self, make_provider):
        provider = make_provider({"leaders": {"leaders": [{"name": "Bob Jones", "role": "VP Sales"}]}})
        candidate = LeadershipPhase(provider).run("Initech")[0]
        assert candidate.name_confidence_score == 80
        assert candidate.probability == 95

    def test_industry_title_cap_applies_after_leadership_bonus(self, make_provider):
        """A leader whose role is also an industry title ends at the industry cap."""
        provider = make_provider({"leaders": {"leaders": [{"name": "Alex Chen", "role": "CTO"}]}})
        candidate = LeadershipPhase(provider).run("Acme Robotics", Industry.TECHNOLOGY)[0]

        assert candidate.name_confidence_score == 81
        assert candidate.probability == 92

    def test_provider_error_yields_no_candidates(self, make_provider):
        provider = make_provider({"leaders": ProviderError("Provider call failed: timeout")})
        result = LeadershipPhase(provider).execute("Acme Robotics")

        assert result.candidates == []
        assert result.error == "ProviderError: Provider call failed: timeout"

    def test_foreign_exception_contained(self, make_provider):
        provider = make_provider({"leaders": ConnectionError("connection reset")})
        result = LeadershipPhase(provider).execute("Acme Robotics")

        assert result.failed is True
        assert result.error.startswith("ConnectionError")

    def test_unparseable_response_is_parse_error(self, make_provider):
        provider = make_provider({"leaders": "Sorry, I don't have information about that company."})
        result = LeadershipPhase(provider).execute("Acme Robotics")

        assert result.candidates == []
        assert result.error.startswith("ParseError")

    def test_empty_array_is_not_a_failure(self, make_provider):
        result = LeadershipPhase(make_provider()).execute("Acme Robotics")
        assert result.failed is False
        assert result.candidates == []


class TestOtherPhases:
    """Tests for department, middle management and custom target executors."""

    def test_department_heads_no_leadership_bonus(self, make_provider):
        provider = make_provider({"departmentLeaders": {"departmentLeaders": [
            {"name": "Maria Garcia", "role": "Head of Marketing"},
        ]}})
        candidate = DepartmentHeadsPhase(provider).run("Initech")[0]
        assert candidate.probability == 80
        assert candidate.verification_source == "ai_department_head"

    def test_middle_management_industry_title_bonus(self, make_provider):
        provider = make_provider({"managers": {"managers": [
            {"name": "Alice Johnson", "role": "Senior Software Engineer"},
        ]}})
        candidate = MiddleManagementPhase(provider).run("Acme Robotics", Industry.TECHNOLOGY)[0]
        assert candidate.name_confidence_score == 81
        assert candidate.probability == 91
        assert candidate.completed_searches == ["middle_management"]

    def test_custom_target_without_target_skips_provider(self, make_provider):
        provider = make_provider()
        result = CustomTargetPhase(provider).execute("Acme Robotics", None, "   ")

        assert result.error == "no target specified"
        assert provider.calls == []

    def test_custom_target_uses_target_in_prompts(self, make_provider):
        provider = make_provider({"targetContacts": {"targetContacts": [
            {"name": "David Lee", "role": "Head of Growth"},
        ]}})
        result = CustomTargetPhase(provider).execute("Acme Robotics", None, " Head of Growth ")

        assert [c.name for c in result.candidates] == ["David Lee"]
        assert result.candidates[0].verification_source == "ai_custom_target"
        call = provider.calls[0]
        assert "roles related to: Head of Growth" in call["user_prompt"]
        assert "Head of Growth or related position" in call["hint"]


# ===== TESTS: Phase Table =====

class TestPhaseTable:
    """Tests for the ordered phase descriptors."""

    def test_order_and_labels(self):
        assert [d.phase for d in DEFAULT_PHASES] == [
            PhaseTag.LEADERSHIP,
            PhaseTag.DEPARTMENT_HEAD,
            PhaseTag.MIDDLE_MANAGEMENT,
            PhaseTag.CUSTOM_TARGET,
        ]
        assert [d.label for d in DEFAULT_PHASES] == [
            "Core Leadership", "Department Heads", "Middle Management", "Custom Search",
        ]

    @pytest.mark.parametrize("options, enabled", [
        (SearchOptions(), [True, True, True, False]),
        (SearchOptions(enable_core_leadership=False, enable_middle_management=False), [False, True, False, False]),
        (SearchOptions(enable_custom_search=True, custom_search_target="CFO"), [True, True, True, True]),
    ])
    def test_enablement(self, options, enabled):
        assert [d.is_enabled(options) for d in DEFAULT_PHASES] == enabled

    def test_custom_target_descriptor_reads_active_target(self):
        options = SearchOptions(enable_custom_search_2=True, custom_search_target_2="CFO")
        assert DEFAULT_PHASES[3].target(options) == "CFO"
        assert DEFAULT_PHASES[0].target(options) is None

    def test_build_executors_shares_validator(self, make_provider):
        executors = build_executors(make_provider())
        assert set(executors) == set(PhaseTag)
        validators = {id(executor.validator) for executor in executors.values()}
        assert len(validators) == 1
