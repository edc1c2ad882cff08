"""
Unit tests for the term tables (lexicon) and industry classification.
"""

import pytest

from contact_finder.discovery import lexicon
from contact_finder.discovery.industry import classify_industry, resolve_industry
from contact_finder.discovery.types import Industry


# ===== TESTS: Placeholder Names =====

class TestPlaceholderNames:
    """Tests for test/demo name detection."""

    @pytest.mark.parametrize("name", ["John Doe", "jane  doe", "Test User", "Demo Person", "Guest Account", "sysadmin"])
    def test_detects_placeholders(self, name):
        assert lexicon.is_placeholder_name(name) is True

    @pytest.mark.parametrize("name", ["Jane Smith", "John Smith", "Maria Garcia"])
    def test_real_names_pass(self, name):
        """Common real names are not placeholders."""
        assert lexicon.is_placeholder_name(name) is False


# ===== TESTS: Generic Term Penalty =====

class TestGenericTermPenalty:
    """Tests for generic business vocabulary in names."""

    def test_zero_terms_zero_penalty(self):
        assert lexicon.count_generic_terms("Jane Smith") == 0
        assert lexicon.generic_term_penalty("Jane Smith") == 0

    def test_single_term(self):
        """35 for one generic token."""
        assert lexicon.count_generic_terms("Engineering Smith") == 1
        assert lexicon.generic_term_penalty("Engineering Smith") == 35

    def test_two_terms_adds_flat_bonus_and_caps(self):
        """2 * 35 + 20 = 90, capped at 75."""
        assert lexicon.count_generic_terms("Engineering Team") == 2
        assert lexicon.generic_term_penalty("Engineering Team") == 75

    def test_case_insensitive_whole_tokens(self):
        """Matches whole tokens only, ignoring case."""
        assert lexicon.count_generic_terms("SALES Office") == 2
        assert lexicon.count_generic_terms("Salesforth Jones") == 0

    def test_hyphenated_tokens_split(self):
        assert lexicon.count_generic_terms("Sales-Team") == 2


# ===== TESTS: Disallowed Name Terms =====

class TestDisallowedTerms:
    """Tests for words that never appear in a real person's name."""

    @pytest.mark.parametrize("name", ["Great Mission", "Login Page", "MAIN Office", "Jane Smith Online"])
    def test_detects_disallowed_words(self, name):
        assert lexicon.contains_disallowed_term(name) is True

    @pytest.mark.parametrize("name", ["Jane Smith", "Maria Garcia", "Newton Mainwaring"])
    def test_whole_words_only(self, name):
        """Newton contains 'new' but is not the word 'new'."""
        assert lexicon.contains_disallowed_term(name) is False


# ===== TESTS: Role Predicates =====

class TestRolePredicates:
    """Tests for leadership, founder and industry title checks."""

    @pytest.mark.parametrize("role", ["CEO", "Chief Revenue Officer", "VP Sales", "Co-Founder", "Head of Data"])
    def test_leadership_roles(self, role):
        assert lexicon.is_leadership_role(role) is True

    @pytest.mark.parametrize("role", [None, "", "Software Engineer", "Account Executive"])
    def test_non_leadership_roles(self, role):
        assert lexicon.is_leadership_role(role) is False

    @pytest.mark.parametrize("role", ["Founder", "Owner", "CEO", "President", "Managing Director"])
    def test_founder_or_owner(self, role):
        assert lexicon.is_founder_or_owner(role) is True

    def test_cto_is_not_founder(self):
        assert lexicon.is_founder_or_owner("CTO") is False

    def test_industry_specific_role_accepts_enum_and_string(self):
        """Tables look up by value, so enum members and strings both work."""
        assert lexicon.is_industry_specific_role("Senior Software Engineer", Industry.TECHNOLOGY) is True
        assert lexicon.is_industry_specific_role("Senior Software Engineer", "technology") is True

    def test_industry_title_needs_word_start(self):
        """'cto' must not match inside 'director'."""
        assert lexicon.is_industry_specific_role("Director", Industry.TECHNOLOGY) is False

    def test_unknown_industry_has_no_titles(self):
        assert lexicon.is_industry_specific_role("Engineer", None) is False

    def test_sector_terms_counted_per_industry(self):
        assert lexicon.count_sector_terms("Cloud Security Team", Industry.TECHNOLOGY) == 2
        assert lexicon.count_sector_terms("Cloud Security Team", Industry.RETAIL) == 0

    def test_departments_default_and_specific(self):
        assert lexicon.departments_for(None) == lexicon.DEFAULT_DEPARTMENTS
        assert "Data Science" in lexicon.departments_for(Industry.TECHNOLOGY)

    def test_industry_specific_roles_title_cased(self):
        roles = lexicon.industry_specific_roles(Industry.FINANCIAL)
        assert "Portfolio manager" in roles
        assert lexicon.industry_specific_roles(None) == lexicon.DEFAULT_MIDDLE_MANAGEMENT_ROLES


# ===== TESTS: Industry Classification =====

class TestIndustryClassifier:
    """Tests for the single keyword-table classifier."""

    @pytest.mark.parametrize("company, expected", [
        ("Acme Robotics", Industry.TECHNOLOGY),
        ("TechCorp", Industry.TECHNOLOGY),
        ("Evergreen Health Partners", Industry.HEALTHCARE),
        ("Northbridge Capital", Industry.FINANCIAL),
        ("Baker & Lee Law", Industry.LEGAL),
        ("Summit Construction", Industry.CONSTRUCTION),
        ("Brightside Marketing", Industry.MARKETING),
        ("Corner Store Co", Industry.RETAIL),
        ("Riverside Academy", Industry.EDUCATION),
        ("Apex Manufacturing", Industry.MANUFACTURING),
        ("Blue Harbor Consulting", Industry.CONSULTING),
        ("Swift Logistics", Industry.TRANSPORTATION),
        ("Sunpeak Solar", Industry.ENERGY),
        ("Grand Hotel Group", Industry.HOSPITALITY),
        ("Green Valley Farms", Industry.AGRICULTURE),
        ("City of Springfield", Industry.GOVERNMENT),
    ])
    def test_classifies_company_names(self, company, expected):
        assert classify_industry(company) == expected

    def test_first_matching_row_wins(self):
        """Marketing is checked before retail."""
        assert classify_industry("Retail Marketing Agency") == Industry.MARKETING

    def test_word_start_matching(self):
        """'tech' inside 'Initech' does not count."""
        assert classify_industry("Initech") is None

    @pytest.mark.parametrize("company", [None, "", "Smith & Sons"])
    def test_unknown_returns_none(self, company):
        assert classify_industry(company) is None

    def test_explicit_industry_wins(self):
        assert resolve_industry("Acme Robotics", "healthcare") == Industry.HEALTHCARE

    def test_invalid_explicit_falls_back_to_detection(self):
        assert resolve_industry("Acme Robotics", "space piracy") == Industry.TECHNOLOGY

    def test_industry_parse(self):
        assert Industry.parse(" Technology ") == Industry.TECHNOLOGY
        assert Industry.parse(Industry.LEGAL) == Industry.LEGAL
        assert Industry.parse("unknown") is None
        assert Industry.parse(None) is None
