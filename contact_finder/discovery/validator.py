"""
Candidate Validator: plausibility scoring for a single (name, role) pair.

The score answers "is this a real person's name, relevant at this company?"
It is a weighted blend of four checks followed by flat penalties:

    format      0.35   shape of the name (two capitalized tokens score best)
    generic     0.30   business vocabulary and disallowed words inside the name
    context     0.20   what the role says about the person
    domain      0.15   honorifics, initials, industry titles

    then  - generic-term penalty (35 per term, +20 if several, max 75)
          - company-name penalty (20, waived for founders/owners)
          + industry sector adjustment (0, -15 or -30 per term)

The result is clamped to [0, 100].
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Union

from contact_finder.discovery import lexicon
from contact_finder.discovery.types import Industry

logger = logging.getLogger(__name__)

FORMAT_WEIGHT = 0.35
GENERIC_WEIGHT = 0.30
CONTEXT_WEIGHT = 0.20
DOMAIN_WEIGHT = 0.15

COMPANY_NAME_PENALTY = 20
DISALLOWED_TERM_PENALTY = 30

_NAME_PATTERN = re.compile(r"^[A-Z][a-z]+(?:(?:\s+[A-Z](?:\.|\s+))?(?:\s+[A-Z][a-z]+){1,2})$")
_PROPER_TWO_TOKEN = re.compile(r"^[A-Z][a-z]+\s+[A-Z][a-z]+$")
_INITIAL_ONLY = re.compile(r"^[A-Z]\.\s[A-Z][a-z]+$")
_INVALID_CHARS = re.compile(r"[0-9@#$%^&*()+=\[\]{}|\\/<>~`_]")
_HONORIFICS = ("Mr", "Mrs", "Ms", "Dr", "Prof", "Mr.", "Mrs.", "Ms.", "Dr.", "Prof.")

_DEPARTMENT_WORDS = re.compile(r"\b(department|team|group|division|office|support|sales|service|info)\b", re.IGNORECASE)
_INQUIRY_WORDS = re.compile(r"\b(contact|inquiry|question|help|service|request|consult|about)\b", re.IGNORECASE)
_TITLE_WORDS = re.compile(r"\b(manager|director|president|chief|officer|ceo|cfo|cto|owner|founder)\b", re.IGNORECASE)
_MAIL_WORDS = re.compile(r"\b(email|mail)\b", re.IGNORECASE)

_LEADS_VERBS = re.compile(r"\b(manages|leads|heads|directs|oversees)\b", re.IGNORECASE)
_TRANSIENT_ROLE = re.compile(r"\b(intern|temporary|contractor)\b", re.IGNORECASE)
_ACADEMIC_TITLE = re.compile(r"Dr\.|Prof\.|PhD", re.IGNORECASE)

_COMPANY_SUFFIX = re.compile(r"(inc|llc|ltd|corp|co|company|group|holdings)$")


@dataclass
class ValidationStep:
    name: str
    score: float
    weight: float
    reason: Optional[str] = None


@dataclass
class ValidationResult:
    """Outcome of scoring one raw pair."""
    score: int
    reject: bool = False
    reason: Optional[str] = None
    is_generic: bool = False
    steps: List[ValidationStep] = field(default_factory=list)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _alnum(text: str) -> str:
    return re.sub(r"[^a-z0-9]", "", text.lower())


def name_resembles_company(name: str, company_name: Optional[str]) -> bool:
    """
    True when a "name" looks like the company itself rather than a person.

    Matches on equality after stripping legal suffixes, on two or more shared
    long words, or on containment either way for names longer than 4 chars.
    """
    if not company_name:
        return False

    normalized_name = _alnum(name)
    clean_company = _COMPANY_SUFFIX.sub("", _alnum(company_name))
    if not normalized_name or not clean_company:
        return False

    if normalized_name == clean_company:
        return True

    name_words = {w for w in re.findall(r"[a-z0-9]+", name.lower()) if len(w) > 3}
    company_words = set(re.findall(r"[a-z0-9]+", company_name.lower()))
    if len(name_words & company_words) >= 2:
        return True

    if len(normalized_name) > 4:
        return normalized_name in clean_company or clean_company in normalized_name

    return False


class CandidateValidator:
    """Scores (name, role) pairs; rejects placeholders outright."""

    def score(
        self,
        name: Optional[str],
        role: Optional[str],
        company_name: Optional[str] = None,
        industry: Union[Industry, str, None] = None,
    ) -> ValidationResult:
        """
        Score one raw pair.

        Args:
            name: Name text from the provider
            role: Role text, may be None
            company_name: Company being searched (for the self-name check)
            industry: Known industry, enables the sector adjustment

        Returns:
            ValidationResult; reject=True for empty or placeholder names
        """
        name = (name or "").strip()
        role = (role or "").strip()

        if not name:
            return ValidationResult(score=0, reject=True, reason="empty name", is_generic=True)
        if lexicon.is_placeholder_name(name):
            return ValidationResult(score=0, reject=True, reason="placeholder name", is_generic=True)

        industry_key = Industry.parse(industry)

        format_score = self._format_score(name)
        generic_score = self._generic_score(name)
        context_score = self._context_score(role)
        domain_score = self._domain_score(name, role, industry_key)

        steps = [
            ValidationStep("format", format_score, FORMAT_WEIGHT),
            ValidationStep("generic_terms", generic_score, GENERIC_WEIGHT),
            ValidationStep("context", context_score, CONTEXT_WEIGHT),
            ValidationStep(
                "domain", domain_score, DOMAIN_WEIGHT,
                reason=f"industry {industry_key.value}" if industry_key else None,
            ),
        ]
        total = sum(step.score * step.weight for step in steps)

        penalty = lexicon.generic_term_penalty(name)
        if penalty:
            total -= penalty
            steps.append(ValidationStep(
                "generic_term_penalty", -penalty, 1.0,
                reason=f"{lexicon.count_generic_terms(name)} generic terms",
            ))

        if name_resembles_company(name, company_name) and not lexicon.is_founder_or_owner(role):
            total -= COMPANY_NAME_PENALTY
            steps.append(ValidationStep(
                "company_name_penalty", -COMPANY_NAME_PENALTY, 1.0, reason="similar to company name",
            ))

        adjustment = self._industry_adjustment(name, industry_key)
        if adjustment:
            total += adjustment
            steps.append(ValidationStep(
                "industry_context", adjustment, 1.0, reason=f"sector terms for {industry_key.value}",
            ))

        final = int(round(_clamp(total, 0, 100)))
        return ValidationResult(
            score=final,
            reject=False,
            is_generic=generic_score < 40,
            steps=steps,
        )

    # ===== Steps =====

    def _format_score(self, name: str) -> float:
        score = 50
        parts = name.split()

        score += 35 if _NAME_PATTERN.match(name) else -30

        if name == name.upper() and len(name) > 2:
            score -= 40

        if not 2 <= len(parts) <= 4:
            score -= 25

        if len(parts) == 2:
            score += 20
        elif len(parts) == 3:
            score += 15
        elif len(parts) > 4:
            score -= 15 * (len(parts) - 4)

        if all(2 <= len(part) <= 20 for part in parts):
            score += 15
        else:
            score -= 25

        if _INVALID_CHARS.search(name):
            score -= 40

        if parts and parts[0] in _HONORIFICS:
            score += 5

        return _clamp(score, 10, 95)

    def _generic_score(self, name: str) -> float:
        score = 80 - lexicon.count_generic_terms(name) * 25
        if lexicon.contains_disallowed_term(name):
            score -= DISALLOWED_TERM_PENALTY

        if _DEPARTMENT_WORDS.search(name):
            score -= 50
        if _INQUIRY_WORDS.search(name):
            score -= 45
        if _TITLE_WORDS.search(name) and not any(c in name for c in ",(-"):
            score -= 40
        if "@" in name or _MAIL_WORDS.search(name):
            score -= 75

        return _clamp(score, 0, 95)

    def _context_score(self, role: str) -> float:
        score = 60
        if lexicon.is_founder_or_owner(role):
            score += 20
        if _LEADS_VERBS.search(role):
            score += 10
        if _TRANSIENT_ROLE.search(role):
            score -= 10
        return _clamp(score, 20, 95)

    def _domain_score(self, name: str, role: str, industry: Optional[Industry]) -> float:
        score = 70
        if _ACADEMIC_TITLE.search(name):
            score += 10
        if _INITIAL_ONLY.match(name):
            score -= 15
        if industry and lexicon.is_industry_specific_role(role, industry):
            score += 10
        return _clamp(score, 20, 95)

    def _industry_adjustment(self, name: str, industry: Optional[Industry]) -> int:
        if not industry:
            return 0
        count = lexicon.count_sector_terms(name, industry)
        if count == 0:
            return 0
        if count == 1:
            return 0 if _PROPER_TWO_TOKEN.match(name) else -15
        return -30 * count
