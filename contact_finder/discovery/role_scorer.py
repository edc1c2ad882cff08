"""
Custom Role Scorer: re-rank candidates against a free-text target role.

Affinity tiers:
    1  role contains the target or the target contains the role   +15
    2  a function keyword is shared once seniority words are gone  +10
    3  both roles fall in the same functional group                 +5
"""

import logging
import re
from typing import List, Optional, Sequence

from contact_finder.discovery import lexicon
from contact_finder.discovery.types import Candidate

logger = logging.getLogger(__name__)

TIER_BONUSES = {1: 15, 2: 10, 3: 5}

_KEYWORD_SPLIT = re.compile(r"[\s\-_/,&]+")


def extract_role_keywords(role: str) -> List[str]:
    """Function words of a role, without seniority words or stopwords."""
    words = _KEYWORD_SPLIT.split(role.lower())
    return [
        word for word in words
        if len(word) > 2 and word not in lexicon.SENIORITY_WORDS and word not in lexicon.ROLE_STOPWORDS
    ]


def _in_group(role: str, keywords) -> bool:
    return any(re.search(r"\b" + re.escape(keyword) + r"\b", role) for keyword in keywords)


def role_affinity_tier(role: Optional[str], target: Optional[str]) -> Optional[int]:
    """Affinity tier (1 best) between a candidate's role and the target, or None."""
    if not role or not target:
        return None

    role_norm = " ".join(role.lower().split())
    target_norm = " ".join(target.lower().split())
    if not role_norm or not target_norm:
        return None

    if target_norm in role_norm or role_norm in target_norm:
        return 1

    target_keywords = extract_role_keywords(target_norm)
    role_keywords = extract_role_keywords(role_norm)
    for keyword in target_keywords:
        if any(keyword in other or other in keyword for other in role_keywords):
            return 2

    for keywords in lexicon.ROLE_AFFINITY_GROUPS.values():
        if _in_group(role_norm, keywords) and _in_group(target_norm, keywords):
            return 3

    return None


class CustomRoleScorer:
    """Boosts candidates whose role matches the caller's custom target."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def rescan(
        self,
        candidates: Sequence[Candidate],
        target_role_text: Optional[str],
        max_contacts: int,
    ) -> List[Candidate]:
        """
        Apply affinity boosts (bounded by 100), sort descending, truncate.

        Names and verification sources are never touched; candidates with no
        role or no affinity keep their probability.
        """
        target = (target_role_text or "").strip()
        rescored = []

        for candidate in candidates:
            tier = role_affinity_tier(candidate.role, target) if target else None
            if tier is None:
                rescored.append(candidate)
                continue
            boosted = min(100, candidate.probability + TIER_BONUSES[tier])
            self.logger.debug(
                f"{candidate.name}: {candidate.probability} -> {boosted} (tier {tier}, role {candidate.role})"
            )
            rescored.append(candidate.with_probability(boosted))

        return sorted(rescored, key=lambda c: c.probability, reverse=True)[:max_contacts]
