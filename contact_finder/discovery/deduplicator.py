"""
Deduplicator: collapse same-person candidates found by several phases.
"""

from typing import Dict, Iterable, List

from contact_finder.discovery.types import Candidate


def normalize_name(name: str) -> str:
    """Dedup key: whitespace collapsed, trimmed, case-folded."""
    return " ".join(name.split()).casefold()


def _merge_searches(first: List[str], second: List[str]) -> List[str]:
    merged = list(first)
    for tag in second:
        if tag not in merged:
            merged.append(tag)
    return merged


def dedupe(candidates: Iterable[Candidate]) -> List[Candidate]:
    """
    Keep one candidate per normalized name.

    The instance with the strictly higher probability survives; ties keep
    the first seen. The survivor's completed_searches is extended with the
    tags of the instances it replaced or absorbed, while its
    verification_source stays its own. Output follows first-seen key order.

    Example:
        Input:  [Jane Smith 50 (department_head), jane smith 72 (leadership)]
        Output: [jane smith 72, source ai_leadership,
                 completed_searches [leadership, department_head]]
    """
    survivors: Dict[str, Candidate] = {}

    for candidate in candidates:
        key = normalize_name(candidate.name)
        existing = survivors.get(key)
        if existing is None:
            survivors[key] = candidate
            continue

        if candidate.probability > existing.probability:
            winner, loser = candidate, existing
        else:
            winner, loser = existing, candidate

        searches = _merge_searches(winner.completed_searches, loser.completed_searches)
        if searches != winner.completed_searches:
            winner = winner.model_copy(update={"completed_searches": searches})
        survivors[key] = winner

    return list(survivors.values())
