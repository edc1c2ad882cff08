"""
Contact Finder: decision-maker discovery for a company.

Queries an external intelligence provider in several phases, scores and
deduplicates the people it names, and returns a ranked list.
"""

from contact_finder.discovery.orchestrator import (
    DiscoveryOutcome,
    SearchOrchestrator,
    find_decision_makers,
)
from contact_finder.discovery.types import Candidate, Industry, SearchOptions

__all__ = [
    "Candidate",
    "DiscoveryOutcome",
    "Industry",
    "SearchOptions",
    "SearchOrchestrator",
    "find_decision_makers",
]
