"""
Discovery: multi-phase provider search, scoring, dedup and ranking.

Finds decision makers at a company by asking the intelligence provider for
leadership, department heads, middle management and custom targets.
"""

from .orchestrator import SearchOrchestrator, find_decision_makers

__all__ = ["SearchOrchestrator", "find_decision_makers"]
