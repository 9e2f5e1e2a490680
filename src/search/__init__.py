"""Tiered symbol search."""

from search.orchestrator import SearchOrchestrator

__all__ = ["SearchOrchestrator"]
