"""External workspace-symbol bridge."""

from bridge.base import (
    SymbolBridge,
    bridge_available,
    intersect_results,
    query_keywords,
    to_symbol,
)
from bridge.jsonl import InMemorySymbolBridge, JsonlSymbolBridge

__all__ = [
    "InMemorySymbolBridge",
    "JsonlSymbolBridge",
    "SymbolBridge",
    "bridge_available",
    "intersect_results",
    "query_keywords",
    "to_symbol",
]
