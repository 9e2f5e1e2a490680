"""Model namespace for tagseek symbols, search outcomes and errors."""

from models.errors import (
    BridgeUnavailable,
    ScanIOError,
    SearchError,
    SourceUnavailable,
)
from models.search import MatchMode, Query, SearchResult, SearchState, Tier
from models.symbols import LocatedSymbol, Location, Position, Range, Symbol

__all__ = [
    "BridgeUnavailable",
    "LocatedSymbol",
    "Location",
    "MatchMode",
    "Position",
    "Query",
    "Range",
    "ScanIOError",
    "SearchError",
    "SearchResult",
    "SearchState",
    "SourceUnavailable",
    "Symbol",
    "Tier",
]
