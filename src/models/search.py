"""Query and search-outcome models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from models.symbols import Symbol


class MatchMode(str, Enum):
    """How query keywords are compared against identifier sub-tokens."""

    EXACT = "exact"
    PARTIAL = "partial"


class Tier(str, Enum):
    TAGS = "tags"
    BRIDGE = "bridge"
    SCAN = "scan"


class SearchState(str, Enum):
    """States visited by the search orchestrator."""

    IDLE = "idle"
    PARSING = "parsing"
    MATCHED = "matched"
    EMPTY_INDEX = "empty_index"
    QUERYING_BRIDGE = "querying_bridge"
    BRIDGE_MATCHED = "bridge_matched"
    BRIDGE_EMPTY = "bridge_empty"
    SCANNING = "scanning"
    SCAN_MATCHED = "scan_matched"
    SCAN_EMPTY = "scan_empty"
    UNAVAILABLE = "unavailable"
    DONE = "done"


class Query(BaseModel):
    """Lowercase keyword tokens derived from free-text input."""

    text: str = Field(description="Original input, stripped, for echo")
    keywords: list[str] = Field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> Query:
        stripped = text.strip()
        keywords = [token.lower() for token in stripped.split() if token]
        return cls(text=stripped, keywords=keywords)

    @property
    def is_empty(self) -> bool:
        return not self.keywords


class SearchResult(BaseModel):
    """Outcome of a single tiered search."""

    results: list[Symbol] = Field(default_factory=list)
    query_echo: str
    state: SearchState
    tier: Tier | None = Field(
        default=None, description="Tier that produced the results"
    )
    trace: list[SearchState] = Field(default_factory=list)
    error: str | None = None

    @property
    def matched(self) -> bool:
        return bool(self.results)


__all__ = ["MatchMode", "Query", "SearchResult", "SearchState", "Tier"]
