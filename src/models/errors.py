"""Error taxonomy for the tiered symbol search.

None of these escape `SearchOrchestrator.search`: each tier catches them at
its boundary and treats the tier as having produced nothing.
"""

from __future__ import annotations


class SearchError(Exception):
    """Base class for tier failures."""


class SourceUnavailable(SearchError):
    """The tags database is missing or cannot be read."""


class BridgeUnavailable(SearchError):
    """No external symbol provider is configured or it never answers."""


class ScanIOError(SearchError):
    """A file or directory could not be read during a source scan."""


__all__ = [
    "BridgeUnavailable",
    "ScanIOError",
    "SearchError",
    "SourceUnavailable",
]
