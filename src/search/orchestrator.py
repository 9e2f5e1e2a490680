"""Tiered symbol search.

A query is answered by the cheapest source that yields anything:

1. the tags database, parsed fresh for every query and keyword-filtered;
2. the workspace-symbol bridge, one query per keyword, intersected;
3. a regex scan of the source tree for function definitions.

A tier that is missing, unreadable or empty hands over to the next one.
Tier failures never propagate out of `SearchOrchestrator.search`; running out
of tiers is a normal "no match" result.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from bridge.base import (
    DEFAULT_MAX_WORKERS,
    DEFAULT_QUERY_TIMEOUT,
    bridge_available,
    intersect_results,
    query_keywords,
    to_symbol,
)
from bridge.jsonl import JsonlSymbolBridge
from index.symbol_index import SymbolIndex
from models.errors import SearchError, SourceUnavailable
from models.search import MatchMode, Query, SearchResult, SearchState, Tier
from models.symbols import Symbol
from scan.functions import FunctionScanner, filter_function_names

if TYPE_CHECKING:
    from bridge.base import SymbolBridge
    from models.symbols import Location
    from settings.config import TagSeekConfig

logger = logging.getLogger(__name__)


class _SearchRun:
    """Per-query state; nothing here is shared between queries."""

    def __init__(self, query: Query) -> None:
        self.query = query
        self.trace: list[SearchState] = [SearchState.IDLE]
        self.tags_available = False
        self.bridge_answered = False

    def enter(self, state: SearchState) -> None:
        logger.debug("search %r: %s", self.query.text, state.value)
        self.trace.append(state)

    def finish(
        self,
        state: SearchState,
        results: list[Symbol] | None = None,
        tier: Tier | None = None,
        error: str | None = None,
    ) -> SearchResult:
        if self.trace[-1] is not state:
            self.enter(state)
        if state is not SearchState.DONE:
            self.enter(SearchState.DONE)
        return SearchResult(
            results=results or [],
            query_echo=self.query.text,
            state=state,
            tier=tier,
            trace=self.trace,
            error=error,
        )


class SearchOrchestrator:
    """Drive a query through the tags, bridge and scan tiers in order."""

    def __init__(
        self,
        *,
        tags_path: str | Path | None = None,
        bridge: SymbolBridge | None = None,
        scanner: FunctionScanner | None = None,
        scan_root: str | Path | None = None,
        resolve_patterns: bool = False,
        bridge_timeout: float | None = DEFAULT_QUERY_TIMEOUT,
        bridge_max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self.tags_path = Path(tags_path) if tags_path is not None else None
        self.bridge = bridge
        self.scanner = scanner
        self.scan_root = Path(scan_root) if scan_root is not None else None
        self.resolve_patterns = resolve_patterns
        self.bridge_timeout = bridge_timeout
        self.bridge_max_workers = bridge_max_workers

    @classmethod
    def from_config(
        cls,
        root: Path,
        config: TagSeekConfig,
        *,
        bridge: SymbolBridge | None = None,
    ) -> SearchOrchestrator:
        """Build an orchestrator for the workspace at ``root``.

        An explicit ``bridge`` wins over the configured symbols file.
        """
        if bridge is None:
            symbols_path = config.bridge_symbols_path(root)
            if symbols_path is not None:
                bridge = JsonlSymbolBridge(symbols_path)

        scanner = FunctionScanner(
            extensions=config.extensions,
            include_patterns=config.include or None,
            exclude_patterns=config.exclude or None,
            nested_gitignore=config.nested_gitignore,
        )
        return cls(
            tags_path=config.tags_path(root),
            bridge=bridge,
            scanner=scanner,
            scan_root=root,
            resolve_patterns=config.resolve_patterns,
            bridge_timeout=config.bridge.timeout,
            bridge_max_workers=config.bridge.max_workers,
        )

    def search(
        self, query_text: str, mode: MatchMode = MatchMode.EXACT
    ) -> SearchResult:
        """Answer ``query_text`` from the first tier that has a match."""
        run = _SearchRun(Query.from_text(query_text))
        mode = MatchMode(mode)

        if run.query.is_empty:
            return run.finish(SearchState.DONE)

        result = self._search_tags(run, mode)
        if result is not None:
            return result

        result = self._search_bridge(run)
        if result is not None:
            return result

        result = self._search_scan(run)
        if result is not None:
            return result

        if not run.tags_available and not run.bridge_answered:
            if not bridge_available(self.bridge):
                msg = (
                    "No symbol source is available: no readable tags file, "
                    "no workspace symbol provider and no source tree to scan"
                )
                logger.warning(msg)
                return run.finish(SearchState.UNAVAILABLE, error=msg)

        return run.finish(run.trace[-1])

    def _search_tags(self, run: _SearchRun, mode: MatchMode) -> SearchResult | None:
        if self.tags_path is None or not self.tags_path.is_file():
            logger.debug("No tags database at %s", self.tags_path)
            return None

        run.enter(SearchState.PARSING)
        try:
            index = SymbolIndex.from_tags_file(
                self.tags_path, resolve_patterns=self.resolve_patterns
            )
        except SourceUnavailable as exc:
            logger.info("%s", exc)
            return None
        run.tags_available = True

        if index.is_empty:
            run.enter(SearchState.EMPTY_INDEX)
            return None

        matched = index.filter(run.query.keywords, mode)
        if not matched:
            run.enter(SearchState.EMPTY_INDEX)
            return None

        return run.finish(SearchState.MATCHED, matched, Tier.TAGS)

    def _search_bridge(self, run: _SearchRun) -> SearchResult | None:
        if self.bridge is None:
            return None

        run.enter(SearchState.QUERYING_BRIDGE)
        result_sets = query_keywords(
            self.bridge,
            run.query.keywords,
            timeout=self.bridge_timeout,
            max_workers=self.bridge_max_workers,
        )
        run.bridge_answered = any(result_sets)

        combined = intersect_results(result_sets)
        if not combined:
            run.enter(SearchState.BRIDGE_EMPTY)
            return None

        symbols = [to_symbol(located) for located in combined]
        return run.finish(SearchState.BRIDGE_MATCHED, symbols, Tier.BRIDGE)

    def _search_scan(self, run: _SearchRun) -> SearchResult | None:
        if self.scanner is None or self.scan_root is None:
            return None

        if not self.scanner.root_available(self.scan_root):
            logger.debug("Scan root %s is not a directory", self.scan_root)
            return None

        run.enter(SearchState.SCANNING)
        try:
            names = self.scanner.scan(self.scan_root)
        except (SearchError, OSError, ValueError) as exc:
            logger.warning("Source scan failed: %s", exc)
            names = []

        matched = filter_function_names(names, run.query.keywords)
        if not matched:
            return run.finish(SearchState.SCAN_EMPTY)

        symbols = [Symbol(name=name, kind="function") for name in matched]
        return run.finish(SearchState.SCAN_MATCHED, symbols, Tier.SCAN)

    def resolve_location(self, symbol: Symbol) -> Location | None:
        """Return the definition site, locating scan results on demand."""
        if symbol.location is not None:
            return symbol.location
        if self.scanner is None or self.scan_root is None:
            return None
        return self.scanner.locate(self.scan_root, symbol.name)


__all__ = ["SearchOrchestrator"]
