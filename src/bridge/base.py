"""Workspace-symbol bridge interface and multi-keyword intersection.

External providers only answer single-token queries. AND semantics over
several keywords are simulated by issuing one query per keyword and keeping
the symbols every query returned, compared by identity key.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from models.symbols import Location, Symbol
from utils import uri_to_path

if TYPE_CHECKING:
    from collections.abc import Sequence

    from models.symbols import LocatedSymbol

logger = logging.getLogger(__name__)

DEFAULT_QUERY_TIMEOUT = 5.0
DEFAULT_MAX_WORKERS = 4


@runtime_checkable
class SymbolBridge(Protocol):
    """Host-supplied workspace-symbol lookup."""

    def query(self, text: str) -> list[LocatedSymbol]: ...


def intersect_results(
    result_sets: Sequence[Sequence[LocatedSymbol]],
) -> list[LocatedSymbol]:
    """Fold the per-keyword result sets left to right by identity key.

    Order follows the first set; repeated symbols within a set collapse.
    """
    if not result_sets:
        return []

    common: dict[tuple[str, str, int, int, int, int], LocatedSymbol] = {}
    for symbol in result_sets[0]:
        common.setdefault(symbol.identity_key(), symbol)

    for results in result_sets[1:]:
        keys = {symbol.identity_key() for symbol in results}
        common = {key: symbol for key, symbol in common.items() if key in keys}
        if not common:
            break

    return list(common.values())


def _run_query(bridge: SymbolBridge, keyword: str) -> list[LocatedSymbol]:
    return list(bridge.query(keyword))


def query_keywords(
    bridge: SymbolBridge,
    keywords: Sequence[str],
    *,
    timeout: float | None = DEFAULT_QUERY_TIMEOUT,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[list[LocatedSymbol]]:
    """Query the bridge once per keyword, concurrently.

    Each sub-query is waited on for at most ``timeout`` seconds. A sub-query
    that times out or raises yields an empty list, which empties the
    intersection downstream.

    The bound applies to the search, not to the process: an abandoned worker
    thread keeps running, and ``concurrent.futures`` joins its workers at
    interpreter exit, so a provider call that never returns still delays
    shutdown. Hosts that need a hard bound should run the provider out of
    process and give it its own deadline.
    """
    if not keywords:
        return []

    workers = max(1, min(max_workers, len(keywords)))
    executor = ThreadPoolExecutor(
        max_workers=workers, thread_name_prefix="tagseek-bridge"
    )
    try:
        futures = [
            (keyword, executor.submit(_run_query, bridge, keyword))
            for keyword in keywords
        ]
        result_sets: list[list[LocatedSymbol]] = []
        for keyword, future in futures:
            try:
                result_sets.append(future.result(timeout=timeout))
            except TimeoutError:
                logger.warning(
                    "Symbol bridge query %r timed out after %ss", keyword, timeout
                )
                result_sets.append([])
            except Exception as exc:
                logger.warning("Symbol bridge query %r failed: %s", keyword, exc)
                result_sets.append([])
    finally:
        # Hung sub-queries are abandoned, never joined.
        executor.shutdown(wait=False, cancel_futures=True)

    return result_sets


def bridge_available(bridge: SymbolBridge | None) -> bool:
    """Probe the bridge with an empty query; no symbols means unavailable."""
    if bridge is None:
        return False
    try:
        return bool(bridge.query(""))
    except Exception as exc:
        logger.warning("Symbol bridge probe failed: %s", exc)
        return False


def to_symbol(located: LocatedSymbol) -> Symbol:
    """Convert a provider symbol into the common result shape."""
    attributes: dict[str, str] = {"uri": located.uri}
    if located.container_name:
        attributes["scope"] = located.container_name

    return Symbol(
        name=located.name,
        location=Location(
            path=uri_to_path(located.uri),
            line=located.range.start.line + 1,
        ),
        kind=None if located.kind is None else str(located.kind),
        attributes=attributes,
    )


__all__ = [
    "DEFAULT_MAX_WORKERS",
    "DEFAULT_QUERY_TIMEOUT",
    "SymbolBridge",
    "bridge_available",
    "intersect_results",
    "query_keywords",
    "to_symbol",
]
