"""Keyword matching of identifiers split into underscore sub-tokens."""

from __future__ import annotations

from typing import TYPE_CHECKING

from models.search import MatchMode

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from models.symbols import Symbol


def split_subtokens(name: str) -> list[str]:
    """Split an identifier on ``_`` and lowercase each piece.

    Examples:
        >>> split_subtokens("get_User_name")
        ['get', 'user', 'name']
    """
    return [part.lower() for part in name.split("_")]


def name_matches(name: str, keywords: Sequence[str], mode: MatchMode) -> bool:
    """Return True when every keyword matches some sub-token of ``name``.

    EXACT requires a keyword to equal a sub-token, PARTIAL only requires it
    to be a substring of one. An empty keyword list matches everything.
    """
    subtokens = split_subtokens(name)
    if MatchMode(mode) is MatchMode.EXACT:
        return all(keyword in subtokens for keyword in keywords)
    return all(
        any(keyword in subtoken for subtoken in subtokens) for keyword in keywords
    )


def normalize_keywords(keywords: Iterable[str]) -> list[str]:
    return [keyword.lower() for keyword in keywords if keyword.strip()]


def filter_symbols(
    symbols: Iterable[Symbol],
    keywords: Sequence[str],
    mode: MatchMode,
) -> list[Symbol]:
    """Stable filter of ``symbols`` by conjunctive keyword matching."""
    mode = MatchMode(mode)
    normalized = normalize_keywords(keywords)
    return [symbol for symbol in symbols if name_matches(symbol.name, normalized, mode)]


__all__ = ["filter_symbols", "name_matches", "normalize_keywords", "split_subtokens"]
