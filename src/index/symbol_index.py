"""In-memory symbol index built from a tags database."""

from __future__ import annotations

from typing import TYPE_CHECKING

from index.matching import filter_symbols
from models.search import MatchMode
from parse.tags import load_tags

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence
    from pathlib import Path

    from models.symbols import Symbol


class SymbolIndex:
    """Immutable, ordered collection of parsed symbols.

    A changed tags file means building a new index and swapping it in; there
    are no mutation methods.
    """

    __slots__ = ("_symbols",)

    def __init__(self, symbols: Iterable[Symbol] = ()) -> None:
        self._symbols: tuple[Symbol, ...] = tuple(symbols)

    @classmethod
    def from_tags_file(
        cls, tags_path: str | Path, *, resolve_patterns: bool = False
    ) -> SymbolIndex:
        """Parse ``tags_path`` into a fresh index.

        Raises:
            SourceUnavailable: If the tags file cannot be read.
        """
        return cls(load_tags(tags_path, resolve_patterns=resolve_patterns))

    @property
    def symbols(self) -> tuple[Symbol, ...]:
        return self._symbols

    @property
    def is_empty(self) -> bool:
        return not self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols)

    def filter(
        self, keywords: Sequence[str], mode: MatchMode = MatchMode.EXACT
    ) -> list[Symbol]:
        return filter_symbols(self._symbols, keywords, mode)


__all__ = ["SymbolIndex"]
