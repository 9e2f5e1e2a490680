"""Symbol index and keyword matching."""

from index.matching import (
    filter_symbols,
    name_matches,
    normalize_keywords,
    split_subtokens,
)
from index.symbol_index import SymbolIndex

__all__ = [
    "SymbolIndex",
    "filter_symbols",
    "name_matches",
    "normalize_keywords",
    "split_subtokens",
]
