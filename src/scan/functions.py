"""Regex-based function definition scanner.

This is the last-resort search tier. The definition pattern is a heuristic
for C-family sources: one or more return-type-like tokens at line start, an
identifier, a single-line parameter list and an opening brace (on the same
or the next line). Declarations without a body, macros, multi-line
signatures and qualified C++ method names are not recognized.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import TYPE_CHECKING

from models.symbols import Location
from scan.files import DEFAULT_EXTENSIONS, find_source_files
from scan.fs import LocalFileSystem

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Iterator, Sequence

    from scan.fs import FileSystem

logger = logging.getLogger(__name__)

_DEFINITION_TEMPLATE = (
    r"^[ \t]*(?:[A-Za-z_]\w*[ \t*&]+)+"
    r"({name})"
    r"[ \t]*\([^()\n;]*\)[ \t]*(?:\r?\n[ \t]*)?\{{"
)
_IDENTIFIER = r"[A-Za-z_]\w*"

FUNCTION_DEFINITION_RE = re.compile(
    _DEFINITION_TEMPLATE.format(name=_IDENTIFIER), re.MULTILINE
)

# Statements that look like "prefix name(...) {" but are not definitions.
_CONTROL_KEYWORDS = frozenset(
    {"if", "else", "for", "while", "do", "switch", "return", "sizeof"}
)


def definition_pattern(function_name: str) -> re.Pattern[str]:
    """Definition pattern restricted to the literal ``function_name``."""
    return re.compile(
        _DEFINITION_TEMPLATE.format(name=re.escape(function_name)), re.MULTILINE
    )


def extract_function_names(text: str) -> list[str]:
    """Return candidate function names defined in ``text``, in order."""
    return [
        match.group(1)
        for match in FUNCTION_DEFINITION_RE.finditer(text)
        if match.group(1) not in _CONTROL_KEYWORDS
    ]


def filter_function_names(names: Iterable[str], keywords: Sequence[str]) -> list[str]:
    """Keep names containing every keyword. Comparison is case-sensitive."""
    return [name for name in names if all(keyword in name for keyword in keywords)]


class FunctionScanner:
    """Walk a source tree and find function definitions by pattern."""

    def __init__(
        self,
        *,
        fs: FileSystem | None = None,
        extensions: Collection[str] = DEFAULT_EXTENSIONS,
        include_patterns: list[str] | None = None,
        exclude_patterns: list[str] | None = None,
        nested_gitignore: bool = False,
    ) -> None:
        self.fs = fs or LocalFileSystem()
        self.extensions = tuple(extensions)
        self.include_patterns = include_patterns
        self.exclude_patterns = exclude_patterns
        self.nested_gitignore = nested_gitignore

    def root_available(self, root: str | Path) -> bool:
        """Return True when ``root`` is a directory this scanner can walk."""
        try:
            return self.fs.is_dir(Path(os.path.abspath(root)))
        except OSError as exc:
            logger.warning("Scan root %s is not accessible: %s", root, exc)
            return False

    def _iter_sources(self, root: str | Path) -> Iterator[tuple[Path, str]]:
        directory = Path(os.path.abspath(root))
        for path in find_source_files(
            directory,
            extensions=self.extensions,
            include_patterns=self.include_patterns,
            exclude_patterns=self.exclude_patterns,
            nested_gitignore=self.nested_gitignore,
            fs=self.fs,
        ):
            try:
                text = self.fs.read_text(path)
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Skipping unreadable file %s: %s", path, exc)
                continue
            yield path, text

    def scan(self, root: str | Path) -> list[str]:
        """Return the distinct function names defined under ``root``."""
        names: dict[str, None] = {}
        for _path, text in self._iter_sources(root):
            for name in extract_function_names(text):
                names.setdefault(name, None)
        logger.debug("Scanned %d function names under %s", len(names), root)
        return list(names)

    def locate(self, root: str | Path, function_name: str) -> Location | None:
        """Find where ``function_name`` is defined under ``root``.

        The walk is redone from scratch, so with duplicate definitions the
        first matching file in walk order wins. Within that file the first
        textual occurrence of the name is reported, which may precede the
        definition itself (a prototype or an earlier call).
        """
        if not function_name:
            return None
        pattern = definition_pattern(function_name)
        for path, text in self._iter_sources(root):
            if not pattern.search(text):
                continue
            offset = text.find(function_name)
            line = text.count("\n", 0, offset) + 1
            return Location(path=str(path), line=line)
        return None


__all__ = [
    "FUNCTION_DEFINITION_RE",
    "FunctionScanner",
    "definition_pattern",
    "extract_function_names",
    "filter_function_names",
]
