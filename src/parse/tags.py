"""Parser for ctags-style tag databases.

A tag line has the shape ``name<TAB>file<TAB>excmd[<TAB>extension fields]``.
Header lines start with ``!``. Lines with fewer than three fields are dropped
without raising; a tags file is often hand-edited or truncated and one bad
line must not hide the rest of the index.
"""

from __future__ import annotations

import logging
import os
import re
from typing import TYPE_CHECKING

from models.errors import SourceUnavailable
from models.symbols import Location, Symbol

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    # (absolute file path, search pattern) -> 1-based line or None
    PatternResolver = Callable[[str, str], "int | None"]

logger = logging.getLogger(__name__)

_LINE_NUMBER_RE = re.compile(r"^\d+$")
_KIND_RE = re.compile(r';"\s+(\S+)')
_ATTRIBUTE_RE = re.compile(r"\b(\w+):(\S+)")
_EXCMD_TERMINATOR = ';"'


def _resolve_tag_path(file_field: str, tags_dir: str) -> str:
    if os.path.isabs(file_field):
        return os.path.normpath(file_field)
    return os.path.normpath(os.path.join(tags_dir, file_field))


def _parse_extension_fields(extra: str) -> tuple[str | None, dict[str, str]]:
    """Return the kind marker and key:value attributes of the trailing fields."""
    kind: str | None = None
    kind_match = _KIND_RE.search(extra)
    if kind_match and ":" not in kind_match.group(1):
        kind = kind_match.group(1)

    attributes: dict[str, str] = {}
    for key, value in _ATTRIBUTE_RE.findall(extra):
        attributes[key] = value

    if kind is None and "kind" in attributes:
        kind = attributes["kind"]

    return kind, attributes


def parse_tags(
    raw_text: str,
    source_path: str | Path,
    *,
    resolve_pattern: PatternResolver | None = None,
) -> list[Symbol]:
    """Parse tags-file text into symbols, in input line order.

    Args:
        raw_text: Full contents of the tags database
        source_path: Path of the tags file; relative file fields are resolved
            against its directory
        resolve_pattern: Optional callable turning a search-pattern ex-command
            into a line number. Without it such symbols sit on line 1.

    Returns:
        One Symbol per well-formed tag line.
    """
    tags_dir = os.path.dirname(os.path.abspath(os.fspath(source_path)))
    symbols: list[Symbol] = []

    for raw_line in raw_text.split("\n"):
        line = raw_line.rstrip("\r")
        if not line or line.startswith("!"):
            continue

        parts = line.split("\t")
        if len(parts) < 3 or not parts[0]:
            continue

        name, file_field, ex_cmd = parts[0], parts[1], parts[2]
        path = _resolve_tag_path(file_field, tags_dir)

        # Universal ctags glues the ';"' terminator onto the ex-command.
        terminated = ex_cmd.endswith(_EXCMD_TERMINATOR)
        if terminated:
            ex_cmd = ex_cmd[: -len(_EXCMD_TERMINATOR)]

        line_number = 1
        if _LINE_NUMBER_RE.match(ex_cmd):
            try:
                line_number = max(1, int(ex_cmd))
            except ValueError:
                # Past the interpreter's int conversion limit.
                logger.debug("Line number out of range for %s", name)
        elif resolve_pattern is not None:
            resolved = resolve_pattern(path, ex_cmd)
            if resolved is not None:
                line_number = resolved

        kind: str | None = None
        attributes: dict[str, str] = {}
        if len(parts) > 3:
            extra = "\t".join(parts[3:]).strip()
            if terminated:
                extra = f"{_EXCMD_TERMINATOR}\t{extra}"
            kind, attributes = _parse_extension_fields(extra)

        symbols.append(
            Symbol(
                name=name,
                location=Location(path=path, line=line_number),
                kind=kind,
                attributes=attributes,
            )
        )

    return symbols


def _pattern_to_matcher(pattern: str) -> Callable[[str], bool] | None:
    """Build a line predicate from a ``/^...$/`` or ``?^...$?`` ex-command."""
    if len(pattern) < 2 or pattern[0] not in "/?" or pattern[-1] != pattern[0]:
        return None

    delimiter = pattern[0]
    body = pattern[1:-1]
    anchored_start = body.startswith("^")
    if anchored_start:
        body = body[1:]
    anchored_end = body.endswith("$") and not body.endswith("\\$")
    if anchored_end:
        body = body[:-1]
    text = body.replace(f"\\{delimiter}", delimiter).replace("\\\\", "\\")

    if anchored_start and anchored_end:
        return lambda candidate: candidate == text
    if anchored_start:
        return lambda candidate: candidate.startswith(text)
    if anchored_end:
        return lambda candidate: candidate.endswith(text)
    return lambda candidate: text in candidate


class PatternLineResolver:
    """Resolve search-pattern ex-commands to line numbers by reading files.

    File contents are cached for the lifetime of the resolver, which is one
    index build.
    """

    def __init__(self, read_text: Callable[[str], str] | None = None) -> None:
        self._read_text = read_text or _read_utf8
        self._lines: dict[str, list[str] | None] = {}

    def _file_lines(self, path: str) -> list[str] | None:
        if path not in self._lines:
            try:
                self._lines[path] = self._read_text(path).splitlines()
            except OSError as exc:
                logger.debug("Cannot read %s for pattern resolution: %s", path, exc)
                self._lines[path] = None
        return self._lines[path]

    def __call__(self, path: str, pattern: str) -> int | None:
        matcher = _pattern_to_matcher(pattern)
        if matcher is None:
            return None
        lines = self._file_lines(path)
        if lines is None:
            return None
        for index, candidate in enumerate(lines, start=1):
            if matcher(candidate):
                return index
        return None


def _read_utf8(path: str | Path) -> str:
    with open(path, encoding="utf-8", errors="replace") as handle:
        return handle.read()


def load_tags(tags_path: str | Path, *, resolve_patterns: bool = False) -> list[Symbol]:
    """Read and parse a tags database.

    Raises:
        SourceUnavailable: If the file does not exist or cannot be read.
    """
    try:
        raw_text = _read_utf8(tags_path)
    except OSError as exc:
        msg = f"Tags file is not readable: {tags_path}"
        raise SourceUnavailable(msg) from exc

    resolver = PatternLineResolver() if resolve_patterns else None
    symbols = parse_tags(raw_text, tags_path, resolve_pattern=resolver)
    logger.debug("Parsed %d symbols from %s", len(symbols), tags_path)
    return symbols


__all__ = ["PatternLineResolver", "load_tags", "parse_tags"]
