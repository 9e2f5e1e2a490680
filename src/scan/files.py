"""Source file discovery for the function scanner."""

from __future__ import annotations

import logging
from fnmatch import fnmatch
from pathlib import Path
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

from scan.fs import LocalFileSystem

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterator

    from scan.fs import FileSystem

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = (".c", ".cpp")

_SKIPPED_DIRS = frozenset({".git", ".hg", ".svn"})


def _should_include_file(
    path: Path,
    directory: Path,
    gitignore_matches: Callable[[str], bool] | None,
    include_patterns: list[str] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    """Check if a file should be included based on all filtering rules."""
    if not _is_within_root(path, directory):
        return False

    try:
        rel_path = path.relative_to(directory)
    except ValueError:
        return False

    rel_path_str = rel_path.as_posix()

    if gitignore_matches is not None and gitignore_matches(str(path)):
        return False

    if include_patterns and not any(
        fnmatch(rel_path_str, pat) for pat in include_patterns
    ):
        return False

    has_excluded_match = exclude_patterns and any(
        fnmatch(rel_path_str, pat) for pat in exclude_patterns
    )
    return not has_excluded_match


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        root_resolved = root.resolve()
        path_resolved = path.resolve()
    except OSError:
        return False

    try:
        path_resolved.relative_to(root_resolved)
    except ValueError:
        return False

    return True


def _iter_gitignore_files(root: Path) -> list[Path]:
    """Return sorted list of .gitignore files under root (including root)."""
    gitignore_paths = [root / ".gitignore"]
    gitignore_paths.extend(root.rglob(".gitignore"))
    unique_paths = {
        path for path in gitignore_paths if path.is_file() and not path.is_symlink()
    }
    return sorted(unique_paths, key=lambda p: p.relative_to(root).as_posix())


def _parse_gitignore_file(path: Path) -> Callable[[str], bool] | None:
    """Parse one .gitignore; unreadable or undecodable files are skipped."""
    try:
        return cast("Callable[[str], bool]", parse_gitignore(path))
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Ignoring unreadable gitignore %s: %s", path, exc)
        return None


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> Callable[[str], bool] | None:
    if not nested_gitignore:
        gitignore_path = root / ".gitignore"
        if gitignore_path.is_file():
            return _parse_gitignore_file(gitignore_path)
        return None

    gitignore_paths = _iter_gitignore_files(root)
    matchers = [
        matcher
        for matcher in map(_parse_gitignore_file, gitignore_paths)
        if matcher is not None
    ]
    if not matchers:
        return None

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                continue
        return False

    return matches


def _walk(fs: FileSystem, directory: Path) -> Iterator[Path]:
    """Yield files under ``directory`` depth-first in sorted order.

    Unreadable directories and symlinks are skipped.
    """
    try:
        entries = sorted(fs.list_dir(directory))
    except OSError as exc:
        logger.warning("Skipping unreadable directory %s: %s", directory, exc)
        return

    for entry in entries:
        try:
            if fs.is_symlink(entry):
                continue
            if fs.is_dir(entry):
                if entry.name not in _SKIPPED_DIRS:
                    yield from _walk(fs, entry)
            elif fs.is_file(entry):
                yield entry
        except OSError as exc:
            logger.warning("Skipping unreadable entry %s: %s", entry, exc)


def find_source_files(
    directory: Path,
    *,
    extensions: Collection[str] = DEFAULT_EXTENSIONS,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
    fs: FileSystem | None = None,
) -> Iterator[Path]:
    """Find source files with a recognized extension, respecting .gitignore.

    Args:
        directory: Directory to search
        extensions: File suffixes to accept, with leading dot
        include_patterns: Optional list of fnmatch patterns; if provided,
            files must match at least one pattern to be included
        exclude_patterns: Optional list of fnmatch patterns; files matching
            any pattern are excluded
        nested_gitignore: Compose every .gitignore under ``directory``
            instead of only the root one
        fs: Filesystem collaborator (default: local disk)

    Yields:
        Path objects for each matching file, in sorted depth-first order.
    """
    fs = fs or LocalFileSystem()
    accepted = frozenset(extensions)
    gitignore_matches = _build_gitignore_matcher(
        directory,
        nested_gitignore=nested_gitignore,
    )

    for path in _walk(fs, directory):
        if path.suffix not in accepted:
            continue
        if _should_include_file(
            path,
            directory,
            gitignore_matches,
            include_patterns,
            exclude_patterns,
        ):
            yield path


__all__ = ["DEFAULT_EXTENSIONS", "_should_include_file", "find_source_files"]
