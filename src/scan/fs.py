"""Filesystem access used by the source scanner."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class FileSystem(Protocol):
    """Directory listing, type discrimination and UTF-8 reads.

    Every method may raise OSError; callers skip the entry and carry on.
    """

    def list_dir(self, path: Path) -> list[Path]: ...

    def is_dir(self, path: Path) -> bool: ...

    def is_file(self, path: Path) -> bool: ...

    def is_symlink(self, path: Path) -> bool: ...

    def read_text(self, path: Path) -> str: ...


class LocalFileSystem:
    """FileSystem over the local disk."""

    def list_dir(self, path: Path) -> list[Path]:
        return list(path.iterdir())

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def is_symlink(self, path: Path) -> bool:
        return path.is_symlink()

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8", errors="replace")


__all__ = ["FileSystem", "LocalFileSystem"]
