"""Shared utilities for tagseek."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

WORKSPACE_PLACEHOLDER = "${workspaceFolder}"


def expand_workspace_path(template: str, root: str | Path) -> Path:
    """Expand a configured path against the workspace root.

    Args:
        template: Configured path, optionally containing ``${workspaceFolder}``
        root: Workspace root directory

    Returns:
        Absolute path. Relative results are anchored at ``root``.

    Examples:
        >>> expand_workspace_path("${workspaceFolder}/.tags", "/src/app").as_posix()
        '/src/app/.tags'
        >>> expand_workspace_path("build/tags", "/src/app").as_posix()
        '/src/app/build/tags'
    """
    root_path = Path(root)
    expanded = Path(template.replace(WORKSPACE_PLACEHOLDER, str(root_path)))
    expanded = expanded.expanduser()
    if not expanded.is_absolute():
        expanded = root_path / expanded
    return expanded


def uri_to_path(uri: str) -> str:
    """Convert a ``file://`` document URI to a filesystem path.

    Non-file identifiers are returned unchanged; providers are free to hand
    back plain paths.
    """
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        return uri
    return url2pathname(parsed.path)
