from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bridge.base import DEFAULT_MAX_WORKERS, DEFAULT_QUERY_TIMEOUT
from models.search import MatchMode
from scan.files import DEFAULT_EXTENSIONS
from utils import expand_workspace_path

CONFIG_FILENAME = "tagseek.toml"

DEFAULT_TAGS_FILE = "${workspaceFolder}/.tags"


class BridgeConfig(BaseModel):
    """Configuration for the workspace-symbol bridge tier."""

    model_config = ConfigDict(extra="forbid")

    symbols_file: str | None = Field(
        default=None,
        description="JSONL dump of workspace symbols (relative to the root)",
    )
    timeout: float = Field(
        default=DEFAULT_QUERY_TIMEOUT,
        gt=0,
        description="Seconds to wait for each per-keyword query",
    )
    max_workers: int = Field(
        default=DEFAULT_MAX_WORKERS,
        ge=1,
        description="Concurrent per-keyword queries",
    )


class TagSeekConfig(BaseModel):
    """Configuration for tiered symbol search."""

    model_config = ConfigDict(extra="forbid")

    tags_file: str = Field(
        default=DEFAULT_TAGS_FILE,
        description="Tags database path; ${workspaceFolder} expands to the root",
    )
    match_mode: MatchMode = Field(
        default=MatchMode.EXACT,
        description="Default keyword match mode",
    )
    resolve_patterns: bool = Field(
        default=False,
        description="Resolve /^pattern$/ ex-commands to line numbers",
    )
    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="Source suffixes scanned by the function scanner",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for scanned files (empty = all)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files excluded from scanning",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    bridge: BridgeConfig = Field(default_factory=BridgeConfig)

    @field_validator("extensions", mode="before")
    @classmethod
    def validate_extensions(cls, v: Any) -> Any:
        """Require dotted suffixes such as ``.c``.

        Runs in `mode="before"` so the error quotes the raw TOML value.
        """
        if not isinstance(v, list):
            msg = "extensions must be a list of suffixes"
            raise TypeError(msg)

        for suffix in v:
            if not isinstance(suffix, str) or len(suffix) < 2 or suffix[0] != ".":
                msg = f"Invalid extension {suffix!r}: expected a suffix like '.c'"
                raise ValueError(msg)

        return v

    def tags_path(self, root: Path) -> Path:
        return expand_workspace_path(self.tags_file, root)

    def bridge_symbols_path(self, root: Path) -> Path | None:
        if self.bridge.symbols_file is None:
            return None
        return expand_workspace_path(self.bridge.symbols_file, root)


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path) -> TagSeekConfig:
    """Load configuration from tagseek.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return TagSeekConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return TagSeekConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
