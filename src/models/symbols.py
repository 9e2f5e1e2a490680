"""Symbol models for tag-derived and provider-derived search results.

`Symbol` is what every tier hands back to callers. `LocatedSymbol` is the
richer record returned by an external workspace-symbol provider; it carries a
document identifier and a full character range instead of a single line.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Location(BaseModel):
    """Definition site of a symbol."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Absolute path of the defining file")
    line: int = Field(default=1, ge=1, description="1-based line number")


class Symbol(BaseModel):
    """A named entity discovered by one of the search tiers."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: Location | None = Field(
        default=None,
        description="Definition site; None for scan results not yet located",
    )
    kind: str | None = None
    attributes: dict[str, str] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v:
            msg = "symbol name must be non-empty"
            raise ValueError(msg)
        return v

    @property
    def path(self) -> str | None:
        return self.location.path if self.location else None

    @property
    def line(self) -> int | None:
        return self.location.line if self.location else None


class Position(BaseModel):
    """Zero-based line/character position inside a document."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(ge=0)
    character: int = Field(default=0, ge=0)


class Range(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: Position
    end: Position


class LocatedSymbol(BaseModel):
    """A symbol as reported by an external workspace-symbol provider."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: str | int | None = Field(
        default=None, description="Provider-specific classification"
    )
    uri: str = Field(description="Canonical identifier of the resolving document")
    range: Range
    container_name: str | None = None

    def identity_key(self) -> tuple[str, str, int, int, int, int]:
        """Key under which two separately retrieved symbols are the same."""
        start = self.range.start
        end = self.range.end
        return (
            self.name,
            self.uri,
            start.line,
            start.character,
            end.line,
            end.character,
        )


__all__ = ["LocatedSymbol", "Location", "Position", "Range", "Symbol"]
