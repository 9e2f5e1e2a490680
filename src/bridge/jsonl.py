"""Bridges backed by a static list of workspace symbols."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

import orjson
from pydantic import ValidationError

from models.errors import BridgeUnavailable
from models.symbols import LocatedSymbol

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

logger = logging.getLogger(__name__)


class InMemorySymbolBridge:
    """Answer queries by case-insensitive substring match on symbol names.

    The empty query returns every symbol, which is what the availability
    probe expects from a live provider.
    """

    def __init__(self, symbols: Iterable[LocatedSymbol] = ()) -> None:
        self._symbols = tuple(symbols)

    def _all_symbols(self) -> tuple[LocatedSymbol, ...]:
        return self._symbols

    def query(self, text: str) -> list[LocatedSymbol]:
        needle = text.lower()
        return [
            symbol for symbol in self._all_symbols() if needle in symbol.name.lower()
        ]


def _normalize_record(record: dict[str, Any]) -> dict[str, Any]:
    """Accept LSP SymbolInformation records as well as the flat shape."""
    location = record.get("location")
    if isinstance(location, dict):
        record = {key: value for key, value in record.items() if key != "location"}
        record.setdefault("uri", location.get("uri"))
        record.setdefault("range", location.get("range"))
    if "containerName" in record:
        record = dict(record)
        record.setdefault("container_name", record.pop("containerName"))
    return record


def load_located_symbols(path: Path) -> list[LocatedSymbol]:
    """Load LocatedSymbol records from a JSONL dump.

    Lines that are not valid JSON objects or do not validate are skipped.

    Raises:
        BridgeUnavailable: If the file cannot be read.
    """
    try:
        raw = path.read_bytes()
    except OSError as exc:
        msg = f"Workspace symbol file is not readable: {path}"
        raise BridgeUnavailable(msg) from exc

    symbols: list[LocatedSymbol] = []
    for line_number, line in enumerate(raw.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            record = orjson.loads(line)
        except orjson.JSONDecodeError as exc:
            logger.warning("%s:%d: invalid JSON: %s", path, line_number, exc)
            continue
        if not isinstance(record, dict):
            continue
        try:
            symbols.append(LocatedSymbol.model_validate(_normalize_record(record)))
        except ValidationError as exc:
            logger.warning(
                "%s:%d: invalid symbol record: %s",
                path,
                line_number,
                exc.errors()[0]["msg"],
            )
    return symbols


class JsonlSymbolBridge(InMemorySymbolBridge):
    """Workspace symbols read from a JSONL file.

    The dump is loaded once under a lock and reloaded when the file's size
    or modification time changes, so concurrent per-keyword queries share
    one load and a rewritten dump is picked up by the next query.
    """

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = path
        self._lock = threading.Lock()
        self._signature: tuple[int, int] | None = None
        self._loaded: tuple[LocatedSymbol, ...] = ()

    def _all_symbols(self) -> tuple[LocatedSymbol, ...]:
        try:
            stat = self.path.stat()
        except OSError as exc:
            msg = f"Workspace symbol file is not readable: {self.path}"
            raise BridgeUnavailable(msg) from exc
        signature = (stat.st_mtime_ns, stat.st_size)

        with self._lock:
            if signature != self._signature:
                self._loaded = tuple(load_located_symbols(self.path))
                self._signature = signature
                logger.debug(
                    "Loaded %d workspace symbols from %s",
                    len(self._loaded),
                    self.path,
                )
            return self._loaded


__all__ = ["InMemorySymbolBridge", "JsonlSymbolBridge", "load_located_symbols"]
