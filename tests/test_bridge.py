from __future__ import annotations

import threading
from pathlib import Path

import pytest

from bridge.base import bridge_available, intersect_results, query_keywords, to_symbol
from bridge.jsonl import InMemorySymbolBridge, JsonlSymbolBridge, load_located_symbols
from models.errors import BridgeUnavailable
from models.symbols import LocatedSymbol, Position, Range

FIXTURE_SYMBOLS = Path(__file__).parent / "fixtures" / "workspace_symbols.jsonl"


def _located(
    name: str,
    uri: str = "file:///src/a.c",
    start: tuple[int, int] = (0, 0),
    end: tuple[int, int] = (5, 1),
) -> LocatedSymbol:
    return LocatedSymbol(
        name=name,
        kind="function",
        uri=uri,
        range=Range(
            start=Position(line=start[0], character=start[1]),
            end=Position(line=end[0], character=end[1]),
        ),
    )


class _MappingBridge:
    def __init__(self, answers: dict[str, list[LocatedSymbol]]) -> None:
        self.answers = answers
        self.queries: list[str] = []
        self._lock = threading.Lock()

    def query(self, text: str) -> list[LocatedSymbol]:
        with self._lock:
            self.queries.append(text)
        return list(self.answers.get(text, []))


def test_intersection_keeps_symbols_common_to_every_set() -> None:
    a, b, c = _located("a"), _located("b"), _located("c")

    assert intersect_results([[a, b], [b, c]]) == [b]


def test_intersection_identity_includes_uri_and_full_range() -> None:
    base = _located("run", "file:///src/a.c", (1, 0), (3, 0))
    other_uri = _located("run", "file:///src/b.c", (1, 0), (3, 0))
    other_end = _located("run", "file:///src/a.c", (1, 0), (3, 4))
    same = _located("run", "file:///src/a.c", (1, 0), (3, 0))

    assert intersect_results([[base], [other_uri]]) == []
    assert intersect_results([[base], [other_end]]) == []
    assert intersect_results([[base], [same]]) == [base]


def test_intersection_follows_first_set_order_and_collapses_duplicates() -> None:
    a, b, c = _located("a"), _located("b"), _located("c")

    result = intersect_results([[c, a, c, b], [a, b, c], [b, c, a]])

    assert [s.name for s in result] == ["c", "a", "b"]


def test_intersection_of_nothing_is_empty() -> None:
    assert intersect_results([]) == []
    assert intersect_results([[_located("a")], []]) == []


def test_query_keywords_issues_one_query_per_keyword() -> None:
    a, b = _located("a"), _located("b")
    bridge = _MappingBridge({"user": [a, b], "name": [b]})

    result_sets = query_keywords(bridge, ["user", "name"])

    assert result_sets == [[a, b], [b]]
    assert sorted(bridge.queries) == ["name", "user"]


def test_query_keywords_bounds_wait_for_hanging_query() -> None:
    release = threading.Event()
    fast = _located("fast")

    class _HangingBridge:
        def query(self, text: str) -> list[LocatedSymbol]:
            if text == "slow":
                release.wait(5)
            return [fast]

    try:
        result_sets = query_keywords(
            _HangingBridge(), ["fast", "slow"], timeout=0.2, max_workers=2
        )
    finally:
        release.set()

    assert result_sets == [[fast], []]


def test_query_keywords_treats_failures_as_empty() -> None:
    class _FailingBridge:
        def query(self, text: str) -> list[LocatedSymbol]:
            if text == "bad":
                raise RuntimeError("provider crashed")
            return [_located(text)]

    result_sets = query_keywords(_FailingBridge(), ["good", "bad"])

    assert [len(results) for results in result_sets] == [1, 0]


def test_bridge_available_probes_with_empty_query() -> None:
    assert bridge_available(InMemorySymbolBridge([_located("a")]))
    assert not bridge_available(InMemorySymbolBridge())
    assert not bridge_available(None)


def test_to_symbol_converts_uri_and_zero_based_line() -> None:
    located = LocatedSymbol(
        name="parse_args",
        kind=12,
        uri="file:///work/app/cli.py",
        range=Range(start=Position(line=2, character=4), end=Position(line=6)),
        container_name="app.cli",
    )

    symbol = to_symbol(located)

    assert symbol.name == "parse_args"
    assert symbol.location is not None
    assert symbol.location.path == "/work/app/cli.py"
    assert symbol.location.line == 3
    assert symbol.kind == "12"
    assert symbol.attributes == {"uri": "file:///work/app/cli.py", "scope": "app.cli"}


def test_in_memory_bridge_matches_case_insensitive_substring() -> None:
    bridge = InMemorySymbolBridge([_located("ParseConfig"), _located("write")])

    assert [s.name for s in bridge.query("config")] == ["ParseConfig"]
    assert len(bridge.query("")) == 2


def test_load_located_symbols_skips_invalid_lines() -> None:
    symbols = load_located_symbols(FIXTURE_SYMBOLS)

    assert [s.name for s in symbols] == [
        "parse_config_file",
        "ConfigParser",
        "write_config_file",
        "parse_args",
    ]
    parser = symbols[1]
    assert parser.uri == "file:///work/app/config.py"
    assert parser.container_name == "app.config"
    assert parser.range.end.line == 80


def test_jsonl_bridge_intersects_across_keywords() -> None:
    bridge = JsonlSymbolBridge(FIXTURE_SYMBOLS)

    result = intersect_results(query_keywords(bridge, ["config", "file"]))

    assert [s.name for s in result] == ["parse_config_file", "write_config_file"]


def test_jsonl_bridge_missing_file_raises_on_query(tmp_path: Path) -> None:
    bridge = JsonlSymbolBridge(tmp_path / "missing.jsonl")

    with pytest.raises(BridgeUnavailable):
        bridge.query("x")
    assert not bridge_available(bridge)


def test_jsonl_bridge_reloads_rewritten_dump(tmp_path: Path) -> None:
    dump = tmp_path / "symbols.jsonl"
    record = (
        '{"name": "%s", "uri": "file:///a.c", '
        '"range": {"start": {"line": 0, "character": 0}, '
        '"end": {"line": 1, "character": 0}}}\n'
    )
    dump.write_text(record % "old_name", encoding="utf-8")
    bridge = JsonlSymbolBridge(dump)

    assert [s.name for s in bridge.query("name")] == ["old_name"]

    dump.write_text(record % "brand_new_name", encoding="utf-8")

    assert [s.name for s in bridge.query("name")] == ["brand_new_name"]


def test_jsonl_bridge_loads_once_for_concurrent_keywords(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    import bridge.jsonl as jsonl_module

    calls: list[Path] = []
    real_loader = jsonl_module.load_located_symbols

    def _counting_loader(path: Path) -> list[LocatedSymbol]:
        calls.append(path)
        return real_loader(path)

    monkeypatch.setattr(jsonl_module, "load_located_symbols", _counting_loader)
    bridge = JsonlSymbolBridge(FIXTURE_SYMBOLS)

    query_keywords(bridge, ["config", "file", "parse", "write"], max_workers=4)

    assert calls == [FIXTURE_SYMBOLS]
