"""Command-line interface for tagseek."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

from bridge.jsonl import JsonlSymbolBridge
from models.search import MatchMode, SearchResult, SearchState
from search.orchestrator import SearchOrchestrator
from settings.config import ConfigError, TagSeekConfig, load_config


def _add_root(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        default=".",
        help="Workspace root (default: .)",
    )


def _verbose_parent() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Log tier transitions and skipped files",
    )
    return parent


def _build_parser() -> argparse.ArgumentParser:
    verbose = _verbose_parent()
    parser = argparse.ArgumentParser(prog="tagseek", parents=[verbose])
    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser(
        "search", parents=[verbose], help="Search symbols"
    )
    search_parser.add_argument("query", nargs="+", help="Keywords, all must match")
    _add_root(search_parser)
    search_parser.add_argument(
        "--tags",
        default=None,
        help="Tags database (default: config tags_file)",
    )
    search_parser.add_argument(
        "--bridge-symbols",
        default=None,
        help="JSONL dump of workspace symbols for the bridge tier",
    )
    mode_group = search_parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--partial",
        dest="mode",
        action="store_const",
        const=MatchMode.PARTIAL,
        help="Keywords may match part of an identifier segment",
    )
    mode_group.add_argument(
        "--exact",
        dest="mode",
        action="store_const",
        const=MatchMode.EXACT,
        help="Keywords must equal an identifier segment",
    )
    search_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the search result as JSON",
    )

    scan_parser = subparsers.add_parser(
        "scan",
        parents=[verbose],
        help="List function names found by the source scanner",
    )
    _add_root(scan_parser)

    locate_parser = subparsers.add_parser(
        "locate",
        parents=[verbose],
        help="Print the definition site of a function",
    )
    locate_parser.add_argument("name", help="Function name")
    _add_root(locate_parser)

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _write_result(result: SearchResult) -> None:
    count = len(result.results)
    if count:
        noun = "result" if count == 1 else "results"
        sys.stdout.write(
            f'Searched "{result.query_echo}", found {count} {noun} '
            f"({result.tier.value if result.tier else 'none'}):\n"
        )
    else:
        sys.stdout.write(f'Searched "{result.query_echo}", no results.\n')

    for symbol in result.results:
        if symbol.location is None:
            sys.stdout.write(f"{symbol.name}\n")
        else:
            sys.stdout.write(
                f"{symbol.name}: {symbol.location.path}:{symbol.location.line}\n"
            )


def _handle_search(root: Path, config: TagSeekConfig, args: argparse.Namespace) -> int:
    if args.tags is not None:
        config = config.model_copy(update={"tags_file": args.tags})

    bridge = None
    if args.bridge_symbols is not None:
        bridge = JsonlSymbolBridge(Path(args.bridge_symbols).expanduser().resolve())

    orchestrator = SearchOrchestrator.from_config(root, config, bridge=bridge)
    mode = args.mode or config.match_mode
    result = orchestrator.search(" ".join(args.query), mode)

    if args.json:
        payload = orjson.dumps(
            result.model_dump(mode="json"),
            option=orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2,
        )
        sys.stdout.write(payload.decode("utf-8") + "\n")
    else:
        _write_result(result)

    if result.state is SearchState.UNAVAILABLE:
        sys.stderr.write(f"error: {result.error}\n")
        return 2
    return 0 if result.matched else 1


def _handle_scan(root: Path, config: TagSeekConfig) -> int:
    orchestrator = SearchOrchestrator.from_config(root, config)
    assert orchestrator.scanner is not None
    for name in orchestrator.scanner.scan(root):
        sys.stdout.write(f"{name}\n")
    return 0


def _handle_locate(root: Path, config: TagSeekConfig, name: str) -> int:
    orchestrator = SearchOrchestrator.from_config(root, config)
    assert orchestrator.scanner is not None
    location = orchestrator.scanner.locate(root, name)
    if location is None:
        sys.stderr.write(f"{name}: definition not found\n")
        return 1
    sys.stdout.write(f"{location.path}:{location.line}\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(getattr(args, "verbose", False))

    root = Path(args.root).expanduser().resolve()

    try:
        config = load_config(root)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    if args.command == "search":
        return _handle_search(root, config, args)

    if args.command == "scan":
        return _handle_scan(root, config)

    if args.command == "locate":
        return _handle_locate(root, config, args.name)

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
