from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from cli import main

FIXTURE_ROOT = Path(__file__).parent / "fixtures"


def _copy_fixture_repo(root: Path) -> None:
    shutil.copytree(FIXTURE_ROOT / "c_repo", root)


def test_cli_search_tags_tier(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture_repo(repo_root)

    exit_code = main(["search", "calc", "sum", "--root", str(repo_root)])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert 'Searched "calc sum", found 1 result (tags):' in out
    assert f"calc_sum: {repo_root / 'math.c'}:11" in out


def test_cli_search_json_output(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture_repo(repo_root)

    exit_code = main(["search", "val", "--partial", "--json", "--root", str(repo_root)])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["state"] == "matched"
    assert payload["tier"] == "tags"
    assert payload["query_echo"] == "val"
    assert [r["name"] for r in payload["results"]] == ["MAX_VALUE", "clamp_value"]


def test_cli_search_bridge_symbols_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()

    exit_code = main(
        [
            "search",
            "config",
            "file",
            "--root",
            str(repo_root),
            "--bridge-symbols",
            str(FIXTURE_ROOT / "workspace_symbols.jsonl"),
        ]
    )

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "found 2 results (bridge)" in out
    assert "parse_config_file: /work/app/config.py:11" in out


def test_cli_search_falls_back_to_scan(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture_repo(repo_root)
    (repo_root / ".tags").unlink()

    exit_code = main(["search", "upper", "--root", str(repo_root)])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "(scan)" in out
    assert "str_to_upper\n" in out


def test_cli_search_no_match_exit_code(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture_repo(repo_root)

    exit_code = main(["search", "nothing_here", "--root", str(repo_root)])

    assert exit_code == 1
    assert 'Searched "nothing_here", no results.' in capsys.readouterr().out


def test_cli_search_unavailable_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    missing_root = tmp_path / "missing"

    exit_code = main(["search", "calc", "--root", str(missing_root)])

    assert exit_code == 2
    assert "No symbol source is available" in capsys.readouterr().err


def test_cli_config_error_exit_code(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "tagseek.toml").write_text("bogus_key = 1\n", encoding="utf-8")

    exit_code = main(["search", "calc", "--root", str(tmp_path)])

    assert exit_code == 2
    assert "Invalid config" in capsys.readouterr().err


def test_cli_scan_and_locate(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture_repo(repo_root)

    assert main(["scan", "--root", str(repo_root)]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "clamp_value",
        "calc_sum",
        "str_trim_left",
        "str_to_upper",
    ]

    assert main(["locate", "str_to_upper", "--root", str(repo_root)]) == 0
    assert capsys.readouterr().out == f"{repo_root / 'util' / 'strings.c'}:10\n"

    assert main(["locate", "missing_fn", "--root", str(repo_root)]) == 1
    assert "definition not found" in capsys.readouterr().err


def test_cli_tags_override(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    tags = tmp_path / "other.tags"
    tags.write_text("run_job\tjobs/run.c\t5\n", encoding="utf-8")

    exit_code = main(["search", "job", "--root", str(repo_root), "--tags", str(tags)])

    assert exit_code == 0
    assert f"run_job: {tmp_path / 'jobs' / 'run.c'}:5" in capsys.readouterr().out


def test_cli_verbose_flag_before_or_after_subcommand(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture_repo(repo_root)

    assert main(["search", "calc", "sum", "--root", str(repo_root), "--verbose"]) == 0
    assert "found 1 result (tags)" in capsys.readouterr().out

    assert main(["-v", "scan", "--root", str(repo_root)]) == 0
    assert "calc_sum" in capsys.readouterr().out.splitlines()
