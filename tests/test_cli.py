from __future__ import annotations

import json
from pathlib import Path

import pytest

from sudokugen import Grid
from sudokugen.cli import main

from puzzles import PUZZLE, PUZZLE_SOLUTION


def test_solve_prints_solution(capsys) -> None:
    assert main(["solve", PUZZLE]) == 0
    assert capsys.readouterr().out.strip() == PUZZLE_SOLUTION


def test_solve_reads_file_and_prints_trace(tmp_path: Path, capsys) -> None:
    source = tmp_path / "puzzle.txt"
    source.write_text(PUZZLE + "\n", encoding="utf-8")

    assert main(["solve", "--file", str(source), "--pretty", "--trace"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("+-------+")
    trace = json.loads(out[-1])
    assert trace and {"step", "strategy", "cell", "value", "depth"} <= set(trace[0])


def test_solve_reports_bad_input(capsys) -> None:
    assert main(["solve", "55" + "." * 79]) == 1
    assert "invalid puzzle" in capsys.readouterr().err


def test_solve_reports_unsolvable(capsys) -> None:
    assert main(["solve", "1" + PUZZLE[1:]]) == 1
    assert "no solution" in capsys.readouterr().err


def test_check_counts_solutions(capsys) -> None:
    assert main(["check", PUZZLE]) == 0
    assert main(["check", "." * 16, "--limit", "5"]) == 0
    assert capsys.readouterr().out.split() == ["1", "5"]


def test_generate_json(capsys) -> None:
    assert main(["generate", "--size", "2", "--seed", "3", "--count", "2", "--json"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    payload = json.loads(lines[0])
    assert payload["base_size"] == 2
    board = Grid.from_string(payload["puzzle"])
    assert board.clue_count() == payload["clues"]
    board.solve()
    assert board == Grid.from_string(payload["solution"])


def test_events_are_logged_and_reported(tmp_path: Path, capsys) -> None:
    events = tmp_path / "events"
    assert main(["--events-dir", str(events), "generate", "--size", "2", "--seed", "1", "--count", "3"]) == 0
    assert main(["--events-dir", str(events), "check", PUZZLE]) == 0
    capsys.readouterr()

    assert main(["report-events", str(events)]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["events"] == {"check": 1, "generate": 3}
    assert summary["statuses"]["generate:ok"] == 3


def test_check_reports_timeout(capsys) -> None:
    assert main(["check", "." * 256, "--limit", "1000", "--time-limit", "0.000001"]) == 1
    assert "timed out" in capsys.readouterr().err


def test_check_honours_configured_time_limit(monkeypatch, capsys) -> None:
    monkeypatch.setenv("SUDOKUGEN_TIME_LIMIT", "0.000001")
    assert main(["check", "." * 256, "--limit", "1000"]) == 1
    assert "timed out" in capsys.readouterr().err


@pytest.mark.parametrize(
    "argv",
    [
        ["check", "." * 16, "--limit", "0"],
        ["check", "." * 16, "--limit", "two"],
        ["generate", "--size", "0"],
        ["generate", "--size", "-3"],
        ["pdf", "--count", "0"],
    ],
)
def test_non_positive_numbers_are_rejected(argv, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 2
    err = capsys.readouterr().err
    assert "must be at least 1" in err or "expected an integer" in err
