"""Command line entry point: solve, check, generate and print puzzles."""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import Any, Dict, List

from . import eventlog
from .config import get_section
from .errors import InvalidPuzzle, SearchTimeout, Unsolvable
from .generator import Puzzle
from .grid import Grid
from .text import parse, render, to_string
from .trace import SearchTrace

_LOGGER = logging.getLogger(__name__)


def _setting(path: str, fallback: Any) -> Any:
    try:
        return get_section(path)
    except KeyError:
        return fallback


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {text!r}") from exc
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def _read_puzzle(args: argparse.Namespace) -> Grid:
    if args.file:
        text = Path(args.file).read_text(encoding="utf-8")
    elif args.puzzle:
        text = args.puzzle
    else:
        text = sys.stdin.read()
    return parse(text)


def _log_event(args: argparse.Namespace, name: str, status: str, **fields: Any) -> None:
    if not args.events_dir:
        return
    eventlog.configure(args.events_dir, max_bytes=_setting("events.max_bytes", None))
    eventlog.record(name, status, **fields)


def _show(grid: Grid, pretty: bool) -> str:
    return render(grid) if pretty else to_string(grid)


def cmd_solve(args: argparse.Namespace) -> int:
    try:
        grid = _read_puzzle(args)
    except InvalidPuzzle as exc:
        print(f"invalid puzzle: {exc}", file=sys.stderr)
        _log_event(args, "solve", "invalid")
        return 1

    trace = SearchTrace() if args.trace else None
    try:
        stats = grid.solve(time_limit=args.time_limit, trace=trace)
    except Unsolvable:
        print("no solution", file=sys.stderr)
        _log_event(args, "solve", "unsolvable")
        return 1
    except SearchTimeout as exc:
        print(f"timed out: {exc}", file=sys.stderr)
        _log_event(args, "solve", "timeout")
        return 1

    print(_show(grid, args.pretty))
    if trace is not None:
        print(trace.to_json())
    _LOGGER.debug("solved with %s", stats)
    _log_event(args, "solve", "solved", **stats.to_dict())
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    try:
        grid = _read_puzzle(args)
    except InvalidPuzzle as exc:
        print(f"invalid puzzle: {exc}", file=sys.stderr)
        _log_event(args, "check", "invalid")
        return 1
    try:
        count = grid.count_solutions(args.limit, time_limit=args.time_limit)
    except SearchTimeout as exc:
        print(f"timed out: {exc}", file=sys.stderr)
        _log_event(args, "check", "timeout")
        return 1
    print(count)
    _log_event(args, "check", "ok", solutions=count, limit=args.limit)
    return 0


def _generate(args: argparse.Namespace) -> List[Puzzle]:
    rng = random.Random(args.seed)
    puzzles = []
    for _ in range(args.count):
        puzzle = Puzzle.generate(args.size, rng=rng)
        _log_event(args, "generate", "ok", size=args.size, clues=puzzle.clue_count)
        puzzles.append(puzzle)
    return puzzles


def cmd_generate(args: argparse.Namespace) -> int:
    for index, puzzle in enumerate(_generate(args)):
        if args.json:
            payload: Dict[str, Any] = {
                "base_size": puzzle.base_size,
                "clues": puzzle.clue_count,
                "puzzle": to_string(puzzle.board()),
                "solution": to_string(puzzle.solution()),
            }
            print(json.dumps(payload, sort_keys=True))
            continue
        if index:
            print()
        print(_show(puzzle.board(), args.pretty))
        if args.show_solution:
            print()
            print(_show(puzzle.solution(), args.pretty))
    return 0


def cmd_pdf(args: argparse.Namespace) -> int:
    from .printer import render_pdf

    boards = [puzzle.board() for puzzle in _generate(args)]
    path = render_pdf(boards, args.out, footer=f"seed={args.seed}" if args.seed is not None else "")
    print(path)
    return 0


def cmd_report_events(args: argparse.Namespace) -> int:
    base_dir = Path(args.path)
    if not any(base_dir.glob("**/*.jsonl")):
        raise SystemExit(f"No JSONL logs found under {base_dir}")
    print(json.dumps(eventlog.summarize(base_dir), indent=2, sort_keys=True))
    return 0


def _add_input(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("puzzle", nargs="?", default=None, help="Puzzle text; read from stdin when omitted")
    parser.add_argument("--file", default=None, help="Read the puzzle from a file")


def _add_generation(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--size",
        type=_positive_int,
        default=int(_setting("generator.base_size", 3)),
        help="Base size: 2 for 4x4, 3 for 9x9, 4 for 16x16",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--count", type=_positive_int, default=1)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sudokugen", description="Sudoku solver and generator")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--events-dir",
        default=_setting("events.dir", None),
        help="Append a JSONL event for every run under this directory",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    solve = sub.add_parser("solve", help="Solve a puzzle")
    _add_input(solve)
    solve.add_argument("--pretty", action="store_true", help="Print a boxed grid")
    solve.add_argument("--time-limit", type=float, default=None, help="Give up after this many seconds")
    solve.add_argument("--trace", action="store_true", help="Print the move trace as JSON")
    solve.set_defaults(func=cmd_solve)

    check = sub.add_parser("check", help="Count solutions, stopping at --limit")
    _add_input(check)
    check.add_argument("--limit", type=_positive_int, default=2)
    check.add_argument("--time-limit", type=float, default=None, help="Give up after this many seconds")
    check.set_defaults(func=cmd_check)

    generate = sub.add_parser("generate", help="Generate minimal puzzles")
    _add_generation(generate)
    generate.add_argument("--pretty", action="store_true", help="Print boxed grids")
    generate.add_argument(
        "--show-solution",
        action="store_true",
        default=bool(_setting("cli.show_solution", False)),
    )
    generate.add_argument("--json", action="store_true", help="One JSON object per puzzle")
    generate.set_defaults(func=cmd_generate)

    pdf = sub.add_parser("pdf", help="Generate puzzles into a printable PDF")
    _add_generation(pdf)
    pdf.add_argument("--out", default="sudoku_pack.pdf")
    pdf.set_defaults(func=cmd_pdf)

    report = sub.add_parser("report-events", help="Summarise a JSONL event directory")
    report.add_argument("path")
    report.set_defaults(func=cmd_report_events)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
