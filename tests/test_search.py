from __future__ import annotations

import random
import time

import pytest

from sudokugen import (
    FIRST_SOLUTION,
    UNIQUENESS,
    Grid,
    InvalidPuzzle,
    SearchMode,
    SearchTimeout,
    SearchTrace,
    Unsolvable,
    parse,
    search,
    to_string,
)
from sudokugen.search import select_cell

from puzzles import PUZZLE, PUZZLE_SOLUTION, SECOND_PUZZLE, SECOND_SOLUTION, with_values


@pytest.mark.parametrize(
    ("puzzle", "solution"),
    [(PUZZLE, PUZZLE_SOLUTION), (SECOND_PUZZLE, SECOND_SOLUTION)],
)
def test_solve_known_puzzles(puzzle: str, solution: str) -> None:
    grid = Grid.from_string(puzzle)

    stats = grid.solve()

    assert to_string(grid) == solution
    assert grid.is_solved()
    assert stats.elapsed >= 0


def test_unsolvable_puzzle_is_left_unchanged() -> None:
    grid = Grid.from_string(with_values(PUZZLE, {0: "1"}))
    before = grid.values()

    assert grid.count_solutions() == 0
    with pytest.raises(Unsolvable):
        grid.solve()
    assert grid.values() == before


def test_count_all_four_by_four_grids() -> None:
    grid = Grid(2)

    assert grid.count_solutions(1000) == 288
    assert grid.count_solutions(2) == 2
    assert grid == Grid(2)
    assert grid.checkpoint() == 0


def test_uniqueness_on_known_puzzle() -> None:
    grid = Grid.from_string(PUZZLE)

    result = search(grid, UNIQUENESS)

    assert result.unique
    assert to_string(Grid.from_clues(result.solution)) == PUZZLE_SOLUTION
    assert grid == Grid.from_string(PUZZLE)


def test_shuffled_value_order_finds_the_same_unique_solution() -> None:
    grid = Grid.from_string(SECOND_PUZZLE)

    result = search(grid, FIRST_SOLUTION, rng=random.Random(7))

    assert result.count == 1
    assert to_string(grid) == SECOND_SOLUTION


def test_select_cell_prefers_fewest_candidates() -> None:
    assert select_cell(Grid(3)) == 0

    grid = Grid.from_string("12..3...........")
    # the scan stops at the first cell with two candidates
    assert select_cell(grid) == 2
    grid.solve()
    assert select_cell(grid) == -1


def test_expired_deadline_restores_the_grid() -> None:
    grid = Grid(3)

    with pytest.raises(SearchTimeout):
        search(grid, FIRST_SOLUTION, deadline=time.monotonic() - 1.0)

    assert grid == Grid(3)
    assert grid.checkpoint() == 0


def test_trace_matches_statistics() -> None:
    grid = Grid(3)
    trace = SearchTrace()

    stats = grid.solve(trace=trace)

    counts = trace.counts()
    assert counts.get("guess", 0) == stats.guesses
    assert counts.get("backtrack", 0) == stats.backtracks
    assert [entry.step for entry in trace.entries] == list(range(1, len(trace.entries) + 1))
    assert stats.max_depth >= 1


def test_solution_can_be_rolled_back() -> None:
    grid = Grid.from_string(PUZZLE)
    mark = grid.checkpoint()

    grid.solve()
    assert grid.is_complete()

    grid.rollback(mark)
    assert to_string(grid) == PUZZLE


def test_search_mode_limits() -> None:
    assert FIRST_SOLUTION.limit == 1 and FIRST_SOLUTION.keep_solution
    assert UNIQUENESS == SearchMode(limit=2)
    with pytest.raises(ValueError):
        SearchMode.count_up_to(0)


def test_fully_given_grid_with_repeats_is_rejected() -> None:
    with pytest.raises(InvalidPuzzle):
        parse("123456789" * 9)
