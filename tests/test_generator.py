from __future__ import annotations

import random

import pytest

from sudokugen import BoardSize, Grid, Puzzle


def _assert_minimal(puzzle: Puzzle) -> None:
    board = puzzle.board()
    for cell in range(board.geometry.cell_count):
        if not board.value(cell):
            continue
        relaxed = puzzle.board()
        relaxed.clear(cell)
        assert relaxed.count_solutions(2) == 2, f"clue at {cell} is redundant"


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_four_by_four_puzzles_are_unique_and_minimal(seed: int) -> None:
    puzzle = Puzzle.generate(2, seed=seed)

    assert puzzle.solution().is_solved()
    assert puzzle.is_solution_unique()
    _assert_minimal(puzzle)


def test_nine_by_nine_puzzle() -> None:
    puzzle = Puzzle.generate(BoardSize.NINE_BY_NINE, seed=2024)
    board = puzzle.board()
    solution = puzzle.solution()

    assert puzzle.base_size == 3
    assert solution.is_solved()
    assert 17 <= puzzle.clue_count <= 40
    for cell, value in enumerate(board.values()):
        if value:
            assert solution.value(cell) == value

    board.solve()
    assert board == solution
    _assert_minimal(puzzle)


def test_same_seed_same_puzzle() -> None:
    assert Puzzle.generate(3, seed=11) == Puzzle.generate(3, seed=11)
    assert Puzzle.generate(2, rng=random.Random(5)) == Puzzle.generate(2, seed=5)


def test_different_seeds_differ() -> None:
    assert Puzzle.generate(3, seed=1).clues != Puzzle.generate(3, seed=2).clues


def test_board_is_a_fresh_copy() -> None:
    puzzle = Puzzle.generate(2, seed=9)
    board = puzzle.board()
    board.solve()

    assert puzzle.board() != board
    assert puzzle.board().clue_count() == puzzle.clue_count


def test_grid_generate_returns_starting_board() -> None:
    board = Grid.generate(2, seed=4)

    assert board == Puzzle.generate(2, seed=4).board()
    assert board.count_solutions() == 1


def test_single_cell_grid() -> None:
    puzzle = Puzzle.generate(1, seed=0)

    assert puzzle.solved == (1,)
    assert puzzle.clues == (0,)
    assert puzzle.is_solution_unique()


def test_invalid_base_size() -> None:
    with pytest.raises(ValueError):
        Puzzle.generate(0)
