"""Generate full solutions and reduce them to minimal unique puzzles."""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Optional, Tuple

from .geometry import bit
from .grid import Grid
from .search import FIRST_SOLUTION, UNIQUENESS, search

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Puzzle:
    """A generated puzzle: its starting clues and its unique solution.

    Both grids are stored as value tuples; :meth:`board` and :meth:`solution`
    hand out fresh :class:`Grid` objects, so nothing done with them can alter
    the puzzle.
    """

    base_size: int
    clues: Tuple[int, ...]
    solved: Tuple[int, ...]

    @classmethod
    def generate(
        cls,
        base_size: int = 3,
        *,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ) -> "Puzzle":
        """Generate a new puzzle with a unique solution.

        The empty grid is solved with random value order, then clues are
        removed one at a time in random order, keeping a removal only while
        the puzzle still has exactly one solution.  Pass ``rng`` or ``seed``
        to make the result reproducible.
        """

        if rng is None:
            rng = random.Random(seed)
        base_size = int(base_size)

        started = time.perf_counter()
        solution = generate_full_solution(base_size, rng)
        board = reduce_to_minimal(solution, rng)
        _LOGGER.debug(
            "generated %dx%d puzzle with %d clues in %.3fs",
            solution.size,
            solution.size,
            board.clue_count(),
            time.perf_counter() - started,
        )
        return cls(base_size=base_size, clues=board.values(), solved=solution.values())

    def board(self) -> Grid:
        """Return the starting grid (clues only)."""

        return Grid.from_clues(self.clues)

    def solution(self) -> Grid:
        """Return the solved grid."""

        return Grid.from_clues(self.solved)

    @property
    def clue_count(self) -> int:
        return sum(1 for value in self.clues if value)

    def is_solution_unique(self) -> bool:
        return self.board().count_solutions(2) == 1


def generate_full_solution(base_size: int, rng: random.Random) -> Grid:
    """Solve the empty grid, trying branch values in random order."""

    grid = Grid(base_size)
    result = search(grid, FIRST_SOLUTION, rng=rng)
    if not result.count:  # pragma: no cover - every empty grid has a solution
        raise RuntimeError(f"could not fill an empty grid of base size {base_size}")
    grid.commit()
    _LOGGER.debug("full solution after %d branching nodes", result.stats.nodes)
    return grid


def reduce_to_minimal(solution: Grid, rng: random.Random) -> Grid:
    """Remove clues from ``solution`` until none can go without losing uniqueness.

    Each clue is tried once, in random order.  A single pass is enough:
    dropping clues only adds solutions, so a clue that could not be removed
    earlier cannot be removed later either.
    """

    working = solution.copy()
    order = [cell for cell in range(working.geometry.cell_count) if working.value(cell)]
    rng.shuffle(order)

    searches = 0
    for cell in order:
        value = working.clear(cell)
        if working.candidate_mask(cell) == bit(value):
            # forced by the remaining clues
            continue
        searches += 1
        if search(working.copy(), UNIQUENESS).count == 1:
            continue
        working.place(cell, value)

    working.commit()
    _LOGGER.debug("reduced to %d clues with %d uniqueness searches", working.clue_count(), searches)
    return working


__all__ = ["Puzzle", "generate_full_solution", "reduce_to_minimal"]
