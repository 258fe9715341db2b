"""Backtracking search over a grid, with propagation at every node.

The search walks the tree with an explicit stack of frames instead of
recursion.  Each frame remembers the branching cell, the values still to try
there and the journal mark taken before the first of them, so moving to a
sibling is a single :meth:`Grid.rollback`.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import asdict, dataclass, field
from typing import Iterator, List, Optional, Tuple, TYPE_CHECKING

from .config import solver_settings
from .errors import SearchTimeout
from .propagate import propagate
from .trace import SearchTrace, Strategy

if TYPE_CHECKING:  # pragma: no cover
    from .grid import Grid

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchMode:
    """Stop after ``limit`` solutions; ``keep_solution`` leaves the grid solved."""

    limit: int
    keep_solution: bool = False

    @classmethod
    def count_up_to(cls, limit: int) -> "SearchMode":
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit!r}")
        return cls(limit=limit, keep_solution=False)


FIRST_SOLUTION = SearchMode(limit=1, keep_solution=True)
UNIQUENESS = SearchMode.count_up_to(2)


@dataclass
class SearchStats:
    """Counters collected during one search.

    ``nodes`` counts branching points, ``guesses`` the values tried at them
    and ``backtracks`` the branching points whose values were all exhausted.
    """

    nodes: int = 0
    guesses: int = 0
    backtracks: int = 0
    max_depth: int = 0
    elapsed: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SearchResult:
    count: int
    solution: Optional[Tuple[int, ...]]
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def unique(self) -> bool:
        return self.count == 1


@dataclass
class _Frame:
    cell: int
    values: Iterator[int]
    mark: int


def deadline_after(time_limit: Optional[float]) -> Optional[float]:
    """Turn a duration in seconds into a ``time.monotonic`` deadline."""

    if time_limit is None:
        time_limit = solver_settings().time_limit
    if not time_limit or time_limit <= 0:
        return None
    return time.monotonic() + time_limit


def select_cell(grid: "Grid") -> int:
    """Empty cell with the fewest candidates, lowest index on ties; ``-1`` if none."""

    best = -1
    best_count = grid.size + 1
    for cell, (value, mask) in enumerate(zip(grid.values(), grid.candidate_masks())):
        if value:
            continue
        count = mask.bit_count()
        if count < best_count:
            best, best_count = cell, count
            if count <= 2:
                break
    return best


def search(
    grid: "Grid",
    mode: SearchMode = FIRST_SOLUTION,
    *,
    rng: Optional[random.Random] = None,
    deadline: Optional[float] = None,
    hidden: Optional[bool] = None,
    trace: Optional[SearchTrace] = None,
) -> SearchResult:
    """Explore ``grid`` until ``mode.limit`` solutions are found or the tree is exhausted.

    Parameters
    ----------
    grid:
        The grid to search.  It is mutated during the search and restored
        afterwards, except when ``mode.keep_solution`` is set and a solution
        was found: the grid is then left solved.
    mode:
        :data:`FIRST_SOLUTION` or :meth:`SearchMode.count_up_to`.
    rng:
        When given, the values of each branching cell are tried in a shuffled
        order instead of increasing order.
    deadline:
        ``time.monotonic`` timestamp checked before every branching decision;
        past it the grid is restored and :class:`SearchTimeout` is raised.
    hidden:
        Enable hidden singles during propagation; defaults to the
        ``[solver]`` configuration.
    trace:
        Optional recorder for every placement and backtrack.

    Returns
    -------
    SearchResult
        ``count`` is exact when it is below ``mode.limit``.  ``solution`` holds
        the values of the first solution found, if any.
    """

    if hidden is None:
        hidden = solver_settings().hidden_singles

    stats = SearchStats()
    started = time.perf_counter()
    root = grid.checkpoint()
    frames: List[_Frame] = []
    count = 0
    solution: Optional[Tuple[int, ...]] = None
    if trace is not None:
        trace.depth = 0

    while True:
        if propagate(grid, hidden=hidden, trace=trace):
            if grid.is_complete():
                count += 1
                if solution is None:
                    solution = grid.values()
                if count >= mode.limit:
                    break
            else:
                if deadline is not None and time.monotonic() > deadline:
                    grid.rollback(root)
                    _LOGGER.debug("search timed out after %d nodes", stats.nodes)
                    raise SearchTimeout(f"search exceeded its deadline after {stats.nodes} nodes")
                cell = select_cell(grid)
                options = list(grid.candidates(cell))
                if rng is not None:
                    rng.shuffle(options)
                frames.append(_Frame(cell, iter(options), grid.checkpoint()))
                stats.nodes += 1
                stats.max_depth = max(stats.max_depth, len(frames))

        if not _advance(grid, frames, stats, trace):
            break

    if not (mode.keep_solution and count >= mode.limit):
        grid.rollback(root)
    stats.elapsed = time.perf_counter() - started
    return SearchResult(count=count, solution=solution, stats=stats)


def _advance(
    grid: "Grid",
    frames: List[_Frame],
    stats: SearchStats,
    trace: Optional[SearchTrace],
) -> bool:
    """Roll back to the deepest frame with an untried value and place it."""

    while frames:
        frame = frames[-1]
        grid.rollback(frame.mark)
        value = next(frame.values, None)
        if value is None:
            frames.pop()
            stats.backtracks += 1
            if trace is not None:
                trace.depth = len(frames)
                trace.record(Strategy.BACKTRACK, frame.cell)
            continue
        stats.guesses += 1
        if trace is not None:
            trace.depth = len(frames)
            trace.record(Strategy.GUESS, frame.cell, value)
        # a contradiction here surfaces in the next propagation
        grid.place(frame.cell, value)
        return True
    return False


__all__ = [
    "FIRST_SOLUTION",
    "SearchMode",
    "SearchResult",
    "SearchStats",
    "UNIQUENESS",
    "deadline_after",
    "search",
    "select_cell",
]
