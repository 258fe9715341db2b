"""Grid model: cell values, candidate bitsets and the undo journal."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple, TYPE_CHECKING

from .delta import Delta, DeltaOp, canonicalise_deltas
from .errors import ClueConflict, InvalidPuzzle, Unsolvable
from .geometry import Cell, Geometry, base_size_for, bit, geometry, mask_values
from .search import FIRST_SOLUTION, SearchMode, SearchStats, deadline_after, search

if TYPE_CHECKING:  # pragma: no cover
    from .trace import SearchTrace


class Grid:
    """An ``N x N`` Sudoku grid, ``N = base_size ** 2``.

    Cells are addressed by their row-major index.  Values are ``0`` for an
    empty cell and ``1..N`` otherwise.  Each empty cell carries a candidate
    bitmask (bit ``v - 1`` set when ``v`` is still possible) that is kept in
    step with every placement, so reads never recompute it.

    Placements are journaled.  :meth:`checkpoint` and :meth:`rollback` undo
    everything recorded after a mark, which is how the search restores the
    grid between sibling branches.
    """

    __slots__ = ("_geo", "_values", "_masks", "_journal")

    def __init__(self, base_size: int = 3) -> None:
        self._geo: Geometry = geometry(int(base_size))
        self._values: List[int] = [0] * self._geo.cell_count
        self._masks: List[int] = [self._geo.full_mask] * self._geo.cell_count
        self._journal: List[Delta] = []

    # Construction -----------------------------------------------------

    @classmethod
    def from_clues(cls, values: Iterable[Optional[int]]) -> "Grid":
        """Build a grid from ``N ** 2`` row-major clues (``None`` or ``0`` = empty).

        Raises :class:`InvalidPuzzle` when the number of values is not the
        cell count of any grid, when a value is outside ``1..N``, or when a
        clue is repeated inside a row, column or box.
        """

        clues = list(values)
        try:
            base_size = base_size_for(len(clues))
        except ValueError as exc:
            raise InvalidPuzzle(str(exc)) from exc

        grid = cls(base_size)
        size = grid.size
        normalised: List[int] = []
        for index, value in enumerate(clues):
            if value is None:
                value = 0
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= size:
                raise InvalidPuzzle(f"cell {index} holds {value!r}, expected 1..{size} or empty")
            normalised.append(value)

        conflicts = find_conflicts(grid._geo, normalised)
        if conflicts:
            raise InvalidPuzzle("clues repeat within a unit", conflicts)

        for index, value in enumerate(normalised):
            if value:
                grid.place(index, value)
        grid.commit()
        return grid

    @classmethod
    def from_string(cls, text: str) -> "Grid":
        """Parse the textual form accepted by :func:`sudokugen.text.parse`."""

        from .text import parse

        return parse(text)

    @classmethod
    def generate(cls, base_size: int = 3, **kwargs) -> "Grid":
        """Return the starting board of a freshly generated puzzle."""

        from .generator import Puzzle

        return Puzzle.generate(base_size, **kwargs).board()

    def copy(self) -> "Grid":
        """Return an independent grid in the same state, with an empty journal."""

        clone = Grid.__new__(Grid)
        clone._geo = self._geo
        clone._values = self._values[:]
        clone._masks = self._masks[:]
        clone._journal = []
        return clone

    # Read access ------------------------------------------------------

    @property
    def base_size(self) -> int:
        return self._geo.base_size

    @property
    def size(self) -> int:
        return self._geo.size

    @property
    def geometry(self) -> Geometry:
        return self._geo

    def index(self, row: int, column: int) -> int:
        return self._geo.index(row, column)

    def cell(self, index: int) -> Cell:
        return self._geo.cells[index]

    def value(self, cell: int) -> int:
        return self._values[cell]

    def get(self, row: int, column: int) -> Optional[int]:
        value = self._values[self._geo.index(row, column)]
        return value or None

    def values(self) -> Tuple[int, ...]:
        return tuple(self._values)

    def candidate_mask(self, cell: int) -> int:
        """Candidate bitmask of ``cell``; ``0`` for a placed cell."""

        return 0 if self._values[cell] else self._masks[cell]

    def candidate_masks(self) -> Tuple[int, ...]:
        return tuple(0 if value else mask for value, mask in zip(self._values, self._masks))

    def candidates(self, cell: int) -> Tuple[int, ...]:
        return mask_values(self.candidate_mask(cell))

    def empty_cells(self) -> List[int]:
        return [index for index, value in enumerate(self._values) if not value]

    def clue_count(self) -> int:
        return sum(1 for value in self._values if value)

    def is_complete(self) -> bool:
        return all(self._values)

    def is_contradictory(self) -> bool:
        return any(not value and not mask for value, mask in zip(self._values, self._masks))

    def is_solved(self) -> bool:
        """True when every row, column and box is a permutation of ``1..N``."""

        if not self.is_complete():
            return False
        full = self._geo.full_mask
        for unit in self._geo.units:
            seen = 0
            for cell in unit:
                seen |= bit(self._values[cell])
            if seen != full:
                return False
        return True

    # Mutation ---------------------------------------------------------

    def place(self, cell: int, value: int) -> bool:
        """Place ``value`` in the empty ``cell`` and eliminate it from its peers.

        ``value`` must be one of the cell's candidates.  Returns ``False``
        when an empty peer is left without candidates; the grid is then
        contradictory, which the caller resolves by rolling back.
        """

        values = self._values
        masks = self._masks
        if values[cell]:
            raise ValueError(f"cell {cell} already holds {values[cell]}")
        if not 1 <= value <= self._geo.size:
            raise ValueError(f"{value!r} is outside 1..{self._geo.size}")
        b = 1 << (value - 1)
        if not masks[cell] & b:
            raise ValueError(f"{value} is not a candidate for cell {cell}")

        journal = self._journal
        values[cell] = value
        journal.append(Delta(DeltaOp.PLACE, cell, value))
        consistent = True
        for peer in self._geo.peers[cell]:
            if not values[peer] and masks[peer] & b:
                masks[peer] ^= b
                journal.append(Delta(DeltaOp.ELIM, peer, value))
                if not masks[peer]:
                    consistent = False
        return consistent

    def unplace(self, cell: int) -> int:
        """Empty ``cell`` and recompute its own candidates from its peers.

        Peers keep their current candidate sets and nothing is journaled, so
        this is not an undo of :meth:`place`; use :meth:`rollback` for that,
        or :meth:`clear` to also refresh the peers.  Returns the removed value.
        """

        value = self._values[cell]
        if not value:
            raise ValueError(f"cell {cell} is already empty")
        self._values[cell] = 0
        self._masks[cell] = self._peer_mask(cell)
        return value

    def clear(self, cell: int) -> int:
        """Remove the value of ``cell`` and refresh the candidates of every empty peer."""

        value = self.unplace(cell)
        for peer in self._geo.peers[cell]:
            if not self._values[peer]:
                self._masks[peer] = self._peer_mask(peer)
        return value

    def _peer_mask(self, cell: int) -> int:
        used = 0
        values = self._values
        for peer in self._geo.peers[cell]:
            value = values[peer]
            if value:
                used |= 1 << (value - 1)
        return self._geo.full_mask & ~used

    # Journal ----------------------------------------------------------

    def checkpoint(self) -> int:
        return len(self._journal)

    def rollback(self, mark: int) -> None:
        """Undo every journaled change recorded after ``mark``."""

        journal = self._journal
        values = self._values
        masks = self._masks
        while len(journal) > mark:
            delta = journal.pop()
            if delta.op is DeltaOp.ELIM:
                masks[delta.cell] |= 1 << (delta.digit - 1)
            else:
                values[delta.cell] = 0

    def commit(self) -> None:
        """Make the current state the baseline that can no longer be rolled back."""

        self._journal.clear()

    def changes_since(self, mark: int) -> Tuple[Delta, ...]:
        return canonicalise_deltas(self._journal[mark:])

    # Solving ----------------------------------------------------------

    def solve(
        self,
        *,
        time_limit: Optional[float] = None,
        hidden: Optional[bool] = None,
        trace: Optional["SearchTrace"] = None,
    ) -> SearchStats:
        """Fill the grid with its first solution, in place.

        Raises :class:`Unsolvable` when no solution exists; the grid is then
        left exactly as it was.  Returns the search statistics.
        """

        result = search(
            self,
            FIRST_SOLUTION,
            deadline=deadline_after(time_limit),
            hidden=hidden,
            trace=trace,
        )
        if not result.count:
            raise Unsolvable()
        return result.stats

    def count_solutions(self, limit: int = 2, *, time_limit: Optional[float] = None) -> int:
        """Count solutions up to ``limit``; the grid is left unchanged."""

        result = search(self, SearchMode.count_up_to(limit), deadline=deadline_after(time_limit))
        return result.count

    # Dunder -----------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._geo.base_size == other._geo.base_size and self._values == other._values

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        from .text import render

        return render(self)

    def __repr__(self) -> str:
        from .text import to_string

        return f"Grid.from_string({to_string(self)!r})"


def find_conflicts(geo: Geometry, values: Sequence[int]) -> Tuple[ClueConflict, ...]:
    """Report every value placed more than once inside a unit."""

    conflicts = []
    for unit_no, unit in enumerate(geo.units):
        seen: dict[int, List[int]] = {}
        for cell in unit:
            value = values[cell]
            if value:
                seen.setdefault(value, []).append(cell)
        kind, unit_index = geo.describe_unit(unit_no)
        for value, cells in sorted(seen.items()):
            if len(cells) > 1:
                conflicts.append(ClueConflict(kind, unit_index, value, tuple(cells)))
    return tuple(conflicts)


__all__ = ["Grid", "find_conflicts"]
