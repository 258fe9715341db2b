"""Branch-free deductions: naked singles and hidden singles.

Both rules only commit moves that every solution of the current grid agrees
on, so running them before each branching decision shrinks the search tree
without changing its outcome.
"""

from __future__ import annotations

from typing import List, Optional, Set, Tuple, TYPE_CHECKING

from .trace import SearchTrace, Strategy

if TYPE_CHECKING:  # pragma: no cover
    from .grid import Grid

Placement = Tuple[int, int]


def naked_singles(grid: "Grid") -> List[Placement]:
    """Empty cells with exactly one candidate, as ``(cell, value)`` pairs."""

    found = []
    for cell, (value, mask) in enumerate(zip(grid.values(), grid.candidate_masks())):
        if not value and mask and not mask & (mask - 1):
            found.append((cell, mask.bit_length()))
    return found


def hidden_singles(grid: "Grid") -> List[Placement]:
    """Values that fit in exactly one empty cell of some row, column or box."""

    values = grid.values()
    masks = grid.candidate_masks()
    found: Set[Placement] = set()
    for unit in grid.geometry.units:
        once, twice, _ = _tally(unit, values, masks)
        lone = once & ~twice
        if not lone:
            continue
        for cell in unit:
            hits = masks[cell] & lone
            while hits:
                low = hits & -hits
                hits ^= low
                found.add((cell, low.bit_length()))
    return sorted(found)


def _tally(unit, values, masks) -> Tuple[int, int, int]:
    once = twice = placed = 0
    for cell in unit:
        value = values[cell]
        if value:
            placed |= 1 << (value - 1)
        else:
            mask = masks[cell]
            twice |= once & mask
            once |= mask
    return once, twice, placed


def propagate(grid: "Grid", *, hidden: bool = True, trace: Optional[SearchTrace] = None) -> bool:
    """Apply singles until nothing more is forced.

    Returns ``False`` as soon as the grid turns out contradictory: an empty
    cell without candidates, or a unit with no room left for one of its
    values.  Every placement goes through :meth:`Grid.place`, so the caller
    can roll the whole propagation back through the grid journal.
    """

    geo = grid.geometry
    full = geo.full_mask
    record = trace is not None and trace.enabled

    while True:
        values = grid.values()
        masks = grid.candidate_masks()
        progress = False

        for cell in range(geo.cell_count):
            if values[cell]:
                continue
            mask = masks[cell]
            if not mask:
                return False
            if mask & (mask - 1):
                continue
            # candidates only shrink, so a single seen in the snapshot is either still there or gone
            if not grid.candidate_mask(cell):
                return False
            value = mask.bit_length()
            if record:
                trace.record(Strategy.NAKED_SINGLE, cell, value)
            progress = True
            if not grid.place(cell, value):
                return False

        if progress:
            continue
        if not hidden:
            return True

        for unit in geo.units:
            once, twice, placed = _tally(unit, values, masks)
            if once | placed != full:
                return False
            lone = once & ~twice
            if not lone:
                continue
            for cell in unit:
                hits = masks[cell] & lone
                while hits:
                    low = hits & -hits
                    hits ^= low
                    value = low.bit_length()
                    if grid.value(cell) == value:
                        continue
                    if not grid.candidate_mask(cell) & low:
                        return False
                    if record:
                        trace.record(Strategy.HIDDEN_SINGLE, cell, value)
                    progress = True
                    if not grid.place(cell, value):
                        return False

        if not progress:
            return True


__all__ = ["hidden_singles", "naked_singles", "propagate"]
