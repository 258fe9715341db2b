"""Unit and peer tables for a grid of a given base size."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache
from typing import NamedTuple, Tuple


class BoardSize(IntEnum):
    """Common board sizes, valued by their base size."""

    FOUR_BY_FOUR = 2
    NINE_BY_NINE = 3
    SIXTEEN_BY_SIXTEEN = 4

    @property
    def side(self) -> int:
        return int(self) ** 2


class Cell(NamedTuple):
    """Position of a cell inside the grid."""

    index: int
    row: int
    column: int
    box: int


UNIT_KINDS = ("row", "column", "box")


@dataclass(frozen=True)
class Geometry:
    """Immutable lookup tables shared by every grid of one base size.

    ``units`` lists the rows first, then the columns, then the boxes, so unit
    ``k`` is a row when ``k < size``, a column when ``k < 2 * size`` and a box
    otherwise.  ``cell_units[i]`` gives the three unit numbers of cell ``i``
    in that same numbering.
    """

    base_size: int
    size: int
    cell_count: int
    full_mask: int
    cells: Tuple[Cell, ...]
    units: Tuple[Tuple[int, ...], ...]
    cell_units: Tuple[Tuple[int, int, int], ...]
    peers: Tuple[Tuple[int, ...], ...]

    @property
    def rows(self) -> Tuple[Tuple[int, ...], ...]:
        return self.units[: self.size]

    @property
    def columns(self) -> Tuple[Tuple[int, ...], ...]:
        return self.units[self.size : 2 * self.size]

    @property
    def boxes(self) -> Tuple[Tuple[int, ...], ...]:
        return self.units[2 * self.size :]

    def index(self, row: int, column: int) -> int:
        if not (0 <= row < self.size and 0 <= column < self.size):
            raise IndexError(f"({row}, {column}) is outside a {self.size}x{self.size} grid")
        return row * self.size + column

    def describe_unit(self, unit: int) -> Tuple[str, int]:
        """Return ``(kind, index)`` for a unit number, e.g. ``("box", 4)``."""

        kind, index = divmod(unit, self.size)
        return UNIT_KINDS[kind], index


@lru_cache(maxsize=None)
def geometry(base_size: int) -> Geometry:
    """Build (once per base size) the tables for an ``N x N`` grid, ``N = base_size ** 2``."""

    if base_size < 1:
        raise ValueError(f"base size must be a positive integer, got {base_size!r}")

    size = base_size * base_size
    cell_count = size * size

    cells = []
    for index in range(cell_count):
        row, column = divmod(index, size)
        box = (row // base_size) * base_size + column // base_size
        cells.append(Cell(index, row, column, box))

    rows = [tuple(row * size + column for column in range(size)) for row in range(size)]
    columns = [tuple(row * size + column for row in range(size)) for column in range(size)]
    boxes = []
    for box in range(size):
        top = (box // base_size) * base_size
        left = (box % base_size) * base_size
        boxes.append(
            tuple(
                (top + dr) * size + left + dc
                for dr in range(base_size)
                for dc in range(base_size)
            )
        )
    units = tuple(rows + columns + boxes)

    cell_units = tuple((cell.row, size + cell.column, 2 * size + cell.box) for cell in cells)

    peers = []
    for cell in cells:
        members = set()
        for unit in cell_units[cell.index]:
            members.update(units[unit])
        members.discard(cell.index)
        peers.append(tuple(sorted(members)))

    return Geometry(
        base_size=base_size,
        size=size,
        cell_count=cell_count,
        full_mask=(1 << size) - 1,
        cells=tuple(cells),
        units=units,
        cell_units=cell_units,
        peers=tuple(peers),
    )


def base_size_for(cell_count: int) -> int:
    """Return ``B`` such that ``cell_count == B ** 4``, or raise ``ValueError``."""

    base = 1
    while base ** 4 < cell_count:
        base += 1
    if cell_count < 1 or base ** 4 != cell_count:
        raise ValueError(f"{cell_count} cells do not form a square Sudoku grid")
    return base


def bit(value: int) -> int:
    return 1 << (value - 1)


def mask_values(mask: int) -> Tuple[int, ...]:
    """Expand a candidate bitmask into its values, smallest first."""

    values = []
    value = 1
    while mask:
        if mask & 1:
            values.append(value)
        mask >>= 1
        value += 1
    return tuple(values)


__all__ = [
    "BoardSize",
    "Cell",
    "Geometry",
    "UNIT_KINDS",
    "base_size_for",
    "bit",
    "geometry",
    "mask_values",
]
