"""Parse grids from text and render them back."""

from __future__ import annotations

from typing import List

from .errors import InvalidPuzzle
from .grid import Grid

SYMBOLS = "123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
EMPTY_MARKS = "._0"
SEPARATORS = "|-+"


def parse(text: str) -> Grid:
    """Read a grid written row by row.

    Whitespace and the box separators ``| - +`` are ignored, ``.``, ``_`` and
    ``0`` mark empty cells, values above 9 continue with letters (``A`` = 10).
    The base size follows from the number of cells: 16 cells make a 4x4
    grid, 81 a 9x9 grid, 256 a 16x16 grid.
    """

    values: List[int] = []
    for ch in text:
        if ch.isspace() or ch in SEPARATORS:
            continue
        if ch in EMPTY_MARKS:
            values.append(0)
            continue
        position = SYMBOLS.find(ch.upper())
        if position < 0:
            raise InvalidPuzzle(f"unexpected character {ch!r} in puzzle text")
        values.append(position + 1)
    return Grid.from_clues(values)


def symbol(value: int) -> str:
    return SYMBOLS[value - 1] if value else "."


def to_string(grid: Grid) -> str:
    """Compact single-line form, ``.`` for empty cells."""

    return "".join(symbol(value) for value in grid.values())


def render(grid: Grid) -> str:
    """Boxed multi-line form."""

    base = grid.base_size
    size = grid.size
    values = grid.values()
    border = "+" + "+".join(["-" * (2 * base + 1)] * base) + "+"
    lines = []
    for row in range(size):
        if row % base == 0:
            lines.append(border)
        cells = values[row * size : (row + 1) * size]
        chunks = [
            " ".join(symbol(value) for value in cells[start : start + base])
            for start in range(0, size, base)
        ]
        lines.append("| " + " | ".join(chunks) + " |")
    lines.append(border)
    return "\n".join(lines)


__all__ = ["SYMBOLS", "parse", "render", "symbol", "to_string"]
