"""Error types shared by the solver and the generator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ClueConflict:
    """A value given more than once inside a single row, column or box."""

    unit: str
    unit_index: int
    value: int
    cells: Tuple[int, ...]

    def describe(self) -> str:
        cells = ", ".join(str(cell) for cell in self.cells)
        return f"{self.unit} {self.unit_index} repeats {self.value} at cells {cells}"


class SudokuError(Exception):
    """Base class for every error raised by :mod:`sudokugen`."""


class InvalidPuzzle(SudokuError, ValueError):
    """Raised when supplied clues cannot describe a Sudoku grid.

    ``conflicts`` lists the repeated clues when the failure comes from the
    uniqueness rule; it is empty for shape or range problems.
    """

    def __init__(self, message: str, conflicts: Tuple[ClueConflict, ...] = ()) -> None:
        if conflicts:
            details = "; ".join(conflict.describe() for conflict in conflicts)
            message = f"{message}: {details}"
        super().__init__(message)
        self.conflicts = tuple(conflicts)


class Unsolvable(SudokuError):
    """Raised when the search exhausts every branch without a solution."""

    def __init__(self, message: str = "The board has no solution") -> None:
        super().__init__(message)


class SearchTimeout(SudokuError):
    """Raised when a search runs past its deadline."""


__all__ = [
    "ClueConflict",
    "InvalidPuzzle",
    "SearchTimeout",
    "SudokuError",
    "Unsolvable",
]
