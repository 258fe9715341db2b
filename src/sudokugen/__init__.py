"""Sudoku solver and generator for grids of any base size."""

from __future__ import annotations

from .errors import ClueConflict, InvalidPuzzle, SearchTimeout, SudokuError, Unsolvable
from .generator import Puzzle
from .geometry import BoardSize, Cell
from .grid import Grid
from .search import FIRST_SOLUTION, UNIQUENESS, SearchMode, SearchResult, SearchStats, search
from .text import parse, render, to_string
from .trace import SearchTrace, Strategy

__version__ = "0.3.0"

__all__ = [
    "BoardSize",
    "Cell",
    "ClueConflict",
    "FIRST_SOLUTION",
    "Grid",
    "InvalidPuzzle",
    "Puzzle",
    "SearchMode",
    "SearchResult",
    "SearchStats",
    "SearchTimeout",
    "SearchTrace",
    "Strategy",
    "SudokuError",
    "UNIQUENESS",
    "Unsolvable",
    "parse",
    "render",
    "search",
    "to_string",
]
