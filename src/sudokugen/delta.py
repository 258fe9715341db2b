"""Journal records describing single grid mutations.

Every placement made on a :class:`~sudokugen.grid.Grid` is written to its
journal as one ``PLACE`` delta followed by the ``ELIM`` deltas it caused on
the peers.  Replaying the journal backwards restores the grid exactly, which
is what the backtracking search relies on between sibling branches.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple


class DeltaOp(str, Enum):
    """Supported delta kinds."""

    ELIM = "ELIM"
    PLACE = "PLACE"


@dataclass(frozen=True, slots=True)
class Delta:
    """A single state mutation: ``digit`` placed in, or eliminated from, ``cell``."""

    op: DeltaOp
    cell: int
    digit: int

    def sort_key(self) -> Tuple[int, int, int]:
        """Key used by :func:`canonicalise_deltas`."""

        return (0 if self.op is DeltaOp.ELIM else 1, self.cell, self.digit)


def canonicalise_deltas(deltas: Iterable[Delta]) -> Tuple[Delta, ...]:
    """Return deltas sorted ELIM before PLACE, then by cell and digit."""

    return tuple(sorted(deltas, key=Delta.sort_key))


__all__ = ["Delta", "DeltaOp", "canonicalise_deltas"]
