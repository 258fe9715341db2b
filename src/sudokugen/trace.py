"""Move trace recorded while propagating and searching."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple

TRACE_LEVELS = ("none", "moves")


class Strategy(str, Enum):
    """How a placement was decided."""

    NAKED_SINGLE = "naked_single"
    HIDDEN_SINGLE = "hidden_single"
    GUESS = "guess"
    BACKTRACK = "backtrack"


@dataclass(frozen=True)
class TraceEntry:
    """Single record emitted for a placement or a backtrack.

    ``value`` is ``0`` for backtrack markers, whose ``cell`` is the branching
    cell being abandoned or retried.
    """

    step: int
    strategy: Strategy
    cell: int
    value: int
    depth: int

    def to_payload(self) -> dict:
        return {
            "step": self.step,
            "strategy": self.strategy.value,
            "cell": self.cell,
            "value": self.value,
            "depth": self.depth,
        }


@dataclass
class SearchTrace:
    """Collects placements and backtracks when ``trace_level`` is ``"moves"``.

    ``depth`` is maintained by the search so that propagation records land
    at the branching depth they were made at.
    """

    trace_level: str = "moves"
    entries: List[TraceEntry] = field(default_factory=list)
    depth: int = 0

    def __post_init__(self) -> None:
        if self.trace_level not in TRACE_LEVELS:
            raise ValueError(f"Unsupported trace level: {self.trace_level!r}")

    @property
    def enabled(self) -> bool:
        return self.trace_level != "none"

    def record(self, strategy: Strategy, cell: int, value: int = 0) -> None:
        if not self.enabled:
            return
        self.entries.append(TraceEntry(len(self.entries) + 1, strategy, cell, value, self.depth))

    def snapshot(self) -> Tuple[TraceEntry, ...]:
        return tuple(self.entries)

    def reset(self) -> None:
        self.entries.clear()
        self.depth = 0

    def counts(self) -> Dict[str, int]:
        """Number of entries per strategy name."""

        return dict(Counter(entry.strategy.value for entry in self.entries))

    def to_json(self, *, indent: int | None = None) -> str:
        payload = [entry.to_payload() for entry in self.entries]
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), indent=indent)


__all__ = ["SearchTrace", "Strategy", "TRACE_LEVELS", "TraceEntry"]
