"""JSONL event log for solver and generator runs, with rotation and a summary.

Events land in ``<base_dir>/<YYYYMMDD>/events_NN.jsonl``.  A file is left
alone once it reaches ``max_bytes`` and the next number is opened.
"""

from __future__ import annotations

import json
import threading
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Mapping

__all__ = ["append_event", "configure", "current_log_path", "iter_events", "record", "summarize"]

_LOCK = threading.Lock()
_DEFAULT_MAX_BYTES = 10 * 1024 * 1024
_settings: Dict[str, Any] = {"base_dir": Path("logs/sudokugen"), "max_bytes": _DEFAULT_MAX_BYTES}
_last_path: Path | None = None


def configure(base_dir: str | Path, *, max_bytes: int | None = None) -> None:
    """Send subsequent events to ``base_dir``; files rotate past ``max_bytes``."""

    global _last_path
    _settings["base_dir"] = Path(base_dir)
    _settings["max_bytes"] = int(max_bytes) if max_bytes else _DEFAULT_MAX_BYTES
    _last_path = None


def _file_number(path: Path) -> int:
    return int(path.stem.rsplit("_", 1)[1])


def _target_file(now: datetime) -> Path:
    day_dir = _settings["base_dir"] / now.strftime("%Y%m%d")
    day_dir.mkdir(parents=True, exist_ok=True)
    existing = sorted(day_dir.glob("events_*.jsonl"), key=_file_number)
    if not existing:
        return day_dir / "events_00.jsonl"
    latest = existing[-1]
    if latest.stat().st_size < _settings["max_bytes"]:
        return latest
    return day_dir / f"events_{_file_number(latest) + 1:02d}.jsonl"


def append_event(event: Mapping[str, Any]) -> Path:
    """Append ``event`` as one JSON line and return the file it went to."""

    global _last_path
    if "event" not in event:
        raise ValueError("event payload needs an 'event' name")
    now = datetime.now(timezone.utc)
    line = json.dumps({"ts": now.isoformat(timespec="milliseconds"), **event}, sort_keys=True)
    with _LOCK:
        path = _target_file(now)
        with path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")
        _last_path = path
    return path


def record(name: str, status: str, **fields: Any) -> Path:
    """Shorthand for the ``{"event": name, "status": status, ...}`` shape used by the CLI."""

    return append_event({"event": name, "status": status, **fields})


def current_log_path() -> Path | None:
    return _last_path


def iter_events(paths: Iterable[Path]) -> Iterator[Dict[str, Any]]:
    for path in paths:
        for line in path.read_text(encoding="utf-8").splitlines():
            if line.strip():
                yield json.loads(line)


def summarize(base_dir: str | Path) -> Dict[str, Any]:
    """Count the events found under ``base_dir`` by name and by status."""

    files = sorted(Path(base_dir).glob("**/*.jsonl"))
    by_event: Counter = Counter()
    by_status: Counter = Counter()
    clues = []
    for event in iter_events(files):
        by_event[str(event.get("event", "unknown"))] += 1
        by_status[f"{event.get('event', 'unknown')}:{event.get('status', 'unknown')}"] += 1
        if event.get("event") == "generate" and isinstance(event.get("clues"), int):
            clues.append(event["clues"])

    summary: Dict[str, Any] = {
        "files": len(files),
        "total_events": sum(by_event.values()),
        "events": dict(sorted(by_event.items())),
        "statuses": dict(sorted(by_status.items())),
    }
    if clues:
        summary["clues"] = {"min": min(clues), "max": max(clues), "mean": sum(clues) / len(clues)}
    return summary
