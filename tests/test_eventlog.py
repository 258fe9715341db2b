from __future__ import annotations

import json
from pathlib import Path

import pytest

from sudokugen import eventlog


def test_events_rotate_and_summarise(tmp_path: Path) -> None:
    eventlog.configure(tmp_path, max_bytes=200)
    for clues in (20, 22, 24, 26):
        eventlog.record("generate", "ok", size=3, clues=clues)
    eventlog.record("solve", "unsolvable")

    files = sorted(tmp_path.glob("**/*.jsonl"))
    assert len(files) > 1
    assert files[0].name == "events_00.jsonl"
    assert eventlog.current_log_path() == files[-1]

    summary = eventlog.summarize(tmp_path)
    assert summary["files"] == len(files)
    assert summary["total_events"] == 5
    assert summary["events"] == {"generate": 4, "solve": 1}
    assert summary["statuses"] == {"generate:ok": 4, "solve:unsolvable": 1}
    assert summary["clues"] == {"min": 20, "max": 26, "mean": 23.0}


def test_append_event_adds_timestamp(tmp_path: Path) -> None:
    eventlog.configure(tmp_path)
    path = eventlog.append_event({"event": "check", "status": "ok", "solutions": 1})

    (line,) = path.read_text(encoding="utf-8").splitlines()
    payload = json.loads(line)
    assert payload["event"] == "check"
    assert "ts" in payload
    assert list(eventlog.iter_events([path])) == [payload]


def test_event_name_is_required(tmp_path: Path) -> None:
    eventlog.configure(tmp_path)
    with pytest.raises(ValueError):
        eventlog.append_event({"status": "ok"})


def test_reconfigure_resumes_after_the_highest_file(tmp_path: Path) -> None:
    eventlog.configure(tmp_path, max_bytes=50)
    first = eventlog.record("solve", "solved", nodes=12)
    second = eventlog.record("solve", "solved", nodes=7)
    assert first.name == "events_00.jsonl"
    assert second.name == "events_01.jsonl"

    eventlog.configure(tmp_path, max_bytes=50)
    assert eventlog.current_log_path() is None
    third = eventlog.record("check", "ok")
    assert third.name == "events_02.jsonl"
    assert eventlog.summarize(tmp_path)["total_events"] == 3
