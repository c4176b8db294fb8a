from __future__ import annotations

import json

from engine import events as ev
from journal import log as journal
from project_config import get_section


def _read(path):
    return [json.loads(line) for line in path.read_text("utf-8").splitlines()]


def test_append_event_writes_json_lines(tmp_path) -> None:
    journal.configure(tmp_path)
    path = journal.append_event({"event": "custom", "value": 1})
    journal.append_event({"event": "custom", "value": 2})

    assert path == journal.current_log_path()
    assert path.parent.parent == tmp_path
    assert path.name == "session_00.jsonl"
    entries = _read(path)
    assert [entry["value"] for entry in entries] == [1, 2]
    assert all("ts" in entry for entry in entries)


def test_journal_rotates_when_file_is_full(tmp_path) -> None:
    journal.configure(tmp_path, max_bytes=10)
    first = journal.append_event({"event": "custom", "value": "x" * 20})
    second = journal.append_event({"event": "custom", "value": "y"})
    assert first.name == "session_00.jsonl"
    assert second.name == "session_01.jsonl"


def test_attached_channel_is_journaled(tmp_path, session) -> None:
    journal.configure(tmp_path)
    journal.attach(session.events)
    session.apply_edit(0, 1, 1)
    session.apply_edit(0, 1, 2)

    entries = _read(journal.current_log_path())
    names = [entry["event"] for entry in entries]
    assert names == [ev.EDIT_REJECTED, ev.HISTORY_CHANGED, ev.CELL_CHANGED]
    assert entries[0]["conflicts"] == [[0, 0], [3, 1]]
    assert entries[2]["value"] == 2


def test_configure_keeps_the_configured_size_limit(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(
        journal,
        "get_section",
        lambda path, default=None: 16 if path == "journal.max_bytes" else default,
    )
    journal.configure(tmp_path)
    first = journal.append_event({"event": "custom", "value": "x" * 20})
    second = journal.append_event({"event": "custom", "value": "y"})
    assert first.name == "session_00.jsonl"
    assert second.name == "session_01.jsonl"


def test_default_limit_comes_from_config(tmp_path) -> None:
    journal.configure(tmp_path)
    assert journal._max_bytes == get_section("journal.max_bytes")
