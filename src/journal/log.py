"""Append-only record of session events, one JSON object per line.

Files are grouped by UTC day (``<dir>/<YYYYMMDD>/session_NN.jsonl``). Once
the active file reaches ``max_bytes`` the next event opens the following
number. Directory and size limit default to the ``[journal]`` settings.
"""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from engine.events import ALL, EventChannel
from project_config import get_section

__all__ = ["attach", "configure", "append_event", "current_log_path"]

_FALLBACK_MAX_BYTES = 10 * 1024 * 1024
_WRITE_LOCK = threading.Lock()


def _configured_dir() -> Path:
    return Path(str(get_section("journal.dir", "logs/sessions")))


def _configured_max_bytes() -> int:
    return int(get_section("journal.max_bytes", _FALLBACK_MAX_BYTES))


_journal_dir = _configured_dir()
_max_bytes = _configured_max_bytes()
_active_file: Path | None = None


def configure(base_dir: str | Path, *, max_bytes: int | None = None) -> None:
    """Send subsequent events under ``base_dir``.

    ``max_bytes`` overrides the ``journal.max_bytes`` setting for this process.
    """

    global _journal_dir, _max_bytes, _active_file
    _journal_dir = Path(base_dir)
    _max_bytes = max_bytes or _configured_max_bytes()
    _active_file = None


def _has_room(path: Path) -> bool:
    return not path.exists() or path.stat().st_size < _max_bytes


def _target_file() -> Path:
    global _active_file
    day_dir = _journal_dir / datetime.now(timezone.utc).strftime("%Y%m%d")
    day_dir.mkdir(parents=True, exist_ok=True)

    if _active_file is not None and _active_file.parent == day_dir and _has_room(_active_file):
        return _active_file

    number = 0
    while not _has_room(day_dir / f"session_{number:02d}.jsonl"):
        number += 1
    _active_file = day_dir / f"session_{number:02d}.jsonl"
    return _active_file


def append_event(event: Dict[str, Any]) -> Path:
    """Write ``event`` as one line, stamping ``ts`` when absent; return the file."""

    entry = dict(event)
    entry.setdefault("ts", datetime.now(timezone.utc).isoformat(timespec="milliseconds"))
    # conflict sets serialise as arrays
    line = json.dumps(entry, sort_keys=True, ensure_ascii=False, default=list)
    with _WRITE_LOCK:
        path = _target_file()
        with path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")
    return path


def attach(channel: EventChannel) -> None:
    """Journal every event emitted on ``channel`` under its event name."""

    def _on_event(name: str, payload: Dict[str, Any]) -> None:
        append_event({"event": name, **payload})

    channel.subscribe(ALL, _on_event)


def current_log_path() -> Path | None:
    return _active_file
