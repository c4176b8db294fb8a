"""JSON file store for saved game sessions.

All records live in a single JSON array, the way the browser game kept them
under one local-storage key. The engine never touches this module; hosts move
records between it and :class:`engine.game.GameSession`.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

from contracts.errors import StorageFailure
from project_config import get_section

_LOGGER = logging.getLogger(__name__)

_REPO_ROOT = Path(__file__).resolve().parents[2]
_DEFAULT_STORE = "saves/sudoku_saves.json"


def default_store_path() -> Path:
    path = Path(str(get_section("storage.path", _DEFAULT_STORE)))
    if not path.is_absolute():
        path = _REPO_ROOT / path
    return path


class SaveStore:
    """List, add, replace and delete session records in ``path``."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else default_store_path()

    def list_records(self) -> List[Dict[str, Any]]:
        """Return all saved records; an unreadable store counts as empty."""

        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text("utf-8"))
        except (OSError, ValueError) as exc:
            _LOGGER.warning("ignoring unreadable save store %s: %s", self.path, exc)
            return []
        if not isinstance(data, list):
            _LOGGER.warning("ignoring save store %s: expected a JSON array", self.path)
            return []
        return [item for item in data if isinstance(item, dict)]

    def has_saves(self) -> bool:
        return bool(self.list_records())

    def _write(self, records: List[Dict[str, Any]]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(records, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            _LOGGER.error("could not write save store %s: %s", self.path, exc)
            raise StorageFailure("write-failed", str(exc)) from exc

    def save(self, record: Dict[str, Any]) -> str:
        """Append ``record`` and return its id."""

        record_id = record.get("id")
        if not isinstance(record_id, str) or not record_id:
            raise StorageFailure("invalid-record", "record must carry a non-empty id")
        records = self.list_records()
        if any(item.get("id") == record_id for item in records):
            raise StorageFailure("duplicate-id", record_id)
        records.append(copy.deepcopy(record))
        self._write(records)
        return record_id

    def get(self, record_id: str) -> Dict[str, Any]:
        for item in self.list_records():
            if item.get("id") == record_id:
                return item
        raise StorageFailure("not-found", record_id)

    def update(self, record: Dict[str, Any]) -> None:
        """Replace the stored record that has the same id."""

        record_id = record.get("id")
        records = self.list_records()
        for position, item in enumerate(records):
            if item.get("id") == record_id:
                records[position] = copy.deepcopy(record)
                self._write(records)
                return
        raise StorageFailure("not-found", str(record_id))

    def delete(self, record_id: str) -> None:
        records = self.list_records()
        remaining = [item for item in records if item.get("id") != record_id]
        if len(remaining) == len(records):
            raise StorageFailure("not-found", record_id)
        self._write(remaining)


__all__ = ["SaveStore", "default_store_path"]
