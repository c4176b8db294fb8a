"""JSON Schema validation for persisted session records."""

from __future__ import annotations

import copy
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Mapping

import jsonschema

from .errors import MalformedSessionRecord

_SCHEMA_ROOT = Path(__file__).resolve().parent / "schemas"
SESSION_RECORD_SCHEMA = "session_record.schema.json"

_schema_cache: Dict[str, Dict[str, Any]] = {}
_compiled_cache: Dict[str, Any] = {}


def load_schema(schema_path: str = SESSION_RECORD_SCHEMA) -> Dict[str, Any]:
    """Load a schema shipped in the ``contracts/schemas`` directory."""

    if "://" in schema_path:
        raise ValueError("Remote schema paths are not permitted")

    resolved = (_SCHEMA_ROOT / schema_path).resolve()
    if not str(resolved).startswith(str(_SCHEMA_ROOT)):
        raise ValueError("Schema path escapes the schemas directory")

    cache_key = str(resolved)
    if cache_key not in _schema_cache:
        try:
            _schema_cache[cache_key] = json.loads(resolved.read_text("utf-8"))
        except FileNotFoundError as exc:  # pragma: no cover - defensive
            raise MalformedSessionRecord("schema-not-found", schema_path) from exc
    return copy.deepcopy(_schema_cache[cache_key])


def _validator(schema_path: str = SESSION_RECORD_SCHEMA) -> Any:
    if schema_path in _compiled_cache:
        return _compiled_cache[schema_path]

    schema = load_schema(schema_path)
    validator_cls = jsonschema.validators.validator_for(schema)
    validator_cls.check_schema(schema)
    validator = validator_cls(schema)
    _compiled_cache[schema_path] = validator
    return validator


def _invariant(detail: str) -> None:
    raise MalformedSessionRecord("invariant-violation", detail)


def _validate_givens(record: Mapping[str, Any]) -> None:
    grid = record["grid"]
    initial = record["initialGrid"]
    for r in range(9):
        for c in range(9):
            given = initial[r][c]
            if given != 0 and grid[r][c] != given:
                _invariant(f"grid[{r}][{c}] must keep the given {given}")


def _validate_timestamp(record: Mapping[str, Any]) -> None:
    value = record["timestamp"]
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise MalformedSessionRecord("invariant-violation", "timestamp must be ISO8601") from exc


def validate_session_record(record: Any) -> None:
    """Raise :class:`MalformedSessionRecord` unless ``record`` is loadable.

    JSON Schema covers shapes and value ranges; the manual checks that follow
    cover cross-field invariants the schema cannot express.
    """

    if not isinstance(record, Mapping):
        raise MalformedSessionRecord("invalid-record", "record must be an object")

    validator = _validator()
    error = jsonschema.exceptions.best_match(validator.iter_errors(dict(record)))
    if error is not None:
        location = "/".join(str(part) for part in error.absolute_path) or "<root>"
        raise MalformedSessionRecord("schema-violation", f"{location}: {error.message}")

    _validate_givens(record)
    _validate_timestamp(record)


__all__ = ["SESSION_RECORD_SCHEMA", "load_schema", "validate_session_record"]
