"""Contracts shared by the engine and its hosts: errors, profiles, record schema."""

from __future__ import annotations

from .errors import (
    EngineError,
    GenerationError,
    MalformedSessionRecord,
    StorageFailure,
    ValidationIssue,
    ValidationReport,
)
from .profiles import DifficultyProfile, get_profile
from .session_schema import validate_session_record

__all__ = [
    "DifficultyProfile",
    "EngineError",
    "GenerationError",
    "MalformedSessionRecord",
    "StorageFailure",
    "ValidationIssue",
    "ValidationReport",
    "get_profile",
    "validate_session_record",
]
