"""Shared error types for the Sudoku play engine."""

from __future__ import annotations


from dataclasses import dataclass
from typing import List, Optional

SEVERITY_ERROR = "ERROR"
SEVERITY_WARN = "WARN"


class EngineError(RuntimeError):
    """Base class for recoverable engine and host-layer failures."""

    def __init__(self, code: str, detail: Optional[str] = None) -> None:
        self.code = code
        self.detail = detail
        message = code if detail is None else f"{code}:{detail}"
        super().__init__(message)


class GenerationError(EngineError):
    """Raised when backtracking fails to fill an empty grid."""


class StorageFailure(EngineError):
    """Raised when the save store cannot read or write its records."""


class MalformedSessionRecord(EngineError):
    """Raised when a session record fails schema or invariant checks."""


@dataclass(frozen=True)
class ValidationIssue:
    """Single finding produced by a grid or record check."""

    code: str
    msg: str
    path: str
    severity: str


@dataclass(frozen=True)
class ValidationReport:
    """Aggregate result of checking a grid."""

    ok: bool
    errors: List[ValidationIssue]
    warnings: List[ValidationIssue]


def make_error(code: str, msg: str, path: str) -> ValidationIssue:
    """Construct an error-level :class:`ValidationIssue`."""

    return ValidationIssue(code=code, msg=msg, path=path, severity=SEVERITY_ERROR)


def make_warning(code: str, msg: str, path: str) -> ValidationIssue:
    """Construct a warning-level :class:`ValidationIssue`."""

    return ValidationIssue(code=code, msg=msg, path=path, severity=SEVERITY_WARN)


__all__ = [
    "SEVERITY_ERROR",
    "SEVERITY_WARN",
    "EngineError",
    "GenerationError",
    "MalformedSessionRecord",
    "StorageFailure",
    "ValidationIssue",
    "ValidationReport",
    "make_error",
    "make_warning",
]
