"""Sudoku puzzle engine: generation, carving, validation and play."""

from __future__ import annotations

from .carver import carve
from .events import EventChannel
from .game import EditResult, GameSession, format_time
from .generator import count_solutions, generate_solution, has_unique_solution
from .history import History, Operation
from .validator import find_conflicts, find_errors, is_complete, is_legal

__all__ = [
    "EditResult",
    "EventChannel",
    "GameSession",
    "History",
    "Operation",
    "carve",
    "count_solutions",
    "find_conflicts",
    "find_errors",
    "format_time",
    "generate_solution",
    "has_unique_solution",
    "is_complete",
    "is_legal",
]
