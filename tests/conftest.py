from __future__ import annotations

import random

import pytest

from engine.game import GameSession
from engine.grid import from_string, grid_copy

SOLVED = (
    "123456789"
    "456789123"
    "789123456"
    "214365897"
    "365897214"
    "897214365"
    "531642978"
    "642978531"
    "978531642"
)

# Row 0 keeps only its first cell; (1, 0) is also open.
OPEN_CELLS = [(0, c) for c in range(1, 9)] + [(1, 0)]


@pytest.fixture
def solved_grid() -> list[list[int]]:
    return from_string(SOLVED)


@pytest.fixture
def session_record(solved_grid) -> dict:
    puzzle = grid_copy(solved_grid)
    for r, c in OPEN_CELLS:
        puzzle[r][c] = 0
    return {
        "name": "fixture",
        "grid": grid_copy(puzzle),
        "solution": grid_copy(solved_grid),
        "initialGrid": puzzle,
        "timer": 0,
        "hintCount": 0,
        "difficulty": "easy",
        "timestamp": "2024-01-01T00:00:00.000+00:00",
        "id": "save-fixture",
    }


@pytest.fixture
def session(session_record) -> GameSession:
    game = GameSession(rng=random.Random(0), max_history=50)
    game.deserialize(session_record)
    return game
