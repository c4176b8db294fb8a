"""Derive a playable puzzle from a complete solution.

Carving runs in two phases. Each 3x3 box first keeps a random number of clues
laid out by the profile's distribution strategy, which gives the puzzle its
texture. A global pass then removes or restores random clues until the grid
holds exactly ``profile.total_target`` of them. The second pass may disturb
the per-box shape; the clue count is the guarantee, the shape is not.
"""

from __future__ import annotations

import logging
import os
import random
from typing import Callable, Dict, List, Optional, Sequence

from contracts.profiles import (
    DISTRIBUTION_BALANCED,
    DISTRIBUTION_MINIMAL,
    DISTRIBUTION_SCATTERED,
    DifficultyProfile,
)
from feature_flags import is_uniqueness_check_enabled
from project_config import get_section

from .generator import has_unique_solution
from .grid import BOX, Cell, Grid, box_cells, count_filled, grid_copy, iter_cells

_LOGGER = logging.getLogger(__name__)

# Box-local row-major indices.
CORNERS = (0, 2, 6, 8)
EDGES = (1, 3, 5, 7)
CENTER = 4

DEFAULT_MAX_UNIQUE_ATTEMPTS = 20


def _shuffled(items: Sequence[Cell], rng: random.Random) -> List[Cell]:
    out = list(items)
    rng.shuffle(out)
    return out


def scattered_positions(positions: Sequence[Cell], count: int, rng: random.Random) -> List[Cell]:
    """Spread clues over the rim of the box, center only as a last resort."""

    corners = [positions[i] for i in CORNERS]
    edges = [positions[i] for i in EDGES]

    if count <= 2:
        return _shuffled(corners, rng)[:count]
    if count <= 4:
        selected = _shuffled(corners, rng)[: min(2, count)]
        if len(selected) < count:
            selected.extend(_shuffled(edges, rng)[: count - len(selected)])
        return selected

    selected = _shuffled(corners + edges, rng)[: min(count, 8)]
    if len(selected) < count:
        selected.append(positions[CENTER])
    return selected


def balanced_positions(positions: Sequence[Cell], count: int, rng: random.Random) -> List[Cell]:
    """Uniform choice among all nine positions."""

    return _shuffled(positions, rng)[:count]


def minimal_positions(positions: Sequence[Cell], count: int, rng: random.Random) -> List[Cell]:
    """Sparse boxes keep corners, then edges; the center is avoided."""

    corners = [positions[i] for i in CORNERS]
    edges = [positions[i] for i in EDGES]

    if count <= 2:
        return _shuffled(corners + edges, rng)[:count]
    if count <= 4:
        selected = _shuffled(corners, rng)[: min(count, 4)]
        if len(selected) < count:
            selected.extend(_shuffled(edges, rng)[: count - len(selected)])
        if len(selected) < count:
            selected.append(positions[CENTER])
        return selected

    return _shuffled(positions, rng)[:count]


STRATEGIES: Dict[str, Callable[[Sequence[Cell], int, random.Random], List[Cell]]] = {
    DISTRIBUTION_SCATTERED: scattered_positions,
    DISTRIBUTION_BALANCED: balanced_positions,
    DISTRIBUTION_MINIMAL: minimal_positions,
}


def carve_box(
    puzzle: Grid,
    solution: Grid,
    box_row: int,
    box_col: int,
    profile: DifficultyProfile,
    rng: random.Random,
) -> List[Cell]:
    """Keep a strategy-selected subset of one box and return the kept cells."""

    positions = box_cells(box_row, box_col)
    keep_count = rng.randint(profile.min_clues, profile.max_clues)
    keep = STRATEGIES[profile.distribution](positions, keep_count, rng)

    for r, c in positions:
        puzzle[r][c] = 0
    for r, c in keep:
        puzzle[r][c] = solution[r][c]
    return keep


def adjust_total(puzzle: Grid, solution: Grid, target: int, rng: random.Random) -> int:
    """Remove or restore random clues until ``target`` remain; return the delta."""

    current = count_filled(puzzle)
    if current > target:
        filled = _shuffled([(r, c) for r, c in iter_cells() if puzzle[r][c] != 0], rng)
        for r, c in filled[: current - target]:
            puzzle[r][c] = 0
    elif current < target:
        empty = _shuffled([(r, c) for r, c in iter_cells() if puzzle[r][c] == 0], rng)
        for r, c in empty[: target - current]:
            puzzle[r][c] = solution[r][c]
    return target - current


def _carve_once(solution: Grid, profile: DifficultyProfile, rng: random.Random) -> Grid:
    puzzle = grid_copy(solution)
    for box_row in range(BOX):
        for box_col in range(BOX):
            carve_box(puzzle, solution, box_row, box_col, profile, rng)
    delta = adjust_total(puzzle, solution, profile.total_target, rng)
    _LOGGER.debug(
        "carved %s puzzle: per-box phase off by %+d from target %d",
        profile.name,
        delta,
        profile.total_target,
    )
    return puzzle


def carve(
    solution: Grid,
    profile: DifficultyProfile,
    *,
    rng: Optional[random.Random] = None,
    ensure_unique: Optional[bool] = None,
) -> Grid:
    """Return a copy of ``solution`` with cells zeroed according to ``profile``.

    ``ensure_unique`` defaults to the ``carver.ensure_unique`` feature flag.
    When enabled, carving is repeated with fresh draws until the puzzle has a
    single solution or the attempt budget runs out; the last attempt is
    returned in that case.
    """

    if rng is None:
        rng = random.Random()
    if ensure_unique is None:
        ensure_unique = is_uniqueness_check_enabled(os.environ, difficulty=profile.name)

    puzzle = _carve_once(solution, profile, rng)
    if not ensure_unique:
        return puzzle

    attempts = int(get_section("generator.max_unique_attempts", DEFAULT_MAX_UNIQUE_ATTEMPTS))
    for attempt in range(1, max(1, attempts) + 1):
        if has_unique_solution(puzzle):
            _LOGGER.debug("unique %s puzzle after %d attempt(s)", profile.name, attempt)
            return puzzle
        if attempt < attempts:
            puzzle = _carve_once(solution, profile, rng)

    _LOGGER.warning(
        "no unique %s puzzle within %d attempts; keeping the last carve",
        profile.name,
        attempts,
    )
    return puzzle


__all__ = [
    "CENTER",
    "CORNERS",
    "EDGES",
    "STRATEGIES",
    "adjust_total",
    "balanced_positions",
    "carve",
    "carve_box",
    "minimal_positions",
    "scattered_positions",
]
