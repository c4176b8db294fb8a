# generator.py
# Fill an empty grid into a complete solution by randomized backtracking and
# count solutions of partially filled grids.

from typing import List, Optional

import logging
import random

from contracts.errors import GenerationError

from .grid import DIGITS, SIZE, Grid, box_origin, empty_grid, grid_copy
from .validator import is_legal

_LOGGER = logging.getLogger(__name__)

# ---------- Full solution generator ----------


def _first_empty(grid: Grid):
    for r in range(SIZE):
        for c in range(SIZE):
            if grid[r][c] == 0:
                return r, c
    return None


def generate_solution(seed=None, *, rng: Optional[random.Random] = None) -> Grid:
    """Return a completely filled, row/column/box-valid grid.

    Cells are visited in row-major order and the candidates 1..9 are shuffled
    afresh for every cell, so two calls with different seeds give different
    solutions. Pass ``rng`` to share one random source with the carver.
    """
    if rng is None:
        rng = random.Random(seed)
    grid = empty_grid()
    nodes = 0

    def solve() -> bool:
        nonlocal nodes
        cell = _first_empty(grid)
        if cell is None:
            return True  # all 81 cells filled
        r, c = cell
        cand = list(DIGITS)
        rng.shuffle(cand)
        for d in cand:
            if not is_legal(grid, r, c, d):
                continue
            nodes += 1
            grid[r][c] = d
            if solve():
                return True
            grid[r][c] = 0
        return False

    if not solve():
        raise GenerationError("backtrack-exhausted", "no candidate fits the root cell")
    _LOGGER.debug("generated solution after %d placements", nodes)
    return grid

# ---------- Uniqueness checker (count up to limit) ----------

def count_solutions(puzzle: Grid, limit: int = 2) -> int:
    """Count the solutions of ``puzzle``, stopping once ``limit`` are found."""
    rows_used = [set() for _ in range(SIZE)]
    cols_used = [set() for _ in range(SIZE)]
    boxes_used = [set() for _ in range(SIZE)]
    g = grid_copy(puzzle)

    def box_idx(r, c):
        r0, c0 = box_origin(r, c)
        return r0 + c0 // 3

    empties: List = []
    for r in range(SIZE):
        for c in range(SIZE):
            v = g[r][c]
            if v == 0:
                empties.append((r, c))
                continue
            bi = box_idx(r, c)
            if v in rows_used[r] or v in cols_used[c] or v in boxes_used[bi]:
                return 0  # the givens already clash
            rows_used[r].add(v); cols_used[c].add(v); boxes_used[bi].add(v)

    def candidates(r, c):
        bi = box_idx(r, c)
        return [d for d in DIGITS if d not in rows_used[r] and d not in cols_used[c] and d not in boxes_used[bi]]

    empties.sort(key=lambda rc: len(candidates(*rc)))
    solutions = 0

    def backtrack(i: int) -> bool:
        nonlocal solutions
        if i == len(empties):
            solutions += 1
            return solutions >= limit
        r, c = empties[i]
        bi = box_idx(r, c)
        for d in candidates(r, c):
            g[r][c] = d
            rows_used[r].add(d); cols_used[c].add(d); boxes_used[bi].add(d)
            stop = backtrack(i + 1)
            rows_used[r].remove(d); cols_used[c].remove(d); boxes_used[bi].remove(d)
            g[r][c] = 0
            if stop:
                return True
        return False

    backtrack(0)
    return solutions


def has_unique_solution(puzzle: Grid) -> bool:
    return count_solutions(puzzle, limit=2) == 1


__all__ = ["count_solutions", "generate_solution", "has_unique_solution"]
