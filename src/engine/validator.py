"""Placement legality, conflict detection and completion checks.

Every function here is a pure function of the grid snapshot it receives.
The target cell itself is never compared against ``value``; callers that
overwrite a cell get the right answer without clearing it first.
"""

from __future__ import annotations

from typing import List, Set

from .grid import BOX, SIZE, Cell, Grid, box_origin, iter_cells


def find_conflicts(grid: Grid, row: int, col: int, value: int) -> Set[Cell]:
    """Return every other cell in the row, column or box that holds ``value``."""

    conflicts: Set[Cell] = set()
    for c in range(SIZE):
        if c != col and grid[row][c] == value:
            conflicts.add((row, c))
    for r in range(SIZE):
        if r != row and grid[r][col] == value:
            conflicts.add((r, col))
    r0, c0 = box_origin(row, col)
    for r in range(r0, r0 + BOX):
        for c in range(c0, c0 + BOX):
            if (r != row or c != col) and grid[r][c] == value:
                conflicts.add((r, c))
    return conflicts


def is_legal(grid: Grid, row: int, col: int, value: int) -> bool:
    """Return ``True`` when no peer of ``(row, col)`` already holds ``value``."""

    for c in range(SIZE):
        if c != col and grid[row][c] == value:
            return False
    for r in range(SIZE):
        if r != row and grid[r][col] == value:
            return False
    r0, c0 = box_origin(row, col)
    for r in range(r0, r0 + BOX):
        for c in range(c0, c0 + BOX):
            if (r != row or c != col) and grid[r][c] == value:
                return False
    return True


def is_complete(grid: Grid) -> bool:
    """Return ``True`` for a fully filled grid without any duplicate."""

    if any(grid[r][c] == 0 for r, c in iter_cells()):
        return False
    return all(is_legal(grid, r, c, grid[r][c]) for r, c in iter_cells())


def find_errors(grid: Grid) -> List[Cell]:
    """Return the non-empty cells whose value clashes with a peer, row-major."""

    return [
        (r, c)
        for r, c in iter_cells()
        if grid[r][c] != 0 and not is_legal(grid, r, c, grid[r][c])
    ]


__all__ = ["find_conflicts", "find_errors", "is_complete", "is_legal"]
