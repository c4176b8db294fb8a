from __future__ import annotations

from engine.grid import empty_grid, from_string, grid_copy
from engine.validator import find_conflicts, find_errors, is_complete, is_legal

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


def test_legal_on_empty_grid() -> None:
    grid = empty_grid()
    assert is_legal(grid, 4, 4, 5) is True
    assert find_conflicts(grid, 4, 4, 5) == set()


def test_row_column_and_box_conflicts_are_reported() -> None:
    grid = empty_grid()
    grid[0][8] = 7  # same row
    grid[8][0] = 7  # same column
    grid[1][1] = 7  # same box
    grid[5][5] = 7  # unrelated
    assert is_legal(grid, 0, 0, 7) is False
    assert find_conflicts(grid, 0, 0, 7) == {(0, 8), (8, 0), (1, 1)}


def test_target_cell_is_not_compared_with_itself() -> None:
    grid = empty_grid()
    grid[3][3] = 9
    assert is_legal(grid, 3, 3, 9) is True
    assert find_conflicts(grid, 3, 3, 9) == set()


def test_conflict_detection_is_symmetric() -> None:
    grid = empty_grid()
    grid[2][2] = 4
    conflicts = find_conflicts(grid, 0, 0, 4)
    assert conflicts == {(2, 2)}

    grid[0][0] = 4
    assert (0, 0) in find_conflicts(grid, 2, 2, 4)


def test_cell_sharing_row_and_box_is_reported_once() -> None:
    grid = empty_grid()
    grid[0][1] = 3
    assert find_conflicts(grid, 0, 0, 3) == {(0, 1)}


def test_complete_grid_is_complete() -> None:
    assert is_complete(from_string(SOLVED)) is True


def test_grid_with_empty_cell_is_not_complete() -> None:
    grid = from_string(SOLVED)
    grid[4][4] = 0
    assert is_complete(grid) is False


def test_grid_with_duplicate_is_not_complete() -> None:
    grid = from_string(SOLVED)
    # swapping two cells of a row keeps the row valid but breaks their columns
    grid[0][0], grid[0][1] = grid[0][1], grid[0][0]
    assert is_complete(grid) is False


def test_find_errors_lists_every_clashing_cell() -> None:
    grid = from_string(SOLVED)
    assert find_errors(grid) == []

    broken = grid_copy(grid)
    broken[0][0] = broken[0][1]
    errors = find_errors(broken)
    assert (0, 0) in errors
    assert (0, 1) in errors
    assert errors == sorted(errors)
