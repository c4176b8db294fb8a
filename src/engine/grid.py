# grid.py
# 9x9 grid helpers shared by the validator, generator, carver and session.

from typing import Iterator, List, Tuple

Grid = List[List[int]]
Cell = Tuple[int, int]

SIZE = 9
BOX = 3
CELLS = SIZE * SIZE
DIGITS = tuple(range(1, SIZE + 1))

# ---------- Construction / copies ----------

def empty_grid() -> Grid:
    return [[0] * SIZE for _ in range(SIZE)]

def empty_marks() -> List[List[bool]]:
    return [[False] * SIZE for _ in range(SIZE)]

def grid_copy(g: Grid) -> Grid:
    return [row[:] for row in g]

# ---------- String codec ----------

def to_string(g: Grid) -> str:
    return ''.join(str(g[r][c] or 0) for r in range(SIZE) for c in range(SIZE))

def from_string(s: str) -> Grid:
    s = s.strip().replace("\n", "").replace(" ", "")
    if len(s) != CELLS:
        raise ValueError(f"grid string must contain {CELLS} cells, got {len(s)}")
    grid = []
    k = 0
    for r in range(SIZE):
        row = []
        for c in range(SIZE):
            ch = s[k]; k += 1
            row.append(int(ch) if ch.isdigit() and ch != '0' else 0)
        grid.append(row)
    return grid

def print_grid(g: Grid) -> str:
    lines = []
    for r in range(SIZE):
        if r % BOX == 0:
            lines.append("+-------+-------+-------+")
        row = []
        for c in range(SIZE):
            v = g[r][c]
            row.append(str(v) if v != 0 else ".")
            if c % BOX == BOX - 1:
                row.append("|")
        lines.append("| " + " ".join(row[:-1]) + " |")
    lines.append("+-------+-------+-------+")
    return "\n".join(lines)

# ---------- Geometry ----------

def box_origin(row: int, col: int) -> Cell:
    return (row // BOX) * BOX, (col // BOX) * BOX

def box_cells(box_row: int, box_col: int) -> List[Cell]:
    """Cells of box (box_row, box_col) in box-local row-major order."""
    r0, c0 = box_row * BOX, box_col * BOX
    return [(r, c) for r in range(r0, r0 + BOX) for c in range(c0, c0 + BOX)]

def iter_cells() -> Iterator[Cell]:
    for r in range(SIZE):
        for c in range(SIZE):
            yield r, c

def count_filled(g: Grid) -> int:
    return sum(1 for r, c in iter_cells() if g[r][c] != 0)

def check_cell(row: int, col: int) -> None:
    if not (0 <= row < SIZE and 0 <= col < SIZE):
        raise ValueError(f"cell ({row}, {col}) is outside the {SIZE}x{SIZE} grid")

def check_value(value: int) -> None:
    if not (isinstance(value, int) and 0 <= value <= SIZE):
        raise ValueError(f"value must be an integer within 0..{SIZE}, got {value!r}")
