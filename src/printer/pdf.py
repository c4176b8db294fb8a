"""Render puzzles and play sessions to a landscape PDF using project configuration."""

from __future__ import annotations

import datetime as _dt
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.backends.backend_pdf import PdfPages  # noqa: E402

from engine.game import GameSession, format_time  # noqa: E402
from engine.grid import BOX, SIZE, Grid, count_filled  # noqa: E402
from project_config import get_config  # noqa: E402


CONFIG = get_config()
PDF_CONFIG = CONFIG.get("pdf", {})


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


LAYOUT_CONFIG = _as_dict(PDF_CONFIG.get("layout"))
PAGE_CONFIG = _as_dict(PDF_CONFIG.get("page"))
RENDER_CONFIG = _as_dict(PDF_CONFIG.get("rendering"))
OUTPUT_CONFIG = _as_dict(PDF_CONFIG.get("output"))

LAYOUT_ROWS = int(LAYOUT_CONFIG.get("rows", 2))
LAYOUT_COLS = int(LAYOUT_CONFIG.get("cols", 2))
PUZZLES_PER_PAGE = max(1, LAYOUT_ROWS * LAYOUT_COLS)

DEFAULT_MARGIN_CM = float(PAGE_CONFIG.get("margin_cm", 4.0))
DEFAULT_GAP_CM = float(PAGE_CONFIG.get("gap_cm", 2.0))
PAGE_WIDTH_CM = float(PAGE_CONFIG.get("width_cm", 29.7))
PAGE_HEIGHT_CM = float(PAGE_CONFIG.get("height_cm", 21.0))
FOOTER_OFFSET_CM = float(PAGE_CONFIG.get("footer_offset_cm", 1.0))
FONT_SCALE = float(RENDER_CONFIG.get("font_scale_factor", 0.65))
GIVEN_COLOR = str(RENDER_CONFIG.get("given_color", "black"))
ENTRY_COLOR = str(RENDER_CONFIG.get("entry_color", "#2b6cb0"))
HINT_COLOR = str(RENDER_CONFIG.get("hint_color", "#c05621"))
OUTPUT_PREFIX = str(OUTPUT_CONFIG.get("filename_prefix", "sudoku_9x9"))
INCH_PER_CM = 0.3937007874


def default_output_path() -> Path:
    timestamp = _dt.datetime.now().strftime("%Y%m%d_%H%M%S")
    return Path(f"{OUTPUT_PREFIX}_{timestamp}.pdf")


def _draw_grid(
    ax,
    grid: Grid,
    size_in: float,
    *,
    givens: Optional[Grid] = None,
    hints: Optional[List[List[bool]]] = None,
) -> None:
    ax.tick_params(axis='both', which='both', bottom=False, top=False, left=False, right=False, labelbottom=False, labelleft=False)
    for i in range(SIZE + 1):
        lw = 1.5 if i % BOX else 3.0
        ax.axvline(i / SIZE, color='k', linewidth=lw)
        ax.axhline(i / SIZE, color='k', linewidth=lw)
    ax.set_xlim(0, 1); ax.set_ylim(0, 1); ax.axis('off')
    fs = int(FONT_SCALE * size_in * 72 / SIZE)  # font size scaled to grid
    for r in range(SIZE):
        for c in range(SIZE):
            v = grid[r][c]
            if not v:
                continue
            color, weight = GIVEN_COLOR, 'bold'
            if givens is not None and not givens[r][c]:
                color, weight = ENTRY_COLOR, 'normal'
                if hints is not None and hints[r][c]:
                    color = HINT_COLOR
            x = (c + 0.5) / SIZE
            y = 1 - (r + 0.5) / SIZE
            ax.text(x, y, str(v), ha='center', va='center', fontsize=fs, color=color, fontweight=weight)


def _page_geometry(margin_cm: float, gap_cm: float):
    page_w_in = PAGE_WIDTH_CM * INCH_PER_CM
    page_h_in = PAGE_HEIGHT_CM * INCH_PER_CM
    margin_in = margin_cm * INCH_PER_CM
    gap_in = gap_cm * INCH_PER_CM
    avail_w = page_w_in - 2 * margin_in - (LAYOUT_COLS - 1) * gap_in
    avail_h = page_h_in - 2 * margin_in - (LAYOUT_ROWS - 1) * gap_in
    grid_size = min(avail_w / LAYOUT_COLS, avail_h / LAYOUT_ROWS)
    lefts = [margin_in + col * (grid_size + gap_in) for col in range(LAYOUT_COLS)]
    # rows are laid out top to bottom
    bottoms = [page_h_in - margin_in - (row + 1) * grid_size - row * gap_in for row in range(LAYOUT_ROWS)]
    return page_w_in, page_h_in, grid_size, lefts, bottoms


def render_grids(
    grids: Sequence[Grid],
    out_path: str | Path,
    *,
    titles: Optional[Sequence[str]] = None,
    margin_cm: float = DEFAULT_MARGIN_CM,
    gap_cm: float = DEFAULT_GAP_CM,
) -> Path:
    """Lay ``grids`` out on as many pages as needed and return the PDF path."""

    if not grids:
        raise ValueError("at least one grid is required")
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    page_w_in, page_h_in, grid_size, lefts, bottoms = _page_geometry(margin_cm, gap_cm)
    footer_y_pos_norm = (FOOTER_OFFSET_CM * INCH_PER_CM) / page_h_in
    pages = math.ceil(len(grids) / PUZZLES_PER_PAGE)

    with PdfPages(out) as pdf:
        for page_num in range(pages):
            fig = plt.figure(figsize=(page_w_in, page_h_in))
            try:
                start_idx = page_num * PUZZLES_PER_PAGE
                page_grids = grids[start_idx : start_idx + PUZZLES_PER_PAGE]
                for idx_on_page, grid in enumerate(page_grids):
                    row, col = divmod(idx_on_page, LAYOUT_COLS)
                    ax = fig.add_axes([
                        lefts[col] / page_w_in,
                        bottoms[row] / page_h_in,
                        grid_size / page_w_in,
                        grid_size / page_h_in,
                    ], frameon=False)
                    _draw_grid(ax, grid, grid_size)
                if titles:
                    page_titles = titles[start_idx : start_idx + PUZZLES_PER_PAGE]
                    fig.text(0.5, footer_y_pos_norm, "    ".join(page_titles), ha='center', va='bottom', fontsize=8)
                pdf.savefig(fig)
            finally:
                plt.close(fig)
    return out


def render_session(session: GameSession, out_path: str | Path) -> Path:
    """Render the current board of ``session`` on a single page."""

    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    page_w_in = PAGE_WIDTH_CM * INCH_PER_CM
    page_h_in = PAGE_HEIGHT_CM * INCH_PER_CM
    margin_in = DEFAULT_MARGIN_CM * INCH_PER_CM
    size_in = min(page_w_in, page_h_in) - 2 * margin_in
    filled, total = session.progress()
    footer = (
        f"Difficulty: {session.difficulty}    Time: {format_time(session.timer)}    "
        f"Hints: {session.hint_count}    Filled: {filled}/{total}    Clues: {count_filled(session.initial_grid)}"
    )

    with PdfPages(out) as pdf:
        fig = plt.figure(figsize=(page_w_in, page_h_in))
        try:
            ax = fig.add_axes([
                (page_w_in - size_in) / 2 / page_w_in,
                (page_h_in - size_in) / 2 / page_h_in,
                size_in / page_w_in,
                size_in / page_h_in,
            ], frameon=False)
            _draw_grid(ax, session.grid, size_in, givens=session.initial_grid, hints=session.hint_numbers)
            fig.text(0.5, (FOOTER_OFFSET_CM * INCH_PER_CM) / page_h_in, footer, ha='center', va='bottom', fontsize=8)
            pdf.savefig(fig)
        finally:
            plt.close(fig)
    return out


__all__ = ["default_output_path", "render_grids", "render_session"]
