"""Print puzzle grids onto landscape A4 PDF pages with matplotlib."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Optional, Sequence

from .config import get_section
from .grid import Grid
from .text import symbol

INCH_PER_CM = 0.3937007874


def _pdf_setting(key: str, fallback: float) -> float:
    section = get_section("pdf", {})
    value = section.get(key) if isinstance(section, dict) else None
    return float(value) if isinstance(value, (int, float)) else fallback


def _draw_grid(ax, grid: Grid, rect, font_scale: float) -> None:
    left, bottom, width, height, size_in = rect
    ax.set_position([left, bottom, width, height])
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.axis("off")

    base = grid.base_size
    size = grid.size
    for i in range(size + 1):
        lw = 3.0 if i % base == 0 else 1.0
        ax.axvline(i / size, color="k", linewidth=lw)
        ax.axhline(i / size, color="k", linewidth=lw)

    fs = max(1, int(font_scale * size_in * 72 / size))
    for cell, value in enumerate(grid.values()):
        if not value:
            continue
        row, column = divmod(cell, size)
        ax.text(
            (column + 0.5) / size,
            1 - (row + 0.5) / size,
            symbol(value),
            ha="center",
            va="center",
            fontsize=fs,
        )


def render_pdf(
    grids: Sequence[Grid],
    out_path: str | Path,
    *,
    rows: Optional[int] = None,
    cols: Optional[int] = None,
    margin_cm: Optional[float] = None,
    gap_cm: Optional[float] = None,
    footer: str = "",
) -> Path:
    """Lay ``grids`` out ``rows x cols`` per page and save them as one PDF.

    Missing layout values come from the ``[pdf]`` configuration table.
    Returns the written path.
    """

    import matplotlib.pyplot as plt
    from matplotlib.backends.backend_pdf import PdfPages

    if not grids:
        raise ValueError("nothing to print")

    rows = int(rows or _pdf_setting("rows", 2))
    cols = int(cols or _pdf_setting("cols", 2))
    margin_in = (_pdf_setting("margin_cm", 4.0) if margin_cm is None else margin_cm) * INCH_PER_CM
    gap_in = (_pdf_setting("gap_cm", 2.0) if gap_cm is None else gap_cm) * INCH_PER_CM
    page_w_in = _pdf_setting("width_cm", 29.7) * INCH_PER_CM
    page_h_in = _pdf_setting("height_cm", 21.0) * INCH_PER_CM
    font_scale = _pdf_setting("font_scale_factor", 0.65)

    avail_w = page_w_in - 2 * margin_in - (cols - 1) * gap_in
    avail_h = page_h_in - 2 * margin_in - (rows - 1) * gap_in
    grid_size = min(avail_w / cols, avail_h / rows)
    if grid_size <= 0:
        raise ValueError("margins and gaps leave no room for the grids")

    per_page = rows * cols
    pages = math.ceil(len(grids) / per_page)
    footer_y = (1.0 * INCH_PER_CM) / page_h_in

    out_path = Path(out_path)
    with PdfPages(out_path) as pdf:
        for page in range(pages):
            fig = plt.figure(figsize=(page_w_in, page_h_in))
            chunk = grids[page * per_page : (page + 1) * per_page]
            for slot, grid in enumerate(chunk):
                r, c = divmod(slot, cols)
                left_in = margin_in + c * (grid_size + gap_in)
                bottom_in = page_h_in - margin_in - (r + 1) * grid_size - r * gap_in
                ax = fig.add_axes([0, 0, 1, 1], frameon=False)
                rect = (
                    left_in / page_w_in,
                    bottom_in / page_h_in,
                    grid_size / page_w_in,
                    grid_size / page_h_in,
                    grid_size,
                )
                _draw_grid(ax, grid, rect, font_scale)

            text = f"Page {page + 1}/{pages}"
            if footer:
                text = f"{footer}    {text}"
            fig.text(0.5, footer_y, text, ha="center", va="bottom", fontsize=8)
            pdf.savefig(fig)
            plt.close(fig)
    return out_path


__all__ = ["render_pdf"]
