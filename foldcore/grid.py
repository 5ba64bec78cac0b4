"""
Per-cell (level, colour) grid handed to the external renderer, plus the two highlighted cells.
"""
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .geometry import Point
from .intersections import CellStats, Thresholds, level_of
from .palette import Palette
from .palette.colors import shift_hue

EXTREME_BASE_SHIFT = 30
EXTREME_MAX_EXTRA_SHIFT = 150
EXTREME_SHIFT_PER_WEIGHT = 300


@dataclass(frozen=True)
class Cell:
    col: int
    row: int
    weight: float
    max_gap: int
    count: int
    level: int      # 0-3 after the render-mode override
    color: str


@dataclass(frozen=True)
class CellGrid:
    cols: int
    rows: int
    cells: tuple[Cell, ...]                       # row-major
    max_gap_cell: tuple[int, int] | None
    last_fold_target_cell: tuple[int, int] | None
    thresholds: Thresholds

    def cell(self, col: int, row: int) -> Cell:
        return self.cells[row * self.cols + col]

    def level_matrix(self) -> np.ndarray:
        """Levels as a rows x cols array."""
        return np.array([c.level for c in self.cells], dtype=np.int8).reshape(self.rows, self.cols)

    def highlighted(self) -> dict[str, tuple[int, int] | None]:
        return {"max_gap_cell": self.max_gap_cell, "last_fold_target_cell": self.last_fold_target_cell}


def apply_render_mode(base_level: int, weight: float, render_mode: str) -> int:
    if render_mode == "binary":
        return 0 if weight == 0 else 3
    if render_mode == "inverted":
        return 3 - base_level
    if render_mode == "sparse":
        return 1 if base_level == 1 else 0
    if render_mode == "dense":
        return base_level if base_level >= 2 else 0
    return base_level


def find_max_gap_cell(stats: CellStats) -> tuple[int, int] | None:
    """Cell with the largest generation gap; ties go to the first in row-major order."""
    hit = stats.counts > 0
    if not hit.any():
        return None
    best = stats.max_gap[hit].max()
    rows, cols = np.nonzero((stats.max_gap == best).T & hit.T)
    return int(cols[0]), int(rows[0])


def cell_of(point: Point | None, cell_width: float, cell_height: float, cols: int, rows: int) -> tuple[int, int] | None:
    if point is None or cols <= 0 or rows <= 0:
        return None
    col = min(max(int(point.x // cell_width), 0), cols - 1)
    row = min(max(int(point.y // cell_height), 0), rows - 1)
    return col, row


def extreme_color(text_hex: str, weight: float, t_extreme: float) -> str:
    """Hue-shifted text colour; the shift grows with how far the weight exceeds t_extreme."""
    extra = min((weight - t_extreme) * EXTREME_SHIFT_PER_WEIGHT, EXTREME_MAX_EXTRA_SHIFT)
    return shift_hue(text_hex, EXTREME_BASE_SHIFT + extra)


def build_cell_grid(
    stats: CellStats,
    thresholds: Thresholds,
    palette: Palette,
    render_mode: str = "normal",
    level_colors: Sequence[str] | None = None,
    last_fold_target: Point | None = None,
    cell_width: float = 1.0,
    cell_height: float = 1.0,
) -> CellGrid:
    """
    Quantise every cell. Priority: last-fold-target cell, max-gap cell, extreme weight,
    then the render-mode level. level_colors (multi-colour palettes) colours by level;
    otherwise every level uses the text colour.
    """
    cols, rows = stats.cols, stats.rows
    accent = palette.accent or palette.text

    def color_for(level: int) -> str:
        if level_colors:
            return level_colors[min(level, 3)]
        return palette.text

    max_gap_cell = find_max_gap_cell(stats)
    target_cell = cell_of(last_fold_target, cell_width, cell_height, cols, rows)

    cells = []
    for row in range(rows):
        for col in range(cols):
            weight = float(stats.weights[col, row])
            key = (col, row)
            if key == target_cell:
                level, color = 3, accent
            elif key == max_gap_cell and weight > 0:
                level, color = 2, accent
            elif weight > 0 and weight >= thresholds.t_extreme:
                level, color = 3, extreme_color(palette.text, weight, thresholds.t_extreme)
            else:
                level = apply_render_mode(level_of(weight, thresholds), weight, render_mode)
                color = color_for(level)
            cells.append(
                Cell(col, row, weight, int(stats.max_gap[col, row]), int(stats.counts[col, row]), level, color)
            )
    return CellGrid(cols, rows, tuple(cells), max_gap_cell, target_cell, thresholds)
