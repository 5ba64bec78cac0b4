"""
Cell grid hand-off: render-mode overrides, highlight cells, colouring.
Run from project root: python -m pytest tests/ -v
"""
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _palette():
    from foldcore.palette import Palette

    return Palette("#000000", "#FFFFFF", "#FF0000", "dark/value+accent", "dark/value+accent", 3)


def _stats(cells, cols=3, rows=2):
    """cells: {(col, row): (weight, max_gap, count)}"""
    import numpy as np

    from foldcore.intersections import CellStats

    weights = np.zeros((cols, rows))
    gaps = np.zeros((cols, rows), dtype=np.int64)
    counts = np.zeros((cols, rows), dtype=np.int64)
    for (col, row), (w, g, n) in cells.items():
        weights[col, row], gaps[col, row], counts[col, row] = w, g, n
    return CellStats(weights, gaps, counts)


class TestRenderModes(unittest.TestCase):

    def test_overrides(self):
        from foldcore.grid import apply_render_mode

        self.assertEqual(apply_render_mode(2, 1.0, "normal"), 2)
        self.assertEqual(apply_render_mode(0, 0.0, "binary"), 0)
        self.assertEqual(apply_render_mode(1, 0.2, "binary"), 3)
        self.assertEqual(apply_render_mode(1, 0.2, "inverted"), 2)
        self.assertEqual(apply_render_mode(0, 0.0, "inverted"), 3)
        self.assertEqual(apply_render_mode(1, 0.2, "sparse"), 1)
        self.assertEqual(apply_render_mode(3, 5.0, "sparse"), 0)
        self.assertEqual(apply_render_mode(1, 0.2, "dense"), 0)
        self.assertEqual(apply_render_mode(3, 5.0, "dense"), 3)


class TestHighlights(unittest.TestCase):

    def test_max_gap_tie_goes_to_first_row_major(self):
        from foldcore.grid import find_max_gap_cell

        stats = _stats({(2, 0): (1.0, 5, 1), (0, 1): (1.0, 5, 1), (1, 1): (1.0, 2, 1)})
        self.assertEqual(find_max_gap_cell(stats), (2, 0))

    def test_no_hits_no_max_gap_cell(self):
        from foldcore.grid import find_max_gap_cell

        self.assertIsNone(find_max_gap_cell(_stats({})))

    def test_cell_of_clamps(self):
        from foldcore.geometry import Point
        from foldcore.grid import cell_of

        self.assertEqual(cell_of(Point(15, 9), 10, 10, 3, 2), (1, 0))
        self.assertEqual(cell_of(Point(999, 999), 10, 10, 3, 2), (2, 1))
        self.assertIsNone(cell_of(None, 10, 10, 3, 2))


class TestBuildCellGrid(unittest.TestCase):

    def test_priorities_and_colors(self):
        from foldcore.geometry import Point
        from foldcore.grid import build_cell_grid
        from foldcore.intersections import Thresholds

        stats = _stats({(0, 0): (0.5, 1, 1), (1, 0): (2.0, 4, 2), (2, 0): (50.0, 1, 9), (0, 1): (1.0, 1, 1)})
        thresholds = Thresholds(1.0, 2.0, 3.0, 10.0)
        grid = build_cell_grid(
            stats, thresholds, _palette(), "normal", None, Point(5, 15), cell_width=10, cell_height=10
        )
        self.assertEqual((grid.cols, grid.rows), (3, 2))
        self.assertEqual(len(grid.cells), 6)
        self.assertEqual(grid.max_gap_cell, (1, 0))
        self.assertEqual(grid.last_fold_target_cell, (0, 1))

        self.assertEqual(grid.cell(0, 0).level, 1)
        self.assertEqual(grid.cell(0, 0).color, "#FFFFFF")
        self.assertEqual((grid.cell(1, 0).level, grid.cell(1, 0).color), (2, "#FF0000"))
        extreme = grid.cell(2, 0)
        self.assertEqual(extreme.level, 3)
        self.assertNotEqual(extreme.color.upper(), "#FFFFFF")
        self.assertEqual((grid.cell(0, 1).level, grid.cell(0, 1).color), (3, "#FF0000"))
        self.assertEqual(grid.cell(1, 1).level, 0)
        self.assertEqual(grid.level_matrix().shape, (2, 3))

    def test_multi_color_levels(self):
        from foldcore.grid import build_cell_grid
        from foldcore.intersections import Thresholds

        ramp = ("#111111", "#222222", "#333333", "#444444")
        stats = _stats({(0, 0): (0.5, 0, 1), (1, 0): (1.5, 1, 1)})
        grid = build_cell_grid(stats, Thresholds(1.0, 2.0, 3.0, 10.0), _palette(), "normal", ramp)
        self.assertEqual(grid.cell(0, 0).color, "#222222")
        self.assertEqual(grid.cell(2, 1).color, "#111111")

    def test_inverted_mode(self):
        from foldcore.grid import build_cell_grid
        from foldcore.intersections import Thresholds

        stats = _stats({(0, 0): (0.5, 0, 1), (1, 0): (0.5, 0, 1)})
        grid = build_cell_grid(stats, Thresholds(1.0, 2.0, 3.0, 10.0), _palette(), "inverted")
        self.assertEqual(grid.cell(2, 1).level, 3)


if __name__ == "__main__":
    unittest.main()
