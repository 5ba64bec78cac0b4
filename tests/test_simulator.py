"""
Fold simulator: determinism, polygon validity, breathing-cycle decay, degenerate inputs.
Run from project root: python -m pytest tests/ -v
"""
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

WIDTH, HEIGHT = 1100, 1400


class TestSimulateFolds(unittest.TestCase):

    def test_zero_folds_returns_rectangle(self):
        from foldcore.geometry import rectangle
        from foldcore.simulator import simulate_folds

        result = simulate_folds(WIDTH, HEIGHT, 0, 42)
        self.assertEqual(result.creases, ())
        self.assertEqual(result.polygon, rectangle(WIDTH, HEIGHT))
        self.assertIsNone(result.last_fold_target)

    def test_invalid_dimensions_are_a_no_op(self):
        from foldcore.simulator import simulate_folds

        for w, h in ((0, 100), (100, 0), (-5, 100), (100, -1)):
            result = simulate_folds(w, h, 20, 42)
            self.assertEqual(result.creases, ())
            self.assertEqual(result.polygon, ())

    def test_seed_42_fifteen_folds(self):
        from foldcore.simulator import FoldSimulator

        sim = FoldSimulator(WIDTH, HEIGHT, 42)
        self.assertEqual(sim.strategy.kind, "horizontal")
        self.assertEqual(sim.max_folds, 29)
        result = sim.run(15)
        self.assertEqual(len(result.creases), 12)
        self.assertLessEqual(result.skipped, 15 - 12)
        first = result.creases[0]
        self.assertEqual(first.depth, 0)
        # first draw of channel seed 42 + 8888: 1736173171 / 0x7fffffff
        self.assertAlmostEqual(first.weight, 1736173171 / 0x7FFFFFFF)
        self.assertAlmostEqual(first.weight, 0.8084686342, places=9)
        self.assertEqual([c.depth for c in result.creases], list(range(12)))
        self.assertIsNotNone(result.last_fold_target)
        self.assertEqual(sim.run(15), result)

    def test_deterministic(self):
        from foldcore.simulator import simulate_folds

        for seed in (1, 42, 777):
            a = simulate_folds(WIDTH, HEIGHT, 40, seed)
            b = simulate_folds(WIDTH, HEIGHT, 40, seed)
            self.assertEqual(a, b)

    def test_different_seeds_differ(self):
        from foldcore.simulator import simulate_folds

        a = simulate_folds(WIDTH, HEIGHT, 30, 1)
        b = simulate_folds(WIDTH, HEIGHT, 30, 2)
        self.assertNotEqual(a.creases, b.creases)


class TestFoldEvents(unittest.TestCase):

    def test_polygon_valid_after_every_applied_fold(self):
        from foldcore.geometry import is_ccw
        from foldcore.simulator import FoldSimulator

        for seed in (3, 42, 1234):
            for event in FoldSimulator(WIDTH, HEIGHT, seed).iter_folds(60):
                if event.applied:
                    self.assertGreaterEqual(len(event.polygon), 3)
                    self.assertTrue(is_ccw(event.polygon), msg=f"seed {seed} fold {event.index}")

    def test_creases_stay_on_canvas_and_depth_increases(self):
        from foldcore.simulator import simulate_folds

        result = simulate_folds(WIDTH, HEIGHT, 80, 9)
        depths = [c.depth for c in result.creases]
        self.assertEqual(depths, sorted(set(depths)))
        for c in result.creases:
            for p in (c.p1, c.p2):
                self.assertTrue(-1e-6 <= p.x <= WIDTH + 1e-6)
                self.assertTrue(-1e-6 <= p.y <= HEIGHT + 1e-6)

    def test_one_event_per_fold_index(self):
        from foldcore.simulator import FoldSimulator

        events = list(FoldSimulator(WIDTH, HEIGHT, 5).iter_folds(25))
        self.assertEqual([e.index for e in events], list(range(25)))
        for e in events:
            self.assertEqual(e.applied, e.failure is None)

    def test_breathing_only_decreases_weight(self):
        """Across exhales a crease's weight never rises and its multiplier never changes."""
        from foldcore.simulator import FoldSimulator

        sim = FoldSimulator(WIDTH, HEIGHT, 42, max_folds=4)
        seen: dict[int, tuple[float, float]] = {}
        decayed = False
        for event in sim.iter_folds(40):
            for c in event.creases:
                if c.depth in seen:
                    weight, multiplier = seen[c.depth]
                    self.assertLessEqual(c.weight, weight)
                    self.assertEqual(c.reduction_multiplier, multiplier)
                    decayed = decayed or c.weight < weight
                seen[c.depth] = (c.weight, c.reduction_multiplier)
        self.assertTrue(decayed)


class TestBreathing(unittest.TestCase):

    def test_reduction_multipliers(self):
        from foldcore.simulator import reduction_multipliers

        values = reduction_multipliers(42, 29)
        self.assertEqual(len(values), 29)
        self.assertEqual(values, reduction_multipliers(42, 29))
        self.assertTrue(all(0.001 <= v <= 0.251 for v in values))

    def test_decayed_floor_and_monotonic(self):
        from foldcore.geometry import Point
        from foldcore.simulator import Crease, exhale

        c = Crease(Point(0, 0), Point(1, 1), 0, 0.5, 0, 0.1)
        once = c.decayed()
        self.assertAlmostEqual(once.weight, 0.05)
        self.assertEqual(once.reduction_multiplier, 0.1)
        tiny = Crease(Point(0, 0), Point(1, 1), 1, 0.005, 0, 0.1)
        self.assertEqual(tiny.decayed().weight, 0.005)
        floor = Crease(Point(0, 0), Point(1, 1), 2, 0.02, 0, 0.001)
        self.assertEqual(floor.decayed().weight, 0.01)
        self.assertEqual([x.weight for x in exhale([c, floor])], [once.weight, 0.01])

    def test_drift_amplitude_is_capped(self):
        from foldcore.simulator import Drift

        drift = Drift.from_seed(42)
        self.assertEqual(drift, Drift.from_seed(42))
        for f in (0, 50, 100, 1000, 5000):
            off = drift.offset(f, 100, 100)
            self.assertLessEqual(abs(off.x), 50 + 1e-9)
            self.assertLessEqual(abs(off.y), 50 + 1e-9)


if __name__ == "__main__":
    unittest.main()
