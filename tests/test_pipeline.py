"""
End-to-end pipeline, metadata, config loading and batch utilities.
Run from project root: python -m pytest tests/ -v
"""
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class TestConfig(unittest.TestCase):

    def test_default_file_matches_defaults(self):
        from foldcore.config import _defaults, load_config

        self.assertEqual(load_config(), _defaults())

    def test_missing_file_gives_defaults(self):
        from foldcore.config import _defaults, load_config

        self.assertEqual(load_config(Path("/nonexistent/fold.yaml")), _defaults())

    def test_partial_override_merges_sections(self):
        from foldcore.config import canvas_inner_size, cell_limits, load_config

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "custom.yaml"
            path.write_text("canvas:\n  drawing_margin: 100\ncells:\n  max: 200\n", encoding="utf-8")
            config = load_config(path)
        self.assertEqual(canvas_inner_size(config), (1000, 1300))
        self.assertEqual(cell_limits(config), (4, 200, 3))
        self.assertEqual(config["simulation"]["renormalize_every"], 5)

    def test_inner_size_default(self):
        from foldcore.config import canvas_inner_size, load_config

        self.assertEqual(canvas_inner_size(load_config()), (1100, 1400))

    def test_output_dir_is_absolute(self):
        from foldcore.config import get_output_dir

        self.assertTrue(get_output_dir({"output": {"dir": "out"}}).is_absolute())
        self.assertEqual(get_output_dir({"output": {"dir": "/tmp/folds"}}), Path("/tmp/folds"))


class TestPipeline(unittest.TestCase):

    def test_generate_params_seed_42(self):
        from foldcore.pipeline import generate_params
        from foldcore.traits import generate_fold_count

        params = generate_params(42)
        self.assertEqual(params.folds, generate_fold_count(42))
        self.assertEqual((params.width, params.height), (1100, 1400))
        self.assertEqual(params.fold_strategy.kind, "horizontal")
        self.assertEqual(params.render_mode, "normal")
        self.assertEqual(params.max_folds, 29)
        self.assertEqual(params.cols, 1100 // params.cells.width)
        self.assertEqual(params.rows, 1400 // params.cells.height)
        self.assertEqual(params.traits.palette.name, params.palette.archetype)
        self.assertEqual(params.to_dict()["cell_size"], params.cells.label)

    def test_level_colors_only_when_multi_color(self):
        from foldcore.pipeline import generate_params

        multi = generate_params(1, 0)
        self.assertTrue(multi.multi_color)
        self.assertEqual(len(multi.level_colors), 4)
        single = generate_params(2, 0)
        self.assertFalse(single.multi_color)
        self.assertIsNone(single.level_colors)

    def test_render_is_deterministic(self):
        from foldcore.pipeline import render_artwork

        a = render_artwork(42, 15)
        b = render_artwork(42, 15)
        self.assertEqual(a.fold_result.creases, b.fold_result.creases)
        self.assertEqual(a.thresholds, b.thresholds)
        self.assertEqual(a.grid.cells, b.grid.cells)

    def test_render_seed_42(self):
        from foldcore.pipeline import render_artwork

        art = render_artwork(42, 15)
        self.assertGreater(len(art.fold_result.creases), 0)
        grid = art.grid
        self.assertEqual(len(grid.cells), grid.cols * grid.rows)
        self.assertTrue(all(0 <= c.level <= 3 for c in grid.cells))
        t = art.thresholds
        self.assertTrue(t.t1 <= t.t2 <= t.t3 <= t.t_extreme)
        self.assertLessEqual(sum(c.count for c in grid.cells), len(art.intersections))

    def test_zero_folds_has_empty_grid_weights(self):
        from foldcore.pipeline import render_artwork

        art = render_artwork(42, 0)
        self.assertEqual(art.fold_result.creases, ())
        self.assertEqual(art.intersections, ())
        self.assertEqual(art.thresholds.as_tuple(), (1.0, 2.0, 3.0, 999.0))
        self.assertIsNone(art.grid.max_gap_cell)
        self.assertIsNone(art.grid.last_fold_target_cell)

    def test_summary_is_json_ready(self):
        import json

        from foldcore.pipeline import render_artwork

        summary = render_artwork(7, 20).summary()
        text = json.dumps(summary, default=str)
        self.assertIn('"creases"', text)
        self.assertEqual(summary["seed"], 7)
        self.assertEqual(summary["folds"], 20)

    def test_many_seeds_never_raise(self):
        from foldcore.pipeline import render_artwork

        for seed in (0, -3, 2**31 - 1, 2**40, 123456789):
            art = render_artwork(seed, 25)
            self.assertEqual(len(art.grid.cells), art.grid.cols * art.grid.rows)


class TestMetadata(unittest.TestCase):

    def test_metadata_shape(self):
        from foldcore.pipeline import generate_metadata

        meta = generate_metadata(7, 42, 15, "https://example.org/img")
        self.assertEqual(meta["name"], "Fold #7")
        self.assertEqual(meta["image"], "https://example.org/img/7")
        attrs = {a["trait_type"]: a["value"] for a in meta["attributes"]}
        self.assertEqual(attrs["Fold Strategy"], "horizontal")
        self.assertEqual(attrs["Render Mode"], "normal")
        self.assertEqual(attrs["Fold Count"], 15)
        self.assertEqual(attrs["Max Folds"], 29)
        self.assertEqual(attrs["Palette Archetype"], "dark/complement")
        self.assertIn(attrs["Paper Grain"], ("Grain", "Uniform"))
        self.assertGreater(attrs["Crease Count"], 0)

    def test_metadata_without_image_base(self):
        from foldcore.pipeline import generate_metadata

        self.assertEqual(generate_metadata(1, 42, 0)["image"], "")


class TestBatchSweep(unittest.TestCase):

    def test_log_event_emits_json(self):
        import json

        from foldcore.batch import log_event

        with self.assertLogs("foldcore.batch", level="INFO") as cm:
            log_event("seed_done", seed=42, creases=3)
            log_event("seed_failed", "error", seed=43, error="boom")
        first = json.loads(cm.records[0].getMessage())
        self.assertEqual(first, {"event": "seed_done", "seed": 42, "creases": 3})
        self.assertEqual(cm.records[1].levelname, "ERROR")

    def test_seed_record_from_summary(self):
        from foldcore.batch import seed_record
        from foldcore.pipeline import render_artwork

        summary = render_artwork(42, 10).summary()
        record = seed_record(summary, 0.12345, requested_folds=400)
        self.assertEqual(record["seed"], 42)
        self.assertEqual(record["folds"], 10)
        self.assertEqual(record["creases"], summary["creases"])
        self.assertEqual(record["elapsed_s"], 0.123)
        self.assertEqual(record["requested_folds"], 400)
        self.assertNotIn("requested_folds", seed_record(summary, 0.1, requested_folds=10))

    def test_tally(self):
        from foldcore.batch import SweepTally

        tally = SweepTally()
        tally.add({"creases": 4, "intersections": 10})
        tally.add({"creases": 2, "intersections": 0})
        tally.fail(7)
        self.assertEqual(
            tally.as_dict(),
            {"done": 2, "failed": 1, "mean_creases": 3.0, "mean_intersections": 5.0, "failed_seeds": [7]},
        )
        self.assertEqual(SweepTally().as_dict()["mean_creases"], 0)

    def test_sweep_stop_flag(self):
        import signal

        from foldcore.batch import SweepStop

        stop = SweepStop()
        self.assertFalse(stop.requested)
        with self.assertLogs("foldcore.batch", level="WARNING"):
            stop(signal.SIGTERM)
        self.assertTrue(stop.requested)
        self.assertEqual(stop.signal_name, "SIGTERM")


if __name__ == "__main__":
    unittest.main()
