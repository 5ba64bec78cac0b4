#!/usr/bin/env python3
"""
Batch preview: run the fold engine over a range of seeds in a process pool and write one
JSON line per seed. Folds per seed are capped (intersection cost grows with folds^2).
SIGTERM/SIGINT stops scheduling new seeds; seeds already running finish.
Usage:
  python scripts/batch_preview.py --start 1 --count 200
  python scripts/batch_preview.py --start 1000 --count 50 --folds 80 --workers 8
"""
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import argparse
import json
import logging
import time
from concurrent.futures import FIRST_COMPLETED, Future, ProcessPoolExecutor, wait
from typing import Any

logger = logging.getLogger(__name__)


def preview_seed(seed: int, folds: int | None, fold_cap: int, config: dict[str, Any]) -> dict[str, Any]:
    """Worker: one seed -> summary dict. Runs in a child process."""
    from foldcore.batch import seed_record
    from foldcore.pipeline import render_artwork
    from foldcore.traits import generate_fold_count

    started = time.monotonic()
    requested = folds if folds is not None else generate_fold_count(seed)
    summary = render_artwork(seed, min(requested, fold_cap), config).summary()
    summary["record"] = seed_record(summary, time.monotonic() - started, requested)
    return summary


def run() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    parser = argparse.ArgumentParser(description="Preview many seeds in parallel.")
    parser.add_argument("--start", type=int, default=1, help="First seed (default: 1).")
    parser.add_argument("--count", type=int, default=100, help="Number of consecutive seeds.")
    parser.add_argument("--folds", type=int, default=None, help="Fixed fold count (default: per-seed fold count).")
    parser.add_argument("--workers", type=int, default=None, help="Process count (default: batch.workers).")
    parser.add_argument("--output", "-o", type=Path, default=None, help="JSONL path (default: <output dir>/preview.jsonl).")
    parser.add_argument("--config", type=Path, default=None)
    args = parser.parse_args()

    from foldcore.batch import SweepStop, SweepTally, log_event
    from foldcore.config import get_output_dir, load_config

    stop = SweepStop().install()
    config = load_config(args.config)
    batch = config.get("batch", {})
    workers = args.workers or int(batch.get("workers", 4))
    fold_cap = int(batch.get("max_folds_per_seed", 500))
    if workers < 1 or fold_cap < 0:
        raise ValueError("batch.workers must be >= 1 and batch.max_folds_per_seed >= 0")

    out_path = args.output or get_output_dir(config) / "preview.jsonl"
    out_path.parent.mkdir(parents=True, exist_ok=True)

    seeds = iter(range(args.start, args.start + max(0, args.count)))
    tally = SweepTally()
    log_event("batch_started", start=args.start, count=args.count, workers=workers, fold_cap=fold_cap)

    with ProcessPoolExecutor(max_workers=workers) as pool, open(out_path, "w", encoding="utf-8") as out:
        pending: dict[Future, int] = {}

        def schedule() -> None:
            while len(pending) < workers * 2 and not stop.requested:
                seed = next(seeds, None)
                if seed is None:
                    return
                pending[pool.submit(preview_seed, seed, args.folds, fold_cap, config)] = seed

        schedule()
        while pending:
            finished, _ = wait(pending, return_when=FIRST_COMPLETED)
            for fut in finished:
                seed = pending.pop(fut)
                try:
                    summary = fut.result()
                except Exception as e:
                    tally.fail(seed)
                    log_event("seed_failed", "error", seed=seed, error=str(e))
                    continue
                record = summary.pop("record")
                tally.add(record)
                out.write(json.dumps({**summary, **record}, default=str) + "\n")
                log_event("seed_done", **record)
            if stop.requested:
                log_event("draining", signal=stop.signal_name, in_flight=len(pending))
            schedule()

    log_event("batch_finished", output=str(out_path), stopped_early=stop.requested, **tally.as_dict())
    print(f"Done. {tally.done} seeds -> {out_path}" + (f" ({tally.failed} failed)" if tally.failed else ""))


if __name__ == "__main__":
    run()
