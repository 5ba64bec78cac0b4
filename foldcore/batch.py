"""
Seed-sweep plumbing for scripts/batch_preview.py.

Each finished seed becomes one JSON log line; a SweepStop flag flips on SIGTERM/SIGINT
and the scheduler polls it before submitting more seeds.
"""
import json
import logging
import signal
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class SweepStop:
    """Callable signal handler; once triggered, no new seeds should be scheduled."""

    def __init__(self) -> None:
        self.requested = False
        self.signal_name: str | None = None

    def __call__(self, signum: int, _frame: Any = None) -> None:
        self.requested = True
        self.signal_name = signal.Signals(signum).name
        logger.warning("%s received; draining in-flight seeds", self.signal_name)

    def install(self) -> "SweepStop":
        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                signal.signal(sig, self)
            except ValueError:
                # only the main thread may install handlers
                logger.debug("could not install handler for %s", sig.name)
        return self


@dataclass
class SweepTally:
    done: int = 0
    failed: int = 0
    creases: int = 0
    intersections: int = 0
    failed_seeds: list[int] = field(default_factory=list)

    def add(self, record: dict[str, Any]) -> None:
        self.done += 1
        self.creases += record.get("creases", 0)
        self.intersections += record.get("intersections", 0)

    def fail(self, seed: int) -> None:
        self.failed += 1
        self.failed_seeds.append(seed)

    def as_dict(self) -> dict[str, Any]:
        return {
            "done": self.done,
            "failed": self.failed,
            "mean_creases": round(self.creases / self.done, 2) if self.done else 0,
            "mean_intersections": round(self.intersections / self.done, 2) if self.done else 0,
            "failed_seeds": self.failed_seeds,
        }


def seed_record(summary: dict[str, Any], elapsed_s: float, requested_folds: int | None = None) -> dict[str, Any]:
    """Compact per-seed fields from Artwork.summary() for the sweep log."""
    record = {
        "seed": summary["seed"],
        "folds": summary["folds"],
        "creases": summary["creases"],
        "skipped_folds": summary["skipped_folds"],
        "intersections": summary["intersections"],
        "grid": summary["grid"],
        "elapsed_s": round(elapsed_s, 3),
    }
    if requested_folds is not None and requested_folds != summary["folds"]:
        record["requested_folds"] = requested_folds  # capped by batch.max_folds_per_seed
    return record


def log_event(event: str, level: str = "info", **fields: Any) -> dict[str, Any]:
    """Emit {"event": ..., **fields} as one JSON log line and return it."""
    record = {"event": event, **fields}
    logger.log(_LEVELS.get(level, logging.INFO), "%s", json.dumps(record, default=str))
    return record
