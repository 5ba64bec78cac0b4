"""
Load and expose engine config (YAML). Used by the pipeline and scripts for canvas geometry,
cell limits, simulation tuning and batch settings.
"""
from pathlib import Path
from typing import Any

import yaml


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load config from YAML. Path is optional; defaults to config/default.yaml."""
    if config_path is None:
        config_path = _project_root() / "config" / "default.yaml"
    path = Path(config_path)
    if not path.exists():
        return _defaults()
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    merged = _defaults()
    for key, value in data.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def _defaults() -> dict[str, Any]:
    return {
        "canvas": {
            "reference_width": 1200,
            "reference_height": 1500,
            "drawing_margin": 50,
        },
        "cells": {"min": 4, "max": 600, "aspect_max": 3},
        "simulation": {
            "renormalize_every": 5,
            "min_distance_ratio": 0.05,
        },
        "batch": {"workers": 4, "max_folds_per_seed": 500},
        "output": {"dir": "output"},
    }


def canvas_inner_size(config: dict[str, Any]) -> tuple[int, int]:
    """Drawing area (reference canvas minus margins on both sides)."""
    canvas = config.get("canvas", {})
    margin = int(canvas.get("drawing_margin", 50))
    width = int(canvas.get("reference_width", 1200)) - margin * 2
    height = int(canvas.get("reference_height", 1500)) - margin * 2
    return width, height


def cell_limits(config: dict[str, Any]) -> tuple[int, int, int]:
    """(min, max, aspect_max) for cell dimension derivation."""
    cells = config.get("cells", {})
    return int(cells.get("min", 4)), int(cells.get("max", 600)), int(cells.get("aspect_max", 3))


def get_output_dir(config: dict[str, Any]) -> Path:
    """Resolve output directory (relative to project root if needed)."""
    out = config.get("output", {})
    d = out.get("dir", "output")
    p = Path(d)
    if not p.is_absolute():
        p = _project_root() / p
    return p
