#!/usr/bin/env python3
"""
CLI: Run the fold engine for one seed and print a JSON summary.
Usage:
  python scripts/generate.py 42
  python scripts/generate.py 42 --folds 120
  python scripts/generate.py 0x1f3a --folds 60 --output out/seed.json
  python scripts/generate.py 42 --metadata --token-id 7
"""
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import argparse
import json
import logging

from foldcore.config import load_config
from foldcore.pipeline import generate_metadata, render_artwork
from foldcore.random_utils import seed_from_hex
from foldcore.traits import generate_fold_count


def _parse_seed(value: str) -> int:
    if value.lower().startswith("0x"):
        return seed_from_hex(value)
    return int(value)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Generate one artwork (traits, palette, creases, cell grid) from a seed."
    )
    parser.add_argument(
        "seed",
        type=_parse_seed,
        help="Integer seed, or a 0x-prefixed hex hash.",
    )
    parser.add_argument(
        "--folds",
        "-f",
        type=int,
        default=None,
        help="Number of folds (default: the seed's own fold count).",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write the JSON summary here instead of stdout.",
    )
    parser.add_argument(
        "--metadata",
        action="store_true",
        help="Print token metadata instead of the engine summary.",
    )
    parser.add_argument(
        "--token-id",
        type=int,
        default=0,
        help="Token id used in metadata name/image (default: 0).",
    )
    parser.add_argument(
        "--image-base-url",
        type=str,
        default="",
        help="Base URL for the metadata image field.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config YAML (default: config/default.yaml).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    config = load_config(args.config)

    if args.metadata:
        folds = args.folds if args.folds is not None else generate_fold_count(args.seed)
        data = generate_metadata(args.token_id, args.seed, folds, args.image_base_url, config=config)
    else:
        data = render_artwork(args.seed, args.folds, config).summary()

    text = json.dumps(data, indent=2, default=str)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text, encoding="utf-8")
        print(f"Done. Summary: {args.output}")
    else:
        print(text)


if __name__ == "__main__":
    main()
