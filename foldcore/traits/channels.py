"""
Named RNG channels. Each trait generator seeds its own SeededRNG with seed + offset,
so adding or reordering draws in one channel never shifts another.
Values are part of the trait contract shared with the constrained evaluator: append only.
"""

CHANNEL_PALETTE = 0
CHANNEL_REDUCTION = 1111
CHANNEL_MONOCHROME = 1212
CHANNEL_MAX_FOLDS = 2222
CHANNEL_DRIFT = 3333
CHANNEL_LEVEL_RAMP = 3434
CHANNEL_MULTI_COLOR = 4444
CHANNEL_RENDER_MODE = 5555
CHANNEL_PAPER = 5656
CHANNEL_FOLD_STRATEGY = 6666
CHANNEL_WEIGHT_RANGE = 7777
CHANNEL_CREASE_WEIGHT = 8888
CHANNEL_RARE_CREASE_LINES = 9191
CHANNEL_RARE_HIT_COUNTS = 9292
CHANNEL_FOLD_COUNT = 9797
CHANNEL_CELL_DIMENSIONS = 9999

ALL_CHANNELS: dict[str, int] = {
    "palette": CHANNEL_PALETTE,
    "reduction": CHANNEL_REDUCTION,
    "monochrome": CHANNEL_MONOCHROME,
    "max_folds": CHANNEL_MAX_FOLDS,
    "drift": CHANNEL_DRIFT,
    "level_ramp": CHANNEL_LEVEL_RAMP,
    "multi_color": CHANNEL_MULTI_COLOR,
    "render_mode": CHANNEL_RENDER_MODE,
    "paper": CHANNEL_PAPER,
    "fold_strategy": CHANNEL_FOLD_STRATEGY,
    "weight_range": CHANNEL_WEIGHT_RANGE,
    "crease_weight": CHANNEL_CREASE_WEIGHT,
    "rare_crease_lines": CHANNEL_RARE_CREASE_LINES,
    "rare_hit_counts": CHANNEL_RARE_HIT_COUNTS,
    "fold_count": CHANNEL_FOLD_COUNT,
    "cell_dimensions": CHANNEL_CELL_DIMENSIONS,
}
