"""
Trait derivation: seed -> one discrete trait per function. Each function opens its own
channel; every label is decided by integer roll comparisons only (see random_utils.roll).
"""
from ..random_utils import ROLL_SCALE, SeededRNG, derive_channel
from .channels import (
    CHANNEL_CELL_DIMENSIONS,
    CHANNEL_FOLD_COUNT,
    CHANNEL_FOLD_STRATEGY,
    CHANNEL_MAX_FOLDS,
    CHANNEL_MONOCHROME,
    CHANNEL_MULTI_COLOR,
    CHANNEL_PALETTE,
    CHANNEL_PAPER,
    CHANNEL_RARE_CREASE_LINES,
    CHANNEL_RARE_HIT_COUNTS,
    CHANNEL_RENDER_MODE,
    CHANNEL_WEIGHT_RANGE,
)
from .schema import (
    CellDimensions,
    FoldStrategy,
    PaletteArchetype,
    PaperProperties,
    TraitSet,
    WeightRange,
)

# Cumulative cut-offs in basis points (see ROLL_SCALE)
RENDER_MODE_CUTOFFS = (
    (3500, "normal"),
    (5000, "binary"),
    (6500, "inverted"),
    (8000, "sparse"),
)
FOLD_STRATEGY_CUTOFFS = (
    (1600, "horizontal"),
    (3200, "vertical"),
    (4400, "diagonal"),
    (5600, "radial"),
    (6800, "grid"),
    (8000, "clustered"),
)
WEIGHT_STYLE_CUTOFFS = (
    (2500, "light"),
    (5000, "heavy"),
    (7500, "high-contrast"),
)
GROUND_CUTOFFS = ((4000, "light"), (8000, "dark"))
TRANSFORM_CUTOFFS = (
    (3000, "value"),
    (5000, "temperature"),
    (6500, "saturation"),
    (8000, "complement"),
)
GLITCH_KINDS = ("washed", "acid", "void", "bleach", "corrupt")

GLITCH_CUTOFF = 300
ACCENT_CUTOFF = 2000
MULTI_COLOR_CUTOFF = 2500
MONOCHROME_CUTOFF = 1200
RARE_CUTOFF = 80
PAPER_RESISTANT_CUTOFF = 3125
PAPER_STANDARD_CUTOFF = 6875
PAPER_GRAIN_CUTOFF = 4000

MAX_FOLDS_MIN = 4
MAX_FOLDS_SPAN = 66
FOLD_COUNT_MAX = 500


def bucket(roll: int, cutoffs: tuple[tuple[int, str], ...], default: str) -> str:
    """First label whose cut-off exceeds roll, else default."""
    for limit, label in cutoffs:
        if roll < limit:
            return label
    return default


def generate_render_mode(seed: int) -> str:
    rng = derive_channel(seed, CHANNEL_RENDER_MODE)
    return bucket(rng.roll(), RENDER_MODE_CUTOFFS, "dense")


def generate_fold_strategy(seed: int) -> FoldStrategy:
    rng = derive_channel(seed, CHANNEL_FOLD_STRATEGY)
    kind = bucket(rng.roll(), FOLD_STRATEGY_CUTOFFS, "random")
    if kind in ("horizontal", "vertical"):
        return FoldStrategy(kind=kind, jitter=rng.uniform(3, 15))
    if kind == "diagonal":
        angle = 45.0 if rng.roll() < ROLL_SCALE // 2 else 135.0
        return FoldStrategy(kind=kind, angle=angle, jitter=rng.uniform(5, 20))
    if kind == "radial":
        return FoldStrategy(kind=kind, focal_x=rng.uniform(0.2, 0.8), focal_y=rng.uniform(0.2, 0.8))
    if kind == "grid":
        return FoldStrategy(kind=kind, jitter=rng.uniform(3, 13))
    if kind == "clustered":
        return FoldStrategy(
            kind=kind,
            cluster_x=rng.uniform(0.15, 0.85),
            cluster_y=rng.uniform(0.15, 0.85),
            spread=rng.uniform(0.2, 0.6),
        )
    return FoldStrategy(kind="random")


def generate_weight_range(seed: int) -> WeightRange:
    """Interval each new crease weight is sampled from."""
    rng = derive_channel(seed, CHANNEL_WEIGHT_RANGE)
    style = bucket(rng.roll(), WEIGHT_STYLE_CUTOFFS, "balanced")
    if style == "light":
        base = rng.uniform(0.2, 0.4)
        return WeightRange(style, base, base + 0.1 + rng.random() * 0.2)
    if style == "heavy":
        base = rng.uniform(0.6, 0.8)
        return WeightRange(style, base, base + 0.1 + rng.random() * 0.1)
    if style == "high-contrast":
        return WeightRange(style, rng.uniform(0.1, 0.3), rng.uniform(0.7, 1.0))
    return WeightRange(style, rng.uniform(0.3, 0.5), rng.uniform(0.5, 1.0))


def generate_max_folds(seed: int) -> int:
    """Breathing-cycle period, in [4, 69]."""
    rng = derive_channel(seed, CHANNEL_MAX_FOLDS)
    return MAX_FOLDS_MIN + rng.below(MAX_FOLDS_SPAN)


def generate_fold_count(seed: int) -> int:
    """Fold count used when the host does not supply one, in [1, 500]."""
    rng = derive_channel(seed, CHANNEL_FOLD_COUNT)
    return 1 + rng.below(FOLD_COUNT_MAX)


def get_divisors(n: int, low: int, high: int) -> list[int]:
    return [i for i in range(max(1, low), high + 1) if n % i == 0]


def generate_cell_dimensions(
    seed: int,
    inner_width: int = 1100,
    inner_height: int = 1400,
    *,
    cell_min: int = 4,
    cell_max: int = 600,
    aspect_max: int = 3,
) -> CellDimensions:
    """
    Cell size from divisor pairs of the drawing area, aspect <= aspect_max, size-biased:
    25% from the smallest quarter, 25% from the largest quarter, 50% anywhere.
    """
    widths = get_divisors(inner_width, cell_min, cell_max) or [8]
    heights = get_divisors(inner_height, cell_min, cell_max) or [12]
    pairs = [
        (w, h)
        for w in widths
        for h in heights
        if max(w, h) <= aspect_max * min(w, h)
    ]
    if not pairs:
        return CellDimensions(8, 12)
    pairs.sort(key=lambda p: p[0] * p[1])

    rng = derive_channel(seed, CHANNEL_CELL_DIMENSIONS)
    size_bias = rng.roll()
    n = len(pairs)
    if size_bias < 2500:
        idx = rng.below(-(-n // 4))
    elif size_bias >= 7500:
        start = n * 3 // 4
        idx = start + rng.below(n - start)
    else:
        idx = rng.below(n)
    w, h = pairs[idx]
    return CellDimensions(w, h)


def generate_multi_color_enabled(seed: int) -> bool:
    return derive_channel(seed, CHANNEL_MULTI_COLOR).roll() < MULTI_COLOR_CUTOFF


def generate_monochrome(seed: int) -> bool:
    return derive_channel(seed, CHANNEL_MONOCHROME).roll() < MONOCHROME_CUTOFF


def generate_rare_crease_lines(seed: int) -> bool:
    return derive_channel(seed, CHANNEL_RARE_CREASE_LINES).roll() < RARE_CUTOFF


def generate_rare_hit_counts(seed: int) -> bool:
    return derive_channel(seed, CHANNEL_RARE_HIT_COUNTS).roll() < RARE_CUTOFF


def generate_paper_properties(seed: int) -> PaperProperties:
    """
    Paper the piece is folded on. Type comes from the absorbency roll, grain from a
    second roll; the remaining values are continuous and only describe the sheet.
    """
    rng = derive_channel(seed, CHANNEL_PAPER)
    absorbency_roll = rng.roll()
    if absorbency_roll < PAPER_RESISTANT_CUTOFF:
        paper_type = "Resistant"
    elif absorbency_roll < PAPER_STANDARD_CUTOFF:
        paper_type = "Standard"
    else:
        paper_type = "Absorbent"
    absorbency = 0.1 + 0.8 * absorbency_roll / ROLL_SCALE

    grain = rng.roll() < PAPER_GRAIN_CUTOFF
    angle_affinity = rng.random() * 180 if grain else None
    affinity_strength = rng.uniform(0.2, 0.8) if grain else 0.0
    ceiling_multiplier = rng.uniform(0.3, 1.7)
    return PaperProperties(
        paper_type=paper_type,
        grain=grain,
        absorbency=absorbency,
        angle_affinity=angle_affinity,
        affinity_strength=affinity_strength,
        ceiling_multiplier=ceiling_multiplier,
    )


def read_palette_rolls(rng: SeededRNG) -> tuple[str, str, bool]:
    """
    Ground, transform and accent decisions, drawn right after the mother colour.
    Shared by palette_archetype and palette.generator so both read the same stream.
    """
    ground = bucket(rng.roll(), GROUND_CUTOFFS, "mid")
    transform = bucket(rng.roll(), TRANSFORM_CUTOFFS, "neighbor")
    use_accent = rng.roll() < ACCENT_CUTOFF
    return ground, transform, use_accent


def archetype_label(ground: str, transform: str, use_accent: bool) -> str:
    return f"{ground}/{transform}{'+accent' if use_accent else ''}"


def palette_archetype(seed: int) -> PaletteArchetype:
    """Palette label without building the colour table (constrained evaluator path)."""
    rng = derive_channel(seed, CHANNEL_PALETTE)
    if rng.roll() < GLITCH_CUTOFF:
        kind = GLITCH_KINDS[rng.below(len(GLITCH_KINDS))]
        return PaletteArchetype(f"glitch/{kind}", 3, False)
    if generate_monochrome(seed):
        return PaletteArchetype("monochrome", 2, True)
    rng.next_state()  # mother colour index
    ground, transform, use_accent = read_palette_rolls(rng)
    return PaletteArchetype(archetype_label(ground, transform, use_accent), 3 if use_accent else 2, False)


def derive_traits(
    seed: int,
    inner_width: int = 1100,
    inner_height: int = 1400,
    *,
    cell_min: int = 4,
    cell_max: int = 600,
    aspect_max: int = 3,
) -> TraitSet:
    """All discrete labels for one seed. No colour table, no geometry."""
    cells = generate_cell_dimensions(
        seed, inner_width, inner_height, cell_min=cell_min, cell_max=cell_max, aspect_max=aspect_max
    )
    paper = generate_paper_properties(seed)
    return TraitSet(
        seed=seed,
        fold_strategy=generate_fold_strategy(seed).kind,
        render_mode=generate_render_mode(seed),
        weight_style=generate_weight_range(seed).style,
        max_folds=generate_max_folds(seed),
        cell_size=cells.label,
        multi_color=generate_multi_color_enabled(seed),
        palette=palette_archetype(seed),
        paper_type=paper.paper_type,
        paper_grain=paper.grain,
        rare_crease_lines=generate_rare_crease_lines(seed),
        rare_hit_counts=generate_rare_hit_counts(seed),
    )
