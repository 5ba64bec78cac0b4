"""
Trait schema: fold strategy, weight range, cell size, paper, and the label set
shared with the constrained evaluator.
"""
from dataclasses import asdict, dataclass
from typing import Any

RENDER_MODES = ("normal", "binary", "inverted", "sparse", "dense")
FOLD_STRATEGIES = ("horizontal", "vertical", "diagonal", "radial", "grid", "clustered", "random")
WEIGHT_STYLES = ("light", "heavy", "high-contrast", "balanced")
PAPER_TYPES = ("Resistant", "Standard", "Absorbent")


@dataclass(frozen=True)
class FoldStrategy:
    """Bias applied to source/target selection during folding."""
    kind: str = "random"
    jitter: float = 0.0            # degrees of slack around the preferred crease angle
    angle: float | None = None     # diagonal only: 45 | 135
    focal_x: float | None = None   # radial only, 0-1 of the canvas
    focal_y: float | None = None
    cluster_x: float | None = None  # clustered only, 0-1 of the canvas
    cluster_y: float | None = None
    spread: float | None = None


@dataclass(frozen=True)
class WeightRange:
    style: str
    min: float
    max: float


@dataclass(frozen=True)
class CellDimensions:
    width: int
    height: int

    @property
    def label(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class PaperProperties:
    """How the sheet takes creases. Labels (type, grain) are integer-derived."""
    paper_type: str
    grain: bool
    absorbency: float
    angle_affinity: float | None
    affinity_strength: float
    ceiling_multiplier: float


@dataclass(frozen=True)
class PaletteArchetype:
    name: str            # e.g. "dark/complement+accent", "glitch/acid", "monochrome"
    color_count: int
    monochrome: bool

    @property
    def glitch(self) -> bool:
        return self.name.startswith("glitch/")


@dataclass(frozen=True)
class TraitSet:
    """Every discrete label a constrained evaluator can recompute from the seed alone."""
    seed: int
    fold_strategy: str
    render_mode: str
    weight_style: str
    max_folds: int
    cell_size: str
    multi_color: bool
    palette: PaletteArchetype
    paper_type: str
    paper_grain: bool
    rare_crease_lines: bool
    rare_hit_counts: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
