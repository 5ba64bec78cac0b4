# Trait derivation: seed -> discrete labels, integer-only so a constrained evaluator can match them

from .channels import ALL_CHANNELS
from .derive import (
    derive_traits,
    generate_cell_dimensions,
    generate_fold_count,
    generate_fold_strategy,
    generate_max_folds,
    generate_monochrome,
    generate_multi_color_enabled,
    generate_paper_properties,
    generate_rare_crease_lines,
    generate_rare_hit_counts,
    generate_render_mode,
    generate_weight_range,
    palette_archetype,
)
from .schema import (
    CellDimensions,
    FoldStrategy,
    PaletteArchetype,
    PaperProperties,
    TraitSet,
    WeightRange,
)

__all__ = [
    "ALL_CHANNELS",
    "derive_traits",
    "generate_cell_dimensions",
    "generate_fold_count",
    "generate_fold_strategy",
    "generate_max_folds",
    "generate_monochrome",
    "generate_multi_color_enabled",
    "generate_paper_properties",
    "generate_rare_crease_lines",
    "generate_rare_hit_counts",
    "generate_render_mode",
    "generate_weight_range",
    "palette_archetype",
    "CellDimensions",
    "FoldStrategy",
    "PaletteArchetype",
    "PaperProperties",
    "TraitSet",
    "WeightRange",
]
