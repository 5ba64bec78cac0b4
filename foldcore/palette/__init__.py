# Palette engine: reference colour table, palette generation, multi-colour level ramps

from .colors import contrast_ratio, has_good_contrast, hex_to_hsl, hsl_to_hex, luminance
from .generator import Palette, apply_transformation, generate_palette
from .ramp import generate_level_ramp
from .table import ColorEntry, ColorTable, default_table

__all__ = [
    "contrast_ratio",
    "has_good_contrast",
    "hex_to_hsl",
    "hsl_to_hex",
    "luminance",
    "Palette",
    "apply_transformation",
    "generate_palette",
    "generate_level_ramp",
    "ColorEntry",
    "ColorTable",
    "default_table",
]
