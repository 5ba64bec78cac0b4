# Fold engine: seed -> traits, palette, fold simulation, intersection grid

from .pipeline import Artwork, ArtworkParams, generate_metadata, generate_params, render_artwork
from .random_utils import SeededRNG, derive_channel
from .traits import derive_traits

__all__ = [
    "Artwork",
    "ArtworkParams",
    "SeededRNG",
    "derive_channel",
    "derive_traits",
    "generate_metadata",
    "generate_params",
    "render_artwork",
]
