"""
Pipeline: one seed -> parameters -> fold simulation -> intersections -> cell grid.
Everything is a pure function of (seed, folds, config); nothing is cached between calls
except the read-only colour table.
"""
import logging
from dataclasses import asdict, dataclass
from typing import Any

from .config import canvas_inner_size, cell_limits, load_config
from .grid import CellGrid, build_cell_grid
from .intersections import Intersection, Thresholds, adaptive_thresholds, aggregate, find_intersections
from .palette import ColorTable, Palette, default_table, generate_level_ramp, generate_palette
from .simulator import FoldResult, FoldSimulator
from .traits import (
    CellDimensions,
    FoldStrategy,
    PaperProperties,
    TraitSet,
    WeightRange,
    derive_traits,
    generate_cell_dimensions,
    generate_fold_count,
    generate_fold_strategy,
    generate_max_folds,
    generate_multi_color_enabled,
    generate_paper_properties,
    generate_render_mode,
    generate_weight_range,
)

logger = logging.getLogger(__name__)

METADATA_DESCRIPTION = "On-chain generative paper folding art"


@dataclass(frozen=True)
class ArtworkParams:
    seed: int
    width: int            # drawing area, reference canvas minus margins
    height: int
    palette: Palette
    level_colors: tuple[str, ...] | None
    cells: CellDimensions
    cols: int
    rows: int
    render_mode: str
    weight_range: WeightRange
    fold_strategy: FoldStrategy
    multi_color: bool
    max_folds: int
    folds: int
    paper: PaperProperties
    traits: TraitSet

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["cell_size"] = self.cells.label
        return data


@dataclass(frozen=True)
class Artwork:
    params: ArtworkParams
    fold_result: FoldResult
    intersections: tuple[Intersection, ...]
    grid: CellGrid

    @property
    def thresholds(self) -> Thresholds:
        return self.grid.thresholds

    def summary(self) -> dict[str, Any]:
        p = self.params
        return {
            "seed": p.seed,
            "folds": p.folds,
            "traits": p.traits.to_dict(),
            "palette": p.palette.to_dict(),
            "level_colors": list(p.level_colors) if p.level_colors else None,
            "cell_size": p.cells.label,
            "grid": [p.cols, p.rows],
            "creases": len(self.fold_result.creases),
            "skipped_folds": self.fold_result.skipped,
            "polygon_vertices": len(self.fold_result.polygon),
            "intersections": len(self.intersections),
            "thresholds": asdict(self.thresholds),
            "highlights": self.grid.highlighted(),
        }


def generate_params(
    seed: int,
    folds: int | None = None,
    config: dict[str, Any] | None = None,
    *,
    table: ColorTable | None = None,
) -> ArtworkParams:
    """Every seed-derived input the simulation and renderer need. folds defaults to the seed's fold count."""
    if config is None:
        config = load_config()
    width, height = canvas_inner_size(config)
    cell_min, cell_max, aspect_max = cell_limits(config)
    table = table or default_table()

    palette = generate_palette(seed, table)
    multi_color = generate_multi_color_enabled(seed)
    level_colors = None
    if multi_color:
        level_colors = tuple(generate_level_ramp(seed, palette.bg, palette.text, table))
    cells = generate_cell_dimensions(
        seed, width, height, cell_min=cell_min, cell_max=cell_max, aspect_max=aspect_max
    )
    if folds is None:
        folds = generate_fold_count(seed)

    return ArtworkParams(
        seed=seed,
        width=width,
        height=height,
        palette=palette,
        level_colors=level_colors,
        cells=cells,
        cols=width // cells.width,
        rows=height // cells.height,
        render_mode=generate_render_mode(seed),
        weight_range=generate_weight_range(seed),
        fold_strategy=generate_fold_strategy(seed),
        multi_color=multi_color,
        max_folds=generate_max_folds(seed),
        folds=max(0, int(folds)),
        paper=generate_paper_properties(seed),
        traits=derive_traits(
            seed, width, height, cell_min=cell_min, cell_max=cell_max, aspect_max=aspect_max
        ),
    )


def _simulator(params: ArtworkParams, config: dict[str, Any]) -> FoldSimulator:
    sim = config.get("simulation", {})
    return FoldSimulator(
        params.width,
        params.height,
        params.seed,
        params.weight_range,
        params.fold_strategy,
        params.max_folds,
        renormalize_every=int(sim.get("renormalize_every", 5)),
        min_distance_ratio=float(sim.get("min_distance_ratio", 0.05)),
    )


def render_artwork(
    seed: int,
    folds: int | None = None,
    config: dict[str, Any] | None = None,
    *,
    table: ColorTable | None = None,
) -> Artwork:
    """Run the full engine for one seed and return the grid for the renderer."""
    if config is None:
        config = load_config()
    params = generate_params(seed, folds, config, table=table)
    result = _simulator(params, config).run(params.folds)
    intersections = tuple(find_intersections(result.creases))
    stats = aggregate(intersections, params.cells.width, params.cells.height, params.cols, params.rows)
    thresholds = adaptive_thresholds(stats.weights)
    grid = build_cell_grid(
        stats,
        thresholds,
        params.palette,
        params.render_mode,
        params.level_colors,
        result.last_fold_target,
        params.cells.width,
        params.cells.height,
    )
    logger.info(
        "seed %s: %d folds -> %d creases, %d intersections, grid %dx%d",
        seed, params.folds, len(result.creases), len(intersections), params.cols, params.rows,
    )
    return Artwork(params, result, intersections, grid)


def generate_metadata(
    token_id: int,
    seed: int,
    folds: int,
    image_base_url: str = "",
    config: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Token metadata: name, description, image URL and the trait attribute list."""
    if config is None:
        config = load_config()
    params = generate_params(seed, folds, config)
    result = _simulator(params, config).run(params.folds)
    traits = params.traits

    attributes = [
        {"trait_type": "Fold Strategy", "value": traits.fold_strategy},
        {"trait_type": "Render Mode", "value": traits.render_mode},
        {"trait_type": "Multi-Color", "value": "Yes" if traits.multi_color else "No"},
        {"trait_type": "Cell Size", "value": traits.cell_size},
        {"trait_type": "Fold Count", "value": params.folds},
        {"trait_type": "Max Folds", "value": traits.max_folds},
        {"trait_type": "Crease Count", "value": len(result.creases)},
        {"trait_type": "Palette Strategy", "value": params.palette.strategy},
        {"trait_type": "Palette Archetype", "value": traits.palette.name},
        {"trait_type": "Paper Type", "value": traits.paper_type},
        {"trait_type": "Paper Grain", "value": "Grain" if traits.paper_grain else "Uniform"},
    ]
    if traits.palette.monochrome:
        attributes.append({"trait_type": "Monochrome", "value": "Yes"})
    if traits.rare_crease_lines:
        attributes.append({"trait_type": "Crease Lines", "value": "Visible"})
    if traits.rare_hit_counts:
        attributes.append({"trait_type": "Hit Counts", "value": "Visible"})

    return {
        "name": f"Fold #{token_id}",
        "description": METADATA_DESCRIPTION,
        "image": f"{image_base_url}/{token_id}" if image_base_url else "",
        "attributes": attributes,
    }
