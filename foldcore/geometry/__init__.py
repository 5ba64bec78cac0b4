# Shared 2D geometry for folding and intersection finding

from .polygon import (
    Bounds,
    GeometryError,
    Polygon,
    bounds,
    clip_line_to_rect,
    convex_hull,
    ensure_ccw,
    is_ccw,
    normalize_polygon,
    on_line,
    point_line_distance,
    rectangle,
    reflect_point,
    reflect_polygon,
    shares_crease_points,
    signed_area,
    split_polygon,
    union_along_crease,
)
from .vector import Point

__all__ = [
    "Bounds",
    "GeometryError",
    "Point",
    "Polygon",
    "bounds",
    "clip_line_to_rect",
    "convex_hull",
    "ensure_ccw",
    "is_ccw",
    "normalize_polygon",
    "on_line",
    "point_line_distance",
    "rectangle",
    "reflect_point",
    "reflect_polygon",
    "shares_crease_points",
    "signed_area",
    "split_polygon",
    "union_along_crease",
]
