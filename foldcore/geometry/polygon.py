"""
Polygon algorithms for the fold simulator: half-plane split, reflection, hull union,
bounds and renormalisation, canvas clipping.
Polygons are tuples of Points; functions never mutate their input.
"""
import math
from typing import NamedTuple, Sequence

from .vector import Point, add, cross, distance, dot, near, scale, sub

Polygon = tuple[Point, ...]

PARALLEL_EPS = 1e-4
ON_CREASE_TOLERANCE = 1.0


class GeometryError(ValueError):
    """A geometric precondition does not hold (e.g. halves do not share the crease)."""


class Bounds(NamedTuple):
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


def rectangle(width: float, height: float) -> Polygon:
    return ensure_ccw((Point(0.0, 0.0), Point(width, 0.0), Point(width, height), Point(0.0, height)))


def signed_area(polygon: Sequence[Point]) -> float:
    if len(polygon) < 3:
        return 0.0
    total = 0.0
    for i, p in enumerate(polygon):
        q = polygon[(i + 1) % len(polygon)]
        total += p.x * q.y - q.x * p.y
    return total / 2


def is_ccw(polygon: Sequence[Point]) -> bool:
    return signed_area(polygon) > 0


def ensure_ccw(polygon: Sequence[Point]) -> Polygon:
    if len(polygon) >= 3 and signed_area(polygon) < 0:
        return tuple(reversed(polygon))
    return tuple(polygon)


def bounds(polygon: Sequence[Point]) -> Bounds:
    if not polygon:
        return Bounds(0.0, 0.0, 1.0, 1.0)
    xs = [p.x for p in polygon]
    ys = [p.y for p in polygon]
    return Bounds(min(xs), min(ys), max(xs), max(ys))


def normalize_polygon(polygon: Sequence[Point], width: float, height: float, padding: float = 0) -> Polygon:
    """Re-center and uniformly re-scale polygon to fit width x height."""
    if len(polygon) < 3:
        return tuple(polygon)
    b = bounds(polygon)
    if b.width < 1e-3 or b.height < 1e-3:
        return tuple(polygon)
    s = min((width - padding * 2) / b.width, (height - padding * 2) / b.height)
    cx, cy = (b.min_x + b.max_x) / 2, (b.min_y + b.max_y) / 2
    return tuple(Point((p.x - cx) * s + width / 2, (p.y - cy) * s + height / 2) for p in polygon)


def split_polygon(polygon: Sequence[Point], line_p1: Point, line_p2: Point) -> tuple[Polygon, Polygon]:
    """
    Split along the infinite line p1->p2 in one pass over the edges.
    Vertices on the line and edge crossings go to both halves.
    """
    if len(polygon) < 3:
        return (), ()
    a = -(line_p2.y - line_p1.y)
    b = line_p2.x - line_p1.x
    c = -(a * line_p1.x + b * line_p1.y)

    left: list[Point] = []
    right: list[Point] = []
    n = len(polygon)
    for i in range(n):
        curr = polygon[i]
        nxt = polygon[(i + 1) % n]
        s_curr = a * curr.x + b * curr.y + c
        s_next = a * nxt.x + b * nxt.y + c
        if s_curr <= 0:
            left.append(curr)
        if s_curr >= 0:
            right.append(curr)
        if (s_curr < 0 < s_next) or (s_next < 0 < s_curr):
            t = s_curr / (s_curr - s_next)
            hit = Point(curr.x + t * (nxt.x - curr.x), curr.y + t * (nxt.y - curr.y))
            left.append(hit)
            right.append(hit)
    return tuple(left), tuple(right)


def reflect_point(point: Point, line_p1: Point, line_p2: Point) -> Point:
    d = sub(line_p2, line_p1)
    len2 = dot(d, d)
    if len2 < PARALLEL_EPS:
        return point
    t = dot(sub(point, line_p1), d) / len2
    proj = add(line_p1, scale(d, t))
    return Point(2 * proj.x - point.x, 2 * proj.y - point.y)


def reflect_polygon(polygon: Sequence[Point], line_p1: Point, line_p2: Point) -> Polygon:
    return tuple(reflect_point(p, line_p1, line_p2) for p in polygon)


def point_line_distance(point: Point, line_p1: Point, line_p2: Point) -> float:
    d = sub(line_p2, line_p1)
    n = math.hypot(d.x, d.y)
    if n < 1e-9:
        return distance(point, line_p1)
    return abs(cross(sub(point, line_p1), d)) / n


def on_line(point: Point, line_p1: Point, line_p2: Point, tolerance: float = ON_CREASE_TOLERANCE) -> bool:
    return point_line_distance(point, line_p1, line_p2) < tolerance


def shares_crease_points(first: Sequence[Point], second: Sequence[Point], line_p1: Point, line_p2: Point) -> bool:
    """True when both polygons have a common point lying on the crease line."""
    on_first = [p for p in first if on_line(p, line_p1, line_p2)]
    return any(near(p, q) for p in on_first for q in second if on_line(q, line_p1, line_p2))


def convex_hull(points: Sequence[Point]) -> Polygon:
    """Monotone-chain hull, CCW, with near-duplicate points (< 0.5 apart) merged."""
    ordered = sorted(points)
    unique: list[Point] = []
    for p in ordered:
        if not any(abs(p.x - q.x) <= 0.5 and abs(p.y - q.y) <= 0.5 for q in unique):
            unique.append(p)
    if len(unique) < 3:
        return tuple(unique)

    def turn(o: Point, a: Point, b: Point) -> float:
        return (a.x - o.x) * (b.y - o.y) - (a.y - o.y) * (b.x - o.x)

    lower: list[Point] = []
    for p in unique:
        while len(lower) >= 2 and turn(lower[-2], lower[-1], p) <= 0:
            lower.pop()
        lower.append(p)
    upper: list[Point] = []
    for p in reversed(unique):
        while len(upper) >= 2 and turn(upper[-2], upper[-1], p) <= 0:
            upper.pop()
        upper.append(p)
    return tuple(lower[:-1] + upper[:-1])


def union_along_crease(staying: Sequence[Point], folded: Sequence[Point], line_p1: Point, line_p2: Point) -> Polygon:
    """
    Silhouette of two convex halves joined along the crease.

    Precondition: both halves share at least one point on the crease line (true for the
    two outputs of split_polygon, and preserved by reflecting one of them across it).
    Raises GeometryError otherwise.
    """
    if not shares_crease_points(staying, folded, line_p1, line_p2):
        raise GeometryError("halves do not meet on the crease")
    if all(on_line(p, line_p1, line_p2) for p in staying):
        return tuple(folded)
    if all(on_line(p, line_p1, line_p2) for p in folded):
        return tuple(staying)
    return convex_hull(list(staying) + list(folded))


def clip_line_to_rect(point: Point, direction: Point, width: float, height: float) -> tuple[Point, Point] | None:
    """Chord of the line (point + s * direction) across the rectangle [0,w] x [0,h]."""
    edges = (
        (Point(0.0, 0.0), Point(1.0, 0.0), width),
        (Point(width, 0.0), Point(0.0, 1.0), height),
        (Point(0.0, height), Point(1.0, 0.0), width),
        (Point(0.0, 0.0), Point(0.0, 1.0), height),
    )
    hits: list[Point] = []
    for origin, edge_dir, edge_len in edges:
        denom = cross(direction, edge_dir)
        if abs(denom) < PARALLEL_EPS:
            continue
        s = cross(sub(origin, point), edge_dir) / denom
        hit = add(point, scale(direction, s))
        along = dot(sub(hit, origin), edge_dir)
        if -0.001 <= along <= edge_len + 0.001:
            hit = Point(max(0.0, min(width, hit.x)), max(0.0, min(height, hit.y)))
            if not any(near(h, hit) for h in hits):
                hits.append(hit)
    if len(hits) < 2:
        return None
    hits.sort(key=lambda h: dot(sub(h, point), direction))
    return hits[0], hits[-1]
