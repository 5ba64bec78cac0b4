"""
Crease intersections, per-cell aggregation and adaptive density thresholds.

Pairwise segment tests run vectorised over numpy arrays; the result order matches a plain
i < j double loop so downstream aggregation stays deterministic.
"""
import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .geometry import Point
from .geometry.polygon import PARALLEL_EPS
from .simulator import Crease

logger = logging.getLogger(__name__)

SEGMENT_T_MIN = 0.001
SEGMENT_T_MAX = 0.999
THRESHOLD_EPS = 0.01
FALLBACK_THRESHOLDS = (1.0, 2.0, 3.0, 999.0)


@dataclass(frozen=True)
class Intersection:
    point: Point
    depth1: int
    depth2: int
    gap: int
    weight: float


@dataclass(frozen=True)
class Thresholds:
    t1: float
    t2: float
    t3: float
    t_extreme: float

    def as_tuple(self) -> tuple[float, float, float, float]:
        return self.t1, self.t2, self.t3, self.t_extreme


@dataclass
class CellStats:
    """Per-cell accumulators, indexed [col, row]."""
    weights: np.ndarray
    max_gap: np.ndarray
    counts: np.ndarray

    @property
    def cols(self) -> int:
        return int(self.weights.shape[0])

    @property
    def rows(self) -> int:
        return int(self.weights.shape[1])

    def nonzero_weights(self) -> np.ndarray:
        return self.weights[self.weights > 0]


def _crossings(p1: np.ndarray, p2: np.ndarray, i: np.ndarray, j: np.ndarray):
    """Segment pairs (i[k], j[k]): interior-crossing mask plus the t / u parameters along each."""
    d1 = p2[i] - p1[i]
    d2 = p2[j] - p1[j]
    dp = p1[j] - p1[i]
    denom = d1[:, 0] * d2[:, 1] - d1[:, 1] * d2[:, 0]
    ok = np.abs(denom) >= PARALLEL_EPS
    safe = np.where(ok, denom, 1.0)
    t = (dp[:, 0] * d2[:, 1] - dp[:, 1] * d2[:, 0]) / safe
    u = (dp[:, 0] * d1[:, 1] - dp[:, 1] * d1[:, 0]) / safe
    ok &= (t >= SEGMENT_T_MIN) & (t <= SEGMENT_T_MAX) & (u >= SEGMENT_T_MIN) & (u <= SEGMENT_T_MAX)
    return ok, t, u


def segment_intersect(a1: Point, a2: Point, b1: Point, b2: Point) -> tuple[Point, float, float] | None:
    """Interior crossing of two segments as (point, t, u); None when parallel or outside."""
    p1 = np.array([[a1.x, a1.y], [b1.x, b1.y]], dtype=float)
    p2 = np.array([[a2.x, a2.y], [b2.x, b2.y]], dtype=float)
    ok, t, u = _crossings(p1, p2, np.array([0]), np.array([1]))
    if not ok[0]:
        return None
    tk = float(t[0])
    return Point(a1.x + (a2.x - a1.x) * tk, a1.y + (a2.y - a1.y) * tk), tk, float(u[0])


def find_intersections(creases: Sequence[Crease]) -> list[Intersection]:
    """All interior crossings between pairs of creases (i < j). Near-parallel pairs are skipped."""
    n = len(creases)
    if n < 2:
        return []
    p1 = np.array([[c.p1.x, c.p1.y] for c in creases], dtype=float)
    p2 = np.array([[c.p2.x, c.p2.y] for c in creases], dtype=float)
    depth = np.array([c.depth for c in creases], dtype=np.int64)
    # a missing or zero weight counts as 1
    weight = np.array([c.weight or 1.0 for c in creases], dtype=float)

    i, j = np.triu_indices(n, k=1)
    ok, t, _ = _crossings(p1, p2, i, j)
    idx = np.flatnonzero(ok)
    d1 = p2[i[idx]] - p1[i[idx]]
    xs = p1[i[idx], 0] + d1[:, 0] * t[idx]
    ys = p1[i[idx], 1] + d1[:, 1] * t[idx]
    hits = []
    for k, x, y in zip(idx, xs, ys):
        a, b = int(i[k]), int(j[k])
        hits.append(
            Intersection(
                point=Point(float(x), float(y)),
                depth1=int(depth[a]),
                depth2=int(depth[b]),
                gap=abs(int(depth[b]) - int(depth[a])),
                weight=float(weight[a] + weight[b]),
            )
        )
    logger.debug("%d creases -> %d intersections", n, len(hits))
    return hits


def aggregate(
    intersections: Sequence[Intersection],
    cell_width: float,
    cell_height: float,
    cols: int,
    rows: int,
) -> CellStats:
    """Bucket intersections into cells by integer division; hits outside the grid are dropped."""
    cols, rows = max(0, int(cols)), max(0, int(rows))
    weights = np.zeros((cols, rows), dtype=float)
    max_gap = np.zeros((cols, rows), dtype=np.int64)
    counts = np.zeros((cols, rows), dtype=np.int64)
    if not intersections or cell_width <= 0 or cell_height <= 0:
        return CellStats(weights, max_gap, counts)

    pts = np.array([[h.point.x, h.point.y] for h in intersections], dtype=float)
    col = np.floor(pts[:, 0] / cell_width).astype(np.int64)
    row = np.floor(pts[:, 1] / cell_height).astype(np.int64)
    inside = (col >= 0) & (col < cols) & (row >= 0) & (row < rows)
    w = np.array([h.weight for h in intersections], dtype=float)
    g = np.array([h.gap for h in intersections], dtype=np.int64)

    col, row = col[inside], row[inside]
    np.add.at(weights, (col, row), w[inside])
    np.maximum.at(max_gap, (col, row), g[inside])
    np.add.at(counts, (col, row), 1)
    return CellStats(weights, max_gap, counts)


def _percentile(sorted_values: np.ndarray, p: float) -> float:
    idx = int(len(sorted_values) * p)
    return float(sorted_values[min(idx, len(sorted_values) - 1)])


def adaptive_thresholds(weights) -> Thresholds:
    """
    t1/t2/t3/t_extreme from the non-zero weights: 70th, 94th, 94th + 1 and 98.5th percentile.
    Each threshold is at least the previous one plus 0.01; no non-zero weights gives (1, 2, 3, 999).
    """
    values = np.asarray(weights, dtype=float).ravel()
    values = np.sort(values[values > 0])
    if values.size == 0:
        return Thresholds(*FALLBACK_THRESHOLDS)
    p70 = _percentile(values, 0.70)
    p94 = _percentile(values, 0.94)
    p985 = _percentile(values, 0.985)
    t1 = max(THRESHOLD_EPS, p70)
    t2 = max(t1 + THRESHOLD_EPS, p94)
    t3 = max(t2 + THRESHOLD_EPS, p94 + 1)
    t_extreme = max(t3 + THRESHOLD_EPS, p985)
    return Thresholds(t1, t2, t3, t_extreme)


def level_of(weight: float, thresholds: Thresholds) -> int:
    """Base density level 0-3."""
    if weight == 0:
        return 0
    if weight <= thresholds.t1:
        return 1
    if weight <= thresholds.t2:
        return 2
    return 3
