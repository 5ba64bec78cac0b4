"""
Fold simulation: repeatedly fold a paper polygon along a computed crease and record
weighted crease segments. Every maxFolds iterations the sheet "exhales": each crease
weight decays by its own fixed multiplier. Deterministic for a given seed.
"""
import logging
import math
from dataclasses import dataclass, replace
from typing import Iterator, Sequence

from .geometry import (
    GeometryError,
    Point,
    Polygon,
    bounds,
    clip_line_to_rect,
    ensure_ccw,
    normalize_polygon,
    rectangle,
    reflect_polygon,
    signed_area,
    split_polygon,
    union_along_crease,
)
from .geometry.vector import add, distance, midpoint, normalize, perp, scale, sub
from .random_utils import SeededRNG, derive_channel, hash_seed
from .traits import FoldStrategy, WeightRange, generate_fold_strategy, generate_max_folds
from .traits.channels import CHANNEL_CREASE_WEIGHT, CHANNEL_DRIFT, CHANNEL_REDUCTION

logger = logging.getLogger(__name__)

MIN_CREASE_WEIGHT = 0.01
CREASE_EXTENT = 3.0          # crease line length, in multiples of the polygon's larger side
SOURCE_TOLERANCE = 1.0       # px: how close a split vertex must be to count as the source


@dataclass(frozen=True)
class Crease:
    p1: Point
    p2: Point
    depth: int                   # creation index, strictly increasing
    weight: float
    cycle_position: int
    reduction_multiplier: float  # fixed for the life of the crease

    def decayed(self) -> "Crease":
        """Weight after one exhale; never increases."""
        weight = min(self.weight, max(MIN_CREASE_WEIGHT, self.weight * self.reduction_multiplier))
        return replace(self, weight=weight)


def exhale(creases: Sequence[Crease]) -> list[Crease]:
    """Breathing-cycle decay applied to every existing crease."""
    return [c.decayed() for c in creases]


def reduction_multipliers(seed: int, max_folds: int) -> tuple[float, ...]:
    """One decay multiplier per cycle position, in [0.001, 0.251]."""
    rng = derive_channel(seed, CHANNEL_REDUCTION)
    return tuple(0.001 + rng.random() * 0.25 for _ in range(max_folds))


@dataclass(frozen=True)
class Drift:
    """Slow sinusoidal offset applied to crease placement."""
    freq_x: float
    freq_y: float
    phase_x: float
    phase_y: float

    @classmethod
    def from_seed(cls, seed: int) -> "Drift":
        rng = derive_channel(seed, CHANNEL_DRIFT)
        return cls(
            freq_x=rng.uniform(0.05, 0.2),
            freq_y=rng.uniform(0.05, 0.2),
            phase_x=rng.random() * math.pi * 2,
            phase_y=rng.random() * math.pi * 2,
        )

    def offset(self, fold_index: int, width: float, height: float) -> Point:
        amplitude = 0.3 + min(fold_index * 0.002, 0.2)
        return Point(
            math.sin(fold_index * self.freq_x + self.phase_x) * width * amplitude,
            math.sin(fold_index * self.freq_y + self.phase_y) * height * amplitude,
        )


@dataclass(frozen=True)
class FoldAttempt:
    """Outcome of folding one polygon once. failure is None when the fold applied."""
    polygon: Polygon
    source: Point | None = None
    target: Point | None = None
    crease_mid: Point | None = None
    crease_dir: Point | None = None
    failure: str | None = None     # skip | badsplit | badunion


@dataclass(frozen=True)
class FoldEvent:
    index: int
    polygon: Polygon
    creases: tuple[Crease, ...]
    applied: bool
    failure: str | None
    last_fold_target: Point | None


@dataclass(frozen=True)
class FoldResult:
    creases: tuple[Crease, ...]
    polygon: Polygon
    max_folds: int | None
    last_fold_target: Point | None
    skipped: int = 0


def crease_line(polygon: Polygon, mid: Point, crease_dir: Point) -> tuple[Point, Point]:
    """Crease through mid, long enough to cross the whole polygon."""
    b = bounds(polygon)
    extent = max(b.width, b.height) * CREASE_EXTENT
    return sub(mid, scale(crease_dir, extent)), add(mid, scale(crease_dir, extent))


def fold_halves(polygon: Polygon, source: Point, line_p1: Point, line_p2: Point) -> tuple[Polygon, Polygon] | None:
    """(staying, folding) halves of polygon; folding holds the source vertex. None on a bad split."""
    left, right = split_polygon(polygon, line_p1, line_p2)
    if len(left) < 3 or len(right) < 3:
        return None
    if any(distance(p, source) < SOURCE_TOLERANCE for p in left):
        return right, left
    return left, right


def _angle_gap(direction: Point, preferred_deg: float) -> float:
    """Smallest difference (0-90 degrees) between a direction and a preferred line angle."""
    angle = math.degrees(math.atan2(direction.y, direction.x)) % 180
    diff = abs(angle - preferred_deg % 180)
    return min(diff, 180 - diff)


class FoldSimulator:
    """
    Folds a width x height sheet num_folds times.

    Each iteration works on a fresh SeededRNG built from the working seed; the working seed is
    re-hashed after every attempt (success or failure), so a failed fold never stalls the loop.
    """

    def __init__(
        self,
        width: float,
        height: float,
        seed: int,
        weight_range: WeightRange | None = None,
        strategy: FoldStrategy | None = None,
        max_folds: int | None = None,
        *,
        renormalize_every: int = 5,
        min_distance_ratio: float = 0.05,
    ) -> None:
        self.width = width
        self.height = height
        self.seed = seed
        self.weight_range = weight_range or WeightRange("balanced", 0.0, 1.0)
        self.strategy = strategy or generate_fold_strategy(seed)
        self.max_folds = max_folds or generate_max_folds(seed)
        self.renormalize_every = max(1, renormalize_every)
        self.min_distance_ratio = min_distance_ratio

    @property
    def valid(self) -> bool:
        return bool(self.width) and bool(self.height) and self.width > 0 and self.height > 0

    # -- selection -----------------------------------------------------------------

    def _diagonal(self) -> float:
        return math.hypot(self.width, self.height)

    def _closeness(self, p: Point, focus: Point, spread: float) -> float:
        d = distance(p, focus) / max(spread * self._diagonal(), 1e-6)
        return 1.0 / (1.0 + d * d)

    def _pick_source(self, polygon: Polygon, rng: SeededRNG) -> int:
        s = self.strategy
        if s.kind == "clustered":
            focus = Point(s.cluster_x * self.width, s.cluster_y * self.height)
            return rng.weighted_index([self._closeness(p, focus, s.spread) for p in polygon])
        return rng.below(len(polygon))

    def _preferred_fold_angle(self, fold_index: int) -> float | None:
        """Angle (deg) the source->target direction should take; the crease is perpendicular."""
        kind = self.strategy.kind
        if kind == "horizontal":
            return 90.0
        if kind == "vertical":
            return 0.0
        if kind == "grid":
            return 90.0 if fold_index % 2 == 0 else 0.0
        if kind == "diagonal":
            return (self.strategy.angle or 45.0) + 90.0
        return None

    def _target_weights(self, source: Point, options: list[Point], fold_index: int) -> list[float] | None:
        s = self.strategy
        preferred = self._preferred_fold_angle(fold_index)
        if preferred is not None:
            tolerance = max(s.jitter, 1.0)
            return [1.0 / (1.0 + (_angle_gap(sub(t, source), preferred) / tolerance) ** 2) for t in options]
        if s.kind == "radial":
            focal = Point(s.focal_x * self.width, s.focal_y * self.height)
            reach = 0.1 * self._diagonal()
            weights = []
            for t in options:
                # distance from the focal point to the crease (perpendicular bisector of source->t)
                along = normalize(sub(t, source))
                off = abs((focal.x - (source.x + t.x) / 2) * along.x + (focal.y - (source.y + t.y) / 2) * along.y)
                weights.append(1.0 / (1.0 + (off / reach) ** 2))
            return weights
        if s.kind == "clustered":
            focus = Point(s.cluster_x * self.width, s.cluster_y * self.height)
            return [self._closeness(t, focus, s.spread) for t in options]
        return None

    def _pick_target(self, polygon: Polygon, source_idx: int, fold_index: int, rng: SeededRNG) -> Point:
        source = polygon[source_idx]
        options = [p for i, p in enumerate(polygon) if i != source_idx]
        n = len(polygon)
        for i in range(n):
            p1, p2 = polygon[i], polygon[(i + 1) % n]
            t = rng.uniform(0.2, 0.8)
            options.append(Point(p1.x + (p2.x - p1.x) * t, p1.y + (p2.y - p1.y) * t))
        weights = self._target_weights(source, options, fold_index)
        if weights is None:
            return options[rng.below(len(options))]
        return options[rng.weighted_index(weights)]

    # -- one fold ------------------------------------------------------------------

    def step(self, polygon: Polygon, fold_index: int, rng: SeededRNG) -> FoldAttempt:
        """Fold polygon once. Pure: returns the new polygon (or the old one with a failure tag)."""
        b = bounds(polygon)
        source_idx = self._pick_source(polygon, rng)
        source = polygon[source_idx]
        target = self._pick_target(polygon, source_idx, fold_index, rng)
        if fold_index == 0:
            target = Point(
                max(0.0, min(self.width * 0.95, target.x)),
                max(0.0, min(self.height * 0.95, target.y)),
            )

        if distance(source, target) < min(b.width, b.height) * self.min_distance_ratio:
            return FoldAttempt(polygon, source, target, failure="skip")

        mid = midpoint(source, target)
        crease_dir = perp(normalize(sub(target, source)))
        line_p1, line_p2 = crease_line(polygon, mid, crease_dir)
        halves = fold_halves(polygon, source, line_p1, line_p2)
        if halves is None:
            return FoldAttempt(polygon, source, target, mid, crease_dir, failure="badsplit")
        staying, folding = halves
        reflected = ensure_ccw(reflect_polygon(folding, line_p1, line_p2))
        try:
            merged = union_along_crease(ensure_ccw(staying), reflected, line_p1, line_p2)
        except GeometryError as e:
            logger.debug("fold %d: %s", fold_index, e)
            return FoldAttempt(polygon, source, target, mid, crease_dir, failure="badunion")
        merged = ensure_ccw(merged)
        if len(merged) < 3 or signed_area(merged) <= 0:
            return FoldAttempt(polygon, source, target, mid, crease_dir, failure="badunion")
        return FoldAttempt(merged, source, target, mid, crease_dir)

    # -- loop ----------------------------------------------------------------------

    def iter_folds(self, num_folds: int) -> Iterator[FoldEvent]:
        """Yield the sheet state after every fold attempt."""
        if not self.valid or not num_folds or num_folds <= 0:
            return
        polygon = rectangle(self.width, self.height)
        weight_rng = derive_channel(self.seed, CHANNEL_CREASE_WEIGHT)
        drift = Drift.from_seed(self.seed)
        multipliers = reduction_multipliers(self.seed, self.max_folds)
        wr = self.weight_range

        creases: list[Crease] = []
        last_target: Point | None = None
        working_seed = self.seed

        for f in range(num_folds):
            cycle_position = f % self.max_folds
            if cycle_position == 0 and f >= self.max_folds:
                creases = exhale(creases)

            if f > 0 and f % self.renormalize_every == 0:
                polygon = ensure_ccw(normalize_polygon(polygon, self.width, self.height))

            attempt = self.step(polygon, f, SeededRNG(working_seed))
            if attempt.failure:
                logger.debug("fold %d skipped (%s)", f, attempt.failure)
                working_seed = hash_seed(working_seed, f"{attempt.failure}{f}")
                yield FoldEvent(f, polygon, tuple(creases), False, attempt.failure, last_target)
                continue

            anchor = add(attempt.crease_mid, drift.offset(f, self.width, self.height))
            chord = clip_line_to_rect(anchor, attempt.crease_dir, self.width, self.height)
            if chord is not None:
                creases.append(
                    Crease(
                        p1=chord[0],
                        p2=chord[1],
                        depth=len(creases),
                        weight=wr.min + weight_rng.random() * (wr.max - wr.min),
                        cycle_position=cycle_position,
                        reduction_multiplier=multipliers[cycle_position],
                    )
                )
                last_target = Point(
                    max(0.0, min(self.width - 1, attempt.target.x)),
                    max(0.0, min(self.height - 1, attempt.target.y)),
                )

            polygon = attempt.polygon
            working_seed = hash_seed(working_seed, f"fold{f}")
            yield FoldEvent(f, polygon, tuple(creases), True, None, last_target)

    def run(self, num_folds: int) -> FoldResult:
        if not self.valid:
            return FoldResult((), (), None, None)
        start = rectangle(self.width, self.height)
        if not num_folds or num_folds <= 0:
            return FoldResult((), start, self.max_folds, None)

        last: FoldEvent | None = None
        skipped = 0
        for event in self.iter_folds(num_folds):
            last = event
            skipped += not event.applied
        polygon = last.polygon if last else start
        polygon = ensure_ccw(normalize_polygon(polygon, self.width, self.height))
        logger.debug(
            "seed %s: %d folds, %d creases, %d skipped", self.seed, num_folds, len(last.creases), skipped
        )
        return FoldResult(last.creases, polygon, self.max_folds, last.last_fold_target, skipped)


def simulate_folds(
    width: float,
    height: float,
    num_folds: int,
    seed: int,
    weight_range: WeightRange | None = None,
    strategy: FoldStrategy | None = None,
    **kwargs,
) -> FoldResult:
    return FoldSimulator(width, height, seed, weight_range, strategy, **kwargs).run(num_folds)
