"""
2D point/vector helpers. Points are immutable; every operation returns a new Point.
"""
import math
from typing import NamedTuple


class Point(NamedTuple):
    x: float
    y: float


def add(a: Point, b: Point) -> Point:
    return Point(a.x + b.x, a.y + b.y)


def sub(a: Point, b: Point) -> Point:
    return Point(a.x - b.x, a.y - b.y)


def scale(v: Point, s: float) -> Point:
    return Point(v.x * s, v.y * s)


def dot(a: Point, b: Point) -> float:
    return a.x * b.x + a.y * b.y


def cross(a: Point, b: Point) -> float:
    return a.x * b.y - a.y * b.x


def length(v: Point) -> float:
    return math.hypot(v.x, v.y)


def distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def normalize(v: Point) -> Point:
    n = length(v)
    return scale(v, 1 / n) if n > 1e-4 else Point(0.0, 0.0)


def perp(v: Point) -> Point:
    return Point(-v.y, v.x)


def midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def near(a: Point, b: Point, tolerance: float = 0.5) -> bool:
    return distance(a, b) < tolerance
