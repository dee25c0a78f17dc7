"""Geometric primitives for the visibility engine.

``Point`` is a plain 2D value with vector arithmetic; displacements between
points are represented as ``Vector`` tuples. ``Segment`` is an unordered pair
of distinct points and provides the two queries the sweep is built on: which
side of its line a point lies on, and where its line meets a ray.

All tolerance checks use the single ``EPSILON`` constant. Exact ``==`` is
kept for points so they can be hashed and deduplicated; use ``is_close``
wherever floating-point noise matters.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass

log = logging.getLogger(__name__)

EPSILON = 1e-4

Vector = tuple[float, float]  # (dx, dy)


class GeometryError(ValueError):
    """Input geometry violates a precondition of the visibility computation."""


class Side(enum.Enum):
    LEFT = "left"
    RIGHT = "right"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    @staticmethod
    def from_tuple(t: tuple[float, float]) -> Point:
        return Point(float(t[0]), float(t[1]))

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    def __add__(self, v: Vector) -> Point:
        return Point(self.x + v[0], self.y + v[1])

    def __sub__(self, other):
        if isinstance(other, Point):
            return (self.x - other.x, self.y - other.y)
        return Point(self.x - other[0], self.y - other[1])

    def dir(self, other: Point) -> Vector:
        """Return the vector ``d`` such that ``self + d == other``."""
        return (other.x - self.x, other.y - self.y)

    def dist(self, other: Point) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def dist_sq(self, other: Point) -> float:
        dx = other.x - self.x
        dy = other.y - self.y
        return dx * dx + dy * dy

    def lerp(self, other: Point, t: float) -> Point:
        return Point(
            self.x * (1.0 - t) + other.x * t,
            self.y * (1.0 - t) + other.y * t,
        )

    def midpoint(self, other: Point) -> Point:
        return Point((self.x + other.x) / 2.0, (self.y + other.y) / 2.0)

    def is_close(self, other: Point) -> bool:
        """Componentwise equality within ``EPSILON``."""
        return (
            abs(self.x - other.x) <= EPSILON
            and abs(self.y - other.y) <= EPSILON
        )

    def __str__(self) -> str:
        return f"[{self.x:g} {self.y:g}]"


def _length(v: Vector) -> float:
    return math.hypot(v[0], v[1])


def _signed_angle(u: Vector, v: Vector) -> float:
    """Counter-clockwise angle from ``u`` to ``v``, in [-pi, pi]."""
    cross = u[0] * v[1] - u[1] * v[0]
    dot = u[0] * v[0] + u[1] * v[1]
    return math.atan2(cross, dot)


@dataclass(frozen=True, eq=False)
class Segment:
    """An unordered pair of distinct points.

    Equality ignores endpoint order: ``a<=>b == b<=>a``. Building a segment
    whose endpoints are closer than ``EPSILON`` raises ``GeometryError``;
    use ``Segment.new`` where zero-length edges should silently disappear.
    """

    a: Point
    b: Point

    def __post_init__(self) -> None:
        if self.a.dist_sq(self.b) < EPSILON * EPSILON:
            raise GeometryError(
                f"Degenerate segment {self.a}<=>{self.b}"
            )

    @staticmethod
    def new(a: Point, b: Point) -> Segment | None:
        if a.dist_sq(b) < EPSILON * EPSILON:
            return None
        return Segment(a, b)

    @staticmethod
    def from_coords(
        x1: float, y1: float, x2: float, y2: float
    ) -> Segment | None:
        return Segment.new(Point(x1, y1), Point(x2, y2))

    def ab(self) -> tuple[Point, Point]:
        return (self.a, self.b)

    def to_tuple(self) -> tuple[float, float, float, float]:
        return (self.a.x, self.a.y, self.b.x, self.b.y)

    def length(self) -> float:
        return self.a.dist(self.b)

    def distance_to(self, point: Point) -> float:
        """Shortest distance from ``point`` to any point of the segment."""
        dx, dy = self.a.dir(self.b)
        t = (
            (point.x - self.a.x) * dx + (point.y - self.a.y) * dy
        ) / (dx * dx + dy * dy)
        t = max(0.0, min(1.0, t))
        return point.dist(self.a.lerp(self.b, t))

    def which_side(self, point: Point) -> Side | None:
        """Classify ``point`` against the directed line ``a -> b``.

        Returns None when the point coincides with either endpoint or is
        collinear with the segment (angle ~0 or ~pi).
        """
        if _length(point.dir(self.a)) < EPSILON:
            log.debug("%s is on the start of %s", point, self)
            return None

        if _length(point.dir(self.b)) < EPSILON:
            log.debug("%s is on the end of %s", point, self)
            return None

        angle = _signed_angle(self.a.dir(self.b), self.a.dir(point))

        if abs(angle) < EPSILON or abs(abs(angle) - math.pi) < EPSILON:
            log.debug("%s is on the line %s", point, self)
            return None

        return Side.LEFT if angle > 0.0 else Side.RIGHT

    def intersect_with_ray(
        self, origin: Point, direction: Vector
    ) -> Point | None:
        """Intersect the segment's line with the line through the ray.

        Neither the segment extent nor the ray's positive half is enforced.
        Returns None for parallel or coincident lines.
        """
        x1, y1 = self.a.x, self.a.y
        x2, y2 = self.b.x, self.b.y
        x3, y3 = origin.x, origin.y
        x4, y4 = origin.x + direction[0], origin.y + direction[1]

        denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
        if abs(denom) < EPSILON:
            return None

        det_s = x1 * y2 - y1 * x2
        det_r = x3 * y4 - y3 * x4
        x = (det_s * (x3 - x4) - (x1 - x2) * det_r) / denom
        y = (det_s * (y3 - y4) - (y1 - y2) * det_r) / denom
        return Point(x, y)

    def is_close(self, other: Segment) -> bool:
        """Endpoint-order-independent equality within ``EPSILON``."""
        return (self.a.is_close(other.a) and self.b.is_close(other.b)) or (
            self.a.is_close(other.b) and self.b.is_close(other.a)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Segment):
            return NotImplemented
        return (self.a == other.a and self.b == other.b) or (
            self.a == other.b and self.b == other.a
        )

    def __hash__(self) -> int:
        return hash(frozenset((self.a, self.b)))

    def __str__(self) -> str:
        return f"{self.a}<=>{self.b}"
