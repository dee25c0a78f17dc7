"""Summaries of a visibility boundary: region, area and angular coverage.

``compute_visibility`` returns only the boundary. The visible region is the
union of the wedges (origin, a, b) over boundary segments; its area divided by
the area of the play field gives an observer's visibility ratio, the same
metric used to score how open a layout is.
"""

from __future__ import annotations

import math

from shapely.geometry import Polygon as ShapelyPolygon
from shapely.ops import unary_union

from .types import EPSILON, Point, Segment


def visible_region(origin: Point, boundary: list[Segment]):
    """Return the visible region as a shapely geometry.

    Wedges with no area (boundary segments aligned with the origin) are
    skipped.
    """
    wedges = []
    for seg in boundary:
        wedge = ShapelyPolygon(
            [origin.to_tuple(), seg.a.to_tuple(), seg.b.to_tuple()]
        )
        if wedge.area > 0.0:
            wedges.append(wedge)
    if not wedges:
        return ShapelyPolygon()
    return unary_union(wedges)


def visible_area(origin: Point, boundary: list[Segment]) -> float:
    return visible_region(origin, boundary).area


def visible_fraction(
    origin: Point,
    boundary: list[Segment],
    bounds: list[tuple[float, float]],
) -> float:
    """Visible area divided by the area of the ``bounds`` polygon."""
    bounds_poly = ShapelyPolygon(bounds)
    if bounds_poly.area <= 0.0:
        return 0.0
    region = visible_region(origin, boundary).intersection(bounds_poly)
    return region.area / bounds_poly.area


def _interval(origin: Point, seg: Segment) -> tuple[float, float]:
    """Counter-clockwise angular interval covered by ``seg``, start <= end."""
    da = origin.dir(seg.a)
    db = origin.dir(seg.b)
    angle_a = math.atan2(da[1], da[0])
    angle_b = math.atan2(db[1], db[0])
    # Cross product sign says whether a -> b runs counter-clockwise.
    if da[0] * db[1] - da[1] * db[0] >= 0.0:
        start, end = angle_a, angle_b
    else:
        start, end = angle_b, angle_a
    if end < start:
        end += math.tau
    return start, end


def angular_gaps(
    origin: Point,
    boundary: list[Segment],
    tolerance: float = EPSILON,
) -> list[tuple[float, float]]:
    """Angle ranges around ``origin`` not covered by any boundary segment.

    Ranges are (start, end) angles within [-pi, pi]. An empty list means the
    boundary surrounds the origin completely.
    """
    intervals: list[tuple[float, float]] = []
    for seg in boundary:
        start, end = _interval(origin, seg)
        intervals.append((start, end))
        # Copy a seam-crossing interval one turn back so it also covers the
        # beginning of the [-pi, pi] range.
        if end > math.pi:
            intervals.append((start - math.tau, end - math.tau))
    intervals.sort()

    gaps: list[tuple[float, float]] = []
    cursor = -math.pi
    for start, end in intervals:
        if start > cursor + tolerance:
            gaps.append((cursor, start))
        cursor = max(cursor, end)
    if cursor < math.pi - tolerance:
        gaps.append((cursor, math.pi))
    return gaps
