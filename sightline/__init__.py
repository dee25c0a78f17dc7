"""2D visibility polygons for occluder segments.

``compute_visibility(origin, segments)`` returns the boundary segments that
are directly visible from ``origin``; see ``visibility.py`` for the sweep and
``ordering.py`` for how segments are ordered by nearness.
"""

from .ordering import SegmentByDistance
from .types import EPSILON, GeometryError, Point, Segment, Side
from .visibility import compute_visibility

__all__ = [
    "EPSILON",
    "GeometryError",
    "Point",
    "Segment",
    "SegmentByDistance",
    "Side",
    "compute_visibility",
]
