"""Ordering of segments by nearness to a shared origin.

The sweep in ``visibility.py`` keeps its active segments sorted so that the
first one is the occluder a ray from the origin hits first. Computing actual
distances along the current ray would tie the ordering to that ray's angle;
instead ``SegmentByDistance.compare`` decides "nearer" purely from side tests,
which stay stable for as long as both segments are active.

The comparison assumes a ray from the origin can be drawn through both
segments, and that segments only touch at shared endpoints. Under those
assumptions the side tests (origin vs. each line, each segment's endpoints vs.
the other's line) decide the order:

  * Origin on neither line: a segment whose endpoints both lie on the
    origin's side of the other segment's line is the nearer one. If a segment
    straddles the other's line, the other segment cannot straddle back
    (they would cross), so the decision moves to that other segment.
  * Origin on one line: that segment's off-line endpoint gives the side.
  * Origin on both lines: the nearest endpoint wins.
  * Shared vertex: the free endpoints decide; when both free ends lie on the
    same side as the origin (or both on the opposite side) the two segments
    only meet the common ray at the vertex, and compare equal.

Combinations that cannot occur for valid input (they only arise from
tolerance noise) fall back to comparing nearest-endpoint distances.
"""

from __future__ import annotations

import logging

from .types import GeometryError, Point, Segment, Side

log = logging.getLogger(__name__)


def _first_side(s1: Side | None, s2: Side | None) -> Side | None:
    return s1 if s1 is not None else s2


def _compare_nearest_endpoints(q: Point, s1: Segment, s2: Segment) -> int:
    d1 = min(q.dist_sq(s1.a), q.dist_sq(s1.b))
    d2 = min(q.dist_sq(s2.a), q.dist_sq(s2.b))
    if d1 < d2:
        return -1
    if d1 > d2:
        return 1
    raise GeometryError(f"Tried to compare segments that intersect: {s1}, {s2}")


class SegmentByDistance:
    """A segment bound to an origin, ordered by nearness to that origin.

    Only meaningful between segments a single ray from the origin crosses.
    """

    __slots__ = ("origin", "segment")

    def __init__(self, origin: Point, segment: Segment) -> None:
        self.origin = origin
        self.segment = segment

    def __repr__(self) -> str:
        return f"SegmentByDistance({self.origin}, {self.segment})"

    def compare(self, other: SegmentByDistance) -> int:
        """Return -1 if self is nearer, 1 if farther, 0 if indistinguishable."""
        if self.origin is not other.origin and self.origin != other.origin:
            raise GeometryError(
                "Tried to compare segments by distance to different origins"
            )

        q = self.origin
        s1 = self.segment
        s2 = other.segment

        log.debug("Comparing S1=%s & S2=%s with Q=%s", s1, s2, q)

        if s1 is s2:
            log.debug(" -> S1 and S2 are the same segment")
            return 0

        q_to_s1 = s1.which_side(q)
        q_to_s2 = s2.which_side(q)

        s2a_to_s1 = s1.which_side(s2.a)
        s2b_to_s1 = s1.which_side(s2.b)
        s1a_to_s2 = s2.which_side(s1.a)
        s1b_to_s2 = s2.which_side(s1.b)

        if q_to_s1 is None and q_to_s2 is None:
            log.debug(" -> Q is on the lines S1 & S2")
            return _compare_nearest_endpoints(q, s1, s2)

        if q_to_s2 is None:
            log.debug(" -> Q is on the line S2")
            s2_to_s1 = _first_side(s2a_to_s1, s2b_to_s1)
            if s2_to_s1 is None:
                # S2 lies on S1's line, so Q would be on it too.
                return _compare_nearest_endpoints(q, s1, s2)
            return 1 if s2_to_s1 == q_to_s1 else -1

        if q_to_s1 is None:
            log.debug(" -> Q is on the line S1")
            s1_to_s2 = _first_side(s1a_to_s2, s1b_to_s2)
            if s1_to_s2 is None:
                return _compare_nearest_endpoints(q, s1, s2)
            return -1 if s1_to_s2 == q_to_s2 else 1

        log.debug(" -> Q is on the %s of S1 and the %s of S2", q_to_s1, q_to_s2)

        if s1a_to_s2 is not None and s1b_to_s2 is not None:
            if s1a_to_s2 == s1b_to_s2:
                log.debug(" -> S1 is entirely on the %s of S2", s1a_to_s2)
                return -1 if s1a_to_s2 == q_to_s2 else 1

            log.debug(" -> S1 straddles the line of S2")
            if s2a_to_s1 is not None and s2b_to_s1 is not None:
                if s2a_to_s1 != s2b_to_s1:
                    raise GeometryError(
                        f"Tried to compare segments that cross: {s1}, {s2}"
                    )
                return 1 if s2a_to_s1 == q_to_s1 else -1

            s2_to_s1 = _first_side(s2a_to_s1, s2b_to_s1)
            if s2_to_s1 is None:
                return _compare_nearest_endpoints(q, s1, s2)
            log.debug(" -> one end of S2 is on the line of S1")
            return 1 if s2_to_s1 == q_to_s1 else -1

        s1_to_s2 = _first_side(s1a_to_s2, s1b_to_s2)
        if s1_to_s2 is None:
            log.debug(" -> S1 & S2 are on the same line and their ends touch")
            return 0

        log.debug(" -> one end of S1 is on the line of S2")

        if s2a_to_s1 is not None and s2b_to_s1 is not None:
            if s2a_to_s1 == s2b_to_s1:
                log.debug(" -> S2 is entirely on the %s of S1", s2a_to_s1)
                return 1 if s2a_to_s1 == q_to_s1 else -1
            # T-junction: S1 ends on S2, S2 straddles S1's line.
            log.debug(" -> S1 meets S2 in a T")
            return -1 if s1_to_s2 == q_to_s2 else 1

        s2_to_s1 = _first_side(s2a_to_s1, s2b_to_s1)
        if s2_to_s1 is None:
            return _compare_nearest_endpoints(q, s1, s2)

        log.debug(" -> ends of S1 & S2 are touching")
        s1_faces_q = s1_to_s2 == q_to_s2
        s2_faces_q = s2_to_s1 == q_to_s1
        if s1_faces_q == s2_faces_q:
            log.debug(" -> S1 & S2 form a '<' or '>' shape around Q, equal")
            return 0
        if s1_faces_q:
            log.debug(" -> S1 & S2 form a '<' or '>' shape and S1 is closer")
            return -1
        log.debug(" -> S1 & S2 form a '<' or '>' shape and S2 is closer")
        return 1

    def __lt__(self, other: SegmentByDistance) -> bool:
        return self.compare(other) < 0

    def __le__(self, other: SegmentByDistance) -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: SegmentByDistance) -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: SegmentByDistance) -> bool:
        return self.compare(other) >= 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SegmentByDistance):
            return NotImplemented
        return self.compare(other) == 0

    __hash__ = None  # type: ignore[assignment]
