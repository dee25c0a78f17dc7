"""Visibility polygon boundary via an angular sweep.

Given an origin (a light, an observer) and a set of opaque segments, this
module answers: which parts of which segments can be seen directly from the
origin? The answer is a list of boundary segments which, together with radii
from the origin, tile the visible region. Deferred lighting turns them into a
triangle fan to mask light so it does not leak through walls.

The algorithm sweeps a ray once around the origin:

  1. Every segment produces a START event at the endpoint with the smaller
     angle (counter-clockwise, accounting for the seam at +/-pi) and an END
     event at the other one. Angles are measured from +X with atan2, so the
     sweep starts at -pi.
  2. Segments that already cross the ray at the starting angle (those that
     wrap across the seam) are found by replaying the events once.
  3. An active set keeps the crossed segments ordered nearest-first using
     ``SegmentByDistance``. Whenever the nearest segment changes, the
     visible boundary is closed on the old one and reopened on the new one,
     at the intersection with the current ray.
  4. A boundary left open across the seam is joined to the piece that was
     closed before any boundary was opened.

Segments must not cross except at shared endpoints, and the origin must not
lie on any segment. Both are the caller's responsibility; violations raise
``GeometryError`` where they are detected.
"""

from __future__ import annotations

import bisect
import enum
import logging
import math
from dataclasses import dataclass

from .ordering import SegmentByDistance
from .types import EPSILON, GeometryError, Point, Segment

log = logging.getLogger(__name__)

# Zero angle of the sweep; the wraparound seam is the opposite direction.
REFERENCE_DIRECTION = (1.0, 0.0)


class EventKind(enum.IntEnum):
    # Value order is the tie-break order at equal angles.
    START = 0
    END = 1

    def __str__(self) -> str:
        return self.name.lower()


@dataclass
class Event:
    kind: EventKind
    segment_index: int
    point: Point
    angle: float

    def sort_key(self) -> tuple[float, int]:
        return (self.angle, self.kind)


def _angle_of(origin: Point, point: Point) -> float:
    dx, dy = origin.dir(point)
    rx, ry = REFERENCE_DIRECTION
    return math.atan2(rx * dy - ry * dx, rx * dx + ry * dy)


def _build_events(origin: Point, segments: list[Segment]) -> list[Event]:
    """Create START/END events for every segment not aligned with origin."""
    events: list[Event] = []

    for segment_index, segment in enumerate(segments):
        point_a, point_b = segment.ab()
        angle_a = _angle_of(origin, point_a)
        angle_b = _angle_of(origin, point_b)
        angle_diff = abs(angle_a - angle_b)

        if angle_diff <= EPSILON or abs(angle_diff - math.tau) <= EPSILON:
            log.debug(
                "Skipping a segment %s aligned with the origin %s",
                segment,
                origin,
            )
            continue

        if abs(angle_diff - math.pi) <= EPSILON:
            raise GeometryError(f"Origin {origin} is on the segment {segment}")

        # The segment spans counter-clockwise from START to END; when the
        # angular difference exceeds pi it crosses the seam.
        if (angle_a < angle_b) != (angle_diff > math.pi):
            start, start_angle, end, end_angle = (
                point_a,
                angle_a,
                point_b,
                angle_b,
            )
        else:
            start, start_angle, end, end_angle = (
                point_b,
                angle_b,
                point_a,
                angle_a,
            )

        events.append(Event(EventKind.START, segment_index, start, start_angle))
        events.append(Event(EventKind.END, segment_index, end, end_angle))

    return events


class _ActiveSegments:
    """Segments crossed by the sweep ray, nearest first.

    Segments that compare equal (touching at the ray) are all kept; removal
    is by identity so equal neighbours are never confused with each other.
    """

    def __init__(self) -> None:
        self._items: list[SegmentByDistance] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def nearest(self) -> SegmentByDistance | None:
        return self._items[0] if self._items else None

    def insert(self, item: SegmentByDistance) -> None:
        bisect.insort_right(self._items, item)

    def remove(self, item: SegmentByDistance) -> None:
        for i, existing in enumerate(self._items):
            if existing is item:
                del self._items[i]
                return
        raise AssertionError(f"Segment {item.segment} is not active")


class _BoundaryAccumulator:
    """Pairs boundary START/END vertices into visible segments.

    An END arriving before any START belongs to the segment that wraps
    across the seam; it is kept aside and joined with the final START.
    """

    def __init__(self) -> None:
        self.start: Point | None = None
        self.wrap_end: Point | None = None
        self.segments: list[Segment] = []

    def add(self, point: Point, kind: EventKind) -> None:
        if kind is EventKind.START:
            if self.start is not None:
                raise AssertionError(
                    f"Got a double start. Existing: {self.start}, New: {point}"
                )
            log.debug(" -> Saving %s as a start of a segment", point)
            self.start = point
            return

        if self.start is not None:
            self._emit(self.start, point)
            self.start = None
            return

        if self.wrap_end is not None:
            raise AssertionError(
                f"Got a double end. Existing: {self.wrap_end}, New: {point}"
            )
        log.debug(" -> Saving %s as the end of the wrapping segment", point)
        self.wrap_end = point

    def finish(self) -> list[Segment]:
        if self.start is not None and self.wrap_end is not None:
            self._emit(self.start, self.wrap_end)
        elif self.start is not None or self.wrap_end is not None:
            raise AssertionError(
                "Could not match the remaining points! "
                f"Remaining start: {self.start}, remaining end: {self.wrap_end}"
            )
        self.start = None
        self.wrap_end = None
        return self.segments

    def _emit(self, start: Point, end: Point) -> None:
        seg = Segment.new(start, end)
        if seg is None:
            log.debug(" -> Generated a degenerate segment at %s, skipping", start)
            return
        log.debug(" -> Adding a completed segment %s", seg)
        self.segments.append(seg)


def compute_visibility(origin: Point, segments: list[Segment]) -> list[Segment]:
    """Return the boundary segments visible from ``origin``.

    Segments must not intersect except at their endpoints, and ``origin``
    must not lie on any of them. The result is in sweep order, not input
    order, and generally contains clipped pieces of the input segments.
    """
    events = _build_events(origin, segments)
    if not events:
        raise GeometryError(f"No segment is visible from {origin}")

    events.sort(key=Event.sort_key)

    wrappers = [SegmentByDistance(origin, s) for s in segments]

    # Replay everything but the first event: whatever is still open at the
    # end already crosses the ray when the sweep begins.
    active_at_first_event: set[int] = set()
    for event in events[1:]:
        if event.kind is EventKind.START:
            active_at_first_event.add(event.segment_index)
        else:
            active_at_first_event.discard(event.segment_index)

    active = _ActiveSegments()
    for segment_index in sorted(active_at_first_event):
        active.insert(wrappers[segment_index])

    boundary = _BoundaryAccumulator()

    for event_i, event in enumerate(events):
        event_segment = wrappers[event.segment_index]
        event_dir = origin.dir(event.point)

        log.debug(
            "Processing event %2d: point %s, %s of %s (angle %.2f deg)",
            event_i,
            event.point,
            event.kind,
            event_segment.segment,
            math.degrees(event.angle),
        )

        nearest = active.nearest()

        if event.kind is EventKind.START:
            if nearest is None or event_segment < nearest:
                log.debug(" -> This event's segment will be the new nearest")
                if nearest is not None:
                    point = nearest.segment.intersect_with_ray(origin, event_dir)
                    if point is not None:
                        log.debug(" -> Closing %s at %s", nearest.segment, point)
                        boundary.add(point, EventKind.END)
                boundary.add(event.point, EventKind.START)

            active.insert(event_segment)
        else:
            active.remove(event_segment)

            if nearest is event_segment:
                log.debug(" -> This event's segment was the nearest")
                boundary.add(event.point, EventKind.END)

                new_nearest = active.nearest()
                if new_nearest is not None:
                    point = new_nearest.segment.intersect_with_ray(
                        origin, event_dir
                    )
                    if point is not None:
                        log.debug(
                            " -> Opening %s at %s", new_nearest.segment, point
                        )
                        boundary.add(point, EventKind.START)

    result = boundary.finish()
    if not result:
        raise GeometryError(f"No visible boundary from {origin}")
    return result
