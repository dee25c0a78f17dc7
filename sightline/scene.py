"""Occluder sets: building, validating, generating and storing them.

``compute_visibility`` expects segments that never cross except at shared
endpoints. Map geometry (tile edges, footprints) normally guarantees that, but
layouts such as diagonal-adjacent tiles make it easy to get wrong, so
``find_crossings`` is provided to check an occluder set instead of assuming.

Scenes are stored as JSON::

    {"origin": [x, y], "segments": [[x1, y1, x2, y2], ...]}

Used by:
  - ``cli.py``: loads the scene to compute visibility for.
  - ``scripts/bench_visibility.py``: random scenes for timing.
  - property tests: random non-crossing scenes checked against ray casting.
"""

from __future__ import annotations

import itertools
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from .types import EPSILON, Point, Segment

log = logging.getLogger(__name__)


def ring_segments(points: list[Point]) -> list[Segment]:
    """Edges of the closed ring through ``points``.

    Zero-length edges (repeated points) are dropped silently.
    """
    segments: list[Segment] = []
    n = len(points)
    for i in range(n):
        seg = Segment.new(points[i], points[(i + 1) % n])
        if seg is not None:
            segments.append(seg)
    return segments


def box_segments(
    min_x: float, min_y: float, max_x: float, max_y: float
) -> list[Segment]:
    """The four edges of an axis-aligned box."""
    return ring_segments(
        [
            Point(min_x, min_y),
            Point(max_x, min_y),
            Point(max_x, max_y),
            Point(min_x, max_y),
        ]
    )


def _shares_endpoint(s1: Segment, s2: Segment, point: Point) -> bool:
    on_s1 = point.is_close(s1.a) or point.is_close(s1.b)
    on_s2 = point.is_close(s2.a) or point.is_close(s2.b)
    return on_s1 and on_s2


def _collinear_overlap(s1: Segment, s2: Segment) -> bool:
    """Whether collinear segments share more than an endpoint."""
    dx, dy = s1.a.dir(s1.b)
    len_sq = dx * dx + dy * dy
    t3 = ((s2.a.x - s1.a.x) * dx + (s2.a.y - s1.a.y) * dy) / len_sq
    t4 = ((s2.b.x - s1.a.x) * dx + (s2.b.y - s1.a.y) * dy) / len_sq
    lo, hi = min(t3, t4), max(t3, t4)
    overlap = min(1.0, hi) - max(0.0, lo)
    return overlap * len_sq**0.5 > EPSILON


def segments_cross(s1: Segment, s2: Segment) -> bool:
    """Whether two segments meet anywhere other than a shared endpoint."""
    x1, y1, x2, y2 = s1.to_tuple()
    x3, y3, x4, y4 = s2.to_tuple()

    denominator = (y4 - y3) * (x2 - x1) - (x4 - x3) * (y2 - y1)
    # Offset of s2 from the line through s1
    offset = (x2 - x1) * (y3 - y1) - (y2 - y1) * (x3 - x1)

    if abs(denominator) < EPSILON * EPSILON:
        if abs(offset) > EPSILON * s1.length():
            return False
        return _collinear_overlap(s1, s2)

    ua = ((x4 - x3) * (y1 - y3) - (y4 - y3) * (x1 - x3)) / denominator
    ub = ((x2 - x1) * (y1 - y3) - (y2 - y1) * (x1 - x3)) / denominator
    tol_a = EPSILON / s1.length()
    tol_b = EPSILON / s2.length()
    if not (-tol_a <= ua <= 1 + tol_a and -tol_b <= ub <= 1 + tol_b):
        return False

    meet = s1.a.lerp(s1.b, ua)
    return not _shares_endpoint(s1, s2, meet)


def find_crossings(segments: list[Segment]) -> list[tuple[int, int]]:
    """Index pairs of segments that cross other than at shared endpoints."""
    crossings = [
        (i, j)
        for (i, s1), (j, s2) in itertools.combinations(enumerate(segments), 2)
        if segments_cross(s1, s2)
    ]
    if crossings:
        log.debug("Found %d crossing segment pairs", len(crossings))
    return crossings


@dataclass
class Scene:
    segments: list[Segment] = field(default_factory=list)
    origin: Point | None = None

    @staticmethod
    def from_dict(d: dict) -> Scene:
        segments = []
        for coords in d.get("segments", []):
            seg = Segment.from_coords(*coords)
            if seg is not None:
                segments.append(seg)
        origin = d.get("origin")
        return Scene(
            segments=segments,
            origin=(Point.from_tuple(origin) if origin is not None else None),
        )

    def to_dict(self) -> dict:
        d: dict = {"segments": [list(s.to_tuple()) for s in self.segments]}
        if self.origin is not None:
            d["origin"] = list(self.origin.to_tuple())
        return d


def load_scene(path: Path) -> Scene:
    """Load a scene JSON file into a typed ``Scene``."""
    with open(path) as f:
        data = json.load(f)
    return Scene.from_dict(data)


def save_scene(scene: Scene, path: Path) -> None:
    """Write a scene to a JSON file.

    Creates parent directories if they don't exist.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(scene.to_dict(), f, indent=2)
        f.write("\n")


def random_box_scene(
    seed: int,
    cells: int = 4,
    size: float = 40.0,
    fill: float = 0.5,
) -> Scene:
    """Random axis-aligned boxes inside enclosing walls.

    The field is split into ``cells`` x ``cells`` cells and each cell holds
    a box with probability ``fill``. Boxes stay strictly inside their cell,
    so the occluder set never crosses. The origin is placed outside every
    box.
    """
    rng = np.random.default_rng(seed)
    half = size / 2.0
    cell = size / cells

    segments = box_segments(-half, -half, half, half)
    boxes: list[tuple[float, float, float, float]] = []

    for i in range(cells):
        for j in range(cells):
            if rng.random() >= fill:
                continue
            cx0 = -half + i * cell
            cy0 = -half + j * cell
            x0, x1 = np.sort(rng.uniform(0.1, 0.9, size=2)) * cell + cx0
            y0, y1 = np.sort(rng.uniform(0.1, 0.9, size=2)) * cell + cy0
            if x1 - x0 < 0.05 * cell or y1 - y0 < 0.05 * cell:
                continue
            boxes.append((float(x0), float(y0), float(x1), float(y1)))
            segments.extend(box_segments(*boxes[-1]))

    while True:
        ox, oy = rng.uniform(-half * 0.95, half * 0.95, size=2)
        inside = any(
            x0 - EPSILON <= ox <= x1 + EPSILON
            and y0 - EPSILON <= oy <= y1 + EPSILON
            for x0, y0, x1, y1 in boxes
        )
        if not inside:
            break

    return Scene(segments=segments, origin=Point(float(ox), float(oy)))
