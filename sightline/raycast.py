"""Brute-force ray casting, used to check the sweep's output.

Casting a dense fan of rays and taking the nearest hit of each against every
segment is slow (O(rays x segments)) but has no case analysis to get wrong,
which makes it a good oracle for ``compute_visibility``. All rays are tested
against all segments in a single (R x S) numpy computation.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from .types import Point, Segment

log = logging.getLogger(__name__)

DEFAULT_RAY_COUNT = 720

# Offset of the first fan ray, so rays avoid axis-aligned vertices.
DEFAULT_FAN_OFFSET = 0.0123


def _segment_array(segments: list[Segment]) -> np.ndarray:
    return np.array([s.to_tuple() for s in segments], dtype=np.float64).reshape(
        -1, 4
    )


def fan_angles(
    count: int = DEFAULT_RAY_COUNT, offset: float = DEFAULT_FAN_OFFSET
) -> np.ndarray:
    """Evenly spaced ray angles covering the full circle."""
    return offset + np.arange(count, dtype=np.float64) * (math.tau / count)


def cast_rays(
    origin: Point, segments: list[Segment], angles: np.ndarray
) -> np.ndarray:
    """Return the first hit of each ray as an (R, 2) array.

    Rows are NaN for rays that hit nothing.
    """
    angles = np.asarray(angles, dtype=np.float64)
    segs = _segment_array(segments)
    if len(segs) == 0:
        return np.full((len(angles), 2), np.nan)

    ox, oy = origin.x, origin.y
    seg_dx = segs[:, 2] - segs[:, 0]
    seg_dy = segs[:, 3] - segs[:, 1]
    d_x1 = segs[:, 0] - ox
    d_y1 = segs[:, 1] - oy
    # t numerator is the same for every ray
    num_t = d_x1 * seg_dy - d_y1 * seg_dx

    ray_dx = np.cos(angles)
    ray_dy = np.sin(angles)

    denom = (
        ray_dx[:, None] * seg_dy[None, :] - ray_dy[:, None] * seg_dx[None, :]
    )
    valid_denom = np.abs(denom) >= 1e-12
    safe_denom = np.where(valid_denom, denom, 1.0)

    t = num_t[None, :] / safe_denom
    num_u = d_x1[None, :] * ray_dy[:, None] - d_y1[None, :] * ray_dx[:, None]
    u = num_u / safe_denom

    valid = valid_denom & (t >= 0) & (u >= 0) & (u <= 1)
    t_valid = np.where(valid, t, np.inf)
    min_t = np.min(t_valid, axis=1)

    hits = np.full((len(angles), 2), np.nan)
    finite = np.isfinite(min_t)
    hits[finite, 0] = ox + min_t[finite] * ray_dx[finite]
    hits[finite, 1] = oy + min_t[finite] * ray_dy[finite]
    return hits


def first_hit(
    origin: Point, segments: list[Segment], angle: float
) -> Point | None:
    """Nearest intersection of a single ray with any segment."""
    hit = cast_rays(origin, segments, np.array([angle]))[0]
    if np.isnan(hit[0]):
        return None
    return Point(float(hit[0]), float(hit[1]))


def distance_to_segments(
    points: np.ndarray, segments: list[Segment]
) -> np.ndarray:
    """Distance from each of the (R, 2) points to the nearest segment.

    Rows of ``points`` that are NaN yield NaN.
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    segs = _segment_array(segments)
    if len(segs) == 0:
        return np.full(len(points), np.inf)

    ax = segs[:, 0][None, :]
    ay = segs[:, 1][None, :]
    dx = (segs[:, 2] - segs[:, 0])[None, :]
    dy = (segs[:, 3] - segs[:, 1])[None, :]
    px = points[:, 0][:, None]
    py = points[:, 1][:, None]

    t = ((px - ax) * dx + (py - ay) * dy) / (dx * dx + dy * dy)
    t = np.clip(t, 0.0, 1.0)
    cx = ax + t * dx
    cy = ay + t * dy
    dist = np.sqrt((px - cx) ** 2 + (py - cy) ** 2)
    return np.min(dist, axis=1)


def compare_with_raycast(
    origin: Point,
    occluders: list[Segment],
    boundary: list[Segment],
    num_rays: int = DEFAULT_RAY_COUNT,
    tolerance: float = 1e-6,
) -> tuple[bool, list[str]]:
    """Check a visibility boundary against brute-force ray casting.

    Two directions are checked:
      * every fan ray's first hit on the occluders lies on the boundary;
      * every boundary segment's midpoint is the first occluder hit along
        its own ray (nothing visible was drawn behind an occluder).

    Returns (match: bool, diffs: list of error messages).
    """
    diffs: list[str] = []

    angles = fan_angles(num_rays)
    hits = cast_rays(origin, occluders, angles)
    hit_rows = ~np.isnan(hits[:, 0])
    dist = distance_to_segments(hits[hit_rows], boundary)
    for angle, hit, d in zip(angles[hit_rows], hits[hit_rows], dist):
        if d > tolerance:
            diffs.append(
                f"ray at {math.degrees(angle):.3f} deg hits "
                f"[{hit[0]:g} {hit[1]:g}], {d:.3g} away from the boundary"
            )

    for seg in boundary:
        mid = seg.a.midpoint(seg.b)
        dx, dy = origin.dir(mid)
        hit = first_hit(origin, occluders, math.atan2(dy, dx))
        if hit is None:
            diffs.append(f"boundary {seg} is not on any occluder")
        elif hit.dist(mid) > tolerance * max(1.0, origin.dist(mid)):
            diffs.append(f"boundary {seg} is hidden behind {hit}")

    if diffs:
        log.debug("Ray casting found %d mismatches", len(diffs))
    return (not diffs, diffs)
