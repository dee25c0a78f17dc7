"""Tests for the brute-force ray caster."""

import math

import numpy as np

from sightline.raycast import (
    cast_rays,
    compare_with_raycast,
    distance_to_segments,
    fan_angles,
    first_hit,
)
from sightline.scene import box_segments
from sightline.types import Point, Segment


def _seg(x1, y1, x2, y2):
    return Segment(Point(x1, y1), Point(x2, y2))


class TestCastRays:
    def test_hit(self):
        hits = cast_rays(Point(0, 0), [_seg(5, -5, 5, 5)], np.array([0.0]))
        assert np.allclose(hits[0], [5.0, 0.0])

    def test_miss_behind(self):
        hits = cast_rays(Point(0, 0), [_seg(-5, -5, -5, 5)], np.array([0.0]))
        assert np.isnan(hits[0]).all()

    def test_nearest_wins(self):
        segments = [_seg(8, -1, 8, 1), _seg(3, -1, 3, 1)]
        hits = cast_rays(Point(0, 0), segments, np.array([0.0]))
        assert np.allclose(hits[0], [3.0, 0.0])

    def test_parallel(self):
        hits = cast_rays(Point(0, 0), [_seg(1, 0, 5, 0)], np.array([0.0]))
        assert np.isnan(hits[0]).all()

    def test_no_segments(self):
        hits = cast_rays(Point(0, 0), [], np.array([0.0, 1.0]))
        assert hits.shape == (2, 2)
        assert np.isnan(hits).all()

    def test_inside_box_hits_every_ray(self):
        angles = fan_angles(64)
        hits = cast_rays(Point(0.5, -0.25), box_segments(-2, -2, 2, 2), angles)
        assert not np.isnan(hits).any()
        assert np.allclose(np.max(np.abs(hits), axis=1), 2.0)


class TestFirstHit:
    def test_hit(self):
        p = first_hit(Point(0, 0), [_seg(-1, 2, 1, 2)], math.pi / 2)
        assert p is not None
        assert p.is_close(Point(0, 2))

    def test_miss(self):
        assert first_hit(Point(0, 0), [_seg(-1, 2, 1, 2)], -math.pi / 2) is None


class TestFanAngles:
    def test_evenly_spaced(self):
        angles = fan_angles(4, offset=0.0)
        assert np.allclose(angles, [0, math.pi / 2, math.pi, 3 * math.pi / 2])


class TestDistanceToSegments:
    def test_distances(self):
        points = np.array([[2.0, 3.0], [7.0, 4.0], [1.0, 0.0]])
        dist = distance_to_segments(points, [_seg(0, 0, 4, 0)])
        assert np.allclose(dist, [3.0, 5.0, 0.0])

    def test_nearest_of_many(self):
        points = np.array([[0.0, 0.0]])
        dist = distance_to_segments(
            points, [_seg(0, 5, 1, 5), _seg(2, -1, 2, 1)]
        )
        assert np.allclose(dist, [2.0])


class TestCompareWithRaycast:
    def test_matching_boundary(self):
        segments = box_segments(-1, -1, 1, 1)
        ok, diffs = compare_with_raycast(Point(0, 0), segments, segments)
        assert ok, diffs

    def test_missing_boundary(self):
        segments = box_segments(-1, -1, 1, 1)
        ok, diffs = compare_with_raycast(Point(0, 0), segments, segments[:3])
        assert not ok
        assert diffs

    def test_hidden_boundary(self):
        """A far wall reported as visible behind a nearer one."""
        near = _seg(2, -1, 2, 1)
        far = _seg(4, -1, 4, 1)
        ok, diffs = compare_with_raycast(Point(0, 0), [near, far], [near, far])
        assert not ok
        assert any("hidden" in d for d in diffs)
