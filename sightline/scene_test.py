"""Tests for occluder set helpers and scene JSON I/O."""

import json

from sightline.scene import (
    Scene,
    box_segments,
    find_crossings,
    load_scene,
    random_box_scene,
    ring_segments,
    save_scene,
    segments_cross,
)
from sightline.types import Point, Segment


def _seg(x1, y1, x2, y2):
    return Segment(Point(x1, y1), Point(x2, y2))


class TestRingSegments:
    def test_triangle(self):
        segs = ring_segments([Point(0, 0), Point(1, 0), Point(0, 1)])
        assert segs == [_seg(0, 0, 1, 0), _seg(1, 0, 0, 1), _seg(0, 1, 0, 0)]

    def test_repeated_point_dropped(self):
        segs = ring_segments([Point(0, 0), Point(1, 0), Point(1, 0), Point(0, 1)])
        assert len(segs) == 3

    def test_box(self):
        segs = box_segments(-1, -2, 3, 4)
        assert len(segs) == 4
        assert _seg(-1, -2, 3, -2) in segs
        assert _seg(-1, 4, -1, -2) in segs


class TestSegmentsCross:
    def test_crossing(self):
        assert segments_cross(_seg(0, 0, 10, 10), _seg(0, 10, 10, 0))

    def test_parallel(self):
        assert not segments_cross(_seg(0, 0, 10, 0), _seg(0, 5, 10, 5))

    def test_shared_endpoint(self):
        assert not segments_cross(_seg(0, 0, 5, 5), _seg(5, 5, 10, 0))

    def test_t_junction(self):
        """One segment ends in the middle of the other."""
        assert segments_cross(_seg(0, 5, 10, 5), _seg(5, 0, 5, 5))

    def test_collinear_touching(self):
        assert not segments_cross(_seg(0, 0, 3, 0), _seg(3, 0, 8, 0))

    def test_collinear_disjoint(self):
        assert not segments_cross(_seg(0, 0, 3, 0), _seg(5, 0, 8, 0))

    def test_collinear_overlap(self):
        assert segments_cross(_seg(0, 0, 5, 0), _seg(3, 0, 8, 0))

    def test_apart(self):
        assert not segments_cross(_seg(0, 0, 1, 1), _seg(5, 0, 6, -3))


class TestFindCrossings:
    def test_closed_ring_is_clean(self):
        assert find_crossings(box_segments(0, 0, 4, 4)) == []

    def test_diagonal_tiles_touch_at_corner(self):
        """Diagonally adjacent tiles only share a vertex."""
        segments = box_segments(0, 0, 1, 1) + box_segments(1, 1, 2, 2)
        assert find_crossings(segments) == []

    def test_overlapping_boxes(self):
        segments = box_segments(0, 0, 2, 2) + box_segments(1, 1, 3, 3)
        crossings = find_crossings(segments)
        assert (1, 4) in crossings
        assert (2, 7) in crossings


class TestSceneIO:
    def test_round_trip(self, tmp_path):
        scene = Scene(
            segments=[_seg(0, 0, 1, 0), _seg(1, 0, 1, 1)],
            origin=Point(0.5, 0.25),
        )
        path = tmp_path / "nested" / "scene.json"
        save_scene(scene, path)
        loaded = load_scene(path)
        assert loaded.segments == scene.segments
        assert loaded.origin == scene.origin

    def test_file_format(self, tmp_path):
        path = tmp_path / "scene.json"
        save_scene(Scene(segments=[_seg(0, 0, 2, 0)], origin=Point(1, 1)), path)
        data = json.loads(path.read_text())
        assert data == {"segments": [[0, 0, 2, 0]], "origin": [1, 1]}

    def test_from_dict_drops_degenerate(self):
        scene = Scene.from_dict(
            {"segments": [[0, 0, 0, 0], [0, 0, 1, 1]], "origin": [2, 3]}
        )
        assert scene.segments == [_seg(0, 0, 1, 1)]
        assert scene.origin == Point(2.0, 3.0)

    def test_missing_origin(self):
        scene = Scene.from_dict({"segments": [[0, 0, 1, 1]]})
        assert scene.origin is None
        assert "origin" not in scene.to_dict()


class TestRandomBoxScene:
    def test_deterministic(self):
        a = random_box_scene(7)
        b = random_box_scene(7)
        assert a.segments == b.segments
        assert a.origin == b.origin

    def test_different_seeds_differ(self):
        assert random_box_scene(1).to_dict() != random_box_scene(2).to_dict()

    def test_non_crossing_and_enclosed(self):
        scene = random_box_scene(3, cells=5, size=20.0, fill=0.8)
        assert find_crossings(scene.segments) == []
        assert scene.segments[:4] == box_segments(-10, -10, 10, 10)
        assert -10 < scene.origin.x < 10
        assert -10 < scene.origin.y < 10
