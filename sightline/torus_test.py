"""Tests for toroidal wrapping."""

from sightline.torus import ToricGeometry
from sightline.types import Point


class TestWrap:
    def test_inside_unchanged(self):
        torus = ToricGeometry(x=10.0, y=6.0)
        assert torus.wrap(Point(4.0, -2.5)) == Point(4.0, -2.5)

    def test_wraps_x(self):
        torus = ToricGeometry(x=10.0, y=6.0)
        assert torus.wrap(Point(6.0, 0.0)) == Point(-4.0, 0.0)
        assert torus.wrap(Point(-7.0, 0.0)) == Point(3.0, 0.0)

    def test_wraps_y(self):
        torus = ToricGeometry(x=10.0, y=6.0)
        assert torus.wrap(Point(0.0, 3.5)) == Point(0.0, -2.5)
        assert torus.wrap(Point(0.0, -4.0)) == Point(0.0, 2.0)

    def test_edge_is_kept(self):
        """Points exactly on the edge are inside."""
        torus = ToricGeometry(x=10.0, y=6.0)
        assert torus.wrap(Point(5.0, -3.0)) == Point(5.0, -3.0)

    def test_both_axes(self):
        torus = ToricGeometry(x=4.0, y=4.0)
        assert torus.wrap(Point(2.5, -2.5)) == Point(-1.5, 1.5)
