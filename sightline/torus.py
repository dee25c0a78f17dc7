"""Wrapping for play areas whose opposite edges are joined."""

from __future__ import annotations

from dataclasses import dataclass

from .types import Point


@dataclass
class ToricGeometry:
    """A play area of size x by y, centered on the origin, that wraps.

    Points leaving one edge re-enter from the opposite edge. ``wrap`` moves
    a point by at most one period per axis, which is enough for objects that
    move less than a full period per step.
    """

    x: float
    y: float

    def wrap(self, point: Point) -> Point:
        px, py = point.x, point.y

        if px < -self.x / 2.0:
            px += self.x
        elif px > self.x / 2.0:
            px -= self.x

        if py < -self.y / 2.0:
            py += self.y
        elif py > self.y / 2.0:
            py -= self.y

        return Point(px, py)
