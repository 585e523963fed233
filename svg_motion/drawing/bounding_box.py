"""Bounding-box pre-pass.

Curves contribute their true extents (endpoints plus axis extrema), not
their control polygon, so a placement computed from the box matches what
the emitter actually draws.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from svg_motion.drawing.base import Turtle
from svg_motion.geometry.affine import Point
from svg_motion.geometry.curves import cubic_extent_points


@dataclass
class BoundingBox:
    """Axis-aligned min/max corner pair, empty until a point is included."""

    min_x: float = math.inf
    min_y: float = math.inf
    max_x: float = -math.inf
    max_y: float = -math.inf

    @property
    def is_empty(self) -> bool:
        return self.min_x > self.max_x

    @property
    def width(self) -> float:
        return 0.0 if self.is_empty else self.max_x - self.min_x

    @property
    def height(self) -> float:
        return 0.0 if self.is_empty else self.max_y - self.min_y

    @property
    def center(self) -> Point:
        if self.is_empty:
            return (0.0, 0.0)
        return ((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)

    def include(self, point: Point) -> None:
        x, y = point
        self.min_x = min(self.min_x, x)
        self.min_y = min(self.min_y, y)
        self.max_x = max(self.max_x, x)
        self.max_y = max(self.max_y, y)


class BoundingBoxTurtle(Turtle):
    """Accumulates the extents of every point it is shown."""

    def __init__(self) -> None:
        self.bbox = BoundingBox()
        self._position: Point = (0.0, 0.0)

    def move_to(self, point: Point) -> None:
        self.bbox.include(point)
        self._position = point

    def line_to(self, point: Point) -> None:
        self.bbox.include(point)
        self._position = point

    def curve_to(self, ctrl1: Point, ctrl2: Point, end: Point) -> None:
        for p in cubic_extent_points(self._position, ctrl1, ctrl2, end):
            self.bbox.include(p)
        self._position = end

    def close(self) -> None:
        # The subpath start was already included by move_to
        pass
