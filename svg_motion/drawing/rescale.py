"""Unit-rescaling adapter: document units -> device units."""

from __future__ import annotations

from svg_motion.drawing.base import Turtle
from svg_motion.geometry.affine import Point


class RescalingTurtle(Turtle):
    """Multiply every coordinate by *factor* before forwarding to *inner*.

    Parameters
    ----------
    inner : Turtle
        The wrapped pass (bounding box or emitter).
    factor : float
        Device units per document unit.
    """

    def __init__(self, inner: Turtle, factor: float) -> None:
        if factor <= 0.0:
            raise ValueError(f"Rescaling factor must be positive, got {factor}")
        self.inner = inner
        self.factor = factor

    def _scale(self, point: Point) -> Point:
        return (point[0] * self.factor, point[1] * self.factor)

    def begin(self) -> None:
        self.inner.begin()

    def end(self) -> None:
        self.inner.end()

    def comment(self, text: str) -> None:
        self.inner.comment(text)

    def move_to(self, point: Point) -> None:
        self.inner.move_to(self._scale(point))

    def line_to(self, point: Point) -> None:
        self.inner.line_to(self._scale(point))

    def curve_to(self, ctrl1: Point, ctrl2: Point, end: Point) -> None:
        self.inner.curve_to(self._scale(ctrl1), self._scale(ctrl2), self._scale(end))

    def close(self) -> None:
        self.inner.close()
