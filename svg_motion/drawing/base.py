"""Drawing interface -- a cursor ("turtle") fed with resolved segments.

Implementations:
    - :class:`~svg_motion.drawing.bounding_box.BoundingBoxTurtle`: extents
      pre-pass, emits nothing.
    - :class:`~svg_motion.drawing.gcode.GCodeTurtle`: motion-command emitter.
    - :class:`~svg_motion.drawing.rescale.RescalingTurtle`: wraps either of
      the above and converts document units to device units.

All points are absolute.  Smooth curves, quadratics and elliptical arcs are
resolved by the path state tracker before they reach a turtle, so the
capability set is just move / line / cubic / close.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from svg_motion.geometry.affine import Point


class Turtle(ABC):
    """Common capability set shared by every drawing pass."""

    def begin(self) -> None:
        """Called once before the first element of a document."""

    def end(self) -> None:
        """Called once after the last element of a document."""

    def comment(self, text: str) -> None:
        """Annotate the output (element path, pass-through attributes)."""

    @abstractmethod
    def move_to(self, point: Point) -> None:
        """Start a new subpath at *point* without drawing."""

    @abstractmethod
    def line_to(self, point: Point) -> None:
        """Draw a straight line from the current position to *point*."""

    @abstractmethod
    def curve_to(self, ctrl1: Point, ctrl2: Point, end: Point) -> None:
        """Draw a cubic Bezier from the current position to *end*."""

    @abstractmethod
    def close(self) -> None:
        """Close the current subpath back to its start point."""
