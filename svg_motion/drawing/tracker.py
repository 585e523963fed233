"""Path state tracker.

Sits between the resolved segment stream and a :class:`Turtle`.  It keeps
the pen state, synthesises the implied control point of smooth curves,
elevates quadratics and lowers elliptical arcs to cubics, so the turtle only
ever sees move / line / cubic / close.

Smooth-curve reflection:
    ``S`` reflects the previous cubic's second control point through the
    current position; ``T`` reflects the previous quadratic's control point.
    When the previous segment was not a curve of the same family, the
    implied control point is the current position itself.

Degenerate segments:
    A line or curve that starts and ends at the current position and has
    no extent is skipped with a :class:`GeometryWarning`.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Literal, Optional

from svg_motion.document.segments import (
    ArcTo,
    ClosePath,
    CubicTo,
    LineTo,
    MoveTo,
    PathSegment,
    QuadraticTo,
    SmoothCubicTo,
    SmoothQuadraticTo,
)
from svg_motion.drawing.base import Turtle
from svg_motion.geometry.affine import Point
from svg_motion.geometry.curves import (
    DEGENERATE_LENGTH,
    arc_to_cubics,
    distance,
    elevate_quadratic,
    reflect,
)

logger = logging.getLogger(__name__)


class GeometryWarning(UserWarning):
    """Non-fatal geometry problem; the offending segment is skipped."""

    pass


CurveKind = Literal["cubic", "quadratic"]


@dataclass
class PenState:
    """Mutable pen state for one traversal.

    ``last_control`` is only set immediately after a curve; ``control_kind``
    says which smooth command may reflect it.
    """

    position: Point = (0.0, 0.0)
    subpath_start: Point = (0.0, 0.0)
    last_control: Optional[Point] = None
    control_kind: Optional[CurveKind] = None
    engaged: bool = False


class PathStateTracker:
    """Resolve segments against the pen state and drive *turtle*.

    Parameters
    ----------
    turtle : Turtle
        Destination for fully specified segments.
    """

    def __init__(self, turtle: Turtle) -> None:
        self.turtle = turtle
        self.state = PenState()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _implied_control(self, kind: CurveKind) -> Point:
        if self.state.last_control is not None and self.state.control_kind == kind:
            return reflect(self.state.last_control, self.state.position)
        return self.state.position

    def _degenerate(self, segment: PathSegment, *points: Point) -> bool:
        start = self.state.position
        if all(distance(start, p) < DEGENERATE_LENGTH for p in points):
            warnings.warn(
                f"Skipping zero-length {type(segment).__name__} at {start}",
                GeometryWarning,
                stacklevel=3,
            )
            return True
        return False

    def _line(self, segment: PathSegment, end: Point) -> None:
        if self._degenerate(segment, end):
            self._clear_control()
            return
        self.turtle.line_to(end)
        self.state.position = end
        self.state.engaged = True
        self._clear_control()

    def _cubic(
        self,
        segment: PathSegment,
        ctrl1: Point,
        ctrl2: Point,
        end: Point,
        control: Point,
        kind: CurveKind | None,
    ) -> None:
        if not self._degenerate(segment, ctrl1, ctrl2, end):
            self.turtle.curve_to(ctrl1, ctrl2, end)
            self.state.position = end
            self.state.engaged = True
        self.state.last_control = control if kind is not None else None
        self.state.control_kind = kind

    def _clear_control(self) -> None:
        self.state.last_control = None
        self.state.control_kind = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def reset(self) -> None:
        self.state = PenState()

    def apply(self, segment: PathSegment) -> None:
        """Feed one global-space segment to the turtle."""
        state = self.state

        if isinstance(segment, MoveTo):
            self.turtle.move_to(segment.point)
            state.position = segment.point
            state.subpath_start = segment.point
            state.engaged = False
            self._clear_control()
        elif isinstance(segment, LineTo):
            self._line(segment, segment.point)
        elif isinstance(segment, CubicTo):
            self._cubic(
                segment, segment.ctrl1, segment.ctrl2, segment.end,
                control=segment.ctrl2, kind="cubic",
            )
        elif isinstance(segment, SmoothCubicTo):
            ctrl1 = self._implied_control("cubic")
            self._cubic(
                segment, ctrl1, segment.ctrl2, segment.end,
                control=segment.ctrl2, kind="cubic",
            )
        elif isinstance(segment, QuadraticTo):
            c1, c2 = elevate_quadratic(state.position, segment.ctrl, segment.end)
            self._cubic(
                segment, c1, c2, segment.end, control=segment.ctrl, kind="quadratic",
            )
        elif isinstance(segment, SmoothQuadraticTo):
            ctrl = self._implied_control("quadratic")
            c1, c2 = elevate_quadratic(state.position, ctrl, segment.end)
            self._cubic(segment, c1, c2, segment.end, control=ctrl, kind="quadratic")
        elif isinstance(segment, ArcTo):
            self._arc(segment)
        elif isinstance(segment, ClosePath):
            self.turtle.close()
            state.position = state.subpath_start
            state.engaged = False
            self._clear_control()
        else:
            raise TypeError(f"Unknown path segment: {type(segment).__name__}")

    def _arc(self, segment: ArcTo) -> None:
        start = self.state.position
        if distance(start, segment.end) < DEGENERATE_LENGTH:
            # SVG: an arc whose endpoints coincide is omitted
            self._degenerate(segment, segment.end)
            self._clear_control()
            return
        pieces = arc_to_cubics(
            start, segment.radii, segment.rotation, segment.large_arc, segment.sweep,
            segment.end,
        )
        for ctrl1, ctrl2, end in pieces:
            self._cubic(segment, ctrl1, ctrl2, end, control=ctrl2, kind=None)
