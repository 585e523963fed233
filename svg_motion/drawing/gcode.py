"""Motion-command emitter.

Appends :mod:`~svg_motion.job_ir.operations` commands to ``program`` as
segments arrive.  Tool and mode changes are always requested through the
:class:`~svg_motion.machine.Machine`, which decides whether a command is
actually needed; curves go through the arc approximator.
"""

from __future__ import annotations

import logging

from svg_motion.drawing.base import Turtle
from svg_motion.geometry.affine import Point
from svg_motion.geometry.arcs import approximate_cubic
from svg_motion.geometry.curves import DEGENERATE_LENGTH, distance
from svg_motion.job_ir.operations import Comment, DistanceMode, LinearMove, Program
from svg_motion.machine import Machine

logger = logging.getLogger(__name__)


class GCodeTurtle(Turtle):
    """Emit motion commands for a device-unit segment stream.

    Parameters
    ----------
    machine : Machine
        State machine for this conversion (owned by this pass).
    tolerance : float
        Max deviation for curve approximation, device units.
    feedrate : float
        Speed annotation for drawing moves.  Travel moves are rapids.
    """

    def __init__(self, machine: Machine, tolerance: float, feedrate: float) -> None:
        self.machine = machine
        self.tolerance = tolerance
        self.feedrate = feedrate
        self.program: Program = []
        self._position: Point = (0.0, 0.0)
        self._subpath_start: Point = (0.0, 0.0)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _engage(self) -> None:
        self.program.extend(self.machine.set_mode(DistanceMode.ABSOLUTE))
        self.program.extend(self.machine.set_tool(True))

    def _disengage(self) -> None:
        self.program.extend(self.machine.set_tool(False))

    # ------------------------------------------------------------------
    # Turtle
    # ------------------------------------------------------------------

    def begin(self) -> None:
        self.program.extend(self.machine.program_begin())
        self.program.extend(self.machine.set_mode(DistanceMode.ABSOLUTE))

    def end(self) -> None:
        self._disengage()
        self.program.extend(self.machine.program_end())
        logger.debug("Emitted %d command(s)", len(self.program))

    def comment(self, text: str) -> None:
        self.program.append(Comment(text))

    def move_to(self, point: Point) -> None:
        self._disengage()
        self.program.append(LinearMove(x=point[0], y=point[1]))
        self._position = point
        self._subpath_start = point

    def line_to(self, point: Point) -> None:
        self._engage()
        self.program.append(LinearMove(x=point[0], y=point[1], feedrate=self.feedrate))
        self._position = point

    def curve_to(self, ctrl1: Point, ctrl2: Point, end: Point) -> None:
        self._engage()
        self.program.extend(
            approximate_cubic(
                self._position,
                ctrl1,
                ctrl2,
                end,
                self.tolerance,
                self.machine.arc_capable(),
                feedrate=self.feedrate,
            )
        )
        self._position = end

    def close(self) -> None:
        if distance(self._position, self._subpath_start) > DEGENERATE_LENGTH:
            self.line_to(self._subpath_start)
        self._disengage()
        self._position = self._subpath_start
