"""Tests for the drawing passes: bounding box, rescaling and emission."""

from __future__ import annotations

import math

import pytest

from svg_motion.configs.settings import MachineConfig
from svg_motion.drawing.bounding_box import BoundingBox, BoundingBoxTurtle
from svg_motion.drawing.gcode import GCodeTurtle
from svg_motion.drawing.rescale import RescalingTurtle
from svg_motion.job_ir.operations import (
    ArcMove,
    Comment,
    DistanceMode,
    LinearMove,
    Sequence,
    SetMode,
    ToolOff,
    ToolOn,
)
from svg_motion.machine import Machine

KAPPA = 4.0 / 3.0 * (math.sqrt(2.0) - 1.0)


def _emitter(**machine_kwargs) -> GCodeTurtle:
    return GCodeTurtle(Machine(MachineConfig(**machine_kwargs)), tolerance=0.01, feedrate=300.0)


# ---------------------------------------------------------------------------
# Bounding box
# ---------------------------------------------------------------------------


class TestBoundingBox:
    def test_empty(self) -> None:
        bbox = BoundingBox()
        assert bbox.is_empty
        assert (bbox.width, bbox.height) == (0.0, 0.0)
        assert bbox.center == (0.0, 0.0)

    def test_include(self) -> None:
        bbox = BoundingBox()
        bbox.include((2.0, -1.0))
        bbox.include((-4.0, 5.0))
        assert (bbox.min_x, bbox.min_y, bbox.max_x, bbox.max_y) == (-4.0, -1.0, 2.0, 5.0)
        assert (bbox.width, bbox.height) == (6.0, 6.0)
        assert bbox.center == (-1.0, 2.0)

    def test_curve_uses_true_extent(self) -> None:
        turtle = BoundingBoxTurtle()
        turtle.move_to((0.0, 0.0))
        turtle.curve_to((0.0, 10.0), (10.0, 10.0), (10.0, 0.0))
        # Control points reach y=10, the curve only 7.5
        assert turtle.bbox.max_y == pytest.approx(7.5)
        assert turtle.bbox.max_x == 10.0

    def test_close_adds_nothing(self) -> None:
        turtle = BoundingBoxTurtle()
        turtle.move_to((1.0, 1.0))
        turtle.line_to((2.0, 3.0))
        turtle.close()
        assert (turtle.bbox.width, turtle.bbox.height) == (1.0, 2.0)


# ---------------------------------------------------------------------------
# Rescaling adapter
# ---------------------------------------------------------------------------


class TestRescaling:
    def test_scales_every_point(self, recorder) -> None:
        turtle = RescalingTurtle(recorder, 2.5)
        turtle.begin()
        turtle.comment("x")
        turtle.move_to((1.0, 2.0))
        turtle.line_to((2.0, 0.0))
        turtle.curve_to((0.0, 1.0), (1.0, 1.0), (4.0, -2.0))
        turtle.close()
        turtle.end()
        assert recorder.calls == [
            ("begin",),
            ("comment", "x"),
            ("move_to", (2.5, 5.0)),
            ("line_to", (5.0, 0.0)),
            ("curve_to", (0.0, 2.5), (2.5, 2.5), (10.0, -5.0)),
            ("close",),
            ("end",),
        ]

    @pytest.mark.parametrize("factor", [0.0, -1.0])
    def test_rejects_non_positive_factor(self, recorder, factor: float) -> None:
        with pytest.raises(ValueError, match="positive"):
            RescalingTurtle(recorder, factor)


# ---------------------------------------------------------------------------
# Emitter
# ---------------------------------------------------------------------------


class TestGCodeTurtle:
    def test_closed_square_program(self) -> None:
        turtle = _emitter()
        turtle.begin()
        turtle.move_to((0.0, 0.0))
        turtle.line_to((10.0, 0.0))
        turtle.line_to((10.0, 10.0))
        turtle.line_to((0.0, 10.0))
        turtle.close()
        turtle.end()
        assert turtle.program == [
            SetMode(DistanceMode.ABSOLUTE),
            ToolOff(),
            LinearMove(0.0, 0.0),
            ToolOn(),
            LinearMove(10.0, 0.0, 300.0),
            LinearMove(10.0, 10.0, 300.0),
            LinearMove(0.0, 10.0, 300.0),
            LinearMove(0.0, 0.0, 300.0),
            ToolOff(),
        ]

    def test_close_at_start_adds_no_move(self) -> None:
        turtle = _emitter()
        turtle.move_to((0.0, 0.0))
        turtle.line_to((5.0, 0.0))
        turtle.line_to((0.0, 0.0))
        turtle.close()
        feeds = [op for op in turtle.program if isinstance(op, LinearMove) and not op.is_rapid]
        assert len(feeds) == 2
        assert turtle.program[-1] == ToolOff()

    def test_consecutive_subpaths_lift_between(self) -> None:
        turtle = _emitter()
        turtle.move_to((0.0, 0.0))
        turtle.line_to((1.0, 0.0))
        turtle.move_to((5.0, 5.0))
        turtle.line_to((6.0, 5.0))
        kinds = [type(op) for op in turtle.program]
        assert kinds == [ToolOff, LinearMove, SetMode, ToolOn, LinearMove,
                         ToolOff, LinearMove, ToolOn, LinearMove]

    def test_sequences_and_comments(self) -> None:
        turtle = _emitter(begin_sequence="G21", end_sequence="M2")
        turtle.begin()
        turtle.comment("svg > path")
        turtle.end()
        assert turtle.program[0] == Sequence("G21")
        assert Comment("svg > path") in turtle.program
        assert turtle.program[-1] == Sequence("M2")

    def test_curve_becomes_arc_when_capable(self) -> None:
        turtle = _emitter(supports_circular_interpolation=True)
        turtle.move_to((10.0, 0.0))
        turtle.curve_to((10.0, 10.0 * KAPPA), (10.0 * KAPPA, 10.0), (0.0, 10.0))
        arcs = [op for op in turtle.program if isinstance(op, ArcMove)]
        assert len(arcs) == 1
        assert arcs[0].feedrate == 300.0

    def test_curve_flattened_when_not_capable(self) -> None:
        turtle = _emitter(supports_circular_interpolation=False)
        turtle.move_to((10.0, 0.0))
        turtle.curve_to((10.0, 10.0 * KAPPA), (10.0 * KAPPA, 10.0), (0.0, 10.0))
        assert not any(isinstance(op, ArcMove) for op in turtle.program)
        last = turtle.program[-1]
        assert (last.x, last.y) == (0.0, 10.0)
