"""Tests for the postprocessor.

Validates command formatting, origin offset, line numbering, checksums,
comment styles, multi-line machine sequences and origin policies.
"""

from __future__ import annotations

from functools import reduce

import pytest

from svg_motion.configs.settings import MachineConfig, PostprocessConfig
from svg_motion.drawing.bounding_box import BoundingBox
from svg_motion.gcode.postprocess import (
    GCodeError,
    Postprocessor,
    checksum,
    format_program,
    origin_offset,
    postprocess,
)
from svg_motion.job_ir.operations import (
    ArcMove,
    Comment,
    DistanceMode,
    LinearMove,
    Operation,
    Sequence,
    SetMode,
    ToolOff,
    ToolOn,
)


def _pp(**kwargs) -> Postprocessor:
    machine = MachineConfig(tool_on_sequence="M3 S1000", tool_off_sequence="M5")
    return Postprocessor(PostprocessConfig(**kwargs), machine)


# ---------------------------------------------------------------------------
# Command formatting
# ---------------------------------------------------------------------------


class TestFormatting:
    def test_rapid(self) -> None:
        assert _pp().process([LinearMove(1.0, 2.0)]) == ["G0 X1.000 Y2.000"]

    def test_feed_move(self) -> None:
        assert _pp().process([LinearMove(1.0, -2.5, 300.0)]) == ["G1 X1.000 Y-2.500 F300.0"]

    def test_negative_zero_normalised(self) -> None:
        assert _pp().process([LinearMove(-0.0001, -0.0)]) == ["G0 X0.000 Y0.000"]

    def test_decimal_places(self) -> None:
        assert _pp(decimal_places=1).process([LinearMove(1.26, 2.0)]) == ["G0 X1.3 Y2.0"]

    def test_clockwise_arc(self) -> None:
        op = ArcMove(10.0, 0.0, -5.0, 0.0, clockwise=True, feedrate=100.0)
        assert _pp().process([op]) == ["G2 X10.000 Y0.000 I-5.000 J0.000 F100.0"]

    def test_counter_clockwise_arc_without_feed(self) -> None:
        op = ArcMove(0.0, 10.0, -10.0, 0.0, clockwise=False)
        assert _pp().process([op]) == ["G3 X0.000 Y10.000 I-10.000 J0.000"]

    def test_modes(self) -> None:
        lines = _pp().process([SetMode(DistanceMode.ABSOLUTE), SetMode(DistanceMode.RELATIVE)])
        assert lines == ["G90", "G91"]

    def test_tool_sequences(self) -> None:
        assert _pp().process([ToolOn(), ToolOff()]) == ["M3 S1000", "M5"]

    def test_missing_tool_sequence_emits_nothing(self) -> None:
        pp = Postprocessor(PostprocessConfig(), MachineConfig())
        assert pp.process([ToolOn(), LinearMove(0.0, 0.0), ToolOff()]) == ["G0 X0.000 Y0.000"]

    def test_multi_line_sequence(self) -> None:
        lines = _pp().process([Sequence("G21\n\n  G90  \n; ready")])
        assert lines == ["G21", "G90", "; ready"]

    def test_unknown_operation(self) -> None:
        class Dwell(Operation):
            pass

        with pytest.raises(GCodeError, match="Dwell"):
            _pp().process([Dwell()])


# ---------------------------------------------------------------------------
# Offset
# ---------------------------------------------------------------------------


class TestOffset:
    def test_offset_shifts_coordinates(self) -> None:
        lines = _pp().process([LinearMove(1.0, 1.0)], offset=(2.0, 3.0))
        assert lines == ["G0 X3.000 Y4.000"]

    def test_arc_centre_offset_unchanged(self) -> None:
        op = ArcMove(1.0, 1.0, -1.0, 0.0, clockwise=True)
        lines = _pp().process([op], offset=(10.0, 10.0))
        assert lines == ["G2 X11.000 Y11.000 I-1.000 J0.000"]

    def test_functional_wrapper(self) -> None:
        lines = postprocess(
            [LinearMove(0.0, 0.0)], PostprocessConfig(), MachineConfig(), offset=(1.0, 0.0),
        )
        assert lines == ["G0 X1.000 Y0.000"]


# ---------------------------------------------------------------------------
# Numbering and checksums
# ---------------------------------------------------------------------------


class TestChecksum:
    def test_known_value(self) -> None:
        assert checksum("G1") == ord("G") ^ ord("1") == 118

    def test_empty(self) -> None:
        assert checksum("") == 0

    def test_matches_xor_of_bytes(self) -> None:
        line = "N12 G1 X10.000 Y-3.250 F300.0"
        assert checksum(line) == reduce(lambda a, b: a ^ b, line.encode())


class TestNumbering:
    def test_line_numbers_skip_comments(self) -> None:
        program = [Comment("start"), SetMode(DistanceMode.ABSOLUTE), LinearMove(0.0, 0.0)]
        assert _pp(line_numbers=True).process(program) == [
            "; start",
            "N1 G90",
            "N2 G0 X0.000 Y0.000",
        ]

    def test_line_number_base(self) -> None:
        lines = _pp(line_numbers=True, line_number_base=10).process([ToolOn(), ToolOff()])
        assert lines == ["N10 M3 S1000", "N11 M5"]

    def test_strictly_increasing(self) -> None:
        program = [LinearMove(float(i), 0.0) for i in range(25)]
        lines = _pp(line_numbers=True).process(program)
        numbers = [int(line.split()[0][1:]) for line in lines]
        assert numbers == list(range(1, 26))

    def test_checksum_covers_line_number(self) -> None:
        (line,) = _pp(line_numbers=True, checksums=True).process([SetMode(DistanceMode.ABSOLUTE)])
        body, cs = line.split("*")
        assert body == "N1 G90"
        assert int(cs) == checksum("N1 G90")

    def test_checksum_without_numbers(self) -> None:
        assert _pp(checksums=True).process([ToolOff()]) == [f"M5*{checksum('M5')}"]

    def test_comments_not_checksummed(self) -> None:
        lines = _pp(checksums=True, line_numbers=True).process([Comment("a*b")])
        assert lines == ["; a*b"]


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


class TestComments:
    def test_semicolon(self) -> None:
        assert _pp().process([Comment("svg > path#p1")]) == ["; svg > path#p1"]

    def test_parentheses_escape_nested(self) -> None:
        lines = _pp(comment_style="parentheses").process([Comment("pen (red)")])
        assert lines == ["(pen [red])"]

    def test_none_drops_comments(self) -> None:
        lines = _pp(comment_style="none").process([Comment("x"), ToolOff()])
        assert lines == ["M5"]

    def test_newlines_collapsed(self) -> None:
        assert _pp().process([Comment("two\nlines")]) == ["; two lines"]


# ---------------------------------------------------------------------------
# Origin policies
# ---------------------------------------------------------------------------


@pytest.fixture()
def bbox() -> BoundingBox:
    box = BoundingBox()
    box.include((2.0, 3.0))
    box.include((12.0, 8.0))
    return box


class TestOriginOffset:
    def test_min_corner(self, bbox: BoundingBox) -> None:
        assert origin_offset(bbox, (0.0, 0.0), "min_corner") == (-2.0, -3.0)

    def test_center(self, bbox: BoundingBox) -> None:
        assert origin_offset(bbox, (100.0, 100.0), "center") == (93.0, 94.5)

    def test_document(self, bbox: BoundingBox) -> None:
        assert origin_offset(bbox, (5.0, 5.0), "document") == (5.0, 5.0)

    def test_document_anchors_page_bottom_left(self, bbox: BoundingBox) -> None:
        # Page 20 high spans y in [-20, 0] once flipped
        offset = origin_offset(bbox, (5.0, 5.0), "document", page_height=20.0)
        assert offset == (5.0, 25.0)

    def test_unplaced_axis(self, bbox: BoundingBox) -> None:
        assert origin_offset(bbox, (None, 0.0), "min_corner") == (0.0, -3.0)

    def test_empty_bbox(self) -> None:
        assert origin_offset(BoundingBox(), (10.0, 10.0), "min_corner") == (0.0, 0.0)

    def test_unknown_policy(self, bbox: BoundingBox) -> None:
        with pytest.raises(ValueError, match="origin policy"):
            origin_offset(bbox, (0.0, 0.0), "top_left")  # type: ignore[arg-type]


class TestFormatProgram:
    def test_newline_terminated(self) -> None:
        assert format_program(["G90", "M2"]) == "G90\nM2\n"

    def test_empty(self) -> None:
        assert format_program([]) == ""
