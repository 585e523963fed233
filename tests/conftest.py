"""Shared fixtures for the svg_motion test suite."""

from __future__ import annotations

import pytest

from svg_motion.drawing.base import Turtle
from svg_motion.geometry.affine import Point


class RecordingTurtle(Turtle):
    """Turtle that records every call as a tuple, for asserting call order."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def begin(self) -> None:
        self.calls.append(("begin",))

    def end(self) -> None:
        self.calls.append(("end",))

    def comment(self, text: str) -> None:
        self.calls.append(("comment", text))

    def move_to(self, point: Point) -> None:
        self.calls.append(("move_to", point))

    def line_to(self, point: Point) -> None:
        self.calls.append(("line_to", point))

    def curve_to(self, ctrl1: Point, ctrl2: Point, end: Point) -> None:
        self.calls.append(("curve_to", ctrl1, ctrl2, end))

    def close(self) -> None:
        self.calls.append(("close",))

    def named(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]


@pytest.fixture()
def recorder() -> RecordingTurtle:
    return RecordingTurtle()
