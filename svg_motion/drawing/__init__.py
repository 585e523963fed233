"""Drawing passes: the turtle interface, its implementations and the tracker."""

from svg_motion.drawing.base import Turtle
from svg_motion.drawing.bounding_box import BoundingBox, BoundingBoxTurtle
from svg_motion.drawing.gcode import GCodeTurtle
from svg_motion.drawing.rescale import RescalingTurtle
from svg_motion.drawing.tracker import GeometryWarning, PathStateTracker, PenState

__all__ = [
    "BoundingBox",
    "BoundingBoxTurtle",
    "GCodeTurtle",
    "GeometryWarning",
    "PathStateTracker",
    "PenState",
    "RescalingTurtle",
    "Turtle",
]
