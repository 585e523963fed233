"""SVG document parsing: path data, transforms, shapes and the element walk."""

from svg_motion.document.errors import DocumentError, MissingDimensionsError, ParseError
from svg_motion.document.path_data import parse_path_data
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
    resolve_segments,
)
from svg_motion.document.svg import ParsedDocument, PathElement, parse_document
from svg_motion.document.transforms import parse_transform

__all__ = [
    "ArcTo",
    "ClosePath",
    "CubicTo",
    "DocumentError",
    "LineTo",
    "MissingDimensionsError",
    "MoveTo",
    "ParseError",
    "ParsedDocument",
    "PathElement",
    "PathSegment",
    "QuadraticTo",
    "SmoothCubicTo",
    "SmoothQuadraticTo",
    "parse_document",
    "parse_path_data",
    "parse_transform",
    "resolve_segments",
]
