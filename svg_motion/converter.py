"""Two-pass conversion pipeline: SVG tree -> motion commands -> G-code lines.

Pipeline::

    parse_document            (immutable ParsedDocument, global coordinates)
        |
        +-- pass 1: PathStateTracker -> RescalingTurtle -> BoundingBoxTurtle
        |            => device-unit BoundingBox -> origin offset
        |
        +-- pass 2: PathStateTracker -> RescalingTurtle -> GCodeTurtle
                     => raw Program (Machine decides tool/mode commands)
                                |
                          Postprocessor (offset, numbering, checksums)

Each pass owns fresh tracker, turtle and machine instances; the only thing
shared is the read-only parsed document.  Any error aborts the conversion
and nothing partial is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union
from xml.etree import ElementTree as ET

from svg_motion.configs.settings import Settings
from svg_motion.document.errors import ParseError
from svg_motion.document.svg import Dimensions, ParsedDocument, parse_document
from svg_motion.drawing.base import Turtle
from svg_motion.drawing.bounding_box import BoundingBox, BoundingBoxTurtle
from svg_motion.drawing.gcode import GCodeTurtle
from svg_motion.drawing.rescale import RescalingTurtle
from svg_motion.drawing.tracker import PathStateTracker
from svg_motion.gcode.postprocess import format_program, origin_offset, postprocess
from svg_motion.job_ir.operations import ArcMove, LinearMove, Program, count_operations
from svg_motion.machine import Machine
from svg_motion.utils.logging_config import logging_context

logger = logging.getLogger(__name__)

__all__ = [
    "ConversionOptions",
    "ConversionResult",
    "convert",
    "convert_string",
    "draw_document",
    "format_program",
    "svg_to_program",
]


@dataclass(frozen=True)
class ConversionOptions:
    """Per-document options that are not part of stored settings.

    Parameters
    ----------
    dimensions : tuple
        ``(width, height)`` overrides (numbers or lengths such as
        ``"210mm"``); required when the document has no intrinsic size.
    scale : float
        Extra factor on top of ``settings.conversion.resolution``.
    strict : bool
        Fail on ``text``/``image``/``use`` instead of skipping them.
    name : str
        Document name used as logging context.
    """

    dimensions: Dimensions = (None, None)
    scale: float = 1.0
    strict: bool = False
    name: str = "document"

    def __post_init__(self) -> None:
        if self.scale <= 0.0:
            raise ValueError(f"scale must be positive, got {self.scale}")


@dataclass(frozen=True)
class ConversionResult:
    """Raw output of both passes, before postprocessing."""

    document: ParsedDocument
    program: Program
    bbox: BoundingBox
    offset: tuple[float, float]


def draw_document(document: ParsedDocument, turtle: Turtle) -> None:
    """Traverse *document* once, driving *turtle* through a fresh tracker."""
    tracker = PathStateTracker(turtle)
    turtle.begin()
    for element in document.elements:
        turtle.comment(element.comment)
        for segment in element.segments:
            tracker.apply(segment)
    turtle.end()


def svg_to_program(
    root: Union[ET.Element, ET.ElementTree],
    settings: Settings,
    options: Optional[ConversionOptions] = None,
) -> ConversionResult:
    """Parse *root* and run both passes.

    Returns
    -------
    ConversionResult
        Program in device units (not yet offset), the device-unit bounding
        box and the origin offset the postprocessor should apply.

    Raises
    ------
    DocumentError
        If the document cannot be parsed (including missing dimensions).
    """
    options = options or ConversionOptions()
    conv = settings.conversion

    with logging_context(document=options.name):
        document = parse_document(
            root,
            conv.resolution,
            dimensions=options.dimensions,
            extra_attribute_name=conv.extra_attribute_name,
            strict=options.strict,
        )
        factor = conv.resolution * options.scale

        logger.debug("Pass 1: bounding box (factor %.6g)", factor)
        extents = BoundingBoxTurtle()
        draw_document(document, RescalingTurtle(extents, factor))
        offset = origin_offset(
            extents.bbox, conv.origin, conv.origin_policy,
            page_height=document.height * factor,
        )

        logger.debug("Pass 2: emitting motion commands")
        emitter = GCodeTurtle(Machine(settings.machine), conv.tolerance, conv.feedrate)
        draw_document(document, RescalingTurtle(emitter, factor))

        logger.info(
            "Converted %d element(s): %d linear, %d arc move(s); %.3f x %.3f",
            len(document.elements),
            count_operations(emitter.program, LinearMove),
            count_operations(emitter.program, ArcMove),
            extents.bbox.width,
            extents.bbox.height,
        )

    return ConversionResult(
        document=document, program=emitter.program, bbox=extents.bbox, offset=offset,
    )


def convert(
    root: Union[ET.Element, ET.ElementTree],
    settings: Settings,
    options: Optional[ConversionOptions] = None,
) -> list[str]:
    """Full conversion: document tree to finished G-code lines."""
    result = svg_to_program(root, settings, options)
    return postprocess(result.program, settings.postprocess, settings.machine, result.offset)


def convert_string(
    svg_text: str,
    settings: Settings,
    options: Optional[ConversionOptions] = None,
) -> list[str]:
    """Like :func:`convert`, from SVG source text.

    Raises
    ------
    ParseError
        If *svg_text* is not well-formed XML.
    """
    try:
        root = ET.fromstring(svg_text)
    except ET.ParseError as exc:
        raise ParseError(f"Malformed XML: {exc}") from exc
    return convert(root, settings, options)
