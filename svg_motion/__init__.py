"""
SVG to G-code conversion for two-axis plotters, cutters and engravers.

Converts SVG path outlines (with nested group transforms) into an ordered,
minimal stream of motion commands and formats it as G-code.

Subpackages:
    geometry: affine transforms, Bezier/arc math, arc fitting and flattening
    document: SVG parsing into globally positioned path segments
    drawing: turtle interface, bounding-box/emitter/rescaling passes, tracker
    job_ir: motion-command intermediate representation
    gcode: postprocessing (offset, numbering, checksums, comments)
    configs: versioned settings, YAML loading and upgrades
    utils: filesystem and logging helpers

Usage::

    from svg_motion import convert_string, format_program, load_settings
    lines = convert_string(svg_text, load_settings())
    print(format_program(lines))
"""

from svg_motion.configs import Settings, load_settings
from svg_motion.converter import (
    ConversionOptions,
    ConversionResult,
    convert,
    convert_string,
    draw_document,
    format_program,
    svg_to_program,
)
from svg_motion.document import parse_document

__version__ = "0.3.0"

__all__ = [
    "ConversionOptions",
    "ConversionResult",
    "Settings",
    "convert",
    "convert_string",
    "draw_document",
    "format_program",
    "load_settings",
    "parse_document",
    "svg_to_program",
]
