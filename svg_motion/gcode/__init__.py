"""G-code postprocessing.

Applies the origin offset to a motion-command program and formats it as
numbered, checksummed G-code lines.
"""

from svg_motion.gcode.postprocess import (
    GCodeError,
    Postprocessor,
    checksum,
    format_program,
    origin_offset,
    postprocess,
)

__all__ = [
    "GCodeError",
    "Postprocessor",
    "checksum",
    "format_program",
    "origin_offset",
    "postprocess",
]
