"""Motion-command intermediate representation."""

from svg_motion.job_ir.operations import (
    ArcMove,
    Comment,
    DistanceMode,
    LinearMove,
    Operation,
    Program,
    Sequence,
    SetMode,
    ToolOff,
    ToolOn,
    count_operations,
    offset_operation,
)

__all__ = [
    "ArcMove",
    "Comment",
    "DistanceMode",
    "LinearMove",
    "Operation",
    "Program",
    "Sequence",
    "SetMode",
    "ToolOff",
    "ToolOn",
    "count_operations",
    "offset_operation",
]
