"""Motion commands -- the vocabulary between geometry and G-code text.

Every command is an immutable, slotted dataclass.  Commands use
**semantic** names (``ToolOn``, not ``M3``) and **device** units with
device orientation (+Y up).  Coordinates are not yet shifted by the origin
offset; the postprocessor applies placement when it formats a program.

A *Program* is the flat, ordered command list for one document.  Commands
are produced once per logical state change and never modified afterwards.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, replace
from enum import Enum

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

Program = list["Operation"]
"""The ordered command stream for one conversion."""


class DistanceMode(Enum):
    """Interpretation of coordinates in subsequent motion commands."""

    ABSOLUTE = "absolute"
    RELATIVE = "relative"


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Operation(ABC):
    """Base class for all motion commands."""

    pass


# ---------------------------------------------------------------------------
# Motion
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LinearMove(Operation):
    """Straight move to ``(x, y)``.

    Parameters
    ----------
    x, y : float
        End-point in device units.
    feedrate : float | None
        Cutting/drawing speed.  ``None`` marks a rapid (tool-off) travel.
    """

    x: float
    y: float
    feedrate: float | None = None

    @property
    def is_rapid(self) -> bool:
        return self.feedrate is None


@dataclass(frozen=True, slots=True)
class ArcMove(Operation):
    """Circular arc from the current position to ``(x, y)``.

    Uses the centre-offset (I/J) form: the centre sits at
    ``(start + i, start + j)``.

    Parameters
    ----------
    x, y : float
        End-point in device units.
    i, j : float
        Offset from the arc start to the centre.
    clockwise : bool
        ``True`` for G2, ``False`` for G3.
    feedrate : float | None
        Motion speed annotation.
    """

    x: float
    y: float
    i: float
    j: float
    clockwise: bool = True
    feedrate: float | None = None


# ---------------------------------------------------------------------------
# Machine state
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ToolOn(Operation):
    """Engage the tool (pen down, laser on, spindle on)."""

    pass


@dataclass(frozen=True, slots=True)
class ToolOff(Operation):
    """Disengage the tool."""

    pass


@dataclass(frozen=True, slots=True)
class SetMode(Operation):
    """Switch distance mode (G90 / G91)."""

    mode: DistanceMode

    def __post_init__(self) -> None:
        if not isinstance(self.mode, DistanceMode):
            raise ValueError(
                f"mode must be a DistanceMode, got {self.mode!r}"
            )


# ---------------------------------------------------------------------------
# Pass-through text
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Comment(Operation):
    """Free text carried into the output as a comment line."""

    text: str


@dataclass(frozen=True, slots=True)
class Sequence(Operation):
    """Literal G-code supplied by the machine configuration."""

    text: str


# ---------------------------------------------------------------------------
# Program helpers
# ---------------------------------------------------------------------------


def offset_operation(op: Operation, dx: float, dy: float) -> Operation:
    """Return *op* shifted by ``(dx, dy)``.

    Arc centre offsets are relative to the arc start and stay unchanged;
    commands without coordinates are returned as-is.
    """
    if dx == 0.0 and dy == 0.0:
        return op
    if isinstance(op, (LinearMove, ArcMove)):
        return replace(op, x=op.x + dx, y=op.y + dy)
    return op


def count_operations(program: Program, kind: type[Operation]) -> int:
    """Number of commands in *program* that are instances of *kind*."""
    return sum(1 for op in program if isinstance(op, kind))
