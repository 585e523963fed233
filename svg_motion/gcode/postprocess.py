"""Postprocessor -- motion commands to G-code lines.

Steps, in order:
    1. Shift every coordinate-bearing command by the origin offset.
    2. Format each command as one or more lines (machine sequences may span
       several lines; empty sequences produce none).
    3. Prefix command lines with ``N<n> `` when line numbering is on.
    4. Append ``*<checksum>`` when checksums are on.

Comment lines are formatted in the configured style and are neither
numbered nor checksummed.  Nothing here reorders commands or does any
geometry beyond the offset.

Checksum:
    XOR of every byte of the line text up to (not including) the ``*``,
    printed in decimal.  This is the RepRap/Marlin scheme, so with line
    numbers on, ``N3 G1 X1.000 Y2.000 F300.0*<cs>`` covers the ``N3 ``
    prefix too.

Number formatting:
    Coordinates use ``decimal_places`` fixed decimals with negative zero
    printed as zero; feed rates use one decimal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import StringIO
from typing import Iterable

from svg_motion.configs.settings import (
    MachineConfig,
    Origin,
    OriginPolicy,
    PostprocessConfig,
)
from svg_motion.drawing.bounding_box import BoundingBox
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
    offset_operation,
)

logger = logging.getLogger(__name__)


class GCodeError(Exception):
    """Raised when a command cannot be formatted."""

    pass


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def checksum(line: str) -> int:
    """XOR of the bytes of *line* (the text preceding ``*``)."""
    value = 0
    for byte in line.encode("utf-8"):
        value ^= byte
    return value


def _f(feedrate: float) -> str:
    return f"F{feedrate:.1f}"


def origin_offset(
    bbox: BoundingBox,
    origin: Origin,
    policy: OriginPolicy,
    page_height: float = 0.0,
) -> tuple[float, float]:
    """Translation that puts the policy's anchor point on *origin*.

    Parameters
    ----------
    bbox : BoundingBox
        Device-unit extents from the pre-pass.
    origin : tuple[float | None, float | None]
        Device position of the anchor.  A ``None`` axis is left unplaced.
    policy : str
        ``"document"`` anchors the page's bottom-left corner,
        ``"min_corner"`` the bounding box minimum corner, ``"center"`` its
        centre.
    page_height : float
        Page height in device units.  After the vertical flip the page spans
        ``[-page_height, 0]`` in Y, so its bottom-left corner is
        ``(0, -page_height)``.

    Returns
    -------
    tuple[float, float]
        ``(dx, dy)``.  Zero for an empty bounding box.
    """
    if bbox.is_empty:
        return (0.0, 0.0)
    if policy == "document":
        anchor = (0.0, -page_height)
    elif policy == "min_corner":
        anchor = (bbox.min_x, bbox.min_y)
    elif policy == "center":
        anchor = bbox.center
    else:
        raise ValueError(f"Unknown origin policy: {policy!r}")

    ox, oy = origin
    dx = 0.0 if ox is None else ox - anchor[0]
    dy = 0.0 if oy is None else oy - anchor[1]
    return (dx, dy)


@dataclass(frozen=True, slots=True)
class _Line:
    text: str
    is_comment: bool = False


# ---------------------------------------------------------------------------
# Postprocessor
# ---------------------------------------------------------------------------


class Postprocessor:
    """Turn a raw program into final G-code lines.

    Parameters
    ----------
    config : PostprocessConfig
        Numbering, checksum, comment and number-format options.
    machine : MachineConfig
        Literal tool on/off text.
    """

    def __init__(self, config: PostprocessConfig, machine: MachineConfig) -> None:
        self._cfg = config
        self._machine = machine

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def process(
        self,
        program: Program,
        offset: tuple[float, float] = (0.0, 0.0),
    ) -> list[str]:
        """Offset, format, number and checksum *program*.

        Raises
        ------
        GCodeError
            If the program contains a command this formatter does not know.
        """
        dx, dy = offset
        raw: list[_Line] = []
        for op in program:
            raw.extend(self._generate_op(offset_operation(op, dx, dy)))

        lines: list[str] = []
        number = self._cfg.line_number_base
        for line in raw:
            if line.is_comment:
                lines.append(line.text)
                continue
            text = line.text
            if self._cfg.line_numbers:
                text = f"N{number} {text}"
                number += 1
            if self._cfg.checksums:
                text = f"{text}*{checksum(text)}"
            lines.append(text)

        logger.debug("Postprocessed %d command(s) into %d line(s)", len(program), len(lines))
        return lines

    def format_number(self, value: float) -> str:
        text = f"{value:.{self._cfg.decimal_places}f}"
        if text.startswith("-") and float(text) == 0.0:
            text = text[1:]
        return text

    def format_comment(self, text: str) -> str | None:
        """Comment line in the configured style, or ``None`` if disabled."""
        style = self._cfg.comment_style
        text = " ".join(text.split())
        if style == "none":
            return None
        if style == "parentheses":
            return "(" + text.replace("(", "[").replace(")", "]") + ")"
        return f"; {text}"

    # ------------------------------------------------------------------
    # Internal: per-command dispatch
    # ------------------------------------------------------------------

    def _generate_op(self, op: Operation) -> list[_Line]:
        if isinstance(op, LinearMove):
            return [self._gen_linear(op)]
        if isinstance(op, ArcMove):
            return [self._gen_arc(op)]
        if isinstance(op, ToolOn):
            return self._gen_sequence(self._machine.tool_on_sequence)
        if isinstance(op, ToolOff):
            return self._gen_sequence(self._machine.tool_off_sequence)
        if isinstance(op, SetMode):
            return [_Line("G90" if op.mode is DistanceMode.ABSOLUTE else "G91")]
        if isinstance(op, Comment):
            comment = self.format_comment(op.text)
            return [] if comment is None else [_Line(comment, is_comment=True)]
        if isinstance(op, Sequence):
            return self._gen_sequence(op.text)
        raise GCodeError(f"Unsupported operation: {type(op).__name__}")

    def _gen_linear(self, op: LinearMove) -> _Line:
        n = self.format_number
        if op.is_rapid:
            return _Line(f"G0 X{n(op.x)} Y{n(op.y)}")
        return _Line(f"G1 X{n(op.x)} Y{n(op.y)} {_f(op.feedrate)}")

    def _gen_arc(self, op: ArcMove) -> _Line:
        n = self.format_number
        words = f"{'G2' if op.clockwise else 'G3'} X{n(op.x)} Y{n(op.y)} I{n(op.i)} J{n(op.j)}"
        if op.feedrate is not None:
            words += f" {_f(op.feedrate)}"
        return _Line(words)

    def _gen_sequence(self, text: str | None) -> list[_Line]:
        """Split literal machine text into lines; ``;`` lines are comments."""
        if not text:
            return []
        lines = []
        for raw in text.splitlines():
            raw = raw.strip()
            if not raw:
                continue
            if raw.startswith(";"):
                comment = self.format_comment(raw[1:])
                if comment is not None:
                    lines.append(_Line(comment, is_comment=True))
            else:
                lines.append(_Line(raw))
        return lines


def postprocess(
    program: Program,
    config: PostprocessConfig,
    machine: MachineConfig,
    offset: tuple[float, float] = (0.0, 0.0),
) -> list[str]:
    """Functional wrapper around :meth:`Postprocessor.process`."""
    return Postprocessor(config, machine).process(program, offset)


def format_program(lines: Iterable[str]) -> str:
    """Join G-code lines into program text (newline-terminated)."""
    buf = StringIO()
    for line in lines:
        buf.write(line)
        buf.write("\n")
    return buf.getvalue()
