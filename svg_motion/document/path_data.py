"""Parser for SVG path data (the ``d`` attribute).

Produces absolute, local-space :mod:`~svg_motion.document.segments`.
Relative commands are resolved against the local current point, ``H``/``V``
become ``LineTo``, and implicit repeats follow the SVG grammar (extra
coordinate pairs after a moveto are linetos).

Arc flags are single ``0``/``1`` characters and may be packed without
separators (``a1 1 0 00 1 1``), so the scanner reads them separately from
numbers.
"""

from __future__ import annotations

import re

from svg_motion.document.errors import ParseError
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
)

_NUMBER = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_SEPARATORS = " \t\r\n\f,"
_COMMANDS = "MmZzLlHhVvCcSsQqTtAa"


class _Scanner:
    """Character-level cursor over a path-data string."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def skip_separators(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _SEPARATORS:
            self.pos += 1

    def at_end(self) -> bool:
        self.skip_separators()
        return self.pos >= len(self.text)

    def peek_command(self) -> str | None:
        self.skip_separators()
        if self.pos < len(self.text) and self.text[self.pos] in _COMMANDS:
            return self.text[self.pos]
        return None

    def next_command(self) -> str:
        cmd = self.peek_command()
        if cmd is None:
            raise self.error("expected a path command")
        self.pos += 1
        return cmd

    def has_number(self) -> bool:
        self.skip_separators()
        return _NUMBER.match(self.text, self.pos) is not None

    def number(self) -> float:
        self.skip_separators()
        match = _NUMBER.match(self.text, self.pos)
        if match is None:
            raise self.error("expected a number")
        self.pos = match.end()
        return float(match.group(0))

    def flag(self) -> bool:
        self.skip_separators()
        if self.pos < len(self.text) and self.text[self.pos] in "01":
            value = self.text[self.pos] == "1"
            self.pos += 1
            return value
        raise self.error("expected an arc flag (0 or 1)")

    def error(self, message: str) -> ParseError:
        snippet = self.text[self.pos:self.pos + 12]
        return ParseError(f"Invalid path data at offset {self.pos} ({snippet!r}): {message}")


def parse_path_data(d: str) -> list[PathSegment]:
    """Parse a path ``d`` string into absolute local-space segments.

    Parameters
    ----------
    d : str
        Path data.  An empty or whitespace-only string yields no segments.

    Returns
    -------
    list[PathSegment]
        Segments in command order.

    Raises
    ------
    ParseError
        On unknown commands, missing or malformed arguments, or path data
        that does not begin with a moveto.
    """
    scanner = _Scanner(d)
    segments: list[PathSegment] = []
    cx = cy = 0.0            # current point
    sx = sy = 0.0            # current subpath start

    if scanner.at_end():
        return segments

    first = scanner.peek_command()
    if first not in ("M", "m"):
        raise scanner.error("path data must begin with a moveto")

    while not scanner.at_end():
        cmd = scanner.next_command()
        upper = cmd.upper()
        relative = cmd != upper

        if upper == "Z":
            segments.append(ClosePath())
            cx, cy = sx, sy
            continue

        first_group = True
        while first_group or scanner.has_number():
            ox, oy = (cx, cy) if relative else (0.0, 0.0)

            if upper == "M":
                x, y = scanner.number() + ox, scanner.number() + oy
                if first_group:
                    segments.append(MoveTo((x, y)))
                    sx, sy = x, y
                else:
                    segments.append(LineTo((x, y)))
                cx, cy = x, y
            elif upper == "L":
                x, y = scanner.number() + ox, scanner.number() + oy
                segments.append(LineTo((x, y)))
                cx, cy = x, y
            elif upper == "H":
                x = scanner.number() + ox
                segments.append(LineTo((x, cy)))
                cx = x
            elif upper == "V":
                y = scanner.number() + (cy if relative else 0.0)
                segments.append(LineTo((cx, y)))
                cy = y
            elif upper == "C":
                c1 = (scanner.number() + ox, scanner.number() + oy)
                c2 = (scanner.number() + ox, scanner.number() + oy)
                end = (scanner.number() + ox, scanner.number() + oy)
                segments.append(CubicTo(c1, c2, end))
                cx, cy = end
            elif upper == "S":
                c2 = (scanner.number() + ox, scanner.number() + oy)
                end = (scanner.number() + ox, scanner.number() + oy)
                segments.append(SmoothCubicTo(c2, end))
                cx, cy = end
            elif upper == "Q":
                c = (scanner.number() + ox, scanner.number() + oy)
                end = (scanner.number() + ox, scanner.number() + oy)
                segments.append(QuadraticTo(c, end))
                cx, cy = end
            elif upper == "T":
                end = (scanner.number() + ox, scanner.number() + oy)
                segments.append(SmoothQuadraticTo(end))
                cx, cy = end
            elif upper == "A":
                rx = scanner.number()
                ry = scanner.number()
                rotation = scanner.number()
                large_arc = scanner.flag()
                sweep = scanner.flag()
                end = (scanner.number() + ox, scanner.number() + oy)
                segments.append(ArcTo((rx, ry), rotation, large_arc, sweep, end))
                cx, cy = end
            else:
                raise scanner.error(f"unsupported command {cmd!r}")

            first_group = False

        # Anything left before the next command is garbage
        if not scanner.at_end() and scanner.peek_command() is None:
            raise scanner.error(f"unexpected characters after {cmd!r} arguments")

    return segments
