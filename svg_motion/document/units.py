"""Length parsing for document attributes.

Document units are SVG user units (CSS px when no viewBox rescales them).
Physical units are converted through the device resolution: a length of
``L`` millimetres is ``L / resolution`` document units, so that after the
rescaling pass it comes out at ``L`` device millimetres again.
"""

from __future__ import annotations

import re

from svg_motion.document.errors import ParseError

_LENGTH = re.compile(
    r"\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*(px|mm|cm|in|pt|pc|%)?\s*"
)

MM_PER_UNIT = {
    "mm": 1.0,
    "cm": 10.0,
    "in": 25.4,
    "pt": 25.4 / 72.0,
    "pc": 25.4 / 6.0,
}


def parse_length(text: str | float | None, resolution: float) -> float | None:
    """Convert a length to document units.

    Parameters
    ----------
    text : str | float | None
        Attribute value such as ``"210mm"``, ``"300"`` or ``"12.5px"``.
        Numbers are taken as document units.
    resolution : float
        Device millimetres per document unit.

    Returns
    -------
    float | None
        Length in document units, or ``None`` for missing and percentage
        values (which have no absolute meaning at the root).

    Raises
    ------
    ParseError
        If the value is not a number with an optional known unit.
    """
    if text is None:
        return None
    if isinstance(text, (int, float)):
        return float(text)
    match = _LENGTH.fullmatch(text)
    if match is None:
        raise ParseError(f"Invalid length {text!r}")
    value = float(match.group(1))
    unit = match.group(2)
    if unit is None or unit == "px":
        return value
    if unit == "%":
        return None
    return value * MM_PER_UNIT[unit] / resolution


def parse_number(text: str | None, default: float = 0.0) -> float:
    """Plain coordinate attribute (``x``, ``cy``, ``rx`` ...) in user units."""
    if text is None or not text.strip():
        return default
    match = _LENGTH.fullmatch(text)
    if match is None or match.group(2) not in (None, "px"):
        raise ParseError(f"Invalid coordinate {text!r}")
    return float(match.group(1))


def parse_points(text: str | None) -> list[tuple[float, float]]:
    """``points`` attribute of polyline/polygon; an odd trailing value is dropped."""
    if not text:
        return []
    values = [v for v in re.split(r"[\s,]+", text.strip()) if v]
    try:
        numbers = [float(v) for v in values]
    except ValueError as exc:
        raise ParseError(f"Invalid points list {text!r}") from exc
    return list(zip(numbers[0::2], numbers[1::2]))
