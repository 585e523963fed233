"""Parser for SVG ``transform`` attributes.

A transform list ``"A B C"`` maps a point as ``A(B(C(p)))``: the rightmost
function is closest to the point.  The parser is strict -- any text it does
not understand is a :class:`ParseError`, never silently ignored.
"""

from __future__ import annotations

import re

import numpy as np

from svg_motion.document.errors import ParseError
from svg_motion.geometry import affine

_FUNCTION = re.compile(r"\s*([A-Za-z]+)\s*\(([^()]*)\)")
# Between functions only: whitespace and at most one comma
_SEPARATOR = re.compile(r"\s*,?")
_NUMBER = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_ARG_SPLIT = re.compile(r"[\s,]+")

# Allowed argument counts per function
_ARGUMENT_COUNTS = {
    "matrix": (6,),
    "translate": (1, 2),
    "scale": (1, 2),
    "rotate": (1, 3),
    "skewX": (1,),
    "skewY": (1,),
}


def _parse_arguments(name: str, raw: str) -> list[float]:
    parts = [p for p in _ARG_SPLIT.split(raw.strip()) if p]
    values = []
    for part in parts:
        if _NUMBER.fullmatch(part) is None:
            raise ParseError(f"Invalid number {part!r} in {name}()")
        values.append(float(part))
    if len(values) not in _ARGUMENT_COUNTS[name]:
        expected = " or ".join(str(n) for n in _ARGUMENT_COUNTS[name])
        raise ParseError(
            f"{name}() takes {expected} arguments, got {len(values)}"
        )
    return values


def _function_matrix(name: str, values: list[float]) -> np.ndarray:
    if name == "matrix":
        return affine.matrix(*values)
    if name == "translate":
        return affine.translate(values[0], values[1] if len(values) > 1 else 0.0)
    if name == "scale":
        return affine.scale(values[0], values[1] if len(values) > 1 else None)
    if name == "rotate":
        if len(values) == 3:
            return affine.rotate(values[0], values[1], values[2])
        return affine.rotate(values[0])
    if name == "skewX":
        return affine.skew_x(values[0])
    return affine.skew_y(values[0])


def parse_transform(text: str | None) -> np.ndarray:
    """Parse a transform list into a single 3x3 matrix.

    Parameters
    ----------
    text : str | None
        Attribute value.  ``None`` or blank means identity.

    Returns
    -------
    np.ndarray
        The composed transform.

    Raises
    ------
    ParseError
        On unknown functions, wrong argument counts, bad numbers, or stray
        characters.
    """
    result = affine.identity()
    if text is None or not text.strip():
        return result

    pos = 0
    while text[pos:].strip():
        if pos:
            pos = _SEPARATOR.match(text, pos).end()
        match = _FUNCTION.match(text, pos)
        if match is None:
            raise ParseError(f"Malformed transform near {text[pos:pos + 20]!r}")
        name, raw_args = match.group(1), match.group(2)
        if name not in _ARGUMENT_COUNTS:
            raise ParseError(f"Unsupported transform function {name!r}")
        values = _parse_arguments(name, raw_args)
        result = affine.compose(result, _function_matrix(name, values))
        pos = match.end()

    return result
