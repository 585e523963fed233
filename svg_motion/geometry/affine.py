"""2D affine transforms as 3x3 homogeneous numpy matrices.

A point ``(x, y)`` is transformed as the column vector ``(x, y, 1)``, so
for ``M = compose(A, B)`` the point is first mapped by ``B`` and then by
``A`` -- the same order as an SVG ``transform="A B"`` list and as nested
groups, where the outer group's transform is applied last.

Matrices are never mutated in place; every helper returns a new array.
"""

from __future__ import annotations

import math

import numpy as np

Point = tuple[float, float]
"""A 2D point in whatever coordinate space the caller is working in."""


def identity() -> np.ndarray:
    return np.identity(3)


def matrix(a: float, b: float, c: float, d: float, e: float, f: float) -> np.ndarray:
    """Build a matrix from the six SVG ``matrix(a b c d e f)`` values."""
    return np.array(
        (
            (a, c, e),
            (b, d, f),
            (0.0, 0.0, 1.0),
        ),
        dtype=float,
    )


def translate(tx: float, ty: float = 0.0) -> np.ndarray:
    return matrix(1.0, 0.0, 0.0, 1.0, tx, ty)


def scale(sx: float, sy: float | None = None) -> np.ndarray:
    if sy is None:
        sy = sx
    return matrix(sx, 0.0, 0.0, sy, 0.0, 0.0)


def rotate(degrees: float, cx: float = 0.0, cy: float = 0.0) -> np.ndarray:
    """Rotation by *degrees* (positive = x toward y) about ``(cx, cy)``."""
    rad = math.radians(degrees)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    rot = matrix(cos_a, sin_a, -sin_a, cos_a, 0.0, 0.0)
    if cx == 0.0 and cy == 0.0:
        return rot
    return compose(translate(cx, cy), rot, translate(-cx, -cy))


def skew_x(degrees: float) -> np.ndarray:
    return matrix(1.0, 0.0, math.tan(math.radians(degrees)), 1.0, 0.0, 0.0)


def skew_y(degrees: float) -> np.ndarray:
    return matrix(1.0, math.tan(math.radians(degrees)), 0.0, 1.0, 0.0, 0.0)


def flip_y() -> np.ndarray:
    """Mirror about the X axis (document +Y down -> device +Y up)."""
    return scale(1.0, -1.0)


def compose(*transforms: np.ndarray) -> np.ndarray:
    """Right-to-left composition: the last transform touches the point first."""
    result = identity()
    for t in transforms:
        result = result @ t
    return result


def apply(transform: np.ndarray, point: Point) -> Point:
    """Map *point* through *transform*."""
    x, y = point
    mx = transform[0, 0] * x + transform[0, 1] * y + transform[0, 2]
    my = transform[1, 0] * x + transform[1, 1] * y + transform[1, 2]
    return float(mx), float(my)


def linear_part(transform: np.ndarray) -> np.ndarray:
    """The 2x2 scale/rotate/skew block, without translation."""
    return transform[:2, :2].copy()


def is_reflection(transform: np.ndarray) -> bool:
    """True when *transform* reverses orientation (negative determinant)."""
    return bool(np.linalg.det(linear_part(transform)) < 0.0)
