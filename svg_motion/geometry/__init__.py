"""Geometric primitives: affine transforms, Bezier curves, arc fitting."""

from svg_motion.geometry.affine import (
    Point,
    apply,
    compose,
    flip_y,
    identity,
    matrix,
    rotate,
    scale,
    skew_x,
    skew_y,
    translate,
)
from svg_motion.geometry.arcs import approximate_cubic, approximate_quadratic

__all__ = [
    "Point",
    "apply",
    "approximate_cubic",
    "approximate_quadratic",
    "compose",
    "flip_y",
    "identity",
    "matrix",
    "rotate",
    "scale",
    "skew_x",
    "skew_y",
    "translate",
]
