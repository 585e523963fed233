"""Path segments -- one variant per SVG path command.

Coordinates are absolute.  Straight out of the path-data parser they are in
the element's local space; after :func:`resolve_segments` they are global
document coordinates (device orientation, before unit rescaling).

Smooth variants carry only what the command states; the missing control
point is synthesised later by the path state tracker.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass

import numpy as np

from svg_motion.geometry.affine import Point, apply
from svg_motion.geometry.curves import transform_arc


@dataclass(frozen=True, slots=True)
class PathSegment(ABC):
    """Base class for all path segments."""

    pass


@dataclass(frozen=True, slots=True)
class MoveTo(PathSegment):
    point: Point


@dataclass(frozen=True, slots=True)
class LineTo(PathSegment):
    point: Point


@dataclass(frozen=True, slots=True)
class CubicTo(PathSegment):
    ctrl1: Point
    ctrl2: Point
    end: Point


@dataclass(frozen=True, slots=True)
class QuadraticTo(PathSegment):
    ctrl: Point
    end: Point


@dataclass(frozen=True, slots=True)
class SmoothCubicTo(PathSegment):
    ctrl2: Point
    end: Point


@dataclass(frozen=True, slots=True)
class SmoothQuadraticTo(PathSegment):
    end: Point


@dataclass(frozen=True, slots=True)
class ArcTo(PathSegment):
    """Elliptical arc in SVG endpoint form.

    Parameters
    ----------
    radii : tuple[float, float]
        ``(rx, ry)``.
    rotation : float
        X-axis rotation of the ellipse, degrees.
    large_arc, sweep : bool
        SVG arc flags.
    end : tuple[float, float]
        End-point.
    """

    radii: Point
    rotation: float
    large_arc: bool
    sweep: bool
    end: Point


@dataclass(frozen=True, slots=True)
class ClosePath(PathSegment):
    pass


def transform_segment(segment: PathSegment, transform: np.ndarray) -> PathSegment:
    """Map every coordinate of *segment* through *transform*."""
    if isinstance(segment, MoveTo):
        return MoveTo(apply(transform, segment.point))
    if isinstance(segment, LineTo):
        return LineTo(apply(transform, segment.point))
    if isinstance(segment, CubicTo):
        return CubicTo(
            apply(transform, segment.ctrl1),
            apply(transform, segment.ctrl2),
            apply(transform, segment.end),
        )
    if isinstance(segment, QuadraticTo):
        return QuadraticTo(apply(transform, segment.ctrl), apply(transform, segment.end))
    if isinstance(segment, SmoothCubicTo):
        return SmoothCubicTo(apply(transform, segment.ctrl2), apply(transform, segment.end))
    if isinstance(segment, SmoothQuadraticTo):
        return SmoothQuadraticTo(apply(transform, segment.end))
    if isinstance(segment, ArcTo):
        radii, rotation, sweep = transform_arc(
            transform, segment.radii, segment.rotation, segment.sweep,
        )
        return ArcTo(radii, rotation, segment.large_arc, sweep, apply(transform, segment.end))
    if isinstance(segment, ClosePath):
        return segment
    raise TypeError(f"Unknown path segment: {type(segment).__name__}")


def resolve_segments(
    segments: tuple[PathSegment, ...] | list[PathSegment],
    transform: np.ndarray,
) -> tuple[PathSegment, ...]:
    """Transform a whole local-space segment list into global space."""
    return tuple(transform_segment(s, transform) for s in segments)
