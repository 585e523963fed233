"""Curve-to-motion approximation: single circular arc, else polyline.

Given a cubic (or quadratic) Bezier in device coordinates, try to replace
it with one circular arc whose radial deviation from the curve, sampled at
``ARC_SAMPLES`` interior parameters, stays within the tolerance.  When the
machine cannot interpolate arcs, when the curve is nearly straight, or when
no single arc is close enough, the curve is flattened by recursive de
Casteljau subdivision until every chord lies within the tolerance of its
sub-curve.

Deviation bound for the flattening:
    A cubic lies inside the convex hull of its control points, and distance
    to a segment is convex, so the curve never strays further from the chord
    ``p0``-``p3`` than ``max(d(p1), d(p2))``.  Subdivision stops once that
    bound is within tolerance.

Direction convention:
    Device space is +Y up.  A positive cross product of
    ``(mid - start) x (end - mid)`` turns left, i.e. counter-clockwise (G3).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from svg_motion.geometry.affine import Point
from svg_motion.geometry.curves import (
    cubic_point,
    cubic_points,
    elevate_quadratic,
    point_segment_distance,
    split_cubic,
)
from svg_motion.job_ir.operations import ArcMove, LinearMove, Operation

logger = logging.getLogger(__name__)

CURVATURE_EPSILON = 1e-6
"""Curvature (1 / radius, per device unit) below which no arc is fitted."""

ARC_SAMPLES = 16
"""Interior parameter samples used to measure arc deviation."""

MAX_FLATTEN_DEPTH = 24
"""Subdivision depth limit for the polyline fallback."""


@dataclass(frozen=True, slots=True)
class FittedArc:
    """A circle arc matched to a curve.

    Parameters
    ----------
    center : tuple[float, float]
        Arc centre in device units.
    radius : float
        Arc radius.
    clockwise : bool
        Travel direction from start to end.
    sweep : float
        Absolute angle swept, in radians.
    max_deviation : float
        Largest sampled radial distance between curve and arc.
    """

    center: Point
    radius: float
    clockwise: bool
    sweep: float
    max_deviation: float


# ---------------------------------------------------------------------------
# Arc fitting
# ---------------------------------------------------------------------------


def _circumcircle(a: Point, b: Point, c: Point) -> tuple[Point, float] | None:
    d = 2.0 * (a[0] * (b[1] - c[1]) + b[0] * (c[1] - a[1]) + c[0] * (a[1] - b[1]))
    if abs(d) < 1e-12:
        return None
    a2 = a[0] * a[0] + a[1] * a[1]
    b2 = b[0] * b[0] + b[1] * b[1]
    c2 = c[0] * c[0] + c[1] * c[1]
    ux = (a2 * (b[1] - c[1]) + b2 * (c[1] - a[1]) + c2 * (a[1] - b[1])) / d
    uy = (a2 * (c[0] - b[0]) + b2 * (a[0] - c[0]) + c2 * (b[0] - a[0])) / d
    return (ux, uy), math.hypot(a[0] - ux, a[1] - uy)


def _swept(angle_from: float, angle_to: float, clockwise: bool) -> float:
    """Angle travelled from *angle_from* to *angle_to*, in ``[0, 2*pi)``."""
    delta = angle_from - angle_to if clockwise else angle_to - angle_from
    return delta % (2.0 * math.pi)


def _interior_samples(p0: Point, p1: Point, p2: Point, p3: Point) -> np.ndarray:
    ts = np.linspace(0.0, 1.0, ARC_SAMPLES + 2)[1:-1]
    return cubic_points(p0, p1, p2, p3, ts)


def sample_deviation(
    p0: Point, p1: Point, p2: Point, p3: Point, center: Point, radius: float,
) -> float:
    """Largest radial distance between the sampled curve and a circle."""
    pts = _interior_samples(p0, p1, p2, p3)
    radial = np.hypot(pts[:, 0] - center[0], pts[:, 1] - center[1])
    return float(np.max(np.abs(radial - radius)))


def fit_arc(
    p0: Point, p1: Point, p2: Point, p3: Point, tolerance: float,
) -> FittedArc | None:
    """Fit one circular arc to a cubic, or return ``None``.

    The candidate circle passes through the curve's start, parametric
    midpoint and end.  It is accepted only if it is not near-straight
    (curvature above ``CURVATURE_EPSILON``), every interior sample is within
    *tolerance* of the circle, and the samples advance monotonically along
    the arc without leaving its sweep.
    """
    mid = cubic_point(p0, p1, p2, p3, 0.5)
    circle = _circumcircle(p0, mid, p3)
    if circle is None:
        return None
    center, radius = circle
    if radius <= 0.0 or 1.0 / radius < CURVATURE_EPSILON:
        return None

    cross = (mid[0] - p0[0]) * (p3[1] - mid[1]) - (mid[1] - p0[1]) * (p3[0] - mid[0])
    clockwise = cross < 0.0

    start_angle = math.atan2(p0[1] - center[1], p0[0] - center[0])
    end_angle = math.atan2(p3[1] - center[1], p3[0] - center[0])
    sweep = _swept(start_angle, end_angle, clockwise)
    if sweep == 0.0:
        return None

    pts = _interior_samples(p0, p1, p2, p3)
    radial = np.hypot(pts[:, 0] - center[0], pts[:, 1] - center[1])
    deviation = float(np.max(np.abs(radial - radius)))
    if deviation > tolerance:
        return None

    previous = 0.0
    for x, y in pts:
        travelled = _swept(start_angle, math.atan2(y - center[1], x - center[0]), clockwise)
        if travelled < previous or travelled > sweep:
            return None
        previous = travelled

    return FittedArc(
        center=center,
        radius=radius,
        clockwise=clockwise,
        sweep=sweep,
        max_deviation=deviation,
    )


# ---------------------------------------------------------------------------
# Flattening
# ---------------------------------------------------------------------------


def flatness(p0: Point, p1: Point, p2: Point, p3: Point) -> float:
    """Upper bound on the curve's distance from its chord."""
    return max(point_segment_distance(p1, p0, p3), point_segment_distance(p2, p0, p3))


def flatten_cubic(
    p0: Point, p1: Point, p2: Point, p3: Point, tolerance: float,
) -> list[Point]:
    """Polyline vertices (excluding the start) approximating the cubic."""
    vertices: list[Point] = []
    stack = [((p0, p1, p2, p3), 0)]
    while stack:
        curve, depth = stack.pop()
        if depth >= MAX_FLATTEN_DEPTH or flatness(*curve) <= tolerance:
            vertices.append(curve[3])
            continue
        left, right = split_cubic(*curve)
        # Right pushed first so the left half is emitted first
        stack.append((right, depth + 1))
        stack.append((left, depth + 1))
    return vertices


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def approximate_cubic(
    p0: Point,
    p1: Point,
    p2: Point,
    p3: Point,
    tolerance: float,
    arc_capable: bool,
    feedrate: float | None = None,
) -> list[Operation]:
    """Motion commands tracing a cubic from *p0* to *p3*.

    Returns
    -------
    list[Operation]
        Exactly one ``ArcMove``, or one or more ``LinearMove`` in order.
        A curve already within *tolerance* of its chord is a single
        ``LinearMove``, never a large-radius arc.
    """
    if tolerance <= 0.0:
        raise ValueError(f"tolerance must be positive, got {tolerance}")

    if flatness(p0, p1, p2, p3) <= tolerance:
        return [LinearMove(x=p3[0], y=p3[1], feedrate=feedrate)]

    if arc_capable:
        arc = fit_arc(p0, p1, p2, p3, tolerance)
        if arc is not None:
            return [
                ArcMove(
                    x=p3[0],
                    y=p3[1],
                    i=arc.center[0] - p0[0],
                    j=arc.center[1] - p0[1],
                    clockwise=arc.clockwise,
                    feedrate=feedrate,
                )
            ]
        logger.debug("No arc within %.4g for curve ending at %s; flattening", tolerance, p3)

    return [
        LinearMove(x=x, y=y, feedrate=feedrate)
        for x, y in flatten_cubic(p0, p1, p2, p3, tolerance)
    ]


def approximate_quadratic(
    p0: Point,
    control: Point,
    p2: Point,
    tolerance: float,
    arc_capable: bool,
    feedrate: float | None = None,
) -> list[Operation]:
    """Quadratic variant of :func:`approximate_cubic` (via degree elevation)."""
    c1, c2 = elevate_quadratic(p0, control, p2)
    return approximate_cubic(p0, c1, c2, p2, tolerance, arc_capable, feedrate)
