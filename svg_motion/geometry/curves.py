"""Bezier and elliptical-arc helpers.

Pure functions on plain ``(x, y)`` tuples.  Vectorised sampling uses numpy;
everything else is scalar math so that results stay bit-for-bit stable
between the bounding-box pass and the emission pass.

Elliptical arcs follow the SVG endpoint parameterisation
(https://www.w3.org/TR/SVG11/implnote.html#ArcImplementationNotes) and are
lowered to cubic Beziers, each spanning at most ``ARC_SEGMENT_MAX_SWEEP``.
"""

from __future__ import annotations

import math

import numpy as np

from svg_motion.geometry.affine import Point, is_reflection, linear_part

ARC_SEGMENT_MAX_SWEEP = math.pi / 4
"""Maximum angular span of one cubic piece when lowering an ellipse arc."""

DEGENERATE_LENGTH = 1e-9
"""Distances below this are treated as zero (device or document units)."""


# ---------------------------------------------------------------------------
# Point helpers
# ---------------------------------------------------------------------------


def distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def lerp(a: Point, b: Point, t: float) -> Point:
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def reflect(control: Point, about: Point) -> Point:
    """Reflect *control* through *about* (``2 * about - control``)."""
    return (2.0 * about[0] - control[0], 2.0 * about[1] - control[1])


def point_segment_distance(p: Point, a: Point, b: Point) -> float:
    """Shortest distance from *p* to the closed segment ``a``-``b``."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    denom = dx * dx + dy * dy
    if denom < DEGENERATE_LENGTH ** 2:
        return distance(p, a)
    u = ((p[0] - a[0]) * dx + (p[1] - a[1]) * dy) / denom
    u = min(1.0, max(0.0, u))
    return distance(p, (a[0] + u * dx, a[1] + u * dy))


# ---------------------------------------------------------------------------
# Bezier curves
# ---------------------------------------------------------------------------


def cubic_point(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    mt = 1.0 - t
    a = mt * mt * mt
    b = 3.0 * mt * mt * t
    c = 3.0 * mt * t * t
    d = t * t * t
    return (
        a * p0[0] + b * p1[0] + c * p2[0] + d * p3[0],
        a * p0[1] + b * p1[1] + c * p2[1] + d * p3[1],
    )


def cubic_points(
    p0: Point, p1: Point, p2: Point, p3: Point, ts: np.ndarray,
) -> np.ndarray:
    """Evaluate the cubic at every parameter in *ts*; returns ``(N, 2)``."""
    ts = np.asarray(ts, dtype=float)[:, None]
    mt = 1.0 - ts
    ctrl = np.array((p0, p1, p2, p3), dtype=float)
    return (
        mt ** 3 * ctrl[0]
        + 3.0 * mt ** 2 * ts * ctrl[1]
        + 3.0 * mt * ts ** 2 * ctrl[2]
        + ts ** 3 * ctrl[3]
    )


def split_cubic(
    p0: Point, p1: Point, p2: Point, p3: Point, t: float = 0.5,
) -> tuple[tuple[Point, Point, Point, Point], tuple[Point, Point, Point, Point]]:
    """De Casteljau split at *t*."""
    p01 = lerp(p0, p1, t)
    p12 = lerp(p1, p2, t)
    p23 = lerp(p2, p3, t)
    p012 = lerp(p01, p12, t)
    p123 = lerp(p12, p23, t)
    mid = lerp(p012, p123, t)
    return (p0, p01, p012, mid), (mid, p123, p23, p3)


def elevate_quadratic(p0: Point, c: Point, p2: Point) -> tuple[Point, Point]:
    """Cubic control points equivalent to the quadratic ``p0, c, p2``."""
    c1 = (p0[0] + 2.0 / 3.0 * (c[0] - p0[0]), p0[1] + 2.0 / 3.0 * (c[1] - p0[1]))
    c2 = (p2[0] + 2.0 / 3.0 * (c[0] - p2[0]), p2[1] + 2.0 / 3.0 * (c[1] - p2[1]))
    return c1, c2


def _cubic_extrema_1d(a: float, b: float, c: float, d: float) -> list[float]:
    """Parameters in (0, 1) where one coordinate of the cubic is extremal."""
    # Derivative / 3 is a quadratic: qa t^2 + qb t + qc
    qa = -a + 3.0 * b - 3.0 * c + d
    qb = 2.0 * (a - 2.0 * b + c)
    qc = b - a
    roots: list[float] = []
    if abs(qa) < 1e-12:
        if abs(qb) > 1e-12:
            roots.append(-qc / qb)
    else:
        disc = qb * qb - 4.0 * qa * qc
        if disc >= 0.0:
            sq = math.sqrt(disc)
            roots.append((-qb + sq) / (2.0 * qa))
            roots.append((-qb - sq) / (2.0 * qa))
    return [t for t in roots if 0.0 < t < 1.0]


def cubic_extent_points(p0: Point, p1: Point, p2: Point, p3: Point) -> list[Point]:
    """Points of the curve that bound it: endpoints plus axis extrema."""
    ts = _cubic_extrema_1d(p0[0], p1[0], p2[0], p3[0])
    ts += _cubic_extrema_1d(p0[1], p1[1], p2[1], p3[1])
    return [p0, p3] + [cubic_point(p0, p1, p2, p3, t) for t in ts]


# ---------------------------------------------------------------------------
# Elliptical arcs
# ---------------------------------------------------------------------------


def _vector_angle(ux: float, uy: float, vx: float, vy: float) -> float:
    angle = math.atan2(ux * vy - uy * vx, ux * vx + uy * vy)
    return angle


def arc_center_parameters(
    start: Point,
    radii: Point,
    rotation: float,
    large_arc: bool,
    sweep: bool,
    end: Point,
) -> tuple[Point, float, float, float, float] | None:
    """Convert SVG endpoint arc parameters to centre form.

    Returns
    -------
    tuple | None
        ``(center, rx, ry, theta1, delta_theta)`` with angles in radians, or
        ``None`` when the arc degenerates to a straight line (zero radius or
        coincident endpoints).
    """
    rx, ry = abs(radii[0]), abs(radii[1])
    if distance(start, end) < DEGENERATE_LENGTH:
        return None
    if rx < DEGENERATE_LENGTH or ry < DEGENERATE_LENGTH:
        return None

    phi = math.radians(rotation)
    cos_phi = math.cos(phi)
    sin_phi = math.sin(phi)

    dx2 = (start[0] - end[0]) / 2.0
    dy2 = (start[1] - end[1]) / 2.0
    x1p = cos_phi * dx2 + sin_phi * dy2
    y1p = -sin_phi * dx2 + cos_phi * dy2

    # Scale radii up when the endpoints cannot be joined
    lam = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
    if lam > 1.0:
        root = math.sqrt(lam)
        rx *= root
        ry *= root

    num = rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p
    den = rx * rx * y1p * y1p + ry * ry * x1p * x1p
    coef = math.sqrt(max(0.0, num / den)) if den > 0.0 else 0.0
    if large_arc == sweep:
        coef = -coef
    cxp = coef * (rx * y1p / ry)
    cyp = coef * -(ry * x1p / rx)

    cx = cos_phi * cxp - sin_phi * cyp + (start[0] + end[0]) / 2.0
    cy = sin_phi * cxp + cos_phi * cyp + (start[1] + end[1]) / 2.0

    ux = (x1p - cxp) / rx
    uy = (y1p - cyp) / ry
    vx = (-x1p - cxp) / rx
    vy = (-y1p - cyp) / ry
    theta1 = _vector_angle(1.0, 0.0, ux, uy)
    delta = _vector_angle(ux, uy, vx, vy)
    if not sweep and delta > 0.0:
        delta -= 2.0 * math.pi
    elif sweep and delta < 0.0:
        delta += 2.0 * math.pi
    return (cx, cy), rx, ry, theta1, delta


def arc_to_cubics(
    start: Point,
    radii: Point,
    rotation: float,
    large_arc: bool,
    sweep: bool,
    end: Point,
) -> list[tuple[Point, Point, Point]]:
    """Lower an SVG elliptical arc to ``(ctrl1, ctrl2, end)`` cubic pieces.

    An arc that degenerates to a line yields a single cubic whose control
    points lie on the chord, so callers can treat the result uniformly.
    """
    params = arc_center_parameters(start, radii, rotation, large_arc, sweep, end)
    if params is None:
        return [(start, end, end)]

    (cx, cy), rx, ry, theta, delta = params
    pieces = max(1, math.ceil(abs(delta) / ARC_SEGMENT_MAX_SWEEP - 1e-9))
    step = delta / pieces
    k = 4.0 / 3.0 * math.tan(step / 4.0)

    phi = math.radians(rotation)
    cos_phi = math.cos(phi)
    sin_phi = math.sin(phi)

    def ellipse_point(angle: float) -> Point:
        ex = rx * math.cos(angle)
        ey = ry * math.sin(angle)
        return (cx + cos_phi * ex - sin_phi * ey, cy + sin_phi * ex + cos_phi * ey)

    def ellipse_tangent(angle: float) -> Point:
        ex = -rx * math.sin(angle)
        ey = ry * math.cos(angle)
        return (cos_phi * ex - sin_phi * ey, sin_phi * ex + cos_phi * ey)

    cubics: list[tuple[Point, Point, Point]] = []
    current = start
    for i in range(pieces):
        a0 = theta + i * step
        a1 = a0 + step
        t0 = ellipse_tangent(a0)
        t1 = ellipse_tangent(a1)
        p3 = end if i == pieces - 1 else ellipse_point(a1)
        c1 = (current[0] + k * t0[0], current[1] + k * t0[1])
        c2 = (p3[0] - k * t1[0], p3[1] - k * t1[1])
        cubics.append((c1, c2, p3))
        current = p3
    return cubics


def transform_arc(
    transform: np.ndarray,
    radii: Point,
    rotation: float,
    sweep: bool,
) -> tuple[Point, float, bool]:
    """Map ellipse-arc shape parameters through an affine transform.

    The image of an ellipse under an affine map is an ellipse; its radii and
    orientation are the singular values and left singular vectors of
    ``A @ R(rotation) @ diag(rx, ry)``.  A reflecting transform reverses the
    sweep direction; the large-arc flag is unaffected.
    """
    phi = math.radians(rotation)
    rot = np.array(
        ((math.cos(phi), -math.sin(phi)), (math.sin(phi), math.cos(phi))),
    )
    shape = linear_part(transform) @ rot @ np.diag((abs(radii[0]), abs(radii[1])))
    u, sigma, _ = np.linalg.svd(shape)
    new_rotation = math.degrees(math.atan2(u[1, 0], u[0, 0]))
    new_sweep = (not sweep) if is_reflection(transform) else sweep
    return (float(sigma[0]), float(sigma[1])), new_rotation, new_sweep
