"""Basic SVG shapes lowered to local-space path segments.

Follows the equivalent-path definitions of the SVG 1.1 shapes chapter:
rounded rectangles use quarter arcs, circles and ellipses are four arcs
starting at the rightmost point, polygons close and polylines do not.
Shapes with a non-positive size produce no segments.
"""

from __future__ import annotations

from xml.etree.ElementTree import Element

from svg_motion.document.segments import (
    ArcTo,
    ClosePath,
    LineTo,
    MoveTo,
    PathSegment,
)
from svg_motion.document.units import parse_number, parse_points

SHAPE_TAGS = ("rect", "circle", "ellipse", "line", "polyline", "polygon")


def _rect(el: Element) -> list[PathSegment]:
    x = parse_number(el.get("x"))
    y = parse_number(el.get("y"))
    w = parse_number(el.get("width"))
    h = parse_number(el.get("height"))
    if w <= 0.0 or h <= 0.0:
        return []

    rx_attr, ry_attr = el.get("rx"), el.get("ry")
    rx = parse_number(rx_attr) if rx_attr is not None else None
    ry = parse_number(ry_attr) if ry_attr is not None else None
    if rx is None and ry is None:
        rx = ry = 0.0
    elif rx is None:
        rx = ry
    elif ry is None:
        ry = rx
    rx = min(max(rx, 0.0), w / 2.0)
    ry = min(max(ry, 0.0), h / 2.0)

    if rx == 0.0 or ry == 0.0:
        return [
            MoveTo((x, y)),
            LineTo((x + w, y)),
            LineTo((x + w, y + h)),
            LineTo((x, y + h)),
            ClosePath(),
        ]

    radii = (rx, ry)
    return [
        MoveTo((x + rx, y)),
        LineTo((x + w - rx, y)),
        ArcTo(radii, 0.0, False, True, (x + w, y + ry)),
        LineTo((x + w, y + h - ry)),
        ArcTo(radii, 0.0, False, True, (x + w - rx, y + h)),
        LineTo((x + rx, y + h)),
        ArcTo(radii, 0.0, False, True, (x, y + h - ry)),
        LineTo((x, y + ry)),
        ArcTo(radii, 0.0, False, True, (x + rx, y)),
        ClosePath(),
    ]


def _ellipse(cx: float, cy: float, rx: float, ry: float) -> list[PathSegment]:
    if rx <= 0.0 or ry <= 0.0:
        return []
    radii = (rx, ry)
    return [
        MoveTo((cx + rx, cy)),
        ArcTo(radii, 0.0, False, True, (cx, cy + ry)),
        ArcTo(radii, 0.0, False, True, (cx - rx, cy)),
        ArcTo(radii, 0.0, False, True, (cx, cy - ry)),
        ArcTo(radii, 0.0, False, True, (cx + rx, cy)),
        ClosePath(),
    ]


def _poly(el: Element, closed: bool) -> list[PathSegment]:
    points = parse_points(el.get("points"))
    if len(points) < 2:
        return []
    segments: list[PathSegment] = [MoveTo(points[0])]
    segments.extend(LineTo(p) for p in points[1:])
    if closed:
        segments.append(ClosePath())
    return segments


def shape_segments(tag: str, el: Element) -> list[PathSegment]:
    """Segments for a basic-shape element with local tag name *tag*."""
    if tag == "rect":
        return _rect(el)
    if tag == "circle":
        r = parse_number(el.get("r"))
        return _ellipse(parse_number(el.get("cx")), parse_number(el.get("cy")), r, r)
    if tag == "ellipse":
        return _ellipse(
            parse_number(el.get("cx")),
            parse_number(el.get("cy")),
            parse_number(el.get("rx")),
            parse_number(el.get("ry")),
        )
    if tag == "line":
        return [
            MoveTo((parse_number(el.get("x1")), parse_number(el.get("y1")))),
            LineTo((parse_number(el.get("x2")), parse_number(el.get("y2")))),
        ]
    if tag == "polyline":
        return _poly(el, closed=False)
    if tag == "polygon":
        return _poly(el, closed=True)
    raise ValueError(f"Not a basic shape: {tag!r}")
