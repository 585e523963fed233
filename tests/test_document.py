"""Tests for the document parser and transform stack.

Validates root flip/viewBox mapping, nested group composition, sibling
isolation, skipped elements, basic shapes, and error context.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from svg_motion.configs.loader import ConfigError
from svg_motion.document.errors import DocumentError, MissingDimensionsError, ParseError
from svg_motion.document.segments import ArcTo, ClosePath, LineTo, MoveTo
from svg_motion.document.svg import parse_document
from svg_motion.drawing.rescale import RescalingTurtle
from svg_motion.converter import draw_document

SVG_NS = 'xmlns="http://www.w3.org/2000/svg"'


def _svg(body: str, attrs: str = 'width="100" height="100"') -> ET.Element:
    return ET.fromstring(f"<svg {SVG_NS} {attrs}>{body}</svg>")


def _points(document) -> list[tuple[float, float]]:
    pts = []
    for element in document.elements:
        for seg in element.segments:
            if isinstance(seg, (MoveTo, LineTo)):
                pts.append(seg.point)
    return pts


# ---------------------------------------------------------------------------
# Root transform
# ---------------------------------------------------------------------------


class TestRootTransform:
    def test_flip_without_viewbox(self) -> None:
        doc = parse_document(_svg('<path d="M3 4 L5 6"/>'), resolution=1.0)
        assert _points(doc) == [(3.0, -4.0), (5.0, -6.0)]
        assert (doc.width, doc.height) == (100.0, 100.0)

    def test_viewbox_scales_to_viewport(self) -> None:
        root = _svg('<path d="M10 10 L20 0"/>', 'width="200" height="100" viewBox="0 0 100 50"')
        doc = parse_document(root, resolution=1.0)
        assert _points(doc) == [(20.0, -20.0), (40.0, 0.0)]

    def test_viewbox_offset(self) -> None:
        root = _svg('<path d="M10 10 L60 10"/>', 'viewBox="10 10 100 100"')
        doc = parse_document(root, resolution=1.0)
        assert _points(doc)[0] == pytest.approx((0.0, 0.0))
        assert _points(doc)[1] == pytest.approx((50.0, 0.0))
        assert (doc.width, doc.height) == (100.0, 100.0)

    def test_viewbox_with_only_width(self) -> None:
        root = _svg('<path d="M0 0 L1 1"/>', 'width="50" viewBox="0 0 100 200"')
        doc = parse_document(root, resolution=1.0)
        assert (doc.width, doc.height) == (50.0, 100.0)

    def test_physical_width_divided_by_resolution(self) -> None:
        resolution = 25.4 / 96.0
        root = _svg('<path d="M0 0 L1 1"/>', 'width="10mm" height="1in"')
        doc = parse_document(root, resolution=resolution)
        assert doc.width * resolution == pytest.approx(10.0)
        assert doc.height * resolution == pytest.approx(25.4)

    def test_flip_and_scale_property(self, recorder) -> None:
        """Every vertex maps to (x * resolution, -y * resolution)."""
        resolution = 0.37
        vertices = [(0.0, 0.0), (13.5, 0.25), (20.0, 17.0), (-4.0, 9.75)]
        pts = " ".join(f"{x},{y}" for x, y in vertices)
        doc = parse_document(_svg(f'<polygon points="{pts}"/>'), resolution=resolution)
        draw_document(doc, RescalingTurtle(recorder, resolution))

        seen = [c[1] for c in recorder.calls if c[0] in ("move_to", "line_to")]
        for (x, y), (gx, gy) in zip(vertices, seen):
            assert abs(gx - x * resolution) <= 1e-10
            assert abs(gy - -y * resolution) <= 1e-10


# ---------------------------------------------------------------------------
# Transform stack
# ---------------------------------------------------------------------------


class TestTransformStack:
    def test_nested_groups_outer_applied_last(self) -> None:
        body = (
            '<g transform="translate(10,10)"><g transform="scale(2)">'
            '<path d="M0 0 L1 0"/></g></g>'
        )
        doc = parse_document(_svg(body), resolution=1.0)
        # (10, 10) and (12, 10) before the document flip
        assert _points(doc) == [(10.0, -10.0), (12.0, -10.0)]

    def test_siblings_do_not_share_transform(self) -> None:
        body = (
            '<g transform="translate(50,0)"><path id="a" d="M0 0 L1 0"/></g>'
            '<path id="b" d="M0 0 L1 0"/>'
        )
        doc = parse_document(_svg(body), resolution=1.0)
        a, b = doc.elements
        assert a.segments[0] == MoveTo((50.0, -0.0))
        assert b.segments[0].point == pytest.approx((0.0, 0.0))

    def test_nested_svg_viewport(self) -> None:
        body = (
            '<svg x="50" y="50" width="10" height="10" viewBox="0 0 1 1">'
            '<path d="M0 0 L1 0"/></svg>'
        )
        doc = parse_document(_svg(body), resolution=1.0)
        assert _points(doc) == [
            pytest.approx((50.0, -50.0)), pytest.approx((60.0, -50.0)),
        ]

    def test_nested_svg_without_viewbox_translates(self) -> None:
        body = '<svg x="5" y="7"><path d="M1 1 L2 1"/></svg>'
        doc = parse_document(_svg(body), resolution=1.0)
        assert _points(doc) == [
            pytest.approx((6.0, -8.0)), pytest.approx((7.0, -8.0)),
        ]

    def test_nested_svg_bad_viewbox_carries_element(self) -> None:
        body = '<svg id="inner" viewBox="0 0 0 1"><path d="M0 0 L1 0"/></svg>'
        with pytest.raises(ParseError) as info:
            parse_document(_svg(body), resolution=1.0)
        assert info.value.element == "svg > svg#inner"

    def test_element_transform_applies(self) -> None:
        doc = parse_document(_svg('<path transform="translate(5)" d="M0 0 L1 0"/>'), 1.0)
        assert _points(doc)[0] == pytest.approx((5.0, 0.0))

    def test_no_namespace_accepted(self) -> None:
        root = ET.fromstring('<svg width="10" height="10"><path d="M1 1 L2 2"/></svg>')
        doc = parse_document(root, resolution=1.0)
        assert len(doc.elements) == 1

    def test_element_tree_accepted(self) -> None:
        tree = ET.ElementTree(_svg('<path d="M1 1 L2 2"/>'))
        assert len(parse_document(tree, resolution=1.0).elements) == 1


# ---------------------------------------------------------------------------
# Element selection
# ---------------------------------------------------------------------------


class TestElementSelection:
    def test_non_rendered_containers_skipped(self) -> None:
        body = (
            '<defs><path d="M0 0 L1 1"/></defs>'
            '<clipPath><rect width="5" height="5"/></clipPath>'
            '<path d="M0 0 L1 1"/>'
        )
        assert len(parse_document(_svg(body), 1.0).elements) == 1

    def test_display_none_skipped(self) -> None:
        body = (
            '<path display="none" d="M0 0 L1 1"/>'
            '<g style="fill:red; display: none"><path d="M0 0 L1 1"/></g>'
            '<path style="display:inline" d="M0 0 L1 1"/>'
        )
        assert len(parse_document(_svg(body), 1.0).elements) == 1

    def test_foreign_namespace_skipped(self) -> None:
        root = ET.fromstring(
            f'<svg {SVG_NS} xmlns:inkscape="http://www.inkscape.org/namespaces/inkscape" '
            'width="10" height="10"><inkscape:path d="M0 0 L1 1"/><path d="M0 0 L1 1"/></svg>'
        )
        assert len(parse_document(root, 1.0).elements) == 1

    def test_text_skipped_unless_strict(self) -> None:
        root = _svg('<text x="1" y="1">hi</text><path d="M0 0 L1 1"/>')
        assert len(parse_document(root, 1.0).elements) == 1
        with pytest.raises(DocumentError, match="Unsupported element"):
            parse_document(root, 1.0, strict=True)

    def test_empty_path_skipped(self) -> None:
        assert parse_document(_svg('<path d=""/>'), 1.0).elements == ()


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------


class TestShapes:
    def test_rect(self) -> None:
        doc = parse_document(_svg('<rect x="1" y="2" width="3" height="4"/>'), 1.0)
        segs = doc.elements[0].segments
        assert [type(s) for s in segs] == [MoveTo, LineTo, LineTo, LineTo, ClosePath]
        assert segs[2].point == (4.0, -6.0)

    def test_rounded_rect_uses_arcs(self) -> None:
        doc = parse_document(_svg('<rect width="10" height="10" rx="2"/>'), 1.0)
        arcs = [s for s in doc.elements[0].segments if isinstance(s, ArcTo)]
        assert len(arcs) == 4
        assert arcs[0].radii == pytest.approx((2.0, 2.0))

    def test_circle_sweep_flips_with_document(self) -> None:
        doc = parse_document(_svg('<circle cx="5" cy="5" r="2"/>'), 1.0)
        arcs = [s for s in doc.elements[0].segments if isinstance(s, ArcTo)]
        assert len(arcs) == 4
        assert all(a.sweep is False for a in arcs)
        assert all(a.radii == pytest.approx((2.0, 2.0)) for a in arcs)

    def test_zero_size_shape_ignored(self) -> None:
        assert parse_document(_svg('<circle r="0"/>'), 1.0).elements == ()

    def test_polyline_open_polygon_closed(self) -> None:
        doc = parse_document(
            _svg('<polyline points="0,0 1,0 1,1"/><polygon points="0,0 1,0 1,1"/>'), 1.0,
        )
        polyline, polygon = doc.elements
        assert not isinstance(polyline.segments[-1], ClosePath)
        assert isinstance(polygon.segments[-1], ClosePath)

    def test_line(self) -> None:
        doc = parse_document(_svg('<line x1="1" y1="1" x2="4" y2="5"/>'), 1.0)
        assert _points(doc) == [(1.0, -1.0), (4.0, -5.0)]


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


class TestComments:
    def test_node_path(self) -> None:
        body = '<g id="layer1"><path id="p1" d="M0 0 L1 1"/></g>'
        doc = parse_document(_svg(body), 1.0)
        assert doc.elements[0].comment == "svg > g#layer1 > path#p1"

    def test_extra_attribute_appended(self) -> None:
        body = '<path id="p1" data-pen="red" d="M0 0 L1 1"/><path id="p2" d="M0 0 L1 1"/>'
        doc = parse_document(_svg(body), 1.0, extra_attribute_name="data-pen")
        assert doc.elements[0].comment == "svg > path#p1 red"
        assert doc.elements[1].comment == "svg > path#p2"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    def test_missing_dimensions(self) -> None:
        root = ET.fromstring(f'<svg {SVG_NS}><path d="M0 0 L1 1"/></svg>')
        with pytest.raises(MissingDimensionsError) as excinfo:
            parse_document(root, 1.0)
        assert isinstance(excinfo.value, ConfigError)
        assert isinstance(excinfo.value, DocumentError)

    def test_dimension_override(self) -> None:
        root = ET.fromstring(f'<svg {SVG_NS}><path d="M0 0 L1 1"/></svg>')
        doc = parse_document(root, 1.0, dimensions=(20, "30"))
        assert (doc.width, doc.height) == (20.0, 30.0)

    def test_partial_override_still_missing(self) -> None:
        root = ET.fromstring(f'<svg {SVG_NS}/>')
        with pytest.raises(MissingDimensionsError):
            parse_document(root, 1.0, dimensions=(20, None))

    def test_malformed_path_carries_element(self) -> None:
        body = '<g id="l"><path id="bad" d="M0 0 L1"/></g>'
        with pytest.raises(ParseError) as excinfo:
            parse_document(_svg(body), 1.0)
        assert excinfo.value.element == "svg > g#l > path#bad"
        assert "svg > g#l > path#bad" in str(excinfo.value)

    def test_malformed_transform_carries_element(self) -> None:
        with pytest.raises(ParseError) as excinfo:
            parse_document(_svg('<g transform="spin(3)"><path d="M0 0"/></g>'), 1.0)
        assert excinfo.value.element == "svg > g"

    def test_bad_viewbox(self) -> None:
        with pytest.raises(ParseError, match="viewBox"):
            parse_document(_svg("", 'viewBox="0 0 10"'), 1.0)

    def test_bad_length(self) -> None:
        with pytest.raises(ParseError, match="Invalid length"):
            parse_document(_svg("", 'width="ten" height="10"'), 1.0)

    def test_root_must_be_svg(self) -> None:
        with pytest.raises(ParseError, match="Root element"):
            parse_document(ET.fromstring("<html/>"), 1.0)
