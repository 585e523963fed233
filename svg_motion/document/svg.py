"""Document parser and transform stack.

Walks an SVG element tree depth-first and produces an immutable
:class:`ParsedDocument`: every drawable element's path segments, already
resolved into global document coordinates.

Transform stack:
    The composed transform is passed *by value* into each recursive call.
    Entering a group computes ``child = parent @ local`` and recurses; on
    return nothing needs popping and siblings never see the child's
    transform.  The root transform is the vertical flip (document +Y down
    -> device +Y up) composed with the viewBox-to-viewport mapping, so a
    point ``P`` inside groups ``A > B`` resolves to ``root(A(B(P)))``.  A
    nested ``<svg>`` adds its own ``translate(x, y)`` and viewBox mapping.

The parsed document is read-only and is traversed once per conversion pass.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Union
from xml.etree.ElementTree import Element, ElementTree

import numpy as np

from svg_motion.document.errors import DocumentError, MissingDimensionsError, ParseError
from svg_motion.document.path_data import parse_path_data
from svg_motion.document.segments import PathSegment, resolve_segments
from svg_motion.document.shapes import SHAPE_TAGS, shape_segments
from svg_motion.document.transforms import parse_transform
from svg_motion.document.units import parse_length
from svg_motion.geometry import affine

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"

CONTAINER_TAGS = frozenset({"svg", "g", "a", "switch"})

# Never rendered directly
NON_RENDERED_TAGS = frozenset({
    "defs", "clipPath", "mask", "symbol", "marker", "pattern", "metadata",
    "title", "desc", "style", "script", "linearGradient", "radialGradient",
    "filter",
})

# Rendered, but not convertible to tool paths
UNSUPPORTED_TAGS = frozenset({"text", "image", "use", "foreignObject"})

Dimensions = tuple[Union[str, float, None], Union[str, float, None]]

_DISPLAY_NONE = re.compile(r"(?:^|;)\s*display\s*:\s*none\s*(?:;|$)")


@dataclass(frozen=True)
class PathElement:
    """One drawable element, resolved into global document coordinates.

    Parameters
    ----------
    node_path : str
        Location in the tree, e.g. ``"svg > g#layer1 > path#outline"``.
    segments : tuple[PathSegment, ...]
        Global-space segments in drawing order.
    extra_attribute : str | None
        Value of the configured pass-through attribute, if present.
    """

    node_path: str
    segments: tuple[PathSegment, ...]
    extra_attribute: str | None = None

    @property
    def comment(self) -> str:
        if self.extra_attribute:
            return f"{self.node_path} {self.extra_attribute}"
        return self.node_path


@dataclass(frozen=True)
class ParsedDocument:
    """Immutable conversion input shared by both passes.

    ``width``/``height`` are the viewport size in document units.
    """

    width: float
    height: float
    elements: tuple[PathElement, ...]

    @property
    def segment_count(self) -> int:
        return sum(len(e.segments) for e in self.elements)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _local_name(tag: str) -> tuple[str, bool]:
    """Split ``{ns}name`` into ``(name, is_svg_namespace)``."""
    if tag.startswith("{"):
        ns, _, name = tag[1:].partition("}")
        return name, ns == SVG_NAMESPACE
    return tag, True


def _label(tag: str, el: Element) -> str:
    el_id = el.get("id")
    return f"{tag}#{el_id}" if el_id else tag


def _is_hidden(el: Element) -> bool:
    if el.get("display", "").strip() == "none":
        return True
    return bool(_DISPLAY_NONE.search(el.get("style", "")))


def _parse_view_box(text: str) -> tuple[float, float, float, float]:
    parts = [p for p in re.split(r"[\s,]+", text.strip()) if p]
    try:
        values = [float(p) for p in parts]
    except ValueError as exc:
        raise ParseError(f"Invalid viewBox {text!r}") from exc
    if len(values) != 4:
        raise ParseError(f"viewBox needs 4 numbers, got {text!r}")
    if values[2] <= 0.0 or values[3] <= 0.0:
        raise ParseError(f"viewBox width and height must be positive: {text!r}")
    return values[0], values[1], values[2], values[3]


def _view_box_mapping(
    el: Element, width: float | None, height: float | None,
) -> tuple[np.ndarray, float | None, float | None]:
    """viewBox-to-viewport matrix, filling a missing size from the viewBox."""
    view_box_attr = el.get("viewBox")
    if not view_box_attr:
        return affine.identity(), width, height
    vx, vy, vw, vh = _parse_view_box(view_box_attr)
    if width is None and height is None:
        width, height = vw, vh
    elif width is None:
        width = height * vw / vh
    elif height is None:
        height = width * vh / vw
    view = affine.compose(
        affine.scale(width / vw, height / vh), affine.translate(-vx, -vy),
    )
    return view, width, height


def nested_viewport(el: Element, resolution: float) -> np.ndarray:
    """Placement of a nested ``<svg>``: ``translate(x, y)`` then its viewBox.

    Unlike the root there is no flip, and a missing size is not an error:
    without a viewBox the content is only translated.
    """
    x = parse_length(el.get("x"), resolution) or 0.0
    y = parse_length(el.get("y"), resolution) or 0.0
    width = parse_length(el.get("width"), resolution)
    height = parse_length(el.get("height"), resolution)
    view, _, _ = _view_box_mapping(el, width, height)
    return affine.compose(affine.translate(x, y), view)


def root_transform(
    root: Element,
    resolution: float,
    dimensions: Dimensions = (None, None),
) -> tuple[np.ndarray, float, float]:
    """Root transform plus viewport width and height in document units.

    Parameters
    ----------
    root : Element
        The ``<svg>`` element.
    resolution : float
        Device millimetres per document unit (for physical-unit sizes).
    dimensions : tuple
        ``(width, height)`` overrides; ``None`` entries fall back to the
        document's own attributes.

    Raises
    ------
    MissingDimensionsError
        If neither width/height nor a viewBox give the document a size.
    """
    width = parse_length(
        dimensions[0] if dimensions[0] is not None else root.get("width"), resolution,
    )
    height = parse_length(
        dimensions[1] if dimensions[1] is not None else root.get("height"), resolution,
    )

    view, width, height = _view_box_mapping(root, width, height)
    if width is None or height is None:
        raise MissingDimensionsError(
            "Document has no width/height or viewBox; "
            "supply a dimension override",
            element="svg",
        )

    return affine.compose(affine.flip_y(), view), width, height


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def _walk(
    el: Element,
    transform: np.ndarray,
    trail: tuple[str, ...],
    out: list[PathElement],
    resolution: float,
    extra_attribute_name: str | None,
    strict: bool,
) -> None:
    for child in el:
        if not isinstance(child.tag, str):
            continue  # XML comments / processing instructions
        tag, is_svg = _local_name(child.tag)
        if not is_svg or tag in NON_RENDERED_TAGS or _is_hidden(child):
            continue

        path_here = trail + (_label(tag, child),)
        node_path = " > ".join(path_here)

        if tag in UNSUPPORTED_TAGS:
            if strict:
                raise DocumentError(f"Unsupported element <{tag}>", element=node_path)
            logger.warning("Skipping unsupported element %s", node_path)
            continue

        try:
            local = parse_transform(child.get("transform"))
            if tag == "svg":
                local = affine.compose(local, nested_viewport(child, resolution))
        except DocumentError as exc:
            raise exc.with_element(node_path) from exc
        child_transform = affine.compose(transform, local)

        if tag in CONTAINER_TAGS:
            _walk(
                child, child_transform, path_here, out,
                resolution, extra_attribute_name, strict,
            )
            continue

        if tag != "path" and tag not in SHAPE_TAGS:
            logger.debug("Ignoring element %s", node_path)
            continue

        try:
            if tag == "path":
                local_segments: list[PathSegment] = parse_path_data(child.get("d", ""))
            else:
                local_segments = shape_segments(tag, child)
        except DocumentError as exc:
            raise exc.with_element(node_path) from exc

        if not local_segments:
            logger.debug("Element %s has no geometry", node_path)
            continue

        extra = child.get(extra_attribute_name) if extra_attribute_name else None
        out.append(
            PathElement(
                node_path=node_path,
                segments=resolve_segments(local_segments, child_transform),
                extra_attribute=extra,
            )
        )


def parse_document(
    root: Element | ElementTree,
    resolution: float,
    dimensions: Dimensions = (None, None),
    extra_attribute_name: str | None = None,
    strict: bool = False,
) -> ParsedDocument:
    """Parse an SVG tree into globally positioned path elements.

    Parameters
    ----------
    root : Element | ElementTree
        Parsed document; its root must be ``<svg>``.
    resolution : float
        Device millimetres per document unit.
    dimensions : tuple
        Optional ``(width, height)`` overrides, required when the document
        has neither width/height nor a viewBox.
    extra_attribute_name : str | None
        Attribute copied from each element into its comment.
    strict : bool
        Raise on rendered elements that cannot be converted (``text``,
        ``image``, ``use``) instead of skipping them with a warning.

    Returns
    -------
    ParsedDocument

    Raises
    ------
    ParseError
        On malformed path data, transforms, lengths or viewBox.
    MissingDimensionsError
        When the document size cannot be determined.
    DocumentError
        On unsupported elements in strict mode.
    """
    if isinstance(root, ElementTree):
        root = root.getroot()
    tag, is_svg = _local_name(root.tag)
    if tag != "svg" or not is_svg:
        raise ParseError(f"Root element must be <svg>, got <{tag}>")

    transform, width, height = root_transform(root, resolution, dimensions)
    try:
        transform = affine.compose(transform, parse_transform(root.get("transform")))
    except DocumentError as exc:
        raise exc.with_element("svg") from exc

    elements: list[PathElement] = []
    _walk(root, transform, ("svg",), elements, resolution, extra_attribute_name, strict)

    document = ParsedDocument(width=width, height=height, elements=tuple(elements))
    logger.debug(
        "Parsed %d element(s), %d segment(s), viewport %.3f x %.3f",
        len(document.elements), document.segment_count, width, height,
    )
    return document
