"""Design serialization and deserialization.

Provides round-trip serialization of ``LabelDesign`` objects to and from
JSON and YAML.  The serialized form is a plain dict/list structure in
which every element carries a ``"kind"`` discriminator and its position
as flat ``x``/``y`` keys.

This is the ingestion boundary of the compiler: element kinds it does
not recognise are skipped (and logged) rather than rejected, so designs
produced by newer tools still compile.

Usage
-----
::

    from zplc.model.serializer import DesignSerializer

    serializer = DesignSerializer()
    design = serializer.from_yaml(Path("label.yaml").read_text())
    json_text = serializer.to_json(design)
    assert serializer.from_json(json_text) == design
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from zplc.model.nodes import (
    BarcodePayload,
    CircleElement,
    Element,
    LabelDesign,
    LineElement,
    MediaElement,
    PageGeometry,
    Payload,
    Point,
    QRCodePayload,
    RasterPayload,
    RectangleElement,
    TextElement,
    Unit,
    ZplcError,
)

logger = logging.getLogger(__name__)


class DesignError(ZplcError):
    """Raised when a design document is structurally malformed."""


# ---------------------------------------------------------------------------
# Field readers
# ---------------------------------------------------------------------------


def _require_mapping(data: object, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise DesignError(f"{what} must be a mapping, got {type(data).__name__}")
    return data


def _number(data: Mapping[str, Any], key: str, default: float) -> float:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DesignError(f"Field {key!r} must be a number, got {value!r}")
    return value


def _optional_number(data: Mapping[str, Any], key: str) -> float | None:
    if data.get(key) is None:
        return None
    return _number(data, key, 0)


def _string(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise DesignError(f"Field {key!r} must be a scalar, got {value!r}")
    return str(value)


def _position(data: Mapping[str, Any]) -> Point:
    return Point(_number(data, "x", 0), _number(data, "y", 0))


def page_from_dict(data: object) -> PageGeometry:
    """Build a ``PageGeometry`` from its serialized form.

    Accepts either ``width_dots``/``height_dots`` or physical
    ``width``/``height`` with a ``unit``.
    """
    page = _require_mapping(data, "page")
    dpi = page.get("dpi", 203)
    if "width_dots" in page or "height_dots" in page:
        return PageGeometry(
            dpi=dpi,
            width_dots=page.get("width_dots", 0),
            height_dots=page.get("height_dots", 0),
        )
    if "width" not in page or "height" not in page:
        raise DesignError("page needs width_dots/height_dots or width/height")
    try:
        unit = Unit.parse(str(page.get("unit", "inch")))
    except ValueError as exc:
        raise DesignError(f"Invalid page unit: {exc}") from exc
    return PageGeometry.from_physical(
        _number(page, "width", 0),
        _number(page, "height", 0),
        unit,
        dpi,
    )


class DesignSerializer:
    """Converts between ``LabelDesign`` objects and plain Python dicts."""

    # ------------------------------------------------------------------
    # Serialization (design → dict)
    # ------------------------------------------------------------------

    def to_dict(self, design: LabelDesign) -> dict[str, object]:
        """Serialize a ``LabelDesign`` to a JSON-compatible dict."""
        return {
            "page": {
                "dpi": design.page.dpi,
                "width_dots": design.page.width_dots,
                "height_dots": design.page.height_dots,
            },
            "elements": [self.element_to_dict(e) for e in design.elements],
        }

    def element_to_dict(self, element: Element) -> dict[str, object]:
        """Serialize one element, including its ``kind`` discriminator."""
        base: dict[str, object] = {
            "x": element.position.x,
            "y": element.position.y,
        }
        if element.stroke is not None:
            base["stroke"] = element.stroke

        if isinstance(element, TextElement):
            return {
                "kind": "text",
                **base,
                "text": element.text,
                "font_size": element.font_size,
                "angle": element.angle,
                "is_dynamic": element.is_dynamic,
                "field_key": element.field_key,
            }
        if isinstance(element, RectangleElement):
            return {
                "kind": "rectangle",
                **base,
                "width": element.width,
                "height": element.height,
                "fill": element.fill,
                "stroke_width": element.stroke_width,
            }
        if isinstance(element, LineElement):
            return {
                "kind": "line",
                **base,
                "points": [
                    element.start.x,
                    element.start.y,
                    element.end.x,
                    element.end.y,
                ],
                "stroke_width": element.stroke_width,
            }
        if isinstance(element, CircleElement):
            return {
                "kind": "circle",
                **base,
                "radius": element.radius,
                "radius_y": element.radius_y,
                "stroke_width": element.stroke_width,
            }
        if isinstance(element, MediaElement):
            return {
                "kind": "media",
                **base,
                "width": element.width,
                "height": element.height,
                "angle": element.angle,
                "is_dynamic": element.is_dynamic,
                "field_key": element.field_key,
                "payload": self._payload_to_dict(element.payload),
            }
        raise TypeError(f"Unknown element type: {type(element).__name__}")

    def _payload_to_dict(self, payload: Payload) -> dict[str, object]:
        if isinstance(payload, BarcodePayload):
            return {"type": "barcode", "format": payload.format, "value": payload.value}
        if isinstance(payload, QRCodePayload):
            return {"type": "qrcode", "value": payload.value}
        return {"type": "raster", "source": payload.source}

    def to_json(self, design: LabelDesign, indent: int | None = None) -> str:
        """Serialize a ``LabelDesign`` to a JSON string."""
        return json.dumps(self.to_dict(design), indent=indent)

    def to_yaml(self, design: LabelDesign) -> str:
        """Serialize a ``LabelDesign`` to a YAML string."""
        return yaml.safe_dump(self.to_dict(design), sort_keys=False)

    # ------------------------------------------------------------------
    # Deserialization (dict → design)
    # ------------------------------------------------------------------

    def from_dict(
        self, data: object, default_page: PageGeometry | None = None
    ) -> LabelDesign:
        """Deserialize a ``LabelDesign`` from a dict.

        *default_page* is used when the document has no ``page`` section.

        Raises
        ------
        DesignError
            If the document structure is malformed.
        GeometryError
            If the page geometry is not strictly positive.
        """
        root = _require_mapping(data, "design")
        if "page" in root:
            page = page_from_dict(root["page"])
        elif default_page is not None:
            page = default_page
        else:
            raise DesignError("design is missing its 'page' section")
        raw_elements = root.get("elements") or []
        if not isinstance(raw_elements, list):
            raise DesignError("'elements' must be a list")
        elements: list[Element] = []
        for index, raw in enumerate(raw_elements):
            element = self.element_from_dict(raw)
            if element is None:
                logger.debug("Skipping element %d with unknown kind or payload", index)
                continue
            elements.append(element)
        return LabelDesign(page=page, elements=tuple(elements))

    def element_from_dict(self, data: object) -> Element | None:
        """Deserialize one element; returns ``None`` for unknown kinds or payloads."""
        raw = _require_mapping(data, "element")
        kind = raw.get("kind")
        position = _position(raw)
        stroke = _string(raw, "stroke")

        if kind == "text":
            return TextElement(
                position=position,
                text=_string(raw, "text") or "",
                font_size=_number(raw, "font_size", 20),
                angle=_number(raw, "angle", 0),
                is_dynamic=bool(raw.get("is_dynamic", False)),
                field_key=_string(raw, "field_key"),
                stroke=stroke,
            )
        if kind == "rectangle":
            return RectangleElement(
                position=position,
                width=_number(raw, "width", 0),
                height=_number(raw, "height", 0),
                fill=_string(raw, "fill"),
                stroke_width=_number(raw, "stroke_width", 1),
                stroke=stroke,
            )
        if kind == "line":
            x1, y1, x2, y2 = self._points(raw.get("points"))
            return LineElement(
                position=position,
                start=Point(x1, y1),
                end=Point(x2, y2),
                stroke_width=_number(raw, "stroke_width", 1),
                stroke=stroke,
            )
        if kind == "circle":
            return CircleElement(
                position=position,
                radius=_number(raw, "radius", 0),
                radius_y=_optional_number(raw, "radius_y"),
                stroke_width=_number(raw, "stroke_width", 1),
                stroke=stroke,
            )
        if kind == "media":
            payload = self._payload_from_dict(raw.get("payload"))
            if payload is None:
                return None
            return MediaElement(
                position=position,
                payload=payload,
                width=_number(raw, "width", 100),
                height=_number(raw, "height", 100),
                angle=_number(raw, "angle", 0),
                is_dynamic=bool(raw.get("is_dynamic", False)),
                field_key=_string(raw, "field_key"),
                stroke=stroke,
            )
        return None

    def _points(self, points: object) -> tuple[float, float, float, float]:
        if points is None:
            return (0, 0, 100, 0)
        if (
            not isinstance(points, (list, tuple))
            or len(points) != 4
            or not all(
                isinstance(p, (int, float)) and not isinstance(p, bool) for p in points
            )
        ):
            raise DesignError(f"Line 'points' must be four numbers, got {points!r}")
        x1, y1, x2, y2 = points
        return (x1, y1, x2, y2)

    def _payload_from_dict(self, data: object) -> Payload | None:
        """Returns ``None`` for an unknown payload ``type``."""
        if data is None:
            return RasterPayload()
        payload = _require_mapping(data, "payload")
        kind = payload.get("type", "raster")
        if kind == "barcode":
            return BarcodePayload(
                format=_string(payload, "format") or "CODE128",
                value=_string(payload, "value"),
            )
        if kind == "qrcode":
            return QRCodePayload(value=_string(payload, "value"))
        if kind == "raster":
            return RasterPayload(source=_string(payload, "source"))
        return None

    def from_json(self, text: str) -> LabelDesign:
        """Deserialize a ``LabelDesign`` from a JSON string."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DesignError(f"Invalid JSON design: {exc}") from exc
        return self.from_dict(data)

    def from_yaml(self, text: str) -> LabelDesign:
        """Deserialize a ``LabelDesign`` from a YAML string."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise DesignError(f"Invalid YAML design: {exc}") from exc
        return self.from_dict(data)


def load_design(
    path: str | Path, default_page: PageGeometry | None = None
) -> LabelDesign:
    """Load a design file.

    ``.json`` files are parsed as JSON, everything else as YAML.  A
    document whose ``canvas`` (or root) holds a Fabric.js ``objects``
    list is read with :func:`zplc.model.fabric.from_fabric`.  Documents
    without a ``page`` section use *default_page*.

    Raises
    ------
    DesignError
        If the file cannot be read or parsed, or has no usable page.
    """
    from zplc.model.fabric import from_fabric

    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise DesignError(f"Cannot read {source}: {exc}") from exc
    try:
        if source.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DesignError(f"Cannot parse {source}: {exc}") from exc

    root = _require_mapping(data, "design")
    canvas = root.get("canvas", root if "objects" in root else None)
    if canvas is not None:
        if "page" in root:
            page = page_from_dict(root["page"])
        elif default_page is not None:
            page = default_page
        else:
            raise DesignError("Fabric designs need a 'page' section")
        return from_fabric(canvas, page)
    return DesignSerializer().from_dict(root, default_page=default_page)
