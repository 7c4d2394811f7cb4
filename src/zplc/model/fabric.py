"""Reader for Fabric.js canvas JSON.

The label designer persists templates as serialized Fabric.js canvases.
``from_fabric`` turns such a canvas into a ``LabelDesign``:

==================================  ==================================
Fabric object                       Element
==================================  ==================================
``text`` / ``i-text`` / ``textbox``  ``TextElement``
``rect``                            ``RectangleElement``
``line``                            ``LineElement``
``circle`` / ``ellipse``            ``CircleElement``
``image`` with ``data.isBarcode``   ``MediaElement`` + ``BarcodePayload``
``image`` with ``data.isQRCode``    ``MediaElement`` + ``QRCodePayload``
other ``image``                     ``MediaElement`` + ``RasterPayload``
==================================  ==================================

Any other object type (groups, paths, polygons…) is skipped.  Sizes are
multiplied by the object's ``scaleX``/``scaleY``.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from zplc.model.nodes import (
    BarcodePayload,
    CircleElement,
    Element,
    LabelDesign,
    LineElement,
    MediaElement,
    PageGeometry,
    Point,
    QRCodePayload,
    RasterPayload,
    RectangleElement,
    TextElement,
)
from zplc.model.serializer import DesignError

logger = logging.getLogger(__name__)


def _num(obj: Mapping[str, Any], key: str, default: float) -> float:
    value = obj.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value


def _str(obj: Mapping[str, Any], key: str) -> str | None:
    value = obj.get(key)
    return None if value is None else str(value)


def _normalize_type(raw: object) -> str:
    return str(raw or "").replace("-", "").replace("_", "").lower()


def _line_points(obj: Mapping[str, Any]) -> tuple[float, float, float, float]:
    points = obj.get("points")
    if isinstance(points, list) and len(points) == 4:
        return tuple(float(p) for p in points)  # type: ignore[return-value]
    if all(k in obj for k in ("x1", "y1", "x2", "y2")):
        return (
            _num(obj, "x1", 0),
            _num(obj, "y1", 0),
            _num(obj, "x2", 0),
            _num(obj, "y2", 0),
        )
    return (0, 0, 100, 0)


def fabric_object_to_element(obj: Mapping[str, Any]) -> Element | None:
    """Convert one Fabric.js object; returns ``None`` for unsupported types."""
    kind = _normalize_type(obj.get("type"))
    data = obj.get("data") if isinstance(obj.get("data"), Mapping) else {}
    position = Point(_num(obj, "left", 0), _num(obj, "top", 0))
    scale_x = _num(obj, "scaleX", 1)
    scale_y = _num(obj, "scaleY", 1)
    stroke = _str(obj, "stroke")
    stroke_width = _num(obj, "strokeWidth", 1)

    if kind in ("text", "itext", "textbox"):
        return TextElement(
            position=position,
            text=_str(obj, "text") or "",
            font_size=_num(obj, "fontSize", 20) * scale_y,
            angle=_num(obj, "angle", 0),
            is_dynamic=bool(data.get("isDynamic", False)),
            field_key=_str(data, "field"),
            stroke=stroke,
        )
    if kind == "rect":
        return RectangleElement(
            position=position,
            width=_num(obj, "width", 0) * scale_x,
            height=_num(obj, "height", 0) * scale_y,
            fill=_str(obj, "fill"),
            stroke_width=stroke_width,
            stroke=stroke,
        )
    if kind == "line":
        x1, y1, x2, y2 = _line_points(obj)
        return LineElement(
            position=position,
            start=Point(x1 * scale_x, y1 * scale_y),
            end=Point(x2 * scale_x, y2 * scale_y),
            stroke_width=stroke_width,
            stroke=stroke,
        )
    if kind == "circle":
        return CircleElement(
            position=position,
            radius=_num(obj, "radius", 0) * scale_x,
            stroke_width=stroke_width,
            stroke=stroke,
        )
    if kind == "ellipse":
        return CircleElement(
            position=position,
            radius=_num(obj, "rx", 0) * scale_x,
            radius_y=_num(obj, "ry", 0) * scale_y,
            stroke_width=stroke_width,
            stroke=stroke,
        )
    if kind == "image":
        if data.get("isBarcode"):
            payload: BarcodePayload | QRCodePayload | RasterPayload = BarcodePayload(
                format=_str(data, "format") or "CODE128",
                value=_str(data, "value"),
            )
        elif data.get("isQRCode"):
            payload = QRCodePayload(value=_str(data, "value"))
        else:
            payload = RasterPayload(source=_str(obj, "src"))
        return MediaElement(
            position=position,
            payload=payload,
            width=_num(obj, "width", 100) * scale_x,
            height=_num(obj, "height", 100) * scale_y,
            angle=_num(obj, "angle", 0),
            # Symbol values are always looked up in the bindings first.
            is_dynamic=bool(data.get("isDynamic", True)),
            field_key=_str(data, "field"),
            stroke=stroke,
        )
    return None


def from_fabric(canvas: Mapping[str, Any] | str, page: PageGeometry) -> LabelDesign:
    """Build a ``LabelDesign`` from a Fabric.js canvas.

    Parameters
    ----------
    canvas:
        The canvas as a dict or as its JSON string (``canvas_data``).
    page:
        Page geometry of the label the canvas was designed for.

    Raises
    ------
    DesignError
        If the canvas is not valid JSON or has no ``objects`` list.
    """
    if isinstance(canvas, str):
        try:
            canvas = json.loads(canvas)
        except json.JSONDecodeError as exc:
            raise DesignError(f"Invalid canvas JSON: {exc}") from exc
    if not isinstance(canvas, Mapping):
        raise DesignError("canvas must be a mapping")
    objects = canvas.get("objects", [])
    if not isinstance(objects, list):
        raise DesignError("canvas 'objects' must be a list")

    elements: list[Element] = []
    for index, obj in enumerate(objects):
        element = fabric_object_to_element(obj) if isinstance(obj, Mapping) else None
        if element is None:
            logger.debug("Skipping unsupported canvas object %d", index)
            continue
        elements.append(element)
    return LabelDesign(page=page, elements=tuple(elements))
