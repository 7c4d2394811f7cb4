"""Label design model.

Exports all element types, page geometry and the serializers for
converting designs to and from JSON/YAML and Fabric.js canvases.
"""
from __future__ import annotations

from zplc.model.fabric import fabric_object_to_element, from_fabric
from zplc.model.nodes import (
    BarcodeFormat,
    BarcodePayload,
    CircleElement,
    Element,
    GeometryError,
    LabelDesign,
    LineElement,
    MediaElement,
    Orientation,
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
from zplc.model.serializer import DesignError, DesignSerializer, load_design

__all__ = [
    # Geometry
    "Point",
    "PageGeometry",
    "LabelDesign",
    # Enums
    "Unit",
    "Orientation",
    "BarcodeFormat",
    # Elements
    "Element",
    "TextElement",
    "RectangleElement",
    "LineElement",
    "CircleElement",
    "MediaElement",
    # Payloads
    "Payload",
    "BarcodePayload",
    "QRCodePayload",
    "RasterPayload",
    # Errors
    "ZplcError",
    "GeometryError",
    "DesignError",
    # Serializers
    "DesignSerializer",
    "load_design",
    "from_fabric",
    "fabric_object_to_element",
]
