"""Media encoder: 1D barcodes, QR codes and raster placeholders.

The payload tag selects the sub-encoder.  Barcode and QR values go
through the same dynamic-field lookup as text, but fall back to the raw
payload value and then to a fixed default so the symbol is never empty.

Unsupported barcode formats emit nothing at all.  Raster images are not
converted to ZPL graphics; a bordered box with an ``[IMAGE]`` marker is
printed in their place.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Final

from zplc.compiler.primitives import (
    field_data,
    quantize_rotation,
    round_dots,
    round_half_up,
    round_point,
)
from zplc.model.nodes import (
    BarcodeFormat,
    BarcodePayload,
    MediaElement,
    Orientation,
    QRCodePayload,
    RasterPayload,
)

if TYPE_CHECKING:
    from zplc.fields import FieldCatalog

logger = logging.getLogger(__name__)

DEFAULT_BARCODE_VALUE: Final[str] = "123456789"
DEFAULT_QR_VALUE: Final[str] = "https://example.com"
DEFAULT_BARCODE_HEIGHT: Final[int] = 50

# Designer width in pixels per QR module; ZPL accepts magnifications 1-10.
QR_PIXELS_PER_MODULE: Final[int] = 25
QR_MIN_MAGNIFICATION: Final[int] = 1
QR_MAX_MAGNIFICATION: Final[int] = 10
# Error correction M, automatic data input.
QR_DATA_PREFIX: Final[str] = "MA,"

_BarcodeCommand = Callable[[Orientation, int], str]

_BARCODE_COMMANDS: Final[dict[BarcodeFormat, _BarcodeCommand]] = {
    BarcodeFormat.CODE128: lambda o, h: f"^BC{o.value},{h},Y,N,N",
    BarcodeFormat.CODE39: lambda o, h: f"^B3{o.value},N,{h},Y,N",
    BarcodeFormat.CODE93: lambda o, h: f"^BA{o.value},{h},Y,N,N",
    BarcodeFormat.EAN13: lambda o, h: f"^BE{o.value},{h},Y,N",
    BarcodeFormat.EAN8: lambda o, h: f"^B8{o.value},{h},Y,N",
    BarcodeFormat.UPC: lambda o, h: f"^BU{o.value},{h},Y,N,Y",
}


def resolve_payload_value(
    element: MediaElement,
    raw_value: str | None,
    default: str,
    bindings: Mapping[str, object] | None = None,
    catalog: "FieldCatalog | None" = None,
) -> str:
    """Resolve symbol data: binding, then catalog default, then raw value,
    then *default*.

    A dynamic element is looked up by ``field_key``, or by its raw value
    when no key is set.
    """
    if element.is_dynamic:
        key = element.field_key or raw_value
        if key:
            spec = catalog.get(key) if catalog is not None else None
            bound = (bindings or {}).get(key)
            if bound is not None and bound != "":
                return spec.render(bound) if spec is not None else str(bound)
            if spec is not None and spec.default is not None:
                return spec.default
    if raw_value:
        return raw_value
    return default


def barcode_height(element: MediaElement) -> int:
    """Return the bar height in dots for *element*."""
    return round_dots(element.height) or DEFAULT_BARCODE_HEIGHT


def qr_magnification(element: MediaElement) -> int:
    """Return the QR module magnification derived from the element width."""
    width = element.width or 100
    size = round_half_up(width / QR_PIXELS_PER_MODULE)
    return min(QR_MAX_MAGNIFICATION, max(QR_MIN_MAGNIFICATION, size))


def encode_barcode(
    element: MediaElement,
    payload: BarcodePayload,
    bindings: Mapping[str, object] | None = None,
    catalog: "FieldCatalog | None" = None,
) -> list[str]:
    """Encode a 1D barcode; returns ``[]`` for unsupported formats."""
    fmt = BarcodeFormat.lookup(payload.format or BarcodeFormat.CODE128.value)
    if fmt is None:
        logger.debug("Dropping barcode with unsupported format %r", payload.format)
        return []
    x, y = round_point(element.position)
    value = resolve_payload_value(
        element, payload.value, DEFAULT_BARCODE_VALUE, bindings, catalog
    )
    orientation = quantize_rotation(element.angle or 0)
    return [
        f"^FO{x},{y}",
        _BARCODE_COMMANDS[fmt](orientation, barcode_height(element)),
        field_data(value),
    ]


def encode_qrcode(
    element: MediaElement,
    payload: QRCodePayload,
    bindings: Mapping[str, object] | None = None,
    catalog: "FieldCatalog | None" = None,
) -> list[str]:
    """Encode a QR code (model 2) with automatic data input."""
    x, y = round_point(element.position)
    value = resolve_payload_value(
        element, payload.value, DEFAULT_QR_VALUE, bindings, catalog
    )
    return [
        f"^FO{x},{y}",
        f"^BQN,2,{qr_magnification(element)}",
        field_data(QR_DATA_PREFIX + value),
    ]


def encode_raster(element: MediaElement) -> list[str]:
    """Encode an untagged image as a placeholder box and marker text."""
    x, y = round_point(element.position)
    return [
        f"^FO{x},{y}",
        "^GB100,100,2^FS",
        f"^FO{x + 10},{y + 40}",
        "^A0N,20,20^FD[IMAGE]^FS",
    ]


def encode_media(
    element: MediaElement,
    bindings: Mapping[str, object] | None = None,
    catalog: "FieldCatalog | None" = None,
) -> list[str]:
    """Encode a media element according to its payload tag."""
    payload = element.payload
    if isinstance(payload, BarcodePayload):
        return encode_barcode(element, payload, bindings, catalog)
    if isinstance(payload, QRCodePayload):
        return encode_qrcode(element, payload, bindings, catalog)
    if isinstance(payload, RasterPayload):
        return encode_raster(element)
    raise TypeError(f"Unsupported media payload: {type(payload).__name__}")
