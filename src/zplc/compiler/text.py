"""Text element encoder."""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from zplc.compiler.primitives import (
    field_data,
    quantize_rotation,
    resolve_field,
    round_half_up,
    round_point,
)
from zplc.model.nodes import TextElement

if TYPE_CHECKING:
    from zplc.fields import FieldCatalog

# ZPL font heights are in dots while the designer sizes text in CSS pixels.
FONT_SCALE = 1.5
DEFAULT_FONT_SIZE = 20


def resolve_text(
    element: TextElement,
    bindings: Mapping[str, object] | None = None,
    catalog: "FieldCatalog | None" = None,
) -> str:
    """Return the literal content of *element* after field substitution."""
    if element.is_dynamic and element.field_key:
        return resolve_field(element.field_key, bindings, catalog)
    return element.text


def scaled_font_size(font_size: float | None, scale: float = FONT_SCALE) -> int:
    """Return the ZPL font height for a designer font size."""
    return round_half_up((font_size or DEFAULT_FONT_SIZE) * scale)


def encode_text(
    element: TextElement,
    bindings: Mapping[str, object] | None = None,
    catalog: "FieldCatalog | None" = None,
    font_scale: float = FONT_SCALE,
) -> list[str]:
    """Encode a text element as field origin, font and field data commands.

    Parameters
    ----------
    element:
        The text element to encode.
    bindings:
        Field values for dynamic text.  Missing keys print ``{{key}}``.
    catalog:
        Optional field catalog used to format bound values.
    font_scale:
        Multiplier from designer font size to ZPL font height.

    Returns
    -------
    list[str]
        ``^FO``, ``^A0`` and ``^FD...^FS`` commands, in that order.
    """
    x, y = round_point(element.position)
    content = resolve_text(element, bindings, catalog)
    size = scaled_font_size(element.font_size, font_scale)
    orientation = quantize_rotation(element.angle or 0)
    return [
        f"^FO{x},{y}",
        f"^A0{orientation.value},{size},{size}",
        field_data(content),
    ]
