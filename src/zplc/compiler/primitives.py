"""Primitive helpers shared by every element encoder.

Unit conversion
    ``to_dots`` converts a physical length to device dots with
    nearest-integer rounding.  ``from_dots`` is its inverse.

Rotation
    ``quantize_rotation`` maps any angle onto the four ZPL orientations.

Escaping
    ``escape_text`` replaces the characters ZPL reserves inside field
    data with ``^FH`` hex escapes.  It runs last, on fully resolved text.

Field resolution
    ``resolve_field`` looks a dynamic field up in the caller's bindings
    and never fails: a missing key yields the visible ``{{key}}`` token.
"""
from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Final

from zplc.model.nodes import Orientation, Point, Unit

if TYPE_CHECKING:
    from zplc.fields import FieldCatalog

MM_PER_INCH: Final[float] = 25.4

# Field hex indicator used with ``^FH``.  The table below must stay in sync.
# Under ``^FH`` the printer decodes every ``\\hh`` pair, so the indicator
# itself is escaped too.
HEX_INDICATOR: Final[str] = "\\"

_ESCAPE_TABLE: Final[dict[str, str]] = {
    "\\": "\\5C",
    "^": "\\5E",
    "~": "\\7E",
    ">": "\\3E",
    "<": "\\3C",
    "&": "\\26",
}
_UNESCAPE_TABLE: Final[dict[str, str]] = {v: k for k, v in _ESCAPE_TABLE.items()}

_ESCAPE_PATTERN: Final[re.Pattern[str]] = re.compile(
    "[" + re.escape("".join(_ESCAPE_TABLE)) + "]"
)
_UNESCAPE_PATTERN: Final[re.Pattern[str]] = re.compile(
    "|".join(re.escape(seq) for seq in _UNESCAPE_TABLE)
)


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------


def to_dots(length: float, unit: "str | Unit", dpi: int) -> int:
    """Convert a physical *length* to device dots at *dpi*.

    Parameters
    ----------
    length:
        Length in ``unit``.
    unit:
        ``Unit.INCH`` or ``Unit.MILLIMETER`` (or their string names).
    dpi:
        Device resolution in dots per inch.

    Returns
    -------
    int
        ``length * dpi`` for inches, ``length / 25.4 * dpi`` for
        millimetres, rounded half up.
    """
    parsed = Unit.parse(unit)
    if parsed is Unit.INCH:
        return round_half_up(length * dpi)
    return round_half_up(length / MM_PER_INCH * dpi)


def from_dots(dots: float, unit: "str | Unit", dpi: int) -> float:
    """Convert device dots back to a physical length in *unit*."""
    parsed = Unit.parse(unit)
    inches = dots / dpi
    if parsed is Unit.INCH:
        return inches
    return inches * MM_PER_INCH


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return math.floor(value + 0.5)


def round_dots(value: float) -> int:
    """Round a device coordinate to the nearest non-negative integer."""
    return max(0, round_half_up(value))


def round_point(point: Point) -> tuple[int, int]:
    """Return ``point`` as a pair of non-negative integer dots."""
    return round_dots(point.x), round_dots(point.y)


# ---------------------------------------------------------------------------
# Rotation
# ---------------------------------------------------------------------------


def normalize_angle(angle: float) -> float:
    """Map *angle* into ``[0, 360)``."""
    return ((angle % 360) + 360) % 360


def quantize_rotation(angle: float) -> Orientation:
    """Return the ZPL orientation nearest to *angle* degrees (clockwise).

    Bucket boundaries sit at 45, 135, 225 and 315 degrees; a boundary
    angle belongs to the bucket that starts there.
    """
    normalized = normalize_angle(angle)
    if normalized < 45 or normalized >= 315:
        return Orientation.NORMAL
    if normalized < 135:
        return Orientation.ROTATED
    if normalized < 225:
        return Orientation.INVERTED
    return Orientation.BOTTOM_UP


# ---------------------------------------------------------------------------
# Escaping
# ---------------------------------------------------------------------------


def escape_text(text: str) -> str:
    """Replace ZPL-reserved characters in *text* with hex escapes.

    The substitution is a single pass over the input, so the escape
    sequences it produces are never escaped again.
    """
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPE_TABLE[m.group(0)], text)


def unescape_text(text: str) -> str:
    """Decode the escape sequences produced by :func:`escape_text`."""
    return _UNESCAPE_PATTERN.sub(lambda m: _UNESCAPE_TABLE[m.group(0)], text)


def field_data(text: str) -> str:
    """Return the ``^FD...^FS`` command for *text*, escaping as needed.

    When escaping changes the text, the field is prefixed with ``^FH``
    so the printer decodes the hex sequences.
    """
    escaped = escape_text(text)
    if escaped != text:
        return f"^FH{HEX_INDICATOR}^FD{escaped}^FS"
    return f"^FD{escaped}^FS"


# ---------------------------------------------------------------------------
# Dynamic fields
# ---------------------------------------------------------------------------


def placeholder(key: str) -> str:
    """Return the visible token printed for an unbound field."""
    return "{{" + key + "}}"


def resolve_field(
    key: str,
    bindings: Mapping[str, object] | None,
    catalog: "FieldCatalog | None" = None,
) -> str:
    """Resolve the dynamic field *key* to printable text.

    Lookup order: the binding (rendered through the catalog entry when
    one exists), then the catalog default, then ``{{key}}``.  A binding
    of ``None`` or ``""`` counts as missing.
    """
    value = (bindings or {}).get(key)
    spec = catalog.get(key) if catalog is not None else None
    if value is None or value == "":
        if spec is not None and spec.default is not None:
            return spec.default
        return placeholder(key)
    if spec is not None:
        return spec.render(value)
    return str(value)
