"""Design model for the label compiler.

Every element handed to the compiler is a frozen dataclass so that a
design is immutable for the duration of a compile.  The ``Element``
union covers all printable variants; the compiler dispatches on it with
``isinstance`` checks.

Positions and sizes are expressed in device dots with a top-left origin.
Values may be fractional (the design surface works in floating-point
pixels); they are rounded to integer dots at encode time.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ZplcError(Exception):
    """Base class for all errors raised by zplc."""


class GeometryError(ZplcError, ValueError):
    """Raised when page geometry is not strictly positive."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Unit(Enum):
    """Physical length unit accepted for page dimensions."""

    INCH = "inch"
    MILLIMETER = "mm"

    @classmethod
    def parse(cls, value: "str | Unit") -> "Unit":
        """Return the unit named by *value* (``"inch"``, ``"in"``, ``"mm"``...)."""
        if isinstance(value, Unit):
            return value
        normalized = value.strip().lower()
        if normalized in ("inch", "in", "inches"):
            return cls.INCH
        if normalized in ("mm", "millimeter", "millimetre", "millimeters"):
            return cls.MILLIMETER
        raise ValueError(f"Unknown unit {value!r}. Expected 'inch' or 'mm'")


class Orientation(Enum):
    """The four field orientations supported by ZPL."""

    NORMAL = "N"
    ROTATED = "R"
    INVERTED = "I"
    BOTTOM_UP = "B"

    @property
    def degrees(self) -> int:
        """Clockwise rotation of this orientation in degrees."""
        return _ORIENTATION_DEGREES[self]


_ORIENTATION_DEGREES: dict[Orientation, int] = {
    Orientation.NORMAL: 0,
    Orientation.ROTATED: 90,
    Orientation.INVERTED: 180,
    Orientation.BOTTOM_UP: 270,
}


class BarcodeFormat(Enum):
    """1D symbologies the media encoder knows how to emit."""

    CODE128 = "CODE128"
    CODE39 = "CODE39"
    CODE93 = "CODE93"
    EAN13 = "EAN13"
    EAN8 = "EAN8"
    UPC = "UPC"

    @classmethod
    def lookup(cls, name: str) -> "BarcodeFormat | None":
        """Return the format called *name*, or ``None`` if unsupported."""
        try:
            return cls(name.strip().upper())
        except ValueError:
            return None


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Point:
    """A position in device dots."""

    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True, slots=True)
class PageGeometry:
    """Printable page size in device dots plus the device resolution.

    Parameters
    ----------
    dpi:
        Device resolution in dots per inch (typically 203 or 300).
    width_dots:
        Print width in dots.
    height_dots:
        Label length in dots.

    Raises
    ------
    GeometryError
        If any value is not strictly positive.
    """

    dpi: int
    width_dots: int
    height_dots: int

    def __post_init__(self) -> None:
        for name in ("dpi", "width_dots", "height_dots"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise GeometryError(
                    f"Page {name} must be a positive integer, got {value!r}"
                )

    @classmethod
    def from_physical(
        cls,
        width: float,
        height: float,
        unit: "str | Unit",
        dpi: int,
    ) -> "PageGeometry":
        """Build a geometry from physical dimensions.

        ``PageGeometry.from_physical(4, 6, "inch", 203)`` yields an
        812x1218 dot page.
        """
        from zplc.compiler.primitives import to_dots

        if isinstance(dpi, bool) or not isinstance(dpi, int) or dpi <= 0:
            raise GeometryError(f"Page dpi must be a positive integer, got {dpi!r}")
        parsed = Unit.parse(unit)
        return cls(
            dpi=dpi,
            width_dots=to_dots(width, parsed, dpi),
            height_dots=to_dots(height, parsed, dpi),
        )


# ---------------------------------------------------------------------------
# Media payloads
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BarcodePayload:
    """A 1D barcode.  ``format`` is kept as given; unsupported names are dropped."""

    format: str = "CODE128"
    value: str | None = None


@dataclass(frozen=True, slots=True)
class QRCodePayload:
    """A QR code symbol."""

    value: str | None = None


@dataclass(frozen=True, slots=True)
class RasterPayload:
    """An image with no symbol tag; printed as a placeholder box."""

    source: str | None = None


Payload = Union[BarcodePayload, QRCodePayload, RasterPayload]


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TextElement:
    """A single-line text field.

    When ``is_dynamic`` is set, ``field_key`` names the binding whose
    value replaces ``text`` at compile time.
    """

    position: Point
    text: str = ""
    font_size: float = 20
    angle: float = 0
    is_dynamic: bool = False
    field_key: str | None = None
    stroke: str | None = None


@dataclass(frozen=True, slots=True)
class RectangleElement:
    """A box, filled when ``fill`` names a non-transparent colour."""

    position: Point
    width: float
    height: float
    fill: str | None = None
    stroke_width: float = 1
    stroke: str | None = None

    @property
    def is_filled(self) -> bool:
        if self.fill is None:
            return False
        return self.fill.strip().lower() not in ("", "transparent", "none")


@dataclass(frozen=True, slots=True)
class LineElement:
    """A straight line; ``start`` and ``end`` are relative to ``position``."""

    position: Point
    start: Point = field(default_factory=Point)
    end: Point = field(default_factory=lambda: Point(100, 0))
    stroke_width: float = 1
    stroke: str | None = None


@dataclass(frozen=True, slots=True)
class CircleElement:
    """A circle, or an ellipse when ``radius_y`` differs from ``radius``."""

    position: Point
    radius: float
    stroke_width: float = 1
    radius_y: float | None = None
    stroke: str | None = None

    @property
    def is_ellipse(self) -> bool:
        return self.radius_y is not None and self.radius_y != self.radius


@dataclass(frozen=True, slots=True)
class MediaElement:
    """A barcode, QR code or raster image placeholder."""

    position: Point
    payload: Payload
    width: float = 100
    height: float = 100
    angle: float = 0
    is_dynamic: bool = False
    field_key: str | None = None
    stroke: str | None = None


Element = Union[TextElement, RectangleElement, LineElement, CircleElement, MediaElement]

ELEMENT_TYPES: tuple[type, ...] = (
    TextElement,
    RectangleElement,
    LineElement,
    CircleElement,
    MediaElement,
)


@dataclass(frozen=True, slots=True)
class LabelDesign:
    """A page plus its ordered element list; the compiler's input."""

    page: PageGeometry
    elements: tuple[Element, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists from callers but store an immutable tuple.
        if not isinstance(self.elements, tuple):
            object.__setattr__(self, "elements", tuple(self.elements))
