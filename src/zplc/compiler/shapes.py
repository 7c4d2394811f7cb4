"""Shape encoders: rectangles, lines, circles and ellipses.

ZPL has no vector path primitive.  Boxes and axis-aligned lines map onto
the graphic box (``^GB``); other lines fall back to the diagonal line
(``^GD``), whose rendered slope is only an approximation of the design.
"""
from __future__ import annotations

from zplc.compiler.primitives import round_dots, round_half_up, round_point
from zplc.model.nodes import CircleElement, LineElement, RectangleElement


def _thickness(stroke_width: float | None) -> int:
    return max(1, round_half_up(stroke_width or 1))


def encode_rectangle(element: RectangleElement) -> list[str]:
    """Encode a rectangle as a single graphic box.

    A filled rectangle carries the ``B`` line colour flag; an outline
    rectangle omits it.
    """
    x, y = round_point(element.position)
    width = round_dots(element.width)
    height = round_dots(element.height)
    thickness = _thickness(element.stroke_width)
    box = f"^GB{width},{height},{thickness}"
    if element.is_filled:
        box += ",B"
    return [f"^FO{x},{y}", f"{box}^FS"]


def encode_line(element: LineElement) -> list[str]:
    """Encode a line as a graphic box (axis-aligned) or diagonal line.

    Endpoints are relative to the element position.  Horizontal and
    vertical lines start at their lower coordinate; diagonal lines start
    at ``start`` and use the raw displacement to ``end``.
    """
    x1, y1 = round_half_up(element.start.x), round_half_up(element.start.y)
    x2, y2 = round_half_up(element.end.x), round_half_up(element.end.y)
    ox, oy = element.position.x, element.position.y
    thickness = _thickness(element.stroke_width)

    if y1 == y2:
        origin = f"^FO{round_dots(ox + min(x1, x2))},{round_dots(oy + y1)}"
        return [origin, f"^GB{abs(x2 - x1)},{thickness},{thickness}^FS"]
    if x1 == x2:
        origin = f"^FO{round_dots(ox + x1)},{round_dots(oy + min(y1, y2))}"
        return [origin, f"^GB{thickness},{abs(y2 - y1)},{thickness}^FS"]
    origin = f"^FO{round_dots(ox + x1)},{round_dots(oy + y1)}"
    return [origin, f"^GD{x2 - x1},{y2 - y1},{thickness},,R^FS"]


def encode_circle(element: CircleElement) -> list[str]:
    """Encode a circle (``^GC``) or ellipse (``^GE``) by its diameter."""
    x, y = round_point(element.position)
    thickness = _thickness(element.stroke_width)
    diameter = round_dots(element.radius) * 2
    if element.is_ellipse:
        radius_y = element.radius if element.radius_y is None else element.radius_y
        height = round_dots(radius_y) * 2
        return [f"^FO{x},{y}", f"^GE{diameter},{height},{thickness}^FS"]
    return [f"^FO{x},{y}", f"^GC{diameter},{thickness}^FS"]
