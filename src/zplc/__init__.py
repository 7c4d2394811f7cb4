"""zplc: compile vector label designs into ZPL for thermal label printers.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import zplc
    from zplc.model import LabelDesign, PageGeometry, Point, TextElement

    page = zplc.PageGeometry.from_physical(4, 6, "inch", dpi=203)
    design = LabelDesign(
        page=page,
        elements=[
            TextElement(Point(10, 10), is_dynamic=True, field_key="ct_number"),
        ],
    )

    # Compile to protocol text
    zpl = zplc.compile(design, {"ct_number": "CT00000001234"})

    # One label per binding set
    batch = zplc.compile_batch(design, [{"ct_number": n} for n in numbers])

    # Load a design saved by the designer (YAML, JSON or Fabric canvas)
    design = zplc.load_design("shipping.yaml")

    zplc.to_dots(100, "mm", 203)
    799
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from zplc.model.nodes import PageGeometry

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from zplc.model.nodes import LabelDesign, Unit


def compile(  # noqa: A001
    design: "LabelDesign",
    bindings: Mapping[str, object] | None = None,
    **options: Any,
) -> str:
    """Compile a ``LabelDesign`` into ZPL text.

    Parameters
    ----------
    design:
        Page geometry plus the ordered element list.
    bindings:
        Values for dynamic fields.  Missing keys print as ``{{key}}``.
    **options:
        Forwarded to ``ZplTarget``: ``catalog``, ``guide_color``,
        ``font_scale``, ``label_home``, ``copies``.

    Returns
    -------
    str
        Newline-joined commands from ``^XA`` to ``^XZ``.
    """
    from zplc.compiler import compile as _compile

    return _compile(design, bindings, **options).text


def compile_batch(
    design: "LabelDesign",
    bindings_list: Iterable[Mapping[str, object]],
    **options: Any,
) -> str:
    """Compile one label format per binding set and concatenate them.

    Returns an empty string when *bindings_list* is empty.
    """
    from zplc.compiler.zpl_target import ZplTarget

    return ZplTarget(**options).compile_batch(design, bindings_list)


def load_design(
    path: str | Path, default_page: PageGeometry | None = None
) -> "LabelDesign":
    """Load a design file (YAML, JSON or Fabric.js canvas).

    Raises
    ------
    zplc.model.DesignError
        If the file is unreadable or malformed.
    zplc.model.GeometryError
        If the page geometry is not strictly positive.
    """
    from zplc.model.serializer import load_design as _load_design

    return _load_design(path, default_page=default_page)


def to_dots(length: float, unit: "str | Unit", dpi: int) -> int:
    """Convert a physical length in ``"inch"`` or ``"mm"`` to device dots."""
    from zplc.compiler.primitives import to_dots as _to_dots

    return _to_dots(length, unit, dpi)


__all__ = [
    "__version__",
    "PageGeometry",
    "compile",
    "compile_batch",
    "load_design",
    "to_dots",
]
