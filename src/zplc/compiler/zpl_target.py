"""Design → ZPL compiler target.

``ZplTarget`` walks a ``LabelDesign`` once and folds the output of one
encoder per element into a single format:

* ``TextElement`` → ``^FO`` / ``^A0`` / ``^FD``
* ``RectangleElement`` → ``^GB``
* ``LineElement`` → ``^GB`` (axis-aligned) or ``^GD`` (diagonal)
* ``CircleElement`` → ``^GC`` or ``^GE``
* ``MediaElement`` → ``^BC``/``^B3``/… barcodes, ``^BQ`` QR codes, or an
  image placeholder

Grid guides drawn by the designer carry a reserved stroke colour and are
skipped before encoding.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from zplc.compiler.base import CompilerOutput, CompilerTarget
from zplc.compiler.framing import frame_close, frame_open
from zplc.compiler.media import encode_media
from zplc.compiler.shapes import encode_circle, encode_line, encode_rectangle
from zplc.compiler.text import FONT_SCALE, encode_text
from zplc.model.nodes import (
    CircleElement,
    Element,
    LabelDesign,
    LineElement,
    MediaElement,
    RectangleElement,
    TextElement,
)

if TYPE_CHECKING:
    from zplc.config import CompilerConfig
    from zplc.fields import FieldCatalog

logger = logging.getLogger(__name__)

GUIDE_COLOR = "#f0f0f0"


def is_guide(element: Element, guide_color: str = GUIDE_COLOR) -> bool:
    """Return True if *element* is a non-printable grid guide."""
    stroke = getattr(element, "stroke", None)
    return stroke is not None and stroke.strip().lower() == guide_color.lower()


class ZplTarget(CompilerTarget):
    """Compiles a ``LabelDesign`` into a ZPL II label format.

    Parameters
    ----------
    catalog:
        Optional dynamic field catalog used to format bound values.
    guide_color:
        Stroke colour that marks designer grid guides.
    font_scale:
        Multiplier from designer font size to ZPL font height.
    label_home:
        Emit ``^LH0,0`` after the page size directives.
    copies:
        Print quantity; values above one emit ``^PQ``.
    """

    def __init__(
        self,
        catalog: "FieldCatalog | None" = None,
        guide_color: str = GUIDE_COLOR,
        font_scale: float = FONT_SCALE,
        label_home: bool = False,
        copies: int = 1,
    ) -> None:
        if copies < 1:
            raise ValueError(f"copies must be at least 1, got {copies!r}")
        self._catalog = catalog
        self._guide_color = guide_color
        self._font_scale = font_scale
        self._label_home = label_home
        self._copies = copies

    @classmethod
    def from_config(
        cls,
        config: "CompilerConfig",
        catalog: "FieldCatalog | None" = None,
        copies: int = 1,
    ) -> "ZplTarget":
        """Build a target from a loaded ``CompilerConfig``."""
        return cls(
            catalog=catalog,
            guide_color=config.guide_color,
            font_scale=config.font_scale,
            label_home=config.label_home,
            copies=copies,
        )

    @property
    def name(self) -> str:
        return "zpl"

    def compile(
        self,
        design: LabelDesign,
        bindings: Mapping[str, object] | None = None,
    ) -> CompilerOutput:
        """Compile *design* to a single ZPL format.

        Parameters
        ----------
        design:
            The page geometry and ordered element list.
        bindings:
            Values for dynamic fields.  Missing keys never fail the
            compile.

        Returns
        -------
        CompilerOutput
            The format text plus element and command counts.
        """
        commands = frame_open(design.page, label_home=self._label_home)
        skipped = 0
        for element in design.elements:
            encoded = self.encode_element(element, bindings)
            if not encoded:
                skipped += 1
            commands.extend(encoded)
        commands.extend(frame_close(self._copies))

        metadata: dict[str, object] = {
            "target": self.name,
            "dpi": design.page.dpi,
            "width_dots": design.page.width_dots,
            "height_dots": design.page.height_dots,
            "element_count": len(design.elements),
            "copies": self._copies,
        }
        return CompilerOutput(
            text="\n".join(commands),
            metadata=metadata,
            command_count=len(commands),
            skipped_count=skipped,
        )

    def compile_batch(
        self,
        design: LabelDesign,
        bindings_list: Iterable[Mapping[str, object]],
    ) -> str:
        """Compile one format per binding set and concatenate them."""
        return "\n".join(self.compile(design, b).text for b in bindings_list)

    def encode_element(
        self,
        element: Element,
        bindings: Mapping[str, object] | None = None,
    ) -> list[str]:
        """Return the commands for one element, or ``[]`` if it is skipped."""
        if is_guide(element, self._guide_color):
            logger.debug("Skipping grid guide %s", type(element).__name__)
            return []
        if isinstance(element, TextElement):
            return encode_text(element, bindings, self._catalog, self._font_scale)
        if isinstance(element, RectangleElement):
            return encode_rectangle(element)
        if isinstance(element, LineElement):
            return encode_line(element)
        if isinstance(element, CircleElement):
            return encode_circle(element)
        if isinstance(element, MediaElement):
            return encode_media(element, bindings, self._catalog)
        raise TypeError(f"Unsupported design element: {type(element).__name__}")
