"""Format preamble and postamble.

A ZPL label format is bracketed by ``^XA`` / ``^XZ``.  The preamble also
selects UTF-8 (``^CI28``) and fixes the print width and label length from
the page geometry.
"""
from __future__ import annotations

from zplc.model.nodes import PageGeometry

START_FORMAT = "^XA"
END_FORMAT = "^XZ"
UTF8_ENCODING = "^CI28"


def frame_open(page: PageGeometry, label_home: bool = False) -> list[str]:
    """Return the commands that open a format for *page*.

    When *label_home* is set, ``^LH0,0`` pins the label home to the
    top-left corner so printer-side offsets do not shift the layout.
    """
    commands = [
        START_FORMAT,
        UTF8_ENCODING,
        f"^PW{page.width_dots}",
        f"^LL{page.height_dots}",
    ]
    if label_home:
        commands.append("^LH0,0")
    return commands


def frame_close(copies: int = 1) -> list[str]:
    """Return the commands that close a format.

    Raises
    ------
    ValueError
        If *copies* is less than one.
    """
    if copies < 1:
        raise ValueError(f"copies must be at least 1, got {copies!r}")
    if copies > 1:
        return [f"^PQ{copies}", END_FORMAT]
    return [END_FORMAT]
