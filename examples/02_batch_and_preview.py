#!/usr/bin/env python3
"""Example: batch printing and previews with zplc.

Loads a canvas saved by the web designer, compiles one label per order
line, and renders the first label through the Labelary API.

Usage:
    python examples/02_batch_and_preview.py

Requirements:
    pip install zplc
"""
from __future__ import annotations

from pathlib import Path

import zplc
from zplc.compiler.zpl_target import ZplTarget
from zplc.config import find_preset
from zplc.model import from_fabric
from zplc.preview import LabelaryClient, PreviewError

CANVAS = {
    "version": "5.3.0",
    "objects": [
        {"type": "i-text", "left": 10, "top": 10, "text": "PART", "fontSize": 18},
        {
            "type": "i-text",
            "left": 10,
            "top": 45,
            "text": "{{customer_part_number}}",
            "fontSize": 22,
            "data": {"isDynamic": True, "field": "customer_part_number"},
        },
        {
            "type": "image",
            "left": 10,
            "top": 100,
            "width": 300,
            "height": 70,
            "data": {"isBarcode": True, "format": "CODE128", "field": "ct_number"},
        },
        # Grid guide from the designer; never printed.
        {"type": "line", "x1": 0, "y1": 0, "x2": 406, "y2": 0, "stroke": "#f0f0f0"},
    ],
}

ORDER_LINES = [
    {"customer_part_number": "BRK-1001", "ct_number": "CT00000001234"},
    {"customer_part_number": "BRK-1002", "ct_number": "CT00000001235"},
    {"customer_part_number": "BRK-1003"},
]


def main() -> None:
    page = find_preset("2x1 Part Label").page(203)
    design = from_fabric(CANVAS, page)
    print(f"Loaded {len(design.elements)} elements for a {page.width_dots}x{page.height_dots} label")

    # One format per order line; the third line falls back to the default barcode value.
    batch = ZplTarget(copies=2).compile_batch(design, ORDER_LINES)
    Path("part_labels.zpl").write_text(batch + "\n", encoding="utf-8")
    print(f"Batch: {batch.count('^XA')} labels written to part_labels.zpl")

    first = zplc.compile(design, ORDER_LINES[0])
    try:
        with LabelaryClient() as client:
            png = client.render_page(first, page)
    except PreviewError as exc:
        print(f"Preview unavailable: {exc}")
        return
    Path("part_label.png").write_bytes(png)
    print(f"Preview saved to part_label.png ({len(png)} bytes)")


if __name__ == "__main__":
    main()
