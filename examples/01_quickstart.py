#!/usr/bin/env python3
"""Example: quickstart for zplc.

Minimal working example: build a 4x6 shipping label in code, compile it
with bound field values, and save the ZPL.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install zplc
"""
from __future__ import annotations

from pathlib import Path

import zplc
from zplc.fields import default_catalog
from zplc.model import (
    BarcodePayload,
    LabelDesign,
    LineElement,
    MediaElement,
    Point,
    QRCodePayload,
    RectangleElement,
    TextElement,
)


def main() -> None:
    print(f"zplc version: {zplc.__version__}")

    # Step 1: Describe the page in physical units
    page = zplc.PageGeometry.from_physical(4, 6, "inch", dpi=203)
    print(f"Page: {page.width_dots} x {page.height_dots} dots at {page.dpi} dpi")

    # Step 2: Lay out the elements in dot coordinates
    design = LabelDesign(
        page=page,
        elements=[
            RectangleElement(Point(10, 10), 792, 1198, stroke_width=3),
            TextElement(Point(30, 30), "ACME Components", font_size=28),
            TextElement(Point(30, 90), is_dynamic=True, field_key="customer_name"),
            TextElement(Point(30, 130), is_dynamic=True, field_key="total_quantity"),
            LineElement(Point(10, 190), Point(0, 0), Point(792, 0), stroke_width=2),
            MediaElement(
                Point(40, 230),
                BarcodePayload("CODE128"),
                height=120,
                is_dynamic=True,
                field_key="ct_number",
            ),
            MediaElement(
                Point(560, 900),
                QRCodePayload(),
                width=200,
                is_dynamic=True,
                field_key="order_uid",
            ),
        ],
    )

    # Step 3: Compile with values; the catalog adds prefixes such as "QTY: "
    zpl = zplc.compile(
        design,
        {
            "customer_name": "Northwind Traders",
            "total_quantity": 24,
            "ct_number": "CT00000001234",
            "order_uid": "ORD-2024-000042",
        },
        catalog=default_catalog(),
    )
    print(f"\nCompiled {len(zpl.splitlines())} commands:")
    print(zpl)

    # Step 4: Save for a printer queue
    output = Path("shipping_label.zpl")
    output.write_text(zpl + "\n", encoding="utf-8")
    print(f"\nWritten to {output}")


if __name__ == "__main__":
    main()
