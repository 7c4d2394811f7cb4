"""End-to-end tests: design document → compile → ZPL text.

These tests exercise the full pipeline:
  1. Build a ``LabelDesign`` directly or load it from YAML / Fabric JSON.
  2. Compile with ``zplc.compile`` or ``zplc.compiler.compile``.
  3. Assert the framing, command order and field substitution.

Nothing is sent to a printer; the output is checked as text.
"""
from __future__ import annotations

import json
from pathlib import Path

import pytest

import zplc
from zplc.compiler import CompilerOutput, available_targets
from zplc.compiler import compile as zpl_compile
from zplc.fields import default_catalog
from zplc.model.nodes import (
    BarcodePayload,
    CircleElement,
    LabelDesign,
    LineElement,
    MediaElement,
    PageGeometry,
    Point,
    QRCodePayload,
    RasterPayload,
    RectangleElement,
    TextElement,
)


# ---------------------------------------------------------------------------
# Inline designs (avoid file I/O in fast tests)
# ---------------------------------------------------------------------------

_SHIPPING_YAML = """\
page: {dpi: 203, width: 4, height: 6, unit: inch}
elements:
  - {kind: text, x: 10, y: 10, text: "ACME Ltd", font_size: 24}
  - {kind: text, x: 10, y: 60, is_dynamic: true, field_key: ct_number}
  - {kind: rectangle, x: 0, y: 0, width: 812, height: 1218, stroke_width: 4}
  - kind: media
    x: 40
    y: 200
    height: 100
    is_dynamic: true
    field_key: ct_number
    payload: {type: barcode, format: CODE128}
  - {kind: line, x: 0, y: 400, points: [0, 0, 812, 0], stroke: "#F0F0F0"}
"""


def _lines(zpl: str) -> list[str]:
    return zpl.split("\n")


# ---------------------------------------------------------------------------
# Reference scenarios
# ---------------------------------------------------------------------------


class TestReferenceScenarios:
    def test_static_text(self, page: PageGeometry) -> None:
        design = LabelDesign(page, (TextElement(Point(10, 10), "Hello", font_size=20),))
        assert _lines(zplc.compile(design)) == [
            "^XA",
            "^CI28",
            "^PW812",
            "^LL1218",
            "^FO10,10",
            "^A0N,30,30",
            "^FDHello^FS",
            "^XZ",
        ]

    def test_bound_barcode(self, page: PageGeometry) -> None:
        element = MediaElement(
            Point(40, 200),
            BarcodePayload("CODE128"),
            height=50,
            is_dynamic=True,
            field_key="ct_number",
        )
        zpl = zplc.compile(LabelDesign(page, (element,)), {"ct_number": "CT00000001234"})
        assert "^BCN,50,Y,N,N" in zpl
        assert "^FDCT00000001234^FS" in zpl

    def test_filled_rectangle(self, page: PageGeometry) -> None:
        element = RectangleElement(Point(0, 0), 100, 50, fill="#000000", stroke_width=2)
        zpl = zplc.compile(LabelDesign(page, (element,)))
        assert "^FO0,0\n^GB100,50,2,B^FS" in zpl

    def test_unbound_barcode_default(self, page: PageGeometry) -> None:
        element = MediaElement(
            Point(40, 200), BarcodePayload("CODE128"), is_dynamic=True, field_key="ct_number"
        )
        zpl = zplc.compile(LabelDesign(page, (element,)), {})
        assert "^FD123456789^FS" in zpl


# ---------------------------------------------------------------------------
# Whole-format properties
# ---------------------------------------------------------------------------


class TestFormatStructure:
    def test_empty_design(self, page: PageGeometry) -> None:
        assert _lines(zplc.compile(LabelDesign(page))) == [
            "^XA",
            "^CI28",
            "^PW812",
            "^LL1218",
            "^XZ",
        ]

    def test_order_follows_elements(self, page: PageGeometry) -> None:
        design = LabelDesign(
            page,
            (
                TextElement(Point(0, 0), "first"),
                CircleElement(Point(0, 0), 10),
                TextElement(Point(0, 0), "last"),
            ),
        )
        lines = _lines(zplc.compile(design))
        assert lines.index("^FDfirst^FS") < lines.index("^GC20,1^FS") < lines.index("^FDlast^FS")

    def test_guides_skipped(self, page: PageGeometry) -> None:
        design = LabelDesign(
            page,
            (
                LineElement(Point(0, 100), stroke="#f0f0f0"),
                LineElement(Point(0, 200), stroke=" #F0F0F0 "),
                RectangleElement(Point(0, 0), 10, 10, stroke="#f0f0f0"),
                LineElement(Point(0, 300), stroke="#000000"),
            ),
        )
        lines = _lines(zplc.compile(design))
        assert lines[4:] == ["^FO0,300", "^GB100,1,1^FS", "^XZ"]

    def test_unsupported_barcode_dropped_silently(self, page: PageGeometry) -> None:
        design = LabelDesign(
            page,
            (
                MediaElement(Point(0, 0), BarcodePayload("MAXICODE", "1")),
                TextElement(Point(0, 0), "after"),
            ),
        )
        output = zpl_compile(design)
        assert "MAXICODE" not in output.text
        assert output.skipped_count == 1
        assert "^FDafter^FS" in output.text

    def test_placeholder_for_missing_binding(self, page: PageGeometry) -> None:
        element = TextElement(Point(0, 0), is_dynamic=True, field_key="customer_name")
        assert "^FD{{customer_name}}^FS" in zplc.compile(LabelDesign(page, (element,)))

    def test_deterministic(self, page: PageGeometry) -> None:
        design = LabelDesign(
            page,
            (
                TextElement(Point(1, 2), "x"),
                MediaElement(Point(3, 4), QRCodePayload("q")),
                MediaElement(Point(5, 6), RasterPayload()),
            ),
        )
        assert zplc.compile(design, {"a": 1}) == zplc.compile(design, {"a": 1})

    def test_non_element_rejected(self, page: PageGeometry) -> None:
        design = LabelDesign(page, ("not an element",))  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            zplc.compile(design)

    def test_options_forwarded(self, page: PageGeometry) -> None:
        lines = _lines(zplc.compile(LabelDesign(page), copies=2, label_home=True))
        assert lines == ["^XA", "^CI28", "^PW812", "^LL1218", "^LH0,0", "^PQ2", "^XZ"]


# ---------------------------------------------------------------------------
# Compiler API
# ---------------------------------------------------------------------------


class TestCompilerApi:
    def test_output_metadata(self, page: PageGeometry) -> None:
        design = LabelDesign(page, (TextElement(Point(0, 0), "x"),))
        output = zpl_compile(design)
        assert isinstance(output, CompilerOutput)
        assert output.metadata["width_dots"] == 812
        assert output.metadata["element_count"] == 1
        assert output.command_count == len(output.text.split("\n"))
        assert output.summary() == "Generated 8 command(s), skipped 0 element(s)"

    def test_unknown_target(self, page: PageGeometry) -> None:
        with pytest.raises(ValueError, match="Unknown compiler target"):
            zpl_compile(LabelDesign(page), target="epl")

    def test_available_targets(self) -> None:
        assert available_targets() == ["zpl"]

    def test_batch(self, page: PageGeometry) -> None:
        design = LabelDesign(
            page, (TextElement(Point(0, 0), is_dynamic=True, field_key="ct_number"),)
        )
        zpl = zplc.compile_batch(design, [{"ct_number": "A"}, {"ct_number": "B"}])
        assert zpl.count("^XA") == 2
        assert zpl.count("^XZ") == 2
        assert zpl.index("^FDA^FS") < zpl.index("^FDB^FS")

    def test_empty_batch(self, page: PageGeometry) -> None:
        assert zplc.compile_batch(LabelDesign(page), []) == ""


# ---------------------------------------------------------------------------
# From files
# ---------------------------------------------------------------------------


class TestFromFiles:
    def test_yaml_design(self, tmp_path: Path) -> None:
        path = tmp_path / "shipping.yaml"
        path.write_text(_SHIPPING_YAML, encoding="utf-8")
        design = zplc.load_design(path)
        zpl = zplc.compile(design, {"ct_number": "CT7"}, catalog=default_catalog())
        lines = _lines(zpl)
        assert lines[0] == "^XA"
        assert lines[-1] == "^XZ"
        assert "^A0N,36,36" in lines
        assert lines.count("^FDCT7^FS") == 2
        assert "^GB812,1218,4^FS" in lines
        assert "^FO0,400" not in lines

    def test_fabric_canvas(self, tmp_path: Path, page: PageGeometry) -> None:
        canvas = {
            "version": "5.3.0",
            "objects": [
                {"type": "i-text", "left": 10, "top": 10, "text": "Part", "fontSize": 20},
                {
                    "type": "image",
                    "left": 10,
                    "top": 50,
                    "width": 125,
                    "height": 125,
                    "data": {"isQRCode": True, "field": "order_uid"},
                },
                {"type": "line", "x1": 0, "y1": 0, "x2": 812, "y2": 0, "stroke": "#f0f0f0"},
            ],
        }
        path = tmp_path / "canvas.json"
        path.write_text(json.dumps(canvas), encoding="utf-8")
        zpl = zplc.compile(zplc.load_design(path, default_page=page), {"order_uid": "U1"})
        assert _lines(zpl)[4:] == [
            "^FO10,10",
            "^A0N,30,30",
            "^FDPart^FS",
            "^FO10,50",
            "^BQN,2,5",
            "^FDMA,U1^FS",
            "^XZ",
        ]
