"""Unit tests for zplc.compiler.primitives: units, rotation, escaping, fields."""
from __future__ import annotations

import pytest

from zplc.compiler.primitives import (
    escape_text,
    field_data,
    from_dots,
    normalize_angle,
    placeholder,
    quantize_rotation,
    resolve_field,
    round_dots,
    round_half_up,
    round_point,
    to_dots,
    unescape_text,
)
from zplc.fields import FieldCatalog, FieldSpec
from zplc.model.nodes import Orientation, Point, Unit


# ---------------------------------------------------------------------------
# Unit conversion
# ---------------------------------------------------------------------------


class TestToDots:
    @pytest.mark.parametrize(
        ("length", "unit", "dpi", "expected"),
        [
            (4, "inch", 203, 812),
            (6, "inch", 203, 1218),
            (1, Unit.INCH, 300, 300),
            (100, "mm", 203, 799),
            (25.4, "mm", 300, 300),
            (50, Unit.MILLIMETER, 203, 400),
        ],
    )
    def test_known_values(self, length: float, unit: str, dpi: int, expected: int) -> None:
        assert to_dots(length, unit, dpi) == expected

    def test_rounds_to_nearest_not_truncates(self) -> None:
        # 0.999 inch at 203 dpi is 202.797 dots
        assert to_dots(0.999, "inch", 203) == 203

    def test_halves_round_up(self) -> None:
        assert to_dots(0.5, "inch", 1) == 1
        assert to_dots(2.5, "inch", 1) == 3

    def test_unknown_unit_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown unit"):
            to_dots(1, "furlong", 203)

    @pytest.mark.parametrize("unit", ["inch", "mm"])
    @pytest.mark.parametrize("dpi", [152, 203, 300, 600])
    @pytest.mark.parametrize("length", [0.01, 0.5, 1, 2.54, 4, 6, 50, 101.6, 152.4])
    def test_round_trip_within_one_dot(self, length: float, unit: str, dpi: int) -> None:
        back = from_dots(to_dots(length, unit, dpi), unit, dpi)
        one_dot = from_dots(1, unit, dpi)
        assert abs(back - length) <= one_dot

    def test_from_dots_inch(self) -> None:
        assert from_dots(406, "inch", 203) == pytest.approx(2.0)

    def test_from_dots_mm(self) -> None:
        assert from_dots(300, "mm", 300) == pytest.approx(25.4)


class TestRounding:
    def test_round_half_up(self) -> None:
        assert round_half_up(10.5) == 11
        assert round_half_up(10.49) == 10
        assert round_half_up(-0.5) == 0

    def test_round_dots_clamps_negative(self) -> None:
        assert round_dots(-3.2) == 0

    def test_round_point(self) -> None:
        assert round_point(Point(10.4, 19.6)) == (10, 20)


# ---------------------------------------------------------------------------
# Rotation
# ---------------------------------------------------------------------------


class TestQuantizeRotation:
    @pytest.mark.parametrize(
        ("angle", "expected"),
        [
            (0, Orientation.NORMAL),
            (44, Orientation.NORMAL),
            (45, Orientation.ROTATED),
            (90, Orientation.ROTATED),
            (134.9, Orientation.ROTATED),
            (135, Orientation.INVERTED),
            (180, Orientation.INVERTED),
            (224, Orientation.INVERTED),
            (225, Orientation.BOTTOM_UP),
            (270, Orientation.BOTTOM_UP),
            (314, Orientation.BOTTOM_UP),
            (315, Orientation.NORMAL),
            (359.9, Orientation.NORMAL),
        ],
    )
    def test_buckets(self, angle: float, expected: Orientation) -> None:
        assert quantize_rotation(angle) is expected

    def test_normalization_is_idempotent(self) -> None:
        assert quantize_rotation(44) is quantize_rotation(404) is quantize_rotation(-316)

    def test_negative_angles(self) -> None:
        assert quantize_rotation(-90) is Orientation.BOTTOM_UP
        assert quantize_rotation(-180) is Orientation.INVERTED

    def test_normalize_angle_range(self) -> None:
        for angle in (-720, -1, 0, 359, 360, 721):
            assert 0 <= normalize_angle(angle) < 360

    def test_orientation_codes(self) -> None:
        assert [o.value for o in Orientation] == ["N", "R", "I", "B"]
        assert Orientation.BOTTOM_UP.degrees == 270


# ---------------------------------------------------------------------------
# Escaping
# ---------------------------------------------------------------------------


class TestEscaping:
    def test_each_reserved_character(self) -> None:
        assert escape_text("^") == "\\5E"
        assert escape_text("~") == "\\7E"
        assert escape_text(">") == "\\3E"
        assert escape_text("<") == "\\3C"
        assert escape_text("&") == "\\26"

    def test_mixed_text(self) -> None:
        assert escape_text("A^B & <C>~") == "A\\5EB \\26 \\3CC\\3E\\7E"

    def test_plain_text_unchanged(self) -> None:
        assert escape_text("Order 42 / Part-7") == "Order 42 / Part-7"

    def test_hex_indicator_escaped(self) -> None:
        assert escape_text(r"C:\12 ^") == "C:\\5C12 \\5E"

    def test_single_pass(self) -> None:
        assert escape_text("\\5E") == "\\5C5E"
        assert unescape_text(escape_text("\\5E")) == "\\5E"

    @pytest.mark.parametrize(
        "text",
        ["", "plain", "^XA", "a<b>c", "R&D ~ 100%", "^~<>&^~<>&", "ünïcödé & ©", r"C:\12 ^"],
    )
    def test_unescape_recovers_original(self, text: str) -> None:
        assert unescape_text(escape_text(text)) == text

    def test_field_data_plain(self) -> None:
        assert field_data("Hello") == "^FDHello^FS"

    def test_field_data_escaped_adds_hex_indicator(self) -> None:
        assert field_data("R&D") == "^FH\\^FDR\\26D^FS"

    def test_field_data_backslash(self) -> None:
        assert field_data(r"C:\12 ^") == "^FH\\^FDC:\\5C12 \\5E^FS"


# ---------------------------------------------------------------------------
# Field resolution
# ---------------------------------------------------------------------------


class TestResolveField:
    def test_bound_value(self) -> None:
        assert resolve_field("ct", {"ct": "CT1"}) == "CT1"

    def test_missing_key_yields_placeholder(self) -> None:
        assert resolve_field("ct", {}) == "{{ct}}"

    def test_no_bindings(self) -> None:
        assert resolve_field("ct", None) == "{{ct}}"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_values_count_as_missing(self, value: object) -> None:
        assert resolve_field("ct", {"ct": value}) == "{{ct}}"

    def test_zero_is_a_value(self) -> None:
        assert resolve_field("qty", {"qty": 0}) == "0"

    def test_numbers_are_stringified(self) -> None:
        assert resolve_field("qty", {"qty": 12.5}) == "12.5"

    def test_catalog_formats_value(self) -> None:
        catalog = FieldCatalog([FieldSpec("qty", "Qty", prefix="QTY: ")])
        assert resolve_field("qty", {"qty": 5}, catalog) == "QTY: 5"

    def test_catalog_default_for_missing(self) -> None:
        catalog = FieldCatalog([FieldSpec("loc", "Location", default="SB")])
        assert resolve_field("loc", {}, catalog) == "SB"

    def test_catalog_without_default_falls_back_to_placeholder(self) -> None:
        catalog = FieldCatalog([FieldSpec("loc", "Location")])
        assert resolve_field("loc", {}, catalog) == "{{loc}}"

    def test_placeholder_token(self) -> None:
        assert placeholder("po_number") == "{{po_number}}"
