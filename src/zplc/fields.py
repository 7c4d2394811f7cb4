"""Dynamic field catalog.

A ``FieldSpec`` describes one placeholder a label template may bind:
its key, a human label, a category and optional presentation rules
(date/time format, prefix, suffix, default).  ``FieldCatalog`` is a
read-only lookup used by the encoders when rendering bound values.

The built-in ``DYNAMIC_FIELDS`` list covers order, customer and system
data.  Passing no catalog to the compiler keeps values as ``str(value)``.

Date formats use the designer's tokens rather than ``strftime``
directives: ``YYYY``, ``YY``, ``MM``, ``DD``, ``HH``, ``mm`` and ``ss``.
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Final


class FieldCategory(Enum):
    """Grouping shown in the designer's field picker."""

    ORDER = "order"
    CUSTOMER = "customer"
    SYSTEM = "system"
    CUSTOM = "custom"


_TOKEN_PATTERN: Final[re.Pattern[str]] = re.compile(r"YYYY|YY|MM|DD|HH|mm|ss")
_TOKEN_DIRECTIVES: Final[dict[str, str]] = {
    "YYYY": "%Y",
    "YY": "%y",
    "MM": "%m",
    "DD": "%d",
    "HH": "%H",
    "mm": "%M",
    "ss": "%S",
}


def to_strftime(pattern: str) -> str:
    """Translate a ``DD/MM/YY``-style pattern into a ``strftime`` format."""
    escaped = pattern.replace("%", "%%")
    return _TOKEN_PATTERN.sub(lambda m: _TOKEN_DIRECTIVES[m.group(0)], escaped)


def format_temporal(value: object, pattern: str) -> str | None:
    """Format a date-like *value* with *pattern*.

    ISO-8601 strings are parsed first.  Returns ``None`` when *value* is
    not date-like so the caller can fall back to ``str(value)``.
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return None
    if isinstance(value, (datetime, date, time)):
        return value.strftime(to_strftime(pattern))
    return None


@dataclass(frozen=True)
class FieldSpec:
    """One bindable field.

    Parameters
    ----------
    key:
        Binding key, e.g. ``"ct_number"``.
    label:
        Display name for the designer.
    category:
        Field group.
    format:
        Optional date/time pattern applied to date-like values.
    prefix:
        Text prepended to the rendered value, e.g. ``"QTY: "``.
    suffix:
        Text appended to the rendered value.
    default:
        Printed when the binding is missing, instead of ``{{key}}``.
    """

    key: str
    label: str
    category: FieldCategory = FieldCategory.CUSTOM
    format: str | None = None
    prefix: str = ""
    suffix: str = ""
    default: str | None = None

    def render(self, value: object) -> str:
        """Render a bound *value* with this field's presentation rules."""
        text: str | None = None
        if self.format:
            text = format_temporal(value, self.format)
        if text is None:
            text = str(value)
        return f"{self.prefix}{text}{self.suffix}"


class FieldCatalog(Mapping[str, FieldSpec]):
    """Immutable mapping of field key to ``FieldSpec``."""

    def __init__(self, fields: Iterable[FieldSpec] = ()) -> None:
        self._fields: dict[str, FieldSpec] = {}
        for spec in fields:
            if spec.key in self._fields:
                raise ValueError(f"Duplicate field key {spec.key!r}")
            self._fields[spec.key] = spec

    def __getitem__(self, key: str) -> FieldSpec:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def by_category(self, category: FieldCategory) -> list[FieldSpec]:
        """Return the fields of *category* in declaration order."""
        return [spec for spec in self._fields.values() if spec.category is category]


DYNAMIC_FIELDS: Final[tuple[FieldSpec, ...]] = (
    # Order data
    FieldSpec("order_uid", "Order UID", FieldCategory.ORDER),
    FieldSpec("customer_part_number", "Part Number", FieldCategory.ORDER),
    FieldSpec("bpi_description", "BPI Description", FieldCategory.ORDER),
    FieldSpec("total_quantity", "Total Quantity", FieldCategory.ORDER, prefix="QTY: "),
    FieldSpec("ct_number", "CT Number", FieldCategory.ORDER),
    FieldSpec("po_number", "PO Number", FieldCategory.ORDER, prefix="PO: "),
    FieldSpec("order_date", "Order Date", FieldCategory.ORDER, format="DD/MM/YY"),
    FieldSpec("eta_date", "ETA Date", FieldCategory.ORDER, format="DD/MM/YY"),
    # Customer data
    FieldSpec("customer_name", "Customer Name", FieldCategory.CUSTOMER),
    FieldSpec("customer_description", "Customer Description", FieldCategory.CUSTOMER),
    # System data
    FieldSpec("print_date", "Print Date", FieldCategory.SYSTEM, format="DD/MM/YY"),
    FieldSpec("print_time", "Print Time", FieldCategory.SYSTEM, format="HH:mm"),
    FieldSpec("user_name", "Printed By", FieldCategory.SYSTEM),
    FieldSpec("location", "Location", FieldCategory.SYSTEM),
    FieldSpec("batch_number", "Batch Number", FieldCategory.SYSTEM),
)


def default_catalog() -> FieldCatalog:
    """Return a catalog of the built-in ``DYNAMIC_FIELDS``."""
    return FieldCatalog(DYNAMIC_FIELDS)
