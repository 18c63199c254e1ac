"""Cell-level normalization helpers used by sheet extraction and scan intake."""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any

from .errors import ValidationError
from .models import CellValue

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def stringify_cell(value: CellValue) -> str:
    """Render a raw cell value as the string used for label and barcode matching.

    Integral floats drop their fractional part so a numeric barcode read back as
    `12345.0` still matches the scanned text `12345`.
    """

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def parse_quantity_cell(value: CellValue) -> int:
    """Parse a supplier quantity cell leniently, falling back to `0`.

    Strings contribute their leading signed digit run (`"12 pcs"` is 12,
    `"4.7"` is 4). Unparseable values never raise.
    """

    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        return math.trunc(value)
    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        if match is None:
            return 0
        return int(match.group(1))
    return 0


def validate_scan_event(event: Any, *, position: int | None = None) -> None:
    """Raise `ValidationError` unless the event has a barcode and a positive integer quantity."""

    where = "" if position is None else f" at position {position}"
    barcode = getattr(event, "barcode", None)
    quantity = getattr(event, "quantity", None)

    if not isinstance(barcode, str) or barcode == "":
        raise ValidationError(f"Scan event{where} has an empty barcode")
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(f"Scan event{where} for barcode {barcode!r} has a non-integer quantity: {quantity!r}")
    if quantity < 1:
        raise ValidationError(f"Scan event{where} for barcode {barcode!r} has a non-positive quantity: {quantity}")
