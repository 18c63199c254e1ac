"""Scan capture helpers: operator input parsing and scan log files."""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from pathlib import Path

from .errors import ValidationError
from .models import ScanEvent
from .normalize import validate_scan_event

_QUANTITY_RE = re.compile(r"^\s*(\d+)")


def sanitize_barcode(raw: str) -> str:
    """Strip surrounding whitespace and the CR/LF suffix scanners append."""

    return raw.strip().replace("\r", "").replace("\n", "")


def parse_scan_quantity(raw: str | int) -> int:
    """Parse an operator-entered quantity; it must be a positive integer."""

    if isinstance(raw, bool):
        raise ValidationError(f"Invalid quantity: {raw!r}")
    if isinstance(raw, int):
        quantity = raw
    else:
        match = _QUANTITY_RE.match(raw)
        if match is None:
            raise ValidationError(f"Invalid quantity: {raw!r}")
        quantity = int(match.group(1))
    if quantity < 1:
        raise ValidationError(f"Quantity must be at least 1, got {quantity}")
    return quantity


def record_scan(events: Sequence[ScanEvent], barcode: str, quantity: str | int) -> list[ScanEvent]:
    """Return a new scan log with one more event appended.

    A repeated barcode becomes a separate event; totals are only combined at
    aggregation time.
    """

    event = ScanEvent(barcode=sanitize_barcode(barcode), quantity=parse_scan_quantity(quantity))
    validate_scan_event(event, position=len(events))
    return [*events, event]


def load_scan_events(path: str | Path) -> list[ScanEvent]:
    """Read a JSON array of `{"barcode", "quantity"}` objects into scan events."""

    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValidationError(f"Scan file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Scan file {path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise ValidationError(f"Scan file {path} must contain a JSON array")

    events: list[ScanEvent] = []
    for position, item in enumerate(payload):
        if not isinstance(item, dict):
            raise ValidationError(f"Scan entry at position {position} is not an object")
        event = ScanEvent(barcode=item.get("barcode"), quantity=item.get("quantity"))
        validate_scan_event(event, position=position)
        events.append(event)
    return events


def dump_scan_events(events: Sequence[ScanEvent], path: str | Path) -> None:
    """Write scan events in the same JSON shape `load_scan_events` reads."""

    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [{"barcode": event.barcode, "quantity": event.quantity} for event in events]
    output_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
