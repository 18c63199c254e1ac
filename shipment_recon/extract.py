"""Column-mapped extraction of expected quantities from a raw sheet grid."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterator, Sequence

from .errors import ConfigurationError, DataError
from .models import CellValue, DuplicateBarcodeInfo, ExpectedMap, RawSheetGrid, SheetConfig, SheetPreview
from .normalize import parse_quantity_cell, stringify_cell

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_ROWS = 10


def _is_missing(value: object) -> bool:
    """Return whether a config field is unset or blank."""

    return value is None or value == ""


def validate_sheet_config(config: SheetConfig, *, require_sheet_name: bool = False) -> tuple[int, str, str]:
    """Raise `ConfigurationError` when the mapping cannot drive extraction.

    Returns the checked `(header_row_index, barcode_column, quantity_column)`.
    """

    missing = [
        name
        for name, value in (
            ("header_row_index", config.header_row_index),
            ("barcode_column", config.barcode_column),
            ("quantity_column", config.quantity_column),
        )
        if _is_missing(value)
    ]
    if require_sheet_name and _is_missing(config.sheet_name):
        missing.insert(0, "sheet_name")
    if missing:
        raise ConfigurationError(f"Sheet configuration is missing: {', '.join(missing)}")

    header_row_index = config.header_row_index
    if isinstance(header_row_index, bool) or not isinstance(header_row_index, int):
        raise ConfigurationError(f"header_row_index must be an integer, got {header_row_index!r}")
    if header_row_index < 0:
        raise ConfigurationError(f"header_row_index must be >= 0, got {header_row_index}")

    barcode_column = config.barcode_column
    quantity_column = config.quantity_column
    if not isinstance(barcode_column, str) or not isinstance(quantity_column, str):
        raise ConfigurationError(
            f"Column labels must be strings, got {barcode_column!r} and {quantity_column!r}"
        )
    return header_row_index, barcode_column, quantity_column


def resolve_column_index(header_row: Sequence[CellValue], label: str) -> int:
    """Return the position of the first header cell equal to `label`, or -1."""

    for index, cell in enumerate(header_row):
        if stringify_cell(cell) == label:
            return index
    return -1


def _resolve_columns(grid: RawSheetGrid, config: SheetConfig) -> tuple[int, int, int]:
    """Validate config against the grid and return header, barcode and quantity positions."""

    header_row_index, barcode_label, quantity_label = validate_sheet_config(config)

    if header_row_index >= len(grid):
        raise DataError(f"Header row {header_row_index} is out of range for a sheet with {len(grid)} rows")

    header_row = grid[header_row_index]
    barcode_index = resolve_column_index(header_row, barcode_label)
    if barcode_index == -1:
        raise DataError(f"Barcode column {barcode_label!r} not found in header row {header_row_index}")
    quantity_index = resolve_column_index(header_row, quantity_label)
    if quantity_index == -1:
        raise DataError(f"Quantity column {quantity_label!r} not found in header row {header_row_index}")

    return header_row_index, barcode_index, quantity_index


def _iter_supplier_rows(grid: RawSheetGrid, config: SheetConfig) -> Iterator[tuple[int, str, int]]:
    """Yield `(row_index, barcode, quantity)` for every usable row below the header."""

    header_row_index, barcode_index, quantity_index = _resolve_columns(grid, config)
    required_length = max(barcode_index, quantity_index) + 1

    for row_index in range(header_row_index + 1, len(grid)):
        row = grid[row_index]
        if row is None or len(row) < required_length:
            continue
        barcode = stringify_cell(row[barcode_index])
        if not barcode:
            continue
        yield row_index, barcode, parse_quantity_cell(row[quantity_index])


def extract_expected(grid: RawSheetGrid, config: SheetConfig) -> ExpectedMap:
    """Build the supplier barcode -> expected quantity map.

    Column labels are resolved before any row is read, so a layout error leaves
    nothing half-built. When a barcode repeats, the last row's quantity is kept.
    """

    expected: ExpectedMap = {}
    rows_read = 0
    for _, barcode, quantity in _iter_supplier_rows(grid, config):
        expected[barcode] = quantity
        rows_read += 1

    logger.debug(
        "Extracted %d barcodes from %d supplier rows (header row %s)",
        len(expected),
        rows_read,
        config.header_row_index,
    )
    if rows_read != len(expected):
        logger.warning(
            "%d supplier rows repeated an earlier barcode; the last quantity was kept",
            rows_read - len(expected),
        )
    return expected


def detect_duplicate_barcodes(grid: RawSheetGrid, config: SheetConfig) -> list[DuplicateBarcodeInfo]:
    """Return supplier barcodes that occur on more than one row.

    `extract_expected` keeps only the last quantity for these; this helper shows
    which rows were overridden.
    """

    source_rows: defaultdict[str, list[int]] = defaultdict(list)
    kept: dict[str, int] = {}
    for row_index, barcode, quantity in _iter_supplier_rows(grid, config):
        source_rows[barcode].append(row_index)
        kept[barcode] = quantity

    duplicates: list[DuplicateBarcodeInfo] = []
    for barcode in sorted(source_rows):
        rows = source_rows[barcode]
        if len(rows) <= 1:
            continue
        duplicates.append(
            {
                "barcode": barcode,
                "row_count": len(rows),
                "source_rows": rows,
                "kept_quantity": kept[barcode],
            }
        )
    return duplicates


def preview_grid(grid: RawSheetGrid, *, limit: int = DEFAULT_PREVIEW_ROWS) -> SheetPreview:
    """Return the leading rows of a grid for header-row selection."""

    rows = [list(row) for row in grid[:limit]]
    return SheetPreview(headers=rows[0] if rows else [], rows=rows)
