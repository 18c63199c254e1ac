"""Serialization of reconciliation results to CSV, XLSX and JSON-ready dicts."""

from __future__ import annotations

import csv
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from .models import ReconciliationResult

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ("Barcode", "Sent Qty", "Scanned Qty", "Difference", "Scan Count", "Discrepancy")
TOTALS_LABEL = "TOTALS"
SUMMARY_SHEET_TITLE = "Summary Report"
_COLUMN_WIDTHS = (20, 10, 12, 10, 10, 20)


def build_export_rows(
    result: ReconciliationResult,
    *,
    scan_counts: Mapping[str, int] | None = None,
) -> list[list[Any]]:
    """Return header, one row per record, and a trailing TOTALS row."""

    rows: list[list[Any]] = [list(EXPORT_COLUMNS)]
    for record in result.records:
        scan_count = "" if scan_counts is None else scan_counts.get(record.barcode, 0)
        rows.append(
            [
                record.barcode,
                record.supplier_quantity,
                record.scanned_quantity,
                record.difference,
                scan_count,
                record.discrepancy.label,
            ]
        )

    totals = result.totals
    rows.append([TOTALS_LABEL, totals.total_supplier, totals.total_scanned, totals.difference, "", ""])
    return rows


def write_csv(
    result: ReconciliationResult,
    path: str | Path,
    *,
    scan_counts: Mapping[str, int] | None = None,
) -> None:
    """Write the report as CSV, creating parent directories as needed."""

    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerows(build_export_rows(result, scan_counts=scan_counts))
    logger.info("Wrote CSV report with %d records to %s", len(result.records), output_path)


def write_xlsx(
    result: ReconciliationResult,
    path: str | Path,
    *,
    scan_counts: Mapping[str, int] | None = None,
) -> None:
    """Write the report as a single-sheet workbook.

    Barcode cells are stored as text so long numeric barcodes keep every digit.
    """

    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = SUMMARY_SHEET_TITLE
    for row in build_export_rows(result, scan_counts=scan_counts):
        worksheet.append(row)

    for row_cells in worksheet.iter_rows(min_row=2, max_col=1):
        row_cells[0].number_format = "@"
    for position, width in enumerate(_COLUMN_WIDTHS, start=1):
        worksheet.column_dimensions[get_column_letter(position)].width = width

    workbook.save(output_path)
    logger.info("Wrote XLSX report with %d records to %s", len(result.records), output_path)


def result_to_dict(result: ReconciliationResult) -> dict[str, Any]:
    """Serialize a result into a JSON-friendly dictionary."""

    return {
        "records": [
            {
                "barcode": record.barcode,
                "supplier_quantity": record.supplier_quantity,
                "scanned_quantity": record.scanned_quantity,
                "difference": record.difference,
                "discrepancy": record.discrepancy.value,
            }
            for record in result.records
        ],
        "totals": {
            "total_supplier": result.totals.total_supplier,
            "total_scanned": result.totals.total_scanned,
            "difference": result.totals.difference,
        },
    }
