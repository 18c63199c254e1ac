"""Command-line runner for shipment reconciliation.

This script reads a supplier workbook and a scan log, reconciles them, and
writes the discrepancy report as JSON, CSV or XLSX under `output/` by default.
"""

from __future__ import annotations

import argparse
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from shipment_recon import ConfigurationError, ReconciliationError, SheetConfig
from shipment_recon.config import load_sheet_config, merge_overrides
from shipment_recon.export import result_to_dict, write_csv, write_xlsx
from shipment_recon.extract import detect_duplicate_barcodes
from shipment_recon.models import CellValue, ReconciliationResult, ScanEvent
from shipment_recon.reconcile import count_scans, run_pipeline
from shipment_recon.scans import load_scan_events
from shipment_recon.workbook import read_sheet_grid

logger = logging.getLogger("reconcile")

DEFAULT_OUTPUT_DIR = Path("output")
OUTPUT_FORMATS = ("json", "csv", "xlsx")


def _sheet_selector(value: str) -> str | int:
    """Interpret a purely numeric `--sheet` value as a 0-based sheet position."""

    return int(value) if value.isdigit() else value


def run_reconciliation(
    *,
    workbook_path: Path,
    scans_path: Path,
    config: SheetConfig,
) -> tuple[list[list[CellValue]], list[ScanEvent], ReconciliationResult]:
    """Read the supplier sheet and scan log, then reconcile them."""

    sheet = config.sheet_name
    if sheet is None or sheet == "":
        raise ConfigurationError("Sheet configuration is missing: sheet_name")

    grid = read_sheet_grid(workbook_path, sheet)
    events = load_scan_events(scans_path)
    return grid, events, run_pipeline(grid, config, events)


def build_report(
    *,
    workbook_path: Path,
    scans_path: Path,
    config: SheetConfig,
) -> dict[str, Any]:
    """Build a complete reconciliation report payload."""

    grid, events, result = run_reconciliation(workbook_path=workbook_path, scans_path=scans_path, config=config)
    counts = result.count_by_discrepancy()

    return {
        "metadata": {
            "generated_at_utc": datetime.now(timezone.utc).isoformat(),
            "workbook_path": str(workbook_path),
            "scans_path": str(scans_path),
            "sheet_name": config.sheet_name,
            "header_row_index": config.header_row_index,
            "barcode_column": config.barcode_column,
            "quantity_column": config.quantity_column,
            "duplicate_barcode_rule": (
                "Supplier rows sharing a barcode keep the last row's quantity; "
                "repeated scans of a barcode are summed."
            ),
        },
        "summary": {
            "scan_event_count": len(events),
            "record_count": len(result.records),
            **{f"{kind.value.lower()}_count": count for kind, count in counts.items()},
        },
        "reconciliation": result_to_dict(result),
        "data_quality_issues": {
            "supplier_duplicate_barcodes": detect_duplicate_barcodes(grid, config),
        },
    }


def write_report(report: dict[str, Any], *, output_path: Path) -> None:
    """Write report JSON to disk."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(report, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def _default_output_path(output_format: str) -> Path:
    """Return the dated report path used when `--output` is omitted."""

    date_stamp = datetime.now(timezone.utc).date().isoformat()
    return DEFAULT_OUTPUT_DIR / f"shipment_summary_{date_stamp}.{output_format}"


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for report generation."""

    parser = argparse.ArgumentParser(description="Reconcile scanned barcodes against a supplier workbook.")
    parser.add_argument("--workbook", type=Path, required=True, help="Path to the supplier .xlsx workbook")
    parser.add_argument("--scans", type=Path, required=True, help="Path to the JSON scan log")
    parser.add_argument("--config", type=Path, help="YAML/JSON sheet configuration file")
    parser.add_argument("--sheet", type=_sheet_selector, help="Sheet name or 0-based sheet position")
    parser.add_argument("--header-row", type=int, help="0-based index of the header row")
    parser.add_argument("--barcode-column", help="Header label of the barcode column")
    parser.add_argument("--quantity-column", help="Header label of the quantity column")
    parser.add_argument("--format", choices=OUTPUT_FORMATS, default="json", help="Report output format")
    parser.add_argument("--output", type=Path, help="Output path (defaults to output/shipment_summary_<date>)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for command-line execution."""

    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    output_path = args.output or _default_output_path(args.format)

    try:
        config = load_sheet_config(args.config) if args.config else SheetConfig()
        config = merge_overrides(
            config,
            sheet_name=args.sheet,
            header_row_index=args.header_row,
            barcode_column=args.barcode_column,
            quantity_column=args.quantity_column,
        )

        if args.format == "json":
            report = build_report(workbook_path=args.workbook, scans_path=args.scans, config=config)
            write_report(report, output_path=output_path)
        else:
            _, events, result = run_reconciliation(
                workbook_path=args.workbook,
                scans_path=args.scans,
                config=config,
            )
            writer = write_csv if args.format == "csv" else write_xlsx
            writer(result, output_path, scan_counts=count_scans(events))
    except ReconciliationError as exc:
        logger.error("Reconciliation failed: %s", exc)
        return 1

    print(f"Wrote reconciliation report: {output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
