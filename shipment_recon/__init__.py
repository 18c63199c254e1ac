"""Public API exports for supplier-sheet extraction and shipment reconciliation."""

from .config import load_sheet_config, merge_overrides, sheet_config_from_mapping
from .errors import ConfigurationError, DataError, ReconciliationError, ValidationError
from .export import build_export_rows, result_to_dict, write_csv, write_xlsx
from .extract import (
    detect_duplicate_barcodes,
    extract_expected,
    preview_grid,
    resolve_column_index,
    validate_sheet_config,
)
from .models import (
    Discrepancy,
    DiscrepancyRecord,
    DuplicateBarcodeInfo,
    ReconciliationResult,
    ScanEvent,
    SheetConfig,
    SheetPreview,
    SummaryTotals,
)
from .reconcile import aggregate_scans, classify, compute_totals, count_scans, reconcile, run_pipeline
from .scans import dump_scan_events, load_scan_events, parse_scan_quantity, record_scan, sanitize_barcode
from .workbook import list_sheet_names, preview_sheet, read_sheet_grid

__all__ = [
    "ConfigurationError",
    "DataError",
    "Discrepancy",
    "DiscrepancyRecord",
    "DuplicateBarcodeInfo",
    "ReconciliationError",
    "ReconciliationResult",
    "ScanEvent",
    "SheetConfig",
    "SheetPreview",
    "SummaryTotals",
    "ValidationError",
    "aggregate_scans",
    "build_export_rows",
    "classify",
    "compute_totals",
    "count_scans",
    "detect_duplicate_barcodes",
    "dump_scan_events",
    "extract_expected",
    "list_sheet_names",
    "load_scan_events",
    "load_sheet_config",
    "merge_overrides",
    "parse_scan_quantity",
    "preview_grid",
    "preview_sheet",
    "read_sheet_grid",
    "reconcile",
    "record_scan",
    "resolve_column_index",
    "result_to_dict",
    "run_pipeline",
    "sanitize_barcode",
    "sheet_config_from_mapping",
    "validate_sheet_config",
    "write_csv",
    "write_xlsx",
]
