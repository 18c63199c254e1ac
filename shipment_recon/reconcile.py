"""Scan aggregation and supplier-versus-scanned reconciliation."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence

from .errors import ValidationError
from .extract import extract_expected, validate_sheet_config
from .models import (
    Discrepancy,
    DiscrepancyRecord,
    ExpectedMap,
    RawSheetGrid,
    ReconciliationResult,
    ScanEvent,
    ScannedMap,
    SheetConfig,
    SummaryTotals,
)
from .normalize import validate_scan_event

logger = logging.getLogger(__name__)


def aggregate_scans(events: Iterable[ScanEvent]) -> ScannedMap:
    """Sum scanned quantities per barcode.

    Every event is validated before any summing happens. Barcodes keep the
    position of their first scan.
    """

    checked = list(events)
    for position, event in enumerate(checked):
        validate_scan_event(event, position=position)

    totals: defaultdict[str, int] = defaultdict(int)
    for event in checked:
        totals[event.barcode] += event.quantity

    logger.debug("Aggregated %d scan events into %d barcodes", len(checked), len(totals))
    return dict(totals)


def count_scans(events: Iterable[ScanEvent]) -> dict[str, int]:
    """Return the number of physical scans recorded per barcode."""

    counts: defaultdict[str, int] = defaultdict(int)
    for event in events:
        counts[event.barcode] += 1
    return dict(counts)


def classify(supplier_quantity: int, scanned_quantity: int) -> Discrepancy:
    """Classify a barcode that appears in the supplier sheet."""

    if supplier_quantity > scanned_quantity:
        return Discrepancy.RECEIVED_LESS
    if supplier_quantity < scanned_quantity:
        return Discrepancy.RECEIVED_MORE
    return Discrepancy.NO_DISCREPANCY


def compute_totals(records: Sequence[DiscrepancyRecord]) -> SummaryTotals:
    """Sum supplier and scanned quantities across all records."""

    return SummaryTotals(
        total_supplier=sum(record.supplier_quantity for record in records),
        total_scanned=sum(record.scanned_quantity for record in records),
    )


def reconcile(expected: ExpectedMap, scanned: ScannedMap) -> ReconciliationResult:
    """Compare expected and scanned quantities and return ordered records with totals.

    Supplier barcodes come first in sheet order, followed by barcodes that
    were only scanned, in first-scan order.
    """

    if not scanned:
        raise ValidationError("No scanned items to reconcile; record at least one scan first")

    records: list[DiscrepancyRecord] = []
    for barcode, supplier_quantity in expected.items():
        scanned_quantity = scanned.get(barcode, 0)
        records.append(
            DiscrepancyRecord(
                barcode=barcode,
                supplier_quantity=supplier_quantity,
                scanned_quantity=scanned_quantity,
                discrepancy=classify(supplier_quantity, scanned_quantity),
            )
        )

    for barcode, scanned_quantity in scanned.items():
        if barcode in expected:
            continue
        records.append(
            DiscrepancyRecord(
                barcode=barcode,
                supplier_quantity=0,
                scanned_quantity=scanned_quantity,
                discrepancy=Discrepancy.NOT_IN_SUPPLIER_FILE,
            )
        )

    result = ReconciliationResult(records=records, totals=compute_totals(records))
    logger.info(
        "Reconciled %d barcodes: supplier total %d, scanned total %d",
        len(records),
        result.totals.total_supplier,
        result.totals.total_scanned,
    )
    return result


def run_pipeline(grid: RawSheetGrid, config: SheetConfig, events: Iterable[ScanEvent]) -> ReconciliationResult:
    """Run extraction, aggregation and reconciliation for one report request."""

    validate_sheet_config(config, require_sheet_name=True)
    expected = extract_expected(grid, config)
    scanned = aggregate_scans(events)
    return reconcile(expected, scanned)
