"""Core typed models shared by extraction, aggregation and reconciliation."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import TypeAlias, TypedDict

CellValue: TypeAlias = str | int | float | bool | date | datetime | None
RawSheetGrid: TypeAlias = Sequence[Sequence[CellValue]]
ExpectedMap: TypeAlias = dict[str, int]
ScannedMap: TypeAlias = dict[str, int]


class Discrepancy(str, Enum):
    """Classification of the gap between supplier and scanned quantity."""

    NO_DISCREPANCY = "NO_DISCREPANCY"
    RECEIVED_LESS = "RECEIVED_LESS"
    RECEIVED_MORE = "RECEIVED_MORE"
    NOT_IN_SUPPLIER_FILE = "NOT_IN_SUPPLIER_FILE"

    @property
    def label(self) -> str:
        """Return the human-readable wording used in rendered reports."""

        return _DISCREPANCY_LABELS[self]


_DISCREPANCY_LABELS = {
    Discrepancy.NO_DISCREPANCY: "No discrepancy",
    Discrepancy.RECEIVED_LESS: "Received less",
    Discrepancy.RECEIVED_MORE: "Received more",
    Discrepancy.NOT_IN_SUPPLIER_FILE: "Not in supplier file",
}


@dataclass(frozen=True, slots=True)
class ScanEvent:
    """One physical scan submission."""

    barcode: str
    quantity: int


@dataclass(frozen=True, slots=True)
class SheetConfig:
    """Column mapping chosen for one supplier sheet.

    Fields stay `None` until the mapping step supplies them. Reconfiguring
    produces a new instance rather than mutating this one.
    """

    sheet_name: str | int | None = None
    header_row_index: int | None = None
    barcode_column: str | None = None
    quantity_column: str | None = None


@dataclass(frozen=True, slots=True)
class DiscrepancyRecord:
    """Reconciliation outcome for a single barcode."""

    barcode: str
    supplier_quantity: int
    scanned_quantity: int
    discrepancy: Discrepancy

    @property
    def difference(self) -> int:
        """Scanned minus supplier quantity; negative when short."""

        return self.scanned_quantity - self.supplier_quantity


@dataclass(frozen=True, slots=True)
class SummaryTotals:
    """Grand totals across every record of a report."""

    total_supplier: int
    total_scanned: int

    @property
    def difference(self) -> int:
        """Scanned total minus supplier total."""

        return self.total_scanned - self.total_supplier


@dataclass(slots=True)
class ReconciliationResult:
    """Ordered discrepancy records plus their totals."""

    records: list[DiscrepancyRecord]
    totals: SummaryTotals

    def count_by_discrepancy(self) -> dict[Discrepancy, int]:
        """Return how many records fall into each classification."""

        counts = Counter(record.discrepancy for record in self.records)
        return {kind: counts.get(kind, 0) for kind in Discrepancy}

    def barcodes(self) -> list[str]:
        """Return record barcodes in report order."""

        return [record.barcode for record in self.records]


class DuplicateBarcodeInfo(TypedDict):
    """Supplier barcode that appears on more than one sheet row."""

    barcode: str
    row_count: int
    source_rows: list[int]
    kept_quantity: int


@dataclass(frozen=True, slots=True)
class SheetPreview:
    """Leading rows of a sheet, used to pick the header row and columns."""

    headers: list[CellValue]
    rows: list[list[CellValue]]
