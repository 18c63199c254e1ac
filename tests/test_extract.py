from __future__ import annotations

"""Sheet-extraction tests.

These tests pin the row-level rules of supplier extraction: which rows are
skipped, how quantities are coerced, how duplicate barcodes resolve, and how
layout errors fail before any rows are read.
"""

import pytest

from shipment_recon.errors import ConfigurationError, DataError
from shipment_recon.extract import (
    detect_duplicate_barcodes,
    extract_expected,
    preview_grid,
    resolve_column_index,
    validate_sheet_config,
)
from shipment_recon.models import SheetConfig

CONFIG = SheetConfig(sheet_name="Sheet1", header_row_index=0, barcode_column="SKU", quantity_column="Qty")


def test_extract_expected_coerces_non_numeric_quantity_to_zero() -> None:
    """Rows with a barcode are kept even when the quantity is not numeric."""
    grid = [["SKU", "Qty"], ["X1", "4"], ["X2", "abc"]]
    assert extract_expected(grid, CONFIG) == {"X1": 4, "X2": 0}


def test_extract_expected_skips_rows_without_barcode() -> None:
    """Empty barcode cells drop the row regardless of its quantity."""
    grid = [
        ["SKU", "Qty"],
        ["A", 3],
        [None, 99],
        ["", 42],
        ["B", 1],
    ]
    expected = extract_expected(grid, CONFIG)
    assert expected == {"A": 3, "B": 1}
    assert "" not in expected


def test_extract_expected_keeps_last_quantity_for_repeated_barcode() -> None:
    """A repeated supplier barcode keeps the quantity of its last row."""
    grid = [["SKU", "Qty"], ["A", 5], ["B", 2], ["A", 9]]
    expected = extract_expected(grid, CONFIG)
    assert expected["A"] == 9
    assert list(expected) == ["A", "B"]


def test_extract_expected_uses_header_row_below_title_rows() -> None:
    """Rows above the configured header row are ignored entirely."""
    grid = [
        ["Supplier shipment 2024-03"],
        [],
        ["Line", "Qty", "Description", "SKU"],
        [1, 6, "Widget", "W-1"],
        [2, "2", "Gadget", 100200],
    ]
    config = SheetConfig(sheet_name="Sheet1", header_row_index=2, barcode_column="SKU", quantity_column="Qty")
    assert extract_expected(grid, config) == {"W-1": 6, "100200": 2}


def test_extract_expected_skips_ragged_rows() -> None:
    """Rows too short to hold both mapped columns are skipped without error."""
    grid = [["Qty", "Name", "SKU"], [4, "Widget", "A"], [7], [], [1, "Gadget"]]
    assert extract_expected(grid, CONFIG) == {"A": 4}


def test_extract_expected_matches_header_labels_exactly() -> None:
    """Header matching is exact; case or whitespace variants do not match."""
    grid = [[" SKU", "qty"], ["A", 1]]
    with pytest.raises(DataError, match="Barcode column 'SKU' not found"):
        extract_expected(grid, CONFIG)


def test_extract_expected_uses_first_duplicate_header_label() -> None:
    """When a label repeats in the header row, the first occurrence wins."""
    grid = [["SKU", "Qty", "SKU", "Qty"], ["A", 1, "Z", 8]]
    assert extract_expected(grid, CONFIG) == {"A": 1}


def test_extract_expected_missing_quantity_column_fails_fast() -> None:
    """A header without the quantity label should raise before reading rows."""
    grid = [["SKU", "Count"], ["A", 1]]
    with pytest.raises(DataError, match="Quantity column 'Qty' not found in header row 0"):
        extract_expected(grid, CONFIG)


def test_extract_expected_header_row_out_of_range() -> None:
    """Header row indexes past the end of the grid are data errors."""
    config = SheetConfig(sheet_name="Sheet1", header_row_index=3, barcode_column="SKU", quantity_column="Qty")
    with pytest.raises(DataError, match="Header row 3 is out of range"):
        extract_expected([["SKU", "Qty"]], config)


@pytest.mark.parametrize(
    "config",
    [
        SheetConfig(sheet_name="S", header_row_index=None, barcode_column="SKU", quantity_column="Qty"),
        SheetConfig(sheet_name="S", header_row_index=0, barcode_column=None, quantity_column="Qty"),
        SheetConfig(sheet_name="S", header_row_index=0, barcode_column="SKU", quantity_column=""),
    ],
)
def test_extract_expected_requires_complete_config(config: SheetConfig) -> None:
    """Missing mapping fields are configuration errors, not data errors."""
    with pytest.raises(ConfigurationError, match="Sheet configuration is missing"):
        extract_expected([["SKU", "Qty"], ["A", 1]], config)


def test_validate_sheet_config_rejects_negative_or_non_integer_header_row() -> None:
    """Header row index must be a non-negative integer."""
    with pytest.raises(ConfigurationError, match=">= 0"):
        validate_sheet_config(SheetConfig("S", -1, "SKU", "Qty"))
    with pytest.raises(ConfigurationError, match="must be an integer"):
        validate_sheet_config(SheetConfig("S", "1", "SKU", "Qty"))  # type: ignore[arg-type]


def test_validate_sheet_config_can_require_sheet_name() -> None:
    """The full pipeline also needs the sheet name to be chosen."""
    config = SheetConfig(sheet_name=None, header_row_index=0, barcode_column="SKU", quantity_column="Qty")
    validate_sheet_config(config)
    with pytest.raises(ConfigurationError, match="sheet_name"):
        validate_sheet_config(config, require_sheet_name=True)


def test_validate_sheet_config_returns_checked_fields_and_rejects_non_text_labels() -> None:
    """Validated fields come back typed; non-string labels are configuration errors."""
    assert validate_sheet_config(SheetConfig("S", 0, "SKU", "Qty")) == (0, "SKU", "Qty")
    with pytest.raises(ConfigurationError, match="must be strings"):
        validate_sheet_config(SheetConfig("S", 0, "SKU", 2024))  # type: ignore[arg-type]


def test_resolve_column_index_returns_minus_one_when_absent() -> None:
    """Resolution reports absence with -1 rather than raising."""
    header = ["SKU", None, 2024, "Qty"]
    assert resolve_column_index(header, "Qty") == 3
    assert resolve_column_index(header, "2024") == 2
    assert resolve_column_index(header, "Barcode") == -1


def test_detect_duplicate_barcodes_reports_overridden_rows() -> None:
    """Duplicate supplier barcodes are surfaced with their rows and kept quantity."""
    grid = [["SKU", "Qty"], ["B", 1], ["A", 5], ["A", 9], ["C", 2], ["B", 4]]
    assert detect_duplicate_barcodes(grid, CONFIG) == [
        {"barcode": "A", "row_count": 2, "source_rows": [2, 3], "kept_quantity": 9},
        {"barcode": "B", "row_count": 2, "source_rows": [1, 5], "kept_quantity": 4},
    ]


def test_preview_grid_returns_leading_rows() -> None:
    """Previews expose the first rows and treat row 0 as the default headers."""
    grid = [[f"r{index}", index] for index in range(15)]
    preview = preview_grid(grid)
    assert len(preview.rows) == 10
    assert preview.headers == ["r0", 0]
    assert preview_grid([]).headers == []
