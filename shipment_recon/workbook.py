"""Workbook decoding: turns uploaded `.xlsx` files into raw sheet grids."""

from __future__ import annotations

import logging
from io import BytesIO
from zipfile import BadZipFile
from pathlib import Path
from typing import IO, TypeAlias

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook.workbook import Workbook

from .errors import DataError
from .extract import DEFAULT_PREVIEW_ROWS, preview_grid
from .models import CellValue, SheetPreview

logger = logging.getLogger(__name__)

WorkbookSource: TypeAlias = str | Path | bytes | IO[bytes]


def _open_workbook(source: WorkbookSource) -> Workbook:
    """Open a workbook from a path, raw bytes or a binary file object."""

    label = str(source)
    if isinstance(source, (bytes, bytearray)):
        label = "uploaded workbook"
        source = BytesIO(source)
    try:
        # data_only returns cached formula results instead of formula text.
        return load_workbook(source, read_only=True, data_only=True)
    except FileNotFoundError as exc:
        raise DataError(f"Workbook not found: {label}") from exc
    except (InvalidFileException, BadZipFile, KeyError) as exc:
        raise DataError(f"{label} is not a readable .xlsx workbook: {exc}") from exc


def list_sheet_names(source: WorkbookSource) -> list[str]:
    """Return sheet names in workbook order."""

    workbook = _open_workbook(source)
    try:
        return list(workbook.sheetnames)
    finally:
        workbook.close()


def read_sheet_grid(source: WorkbookSource, sheet: str | int) -> list[list[CellValue]]:
    """Read one sheet as a list of rows, row 0 being the first physical row.

    `sheet` is a sheet name or a 0-based sheet position.
    """

    workbook = _open_workbook(source)
    try:
        names = workbook.sheetnames
        if isinstance(sheet, int) and not isinstance(sheet, bool):
            if not 0 <= sheet < len(names):
                raise DataError(f"Sheet index {sheet} is out of range; workbook has {len(names)} sheets")
            sheet_name = names[sheet]
        else:
            sheet_name = sheet
            if sheet_name not in names:
                raise DataError(f"Sheet {sheet_name!r} not found; available sheets: {', '.join(names)}")

        worksheet = workbook[sheet_name]
        grid = [list(row) for row in worksheet.iter_rows(min_row=1, min_col=1, values_only=True)]
    finally:
        workbook.close()

    logger.debug("Read %d rows from sheet %r", len(grid), sheet_name)
    return grid


def preview_sheet(source: WorkbookSource, sheet: str | int, *, limit: int = DEFAULT_PREVIEW_ROWS) -> SheetPreview:
    """Return the leading rows of a sheet for header-row selection."""

    return preview_grid(read_sheet_grid(source, sheet), limit=limit)
