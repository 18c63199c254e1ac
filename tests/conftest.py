"""Pytest configuration for local package import resolution and workbook fixtures."""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    # Ensure tests can import `shipment_recon` without package installation.
    sys.path.insert(0, project_root_str)

from openpyxl import Workbook  # noqa: E402

WorkbookFactory = Callable[..., Path]


@pytest.fixture
def make_workbook(tmp_path: Path) -> WorkbookFactory:
    """Return a factory that writes `{sheet_name: rows}` into an .xlsx file."""

    def _make(sheets: dict[str, Sequence[Sequence[Any]]], *, name: str = "supplier.xlsx") -> Path:
        workbook = Workbook()
        workbook.remove(workbook.active)
        for sheet_name, rows in sheets.items():
            worksheet = workbook.create_sheet(title=sheet_name)
            for row in rows:
                worksheet.append(list(row))
        path = tmp_path / name
        workbook.save(path)
        return path

    return _make
