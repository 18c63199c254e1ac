"""Loading sheet configuration from YAML/JSON files and plain mappings."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError
from .models import SheetConfig
from .normalize import stringify_cell

_LABEL_FIELDS = ("barcode_column", "quantity_column")

# Accepted spellings for each field; camelCase matches saved browser state.
_FIELD_ALIASES = {
    "sheet_name": ("sheet_name", "sheetName", "sheet"),
    "header_row_index": ("header_row_index", "headerRowIndex", "headerRow", "header_row"),
    "barcode_column": ("barcode_column", "barcodeColumn", "barcodeColumnLabel"),
    "quantity_column": ("quantity_column", "quantityColumn", "quantityColumnLabel"),
}


def sheet_config_from_mapping(data: Any) -> SheetConfig:
    """Build a `SheetConfig` from a mapping, ignoring unknown keys."""

    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Sheet configuration must be a mapping, got {type(data).__name__}")

    values: dict[str, Any] = {}
    for field_name, aliases in _FIELD_ALIASES.items():
        for alias in aliases:
            if alias in data:
                values[field_name] = data[alias]
                break
    for field_name in _LABEL_FIELDS:
        # Labels match header cells after stringification, so they are stored as text.
        if values.get(field_name) is not None:
            values[field_name] = stringify_cell(values[field_name])
    return SheetConfig(**values)


def load_sheet_config(path: str | Path) -> SheetConfig:
    """Read a sheet configuration file."""

    config_path = Path(path)
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Sheet configuration file not found: {config_path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Sheet configuration file {config_path} is not valid YAML: {exc}") from exc

    return sheet_config_from_mapping(data or {})


def merge_overrides(config: SheetConfig, **overrides: Any) -> SheetConfig:
    """Return a new config with every non-None override applied."""

    changes = {name: value for name, value in overrides.items() if value is not None}
    return dataclasses.replace(config, **changes)
