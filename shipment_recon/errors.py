"""Exception hierarchy raised by the reconciliation engine."""

from __future__ import annotations


class ReconciliationError(ValueError):
    """Base class for every precondition failure raised by the engine."""


class ConfigurationError(ReconciliationError):
    """Sheet configuration is missing fields or holds invalid values."""


class DataError(ReconciliationError):
    """Supplied sheet data disagrees with the configured layout."""


class ValidationError(ReconciliationError):
    """Scan input is malformed or absent."""
