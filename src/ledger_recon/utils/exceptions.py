"""Custom exceptions for the reconciliation application."""


class ReconciliationError(Exception):
    """Base exception for reconciliation errors."""

    pass


class WorkbookParseError(ReconciliationError):
    """Error reading a bank/ledger workbook or table."""

    pass


class ColumnDetectionError(ReconciliationError):
    """Required columns could not be located in a sheet."""

    pass


class ConfigurationError(ReconciliationError):
    """Error in configuration."""

    pass


class ValidationError(ReconciliationError):
    """Structurally invalid input handed to the engine."""

    pass


class ReportGenerationError(ReconciliationError):
    """Error generating a reconciliation report."""

    pass
