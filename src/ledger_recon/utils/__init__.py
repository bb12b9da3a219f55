"""Utility modules."""

from .exceptions import (
    ReconciliationError,
    WorkbookParseError,
    ColumnDetectionError,
    ConfigurationError,
    ValidationError,
    ReportGenerationError,
)
from .logging_config import setup_logging

__all__ = [
    "ReconciliationError",
    "WorkbookParseError",
    "ColumnDetectionError",
    "ConfigurationError",
    "ValidationError",
    "ReportGenerationError",
    "setup_logging",
]
