"""Source loading, column detection and record normalization."""

from .normalizer import ColumnMapping, RecordNormalizer
from .column_detector import ColumnDetector, ColumnMapper
from .workbook_parser import LoadedTransactions, SourceData, WorkbookParser

__all__ = [
    "ColumnMapping",
    "RecordNormalizer",
    "ColumnDetector",
    "ColumnMapper",
    "LoadedTransactions",
    "SourceData",
    "WorkbookParser",
]
