"""
Bank and ledger source loading.
Reads Excel workbooks or CSV tables and turns them into normalized transactions.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging

import pandas as pd

from ..config import ReconConfig
from ..models.transaction import Transaction, TransactionSide
from ..utils.exceptions import WorkbookParseError
from .column_detector import ColumnDetector, ColumnMapper
from .normalizer import ColumnMapping, RecordNormalizer

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}


@dataclass
class SourceData:
    """Raw bank and ledger tables with the names they were read from."""

    bank_frame: pd.DataFrame
    ledger_frame: pd.DataFrame
    bank_source: str
    ledger_source: str


@dataclass
class LoadedTransactions:
    """Normalized transactions for one side plus the mapping used to build them."""

    transactions: list[Transaction]
    mapping: ColumnMapping
    row_count: int


class WorkbookParser:
    """
    Loader for reconciliation sources.

    A single workbook must contain a bank sheet and a ledger sheet. Sheets are
    picked by keyword in their name, falling back to the first and second sheet.
    """

    def __init__(
        self,
        config: Optional[ReconConfig] = None,
        column_mapper: Optional[ColumnMapper] = None,
    ):
        """
        Initialize the parser with configuration.

        Args:
            config: Application configuration object
            column_mapper: Header -> ColumnMapping function, defaults to ColumnDetector
        """
        self.config = config or ReconConfig()
        self.column_mapper: ColumnMapper = column_mapper or ColumnDetector(self.config)
        self.normalizer = RecordNormalizer(self.config)

    def parse_file(self, file_path: Path) -> SourceData:
        """
        Read a workbook holding both bank and ledger sheets.

        Args:
            file_path: Path to the Excel workbook

        Returns:
            SourceData with both sheets

        Raises:
            WorkbookParseError: If the workbook cannot be read or has fewer than two sheets
        """
        logger.info(f"Parsing workbook: {file_path}")

        try:
            sheets: dict[str, pd.DataFrame] = pd.read_excel(file_path, sheet_name=None)
        except Exception as e:
            logger.error(f"Failed to read workbook: {e}")
            raise WorkbookParseError(f"Failed to read workbook {file_path}: {e}") from e

        names = list(sheets.keys())
        if len(names) < 2:
            raise WorkbookParseError("Workbook must contain Bank and Ledger sheets")

        bank_sheet, ledger_sheet = self.select_sheets(names)
        logger.info(f"Using bank sheet '{bank_sheet}' and ledger sheet '{ledger_sheet}'")

        return SourceData(
            bank_frame=sheets[bank_sheet],
            ledger_frame=sheets[ledger_sheet],
            bank_source=f"{Path(file_path).name}:{bank_sheet}",
            ledger_source=f"{Path(file_path).name}:{ledger_sheet}",
        )

    def parse_pair(self, bank_path: Path, ledger_path: Path) -> SourceData:
        """Read bank and ledger tables from two separate files."""
        return SourceData(
            bank_frame=self.read_table(bank_path),
            ledger_frame=self.read_table(ledger_path),
            bank_source=Path(bank_path).name,
            ledger_source=Path(ledger_path).name,
        )

    def select_sheets(self, names: list[str]) -> tuple[str, str]:
        """
        Choose the bank and ledger sheet names.

        Args:
            names: Sheet names in workbook order

        Returns:
            Tuple of (bank_sheet, ledger_sheet)
        """
        bank_keyword = self.config.input.bank_sheet_keyword.lower()
        ledger_keyword = self.config.input.ledger_sheet_keyword.lower()

        bank_sheet = next((n for n in names if bank_keyword in n.lower()), names[0])
        ledger_sheet = next((n for n in names if ledger_keyword in n.lower()), names[1])
        return bank_sheet, ledger_sheet

    def read_table(self, file_path: Path) -> pd.DataFrame:
        """
        Read a single CSV or Excel table.

        Args:
            file_path: Path to the file

        Returns:
            DataFrame with the file contents

        Raises:
            WorkbookParseError: If the file cannot be read
        """
        file_path = Path(file_path)
        logger.info(f"Reading table: {file_path}")

        try:
            if file_path.suffix.lower() in EXCEL_SUFFIXES:
                return pd.read_excel(file_path)
            return pd.read_csv(
                file_path,
                encoding=self.config.input.encoding,
                delimiter=self.config.input.delimiter,
            )
        except Exception as e:
            logger.error(f"Failed to read table: {e}")
            raise WorkbookParseError(f"Failed to read {file_path}: {e}") from e

    def load_transactions(
        self, frame: pd.DataFrame, side: TransactionSide
    ) -> LoadedTransactions:
        """
        Detect columns and normalize a table into transactions.

        Args:
            frame: Raw table
            side: BANK or LEDGER

        Returns:
            LoadedTransactions for the side

        Raises:
            ColumnDetectionError: If required columns are missing
        """
        mapping = self.column_mapper([str(c) for c in frame.columns])
        frame = frame.rename(columns=str)
        transactions = self.normalizer.normalize_frame(frame, mapping, side)
        return LoadedTransactions(
            transactions=transactions, mapping=mapping, row_count=len(frame)
        )
