"""
Record normalizer.
Converts raw tabular rows into canonical signed transactions.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional
import logging
import re

import pandas as pd

from ..config import ReconConfig
from ..models.transaction import Transaction, TransactionSide

logger = logging.getLogger(__name__)

_AMOUNT_STRIP_PATTERN = re.compile(r"[^0-9.\-+eE]")


@dataclass
class ColumnMapping:
    """Source column names for each transaction role."""

    date: Optional[str] = None
    amount: Optional[str] = None
    debit: Optional[str] = None
    credit: Optional[str] = None
    reference: Optional[str] = None
    check: Optional[str] = None

    @property
    def has_amount_source(self) -> bool:
        return bool(self.amount or self.debit or self.credit)


class RecordNormalizer:
    """
    Builds Transaction records from rows whose column roles are already known.

    Rows that cannot produce a non-zero amount are dropped. Rows with an
    unparseable date are kept with ``date=None`` so the engine can report them.
    """

    def __init__(self, config: Optional[ReconConfig] = None):
        self.config = config or ReconConfig()
        self.date_formats = list(self.config.input.date_formats)

    def normalize(
        self,
        rows: Iterable[Mapping[str, Any]],
        mapping: ColumnMapping,
        side: TransactionSide,
    ) -> list[Transaction]:
        """
        Normalize rows into transactions, preserving input order.

        Args:
            rows: Raw row mappings (header -> cell value)
            mapping: Column roles for these rows
            side: BANK or LEDGER

        Returns:
            List of normalized transactions
        """
        transactions: list[Transaction] = []
        dropped = 0

        for idx, row in enumerate(rows):
            amount = self._row_amount(row, mapping)
            if amount == 0:
                dropped += 1
                logger.debug(f"{side.value} row {idx}: zero or unparseable amount, dropped")
                continue

            prefix = side.value.upper()
            transactions.append(
                Transaction(
                    id=f"{prefix}-{idx + 1:05d}",
                    side=side,
                    date=self.parse_date(self._cell(row, mapping.date)),
                    amount=amount,
                    reference=self._text(self._cell(row, mapping.reference)),
                    check=self._text(self._cell(row, mapping.check)),
                    row_number=idx,
                    raw_data=dict(row),
                )
            )

        logger.info(
            f"Normalized {len(transactions)} {side.value} transactions "
            f"({dropped} zero-amount rows dropped)"
        )
        return transactions

    def normalize_frame(
        self, df: pd.DataFrame, mapping: ColumnMapping, side: TransactionSide
    ) -> list[Transaction]:
        """Normalize every row of a DataFrame."""
        return self.normalize(df.to_dict(orient="records"), mapping, side)

    def _row_amount(self, row: Mapping[str, Any], mapping: ColumnMapping) -> Decimal:
        if mapping.amount:
            return self.parse_amount(self._cell(row, mapping.amount)) or Decimal("0")

        debit = self.parse_amount(self._cell(row, mapping.debit)) or Decimal("0")
        credit = self.parse_amount(self._cell(row, mapping.credit)) or Decimal("0")

        # Debit positive / credit negative
        if debit != 0:
            return debit
        if credit != 0:
            return -credit
        return Decimal("0")

    @staticmethod
    def _cell(row: Mapping[str, Any], column: Optional[str]) -> Any:
        if not column:
            return None
        return row.get(column)

    @staticmethod
    def _text(value: Any) -> str:
        if value is None:
            return ""
        try:
            if pd.isna(value):
                return ""
        except (TypeError, ValueError):
            pass
        if isinstance(value, float) and value.is_integer():
            # Check numbers read from Excel arrive as floats
            return str(int(value))
        return str(value).strip()

    def parse_date(self, date_value: Any) -> Optional[date]:
        """
        Parse a date value from a cell.

        Args:
            date_value: Date value (string, date, datetime or Timestamp)

        Returns:
            Calendar date (time of day dropped) or None
        """
        if date_value is None:
            return None
        try:
            if pd.isna(date_value):
                return None
        except (TypeError, ValueError):
            pass

        if isinstance(date_value, datetime):
            return date_value.date()
        if isinstance(date_value, date):
            return date_value

        text = str(date_value).strip()
        if not text:
            return None

        for fmt in self.date_formats:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue

        # Try pandas parser as fallback
        parsed = pd.to_datetime(text, errors="coerce")
        if pd.isna(parsed):
            return None
        return parsed.date()

    @staticmethod
    def parse_amount(amount_value: Any) -> Optional[Decimal]:
        """
        Parse an amount value from a cell.

        Args:
            amount_value: Amount value (string, number, or None)

        Returns:
            Decimal amount or None
        """
        if amount_value is None or isinstance(amount_value, bool):
            return None
        try:
            if pd.isna(amount_value):
                return None
        except (TypeError, ValueError):
            return None

        negative = False
        if isinstance(amount_value, (int, float, Decimal)):
            value = Decimal(str(amount_value))
        else:
            text = str(amount_value).strip()
            if not text:
                return None

            negative = text.startswith("(") and text.endswith(")")
            # Remove any currency symbols, separators and brackets
            cleaned = _AMOUNT_STRIP_PATTERN.sub("", text)

            try:
                value = Decimal(cleaned)
            except (InvalidOperation, ValueError):
                return None
        if not value.is_finite():
            return None
        return -value if negative else value
