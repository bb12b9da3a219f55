"""
Pytest configuration and fixtures.
"""
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Callable, Optional
import logging

import pandas as pd
import pytest

from ledger_recon.config import ReconConfig
from ledger_recon.models.transaction import Transaction, TransactionSide


TxnFactory = Callable[..., Transaction]


def _make(side: TransactionSide) -> TxnFactory:
    counter = {"n": 0}

    def factory(
        txn_date: Optional[object],
        amount,
        check: str = "",
        reference: str = "",
    ) -> Transaction:
        counter["n"] += 1
        if isinstance(txn_date, str):
            txn_date = date.fromisoformat(txn_date)
        return Transaction(
            id=f"{side.value.upper()}-{counter['n']:05d}",
            side=side,
            date=txn_date,
            amount=Decimal(str(amount)),
            reference=reference,
            check=check,
            row_number=counter["n"] - 1,
        )

    return factory


@pytest.fixture
def bank_txn() -> TxnFactory:
    """Factory for bank transactions: bank_txn("2024-01-10", 100)."""
    return _make(TransactionSide.BANK)


@pytest.fixture
def ledger_txn() -> TxnFactory:
    """Factory for ledger transactions: ledger_txn("2024-01-10", 100)."""
    return _make(TransactionSide.LEDGER)


@pytest.fixture
def config() -> ReconConfig:
    """Default configuration."""
    return ReconConfig()


@pytest.fixture
def sample_workbook(tmp_path: Path) -> Path:
    """Workbook with a Bank sheet (amount column) and a Ledger sheet (debit/credit)."""
    bank = pd.DataFrame(
        {
            "Txn Date": ["2024-01-10", "2024-01-15", "2024-01-20", "not-a-date"],
            "Description": ["Supplier payment", "Customer receipt", "Bank fee", "Broken row"],
            "Amount": [100.0, -250.0, 12.5, 40.0],
            "Cheque No": ["1001", "", "", ""],
        }
    )
    ledger = pd.DataFrame(
        {
            "Posting Date": ["2024-01-11", "2024-01-15", "2024-02-28", "2024-01-05"],
            "Narration": ["Pay supplier", "Receipt INV-7", "Accrual", "Zero line"],
            "Debit": [100.0, 0.0, 75.0, 0.0],
            "Credit": [0.0, 250.0, 0.0, 0.0],
            "Cheque No": ["1001", "", "", ""],
        }
    )
    path = tmp_path / "recon.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        ledger.to_excel(writer, sheet_name="GL Ledger", index=False)
        bank.to_excel(writer, sheet_name="Bank Statement", index=False)
    return path


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Drop handlers installed by CLI runs so later tests don't log to closed streams."""
    yield
    logger = logging.getLogger("ledger_recon")
    logger.handlers = []
    logger.setLevel(logging.NOTSET)
