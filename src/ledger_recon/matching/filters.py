"""
Candidate filtering.
Narrows the ledger pool to entries compatible with one bank transaction.
"""

from datetime import date
from decimal import Decimal
from typing import Protocol, Sequence, Union

from ..models.transaction import MatchCandidate, Transaction
from ..utils.exceptions import ConfigurationError


class ConsumedView(Protocol):
    def is_consumed(self, index: int) -> bool: ...


def date_diff_days(first: date, second: date) -> int:
    """Absolute difference between two calendar dates in whole days."""
    return abs((first - second).days)


def is_check_match(bank_txn: Transaction, ledger_txn: Transaction) -> bool:
    """Both check numbers present and identical."""
    return (
        bank_txn.has_check
        and ledger_txn.has_check
        and bank_txn.check.strip() == ledger_txn.check.strip()
    )


class CandidateFilter:
    """
    Filters ledger transactions by consumption, type, amount and date tolerance.
    """

    def __init__(
        self,
        date_tolerance_days: int = 3,
        amount_tolerance: Union[Decimal, int, float, str] = Decimal("0"),
    ):
        """
        Initialize with tolerances.

        Args:
            date_tolerance_days: Maximum days difference allowed
            amount_tolerance: Maximum absolute amount difference (0 = exact)
        """
        amount_tolerance = Decimal(str(amount_tolerance))
        if date_tolerance_days < 0:
            raise ConfigurationError("date tolerance must be non-negative")
        if amount_tolerance < 0:
            raise ConfigurationError("amount tolerance must be non-negative")

        self.date_tolerance_days = int(date_tolerance_days)
        self.amount_tolerance = amount_tolerance

    def find_candidates(
        self,
        bank_txn: Transaction,
        ledger: Sequence[Transaction],
        consumed: ConsumedView,
    ) -> list[MatchCandidate]:
        """
        Find ledger transactions that could match a bank transaction.

        Args:
            bank_txn: Valid bank transaction (dated, non-zero)
            ledger: Full ledger list, indexed by position
            consumed: Consumption state for this run

        Returns:
            Candidates in ledger order
        """
        candidates: list[MatchCandidate] = []

        for index, ledger_txn in enumerate(ledger):
            if consumed.is_consumed(index):
                continue

            # Only match with same transaction type
            if ledger_txn.type is not bank_txn.type:
                continue

            # Undated ledger entries can never be placed within tolerance
            if ledger_txn.date is None:
                continue

            amount_diff = abs(bank_txn.abs_amount - ledger_txn.abs_amount)
            if amount_diff > self.amount_tolerance:
                continue

            date_diff = date_diff_days(bank_txn.date, ledger_txn.date)
            if date_diff > self.date_tolerance_days:
                continue

            candidates.append(
                MatchCandidate(
                    ledger_index=index,
                    transaction=ledger_txn,
                    date_diff=date_diff,
                    amount_diff=amount_diff,
                    check_match=is_check_match(bank_txn, ledger_txn),
                )
            )

        return candidates
