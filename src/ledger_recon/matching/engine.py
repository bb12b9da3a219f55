"""
Reconciliation engine for bank statement vs general ledger matching.
Greedy, order-dependent matching: bank transactions are processed in input
order and a matched ledger entry is unavailable to every later bank entry.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence, Union
import logging

from ..config import ReconConfig
from ..models.transaction import (
    Confidence,
    MatchResult,
    MatchStatus,
    ReconciliationReport,
    ReconciliationSummary,
    Transaction,
)
from ..utils.exceptions import ReconciliationError, ValidationError
from .filters import CandidateFilter
from .tiebreak import TieBreakResolver

logger = logging.getLogger(__name__)

INVALID_REASON = "Invalid date or zero amount"
NO_CANDIDATE_REASON = "No matching ledger entry found."
LEDGER_LEFTOVER_REASON = "No matching bank entry found."


class ConsumedLedger:
    """
    Consumption state over ledger positions for a single run.

    Created fresh by each reconcile() call and discarded afterwards.
    """

    def __init__(self, size: int):
        self._consumed = [False] * size

    def __len__(self) -> int:
        return len(self._consumed)

    def is_consumed(self, index: int) -> bool:
        return self._consumed[index]

    def mark(self, index: int) -> None:
        if self._consumed[index]:
            raise ReconciliationError(f"Ledger entry {index} already consumed")
        self._consumed[index] = True

    def unconsumed_indices(self) -> list[int]:
        return [i for i, used in enumerate(self._consumed) if not used]

    @property
    def count(self) -> int:
        return sum(self._consumed)


class ReconciliationEngine:
    """
    Main reconciliation engine that classifies every bank and ledger transaction.

    Each bank transaction ends in exactly one of INVALID, BANK_UNRECONCILED,
    MATCHED or AMBIGUOUS; leftover ledger transactions become
    LEDGER_UNRECONCILED.
    """

    def __init__(
        self,
        config: Optional[ReconConfig] = None,
        date_tolerance_days: Optional[int] = None,
        amount_tolerance: Optional[Union[Decimal, int, float, str]] = None,
    ):
        """
        Initialize the reconciliation engine.

        Args:
            config: Application configuration
            date_tolerance_days: Override for config.matching.date_tolerance_days
            amount_tolerance: Override for config.matching.amount_tolerance
        """
        self.config = config or ReconConfig()
        matching = self.config.matching

        if date_tolerance_days is None:
            date_tolerance_days = matching.date_tolerance_days
        if amount_tolerance is None:
            amount_tolerance = matching.amount_tolerance

        self.candidate_filter = CandidateFilter(
            date_tolerance_days=date_tolerance_days,
            amount_tolerance=amount_tolerance,
        )
        self.resolver = TieBreakResolver()

    @property
    def date_tolerance_days(self) -> int:
        return self.candidate_filter.date_tolerance_days

    @property
    def amount_tolerance(self) -> Decimal:
        return self.candidate_filter.amount_tolerance

    def reconcile(
        self,
        bank_transactions: Sequence[Transaction],
        ledger_transactions: Sequence[Transaction],
        bank_source: str = "",
        ledger_source: str = "",
    ) -> ReconciliationReport:
        """
        Perform reconciliation between bank and ledger transactions.

        Args:
            bank_transactions: Normalized bank transactions in statement order
            ledger_transactions: Normalized ledger transactions in ledger order
            bank_source: Name of the bank source for the summary
            ledger_source: Name of the ledger source for the summary

        Returns:
            ReconciliationReport with bank-driven results first, then
            leftover ledger results

        Raises:
            ValidationError: If either transaction list is missing
        """
        if bank_transactions is None or ledger_transactions is None:
            raise ValidationError("Bank and ledger transaction lists are required")

        start_time = datetime.now()
        logger.info(
            f"Starting reconciliation: {len(bank_transactions)} bank txns, "
            f"{len(ledger_transactions)} ledger txns "
            f"(date tolerance {self.date_tolerance_days}d, "
            f"amount tolerance {self.amount_tolerance})"
        )

        consumed = ConsumedLedger(len(ledger_transactions))
        results: list[MatchResult] = []

        for bank_txn in bank_transactions:
            result = self._classify_bank(bank_txn, ledger_transactions, consumed)
            logger.debug(f"{bank_txn.id}: {result.status.value} - {result.reason}")
            results.append(result)

        unconsumed = [ledger_transactions[i] for i in consumed.unconsumed_indices()]
        for ledger_txn in unconsumed:
            results.append(
                MatchResult(
                    status=MatchStatus.LEDGER_UNRECONCILED,
                    bank_transaction=None,
                    ledger_transaction=ledger_txn,
                    confidence=Confidence.NOT_APPLICABLE,
                    reason=LEDGER_LEFTOVER_REASON,
                )
            )

        elapsed = (datetime.now() - start_time).total_seconds()
        summary = self.generate_summary(
            bank_transactions=bank_transactions,
            ledger_transactions=ledger_transactions,
            results=results,
            bank_source=bank_source,
            ledger_source=ledger_source,
            processing_time=elapsed,
        )

        logger.info(
            f"Reconciliation complete in {elapsed:.2f}s: {summary.matched_count} matched, "
            f"{summary.ambiguous_count} ambiguous, "
            f"{summary.bank_unreconciled_count} bank-unreconciled, "
            f"{summary.ledger_unreconciled_count} ledger-unreconciled, "
            f"{summary.invalid_count} invalid"
        )

        return ReconciliationReport(
            results=results, summary=summary, unconsumed_ledger=unconsumed
        )

    def _classify_bank(
        self,
        bank_txn: Transaction,
        ledger_transactions: Sequence[Transaction],
        consumed: ConsumedLedger,
    ) -> MatchResult:
        """
        Classify one bank transaction, consuming its ledger match if any.

        Args:
            bank_txn: Bank transaction to classify
            ledger_transactions: Full ledger list
            consumed: Consumption state for this run

        Returns:
            Match result for the bank transaction
        """
        if not bank_txn.is_valid:
            return MatchResult(
                status=MatchStatus.INVALID,
                bank_transaction=bank_txn,
                confidence=Confidence.NOT_APPLICABLE,
                reason=INVALID_REASON,
            )

        candidates = self.candidate_filter.find_candidates(
            bank_txn, ledger_transactions, consumed
        )

        if not candidates:
            return MatchResult(
                status=MatchStatus.BANK_UNRECONCILED,
                bank_transaction=bank_txn,
                confidence=Confidence.NOT_APPLICABLE,
                reason=NO_CANDIDATE_REASON,
            )

        resolution = self.resolver.resolve(candidates)

        if resolution.is_match:
            chosen = resolution.candidate
            consumed.mark(chosen.ledger_index)
            return MatchResult(
                status=MatchStatus.MATCHED,
                bank_transaction=bank_txn,
                ledger_transaction=chosen.transaction,
                confidence=resolution.confidence,
                reason=resolution.reason,
                date_diff=chosen.date_diff,
                amount_diff=chosen.amount_diff,
                check_match=chosen.check_match,
            )

        # Tied ledger entries stay unconsumed and eligible for later bank entries
        return MatchResult(
            status=MatchStatus.AMBIGUOUS,
            bank_transaction=bank_txn,
            confidence=resolution.confidence,
            reason=resolution.reason,
            candidates=[c.transaction for c in resolution.tied],
            date_diff=resolution.tied[0].date_diff,
        )

    def generate_summary(
        self,
        bank_transactions: Sequence[Transaction],
        ledger_transactions: Sequence[Transaction],
        results: list[MatchResult],
        bank_source: str = "",
        ledger_source: str = "",
        processing_time: float = 0.0,
    ) -> ReconciliationSummary:
        """
        Generate a summary of the reconciliation results.

        Args:
            bank_transactions: All bank transactions
            ledger_transactions: All ledger transactions
            results: Ordered match results
            bank_source: Name of the bank source
            ledger_source: Name of the ledger source
            processing_time: Time taken in seconds

        Returns:
            Reconciliation summary object
        """
        counts = {status: 0 for status in MatchStatus}
        confidence_counts: dict[str, int] = {}

        for result in results:
            counts[result.status] += 1
            if result.status is MatchStatus.MATCHED:
                key = result.confidence.value
                confidence_counts[key] = confidence_counts.get(key, 0) + 1

        return ReconciliationSummary(
            total_bank_transactions=len(bank_transactions),
            total_ledger_transactions=len(ledger_transactions),
            matched_count=counts[MatchStatus.MATCHED],
            bank_unreconciled_count=counts[MatchStatus.BANK_UNRECONCILED],
            ledger_unreconciled_count=counts[MatchStatus.LEDGER_UNRECONCILED],
            ambiguous_count=counts[MatchStatus.AMBIGUOUS],
            invalid_count=counts[MatchStatus.INVALID],
            matches_by_confidence=confidence_counts,
            date_tolerance_days=self.date_tolerance_days,
            amount_tolerance=self.amount_tolerance,
            bank_source=bank_source,
            ledger_source=ledger_source,
            reconciliation_date=datetime.now(),
            processing_time_seconds=processing_time,
            config_file_used=self.config.config_file_path,
        )
