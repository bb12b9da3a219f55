"""Data models for reconciliation transactions and results."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from ..utils.exceptions import ValidationError


class TransactionSide(Enum):
    """Collection a transaction was loaded from."""

    BANK = "bank"
    LEDGER = "ledger"


class TransactionType(Enum):
    """Direction of a transaction, derived from the sign of its amount."""

    DEBIT = "debit"  # amount >= 0
    CREDIT = "credit"  # amount < 0


class MatchStatus(Enum):
    """Closed set of classification outcomes."""

    MATCHED = "MATCHED"
    AMBIGUOUS = "AMBIGUOUS"
    BANK_UNRECONCILED = "BANK_UNRECONCILED"
    LEDGER_UNRECONCILED = "LEDGER_UNRECONCILED"
    INVALID = "INVALID"


class Confidence(Enum):
    """Strength of the evidence behind a classification."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    REVIEW_REQUIRED = "REVIEW_REQUIRED"
    NOT_APPLICABLE = "N/A"


@dataclass(frozen=True)
class Transaction:
    """
    Canonical transaction produced by the normalizer.

    Instances are immutable. The debit/credit type is never stored; it is
    always read from the sign of ``amount``.
    """

    # Unique identifier within a run (e.g. "BANK-00003")
    id: str

    side: TransactionSide

    # None when the source date could not be parsed
    date: Optional[date]

    # Signed amount: non-negative is a debit, negative is a credit
    amount: Decimal

    # Display-only description
    reference: str = ""

    # Check / document number, "" when absent
    check: str = ""

    # Position of the row in its source sheet
    row_number: int = 0

    # Original row for the audit trail
    raw_data: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self) -> None:
        # Time of day never takes part in date comparison
        if isinstance(self.date, datetime):
            object.__setattr__(self, "date", self.date.date())
        if self.check is None:
            object.__setattr__(self, "check", "")
        elif not isinstance(self.check, str):
            object.__setattr__(self, "check", str(self.check))
        if self.reference is None:
            object.__setattr__(self, "reference", "")
        elif not isinstance(self.reference, str):
            object.__setattr__(self, "reference", str(self.reference))
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))

    @property
    def type(self) -> TransactionType:
        return TransactionType.DEBIT if self.amount >= 0 else TransactionType.CREDIT

    @property
    def abs_amount(self) -> Decimal:
        return abs(self.amount)

    @property
    def has_check(self) -> bool:
        return bool(self.check.strip())

    @property
    def is_valid(self) -> bool:
        """A transaction can be matched only with a date and a non-zero amount."""
        return self.date is not None and self.amount != 0


@dataclass(frozen=True)
class MatchCandidate:
    """A ledger transaction that passed the candidate filter for one bank transaction."""

    ledger_index: int
    transaction: Transaction
    date_diff: int
    amount_diff: Decimal
    check_match: bool = False


@dataclass
class MatchResult:
    """Classification of a single bank or leftover ledger transaction."""

    status: MatchStatus
    bank_transaction: Optional[Transaction]
    ledger_transaction: Optional[Transaction] = None
    confidence: Confidence = Confidence.NOT_APPLICABLE
    reason: str = ""

    # Tied ledger transactions kept for manual review (AMBIGUOUS only)
    candidates: list[Transaction] = field(default_factory=list)

    date_diff: Optional[int] = None
    amount_diff: Optional[Decimal] = None
    check_match: bool = False

    def __post_init__(self) -> None:
        if self.status is MatchStatus.LEDGER_UNRECONCILED:
            if self.ledger_transaction is None:
                raise ValidationError("LEDGER_UNRECONCILED result requires a ledger transaction")
        elif self.bank_transaction is None:
            raise ValidationError(f"{self.status.value} result requires a bank transaction")

        if self.status is MatchStatus.MATCHED and self.ledger_transaction is None:
            raise ValidationError("MATCHED result requires a ledger transaction")

    @property
    def is_matched(self) -> bool:
        return self.status is MatchStatus.MATCHED


@dataclass
class ReconciliationSummary:
    """Counts and metadata for one reconciliation run."""

    total_bank_transactions: int
    total_ledger_transactions: int

    matched_count: int
    bank_unreconciled_count: int
    ledger_unreconciled_count: int
    ambiguous_count: int
    invalid_count: int

    matches_by_confidence: dict[str, int] = field(default_factory=dict)

    date_tolerance_days: int = 3
    amount_tolerance: Decimal = Decimal("0")

    bank_source: str = ""
    ledger_source: str = ""
    reconciliation_date: datetime = field(default_factory=datetime.now)
    processing_time_seconds: float = 0.0
    config_file_used: Optional[str] = None

    @property
    def match_rate_bank(self) -> float:
        """Percentage of bank transactions matched."""
        if self.total_bank_transactions == 0:
            return 0.0
        return (self.matched_count / self.total_bank_transactions) * 100

    @property
    def match_rate_ledger(self) -> float:
        """Percentage of ledger transactions matched."""
        if self.total_ledger_transactions == 0:
            return 0.0
        return (self.matched_count / self.total_ledger_transactions) * 100

    def as_dict(self) -> dict[str, Any]:
        return {
            "matched": self.matched_count,
            "bankUnreconciled": self.bank_unreconciled_count,
            "ledgerUnreconciled": self.ledger_unreconciled_count,
            "ambiguous": self.ambiguous_count,
            "invalid": self.invalid_count,
            "totalBank": self.total_bank_transactions,
            "totalLedger": self.total_ledger_transactions,
        }


@dataclass
class ReconciliationReport:
    """Ordered results of a run plus its summary."""

    results: list[MatchResult]
    summary: ReconciliationSummary
    unconsumed_ledger: list[Transaction] = field(default_factory=list)

    def by_status(self, status: MatchStatus) -> list[MatchResult]:
        return [r for r in self.results if r.status is status]

    @property
    def matched(self) -> list[MatchResult]:
        return self.by_status(MatchStatus.MATCHED)

    @property
    def ambiguous(self) -> list[MatchResult]:
        return self.by_status(MatchStatus.AMBIGUOUS)
