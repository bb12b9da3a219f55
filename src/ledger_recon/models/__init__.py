"""Data models for reconciliation."""

from .transaction import (
    Confidence,
    MatchCandidate,
    MatchResult,
    MatchStatus,
    ReconciliationReport,
    ReconciliationSummary,
    Transaction,
    TransactionSide,
    TransactionType,
)

__all__ = [
    "Confidence",
    "MatchCandidate",
    "MatchResult",
    "MatchStatus",
    "ReconciliationReport",
    "ReconciliationSummary",
    "Transaction",
    "TransactionSide",
    "TransactionType",
]
