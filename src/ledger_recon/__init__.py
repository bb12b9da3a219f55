"""Bank statement vs general ledger reconciliation."""

from .config import ReconConfig, load_config
from .matching.engine import ReconciliationEngine
from .models.transaction import (
    Confidence,
    MatchResult,
    MatchStatus,
    ReconciliationReport,
    Transaction,
    TransactionSide,
    TransactionType,
)

__version__ = "0.1.0"

__all__ = [
    "ReconConfig",
    "load_config",
    "ReconciliationEngine",
    "Confidence",
    "MatchResult",
    "MatchStatus",
    "ReconciliationReport",
    "Transaction",
    "TransactionSide",
    "TransactionType",
    "__version__",
]
