"""Matching engine, candidate filter and tie-break rules."""

from .engine import ConsumedLedger, ReconciliationEngine
from .filters import CandidateFilter, date_diff_days, is_check_match
from .tiebreak import Resolution, TieBreakResolver

__all__ = [
    "ConsumedLedger",
    "ReconciliationEngine",
    "CandidateFilter",
    "date_diff_days",
    "is_check_match",
    "Resolution",
    "TieBreakResolver",
]
