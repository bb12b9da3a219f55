"""
Unit tests for candidate filtering.
"""
from datetime import date
from decimal import Decimal

import pytest

from ledger_recon.matching.engine import ConsumedLedger
from ledger_recon.matching.filters import CandidateFilter, date_diff_days, is_check_match
from ledger_recon.utils.exceptions import ConfigurationError


class TestCandidateFilter:
    """Tests for CandidateFilter."""

    def test_exact_amount_within_date_tolerance(self, bank_txn, ledger_txn):
        """Ledger entries within three days with the same amount are candidates."""
        ledger = [
            ledger_txn("2024-01-12", 100),
            ledger_txn("2024-01-14", 100),
            ledger_txn("2024-01-10", 101),
        ]
        candidates = CandidateFilter().find_candidates(
            bank_txn("2024-01-10", 100), ledger, ConsumedLedger(len(ledger))
        )

        assert [c.ledger_index for c in candidates] == [0]
        assert candidates[0].date_diff == 2
        assert candidates[0].amount_diff == Decimal("0")

    def test_type_must_match(self, bank_txn, ledger_txn):
        """A debit never matches a credit of the same magnitude."""
        ledger = [ledger_txn("2024-01-10", -100)]
        candidates = CandidateFilter().find_candidates(
            bank_txn("2024-01-10", 100), ledger, ConsumedLedger(1)
        )

        assert candidates == []

    def test_credit_matches_credit(self, bank_txn, ledger_txn):
        """Credits compare on absolute amounts."""
        ledger = [ledger_txn("2024-01-10", -100)]
        candidates = CandidateFilter().find_candidates(
            bank_txn("2024-01-10", -100), ledger, ConsumedLedger(1)
        )

        assert len(candidates) == 1

    def test_amount_tolerance_is_symmetric(self, bank_txn, ledger_txn):
        """Ledger amounts above or below the bank amount are limited by tolerance."""
        ledger = [
            ledger_txn("2024-01-10", "99.50"),
            ledger_txn("2024-01-10", "100.50"),
            ledger_txn("2024-01-10", "101.00"),
        ]
        candidates = CandidateFilter(amount_tolerance="0.50").find_candidates(
            bank_txn("2024-01-10", 100), ledger, ConsumedLedger(3)
        )

        assert [c.ledger_index for c in candidates] == [0, 1]
        assert all(c.amount_diff == Decimal("0.50") for c in candidates)

    def test_consumed_entries_skipped(self, bank_txn, ledger_txn):
        """Consumed ledger entries are not candidates."""
        ledger = [ledger_txn("2024-01-10", 100), ledger_txn("2024-01-10", 100)]
        consumed = ConsumedLedger(2)
        consumed.mark(0)

        candidates = CandidateFilter().find_candidates(
            bank_txn("2024-01-10", 100), ledger, consumed
        )

        assert [c.ledger_index for c in candidates] == [1]

    def test_undated_ledger_entry_skipped(self, bank_txn, ledger_txn):
        """Ledger entries without a date are never candidates."""
        ledger = [ledger_txn(None, 100)]
        candidates = CandidateFilter().find_candidates(
            bank_txn("2024-01-10", 100), ledger, ConsumedLedger(1)
        )

        assert candidates == []

    def test_check_match_flag(self, bank_txn, ledger_txn):
        """check_match requires equal, non-empty check numbers."""
        ledger = [
            ledger_txn("2024-01-10", 100, check="55"),
            ledger_txn("2024-01-10", 100, check="56"),
            ledger_txn("2024-01-10", 100),
        ]
        candidates = CandidateFilter().find_candidates(
            bank_txn("2024-01-10", 100, check="55"), ledger, ConsumedLedger(3)
        )

        assert [c.check_match for c in candidates] == [True, False, False]

    def test_negative_tolerance_rejected(self):
        """Tolerances cannot be negative."""
        with pytest.raises(ConfigurationError):
            CandidateFilter(date_tolerance_days=-1)
        with pytest.raises(ConfigurationError):
            CandidateFilter(amount_tolerance=-1)


class TestHelpers:
    """Tests for filter helper functions."""

    def test_date_diff_days(self):
        """Date difference is absolute."""
        assert date_diff_days(date(2024, 1, 10), date(2024, 1, 13)) == 3
        assert date_diff_days(date(2024, 1, 13), date(2024, 1, 10)) == 3

    def test_empty_checks_never_match(self, bank_txn, ledger_txn):
        """Two empty check numbers are not a match."""
        assert not is_check_match(bank_txn("2024-01-10", 1), ledger_txn("2024-01-10", 1))
