"""
Unit tests for header-based column detection.
"""
import pytest

from ledger_recon.parsers.column_detector import ColumnDetector
from ledger_recon.utils.exceptions import ColumnDetectionError


class TestColumnDetector:
    """Tests for ColumnDetector."""

    @pytest.fixture
    def detector(self, config) -> ColumnDetector:
        return ColumnDetector(config)

    def test_bank_sheet_with_amount(self, detector):
        """A unified amount column suppresses debit/credit lookup."""
        mapping = detector.detect(["Txn Date", "Description", "Amount", "Cheque No"])

        assert mapping.date == "Txn Date"
        assert mapping.amount == "Amount"
        assert mapping.reference == "Description"
        assert mapping.check == "Cheque No"
        assert mapping.debit is None
        assert mapping.credit is None

    def test_ledger_sheet_with_debit_credit(self, detector):
        """Debit and credit columns are found when there is no amount column."""
        mapping = detector.detect(["Posting Date", "Narration", "Debit", "Credit"])

        assert mapping.date == "Posting Date"
        assert mapping.amount is None
        assert mapping.debit == "Debit"
        assert mapping.credit == "Credit"
        assert mapping.reference == "Narration"
        assert mapping.check is None

    def test_matching_is_case_insensitive(self, detector):
        """Header case does not matter."""
        mapping = detector.detect(["DATE", "AMT"])

        assert mapping.date == "DATE"
        assert mapping.amount == "AMT"

    def test_header_not_claimed_twice(self, detector):
        """A header used for one role cannot fill another."""
        mapping = detector.detect(["Date", "Amount", "Description"])

        assert mapping.reference == "Description"
        assert mapping.credit is None

    @pytest.mark.parametrize(
        "headers, debit, credit",
        [
            (
                ["Date", "Narration", "Withdrawal Amt.", "Deposit Amt."],
                "Withdrawal Amt.",
                "Deposit Amt.",
            ),
            (
                ["Value Date", "Details", "Debit Amount", "Credit Amount"],
                "Debit Amount",
                "Credit Amount",
            ),
        ],
    )
    def test_debit_credit_amount_headers(self, detector, headers, debit, credit):
        """Headers naming debit or credit are never taken as the amount column."""
        mapping = detector.detect(headers)

        assert mapping.amount is None
        assert mapping.debit == debit
        assert mapping.credit == credit

    def test_missing_date_raises(self, detector):
        """A sheet without a date column is rejected."""
        with pytest.raises(ColumnDetectionError):
            detector.detect(["Amount", "Memo"])

    def test_missing_amount_raises(self, detector):
        """A sheet without any amount source is rejected."""
        with pytest.raises(ColumnDetectionError):
            detector.detect(["Date", "Memo"])

    def test_callable(self, detector):
        """The detector can be used as a plain column-mapper function."""
        assert detector(["Date", "Amount"]).amount == "Amount"

    def test_custom_keywords(self, config):
        """Keyword lists come from configuration."""
        config.columns.amount = ["betrag"]
        config.columns.date = ["datum"]

        mapping = ColumnDetector(config).detect(["Buchungsdatum", "Betrag"])

        assert mapping.date == "Buchungsdatum"
        assert mapping.amount == "Betrag"
