"""
Tests for markdown and Excel report rendering.
"""
from pathlib import Path

import pytest
from openpyxl import load_workbook

from ledger_recon.config import ReconConfig
from ledger_recon.matching.engine import ReconciliationEngine
from ledger_recon.models.transaction import MatchStatus
from ledger_recon.reports.excel_generator import ExcelReportGenerator
from ledger_recon.reports.markdown_report import SECTION_RENDERERS, render_markdown
from ledger_recon.utils.exceptions import ReportGenerationError


@pytest.fixture
def report(bank_txn, ledger_txn):
    """A report touching every status."""
    bank = [
        bank_txn("2024-01-10", 100, reference="Rent"),
        bank_txn("2024-01-20", 50, reference="Fee | monthly"),
        bank_txn("2024-01-15", 75),
        bank_txn(None, 10),
    ]
    ledger = [
        ledger_txn("2024-01-10", 100, reference="Office rent"),
        ledger_txn("2024-01-14", 75, reference="Option A", check="11"),
        ledger_txn("2024-01-16", 75, reference="Option B", check="12"),
        ledger_txn("2024-03-01", 999, reference="Accrual"),
    ]
    return ReconciliationEngine().reconcile(bank, ledger, bank_source="bank.csv")


class TestMarkdownReport:
    """Tests for render_markdown."""

    def test_every_status_has_a_section(self):
        """Section dispatch covers the whole status set."""
        assert set(SECTION_RENDERERS) == set(MatchStatus)

    def test_summary_and_sections(self, report):
        """The report lists counts and every section."""
        md = render_markdown(report)

        assert md.startswith("# Bank Reconciliation Report")
        assert "- Matched: **1**" in md
        assert "- Ambiguous: **1**" in md
        assert "- Bank Unreconciled: **1**" in md
        assert "- Ledger Unreconciled: **3**" in md
        assert "- Invalid: **1**" in md
        assert "## Matched Transactions" in md
        assert "| 2024-01-10 | 2024-01-10 | 100.00 | 100.00 | Rent | Office rent | 0 | HIGH |" in md

    def test_ambiguous_lists_all_tied_candidates(self, report):
        """Reviewers see date, amount and reference of each tied candidate."""
        md = render_markdown(report)

        assert "## Ambiguous (Review Required)" in md
        assert "| 2024-01-14 | 75.00 | Option A | 11 |" in md
        assert "| 2024-01-16 | 75.00 | Option B | 12 |" in md

    def test_pipes_escaped(self, report):
        """Pipes in references do not break table rows."""
        assert "Fee \\| monthly" in render_markdown(report)

    def test_empty_optional_sections_skipped(self, bank_txn, ledger_txn):
        """Ambiguous and invalid sections are omitted when empty."""
        report = ReconciliationEngine().reconcile(
            [bank_txn("2024-01-10", 1)], [ledger_txn("2024-01-10", 1)]
        )
        md = render_markdown(report)

        assert "Ambiguous (Review Required)" not in md
        assert "Invalid Bank Entries" not in md
        assert "## Bank Unreconciled" in md


class TestExcelReportGenerator:
    """Tests for ExcelReportGenerator."""

    def test_generates_all_sheets(self, report, tmp_path: Path):
        """Every enabled sheet is written."""
        path = ExcelReportGenerator(ReconConfig()).generate_report(
            report, tmp_path / "out" / "report.xlsx"
        )

        wb = load_workbook(path)
        assert wb.sheetnames == [
            "Summary",
            "Matched",
            "Ambiguous",
            "Bank Unreconciled",
            "Ledger Unreconciled",
            "Invalid",
            "Audit Trail",
        ]
        # One row per tied candidate plus the header
        assert wb["Ambiguous"].max_row == 3
        assert wb["Ledger Unreconciled"].max_row == 4
        assert wb["Matched"]["J2"].value == "HIGH"

    def test_disabled_sheets_skipped(self, report, tmp_path: Path):
        """Disabled sheets are not created."""
        config = ReconConfig()
        config.output.sheets.audit_trail.enabled = False
        config.output.sheets.invalid.enabled = False

        path = ExcelReportGenerator(config).generate_report(report, tmp_path / "r.xlsx")

        sheetnames = load_workbook(path).sheetnames
        assert "Audit Trail" not in sheetnames
        assert "Invalid" not in sheetnames

    def test_all_disabled_raises(self, report, tmp_path: Path):
        """A workbook with no sheets cannot be written."""
        config = ReconConfig()
        for name in type(config.output.sheets).model_fields:
            getattr(config.output.sheets, name).enabled = False

        with pytest.raises(ReportGenerationError):
            ExcelReportGenerator(config).generate_report(report, tmp_path / "r.xlsx")
