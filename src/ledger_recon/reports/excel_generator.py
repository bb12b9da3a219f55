"""
Excel report generator for reconciliation results.
Creates multi-sheet workbooks with formatted output.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Optional
import logging

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Border, Side
from openpyxl.worksheet.worksheet import Worksheet

from ..models.transaction import (
    Confidence,
    MatchResult,
    MatchStatus,
    ReconciliationReport,
    ReconciliationSummary,
    Transaction,
)
from ..config import ReconConfig, SheetConfig
from ..utils.exceptions import ReportGenerationError

logger = logging.getLogger(__name__)

# Style definitions
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True)
MATCH_FILL = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
REVIEW_FILL = PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid")
UNMATCHED_FILL = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)

TRANSACTION_HEADERS = ["Row", "Date", "Amount", "Type", "Reference", "Check"]


class ExcelReportGenerator:
    """Generates Excel reconciliation reports with multiple sheets."""

    def __init__(self, config: Optional[ReconConfig] = None):
        """
        Initialize the report generator.

        Args:
            config: Application configuration
        """
        self.config = config or ReconConfig()
        self.sheet_config = self.config.output.sheets

    def generate_report(self, report: ReconciliationReport, output_path: Path) -> Path:
        """
        Generate the complete reconciliation report.

        Args:
            report: Output of ReconciliationEngine.reconcile()
            output_path: Path for output file

        Returns:
            Path to generated report

        Raises:
            ReportGenerationError: If the workbook cannot be written
        """
        logger.info(f"Generating Excel report: {output_path}")

        wb = Workbook()

        # Remove default sheet
        if wb.active:
            wb.remove(wb.active)

        sheets = self.sheet_config
        if sheets.summary.enabled:
            self._create_summary_sheet(wb, sheets.summary, report.summary)
        if sheets.matched.enabled:
            self._create_matched_sheet(wb, sheets.matched, report.matched)
        if sheets.ambiguous.enabled:
            self._create_ambiguous_sheet(wb, sheets.ambiguous, report.ambiguous)
        if sheets.bank_unreconciled.enabled:
            self._create_transaction_sheet(
                wb,
                sheets.bank_unreconciled,
                [r.bank_transaction for r in report.by_status(MatchStatus.BANK_UNRECONCILED)],
            )
        if sheets.ledger_unreconciled.enabled:
            self._create_transaction_sheet(
                wb,
                sheets.ledger_unreconciled,
                [
                    r.ledger_transaction
                    for r in report.by_status(MatchStatus.LEDGER_UNRECONCILED)
                ],
            )
        if sheets.invalid.enabled:
            self._create_transaction_sheet(
                wb,
                sheets.invalid,
                [r.bank_transaction for r in report.by_status(MatchStatus.INVALID)],
            )
        if sheets.audit_trail.enabled:
            self._create_audit_trail_sheet(wb, sheets.audit_trail, report)

        if not wb.sheetnames:
            raise ReportGenerationError("All report sheets are disabled")

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            wb.save(output_path)
        except OSError as e:
            raise ReportGenerationError(f"Failed to save report {output_path}: {e}") from e

        logger.info(f"Report saved: {output_path}")
        return output_path

    def _create_summary_sheet(
        self, wb: Workbook, sheet: SheetConfig, summary: ReconciliationSummary
    ) -> None:
        """Create the summary sheet with key metrics."""
        ws = wb.create_sheet(sheet.name)

        ws["A1"] = "Bank Reconciliation Summary"
        ws["A1"].font = Font(size=16, bold=True)
        ws.merge_cells("A1:D1")

        sections: list[tuple[str, list[tuple[str, Any]]]] = [
            (
                "Source Information",
                [
                    ("Bank Source:", summary.bank_source or "-"),
                    ("Ledger Source:", summary.ledger_source or "-"),
                    (
                        "Reconciliation Date:",
                        summary.reconciliation_date.strftime("%Y-%m-%d %H:%M:%S"),
                    ),
                    ("Date Tolerance (days):", summary.date_tolerance_days),
                    ("Amount Tolerance:", float(summary.amount_tolerance)),
                ],
            ),
            (
                "Transaction Counts",
                [
                    ("Total Bank Transactions:", summary.total_bank_transactions),
                    ("Total Ledger Transactions:", summary.total_ledger_transactions),
                    ("Matched:", summary.matched_count),
                    ("Ambiguous:", summary.ambiguous_count),
                    ("Bank Unreconciled:", summary.bank_unreconciled_count),
                    ("Ledger Unreconciled:", summary.ledger_unreconciled_count),
                    ("Invalid:", summary.invalid_count),
                ],
            ),
            (
                "Match Rates",
                [
                    ("Bank Match Rate:", f"{summary.match_rate_bank:.1f}%"),
                    ("Ledger Match Rate:", f"{summary.match_rate_ledger:.1f}%"),
                ],
            ),
            (
                "Matches by Confidence",
                list(summary.matches_by_confidence.items()),
            ),
        ]

        row = 3
        for title, entries in sections:
            ws[f"A{row}"] = title
            ws[f"A{row}"].font = Font(bold=True)
            row += 1
            for label, value in entries:
                ws[f"A{row}"] = label
                ws[f"B{row}"] = value
                row += 1
            row += 1

        ws.column_dimensions["A"].width = 30
        ws.column_dimensions["B"].width = 40

    def _create_matched_sheet(
        self, wb: Workbook, sheet: SheetConfig, matches: list[MatchResult]
    ) -> None:
        """Create the matched transactions sheet."""
        ws = wb.create_sheet(sheet.name)

        headers = [
            "Bank Date",
            "Bank Amount",
            "Bank Reference",
            "Ledger Date",
            "Ledger Amount",
            "Ledger Reference",
            "Check Match",
            "Date Variance (Days)",
            "Amount Variance",
            "Confidence",
            "Reason",
        ]
        self._write_headers(ws, headers)

        for row_num, match in enumerate(matches, start=2):
            bank_txn = match.bank_transaction
            ledger_txn = match.ledger_transaction

            row_data = [
                bank_txn.date,
                float(bank_txn.amount),
                bank_txn.reference,
                ledger_txn.date,
                float(ledger_txn.amount),
                ledger_txn.reference,
                "Yes" if match.check_match else "",
                match.date_diff,
                float(match.amount_diff) if match.amount_diff else 0.0,
                match.confidence.value,
                match.reason,
            ]
            fill = MATCH_FILL if match.confidence is Confidence.HIGH else REVIEW_FILL
            self._write_row(ws, row_num, row_data, fill)

        self._auto_fit_columns(ws)

    def _create_ambiguous_sheet(
        self, wb: Workbook, sheet: SheetConfig, ambiguous: list[MatchResult]
    ) -> None:
        """Create the review sheet: one row per tied ledger candidate."""
        ws = wb.create_sheet(sheet.name)

        headers = [
            "Bank Date",
            "Bank Amount",
            "Bank Reference",
            "Candidate Date",
            "Candidate Amount",
            "Candidate Reference",
            "Candidate Check",
            "Reason",
        ]
        self._write_headers(ws, headers)

        row_num = 2
        for result in ambiguous:
            bank_txn = result.bank_transaction
            for candidate in result.candidates:
                row_data = [
                    bank_txn.date,
                    float(bank_txn.amount),
                    bank_txn.reference,
                    candidate.date,
                    float(candidate.amount),
                    candidate.reference,
                    candidate.check,
                    result.reason,
                ]
                self._write_row(ws, row_num, row_data, REVIEW_FILL)
                row_num += 1

        self._auto_fit_columns(ws)

    def _create_transaction_sheet(
        self, wb: Workbook, sheet: SheetConfig, transactions: list[Transaction]
    ) -> None:
        """Create a sheet listing unreconciled or invalid transactions."""
        ws = wb.create_sheet(sheet.name)
        self._write_headers(ws, TRANSACTION_HEADERS)

        for row_num, txn in enumerate(transactions, start=2):
            row_data = [
                txn.row_number + 1,
                txn.date if txn.date else "(invalid)",
                float(txn.amount),
                txn.type.value,
                txn.reference,
                txn.check,
            ]
            self._write_row(ws, row_num, row_data, UNMATCHED_FILL)

        self._auto_fit_columns(ws)

    def _create_audit_trail_sheet(
        self, wb: Workbook, sheet: SheetConfig, report: ReconciliationReport
    ) -> None:
        """Create the audit trail sheet."""
        ws = wb.create_sheet(sheet.name)
        summary = report.summary

        ws["A1"] = "Reconciliation Audit Trail"
        ws["A1"].font = Font(size=14, bold=True)

        audit_info = [
            ("Generated At:", datetime.now().strftime("%Y-%m-%d %H:%M:%S")),
            ("Config File:", summary.config_file_used or "Default"),
            ("Processing Time:", f"{summary.processing_time_seconds:.2f} seconds"),
        ]

        row = 3
        for label, value in audit_info:
            ws[f"A{row}"] = label
            ws[f"B{row}"] = value
            row += 1

        row += 1
        ws[f"A{row}"] = "Classification Log"
        ws[f"A{row}"].font = Font(bold=True)
        row += 1

        headers = ["Seq", "Status", "Confidence", "Bank ID", "Ledger ID(s)", "Reason"]
        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=row, column=col, value=header)
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
        row += 1

        for seq, result in enumerate(report.results, start=1):
            if result.status is MatchStatus.AMBIGUOUS:
                ledger_ids = ", ".join(t.id for t in result.candidates)
            elif result.ledger_transaction is not None:
                ledger_ids = result.ledger_transaction.id
            else:
                ledger_ids = ""

            log_data = [
                seq,
                result.status.value,
                result.confidence.value,
                result.bank_transaction.id if result.bank_transaction else "",
                ledger_ids,
                result.reason,
            ]
            for col, value in enumerate(log_data, start=1):
                ws.cell(row=row, column=col, value=value)
            row += 1

        self._auto_fit_columns(ws)

    @staticmethod
    def _write_headers(ws: Worksheet, headers: list[str]) -> None:
        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.border = THIN_BORDER

    @staticmethod
    def _write_row(
        ws: Worksheet, row_num: int, values: list[Any], fill: PatternFill
    ) -> None:
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=row_num, column=col, value=value)
            cell.border = THIN_BORDER
            cell.fill = fill

    def _auto_fit_columns(self, ws: Worksheet) -> None:
        """Auto-fit column widths based on content."""
        for column_cells in ws.columns:
            max_length = 0
            column = column_cells[0].column_letter

            for cell in column_cells:
                if cell.value is not None:
                    max_length = max(max_length, len(str(cell.value)))

            ws.column_dimensions[column].width = min(max_length + 2, 50)
