"""Markdown rendering of reconciliation results."""

from decimal import Decimal
from typing import Callable, Optional

from ..models.transaction import (
    MatchResult,
    MatchStatus,
    ReconciliationReport,
    Transaction,
)


def _fmt_date(txn: Optional[Transaction]) -> str:
    if txn is None or txn.date is None:
        return ""
    return txn.date.isoformat()


def _fmt_amount(value: Optional[Decimal]) -> str:
    if value is None:
        return ""
    return f"{value:,.2f}"


def _cell(text: object) -> str:
    # Pipes would break the table layout
    return str(text if text is not None else "").replace("|", "\\|").replace("\n", " ")


def _matched_section(results: list[MatchResult]) -> list[str]:
    lines = [
        "## Matched Transactions",
        "| Bank Date | Ledger Date | Bank Amount | Ledger Amount | Bank Ref | Ledger Ref "
        "| Days Difference | Confidence |",
        "|---|---|---|---|---|---|---|---|",
    ]
    for r in results:
        bank, ledger = r.bank_transaction, r.ledger_transaction
        lines.append(
            f"| {_fmt_date(bank)} | {_fmt_date(ledger)} | {_fmt_amount(bank.amount)} "
            f"| {_fmt_amount(ledger.amount)} | {_cell(bank.reference)} "
            f"| {_cell(ledger.reference)} | {r.date_diff} | {r.confidence.value} |"
        )
    return lines


def _ambiguous_section(results: list[MatchResult]) -> list[str]:
    lines = ["## Ambiguous (Review Required)"]
    for r in results:
        bank = r.bank_transaction
        lines.append("")
        lines.append(
            f"**Bank {_fmt_date(bank)} {_fmt_amount(bank.amount)} "
            f"{_cell(bank.reference)}**: {_cell(r.reason)}"
        )
        lines.append("")
        lines.append("| Ledger Date | Amount | Reference | Check |")
        lines.append("|---|---|---|---|")
        for cand in r.candidates:
            lines.append(
                f"| {_fmt_date(cand)} | {_fmt_amount(cand.amount)} "
                f"| {_cell(cand.reference)} | {_cell(cand.check)} |"
            )
    return lines


def _transaction_table(title: str, txns: list[Optional[Transaction]]) -> list[str]:
    lines = [f"## {title}", "| Date | Amount | Reference |", "|---|---|---|"]
    for txn in txns:
        lines.append(
            f"| {_fmt_date(txn)} | {_fmt_amount(txn.amount)} | {_cell(txn.reference)} |"
        )
    return lines


def _bank_unreconciled_section(results: list[MatchResult]) -> list[str]:
    return _transaction_table("Bank Unreconciled", [r.bank_transaction for r in results])


def _ledger_unreconciled_section(results: list[MatchResult]) -> list[str]:
    return _transaction_table("Ledger Unreconciled", [r.ledger_transaction for r in results])


def _invalid_section(results: list[MatchResult]) -> list[str]:
    lines = ["## Invalid Bank Entries", "| Row | Raw Date | Amount | Reason |", "|---|---|---|---|"]
    for r in results:
        bank = r.bank_transaction
        raw_date = _fmt_date(bank) or "(unparseable)"
        lines.append(
            f"| {bank.row_number + 1} | {raw_date} | {_fmt_amount(bank.amount)} "
            f"| {_cell(r.reason)} |"
        )
    return lines


SECTION_RENDERERS: dict[MatchStatus, Callable[[list[MatchResult]], list[str]]] = {
    MatchStatus.MATCHED: _matched_section,
    MatchStatus.AMBIGUOUS: _ambiguous_section,
    MatchStatus.BANK_UNRECONCILED: _bank_unreconciled_section,
    MatchStatus.LEDGER_UNRECONCILED: _ledger_unreconciled_section,
    MatchStatus.INVALID: _invalid_section,
}


def render_markdown(report: ReconciliationReport) -> str:
    """
    Render a reconciliation report as markdown.

    Args:
        report: Output of ReconciliationEngine.reconcile()

    Returns:
        Markdown document
    """
    summary = report.summary
    lines = [
        "# Bank Reconciliation Report",
        "",
        "## Summary",
        f"- Total Bank Entries: {summary.total_bank_transactions}",
        f"- Total Ledger Entries: {summary.total_ledger_transactions}",
        f"- Matched: **{summary.matched_count}**",
        f"- Ambiguous: **{summary.ambiguous_count}**",
        f"- Bank Unreconciled: **{summary.bank_unreconciled_count}**",
        f"- Ledger Unreconciled: **{summary.ledger_unreconciled_count}**",
        f"- Invalid: **{summary.invalid_count}**",
        f"- Date Tolerance: {summary.date_tolerance_days} day(s)",
        f"- Amount Tolerance: {summary.amount_tolerance}",
    ]

    for status in MatchStatus:
        results = report.by_status(status)
        if not results and status in (MatchStatus.AMBIGUOUS, MatchStatus.INVALID):
            continue
        lines.extend(["", "---", ""])
        lines.extend(SECTION_RENDERERS[status](results))

    return "\n".join(lines) + "\n"
