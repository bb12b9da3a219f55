"""
Command-line interface for the bank vs ledger reconciliation tool.
"""

from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Callable, Optional
import logging
import sys

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import load_config, generate_default_config, ReconConfig
from .matching.engine import ReconciliationEngine
from .models.transaction import ReconciliationSummary, Transaction, TransactionSide
from .parsers.workbook_parser import LoadedTransactions, SourceData, WorkbookParser
from .reports.excel_generator import ExcelReportGenerator
from .reports.markdown_report import render_markdown
from .utils.exceptions import ConfigurationError
from .utils.logging_config import setup_logging

console = Console()


def _reconcile_options(func: Callable) -> Callable:
    """Options shared by the reconcile commands."""
    options = [
        click.option(
            "-c",
            "--config",
            type=click.Path(exists=True, path_type=Path),
            help="Path to configuration file (YAML)",
        ),
        click.option("-o", "--output", type=click.Path(path_type=Path), help="Output Excel file path"),
        click.option(
            "--markdown",
            "markdown_path",
            type=click.Path(path_type=Path),
            help="Also write a markdown report to this path",
        ),
        click.option(
            "--date-tolerance", type=int, default=None, help="Override date tolerance in days"
        ),
        click.option(
            "--amount-tolerance",
            type=str,
            default=None,
            help="Override amount tolerance (absolute difference)",
        ),
        click.option("-v", "--verbose", is_flag=True, help="Enable verbose output"),
        click.option(
            "--dry-run", is_flag=True, help="Reconcile and show summary without writing reports"
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(version=__version__)
def main():
    """Bank Statement vs General Ledger Reconciliation Tool."""
    pass


@main.command()
@click.argument("workbook", type=click.Path(exists=True, path_type=Path))
@_reconcile_options
def reconcile(workbook: Path, **options):
    """
    Reconcile the bank and ledger sheets of a single workbook.

    WORKBOOK: Excel file containing a Bank sheet and a Ledger sheet
    """
    _run_reconciliation(lambda parser: parser.parse_file(workbook), **options)


@main.command("reconcile-files")
@click.argument("bank_file", type=click.Path(exists=True, path_type=Path))
@click.argument("ledger_file", type=click.Path(exists=True, path_type=Path))
@_reconcile_options
def reconcile_files(bank_file: Path, ledger_file: Path, **options):
    """
    Reconcile a bank statement file against a ledger file.

    BANK_FILE: CSV or Excel bank statement
    LEDGER_FILE: CSV or Excel general ledger export
    """
    _run_reconciliation(lambda parser: parser.parse_pair(bank_file, ledger_file), **options)


@main.command()
@click.argument("workbook", type=click.Path(exists=True, path_type=Path))
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
def inspect(workbook: Path, config: Optional[Path]):
    """
    Show detected columns and normalized transactions of a workbook.

    WORKBOOK: Excel file containing a Bank sheet and a Ledger sheet
    """
    try:
        recon_config = load_config(config)
        parser = WorkbookParser(recon_config)
        source = parser.parse_file(workbook)

        for side, frame, name in (
            (TransactionSide.BANK, source.bank_frame, source.bank_source),
            (TransactionSide.LEDGER, source.ledger_frame, source.ledger_source),
        ):
            loaded = parser.load_transactions(frame, side)
            _display_transactions(name, loaded)

    except Exception as e:
        console.print(f"[red]Error parsing file: {e}[/red]")
        sys.exit(1)


@main.command("init-config")
@click.option(
    "-o", "--output", type=click.Path(path_type=Path), default=Path("config.yaml")
)
def init_config(output: Path):
    """Generate a sample configuration file."""
    generate_default_config(output)
    console.print(f"[green]Configuration file generated: {output}[/green]")


def _run_reconciliation(
    read_source: Callable[[WorkbookParser], SourceData],
    config: Optional[Path],
    output: Optional[Path],
    markdown_path: Optional[Path],
    date_tolerance: Optional[int],
    amount_tolerance: Optional[str],
    verbose: bool,
    dry_run: bool,
) -> None:
    """Load sources, reconcile, display the summary and write reports."""
    try:
        recon_config = load_config(config)

        log_level = logging.DEBUG if verbose else recon_config.logging.level
        log_file = Path(recon_config.logging.file) if recon_config.logging.file else None
        setup_logging(log_level, log_file, recon_config.logging.format)

        _apply_tolerance_overrides(recon_config, date_tolerance, amount_tolerance)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Reading sources...", total=None)
            parser = WorkbookParser(recon_config)
            source = read_source(parser)
            progress.update(task, completed=True)

            task = progress.add_task("Normalizing transactions...", total=None)
            bank = parser.load_transactions(source.bank_frame, TransactionSide.BANK)
            ledger = parser.load_transactions(source.ledger_frame, TransactionSide.LEDGER)
            progress.update(task, completed=True)

            task = progress.add_task("Running reconciliation...", total=None)
            engine = ReconciliationEngine(recon_config)
            report = engine.reconcile(
                bank.transactions,
                ledger.transactions,
                bank_source=source.bank_source,
                ledger_source=source.ledger_source,
            )
            progress.update(task, completed=True)

        _display_summary(report.summary)

        if dry_run:
            console.print("\n[yellow]Dry run - no report generated[/yellow]")
            return

        if output is None:
            timestamp = datetime.now()
            output = Path(
                recon_config.output.excel.filename_template.format(
                    date=timestamp.strftime("%Y%m%d"), time=timestamp.strftime("%H%M%S")
                )
            )

        report_path = ExcelReportGenerator(recon_config).generate_report(report, output)
        console.print(f"\n[green]Report generated: {report_path}[/green]")

        if markdown_path is None and recon_config.output.markdown:
            markdown_path = output.with_suffix(".md")
        if markdown_path is not None:
            markdown_path.parent.mkdir(parents=True, exist_ok=True)
            markdown_path.write_text(render_markdown(report), encoding="utf-8")
            console.print(f"[green]Markdown report generated: {markdown_path}[/green]")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


def _display_summary(summary: ReconciliationSummary) -> None:
    """Display reconciliation summary in console."""
    table = Table(title="Reconciliation Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Total Bank Transactions", str(summary.total_bank_transactions))
    table.add_row("Total Ledger Transactions", str(summary.total_ledger_transactions))
    table.add_row("Matched", str(summary.matched_count))
    for confidence, count in summary.matches_by_confidence.items():
        table.add_row(f"  {confidence}", str(count))
    table.add_row("Ambiguous", str(summary.ambiguous_count))
    table.add_row("Bank Unreconciled", str(summary.bank_unreconciled_count))
    table.add_row("Ledger Unreconciled", str(summary.ledger_unreconciled_count))
    table.add_row("Invalid", str(summary.invalid_count))
    table.add_row("Bank Match Rate", f"{summary.match_rate_bank:.1f}%")
    table.add_row("Ledger Match Rate", f"{summary.match_rate_ledger:.1f}%")
    table.add_row("Processing Time", f"{summary.processing_time_seconds:.2f}s")

    console.print(table)


def _display_transactions(source_name: str, loaded: LoadedTransactions) -> None:
    """Display detected columns and the first normalized transactions."""
    mapping = loaded.mapping
    console.print(
        f"\n[bold]{source_name}[/bold]: date={mapping.date!r}, amount={mapping.amount!r}, "
        f"debit={mapping.debit!r}, credit={mapping.credit!r}, "
        f"reference={mapping.reference!r}, check={mapping.check!r}"
    )

    table = Table(title=f"Transactions: {source_name}")
    table.add_column("Date")
    table.add_column("Amount", justify="right")
    table.add_column("Type")
    table.add_column("Check")
    table.add_column("Reference")

    transactions: list[Transaction] = loaded.transactions
    for txn in transactions[:20]:  # Show first 20
        table.add_row(
            str(txn.date) if txn.date else "[red]invalid[/red]",
            f"{txn.amount:,.2f}",
            txn.type.value,
            txn.check or "-",
            txn.reference[:40] + "..." if len(txn.reference) > 40 else txn.reference,
        )

    console.print(table)

    if len(transactions) > 20:
        console.print(f"\n... and {len(transactions) - 20} more transactions")

    console.print(
        f"\nTotal transactions: {len(transactions)} "
        f"({loaded.row_count - len(transactions)} zero-amount rows dropped)"
    )


def _apply_tolerance_overrides(
    config: ReconConfig, date_tolerance: Optional[int], amount_tolerance: Optional[str]
) -> None:
    """Apply command-line tolerance overrides to the matching config."""
    if date_tolerance is not None:
        if date_tolerance < 0:
            raise ConfigurationError("--date-tolerance must be non-negative")
        config.matching.date_tolerance_days = date_tolerance

    if amount_tolerance is not None:
        try:
            value = Decimal(amount_tolerance)
        except ArithmeticError as e:
            raise ConfigurationError(f"Invalid --amount-tolerance: {amount_tolerance}") from e
        if not value.is_finite() or value < 0:
            raise ConfigurationError("--amount-tolerance must be a non-negative number")
        config.matching.amount_tolerance = value


if __name__ == "__main__":
    main()
