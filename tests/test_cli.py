"""
Tests for the command-line interface.
"""
from pathlib import Path

import pytest
from click.testing import CliRunner

from ledger_recon.cli import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestCli:
    """Tests for CLI commands."""

    def test_reconcile_writes_reports(self, runner, sample_workbook: Path, tmp_path: Path):
        """reconcile writes the Excel and markdown reports."""
        output = tmp_path / "report.xlsx"
        markdown = tmp_path / "report.md"

        result = runner.invoke(
            main,
            ["reconcile", str(sample_workbook), "-o", str(output), "--markdown", str(markdown)],
        )

        assert result.exit_code == 0, result.output
        assert output.exists()
        assert "# Bank Reconciliation Report" in markdown.read_text()
        assert "Reconciliation Summary" in result.output

    def test_dry_run(self, runner, sample_workbook: Path, tmp_path: Path):
        """--dry-run writes nothing."""
        output = tmp_path / "report.xlsx"

        result = runner.invoke(
            main, ["reconcile", str(sample_workbook), "-o", str(output), "--dry-run"]
        )

        assert result.exit_code == 0, result.output
        assert "Dry run" in result.output
        assert not output.exists()

    def test_reconcile_files(self, runner, tmp_path: Path):
        """reconcile-files accepts two CSV files."""
        bank = tmp_path / "bank.csv"
        ledger = tmp_path / "ledger.csv"
        bank.write_text("Date,Amount\n2024-01-10,100\n")
        ledger.write_text("Date,Amount\n2024-01-15,100\n")

        result = runner.invoke(
            main,
            [
                "reconcile-files",
                str(bank),
                str(ledger),
                "--date-tolerance",
                "5",
                "--markdown",
                str(tmp_path / "out.md"),
                "-o",
                str(tmp_path / "out.xlsx"),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "- Matched: **1**" in (tmp_path / "out.md").read_text()

    def test_default_output_name_from_template(self, runner, sample_workbook: Path, tmp_path: Path):
        """Without -o the report name comes from the configured filename template."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "output:\n  excel:\n    filename_template: '"
            + str(tmp_path / "recon_{date}.xlsx")
            + "'\n"
        )

        result = runner.invoke(main, ["reconcile", str(sample_workbook), "-c", str(config_path)])

        assert result.exit_code == 0, result.output
        assert len(list(tmp_path.glob("recon_*.xlsx"))) == 1

    def test_invalid_amount_tolerance(self, runner, sample_workbook: Path):
        """A bad tolerance override exits with an error."""
        result = runner.invoke(
            main, ["reconcile", str(sample_workbook), "--amount-tolerance", "abc", "--dry-run"]
        )

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_inspect(self, runner, sample_workbook: Path):
        """inspect shows normalized transactions for both sheets."""
        result = runner.invoke(main, ["inspect", str(sample_workbook)])

        assert result.exit_code == 0, result.output
        assert "1001" in result.output
        assert "Total transactions: 4" in result.output
        assert "Total transactions: 3" in result.output

    def test_init_config(self, runner, tmp_path: Path):
        """init-config writes a YAML file."""
        output = tmp_path / "config.yaml"

        result = runner.invoke(main, ["init-config", "-o", str(output)])

        assert result.exit_code == 0
        assert "date_tolerance_days: 3" in output.read_text()
