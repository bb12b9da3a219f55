"""Configuration loader and validation for reconciliation settings."""

from decimal import Decimal
from pathlib import Path
from typing import Any, Optional
import logging

import yaml
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from .utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class InputConfig(BaseModel):
    """Configuration for reading bank and ledger sources."""

    encoding: str = "utf-8"
    delimiter: str = ","
    date_formats: list[str] = Field(
        default_factory=lambda: ["%Y-%m-%d", "%d/%m/%Y", "%m/%d/%Y", "%d-%m-%Y"]
    )
    bank_sheet_keyword: str = "bank"
    ledger_sheet_keyword: str = "ledger"


class ColumnDetectionConfig(BaseModel):
    """Header keywords tried, in order, for each column role."""

    date: list[str] = Field(
        default_factory=lambda: ["date", "posting", "txn", "transaction", "doc dt"]
    )
    amount: list[str] = Field(default_factory=lambda: ["amount", "amt", "value", "net"])
    debit: list[str] = Field(default_factory=lambda: ["debit", "dr", "withdrawal"])
    credit: list[str] = Field(default_factory=lambda: ["credit", "cr", "deposit"])
    reference: list[str] = Field(
        default_factory=lambda: ["description", "ref", "narration", "memo", "details"]
    )
    check: list[str] = Field(
        default_factory=lambda: ["check", "cheque", "chq", "doc no", "document no"]
    )


class MatchingConfig(BaseModel):
    """Tolerances used by the candidate filter."""

    date_tolerance_days: int = Field(default=3, ge=0)
    amount_tolerance: Decimal = Field(default=Decimal("0"), ge=0)


class ExcelOutputConfig(BaseModel):
    """Configuration for Excel output."""

    filename_template: str = "reconciliation_report_{date}_{time}.xlsx"


class SheetConfig(BaseModel):
    """Configuration for a report sheet."""

    enabled: bool = True
    name: str


class SheetsConfig(BaseModel):
    """Configuration for all report sheets."""

    summary: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Summary"))
    matched: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Matched"))
    ambiguous: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Ambiguous"))
    bank_unreconciled: SheetConfig = Field(
        default_factory=lambda: SheetConfig(name="Bank Unreconciled")
    )
    ledger_unreconciled: SheetConfig = Field(
        default_factory=lambda: SheetConfig(name="Ledger Unreconciled")
    )
    invalid: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Invalid"))
    audit_trail: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Audit Trail"))


class OutputConfig(BaseModel):
    """Configuration for output."""

    excel: ExcelOutputConfig = Field(default_factory=ExcelOutputConfig)
    sheets: SheetsConfig = Field(default_factory=SheetsConfig)
    markdown: bool = False


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


class ReconConfig(BaseModel):
    """Main configuration model for reconciliation."""

    input: InputConfig = Field(default_factory=InputConfig)
    columns: ColumnDetectionConfig = Field(default_factory=ColumnDetectionConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    config_file_path: Optional[str] = None


def get_default_config() -> dict[str, Any]:
    """Return the default configuration as a dictionary."""
    return {
        "input": {
            "encoding": "utf-8",
            "delimiter": ",",
            "date_formats": ["%Y-%m-%d", "%d/%m/%Y", "%m/%d/%Y", "%d-%m-%Y"],
            "bank_sheet_keyword": "bank",
            "ledger_sheet_keyword": "ledger",
        },
        "columns": {
            "date": ["date", "posting", "txn", "transaction", "doc dt"],
            "amount": ["amount", "amt", "value", "net"],
            "debit": ["debit", "dr", "withdrawal"],
            "credit": ["credit", "cr", "deposit"],
            "reference": ["description", "ref", "narration", "memo", "details"],
            "check": ["check", "cheque", "chq", "doc no", "document no"],
        },
        "matching": {
            "date_tolerance_days": 3,
            "amount_tolerance": 0,
        },
        "output": {
            "excel": {
                "filename_template": "reconciliation_report_{date}_{time}.xlsx",
            },
            "sheets": {
                "summary": {"enabled": True, "name": "Summary"},
                "matched": {"enabled": True, "name": "Matched"},
                "ambiguous": {"enabled": True, "name": "Ambiguous"},
                "bank_unreconciled": {"enabled": True, "name": "Bank Unreconciled"},
                "ledger_unreconciled": {"enabled": True, "name": "Ledger Unreconciled"},
                "invalid": {"enabled": True, "name": "Invalid"},
                "audit_trail": {"enabled": True, "name": "Audit Trail"},
            },
            "markdown": False,
        },
        "logging": {
            "level": "INFO",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "file": None,
        },
    }


def load_config(config_path: Optional[Path] = None) -> ReconConfig:
    """
    Load configuration from a YAML file or use defaults.

    Args:
        config_path: Path to YAML configuration file (optional)

    Returns:
        ReconConfig object with loaded or default settings

    Raises:
        ConfigurationError: If the file cannot be read or fails validation
    """
    config_dict = get_default_config()

    if config_path and config_path.exists():
        logger.info(f"Loading configuration from: {config_path}")
        try:
            with open(config_path, "r") as f:
                user_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(user_config, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

        # Deep merge user config into defaults
        config_dict = _deep_merge(config_dict, user_config)
        config_dict["config_file_path"] = str(config_path)
    else:
        logger.info("Using default configuration")

    try:
        return ReconConfig(**config_dict)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary to merge on top

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def generate_default_config(output_path: Path) -> None:
    """
    Generate a default configuration file.

    Args:
        output_path: Path to write the configuration file
    """
    config_dict = get_default_config()

    yaml_content = """# Bank vs Ledger Reconciliation Configuration
# Generated configuration file - customize as needed
#
# matching.date_tolerance_days: maximum days between bank and ledger dates
# matching.amount_tolerance: maximum absolute amount difference (0 = exact)

"""
    yaml_content += yaml.dump(config_dict, default_flow_style=False, sort_keys=False)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        f.write(yaml_content)

    logger.info(f"Generated configuration file: {output_path}")
