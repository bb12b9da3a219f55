"""
Header-based column detection.
Maps sheet headers to transaction column roles using keyword substrings.
"""

from typing import Callable, Iterable, Optional
import logging

from ..config import ColumnDetectionConfig, ReconConfig
from ..utils.exceptions import ColumnDetectionError
from .normalizer import ColumnMapping

logger = logging.getLogger(__name__)

# Any callable that turns a header list into a ColumnMapping can replace the detector
ColumnMapper = Callable[[list[str]], ColumnMapping]

# Roles are resolved in this order; a header claimed by one role is not reused.
# Debit/credit are only looked up when there is no amount column, and a header
# naming a debit or credit keyword (e.g. "Deposit Amt.") is never the amount column.
ROLE_ORDER = ("date", "amount", "reference", "check", "debit", "credit")
DEBIT_CREDIT_ROLES = ("debit", "credit")


class ColumnDetector:
    """
    Fuzzy header detection.

    For each role the configured keywords are tried in order and the first
    header whose lowercase text contains the keyword wins.
    """

    def __init__(self, config: Optional[ReconConfig] = None):
        self.keywords: ColumnDetectionConfig = (config or ReconConfig()).columns

    def __call__(self, headers: list[str]) -> ColumnMapping:
        return self.detect(headers)

    def detect(self, headers: Iterable[object]) -> ColumnMapping:
        """
        Detect column roles from a header row.

        Args:
            headers: Header cells of a sheet

        Returns:
            ColumnMapping with the original header names

        Raises:
            ColumnDetectionError: If no date column or no amount source is found
        """
        original = [str(h) for h in headers if h is not None]
        claimed: set[str] = set()
        found: dict[str, Optional[str]] = {}

        for role in ROLE_ORDER:
            if role in DEBIT_CREDIT_ROLES and found.get("amount"):
                found[role] = None
                continue
            excluded = claimed
            if role == "amount":
                excluded = claimed | self._debit_credit_headers(original)
            header = self._find(original, getattr(self.keywords, role), excluded)
            if header is not None:
                claimed.add(header)
            found[role] = header

        mapping = ColumnMapping(**found)
        logger.debug(f"Detected columns: {mapping}")

        if not mapping.date:
            raise ColumnDetectionError(f"No date column found in headers: {original}")
        if not mapping.has_amount_source:
            raise ColumnDetectionError(
                f"No amount or debit/credit column found in headers: {original}"
            )

        return mapping

    @staticmethod
    def _find(
        headers: list[str], keywords: list[str], claimed: set[str]
    ) -> Optional[str]:
        for keyword in keywords:
            needle = keyword.lower()
            for header in headers:
                if header in claimed:
                    continue
                if needle in header.lower():
                    return header
        return None

    def _debit_credit_headers(self, headers: list[str]) -> set[str]:
        keywords = [k.lower() for k in self.keywords.debit + self.keywords.credit]
        return {h for h in headers if any(k in h.lower() for k in keywords)}
