"""Report rendering for reconciliation results."""

from .excel_generator import ExcelReportGenerator
from .markdown_report import render_markdown

__all__ = ["ExcelReportGenerator", "render_markdown"]
