"""
Module: builder

Purpose:
    Report building pipeline: paginated tabular PDF documents with
    word-wrapped cells, repeated column headers, "Page X of N" footers
    and a trailing summary/signature block.

Key Functions:
    - build_report(): Main entry point for report generation
    - estimate_pagination(): Dry-run page count
    - prepare_measurer(): ReportLab measurer with configured fonts

Key Classes:
    - ReportConfig: Document-level configuration
    - PageGeometry: Page layout configuration
    - DocumentRenderer: Drawing pass
    - BuildResult: Result of build_report()

Dependencies:
    - reportlab: Font metrics and PDF output
    - PIL: Logo images

Used By:
    - report_toolkit.cli: Command line interface
"""

from .config import ReportConfig
from .layout import PageGeometry, PaginationPlan, estimate_pagination
from .output import Document, DocumentRenderer, document_to_bytes, write_pdf
from .controller import build_report, prepare_measurer, BuildResult

__all__ = [
    # Config
    "ReportConfig",
    "PageGeometry",
    # Layout
    "PaginationPlan",
    "estimate_pagination",
    # Output
    "Document",
    "DocumentRenderer",
    "document_to_bytes",
    "write_pdf",
    # Controller
    "build_report",
    "prepare_measurer",
    "BuildResult",
]
