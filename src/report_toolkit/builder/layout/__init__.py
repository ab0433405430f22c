"""
Module: builder.layout

Purpose:
    Text wrapping, row heights and page breaks for tabular reports.
    Pure computation: nothing here draws or writes files.

Key Functions:
    - wrap_text(): Fit a string into a column width
    - layout_row(): Wrap every cell and compute the row height
    - plan_page(): Fit rows onto one page
    - estimate_pagination(): Dry run over the whole dataset

Key Classes:
    - PageGeometry: Page size, margins, fonts and bands
    - TextMeasurer / ReportLabMeasurer: Width measurement
    - PaginationPlan: Page count and per-page row counts

Dependencies:
    - reportlab: Font metrics (ReportLabMeasurer only)

Used By:
    - builder.output.renderer: Drawing pass
"""

from .config import PageGeometry
from .measure import GlyphChecker, ReportLabMeasurer, TextMeasurer, check_glyphs
from .models import CellLayout, PageLine, PageSlot, PaginationPlan, RowLayout
from .wrapper import widest_glyph, wrap_text
from .row_height import layout_row, row_height, validate_columns
from .planner import (
    DrawSink,
    NullSink,
    NULL_SINK,
    plan_page,
    trailing_block_fits,
    trailing_block_height,
)
from .paginator import estimate_pagination

__all__ = [
    # Config
    "PageGeometry",
    # Measurement
    "TextMeasurer",
    "ReportLabMeasurer",
    "GlyphChecker",
    "check_glyphs",
    # Models
    "PageLine",
    "CellLayout",
    "RowLayout",
    "PageSlot",
    "PaginationPlan",
    # Functions
    "wrap_text",
    "widest_glyph",
    "layout_row",
    "row_height",
    "validate_columns",
    "plan_page",
    "trailing_block_fits",
    "trailing_block_height",
    "estimate_pagination",
    # Sinks
    "DrawSink",
    "NullSink",
    "NULL_SINK",
]
