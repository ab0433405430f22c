"""
Module: builder.layout.paginator

Purpose:
    Dry-run pagination. Runs the page planner over the full dataset
    without drawing, so the total page count is known before the first
    page is drawn and every footer can print "Page X of N".

Key Functions:
    - estimate_pagination(): Compute the PaginationPlan

Algorithm:
    1. plan_page() repeatedly until every row is consumed
    2. After the last page, check the space left below the last row
    3. If summary + signer band do not fit, add one trailing page

Dependencies:
    - builder.layout.planner: plan_page, trailing_block_fits
    - builder.layout.row_height: validate_columns

Used By:
    - builder.output.renderer: Before the drawing pass
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from report_toolkit.core.models.columns import ColumnSpec, Row
from report_toolkit.errors import ConfigurationError, EmptyDatasetError, RenderCancelled

from .config import PageGeometry
from .measure import TextMeasurer
from .models import PaginationPlan
from .planner import (
    NULL_SINK,
    plan_page,
    trailing_block_fits,
    trailing_block_height,
    trailing_page_top,
)
from .row_height import validate_columns

logger = logging.getLogger(__name__)

CancelCheck = Callable[[], bool]


def estimate_pagination(
    rows: Sequence[Row],
    columns: Sequence[ColumnSpec],
    geometry: PageGeometry,
    signer_count: int,
    measurer: TextMeasurer,
    *,
    cancel_check: Optional[CancelCheck] = None,
) -> PaginationPlan:
    """
    Compute page breaks and the total page count without drawing.

    Args:
        rows: Full dataset (must not be empty)
        columns: Column schema
        geometry: Page geometry
        signer_count: Number of signers in the trailing block
        measurer: Width provider
        cancel_check: Called between pages; True aborts

    Returns:
        PaginationPlan whose row counts sum to len(rows)

    Raises:
        EmptyDatasetError: If rows is empty
        ConfigurationError: If the geometry can never fit a row or the trailing block
        RenderCancelled: If cancel_check returned True

    Example:
        >>> plan = estimate_pagination(rows, columns, PageGeometry(), 2, measurer)
        >>> plan.total_pages
        3
    """
    if not rows:
        raise EmptyDatasetError("Cannot paginate an empty dataset")

    validate_columns(rows, columns, geometry, measurer)
    _check_trailing_page(geometry, signer_count)

    counts: List[int] = []
    start = 0
    end_y = geometry.top
    while start < len(rows):
        if cancel_check is not None and cancel_check():
            raise RenderCancelled(f"Cancelled during estimation after {len(counts)} pages")
        slot = plan_page(
            rows,
            start,
            columns,
            geometry,
            measurer,
            is_first_page=not counts,
            sink=NULL_SINK,
        )
        counts.append(slot.rows_consumed)
        start = slot.stop
        end_y = slot.end_y

    own_page = not trailing_block_fits(end_y, geometry, signer_count)
    plan = PaginationPlan(
        total_pages=len(counts) + (1 if own_page else 0),
        per_page_row_counts=tuple(counts),
        trailing_block_on_own_page=own_page,
        last_page_end_y=end_y,
    )
    logger.info(
        f"Estimated {plan.total_pages} pages for {len(rows)} rows "
        f"(trailing block {'on its own page' if own_page else 'after last row'})"
    )
    return plan


def _check_trailing_page(geometry: PageGeometry, signer_count: int) -> None:
    """The trailing block must at least fit on an otherwise empty page."""
    needed = trailing_block_height(geometry, signer_count)
    available = trailing_page_top(geometry) - geometry.margin
    if needed > available:
        raise ConfigurationError(
            f"Summary and signer block need {needed:.2f} units but a page "
            f"only has {available:.2f}"
        )
