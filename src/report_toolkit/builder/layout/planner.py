"""
Module: builder.layout.planner

Purpose:
    Decide how many rows fit on one page. This is the single page-break
    implementation: the dry run (PaginationEstimator) and the drawing pass
    (DocumentRenderer) both call plan_page() with the same geometry, and
    differ only in the DrawSink they pass.

Key Functions:
    - plan_page(): Fit rows onto one page, reporting them to a sink
    - trailing_block_height(): Height of summary box + signer band
    - trailing_block_fits(): Whether the trailing block fits below end_y

Key Classes:
    - DrawSink: Receives the column header band and each placed row
    - NullSink: Sink for dry runs

Algorithm:
    1. Page one reserves the title band; later pages a small top gap
    2. The column header band sits above the first row on every page
    3. Rows are placed top-down while current_y - row_height >= margin
    4. A fresh page that cannot hold even one row is a configuration error

Dependencies:
    - builder.layout.row_height: layout_row

Used By:
    - builder.layout.paginator: Dry run
    - builder.output.renderer: Drawing pass
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence

from report_toolkit.core.models.columns import ColumnSpec, Row
from report_toolkit.errors import ConfigurationError

from .config import PageGeometry
from .measure import TextMeasurer
from .models import PageSlot, RowLayout
from .row_height import layout_row

logger = logging.getLogger(__name__)


class DrawSink(Protocol):
    """Receiver for the table content the planner places on a page."""

    def column_headers(self, top_y: float) -> None:
        """Column header band whose top edge is at top_y."""
        ...

    def row(self, layout: RowLayout, top_y: float) -> None:
        """A placed row whose top edge is at top_y."""
        ...


class NullSink:
    """Discards everything; used by the dry run."""

    def column_headers(self, top_y: float) -> None:
        pass

    def row(self, layout: RowLayout, top_y: float) -> None:
        pass


NULL_SINK = NullSink()


def plan_page(
    rows: Sequence[Row],
    start: int,
    columns: Sequence[ColumnSpec],
    geometry: PageGeometry,
    measurer: TextMeasurer,
    *,
    is_first_page: bool,
    sink: DrawSink = NULL_SINK,
    start_y: Optional[float] = None,
) -> PageSlot:
    """
    Place as many rows as fit on one page, starting at rows[start].

    Args:
        rows: Full dataset
        start: Index of the first row still to place
        columns: Column schema
        geometry: Page geometry
        measurer: Width provider
        is_first_page: Reserve the title band instead of the continuation gap
        sink: Receives the header band and each placed row
        start_y: Top of the column header band (defaults from geometry)

    Returns:
        PageSlot with the number of rows consumed and the Y below the last one

    Raises:
        ConfigurationError: If not even one row fits on the page
    """
    header_top = geometry.header_band_top(is_first_page) if start_y is None else start_y
    sink.column_headers(header_top)
    current_y = header_top - geometry.header_band_height

    heights: List[float] = []
    index = start
    while index < len(rows):
        layout = layout_row(rows[index], index + 1, columns, geometry, measurer)
        if current_y - layout.height < geometry.margin:
            if not heights:
                available = current_y - geometry.margin
                raise ConfigurationError(
                    f"Row {index + 1} needs {layout.height:.2f} units but a page "
                    f"only has {available:.2f} below the header band; "
                    f"widen the columns or reduce the font size"
                )
            break
        sink.row(layout, current_y)
        current_y -= layout.height
        heights.append(layout.height)
        index += 1

    logger.debug(
        f"Planned {len(heights)} rows from index {start} "
        f"({'first' if is_first_page else 'continuation'} page), end_y={current_y:.2f}"
    )
    return PageSlot(
        start=start,
        rows_consumed=len(heights),
        end_y=current_y,
        row_heights=tuple(heights),
    )


def trailing_block_height(geometry: PageGeometry, signer_count: int) -> float:
    """Summary box plus signer band; the band collapses when there are no signers."""
    signer_band = geometry.signer_band_height if signer_count > 0 else 0
    return geometry.summary_box_height + signer_band


def trailing_block_fits(end_y: float, geometry: PageGeometry, signer_count: int) -> bool:
    """Whether the trailing block fits between end_y and the bottom margin."""
    return end_y - geometry.margin >= trailing_block_height(geometry, signer_count)


def trailing_page_top(geometry: PageGeometry) -> float:
    """Top of the trailing block when it is moved to its own page."""
    return geometry.top - geometry.continuation_top
