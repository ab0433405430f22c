"""
Module: builder.layout.row_height

Purpose:
    Compute the wrapped layout and shared height of a table row.
    Every column wraps independently; the row takes the height of the
    column with the most lines.

Key Functions:
    - layout_row(): Wrap every cell and compute the row height
    - row_height(): Height only
    - validate_columns(): Reject columns too narrow for their own glyphs

Dependencies:
    - builder.layout.wrapper: wrap_text
    - core.models.columns: ColumnSpec

Used By:
    - builder.layout.planner: Page fitting
"""

from __future__ import annotations

import logging
from typing import Sequence

from report_toolkit.core.models.columns import ColumnSpec, Row
from report_toolkit.errors import ConfigurationError

from .config import PageGeometry
from .measure import TextMeasurer
from .models import CellLayout, PageLine, RowLayout
from .wrapper import widest_glyph, wrap_text

logger = logging.getLogger(__name__)


def content_width(column: ColumnSpec, geometry: PageGeometry) -> float:
    """Width available for text inside a column."""
    return column.width - 2 * geometry.cell_padding


def layout_row(
    row: Row,
    row_number: int,
    columns: Sequence[ColumnSpec],
    geometry: PageGeometry,
    measurer: TextMeasurer,
) -> RowLayout:
    """
    Wrap every cell of a row and compute its height.

    Height is max(min_row_height, lines * line_height + 2 * vertical padding),
    where lines is the largest line count across columns.

    Args:
        row: Source row
        row_number: 1-based position in the dataset (for RowNumber columns)
        columns: Column schema
        geometry: Page geometry
        measurer: Width provider

    Returns:
        RowLayout with wrapped cells and the shared height
    """
    cells = []
    for index, column in enumerate(columns):
        text = column.cell_text(row, row_number)
        lines = wrap_text(
            text,
            content_width(column, geometry),
            geometry.font_name,
            geometry.font_size,
            measurer,
        )
        cells.append(CellLayout(
            column_index=index,
            lines=tuple(
                PageLine(text=line, column_index=index, line_index=i)
                for i, line in enumerate(lines)
            ),
        ))

    max_lines = max((cell.line_count for cell in cells), default=1)
    height = max(
        geometry.min_row_height,
        max_lines * geometry.line_height + 2 * geometry.vertical_cell_padding,
    )
    return RowLayout(row=row, row_number=row_number, cells=tuple(cells), height=height)


def row_height(
    row: Row,
    columns: Sequence[ColumnSpec],
    geometry: PageGeometry,
    measurer: TextMeasurer,
    row_number: int = 1,
) -> float:
    """Minimum vertical extent needed to render a row."""
    return layout_row(row, row_number, columns, geometry, measurer).height


def validate_columns(
    rows: Sequence[Row],
    columns: Sequence[ColumnSpec],
    geometry: PageGeometry,
    measurer: TextMeasurer,
) -> None:
    """
    Reject column widths that cannot hold a single character of their data
    or header label.

    A column whose content width is smaller than the widest glyph it must
    draw would force overflowing fragments; that is treated as a
    configuration error instead of silently drawing outside the cell.

    Raises:
        ConfigurationError: Naming the first offending column
    """
    if not columns:
        raise ConfigurationError("At least one column is required")

    for index, column in enumerate(columns):
        available = content_width(column, geometry)
        if available <= 0:
            raise ConfigurationError(
                f"Column {column.header!r} is {column.width} wide but cell padding "
                f"takes {2 * geometry.cell_padding}",
                column=column.header,
            )

        widest = _widest_in_column(rows, column, geometry, measurer)
        if widest > available:
            raise ConfigurationError(
                f"Column {column.header!r} content width {available:.2f} is narrower "
                f"than a single character ({widest:.2f}) at font size {geometry.font_size}",
                column=column.header,
            )
        header_glyph = widest_glyph(
            column.header, geometry.bold_font_name, geometry.header_font_size, measurer
        )
        if header_glyph > available:
            raise ConfigurationError(
                f"Column {column.header!r} is too narrow for its own header label",
                column=column.header,
            )
        wrapped = header_lines(column, geometry, measurer)
        if len(wrapped) * geometry.header_line_height > geometry.header_band_height:
            raise ConfigurationError(
                f"Header {column.header!r} wraps to {len(wrapped)} lines, more than the "
                f"{geometry.header_band_height} unit header band holds",
                column=column.header,
            )
        logger.debug(f"Column {index} {column.header!r}: content width {available:.2f}")


def _widest_in_column(
    rows: Sequence[Row],
    column: ColumnSpec,
    geometry: PageGeometry,
    measurer: TextMeasurer,
) -> float:
    glyphs: set = set()
    for number, row in enumerate(rows, start=1):
        glyphs.update(column.cell_text(row, number))
    return widest_glyph("".join(glyphs), geometry.font_name, geometry.font_size, measurer)


def header_lines(
    column: ColumnSpec,
    geometry: PageGeometry,
    measurer: TextMeasurer,
) -> list[str]:
    """Wrapped header label for the column header band."""
    return wrap_text(
        column.header,
        content_width(column, geometry),
        geometry.bold_font_name,
        geometry.header_font_size,
        measurer,
    )
