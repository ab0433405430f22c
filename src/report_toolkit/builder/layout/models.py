"""
Module: builder.layout.models

Purpose:
    Data models produced by the layout engine.
    Immutable dataclasses for wrapped lines, row layouts, single-page
    fitting results and the whole-document pagination plan.

Key Classes:
    - PageLine: One wrapped output line of a cell
    - CellLayout: Wrapped lines of one cell
    - RowLayout: All cells of a row plus the shared row height
    - PageSlot: Result of fitting rows onto one page
    - PaginationPlan: Dry-run result used for "Page X of N"

Dependencies:
    - dataclasses (std)

Used By:
    - builder.layout.row_height: Creates RowLayouts
    - builder.layout.planner: Creates PageSlots
    - builder.layout.paginator: Creates PaginationPlan
    - builder.output.renderer: Draws RowLayouts
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Tuple


@dataclass(frozen=True)
class PageLine:
    """
    One wrapped line.

    Attributes:
        text: Line text
        column_index: Column the line belongs to
        line_index: Position of the line within its cell
    """
    text: str
    column_index: int
    line_index: int


@dataclass(frozen=True)
class CellLayout:
    """Wrapped content of one cell."""
    column_index: int
    lines: Tuple[PageLine, ...]

    @property
    def line_count(self) -> int:
        return len(self.lines)


@dataclass(frozen=True)
class RowLayout:
    """
    Layout of one data row.

    Attributes:
        row: Source row (never mutated)
        row_number: 1-based position in the whole dataset
        cells: One CellLayout per column, in column order
        height: Shared row height (driven by the tallest cell)
    """
    row: Mapping[str, Any]
    row_number: int
    cells: Tuple[CellLayout, ...]
    height: float

    @property
    def max_line_count(self) -> int:
        return max((cell.line_count for cell in self.cells), default=1)


@dataclass(frozen=True)
class PageSlot:
    """
    Rows that fit on one page.

    Attributes:
        start: Index of the first row placed on the page
        rows_consumed: Number of rows placed
        end_y: Y below the last placed row
        row_heights: Height of each placed row
    """
    start: int
    rows_consumed: int
    end_y: float
    row_heights: Tuple[float, ...] = ()

    @property
    def stop(self) -> int:
        """Index one past the last placed row."""
        return self.start + self.rows_consumed


@dataclass(frozen=True)
class PaginationPlan:
    """
    Whole-document page plan computed by the dry run.

    Attributes:
        total_pages: Content pages plus one if the trailing block needs its own page
        per_page_row_counts: Rows placed on each content page
        trailing_block_on_own_page: Whether summary + signers go on an extra page
        last_page_end_y: Y below the last data row on the last content page

    Example:
        >>> plan = PaginationPlan(3, (20, 20, 5), False, 180.0)
        >>> plan.row_count
        45
    """
    total_pages: int
    per_page_row_counts: Tuple[int, ...]
    trailing_block_on_own_page: bool
    last_page_end_y: float

    def __post_init__(self) -> None:
        expected = len(self.per_page_row_counts) + (1 if self.trailing_block_on_own_page else 0)
        if self.total_pages != expected:
            raise ValueError(
                f"total_pages {self.total_pages} does not match "
                f"{len(self.per_page_row_counts)} content pages"
                f"{' + trailing page' if self.trailing_block_on_own_page else ''}"
            )

    @property
    def row_count(self) -> int:
        return sum(self.per_page_row_counts)

    @property
    def content_page_count(self) -> int:
        return len(self.per_page_row_counts)
