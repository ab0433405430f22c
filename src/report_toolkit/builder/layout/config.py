"""
Module: builder.layout.config

Purpose:
    Page geometry for the tabular layout engine.
    Defines page size, margins, font sizes and the fixed bands
    (first-page title band, column header band, trailing block).

Key Classes:
    - PageGeometry: Immutable geometry configuration

Dependencies:
    - dataclasses (std)

Used By:
    - builder.layout.planner: Page fitting
    - builder.layout.paginator: Dry-run estimation
    - builder.output.renderer: Drawing coordinates

Coordinates are PDF page space: 72 units per inch, origin at the
bottom-left corner, y growing upwards.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

from report_toolkit.errors import ConfigurationError


# A4 landscape in points
DEFAULT_PAGE_WIDTH_PT = 842
DEFAULT_PAGE_HEIGHT_PT = 595


@dataclass(frozen=True)
class PageGeometry:
    """
    Page geometry (immutable).

    Attributes:
        page_width: Page width in layout units
        page_height: Page height in layout units
        margin: Margin on all four sides; rows never cross the bottom margin
        header_band_height: Height of the repeated column header band
        font_size: Cell text size
        header_font_size: Column header label size
        min_row_height: Lower bound for every row's height
        vertical_cell_padding: Space above and below a cell's text block
        cell_padding: Horizontal space inside each cell edge
        line_spacing: Extra space between wrapped lines
        title_band_height: Space reserved on page one for logos, titles and metadata
        continuation_top: Space reserved above the table on later pages
        summary_box_height: Height of the shaded summary box
        signer_band_height: Height of the signature band (0 when no signers)
        logo_height: Height of the two first-page logos
        title_font_size: First-page title line size
        metadata_font_size: First-page metadata line size
        footer_font_size: Page number size
        signer_font_size: Signature block text size
        font_name: Font used for cells and metadata
        bold_font_name: Font used for headers and titles

    Example:
        >>> geometry = PageGeometry()
        >>> geometry.line_height
        8
    """

    page_width: float = DEFAULT_PAGE_WIDTH_PT
    page_height: float = DEFAULT_PAGE_HEIGHT_PT
    margin: float = 40

    # Table
    header_band_height: float = 25
    font_size: float = 6
    header_font_size: float = 8
    min_row_height: float = 25
    vertical_cell_padding: float = 3
    cell_padding: float = 2
    line_spacing: float = 2

    # Bands
    title_band_height: float = 140
    continuation_top: float = 5
    summary_box_height: float = 20
    signer_band_height: float = 100

    # First page / footer typography
    logo_height: float = 28
    title_font_size: float = 8
    metadata_font_size: float = 7
    footer_font_size: float = 10
    signer_font_size: float = 6

    font_name: str = "Helvetica"
    bold_font_name: str = "Helvetica-Bold"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, str):
                if not value:
                    raise ConfigurationError(f"{f.name} must not be empty")
                continue
            # Bands may be switched off, everything else must be positive
            if f.name in ("continuation_top", "signer_band_height", "line_spacing"):
                if value < 0:
                    raise ConfigurationError(f"{f.name} must be non-negative: {value}")
            elif value <= 0:
                raise ConfigurationError(f"{f.name} must be positive: {value}")
        if self.header_band_height + self.margin >= self.page_height:
            raise ConfigurationError("Header band and margin exceed page height")
        if self.available_width <= 0:
            raise ConfigurationError("Margins exceed page width")
        if self.first_page_table_top <= self.margin:
            raise ConfigurationError("Title band leaves no room for the table on page one")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PageGeometry":
        """Build from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown geometry fields: {', '.join(unknown)}")
        return cls(**dict(data))

    def with_overrides(self, **changes: Any) -> "PageGeometry":
        return replace(self, **changes)

    @property
    def line_height(self) -> float:
        """Vertical advance per wrapped line."""
        return self.font_size + self.line_spacing

    @property
    def header_line_height(self) -> float:
        """Vertical advance per wrapped column header line."""
        return self.header_font_size + 1

    @property
    def available_width(self) -> float:
        """Width between the left and right margins."""
        return self.page_width - 2 * self.margin

    @property
    def top(self) -> float:
        """Y of the top margin."""
        return self.page_height - self.margin

    @property
    def first_page_table_top(self) -> float:
        """Y where the first row starts on page one (below title and header bands)."""
        return self.top - self.title_band_height - self.header_band_height

    @property
    def continuation_table_top(self) -> float:
        """Y where the first row starts on later pages."""
        return self.top - self.continuation_top - self.header_band_height

    def table_top(self, is_first_page: bool) -> float:
        return self.first_page_table_top if is_first_page else self.continuation_table_top

    def header_band_top(self, is_first_page: bool) -> float:
        return self.table_top(is_first_page) + self.header_band_height
