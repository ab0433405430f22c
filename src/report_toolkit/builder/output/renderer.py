"""
Module: builder.output.renderer

Purpose:
    Drawing pass of the report engine. Runs the dry-run estimator to learn
    the total page count, then walks the same page planner again with a
    drawing sink, producing a Document of absolute-positioned operations.

Key Classes:
    - DocumentRenderer: Main rendering entry point

Pipeline:
    Planning -> DryRun (estimate_pagination) -> Drawing (pages 1..N)
    -> TrailingPlacement -> Done. Any error aborts the whole render;
    no partial Document is ever returned.

Per page:
    - Page one: two logos, centered title lines, metadata block
    - Every page: shaded column header band, rows with a separator above
      each, cell lines centered in their box, footer "Page X of N"
    - After the last row: summary box + signer band, or both on an
      extra page when the plan says they do not fit

Dependencies:
    - builder.layout: Planner, estimator, geometry, measurement
    - builder.images.provider: Preloaded logos
    - common.formatting: Injected Formatter

Used By:
    - builder.controller: Build orchestration
"""

from __future__ import annotations

import datetime as _dt
import logging
from decimal import Decimal
from typing import Callable, List, Optional, Sequence

from report_toolkit.builder.images.provider import AssetCache
from report_toolkit.builder.layout.config import PageGeometry
from report_toolkit.builder.layout.measure import GlyphChecker, TextMeasurer, check_glyphs
from report_toolkit.builder.layout.models import PaginationPlan, RowLayout
from report_toolkit.builder.layout.paginator import estimate_pagination
from report_toolkit.builder.layout.planner import plan_page, trailing_page_top
from report_toolkit.builder.layout.row_height import header_lines as wrap_header
from report_toolkit.builder.layout.wrapper import wrap_text
from report_toolkit.common.formatting import Formatter, parse_amount
from report_toolkit.core.models.columns import ColumnSpec, Row, table_width
from report_toolkit.core.models.signers import Signer
from report_toolkit.errors import (
    AssetError,
    ConfigurationError,
    EmptyDatasetError,
    PaginationMismatchError,
    RenderCancelled,
)

from .document import (
    BLACK,
    DARK_GRAY,
    MID_GRAY,
    RULE_GRAY,
    SHADE,
    Document,
    DocumentPage,
    ImageOp,
    LineOp,
    PageBuilder,
    RectOp,
    TextRun,
)

logger = logging.getLogger(__name__)

LEFT_LOGO = "left_logo"
RIGHT_LOGO = "right_logo"

CancelCheck = Callable[[], bool]


class DocumentRenderer:
    """
    Render a dataset into a paginated Document.

    One instance holds no per-render state, so separate renders (even
    concurrent ones on separate instances) never interfere.

    Attributes:
        geometry: Page geometry shared by the dry run and drawing pass
        measurer: Width provider, the same one used for wrapping
        formatter: Locale-aware formatting capability
        assets: Preloaded logo images

    Example:
        >>> renderer = DocumentRenderer(PageGeometry(), ReportLabMeasurer(), Formatter(), assets)
        >>> document = renderer.render(rows, columns, "Inventory", signers, signers[-1])
        >>> document.page_count
        3
    """

    def __init__(
        self,
        geometry: PageGeometry,
        measurer: TextMeasurer,
        formatter: Formatter,
        assets: AssetCache,
        *,
        left_logo: str = LEFT_LOGO,
        right_logo: str = RIGHT_LOGO,
    ) -> None:
        self.geometry = geometry
        self.measurer = measurer
        self.formatter = formatter
        self.assets = assets
        self.left_logo = left_logo
        self.right_logo = right_logo

    def render(
        self,
        rows: Sequence[Row],
        columns: Sequence[ColumnSpec],
        title: str,
        signers: Sequence[Signer],
        metadata_signer: Optional[Signer] = None,
        *,
        header_lines: Sequence[str] = (),
        value_key: Optional[str] = None,
        affiliation: Optional[str] = None,
        report_date: Optional[_dt.date] = None,
        cancel_check: Optional[CancelCheck] = None,
    ) -> Document:
        """
        Render the full document.

        Args:
            rows: Dataset (read-only, must not be empty)
            columns: Column schema, fixed for the whole render
            title: Last of the centered title lines on page one
            signers: Signature boxes drawn in the trailing block
            metadata_signer: Signer named in the page-one metadata block
            header_lines: Title lines drawn above the title
            value_key: Row field summed for the summary box
            affiliation: Affiliation line of the metadata block
            report_date: Date printed in the metadata block (default today)
            cancel_check: Called between pages; True aborts the render

        Returns:
            Finished Document

        Raises:
            EmptyDatasetError: If rows is empty
            ConfigurationError: If the geometry cannot fit a row or the title block
            AssetError: If a logo or font is unavailable, or a font lacks a glyph
            RenderCancelled: If cancel_check returned True
        """
        if not rows:
            raise EmptyDatasetError("Nothing to render: dataset has no rows")

        columns = tuple(columns)
        signers = tuple(signers)
        title_lines = [*header_lines, title]
        metadata_lines = self.formatter.metadata_lines(
            metadata_signer.name if metadata_signer else None,
            affiliation,
            metadata_signer.title if metadata_signer else None,
            report_date or _dt.date.today(),
        )
        total_value = _total_value(rows, value_key)
        summary = self.formatter.summary_text(len(rows), total_value)

        self._check_fonts()
        self._check_title_band(title_lines, metadata_lines)
        self._check_coverage(rows, columns, title_lines, metadata_lines, summary, signers)
        logos = (self.assets.get(self.left_logo), self.assets.get(self.right_logo))

        plan = estimate_pagination(
            rows,
            columns,
            self.geometry,
            len(signers),
            self.measurer,
            cancel_check=cancel_check,
        )

        pages = self._draw_pages(
            rows,
            columns,
            plan,
            logos=logos,
            title_lines=title_lines,
            metadata_lines=metadata_lines,
            summary=summary,
            signers=signers,
            cancel_check=cancel_check,
        )

        logger.info(f"Rendered {len(pages)} pages for {len(rows)} rows")
        return Document(
            pages=tuple(pages),
            images={image.asset_id: image for image in logos},
            title=title,
            page_size=(self.geometry.page_width, self.geometry.page_height),
            plan=plan,
        )

    # ------------------------------------------------------------------
    # Drawing pass
    # ------------------------------------------------------------------

    def _draw_pages(
        self,
        rows: Sequence[Row],
        columns: tuple,
        plan: PaginationPlan,
        *,
        logos: tuple,
        title_lines: List[str],
        metadata_lines: List[str],
        summary: str,
        signers: tuple,
        cancel_check: Optional[CancelCheck],
    ) -> List[DocumentPage]:
        g = self.geometry
        total = plan.total_pages
        builders: List[PageBuilder] = []
        start = 0

        for page_index, expected in enumerate(plan.per_page_row_counts):
            if cancel_check is not None and cancel_check():
                raise RenderCancelled(f"Cancelled after drawing {page_index} of {total} pages")

            page = PageBuilder(index=page_index)
            is_first = page_index == 0
            if is_first:
                self._draw_title_band(page, logos, title_lines, metadata_lines)

            sink = _TableSink(self, page, columns)
            slot = plan_page(
                rows,
                start,
                columns,
                g,
                self.measurer,
                is_first_page=is_first,
                sink=sink,
            )
            if slot.rows_consumed != expected:
                raise PaginationMismatchError(
                    f"Page {page_index + 1}: drew {slot.rows_consumed} rows, "
                    f"dry run planned {expected}"
                )
            sink.close(slot.end_y)

            is_last_content = page_index == plan.content_page_count - 1
            if is_last_content and not plan.trailing_block_on_own_page:
                self._draw_trailing_block(page, slot.end_y, columns, summary, signers)

            self._draw_footer(page, total)
            builders.append(page)
            start = slot.stop
            logger.debug(f"Drew page {page_index + 1}/{total} with {slot.rows_consumed} rows")

        if plan.trailing_block_on_own_page:
            page = PageBuilder(index=len(builders))
            self._draw_trailing_block(page, trailing_page_top(g), columns, summary, signers)
            self._draw_footer(page, total)
            builders.append(page)

        if len(builders) != total:
            raise PaginationMismatchError(f"Drew {len(builders)} pages, dry run planned {total}")
        return [b.finish(total) for b in builders]

    def _draw_title_band(
        self,
        page: PageBuilder,
        logos: tuple,
        title_lines: List[str],
        metadata_lines: List[str],
    ) -> None:
        g = self.geometry
        top = g.top
        left, right = logos

        left_width = left.scaled_width(g.logo_height)
        right_width = right.scaled_width(g.logo_height)
        page.add(ImageOp(left.asset_id, g.margin, top - g.logo_height, left_width, g.logo_height))
        page.add(ImageOp(
            right.asset_id,
            g.page_width - g.margin - right_width,
            top - g.logo_height,
            right_width,
            g.logo_height,
        ))

        advance = _title_advance(g)
        for i, text in enumerate(title_lines):
            width = self._width(text, g.bold_font_name, g.title_font_size)
            page.add(TextRun(
                x=(g.page_width - width) / 2,
                y=top - g.title_font_size - i * advance,
                text=text,
                font=g.bold_font_name,
                size=g.title_font_size,
            ))

        meta_top = top - _metadata_offset(g, len(title_lines))
        meta_advance = _metadata_advance(g)
        for i, text in enumerate(metadata_lines):
            page.add(TextRun(
                x=g.margin,
                y=meta_top - g.metadata_font_size - i * meta_advance,
                text=text,
                font=g.font_name,
                size=g.metadata_font_size,
            ))

    def _draw_trailing_block(
        self,
        page: PageBuilder,
        top: float,
        columns: tuple,
        summary: str,
        signers: tuple,
    ) -> None:
        """Summary box directly below top, signer band below the box."""
        g = self.geometry
        left = g.margin
        width = table_width(columns)

        page.add(RectOp(
            x=left,
            y=top - g.summary_box_height,
            width=width,
            height=g.summary_box_height,
            fill=SHADE,
            stroke=RULE_GRAY,
        ))
        lines = self._wrap(summary, width - 2 * g.cell_padding, g.bold_font_name, g.header_font_size)
        advance = g.header_line_height
        block_top = top - (g.summary_box_height - len(lines) * advance) / 2
        for i, text in enumerate(lines):
            self._centered_text(
                page, text, left, width,
                block_top - g.header_font_size - i * advance,
                g.bold_font_name, g.header_font_size, DARK_GRAY,
            )

        if not signers:
            return

        band_top = top - g.summary_box_height
        band_height = g.signer_band_height
        band_bottom = band_top - band_height
        box_width = width / len(signers)
        inset = min(20.0, box_width * 0.1)
        text_width = box_width - 2 * inset
        line_y = band_bottom + band_height * 0.4
        advance = g.signer_font_size + 1

        for i, signer in enumerate(signers):
            x = left + i * box_width
            page.add(RectOp(x=x, y=band_bottom, width=box_width, height=band_height, stroke=BLACK))
            page.add(LineOp(x + inset, line_y, x + box_width - inset, line_y, width=1, color=BLACK))

            # Concept lines stack upward so the last one keeps its place above the line
            concept = self._wrap(signer.concept, text_width, g.font_name, g.signer_font_size)
            base = line_y + band_height * 0.3 + (len(concept) - 1) * advance
            for k, text in enumerate(concept):
                self._centered_text(page, text, x, box_width, base - k * advance, g.font_name, g.signer_font_size, BLACK)

            for text, y in (
                (signer.name, line_y - band_height * 0.15),
                (signer.title, line_y - band_height * 0.3),
            ):
                for k, part in enumerate(self._wrap(text, text_width, g.font_name, g.signer_font_size)):
                    self._centered_text(page, part, x, box_width, y - k * advance, g.font_name, g.signer_font_size, BLACK)

    def _draw_footer(self, page: PageBuilder, total_pages: int) -> None:
        g = self.geometry
        text = self.formatter.page_label(page.index, total_pages)
        width = self._width(text, g.font_name, g.footer_font_size)
        page.add(TextRun(
            x=g.page_width - g.margin - width,
            y=g.margin / 2,
            text=text,
            font=g.font_name,
            size=g.footer_font_size,
            color=MID_GRAY,
        ))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _width(self, text: str, font: str, size: float) -> float:
        return self.measurer.measure_width(text, font, size)

    def _centered_text(
        self,
        page: PageBuilder,
        text: str,
        x: float,
        width: float,
        baseline: float,
        font: str,
        size: float,
        color,
    ) -> None:
        if not text:
            return
        text_width = self._width(text, font, size)
        page.add(TextRun(
            x=x + (width - text_width) / 2,
            y=baseline,
            text=text,
            font=font,
            size=size,
            color=color,
        ))

    def _wrap(self, text: str, width: float, font: str, size: float) -> List[str]:
        return wrap_text(text, width, font, size, self.measurer)

    def _check_title_band(self, title_lines: List[str], metadata_lines: List[str]) -> None:
        """Logos, title lines and metadata must fit in the reserved title band."""
        g = self.geometry
        needed = _metadata_offset(g, len(title_lines)) + len(metadata_lines) * _metadata_advance(g)
        if needed > g.title_band_height:
            raise ConfigurationError(
                f"Title band needs {needed:.2f} units for {len(title_lines)} title lines and "
                f"{len(metadata_lines)} metadata lines but title_band_height is {g.title_band_height}"
            )

    def _check_coverage(
        self,
        rows: Sequence[Row],
        columns: tuple,
        title_lines: List[str],
        metadata_lines: List[str],
        summary: str,
        signers: tuple,
    ) -> None:
        """Every character drawn must exist in its font; checked before layout."""
        if not isinstance(self.measurer, GlyphChecker):
            return
        g = self.geometry
        cells = (
            column.cell_text(row, number)
            for number, row in enumerate(rows, start=1)
            for column in columns
        )
        signer_texts = [text for s in signers for text in (s.concept, s.name, s.title)]
        footer = [self.formatter.page_label(0, 1)]
        check_glyphs(self.measurer, [*metadata_lines, *signer_texts, *footer], g.font_name)
        check_glyphs(self.measurer, cells, g.font_name)
        check_glyphs(
            self.measurer,
            [*(c.header for c in columns), *title_lines, summary],
            g.bold_font_name,
        )

    def _check_fonts(self) -> None:
        """Surface font problems before layout instead of mid-page."""
        g = self.geometry
        for font in {g.font_name, g.bold_font_name}:
            try:
                self.measurer.measure_width("0", font, g.font_size)
            except AssetError:
                raise
            except Exception as e:
                raise AssetError(f"Cannot measure text with font {font}: {e}") from e


class _TableSink:
    """Draws the header band and rows the planner places on one page."""

    def __init__(self, renderer: DocumentRenderer, page: PageBuilder, columns: tuple) -> None:
        self._r = renderer
        self._page = page
        self._columns = columns
        self._left = renderer.geometry.margin
        self._right = self._left + table_width(columns)

    def column_headers(self, top_y: float) -> None:
        g = self._r.geometry
        band = g.header_band_height
        advance = g.header_line_height
        x = self._left
        for column in self._columns:
            self._page.add(RectOp(x=x, y=top_y - band, width=column.width, height=band, fill=SHADE))
            lines = wrap_header(column, g, self._r.measurer)
            block_top = top_y - (band - len(lines) * advance) / 2
            for i, line in enumerate(lines):
                self._r._centered_text(
                    self._page, line, x, column.width,
                    block_top - g.header_font_size - i * advance,
                    g.bold_font_name, g.header_font_size, DARK_GRAY,
                )
            x += column.width

    def row(self, layout: RowLayout, top_y: float) -> None:
        g = self._r.geometry
        self._page.add(LineOp(self._left, top_y, self._right, top_y))
        bottom_y = top_y - layout.height
        edge = self._left
        self._page.add(LineOp(edge, top_y, edge, bottom_y))
        for column in self._columns:
            edge += column.width
            self._page.add(LineOp(edge, top_y, edge, bottom_y))

        x = self._left
        for column, cell in zip(self._columns, layout.cells):
            block_height = cell.line_count * g.line_height
            block_top = top_y - (layout.height - block_height) / 2
            for line in cell.lines:
                self._r._centered_text(
                    self._page, line.text, x, column.width,
                    block_top - g.font_size - line.line_index * g.line_height,
                    g.font_name, g.font_size, DARK_GRAY,
                )
            x += column.width

    def close(self, end_y: float) -> None:
        """Separator under the last row of the page."""
        self._page.add(LineOp(self._left, end_y, self._right, end_y))


def _title_advance(g: PageGeometry) -> float:
    return g.title_font_size * 1.5


def _metadata_advance(g: PageGeometry) -> float:
    return g.metadata_font_size * 1.7


def _metadata_offset(g: PageGeometry, title_count: int) -> float:
    """Distance from the top margin to the top of the metadata block."""
    advance = _title_advance(g)
    return max(g.logo_height, title_count * advance) + advance


def _total_value(rows: Sequence[Row], value_key: Optional[str]) -> Decimal:
    """Sum of value_key over all rows; unparseable values count as zero."""
    total = Decimal(0)
    if value_key is None:
        return total
    for number, row in enumerate(rows, start=1):
        amount = parse_amount(row.get(value_key))
        if amount is None:
            if row.get(value_key) not in (None, ""):
                logger.debug(f"Row {number}: {value_key}={row.get(value_key)!r} is not a number")
            continue
        total += amount
    return total
