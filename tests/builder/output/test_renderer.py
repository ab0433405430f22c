"""
Unit tests for the drawing pass.

Uses a fixed-width measurer and an in-memory logo cache so every
position is predictable.
"""

import datetime as dt

import pytest

from report_toolkit.builder.images import AssetCache
from report_toolkit.builder.layout import PageGeometry, PaginationPlan, ReportLabMeasurer
from report_toolkit.builder.output import DocumentRenderer, ImageOp, LineOp, RectOp, TextRun
from report_toolkit.builder.output.document import BLACK
from report_toolkit.common import EN_US, Formatter
from report_toolkit.core.models import ColumnSpec, Signer, SingleKey
from report_toolkit.errors import (
    AssetError,
    ConfigurationError,
    EmptyDatasetError,
    PaginationMismatchError,
    RenderCancelled,
)


@pytest.fixture
def renderer_factory(measurer, logo_cache):
    def _create(geometry=None, assets=None, text_measurer=None):
        return DocumentRenderer(
            geometry or PageGeometry(),
            text_measurer or measurer,
            Formatter(EN_US),
            assets if assets is not None else logo_cache,
        )
    return _create


@pytest.fixture
def three_page_document(renderer_factory, twenty_rows_geometry, columns, make_rows, signers):
    renderer = renderer_factory(twenty_rows_geometry)
    return renderer.render(
        make_rows(45),
        columns,
        "Inventory survey",
        signers,
        signers[-1],
        header_lines=("Ministry of Works", "Regional Office"),
        value_key="value",
        affiliation="Finance",
        report_date=dt.date(2026, 10, 18),
    )


class TestPageNumbering:
    def test_render_when_45_rows_then_three_pages(self, three_page_document):
        assert three_page_document.page_count == 3
        assert three_page_document.plan.per_page_row_counts == (20, 20, 5)

    def test_every_footer_prints_planned_total(self, three_page_document):
        total = three_page_document.plan.total_pages

        for page in three_page_document:
            assert page.total_pages == total
            assert f"Page {page.index + 1} of {total}" in page.texts()

    def test_footer_is_right_aligned_in_bottom_margin(self, three_page_document, measurer):
        # Arrange
        g = PageGeometry()
        page = three_page_document.pages[0]

        # Act
        footer = [op for op in page.ops_of(TextRun) if op.text == "Page 1 of 3"][0]

        # Assert
        assert footer.x + measurer.measure_width(footer.text, "", 0) == g.page_width - g.margin
        assert footer.y == g.margin / 2


class TestTable:
    def test_column_headers_repeat_on_every_page(self, three_page_document):
        for page in three_page_document:
            assert "Description" in page.texts()

    def test_row_numbers_continue_across_pages(self, three_page_document):
        assert "21" in three_page_document.pages[1].texts()
        assert "45" in three_page_document.pages[2].texts()

    def test_separator_above_each_row_plus_closing_rule(self, three_page_document):
        lines = three_page_document.pages[0].ops_of(LineOp)

        horizontal = [op for op in lines if op.y1 == op.y2]

        assert len(horizontal) == 21

    def test_render_when_rows_drawn_then_vertical_rule_at_every_column_edge(
        self, three_page_document, columns, twenty_rows_geometry
    ):
        # Arrange
        g = twenty_rows_geometry
        edges = [g.margin + sum(c.width for c in columns[:i]) for i in range(len(columns) + 1)]

        # Act
        vertical = [op for op in three_page_document.pages[0].ops_of(LineOp) if op.x1 == op.x2]

        # Assert: one rule per edge per row, spanning the row
        assert len(vertical) == 20 * (len(columns) + 1)
        first_row = vertical[: len(columns) + 1]
        assert [op.x1 for op in first_row] == edges
        assert all(op.y1 == g.first_page_table_top for op in first_row)
        assert all(op.y1 - op.y2 == 25 for op in vertical)

    def test_cell_text_centered_in_column_and_row(self, three_page_document, twenty_rows_geometry):
        # Arrange
        g = twenty_rows_geometry
        run = [op for op in three_page_document.pages[0].ops_of(TextRun) if op.text == "A001"][0]

        # Assert: Id column starts after the 30-wide number column
        assert run.x == g.margin + 30 + (60 - 4) / 2
        block_top = g.first_page_table_top - (25 - g.line_height) / 2
        assert run.y == block_top - g.font_size

    def test_header_band_is_shaded(self, three_page_document, columns):
        page = three_page_document.pages[1]

        shaded = [op for op in page.ops_of(RectOp) if op.fill is not None and op.stroke is None]

        assert [op.width for op in shaded] == [c.width for c in columns]


class TestFirstPage:
    def test_logos_drawn_at_both_margins(self, three_page_document):
        g = PageGeometry()
        images = three_page_document.pages[0].ops_of(ImageOp)

        assert [op.asset_id for op in images] == ["left_logo", "right_logo"]
        left, right = images
        assert left.x == g.margin
        assert left.width == 2 * g.logo_height
        assert right.x + right.width == g.page_width - g.margin

    def test_logos_only_on_first_page(self, three_page_document):
        assert three_page_document.pages[1].ops_of(ImageOp) == []

    def test_title_lines_and_metadata_on_first_page(self, three_page_document):
        texts = three_page_document.pages[0].texts()

        assert texts.index("Ministry of Works") < texts.index("Regional Office") < texts.index("Inventory survey")
        assert "Name: Luis Mora" in texts
        assert "Affiliation: Finance" in texts
        assert "Role: Director" in texts
        assert "Date: October 18, 2026" in texts

    def test_metadata_without_signer_prints_date_only(self, renderer_factory, columns, make_rows):
        document = renderer_factory().render(
            make_rows(1), columns, "T", (), None, report_date=dt.date(2026, 1, 2)
        )

        texts = document.pages[0].texts()
        assert "Date: January 2, 2026" in texts
        assert not any(t.startswith("Name:") for t in texts)


class TestTrailingBlock:
    def test_summary_on_last_page_with_total(self, three_page_document):
        last = three_page_document.pages[-1]

        assert "45 items with total value $4,522.50" in last.texts()
        assert "45 items with total value $4,522.50" not in three_page_document.pages[0].texts()

    def test_summary_box_directly_below_last_row(self, three_page_document, twenty_rows_geometry):
        g = twenty_rows_geometry
        end_y = three_page_document.plan.last_page_end_y

        boxes = [op for op in three_page_document.pages[-1].ops_of(RectOp) if op.height == g.summary_box_height]

        assert len(boxes) == 1
        assert boxes[0].y == end_y - g.summary_box_height

    def test_signer_boxes_share_table_width(self, three_page_document, signers, columns):
        boxes = [op for op in three_page_document.pages[-1].ops_of(RectOp) if op.stroke == BLACK]

        assert len(boxes) == len(signers)
        assert all(b.width == sum(c.width for c in columns) / 2 for b in boxes)
        texts = three_page_document.pages[-1].texts()
        for signer in signers:
            assert signer.concept in texts
            assert signer.name in texts
            assert signer.title in texts

    def test_render_when_no_signers_then_summary_without_band(self, renderer_factory, columns, make_rows):
        # Act
        document = renderer_factory().render(make_rows(3), columns, "T", (), None, value_key="value")

        # Assert
        page = document.pages[-1]
        assert "3 items with total value $301.50" in page.texts()
        assert [op for op in page.ops_of(RectOp) if op.stroke == BLACK] == []
        assert [op for op in page.ops_of(LineOp) if op.color == BLACK] == []

    def test_render_when_trailing_block_does_not_fit_then_own_page(
        self, renderer_factory, columns, make_rows, signers
    ):
        # Arrange: one unit short of summary + signer band after the only row
        g = PageGeometry(page_height=329, title_band_height=80, continuation_top=5)

        # Act
        document = renderer_factory(g).render(make_rows(1), columns, "T", signers, signers[-1])

        # Assert
        assert document.page_count == 2
        first, trailing = document.pages
        assert "1 items with total value $0.00" not in first.texts()
        assert "1 items with total value $0.00" in trailing.texts()
        assert "Page 2 of 2" in trailing.texts()
        assert "Description" not in trailing.texts()
        summary = [op for op in trailing.ops_of(RectOp) if op.height == g.summary_box_height][0]
        assert summary.y + summary.height == g.top - g.continuation_top

    def test_render_when_table_narrow_then_trailing_text_wraps_inside_boxes(
        self, renderer_factory, make_rows
    ):
        # Arrange: one 30-wide column split between three 10-wide signer boxes
        g = PageGeometry()
        columns = (ColumnSpec.numbered(),)
        signers = (
            Signer("Prepared by", "Ana Ruiz", "Clerk"),
            Signer("Reviewed by", "Jorge Paz", "Head"),
            Signer("Approved by", "Luis Mora", "Director"),
        )

        # Act
        document = renderer_factory(g).render(make_rows(1), columns, "T", signers, signers[-1])

        # Assert
        page = document.pages[-1]
        end_y = document.plan.last_page_end_y
        runs = [op for op in page.ops_of(TextRun) if op.y < end_y and not op.text.startswith("Page")]
        assert runs
        for run in runs:
            assert g.margin <= run.x
            assert run.x + len(run.text) <= g.margin + 30
        texts = page.texts()
        assert "Luis" in texts and "Mora" in texts
        assert "$0.00" in texts

    def test_unparseable_values_count_as_zero(self, renderer_factory, columns):
        rows = [{"value": "$1,000.00"}, {"value": "n/a"}, {"value": 250}, {"value": None}]

        document = renderer_factory().render(rows, columns, "T", (), None, value_key="value")

        assert "4 items with total value $1,250.00" in document.pages[-1].texts()


class TestFailures:
    def test_render_when_empty_dataset_then_raises(self, renderer_factory, columns):
        with pytest.raises(EmptyDatasetError):
            renderer_factory().render([], columns, "T", (), None)

    def test_render_when_logo_missing_then_asset_error(self, renderer_factory, columns, make_rows):
        with pytest.raises(AssetError):
            renderer_factory(assets=AssetCache()).render(make_rows(1), columns, "T", (), None)

    def test_render_when_measurer_fails_then_asset_error(self, renderer_factory, columns, make_rows):
        class BrokenMeasurer:
            def measure_width(self, text, font, size):
                raise RuntimeError("glyph table missing")

        with pytest.raises(AssetError):
            renderer_factory(text_measurer=BrokenMeasurer()).render(make_rows(1), columns, "T", (), None)

    def test_render_when_cell_text_has_no_glyph_in_font_then_asset_error(self, renderer_factory):
        # Arrange
        columns = (ColumnSpec("Name", 100, SingleKey("x")),)

        # Act / Assert
        with pytest.raises(AssetError) as exc_info:
            renderer_factory(text_measurer=ReportLabMeasurer()).render(
                [{"x": "漢字"}], columns, "T", (), None
            )
        assert "Helvetica" in str(exc_info.value)

    def test_render_when_signer_name_has_no_glyph_then_asset_error(self, renderer_factory, columns, make_rows):
        signers = (Signer("Approved by", "王小明", "Director"),)

        with pytest.raises(AssetError):
            renderer_factory(text_measurer=ReportLabMeasurer()).render(
                make_rows(1), columns, "T", signers, None
            )

    def test_render_when_title_has_no_glyph_in_bold_font_then_asset_error(
        self, renderer_factory, columns, make_rows
    ):
        with pytest.raises(AssetError) as exc_info:
            renderer_factory(text_measurer=ReportLabMeasurer()).render(
                make_rows(1), columns, "Informe 漢字", (), None
            )
        assert "Helvetica-Bold" in str(exc_info.value)

    def test_render_when_accented_latin_text_then_renders(self, renderer_factory, columns, signers):
        rows = [{"id": "A001", "description": "Cajonera metálica, año 2024", "value": "10"}]

        document = renderer_factory(text_measurer=ReportLabMeasurer()).render(
            rows, columns, "Dirección de Administración", signers, signers[-1]
        )

        assert "Cajonera metálica, año 2024" in document.pages[0].texts()

    def test_render_when_title_band_too_small_for_titles_and_metadata_then_raises(
        self, renderer_factory, columns, make_rows, signers
    ):
        # Arrange: 4 title lines at 21 each plus 4 metadata lines need about 153 of 140 units
        g = PageGeometry(title_font_size=14)

        # Act / Assert
        with pytest.raises(ConfigurationError):
            renderer_factory(g).render(
                make_rows(1),
                columns,
                "T",
                signers,
                signers[-1],
                header_lines=("Ministry of Works", "Regional Office", "Asset Control"),
                affiliation="Finance",
            )

    def test_render_when_large_title_font_with_one_title_line_then_fits(
        self, renderer_factory, columns, make_rows, signers
    ):
        g = PageGeometry(title_font_size=14)

        document = renderer_factory(g).render(
            make_rows(1), columns, "T", signers, signers[-1], affiliation="Finance"
        )

        assert document.page_count == 1

    def test_render_when_cancelled_mid_draw_then_raises(
        self, renderer_factory, twenty_rows_geometry, columns, make_rows
    ):
        # Arrange: 3 checks during the dry run, cancel on the second drawn page
        calls = []

        def cancel():
            calls.append(1)
            return len(calls) == 5

        # Act / Assert
        with pytest.raises(RenderCancelled):
            renderer_factory(twenty_rows_geometry).render(
                make_rows(45), columns, "T", (), None, cancel_check=cancel
            )

    def test_render_when_plan_disagrees_with_drawing_then_raises(
        self, renderer_factory, twenty_rows_geometry, columns, make_rows, monkeypatch
    ):
        stale = PaginationPlan(3, (25, 15, 5), False, 100.0)
        monkeypatch.setattr(
            "report_toolkit.builder.output.renderer.estimate_pagination",
            lambda *args, **kwargs: stale,
        )

        with pytest.raises(PaginationMismatchError):
            renderer_factory(twenty_rows_geometry).render(make_rows(45), columns, "T", (), None)


def test_separate_renderers_do_not_share_state(renderer_factory, columns, make_rows):
    a = renderer_factory().render(make_rows(5), columns, "A", (), None)
    b = renderer_factory().render(make_rows(50), columns, "B", (), None)

    assert a.page_count == 1
    assert b.page_count > 1
    assert a.title == "A"
