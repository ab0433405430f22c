"""
Unit tests for row height calculation and column validation.
"""

import pytest

from report_toolkit.builder.layout import PageGeometry, layout_row, row_height, validate_columns
from report_toolkit.core.models import ColumnSpec, CompositeKeys, SingleKey
from report_toolkit.errors import ConfigurationError


@pytest.fixture
def geometry():
    return PageGeometry()


@pytest.fixture
def three_columns():
    return (
        ColumnSpec("Left", 100, SingleKey("left")),
        ColumnSpec("Middle", 300, SingleKey("middle")),
        ColumnSpec("Right", 100, SingleKey("right")),
    )


class TestRowHeight:
    def test_row_height_when_middle_column_wraps_four_lines_then_uses_its_line_count(
        self, geometry, three_columns, measurer
    ):
        # Arrange: middle content width is 296; each 200-char word needs its own line
        row = {"left": "x", "middle": " ".join(["a" * 200] * 4), "right": "y"}

        # Act
        height = row_height(row, three_columns, geometry, measurer)

        # Assert
        expected = 4 * (geometry.font_size + geometry.line_spacing) + 2 * geometry.vertical_cell_padding
        assert height == expected
        assert height > geometry.min_row_height

    def test_row_height_when_single_line_then_min_row_height(self, geometry, three_columns, measurer):
        row = {"left": "x", "middle": "short", "right": "y"}

        assert row_height(row, three_columns, geometry, measurer) == geometry.min_row_height

    def test_row_height_when_value_missing_then_treated_as_empty(self, geometry, three_columns, measurer):
        assert row_height({}, three_columns, geometry, measurer) == geometry.min_row_height

    def test_layout_row_when_composite_column_then_joins_non_empty_values(self, geometry, measurer):
        columns = (ColumnSpec("Where", 100, CompositeKeys(("area", "room", "desk"))),)
        row = {"area": "B", "room": "", "desk": "12"}

        layout = layout_row(row, 1, columns, geometry, measurer)

        assert [line.text for line in layout.cells[0].lines] == ["B / 12"]

    def test_layout_row_when_row_number_column_then_uses_global_number(self, geometry, measurer):
        columns = (ColumnSpec.numbered(),)

        layout = layout_row({}, 42, columns, geometry, measurer)

        assert layout.cells[0].lines[0].text == "42"
        assert layout.row_number == 42

    def test_layout_row_records_line_and_column_indices(self, geometry, three_columns, measurer):
        row = {"left": "x", "middle": " ".join(["a" * 200] * 2), "right": "y"}

        layout = layout_row(row, 1, three_columns, geometry, measurer)

        middle = layout.cells[1]
        assert [line.line_index for line in middle.lines] == [0, 1]
        assert all(line.column_index == 1 for line in middle.lines)
        assert layout.max_line_count == 2


class TestValidateColumns:
    def test_validate_when_padding_consumes_width_then_raises_with_column(self, geometry, measurer):
        columns = (ColumnSpec("Tiny", 4, SingleKey("a")),)

        with pytest.raises(ConfigurationError) as exc_info:
            validate_columns([{"a": "x"}], columns, geometry, measurer)

        assert exc_info.value.column == "Tiny"

    def test_validate_when_glyph_wider_than_content_then_raises(self, geometry, measurer):
        # Arrange: content width 1, every glyph 2 units wide
        measurer.per_char = 2
        columns = (ColumnSpec("Ok", 50, SingleKey("a")), ColumnSpec("Narrow", 5, SingleKey("b")))

        # Act / Assert
        with pytest.raises(ConfigurationError) as exc_info:
            validate_columns([{"a": "x", "b": "y"}], columns, geometry, measurer)
        assert exc_info.value.column == "Narrow"

    def test_validate_when_column_fits_its_glyphs_then_passes(self, geometry, measurer):
        # Arrange: content width 2, every glyph 2 units wide
        measurer.per_char = 2
        columns = (ColumnSpec("N", 6, SingleKey("b")),)

        # Act / Assert
        validate_columns([{"b": "long text wraps one glyph per line"}, {"b": None}], columns, geometry, measurer)

    def test_validate_when_header_glyph_too_wide_then_raises(self, geometry, measurer):
        class WideBoldMeasurer:
            def measure_width(self, text, font, size):
                return len(text) * (5 if font == geometry.bold_font_name else 1)

        columns = (ColumnSpec("Qty", 8, SingleKey("q")),)

        with pytest.raises(ConfigurationError) as exc_info:
            validate_columns([{"q": "1"}], columns, geometry, WideBoldMeasurer())
        assert exc_info.value.column == "Qty"

    def test_validate_when_header_wraps_past_header_band_then_raises(self, geometry, measurer):
        # Arrange: content width 2 wraps the label to 4 lines, 4 * 9 = 36 > 25
        columns = (ColumnSpec("AA BB CC DD", 6, SingleKey("a")),)

        # Act
        with pytest.raises(ConfigurationError) as exc_info:
            validate_columns([{"a": "x"}], columns, geometry, measurer)

        # Assert
        assert exc_info.value.column == "AA BB CC DD"

    def test_validate_when_header_wraps_within_header_band_then_passes(self, geometry, measurer):
        # Two lines need 18 of the 25 units
        columns = (ColumnSpec("AA BB", 6, SingleKey("a")),)

        validate_columns([{"a": "x"}], columns, geometry, measurer)

    def test_validate_when_no_columns_then_raises(self, geometry, measurer):
        with pytest.raises(ConfigurationError):
            validate_columns([{}], (), geometry, measurer)
