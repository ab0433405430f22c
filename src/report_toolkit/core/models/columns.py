"""
Module: core.models.columns

Purpose:
    Column schema for tabular reports. A column has a header, a fixed
    width in layout units and a source describing where its cell text
    comes from in each row.

Key Classes:
    - SingleKey: Cell text from one row field
    - CompositeKeys: Non-empty values of several fields joined by a separator
    - RowNumber: 1-based global row number
    - ColumnSpec: Header + width + source (immutable)

Dependencies:
    - dataclasses (std)

Used By:
    - builder.layout.row_height: Cell text resolution
    - core.spec_loader: JSON report descriptions
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union

from report_toolkit.errors import ConfigurationError

# Rows are read-only mappings of field key -> scalar (str/number/None)
Row = Mapping[str, Any]

DEFAULT_COMPOSITE_SEPARATOR = " / "


@dataclass(frozen=True)
class SingleKey:
    """Cell text is the stringified value of one field."""
    key: str

    def resolve(self, row: Row) -> str:
        return _stringify(row.get(self.key))


@dataclass(frozen=True)
class CompositeKeys:
    """
    Cell text joins several fields, skipping empty ones.

    Example:
        >>> CompositeKeys(("area", "room")).resolve({"area": "B", "room": None})
        'B'
    """
    keys: Tuple[str, ...]
    separator: str = DEFAULT_COMPOSITE_SEPARATOR

    def __post_init__(self) -> None:
        if not self.keys:
            raise ConfigurationError("CompositeKeys needs at least one key")
        # Accept lists from callers; keep the stored value hashable
        object.__setattr__(self, "keys", tuple(self.keys))

    def resolve(self, row: Row) -> str:
        values = (_stringify(row.get(key)) for key in self.keys)
        return self.separator.join(v for v in values if v)


@dataclass(frozen=True)
class RowNumber:
    """Cell text is the 1-based position of the row in the whole dataset."""

    def resolve(self, row: Row, row_number: Optional[int] = None) -> str:
        return "" if row_number is None else str(row_number)


ColumnSource = Union[SingleKey, CompositeKeys, RowNumber]


@dataclass(frozen=True)
class ColumnSpec:
    """
    One table column (immutable).

    Attributes:
        header: Label drawn in the column header band
        width: Column width in layout units (> 0)
        source: Where the cell text comes from
        uppercase: Upper-case the cell text before measuring and drawing

    Example:
        >>> ColumnSpec("Description", 175, SingleKey("descripcion"))
    """
    header: str
    width: float
    source: ColumnSource
    uppercase: bool = False

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ConfigurationError(
                f"Column width must be positive: {self.width}", column=self.header
            )

    def cell_text(self, row: Row, row_number: Optional[int] = None) -> str:
        """Resolve this column's text for a row."""
        if isinstance(self.source, RowNumber):
            text = self.source.resolve(row, row_number)
        else:
            text = self.source.resolve(row)
        return text.upper() if self.uppercase else text

    @classmethod
    def numbered(cls, header: str = "No.", width: float = 30) -> "ColumnSpec":
        """Row-number column, numbered across pages."""
        return cls(header=header, width=width, source=RowNumber())


def table_width(columns: Tuple[ColumnSpec, ...]) -> float:
    """Total width of all columns."""
    return sum(col.width for col in columns)


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    return str(value)
