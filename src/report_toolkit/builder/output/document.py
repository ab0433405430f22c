"""
Module: builder.output.document

Purpose:
    Format-independent document produced by the renderer: an ordered list
    of fixed-size pages, each holding absolute-positioned draw operations.
    The PDF writer turns it into bytes.

Key Classes:
    - TextRun, LineOp, RectOp, ImageOp: Draw operations
    - DocumentPage: Operations of one page plus its number
    - Document: Finished, immutable document
    - PageBuilder: Mutable collector used while drawing one page

Dependencies:
    - dataclasses (std)

Used By:
    - builder.output.renderer: Creates Documents
    - builder.output.writer: Serializes Documents
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Mapping, Optional, Tuple, Union

from report_toolkit.builder.images.provider import LoadedImage
from report_toolkit.builder.layout.models import PaginationPlan

Color = Tuple[float, float, float]

BLACK: Color = (0.0, 0.0, 0.0)
DARK_GRAY: Color = (0.2, 0.2, 0.2)
MID_GRAY: Color = (0.6, 0.6, 0.6)
RULE_GRAY: Color = (0.7, 0.7, 0.7)
SHADE: Color = (0.9, 0.9, 0.9)


@dataclass(frozen=True)
class TextRun:
    """Text drawn with its baseline starting at (x, y)."""
    x: float
    y: float
    text: str
    font: str
    size: float
    color: Color = BLACK


@dataclass(frozen=True)
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float = 0.5
    color: Color = RULE_GRAY


@dataclass(frozen=True)
class RectOp:
    """Rectangle with its bottom-left corner at (x, y)."""
    x: float
    y: float
    width: float
    height: float
    fill: Optional[Color] = None
    stroke: Optional[Color] = None
    stroke_width: float = 0.5


@dataclass(frozen=True)
class ImageOp:
    """Image asset drawn with its bottom-left corner at (x, y)."""
    asset_id: str
    x: float
    y: float
    width: float
    height: float


DrawOp = Union[TextRun, LineOp, RectOp, ImageOp]


@dataclass(frozen=True)
class DocumentPage:
    """
    One finished page.

    Attributes:
        index: Page index (0-based)
        total_pages: Page count of the whole document
        operations: Draw operations in painting order
    """
    index: int
    total_pages: int
    operations: Tuple[DrawOp, ...]

    def texts(self) -> List[str]:
        """All text drawn on the page, in order."""
        return [op.text for op in self.operations if isinstance(op, TextRun)]

    def ops_of(self, kind: type) -> List[DrawOp]:
        return [op for op in self.operations if isinstance(op, kind)]


@dataclass(frozen=True)
class Document:
    """
    Finished document (immutable once returned by the renderer).

    Attributes:
        pages: Pages in order
        images: Image assets referenced by ImageOps
        title: Document title (PDF metadata)
        page_size: (width, height) in layout units
        plan: Dry-run pagination plan the pages were drawn from
    """
    pages: Tuple[DocumentPage, ...]
    images: Mapping[str, LoadedImage]
    title: str
    page_size: Tuple[float, float]
    plan: PaginationPlan

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def __iter__(self) -> Iterator[DocumentPage]:
        return iter(self.pages)


@dataclass
class PageBuilder:
    """Collects operations for one page while it is being drawn."""
    index: int
    operations: List[DrawOp] = field(default_factory=list)

    def add(self, op: DrawOp) -> None:
        self.operations.append(op)

    def finish(self, total_pages: int) -> DocumentPage:
        return DocumentPage(
            index=self.index,
            total_pages=total_pages,
            operations=tuple(self.operations),
        )
