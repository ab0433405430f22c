"""
Module: builder.output.writer

Purpose:
    Serialize a Document to PDF using ReportLab. Each DocumentPage
    becomes one PDF page; every draw operation maps to one canvas call.

Key Functions:
    - document_to_bytes(): PDF bytes in memory
    - write_pdf(): Write PDF to a file (atomic replace)

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
    - builder.output.document: Document model

Used By:
    - builder.controller: Pipeline orchestration
"""

from __future__ import annotations

import io
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict

from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from report_toolkit.errors import BuildError

from .document import Document, DocumentPage, ImageOp, LineOp, RectOp, TextRun

logger = logging.getLogger(__name__)


def document_to_bytes(document: Document) -> bytes:
    """
    Render a Document to PDF bytes.

    Args:
        document: Finished document from the renderer

    Returns:
        PDF file contents

    Example:
        >>> data = document_to_bytes(document)
        >>> data[:5]
        b'%PDF-'
    """
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=document.page_size)
    c.setTitle(document.title)

    # One reader per image so each is embedded once
    readers = {asset_id: _pil_to_reader(img.image) for asset_id, img in document.images.items()}

    for page in document.pages:
        _render_page(c, page, readers)
        c.showPage()

    c.save()
    logger.debug(f"Serialized {document.page_count} pages ({buf.tell()} bytes)")
    return buf.getvalue()


def write_pdf(document: Document, output_path: Path) -> Path:
    """
    Write a Document to a PDF file.

    The file is written to a temporary sibling and moved into place, so a
    failure never leaves a truncated PDF behind.

    Raises:
        BuildError: If the file cannot be written
    """
    data = document_to_bytes(document)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output_path.stem}-", suffix=".pdf", dir=output_path.parent
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, output_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise BuildError(f"Cannot write {output_path}: {e}") from e

    logger.info(f"Wrote {document.page_count} pages to {output_path}")
    return output_path


def _render_page(c: canvas.Canvas, page: DocumentPage, readers: Dict[str, ImageReader]) -> None:
    """Draw one page's operations in order."""
    for op in page.operations:
        if isinstance(op, TextRun):
            c.setFillColorRGB(*op.color)
            c.setFont(op.font, op.size)
            c.drawString(op.x, op.y, op.text)
        elif isinstance(op, LineOp):
            c.setStrokeColorRGB(*op.color)
            c.setLineWidth(op.width)
            c.line(op.x1, op.y1, op.x2, op.y2)
        elif isinstance(op, RectOp):
            c.saveState()
            if op.fill is not None:
                c.setFillColorRGB(*op.fill)
            if op.stroke is not None:
                c.setStrokeColorRGB(*op.stroke)
                c.setLineWidth(op.stroke_width)
            c.rect(
                op.x, op.y, op.width, op.height,
                stroke=1 if op.stroke is not None else 0,
                fill=1 if op.fill is not None else 0,
            )
            c.restoreState()
        elif isinstance(op, ImageOp):
            c.drawImage(
                readers[op.asset_id],
                op.x,
                op.y,
                width=op.width,
                height=op.height,
                mask="auto",
            )
        else:
            raise TypeError(f"Unknown draw operation: {op!r}")


def _pil_to_reader(img: Image.Image) -> ImageReader:
    """
    Convert PIL image to ReportLab ImageReader.

    Args:
        img: PIL Image object

    Returns:
        ImageReader for use with ReportLab
    """
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return ImageReader(buf)
