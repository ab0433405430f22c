"""
Module: builder.output

Purpose:
    Drawing pass and PDF output.
    Converts a dataset into a Document, then a Document into PDF bytes.

Key Functions:
    - document_to_bytes(): Serialize a Document
    - write_pdf(): Write a Document to disk

Key Classes:
    - DocumentRenderer: Drawing pass
    - Document / DocumentPage: Finished, immutable output

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
"""

from .document import Document, DocumentPage, ImageOp, LineOp, RectOp, TextRun
from .renderer import DocumentRenderer, LEFT_LOGO, RIGHT_LOGO
from .writer import document_to_bytes, write_pdf

__all__ = [
    "Document",
    "DocumentPage",
    "DocumentRenderer",
    "ImageOp",
    "LineOp",
    "RectOp",
    "TextRun",
    "LEFT_LOGO",
    "RIGHT_LOGO",
    "document_to_bytes",
    "write_pdf",
]
