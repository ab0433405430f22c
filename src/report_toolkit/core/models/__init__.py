"""
Module: core.models

Purpose:
    Immutable data models describing a report's table and signers.
"""

from .columns import (
    ColumnSpec,
    ColumnSource,
    CompositeKeys,
    Row,
    RowNumber,
    SingleKey,
    table_width,
)
from .signers import Signer, last_signer

__all__ = [
    "ColumnSpec",
    "ColumnSource",
    "CompositeKeys",
    "Row",
    "RowNumber",
    "SingleKey",
    "table_width",
    "Signer",
    "last_signer",
]
