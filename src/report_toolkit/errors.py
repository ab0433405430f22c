"""
Module: errors

Purpose:
    Exception taxonomy shared by the layout engine, renderer and controller.
    Every failure surfaces synchronously to the caller of render/build;
    nothing here is retried internally.

Key Classes:
    - ReportError: Base class for all toolkit errors
    - ConfigurationError: Geometry/columns can never produce a valid layout
    - AssetError: Image or font asset cannot be loaded
    - EmptyDatasetError: Render requested for zero rows
    - RenderCancelled: Cooperative cancellation between pages
    - PaginationMismatchError: Dry run and drawing pass disagreed
    - BuildError: Output file could not be produced

Used By:
    - builder.layout: Precondition checks and planner progress
    - builder.images: Asset loading
    - builder.output.renderer: Rendering pipeline
    - builder.controller: Build orchestration
"""

from __future__ import annotations

from typing import Optional


class ReportError(Exception):
    """Base class for report toolkit errors."""
    pass


class ConfigurationError(ReportError, ValueError):
    """
    Invalid geometry, column schema or report description.

    Attributes:
        column: Header of the offending column, if the error is column-specific
    """

    def __init__(self, message: str, *, column: Optional[str] = None) -> None:
        super().__init__(message)
        self.column = column


class AssetError(ReportError):
    """Image or font asset could not be loaded or measured."""
    pass


class EmptyDatasetError(ReportError):
    """Render was requested with zero rows."""
    pass


class RenderCancelled(ReportError):
    """Render aborted by the caller's cancellation check."""
    pass


class PaginationMismatchError(ReportError):
    """Drawing pass produced different page breaks than the dry run."""
    pass


class BuildError(ReportError):
    """Error writing the finished document."""
    pass
