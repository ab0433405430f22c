"""
Module: builder.controller

Purpose:
    Orchestrate the complete report building pipeline.
    Fonts → Assets → Render (dry run + drawing) → Write PDF

Key Functions:
    - build_report(): Main entry point for building a report
    - prepare_measurer(): Font registration shared with the estimate command

Key Classes:
    - BuildResult: Complete build result

Business rules applied here (not in the layout engine):
    - The metadata block names the last signer of the list
    - The two first-page logos come from the configured asset directory

Dependencies:
    - builder.images: Asset preloading
    - builder.output: Rendering and PDF writing
    - common.formatting: Default formatter for the configured locale

Used By:
    - cli: Command line entry point
"""

from __future__ import annotations

import datetime as _dt
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

from report_toolkit.common.formatting import Formatter
from report_toolkit.core.models.columns import ColumnSpec, Row
from report_toolkit.core.models.signers import Signer, last_signer
from report_toolkit.errors import AssetError

from .config import ReportConfig
from .images import AssetCache, AssetLoader, DirectoryAssetLoader
from .layout import PageGeometry, ReportLabMeasurer, TextMeasurer
from .layout.models import PaginationPlan
from .output import LEFT_LOGO, RIGHT_LOGO, DocumentRenderer, write_pdf

logger = logging.getLogger(__name__)


def prepare_measurer(config: ReportConfig, geometry: PageGeometry) -> ReportLabMeasurer:
    """
    ReportLab measurer with the configured TrueType fonts registered.

    Shared by build_report and the estimate command so both measure with
    the same fonts.

    Raises:
        AssetError: If a font file cannot be loaded or a geometry font is unknown
    """
    measurer = ReportLabMeasurer()
    for name, path in config.font_files.items():
        measurer.register_font(name, path)
    measurer.ensure_font(geometry.font_name)
    measurer.ensure_font(geometry.bold_font_name)
    return measurer


@dataclass(frozen=True)
class BuildResult:
    """
    Complete build result (immutable).

    Attributes:
        pdf_path: Path to the generated PDF
        page_count: Number of pages generated
        row_count: Number of data rows rendered
        plan: Pagination plan from the dry run
        metadata: Build metadata dictionary
        warnings: Any warnings during build

    Example:
        >>> result = build_report(config, rows, columns, signers)
        >>> print(f"Generated {result.page_count} pages for {result.row_count} rows")
    """
    pdf_path: Path
    page_count: int
    row_count: int
    plan: PaginationPlan
    metadata: dict
    warnings: tuple[str, ...]


def build_report(
    config: ReportConfig,
    rows: Sequence[Row],
    columns: Sequence[ColumnSpec],
    signers: Sequence[Signer],
    *,
    geometry: Optional[PageGeometry] = None,
    loader: Optional[AssetLoader] = None,
    assets: Optional[AssetCache] = None,
    formatter: Optional[Formatter] = None,
    measurer: Optional[TextMeasurer] = None,
    report_date: Optional[_dt.date] = None,
    cancel_check: Optional[Callable[[], bool]] = None,
) -> BuildResult:
    """
    Build a report from start to finish.

    Pipeline:
    1. Register/verify fonts
    2. Preload the two logos (once, before layout)
    3. Render: dry-run pagination, then the drawing pass
    4. Write the PDF atomically

    Args:
        config: Report configuration
        rows: Dataset
        columns: Column schema
        signers: Signature boxes; the last one also fills the metadata block
        geometry: Page geometry (default PageGeometry())
        loader: Asset loader (default: files under config.asset_dir)
        assets: Caller-supplied cache, reused instead of reloading
        formatter: Formatter (default: config.locale)
        measurer: Text measurer (default: ReportLab font metrics)
        report_date: Date for the metadata block (default today)
        cancel_check: Called between pages; True aborts without writing

    Returns:
        BuildResult with paths and metadata

    Raises:
        EmptyDatasetError: If rows is empty
        ConfigurationError: If geometry/columns cannot produce a layout
        AssetError: If fonts or logos cannot be loaded
        RenderCancelled: If cancel_check returned True
        BuildError: If the PDF cannot be written
    """
    warnings: list[str] = []
    start_time = time.perf_counter()
    geometry = geometry or PageGeometry()
    formatter = formatter or Formatter.for_locale(config.locale)

    logger.info(f"Starting report {config.file_name!r}: {len(rows)} rows, {len(columns)} columns")

    # 1. Fonts
    if measurer is None:
        measurer = prepare_measurer(config, geometry)

    # 2. Assets
    if assets is None:
        if loader is None:
            if config.asset_dir is None:
                raise AssetError("No asset_dir configured for the report logos")
            loader = DirectoryAssetLoader(config.asset_dir, config.logos)
        assets = AssetCache(loader)
    assets.preload([LEFT_LOGO, RIGHT_LOGO])

    # 3. Render
    if not signers:
        warnings.append("No signers supplied; signature band omitted")
        logger.warning("No signers supplied; signature band omitted")

    renderer = DocumentRenderer(geometry, measurer, formatter, assets)
    document = renderer.render(
        rows,
        columns,
        config.title,
        signers,
        last_signer(signers),
        header_lines=config.header_lines,
        value_key=config.value_key,
        affiliation=config.affiliation,
        report_date=report_date,
        cancel_check=cancel_check,
    )

    plan = document.plan

    # 4. Write
    pdf_path = write_pdf(document, config.pdf_path)

    duration = time.perf_counter() - start_time
    metadata = {
        "generated_at": _dt.datetime.now().isoformat(timespec="seconds"),
        "duration_seconds": round(duration, 3),
        "title": config.title,
        "locale": config.locale,
        "total_pages": plan.total_pages,
        "per_page_row_counts": list(plan.per_page_row_counts),
        "trailing_block_on_own_page": plan.trailing_block_on_own_page,
    }
    logger.info(f"Built {pdf_path} ({document.page_count} pages) in {duration:.2f}s")

    return BuildResult(
        pdf_path=pdf_path,
        page_count=document.page_count,
        row_count=len(rows),
        plan=plan,
        metadata=metadata,
        warnings=tuple(warnings),
    )
