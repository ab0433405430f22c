"""
Module: builder.config

Purpose:
    Document-level settings for building a report: title, output
    location, first-page text, locale and logo assets. Page geometry is
    configured separately (builder.layout.config.PageGeometry).

Key Classes:
    - ReportConfig: Main configuration for building reports

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - builder.controller: Main build controller
    - core.spec_loader: JSON report descriptions
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

from report_toolkit.common.formatting import DEFAULT_LOCALE, get_profile
from report_toolkit.errors import ConfigurationError

_UNSAFE_FILENAME = re.compile(r'[\\/:*?"<>|\x00-\x1f]')

DEFAULT_LOGOS = {
    "left_logo": "left_logo.png",
    "right_logo": "right_logo.png",
}


@dataclass(frozen=True)
class ReportConfig:
    """
    Configuration for building a report (immutable).

    Attributes:
        title: Document title, last centered line on page one
        file_name: Output file name without extension
        output_dir: Directory the PDF is written to
        header_lines: Institution lines drawn above the title
        affiliation: Affiliation printed in the metadata block
        value_key: Row field summed in the summary box
        locale: Formatter locale profile name
        asset_dir: Directory the logo files are read from
        logos: Logo asset id -> file name under asset_dir
        font_files: Optional TrueType fonts to register (name -> path)

    Example:
        >>> config = ReportConfig(
        ...     title="Inventory survey",
        ...     file_name="survey_2026",
        ...     output_dir=Path("out"),
        ... )
    """

    # Required
    title: str
    file_name: str
    output_dir: Path

    # First page
    header_lines: Tuple[str, ...] = ()
    affiliation: Optional[str] = None

    # Summary
    value_key: Optional[str] = None
    locale: str = DEFAULT_LOCALE

    # Assets
    asset_dir: Optional[Path] = None
    logos: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_LOGOS))
    font_files: Dict[str, Path] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.title.strip():
            raise ConfigurationError("title must not be empty")
        if not self.file_name.strip():
            raise ConfigurationError("file_name must not be empty")
        if _UNSAFE_FILENAME.search(self.file_name):
            raise ConfigurationError(f"file_name contains path or control characters: {self.file_name!r}")
        # Raises ConfigurationError for unknown locales
        get_profile(self.locale)
        object.__setattr__(self, "header_lines", tuple(self.header_lines))

    @property
    def pdf_path(self) -> Path:
        name = self.file_name if self.file_name.lower().endswith(".pdf") else f"{self.file_name}.pdf"
        return self.output_dir / name
