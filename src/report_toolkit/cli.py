"""
Command line entry point.

Usage:
    report-toolkit build --spec report.json --rows rows.json --output-dir out/
    report-toolkit estimate --spec report.json --rows rows.json
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from report_toolkit import __version__
from report_toolkit.builder import build_report, estimate_pagination, prepare_measurer
from report_toolkit.core.spec_loader import load_report_spec, load_rows
from report_toolkit.errors import ReportError

logger = logging.getLogger("report_toolkit")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="report-toolkit",
        description="Generate paginated tabular PDF reports.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Render a report to PDF")
    _add_common(build)
    build.add_argument("--output-dir", type=Path, default=None, help="Directory for the PDF")
    build.add_argument("--assets", type=Path, default=None, help="Directory holding the logo files")

    estimate = sub.add_parser("estimate", help="Print the page plan without rendering")
    _add_common(estimate)
    return parser


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--spec", type=Path, required=True, help="Report description (JSON)")
    parser.add_argument("--rows", type=Path, required=True, help="Dataset (JSON array of objects)")


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "build":
            return _run_build(args)
        return _run_estimate(args)
    except ReportError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1


def _run_build(args: argparse.Namespace) -> int:
    spec = load_report_spec(args.spec, output_dir=args.output_dir, asset_dir=args.assets)
    rows = load_rows(args.rows)
    result = build_report(
        spec.config,
        rows,
        spec.columns,
        spec.signers,
        geometry=spec.geometry,
    )
    for warning in result.warnings:
        logger.warning(warning)
    print(f"{result.pdf_path} ({result.page_count} pages, {result.row_count} rows)")
    return 0


def _run_estimate(args: argparse.Namespace) -> int:
    spec = load_report_spec(args.spec)
    rows = load_rows(args.rows)
    measurer = prepare_measurer(spec.config, spec.geometry)
    plan = estimate_pagination(rows, spec.columns, spec.geometry, len(spec.signers), measurer)
    counts = ", ".join(str(n) for n in plan.per_page_row_counts)
    print(f"pages: {plan.total_pages}")
    print(f"rows per page: {counts}")
    print(f"trailing block on own page: {'yes' if plan.trailing_block_on_own_page else 'no'}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
