"""
Module: core.spec_loader

Purpose:
    Load a report description and a dataset from JSON files.
    Malformed input is reported as ConfigurationError naming the field.

Key Functions:
    - load_report_spec(): Report description -> ReportSpec
    - load_rows(): JSON array of objects -> list of rows
    - parse_column(): One column description -> ColumnSpec

JSON shape:
    {
      "title": "...", "file_name": "...",
      "header_lines": ["...", "..."], "affiliation": "...",
      "value_key": "valor", "locale": "es_MX",
      "logos": {"left_logo": "a.png", "right_logo": "b.png"},
      "geometry": {"font_size": 7, ...},
      "columns": [
        {"header": "No.", "width": 30, "row_number": true},
        {"header": "Id", "width": 65, "key": "id_inv"},
        {"header": "Where", "width": 90, "keys": ["area", "room"], "uppercase": true}
      ],
      "signers": [{"concept": "...", "name": "...", "title": "..."}]
    }

Dependencies:
    - json (std)

Used By:
    - cli: Command line entry point
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from report_toolkit.builder.config import DEFAULT_LOGOS, ReportConfig
from report_toolkit.builder.layout.config import PageGeometry
from report_toolkit.errors import ConfigurationError

from .models.columns import ColumnSpec, CompositeKeys, RowNumber, SingleKey
from .models.signers import Signer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportSpec:
    """Everything needed to build one report except the rows."""
    config: ReportConfig
    geometry: PageGeometry
    columns: Tuple[ColumnSpec, ...]
    signers: Tuple[Signer, ...]


def load_report_spec(
    path: Path,
    *,
    output_dir: Optional[Path] = None,
    asset_dir: Optional[Path] = None,
) -> ReportSpec:
    """
    Load a report description.

    Args:
        path: JSON file
        output_dir: Overrides the file's "output_dir" (default: current dir)
        asset_dir: Overrides the file's "asset_dir" (default: the file's dir)

    Raises:
        ConfigurationError: If the file is unreadable or malformed
    """
    data = _read_json(path)
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: top level must be an object")

    columns_data = data.get("columns")
    if not isinstance(columns_data, list) or not columns_data:
        raise ConfigurationError(f"{path}: 'columns' must be a non-empty list")
    columns = tuple(parse_column(c, i) for i, c in enumerate(columns_data))

    signers_data = data.get("signers", [])
    if not isinstance(signers_data, list):
        raise ConfigurationError(f"{path}: 'signers' must be a list")
    signers = tuple(_parse_signer(s, i) for i, s in enumerate(signers_data))

    geometry_data = data.get("geometry", {})
    if not isinstance(geometry_data, dict):
        raise ConfigurationError(f"{path}: 'geometry' must be an object")
    try:
        geometry = PageGeometry.from_dict(geometry_data)
    except TypeError as e:
        raise ConfigurationError(f"{path}: invalid geometry: {e}") from e

    base = path.parent
    resolved_assets = asset_dir or _optional_path(data.get("asset_dir"), base) or base
    try:
        config = ReportConfig(
            title=_require_str(data, "title"),
            file_name=_require_str(data, "file_name"),
            output_dir=output_dir or _optional_path(data.get("output_dir"), base) or Path("."),
            header_lines=tuple(str(line) for line in data.get("header_lines", [])),
            affiliation=data.get("affiliation"),
            value_key=data.get("value_key"),
            locale=data.get("locale", "es_MX"),
            asset_dir=resolved_assets,
            logos=dict(data.get("logos") or DEFAULT_LOGOS),
            font_files={
                name: _optional_path(p, base)
                for name, p in (data.get("font_files") or {}).items()
                if p
            },
        )
    except TypeError as e:
        raise ConfigurationError(f"{path}: {e}") from e

    logger.debug(f"Loaded report spec {path}: {len(columns)} columns, {len(signers)} signers")
    return ReportSpec(config=config, geometry=geometry, columns=columns, signers=signers)


def load_rows(path: Path) -> List[Dict[str, Any]]:
    """
    Load a dataset: a JSON array of objects.

    Raises:
        ConfigurationError: If the file is not an array of objects
    """
    data = _read_json(path)
    if not isinstance(data, list):
        raise ConfigurationError(f"{path}: rows file must contain a JSON array")
    for i, row in enumerate(data):
        if not isinstance(row, dict):
            raise ConfigurationError(f"{path}: row {i + 1} is not an object")
    return data


def parse_column(data: Any, index: int = 0) -> ColumnSpec:
    """
    Parse one column description.

    Exactly one of "key", "keys" or "row_number" selects the source.
    """
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"columns[{index}] must be an object")
    header = data.get("header")
    if not isinstance(header, str):
        raise ConfigurationError(f"columns[{index}].header must be a string")
    width = data.get("width")
    if isinstance(width, bool) or not isinstance(width, (int, float)):
        raise ConfigurationError(f"columns[{index}].width must be a number", column=header)

    selectors = [name for name in ("key", "keys", "row_number") if data.get(name)]
    if len(selectors) != 1:
        raise ConfigurationError(
            f"columns[{index}] needs exactly one of key/keys/row_number", column=header
        )

    if selectors[0] == "key":
        source = SingleKey(str(data["key"]))
    elif selectors[0] == "keys":
        keys = data["keys"]
        if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
            raise ConfigurationError(f"columns[{index}].keys must be a list of strings", column=header)
        separator = data.get("separator", " / ")
        source = CompositeKeys(tuple(keys), separator=str(separator))
    else:
        source = RowNumber()

    return ColumnSpec(
        header=header,
        width=float(width),
        source=source,
        uppercase=bool(data.get("uppercase", False)),
    )


def _parse_signer(data: Any, index: int) -> Signer:
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"signers[{index}] must be an object")
    return Signer.from_dict(data)


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigurationError(f"File not found: {path}") from None
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path} is not valid JSON: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e


def _require_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"'{key}' must be a non-empty string")
    return value


def _optional_path(value: Any, base: Path) -> Optional[Path]:
    if value in (None, ""):
        return None
    p = Path(str(value))
    return p if p.is_absolute() else base / p
