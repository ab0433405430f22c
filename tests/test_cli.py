"""
Tests for the command line entry point.
"""

import json
from pathlib import Path

import pytest
import reportlab

from report_toolkit.cli import main

VERA_DIR = Path(reportlab.__file__).parent / "fonts"


@pytest.fixture
def spec_file(tmp_path, asset_dir):
    data = {
        "title": "Inventory survey",
        "file_name": "survey",
        "locale": "en_US",
        "value_key": "value",
        "asset_dir": str(asset_dir),
        "columns": [
            {"header": "No.", "width": 30, "row_number": True},
            {"header": "Id", "width": 60, "key": "id"},
            {"header": "Value", "width": 80, "key": "value"},
        ],
        "signers": [{"concept": "Approved by", "name": "Luis Mora", "title": "Director"}],
    }
    path = tmp_path / "report.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def rows_file(tmp_path, make_rows):
    path = tmp_path / "rows.json"
    path.write_text(json.dumps(make_rows(30)), encoding="utf-8")
    return path


def test_build_when_inputs_valid_then_writes_pdf(spec_file, rows_file, tmp_path, capsys):
    # Act
    code = main(["build", "--spec", str(spec_file), "--rows", str(rows_file), "--output-dir", str(tmp_path / "out")])

    # Assert
    assert code == 0
    assert (tmp_path / "out" / "survey.pdf").exists()
    assert "survey.pdf" in capsys.readouterr().out


def test_estimate_prints_plan(spec_file, rows_file, capsys):
    code = main(["estimate", "--spec", str(spec_file), "--rows", str(rows_file)])

    out = capsys.readouterr().out
    assert code == 0
    # 14 rows under the title band, 16 more leave 85 units: too little for the trailing block
    assert "pages: 3" in out
    assert "rows per page: 14, 16" in out
    assert "trailing block on own page: yes" in out


def test_build_when_rows_missing_then_exit_code_one(spec_file, tmp_path):
    code = main(["build", "--spec", str(spec_file), "--rows", str(tmp_path / "none.json")])

    assert code == 1


def test_build_when_rows_empty_then_exit_code_one(spec_file, tmp_path):
    rows = tmp_path / "empty.json"
    rows.write_text("[]", encoding="utf-8")

    code = main(["build", "--spec", str(spec_file), "--rows", str(rows), "--output-dir", str(tmp_path)])

    assert code == 1


def _vera_spec(tmp_path, asset_dir, **extra):
    data = {
        "title": "Inventory survey",
        "file_name": "survey",
        "locale": "en_US",
        "asset_dir": str(asset_dir),
        "geometry": {"font_name": "CliVera", "bold_font_name": "CliVeraBd"},
        "columns": [
            {"header": "No.", "width": 30, "row_number": True},
            {"header": "Id", "width": 60, "key": "id"},
        ],
        "signers": [{"concept": "Approved by", "name": "Luis Mora", "title": "Director"}],
        **extra,
    }
    path = tmp_path / "vera.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.mark.skipif(not VERA_DIR.joinpath("Vera.ttf").exists(), reason="ReportLab test fonts not installed")
def test_estimate_when_spec_registers_font_files_then_uses_them(tmp_path, asset_dir, rows_file, capsys):
    # Arrange
    spec = _vera_spec(
        tmp_path,
        asset_dir,
        font_files={"CliVera": str(VERA_DIR / "Vera.ttf"), "CliVeraBd": str(VERA_DIR / "VeraBd.ttf")},
    )

    # Act
    code = main(["estimate", "--spec", str(spec), "--rows", str(rows_file)])

    # Assert
    assert code == 0
    assert "pages:" in capsys.readouterr().out


def test_estimate_when_geometry_font_not_registered_then_exit_code_one(tmp_path, asset_dir, rows_file):
    spec = _vera_spec(tmp_path, asset_dir, geometry={"font_name": "CliUnregistered"})

    code = main(["estimate", "--spec", str(spec), "--rows", str(rows_file)])

    assert code == 1


def test_no_command_is_usage_error():
    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 2
