import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import report_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from report_toolkit.builder.images import AssetCache, LoadedImage
from report_toolkit.builder.layout import PageGeometry
from report_toolkit.core.models import ColumnSpec, SingleKey, Signer


class FixedWidthMeasurer:
    """Every character is `per_char` units wide, whatever the font or size."""

    def __init__(self, per_char: float = 1.0):
        self.per_char = per_char
        self.calls = 0

    def measure_width(self, text, font, size):
        self.calls += 1
        return len(text) * self.per_char


# Common test fixtures
@pytest.fixture
def measurer():
    """Deterministic 1 unit/char measurer."""
    return FixedWidthMeasurer()


@pytest.fixture
def twenty_rows_geometry():
    """
    Geometry that holds exactly 20 single-line rows on every page.

    Row height is min_row_height (25). Table area on both first and
    continuation pages: 725 - 40 - 120 - 25 - 40 = 500 = 20 * 25. The
    120-unit title band holds logos, three title lines and full metadata.
    """
    return PageGeometry(page_height=725, title_band_height=120, continuation_top=120)


@pytest.fixture
def columns():
    return (
        ColumnSpec.numbered(),
        ColumnSpec("Id", 60, SingleKey("id")),
        ColumnSpec("Description", 200, SingleKey("description")),
        ColumnSpec("Value", 80, SingleKey("value")),
    )


@pytest.fixture
def make_rows():
    """Factory for single-line rows."""
    def _make(count: int):
        return [
            {"id": f"A{i:03d}", "description": f"Item {i}", "value": "100.50"}
            for i in range(1, count + 1)
        ]
    return _make


@pytest.fixture
def signers():
    return (
        Signer("Prepared by", "Ana Ruiz", "Clerk"),
        Signer("Approved by", "Luis Mora", "Director"),
    )


@pytest.fixture
def logo_cache():
    """Cache holding both first-page logos (2:1 aspect ratio)."""
    cache = AssetCache()
    cache.add(LoadedImage("left_logo", Image.new("RGB", (80, 40), color="navy")))
    cache.add(LoadedImage("right_logo", Image.new("RGBA", (60, 30), color=(200, 0, 0, 255))))
    return cache


@pytest.fixture
def asset_dir(tmp_path: Path):
    """Directory with both default logo files."""
    root = tmp_path / "assets"
    root.mkdir()
    Image.new("RGB", (200, 100), color="white").save(root / "left_logo.png")
    Image.new("RGBA", (100, 100), color=(0, 128, 0, 255)).save(root / "right_logo.png")
    return root
