"""
Module: builder.layout.measure

Purpose:
    Text measurement capability. The layout engine never inspects glyphs
    itself; it asks a TextMeasurer for the rendered width of a string.

Key Classes:
    - TextMeasurer: Protocol for width measurement
    - GlyphChecker: Protocol for glyph coverage checks
    - ReportLabMeasurer: pdfmetrics-backed implementation

Dependencies:
    - reportlab: Font metrics for standard and TrueType fonts

Used By:
    - builder.layout.wrapper: Line wrapping
    - builder.output.renderer: Centering text
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Protocol, runtime_checkable

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont, TTFError

from report_toolkit.errors import AssetError

logger = logging.getLogger(__name__)

# Python codecs for the single-byte encodings of the standard Type1 fonts
_TYPE1_CODECS = {
    "WinAnsiEncoding": "cp1252",
    "MacRomanEncoding": "mac_roman",
}


class TextMeasurer(Protocol):
    """Width of a string rendered in a font at a size, in layout units."""

    def measure_width(self, text: str, font: str, size: float) -> float:
        ...


@runtime_checkable
class GlyphChecker(Protocol):
    """Reports the first character a font cannot draw."""

    def missing_glyph(self, text: str, font: str) -> Optional[str]:
        ...


class ReportLabMeasurer:
    """
    Measure text with ReportLab's font metrics.

    The same metrics are used by the PDF writer, so measured widths match
    what ends up on the page.

    Example:
        >>> measurer = ReportLabMeasurer()
        >>> measurer.measure_width("Total", "Helvetica", 10) > 0
        True
    """

    def measure_width(self, text: str, font: str, size: float) -> float:
        try:
            return pdfmetrics.stringWidth(text, font, size)
        except KeyError as e:
            raise AssetError(f"Font not available for measurement: {font}") from e

    def register_font(self, name: str, path: Path) -> None:
        """
        Register a TrueType font file under a name.

        Raises:
            AssetError: If the file is missing or not a usable font
        """
        if not path.exists():
            raise AssetError(f"Font file not found: {path}")
        try:
            pdfmetrics.registerFont(TTFont(name, str(path)))
        except (TTFError, OSError) as e:
            raise AssetError(f"Cannot load font {name} from {path}: {e}") from e
        logger.debug(f"Registered font {name} from {path}")

    def ensure_font(self, name: str) -> None:
        """
        Verify a font can be used before layout starts.

        Raises:
            AssetError: If ReportLab does not know the font
        """
        try:
            pdfmetrics.getFont(name)
        except KeyError as e:
            raise AssetError(f"Unknown font: {name}") from e

    def missing_glyph(self, text: str, font: str) -> Optional[str]:
        """
        First character of text that the font cannot draw, or None.

        Registered TrueType fonts are checked against their character map,
        standard Type1 fonts against their single-byte encoding. Fonts with
        a symbolic encoding (Symbol, ZapfDingbats) are not checked.
        """
        try:
            font_obj = pdfmetrics.getFont(font)
        except KeyError as e:
            raise AssetError(f"Unknown font: {font}") from e

        if isinstance(font_obj, TTFont):
            char_map = font_obj.face.charToGlyph
            return next((ch for ch in text if ord(ch) not in char_map), None)

        codec = _TYPE1_CODECS.get(getattr(font_obj, "encName", ""))
        if codec is None:
            return None
        for ch in text:
            try:
                ch.encode(codec)
            except UnicodeEncodeError:
                return ch
        return None


def check_glyphs(checker: GlyphChecker, texts: Iterable[str], font: str) -> None:
    """
    Verify a font can draw every character of every text.

    Raises:
        AssetError: Naming the first unmappable character and the font
    """
    seen = set()
    for text in texts:
        chars = set(text) - seen
        if not chars:
            continue
        seen.update(chars)
        missing = checker.missing_glyph("".join(sorted(chars)), font)
        if missing is not None:
            raise AssetError(
                f"Font {font} has no glyph for {missing!r} (U+{ord(missing):04X}) "
                f"in text {text!r}"
            )
