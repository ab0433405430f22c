"""
Module: builder.layout.wrapper

Purpose:
    Split a string into lines that fit a column width.

Key Functions:
    - wrap_text(): Greedy word wrap with hard splitting of long words
    - widest_glyph(): Widest single character of a string

Algorithm:
    1. Split on single spaces into words
    2. A word wider than the column flushes the current line and is cut
       into the longest fitting prefixes (at least one character each)
    3. Other words are appended to the current line while it still fits
    4. Remaining text is flushed as the last line

Dependencies:
    - builder.layout.measure: TextMeasurer

Used By:
    - builder.layout.row_height: Cell wrapping
    - builder.output.renderer: Header label wrapping
"""

from __future__ import annotations

from typing import List, Optional

from .measure import TextMeasurer


def wrap_text(
    text: str,
    max_width: float,
    font: str,
    size: float,
    measurer: TextMeasurer,
) -> List[str]:
    """
    Wrap text into lines no wider than max_width.

    Widths are compared with <=, so a line exactly at the boundary fits.
    Never raises and always terminates: every hard-split fragment holds
    at least one character, even if that character alone is too wide.

    Args:
        text: Text to wrap
        max_width: Available width in layout units
        font: Font name
        size: Font size
        measurer: Width provider

    Returns:
        Lines in order; an empty string yields a single empty line

    Example:
        >>> wrap_text("aa bb cc", 5, "Helvetica", 10, measurer)  # 1 unit/char
        ['aa bb', 'cc']
    """
    lines: List[str] = []
    current: Optional[str] = None

    def width(s: str) -> float:
        return measurer.measure_width(s, font, size)

    for word in text.split(" "):
        if width(word) > max_width:
            if current is not None:
                lines.append(current)
                current = None
            lines.extend(_hard_split(word, max_width, width))
            continue

        candidate = word if current is None else f"{current} {word}"
        if width(candidate) <= max_width:
            current = candidate
        else:
            lines.append(current)
            current = word

    # A trailing space leaves an empty current line; it adds no text
    if current or not lines:
        lines.append(current or "")
    return lines


def _hard_split(word: str, max_width: float, width) -> List[str]:
    """Cut a word into the longest prefixes that fit."""
    fragments: List[str] = []
    remaining = word
    while remaining:
        cut = 1
        while cut < len(remaining) and width(remaining[: cut + 1]) <= max_width:
            cut += 1
        fragments.append(remaining[:cut])
        remaining = remaining[cut:]
    return fragments


def widest_glyph(text: str, font: str, size: float, measurer: TextMeasurer) -> float:
    """Width of the widest single character in text (0 for empty text)."""
    return max(
        (measurer.measure_width(ch, font, size) for ch in set(text) if ch != " "),
        default=0.0,
    )
