"""
Module: engine.output.text

Purpose:
    Text and colour helpers shared by the SVG, PDF and PNG renderers.

Key Functions:
    - wrap_text_to_width(): Greedy word wrap using an average glyph width
    - parse_hex_color(): "#rgb" / "#rrggbb" -> (r, g, b) in 0..1
    - escape_xml(), safe_svg_id(): SVG string safety
    - format_number(): Compact numbers for SVG attributes

Used By:
    - engine.output.svg
    - engine.output.pdf
    - engine.output.preview
"""

from __future__ import annotations

import math
import re
from typing import List, Tuple

# Average glyph width of a sans font, as a fraction of the font size
GLYPH_WIDTH_EM = 0.55

# Unparsable colours render near-white instead of failing
FALLBACK_RGB = (0.97, 0.98, 0.99)

_HEX6 = re.compile(r"^[0-9a-fA-F]{6}$")
_UNSAFE_ID_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def wrap_text_to_width(text: str, max_width: float, font_size: float) -> List[str]:
    """
    Wrap text into lines no longer than ``max_width``.

    Width is estimated as ``0.55 * font_size`` per character. Words
    longer than a full line are broken into line-sized chunks. Blank
    text produces a single empty line.

    Example:
        >>> wrap_text_to_width("alpha beta gamma", 40, 10)
        ['alpha', 'beta', 'gamma']
        >>> wrap_text_to_width("   ", 100, 12)
        ['']
    """
    t = "" if text is None else str(text)
    if not t.strip():
        return [""]

    char_w = max(1.0, font_size * GLYPH_WIDTH_EM)
    max_chars = max(1, math.floor(max_width / char_w))

    lines: List[str] = []
    line = ""
    for word in t.split():
        if len(word) > max_chars:
            if line:
                lines.append(line)
                line = ""
            lines.extend(word[i:i + max_chars] for i in range(0, len(word), max_chars))
            continue

        candidate = f"{line} {word}" if line else word
        if len(candidate) <= max_chars:
            line = candidate
        else:
            if line:
                lines.append(line)
            line = word

    if line:
        lines.append(line)
    return lines or [t]


def parse_hex_color(value: str) -> Tuple[float, float, float]:
    """
    Parse ``#rgb`` or ``#rrggbb`` into fractional RGB.

    Anything else (names, rgba(), garbage) yields a near-white fallback.

    Example:
        >>> parse_hex_color("#f00")
        (1.0, 0.0, 0.0)
    """
    cleaned = str(value or "").strip().lstrip("#")
    if len(cleaned) == 3:
        cleaned = "".join(c * 2 for c in cleaned)
    if not _HEX6.match(cleaned):
        return FALLBACK_RGB
    n = int(cleaned, 16)
    return ((n >> 16) & 255) / 255, ((n >> 8) & 255) / 255, (n & 255) / 255


def color_to_rgb255(value: str) -> Tuple[int, int, int]:
    """Integer RGB for Pillow drawing."""
    return tuple(round(c * 255) for c in parse_hex_color(value))


def escape_xml(value: str) -> str:
    return (
        str(value or "")
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def safe_svg_id(value: str) -> str:
    """Replace characters not allowed in an SVG id with underscores."""
    return _UNSAFE_ID_CHARS.sub("_", str(value or ""))


def format_number(value: float) -> str:
    """
    Format a coordinate for an SVG attribute.

    Example:
        >>> format_number(24.0), format_number(80.5), format_number(1 / 3)
        ('24', '80.5', '0.3333')
    """
    if not math.isfinite(value):
        return "0"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.4f}".rstrip("0").rstrip(".")
