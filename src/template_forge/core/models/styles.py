"""
Module: styles

Purpose:
    Central lookup table of default typography and sizing per element
    type. The editor defaults, the stack layout engine, the compositor
    and the text-fill budgets all read from here so they cannot drift.

Key Objects:
    - TextStyle: Font size / weight / line height triple
    - TEXT_STYLES: ElementType -> TextStyle
    - FIT_HEIGHTS: Intrinsic "fit" heights for text types
    - text_style(type): Lookup with BodyText fallback
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

from .enums import ElementType


@dataclass(frozen=True)
class TextStyle:
    """
    Typography defaults for a text element type.

    Attributes:
        font_size: Font size in points
        font_weight: CSS-style numeric weight (400 regular, 700 bold)
        line_height: Line height multiplier
    """
    font_size: float
    font_weight: int
    line_height: float

    @property
    def is_bold(self) -> bool:
        return self.font_weight >= 600


TEXT_STYLES = MappingProxyType({
    ElementType.HEADER: TextStyle(font_size=24.0, font_weight=700, line_height=1.2),
    ElementType.TITLE: TextStyle(font_size=18.0, font_weight=400, line_height=1.25),
    ElementType.BODY_TEXT: TextStyle(font_size=12.0, font_weight=400, line_height=1.35),
})

# "fit" preset heights used by the module stack engine
FIT_HEIGHTS = MappingProxyType({
    ElementType.HEADER: 44.0,
    ElementType.TITLE: 36.0,
    ElementType.BODY_TEXT: 72.0,
})

DEFAULT_TEXT_COLOR = "#111827"
DEFAULT_STROKE = "#e5e7eb"
DEFAULT_CONTAINER_STROKE = "#d1d5db"
DEFAULT_BACKGROUND_FILL = "#f8fafc"
DEFAULT_DIVIDER_THICKNESS = 2.0
DEFAULT_PATTERN_SPACING = 16.0
MIN_PATTERN_SPACING = 6.0
MIN_FONT_SIZE = 8.0

# Inner padding between a text element's rect and its glyphs
TEXT_PADDING = 6.0


def text_style(element_type: ElementType) -> TextStyle:
    """Return the text style for a type (BodyText style for unknown types)."""
    return TEXT_STYLES.get(element_type, TEXT_STYLES[ElementType.BODY_TEXT])
