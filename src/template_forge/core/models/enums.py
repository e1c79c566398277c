"""
Module: enums

Purpose:
    String enums shared by the element and spec models. Values are the
    exact strings written to persisted spec JSON.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ElementType(str, Enum):
    """Type tag of a positioned visual primitive."""
    BACKGROUND_TEXTURE = "BackgroundTexture"
    CONTAINER = "Container"
    GRID_LINES = "GridLines"
    PATTERN = "Pattern"
    HEADER = "Header"
    TITLE = "Title"
    BODY_TEXT = "BodyText"
    DIVIDER = "Divider"
    SLOT = "Slot"

    def __str__(self) -> str:
        return self.value

    @property
    def is_text(self) -> bool:
        """Header, Title and BodyText carry text."""
        return self in TEXT_TYPES

    @property
    def is_stackable(self) -> bool:
        """Types laid out by the module stack engine."""
        return self in STACKABLE_TYPES


TEXT_TYPES = frozenset({ElementType.HEADER, ElementType.TITLE, ElementType.BODY_TEXT})

# Everything else is "legacy" to the stack engine and keeps its own rect.
STACKABLE_TYPES = frozenset({
    ElementType.HEADER,
    ElementType.TITLE,
    ElementType.BODY_TEXT,
    ElementType.DIVIDER,
    ElementType.PATTERN,
})


class SpecKind(str, Enum):
    """Whether a spec is a slot layout or a content module."""
    LAYOUT = "layout"
    MODULE = "module"

    def __str__(self) -> str:
        return self.value


class LayoutPreset(str, Enum):
    """Per-element sizing intent inside a module stack."""
    FIXED = "fixed"
    FIT = "fit"
    FILL = "fill"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> LayoutPreset:
        """Parse a preset, case-insensitively; anything unknown is FIXED."""
        raw = str(value if value is not None else "").strip().lower()
        for preset in cls:
            if preset.value == raw:
                return preset
        return cls.FIXED


class PatternVariant(str, Enum):
    """Stroke pattern drawn by a Pattern element."""
    LINES = "lines"
    GRID = "grid"
    DOTS = "dots"
    BLANK = "blank"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> PatternVariant:
        """Parse a variant, case-insensitively; anything unknown is GRID."""
        raw = str(value if value is not None else "").strip().lower()
        for variant in cls:
            if variant.value == raw:
                return variant
        return cls.GRID


class LayoutMode(str, Enum):
    """Slot generation mode recorded in ``layoutAssist``."""
    GRID = "grid"
    FLEX = "flex"

    def __str__(self) -> str:
        return self.value


class FlexDirection(str, Enum):
    """Main axis of a flex slot arrangement."""
    ROW = "row"
    COLUMN = "column"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> FlexDirection:
        """Parse a direction, case-insensitively; anything unknown is ROW."""
        raw = str(value if value is not None else "").strip().lower()
        for direction in cls:
            if direction.value == raw:
                return direction
        return cls.ROW
