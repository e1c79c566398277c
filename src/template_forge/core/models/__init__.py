"""
Core Models Package

Immutable data models for template specs.

All models are frozen dataclasses. Editing operations (stack layout,
slot generation, composition) never mutate a spec; they return a new
one. Props are a tagged union selected by ``Element.type``:

| Element type(s) | Props class |
|-----------------|-------------|
| Header, Title, BodyText | `TextProps` |
| Divider | `DividerProps` |
| Pattern | `PatternProps` |
| Container | `ContainerProps` |
| BackgroundTexture | `BackgroundTextureProps` |
| GridLines | `GridLinesProps` |
| Slot | `SlotProps` |
"""

from .enums import (
    ElementType,
    FlexDirection,
    LayoutMode,
    LayoutPreset,
    PatternVariant,
    SpecKind,
    STACKABLE_TYPES,
    TEXT_TYPES,
)
from .rect import Rect
from .styles import TextStyle, TEXT_STYLES, FIT_HEIGHTS, DEFAULT_TEXT_COLOR, text_style
from .elements import (
    BackgroundTextureProps,
    ContainerProps,
    DividerProps,
    Element,
    ElementProps,
    GridLinesProps,
    PatternProps,
    SlotProps,
    TextProps,
    PROPS_TYPES,
    element_defaults,
    new_element_id,
    props_from_dict,
    sort_by_z,
)
from .spec import (
    Canvas,
    LayoutAssist,
    ModuleAssist,
    Spec,
    DEFAULT_LAYOUT_CANVAS,
    DEFAULT_MODULE_CANVAS,
    default_spec,
    dedupe_keys,
)

__all__ = [
    # Enums
    "ElementType",
    "FlexDirection",
    "LayoutMode",
    "LayoutPreset",
    "PatternVariant",
    "SpecKind",
    "STACKABLE_TYPES",
    "TEXT_TYPES",
    # Geometry
    "Rect",
    # Styles
    "TextStyle",
    "TEXT_STYLES",
    "FIT_HEIGHTS",
    "DEFAULT_TEXT_COLOR",
    "text_style",
    # Elements
    "Element",
    "ElementProps",
    "BackgroundTextureProps",
    "ContainerProps",
    "DividerProps",
    "GridLinesProps",
    "PatternProps",
    "SlotProps",
    "TextProps",
    "PROPS_TYPES",
    "element_defaults",
    "new_element_id",
    "props_from_dict",
    "sort_by_z",
    # Specs
    "Canvas",
    "LayoutAssist",
    "ModuleAssist",
    "Spec",
    "DEFAULT_LAYOUT_CANVAS",
    "DEFAULT_MODULE_CANVAS",
    "default_spec",
    "dedupe_keys",
]
