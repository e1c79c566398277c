"""
Module: elements

Purpose:
    Provides the Element dataclass and its typed props. An Element is a
    positioned, typed visual primitive (text block, divider, pattern
    fill, slot placeholder, ...). Everything else in the engine operates
    on collections of Elements.

Key Classes:
    - Element: id / type / rect / zIndex / props
    - TextProps, DividerProps, PatternProps, ContainerProps,
      BackgroundTextureProps, GridLinesProps, SlotProps: one props
      variant per element family (tagged by Element.type)

Key Functions:
    - props_from_dict(type, data): Single dispatch from JSON props
    - element_defaults(type): Editor starting rect + props per type
    - new_element_id(): Random editor-style element id

Dependencies:
    - dataclasses (std)
    - .rect.Rect, .enums, .styles

Props Round-Tripping:
    Persisted props are an open string-keyed map. Each props variant
    parses the keys it understands and keeps everything else in
    ``extra`` so that unknown editor keys survive a load/save cycle.
    The ``__slotKey`` provenance key is lifted onto Element.source_slot.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Mapping, Optional, Union

from template_forge.common.numeric import as_float

from .enums import ElementType, LayoutPreset, PatternVariant
from .rect import Rect
from .styles import (
    DEFAULT_BACKGROUND_FILL,
    DEFAULT_CONTAINER_STROKE,
    DEFAULT_DIVIDER_THICKNESS,
    DEFAULT_PATTERN_SPACING,
    DEFAULT_STROKE,
    DEFAULT_TEXT_COLOR,
    MIN_FONT_SIZE,
    MIN_PATTERN_SPACING,
    text_style,
)

SLOT_KEY_PROP = "__slotKey"


def _extra(data: Mapping[str, Any], known: frozenset[str]) -> dict[str, Any]:
    """Keys not understood by a props variant (provenance excluded)."""
    return {k: v for k, v in data.items() if k not in known and k != SLOT_KEY_PROP}


def _parse_weight(value: Any, default: int) -> int:
    """Parse a font weight given as a number or as "bold"/"normal"."""
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "bold":
            return 700
        if lowered == "normal":
            return 400
    weight = as_float(value, default)
    return int(weight) if weight > 0 else default


# ─────────────────────────────────────────────────────────────────────────────
# Props variants
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TextProps:
    """
    Props for Header, Title and BodyText elements.

    Attributes:
        text: Text content (None until composed or typed)
        font_size: Font size in points (>= 8)
        font_weight: Numeric weight (700 = bold)
        text_align: "left", "center" or "right"
        line_height: Line height multiplier (>= 1)
        color: Hex text colour
        layout_preset: Stack sizing intent
        extra: Unknown editor keys
    """
    text: Optional[str] = None
    font_size: float = 12.0
    font_weight: int = 400
    text_align: str = "left"
    line_height: float = 1.35
    color: str = DEFAULT_TEXT_COLOR
    layout_preset: LayoutPreset = LayoutPreset.FIXED
    extra: Mapping[str, Any] = field(default_factory=dict)

    KNOWN: ClassVar[frozenset[str]] = frozenset(
        {"text", "fontSize", "fontWeight", "textAlign", "lineHeight", "color", "layoutPreset"}
    )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], element_type: ElementType) -> TextProps:
        style = text_style(element_type)
        text = data.get("text")
        align = str(data.get("textAlign") or "left").strip().lower()
        return cls(
            text=None if text is None else str(text),
            font_size=max(MIN_FONT_SIZE, as_float(data.get("fontSize"), style.font_size)),
            font_weight=_parse_weight(data.get("fontWeight"), style.font_weight),
            text_align=align if align in ("left", "center", "right") else "left",
            line_height=max(1.0, as_float(data.get("lineHeight"), style.line_height)),
            color=str(data.get("color") or DEFAULT_TEXT_COLOR),
            layout_preset=LayoutPreset.parse(data.get("layoutPreset")),
            extra=_extra(data, cls.KNOWN),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = dict(self.extra)
        d.update({
            "layoutPreset": self.layout_preset.value,
            "fontSize": self.font_size,
            "fontWeight": self.font_weight,
            "textAlign": self.text_align,
            "lineHeight": self.line_height,
            "color": self.color,
        })
        if self.text is not None:
            d["text"] = self.text
        return d


@dataclass(frozen=True)
class DividerProps:
    """Props for a Divider: a filled horizontal bar ``thickness`` tall."""
    stroke: str = DEFAULT_STROKE
    thickness: float = DEFAULT_DIVIDER_THICKNESS
    layout_preset: LayoutPreset = LayoutPreset.FIXED
    extra: Mapping[str, Any] = field(default_factory=dict)

    KNOWN: ClassVar[frozenset[str]] = frozenset({"stroke", "thickness", "layoutPreset"})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], element_type: ElementType) -> DividerProps:
        return cls(
            stroke=str(data.get("stroke") or DEFAULT_STROKE),
            thickness=max(1.0, as_float(data.get("thickness"), DEFAULT_DIVIDER_THICKNESS)),
            layout_preset=LayoutPreset.parse(data.get("layoutPreset")),
            extra=_extra(data, cls.KNOWN),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = dict(self.extra)
        d.update({
            "layoutPreset": self.layout_preset.value,
            "stroke": self.stroke,
            "thickness": self.thickness,
        })
        return d


@dataclass(frozen=True)
class PatternProps:
    """Props for a Pattern: repeating strokes or dots inside the rect."""
    variant: PatternVariant = PatternVariant.GRID
    stroke: str = DEFAULT_STROKE
    spacing: float = DEFAULT_PATTERN_SPACING
    outline: bool = False
    outline_thickness: float = 2.0
    layout_preset: LayoutPreset = LayoutPreset.FIXED
    extra: Mapping[str, Any] = field(default_factory=dict)

    KNOWN: ClassVar[frozenset[str]] = frozenset(
        {"variant", "stroke", "spacing", "outline", "outlineThickness", "layoutPreset"}
    )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], element_type: ElementType) -> PatternProps:
        return cls(
            variant=PatternVariant.parse(data.get("variant")),
            stroke=str(data.get("stroke") or DEFAULT_STROKE),
            spacing=max(MIN_PATTERN_SPACING, as_float(data.get("spacing"), DEFAULT_PATTERN_SPACING)),
            outline=bool(data.get("outline", False)),
            outline_thickness=max(0.0, as_float(data.get("outlineThickness"), 2.0)),
            layout_preset=LayoutPreset.parse(data.get("layoutPreset")),
            extra=_extra(data, cls.KNOWN),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = dict(self.extra)
        d.update({
            "layoutPreset": self.layout_preset.value,
            "variant": self.variant.value,
            "stroke": self.stroke,
            "spacing": self.spacing,
            "outline": self.outline,
            "outlineThickness": self.outline_thickness,
        })
        return d


@dataclass(frozen=True)
class ContainerProps:
    """Props for a Container: an outlined, optionally filled box."""
    stroke: str = DEFAULT_CONTAINER_STROKE
    radius: float = 12.0
    fill: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    KNOWN: ClassVar[frozenset[str]] = frozenset({"stroke", "radius", "fill"})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], element_type: ElementType) -> ContainerProps:
        fill = data.get("fill")
        return cls(
            stroke=str(data.get("stroke") or DEFAULT_CONTAINER_STROKE),
            radius=max(0.0, as_float(data.get("radius"), 12.0)),
            fill=str(fill) if fill else None,
            extra=_extra(data, cls.KNOWN),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = dict(self.extra)
        d.update({"stroke": self.stroke, "radius": self.radius})
        if self.fill:
            d["fill"] = self.fill
        return d


@dataclass(frozen=True)
class BackgroundTextureProps:
    """Props for a BackgroundTexture: a solid page fill."""
    fill: str = "#ffffff"
    extra: Mapping[str, Any] = field(default_factory=dict)

    KNOWN: ClassVar[frozenset[str]] = frozenset({"fill"})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], element_type: ElementType) -> BackgroundTextureProps:
        return cls(fill=str(data.get("fill") or "#ffffff"), extra=_extra(data, cls.KNOWN))

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = dict(self.extra)
        d["fill"] = self.fill
        return d


@dataclass(frozen=True)
class GridLinesProps:
    """Props for GridLines: evenly spaced guide lines across the page."""
    cols: int = 6
    rows: int = 8
    stroke: str = DEFAULT_STROKE
    extra: Mapping[str, Any] = field(default_factory=dict)

    KNOWN: ClassVar[frozenset[str]] = frozenset({"cols", "rows", "stroke"})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], element_type: ElementType) -> GridLinesProps:
        return cls(
            cols=max(1, int(as_float(data.get("cols"), 6))),
            rows=max(1, int(as_float(data.get("rows"), 8))),
            stroke=str(data.get("stroke") or DEFAULT_STROKE),
            extra=_extra(data, cls.KNOWN),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = dict(self.extra)
        d.update({"cols": self.cols, "rows": self.rows, "stroke": self.stroke})
        return d


@dataclass(frozen=True)
class SlotProps:
    """Props for a Slot: the key modules are mapped onto at assembly."""
    slot_key: str = ""
    extra: Mapping[str, Any] = field(default_factory=dict)

    KNOWN: ClassVar[frozenset[str]] = frozenset({"slotKey"})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], element_type: ElementType) -> SlotProps:
        raw = data.get("slotKey")
        return cls(slot_key="" if raw is None else str(raw).strip(), extra=_extra(data, cls.KNOWN))

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = dict(self.extra)
        d["slotKey"] = self.slot_key
        return d


ElementProps = Union[
    TextProps,
    DividerProps,
    PatternProps,
    ContainerProps,
    BackgroundTextureProps,
    GridLinesProps,
    SlotProps,
]

PROPS_TYPES: Mapping[ElementType, type] = {
    ElementType.HEADER: TextProps,
    ElementType.TITLE: TextProps,
    ElementType.BODY_TEXT: TextProps,
    ElementType.DIVIDER: DividerProps,
    ElementType.PATTERN: PatternProps,
    ElementType.CONTAINER: ContainerProps,
    ElementType.BACKGROUND_TEXTURE: BackgroundTextureProps,
    ElementType.GRID_LINES: GridLinesProps,
    ElementType.SLOT: SlotProps,
}


def props_from_dict(element_type: ElementType, data: Any) -> ElementProps:
    """Parse a JSON props map into the variant for ``element_type``."""
    if not isinstance(data, Mapping):
        data = {}
    return PROPS_TYPES[element_type].from_dict(data, element_type)


def default_props(element_type: ElementType) -> ElementProps:
    """Props variant for a type with every field at its parsed default."""
    return props_from_dict(element_type, {})


def new_element_id(prefix: str = "el") -> str:
    """Random editor-style id such as ``el_3f9a0c...``."""
    return f"{prefix}_{secrets.token_hex(8)}"


# ─────────────────────────────────────────────────────────────────────────────
# Element
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Element:
    """
    A positioned, typed visual primitive.

    Attributes:
        id: Identifier, unique within its spec
        type: Element type tag; selects the props variant
        rect: Canvas-space rectangle
        z_index: Draw order (ties keep original order)
        props: Props variant matching ``type``
        source_slot: Slot key this element was composed into, if any
            (serialized as the non-rendering ``__slotKey`` prop)

    Example:
        >>> el = Element("h1", ElementType.HEADER, Rect(0, 0, 100, 40))
        >>> el.props.font_size
        24.0
    """

    id: str
    type: ElementType
    rect: Rect
    z_index: int = 0
    props: Optional[ElementProps] = None
    source_slot: Optional[str] = None

    def __post_init__(self) -> None:
        """Fill default props and check the variant matches the type."""
        if self.props is None:
            object.__setattr__(self, "props", default_props(self.type))
        expected = PROPS_TYPES[self.type]
        if not isinstance(self.props, expected):
            raise ValueError(
                f"{self.type.value} element {self.id!r} needs {expected.__name__}, "
                f"got {type(self.props).__name__}"
            )

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def layout_preset(self) -> LayoutPreset:
        """Stack sizing preset (FIXED for types without one)."""
        return getattr(self.props, "layout_preset", LayoutPreset.FIXED)

    @property
    def slot_key(self) -> Optional[str]:
        """Slot key for Slot elements, None otherwise."""
        if self.type is ElementType.SLOT:
            return self.props.slot_key
        return None

    # ─────────────────────────────────────────────────────────────────────────
    # Copies
    # ─────────────────────────────────────────────────────────────────────────

    def with_rect(self, rect: Rect) -> Element:
        return replace(self, rect=rect)

    def with_z(self, z_index: int) -> Element:
        return replace(self, z_index=z_index)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted element shape."""
        props = self.props.to_dict()
        if self.source_slot is not None:
            props[SLOT_KEY_PROP] = self.source_slot
        return {
            "id": self.id,
            "type": self.type.value,
            "rect": self.rect.to_dict(),
            "zIndex": self.z_index,
            "props": props,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Element:
        """
        Deserialize from the persisted element shape.

        Raises:
            ValueError: If ``type`` is not a known element type
        """
        element_type = ElementType(str(data.get("type", "")))
        raw_props = data.get("props") if isinstance(data.get("props"), Mapping) else {}
        slot = raw_props.get(SLOT_KEY_PROP)
        z_raw = as_float(data.get("zIndex"), 0.0)
        return cls(
            id=str(data.get("id", "")),
            type=element_type,
            rect=Rect.from_dict(data.get("rect")),
            z_index=int(z_raw),
            props=props_from_dict(element_type, raw_props),
            source_slot=None if slot is None else str(slot),
        )


def sort_by_z(elements) -> list[Element]:
    """Elements in draw order; equal zIndex keeps the original order."""
    return sorted(elements, key=lambda e: e.z_index)


# ─────────────────────────────────────────────────────────────────────────────
# Editor defaults
# ─────────────────────────────────────────────────────────────────────────────

def element_defaults(element_type: ElementType) -> tuple[Rect, ElementProps]:
    """
    Starting rect and props for a newly added element.

    Text typography comes from the shared style table so new elements
    match what the compositor will render.
    """
    if element_type is ElementType.BACKGROUND_TEXTURE:
        return Rect(0, 0, 612, 792), BackgroundTextureProps(fill=DEFAULT_BACKGROUND_FILL)
    if element_type is ElementType.GRID_LINES:
        return Rect(0, 0, 612, 792), GridLinesProps()
    if element_type is ElementType.PATTERN:
        return Rect(48, 340, 516, 200), PatternProps(layout_preset=LayoutPreset.FILL)
    if element_type.is_text:
        style = text_style(element_type)
        rects = {
            ElementType.HEADER: Rect(48, 48, 516, 44),
            ElementType.TITLE: Rect(48, 108, 516, 36),
            ElementType.BODY_TEXT: Rect(48, 160, 516, 120),
        }
        preset = LayoutPreset.FILL if element_type is ElementType.BODY_TEXT else LayoutPreset.FIXED
        return rects[element_type], TextProps(
            font_size=style.font_size,
            font_weight=style.font_weight,
            line_height=style.line_height,
            layout_preset=preset,
        )
    if element_type is ElementType.DIVIDER:
        return Rect(48, 300, 516, 2), DividerProps()
    if element_type is ElementType.CONTAINER:
        return Rect(48, 340, 516, 200), ContainerProps()
    if element_type is ElementType.SLOT:
        return Rect(48, 560, 516, 160), SlotProps(slot_key="slot_1")
    raise ValueError(f"Unknown element type: {element_type!r}")
