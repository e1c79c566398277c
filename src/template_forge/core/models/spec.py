"""
Module: spec

Purpose:
    Provides the Spec dataclass - the persisted document for a layout,
    a module, or an assembled template - plus its canvas and editor
    assist records.

Key Classes:
    - Canvas: Page size in points
    - ModuleAssist: Module alignment preferences (auto-canvas)
    - LayoutAssist: Parameters last used to generate layout slots
    - Spec: version / canvas / kind / elements / assists

Key Functions:
    - default_spec(kind): The editor's starting document per kind

Dependencies:
    - dataclasses (std)
    - .elements, .enums, .rect

Used By:
    - Every engine component; the library; serialization

Derived Views:
    ``slots``, ``slot_keys``, ``slot_rects`` and ``non_slot_elements`` are
    computed on access. A spec is never mutated; every edit returns a new
    Spec via ``with_elements`` / ``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, List, Mapping, Optional

from template_forge.common.numeric import as_float

from .elements import Element, element_defaults, new_element_id, sort_by_z
from .enums import ElementType, FlexDirection, LayoutMode, SpecKind
from .rect import Rect

SPEC_VERSION = 1


@dataclass(frozen=True, slots=True)
class Canvas:
    """Page size in points (``unit`` is always ``"pt"``)."""
    w: float
    h: float
    unit: str = "pt"

    def __post_init__(self) -> None:
        if self.w <= 0 or self.h <= 0:
            raise ValueError(f"Canvas size must be positive, got {self.w}x{self.h}")

    @property
    def rect(self) -> Rect:
        """Canvas as a Rect anchored at the origin."""
        return Rect(0, 0, self.w, self.h)

    def to_dict(self) -> dict[str, Any]:
        return {"w": self.w, "h": self.h, "unit": self.unit}

    @classmethod
    def from_dict(cls, data: Any, default: Canvas) -> Canvas:
        """Tolerant parse; missing or non-positive sizes use ``default``."""
        if not isinstance(data, Mapping):
            return default
        w = as_float(data.get("w"), default.w)
        h = as_float(data.get("h"), default.h)
        return cls(w=w if w > 0 else default.w, h=h if h > 0 else default.h)


DEFAULT_LAYOUT_CANVAS = Canvas(612, 792)
DEFAULT_MODULE_CANVAS = Canvas(640, 640)


@dataclass(frozen=True, slots=True)
class ModuleAssist:
    """Alignment of module content inside its auto-fitted canvas."""
    align_x: str = "center"
    align_y: str = "center"

    def to_dict(self) -> dict[str, str]:
        return {"alignX": self.align_x, "alignY": self.align_y}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ModuleAssist:
        return cls(
            align_x=str(data.get("alignX") or "center"),
            align_y=str(data.get("alignY") or "center"),
        )


@dataclass(frozen=True)
class LayoutAssist:
    """
    Parameters used the last time slots were generated for a layout.

    Grid layouts fill ``cols``/``rows``; flex layouts fill ``direction``,
    ``wrap``, ``count``, ``per_line`` and ``cross_size``.
    """
    mode: LayoutMode
    padding: float
    gap: float
    cols: Optional[int] = None
    rows: Optional[int] = None
    direction: Optional[FlexDirection] = None
    wrap: Optional[bool] = None
    count: Optional[int] = None
    per_line: Optional[int] = None
    cross_size: Optional[float] = None
    slot_key_base: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"mode": self.mode.value, "padding": self.padding, "gap": self.gap}
        optional = {
            "cols": self.cols,
            "rows": self.rows,
            "direction": self.direction.value if self.direction else None,
            "wrap": self.wrap,
            "count": self.count,
            "perLine": self.per_line,
            "crossSize": self.cross_size,
            "slotKeyBase": self.slot_key_base,
        }
        d.update({k: v for k, v in optional.items() if v is not None})
        return d

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LayoutAssist:
        def opt_int(key: str) -> Optional[int]:
            value = data.get(key)
            return None if value is None else int(as_float(value, 1))

        mode = LayoutMode.FLEX if str(data.get("mode")) == "flex" else LayoutMode.GRID
        direction = data.get("direction")
        wrap = data.get("wrap")
        cross = data.get("crossSize")
        base = data.get("slotKeyBase")
        return cls(
            mode=mode,
            padding=as_float(data.get("padding"), 0.0),
            gap=as_float(data.get("gap"), 0.0),
            cols=opt_int("cols"),
            rows=opt_int("rows"),
            direction=None if direction is None else FlexDirection.parse(direction),
            wrap=None if wrap is None else bool(wrap),
            count=opt_int("count"),
            per_line=opt_int("perLine"),
            cross_size=None if cross is None else as_float(cross, 1.0),
            slot_key_base=None if base is None else str(base),
        )


@dataclass(frozen=True)
class Spec:
    """
    A persisted layout/module document or an assembled template.

    Attributes:
        canvas: Page size
        elements: Elements in stored order (draw order is by zIndex)
        kind: LAYOUT or MODULE; None for assembled templates
        module_assist: Module alignment preferences
        layout_assist: Last slot-generation parameters
        version: Document version (always 1)

    Example:
        >>> spec = default_spec(SpecKind.MODULE)
        >>> [e.type.value for e in spec.elements]
        ['Header', 'BodyText', 'Divider']
    """

    canvas: Canvas
    elements: tuple[Element, ...] = ()
    kind: Optional[SpecKind] = None
    module_assist: Optional[ModuleAssist] = None
    layout_assist: Optional[LayoutAssist] = None
    version: int = SPEC_VERSION

    def __post_init__(self) -> None:
        if not isinstance(self.elements, tuple):
            object.__setattr__(self, "elements", tuple(self.elements))

    # ─────────────────────────────────────────────────────────────────────────
    # Derived views
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_empty(self) -> bool:
        return not self.elements

    @property
    def slots(self) -> List[Element]:
        """Slot elements in stored order."""
        return [e for e in self.elements if e.type is ElementType.SLOT]

    @property
    def non_slot_elements(self) -> List[Element]:
        return [e for e in self.elements if e.type is not ElementType.SLOT]

    @property
    def slot_keys(self) -> List[str]:
        """Distinct non-blank slot keys, first occurrence wins."""
        return dedupe_keys(e.slot_key for e in self.slots)

    @property
    def slot_rects(self) -> dict[str, Rect]:
        """Slot key -> rect; a repeated key resolves to its last Slot."""
        rects: dict[str, Rect] = {}
        for slot in self.slots:
            if slot.slot_key:
                rects[slot.slot_key] = slot.rect
        return rects

    @property
    def sorted_elements(self) -> List[Element]:
        """Elements in draw order."""
        return sort_by_z(self.elements)

    @property
    def max_z(self) -> int:
        """Highest zIndex, 0 for an empty spec."""
        return max((e.z_index for e in self.elements), default=0)

    def element(self, element_id: str) -> Optional[Element]:
        for e in self.elements:
            if e.id == element_id:
                return e
        return None

    def with_elements(self, elements: Iterable[Element]) -> Spec:
        return replace(self, elements=tuple(elements))

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """Serialize; ``kind`` is omitted for assembled templates."""
        d: dict[str, Any] = {"version": self.version, "canvas": self.canvas.to_dict()}
        if self.kind is not None:
            d["kind"] = self.kind.value
        d["elements"] = [e.to_dict() for e in self.elements]
        if self.module_assist is not None:
            d["moduleAssist"] = self.module_assist.to_dict()
        if self.layout_assist is not None:
            d["layoutAssist"] = self.layout_assist.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], kind: Optional[SpecKind] = None) -> Spec:
        """
        Deserialize a persisted spec.

        Args:
            data: Spec JSON object
            kind: Kind to assume when the document does not carry one

        Raises:
            ValueError: If an element has an unknown type
        """
        raw_kind = data.get("kind")
        if raw_kind is not None:
            kind = SpecKind(str(raw_kind))
        default_canvas = DEFAULT_MODULE_CANVAS if kind is SpecKind.MODULE else DEFAULT_LAYOUT_CANVAS
        raw_elements = data.get("elements") or []
        module_assist = data.get("moduleAssist")
        layout_assist = data.get("layoutAssist")
        return cls(
            canvas=Canvas.from_dict(data.get("canvas"), default_canvas),
            elements=tuple(Element.from_dict(e) for e in raw_elements if isinstance(e, Mapping)),
            kind=kind,
            module_assist=ModuleAssist.from_dict(module_assist) if isinstance(module_assist, Mapping) else None,
            layout_assist=LayoutAssist.from_dict(layout_assist) if isinstance(layout_assist, Mapping) else None,
            version=int(as_float(data.get("version"), SPEC_VERSION)),
        )

    def __repr__(self) -> str:
        kind = self.kind.value if self.kind else "assembled"
        return (
            f"Spec(kind={kind}, canvas={self.canvas.w:g}x{self.canvas.h:g}, "
            f"elements={len(self.elements)})"
        )


def dedupe_keys(keys: Iterable[Optional[str]]) -> List[str]:
    """Drop blank and repeated keys, keeping first-seen order."""
    seen: set[str] = set()
    out: List[str] = []
    for key in keys:
        key = (key or "").strip()
        if not key or key in seen:
            continue
        seen.add(key)
        out.append(key)
    return out


def default_spec(kind: SpecKind, id_factory=new_element_id) -> Spec:
    """
    Starting document for a new layout or module.

    Layouts start empty on a US Letter canvas; modules start with a
    Header, a BodyText and a Divider on a 640x640 canvas.
    """
    if kind is SpecKind.LAYOUT:
        return Spec(canvas=DEFAULT_LAYOUT_CANVAS, kind=kind)
    elements = []
    for z, element_type in enumerate(
        (ElementType.HEADER, ElementType.BODY_TEXT, ElementType.DIVIDER), start=1
    ):
        rect, props = element_defaults(element_type)
        elements.append(Element(id_factory(), element_type, rect, z, props))
    return Spec(
        canvas=DEFAULT_MODULE_CANVAS,
        elements=tuple(elements),
        kind=kind,
        module_assist=ModuleAssist(),
    )
