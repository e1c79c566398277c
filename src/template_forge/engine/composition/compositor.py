"""
Module: engine.composition.compositor

Purpose:
    Build one assembled template from a layout, a slot -> module
    mapping and the module specs. Each module's content is scaled
    uniformly into its slot rectangle and centered; text elements get
    override text or deterministic placeholders.

Key Functions:
    - assemble_template_spec(): Layout + mapping -> assembled Spec
    - scaled_module_rects(): Module element rects placed into a slot

Key Classes:
    - SlotTransform: Uniform scale + offset from module space to a slot
    - CompositionError: A mapping entry could not be resolved

Dependencies:
    - common.bbox_utils: Degenerate-filtering bounds
    - core.models
    - engine.composition.placeholders, engine.composition.overrides

Used By:
    - engine.controller: TemplateAssembler
    - engine.textfill.budgets: Character budgets

Output Ordering:
    Layout non-Slot elements come first, unchanged. Then, for each
    mapping entry in order, the module's elements in stored order with
    zIndex continuing from the layout maximum. Slot elements are an
    assembly-time construct and never appear in the output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Mapping, Optional

from template_forge.common.bbox_utils import element_bounds
from template_forge.core.models import (
    ContainerProps,
    DEFAULT_TEXT_COLOR,
    DividerProps,
    Element,
    ElementType,
    Rect,
    Spec,
    TextProps,
    text_style,
)

from .overrides import OverrideMap, SlotTextOverride, override_key
from .placeholders import body_placeholder, header_placeholder, title_placeholder

logger = logging.getLogger(__name__)

# Empty-module placeholder geometry
PLACEHOLDER_MIN_PAD = 6.0
PLACEHOLDER_MAX_PAD = 18.0
PLACEHOLDER_PAD_RATIO = 0.06
PLACEHOLDER_MIN_HEADER_H = 24.0
PLACEHOLDER_MAX_HEADER_H = 44.0
PLACEHOLDER_HEADER_RATIO = 0.22
PLACEHOLDER_DIVIDER_H = 2.0
PLACEHOLDER_MIN_BODY_H = 18.0


class CompositionError(Exception):
    """Raised when a mapping entry names an unknown slot or module."""

    def __init__(self, message: str, slot_key: str = "", module_id: str = ""):
        super().__init__(message)
        self.slot_key = slot_key
        self.module_id = module_id


@dataclass(frozen=True)
class SlotTransform:
    """
    Uniform scale and offset mapping module space into a slot.

    ``x' = base_x + x * scale`` and ``y' = base_y + y * scale``; widths
    and heights are multiplied by ``scale``.
    """
    scale: float
    base_x: float
    base_y: float

    @classmethod
    def fit(cls, module_spec: Spec, slot_rect: Rect) -> SlotTransform:
        """
        Fit the module's content bounds into ``slot_rect``, centered.

        Only valid element rects count toward the bounds; the module
        canvas is used when none is valid.
        """
        bounds = element_bounds(module_spec.elements)
        if bounds is None:
            bounds = Rect(0, 0, module_spec.canvas.w, module_spec.canvas.h)
        bw = max(1.0, bounds.w)
        bh = max(1.0, bounds.h)

        scale = min(slot_rect.w / bw, slot_rect.h / bh)
        return cls(
            scale=scale,
            base_x=slot_rect.x + (slot_rect.w - bw * scale) / 2 - bounds.x * scale,
            base_y=slot_rect.y + (slot_rect.h - bh * scale) / 2 - bounds.y * scale,
        )

    def apply(self, rect: Rect) -> Rect:
        """Map a module-space rect into the slot (non-finite values read as 0)."""
        r = rect.sanitized()
        return Rect(
            self.base_x + r.x * self.scale,
            self.base_y + r.y * self.scale,
            r.w * self.scale,
            r.h * self.scale,
        )


def scaled_module_rects(module_spec: Spec, slot_rect: Rect) -> List[tuple[Element, Rect]]:
    """
    Module elements paired with their rects after placement in a slot.

    Elements whose placed rect has no area are dropped.
    """
    transform = SlotTransform.fit(module_spec, slot_rect)
    placed = [(e, transform.apply(e.rect)) for e in module_spec.elements]
    return [(e, r) for e, r in placed if r.w > 0 and r.h > 0]


# ─────────────────────────────────────────────────────────────────────────────
# Module placement
# ─────────────────────────────────────────────────────────────────────────────

class _TextCursor:
    """Hands out override text or placeholders per role, in element order."""

    def __init__(self, topic: Optional[str], override: Optional[SlotTextOverride]):
        self._topic = topic
        self._override = override or SlotTextOverride()
        self._counts = {ElementType.HEADER: 0, ElementType.TITLE: 0, ElementType.BODY_TEXT: 0}

    def next(self, element_type: ElementType) -> str:
        idx = self._counts[element_type]
        self._counts[element_type] = idx + 1
        if element_type is ElementType.HEADER:
            text, fallback = self._override.header(idx), header_placeholder
        elif element_type is ElementType.TITLE:
            text, fallback = self._override.title(idx), title_placeholder
        else:
            text, fallback = self._override.body(idx), body_placeholder
        return text if text is not None else fallback(self._topic, idx)


def _placeholder_module(slot_key: str, slot_rect: Rect, cursor: _TextCursor, z: int) -> List[Element]:
    """Header / Divider / BodyText stand-in for a module with no elements."""
    pad = max(PLACEHOLDER_MIN_PAD, min(PLACEHOLDER_MAX_PAD, min(slot_rect.w, slot_rect.h) * PLACEHOLDER_PAD_RATIO))
    inner_w = max(1.0, slot_rect.w - pad * 2)
    inner_h = max(1.0, slot_rect.h - pad * 2)
    header_h = max(PLACEHOLDER_MIN_HEADER_H, min(PLACEHOLDER_MAX_HEADER_H, slot_rect.h * PLACEHOLDER_HEADER_RATIO))
    gap = max(6.0, pad * 0.6)
    divider_h = PLACEHOLDER_DIVIDER_H
    body_h = max(PLACEHOLDER_MIN_BODY_H, inner_h - header_h - gap * 2 - divider_h)

    # Short slots: shrink the whole stack so the body ends inside the slot
    stack_h = header_h + gap * 2 + divider_h + body_h
    if stack_h > inner_h:
        shrink = inner_h / stack_h
        header_h, gap, divider_h, body_h = (v * shrink for v in (header_h, gap, divider_h, body_h))

    x = slot_rect.x + pad
    header_y = slot_rect.y + pad
    divider_y = header_y + header_h + gap
    body_y = divider_y + divider_h + gap

    header_style = text_style(ElementType.HEADER)
    body_style = text_style(ElementType.BODY_TEXT)
    prefix = f"slot_{slot_key}_placeholder"
    return [
        Element(
            id=f"{prefix}_header",
            type=ElementType.HEADER,
            rect=Rect(x, header_y, inner_w, header_h),
            z_index=z,
            props=TextProps(
                text=cursor.next(ElementType.HEADER),
                font_size=header_style.font_size,
                font_weight=header_style.font_weight,
                line_height=header_style.line_height,
                color=DEFAULT_TEXT_COLOR,
            ),
            source_slot=slot_key,
        ),
        Element(
            id=f"{prefix}_divider",
            type=ElementType.DIVIDER,
            rect=Rect(x, divider_y, inner_w, divider_h),
            z_index=z + 1,
            props=DividerProps(),
            source_slot=slot_key,
        ),
        Element(
            id=f"{prefix}_body",
            type=ElementType.BODY_TEXT,
            rect=Rect(x, body_y, inner_w, body_h),
            z_index=z + 2,
            props=TextProps(
                text=cursor.next(ElementType.BODY_TEXT),
                font_size=body_style.font_size,
                font_weight=body_style.font_weight,
                line_height=body_style.line_height,
                color=DEFAULT_TEXT_COLOR,
            ),
            source_slot=slot_key,
        ),
    ]


def _place_element(
    element: Element,
    slot_key: str,
    rect: Rect,
    cursor: _TextCursor,
    z: int,
) -> Element:
    """Remap one module element into the assembled template."""
    new_id = f"slot_{slot_key}_{element.id}"

    # A module background fills its own region only, never the page
    if element.type is ElementType.BACKGROUND_TEXTURE:
        return Element(
            id=new_id,
            type=ElementType.CONTAINER,
            rect=rect,
            z_index=z,
            props=ContainerProps(fill=element.props.fill),
        )

    props = element.props
    if element.type.is_text:
        style = text_style(element.type)
        props = replace(
            props,
            text=cursor.next(element.type),
            font_size=style.font_size,
            color=DEFAULT_TEXT_COLOR,
        )
        if element.type is ElementType.BODY_TEXT:
            props = replace(props, line_height=style.line_height)

    return replace(element, id=new_id, rect=rect, z_index=z, props=props, source_slot=slot_key)


def assemble_template_spec(
    layout_spec: Spec,
    slot_rects: Mapping[str, Rect],
    mapping: Mapping[str, str],
    modules_by_id: Mapping[str, Spec],
    *,
    topic: Optional[str] = None,
    overrides: Optional[OverrideMap] = None,
) -> Spec:
    """
    Assemble a template from a layout and a slot -> module mapping.

    Args:
        layout_spec: Layout providing canvas and non-Slot elements
        slot_rects: Slot key -> rect for the layout
        mapping: Slot key -> module id, in slot order
        modules_by_id: Module id -> module spec
        topic: Optional topic for placeholders
        overrides: Optional ``slot|module`` -> generated text

    Returns:
        Assembled Spec (kind omitted) on the layout canvas

    Raises:
        CompositionError: If a mapped slot key has no rect or a mapped
            module id is unknown
    """
    elements: List[Element] = [e for e in layout_spec.elements if e.type is not ElementType.SLOT]
    z = max([0] + [e.z_index for e in elements]) + 1
    overrides = overrides or {}

    for slot_key, module_id in mapping.items():
        slot_rect = slot_rects.get(slot_key)
        if slot_rect is None:
            raise CompositionError(f"No slot rect for slot {slot_key!r}", slot_key, module_id)
        module_spec = modules_by_id.get(module_id)
        if module_spec is None:
            raise CompositionError(f"Unknown module {module_id!r} for slot {slot_key!r}", slot_key, module_id)

        cursor = _TextCursor(topic, overrides.get(override_key(slot_key, module_id)))

        if module_spec.is_empty:
            placed = _placeholder_module(slot_key, slot_rect, cursor, z)
            z += len(placed)
            elements.extend(placed)
            logger.debug(f"Slot {slot_key}: empty module {module_id}, placeholder used")
            continue

        transform = SlotTransform.fit(module_spec, slot_rect)
        for element in module_spec.elements:
            elements.append(_place_element(element, slot_key, transform.apply(element.rect), cursor, z))
            z += 1
        logger.debug(
            f"Slot {slot_key}: placed {len(module_spec.elements)} element(s) of {module_id} "
            f"at scale {transform.scale:.3f}"
        )

    return Spec(canvas=layout_spec.canvas, elements=tuple(elements), kind=None)
