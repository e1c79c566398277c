"""
Module: engine.layout.stack

Purpose:
    Vertical stack layout for module specs. Stackable elements (Header,
    Title, BodyText, Divider, Pattern) are placed top-down, full inner
    width, with heights chosen by each element's layout preset. All
    other elements are "legacy" and keep their own rects.

Key Functions:
    - stack_layout(): Compute stacked rects for a list of elements
    - layout_module(): Apply the stack layout to a module spec
    - reorder_stack(): Move an element within the stack, renumbering zIndex

Key Classes:
    - StackLayoutResult: stacked + legacy element lists

Dependencies:
    - core.models

Used By:
    - cli: ``layout`` command

Height Rules:
    fixed  Divider -> thickness; others -> rect.h (default 40, min 1)
    fit    Divider -> thickness; Pattern -> clamp(spacing*6, 24, innerH);
           Header 44, Title 36, BodyText 72
    fill   Equal share of what is left after gaps and non-fill heights
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List

from template_forge.common.numeric import as_float
from template_forge.core.models import (
    Element,
    ElementType,
    FIT_HEIGHTS,
    LayoutPreset,
    Rect,
    Spec,
    SpecKind,
    sort_by_z,
)

logger = logging.getLogger(__name__)

STACK_PADDING = 24.0
STACK_GAP = 12.0

DEFAULT_FIXED_HEIGHT = 40.0
MIN_FIT_PATTERN_HEIGHT = 24.0


@dataclass(frozen=True)
class StackLayoutResult:
    """
    Output of stack_layout().

    Attributes:
        stacked: Stackable elements in zIndex order with new rects
        legacy: Non-stackable elements in zIndex order, rects untouched
    """
    stacked: tuple[Element, ...]
    legacy: tuple[Element, ...]

    @property
    def rects_by_id(self) -> dict[str, Rect]:
        return {e.id: e.rect for e in self.stacked}


def _intrinsic_height(element: Element, inner_h: float) -> float:
    """Height of a non-fill element (0 for fill)."""
    preset = element.layout_preset
    if preset is LayoutPreset.FILL:
        return 0.0
    if element.type is ElementType.DIVIDER:
        return element.props.thickness
    if preset is LayoutPreset.FIT:
        if element.type is ElementType.PATTERN:
            return max(MIN_FIT_PATTERN_HEIGHT, min(inner_h, element.props.spacing * 6))
        return FIT_HEIGHTS.get(element.type, FIT_HEIGHTS[ElementType.BODY_TEXT])
    return max(1.0, as_float(element.rect.h, DEFAULT_FIXED_HEIGHT))


def stack_layout(
    elements: Iterable[Element],
    canvas_w: float,
    canvas_h: float,
    *,
    padding: float = STACK_PADDING,
    gap: float = STACK_GAP,
) -> StackLayoutResult:
    """
    Lay out stackable elements top-down inside the padded canvas.

    Args:
        elements: Module elements (any order)
        canvas_w: Canvas width in points
        canvas_h: Canvas height in points
        padding: Inset on every side
        gap: Vertical space between consecutive stacked elements

    Returns:
        StackLayoutResult with new rects for stacked elements

    Example:
        >>> from template_forge.core.models import default_spec
        >>> spec = default_spec(SpecKind.MODULE)
        >>> result = stack_layout(spec.elements, 640, 640)
        >>> [e.rect.y for e in result.stacked]
        [24.0, 80.0, 614.0]
    """
    ordered = sort_by_z(elements)
    stackable = [e for e in ordered if e.type.is_stackable]
    legacy = tuple(e for e in ordered if not e.type.is_stackable)

    inner_w = max(1.0, canvas_w - padding * 2)
    inner_h = max(1.0, canvas_h - padding * 2)

    heights = [_intrinsic_height(e, inner_h) for e in stackable]
    fill_count = sum(1 for e in stackable if e.layout_preset is LayoutPreset.FILL)

    gaps_total = gap * (len(stackable) - 1) if stackable else 0.0
    remaining = max(1.0, inner_h - gaps_total - sum(heights))
    fill_h = max(1.0, remaining / fill_count) if fill_count else 0.0

    y = padding
    stacked: List[Element] = []
    for element, h in zip(stackable, heights):
        if element.layout_preset is LayoutPreset.FILL:
            h = fill_h
        stacked.append(element.with_rect(Rect(padding, y, inner_w, h)))
        y += h + gap

    logger.debug(
        f"Stacked {len(stacked)} element(s) ({fill_count} fill, {len(legacy)} legacy) "
        f"on {canvas_w:g}x{canvas_h:g}"
    )
    return StackLayoutResult(stacked=tuple(stacked), legacy=legacy)


def _structural_props(element: Element):
    """Props with content and unknown editor keys stripped."""
    if element.type.is_text:
        return replace(element.props, text=None, extra={})
    return replace(element.props, extra={})


def layout_module(
    spec: Spec,
    *,
    padding: float = STACK_PADDING,
    gap: float = STACK_GAP,
) -> Spec:
    """
    Apply the stack layout to a module spec.

    Stackable elements get their stacked rects (matched by id) and
    structural props; element order and legacy elements are unchanged.
    Layout specs are returned as-is.

    Applying this twice gives the same spec as applying it once.
    """
    if spec.kind is not SpecKind.MODULE:
        return spec

    result = stack_layout(spec.elements, spec.canvas.w, spec.canvas.h, padding=padding, gap=gap)
    rects = result.rects_by_id
    elements = []
    for element in spec.elements:
        if element.id in rects:
            element = replace(element, rect=rects[element.id], props=_structural_props(element))
        elements.append(element)
    return spec.with_elements(elements)


def reorder_stack(spec: Spec, element_id: str, insert_index: int) -> Spec:
    """
    Move a stacked element to a new position in the stack.

    Legacy elements come first, then the stack; zIndex is renumbered
    from 1 in that order. An unknown or non-stackable id returns the
    spec unchanged. ``insert_index`` is clamped to the stack.
    """
    ordered = sort_by_z(spec.elements)
    legacy = [e for e in ordered if not e.type.is_stackable]
    stack = [e for e in ordered if e.type.is_stackable]

    from_idx = next((i for i, e in enumerate(stack) if e.id == element_id), -1)
    if from_idx < 0:
        return spec

    moved = stack.pop(from_idx)
    stack.insert(max(0, min(len(stack), insert_index)), moved)

    combined = [e.with_z(i + 1) for i, e in enumerate(legacy + stack)]
    return spec.with_elements(combined)
