"""
Module: engine.layout.slots

Purpose:
    Generate Slot elements for layouts (and modules) as a regular grid
    or as a flex-style row/column arrangement, and swap them into a spec.

Key Functions:
    - generate_grid_slots(): Row-major grid of cols x rows slots
    - generate_flex_slots(): count slots flowing along a main axis
    - replace_slots(): Swap generated slots into a spec
    - apply_grid_slots() / apply_flex_slots(): Generate + replace

Key Classes:
    - GridSlotParams, FlexSlotParams: Clamped generation parameters

Dependencies:
    - common.numeric: Clamping of user-entered values
    - core.models

Used By:
    - cli: ``slots`` command

Clamping:
    User-entered parameters are clamped, never rejected:
    padding/gap [0, 5000], cols/rows [1, 64],
    count/per_line/cross_size [1, 5000]. A blank key base becomes "slot".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional

from template_forge.common.numeric import clamp, clamp_int
from template_forge.core.models import (
    Canvas,
    Element,
    ElementType,
    FlexDirection,
    LayoutAssist,
    LayoutMode,
    Rect,
    SlotProps,
    Spec,
    SpecKind,
    new_element_id,
)

logger = logging.getLogger(__name__)

MAX_SPACING = 5000
MAX_GRID_CELLS = 64
MAX_FLEX_VALUE = 5000
DEFAULT_SLOT_KEY_BASE = "slot"

IdFactory = Callable[[], str]


def _key_base(value: Any) -> str:
    base = str(value or "").strip()
    return base or DEFAULT_SLOT_KEY_BASE


@dataclass(frozen=True)
class GridSlotParams:
    """
    Grid slot parameters (clamped on construction).

    Example:
        >>> GridSlotParams(cols=100, gap=-5, slot_key_base="  ").cols
        64
    """
    padding: float = 24
    gap: float = 16
    cols: int = 2
    rows: int = 2
    slot_key_base: str = DEFAULT_SLOT_KEY_BASE

    def __post_init__(self) -> None:
        object.__setattr__(self, "padding", clamp(self.padding, 0, MAX_SPACING))
        object.__setattr__(self, "gap", clamp(self.gap, 0, MAX_SPACING))
        object.__setattr__(self, "cols", clamp_int(self.cols, 1, MAX_GRID_CELLS))
        object.__setattr__(self, "rows", clamp_int(self.rows, 1, MAX_GRID_CELLS))
        object.__setattr__(self, "slot_key_base", _key_base(self.slot_key_base))

    def to_assist(self) -> LayoutAssist:
        return LayoutAssist(
            mode=LayoutMode.GRID,
            padding=self.padding,
            gap=self.gap,
            cols=self.cols,
            rows=self.rows,
            slot_key_base=self.slot_key_base,
        )


@dataclass(frozen=True)
class FlexSlotParams:
    """
    Flex slot parameters (clamped on construction).

    With ``wrap`` off every slot sits on one line (``per_line`` = count).
    """
    padding: float = 24
    gap: float = 16
    count: int = 6
    per_line: int = 3
    cross_size: float = 160
    direction: FlexDirection = FlexDirection.ROW
    wrap: bool = True
    slot_key_base: str = DEFAULT_SLOT_KEY_BASE

    def __post_init__(self) -> None:
        count = clamp_int(self.count, 1, MAX_FLEX_VALUE)
        object.__setattr__(self, "padding", clamp(self.padding, 0, MAX_SPACING))
        object.__setattr__(self, "gap", clamp(self.gap, 0, MAX_SPACING))
        object.__setattr__(self, "count", count)
        object.__setattr__(self, "per_line", clamp_int(self.per_line, 1, MAX_FLEX_VALUE))
        object.__setattr__(self, "cross_size", clamp(self.cross_size, 1, MAX_FLEX_VALUE))
        object.__setattr__(self, "direction", FlexDirection.parse(self.direction))
        object.__setattr__(self, "wrap", bool(self.wrap))
        object.__setattr__(self, "slot_key_base", _key_base(self.slot_key_base))

    @property
    def effective_per_line(self) -> int:
        """Slots per line after applying ``wrap``."""
        return self.per_line if self.wrap else self.count

    def to_assist(self) -> LayoutAssist:
        return LayoutAssist(
            mode=LayoutMode.FLEX,
            padding=self.padding,
            gap=self.gap,
            direction=self.direction,
            wrap=self.wrap,
            count=self.count,
            per_line=self.per_line,
            cross_size=self.cross_size,
            slot_key_base=self.slot_key_base,
        )


def _slot(index: int, rect: Rect, base: str, id_factory: IdFactory) -> Element:
    return Element(
        id=id_factory(),
        type=ElementType.SLOT,
        rect=rect,
        z_index=index,
        props=SlotProps(slot_key=f"{base}_{index}"),
    )


def generate_grid_slots(
    canvas: Canvas,
    params: GridSlotParams,
    *,
    id_factory: IdFactory = new_element_id,
) -> List[Element]:
    """
    Generate a row-major grid of equal slots.

    Slot keys are ``{base}_1`` .. ``{base}_{cols*rows}`` and zIndex is the
    emission order.

    Example:
        >>> slots = generate_grid_slots(Canvas(612, 792), GridSlotParams(cols=2, rows=1))
        >>> [s.slot_key for s in slots]
        ['slot_1', 'slot_2']
    """
    pad, gap = params.padding, params.gap
    inner_w = max(1.0, canvas.w - pad * 2 - gap * (params.cols - 1))
    inner_h = max(1.0, canvas.h - pad * 2 - gap * (params.rows - 1))
    cell_w = inner_w / params.cols
    cell_h = inner_h / params.rows

    slots: List[Element] = []
    index = 1
    for r in range(params.rows):
        for c in range(params.cols):
            rect = Rect(pad + c * (cell_w + gap), pad + r * (cell_h + gap), cell_w, cell_h)
            slots.append(_slot(index, rect, params.slot_key_base, id_factory))
            index += 1

    logger.debug(f"Generated {len(slots)} grid slot(s) ({params.cols}x{params.rows})")
    return slots


def generate_flex_slots(
    canvas: Canvas,
    params: FlexSlotParams,
    *,
    id_factory: IdFactory = new_element_id,
) -> List[Element]:
    """
    Generate ``count`` slots flowing along the main axis.

    Row direction: items share the inner width of a line and are
    ``cross_size`` tall; lines stack downwards. Column direction is the
    same with the axes swapped.
    """
    pad, gap = params.padding, params.gap
    per_line = params.effective_per_line
    cross = params.cross_size

    slots: List[Element] = []
    if params.direction is FlexDirection.ROW:
        inner_w = max(1.0, canvas.w - pad * 2 - gap * (per_line - 1))
        item_w = inner_w / per_line
        for i in range(params.count):
            line, col = divmod(i, per_line)
            rect = Rect(pad + col * (item_w + gap), pad + line * (cross + gap), item_w, cross)
            slots.append(_slot(i + 1, rect, params.slot_key_base, id_factory))
    else:
        inner_h = max(1.0, canvas.h - pad * 2 - gap * (per_line - 1))
        item_h = inner_h / per_line
        for i in range(params.count):
            line, row = divmod(i, per_line)
            rect = Rect(pad + line * (cross + gap), pad + row * (item_h + gap), cross, item_h)
            slots.append(_slot(i + 1, rect, params.slot_key_base, id_factory))

    logger.debug(
        f"Generated {len(slots)} flex slot(s) ({params.direction.value}, {per_line} per line)"
    )
    return slots


def replace_slots(
    spec: Spec,
    slots: List[Element],
    layout_assist: Optional[LayoutAssist] = None,
) -> Spec:
    """
    Swap a freshly generated slot set into a spec.

    Layouts discard every existing element and record ``layout_assist``.
    Modules keep their non-Slot elements, keep their previous assist, and
    the new slots are stacked above the highest kept zIndex.
    """
    is_layout = spec.kind is SpecKind.LAYOUT
    keep = [] if is_layout else spec.non_slot_elements
    max_z = max((e.z_index for e in keep), default=0)
    remapped = [s.with_z(max_z + 1 + i) for i, s in enumerate(slots)]

    return replace(
        spec,
        elements=tuple(keep + remapped),
        layout_assist=layout_assist if is_layout else spec.layout_assist,
    )


def apply_grid_slots(
    spec: Spec,
    params: GridSlotParams,
    *,
    id_factory: IdFactory = new_element_id,
) -> Spec:
    """Generate grid slots on the spec's canvas and swap them in."""
    slots = generate_grid_slots(spec.canvas, params, id_factory=id_factory)
    return replace_slots(spec, slots, params.to_assist())


def apply_flex_slots(
    spec: Spec,
    params: FlexSlotParams,
    *,
    id_factory: IdFactory = new_element_id,
) -> Spec:
    """Generate flex slots on the spec's canvas and swap them in."""
    slots = generate_flex_slots(spec.canvas, params, id_factory=id_factory)
    return replace_slots(spec, slots, params.to_assist())
