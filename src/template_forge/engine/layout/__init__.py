"""
Layout Package

Editing-time geometry: module stack layout, module auto-canvas and
layout slot generation. Every function here is pure.
"""

from .stack import StackLayoutResult, stack_layout, layout_module, reorder_stack
from .auto_canvas import CanvasFit, module_auto_canvas, fit_module_canvas
from .slots import (
    GridSlotParams,
    FlexSlotParams,
    generate_grid_slots,
    generate_flex_slots,
    replace_slots,
    apply_grid_slots,
    apply_flex_slots,
)

__all__ = [
    # Stack
    "StackLayoutResult",
    "stack_layout",
    "layout_module",
    "reorder_stack",
    # Auto-canvas
    "CanvasFit",
    "module_auto_canvas",
    "fit_module_canvas",
    # Slots
    "GridSlotParams",
    "FlexSlotParams",
    "generate_grid_slots",
    "generate_flex_slots",
    "replace_slots",
    "apply_grid_slots",
    "apply_flex_slots",
]
