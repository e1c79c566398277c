"""
Module: engine.layout.auto_canvas

Purpose:
    Fit a square editing/preview canvas around module content. Modules
    are resolution-independent; their stored canvas is only an editing
    surface, so previews use a canvas sized to the content bounding box
    with a fixed margin and the module's alignment preference.

Key Functions:
    - module_auto_canvas(): Square size + content offset for elements
    - fit_module_canvas(): Same, reading alignment from a module spec

Dependencies:
    - common.bbox_utils: Degenerate-filtering bounding box

Used By:
    - engine.output.svg: Module previews
    - engine.output.preview: Module thumbnails
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from template_forge.common.bbox_utils import element_bounds
from template_forge.core.models import DEFAULT_MODULE_CANVAS, Element, Spec

MIN_CANVAS_SIZE = 520.0
CANVAS_MARGIN = 48.0


@dataclass(frozen=True)
class CanvasFit:
    """
    Auto-fitted square canvas.

    Attributes:
        w: Canvas width (equal to h)
        h: Canvas height
        dx: Horizontal offset to add to every element x
        dy: Vertical offset to add to every element y
    """
    w: float
    h: float
    dx: float
    dy: float


def _offset(align: str, size: float, extent: float, origin: float, near: str, far: str) -> float:
    if align == near:
        return CANVAS_MARGIN - origin
    if align == far:
        return size - CANVAS_MARGIN - extent - origin
    return (size - extent) / 2 - origin


def module_auto_canvas(
    elements: Iterable[Element],
    *,
    align_x: str = "center",
    align_y: str = "center",
) -> CanvasFit:
    """
    Compute the square canvas and offset that frame module content.

    Degenerate rects are ignored. With no valid content the default
    module canvas (at least 520 square) is returned with the margin as
    offset. Unknown alignment values behave like "center".

    Example:
        >>> from template_forge.core.models import ElementType, Rect
        >>> fit = module_auto_canvas([Element("a", ElementType.DIVIDER, Rect(100, 100, 200, 2))])
        >>> fit.w, fit.dx, fit.dy
        (520.0, 60.0, 159.0)
    """
    bounds = element_bounds(elements)
    if bounds is None:
        return CanvasFit(
            w=max(MIN_CANVAS_SIZE, DEFAULT_MODULE_CANVAS.w),
            h=max(MIN_CANVAS_SIZE, DEFAULT_MODULE_CANVAS.h),
            dx=CANVAS_MARGIN,
            dy=CANVAS_MARGIN,
        )

    bw = max(1.0, bounds.w)
    bh = max(1.0, bounds.h)
    size = max(MIN_CANVAS_SIZE, bw + CANVAS_MARGIN * 2, bh + CANVAS_MARGIN * 2)

    return CanvasFit(
        w=size,
        h=size,
        dx=_offset(align_x, size, bw, bounds.x, "left", "right"),
        dy=_offset(align_y, size, bh, bounds.y, "top", "bottom"),
    )


def fit_module_canvas(spec: Spec) -> CanvasFit:
    """Auto-fit a module spec using its ``moduleAssist`` alignment."""
    assist = spec.module_assist
    return module_auto_canvas(
        spec.elements,
        align_x=assist.align_x if assist else "center",
        align_y=assist.align_y if assist else "center",
    )
