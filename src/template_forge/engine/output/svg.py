"""
Module: engine.output.svg

Purpose:
    Render specs as SVG strings. Fast previews for assembled templates
    (sized to their container, full page visible) and for modules on
    their auto-fitted canvas.

Key Functions:
    - render_svg(): Assembled template or layout spec -> SVG
    - render_module_svg(): Module spec preview on the auto-fitted canvas

Dependencies:
    - engine.layout.auto_canvas: Module preview framing
    - engine.output.text: Wrapping, colours and escaping

Used By:
    - cli: ``generate --svg``

Element Drawing:
    Elements are drawn in ascending zIndex. Text is wrapped to the rect
    width minus padding and clipped to the rect. Slots are drawn as a
    dotted outline with their key. Unknown shapes fall back to a faint box.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List

from template_forge.core.models import Element, ElementType, PatternVariant, Rect, Spec, sort_by_z
from template_forge.core.models.styles import TEXT_PADDING
from template_forge.engine.layout.auto_canvas import fit_module_canvas

from .text import escape_xml, format_number as fmt, safe_svg_id, wrap_text_to_width

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
SLOT_STROKE = "#60a5fa"
SLOT_LABEL_COLOR = "#2563eb"
TEXT_COLOR = "#111827"
FALLBACK_FILL = "rgba(0,0,0,0.02)"
FALLBACK_STROKE = "#e5e7eb"
DOT_RADIUS = 1.2
MAX_TEXT_LINES = 200


class _SvgCanvas:
    """Collects defs and drawing parts for one SVG document."""

    def __init__(self, w: float, h: float, dx: float = 0.0, dy: float = 0.0, *, page_fills: bool = True):
        self.w = w
        self.h = h
        self.dx = dx
        self.dy = dy
        # Templates paint background and grid over the whole page; module
        # previews keep them inside the element rect.
        self.page_fills = page_fills
        self.defs: List[str] = []
        self.parts: List[str] = []

    def place(self, rect: Rect) -> Rect:
        return rect.sanitized().translate(self.dx, self.dy)

    def rect(self, r: Rect, **attrs: str) -> None:
        extra = " ".join(f'{k.replace("_", "-")}="{v}"' for k, v in attrs.items())
        self.parts.append(
            f'<rect x="{fmt(r.x)}" y="{fmt(r.y)}" width="{fmt(r.w)}" height="{fmt(r.h)}" {extra} />'
        )

    def line(self, x1: float, y1: float, x2: float, y2: float, stroke: str) -> None:
        self.parts.append(
            f'<line x1="{fmt(x1)}" y1="{fmt(y1)}" x2="{fmt(x2)}" y2="{fmt(y2)}" '
            f'stroke="{stroke}" stroke-width="1" />'
        )


# ─────────────────────────────────────────────────────────────────────────────
# Element drawers
# ─────────────────────────────────────────────────────────────────────────────

def _draw_background(svg: _SvgCanvas, element: Element) -> None:
    fill = escape_xml(element.props.fill)
    r = Rect(0, 0, svg.w, svg.h) if svg.page_fills else svg.place(element.rect)
    svg.rect(r, fill=fill)


def _draw_grid_lines(svg: _SvgCanvas, element: Element) -> None:
    props = element.props
    stroke = escape_xml(props.stroke)
    area = Rect(0, 0, svg.w, svg.h) if svg.page_fills else svg.place(element.rect)
    for i in range(1, props.cols):
        lx = area.x + area.w / props.cols * i
        svg.line(lx, area.y, lx, area.bottom, stroke)
    for j in range(1, props.rows):
        ly = area.y + area.h / props.rows * j
        svg.line(area.x, ly, area.right, ly, stroke)


def _draw_pattern(svg: _SvgCanvas, element: Element) -> None:
    props = element.props
    r = svg.place(element.rect)
    stroke = escape_xml(props.stroke)
    spacing = props.spacing
    variant = props.variant

    if variant is PatternVariant.GRID:
        gx = r.x + spacing
        while gx < r.right:
            svg.line(gx, r.y, gx, r.bottom, stroke)
            gx += spacing
    if variant in (PatternVariant.GRID, PatternVariant.LINES):
        gy = r.y + spacing
        while gy < r.bottom:
            svg.line(r.x, gy, r.right, gy, stroke)
            gy += spacing
    elif variant is PatternVariant.DOTS:
        gx = r.x + spacing / 2
        while gx < r.right:
            gy = r.y + spacing / 2
            while gy < r.bottom:
                svg.parts.append(f'<circle cx="{fmt(gx)}" cy="{fmt(gy)}" r="{DOT_RADIUS}" fill="{stroke}" />')
                gy += spacing
            gx += spacing

    if props.outline and props.outline_thickness > 0:
        svg.rect(r, fill="none", stroke=stroke, stroke_width=fmt(props.outline_thickness))


def _draw_divider(svg: _SvgCanvas, element: Element) -> None:
    r = svg.place(element.rect)
    thickness = max(1.0, element.props.thickness)
    svg.rect(Rect(r.x, r.y, r.w, thickness), fill=escape_xml(element.props.stroke))


def _draw_container(svg: _SvgCanvas, element: Element) -> None:
    props = element.props
    r = svg.place(element.rect)
    attrs = {
        "fill": escape_xml(props.fill) if props.fill else "none",
        "stroke": escape_xml(props.stroke),
        "stroke_width": "2",
    }
    if not svg.page_fills and props.radius > 0:
        attrs["rx"] = attrs["ry"] = fmt(props.radius)
    svg.rect(r, **attrs)


def _draw_slot(svg: _SvgCanvas, element: Element) -> None:
    r = svg.place(element.rect)
    svg.rect(
        r,
        fill="none",
        stroke=SLOT_STROKE,
        stroke_dasharray="1 6",
        stroke_linecap="round",
        stroke_width="2",
    )
    label = escape_xml(element.props.slot_key or "slot")
    svg.parts.append(
        f'<text x="{fmt(r.x + 6)}" y="{fmt(r.y + 16)}" font-size="10" fill="{SLOT_LABEL_COLOR}">{label}</text>'
    )


def _draw_text(svg: _SvgCanvas, element: Element) -> None:
    props = element.props
    r = svg.place(element.rect)
    pad = TEXT_PADDING
    font_size = max(8.0, props.font_size)
    line_height = max(1.0, props.line_height)
    text = element.type.value if props.text is None else props.text
    lines = wrap_text_to_width(text, max(0.0, r.w - pad * 2), font_size)[:MAX_TEXT_LINES]

    align = props.text_align.lower()
    if align == "center":
        tx, anchor = r.x + r.w / 2, "middle"
    elif align == "right":
        tx, anchor = r.right - pad, "end"
    else:
        tx, anchor = r.x + pad, "start"

    tspans = "".join(
        f'<tspan x="{fmt(tx)}" y="{fmt(r.y + pad + font_size + i * font_size * line_height)}">{escape_xml(line)}</tspan>'
        for i, line in enumerate(lines)
    )
    color = escape_xml(props.color or TEXT_COLOR)
    text_el = (
        f'<text font-size="{fmt(font_size)}" font-weight="{props.font_weight}" '
        f'text-anchor="{anchor}" fill="{color}">{tspans}</text>'
    )

    if r.w > 0 and r.h > 0:
        clip_id = f"clip_{safe_svg_id(element.id)}"
        svg.defs.append(
            f'<clipPath id="{clip_id}"><rect x="{fmt(r.x)}" y="{fmt(r.y)}" '
            f'width="{fmt(r.w)}" height="{fmt(r.h)}" /></clipPath>'
        )
        svg.parts.append(f'<g clip-path="url(#{clip_id})">{text_el}</g>')
    else:
        svg.parts.append(text_el)


_DRAWERS: Dict[ElementType, Callable[[_SvgCanvas, Element], None]] = {
    ElementType.BACKGROUND_TEXTURE: _draw_background,
    ElementType.GRID_LINES: _draw_grid_lines,
    ElementType.PATTERN: _draw_pattern,
    ElementType.DIVIDER: _draw_divider,
    ElementType.CONTAINER: _draw_container,
    ElementType.SLOT: _draw_slot,
    ElementType.HEADER: _draw_text,
    ElementType.TITLE: _draw_text,
    ElementType.BODY_TEXT: _draw_text,
}


def _draw_fallback(svg: _SvgCanvas, element: Element) -> None:
    r = svg.place(element.rect)
    if r.w > 0 and r.h > 0:
        svg.rect(r, fill=FALLBACK_FILL, stroke=FALLBACK_STROKE)


def _draw_all(svg: _SvgCanvas, spec: Spec) -> None:
    for element in sort_by_z(spec.elements):
        _DRAWERS.get(element.type, _draw_fallback)(svg, element)


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def render_svg(spec: Spec) -> str:
    """
    Render an assembled template (or layout) spec as SVG.

    The document is sized to 100% of its container with
    ``preserveAspectRatio="xMidYMid meet"`` so the full page is always
    visible in a thumbnail.

    Example:
        >>> svg = render_svg(combination.spec)
        >>> svg.startswith("<svg")
        True
    """
    svg = _SvgCanvas(spec.canvas.w, spec.canvas.h)
    _draw_all(svg, spec)
    logger.debug(f"Rendered SVG with {len(svg.parts)} part(s)")
    return (
        f'<svg xmlns="{SVG_NS}" width="100%" height="100%" '
        f'viewBox="0 0 {fmt(svg.w)} {fmt(svg.h)}" preserveAspectRatio="xMidYMid meet">'
        f'<defs>{"".join(svg.defs)}</defs>{"".join(svg.parts)}</svg>'
    )


def render_module_svg(spec: Spec) -> str:
    """
    Render a module preview on its auto-fitted square canvas.

    Content is shifted by the fit offset so it sits inside the margin
    according to the module's alignment.
    """
    fit = fit_module_canvas(spec)
    svg = _SvgCanvas(fit.w, fit.h, fit.dx, fit.dy, page_fills=False)
    _draw_all(svg, spec)
    return (
        f'<svg xmlns="{SVG_NS}" width="{fmt(fit.w)}" height="{fmt(fit.h)}" '
        f'viewBox="0 0 {fmt(fit.w)} {fmt(fit.h)}">'
        f'<defs>{"".join(svg.defs)}</defs>{"".join(svg.parts)}</svg>'
    )
