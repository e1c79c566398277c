"""
Module: engine.output.pdf

Purpose:
    Render assembled template specs to PDF using ReportLab.
    Each spec becomes one page sized to its canvas.

Key Functions:
    - render_to_pdf(): Write a list of specs as a multi-page PDF

Dependencies:
    - reportlab: PDF generation
    - engine.output.text: Colour parsing

Used By:
    - cli: ``generate --pdf``

Coordinates:
    Specs use a top-left origin with y growing downward; ReportLab uses
    a bottom-left origin. A rect ``(x, y, w, h)`` is drawn at
    ``(x, page_h - y - h)``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from template_forge.core.models import Element, ElementType, PatternVariant, Spec, sort_by_z
from template_forge.core.models.styles import MIN_FONT_SIZE, TEXT_PADDING

from .text import parse_hex_color

logger = logging.getLogger(__name__)

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
BOLD_WEIGHT = 600
SLOT_STROKE = "#60a5fa"
SLOT_LABEL_RGB = (0.15, 0.39, 0.92)
SLOT_LABEL_SIZE = 10
DOT_RADIUS = 1.2


def render_to_pdf(specs: Sequence[Spec], output_path: Path) -> None:
    """
    Render specs to a PDF file, one page per spec.

    Args:
        specs: Assembled template specs, in page order
        output_path: Path to write PDF

    Raises:
        IOError: If PDF cannot be written

    Example:
        >>> render_to_pdf([c.spec for c in result.combinations], Path("out/templates.pdf"))
    """
    if not specs:
        logger.warning("No specs, creating empty PDF")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    first = specs[0].canvas if specs else None
    pagesize = (first.w, first.h) if first else (612, 792)
    c = canvas.Canvas(str(output_path), pagesize=pagesize)

    for spec in specs:
        c.setPageSize((spec.canvas.w, spec.canvas.h))
        _render_page(c, spec)
        c.showPage()

    c.save()
    logger.info(f"Rendered {len(specs)} page(s) to {output_path}")


def _render_page(c: canvas.Canvas, spec: Spec) -> None:
    """Draw every element of a spec in ascending zIndex."""
    page_w, page_h = spec.canvas.w, spec.canvas.h
    for element in sort_by_z(spec.elements):
        c.saveState()
        _draw_element(c, element, page_w, page_h)
        c.restoreState()


def _draw_element(c: canvas.Canvas, element: Element, page_w: float, page_h: float) -> None:
    r = element.rect.sanitized()
    props = element.props
    pdf_y = page_h - r.y - r.h

    if element.type is ElementType.BACKGROUND_TEXTURE:
        c.setFillColorRGB(*parse_hex_color(props.fill))
        c.rect(0, 0, page_w, page_h, stroke=0, fill=1)

    elif element.type is ElementType.GRID_LINES:
        c.setStrokeColorRGB(*parse_hex_color(props.stroke))
        c.setLineWidth(1)
        for i in range(1, props.cols):
            lx = page_w / props.cols * i
            c.line(lx, 0, lx, page_h)
        for j in range(1, props.rows):
            ly = page_h / props.rows * j
            c.line(0, ly, page_w, ly)

    elif element.type is ElementType.PATTERN:
        _draw_pattern(c, element, page_h)

    elif element.type is ElementType.DIVIDER:
        thickness = max(1.0, props.thickness)
        c.setFillColorRGB(*parse_hex_color(props.stroke))
        c.rect(r.x, page_h - r.y - thickness, r.w, thickness, stroke=0, fill=1)

    elif element.type is ElementType.CONTAINER:
        c.setStrokeColorRGB(*parse_hex_color(props.stroke))
        c.setLineWidth(2)
        if props.fill:
            c.setFillColorRGB(*parse_hex_color(props.fill))
        c.rect(r.x, pdf_y, r.w, r.h, stroke=1, fill=1 if props.fill else 0)

    elif element.type is ElementType.SLOT:
        c.setStrokeColorRGB(*parse_hex_color(SLOT_STROKE))
        c.setLineWidth(2)
        c.rect(r.x, pdf_y, r.w, r.h, stroke=1, fill=0)
        c.setFont(FONT_REGULAR, SLOT_LABEL_SIZE)
        c.setFillColorRGB(*SLOT_LABEL_RGB)
        c.drawString(r.x + 6, pdf_y + r.h - 16, props.slot_key or "slot")

    elif element.type.is_text:
        _draw_text(c, element, page_h)


def _draw_pattern(c: canvas.Canvas, element: Element, page_h: float) -> None:
    """Ruled lines, grid or dots inside the rect, plus an optional outline."""
    r = element.rect.sanitized()
    props = element.props
    spacing = props.spacing
    c.setStrokeColorRGB(*parse_hex_color(props.stroke))
    c.setFillColorRGB(*parse_hex_color(props.stroke))
    c.setLineWidth(1)

    if props.variant is PatternVariant.GRID:
        gx = r.x + spacing
        while gx < r.right:
            c.line(gx, page_h - r.y, gx, page_h - r.bottom)
            gx += spacing
    if props.variant in (PatternVariant.GRID, PatternVariant.LINES):
        gy = r.y + spacing
        while gy < r.bottom:
            c.line(r.x, page_h - gy, r.right, page_h - gy)
            gy += spacing
    elif props.variant is PatternVariant.DOTS:
        gx = r.x + spacing / 2
        while gx < r.right:
            gy = r.y + spacing / 2
            while gy < r.bottom:
                c.circle(gx, page_h - gy, DOT_RADIUS, stroke=0, fill=1)
                gy += spacing
            gx += spacing

    if props.outline and props.outline_thickness > 0:
        c.setLineWidth(props.outline_thickness)
        c.rect(r.x, page_h - r.y - r.h, r.w, r.h, stroke=1, fill=0)


def _draw_text(c: canvas.Canvas, element: Element, page_h: float) -> None:
    """
    Draw text lines from the top of the rect down.

    Explicit newlines start new lines and each line is wrapped to the
    rect width minus padding. Drawing stops once the lines run past the
    rect height.
    """
    r = element.rect.sanitized()
    props = element.props
    font_size = max(MIN_FONT_SIZE, props.font_size)
    line_height = max(1.0, props.line_height)
    font = FONT_BOLD if props.font_weight >= BOLD_WEIGHT else FONT_REGULAR
    text = element.type.value if props.text is None else props.text
    max_width = max(0.0, r.w - TEXT_PADDING * 2)
    align = props.text_align.lower()

    c.setFont(font, font_size)
    c.setFillColorRGB(*parse_hex_color(props.color))

    top = page_h - r.y
    x_left = r.x + TEXT_PADDING
    dy = 0.0
    for paragraph in text.splitlines() or [""]:
        for line in simpleSplit(paragraph, font, font_size, max_width) or [""]:
            width = c.stringWidth(line, font, font_size)
            if align == "center":
                tx = max(x_left, r.x + (r.w - width) / 2)
            elif align == "right":
                tx = max(x_left, r.right - TEXT_PADDING - width)
            else:
                tx = x_left
            c.drawString(tx, top - font_size - TEXT_PADDING - dy, line)
            dy += font_size * line_height
            if dy > r.h:
                return
