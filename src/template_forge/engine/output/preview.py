"""
Module: engine.output.preview

Purpose:
    Raster thumbnails of assembled templates using Pillow. Follows the
    SVG renderer at a given scale (pattern dots are left out) so previews
    can be written as PNG files without a browser.

Key Functions:
    - render_png(): Spec -> PIL Image
    - save_png(): Render and write to disk

Dependencies:
    - PIL: Image drawing
    - engine.output.text: Wrapping and colours
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from template_forge.core.models import ElementType, PatternVariant, Spec, sort_by_z
from template_forge.core.models.styles import MIN_FONT_SIZE, TEXT_PADDING

from .text import color_to_rgb255, wrap_text_to_width

logger = logging.getLogger(__name__)

DEFAULT_SCALE = 0.5
PAGE_COLOR = (255, 255, 255)
SLOT_COLOR = (96, 165, 250)


@lru_cache(maxsize=32)
def _load_font(size: int, bold: bool) -> ImageFont.ImageFont:
    """
    Load a TrueType font at ``size`` pixels.

    Falls back to Pillow's default font if none is available.
    """
    font_options = (
        ["DejaVuSans-Bold.ttf", "arialbd.ttf", "Arial Bold.ttf"] if bold else []
    ) + ["DejaVuSans.ttf", "arial.ttf", "Arial.ttf"]

    for font_name in font_options:
        try:
            return ImageFont.truetype(font_name, size)
        except (IOError, OSError):
            continue

    logger.warning("Could not load TrueType font, using default")
    return ImageFont.load_default()


def render_png(spec: Spec, *, scale: float = DEFAULT_SCALE) -> Image.Image:
    """
    Render a spec to an RGB image.

    Args:
        spec: Assembled template (or layout) spec
        scale: Pixels per canvas point

    Returns:
        New image of size ``canvas * scale`` (at least 1x1)

    Example:
        >>> img = render_png(combination.spec, scale=0.25)
        >>> img.size
        (153, 198)
    """
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale}")

    width = max(1, round(spec.canvas.w * scale))
    height = max(1, round(spec.canvas.h * scale))
    image = Image.new("RGB", (width, height), PAGE_COLOR)
    draw = ImageDraw.Draw(image)

    def box(x: float, y: float, w: float, h: float) -> tuple[float, float, float, float]:
        return x * scale, y * scale, max(x, x + w) * scale, max(y, y + h) * scale

    for element in sort_by_z(spec.elements):
        r = element.rect.sanitized()
        props = element.props
        kind = element.type

        if kind is ElementType.BACKGROUND_TEXTURE:
            draw.rectangle((0, 0, width, height), fill=color_to_rgb255(props.fill))

        elif kind is ElementType.GRID_LINES:
            color = color_to_rgb255(props.stroke)
            for i in range(1, props.cols):
                lx = width / props.cols * i
                draw.line((lx, 0, lx, height), fill=color)
            for j in range(1, props.rows):
                ly = height / props.rows * j
                draw.line((0, ly, width, ly), fill=color)

        elif kind is ElementType.PATTERN:
            color = color_to_rgb255(props.stroke)
            step = props.spacing
            if props.variant is PatternVariant.GRID:
                gx = r.x + step
                while gx < r.right:
                    draw.line(box(gx, r.y, 0, r.h), fill=color)
                    gx += step
            if props.variant in (PatternVariant.GRID, PatternVariant.LINES):
                gy = r.y + step
                while gy < r.bottom:
                    draw.line(box(r.x, gy, r.w, 0), fill=color)
                    gy += step
            if props.outline and props.outline_thickness > 0:
                draw.rectangle(box(r.x, r.y, r.w, r.h), outline=color,
                               width=max(1, round(props.outline_thickness * scale)))

        elif kind is ElementType.DIVIDER:
            draw.rectangle(box(r.x, r.y, r.w, max(1.0, props.thickness)), fill=color_to_rgb255(props.stroke))

        elif kind is ElementType.CONTAINER:
            fill = color_to_rgb255(props.fill) if props.fill else None
            draw.rectangle(box(r.x, r.y, r.w, r.h), fill=fill,
                           outline=color_to_rgb255(props.stroke), width=max(1, round(2 * scale)))

        elif kind is ElementType.SLOT:
            draw.rectangle(box(r.x, r.y, r.w, r.h), outline=SLOT_COLOR, width=1)

        elif kind.is_text:
            font_size = max(MIN_FONT_SIZE, props.font_size)
            font = _load_font(max(1, round(font_size * scale)), props.font_weight >= 600)
            text = kind.value if props.text is None else props.text
            lines = wrap_text_to_width(text, max(0.0, r.w - TEXT_PADDING * 2), font_size)
            color = color_to_rgb255(props.color)
            for i, line in enumerate(lines):
                top = r.y + TEXT_PADDING + i * font_size * max(1.0, props.line_height)
                if top + font_size > r.bottom:
                    break
                draw.text(((r.x + TEXT_PADDING) * scale, top * scale), line, fill=color, font=font)

    return image


def save_png(spec: Spec, output_path: Path, *, scale: float = DEFAULT_SCALE) -> Path:
    """Render a spec and write it as PNG."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    render_png(spec, scale=scale).save(output_path, format="PNG")
    logger.debug(f"Saved preview {output_path}")
    return output_path
