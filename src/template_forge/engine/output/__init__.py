"""
Module: engine.output

Purpose:
    Renderers for assembled templates and module previews.

Key Functions:
    - render_svg(): Template SVG string
    - render_module_svg(): Module preview SVG string
    - render_to_pdf(): Multi-page PDF with ReportLab
    - render_png() / save_png(): Pillow thumbnails

Dependencies:
    - reportlab: PDF generation
    - PIL: Raster previews

Used By:
    - cli: ``generate --svg/--pdf/--png``
"""

from .svg import render_svg, render_module_svg
from .pdf import render_to_pdf
from .preview import render_png, save_png
from .text import wrap_text_to_width, parse_hex_color

__all__ = [
    "render_svg",
    "render_module_svg",
    "render_to_pdf",
    "render_png",
    "save_png",
    "wrap_text_to_width",
    "parse_hex_color",
]
