"""
Unit Tests for Template Renderers

Tests SVG markup, PDF output and PNG thumbnails for assembled specs.
"""

import re

import pytest
from PIL import Image

from template_forge.core.models import (
    BackgroundTextureProps,
    Canvas,
    ContainerProps,
    Element,
    ElementType,
    ModuleAssist,
    Rect,
    Spec,
    SpecKind,
    TextProps,
)
from template_forge.engine.output import (
    parse_hex_color,
    render_module_svg,
    render_png,
    render_svg,
    render_to_pdf,
    save_png,
    wrap_text_to_width,
)


def _page(*elements: Element, canvas: Canvas = Canvas(612, 792)) -> Spec:
    return Spec(canvas=canvas, elements=elements)


def _header(text: str, element_id: str = "h1", align: str = "left") -> Element:
    return Element(element_id, ElementType.HEADER, Rect(20, 30, 300, 60), 2,
                   TextProps(text=text, font_size=24, font_weight=700, text_align=align))


class TestTextHelpers:
    """Tests for wrap_text_to_width() / parse_hex_color()."""

    def test_wrap_when_word_longer_than_line_then_chunked(self):
        assert wrap_text_to_width("abcdefghij", 22, 10) == ["abcd", "efgh", "ij"]

    def test_wrap_when_blank_then_single_empty_line(self):
        assert wrap_text_to_width("", 100, 12) == [""]

    @pytest.mark.parametrize("value,expected", [
        ("#ffffff", (1.0, 1.0, 1.0)),
        ("#000", (0.0, 0.0, 0.0)),
        ("rgba(0,0,0,0.5)", (0.97, 0.98, 0.99)),
    ])
    def test_parse_hex_when_various_inputs_then_fraction_or_fallback(self, value, expected):
        assert parse_hex_color(value) == expected


class TestRenderSvg:
    """Tests for render_svg() / render_module_svg()."""

    def test_svg_when_template_then_responsive_root_with_viewbox(self):
        svg = render_svg(_page(_header("Hello")))
        assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" width="100%" height="100%"')
        assert 'viewBox="0 0 612 792"' in svg
        assert 'preserveAspectRatio="xMidYMid meet"' in svg

    def test_svg_when_text_has_markup_then_escaped_and_clipped(self):
        svg = render_svg(_page(_header("Q&A <live>", element_id="slot_a|h")))
        assert "Q&amp;A &lt;live&gt;" in svg
        assert '<clipPath id="clip_slot_a_h">' in svg
        assert 'clip-path="url(#clip_slot_a_h)"' in svg
        assert 'font-weight="700"' in svg

    def test_svg_when_centered_text_then_middle_anchor(self):
        svg = render_svg(_page(_header("Hi", align="center")))
        assert 'text-anchor="middle"' in svg
        assert '<tspan x="170" y="60">Hi</tspan>' in svg

    def test_svg_when_background_then_fills_whole_page(self):
        bg = Element("bg", ElementType.BACKGROUND_TEXTURE, Rect(10, 10, 5, 5), 0,
                     BackgroundTextureProps(fill="#fef3c7"))
        svg = render_svg(_page(bg))
        assert '<rect x="0" y="0" width="612" height="792" fill="#fef3c7" />' in svg

    def test_svg_when_layout_slots_then_dotted_outline_and_key(self, make_layout):
        svg = render_svg(make_layout(["hero"]))
        assert 'stroke-dasharray="1 6"' in svg
        assert ">hero</text>" in svg

    def test_svg_when_elements_out_of_order_then_drawn_by_z(self):
        low = Element("low", ElementType.CONTAINER, Rect(0, 0, 10, 10), 1, ContainerProps(fill="#111111"))
        high = Element("high", ElementType.CONTAINER, Rect(0, 0, 10, 10), 9, ContainerProps(fill="#222222"))
        svg = render_svg(_page(high, low))
        assert svg.index("#111111") < svg.index("#222222")

    def test_module_svg_when_rounded_container_then_auto_canvas_and_radius(self):
        module = Spec(
            canvas=Canvas(640, 640),
            elements=(Element("c", ElementType.CONTAINER, Rect(100, 100, 200, 100), 1,
                              ContainerProps(radius=8)),),
            kind=SpecKind.MODULE,
            module_assist=ModuleAssist(),
        )
        svg = render_module_svg(module)
        assert 'width="520" height="520"' in svg
        assert '<rect x="160" y="210" width="200" height="100"' in svg
        assert 'rx="8"' in svg


class TestRenderPdf:
    """Tests for render_to_pdf()."""

    def test_pdf_when_two_specs_then_two_pages(self, tmp_path):
        path = tmp_path / "out" / "templates.pdf"

        render_to_pdf([_page(_header("One")), _page(_header("Two"), canvas=Canvas(400, 300))], path)

        data = path.read_bytes()
        assert data.startswith(b"%PDF")
        assert len(re.findall(rb"/Type /Page\b", data)) == 2

    def test_pdf_when_no_specs_then_still_written(self, tmp_path):
        path = tmp_path / "empty.pdf"
        render_to_pdf([], path)
        assert path.read_bytes().startswith(b"%PDF")


class TestRenderPng:
    """Tests for render_png() / save_png()."""

    def test_png_when_default_scale_then_half_size(self):
        assert render_png(_page()).size == (306, 396)

    def test_png_when_scale_not_positive_then_raises_error(self):
        with pytest.raises(ValueError, match="scale"):
            render_png(_page(), scale=0)

    def test_png_when_background_and_container_then_colours_drawn(self):
        bg = Element("bg", ElementType.BACKGROUND_TEXTURE, Rect(0, 0, 1, 1), 0,
                     BackgroundTextureProps(fill="#ff0000"))
        box = Element("c", ElementType.CONTAINER, Rect(100, 100, 200, 200), 1,
                      ContainerProps(fill="#0000ff", stroke="#0000ff"))

        image = render_png(_page(bg, box), scale=1.0)

        assert image.getpixel((10, 10)) == (255, 0, 0)
        assert image.getpixel((200, 200)) == (0, 0, 255)

    def test_save_png_when_nested_path_then_png_written(self, tmp_path):
        path = save_png(_page(_header("Hi")), tmp_path / "png" / "t.png", scale=0.25)
        with Image.open(path) as image:
            assert image.format == "PNG"
            assert image.size == (153, 198)
