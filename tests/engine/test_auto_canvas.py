"""
Unit Tests for Module Auto-Canvas

Tests for module_auto_canvas() and fit_module_canvas().
"""

import pytest

from template_forge.core.models import (
    Canvas,
    Element,
    ElementType,
    ModuleAssist,
    Rect,
    Spec,
    SpecKind,
)
from template_forge.engine.layout import fit_module_canvas, module_auto_canvas


def _divider(rect: Rect) -> Element:
    return Element("d", ElementType.DIVIDER, rect)


class TestModuleAutoCanvas:
    """Tests for module_auto_canvas()."""

    def test_fit_when_small_content_then_minimum_square_centered(self):
        fit = module_auto_canvas([_divider(Rect(100, 100, 200, 2))])
        assert (fit.w, fit.h) == (520, 520)
        assert (fit.dx, fit.dy) == (60, 159)

    def test_fit_when_wide_content_then_grows_with_margin(self):
        fit = module_auto_canvas([_divider(Rect(0, 0, 800, 100))])
        assert fit.w == fit.h == 896
        assert (fit.dx, fit.dy) == (48, 398)

    @pytest.mark.parametrize("align_x,align_y,expected", [
        ("left", "top", (-52, -52)),
        ("right", "bottom", (172, 370)),
        ("sideways", "center", (60, 159)),
    ])
    def test_fit_when_aligned_then_offsets_follow_alignment(self, align_x, align_y, expected):
        fit = module_auto_canvas([_divider(Rect(100, 100, 200, 2))], align_x=align_x, align_y=align_y)
        assert (fit.dx, fit.dy) == expected

    def test_fit_when_no_valid_content_then_default_canvas(self):
        fit = module_auto_canvas([_divider(Rect(0, 0, 0, 500))])
        assert (fit.w, fit.h, fit.dx, fit.dy) == (640, 640, 48, 48)

    def test_fit_when_degenerate_mixed_in_then_ignored(self):
        elements = [_divider(Rect(0, 0, 0, 5000)), _divider(Rect(100, 100, 200, 2))]
        assert module_auto_canvas(elements) == module_auto_canvas(elements[1:])


class TestFitModuleCanvas:
    """Tests for fit_module_canvas()."""

    def test_fit_when_assist_present_then_alignment_used(self):
        spec = Spec(
            canvas=Canvas(640, 640),
            elements=(_divider(Rect(100, 100, 200, 2)),),
            kind=SpecKind.MODULE,
            module_assist=ModuleAssist(align_x="left", align_y="top"),
        )
        fit = fit_module_canvas(spec)
        assert (fit.dx, fit.dy) == (-52, -52)

    def test_fit_when_no_assist_then_centered(self):
        spec = Spec(canvas=Canvas(640, 640), elements=(_divider(Rect(100, 100, 200, 2)),))
        assert (fit_module_canvas(spec).dx, fit_module_canvas(spec).dy) == (60, 159)
