"""
Unit Tests for Template Composition

Tests for assemble_template_spec(), slot fitting and placeholders.
"""

import pytest

from template_forge.core.models import (
    BackgroundTextureProps,
    Canvas,
    ContainerProps,
    Element,
    ElementType,
    Rect,
    SlotProps,
    Spec,
    SpecKind,
    TextProps,
)
from template_forge.engine.composition import (
    CompositionError,
    SlotTextOverride,
    SlotTransform,
    assemble_template_spec,
    header_placeholder,
    scaled_module_rects,
    title_case,
)


def _module(*elements: Element) -> Spec:
    return Spec(canvas=Canvas(640, 640), elements=elements, kind=SpecKind.MODULE)


def _assemble(layout, mapping, modules, **kwargs):
    return assemble_template_spec(layout, layout.slot_rects, mapping, modules, **kwargs)


class TestSlotTransform:
    """Tests for SlotTransform.fit() / scaled_module_rects()."""

    def test_fit_when_aspect_differs_then_scaled_and_centered(self):
        module = _module(Element("h", ElementType.HEADER, Rect(0, 0, 200, 100)))

        transform = SlotTransform.fit(module, Rect(0, 0, 400, 400))

        assert transform.scale == 2
        assert transform.apply(Rect(0, 0, 200, 100)) == Rect(0, 100, 400, 200)

    def test_fit_when_content_offset_then_offset_removed(self):
        module = _module(Element("h", ElementType.HEADER, Rect(100, 50, 100, 100)))
        placed = SlotTransform.fit(module, Rect(10, 10, 50, 50)).apply(Rect(100, 50, 100, 100))
        assert placed == Rect(10, 10, 50, 50)

    def test_scaled_rects_when_degenerate_element_then_dropped(self):
        module = _module(
            Element("ok", ElementType.HEADER, Rect(0, 0, 100, 50)),
            Element("flat", ElementType.DIVIDER, Rect(0, 0, 100, 0)),
        )
        placed = scaled_module_rects(module, Rect(0, 0, 200, 100))
        assert [e.id for e, _ in placed] == ["ok"]


class TestAssembleTemplateSpec:
    """Tests for assemble_template_spec()."""

    def test_assemble_when_modules_mapped_then_slots_replaced_by_content(self, make_layout, make_module):
        # Arrange
        layout = make_layout(["a", "b"])
        module = make_module(ElementType.HEADER, ElementType.BODY_TEXT)

        # Act
        spec = _assemble(layout, {"a": "m1", "b": "m2"}, {"m1": module, "m2": module})

        # Assert
        assert spec.kind is None
        assert spec.canvas == layout.canvas
        assert not spec.slots
        assert [e.id for e in spec.elements] == ["slot_a_e1", "slot_a_e2", "slot_b_e1", "slot_b_e2"]
        assert [e.source_slot for e in spec.elements] == ["a", "a", "b", "b"]
        assert [e.z_index for e in spec.elements] == [1, 2, 3, 4]
        for element in spec.elements:
            assert layout.slot_rects[element.source_slot].contains(element.rect)

    def test_assemble_when_layout_has_decoration_then_kept_first(self, make_layout, make_module):
        border = Element("border", ElementType.CONTAINER, Rect(0, 0, 612, 792), 5)
        layout = make_layout(["a"], extra=[border])

        spec = _assemble(layout, {"a": "m1"}, {"m1": make_module(ElementType.HEADER)})

        assert spec.elements[0] is border
        assert spec.elements[1].z_index == 6

    def test_assemble_when_no_topic_then_generic_placeholders(self, make_layout, make_module):
        layout = make_layout(["a"])
        module = make_module(ElementType.HEADER, ElementType.HEADER, ElementType.BODY_TEXT)

        spec = _assemble(layout, {"a": "m1"}, {"m1": module})

        texts = [e.props.text for e in spec.elements]
        assert texts[0] == "This is a header"
        assert texts[1] == "This is a long header"
        assert texts[2].startswith("This is a paragraph.")
        assert spec.elements[0].props.font_size == 24
        assert spec.elements[2].props.line_height == 1.35

    def test_assemble_when_topic_then_placeholders_mention_it(self, make_layout, make_module):
        layout = make_layout(["a"])
        spec = _assemble(
            layout, {"a": "m1"}, {"m1": make_module(ElementType.HEADER, ElementType.BODY_TEXT)},
            topic="quarterly report",
        )
        assert spec.elements[0].props.text == "Quarterly Report"
        assert "quarterly report" in spec.elements[1].props.text

    def test_assemble_when_override_then_used_and_missing_roles_fall_back(self, make_layout, make_module):
        layout = make_layout(["a"])
        overrides = {"a|m1": SlotTextOverride(headers=("Custom heading",))}

        spec = _assemble(
            layout, {"a": "m1"}, {"m1": make_module(ElementType.HEADER, ElementType.BODY_TEXT)},
            overrides=overrides,
        )

        assert spec.elements[0].props.text == "Custom heading"
        assert spec.elements[1].props.text.startswith("This is a paragraph.")

    def test_assemble_when_override_blank_then_placeholder(self, make_layout, make_module):
        layout = make_layout(["a"])
        overrides = {"a|m1": SlotTextOverride(headers=("",), bodies=("   ",))}

        spec = _assemble(
            layout, {"a": "m1"}, {"m1": make_module(ElementType.HEADER, ElementType.BODY_TEXT)},
            overrides=overrides,
        )

        assert spec.elements[0].props.text == "This is a header"
        assert spec.elements[1].props.text.startswith("This is a paragraph.")

    def test_assemble_when_override_for_other_module_then_ignored(self, make_layout, make_module):
        layout = make_layout(["a"])
        overrides = {"a|m2": SlotTextOverride(headers=("Not mine",))}
        spec = _assemble(layout, {"a": "m1"}, {"m1": make_module(ElementType.HEADER)}, overrides=overrides)
        assert spec.elements[0].props.text == "This is a header"

    def test_assemble_when_module_text_styled_then_style_table_wins(self, make_layout):
        layout = make_layout(["a"])
        module = _module(Element(
            "h", ElementType.HEADER, Rect(0, 0, 100, 40), 1,
            TextProps(font_size=60, color="#ff0000", text="Typed"),
        ))
        placed = _assemble(layout, {"a": "m1"}, {"m1": module}).elements[0]
        assert placed.props.font_size == 24
        assert placed.props.color == "#111827"
        assert placed.props.text == "This is a header"

    def test_assemble_when_module_empty_then_placeholder_inside_slot(self):
        layout = Spec(
            canvas=Canvas(612, 792),
            elements=(Element("s", ElementType.SLOT, Rect(0, 0, 300, 200), 1, SlotProps(slot_key="a")),),
            kind=SpecKind.LAYOUT,
        )

        spec = _assemble(layout, {"a": "m_empty"}, {"m_empty": _module()})

        assert [e.id for e in spec.elements] == [
            "slot_a_placeholder_header",
            "slot_a_placeholder_divider",
            "slot_a_placeholder_body",
        ]
        for element in spec.elements:
            assert Rect(0, 0, 300, 200).contains(element.rect)
        assert spec.elements[0].props.text == "This is a header"

    def test_assemble_when_module_empty_and_slot_short_then_placeholder_inside_slot(self):
        # Arrange
        slot = Rect(40, 60, 100, 50)
        layout = Spec(
            canvas=Canvas(612, 792),
            elements=(Element("s", ElementType.SLOT, slot, 1, SlotProps(slot_key="a")),),
            kind=SpecKind.LAYOUT,
        )

        # Act
        spec = _assemble(layout, {"a": "m_empty"}, {"m_empty": _module()})

        # Assert
        header, divider, body = spec.elements
        for element in spec.elements:
            assert element.rect.h > 0
            assert slot.contains(element.rect)
        assert header.rect.bottom <= divider.rect.y
        assert divider.rect.bottom <= body.rect.y
        assert body.rect.bottom == pytest.approx(slot.bottom - 6)

    def test_assemble_when_background_texture_then_container_without_slot_key(self, make_layout):
        layout = make_layout(["a"])
        module = _module(
            Element("bg", ElementType.BACKGROUND_TEXTURE, Rect(0, 0, 100, 100), 1,
                    BackgroundTextureProps(fill="#fef3c7")),
        )

        placed = _assemble(layout, {"a": "m1"}, {"m1": module}).elements[0]

        assert placed.type is ElementType.CONTAINER
        assert isinstance(placed.props, ContainerProps)
        assert placed.props.fill == "#fef3c7"
        assert placed.source_slot is None

    def test_assemble_when_unknown_module_then_composition_error(self, make_layout):
        layout = make_layout(["a"])
        with pytest.raises(CompositionError) as exc_info:
            _assemble(layout, {"a": "ghost"}, {})
        assert exc_info.value.module_id == "ghost"

    def test_assemble_when_unknown_slot_then_composition_error(self, make_layout, make_module):
        layout = make_layout(["a"])
        with pytest.raises(CompositionError, match="No slot rect"):
            _assemble(layout, {"zz": "m1"}, {"m1": make_module(ElementType.HEADER)})


class TestPlaceholders:
    """Tests for placeholder text helpers."""

    def test_title_case_when_extra_spaces_then_collapsed(self):
        assert title_case("  quarterly   sales ") == "Quarterly Sales"

    def test_header_when_second_with_topic_then_section_suffix(self):
        assert header_placeholder("team offsite", 1) == "Team Offsite (section)"

    def test_header_when_topic_blank_then_generic(self):
        assert header_placeholder("   ", 0) == "This is a header"
