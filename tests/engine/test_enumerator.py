"""
Unit Tests for Combination Enumeration

Tests validation order, counting, overflow and capped enumeration.
"""

import pytest

from template_forge.engine.enumeration import (
    IssueKind,
    LayoutContext,
    count_combinations,
    decode_mapping,
    dedupe_ids,
    enumerate_combinations,
    layout_combination_count,
)


@pytest.fixture
def two_up(make_layout) -> LayoutContext:
    return LayoutContext.from_spec("L1", make_layout(["a", "b"]), "Two Up")


@pytest.fixture
def single(make_layout) -> LayoutContext:
    return LayoutContext.from_spec("L2", make_layout(["a"]), "Single")


class TestCountCombinations:
    """Tests for count_combinations()."""

    def test_count_when_two_layouts_then_sum_of_powers(self, two_up, single):
        result = count_combinations([two_up, single], ["m1", "m2"])
        assert result.ok
        assert result.count == 2 ** 2 + 2 ** 1

    def test_count_when_no_layouts_then_issue(self):
        result = count_combinations([], ["m1"])
        assert result.count == 0
        assert result.issue.kind is IssueKind.NO_LAYOUTS
        assert result.issue.message == "Select at least one layout module in the Layout node."

    def test_count_when_layout_unresolved_then_id_prefix_in_message(self):
        ctx = LayoutContext.from_spec("abcdef123456", None)
        result = count_combinations([ctx], ["m1"])
        assert result.issue.kind is IssueKind.LAYOUT_NOT_FOUND
        assert str(result.issue) == "Selected layout not found (abcdef12)."

    def test_count_when_layout_has_no_slots_then_named_in_message(self, make_layout):
        ctx = LayoutContext.from_spec("L3", make_layout([]), "Blank Page")
        result = count_combinations([ctx], ["m1"])
        assert result.issue.kind is IssueKind.NO_SLOTS
        assert result.issue.message == 'Layout "Blank Page" has no slots. Add Slot elements in Module Forge.'

    def test_count_when_several_problems_then_first_layout_problem_wins(self, make_layout):
        empty = LayoutContext.from_spec("L3", make_layout([]), "Blank Page")
        missing = LayoutContext.from_spec("zzzzzzzzzz", None)
        result = count_combinations([empty, missing], [])
        assert result.issue.kind is IssueKind.NO_SLOTS

    def test_count_when_pool_empty_then_issue(self, two_up):
        result = count_combinations([two_up], [])
        assert result.issue.kind is IssueKind.EMPTY_POOL
        assert result.issue.message == "Select at least one module in a connected Module node."

    def test_count_when_single_layout_exceeds_ceiling_then_overflow(self, two_up):
        result = count_combinations([two_up], ["m1", "m2", "m3"], ceiling=8)
        assert result.issue.kind is IssueKind.OVERFLOW
        assert result.issue.message == "Combination count overflow."

    def test_count_when_sum_exceeds_ceiling_then_overflow(self, two_up, make_layout):
        other = LayoutContext.from_spec("L9", make_layout(["x", "y"]), "Other")
        assert count_combinations([two_up], ["m1", "m2"], ceiling=6).count == 4
        result = count_combinations([two_up, other], ["m1", "m2"], ceiling=6)
        assert result.issue.kind is IssueKind.OVERFLOW

    def test_count_when_beyond_safe_integer_then_overflow(self, make_layout):
        keys = [f"s{i}" for i in range(20)]
        ctx = LayoutContext.from_spec("big", make_layout(keys), "Big")
        result = count_combinations([ctx], [f"m{i}" for i in range(10)])
        assert result.issue.kind is IssueKind.OVERFLOW

    def test_layout_count_when_no_slots_then_one(self):
        assert layout_combination_count(7, 0) == 1


class TestEnumerateCombinations:
    """Tests for enumerate_combinations() and decode_mapping()."""

    def test_enumerate_when_two_slots_then_first_slot_varies_fastest(self, two_up):
        mappings = [dict(m.mapping) for m in enumerate_combinations([two_up], ["m1", "m2"])]
        assert mappings == [
            {"a": "m1", "b": "m1"},
            {"a": "m2", "b": "m1"},
            {"a": "m1", "b": "m2"},
            {"a": "m2", "b": "m2"},
        ]

    def test_enumerate_when_cap_reached_then_stops_mid_layout(self, two_up, single):
        produced = list(enumerate_combinations([two_up, single], ["m1", "m2"], cap=3))
        assert [m.idx for m in produced] == [0, 1, 2]
        assert {m.layout.layout_id for m in produced} == {"L1"}

    def test_enumerate_when_cap_spans_layouts_then_global_idx(self, two_up, single):
        produced = list(enumerate_combinations([two_up, single], ["m1", "m2"], cap=5))
        assert [m.idx for m in produced] == [0, 1, 2, 3, 4]
        assert produced[4].layout.layout_id == "L2"
        assert dict(produced[4].mapping) == {"a": "m1"}

    def test_enumerate_when_cap_larger_than_count_then_all(self, two_up, single):
        assert len(list(enumerate_combinations([two_up, single], ["m1", "m2"], cap=100))) == 6

    def test_enumerate_when_cap_zero_then_nothing(self, two_up):
        assert list(enumerate_combinations([two_up], ["m1"], cap=0)) == []

    def test_enumerate_when_layout_slotless_then_single_empty_mapping(self, make_layout):
        ctx = LayoutContext.from_spec("L0", make_layout([]), "Blank")
        produced = list(enumerate_combinations([ctx], ["m1"]))
        assert len(produced) == 1
        assert dict(produced[0].mapping) == {}

    def test_decode_when_three_modules_then_mixed_radix(self):
        assert decode_mapping(5, ["a", "b"], ["m1", "m2", "m3"]) == {"a": "m3", "b": "m2"}


class TestLayoutContext:
    """Tests for LayoutContext and id dedupe."""

    def test_context_when_repeated_slot_keys_then_distinct_slots(self, make_layout):
        ctx = LayoutContext.from_spec("L1", make_layout(["a", "b", "a"]), "Repeat")
        assert ctx.slots == ("a", "b")
        assert ctx.slot_rects["a"].y == 24 + 2 * 190

    def test_context_when_name_blank_then_id_prefix(self, make_layout):
        ctx = LayoutContext.from_spec("0123456789", make_layout(["a"]), "  ")
        assert ctx.layout_name == "01234567"

    def test_dedupe_ids_when_repeats_and_blanks_then_first_seen(self):
        assert dedupe_ids(["m2", None, " m1", "m2", "", "m1"]) == ["m2", "m1"]
