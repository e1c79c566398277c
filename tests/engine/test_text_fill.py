"""
Unit Tests for Slot Text Fill

Tests budgets, request collection, prompt text, response parsing,
the retrying filler and the OpenAI client wrapper.
"""

import json
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from template_forge.core.models import Canvas, ElementType, Rect, Spec, SpecKind
from template_forge.engine.enumeration import LayoutContext, enumerate_combinations
from template_forge.engine.textfill import (
    ExpectedCounts,
    OpenAITextClient,
    SlotRequest,
    SlotTextFiller,
    TextClientError,
    TextFillError,
    TextFillState,
    approx_char_budget,
    build_prompt,
    collect_slot_requests,
    create_text_client,
    expected_counts,
    extract_json_object,
    parse_overrides,
    slot_budgets,
)


def _request(key="a|m1", titles=0) -> SlotRequest:
    slot_key, module_id = key.split("|")
    return SlotRequest(
        key=key,
        slot_key=slot_key,
        module_id=module_id,
        module_name="Notes",
        slot_rect=Rect(0, 0, 300, 200),
        expected=ExpectedCounts(headers=1, titles=titles, bodies=1),
        header_budget=40,
        title_budget=30 if titles else 0,
        body_budget=200,
    )


def _response(items: dict) -> str:
    return json.dumps({"items": items})


GOOD = _response({"a|m1": {"headers": ["Weekly Sync"], "titles": [], "bodies": ["Decisions and next steps."]}})
NO_HEADERS = _response({"a|m1": {"headers": [], "bodies": ["Body"]}})


class TestBudgets:
    """Tests for expected_counts(), approx_char_budget() and slot_budgets()."""

    def test_expected_when_empty_module_then_one_header_one_body(self):
        empty = Spec(canvas=Canvas(640, 640), kind=SpecKind.MODULE)
        assert expected_counts(empty) == ExpectedCounts(headers=1, titles=0, bodies=1)

    def test_expected_when_mixed_module_then_counts_roles(self, make_module):
        module = make_module(ElementType.HEADER, ElementType.TITLE, ElementType.TITLE, ElementType.DIVIDER)
        assert expected_counts(module) == ExpectedCounts(headers=1, titles=2, bodies=0)

    def test_char_budget_when_body_box_then_chars_times_lines(self):
        assert approx_char_budget(Rect(0, 0, 300, 100), 12, 1.35) == 215

    def test_char_budget_when_box_tiny_then_at_least_one(self):
        assert approx_char_budget(Rect(0, 0, 2, 2), 24, 1.2) == 1

    def test_slot_budgets_when_module_empty_then_slot_heuristics(self):
        empty = Spec(canvas=Canvas(640, 640), kind=SpecKind.MODULE)
        budgets = slot_budgets(empty, Rect(0, 0, 300, 200), ExpectedCounts(headers=1, bodies=1))
        assert budgets == (21, 0, 301)


class TestCollectSlotRequests:
    """Tests for collect_slot_requests()."""

    def test_collect_when_mappings_repeat_keys_then_one_request_per_key(self, library):
        layout = library.get("L1")
        ctx = LayoutContext.from_spec("L1", layout.spec, layout.name)
        mappings = list(enumerate_combinations([ctx], ["m1", "m2"]))

        requests = collect_slot_requests(mappings, library.modules_by_id(["m1", "m2"]), library.names())

        assert [r.key for r in requests] == ["a|m1", "b|m1", "a|m2", "b|m2"]
        assert requests[0].module_name == "Notes"
        assert requests[2].module_name == "Agenda"
        assert requests[0].expected == ExpectedCounts(headers=1, titles=0, bodies=1)
        assert requests[0].header_budget > 0
        assert requests[0].title_budget == 0

    def test_collect_when_module_unknown_then_key_skipped(self, library):
        layout = library.get("L2")
        ctx = LayoutContext.from_spec("L2", layout.spec, layout.name)
        mappings = list(enumerate_combinations([ctx], ["m1", "ghost"]))

        requests = collect_slot_requests(mappings, library.modules_by_id(["m1", "ghost"]))

        assert [r.key for r in requests] == ["a|m1"]
        assert requests[0].module_name == "m1"


class TestPrompt:
    """Tests for build_prompt()."""

    def test_prompt_when_first_attempt_then_topic_layouts_and_request_lines(self):
        prompt = build_prompt("meeting summary", ["Two Up", "Single"], [_request()])

        assert "Instructions: Create a template for a [meeting summary]" in prompt
        assert "- Templates: Two Up and Single" in prompt
        assert (
            "- key: a|m1 | slot=a (w=300pt,h=200pt) | module=Notes | headers=1, titles=0, bodies=1 "
            "| header_budget_chars≈40 | body_budget_chars≈200"
        ) in prompt
        assert "IMPORTANT: Your previous response was invalid." not in prompt

    def test_prompt_when_titles_requested_then_title_budget_listed(self):
        prompt = build_prompt("menu", ["Single"], [_request(titles=2)])
        assert "headers=1, titles=2, bodies=1 | header_budget_chars≈40 | title_budget_chars≈30" in prompt

    def test_prompt_when_retry_then_reason_and_example(self):
        prompt = build_prompt("menu", ["Single"], [_request()], attempt=1, last_error="AI did not return JSON.")

        assert "IMPORTANT: Your previous response was invalid." in prompt
        assert "Reason: AI did not return JSON." in prompt
        assert '{"items":{"a|m1":{"headers":["Header 1"],"titles":[],"bodies":["Body 1"]}}}' in prompt


class TestProtocol:
    """Tests for extract_json_object() / parse_overrides()."""

    def test_extract_when_wrapped_in_prose_then_object(self):
        assert extract_json_object('Here you go:\n{"items": {}}\nThanks!') == {"items": {}}

    def test_extract_when_no_braces_then_error(self):
        with pytest.raises(TextFillError, match="AI did not return JSON."):
            extract_json_object("no json here")

    def test_parse_when_items_missing_then_error(self):
        with pytest.raises(TextFillError, match="AI JSON missing 'items' object."):
            parse_overrides('{"data": {}}', {"a|m1": ExpectedCounts(1, 0, 1)})

    def test_parse_when_key_missing_then_error(self):
        with pytest.raises(TextFillError, match=r"AI response is missing key b\|m1\."):
            parse_overrides(GOOD, {"a|m1": ExpectedCounts(1, 0, 1), "b|m1": ExpectedCounts(1, 0, 1)})

    def test_parse_when_blank_strings_then_undercount_error(self):
        raw = _response({"a|m1": {"headers": ["  ", ""], "bodies": ["Body"]}})
        with pytest.raises(TextFillError) as exc_info:
            parse_overrides(raw, {"a|m1": ExpectedCounts(1, 0, 1)})
        assert str(exc_info.value) == "AI returned 0 header(s) for a|m1; expected 1."
        assert exc_info.value.raw == raw

    def test_parse_when_extra_strings_then_trimmed_to_expected(self):
        raw = _response({"a|m1": {"headers": ["One", "Two"], "bodies": ["B1", "B2", "B3"], "titles": ["T"]}})

        overrides = parse_overrides(raw, {"a|m1": ExpectedCounts(1, 0, 2)})

        assert overrides["a|m1"].headers == ("One",)
        assert overrides["a|m1"].bodies == ("B1", "B2")
        assert overrides["a|m1"].titles == ()

    def test_parse_when_unrequested_keys_then_ignored(self):
        raw = _response({
            "a|m1": {"headers": ["H"], "bodies": ["B"]},
            "zz|m9": {"headers": ["X"], "bodies": ["Y"]},
        })
        assert list(parse_overrides(raw, {"a|m1": ExpectedCounts(1, 0, 1)})) == ["a|m1"]


class TestSlotTextFiller:
    """Tests for SlotTextFiller.fill()."""

    def test_fill_when_first_response_valid_then_done_in_one_attempt(self, fake_client):
        client = fake_client(GOOD)
        filler = SlotTextFiller(client)

        result = filler.fill("meeting summary", [_request()], ["Single"])

        assert filler.state is TextFillState.DONE
        assert result.attempts == 1
        assert result.model == "fake-model"
        assert result.overrides["a|m1"].headers == ("Weekly Sync",)
        assert len(client.prompts) == 1

    def test_fill_when_first_response_invalid_then_retry_with_reason(self, fake_client):
        client = fake_client("Sorry, I can't do JSON today.", GOOD)
        filler = SlotTextFiller(client)

        result = filler.fill("meeting summary", [_request()], ["Single"])

        assert result.attempts == 2
        assert "Reason: AI did not return JSON." in client.prompts[1]
        assert "Reason:" not in client.prompts[0]

    def test_fill_when_both_attempts_invalid_then_failed_with_last_reason(self, fake_client):
        client = fake_client(NO_HEADERS, NO_HEADERS)
        filler = SlotTextFiller(client)

        with pytest.raises(TextFillError, match="AI returned 0 header"):
            filler.fill("meeting summary", [_request()], ["Single"])

        assert filler.state is TextFillState.FAILED
        assert len(client.prompts) == 2

    def test_fill_when_client_error_then_retried(self, fake_client):
        client = fake_client(TextClientError("timeout"), GOOD)
        result = SlotTextFiller(client).fill("menu", [_request()], ["Single"])
        assert result.attempts == 2
        assert "Reason: timeout" in client.prompts[1]

    def test_fill_when_no_requests_then_no_call(self, fake_client):
        client = fake_client()
        result = SlotTextFiller(client).fill("menu", [], ["Single"])
        assert result.attempts == 0
        assert result.filled_keys == 0
        assert client.prompts == []


class _FakeResponses:
    def __init__(self, outcome):
        self._outcome = outcome
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self._outcome, Exception):
            raise self._outcome
        return self._outcome


class TestOpenAITextClient:
    """Tests for OpenAITextClient and create_text_client()."""

    def test_complete_when_usage_reported_then_tokens_accumulated(self):
        client = OpenAITextClient(api_key="test-key", model="test-model")
        response = SimpleNamespace(
            usage=SimpleNamespace(input_tokens=120, output_tokens=30),
            output_text='{"items": {}}',
        )
        fake = _FakeResponses(response)
        client._client = SimpleNamespace(responses=fake)

        assert client.complete("prompt") == '{"items": {}}'
        client.complete("prompt")

        assert client.get_token_totals() == (240, 60)
        assert fake.calls[0]["model"] == "test-model"
        assert fake.calls[0]["input"] == [{"role": "user", "content": "prompt"}]

    def test_complete_when_api_error_then_text_client_error(self):
        client = OpenAITextClient(api_key="test-key")
        client._client = SimpleNamespace(responses=_FakeResponses(OpenAIError("boom")))
        with pytest.raises(TextClientError, match="boom"):
            client.complete("prompt")

    def test_create_when_no_api_key_then_error(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.setattr("template_forge.engine.textfill.client.load_dotenv", lambda *a, **k: False)
        with pytest.raises(TextClientError, match="OPENAI_API_KEY"):
            create_text_client("gpt-5.2")

    def test_create_when_key_given_then_client_with_model(self):
        client = create_text_client("gpt-test", api_key="test-key")
        assert client.model == "gpt-test"
