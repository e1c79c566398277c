"""
Text-Fill Package

Slot text generation: request collection, budgets, prompt, response
validation and the retrying filler.
"""

from .models import (
    ExpectedCounts,
    SlotRequest,
    TextFillError,
    TextFillResult,
    TextFillState,
)
from .budgets import approx_char_budget, collect_slot_requests, expected_counts, slot_budgets
from .prompt import build_prompt
from .protocol import extract_json_object, parse_overrides
from .client import OpenAITextClient, TextClient, TextClientError, create_text_client
from .filler import SlotTextFiller

__all__ = [
    # Models
    "ExpectedCounts",
    "SlotRequest",
    "TextFillError",
    "TextFillResult",
    "TextFillState",
    # Budgets
    "approx_char_budget",
    "collect_slot_requests",
    "expected_counts",
    "slot_budgets",
    # Prompt / protocol
    "build_prompt",
    "extract_json_object",
    "parse_overrides",
    # Clients
    "OpenAITextClient",
    "TextClient",
    "TextClientError",
    "create_text_client",
    # Filler
    "SlotTextFiller",
]
