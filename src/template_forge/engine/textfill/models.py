"""
Module: engine.textfill.models

Purpose:
    Data models for the slot text-fill protocol.

Key Classes:
    - ExpectedCounts: Strings required per role for one slot/module key
    - SlotRequest: Everything the prompt says about one key
    - TextFillState: Filler state machine states
    - TextFillResult: Parsed overrides plus attempt metadata
    - TextFillError: Malformed, missing or undercounted response

Dependencies:
    - dataclasses (std)
    - engine.composition.overrides: SlotTextOverride
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

from template_forge.core.models import Rect
from template_forge.engine.composition.overrides import SlotTextOverride


class TextFillError(Exception):
    """Raised when a text-fill response cannot be used."""

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw


@dataclass(frozen=True)
class ExpectedCounts:
    """Number of header / title / body strings a key needs."""
    headers: int = 0
    titles: int = 0
    bodies: int = 0

    @property
    def total(self) -> int:
        return self.headers + self.titles + self.bodies


@dataclass(frozen=True)
class SlotRequest:
    """
    One ``slot|module`` key as described to the text generator.

    Attributes:
        key: ``"{slotKey}|{moduleId}"``
        slot_key: Slot the module is placed into
        module_id: Module library id
        module_name: Module display name
        slot_rect: Slot rectangle on the layout canvas
        expected: Required string counts per role
        header_budget: Approximate characters that fit a header (0 if none)
        title_budget: Approximate characters that fit a title (0 if none)
        body_budget: Approximate characters that fit a body (0 if none)
    """
    key: str
    slot_key: str
    module_id: str
    module_name: str
    slot_rect: Rect
    expected: ExpectedCounts
    header_budget: int = 0
    title_budget: int = 0
    body_budget: int = 0


class TextFillState(str, Enum):
    """Lifecycle of one fill() call."""
    IDLE = "idle"
    REQUESTING = "requesting"
    RETRYING = "retrying"
    DONE = "done"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TextFillResult:
    """
    Successful text-fill outcome.

    Attributes:
        overrides: ``slot|module`` -> generated text
        attempts: Requests made (1, or 2 after a retry)
        model: Model that produced the text
        prompt: Final prompt sent
        raw: Final raw response text
    """
    overrides: Mapping[str, SlotTextOverride] = field(default_factory=dict)
    attempts: int = 1
    model: str = ""
    prompt: str = ""
    raw: str = ""

    @property
    def filled_keys(self) -> int:
        return len(self.overrides)
