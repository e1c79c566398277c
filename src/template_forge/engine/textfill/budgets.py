"""
Module: engine.textfill.budgets

Purpose:
    Work out what to ask the text generator for: which slot/module keys
    appear in a run, how many strings of each role every key needs, and
    roughly how many characters fit each text box.

Key Functions:
    - expected_counts(): Header/title/body counts for a module
    - approx_char_budget(): Characters that fit a rect at a font size
    - slot_budgets(): Per-role budgets for a module placed in a slot
    - collect_slot_requests(): One SlotRequest per distinct key

Dependencies:
    - engine.composition: scaled_module_rects, override_key

Used By:
    - engine.controller: Before calling SlotTextFiller
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Mapping, Optional

from template_forge.core.models import ElementType, Rect, Spec, text_style
from template_forge.engine.composition import override_key, scaled_module_rects
from template_forge.engine.enumeration import EnumeratedMapping

from .models import ExpectedCounts, SlotRequest

logger = logging.getLogger(__name__)

GLYPH_WIDTH_EM = 0.55
BUDGET_PADDING = 6.0

# Slot heuristics used when a module has no rect for the role
FALLBACK_HEADER_MAX_H = 64.0
FALLBACK_BODY_MIN_H = 80.0


def expected_counts(module_spec: Spec) -> ExpectedCounts:
    """
    Count text elements by role.

    An empty module is composed as a placeholder Header + BodyText, so
    it expects one header and one body.
    """
    if module_spec.is_empty:
        return ExpectedCounts(headers=1, titles=0, bodies=1)
    types = [e.type for e in module_spec.elements]
    return ExpectedCounts(
        headers=types.count(ElementType.HEADER),
        titles=types.count(ElementType.TITLE),
        bodies=types.count(ElementType.BODY_TEXT),
    )


def approx_char_budget(rect: Rect, font_size: float, line_height: float, pad: float = BUDGET_PADDING) -> int:
    """
    Approximate number of characters that fit inside a rect.

    Example:
        >>> approx_char_budget(Rect(0, 0, 300, 100), 12, 1.35)
        215
    """
    max_w = max(0.0, rect.w - pad * 2)
    max_h = max(0.0, rect.h - pad * 2)
    chars_per_line = max(1, math.floor(max_w / max(1.0, font_size * GLYPH_WIDTH_EM)))
    lines = max(1, math.floor(max_h / max(1.0, font_size * line_height)))
    return chars_per_line * lines


def _role_budget(
    element_type: ElementType,
    count: int,
    placed: List[tuple],
    fallback: Rect,
) -> int:
    if count <= 0:
        return 0
    style = text_style(element_type)
    rect = next((r for e, r in placed if e.type is element_type), fallback)
    return approx_char_budget(rect, style.font_size, style.line_height)


def slot_budgets(module_spec: Spec, slot_rect: Rect, expected: ExpectedCounts) -> tuple[int, int, int]:
    """
    (header, title, body) character budgets for a module in a slot.

    The first scaled element of each role is measured; roles without a
    placed element use slot heuristics (header: slot width by at most
    64pt, body: slot width by at least 80pt).
    """
    placed = scaled_module_rects(module_spec, slot_rect)
    short_rect = Rect(0, 0, slot_rect.w, min(slot_rect.h, FALLBACK_HEADER_MAX_H))
    body_rect = Rect(0, 0, slot_rect.w, max(FALLBACK_BODY_MIN_H, slot_rect.h - FALLBACK_HEADER_MAX_H))
    return (
        _role_budget(ElementType.HEADER, expected.headers, placed, short_rect),
        _role_budget(ElementType.TITLE, expected.titles, placed, short_rect),
        _role_budget(ElementType.BODY_TEXT, expected.bodies, placed, body_rect),
    )


def collect_slot_requests(
    mappings: Iterable[EnumeratedMapping],
    modules_by_id: Mapping[str, Spec],
    module_names: Optional[Mapping[str, str]] = None,
) -> List[SlotRequest]:
    """
    Build one request per distinct ``slot|module`` key, first-seen order.

    Keys whose slot rect or module cannot be resolved are skipped; the
    compositor reports those combinations separately.
    """
    module_names = module_names or {}
    requests: List[SlotRequest] = []
    seen: set[str] = set()

    for item in mappings:
        for slot_key, module_id in item.mapping.items():
            key = override_key(slot_key, module_id)
            if key in seen:
                continue
            seen.add(key)

            slot_rect = item.layout.slot_rects.get(slot_key)
            module_spec = modules_by_id.get(module_id)
            if slot_rect is None or module_spec is None:
                logger.debug(f"Skipping text request for unresolved key {key}")
                continue

            expected = expected_counts(module_spec)
            header, title, body = slot_budgets(module_spec, slot_rect, expected)
            requests.append(SlotRequest(
                key=key,
                slot_key=slot_key,
                module_id=module_id,
                module_name=module_names.get(module_id) or module_id,
                slot_rect=slot_rect,
                expected=expected,
                header_budget=header,
                title_budget=title,
                body_budget=body,
            ))

    logger.debug(f"Collected {len(requests)} slot text request(s)")
    return requests
