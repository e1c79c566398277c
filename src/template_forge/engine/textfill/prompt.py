"""
Module: engine.textfill.prompt

Purpose:
    Build the single text-generation prompt for a run. The prompt lists
    every slot/module key with its required counts and character
    budgets and demands a strict JSON response. The retry prompt adds
    the failure reason and a shape example for the first key.

Key Functions:
    - build_prompt(): Prompt text for an attempt
    - response_example(): Shape-only example JSON for one request
"""

from __future__ import annotations

import json
import math
from typing import List, Optional, Sequence

from .models import SlotRequest

RESPONSE_FORMAT = (
    'Return ONLY JSON: {"items": {"<slotKey>|<moduleId>": '
    '{"headers": string[], "titles": string[], "bodies": string[]}}}'
)


def _round(value: float) -> int:
    """Round half up (matches how budgets are shown to the model)."""
    return math.floor(value + 0.5)


def _request_line(request: SlotRequest) -> str:
    e = request.expected
    rect = request.slot_rect
    parts = [
        f"- key: {request.key}",
        f"slot={request.slot_key} (w={_round(rect.w)}pt,h={_round(rect.h)}pt)",
        f"module={request.module_name}",
        f"headers={e.headers}, titles={e.titles}, bodies={e.bodies}",
        f"header_budget_chars≈{request.header_budget}",
    ]
    if e.titles:
        parts.append(f"title_budget_chars≈{request.title_budget}")
    parts.append(f"body_budget_chars≈{request.body_budget}")
    return " | ".join(parts)


def response_example(request: SlotRequest) -> str:
    """Compact shape-only example for one key."""
    e = request.expected
    example = {
        "items": {
            request.key: {
                "headers": [f"Header {i + 1}" for i in range(e.headers)],
                "titles": [f"Title {i + 1}" for i in range(e.titles)],
                "bodies": [f"Body {i + 1}" for i in range(e.bodies)],
            }
        }
    }
    return json.dumps(example, separators=(",", ":"), ensure_ascii=False)


def build_prompt(
    topic: str,
    layout_names: Sequence[str],
    requests: Sequence[SlotRequest],
    attempt: int = 0,
    last_error: Optional[str] = None,
) -> str:
    """
    Build the prompt for one attempt.

    Args:
        topic: User topic (e.g. "meeting summary")
        layout_names: Distinct layout names in the run
        requests: One entry per slot/module key
        attempt: 0 for the first request, 1 for the retry
        last_error: Why the previous response was rejected

    Returns:
        Prompt text
    """
    lines: List[str] = [
        "You're an expert template creator.",
        "Based on the instructions, fill out these content slots with meaningful content "
        "for use in a template generator.",
        "If there are multiple slots on a template, consider the overall final template and "
        "return content that makes sense together (avoid duplicate wording).",
        'Do NOT use placeholder phrases like: "goes here", "placeholder", or "lorem ipsum".',
        "Write text that fits the available space. Follow the budgets.",
    ]
    if attempt > 0:
        lines += ["", "IMPORTANT: Your previous response was invalid."]
        if last_error:
            lines.append(f"Reason: {last_error}")
        lines += [
            "You MUST return non-empty arrays when a count is > 0.",
            "You MUST return non-empty strings (no blank strings).",
        ]

    lines += [
        "",
        f"Instructions: Create a template for a [{topic}]",
        "",
        "Template Structure:",
        "- Module: Header / Divider / Body",
        f"- Templates: {' and '.join(layout_names)}",
        "",
        "Content Slots:",
        "Each key represents one module instance being placed into one slot.",
        "",
    ]
    lines += [_request_line(r) for r in requests]

    lines += [
        "",
        "Response format (STRICT):",
        RESPONSE_FORMAT,
        "Rules:",
        "- Keep headers short and specific.",
        "- Bodies should read like real content (not meta-instructions).",
        "- For meeting summaries: include decisions, action items, and next steps where appropriate.",
        "- Respect budgets; if space is tight, shorten rather than cramming.",
        "- IMPORTANT: For each key, return arrays with the EXACT number of strings implied by "
        "headers/titles/bodies in the slot schema.",
        "- If a count is > 0, the corresponding array MUST have that many non-empty strings.",
        "- No extra keys. No markdown. No commentary.",
    ]
    if attempt > 0 and requests:
        lines += ["", "Example (shape only; your text must differ):", response_example(requests[0])]

    return "\n".join(lines)
