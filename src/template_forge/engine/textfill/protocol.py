"""
Module: engine.textfill.protocol

Purpose:
    Parse and validate text-generation responses.

Key Functions:
    - extract_json_object(): Decode the text between the first "{" and
      the last "}"
    - parse_overrides(): Validate counts and build SlotTextOverrides

Validation:
    The response must contain an ``items`` object holding every
    requested key. For each role with an expected count above zero the
    key must carry at least that many non-empty strings. Arrays are
    trimmed to the expected count. Any failure raises TextFillError.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from template_forge.engine.composition.overrides import SlotTextOverride

from .models import ExpectedCounts, TextFillError

_ROLE_LABELS = {
    "headers": "header(s)",
    "titles": "title(s)",
    "bodies": "body paragraph(s)",
}


def extract_json_object(raw: str) -> Any:
    """
    Decode the outermost JSON object embedded in a response.

    Raises:
        TextFillError: If no object is present or it does not parse

    Example:
        >>> extract_json_object('Sure! {"items": {}} Hope this helps')
        {'items': {}}
    """
    text = str(raw or "")
    start = text.find("{")
    end = text.rfind("}")
    if start < 0 or end <= start:
        raise TextFillError("AI did not return JSON.", raw=text)
    try:
        return json.loads(text[start:end + 1])
    except json.JSONDecodeError as e:
        raise TextFillError(f"AI returned invalid JSON: {e.msg}.", raw=text)


def _strings(value: Any) -> list[str]:
    """Non-blank strings from a JSON array (anything else is empty)."""
    if not isinstance(value, list):
        return []
    return [str(s) for s in value if s is not None and str(s).strip()]


def parse_overrides(raw: str, expected: Mapping[str, ExpectedCounts]) -> dict[str, SlotTextOverride]:
    """
    Parse a raw response into per-key overrides.

    Args:
        raw: Raw response text
        expected: Requested key -> required counts

    Returns:
        Key -> SlotTextOverride for every requested key

    Raises:
        TextFillError: On missing JSON, missing ``items``, a missing key
            or too few non-empty strings for a role
    """
    parsed = extract_json_object(raw)
    items = parsed.get("items") if isinstance(parsed, dict) else None
    if not isinstance(items, dict):
        raise TextFillError("AI JSON missing 'items' object.", raw=raw)

    overrides: dict[str, SlotTextOverride] = {}
    for key, counts in expected.items():
        entry = items.get(key)
        if not isinstance(entry, dict):
            raise TextFillError(f"AI response is missing key {key}.", raw=raw)

        values = {}
        for role, label in _ROLE_LABELS.items():
            strings = _strings(entry.get(role))
            need = getattr(counts, role)
            if need > 0 and len(strings) < need:
                raise TextFillError(
                    f"AI returned {len(strings)} {label} for {key}; expected {need}.",
                    raw=raw,
                )
            values[role] = tuple(strings[:need])

        overrides[key] = SlotTextOverride(**values)

    return overrides
