"""Deterministic placeholder text for composed templates.

With a topic the placeholders mention it so previews read plausibly;
without one they fall back to generic sentences. The same inputs always
give the same text.
"""

from __future__ import annotations

from typing import Optional


def title_case(text: str) -> str:
    """Upper-case the first letter of every whitespace-separated word.

    Example:
        >>> title_case("  quarterly   sales review ")
        'Quarterly Sales Review'
    """
    return " ".join(w[0].upper() + w[1:] for w in str(text or "").split())


def _clean(topic: Optional[str]) -> str:
    return str(topic or "").strip()


def header_placeholder(topic: Optional[str], idx: int) -> str:
    topic = _clean(topic)
    if topic:
        return title_case(topic) if idx == 0 else f"{title_case(topic)} (section)"
    return "This is a header" if idx == 0 else "This is a long header"


def title_placeholder(topic: Optional[str], idx: int) -> str:
    topic = _clean(topic)
    if topic:
        return title_case(topic)
    return "This is a title" if idx == 0 else "This is another title"


def body_placeholder(topic: Optional[str], idx: int) -> str:
    topic = _clean(topic)
    if topic:
        t = topic.lower()
        if idx == 0:
            return f"A short {t} paragraph goes here.\n\nAdd another sentence or two to make the layout feel realistic."
        return f"More {t} details go here.\n\nThis is placeholder content used during assembly previews."
    if idx == 0:
        return "This is a paragraph.\n\nIt’s placeholder content used during assembly previews."
    return "This is another paragraph.\n\nIt’s placeholder content used during assembly previews."
