"""Bounding box utilities for element collections.

Provides the single degenerate-filtering bounding box computation shared by
the auto-canvas fitter, the compositor and the text-fill budgets.
"""

from __future__ import annotations

from typing import Iterable, Optional

from template_forge.core.models.rect import Rect


def compute_bounds(rects: Iterable[Rect]) -> Optional[Rect]:
    """Compute the axis-aligned bounding box of the valid rects.

    Rects with non-finite values or non-positive width/height are skipped.

    Args:
        rects: Rects to enclose.

    Returns:
        Enclosing Rect, or None when no rect is valid.

    Example:
        >>> compute_bounds([Rect(10, 10, 20, 20), Rect(50, 0, 10, 5)])
        Rect(10, 0, 50, 30)
        >>> compute_bounds([Rect(0, 0, 0, 10)]) is None
        True
    """
    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")
    found = False
    for rect in rects:
        if not rect.is_valid:
            continue
        found = True
        min_x = min(min_x, rect.x)
        min_y = min(min_y, rect.y)
        max_x = max(max_x, rect.right)
        max_y = max(max_y, rect.bottom)
    if not found:
        return None
    return Rect(min_x, min_y, max_x - min_x, max_y - min_y)


def element_bounds(elements: Iterable) -> Optional[Rect]:
    """Bounding box over the ``rect`` of each element."""
    return compute_bounds(e.rect for e in elements)
