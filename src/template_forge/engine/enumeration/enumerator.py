"""
Module: engine.enumeration.enumerator

Purpose:
    Count and enumerate slot -> module assignments over a set of layouts
    and a module pool.

Key Functions:
    - count_combinations(): Validate inputs and total sum(n ** s)
    - layout_combination_count(): n ** s with an overflow ceiling
    - decode_mapping(): Mixed-radix index -> mapping
    - enumerate_combinations(): Capped, ordered enumeration

Dependencies:
    - engine.enumeration.models

Used By:
    - engine.controller: TemplateAssembler

Ordering:
    Layouts are visited in the given order. Within a layout, index ``i``
    is decoded in base ``n`` with the first slot as the least
    significant digit, so for slots [a, b] and pool [m1, m2]:
    0 -> {a: m1, b: m1}, 1 -> {a: m2, b: m1}, 2 -> {a: m1, b: m2}, ...
"""

from __future__ import annotations

import logging
from typing import Iterator, Sequence

from .models import CountResult, EnumeratedMapping, IssueKind, LayoutContext

logger = logging.getLogger(__name__)

# Largest integer a double-precision count can represent exactly
MAX_SAFE_INTEGER = 2**53 - 1
DEFAULT_CAP = 40

OVERFLOW_MESSAGE = "Combination count overflow."
NO_LAYOUTS_MESSAGE = "Select at least one layout module in the Layout node."
EMPTY_POOL_MESSAGE = "Select at least one module in a connected Module node."


def layout_combination_count(n: int, s: int, ceiling: int = MAX_SAFE_INTEGER) -> int:
    """
    Number of assignments of ``n`` modules to ``s`` slots (``n ** s``).

    Raises:
        OverflowError: If the running product exceeds ``ceiling``

    Example:
        >>> layout_combination_count(3, 2)
        9
        >>> layout_combination_count(5, 0)
        1
    """
    count = 1
    for _ in range(s):
        count *= n
        if count > ceiling:
            raise OverflowError(OVERFLOW_MESSAGE)
    return count


def count_combinations(
    layouts: Sequence[LayoutContext],
    pool: Sequence[str],
    *,
    ceiling: int = MAX_SAFE_INTEGER,
) -> CountResult:
    """
    Validate a generation request and count its combinations.

    Checks run in order and the first failure wins: no layouts, an
    unresolved layout, a layout without slots, an empty module pool,
    then overflow (checked after every multiplication and every sum).

    Args:
        layouts: Resolved layouts, in request order
        pool: Deduplicated module ids
        ceiling: Largest acceptable count

    Returns:
        CountResult with the total, or count 0 and the issue
    """
    if not layouts:
        return CountResult.failed(IssueKind.NO_LAYOUTS, NO_LAYOUTS_MESSAGE)

    for layout in layouts:
        if not layout.layout_id:
            return CountResult.failed(IssueKind.NO_LAYOUTS, NO_LAYOUTS_MESSAGE)
        if not layout.is_resolved:
            return CountResult.failed(
                IssueKind.LAYOUT_NOT_FOUND,
                f"Selected layout not found ({layout.layout_id[:8]}).",
            )
        if layout.slot_count == 0:
            return CountResult.failed(
                IssueKind.NO_SLOTS,
                f'Layout "{layout.layout_name}" has no slots. Add Slot elements in Module Forge.',
            )

    if not pool:
        return CountResult.failed(IssueKind.EMPTY_POOL, EMPTY_POOL_MESSAGE)

    n = len(pool)
    total = 0
    for layout in layouts:
        try:
            total += layout_combination_count(n, layout.slot_count, ceiling)
        except OverflowError:
            logger.info(f"Combination count overflow in layout {layout.layout_name!r}")
            return CountResult.failed(IssueKind.OVERFLOW, OVERFLOW_MESSAGE)
        if total > ceiling:
            logger.info("Combination count overflow across layouts")
            return CountResult.failed(IssueKind.OVERFLOW, OVERFLOW_MESSAGE)

    return CountResult(count=total)


def decode_mapping(index: int, slots: Sequence[str], pool: Sequence[str]) -> dict[str, str]:
    """
    Decode an index into a slot -> module mapping.

    Example:
        >>> decode_mapping(1, ["a", "b"], ["m1", "m2"])
        {'a': 'm2', 'b': 'm1'}
    """
    n = len(pool)
    mapping: dict[str, str] = {}
    x = index
    for slot in slots:
        x, pick = divmod(x, n)
        mapping[slot] = pool[pick]
    return mapping


def _capped_total(n: int, s: int, limit: int) -> int:
    """``min(n ** s, limit)`` without building huge intermediates."""
    total = 1
    for _ in range(s):
        total *= n
        if total >= limit:
            return limit
    return min(total, limit)


def enumerate_combinations(
    layouts: Sequence[LayoutContext],
    pool: Sequence[str],
    *,
    cap: int = DEFAULT_CAP,
) -> Iterator[EnumeratedMapping]:
    """
    Yield up to ``cap`` mappings, layout by layout.

    Callers validate with count_combinations() first. A layout with no
    slots contributes one empty mapping, matching its count of 1.

    Example:
        >>> ctx = LayoutContext("L1", "L1", None, slots=("a", "b"))
        >>> [dict(m.mapping) for m in enumerate_combinations([ctx], ["m1", "m2"])][3]
        {'a': 'm2', 'b': 'm2'}
    """
    if not pool or cap <= 0:
        return

    produced = 0
    n = len(pool)
    for layout in layouts:
        if produced >= cap:
            break
        limit = _capped_total(n, layout.slot_count, cap - produced)
        for i in range(limit):
            yield EnumeratedMapping(
                idx=produced,
                layout=layout,
                mapping=decode_mapping(i, layout.slots, pool),
            )
            produced += 1

    logger.debug(f"Enumerated {produced} mapping(s) (cap {cap})")
