"""Numeric coercion helpers for loosely-typed spec JSON.

Persisted specs are authored by an editor and may carry strings, nulls or
non-finite values where numbers are expected. These helpers turn such values
into usable floats/ints the same way everywhere in the engine.
"""

from __future__ import annotations

import math
from typing import Any


def as_float(value: Any, default: float) -> float:
    """Convert a value to a finite float, returning ``default`` otherwise.

    Example:
        >>> as_float("16", 12.0)
        16.0
        >>> as_float(None, 12.0)
        12.0
        >>> as_float("wide", 12.0)
        12.0
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def as_coordinate(value: Any) -> float:
    """Convert a rect coordinate, returning NaN when it cannot be read.

    NaN marks the rect as degenerate so bounding-box code skips it.
    """
    if value is None or isinstance(value, bool):
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def clamp(value: Any, low: float, high: float) -> float:
    """Clamp a value into ``[low, high]``; unreadable values clamp to ``low``."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return low
    if math.isnan(number):
        return low
    return max(low, min(high, number))


def clamp_int(value: Any, low: int, high: int) -> int:
    """Clamp a value into ``[low, high]`` and truncate it to an int."""
    return int(clamp(value, low, high))
