"""
Enumeration Package

Counts and enumerates slot -> module assignments across layouts.
"""

from .models import (
    Combination,
    CountResult,
    EnumeratedMapping,
    IssueKind,
    LayoutContext,
    ValidationIssue,
    dedupe_ids,
)
from .enumerator import (
    MAX_SAFE_INTEGER,
    DEFAULT_CAP,
    count_combinations,
    decode_mapping,
    enumerate_combinations,
    layout_combination_count,
)

__all__ = [
    # Models
    "Combination",
    "CountResult",
    "EnumeratedMapping",
    "IssueKind",
    "LayoutContext",
    "ValidationIssue",
    "dedupe_ids",
    # Enumeration
    "MAX_SAFE_INTEGER",
    "DEFAULT_CAP",
    "count_combinations",
    "decode_mapping",
    "enumerate_combinations",
    "layout_combination_count",
]
