"""
Template Forge Core Package

Shared data models, validation and serialization for template specs.
These models are the single source of truth for every engine module.

**CONVENTIONS:**

1. **Immutable Data Models**
   - Frozen dataclasses; every edit returns a new instance

2. **Tolerant Geometry**
   - Malformed rects load as degenerate (NaN) and are skipped by
     bounding-box maths instead of failing the whole document

3. **JSON Field Names**
   - Persisted JSON keeps the editor's camelCase keys (`zIndex`,
     `slotKey`, `moduleAssist`); Python attributes are snake_case
"""

from .models import Element, ElementType, Rect, Spec, SpecKind
from .schemas import ValidationError, validate_spec

__all__ = [
    "Element",
    "ElementType",
    "Rect",
    "Spec",
    "SpecKind",
    "ValidationError",
    "validate_spec",
]
