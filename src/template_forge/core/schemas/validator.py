"""
Schema Validation Utilities

Validates persisted spec JSON before it is turned into models.

Two levels:
- Basic checks (always): the structural problems that would make the
  document unusable - missing canvas, unknown element types, duplicate
  element ids, malformed elements list.
- Strict mode: full JSON Schema validation against ``spec.schema.json``
  plus the rule that a layout holds nothing but Slot elements.

Geometry values are deliberately NOT validated here. Degenerate rects are
tolerated by the engine and skipped at render time.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

from template_forge.core.models.enums import ElementType, SpecKind


# Schema version constant
SPEC_SCHEMA_VERSION = 1

_ELEMENT_TYPES = frozenset(t.value for t in ElementType)
_SPEC_KINDS = frozenset(k.value for k in SpecKind)

# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_spec(data: Any, *, strict: bool = False) -> None:
    """
    Validate a persisted spec document.

    Args:
        data: Spec dictionary to validate
        strict: If True, also run JSON Schema validation and the
            layout-is-slots-only rule

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Spec must be an object, got {type(data).__name__}")

    # Canvas
    canvas = data.get("canvas")
    if not isinstance(canvas, dict):
        raise ValidationError("canvas must be an object with w and h", path="canvas")
    for key in ("w", "h"):
        value = canvas.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ValidationError(
                f"Invalid canvas.{key}: {value!r} (must be a positive number)",
                path=f"canvas.{key}",
            )

    # Kind (omitted for assembled templates)
    kind = data.get("kind")
    if kind is not None and kind not in _SPEC_KINDS:
        raise ValidationError(
            f"Invalid kind: {kind!r} (must be one of {sorted(_SPEC_KINDS)})",
            path="kind",
        )

    # Elements
    elements = data.get("elements", [])
    if not isinstance(elements, list):
        raise ValidationError("elements must be a list", path="elements")

    seen_ids: set[str] = set()
    for i, element in enumerate(elements):
        _validate_element(element, f"elements[{i}]")
        element_id = element["id"]
        if element_id in seen_ids:
            raise ValidationError(
                f"Duplicate element id: {element_id!r}",
                path=f"elements[{i}].id",
            )
        seen_ids.add(element_id)

    if strict:
        schema = _load_schema("spec")
        try:
            jsonschema.validate(data, schema)
        except jsonschema.ValidationError as e:
            raise ValidationError(
                f"Schema validation failed: {e.message}",
                path=".".join(str(p) for p in e.absolute_path),
                errors=[e.message],
            )
        if kind == SpecKind.LAYOUT.value:
            extras = [
                f"elements[{i}]" for i, e in enumerate(elements)
                if e["type"] != ElementType.SLOT.value
            ]
            if extras:
                raise ValidationError(
                    f"Layouts may only contain Slot elements ({len(extras)} other element(s))",
                    path="elements",
                    errors=[f"Not a Slot: {p}" for p in extras],
                )


def _validate_element(data: Any, path: str) -> None:
    """Validate one element entry."""
    if not isinstance(data, dict):
        raise ValidationError("element must be an object", path=path)

    required = ["id", "type", "rect"]
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Element missing required fields: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing],
        )

    element_id = data["id"]
    if not isinstance(element_id, str) or not element_id:
        raise ValidationError(f"Invalid element id: {element_id!r}", path=f"{path}.id")

    element_type = data["type"]
    if element_type not in _ELEMENT_TYPES:
        raise ValidationError(f"Unknown element type: {element_type!r}", path=f"{path}.type")

    if not isinstance(data["rect"], dict):
        raise ValidationError("rect must be an object", path=f"{path}.rect")

    props = data.get("props", {})
    if not isinstance(props, dict):
        raise ValidationError("props must be an object", path=f"{path}.props")
