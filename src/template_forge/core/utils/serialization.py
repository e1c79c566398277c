"""
Serialization Utilities

Provides to/from JSON utilities for spec documents.

- `serialize_spec` / `deserialize_spec` convert between Spec and dicts
- `parse_spec_json` accepts either a JSON string or an already-decoded
  object (row stores hand back both)
- `load_spec_json` / `save_spec_json` read and write spec files
- Validation via the schemas package runs before deserialization
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from ..models.enums import SpecKind
from ..models.spec import Spec
from ..schemas.validator import validate_spec, ValidationError


# ─────────────────────────────────────────────────────────────────────────────
# Spec Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_spec(spec: Spec) -> dict[str, Any]:
    """
    Serialize a Spec to a dictionary.

    Assembled templates (kind None) are written without a ``kind`` key.
    """
    return spec.to_dict()


def deserialize_spec(
    data: dict[str, Any],
    *,
    validate: bool = True,
    strict: bool = False,
    kind: Optional[SpecKind] = None,
) -> Spec:
    """
    Deserialize a Spec from a dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate first
        strict: Use JSON Schema validation as well as basic checks
        kind: Kind to assume when the document does not carry one

    Returns:
        Spec instance

    Raises:
        ValidationError: If validate=True and data is invalid
        ValueError: If data cannot be parsed
    """
    if validate:
        validate_spec(data, strict=strict)
    return Spec.from_dict(data, kind=kind)


def parse_spec_json(
    raw: Any,
    *,
    validate: bool = True,
    kind: Optional[SpecKind] = None,
) -> Spec:
    """
    Parse a spec stored either as JSON text or as a decoded object.

    Raises:
        ValidationError: If the text is not JSON or the spec is invalid
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Spec is not valid JSON: {e}", errors=[str(e)])
    return deserialize_spec(raw, validate=validate, kind=kind)


# ─────────────────────────────────────────────────────────────────────────────
# File Utilities
# ─────────────────────────────────────────────────────────────────────────────

def load_spec_json(
    path: Path,
    *,
    validate: bool = True,
    kind: Optional[SpecKind] = None,
) -> Spec:
    """
    Load a spec from a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValidationError: If the spec is invalid
    """
    if not path.exists():
        raise FileNotFoundError(f"Spec file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {path.name}: {e}", path=str(path), errors=[str(e)])

    try:
        return deserialize_spec(data, validate=validate, kind=kind)
    except ValueError as e:
        raise ValidationError(f"Error parsing {path.name}: {e}", path=str(path), errors=[str(e)])


def save_spec_json(spec: Spec, path: Path) -> None:
    """Save a spec to a JSON file (parent directories are created)."""
    save_json(serialize_spec(spec), path)


def save_json(data: Any, path: Path) -> None:
    """Write any JSON-compatible value with the project's formatting."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
