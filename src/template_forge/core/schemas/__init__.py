"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    validate_spec,
    ValidationError,
    SPEC_SCHEMA_VERSION,
)

__all__ = [
    "validate_spec",
    "ValidationError",
    "SPEC_SCHEMA_VERSION",
]
