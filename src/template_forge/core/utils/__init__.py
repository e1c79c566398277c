"""
Utils Package

Serialization and utility functions.
"""

from .serialization import (
    serialize_spec,
    deserialize_spec,
    parse_spec_json,
    load_spec_json,
    save_spec_json,
    save_json,
)

__all__ = [
    "serialize_spec",
    "deserialize_spec",
    "parse_spec_json",
    "load_spec_json",
    "save_spec_json",
    "save_json",
]
