"""Per-slot text overrides produced by the text-fill step.

An override is keyed by ``"{slotKey}|{moduleId}"`` so one module placed
into the same slot key gets the same text in every combination.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

KEY_SEPARATOR = "|"


def override_key(slot_key: str, module_id: str) -> str:
    """Build the ``slot|module`` key used by requests and overrides."""
    return f"{slot_key}{KEY_SEPARATOR}{module_id}"


def split_override_key(key: str) -> tuple[str, str]:
    """Inverse of override_key(); the module id may not contain ``|``."""
    slot_key, _, module_id = key.partition(KEY_SEPARATOR)
    return slot_key, module_id


@dataclass(frozen=True)
class SlotTextOverride:
    """
    Generated text for one slot/module pair.

    Each role holds strings in element order. A missing index or a blank
    string means no override for that element: it falls back to the
    deterministic placeholder.
    """
    headers: tuple[str, ...] = ()
    titles: tuple[str, ...] = ()
    bodies: tuple[str, ...] = ()

    def header(self, idx: int) -> Optional[str]:
        return _pick(self.headers, idx)

    def title(self, idx: int) -> Optional[str]:
        return _pick(self.titles, idx)

    def body(self, idx: int) -> Optional[str]:
        return _pick(self.bodies, idx)

    def to_dict(self) -> dict[str, list[str]]:
        return {"headers": list(self.headers), "titles": list(self.titles), "bodies": list(self.bodies)}


def _pick(values: Sequence[str], idx: int) -> Optional[str]:
    value = values[idx] if 0 <= idx < len(values) else None
    return value if value and value.strip() else None


OverrideMap = Mapping[str, SlotTextOverride]
