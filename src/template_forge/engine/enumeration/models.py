"""
Module: engine.enumeration.models

Purpose:
    Data models for combination counting and enumeration.
    Immutable dataclasses describing resolved layouts, validation
    outcomes and produced combinations.

Key Classes:
    - LayoutContext: A resolved layout with its distinct slot keys
    - IssueKind / ValidationIssue: Why a request cannot be enumerated
    - CountResult: Total combination count or the first issue
    - EnumeratedMapping: One slot -> module assignment
    - Combination: An enumerated mapping plus its assembled spec

Dependencies:
    - dataclasses (std)
    - core.models: Spec, Rect

Used By:
    - engine.enumeration.enumerator
    - engine.controller
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from template_forge.core.models import Rect, Spec, dedupe_keys


@dataclass(frozen=True)
class LayoutContext:
    """
    A layout resolved for enumeration.

    Attributes:
        layout_id: Library id of the layout
        layout_name: Display name (id prefix when the row has no name)
        spec: Layout spec, None when the id could not be resolved
        slots: Distinct non-blank slot keys, first occurrence order
        slot_rects: Slot key -> rect (last Slot wins for repeated keys)

    Example:
        >>> ctx = LayoutContext.from_spec("abcdef123456", None)
        >>> ctx.layout_name, ctx.is_resolved
        ('abcdef12', False)
    """
    layout_id: str
    layout_name: str
    spec: Optional[Spec]
    slots: tuple[str, ...] = ()
    slot_rects: Mapping[str, Rect] = field(default_factory=dict)

    @property
    def is_resolved(self) -> bool:
        return self.spec is not None

    @property
    def slot_count(self) -> int:
        return len(self.slots)

    @classmethod
    def from_spec(cls, layout_id: str, spec: Optional[Spec], name: Optional[str] = None) -> LayoutContext:
        """Derive slots and slot rects from a (possibly missing) layout spec."""
        layout_name = (name or "").strip() or layout_id[:8]
        if spec is None:
            return cls(layout_id=layout_id, layout_name=layout_name, spec=None)
        return cls(
            layout_id=layout_id,
            layout_name=layout_name,
            spec=spec,
            slots=tuple(spec.slot_keys),
            slot_rects=MappingProxyType(spec.slot_rects),
        )


def dedupe_ids(ids) -> list[str]:
    """Keep caller order, drop blank and repeated ids."""
    return dedupe_keys(str(i) if i is not None else None for i in ids)


class IssueKind(str, Enum):
    """Reason a generation request cannot be enumerated."""
    NO_LAYOUTS = "no_layouts"
    LAYOUT_NOT_FOUND = "layout_not_found"
    NO_SLOTS = "no_slots"
    EMPTY_POOL = "empty_pool"
    OVERFLOW = "overflow"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ValidationIssue:
    """A user-facing validation problem (returned, never raised)."""
    kind: IssueKind
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class CountResult:
    """
    Outcome of counting combinations.

    ``count`` is 0 whenever ``issue`` is set.
    """
    count: int
    issue: Optional[ValidationIssue] = None

    @property
    def ok(self) -> bool:
        return self.issue is None

    @classmethod
    def failed(cls, kind: IssueKind, message: str) -> CountResult:
        return cls(count=0, issue=ValidationIssue(kind, message))


@dataclass(frozen=True)
class EnumeratedMapping:
    """
    One enumerated assignment of modules to a layout's slots.

    Attributes:
        idx: Global index across all layouts in this run
        layout: The layout being filled
        mapping: Slot key -> module id, in slot order
    """
    idx: int
    layout: LayoutContext
    mapping: Mapping[str, str]


@dataclass(frozen=True)
class Combination:
    """
    A produced template: an enumerated mapping and its assembled spec.

    Attributes:
        idx: Index in the run's result list
        layout_id: Layout the template was built from
        layout_name: Layout display name
        mapping: Slot key -> module id
        spec: Assembled template spec (kind omitted)
    """
    idx: int
    layout_id: str
    layout_name: str
    mapping: Mapping[str, str]
    spec: Spec

    def to_dict(self) -> dict[str, Any]:
        return {
            "idx": self.idx,
            "layoutId": self.layout_id,
            "layoutName": self.layout_name,
            "mapping": dict(self.mapping),
            "templateSpec": self.spec.to_dict(),
        }
