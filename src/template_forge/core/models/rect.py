"""
Module: rect

Purpose:
    Provides the Rect dataclass - an axis-aligned rectangle in canvas
    space (top-left origin, units are points). Every positioned element
    in a spec carries exactly one Rect.

Key Functions:
    - Rect.is_valid: Finite and positive-area check
    - Rect.contains(other): Containment test with tolerance
    - Rect.translate(dx, dy): Offset copy
    - Rect.to_dict() / Rect.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - math (std)
    - common.numeric: Tolerant coordinate parsing

Used By:
    - core.models.elements.Element
    - common.bbox_utils
    - engine.layout, engine.composition, engine.output

Degenerate Rects:
    Rects are never rejected on construction. Malformed editor data must
    not block rendering of everything else, so a rect with non-finite or
    non-positive dimensions is simply reported as invalid and skipped by
    bounding-box code.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from template_forge.common.numeric import as_coordinate


@dataclass(frozen=True, slots=True)
class Rect:
    """
    Axis-aligned rectangle in canvas space.

    Attributes:
        x: Left edge (points from canvas left)
        y: Top edge (points from canvas top)
        w: Width in points
        h: Height in points

    Example:
        >>> r = Rect(10, 20, 100, 50)
        >>> r.right, r.bottom
        (110, 70)
        >>> Rect(0, 0, 0, 10).is_valid
        False
    """

    x: float
    y: float
    w: float
    h: float

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def right(self) -> float:
        """Right edge (x + w)."""
        return self.x + self.w

    @property
    def bottom(self) -> float:
        """Bottom edge (y + h)."""
        return self.y + self.h

    @property
    def is_finite(self) -> bool:
        """True when all four values are finite numbers."""
        return all(math.isfinite(v) for v in (self.x, self.y, self.w, self.h))

    @property
    def is_valid(self) -> bool:
        """True when the rect is finite and has positive area."""
        return self.is_finite and self.w > 0 and self.h > 0

    # ─────────────────────────────────────────────────────────────────────────
    # Geometry
    # ─────────────────────────────────────────────────────────────────────────

    def translate(self, dx: float, dy: float) -> Rect:
        """Return a copy offset by (dx, dy)."""
        return Rect(self.x + dx, self.y + dy, self.w, self.h)

    def contains(self, other: Rect, tolerance: float = 1e-6) -> bool:
        """
        Check whether another rect lies entirely inside this one.

        Args:
            other: Rect to test
            tolerance: Allowed floating point slack on each edge

        Returns:
            True if every edge of ``other`` is within this rect
        """
        return (
            other.x >= self.x - tolerance
            and other.y >= self.y - tolerance
            and other.right <= self.right + tolerance
            and other.bottom <= self.bottom + tolerance
        )

    def sanitized(self) -> Rect:
        """Copy with non-finite values replaced by 0."""
        return Rect(*(v if math.isfinite(v) else 0.0 for v in (self.x, self.y, self.w, self.h)))

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, float]:
        """Serialize to ``{x, y, w, h}``."""
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}

    @classmethod
    def from_dict(cls, data: Any) -> Rect:
        """
        Deserialize from a dictionary.

        Missing or unparsable values become NaN, which makes the rect
        degenerate rather than raising.
        """
        if not isinstance(data, dict):
            data = {}
        return cls(
            x=as_coordinate(data.get("x")),
            y=as_coordinate(data.get("y")),
            w=as_coordinate(data.get("w")),
            h=as_coordinate(data.get("h")),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"Rect({self.x:g}, {self.y:g}, {self.w:g}, {self.h:g})"
