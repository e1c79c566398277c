"""
Composition Package

Places module content into layout slots to produce assembled templates.
"""

from .compositor import (
    CompositionError,
    SlotTransform,
    assemble_template_spec,
    scaled_module_rects,
)
from .overrides import SlotTextOverride, OverrideMap, override_key, split_override_key
from .placeholders import body_placeholder, header_placeholder, title_case, title_placeholder

__all__ = [
    # Compositor
    "CompositionError",
    "SlotTransform",
    "assemble_template_spec",
    "scaled_module_rects",
    # Overrides
    "SlotTextOverride",
    "OverrideMap",
    "override_key",
    "split_override_key",
    # Placeholders
    "body_placeholder",
    "header_placeholder",
    "title_case",
    "title_placeholder",
]
