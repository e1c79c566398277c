"""
Module: engine

Purpose:
    Template generation engine. Lays out modules, generates layout
    slots, enumerates slot -> module combinations, assembles templates
    and optionally fills their text with generated copy.

Key Functions:
    - count_combinations(): Validate a request and count combinations
    - enumerate_combinations(): Capped, ordered enumeration
    - assemble_template_spec(): Build one assembled template

Key Classes:
    - EngineConfig: Caps and text-fill settings
    - TemplateAssembler: Runs generation requests
    - SpecLibrary: Layout and module lookup

Dependencies:
    - template_forge.core.models: Spec data models
    - openai: Slot text generation when text fill is requested
    - reportlab, PIL: Rendering

Used By:
    - template_forge.cli
"""

from .config import EngineConfig
from .enumeration import count_combinations, enumerate_combinations, Combination, ValidationIssue
from .composition import assemble_template_spec, CompositionError
from .library import SpecLibrary, SpecRecord, LibraryError
from .controller import TemplateAssembler, GenerationRequest, GenerationResult, RunToken

__all__ = [
    # Config
    "EngineConfig",
    # Enumeration
    "count_combinations",
    "enumerate_combinations",
    "Combination",
    "ValidationIssue",
    # Composition
    "assemble_template_spec",
    "CompositionError",
    # Library
    "SpecLibrary",
    "SpecRecord",
    "LibraryError",
    # Controller
    "TemplateAssembler",
    "GenerationRequest",
    "GenerationResult",
    "RunToken",
]
