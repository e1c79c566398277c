"""
Module: engine.config

Purpose:
    Configuration dataclass for the generation engine. Immutable
    configuration with validation on construction.

Key Classes:
    - EngineConfig: Caps, ceilings, stack spacing and text-fill settings

Dependencies:
    - dataclasses (std)
    - python-dotenv: ``.env`` loading for from_env()

Used By:
    - engine.controller: TemplateAssembler
    - cli: Command line entry point
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from template_forge.engine.enumeration.enumerator import DEFAULT_CAP, MAX_SAFE_INTEGER

DEFAULT_GENERATION_CAP = DEFAULT_CAP
DEFAULT_TEXT_FILL_MODEL = "gpt-5.2"


@dataclass(frozen=True)
class EngineConfig:
    """
    Configuration for template generation (immutable).

    Attributes:
        generation_cap: Maximum combinations produced per run
        count_ceiling: Combination counts above this are an overflow
        stack_padding: Module stack padding in points
        stack_gap: Gap between stacked module elements in points
        text_fill_model: Model name used for slot text generation
        text_fill_enabled: Request AI text after placeholder assembly

    Example:
        >>> config = EngineConfig(generation_cap=10)
        >>> config.count_ceiling == MAX_SAFE_INTEGER
        True
    """

    generation_cap: int = DEFAULT_GENERATION_CAP
    count_ceiling: int = MAX_SAFE_INTEGER
    stack_padding: float = 24.0
    stack_gap: float = 12.0
    text_fill_model: str = DEFAULT_TEXT_FILL_MODEL
    text_fill_enabled: bool = False

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.generation_cap < 1:
            raise ValueError(f"generation_cap must be positive: {self.generation_cap}")
        if self.count_ceiling < 1:
            raise ValueError(f"count_ceiling must be positive: {self.count_ceiling}")
        if self.stack_padding < 0:
            raise ValueError(f"stack_padding must be non-negative: {self.stack_padding}")
        if self.stack_gap < 0:
            raise ValueError(f"stack_gap must be non-negative: {self.stack_gap}")
        if not self.text_fill_model:
            raise ValueError("text_fill_model must not be empty")

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> EngineConfig:
        """
        Build a config from environment variables (``.env`` is loaded first).

        Reads TEMPLATE_FORGE_CAP, TEMPLATE_FORGE_MODEL and
        TEMPLATE_FORGE_TEXT_FILL; unset variables keep their defaults.

        Raises:
            ValueError: If a variable holds an unusable value
        """
        load_dotenv(dotenv_path)

        cap_raw = os.getenv("TEMPLATE_FORGE_CAP")
        try:
            cap = int(cap_raw) if cap_raw else DEFAULT_GENERATION_CAP
        except ValueError:
            raise ValueError(f"TEMPLATE_FORGE_CAP must be an integer: {cap_raw!r}")

        text_fill = os.getenv("TEMPLATE_FORGE_TEXT_FILL", "")
        return cls(
            generation_cap=cap,
            text_fill_model=os.getenv("TEMPLATE_FORGE_MODEL") or DEFAULT_TEXT_FILL_MODEL,
            text_fill_enabled=text_fill.strip().lower() in ("1", "true", "yes", "on"),
        )
