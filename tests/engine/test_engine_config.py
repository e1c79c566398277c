"""
Unit Tests for EngineConfig

Tests construction validation and environment loading.
"""

import pytest

from template_forge.engine.config import (
    DEFAULT_GENERATION_CAP,
    DEFAULT_TEXT_FILL_MODEL,
    EngineConfig,
)
from template_forge.engine.enumeration import MAX_SAFE_INTEGER

ENV_VARS = ("TEMPLATE_FORGE_CAP", "TEMPLATE_FORGE_MODEL", "TEMPLATE_FORGE_TEXT_FILL")


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Unset engine variables; return a .env path that does not exist."""
    for name in ENV_VARS:
        # setenv first so values loaded from a .env file are undone too
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return str(tmp_path / "missing.env")


class TestEngineConfig:
    """Tests for EngineConfig construction."""

    def test_defaults_when_constructed_then_cap_40_and_safe_ceiling(self):
        config = EngineConfig()
        assert config.generation_cap == DEFAULT_GENERATION_CAP == 40
        assert config.count_ceiling == MAX_SAFE_INTEGER
        assert config.text_fill_enabled is False

    @pytest.mark.parametrize("kwargs", [
        {"generation_cap": 0},
        {"count_ceiling": 0},
        {"stack_padding": -1},
        {"stack_gap": -0.5},
        {"text_fill_model": ""},
    ])
    def test_init_when_invalid_then_raises_error(self, kwargs):
        with pytest.raises(ValueError):
            EngineConfig(**kwargs)


class TestEngineConfigFromEnv:
    """Tests for EngineConfig.from_env()."""

    def test_from_env_when_unset_then_defaults(self, clean_env):
        config = EngineConfig.from_env(clean_env)
        assert config.generation_cap == DEFAULT_GENERATION_CAP
        assert config.text_fill_model == DEFAULT_TEXT_FILL_MODEL
        assert config.text_fill_enabled is False

    def test_from_env_when_set_then_values_used(self, clean_env, monkeypatch):
        monkeypatch.setenv("TEMPLATE_FORGE_CAP", "7")
        monkeypatch.setenv("TEMPLATE_FORGE_MODEL", "gpt-test")
        monkeypatch.setenv("TEMPLATE_FORGE_TEXT_FILL", " Yes ")

        config = EngineConfig.from_env(clean_env)

        assert config.generation_cap == 7
        assert config.text_fill_model == "gpt-test"
        assert config.text_fill_enabled is True

    def test_from_env_when_cap_not_integer_then_raises_error(self, clean_env, monkeypatch):
        monkeypatch.setenv("TEMPLATE_FORGE_CAP", "lots")
        with pytest.raises(ValueError, match="TEMPLATE_FORGE_CAP"):
            EngineConfig.from_env(clean_env)

    def test_from_env_when_dotenv_file_then_loaded(self, clean_env, tmp_path):
        env_file = tmp_path / "engine.env"
        env_file.write_text("TEMPLATE_FORGE_CAP=12\n", encoding="utf-8")

        config = EngineConfig.from_env(str(env_file))

        assert config.generation_cap == 12
