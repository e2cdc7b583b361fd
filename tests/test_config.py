"""Tests for settings."""

import pytest
from pydantic import ValidationError

from py_talispod.config import Settings


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Test default values."""
        monkeypatch.delenv("TALISPOD_BAD_TIER_HP_GROW", raising=False)
        settings = Settings(_env_file=None)

        assert settings.api_port == 8000
        assert settings.tick_seconds == 60.0
        assert settings.bad_tier_hp_grow == 10
        assert settings.max_ticks_per_request == 1440
        assert settings.cors_origins == ["*"]

    def test_environment_override(self, monkeypatch):
        """Test reading prefixed environment variables."""
        monkeypatch.setenv("TALISPOD_BAD_TIER_HP_GROW", "0")
        monkeypatch.setenv("TALISPOD_ALLOWED_ORIGINS", "http://a.test, http://b.test")

        settings = Settings(_env_file=None)

        assert settings.bad_tier_hp_grow == 0
        assert settings.cors_origins == ["http://a.test", "http://b.test"]

    def test_invalid_tick_seconds(self, monkeypatch):
        """Test that a non-positive tick interval is rejected."""
        monkeypatch.setenv("TALISPOD_TICK_SECONDS", "0")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)
