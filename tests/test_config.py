"""
Tests for configuration module.
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from shardcache.config import Settings, clear_settings_cache, get_settings


class TestSettingsValidation:
    """Tests for Settings validation."""

    def test_defaults(self) -> None:
        """Test defaults when nothing is configured."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.CACHE_DIR == Path(".cache")
        assert settings.CACHE_SHARD_DEPTH == 5
        assert settings.CACHE_MAX_AGE == 86400
        assert settings.CACHE_STRICT is False
        assert settings.LOG_LEVEL == "INFO"
        assert settings.LOG_FILE is None

    def test_settings_loads_from_env(self, mock_env_vars: dict[str, str]) -> None:
        """Test that settings correctly loads from environment variables."""
        settings = get_settings()

        assert settings.CACHE_DIR == Path(mock_env_vars["CACHE_DIR"])
        assert settings.CACHE_SHARD_DEPTH == 3
        assert settings.CACHE_MAX_AGE == 60
        assert settings.CACHE_STRICT is True
        assert settings.LOG_LEVEL == "DEBUG"

    @pytest.mark.parametrize("depth", ["-1", "13", "deep"])
    def test_shard_depth_bounds(self, depth: str) -> None:
        """Test shard depth outside [0, 12] is rejected."""
        with patch.dict(os.environ, {"CACHE_SHARD_DEPTH": depth}, clear=False):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_log_level_is_normalized(self) -> None:
        """Test lowercase log levels are accepted."""
        with patch.dict(os.environ, {"LOG_LEVEL": "warning"}, clear=False):
            settings = Settings(_env_file=None)

        assert settings.LOG_LEVEL == "WARNING"

    def test_invalid_log_level(self) -> None:
        """Test unknown log levels are rejected."""
        with patch.dict(os.environ, {"LOG_LEVEL": "LOUD"}, clear=False):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)


class TestSettingsHelpers:
    """Tests for Settings helper methods."""

    def test_conditions(self, mock_env_vars: dict[str, str]) -> None:
        """Test conditions are derived from CACHE_MAX_AGE."""
        assert get_settings().conditions == {"max-age": 60}

    def test_ensure_directories(self, temp_dir: Path) -> None:
        """Test the cache directory is created."""
        settings = Settings(_env_file=None, CACHE_DIR=temp_dir / "a" / "b")
        settings.ensure_directories()

        assert (temp_dir / "a" / "b").is_dir()

    def test_display(self, mock_env_vars: dict[str, str]) -> None:
        """Test display returns plain values."""
        shown = get_settings().display()

        assert shown["CACHE_DIR"] == mock_env_vars["CACHE_DIR"]
        assert shown["CACHE_SHARD_DEPTH"] == 3
        assert shown["LOG_FILE"] is None


class TestSettingsCache:
    """Tests for the settings singleton."""

    def test_get_settings_is_cached(self, mock_env_vars: dict[str, str]) -> None:
        """Test repeated calls return the same instance."""
        assert get_settings() is get_settings()

    def test_clear_settings_cache(self, mock_env_vars: dict[str, str]) -> None:
        """Test clearing the cache reloads from the environment."""
        first = get_settings()

        with patch.dict(os.environ, {"CACHE_MAX_AGE": "5"}, clear=False):
            clear_settings_cache()
            second = get_settings()

        assert second is not first
        assert second.CACHE_MAX_AGE == 5
