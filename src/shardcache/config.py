"""
Configuration management using pydantic-settings.

Loads configuration from environment variables and .env files.
Validates fields and provides typed access to settings.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SHARD_DEPTH = 5
MIN_SHARD_DEPTH = 0
MAX_SHARD_DEPTH = 12
DEFAULT_MAX_AGE = 86400  # 24 hours


class Settings(BaseSettings):
    """Cache settings loaded from environment variables.

    Optional:
        CACHE_DIR: Root directory of the cache
        CACHE_SHARD_DEPTH: Number of key characters used as nested directories
        CACHE_MAX_AGE: Default freshness delay in seconds
        CACHE_STRICT: Raise on write and configuration failures
        LOG_LEVEL: Logging level
        LOG_FILE: Optional JSON-lines log file
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    CACHE_DIR: Path = Field(default=Path(".cache"), description="Cache root directory")
    CACHE_SHARD_DEPTH: int = Field(
        default=DEFAULT_SHARD_DEPTH,
        ge=MIN_SHARD_DEPTH,
        le=MAX_SHARD_DEPTH,
        description="Directory nesting depth derived from the key",
    )
    CACHE_MAX_AGE: int = Field(
        default=DEFAULT_MAX_AGE,
        description="Default max-age in seconds (0 or less disables caching)",
    )
    CACHE_STRICT: bool = Field(
        default=False,
        description="Raise errors on write/configuration failures instead of returning False",
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    LOG_FILE: Path | None = Field(default=None, description="JSON-lines log file")

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """Accept lowercase level names."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def conditions(self) -> dict[str, int]:
        """Default freshness conditions derived from CACHE_MAX_AGE."""
        return {"max-age": self.CACHE_MAX_AGE}

    def ensure_directories(self) -> None:
        """Create the cache directory if it doesn't exist."""
        self.CACHE_DIR.mkdir(parents=True, exist_ok=True)

    def display(self) -> dict[str, str | int | bool | None]:
        """Return settings as a flat dict for display."""
        return {
            "CACHE_DIR": str(self.CACHE_DIR),
            "CACHE_SHARD_DEPTH": self.CACHE_SHARD_DEPTH,
            "CACHE_MAX_AGE": self.CACHE_MAX_AGE,
            "CACHE_STRICT": self.CACHE_STRICT,
            "LOG_LEVEL": self.LOG_LEVEL,
            "LOG_FILE": str(self.LOG_FILE) if self.LOG_FILE else None,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
