"""
Pytest configuration and fixtures for cache tests.
"""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Callable, Generator
from unittest.mock import patch

import pytest

from shardcache.cache.file_cache import FileCache
from shardcache.config import clear_settings_cache


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test outputs."""
    return tmp_path


@pytest.fixture
def cache_dir(temp_dir: Path) -> Path:
    """Provide an existing, empty cache root."""
    directory = temp_dir / "cache"
    directory.mkdir()
    return directory


@pytest.fixture
def cache(cache_dir: Path) -> FileCache:
    """Provide a lenient FileCache with default settings."""
    return FileCache(cache_dir)


@pytest.fixture
def strict_cache(cache_dir: Path) -> FileCache:
    """Provide a FileCache that raises on write and configuration failures."""
    return FileCache(cache_dir, strict=True)


@pytest.fixture
def mock_env_vars(temp_dir: Path) -> Generator[dict[str, str], None, None]:
    """Provide mock environment variables for settings tests."""
    env_vars = {
        "CACHE_DIR": str(temp_dir / "env_cache"),
        "CACHE_SHARD_DEPTH": "3",
        "CACHE_MAX_AGE": "60",
        "CACHE_STRICT": "true",
        "LOG_LEVEL": "DEBUG",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        clear_settings_cache()
        yield env_vars


def _backdate(path: Path, seconds: float) -> None:
    stamp = time.time() - seconds
    os.utime(path, (stamp, stamp))


@pytest.fixture
def backdate() -> Callable[[Path, float], None]:
    """Provide a helper that moves a file's modification time into the past."""
    return _backdate


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Automatically reset settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
