"""
File-based cache for raw content.

Each entry is one file under the cache root, at a path built from the key
(see shardcache.cache.paths). There is no index and no metadata sidecar:
freshness is the file's modification time checked against the configured
conditions.

Failure policy:
- set: invalid key always raises; directory/write failures raise
  CacheWriteError in strict mode, otherwise return False.
- get/exists: invalid keys and unreadable entries are misses.
- delete/flush: failures always raise CacheDeleteError.
- set_cache_directory/set_shard_depth: rejected values raise
  ConfigurationError in strict mode, otherwise return False. The previous
  value is kept either way.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Any, Callable, Mapping

from shardcache.cache.base import CacheProtocol
from shardcache.cache.conditions import MAX_AGE, check_conditions, merge_conditions
from shardcache.cache.keys import is_valid_key, validate_key
from shardcache.cache.paths import is_valid_shard_depth, map_path
from shardcache.config import DEFAULT_MAX_AGE, DEFAULT_SHARD_DEPTH, Settings, get_settings
from shardcache.exceptions import (
    CacheDeleteError,
    CacheWriteError,
    ConfigurationError,
    ProducerError,
)
from shardcache.logging import get_logger, log_context, setup_logging

logger = get_logger(__name__)

DEFAULT_CONDITIONS: dict[str, int] = {MAX_AGE: DEFAULT_MAX_AGE}

Producer = Callable[[Path], "bytes | str | None"]


def _is_usable_directory(path: Path) -> bool:
    return path.is_dir() and os.access(path, os.W_OK | os.X_OK)


def _to_bytes(contents: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(contents, str):
        return contents.encode("utf-8")
    if isinstance(contents, (bytes, bytearray, memoryview)):
        return bytes(contents)
    raise TypeError(
        f"Cache contents must be bytes or str, not {type(contents).__name__}"
    )


def _stat_signature(path: Path) -> tuple[int, int, int] | None:
    try:
        st = path.stat()
    except (FileNotFoundError, NotADirectoryError):
        return None
    return (st.st_ino, st.st_size, st.st_mtime_ns)


class FileCache(CacheProtocol):
    """Key/value cache storing each entry as a file in a sharded tree.

    Args:
        cache_directory: Existing, writable root directory.
        shard_depth: Number of leading key characters used as directories.
        conditions: Freshness rules merged over ``{"max-age": 86400}``.
        strict: Raise on write and configuration failures instead of
            returning False.

    Raises:
        ConfigurationError: If the directory or shard depth is invalid.
        UnsupportedConditionError: If a condition name is not supported.
    """

    def __init__(
        self,
        cache_directory: Path | str,
        shard_depth: int = DEFAULT_SHARD_DEPTH,
        conditions: Mapping[str, Any] | None = None,
        strict: bool = False,
    ) -> None:
        directory = Path(cache_directory)
        if not _is_usable_directory(directory):
            raise ConfigurationError(
                "Cache directory must be an existing writable directory",
                context={"path": str(directory)},
            )
        if not is_valid_shard_depth(shard_depth):
            raise ConfigurationError(
                "Invalid shard depth",
                context={"shard_depth": shard_depth},
            )

        self._cache_directory = directory
        self._shard_depth = shard_depth
        self._conditions = merge_conditions(DEFAULT_CONDITIONS, conditions)
        self._strict = strict

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> FileCache:
        """Build a cache from settings.

        Also applies the logging settings and creates the cache directory
        if needed.
        """
        settings = settings or get_settings()
        setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
        settings.ensure_directories()
        return cls(
            settings.CACHE_DIR,
            shard_depth=settings.CACHE_SHARD_DEPTH,
            conditions=settings.conditions,
            strict=settings.CACHE_STRICT,
        )

    def __repr__(self) -> str:
        return (
            f"FileCache(cache_directory={str(self._cache_directory)!r}, "
            f"shard_depth={self._shard_depth}, conditions={self._conditions!r}, "
            f"strict={self._strict})"
        )

    @property
    def cache_directory(self) -> Path:
        """Root directory of the cache."""
        return self._cache_directory

    @property
    def shard_depth(self) -> int:
        """Number of key characters used as nested directories."""
        return self._shard_depth

    @property
    def conditions(self) -> dict[str, int]:
        """Default freshness conditions (a copy)."""
        return dict(self._conditions)

    @property
    def strict(self) -> bool:
        """Whether failures raise instead of returning False."""
        return self._strict

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def _reject(self, message: str, **context: Any) -> bool:
        if self._strict:
            raise ConfigurationError(message, context=context)
        logger.warning(message, **context)
        return False

    def set_cache_directory(self, cache_directory: Path | str) -> bool:
        """Change the cache root.

        Only existing, writable directories are accepted; otherwise the
        current root is kept.

        Returns:
            True if the root was changed.

        Raises:
            ConfigurationError: In strict mode, if the directory is rejected.
        """
        directory = Path(cache_directory)
        if not _is_usable_directory(directory):
            return self._reject(
                "Cache directory must be an existing writable directory",
                path=str(directory),
            )
        self._cache_directory = directory
        logger.info("Cache directory changed", path=str(directory))
        return True

    def set_shard_depth(self, shard_depth: Any) -> bool:
        """Change the shard depth, keeping the current one if invalid.

        Raises:
            ConfigurationError: In strict mode, if the depth is rejected.
        """
        if not is_valid_shard_depth(shard_depth):
            return self._reject("Invalid shard depth", shard_depth=shard_depth)
        self._shard_depth = shard_depth
        return True

    def get_cache_path(self, key: str) -> Path:
        """Full path of the file holding ``key``.

        Raises:
            InvalidKeyError: If the key is invalid.
        """
        return map_path(self._cache_directory, key, self._shard_depth)

    def _effective_conditions(
        self,
        max_age: int | None,
        conditions: Mapping[str, Any] | None,
    ) -> dict[str, int]:
        merged = merge_conditions(self._conditions, conditions)
        if max_age is not None:
            merged = merge_conditions(merged, {MAX_AGE: max_age})
        return merged

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def _write_failed(self, message: str, path: Path, error: OSError) -> bool:
        if self._strict:
            raise CacheWriteError(message, context={"path": str(path), "error": str(error)}) from error
        logger.warning(message, path=str(path), error=str(error))
        return False

    def _ensure_parent(self, path: Path) -> bool:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return self._write_failed("Failed to create cache directory", path.parent, e)
        return True

    def set(self, key: str, contents: bytes | str) -> bool:
        """Store contents under a key, overwriting any previous entry.

        Args:
            key: Cache key.
            contents: Raw bytes, or text stored as UTF-8.

        Returns:
            True if the directories and the file were written.

        Raises:
            InvalidKeyError: If the key is invalid.
            CacheWriteError: In strict mode, if writing fails.
        """
        path = self.get_cache_path(key)
        data = _to_bytes(contents)

        with log_context(cache=str(self._cache_directory), operation="set"):
            if not self._ensure_parent(path):
                return False
            try:
                path.write_bytes(data)
            except OSError as e:
                return self._write_failed("Failed to write cache file", path, e)

            logger.debug("Cache entry written", key=key, size=len(data))
        return True

    def exists(
        self,
        key: str,
        max_age: int | None = None,
        conditions: Mapping[str, Any] | None = None,
    ) -> bool:
        """Check that an entry exists and is fresh.

        Args:
            key: Cache key. Invalid keys are reported as missing.
            max_age: Overrides the configured max-age, in seconds.
            conditions: Overrides the configured conditions.

        Entries that cannot be inspected are reported as missing.

        Raises:
            UnsupportedConditionError: If a condition name is not supported.
        """
        effective = self._effective_conditions(max_age, conditions)
        if not is_valid_key(key):
            logger.debug("Invalid cache key treated as miss", key=key)
            return False

        path = self.get_cache_path(key)
        try:
            return check_conditions(path, effective)
        except OSError as e:
            logger.warning("Failed to inspect cache file", path=str(path), error=str(e))
            return False

    def get(
        self,
        key: str,
        max_age: int | None = None,
        conditions: Mapping[str, Any] | None = None,
    ) -> bytes | None:
        """Read a fresh entry.

        Stale entries are left on disk and reported as missing.

        Returns:
            The cached bytes, or None on a miss.
        """
        with log_context(cache=str(self._cache_directory), operation="get"):
            if not self.exists(key, max_age, conditions):
                logger.debug("Cache miss", key=key)
                return None

            path = self.get_cache_path(key)
            try:
                data = path.read_bytes()
            except OSError as e:
                logger.warning("Failed to read cache file", path=str(path), error=str(e))
                return None

            logger.debug("Cache hit", key=key, size=len(data))
        return data

    def delete(self, key: str) -> bool:
        """Remove an entry. Removing a missing entry succeeds.

        Raises:
            InvalidKeyError: If the key is invalid.
            CacheDeleteError: If the file exists but cannot be removed.
        """
        path = self.get_cache_path(key)
        if not path.exists() and not path.is_symlink():
            return True

        with log_context(cache=str(self._cache_directory), operation="delete"):
            try:
                path.unlink()
            except FileNotFoundError:
                return True
            except OSError as e:
                raise CacheDeleteError(
                    "Failed to delete cache file",
                    context={"path": str(path), "error": str(e)},
                ) from e

            logger.debug("Cache entry deleted", key=key)
        return True

    def flush(self) -> bool:
        """Remove every entry by recreating the cache root empty.

        Raises:
            CacheDeleteError: If the root cannot be removed or recreated.
        """
        root = self._cache_directory
        with log_context(cache=str(root), operation="flush"):
            try:
                if root.exists():
                    shutil.rmtree(root)
                root.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise CacheDeleteError(
                    "Failed to flush cache directory",
                    context={"path": str(root), "error": str(e)},
                ) from e

            logger.info("Cache flushed", path=str(root))
        return True

    # ------------------------------------------------------------------
    # Compute if absent
    # ------------------------------------------------------------------

    def _produce(self, key: str, producer: Producer) -> bytes:
        """Run a producer for a missing or stale entry.

        The producer receives the destination path. If it writes that file
        itself, the written bytes win and its return value is ignored.
        Otherwise its return value is stored through set().

        A write is detected by a change of (inode, size, mtime_ns). An
        in-place rewrite of a stale file with the same size, within the
        filesystem's mtime granularity, goes unnoticed: the return value is
        then used, or ProducerError raised if there is none.

        When the parent directory cannot be created (non-strict mode), the
        producer still runs and its return value is returned without being
        stored.
        """
        path = self.get_cache_path(key)

        with log_context(cache=str(self._cache_directory), operation="compute"):
            storable = self._ensure_parent(path)
            before = _stat_signature(path)
            result = producer(path)
            after = _stat_signature(path)

            if after is not None and after != before:
                logger.debug("Producer wrote cache file", key=key)
                return path.read_bytes()

            if result is None:
                raise ProducerError("Producer returned no content", context={"key": key})

            data = _to_bytes(result)
        if storable:
            self.set(key, data)
        return data

    def get_or_compute(
        self,
        key: str,
        producer: Producer,
        max_age: int | None = None,
        conditions: Mapping[str, Any] | None = None,
    ) -> bytes:
        """Return a fresh entry, computing and storing it when absent.

        Args:
            key: Cache key.
            producer: Called with the destination path on a miss. It may
                write that file itself or return the contents to store.
            max_age: Overrides the configured max-age, in seconds.
            conditions: Overrides the configured conditions.

        Returns:
            The cached or freshly computed bytes.

        Raises:
            InvalidKeyError: If the key is invalid.
            ProducerError: If the producer neither wrote the file nor
                returned content.
        """
        validate_key(key)
        cached = self.get(key, max_age, conditions)
        if cached is not None:
            return cached
        return self._produce(key, producer)

    def get_or_compute_file(
        self,
        key: str,
        producer: Producer,
        max_age: int | None = None,
        conditions: Mapping[str, Any] | None = None,
    ) -> Path:
        """Like get_or_compute(), but return the cache file path."""
        path = self.get_cache_path(key)
        if not self.exists(key, max_age, conditions):
            self._produce(key, producer)
        return path
