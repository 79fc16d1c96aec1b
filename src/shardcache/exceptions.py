"""
Custom exception hierarchy for the file cache.

All exceptions inherit from ShardCacheError, which provides optional context
for structured error handling and logging.
"""

from __future__ import annotations

from typing import Any


class ShardCacheError(Exception):
    """Base exception for all cache errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class InvalidKeyError(ShardCacheError):
    """Raised when a cache key fails validation.

    Context should include:
        - key: The rejected key
        - pattern: The pattern keys must match
    """

    pass


class ConfigurationError(ShardCacheError):
    """Raised when configuration is invalid.

    Examples:
        - Cache directory missing or not writable
        - Shard depth out of bounds
        - Non-integer max-age value
    """

    pass


class UnsupportedConditionError(ConfigurationError):
    """Raised when a freshness condition name is not recognized.

    Context should include:
        - condition: The unrecognized condition name
        - supported: The condition names that are recognized
    """

    pass


class CacheWriteError(ShardCacheError):
    """Raised in strict mode when a cache entry cannot be written.

    Context should include:
        - path: The file or directory that could not be created
        - error: The underlying OS error
    """

    pass


class CacheDeleteError(ShardCacheError):
    """Raised when a cache entry or the cache root cannot be removed.

    Context should include:
        - path: The path that could not be removed
        - error: The underlying OS error
    """

    pass


class ProducerError(ShardCacheError):
    """Raised when a compute-if-absent producer yields no content.

    Context should include:
        - key: The cache key being computed
    """

    pass
