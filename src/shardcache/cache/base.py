"""
Base classes for caching.

CacheProtocol is the interface callers depend on; FileCache is the
filesystem implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class CacheProtocol(ABC):
    """Abstract interface for cache implementations."""

    @abstractmethod
    def get(self, key: str, max_age: int | None = None) -> bytes | None:
        """Get a value from the cache."""
        ...

    @abstractmethod
    def set(self, key: str, contents: bytes | str) -> bool:
        """Set a value in the cache."""
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a value from the cache."""
        ...

    @abstractmethod
    def exists(self, key: str, max_age: int | None = None) -> bool:
        """Check if a key exists in the cache."""
        ...
