"""File-based key/value cache with sharded paths and max-age expiration."""

from shardcache.cache import FileCache
from shardcache.exceptions import (
    CacheDeleteError,
    CacheWriteError,
    ConfigurationError,
    InvalidKeyError,
    ProducerError,
    ShardCacheError,
    UnsupportedConditionError,
)

__version__ = "0.1.0"

__all__ = [
    "CacheDeleteError",
    "CacheWriteError",
    "ConfigurationError",
    "FileCache",
    "InvalidKeyError",
    "ProducerError",
    "ShardCacheError",
    "UnsupportedConditionError",
    "__version__",
]
