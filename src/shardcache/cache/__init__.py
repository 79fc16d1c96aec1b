"""
Cache package.

- keys.py: key validation
- paths.py: key to sharded path mapping
- conditions.py: freshness rules (max-age)
- file_cache.py: FileCache, the filesystem-backed cache
"""

from shardcache.cache.base import CacheProtocol
from shardcache.cache.conditions import check_conditions, is_fresh, validate_conditions
from shardcache.cache.file_cache import FileCache
from shardcache.cache.keys import is_valid_key, validate_key
from shardcache.cache.paths import is_valid_shard_depth, map_path, relative_path

__all__ = [
    "CacheProtocol",
    "FileCache",
    "check_conditions",
    "is_fresh",
    "is_valid_key",
    "is_valid_shard_depth",
    "map_path",
    "relative_path",
    "validate_conditions",
    "validate_key",
]
