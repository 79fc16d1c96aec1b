"""
Key to path mapping.

The first characters of a key become nested single-character directories
and the key itself is the file name:

    mytestfilecache, depth 5 -> m/y/t/e/s/mytestfilecache
    xy, depth 5              -> x/y/xy

Sharding uses the key's own characters rather than a hash, so keys sharing
a prefix land in the same subtree.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from shardcache.cache.keys import validate_key
from shardcache.config import MAX_SHARD_DEPTH, MIN_SHARD_DEPTH


def is_valid_shard_depth(value: Any) -> bool:
    """Check that a shard depth is an int within [MIN_SHARD_DEPTH, MAX_SHARD_DEPTH]."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return MIN_SHARD_DEPTH <= value <= MAX_SHARD_DEPTH


def shard_segments(key: str, shard_depth: int) -> list[str]:
    """Return the directory segments for a key, one character each."""
    return list(key[: max(shard_depth, 0)])


def relative_path(key: str, shard_depth: int) -> Path:
    """Map a key to its path relative to the cache root.

    Raises:
        InvalidKeyError: If the key is invalid.
    """
    validate_key(key)
    return Path(*shard_segments(key, shard_depth), key)


def map_path(root: Path | str, key: str, shard_depth: int) -> Path:
    """Map a key to its full path under ``root``."""
    return Path(root) / relative_path(key, shard_depth)
