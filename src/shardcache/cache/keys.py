"""
Cache key validation.

Keys become file and directory names, so they are restricted to ASCII
letters, digits and underscore. Anything else (separators, dots, ``?``,
whitespace, non-ASCII) is rejected before a path is built.
"""

from __future__ import annotations

import re
from typing import Any

from shardcache.exceptions import InvalidKeyError

MAX_KEY_LENGTH = 255
KEY_PATTERN = re.compile(r"[A-Za-z0-9_]{1,%d}" % MAX_KEY_LENGTH)


def is_valid_key(key: Any) -> bool:
    """Check whether a value can be used as a cache key."""
    return isinstance(key, str) and KEY_PATTERN.fullmatch(key) is not None


def validate_key(key: Any) -> str:
    """Validate a cache key.

    Args:
        key: Candidate cache key.

    Returns:
        The key, unchanged.

    Raises:
        InvalidKeyError: If the key is not a string matching KEY_PATTERN.
    """
    if not is_valid_key(key):
        raise InvalidKeyError(
            "Invalid cache key",
            context={"key": key, "pattern": KEY_PATTERN.pattern},
        )
    return key
