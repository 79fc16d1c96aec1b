"""
Freshness conditions for cache entries.

Conditions are a mapping of rule name to value. The only rule is
``max-age``: an entry is fresh while its age in seconds is strictly lower
than the value. Unknown rule names are configuration mistakes and always
raise.
"""

from __future__ import annotations

import time
from pathlib import Path
from stat import S_ISREG
from typing import Any, Mapping

from shardcache.exceptions import ConfigurationError, UnsupportedConditionError

MAX_AGE = "max-age"
SUPPORTED_CONDITIONS = (MAX_AGE,)


def is_fresh(mtime: float, now: float, delay: int) -> bool:
    """Decide whether an entry modified at ``mtime`` is still fresh at ``now``.

    A delay of 0 or less is never fresh. An age equal to the delay is
    already expired.
    """
    if delay <= 0:
        return False
    return (now - mtime) < delay


def validate_conditions(conditions: Mapping[str, Any]) -> dict[str, int]:
    """Validate a conditions mapping.

    Args:
        conditions: Rule name to value.

    Returns:
        A plain dict copy of the conditions.

    Raises:
        UnsupportedConditionError: If a rule name is not supported.
        ConfigurationError: If a max-age value is not an integer.
    """
    validated: dict[str, int] = {}
    for name, value in conditions.items():
        if name not in SUPPORTED_CONDITIONS:
            raise UnsupportedConditionError(
                f"Cache condition {name!r} not supported",
                context={"condition": name, "supported": list(SUPPORTED_CONDITIONS)},
            )
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(
                "max-age must be an integer number of seconds",
                context={"condition": name, "value": value},
            )
        validated[name] = value
    return validated


def merge_conditions(
    base: Mapping[str, Any],
    override: Mapping[str, Any] | None = None,
) -> dict[str, int]:
    """Merge override conditions over base ones and validate the result."""
    merged = dict(base)
    if override:
        merged.update(override)
    return validate_conditions(merged)


def check_conditions(
    path: Path,
    conditions: Mapping[str, Any],
    now: float | None = None,
) -> bool:
    """Check that a cache file exists and satisfies every condition.

    Only regular files count as existing entries.

    Args:
        path: Cache file to check.
        conditions: Rule name to value, already merged with defaults.
        now: Reference timestamp, defaults to the current time.

    Returns:
        True if the file exists and all conditions hold.

    Raises:
        UnsupportedConditionError: If a rule name is not supported.
        OSError: If the file cannot be inspected for another reason.
    """
    conditions = validate_conditions(conditions)

    try:
        st = path.stat()
    except (FileNotFoundError, NotADirectoryError):
        return False

    if not S_ISREG(st.st_mode):
        return False

    if now is None:
        now = time.time()

    for name, value in conditions.items():
        if name == MAX_AGE and not is_fresh(st.st_mtime, now, value):
            return False

    return True
