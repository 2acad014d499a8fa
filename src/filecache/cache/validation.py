"""Key hashing and expiration utilities."""

import hashlib
import math

CACHE_FILE_SUFFIX = ".cache"


def hash_key(key: str) -> str:
    """Compute the md5 hex digest used to name a key's cache file.

    The mapping is one-way and collision tolerant: the same key always
    yields the same digest, distinct keys are very unlikely to collide.

    Args:
        key: Cache key

    Returns:
        Hex digest of the key

    Raises:
        ValueError: If key is empty

    Examples:
        >>> len(hash_key("api_data_users"))
        32
        >>> hash_key("a") == hash_key("a")
        True
    """
    if not key:
        raise ValueError("Cache key must be a non-empty string")

    return hashlib.md5(key.encode("utf-8")).hexdigest()


def cache_filename(key: str) -> str:
    """Return the file name (digest plus suffix) for a key."""
    return f"{hash_key(key)}{CACHE_FILE_SUFFIX}"


def compute_expires_at(now: float, ttl_seconds: float) -> int:
    """Absolute expiration timestamp for an entry written at ``now``.

    Rounded up to a whole second, so an entry never expires before its
    full TTL has elapsed.

    Args:
        now: Current time in seconds since epoch
        ttl_seconds: Time-to-live in seconds

    Returns:
        Expiration time as whole seconds since epoch
    """
    return math.ceil(now + ttl_seconds)


def is_expired(expires_at: float, now: float) -> bool:
    """Check whether an entry has expired.

    An entry is still valid at exactly ``expires_at``; it expires once
    the clock moves past it.

    Args:
        expires_at: Expiration time in seconds since epoch
        now: Current time in seconds since epoch

    Returns:
        True if expired, False if still valid
    """
    return now > expires_at


def get_ttl_remaining(expires_at: float, now: float) -> int:
    """Get whole seconds remaining until an entry expires (0 once expired)."""
    return max(0, math.ceil(expires_at - now))
