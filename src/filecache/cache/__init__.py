"""File-backed cache with time-based expiration.

Key components:
- CacheStore: One file per key, TTL expiration, sweeping
- CacheConfig: Configuration management
- CacheEntry: The persisted {expires_at, data} envelope
"""

from filecache.cache.config import CacheConfig
from filecache.cache.entry import CacheEntry
from filecache.cache.errors import (
    CacheDeleteError,
    CacheDirectoryError,
    CacheError,
    CachePermissionError,
    CacheWriteError,
    CorruptEntryError,
)
from filecache.cache.store import CacheStore

__all__ = [
    "CacheStore",
    "CacheConfig",
    "CacheEntry",
    "CacheError",
    "CacheDirectoryError",
    "CachePermissionError",
    "CacheWriteError",
    "CorruptEntryError",
    "CacheDeleteError",
]
