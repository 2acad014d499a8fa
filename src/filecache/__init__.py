"""filecache: File-backed key-value cache with time-based expiration."""

__version__ = "0.1.0"

from filecache.cache import CacheConfig, CacheError, CacheStore

__all__ = ["CacheStore", "CacheConfig", "CacheError", "__version__"]
