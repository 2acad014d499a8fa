"""Exception hierarchy for the file cache."""


class CacheError(Exception):
    """Base exception for cache-related errors."""

    pass


class CacheDirectoryError(CacheError):
    """Raised when the cache directory cannot be created or accessed."""

    pass


class CachePermissionError(CacheDirectoryError):
    """Raised when cache directory permissions are insufficient."""

    pass


class CacheWriteError(CacheError):
    """Raised when an entry cannot be persisted.

    Only propagated to callers when the store runs in strict mode;
    otherwise ``put`` reports the failure by returning False.
    """

    pass


class CorruptEntryError(CacheError):
    """Raised when a cache file does not hold a valid envelope.

    Never reaches callers of ``get``: a corrupt entry is evicted and
    reported as a miss.
    """

    pass


class CacheDeleteError(CacheError):
    """Raised when a cache file exists but cannot be removed."""

    pass
