"""File-backed key-value store with time-based expiration."""

import logging
import os
import time
from pathlib import Path
from typing import Any, Callable, Dict, Generic, Iterator, Optional, TypeVar, Union

from filelock import FileLock, Timeout

import filecache.serializers  # noqa: F401  (registers built-in serializers)
from filecache.base.registry import get_serializer
from filecache.base.serializer import BaseSerializer
from filecache.cache.config import CacheConfig
from filecache.cache.entry import CacheEntry, read_expires_at
from filecache.cache.errors import (
    CacheDeleteError,
    CacheDirectoryError,
    CachePermissionError,
    CacheWriteError,
    CorruptEntryError,
)
from filecache.cache.validation import (
    CACHE_FILE_SUFFIX,
    cache_filename,
    compute_expires_at,
    get_ttl_remaining,
    is_expired,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

LOCK_DIRNAME = ".locks"


class CacheStore(Generic[T]):
    """Persists values to one file per key and expires them after a TTL.

    Each key maps to ``{cache_dir}/{md5(key)}.cache`` holding a serialized
    envelope ``{"expires_at", "data"}``. Lookups evict expired and corrupt
    files as they find them; ``sweep`` removes expired files proactively.

    Per-key failures never raise: a failed read is a miss and a failed
    write returns False (unless the config enables strict mode). Only
    construction raises, when the cache directory cannot be created.

    Examples:
        >>> store = CacheStore("my_app_cache", default_ttl=600)
        >>> store.put("users", [{"id": 1, "name": "Alice"}])
        True
        >>> store.get("users")
        [{'id': 1, 'name': 'Alice'}]
    """

    def __init__(
        self,
        directory: Optional[Union[str, Path]] = None,
        default_ttl: Optional[int] = None,
        serializer: Optional[Union[str, BaseSerializer]] = None,
        config: Optional[CacheConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the store and create its directory if missing.

        Args:
            directory: Cache directory (overrides config.cache_dir)
            default_ttl: Default TTL in seconds (overrides config.default_ttl)
            serializer: Serializer instance or registered name
                (overrides config.serializer)
            config: Cache configuration (defaults if None)
            clock: Returns the current time in seconds since epoch

        Raises:
            CacheDirectoryError: If the cache directory cannot be created
            CachePermissionError: If creation is denied by permissions
            KeyError: If the serializer name is not registered
        """
        self.config = config or CacheConfig()

        if directory is not None:
            self.cache_dir = Path(directory).expanduser()
        else:
            self.cache_dir = self.config.cache_dir
        self.lock_dir = self.cache_dir / LOCK_DIRNAME

        self.default_ttl = (
            default_ttl if default_ttl is not None else self.config.default_ttl
        )
        if self.default_ttl < 0:
            raise ValueError(f"default_ttl must be non-negative, got {self.default_ttl}")

        self.serializer = self._resolve_serializer(
            serializer if serializer is not None else self.config.serializer
        )
        self._clock = clock
        self._stats: Dict[str, int] = {
            "cache_hits": 0,
            "cache_misses": 0,
            "expired_removed": 0,
            "corrupt_removed": 0,
            "write_failures": 0,
        }

        self._ensure_directory()

    @staticmethod
    def _resolve_serializer(serializer: Union[str, BaseSerializer]) -> BaseSerializer:
        if isinstance(serializer, BaseSerializer):
            return serializer
        return get_serializer(serializer)

    def _ensure_directory(self) -> None:
        """Create the cache and lock directories.

        Raises:
            CachePermissionError: If permissions are insufficient
            CacheDirectoryError: On any other OS error
        """
        try:
            self.lock_dir.mkdir(parents=True, exist_ok=True)
        except PermissionError as e:
            raise CachePermissionError(
                f"Cannot create cache directory at {self.cache_dir}: {e}"
            ) from e
        except OSError as e:
            raise CacheDirectoryError(
                f"Failed to create cache directory at {self.cache_dir}: {e}"
            ) from e

    def _now(self) -> float:
        return self._clock()

    def path_for(self, key: str) -> Path:
        """Get the cache file path for a key.

        The same key always maps to the same path, across calls and
        across processes.

        Raises:
            ValueError: If key is empty
        """
        return self.cache_dir / cache_filename(key)

    def _get_lock_path(self, cache_path: Path) -> Path:
        return self.lock_dir / f"{cache_path.stem}.lock"

    # ==================== Writes ====================

    def put(self, key: str, value: T, ttl: Optional[float] = None) -> bool:
        """Store a value under key.

        Args:
            key: Non-empty cache key
            value: Value to cache (must be supported by the serializer)
            ttl: Time-to-live in seconds (uses default_ttl if None)

        Returns:
            True on success, False if the entry could not be persisted

        Raises:
            ValueError: If key is empty
            CacheWriteError: If the write fails and strict mode is enabled
        """
        cache_path = self.path_for(key)
        ttl_seconds = self.default_ttl if ttl is None else ttl
        entry = CacheEntry(
            expires_at=compute_expires_at(self._now(), ttl_seconds), data=value
        )

        try:
            self._write_entry(cache_path, entry)
        except CacheWriteError as e:
            self._stats["write_failures"] += 1
            if self.config.strict_mode:
                raise
            logger.warning(f"Error saving cache for key {key!r}: {e}")
            return False

        logger.debug(f"Cached key {key!r} until {entry.expires_at}")
        return True

    def _write_entry(self, cache_path: Path, entry: CacheEntry) -> None:
        """Serialize an entry and write it under the key's exclusive lock.

        Raises:
            CacheWriteError: If serialization, locking or writing fails
        """
        try:
            data_bytes = self.serializer.dumps(entry.to_dict())
        except Exception as e:
            raise CacheWriteError(
                f"Cannot serialize entry with {self.serializer.name}: {e}"
            ) from e

        lock_path = self._get_lock_path(cache_path)
        try:
            # Recreate lazily if the directory vanished since construction
            self.lock_dir.mkdir(parents=True, exist_ok=True)
            with FileLock(lock_path, timeout=self.config.lock_timeout):
                self._replace_file(cache_path, data_bytes)
        except Timeout as e:
            raise CacheWriteError(
                f"Timeout acquiring lock for {cache_path.name} "
                f"after {self.config.lock_timeout} seconds"
            ) from e
        except OSError as e:
            raise CacheWriteError(f"Cannot write cache file {cache_path}: {e}") from e

    @staticmethod
    def _replace_file(cache_path: Path, data_bytes: bytes) -> None:
        """Write to a temp sibling, then atomically rename over the target."""
        temp_path = cache_path.with_suffix(cache_path.suffix + ".tmp")
        try:
            with open(temp_path, "wb") as f:
                f.write(data_bytes)
            os.replace(temp_path, cache_path)
        except OSError:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError as cleanup_error:
                logger.warning(f"Failed to clean up temp file {temp_path}: {cleanup_error}")
            raise

    # ==================== Reads ====================

    def get(self, key: str, default: Optional[T] = None) -> Optional[T]:
        """Get a cached value if present and not expired.

        Expired and corrupt entries are deleted on the way. Read failures
        are logged and reported as a miss.

        Args:
            key: Non-empty cache key
            default: Value returned on a miss

        Returns:
            The cached value, or default on a miss

        Raises:
            ValueError: If key is empty
        """
        cache_path = self.path_for(key)
        entry = self._read_entry(cache_path, evict_corrupt=True)

        if entry is None:
            self._stats["cache_misses"] += 1
            return default

        if entry.is_expired(self._now()):
            logger.debug(f"Cache entry for key {key!r} expired at {entry.expires_at}")
            if self._delete_file(cache_path):
                self._stats["expired_removed"] += 1
            self._stats["cache_misses"] += 1
            return default

        self._stats["cache_hits"] += 1
        return entry.data

    def _read_entry(
        self, cache_path: Path, evict_corrupt: bool = False
    ) -> Optional[CacheEntry]:
        """Read and validate the envelope stored at cache_path.

        Args:
            cache_path: Path to the cache file
            evict_corrupt: Delete the file if it holds no valid envelope

        Returns:
            CacheEntry, or None if missing, unreadable or corrupt
        """
        try:
            raw = cache_path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Error reading cache file {cache_path}: {e}")
            return None

        try:
            return CacheEntry.from_dict(self.serializer.loads(raw))
        except CorruptEntryError as e:
            if evict_corrupt:
                logger.warning(f"Discarding corrupt cache file {cache_path.name}: {e}")
                if self._delete_file(cache_path):
                    self._stats["corrupt_removed"] += 1
            return None

    def contains(self, key: str) -> bool:
        """Check whether key holds a live entry.

        Unlike ``get`` this neither deletes files nor counts hits/misses.
        """
        entry = self._read_entry(self.path_for(key))
        return entry is not None and not entry.is_expired(self._now())

    def __contains__(self, key: str) -> bool:
        return self.contains(key)

    def get_status(self, key: str) -> Optional[Dict[str, Any]]:
        """Get cache status for a key.

        Args:
            key: Non-empty cache key

        Returns:
            Status dict, or None if the key has no valid envelope on disk
        """
        cache_path = self.path_for(key)
        entry = self._read_entry(cache_path)
        if entry is None:
            return None

        now = self._now()
        try:
            size_bytes = cache_path.stat().st_size
        except OSError:
            size_bytes = None

        return {
            "cached": True,
            "cache_path": str(cache_path),
            "size_bytes": size_bytes,
            "expires_at": entry.expires_at,
            "ttl_remaining": get_ttl_remaining(entry.expires_at, now),
            "expired": entry.is_expired(now),
        }

    # ==================== Deletion ====================

    def _unlink(self, cache_path: Path) -> bool:
        """Remove a file; a missing file is not an error.

        Returns:
            True if a file was removed

        Raises:
            CacheDeleteError: If the file exists but cannot be removed
        """
        try:
            cache_path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise CacheDeleteError(f"Cannot delete cache file {cache_path}: {e}") from e
        return True

    def _delete_file(self, cache_path: Path) -> bool:
        try:
            return self._unlink(cache_path)
        except CacheDeleteError as e:
            logger.warning(str(e))
            return False

    def delete(self, key: str) -> bool:
        """Remove the entry for key. Deleting an absent key is a no-op.

        Returns:
            True if a file was removed
        """
        return self._delete_file(self.path_for(key))

    def _iter_cache_files(self) -> Iterator[Path]:
        for cache_path in self.cache_dir.glob(f"*{CACHE_FILE_SUFFIX}"):
            if cache_path.is_file():
                yield cache_path

    def clear(self) -> int:
        """Remove every cache file in the directory.

        Returns:
            Number of files removed
        """
        removed = 0
        for cache_path in list(self._iter_cache_files()):
            if self._delete_file(cache_path):
                removed += 1
        logger.info(f"Cleared {removed} cache files from {self.cache_dir}")
        return removed

    def sweep(self) -> None:
        """Delete every entry in the directory whose expiration has passed.

        Entries that cannot be read or decoded are left in place: a sweep
        only removes files it can positively confirm are expired. Deletion
        failures are logged. Safe to call on any schedule.
        """
        now = self._now()
        removed = 0

        try:
            with os.scandir(self.cache_dir) as it:
                candidates = [
                    Path(e.path) for e in it if e.is_file(follow_symlinks=False)
                ]
        except OSError as e:
            logger.warning(f"Cannot scan cache directory {self.cache_dir}: {e}")
            return

        for cache_path in candidates:
            try:
                envelope = self.serializer.loads(cache_path.read_bytes())
            except (OSError, CorruptEntryError) as e:
                logger.debug(f"Sweep skipping unreadable file {cache_path.name}: {e}")
                continue

            expires_at = read_expires_at(envelope)
            if expires_at is None or not is_expired(expires_at, now):
                continue

            if self._delete_file(cache_path):
                removed += 1

        self._stats["expired_removed"] += removed
        logger.info(f"Swept {removed} expired entries from {self.cache_dir}")

    # ==================== Statistics ====================

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics for this store instance.

        Counters are kept in memory only; nothing besides entry files is
        written to the cache directory.
        """
        stats: Dict[str, Any] = dict(self._stats)
        stats["cache_dir"] = str(self.cache_dir)
        stats["default_ttl"] = self.default_ttl
        stats["serializer"] = self.serializer.name
        stats["entry_count"] = sum(1 for _ in self._iter_cache_files())

        total_requests = stats["cache_hits"] + stats["cache_misses"]
        stats["cache_hit_rate"] = (
            stats["cache_hits"] / total_requests if total_requests > 0 else 0.0
        )

        return stats

    def __repr__(self) -> str:
        return (
            f"CacheStore(cache_dir={str(self.cache_dir)!r}, "
            f"default_ttl={self.default_ttl}, serializer={self.serializer.name!r})"
        )
