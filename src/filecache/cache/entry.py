"""Cache entry envelope.

Every cache file holds one serialized envelope::

    {"expires_at": <int seconds since epoch>, "data": <payload>}

The envelope carries no header or magic number; whatever the configured
serializer produces is written as-is. Anything that does not decode to a
mapping with both fields is treated as corrupt.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

from filecache.cache.errors import CorruptEntryError
from filecache.cache.validation import is_expired

T = TypeVar("T")

EXPIRES_AT_FIELD = "expires_at"
DATA_FIELD = "data"


def _is_timestamp(value: Any) -> bool:
    # bool is an int subclass but never a valid timestamp
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # ints are always finite; isfinite would overflow on huge ones
    return isinstance(value, int) or math.isfinite(value)


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value paired with its absolute expiration time.

    Attributes:
        expires_at: Expiration time in whole seconds since epoch
        data: The cached payload
    """

    expires_at: int
    data: T

    def is_expired(self, now: float) -> bool:
        """Check whether this entry has expired at ``now``."""
        return is_expired(self.expires_at, now)

    def to_dict(self) -> Dict[str, Any]:
        """Build the envelope mapping handed to the serializer."""
        return {EXPIRES_AT_FIELD: self.expires_at, DATA_FIELD: self.data}

    @classmethod
    def from_dict(cls, envelope: Any) -> "CacheEntry[Any]":
        """Validate a decoded envelope and build an entry from it.

        Args:
            envelope: Object produced by the serializer

        Returns:
            CacheEntry instance

        Raises:
            CorruptEntryError: If the envelope is not a mapping, is missing
                either field, or has a non-numeric or non-finite expiration
        """
        if not isinstance(envelope, dict):
            raise CorruptEntryError(
                f"Envelope must be a mapping, got {type(envelope).__name__}"
            )

        missing = [f for f in (EXPIRES_AT_FIELD, DATA_FIELD) if f not in envelope]
        if missing:
            raise CorruptEntryError(f"Envelope missing fields: {', '.join(missing)}")

        expires_at = envelope[EXPIRES_AT_FIELD]
        if not _is_timestamp(expires_at):
            raise CorruptEntryError(
                f"Envelope expiration must be a finite number, got {expires_at!r}"
            )

        return cls(expires_at=math.ceil(expires_at), data=envelope[DATA_FIELD])


def read_expires_at(envelope: Any) -> Optional[int]:
    """Extract the expiration from a decoded envelope, if it has a usable one.

    Unlike ``CacheEntry.from_dict`` this does not require the payload
    field; it is used by sweeps, which only need the timestamp.

    Returns:
        Expiration in seconds since epoch, or None if absent or invalid
    """
    if not isinstance(envelope, dict):
        return None
    expires_at = envelope.get(EXPIRES_AT_FIELD)
    if not _is_timestamp(expires_at):
        return None
    return math.ceil(expires_at)
