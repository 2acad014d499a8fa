"""Serializer for arbitrary picklable values."""

import pickle
from typing import Any

from filecache.base.serializer import BaseSerializer
from filecache.cache.errors import CorruptEntryError


class PickleSerializer(BaseSerializer):
    """Serializer backed by the standard pickle protocol.

    This is the default serializer: it stores any picklable payload
    (dicts, lists, dataclasses, datetimes, ...) without constraining its
    shape. Only read cache directories this process owns, since unpickling
    foreign files can execute code.

    Examples:
        >>> serializer = PickleSerializer()
        >>> serializer.loads(serializer.dumps({"expires_at": 1, "data": [1, 2]}))
        {'expires_at': 1, 'data': [1, 2]}
    """

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL):
        self.protocol = protocol

    @property
    def name(self) -> str:
        """Return serializer identifier."""
        return "pickle"

    def dumps(self, obj: Any) -> bytes:
        """Pickle an envelope to bytes."""
        return pickle.dumps(obj, protocol=self.protocol)

    def loads(self, data: bytes) -> Any:
        """Unpickle bytes, reporting any decoding failure as corruption.

        Raises:
            CorruptEntryError: If the bytes are not a readable pickle
        """
        if not data:
            raise CorruptEntryError("Empty cache file")
        try:
            return pickle.loads(data)
        except Exception as e:
            # Garbage input can fail with almost any exception type
            raise CorruptEntryError(f"Cannot unpickle cache data: {e}") from e
