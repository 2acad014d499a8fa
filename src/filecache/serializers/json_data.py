"""Serializer for JSON-compatible values."""

from typing import Any

import orjson

from filecache.base.serializer import BaseSerializer
from filecache.cache.errors import CorruptEntryError


class JsonSerializer(BaseSerializer):
    """Serializer that stores envelopes as JSON using orjson.

    Handles dict, list, str, int, float, bool and None payloads, plus the
    types orjson encodes natively (datetimes, dataclasses, UUIDs). Decoded
    values come back as plain JSON types, so a tuple is returned as a list.
    Files are human-readable, which makes this the serializer of choice
    for API responses that are already JSON.

    Examples:
        >>> serializer = JsonSerializer()
        >>> serializer.dumps({"expires_at": 1, "data": None})
        b'{"expires_at":1,"data":null}'
    """

    @property
    def name(self) -> str:
        """Return serializer identifier."""
        return "json"

    def dumps(self, obj: Any) -> bytes:
        """Encode an envelope as JSON.

        Raises:
            TypeError: If the payload is not JSON-serializable
        """
        try:
            return orjson.dumps(obj)
        except orjson.JSONEncodeError as e:
            raise TypeError(f"Data is not JSON-serializable: {e}") from e

    def loads(self, data: bytes) -> Any:
        """Decode JSON bytes.

        Raises:
            CorruptEntryError: If the bytes are not valid JSON
        """
        try:
            return orjson.loads(data)
        except orjson.JSONDecodeError as e:
            raise CorruptEntryError(f"Cannot decode JSON cache data: {e}") from e
