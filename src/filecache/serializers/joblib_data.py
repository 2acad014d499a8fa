"""Serializer for large payloads using joblib compression."""

import io
from typing import Any, Union

import joblib

from filecache.base.serializer import BaseSerializer
from filecache.cache.errors import CorruptEntryError


class JoblibSerializer(BaseSerializer):
    """Serializer backed by joblib, with compression.

    Suited to big responses (large nested lists, numpy arrays) where the
    compressed file is much smaller than a plain pickle. Same trust
    caveat as PickleSerializer: joblib files are pickles underneath.

    Args:
        compress: joblib compression setting (0-9, or a (method, level) tuple)
    """

    def __init__(self, compress: Union[int, tuple] = 3):
        self.compress = compress

    @property
    def name(self) -> str:
        """Return serializer identifier."""
        return "joblib"

    def dumps(self, obj: Any) -> bytes:
        """Dump an envelope to compressed joblib bytes."""
        buffer = io.BytesIO()
        joblib.dump(obj, buffer, compress=self.compress)
        return buffer.getvalue()

    def loads(self, data: bytes) -> Any:
        """Load joblib bytes.

        Raises:
            CorruptEntryError: If the bytes are not a readable joblib dump
        """
        if not data:
            raise CorruptEntryError("Empty cache file")
        try:
            return joblib.load(io.BytesIO(data))
        except Exception as e:
            raise CorruptEntryError(f"Cannot load joblib cache data: {e}") from e
