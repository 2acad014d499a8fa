"""Base serializer interface for cache envelopes.

This module defines the abstract base class every serializer must implement.
Serializers turn an envelope mapping into bytes for a cache file and back.
The store never inspects the bytes itself, so any serializer that satisfies
this contract can back a cache.
"""

from abc import ABC, abstractmethod
from typing import Any


class BaseSerializer(ABC):
    """Abstract base class for envelope serializers.

    Serializers are responsible for:
    1. Naming themselves (name), so configs can refer to them
    2. Encoding an envelope to bytes (dumps)
    3. Decoding bytes back to an envelope (loads)

    ``loads`` must report undecodable input by raising CorruptEntryError
    and nothing else, so that foreign or truncated files are recognizably
    invalid instead of crashing the caller.

    Examples:
        Create a custom serializer:
        >>> class UpperSerializer(BaseSerializer):
        ...     @property
        ...     def name(self) -> str:
        ...         return "upper"
        ...
        ...     def dumps(self, obj):
        ...         ...
        ...
        ...     def loads(self, data):
        ...         ...
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this serializer.

        Returns:
            Serializer name (e.g., 'pickle', 'json')
        """
        pass

    @abstractmethod
    def dumps(self, obj: Any) -> bytes:
        """Encode an envelope to bytes.

        Args:
            obj: Envelope mapping to encode

        Returns:
            Encoded bytes

        Raises:
            TypeError: If the payload cannot be represented by this serializer
        """
        pass

    @abstractmethod
    def loads(self, data: bytes) -> Any:
        """Decode bytes produced by ``dumps``.

        Args:
            data: Raw file contents

        Returns:
            Decoded object (not necessarily a valid envelope)

        Raises:
            CorruptEntryError: If the bytes cannot be decoded
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
