"""Base classes and registry for envelope serializers."""

from filecache.base.registry import (
    SerializerRegistry,
    get_registry,
    get_serializer,
    register_serializer,
)
from filecache.base.serializer import BaseSerializer

__all__ = [
    "BaseSerializer",
    "SerializerRegistry",
    "get_registry",
    "get_serializer",
    "register_serializer",
]
