"""Serializer registry.

This module provides a global registry for registering and retrieving
serializers by name, so configurations can name a serializer as a string.
"""

from typing import Dict, List

from filecache.base.serializer import BaseSerializer


class SerializerRegistry:
    """Registry of envelope serializers keyed by name.

    Examples:
        >>> registry = SerializerRegistry()
        >>> registry.register(PickleSerializer())
        >>> serializer = registry.get('pickle')
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._serializers: Dict[str, BaseSerializer] = {}

    def register(self, serializer: BaseSerializer) -> None:
        """Register a serializer.

        Args:
            serializer: Serializer instance to register

        Raises:
            ValueError: If name already registered
        """
        name = serializer.name
        if name in self._serializers:
            raise ValueError(
                f"Serializer already registered for name: {name}. "
                f"Cannot register {serializer.__class__.__name__}."
            )
        self._serializers[name] = serializer

    def get(self, name: str) -> BaseSerializer:
        """Get serializer by name.

        Args:
            name: Serializer name (e.g., 'pickle')

        Returns:
            Serializer instance

        Raises:
            KeyError: If no serializer registered under name
        """
        if name not in self._serializers:
            available = ", ".join(sorted(self._serializers.keys()))
            raise KeyError(
                f"No serializer registered for name: '{name}'. "
                f"Available serializers: {available}"
            )
        return self._serializers[name]

    def list_names(self) -> List[str]:
        """List all registered serializer names."""
        return list(self._serializers.keys())

    def is_registered(self, name: str) -> bool:
        """Check if a serializer is registered under the given name."""
        return name in self._serializers


# Global singleton registry
_registry = SerializerRegistry()


def get_registry() -> SerializerRegistry:
    """Get the global serializer registry."""
    return _registry


def register_serializer(serializer: BaseSerializer) -> None:
    """Register a serializer in the global registry.

    Raises:
        ValueError: If name already registered
    """
    _registry.register(serializer)


def get_serializer(name: str) -> BaseSerializer:
    """Get serializer by name from the global registry.

    Raises:
        KeyError: If no serializer registered under name
    """
    return _registry.get(name)
