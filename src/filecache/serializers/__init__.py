"""Built-in envelope serializers.

This module contains the built-in serializers and registers them with the
SerializerRegistry on import.

Available serializers:
- PickleSerializer: Any picklable value (pickle, default)
- JsonSerializer: JSON-compatible values via orjson (json)
- JoblibSerializer: Compressed joblib dumps for large payloads (joblib)

Examples:
    >>> from filecache.base.registry import get_serializer
    >>> get_serializer('json')
    JsonSerializer(name='json')
"""

from filecache.base.registry import register_serializer
from filecache.serializers.joblib_data import JoblibSerializer
from filecache.serializers.json_data import JsonSerializer
from filecache.serializers.pickle_data import PickleSerializer

register_serializer(PickleSerializer())
register_serializer(JsonSerializer())
register_serializer(JoblibSerializer())

__all__ = [
    "PickleSerializer",
    "JsonSerializer",
    "JoblibSerializer",
]
