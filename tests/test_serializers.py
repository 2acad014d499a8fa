"""Tests for envelope serializers and the serializer registry."""

import pickle
from typing import Any

import pytest

from filecache.base.registry import (
    SerializerRegistry,
    get_registry,
    get_serializer,
)
from filecache.base.serializer import BaseSerializer
from filecache.cache.errors import CorruptEntryError
from filecache.cache.store import CacheStore
from filecache.serializers import JoblibSerializer, JsonSerializer, PickleSerializer


class ReprSerializer(BaseSerializer):
    """Toy serializer storing repr() text, for registry tests."""

    @property
    def name(self) -> str:
        return "repr"

    def dumps(self, obj: Any) -> bytes:
        return repr(obj).encode("utf-8")

    def loads(self, data: bytes) -> Any:
        import ast

        try:
            return ast.literal_eval(data.decode("utf-8"))
        except (ValueError, SyntaxError, UnicodeDecodeError) as e:
            raise CorruptEntryError(str(e)) from e


class TestSerializerRegistry:
    """Test serializer registration and lookup."""

    def test_builtins_registered(self):
        """Test that built-in serializers are available by name."""
        registry = get_registry()

        for name in ("pickle", "json", "joblib"):
            assert registry.is_registered(name)

        assert isinstance(get_serializer("pickle"), PickleSerializer)
        assert isinstance(get_serializer("json"), JsonSerializer)
        assert isinstance(get_serializer("joblib"), JoblibSerializer)

    def test_register_and_get(self):
        """Test registering a custom serializer on a fresh registry."""
        registry = SerializerRegistry()
        serializer = ReprSerializer()
        registry.register(serializer)

        assert registry.get("repr") is serializer
        assert registry.list_names() == ["repr"]

    def test_duplicate_registration(self):
        """Test that a name can only be registered once."""
        registry = SerializerRegistry()
        registry.register(ReprSerializer())

        with pytest.raises(ValueError, match="already registered"):
            registry.register(ReprSerializer())

    def test_unknown_name(self):
        """Test that unknown names list the available serializers."""
        registry = SerializerRegistry()
        registry.register(ReprSerializer())

        with pytest.raises(KeyError, match="Available serializers: repr"):
            registry.get("yaml")

    def test_custom_serializer_backs_store(self, tmp_path):
        """Test that any BaseSerializer can back a store."""
        store = CacheStore(tmp_path / "cache", serializer=ReprSerializer())

        store.put("k", {"a": [1, 2]})

        assert store.get("k") == {"a": [1, 2]}
        assert b"'data'" in store.path_for("k").read_bytes()

    def test_repr(self):
        """Test serializer repr."""
        assert repr(JsonSerializer()) == "JsonSerializer(name='json')"


class TestPickleSerializer:
    """Test the pickle serializer."""

    def test_round_trip(self):
        """Test encoding and decoding an envelope."""
        serializer = PickleSerializer()
        envelope = {"expires_at": 1, "data": {"t": (1, 2)}}

        assert serializer.loads(serializer.dumps(envelope)) == envelope

    def test_protocol(self):
        """Test that the configured protocol is used."""
        data = PickleSerializer(protocol=2).dumps({"a": 1})
        assert data[:2] == b"\x80\x02"

    @pytest.mark.parametrize("data", [b"", b"garbage", pickle.dumps([1, 2])[:-3]])
    def test_corrupt(self, data):
        """Test that undecodable bytes raise CorruptEntryError."""
        with pytest.raises(CorruptEntryError):
            PickleSerializer().loads(data)


class TestJsonSerializer:
    """Test the orjson-backed serializer."""

    def test_round_trip(self):
        """Test encoding and decoding an envelope."""
        serializer = JsonSerializer()
        envelope = {"expires_at": 1, "data": [{"id": 1, "name": "Alice"}]}

        assert serializer.loads(serializer.dumps(envelope)) == envelope

    def test_tuples_become_lists(self):
        """Test that decoded values are plain JSON types."""
        serializer = JsonSerializer()
        assert serializer.loads(serializer.dumps({"data": (1, 2)})) == {"data": [1, 2]}

    def test_unserializable(self):
        """Test that non-JSON payloads raise TypeError."""
        with pytest.raises(TypeError, match="not JSON-serializable"):
            JsonSerializer().dumps({"data": object()})

    @pytest.mark.parametrize("data", [b"", b"{not json", b"\xff\xfe"])
    def test_corrupt(self, data):
        """Test that invalid JSON raises CorruptEntryError."""
        with pytest.raises(CorruptEntryError):
            JsonSerializer().loads(data)


class TestJoblibSerializer:
    """Test the joblib serializer."""

    def test_round_trip(self):
        """Test encoding and decoding an envelope."""
        serializer = JoblibSerializer()
        envelope = {"expires_at": 1, "data": list(range(1000))}

        assert serializer.loads(serializer.dumps(envelope)) == envelope

    def test_compression_shrinks_repetitive_data(self):
        """Test that compressed dumps are smaller than plain pickles."""
        envelope = {"expires_at": 1, "data": ["same value"] * 5000}

        compressed = JoblibSerializer(compress=3).dumps(envelope)
        plain = pickle.dumps(envelope)

        assert len(compressed) < len(plain)

    @pytest.mark.parametrize("data", [b"", b"garbage"])
    def test_corrupt(self, data):
        """Test that undecodable bytes raise CorruptEntryError."""
        with pytest.raises(CorruptEntryError):
            JoblibSerializer().loads(data)
