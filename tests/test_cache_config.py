"""Unit tests for cache configuration."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from filecache.cache.config import CacheConfig


class TestCacheConfigDefaults:
    """Test default configuration values."""

    def test_defaults(self):
        """Test default settings."""
        config = CacheConfig()

        assert config.cache_dir == Path("cache")
        assert config.default_ttl == 300
        assert config.serializer == "pickle"
        assert config.lock_timeout == 10.0
        assert config.strict_mode is False

    def test_string_cache_dir_converted(self):
        """Test that a string cache_dir becomes a Path."""
        config = CacheConfig(cache_dir="~/somewhere")

        assert isinstance(config.cache_dir, Path)
        assert "~" not in str(config.cache_dir)

    def test_none_cache_dir_uses_default(self):
        """Test that None falls back to the default directory."""
        assert CacheConfig(cache_dir=None).cache_dir == Path("cache")

    def test_negative_ttl_rejected(self):
        """Test TTL validation."""
        with pytest.raises(ValueError, match="default_ttl"):
            CacheConfig(default_ttl=-5)

    def test_negative_lock_timeout_rejected(self):
        """Test lock timeout validation."""
        with pytest.raises(ValueError, match="lock_timeout"):
            CacheConfig(lock_timeout=-1)


class TestCacheConfigFile:
    """Test saving and loading configuration files."""

    def test_save_and_load(self, tmp_path):
        """Test that saved settings load back unchanged."""
        config = CacheConfig(
            cache_dir=tmp_path / "cache",
            default_ttl=60,
            serializer="json",
            lock_timeout=2.5,
            strict_mode=True,
        )
        config_path = tmp_path / "config" / "filecache.json"
        config.save(config_path)

        loaded = CacheConfig.load(config_path)

        assert loaded == config

    def test_save_default_location(self, tmp_path):
        """Test that save without a path writes into the cache directory."""
        config = CacheConfig(cache_dir=tmp_path / "cache")
        config.save()

        assert (tmp_path / "cache" / "filecache.json").exists()

    def test_load_missing_file(self, tmp_path):
        """Test that a missing file yields defaults."""
        assert CacheConfig.load(tmp_path / "missing.json") == CacheConfig()

    def test_load_partial_file(self, tmp_path):
        """Test that unspecified settings keep their defaults."""
        config_path = tmp_path / "partial.json"
        config_path.write_text('{"default_ttl": 30}')

        config = CacheConfig.load(config_path)

        assert config.default_ttl == 30
        assert config.serializer == "pickle"


class TestCacheConfigEnv:
    """Test configuration from environment variables."""

    def test_from_env(self, tmp_path):
        """Test that FILECACHE_* variables are applied."""
        env = {
            "FILECACHE_DIR": str(tmp_path / "envcache"),
            "FILECACHE_TTL": "120",
            "FILECACHE_SERIALIZER": "joblib",
            "FILECACHE_LOCK_TIMEOUT": "1.5",
            "FILECACHE_STRICT": "true",
        }
        with patch.dict(os.environ, env):
            config = CacheConfig.from_env()

        assert config.cache_dir == tmp_path / "envcache"
        assert config.default_ttl == 120
        assert config.serializer == "joblib"
        assert config.lock_timeout == 1.5
        assert config.strict_mode is True

    def test_from_env_empty(self):
        """Test that no variables means defaults."""
        assert CacheConfig.from_env() == CacheConfig()
