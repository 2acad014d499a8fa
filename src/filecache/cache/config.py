"""Cache configuration management."""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_CACHE_DIR = Path("cache")


@dataclass
class CacheConfig:
    """Configuration for the file cache.

    Attributes:
        cache_dir: Directory holding one file per cached key
        default_ttl: Default time-to-live in seconds (5 minutes)
        serializer: Name of a registered serializer ('pickle', 'json', 'joblib')
        lock_timeout: Seconds to wait for a key's write lock before giving up
        strict_mode: If True, failed writes raise CacheWriteError; if False,
            ``put`` logs the failure and returns False
    """

    cache_dir: Path = DEFAULT_CACHE_DIR
    default_ttl: int = 300  # 5 minutes
    serializer: str = "pickle"
    lock_timeout: float = 10.0
    strict_mode: bool = False

    def __post_init__(self):
        """Normalize cache_dir to a Path and validate numeric settings."""
        if self.cache_dir is None:
            self.cache_dir = DEFAULT_CACHE_DIR
        self.cache_dir = Path(self.cache_dir).expanduser()

        if self.default_ttl < 0:
            raise ValueError(f"default_ttl must be non-negative, got {self.default_ttl}")
        if self.lock_timeout < 0:
            raise ValueError(
                f"lock_timeout must be non-negative, got {self.lock_timeout}"
            )

    @classmethod
    def load(cls, config_path: Path) -> "CacheConfig":
        """Load configuration from a JSON file.

        Args:
            config_path: Path to config file

        Returns:
            CacheConfig instance (defaults if the file does not exist)
        """
        config_path = Path(config_path)
        if not config_path.exists():
            return cls()

        with open(config_path, "r") as f:
            data = json.load(f)

        if "cache_dir" in data:
            data["cache_dir"] = Path(data["cache_dir"])

        return cls(**data)

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save configuration to a JSON file.

        Args:
            config_path: Path to config file. If None, writes
                ``filecache.json`` inside the cache directory.
        """
        if config_path is None:
            config_path = self.cache_dir / "filecache.json"
        config_path = Path(config_path)

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "cache_dir": str(self.cache_dir),
            "default_ttl": self.default_ttl,
            "serializer": self.serializer,
            "lock_timeout": self.lock_timeout,
            "strict_mode": self.strict_mode,
        }

        with open(config_path, "w") as f:
            json.dump(data, f, indent=2)

    @classmethod
    def from_env(cls) -> "CacheConfig":
        """Create configuration from environment variables.

        Environment variables:
            FILECACHE_DIR: Cache directory path
            FILECACHE_TTL: Default TTL in seconds
            FILECACHE_SERIALIZER: Serializer name
            FILECACHE_LOCK_TIMEOUT: Write lock timeout in seconds
            FILECACHE_STRICT: Raise on write failures (true/false)

        Returns:
            CacheConfig instance
        """
        config = cls()

        if os.getenv("FILECACHE_DIR"):
            config.cache_dir = Path(os.getenv("FILECACHE_DIR")).expanduser()

        if os.getenv("FILECACHE_TTL"):
            config.default_ttl = int(os.getenv("FILECACHE_TTL"))

        if os.getenv("FILECACHE_SERIALIZER"):
            config.serializer = os.getenv("FILECACHE_SERIALIZER")

        if os.getenv("FILECACHE_LOCK_TIMEOUT"):
            config.lock_timeout = float(os.getenv("FILECACHE_LOCK_TIMEOUT"))

        if os.getenv("FILECACHE_STRICT"):
            config.strict_mode = os.getenv("FILECACHE_STRICT", "").lower() == "true"

        return config
