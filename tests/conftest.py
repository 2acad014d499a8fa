"""Shared fixtures for filecache tests."""

import logging
import os
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest


class FakeClock:
    """Manually advanced clock returning seconds since epoch."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def temp_cache_dir():
    """Create temporary cache directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "cache"


@pytest.fixture
def clock():
    """Provide a controllable clock."""
    return FakeClock()


@pytest.fixture(autouse=True)
def clean_env():
    """Keep FILECACHE_* variables from the host out of tests."""
    filtered = {k: v for k, v in os.environ.items() if not k.startswith("FILECACHE_")}
    with patch.dict(os.environ, filtered, clear=True):
        yield


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo CLI logging setup so caplog keeps seeing filecache records."""
    yield
    package_logger = logging.getLogger("filecache")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True
