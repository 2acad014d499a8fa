"""Fetch-and-cache orchestration for (simulated) API responses.

The cache itself knows nothing about URLs or TTL policy. This module
derives cache keys from request URLs, chooses the TTL per call site and
falls back to the fetcher on a miss. No network I/O happens here: the
default fetcher returns canned responses for two example endpoints.
"""

import hashlib
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from filecache.cache.store import CacheStore

logger = logging.getLogger(__name__)

API_CACHE_TTL = 300  # 5 minutes
CACHE_KEY_PREFIX = "api_data_"

USERS_URL = "https://example.com/api/users"
PRODUCTS_URL = "https://example.com/api/products"

_SIMULATED_RESPONSES: Dict[str, List[Dict[str, Any]]] = {
    USERS_URL: [
        {"id": 1, "name": "Alice"},
        {"id": 2, "name": "Bob"},
    ],
    PRODUCTS_URL: [
        {"id": 101, "name": "Laptop"},
        {"id": 102, "name": "Mouse"},
    ],
}


@dataclass
class FetchResult:
    """Outcome of a fetch_and_cache call.

    Attributes:
        data: Response data, or None if the fetch failed
        from_cache: True if served from the cache
        cached: True if a freshly fetched response was stored
    """

    data: Optional[Any]
    from_cache: bool = False
    cached: bool = False


def make_cache_key(api_url: str) -> str:
    """Derive a cache key from an API URL.

    Examples:
        >>> make_cache_key("https://example.com/api/users").startswith("api_data_")
        True
    """
    return CACHE_KEY_PREFIX + hashlib.md5(api_url.encode("utf-8")).hexdigest()


def simulate_api_fetch(api_url: str) -> Optional[List[Dict[str, Any]]]:
    """Pretend to fetch an API endpoint.

    Args:
        api_url: URL to "fetch"

    Returns:
        A copy of the canned response, or None for unknown URLs
    """
    response = _SIMULATED_RESPONSES.get(api_url)
    if response is None:
        return None
    return [dict(record) for record in response]


def fetch_and_cache(
    api_url: str,
    cache: CacheStore,
    ttl: Optional[int] = API_CACHE_TTL,
    fetcher: Callable[[str], Optional[Any]] = simulate_api_fetch,
) -> FetchResult:
    """Return API data from the cache, fetching and caching it on a miss.

    Empty or failed responses are not cached, so the next call retries
    the fetch.

    Args:
        api_url: URL of the API endpoint
        cache: Store to read from and write to
        ttl: TTL for freshly fetched data (None uses the store default)
        fetcher: Callable returning the response for a URL, or None

    Returns:
        FetchResult describing where the data came from
    """
    cache_key = make_cache_key(api_url)

    cached_data = cache.get(cache_key)
    if cached_data is not None:
        logger.info(f"Data retrieved from cache for: {api_url}")
        return FetchResult(data=cached_data, from_cache=True)

    logger.info(f"Fetching API data for: {api_url}")
    response = fetcher(api_url)

    if not response:
        logger.warning(f"API fetch failed for: {api_url}")
        return FetchResult(data=None)

    stored = cache.put(cache_key, response, ttl=ttl)
    if not stored:
        logger.warning(f"Proceeding without caching response for: {api_url}")
    return FetchResult(data=response, cached=stored)
