"""In-memory expiring cache for news responses."""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from news_feed.models import Article

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0
DEFAULT_MAX_ENTRIES = 50

GLOBAL_NEWS_KEY = "global_news"
NO_LOCATION_SENTINEL = "global"


def location_key(country_code: str) -> str:
    """Build the cache key for a country's location feed."""
    return f"location_{country_code}"


def search_key(query: str, country_code: str | None) -> str:
    """Build the cache key for a search, scoped to its location context."""
    return f"search_{query}_{country_code or NO_LOCATION_SENTINEL}"


@dataclass(frozen=True)
class CacheEntry:
    """Articles cached under one key, with the time they were written."""

    key: str
    articles: tuple[Article, ...]
    timestamp: float


class NewsCache:
    """Key -> articles cache with a fixed TTL and a bounded entry count.

    Entries are replaced whole on every ``put``. When the cache is full the
    least recently written entry is evicted. Stale entries are purged lazily
    on ``get``.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._ttl_seconds = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: str) -> list[Article] | None:
        """Return the cached articles for ``key`` if present and fresh.

        A stale entry is removed and ``None`` returned.
        """
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache miss for %s", key)
            return None

        age = self._clock() - entry.timestamp
        if age > self._ttl_seconds:
            del self._entries[key]
            logger.debug("Cache entry %s expired after %.1fs", key, age)
            return None

        logger.debug("Cache hit for %s (%d articles)", key, len(entry.articles))
        return list(entry.articles)

    def put(self, key: str, articles: list[Article]) -> None:
        """Insert or replace the entry for ``key`` with the current time."""
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Cache full, evicted %s", evicted)

        self._entries[key] = CacheEntry(
            key=key, articles=tuple(articles), timestamp=self._clock()
        )

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()
