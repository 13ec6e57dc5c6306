"""Global headlines feed."""

from __future__ import annotations

import logging

from news_feed.models import FeedState
from news_feed.news.cache import GLOBAL_NEWS_KEY, NewsCache
from news_feed.news.gnews_client import FetchError, GNewsClient

logger = logging.getLogger(__name__)


class GlobalFeed:
    """Cache-first top headlines with no further fallback."""

    def __init__(self, client: GNewsClient, cache: NewsCache) -> None:
        self._client = client
        self._cache = cache
        self.state = FeedState()

    async def fetch_news(self) -> FeedState:
        self.state.is_loading = True
        self.state.error_message = None

        cached = self._cache.get(GLOBAL_NEWS_KEY)
        if cached is not None:
            self.state.articles = cached
            self.state.is_loading = False
            return self.state

        try:
            articles = await self._client.fetch_global()
        except FetchError as e:
            logger.warning("Global headlines failed: %s", e)
            self.state.error_message = e.user_message
            self.state.is_loading = False
            return self.state

        self.state.articles = articles
        self.state.is_loading = False
        self._cache.put(GLOBAL_NEWS_KEY, articles)
        return self.state
