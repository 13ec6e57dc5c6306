"""Search feed with local-first result merging."""

from __future__ import annotations

import logging

from news_feed.feeds.merge import unique_by
from news_feed.models import FeedState, LocationSignal
from news_feed.news.cache import NewsCache, search_key
from news_feed.news.gnews_client import FetchError, GNewsClient

logger = logging.getLogger(__name__)


class SearchFeed:
    """Free-text search that ranks matching local headlines first.

    With a known country, the country's headlines are filtered for the
    query and placed ahead of the global search results, then duplicates
    are dropped keeping the local copy. Without one, only the global search
    runs.
    """

    def __init__(
        self,
        client: GNewsClient,
        cache: NewsCache,
        country_code: str | None = None,
    ) -> None:
        self._client = client
        self._cache = cache
        self.country_code = country_code.lower() if country_code else None
        self.query = ""
        self.state = FeedState(country_code=self.country_code)

    def on_location_signal(self, signal: LocationSignal) -> None:
        """Prefer a geolocated country over the device region."""
        if signal.is_resolved:
            self.country_code = signal.country_code
            self.state.country_code = signal.country_code

    async def search(self, query: str | None = None) -> FeedState:
        if query is not None:
            self.query = query
        if not self.query.strip():
            return self.state

        self.state.is_loading = True
        self.state.error_message = None

        key = search_key(self.query, self.country_code)
        cached = self._cache.get(key)
        if cached is not None:
            self.state.articles = cached
            self.state.is_loading = False
            return self.state

        try:
            if self.country_code:
                local = await self._client.fetch_by_country(self.country_code)
                local_matches = [a for a in local if a.matches(self.query)]
                remote = await self._client.search(self.query)
                combined = unique_by(local_matches + remote, key=lambda a: a.article_id)
                logger.debug(
                    "Search %r: %d local matches, %d global results, %d merged",
                    self.query, len(local_matches), len(remote), len(combined),
                )
            else:
                combined = await self._client.search(self.query)
        except FetchError as e:
            logger.warning("Search for %r failed: %s", self.query, e)
            self.state.error_message = e.user_message
            self.state.is_loading = False
            return self.state

        self.state.articles = combined
        self.state.is_loading = False
        self._cache.put(key, combined)
        return self.state
