"""Tests for the global headlines feed."""

from __future__ import annotations

import asyncio

from conftest import FakeClock, FakeNewsClient, make_article
from news_feed.feeds.global_feed import GlobalFeed
from news_feed.news.cache import GLOBAL_NEWS_KEY, NewsCache
from news_feed.news.gnews_client import DecodingError


class TestGlobalFeed:
    def test_fetch_and_cache(self, fake_client: FakeNewsClient, cache: NewsCache) -> None:
        fake_client.global_result = [make_article("a"), make_article("b")]
        feed = GlobalFeed(fake_client, cache)

        state = asyncio.run(feed.fetch_news())

        assert state.articles == [make_article("a"), make_article("b")]
        assert state.is_loading is False
        assert state.error_message is None
        assert cache.get(GLOBAL_NEWS_KEY) == state.articles

    def test_cache_hit_skips_network(self, fake_client: FakeNewsClient, cache: NewsCache) -> None:
        cache.put(GLOBAL_NEWS_KEY, [make_article("cached")])
        feed = GlobalFeed(fake_client, cache)

        state = asyncio.run(feed.fetch_news())

        assert state.articles == [make_article("cached")]
        assert fake_client.calls == []

    def test_expired_cache_refetches(
        self, fake_client: FakeNewsClient, cache: NewsCache, clock: FakeClock
    ) -> None:
        cache.put(GLOBAL_NEWS_KEY, [make_article("old")])
        clock.advance(301)
        fake_client.global_result = [make_article("new")]
        feed = GlobalFeed(fake_client, cache)

        state = asyncio.run(feed.fetch_news())

        assert state.articles == [make_article("new")]

    def test_error_has_no_fallback(self, fake_client: FakeNewsClient, cache: NewsCache) -> None:
        fake_client.global_result = DecodingError("garbage")
        feed = GlobalFeed(fake_client, cache)

        state = asyncio.run(feed.fetch_news())

        assert state.error_message == DecodingError.user_message
        assert state.articles == []
        assert state.is_loading is False
        assert fake_client.calls == [("global",)]
        assert cache.get(GLOBAL_NEWS_KEY) is None
