"""News fetching and caching components."""

from news_feed.news.cache import NewsCache
from news_feed.news.gnews_client import (
    DecodingError,
    FetchError,
    GNewsClient,
    TransportError,
)

__all__ = ["GNewsClient", "NewsCache", "FetchError", "TransportError", "DecodingError"]
