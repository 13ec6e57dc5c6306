"""The three user-facing news feeds."""

from news_feed.feeds.global_feed import GlobalFeed
from news_feed.feeds.location_feed import LocationFeed, LocationSource, STRATEGIES
from news_feed.feeds.merge import unique_by
from news_feed.feeds.search_feed import SearchFeed

__all__ = [
    "GlobalFeed",
    "LocationFeed",
    "LocationSource",
    "STRATEGIES",
    "SearchFeed",
    "unique_by",
]
