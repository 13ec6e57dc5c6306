"""News Feed - Cached global, location-aware and search news from GNews."""

from news_feed.models import Article, FeedState, LocationSignal
from news_feed.services import Services, build_services

__all__ = ["Article", "FeedState", "LocationSignal", "Services", "build_services"]
