"""Location-based news feed with tiered fallbacks.

Two producers feed this view: the device region (known immediately, no
permission needed) and the ``LocationResolver`` (precise, arrives later or
not at all). Both trigger ``fetch_news_with_fallback``, which resolves a
country through, in order:

1. the ``location_<country>`` cache entry,
2. country headlines for each of ``STRATEGIES``, tried one at a time until
   one returns articles (errors are logged and skipped),
3. global headlines truncated to ``GLOBAL_FALLBACK_LIMIT``,
4. a single terminal error message.

A result from the geolocation producer always replaces a device-region
result; a device-region result never replaces a geolocation result once it
has been shown. Two results from the same producer apply in completion
order. When the device-region fetch and the geolocation fetch are both in
flight, whichever completes first is shown until the other lands, so a
late device-region completion can briefly pair its articles with the
geolocated ``country_code``. This race is known and accepted.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import IntEnum

from news_feed.location.resolver import LocationResolver
from news_feed.models import Article, FeedState, LocationSignal
from news_feed.news.cache import NewsCache, location_key
from news_feed.news.gnews_client import FetchError, GNewsClient

logger = logging.getLogger(__name__)

GLOBAL_FALLBACK_LIMIT = 10
GLOBAL_FALLBACK_TOPIC = "global"
UNAVAILABLE_MESSAGE = (
    "Unable to load news at this time. "
    "Please check your internet connection and try again."
)
NO_LOCATION_MESSAGE = "Could not determine location or device region."


@dataclass(frozen=True)
class Strategy:
    """One topic variant of a country headlines request."""

    topic: str | None
    description: str

    @property
    def label(self) -> str:
        return self.topic or "headlines"


STRATEGIES: tuple[Strategy, ...] = (
    Strategy(None, "general headlines"),
    Strategy("general", "general news"),
    Strategy("world", "world news"),
    Strategy("breaking-news", "breaking news"),
    Strategy("nation", "national news"),
)


class LocationSource(IntEnum):
    """Where a country code came from; higher values are more authoritative."""

    DEVICE_REGION = 1
    GEOLOCATION = 2


@dataclass(frozen=True)
class LocationOutcome:
    """What the fallback procedure produced for one country."""

    articles: list[Article] = field(default_factory=list)
    topic: str | None = None
    from_cache: bool = False
    is_global_fallback: bool = False
    error_message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error_message is None


class LocationFeed:
    """Location-aware news combining device region and geolocation."""

    def __init__(
        self,
        client: GNewsClient,
        cache: NewsCache,
        resolver: LocationResolver,
        device_region: str | None = None,
    ) -> None:
        self._client = client
        self._cache = cache
        self._resolver = resolver
        self._device_region = device_region.lower() if device_region else None
        self._shown_source: LocationSource | None = None
        self._in_flight = 0
        self.state = FeedState(topic="general", location_status="Detecting location...")
        resolver.subscribe(self._on_location_signal)

    @property
    def device_region(self) -> str | None:
        """Region code read from the device, if one is configured."""
        return self._device_region

    @property
    def shown_source(self) -> LocationSource | None:
        """Producer of the result currently displayed, if any."""
        return self._shown_source

    async def start(self) -> FeedState:
        """Load device-region news immediately and detect location concurrently.

        Without a device region and with permission still undecided, the
        state stays loading until the resolver emits a signal.
        """
        tasks = []
        if self._device_region:
            self.state.country_code = self._device_region
            self.state.location_status = f"Using device region: {self._device_region.upper()}"
            tasks.append(
                self.fetch_news_with_fallback(self._device_region, LocationSource.DEVICE_REGION)
            )
        else:
            self.state.is_loading = True
            self.state.location_status = "Detecting location..."

        tasks.append(self._resolver.request_location())
        await asyncio.gather(*tasks)
        return self.state

    async def refresh(self) -> FeedState:
        """Re-request location and reload the current country, if any."""
        tasks = [self._resolver.request_location()]
        if self.state.country_code:
            source = self._shown_source or LocationSource.DEVICE_REGION
            tasks.insert(0, self.fetch_news_with_fallback(self.state.country_code, source))
        else:
            self.state.is_loading = True
            self.state.location_status = "Detecting location..."

        await asyncio.gather(*tasks)
        return self.state

    async def _on_location_signal(self, signal: LocationSignal) -> None:
        if signal.is_resolved:
            code = signal.country_code
            self.state.location_status = f"Location detected: {code.upper()}"
            await self.fetch_news_with_fallback(code, LocationSource.GEOLOCATION)
            return

        if self._device_region:
            logger.debug(
                "Location failed (%s); keeping device region %s", signal.error, self._device_region
            )
            return

        logger.warning("Location failed and no device region is configured: %s", signal.error)
        self.state.error_message = NO_LOCATION_MESSAGE
        self.state.location_status = "Location unavailable"
        self.state.is_loading = self._in_flight > 0

    def _accepts(self, source: LocationSource) -> bool:
        return self._shown_source is None or source >= self._shown_source

    async def fetch_news_with_fallback(
        self,
        country: str,
        source: LocationSource = LocationSource.GEOLOCATION,
    ) -> FeedState:
        """Resolve news for ``country`` and show it unless a better source is shown."""
        if self._accepts(source):
            self.state.country_code = country
            self.state.error_message = None
        self._in_flight += 1
        self.state.is_loading = True

        try:
            outcome = await self.load_country(country)
        finally:
            self._in_flight -= 1

        if self._accepts(source):
            self._apply(outcome, source)
        else:
            logger.debug(
                "Discarding %s result for %s; %s result already shown",
                source.name, country, self._shown_source.name,
            )
        self.state.is_loading = self._in_flight > 0
        return self.state

    def _apply(self, outcome: LocationOutcome, source: LocationSource) -> None:
        if not outcome.succeeded:
            self.state.error_message = outcome.error_message
            return

        self.state.articles = outcome.articles
        if outcome.topic is not None:
            self.state.topic = outcome.topic
        if outcome.is_global_fallback:
            self.state.location_status = "Showing global news (local news unavailable)"
        self._shown_source = source

    async def load_country(self, country: str) -> LocationOutcome:
        """Run the cache/strategy/global fallback chain for one country.

        Strategies run sequentially and stop at the first non-empty result.
        """
        key = location_key(country)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Using cached news for %s", country)
            return LocationOutcome(articles=cached, from_cache=True)

        for strategy in STRATEGIES:
            try:
                articles = await self._client.fetch_by_country(country, topic=strategy.topic)
            except FetchError as e:
                logger.warning("Error fetching %s for %s: %s", strategy.description, country, e)
                continue

            if articles:
                logger.debug(
                    "Found %d articles for %s with %s", len(articles), country, strategy.description
                )
                self._cache.put(key, articles)
                return LocationOutcome(articles=articles, topic=strategy.label)

        try:
            global_articles = await self._client.fetch_global()
        except FetchError as e:
            logger.warning("Error fetching global news as fallback: %s", e)
            global_articles = []

        if global_articles:
            articles = global_articles[:GLOBAL_FALLBACK_LIMIT]
            logger.debug("Using global news as fallback for %s", country)
            self._cache.put(key, articles)
            return LocationOutcome(
                articles=articles, topic=GLOBAL_FALLBACK_TOPIC, is_global_fallback=True
            )

        logger.warning("All news sources failed for %s", country)
        return LocationOutcome(error_message=UNAVAILABLE_MESSAGE)

    async def fetch_topic(self, country: str, topic: str = "general") -> FeedState:
        """Fetch one topic for a country with no fallback and no caching."""
        self._in_flight += 1
        self.state.is_loading = True
        self.state.error_message = None

        try:
            articles = await self._client.fetch_by_country(country, topic=topic)
        except FetchError as e:
            logger.warning("Error fetching %s news for %s: %s", topic, country, e)
            self.state.error_message = e.user_message
        else:
            self.state.articles = articles
            self.state.topic = topic
            self.state.country_code = country
        finally:
            self._in_flight -= 1
            self.state.is_loading = self._in_flight > 0

        return self.state
