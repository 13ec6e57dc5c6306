"""Composition root: builds the process-wide cache, client and feeds."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from news_feed.feeds.global_feed import GlobalFeed
from news_feed.feeds.location_feed import LocationFeed
from news_feed.feeds.search_feed import SearchFeed
from news_feed.location.providers import (
    DeviceLocaleProvider,
    IPGeolocationProvider,
    NominatimGeocoder,
)
from news_feed.location.resolver import GeolocationProvider, LocationResolver, ReverseGeocoder
from news_feed.news.cache import NewsCache
from news_feed.news.gnews_client import GNewsClient


@dataclass
class Services:
    """One instance of every shared component, wired together."""

    cache: NewsCache
    client: GNewsClient
    resolver: LocationResolver
    global_feed: GlobalFeed
    location_feed: LocationFeed
    search_feed: SearchFeed
    geolocation: GeolocationProvider
    geocoder: ReverseGeocoder

    async def aclose(self) -> None:
        """Close the news client and any location backend holding a connection."""
        await self.client.aclose()
        for backend in (self.geolocation, self.geocoder):
            close = getattr(backend, "aclose", None)
            if close is not None:
                await close()


def build_services(
    client: GNewsClient | None = None,
    cache: NewsCache | None = None,
    geolocation: GeolocationProvider | None = None,
    geocoder: ReverseGeocoder | None = None,
    device_region: str | None = None,
    permission_prompt: Callable[[], bool] | None = None,
) -> Services:
    """Build the component graph, substituting any injected parts.

    Args:
        client: News client (default: ``GNewsClient`` from environment)
        cache: Response cache (default: 300s TTL, 50 entries)
        geolocation: Location provider (default: IP geolocation)
        geocoder: Reverse geocoder (default: Nominatim)
        device_region: Region override (default: ``DeviceLocaleProvider``)
        permission_prompt: Blocking yes/no callable used when location
            permission is undecided

    Returns:
        Services sharing one cache and one client across all feeds
    """
    if client is None:
        client = GNewsClient()
    if cache is None:
        cache = NewsCache()
    if geolocation is None:
        geolocation = IPGeolocationProvider(prompt=permission_prompt)
    if geocoder is None:
        geocoder = NominatimGeocoder()
    resolver = LocationResolver(provider=geolocation, geocoder=geocoder)
    region = device_region or DeviceLocaleProvider().region_code()

    location_feed = LocationFeed(client, cache, resolver, device_region=region)
    search_feed = SearchFeed(client, cache, country_code=region)
    resolver.subscribe(search_feed.on_location_signal)

    return Services(
        cache=cache,
        client=client,
        resolver=resolver,
        global_feed=GlobalFeed(client, cache),
        location_feed=location_feed,
        search_feed=search_feed,
        geolocation=geolocation,
        geocoder=geocoder,
    )
