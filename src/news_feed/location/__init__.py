"""Country detection from device region and geolocation."""

from news_feed.location.providers import (
    DeviceLocaleProvider,
    IPGeolocationProvider,
    NominatimGeocoder,
)
from news_feed.location.resolver import (
    LocationError,
    LocationResolver,
    LocationUnavailable,
    PermissionDenied,
    PermissionStatus,
    ResolverState,
)

__all__ = [
    "DeviceLocaleProvider",
    "IPGeolocationProvider",
    "LocationError",
    "LocationResolver",
    "LocationUnavailable",
    "NominatimGeocoder",
    "PermissionDenied",
    "PermissionStatus",
    "ResolverState",
]
