"""Concrete location sources: device locale, IP geolocation, Nominatim."""

from __future__ import annotations

import asyncio
import locale
import logging
import os
from typing import Callable

import httpx

from news_feed.location.resolver import LocationUnavailable, PermissionStatus
from news_feed.models import Coordinates

logger = logging.getLogger(__name__)

_DEFAULT_GEOLOCATION_URL = "https://ipapi.co/json/"
_NOMINATIM_REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"
_DEFAULT_USER_AGENT = "news-feed admin@example.com"


class DeviceLocaleProvider:
    """Reads the configured region without asking for any permission."""

    def __init__(self, region: str | None = None) -> None:
        self._region = region or os.environ.get("NEWS_FEED_REGION")

    def region_code(self) -> str | None:
        """Return the lowercase region code, or None if none is configured.

        Checks the explicit/env override first, then the process locale
        (e.g. ``en_US.UTF-8`` -> ``us``).
        """
        if self._region:
            return self._region.strip().lower() or None

        try:
            candidates = [locale.getlocale()[0]]
        except ValueError:
            candidates = []
        candidates += [os.environ.get(var) for var in ("LC_ALL", "LC_MESSAGES", "LANG")]
        for name in candidates:
            code = _region_from_locale_name(name)
            if code:
                return code
        return None


def _region_from_locale_name(name: str | None) -> str | None:
    if not name:
        return None
    name = name.split(".")[0].split("@")[0]
    if "_" not in name:
        return None
    region = name.split("_", 1)[1]
    if len(region) == 2 and region.isalpha():
        return region.lower()
    return None


def _parse_permission(value: str | None) -> PermissionStatus:
    try:
        return PermissionStatus((value or "not_determined").strip().lower())
    except ValueError:
        logger.warning("Unknown location permission value %r, treating as undecided", value)
        return PermissionStatus.NOT_DETERMINED


class IPGeolocationProvider:
    """Approximate location from the caller's public IP address.

    Permission is held in memory. When undecided, ``request_authorization``
    runs the optional ``prompt`` callable (which may block, e.g. a terminal
    confirmation) in a worker thread.
    """

    def __init__(
        self,
        permission: PermissionStatus | None = None,
        prompt: Callable[[], bool] | None = None,
        url: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._permission = permission or _parse_permission(
            os.environ.get("NEWS_FEED_LOCATION_PERMISSION")
        )
        self._prompt = prompt
        self._url = url or os.environ.get("GEOLOCATION_URL", _DEFAULT_GEOLOCATION_URL)
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    def authorization_status(self) -> PermissionStatus:
        return self._permission

    async def request_authorization(self) -> PermissionStatus:
        if self._permission is PermissionStatus.NOT_DETERMINED and self._prompt is not None:
            allowed = await asyncio.to_thread(self._prompt)
            self._permission = PermissionStatus.GRANTED if allowed else PermissionStatus.DENIED
        return self._permission

    async def current_fix(self) -> Coordinates:
        try:
            resp = await self._client.get(self._url)
            resp.raise_for_status()
            data = resp.json()
            return Coordinates(
                latitude=float(data["latitude"]),
                longitude=float(data["longitude"]),
            )
        except httpx.HTTPError as e:
            raise LocationUnavailable(f"Geolocation request failed: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise LocationUnavailable("Geolocation response had no coordinates") from e

    async def aclose(self) -> None:
        await self._client.aclose()


class NominatimGeocoder:
    """Reverse geocoding through OpenStreetMap Nominatim."""

    def __init__(
        self,
        user_agent: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._user_agent = user_agent or os.environ.get(
            "NOMINATIM_USER_AGENT", _DEFAULT_USER_AGENT
        )
        self._client = httpx.AsyncClient(
            headers={"User-Agent": self._user_agent},
            timeout=timeout,
            transport=transport,
        )

    async def country_code(self, coordinates: Coordinates) -> str | None:
        params = {
            "format": "jsonv2",
            "lat": coordinates.latitude,
            "lon": coordinates.longitude,
            "zoom": 3,
        }
        try:
            resp = await self._client.get(_NOMINATIM_REVERSE_URL, params=params)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise LocationUnavailable(f"Reverse geocoding failed: {e}") from e
        except ValueError as e:
            raise LocationUnavailable("Reverse geocoding returned invalid JSON") from e

        if not isinstance(data, dict):
            return None
        address = data.get("address") or {}
        code = address.get("country_code")
        return code.lower() if code else None

    async def aclose(self) -> None:
        await self._client.aclose()
