"""Location resolver: permission, fix and reverse lookup to a country code."""

from __future__ import annotations

import inspect
import logging
from enum import Enum
from typing import Awaitable, Callable, Protocol, Union

from news_feed.models import Coordinates, LocationSignal

logger = logging.getLogger(__name__)


class LocationError(Exception):
    """Location could not be determined."""


class PermissionDenied(LocationError):
    """The user refused location access."""


class LocationUnavailable(LocationError):
    """A fix or reverse geocode failed."""


class PermissionStatus(Enum):
    """Location permission as reported by the provider."""

    NOT_DETERMINED = "not_determined"
    GRANTED = "granted"
    DENIED = "denied"


class ResolverState(Enum):
    """Lifecycle of a ``LocationResolver``."""

    UNRESOLVED = "unresolved"
    PERMISSION_PENDING = "permission_pending"
    RESOLVED = "resolved"
    DENIED = "denied"
    FAILED = "failed"


class GeolocationProvider(Protocol):
    """Permission state plus a one-shot current-location request."""

    def authorization_status(self) -> PermissionStatus: ...

    async def request_authorization(self) -> PermissionStatus: ...

    async def current_fix(self) -> Coordinates: ...


class ReverseGeocoder(Protocol):
    """Maps coordinates to an ISO country code."""

    async def country_code(self, coordinates: Coordinates) -> str | None: ...


SignalHandler = Callable[[LocationSignal], Union[Awaitable[None], None]]


class LocationResolver:
    """Turns geolocation into at most one ``LocationSignal`` per request.

    Consumers register handlers with ``subscribe``. Each call to
    ``request_location`` emits exactly one signal (or none while permission
    is still pending). Failures are never retried here; callers re-invoke
    ``request_location`` when they want another attempt.
    """

    def __init__(self, provider: GeolocationProvider, geocoder: ReverseGeocoder) -> None:
        self._provider = provider
        self._geocoder = geocoder
        self._handlers: list[SignalHandler] = []
        self.state = ResolverState.UNRESOLVED
        self.latest: LocationSignal | None = None

    def subscribe(self, handler: SignalHandler) -> Callable[[], None]:
        """Register a handler; returns a function that unregisters it."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    async def _emit(self, signal: LocationSignal) -> None:
        self.latest = signal
        for handler in list(self._handlers):
            result = handler(signal)
            if inspect.isawaitable(result):
                await result

    def _transition(self, state: ResolverState) -> None:
        if state is not self.state:
            logger.debug("Resolver state %s -> %s", self.state.value, state.value)
            self.state = state

    async def request_location(self) -> LocationSignal | None:
        """Check permission and, if granted, locate and emit a signal.

        Returns:
            The emitted signal, or None if permission is still undecided
        """
        status = self._provider.authorization_status()

        if status is PermissionStatus.NOT_DETERMINED:
            self._transition(ResolverState.PERMISSION_PENDING)
            status = await self._provider.request_authorization()

        if status is PermissionStatus.DENIED:
            self._transition(ResolverState.DENIED)
            signal = LocationSignal.failed(PermissionDenied("Location access denied"))
            await self._emit(signal)
            return signal

        if status is PermissionStatus.NOT_DETERMINED:
            logger.debug("Location permission still undecided")
            return None

        return await self._locate()

    async def _locate(self) -> LocationSignal:
        try:
            coordinates = await self._provider.current_fix()
            code = await self._geocoder.country_code(coordinates)
            if not code:
                raise LocationUnavailable("No country found for current location")
        except LocationError as e:
            logger.debug("Location lookup failed: %s", e)
            self._transition(ResolverState.FAILED)
            signal = LocationSignal.failed(e)
        else:
            self._transition(ResolverState.RESOLVED)
            signal = LocationSignal.resolved(code)

        await self._emit(signal)
        return signal
