"""Shared fakes for the news feed tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from news_feed.location.resolver import LocationUnavailable, PermissionStatus
from news_feed.models import Article, Coordinates
from news_feed.news.cache import NewsCache

PUBLISHED = datetime(2025, 8, 6, 12, 0, tzinfo=timezone.utc)


def make_article(slug: str, title: str | None = None, summary: str = "") -> Article:
    """Build an article whose id is https://example.com/<slug>."""
    return Article.create(
        title=title or f"Story {slug}",
        url=f"https://example.com/{slug}",
        source_name="Example News",
        published_at=PUBLISHED,
        summary=summary,
    )


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeNewsClient:
    """Stands in for GNewsClient with canned results or errors."""

    def __init__(self) -> None:
        self.country_results: dict[tuple[str, str | None], object] = {}
        self.global_result: object = []
        self.search_results: dict[str, object] = {}
        self.calls: list[tuple] = []

    @staticmethod
    def _resolve(result: object) -> list[Article]:
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def fetch_global(self) -> list[Article]:
        self.calls.append(("global",))
        return self._resolve(self.global_result)

    async def fetch_by_country(
        self, country_code: str, topic: str | None = None, max_results: int = 10
    ) -> list[Article]:
        self.calls.append(("country", country_code, topic))
        return self._resolve(self.country_results.get((country_code, topic), []))

    async def search(self, query: str, country_code: str | None = None) -> list[Article]:
        self.calls.append(("search", query, country_code))
        return self._resolve(self.search_results.get(query, []))

    async def aclose(self) -> None:
        pass

    def count(self, kind: str) -> int:
        return sum(1 for call in self.calls if call[0] == kind)


class FakeGeolocation:
    """Geolocation provider with a scripted permission flow."""

    def __init__(
        self,
        status: PermissionStatus = PermissionStatus.GRANTED,
        answer: PermissionStatus | None = None,
        fix: Coordinates = Coordinates(48.85, 2.35),
        error: Exception | None = None,
    ) -> None:
        self.status = status
        self.answer = answer
        self.fix = fix
        self.error = error
        self.authorization_requests = 0
        self.fix_requests = 0

    def authorization_status(self) -> PermissionStatus:
        return self.status

    async def request_authorization(self) -> PermissionStatus:
        self.authorization_requests += 1
        if self.answer is not None:
            self.status = self.answer
        return self.status

    async def current_fix(self) -> Coordinates:
        self.fix_requests += 1
        if self.error is not None:
            raise self.error
        return self.fix


class FakeGeocoder:
    """Reverse geocoder returning a fixed code or raising."""

    def __init__(self, code: str | None = "FR", error: Exception | None = None) -> None:
        self.code = code
        self.error = error
        self.lookups: list[Coordinates] = []

    async def country_code(self, coordinates: Coordinates) -> str | None:
        self.lookups.append(coordinates)
        if self.error is not None:
            raise self.error
        return self.code


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> NewsCache:
    return NewsCache(clock=clock)


@pytest.fixture
def fake_client() -> FakeNewsClient:
    return FakeNewsClient()


@pytest.fixture
def geocoder_failure() -> FakeGeocoder:
    return FakeGeocoder(error=LocationUnavailable("geocoding failed"))
