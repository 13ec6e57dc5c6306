"""Data models for the news feeds."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def parse_timestamp(value: str) -> datetime:
    """Parse a ``YYYY-MM-DDTHH:MM:SSZ`` timestamp into an aware UTC datetime.

    Raises:
        ValueError: If the value does not match the fixed format.
    """
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render a datetime in the fixed wire format (UTC)."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(TIMESTAMP_FORMAT)


@dataclass(frozen=True)
class Article:
    """A single normalized news article.

    ``article_id`` is the canonical URL, so two articles with the same id are
    duplicates regardless of their other fields.
    """

    article_id: str
    title: str
    summary: str
    url: str
    image_url: str | None
    source_name: str
    published_at: datetime

    @classmethod
    def create(
        cls,
        title: str,
        url: str,
        source_name: str,
        published_at: datetime,
        summary: str = "",
        image_url: str | None = None,
    ) -> Article:
        """Build an article whose id is derived from its URL."""
        return cls(
            article_id=url,
            title=title,
            summary=summary,
            url=url,
            image_url=image_url,
            source_name=source_name,
            published_at=published_at,
        )

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match against title or summary."""
        needle = query.casefold()
        return needle in self.title.casefold() or needle in self.summary.casefold()

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "article_id": self.article_id,
            "title": self.title,
            "summary": self.summary,
            "url": self.url,
            "image_url": self.image_url,
            "source_name": self.source_name,
            "published_at": format_timestamp(self.published_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Article:
        """Deserialize from a dict produced by ``to_dict``."""
        return cls(
            article_id=data["article_id"],
            title=data["title"],
            summary=data.get("summary") or "",
            url=data["url"],
            image_url=data.get("image_url"),
            source_name=data["source_name"],
            published_at=parse_timestamp(data["published_at"]),
        )


@dataclass(frozen=True)
class Coordinates:
    """A location fix."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class LocationSignal:
    """Result of a location attempt: a country code or a failure.

    Exactly one of ``country_code`` and ``error`` is set.
    """

    country_code: str | None = None
    error: Exception | None = None

    @classmethod
    def resolved(cls, country_code: str) -> LocationSignal:
        return cls(country_code=country_code.lower())

    @classmethod
    def failed(cls, error: Exception) -> LocationSignal:
        return cls(error=error)

    @property
    def is_resolved(self) -> bool:
        return self.country_code is not None


@dataclass
class FeedState:
    """Observable state of one feed, as a UI would render it."""

    articles: list[Article] = field(default_factory=list)
    is_loading: bool = False
    error_message: str | None = None

    # Location feed only
    country_code: str | None = None
    topic: str | None = None
    location_status: str | None = None

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "articles": [a.to_dict() for a in self.articles],
            "article_count": len(self.articles),
            "is_loading": self.is_loading,
            "error_message": self.error_message,
            "country_code": self.country_code,
            "topic": self.topic,
            "location_status": self.location_status,
        }
