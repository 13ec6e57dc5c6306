"""Tests for news_feed data models."""

from datetime import datetime, timedelta, timezone

import pytest

from news_feed.models import (
    Article,
    FeedState,
    LocationSignal,
    format_timestamp,
    parse_timestamp,
)


class TestArticle:
    """Tests for the Article model."""

    def test_create_derives_id_from_url(self) -> None:
        article = Article.create(
            title="T",
            url="https://example.com/x",
            source_name="S",
            published_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        )
        assert article.article_id == "https://example.com/x"
        assert article.summary == ""
        assert article.image_url is None

    def test_is_immutable(self) -> None:
        article = Article.create("T", "https://e.com", "S", datetime.now(timezone.utc))
        with pytest.raises(AttributeError):
            article.title = "changed"  # type: ignore[misc]

    def test_to_dict_and_from_dict(self) -> None:
        """Test serialization round-trip."""
        article = Article.create(
            title="Title",
            url="https://example.com/a",
            source_name="Reuters",
            published_at=datetime(2025, 8, 6, 10, 15, 30, tzinfo=timezone.utc),
            summary="Summary",
            image_url="https://example.com/a.jpg",
        )

        data = article.to_dict()
        assert data["published_at"] == "2025-08-06T10:15:30Z"
        assert Article.from_dict(data) == article

    def test_matches_title_or_summary(self) -> None:
        article = Article.create(
            "Quantum Computing", "https://e.com", "S", datetime.now(timezone.utc),
            summary="A new CHIP design",
        )
        assert article.matches("quantum")
        assert article.matches("chip")
        assert not article.matches("biology")


class TestTimestamps:
    def test_parse_fixed_format(self) -> None:
        assert parse_timestamp("2025-08-06T09:30:00Z") == datetime(
            2025, 8, 6, 9, 30, tzinfo=timezone.utc
        )

    def test_parse_rejects_other_formats(self) -> None:
        with pytest.raises(ValueError):
            parse_timestamp("06/08/2025")

    def test_format_converts_to_utc(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        assert format_timestamp(datetime(2025, 8, 6, 11, 30, tzinfo=plus_two)) == (
            "2025-08-06T09:30:00Z"
        )


class TestLocationSignal:
    def test_resolved_is_lowercased(self) -> None:
        signal = LocationSignal.resolved("GB")
        assert signal.country_code == "gb"
        assert signal.is_resolved
        assert signal.error is None

    def test_failed(self) -> None:
        error = RuntimeError("nope")
        signal = LocationSignal.failed(error)
        assert not signal.is_resolved
        assert signal.error is error


class TestFeedState:
    def test_defaults(self) -> None:
        state = FeedState()
        assert state.articles == []
        assert state.is_loading is False
        assert state.topic is None
        assert state.location_status is None

    def test_to_dict(self) -> None:
        article = Article.create("T", "https://e.com", "S", datetime(2025, 1, 1, tzinfo=timezone.utc))
        data = FeedState(articles=[article], country_code="us").to_dict()

        assert data["article_count"] == 1
        assert data["articles"][0]["url"] == "https://e.com"
        assert data["country_code"] == "us"
        assert data["error_message"] is None
