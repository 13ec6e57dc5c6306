"""Async GNews API client."""

from __future__ import annotations

import logging
import os

import httpx

from news_feed.models import Article, parse_timestamp

logger = logging.getLogger(__name__)

_DEFAULT_BASE_URL = "https://gnews.io/api/v4"
_DEFAULT_LANGUAGE = "en"
DEFAULT_COUNTRY_MAX = 10


class FetchError(Exception):
    """A news request could not produce a list of articles."""

    user_message = "Unable to load news at this time. Please try again."


class TransportError(FetchError):
    """Network failure, timeout or non-success HTTP status."""

    user_message = (
        "Unable to reach the news service. "
        "Please check your internet connection and try again."
    )

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodingError(FetchError):
    """Response body was not a valid article envelope."""

    user_message = "The news service returned an unexpected response. Please try again later."


def decode_articles(data: object) -> list[Article]:
    """Decode a ``{totalArticles, articles}`` envelope into articles.

    Raises:
        DecodingError: If the envelope or any article is malformed.
    """
    if not isinstance(data, dict):
        raise DecodingError("Response body is not a JSON object")
    if not isinstance(data.get("totalArticles"), int):
        raise DecodingError("Envelope is missing integer 'totalArticles'")
    items = data.get("articles")
    if not isinstance(items, list):
        raise DecodingError("Envelope is missing 'articles' array")

    return [_decode_article(item, index) for index, item in enumerate(items)]


def _decode_article(item: object, index: int) -> Article:
    if not isinstance(item, dict):
        raise DecodingError(f"Article {index} is not an object")

    try:
        title = item["title"]
        url = item["url"]
        source_name = item["source"]["name"]
        published_at = parse_timestamp(item["publishedAt"])
    except (KeyError, TypeError, ValueError) as e:
        raise DecodingError(f"Article {index} is malformed: {e!r}") from e

    if not all(isinstance(v, str) for v in (title, url, source_name)):
        raise DecodingError(f"Article {index} has non-string fields")

    description = item.get("description")
    image = item.get("image")
    if not all(v is None or isinstance(v, str) for v in (description, image)):
        raise DecodingError(f"Article {index} has non-string description or image")

    return Article.create(
        title=title,
        url=url,
        source_name=source_name,
        published_at=published_at,
        summary=description or "",
        image_url=image,
    )


class GNewsClient:
    """Read-only client for the GNews top-headlines and search endpoints."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        language: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key or os.environ.get("GNEWS_API_KEY")
        if not self._api_key:
            raise ValueError("GNEWS_API_KEY environment variable or api_key parameter required")
        self._base_url = (
            base_url or os.environ.get("GNEWS_BASE_URL", _DEFAULT_BASE_URL)
        ).rstrip("/")
        self._language = language or os.environ.get("NEWS_FEED_LANG", _DEFAULT_LANGUAGE)
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def _get(self, endpoint: str, params: dict) -> list[Article]:
        """GET an endpoint and decode its article envelope."""
        query = {"token": self._api_key, "lang": self._language, **params}
        url = f"{self._base_url}/{endpoint}"

        try:
            resp = await self._client.get(url, params=query)
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {endpoint} failed: {e}") from e

        if resp.status_code != 200:
            raise TransportError(
                f"GNews {endpoint} returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise DecodingError(f"GNews {endpoint} returned invalid JSON") from e

        return decode_articles(data)

    async def fetch_global(self) -> list[Article]:
        """Fetch unfiltered top headlines."""
        return await self._get("top-headlines", {})

    async def fetch_by_country(
        self,
        country_code: str,
        topic: str | None = None,
        max_results: int = DEFAULT_COUNTRY_MAX,
    ) -> list[Article]:
        """Fetch top headlines for a country.

        Args:
            country_code: Lowercase ISO country code (e.g. 'us')
            topic: Optional topic tag; None uses the provider's default category
            max_results: Upper bound on returned articles

        Returns:
            At most ``max_results`` articles
        """
        params: dict = {"country": country_code, "max": max_results}
        if topic is not None:
            params["topic"] = topic
        logger.debug("Fetching headlines for country=%s topic=%s", country_code, topic)
        articles = await self._get("top-headlines", params)
        return articles[:max_results]

    async def search(self, query: str, country_code: str | None = None) -> list[Article]:
        """Full-text search, optionally narrowed to a country.

        The query is sent verbatim; httpx percent-encodes it.
        """
        params: dict = {"q": query}
        if country_code is not None:
            params["country"] = country_code
        return await self._get("search", params)

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> GNewsClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
