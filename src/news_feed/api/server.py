"""FastAPI server exposing the news feeds."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from news_feed.models import FeedState
from news_feed.services import Services, build_services

app = FastAPI(
    title="News Feed API",
    description="Cached global, location-aware and search news feeds",
    version="0.1.0",
)

# Process-wide services so the cache outlives individual requests
_services: Services | None = None


def get_services() -> Services:
    """Get or create the global services instance."""
    global _services
    if _services is None:
        _services = build_services()
    return _services


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    service: str


def _respond(state: FeedState) -> dict[str, Any]:
    """Return the feed state, or 502 if it failed with nothing to show."""
    if state.error_message and not state.articles:
        raise HTTPException(status_code=502, detail=state.error_message)
    return state.to_dict()


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", service="news-feed")


@app.get("/news/global")
async def global_news() -> dict[str, Any]:
    """Top headlines, cached for five minutes."""
    state = await get_services().global_feed.fetch_news()
    return _respond(state)


@app.get("/news/location")
async def location_news(
    country: str | None = Query(None, min_length=2, max_length=2),
) -> dict[str, Any]:
    """News for a country.

    With ``country`` the fallback chain runs for that code directly.
    Without it, the first call starts device-region and location detection
    and later calls refresh it.
    """
    feed = get_services().location_feed
    if country:
        state = await feed.fetch_news_with_fallback(country.lower())
    elif feed.shown_source is None and not feed.state.articles:
        state = await feed.start()
    else:
        state = await feed.refresh()
    return _respond(state)


@app.get("/news/search")
async def search_news(q: str = Query(..., min_length=1)) -> dict[str, Any]:
    """Search, ranking matching local headlines ahead of global results."""
    if not q.strip():
        raise HTTPException(status_code=422, detail="Query must not be blank")
    state = await get_services().search_feed.search(q)
    return _respond(state)


@app.post("/cache/clear")
def clear_cache() -> dict[str, str]:
    """Drop every cached response."""
    get_services().cache.clear()
    return {"status": "ok", "message": "Cache cleared"}
