"""CLI commands for the news feeds."""

from __future__ import annotations

import asyncio
import json
import logging

import click

from news_feed.feeds.location_feed import LocationSource
from news_feed.models import FeedState
from news_feed.services import Services, build_services


def _confirm_location() -> bool:
    return click.confirm("Allow news-feed to use your approximate location?", default=False)


def _run(coro_factory) -> FeedState:
    """Build services, run one feed operation and close the client."""

    async def runner() -> FeedState:
        try:
            services = build_services(permission_prompt=_confirm_location)
        except ValueError as e:
            raise click.ClickException(str(e)) from e
        try:
            return await coro_factory(services)
        finally:
            await services.aclose()

    return asyncio.run(runner())


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """News Feed - Global, local and search headlines from GNews."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--json-output", "-j", is_flag=True, help="Output as JSON")
def headlines(json_output: bool) -> None:
    """Show global top headlines.

    Example: news-feed headlines
    """
    state = _run(lambda s: s.global_feed.fetch_news())
    _output(state, json_output, "GLOBAL HEADLINES")


@cli.command()
@click.option("--country", "-c", default=None, help="ISO country code (e.g. us, gb)")
@click.option("--no-detect", is_flag=True, help="Skip location detection")
@click.option("--json-output", "-j", is_flag=True, help="Output as JSON")
def local(country: str | None, no_detect: bool, json_output: bool) -> None:
    """Show news for your country.

    Uses the device region right away and a detected location when
    available. Example: news-feed local --country gb
    """

    async def load(services: Services) -> FeedState:
        feed = services.location_feed
        if country:
            return await feed.fetch_news_with_fallback(country.lower())
        if no_detect:
            region = feed.device_region
            if region is None:
                raise click.UsageError("No device region configured; pass --country")
            return await feed.fetch_news_with_fallback(region, LocationSource.DEVICE_REGION)
        return await feed.start()

    state = _run(load)
    _output(state, json_output, "LOCAL NEWS")


@cli.command()
@click.argument("query")
@click.option("--json-output", "-j", is_flag=True, help="Output as JSON")
def search(query: str, json_output: bool) -> None:
    """Search news, listing local matches first.

    Example: news-feed search "climate summit"
    """
    if not query.strip():
        raise click.UsageError("Query must not be blank")
    state = _run(lambda s: s.search_feed.search(query))
    _output(state, json_output, f"SEARCH: {query}")


def _output(state: FeedState, json_output: bool, heading: str) -> None:
    if json_output:
        click.echo(json.dumps(state.to_dict(), indent=2))
    else:
        _print_feed(state, heading)

    if state.error_message and not state.articles:
        raise SystemExit(1)


def _print_feed(state: FeedState, heading: str) -> None:
    """Pretty-print a feed."""
    click.echo("\n" + "=" * 60)
    click.echo(heading)
    click.echo("=" * 60)

    if state.location_status:
        click.echo(f"Location: {state.location_status} | Topic: {state.topic}")

    if state.error_message:
        click.secho(f"\n{state.error_message}", fg="red", err=True)

    for i, article in enumerate(state.articles, 1):
        published = article.published_at.strftime("%Y-%m-%d %H:%M")
        click.echo(f"\n{i}. ", nl=False)
        click.secho(article.title, bold=True)
        click.echo(f"   {article.source_name} - {published}")
        if article.summary:
            click.echo(f"   {article.summary}")
        click.echo(f"   {article.url}")

    click.echo("\n" + "=" * 60)


if __name__ == "__main__":
    cli()
