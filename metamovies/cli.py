"""
Command-line interface for metamovies.

Prints the aggregated catalog views and runs basic database chores.

Usage:
    metamovies init-db                  # Create catalog tables if missing
    metamovies health                   # Check database connectivity
    metamovies trending --week 2024-03-04
    metamovies watchlisted --limit 12
    metamovies searched --limit 10
    metamovies calendar --month 2024-03 --language en --platform netflix
    metamovies calendar --offset -1     # Previous month
    metamovies platforms                # Platform names and ids
"""

import asyncio
import sys
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any, TypeVar

import click

from metamovies.config.settings import get_settings
from metamovies.observability.logging import bind_context, get_logger, setup_logging

T = TypeVar("T")


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """MetaMovies - trending and release aggregation for the media catalog."""
    if debug:
        import os
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()


def _with_service(work: Callable[[Any], Awaitable[T]]) -> T:
    """Connect, run ``work`` against an AggregationService, always disconnect."""
    from metamovies.aggregation.service import AggregationService
    from metamovies.catalog.repository import CatalogRepository
    from metamovies.storage.database import Database

    async def run() -> T:
        async with Database() as db:
            service = AggregationService(repository=CatalogRepository(db))
            return await work(service)

    return asyncio.run(run())


@main.command("init-db")
def init_db() -> None:
    """Create the catalog tables used by the aggregation views."""
    from metamovies.catalog.repository import CatalogRepository
    from metamovies.storage.database import Database

    async def run():
        async with Database() as db:
            await CatalogRepository(db).create_tables()

    asyncio.run(run())
    click.echo("Database initialized successfully")


@main.command()
def health() -> None:
    """Check that the catalog database is reachable."""
    logger = get_logger(__name__)

    async def check() -> bool:
        from metamovies.storage.database import Database

        try:
            db = Database()
            await db.connect()
            try:
                return await db.health_check()
            finally:
                await db.close()
        except Exception as e:
            logger.error("Postgres health check failed", error=str(e))
            return False

    healthy = asyncio.run(check())
    icon = "✓" if healthy else "✗"
    color = "green" if healthy else "red"
    click.echo(click.style(f"  {icon} postgres: {healthy}", fg=color))
    sys.exit(0 if healthy else 1)


@main.command()
@click.option("--week", "week", default=None, type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Any day of the target week (default: current week)")
@click.option("--limit", default=None, type=int, help="Maximum entries per type")
def trending(week: datetime | None, limit: int | None) -> None:
    """Show the weekly trending board."""
    target = week.date() if week else None

    board = _with_service(lambda s: s.get_weekly_trending(target, limit=limit))
    bind_context(week_start=board.week_start.isoformat())

    click.echo(f"\nTrending this week (starting {board.week_start.isoformat()})")
    for entity_type, heading in (("movie", "Movies"), ("person", "People"), ("song", "Songs")):
        click.echo(f"\n{heading}")
        click.echo("-" * 40)
        ranked = board[entity_type]
        if not ranked:
            click.echo("  No weekly data yet.")
            continue
        for r in ranked:
            click.echo(f"  {r.rank:>2}. {r.label}  (score {r.score:g})")

    if board.dropped:
        click.echo(f"\n{board.dropped} entries skipped (no matching catalog row)")


@main.command()
@click.option("--limit", default=None, type=int, help="Number of movies to show")
def watchlisted(limit: int | None) -> None:
    """Show the most-watchlisted movies."""
    results = _with_service(lambda s: s.get_most_watchlisted(limit))

    click.echo("\nMost Watchlisted")
    click.echo("-" * 40)
    if not results:
        click.echo("  No watchlist data yet.")
    for i, item in enumerate(results, start=1):
        click.echo(f"  {i:>2}. {item.movie.title}  ({item.count} watchlists)")


@main.command()
@click.option("--limit", default=None, type=int, help="Number of queries to show")
def searched(limit: int | None) -> None:
    """Show the most-searched queries."""
    results = _with_service(lambda s: s.get_most_searched(limit))

    click.echo("\nMost Searched")
    click.echo("-" * 40)
    if not results:
        click.echo("  No search data yet.")
    for i, item in enumerate(results, start=1):
        click.echo(f"  {i:>2}. {item.query}  ({item.count} searches)")


@main.command()
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive platforms")
def platforms(include_inactive: bool) -> None:
    """List streaming platforms usable with `calendar --platform`."""
    results = _with_service(lambda s: s.list_platforms(active_only=not include_inactive))

    click.echo("\nPlatforms")
    click.echo("-" * 40)
    if not results:
        click.echo("  No platforms configured.")
    for platform in results:
        status = "" if platform.is_active else "  (inactive)"
        click.echo(f"  {platform.id:>4}  {platform.name}{status}")


@main.command("calendar")
@click.option("--month", default=None, help="Month as YYYY-MM (default: current month)")
@click.option("--offset", default=0, type=int, help="Months to move from --month (e.g. -1 for previous)")
@click.option("--language", default=None, help="Filter by release language")
@click.option("--platform", default=None, help="Filter by platform name or id")
@click.option("--all-days", is_flag=True, help="List days without releases too")
def release_calendar(
    month: str | None,
    offset: int,
    language: str | None,
    platform: str | None,
    all_days: bool,
) -> None:
    """Show a month of theatre and OTT releases, day by day."""
    from metamovies.aggregation.config import AggregationConfig
    from metamovies.aggregation.releases import parse_month, shift_month

    try:
        target = parse_month(month) if month else None
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM, got {month!r}", param_hint="--month") from None

    async def load(service):
        anchor = shift_month(target or service.current_month(), offset) if offset else target

        platform_id = None
        if platform:
            match = await service.resolve_platform(platform)
            if match is None:
                raise click.BadParameter(
                    f"no active platform named {platform!r} (see `metamovies platforms`)",
                    param_hint="--platform",
                )
            platform_id = match.id

        return await service.get_release_calendar(
            anchor, language=language, platform_id=platform_id
        )

    cal = _with_service(load)
    preview = AggregationConfig().calendar_preview_size

    click.echo(f"\nReleases {cal.start.strftime('%B %Y')} ({cal.total} total)")
    click.echo("-" * 40)
    for day, rows in cal.days():
        if not rows and not all_days:
            continue
        click.echo(f"{day.isoformat()} {day.strftime('%a')}")
        if not rows:
            click.echo("    No releases")
            continue
        for row in rows[:preview]:
            click.echo(f"    {row.title}  [{row.display_platform}]")
        if len(rows) > preview:
            click.echo(f"    +{len(rows) - preview} more")


if __name__ == "__main__":
    main()
