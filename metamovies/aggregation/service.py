"""Aggregation service: fetch snapshots, then rank and group them.

Each call fetches fresh snapshots from the catalog repository and runs the
pure aggregation functions over them; nothing is memoized between calls.
A failure fetching the primary list propagates to the caller. A failure
fetching one entity type's detail rows only empties that trending group.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any
from zoneinfo import ZoneInfo

from metamovies.aggregation.config import AggregationConfig
from metamovies.aggregation.popularity import most_searched, most_watchlisted
from metamovies.aggregation.releases import build_release_calendar, month_range, today_in, week_start
from metamovies.aggregation.schemas import (
    ReleaseCalendar,
    SearchFrequency,
    TrendingBoard,
    WatchlistPopularity,
)
from metamovies.aggregation.trending import ids_by_type, rank_weekly_trending
from metamovies.catalog.schemas import Platform
from metamovies.config.settings import get_settings

logger = logging.getLogger(__name__)


@dataclass
class TrendingOverview:
    """Everything the trending page shows."""

    weekly: TrendingBoard
    most_watchlisted: list[WatchlistPopularity]
    most_searched: list[SearchFrequency]


class AggregationService:
    """Ranks and groups catalog snapshots.

    Async orchestrators (one fetch round, then pure aggregation):
      - ``get_weekly_trending``: weekly board by entity type
      - ``get_most_watchlisted``: movies by watchlist count
      - ``get_most_searched``: normalized queries by frequency
      - ``get_release_calendar``: a month of releases bucketed by day
      - ``get_trending_overview``: the first three together

    ``list_platforms`` and ``resolve_platform`` back the calendar's
    platform filter.
    """

    def __init__(
        self,
        repository: Any = None,
        config: AggregationConfig | None = None,
        tz: ZoneInfo | None = None,
    ) -> None:
        self._repo = repository
        self._config = config or AggregationConfig()
        self._tz = tz or get_settings().tz

    def _require_repo(self) -> Any:
        if self._repo is None:
            raise RuntimeError("repository is required for AggregationService fetches")
        return self._repo

    def current_week_start(self) -> date:
        return week_start(today_in(self._tz))

    def current_month(self) -> date:
        return month_range(today_in(self._tz))[0]

    async def get_weekly_trending(
        self,
        week: date | None = None,
        limit: int | None = None,
    ) -> TrendingBoard:
        """Rank one week's trending entries, joined to their rows.

        Args:
            week: Any day of the target week; defaults to the current week.
            limit: Per-type cap; defaults to ``trending_limit``.
        """
        repo = self._require_repo()
        target = week_start(week) if week else self.current_week_start()

        entries = await repo.fetch_trending_weekly(target)
        wanted = ids_by_type(entries)

        fetchers = {
            "movie": repo.fetch_movies_by_ids,
            "person": repo.fetch_persons_by_ids,
            "song": repo.fetch_songs_by_ids,
        }
        entity_types = list(fetchers)
        results = await asyncio.gather(
            *(fetchers[t](wanted[t]) for t in entity_types),
            return_exceptions=True,
        )

        details: dict[str, list] = {}
        for entity_type, result in zip(entity_types, results):
            if isinstance(result, BaseException):
                logger.warning(
                    "Detail fetch failed for %s rows; group will be empty: %s",
                    entity_type, result,
                )
                details[entity_type] = []
            else:
                details[entity_type] = result

        board = rank_weekly_trending(
            target,
            entries,
            details,
            limit=limit if limit is not None else self._config.trending_limit,
        )
        logger.info(
            "Ranked weekly trending for %s: %d entries, %d shown",
            target, len(entries), board.total,
        )
        return board

    def _top_n(self, limit: int | None) -> int:
        return limit if limit is not None else self._config.default_limit

    async def get_most_watchlisted(self, limit: int | None = None) -> list[WatchlistPopularity]:
        rows = await self._require_repo().fetch_watchlist_rows()
        return most_watchlisted(rows, limit=self._top_n(limit))

    async def get_most_searched(self, limit: int | None = None) -> list[SearchFrequency]:
        events = await self._require_repo().fetch_search_events()
        return most_searched(events, limit=self._top_n(limit))

    async def list_platforms(self, active_only: bool = True) -> list[Platform]:
        """Platforms a release calendar can be filtered by."""
        return await self._require_repo().fetch_platforms(active_only=active_only)

    async def resolve_platform(self, name_or_id: str) -> Platform | None:
        """Match an active platform by id or case-insensitive name."""
        wanted = name_or_id.strip()
        for platform in await self.list_platforms():
            if str(platform.id) == wanted or platform.name.lower() == wanted.lower():
                return platform
        return None

    async def get_release_calendar(
        self,
        month: date | None = None,
        language: str | None = None,
        platform_id: int | None = None,
    ) -> ReleaseCalendar:
        """Releases for the month containing ``month`` (default: this month)."""
        start, end = month_range(month or self.current_month())
        rows = await self._require_repo().fetch_releases(
            start, end, language=language, platform_id=platform_id
        )
        return build_release_calendar(start, rows)

    async def get_trending_overview(
        self,
        week: date | None = None,
        limit: int | None = None,
    ) -> TrendingOverview:
        """Weekly board plus both popularity tallies, fetched concurrently."""
        weekly, watchlisted, searched = await asyncio.gather(
            self.get_weekly_trending(week),
            self.get_most_watchlisted(limit),
            self.get_most_searched(limit),
        )
        return TrendingOverview(
            weekly=weekly,
            most_watchlisted=watchlisted,
            most_searched=searched,
        )
