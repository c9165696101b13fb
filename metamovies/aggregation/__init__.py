"""
Trending and release aggregation over catalog snapshots.

Components:
- rank_weekly_trending / top_n: weekly trending board by entity type
- most_watchlisted / most_searched: count-based popularity tallies
- bucket_releases / build_release_calendar: releases grouped by day
- AggregationService: fetch-then-aggregate orchestrator
"""

from metamovies.aggregation.config import AggregationConfig
from metamovies.aggregation.popularity import most_searched, most_watchlisted, normalize_query
from metamovies.aggregation.releases import (
    build_release_calendar,
    bucket_releases,
    calendar_grid,
    month_range,
    releases_on,
    week_start,
)
from metamovies.aggregation.schemas import (
    RankedEntry,
    ReleaseCalendar,
    SearchFrequency,
    TrendingBoard,
    WatchlistPopularity,
)
from metamovies.aggregation.service import AggregationService, TrendingOverview
from metamovies.aggregation.trending import rank_weekly_trending, sort_by_score, top_n

__all__ = [
    "AggregationConfig",
    "AggregationService",
    "RankedEntry",
    "ReleaseCalendar",
    "SearchFrequency",
    "TrendingBoard",
    "TrendingOverview",
    "WatchlistPopularity",
    "bucket_releases",
    "build_release_calendar",
    "calendar_grid",
    "month_range",
    "most_searched",
    "most_watchlisted",
    "normalize_query",
    "rank_weekly_trending",
    "releases_on",
    "sort_by_score",
    "top_n",
    "week_start",
]
