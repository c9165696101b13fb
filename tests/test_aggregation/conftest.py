"""Shared fixtures for aggregation tests."""

from collections.abc import Callable
from datetime import date
from unittest.mock import AsyncMock

import pytest

from metamovies.catalog.schemas import Movie, Platform, ReleaseRow


def _make_release(
    release_id: int,
    day: date,
    release_type: str = "theatre",
    movie_title: str = "Untitled",
    platform: Platform | None = None,
) -> ReleaseRow:
    """Create a ReleaseRow with sensible defaults."""
    return ReleaseRow(
        id=release_id,
        movie_id=100 + release_id,
        release_type=release_type,
        release_date=day,
        platform_id=platform.id if platform else None,
        movie=Movie(id=100 + release_id, title=movie_title),
        platform=platform,
    )


@pytest.fixture
def make_release() -> Callable[..., ReleaseRow]:
    return _make_release


@pytest.fixture
def mock_repo() -> AsyncMock:
    """Mock CatalogRepository with empty snapshots."""
    repo = AsyncMock()
    repo.fetch_trending_weekly = AsyncMock(return_value=[])
    repo.fetch_movies_by_ids = AsyncMock(return_value=[])
    repo.fetch_persons_by_ids = AsyncMock(return_value=[])
    repo.fetch_songs_by_ids = AsyncMock(return_value=[])
    repo.fetch_watchlist_rows = AsyncMock(return_value=[])
    repo.fetch_search_events = AsyncMock(return_value=[])
    repo.fetch_releases = AsyncMock(return_value=[])
    repo.fetch_platforms = AsyncMock(return_value=[])
    return repo
