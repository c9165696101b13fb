"""Shared fixtures for catalog tests."""

import json
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock

import pytest

from metamovies.catalog.config import CatalogConfig


@pytest.fixture
def mock_database() -> AsyncMock:
    """Mock Database instance matching the Database API."""
    db = AsyncMock()
    db.fetch = AsyncMock(return_value=[])
    db.fetchval = AsyncMock(return_value=None)
    db.fetchrow = AsyncMock(return_value=None)
    db.execute = AsyncMock(return_value="INSERT 0 1")
    return db


@pytest.fixture
def catalog_config() -> CatalogConfig:
    return CatalogConfig(cache_ttl_seconds=300, max_query_length=20)


def _movie_columns(movie_id: int | None, title: str | None = None) -> dict:
    """``movie__``-prefixed join columns as returned by the watchlist/release queries."""
    present = movie_id is not None
    return {
        "movie__id": movie_id,
        "movie__title": title if present else None,
        "movie__poster_url": f"https://img/{movie_id}.jpg" if present else None,
        "movie__backdrop_url": None,
        "movie__release_date": date(2024, 3, 1) if present else None,
        "movie__language": "en" if present else None,
        "movie__trending": present,
    }


@pytest.fixture
def trending_row() -> dict:
    """A dict mimicking an asyncpg Record from trending_weekly."""
    return {
        "id": 11,
        "entity_type": "movie",
        "entity_id": "42",
        "week_start": date(2024, 3, 4),
        "score": 87.5,
        "metrics": json.dumps({"views": 1200}),
    }


@pytest.fixture
def watchlist_rows() -> list[dict]:
    return [
        {"user_id": "u1", "movie_id": 1, "series_id": None, **_movie_columns(1, "Dune")},
        {"user_id": "u2", "movie_id": None, "series_id": 9, **_movie_columns(None)},
    ]


@pytest.fixture
def release_row() -> dict:
    return {
        "id": 5,
        "movie_id": 1,
        "release_type": "ott",
        "platform_id": 3,
        "release_date": date(2024, 3, 15),
        "language": "en",
        "region": "US",
        **_movie_columns(1, "Dune"),
        "platform__id": 3,
        "platform__name": "Netflix",
        "platform__logo_url": None,
        "platform__is_active": True,
    }


@pytest.fixture
def search_rows() -> list[dict]:
    ts = datetime(2024, 3, 5, tzinfo=timezone.utc)
    return [
        {"query": "Batman", "user_id": None, "created_at": ts},
        {"query": None, "user_id": "u1", "created_at": ts},
    ]
