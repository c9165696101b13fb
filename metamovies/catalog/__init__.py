"""Catalog: typed data access over the hosted media database."""

from metamovies.catalog.cache import TTLCache
from metamovies.catalog.config import CatalogConfig
from metamovies.catalog.repository import CatalogRepository
from metamovies.catalog.schemas import (
    UNKNOWN_ARTIST,
    VALID_ENTITY_TYPES,
    Movie,
    Person,
    Platform,
    ReleaseRow,
    SearchEventRow,
    Song,
    TrendingEntry,
    WatchlistRow,
)

__all__ = [
    "CatalogConfig",
    "CatalogRepository",
    "Movie",
    "Person",
    "Platform",
    "ReleaseRow",
    "SearchEventRow",
    "Song",
    "TTLCache",
    "TrendingEntry",
    "UNKNOWN_ARTIST",
    "VALID_ENTITY_TYPES",
    "WatchlistRow",
]
