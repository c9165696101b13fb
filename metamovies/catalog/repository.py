"""Database repository for the catalog tables the aggregation views read.

Every fetch returns an already-materialized snapshot list. No rows is an
empty list, never an error; database errors propagate to the caller.
"""

import json
import logging
from datetime import date
from typing import Any

from metamovies.catalog.cache import TTLCache
from metamovies.catalog.config import CatalogConfig
from metamovies.catalog.schemas import (
    Movie,
    Person,
    Platform,
    ReleaseRow,
    SearchEventRow,
    Song,
    TrendingEntry,
    WatchlistRow,
)
from metamovies.storage.database import Database

logger = logging.getLogger(__name__)

# Tables read by this layer. The hosted catalog owns them; this DDL only
# provisions an empty local/test database with the same shape.
_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS movies (
    id            BIGSERIAL PRIMARY KEY,
    title         TEXT NOT NULL DEFAULT '',
    poster_url    TEXT,
    backdrop_url  TEXT,
    release_date  DATE,
    language      TEXT,
    trending      BOOLEAN NOT NULL DEFAULT FALSE,
    created_at    TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS persons (
    id           BIGSERIAL PRIMARY KEY,
    name         TEXT NOT NULL DEFAULT '',
    profile_url  TEXT,
    known_for    TEXT,
    created_at   TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS songs (
    id          BIGSERIAL PRIMARY KEY,
    title       TEXT NOT NULL DEFAULT '',
    artist      TEXT,
    cover_url   TEXT,
    album       TEXT,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS platforms (
    id         BIGSERIAL PRIMARY KEY,
    name       TEXT NOT NULL DEFAULT '',
    logo_url   TEXT,
    is_active  BOOLEAN NOT NULL DEFAULT TRUE
);

CREATE TABLE IF NOT EXISTS trending_weekly (
    id           BIGSERIAL PRIMARY KEY,
    entity_type  TEXT NOT NULL CHECK (entity_type IN ('movie', 'person', 'song')),
    entity_id    TEXT NOT NULL,
    week_start   DATE NOT NULL,
    score        DOUBLE PRECISION NOT NULL DEFAULT 0,
    metrics      JSONB NOT NULL DEFAULT '{}',
    updated_at   TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    UNIQUE (entity_type, entity_id, week_start)
);

CREATE TABLE IF NOT EXISTS watchlist (
    id          BIGSERIAL PRIMARY KEY,
    user_id     TEXT NOT NULL,
    movie_id    BIGINT REFERENCES movies(id) ON DELETE CASCADE,
    series_id   BIGINT,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS search_events (
    id          BIGSERIAL PRIMARY KEY,
    query       TEXT NOT NULL,
    user_id     TEXT,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS releases (
    id            BIGSERIAL PRIMARY KEY,
    movie_id      BIGINT NOT NULL REFERENCES movies(id) ON DELETE CASCADE,
    release_type  TEXT NOT NULL CHECK (release_type IN ('theatre', 'ott')),
    platform_id   BIGINT REFERENCES platforms(id) ON DELETE SET NULL,
    release_date  DATE NOT NULL,
    language      TEXT,
    region        TEXT
);

CREATE INDEX IF NOT EXISTS idx_trending_weekly_week
    ON trending_weekly(week_start);
CREATE INDEX IF NOT EXISTS idx_releases_date
    ON releases(release_date);
CREATE INDEX IF NOT EXISTS idx_watchlist_movie
    ON watchlist(movie_id) WHERE movie_id IS NOT NULL;
"""

_UPSERT_TRENDING_SQL = """
INSERT INTO trending_weekly (entity_type, entity_id, week_start, score, metrics)
VALUES ($1, $2, $3, $4, $5::jsonb)
ON CONFLICT (entity_type, entity_id, week_start) DO UPDATE SET
    score = EXCLUDED.score,
    metrics = EXCLUDED.metrics,
    updated_at = NOW()
RETURNING id
"""

# Ties on score are ordered by entity_id so the ranker sees a stable input order
_TRENDING_SQL = """
SELECT id, entity_type, entity_id, week_start, score, metrics
FROM trending_weekly
WHERE week_start = $1
ORDER BY score DESC, entity_id ASC
"""

_MOVIE_COLUMNS = (
    "m.id AS movie__id, m.title AS movie__title, m.poster_url AS movie__poster_url, "
    "m.backdrop_url AS movie__backdrop_url, m.release_date AS movie__release_date, "
    "m.language AS movie__language, m.trending AS movie__trending"
)

_WATCHLIST_SQL = f"""
SELECT w.user_id, w.movie_id, w.series_id, {_MOVIE_COLUMNS}
FROM watchlist w
LEFT JOIN movies m ON m.id = w.movie_id
ORDER BY w.created_at, w.id
"""

# Oldest first, so equal counts rank in first-searched order
_SEARCH_EVENTS_SQL = """
SELECT query, user_id, created_at
FROM search_events
ORDER BY created_at, id
"""


def _as_dict(value: Any) -> dict:
    """Decode a JSONB column that asyncpg may hand back as text."""
    if not value:
        return {}
    if isinstance(value, str):
        decoded = json.loads(value)
        return decoded if isinstance(decoded, dict) else {}
    return dict(value)


def _parse_ids(ids: list[Any]) -> list[int]:
    """Coerce ids to ints, skipping anything non-numeric."""
    parsed: list[int] = []
    for raw in ids:
        try:
            parsed.append(int(raw))
        except (TypeError, ValueError):
            logger.debug("Skipping non-numeric id %r", raw)
    return list(dict.fromkeys(parsed))


def _record_to_movie(record, prefix: str = "") -> Movie | None:
    """Build a Movie from plain or ``movie__``-prefixed columns."""
    movie_id = record[f"{prefix}id"]
    if movie_id is None:
        return None
    return Movie(
        id=movie_id,
        title=record[f"{prefix}title"],
        poster_url=record[f"{prefix}poster_url"],
        backdrop_url=record[f"{prefix}backdrop_url"],
        release_date=record[f"{prefix}release_date"],
        language=record[f"{prefix}language"],
        trending=bool(record[f"{prefix}trending"]),
    )


def _record_to_person(record) -> Person:
    return Person(
        id=record["id"],
        name=record["name"],
        profile_url=record["profile_url"],
        known_for=record["known_for"],
    )


def _record_to_song(record) -> Song:
    return Song(
        id=record["id"],
        title=record["title"],
        artist=record["artist"],
        cover_url=record["cover_url"],
        album=record["album"],
    )


def _record_to_platform(record, prefix: str = "") -> Platform | None:
    platform_id = record[f"{prefix}id"]
    if platform_id is None:
        return None
    return Platform(
        id=platform_id,
        name=record[f"{prefix}name"],
        logo_url=record[f"{prefix}logo_url"],
        is_active=bool(record[f"{prefix}is_active"]),
    )


def _record_to_trending(record) -> TrendingEntry:
    return TrendingEntry(
        id=record["id"],
        entity_type=record["entity_type"],
        entity_id=record["entity_id"],
        week_start=record["week_start"],
        score=record["score"],
        metrics=_as_dict(record["metrics"]),
    )


def _record_to_watchlist(record) -> WatchlistRow:
    return WatchlistRow(
        user_id=str(record["user_id"]),
        movie_id=record["movie_id"],
        series_id=record["series_id"],
        movie=_record_to_movie(record, prefix="movie__"),
    )


def _record_to_release(record) -> ReleaseRow:
    return ReleaseRow(
        id=record["id"],
        movie_id=record["movie_id"],
        release_type=record["release_type"],
        release_date=record["release_date"],
        platform_id=record["platform_id"],
        language=record["language"],
        region=record["region"],
        movie=_record_to_movie(record, prefix="movie__"),
        platform=_record_to_platform(record, prefix="platform__"),
    )


class CatalogRepository:
    """Typed query functions over the catalog tables."""

    def __init__(
        self,
        database: Database,
        config: CatalogConfig | None = None,
    ) -> None:
        self._db = database
        self._config = config or CatalogConfig()
        self._platform_cache = TTLCache(
            ttl_seconds=self._config.cache_ttl_seconds,
            max_entries=self._config.cache_max_entries,
        )

    async def create_tables(self) -> None:
        """Create the catalog tables and indexes (idempotent)."""
        await self._db.execute(_CREATE_TABLES_SQL)
        logger.info("Catalog tables ensured")

    # ── Trending ─────────────────────────────────────────

    async def fetch_trending_weekly(self, week_start: date) -> list[TrendingEntry]:
        """All trending entries for one week, highest score first."""
        rows = await self._db.fetch(_TRENDING_SQL, week_start)
        return [_record_to_trending(r) for r in rows]

    async def upsert_trending_entry(self, entry: TrendingEntry) -> int | None:
        """Insert or update one entry keyed on (entity_type, entity_id, week_start)."""
        row = await self._db.fetchrow(
            _UPSERT_TRENDING_SQL,
            entry.entity_type,
            entry.entity_id,
            entry.week_start,
            entry.score,
            json.dumps(entry.metrics),
        )
        return row["id"] if row else None

    # ── Entity details ───────────────────────────────────

    async def fetch_movies_by_ids(self, ids: list[Any]) -> list[Movie]:
        movie_ids = _parse_ids(ids)
        if not movie_ids:
            return []
        rows = await self._db.fetch(
            "SELECT id, title, poster_url, backdrop_url, release_date, language, trending "
            "FROM movies WHERE id = ANY($1::bigint[])",
            movie_ids,
        )
        return [m for m in (_record_to_movie(r) for r in rows) if m is not None]

    async def fetch_persons_by_ids(self, ids: list[Any]) -> list[Person]:
        person_ids = _parse_ids(ids)
        if not person_ids:
            return []
        rows = await self._db.fetch(
            "SELECT id, name, profile_url, known_for FROM persons WHERE id = ANY($1::bigint[])",
            person_ids,
        )
        return [_record_to_person(r) for r in rows]

    async def fetch_songs_by_ids(self, ids: list[Any]) -> list[Song]:
        song_ids = _parse_ids(ids)
        if not song_ids:
            return []
        rows = await self._db.fetch(
            "SELECT id, title, artist, cover_url, album FROM songs WHERE id = ANY($1::bigint[])",
            song_ids,
        )
        return [_record_to_song(r) for r in rows]

    async def fetch_platforms(self, active_only: bool = True) -> list[Platform]:
        """List streaming platforms by name (cached)."""
        cached = self._platform_cache.get(active_only)
        if cached is not None:
            return list(cached)

        where = " WHERE is_active = TRUE" if active_only else ""
        rows = await self._db.fetch(
            f"SELECT id, name, logo_url, is_active FROM platforms{where} ORDER BY name"
        )
        platforms = [p for p in (_record_to_platform(r) for r in rows) if p is not None]
        self._platform_cache.set(active_only, list(platforms))
        return platforms

    def invalidate_cache(self) -> None:
        """Force-clear caches so the next access hits the DB."""
        self._platform_cache.invalidate()

    # ── Watchlist & search ───────────────────────────────

    async def fetch_watchlist_rows(self) -> list[WatchlistRow]:
        """Every watchlist row, joined with its movie where there is one."""
        rows = await self._db.fetch(_WATCHLIST_SQL)
        return [_record_to_watchlist(r) for r in rows]

    async def fetch_search_events(self) -> list[SearchEventRow]:
        """Every recorded search event, oldest first."""
        rows = await self._db.fetch(_SEARCH_EVENTS_SQL)
        return [
            SearchEventRow(
                query=r["query"] or "",
                user_id=str(r["user_id"]) if r["user_id"] is not None else None,
                created_at=r["created_at"],
            )
            for r in rows
        ]

    async def record_search_event(self, query: str, user_id: str | None = None) -> bool:
        """Store a submitted search. Blank queries are ignored.

        Returns True if a row was written.
        """
        cleaned = query.strip()[: self._config.max_query_length]
        if not cleaned:
            return False
        await self._db.execute(
            "INSERT INTO search_events (query, user_id) VALUES ($1, $2)",
            cleaned, user_id,
        )
        return True

    # ── Releases ─────────────────────────────────────────

    async def fetch_releases(
        self,
        start: date,
        end: date,
        language: str | None = None,
        platform_id: int | None = None,
    ) -> list[ReleaseRow]:
        """Releases dated within [start, end] inclusive, optionally filtered."""
        conditions = ["r.release_date >= $1", "r.release_date <= $2"]
        params: list = [start, end]
        idx = 3

        if language:
            conditions.append(f"lower(r.language) = lower(${idx})")
            params.append(language)
            idx += 1

        if platform_id is not None:
            conditions.append(f"r.platform_id = ${idx}")
            params.append(platform_id)
            idx += 1

        sql = f"""
            SELECT r.id, r.movie_id, r.release_type, r.platform_id, r.release_date,
                   r.language, r.region, {_MOVIE_COLUMNS},
                   p.id AS platform__id, p.name AS platform__name,
                   p.logo_url AS platform__logo_url, p.is_active AS platform__is_active
            FROM releases r
            LEFT JOIN movies m ON m.id = r.movie_id
            LEFT JOIN platforms p ON p.id = r.platform_id
            WHERE {" AND ".join(conditions)}
            ORDER BY r.release_date, r.id
        """
        rows = await self._db.fetch(sql, *params)
        return [_record_to_release(r) for r in rows]
