"""Count-based popularity tallies: most-watchlisted movies and most-searched queries."""

from collections.abc import Iterable

from metamovies.aggregation.schemas import SearchFrequency, WatchlistPopularity
from metamovies.catalog.schemas import Movie, SearchEventRow, WatchlistRow


def most_watchlisted(
    rows: Iterable[WatchlistRow],
    limit: int | None = 10,
) -> list[WatchlistPopularity]:
    """Movies ranked by how many watchlist rows reference them.

    Rows without a joined movie are skipped. The last-seen movie snapshot is
    kept for each id. Equal counts stay in first-encounter order.

    Args:
        rows: Watchlist snapshot.
        limit: Top-N to return; None returns every movie.
    """
    counts: dict[int, int] = {}
    snapshots: dict[int, Movie] = {}

    for row in rows:
        if row.movie is None:
            continue
        movie_id = row.movie_id if row.movie_id is not None else row.movie.id
        counts[movie_id] = counts.get(movie_id, 0) + 1
        snapshots[movie_id] = row.movie

    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    if limit is not None:
        ranked = ranked[: max(limit, 0)]

    return [
        WatchlistPopularity(movie_id=movie_id, movie=snapshots[movie_id], count=count)
        for movie_id, count in ranked
    ]


def normalize_query(query: str | None) -> str:
    """Trim and lowercase a search query."""
    return (query or "").strip().lower()


def most_searched(
    events: Iterable[SearchEventRow],
    limit: int | None = 10,
) -> list[SearchFrequency]:
    """Normalized search queries ranked by frequency.

    Queries differing only by case or surrounding whitespace share a
    bucket; blank queries are ignored.
    """
    counts: dict[str, int] = {}
    for event in events:
        key = normalize_query(event.query)
        if not key:
            continue
        counts[key] = counts.get(key, 0) + 1

    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    if limit is not None:
        ranked = ranked[: max(limit, 0)]

    return [SearchFrequency(query=query, count=count) for query, count in ranked]
