"""Weekly trending ranker.

Groups one week's trending entries by entity type, orders each group by
score (highest first) and joins every entry to its Movie, Person or Song
by primary key. Entries whose row cannot be found are dropped without
raising, since a missing row can be either bad data or a row that has not
replicated yet.

Sorting is stable, so entries with equal scores keep the order they were
fetched in. The repository fetches ties ordered by entity_id, which makes
the overall order deterministic.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import date

from metamovies.aggregation.schemas import RankedEntry, TrendingBoard
from metamovies.catalog.schemas import VALID_ENTITY_TYPES, Movie, Person, Song, TrendingEntry

logger = logging.getLogger(__name__)


def sort_by_score(entries: Iterable[TrendingEntry]) -> list[TrendingEntry]:
    """Score-descending stable sort."""
    return sorted(entries, key=lambda e: e.score, reverse=True)


def top_n(entries: Iterable[TrendingEntry], n: int) -> list[TrendingEntry]:
    """The n highest-scoring entries: a prefix of ``sort_by_score(entries)``."""
    if n <= 0:
        return []
    return sort_by_score(entries)[:n]


def index_by_id(items: Iterable[Movie | Person | Song]) -> dict[str, Movie | Person | Song]:
    """Key detail rows by their id as a string, to match ``entity_id``."""
    return {str(item.id): item for item in items}


def ids_by_type(entries: Iterable[TrendingEntry]) -> dict[str, list[str]]:
    """Entity ids to look up, per entity type, in first-seen order."""
    ids: dict[str, list[str]] = {t: [] for t in VALID_ENTITY_TYPES}
    for entry in entries:
        if entry.entity_id not in ids[entry.entity_type]:
            ids[entry.entity_type].append(entry.entity_id)
    return ids


def rank_weekly_trending(
    week_start: date,
    entries: Sequence[TrendingEntry],
    details: Mapping[str, Iterable[Movie | Person | Song]],
    limit: int | None = None,
) -> TrendingBoard:
    """Build the weekly trending board.

    Args:
        week_start: The week being ranked. Entries for other weeks are ignored.
        entries: Raw entries, normally already filtered to ``week_start``.
        details: entity_type -> fetched rows for that type. A missing key
            behaves like an empty detail set.
        limit: Optional per-type cap applied after the join.

    Returns:
        TrendingBoard with a (possibly empty) group for every entity type.
    """
    board = TrendingBoard(week_start=week_start)
    lookups = {t: index_by_id(details.get(t, ())) for t in VALID_ENTITY_TYPES}

    for entry in sort_by_score(entries):
        if entry.week_start != week_start:
            logger.debug(
                "Ignoring %s/%s from week %s", entry.entity_type, entry.entity_id, entry.week_start
            )
            continue

        group = board.groups[entry.entity_type]
        if limit is not None and len(group) >= limit:
            continue

        item = lookups[entry.entity_type].get(entry.entity_id)
        if item is None:
            board.dropped += 1
            logger.debug("No %s row for trending entity_id=%s", entry.entity_type, entry.entity_id)
            continue

        group.append(RankedEntry(entry=entry, item=item, rank=len(group) + 1))

    if board.dropped:
        logger.info(
            "Dropped %d trending entries without a matching row (week %s)",
            board.dropped, week_start,
        )
    return board
