"""Output views produced by the aggregation engine."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterator

from metamovies.catalog.schemas import (
    VALID_ENTITY_TYPES,
    Movie,
    Person,
    ReleaseRow,
    Song,
    TrendingEntry,
)


@dataclass
class RankedEntry:
    """A trending entry joined with the row it points at.

    Attributes:
        entry: The raw weekly trending entry.
        item: The joined Movie, Person or Song.
        rank: 1-indexed position within its entity type.
    """

    entry: TrendingEntry
    item: Movie | Person | Song
    rank: int

    @property
    def score(self) -> float:
        return self.entry.score

    @property
    def label(self) -> str:
        return getattr(self.item, "title", None) or getattr(self.item, "name", "")


@dataclass
class TrendingBoard:
    """Weekly trending entries grouped by entity type, best first."""

    week_start: date
    groups: dict[str, list[RankedEntry]] = field(
        default_factory=lambda: {t: [] for t in VALID_ENTITY_TYPES}
    )
    dropped: int = 0

    def __getitem__(self, entity_type: str) -> list[RankedEntry]:
        return self.groups.get(entity_type, [])

    @property
    def total(self) -> int:
        return sum(len(g) for g in self.groups.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "week_start": self.week_start.isoformat(),
            "dropped": self.dropped,
            "groups": {
                entity_type: [
                    {
                        "rank": r.rank,
                        "entity_id": r.entry.entity_id,
                        "label": r.label,
                        "score": r.score,
                    }
                    for r in ranked
                ]
                for entity_type, ranked in self.groups.items()
            },
        }


@dataclass
class WatchlistPopularity:
    """How many watchlists a movie appears on."""

    movie_id: int
    movie: Movie
    count: int


@dataclass
class SearchFrequency:
    """How often a normalized query was searched."""

    query: str
    count: int


@dataclass
class ReleaseCalendar:
    """One month of releases, bucketed by day, with its display grid.

    Attributes:
        start: First day of the month.
        end: Last day of the month.
        buckets: ISO date string to that day's releases.
        weeks: Sunday-first rows of 7 cells; None pads outside the month.
    """

    start: date
    end: date
    buckets: dict[str, list[ReleaseRow]]
    weeks: list[list[date | None]]

    def releases_on(self, day: date) -> list[ReleaseRow]:
        return self.buckets.get(day.isoformat(), [])

    def days(self) -> Iterator[tuple[date, list[ReleaseRow]]]:
        """Every day of the month with its (possibly empty) releases."""
        for week in self.weeks:
            for day in week:
                if day is not None:
                    yield day, self.releases_on(day)

    @property
    def total(self) -> int:
        return sum(len(rows) for rows in self.buckets.values())
