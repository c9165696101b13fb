"""Typed records for rows read from the hosted catalog database.

Joined rows (a watchlist entry with its movie, a release with its movie and
platform) carry the joined object as an explicit optional field. Display
fallbacks such as "Unknown Artist" are applied here, when the record is
built, so consumers never need to repeat them.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Literal

EntityType = Literal["movie", "person", "song"]
ReleaseType = Literal["theatre", "ott"]

VALID_ENTITY_TYPES: tuple[str, ...] = ("movie", "person", "song")
VALID_RELEASE_TYPES = frozenset({"theatre", "ott"})

UNKNOWN_ARTIST = "Unknown Artist"
UNTITLED = "Untitled"


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


@dataclass
class Movie:
    """A movie row (only the columns the aggregation views display)."""

    id: int
    title: str = UNTITLED
    poster_url: str | None = None
    backdrop_url: str | None = None
    release_date: date | None = None
    language: str | None = None
    trending: bool = False

    def __post_init__(self) -> None:
        if _blank(self.title):
            self.title = UNTITLED

    @property
    def image_url(self) -> str | None:
        """Poster, falling back to the backdrop."""
        return self.poster_url or self.backdrop_url


@dataclass
class Person:
    """A cast/crew member row."""

    id: int
    name: str = "Unknown"
    profile_url: str | None = None
    known_for: str | None = None

    def __post_init__(self) -> None:
        if _blank(self.name):
            self.name = "Unknown"

    @property
    def initial(self) -> str:
        return self.name[0].upper() if self.name else "?"


@dataclass
class Song:
    """A song row; a missing artist is reported as "Unknown Artist"."""

    id: int
    title: str = UNTITLED
    artist: str = UNKNOWN_ARTIST
    cover_url: str | None = None
    album: str | None = None

    def __post_init__(self) -> None:
        if _blank(self.title):
            self.title = UNTITLED
        if _blank(self.artist):
            self.artist = UNKNOWN_ARTIST


@dataclass
class Platform:
    """A streaming platform (OTT provider)."""

    id: int
    name: str = "OTT"
    logo_url: str | None = None
    is_active: bool = True

    def __post_init__(self) -> None:
        if _blank(self.name):
            self.name = "OTT"


@dataclass
class TrendingEntry:
    """
    A precomputed weekly popularity score for a movie, person or song.

    Identified by (entity_type, entity_id, week_start). Produced by an
    upsert elsewhere; the aggregation layer only ranks and groups these.

    Attributes:
        entity_type: One of movie, person, song.
        entity_id: Primary key of the referenced row, as a string.
        week_start: Monday of the trending week.
        score: Popularity score (higher = more trending).
        metrics: Opaque JSON blob carried through untouched.
        id: Surrogate row id, when read from the database.
    """

    entity_type: EntityType
    entity_id: str
    week_start: date
    score: float
    metrics: dict[str, Any] = field(default_factory=dict)
    id: int | None = None

    def __post_init__(self) -> None:
        if self.entity_type not in VALID_ENTITY_TYPES:
            raise ValueError(
                f"Invalid entity_type {self.entity_type!r}. "
                f"Must be one of: {list(VALID_ENTITY_TYPES)}"
            )
        self.entity_id = str(self.entity_id)
        self.score = float(self.score)

    @property
    def key(self) -> tuple[str, str, date]:
        return (self.entity_type, self.entity_id, self.week_start)


@dataclass
class WatchlistRow:
    """A user's saved-for-later entry, joined with its movie when present."""

    user_id: str
    movie_id: int | None = None
    movie: Movie | None = None
    series_id: int | None = None


@dataclass
class SearchEventRow:
    """A single search submitted by a (possibly anonymous) user."""

    query: str
    user_id: str | None = None
    created_at: datetime | None = None


@dataclass
class ReleaseRow:
    """
    A scheduled theatrical or streaming release of a movie.

    Attributes:
        id: Release row id.
        movie_id: The released movie.
        release_type: "theatre" or "ott".
        release_date: Calendar date of the release (no time component).
        platform_id: Streaming platform for OTT releases.
        language: Release language, if restricted.
        region: Release region, if restricted.
        movie: Joined movie, when the query included it.
        platform: Joined platform, when the query included it.
    """

    id: int
    movie_id: int
    release_type: ReleaseType
    release_date: date
    platform_id: int | None = None
    language: str | None = None
    region: str | None = None
    movie: Movie | None = None
    platform: Platform | None = None

    def __post_init__(self) -> None:
        if self.release_type not in VALID_RELEASE_TYPES:
            raise ValueError(
                f"Invalid release_type {self.release_type!r}. "
                f"Must be one of: {sorted(VALID_RELEASE_TYPES)}"
            )

    @property
    def date_key(self) -> str:
        """ISO ``YYYY-MM-DD`` form of the release date."""
        return self.release_date.isoformat()

    @property
    def title(self) -> str:
        return self.movie.title if self.movie else UNTITLED

    @property
    def display_platform(self) -> str:
        if self.release_type == "ott":
            return self.platform.name if self.platform else "OTT"
        return "Theatre"
