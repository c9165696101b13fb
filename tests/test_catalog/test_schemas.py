"""Tests for catalog record defaults and validation."""

from datetime import date

import pytest

from metamovies.catalog.schemas import (
    UNKNOWN_ARTIST,
    Movie,
    Person,
    Platform,
    ReleaseRow,
    Song,
    TrendingEntry,
)


class TestTrendingEntry:

    def test_coerces_id_and_score(self) -> None:
        entry = TrendingEntry(entity_type="movie", entity_id=42, week_start=date(2024, 3, 4), score="7.5")

        assert entry.entity_id == "42"
        assert entry.score == 7.5
        assert entry.key == ("movie", "42", date(2024, 3, 4))

    def test_rejects_unknown_entity_type(self) -> None:
        with pytest.raises(ValueError, match="Invalid entity_type"):
            TrendingEntry(entity_type="album", entity_id="1", week_start=date(2024, 3, 4), score=1)


class TestDisplayFallbacks:

    def test_song_blank_artist(self) -> None:
        assert Song(id=1, title="Flowers", artist="  ").artist == UNKNOWN_ARTIST
        assert Song(id=1, title="Flowers", artist=None).artist == UNKNOWN_ARTIST

    def test_song_keeps_artist(self) -> None:
        assert Song(id=1, title="Flowers", artist="Miley Cyrus").artist == "Miley Cyrus"

    def test_movie_blank_title(self) -> None:
        assert Movie(id=1, title=None).title == "Untitled"

    def test_person_initial(self) -> None:
        assert Person(id=1, name="zendaya").initial == "Z"
        assert Person(id=2, name="").name == "Unknown"


class TestReleaseRow:

    def test_ott_platform_name(self) -> None:
        row = ReleaseRow(
            id=1, movie_id=2, release_type="ott", release_date=date(2024, 3, 1),
            platform=Platform(id=3, name="Prime Video"),
        )
        assert row.display_platform == "Prime Video"

    def test_ott_without_platform(self) -> None:
        row = ReleaseRow(id=1, movie_id=2, release_type="ott", release_date=date(2024, 3, 1))
        assert row.display_platform == "OTT"
        assert row.title == "Untitled"

    def test_theatre(self) -> None:
        row = ReleaseRow(id=1, movie_id=2, release_type="theatre", release_date=date(2024, 3, 1))
        assert row.display_platform == "Theatre"
        assert row.date_key == "2024-03-01"

    def test_rejects_unknown_release_type(self) -> None:
        with pytest.raises(ValueError, match="Invalid release_type"):
            ReleaseRow(id=1, movie_id=2, release_type="tv", release_date=date(2024, 3, 1))
