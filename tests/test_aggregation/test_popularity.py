"""Tests for most-watchlisted and most-searched tallies."""

import pytest

from metamovies.aggregation.popularity import most_searched, most_watchlisted, normalize_query
from metamovies.catalog.schemas import Movie, SearchEventRow, WatchlistRow


def _watch(user: str, movie_id: int | None, title: str | None = None) -> WatchlistRow:
    movie = Movie(id=movie_id, title=title or f"movie_{movie_id}") if movie_id is not None else None
    return WatchlistRow(user_id=user, movie_id=movie_id, movie=movie)


def _search(*queries: str) -> list[SearchEventRow]:
    return [SearchEventRow(query=q) for q in queries]


class TestMostWatchlisted:

    def test_counts_and_orders(self) -> None:
        rows = [_watch("u1", 1), _watch("u2", 2), _watch("u3", 2), _watch("u4", 3), _watch("u5", 2)]

        result = most_watchlisted(rows)

        assert [(r.movie_id, r.count) for r in result] == [(2, 3), (1, 1), (3, 1)]

    def test_null_movie_rows_excluded(self) -> None:
        rows = [_watch("u1", None), _watch("u2", 1), _watch("u3", None)]

        result = most_watchlisted(rows)

        assert [(r.movie_id, r.count) for r in result] == [(1, 1)]

    def test_count_sum_matches_non_null_rows(self) -> None:
        rows = [_watch(f"u{i}", i % 4 if i % 5 else None) for i in range(40)]
        non_null = sum(1 for r in rows if r.movie_id is not None)

        result = most_watchlisted(rows, limit=None)

        assert sum(r.count for r in result) == non_null

    def test_ties_keep_first_encounter_order(self) -> None:
        rows = [_watch("u1", 9), _watch("u2", 4), _watch("u3", 7), _watch("u4", 4), _watch("u5", 9)]

        result = most_watchlisted(rows)

        assert [r.movie_id for r in result] == [9, 4, 7]

    def test_keeps_last_seen_snapshot(self) -> None:
        rows = [_watch("u1", 1, "Old Title"), _watch("u2", 1, "New Title")]

        result = most_watchlisted(rows)

        assert result[0].movie.title == "New Title"

    def test_limit_truncates(self) -> None:
        rows = [_watch(f"u{i}", i) for i in range(20)]
        assert len(most_watchlisted(rows, limit=12)) == 12

    def test_empty(self) -> None:
        assert most_watchlisted([]) == []


class TestNormalizeQuery:

    @pytest.mark.parametrize(
        "raw, expected",
        [("Batman", "batman"), ("  The Batman ", "the batman"), ("", ""), (None, "")],
    )
    def test_trim_and_lower(self, raw, expected) -> None:
        assert normalize_query(raw) == expected

    def test_idempotent(self) -> None:
        once = normalize_query("  DUNE Part Two ")
        assert normalize_query(once) == once


class TestMostSearched:

    def test_case_and_whitespace_merge(self) -> None:
        result = most_searched(_search("Batman", "batman ", " BATMAN"))

        assert len(result) == 1
        assert result[0].query == "batman"
        assert result[0].count == 3

    def test_blank_queries_dropped(self) -> None:
        result = most_searched(_search("", "   ", "dune"))
        assert [(r.query, r.count) for r in result] == [("dune", 1)]

    def test_sorted_by_count_ties_first_seen(self) -> None:
        result = most_searched(_search("dune", "oppenheimer", "barbie", "Barbie", "Dune", "wonka"))

        assert [(r.query, r.count) for r in result] == [
            ("dune", 2), ("barbie", 2), ("oppenheimer", 1), ("wonka", 1),
        ]

    def test_limit(self) -> None:
        result = most_searched(_search(*[f"q{i}" for i in range(15)]), limit=10)
        assert len(result) == 10
