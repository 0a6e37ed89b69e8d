"""
Unit tests for the cache-aside catalog synchronizer.

Uses the in-memory database and the scripted provider from conftest.
"""

from datetime import date

import pytest

from cinelist.core.catalog.kinds import parse_movie_kind, try_parse_movie_kind
from cinelist.core.catalog.provider import MovieRecord, SearchHit
from cinelist.core.catalog.synchronizer import (
    CatalogSynchronizer, movie_from_record, split_names
)
from cinelist.database import crud
from cinelist.database.models import MemberRole, Movie, MovieKind
from cinelist.errors import NotFoundError, TransientProviderError, ValidationError


@pytest.fixture
def catalog(db_manager, provider):
    """Synchronizer over the in-memory database and scripted provider."""
    return CatalogSynchronizer(db_manager, provider)


def _hit(movie_id, title, kind="movie"):
    return SearchHit(movie_id=movie_id, title=title, year="1999", kind=kind)


def _movie_count(db_manager):
    with db_manager.session_scope() as session:
        return crud.get_movie_count(session)


class TestMovieKind:
    """Tests for kind parsing."""

    @pytest.mark.parametrize("value,expected", [
        ("movie", MovieKind.MOVIE),
        ("Movie", MovieKind.MOVIE),
        (" pelicula ", MovieKind.MOVIE),
        ("película", MovieKind.MOVIE),
        ("film", MovieKind.MOVIE),
        ("series", MovieKind.SERIES),
        ("SERIE", MovieKind.SERIES),
        ("tv", MovieKind.SERIES),
    ])
    def test_known_synonyms(self, value, expected):
        assert parse_movie_kind(value) == expected

    @pytest.mark.parametrize("value", ["episode", "game", "documentary", ""])
    def test_unknown_kind_fails_closed(self, value):
        with pytest.raises(ValidationError):
            parse_movie_kind(value)

    def test_try_parse_returns_none(self):
        assert try_parse_movie_kind("episode") is None
        assert try_parse_movie_kind(None) is None


class TestRecordMapping:
    """Tests for provider record -> Movie mapping."""

    def test_split_names(self):
        assert split_names("A, B ,, C ") == ["A", "B", "C"]
        assert split_names(None) == []
        assert split_names("") == []

    def test_team_members_by_role(self):
        record = MovieRecord(
            movie_id="tt0133093",
            title="The Matrix",
            kind="movie",
            director="Lana Wachowski, Lilly Wachowski",
            writer="Lilly Wachowski",
            actors="Keanu Reeves, Laurence Fishburne, Carrie-Anne Moss",
        )
        movie = movie_from_record(record)

        assert movie.members_by_role(MemberRole.DIRECTOR) == ["Lana Wachowski", "Lilly Wachowski"]
        assert movie.members_by_role(MemberRole.WRITER) == ["Lilly Wachowski"]
        assert movie.members_by_role(MemberRole.CAST) == [
            "Keanu Reeves", "Laurence Fishburne", "Carrie-Anne Moss"
        ]
        assert [m.role for m in movie.team_members][:2] == [MemberRole.DIRECTOR, MemberRole.DIRECTOR]

    def test_kind_mapping(self):
        series = movie_from_record(MovieRecord("tt1", "Show", kind="Series"))
        episode = movie_from_record(MovieRecord("tt2", "Ep", kind="episode"))
        assert series.kind == MovieKind.SERIES
        assert episode.kind == MovieKind.MOVIE


class TestEnsureById:
    """Tests for ensure_by_id."""

    def test_miss_fetches_and_persists(self, catalog, provider, db_manager):
        provider.add_record(
            "tt0133093", "The Matrix", genre="Action, Sci-Fi",
            released=date(1999, 3, 31), runtime_minutes=136, rating=8.7,
            director="Lana Wachowski", actors="Keanu Reeves",
        )

        movie = catalog.ensure_by_id("tt0133093")

        assert movie.movie_id == "tt0133093"
        assert movie.title == "The Matrix"
        assert movie.runtime_minutes == 136
        assert provider.detail_calls == ["tt0133093"]
        with db_manager.session_scope() as session:
            stored = crud.get_movie(session, "tt0133093")
            assert stored.rating == pytest.approx(8.7)
            assert len(crud.get_team_members(session, "tt0133093")) == 2

    def test_second_call_is_cache_hit(self, catalog, provider, db_manager):
        provider.add_record("tt1", "One")

        first = catalog.ensure_by_id("tt1")
        second = catalog.ensure_by_id("tt1")

        assert first.movie_id == second.movie_id == "tt1"
        assert provider.detail_calls == ["tt1"]
        assert _movie_count(db_manager) == 1

    def test_local_movie_never_fetched(self, catalog, provider, add_movies):
        add_movies("tt1")
        assert catalog.ensure_by_id("tt1").title == "Title tt1"
        assert provider.call_count == 0

    def test_not_found_leaves_store_empty(self, catalog, provider, db_manager):
        with pytest.raises(NotFoundError):
            catalog.ensure_by_id("tt000")
        assert _movie_count(db_manager) == 0

    def test_provider_failure_is_transient(self, catalog, provider, db_manager):
        provider.add_record("tt1", "One")
        provider.failing.add("tt1")
        with pytest.raises(TransientProviderError):
            catalog.ensure_by_id("tt1")
        assert _movie_count(db_manager) == 0

    def test_blank_id_rejected(self, catalog, provider):
        with pytest.raises(ValidationError):
            catalog.ensure_by_id("  ")
        assert provider.call_count == 0

    def test_concurrent_insert_returns_existing_row(self, catalog, provider, db_manager):
        """A movie stored by someone else between lookup and insert is reused."""
        provider.add_record("tt1", "From provider")
        real_fetch = provider.fetch_detail

        def fetch_and_race(movie_id):
            with db_manager.session_scope() as session:
                crud.create_movie(session, Movie(movie_id=movie_id, title="Winner"))
            return real_fetch(movie_id)

        provider.fetch_detail = fetch_and_race

        movie = catalog.ensure_by_id("tt1")

        assert movie.title == "Winner"
        assert _movie_count(db_manager) == 1

    def test_record_without_names(self, catalog, provider, db_manager):
        provider.add_record("tt0133093", "The Matrix")

        movie = catalog.ensure_by_id("tt0133093")

        assert movie.team_members == []
        assert len(movie.team_members) == 0
        assert _movie_count(db_manager) == 1

    def test_stored_under_provider_id(self, catalog, provider, db_manager):
        record = provider.add_record("tt0133093", "The Matrix", director="Lana Wachowski")
        provider.records["TT0133093"] = record
        provider.records["The Matrix"] = record

        by_title = catalog.ensure_by_id("The Matrix")
        by_upper = catalog.ensure_by_id("TT0133093")
        by_id = catalog.ensure_by_id("tt0133093")

        assert by_title.movie_id == by_upper.movie_id == by_id.movie_id == "tt0133093"
        assert provider.detail_calls == ["The Matrix", "TT0133093"]
        assert _movie_count(db_manager) == 1
        with db_manager.session_scope() as session:
            assert crud.get_movie(session, "The Matrix") is None
            assert len(crud.get_team_members(session, "tt0133093")) == 1

    def test_blank_provider_id_falls_back_to_request(self, catalog, provider):
        provider.records["tt5"] = MovieRecord(movie_id="", title="Nameless")
        assert catalog.ensure_by_id("tt5").movie_id == "tt5"


class TestGetMovie:
    """Tests for the local-only detail lookup."""

    def test_returns_team(self, catalog, provider):
        provider.add_record("tt1", "One", director="D", writer="W1, W2", actors="A")
        catalog.ensure_by_id("tt1")

        movie = catalog.get_movie("tt1")
        assert movie.members_by_role(MemberRole.WRITER) == ["W1", "W2"]

    def test_missing_movie_does_not_call_provider(self, catalog, provider):
        provider.add_record("tt1", "One")
        with pytest.raises(NotFoundError):
            catalog.get_movie("tt1")
        assert provider.call_count == 0


class TestSearchAndEnsure:
    """Tests for search_and_ensure."""

    def test_id_delegates_to_ensure(self, catalog, provider):
        provider.add_record("tt1", "One")
        result = catalog.search_and_ensure(movie_id="tt1", title="ignored")
        assert [m.movie_id for m in result] == ["tt1"]

    def test_no_title_no_network(self, catalog, provider):
        assert catalog.search_and_ensure(genre="Drama") == []
        assert provider.call_count == 0

    def test_no_filters_on_empty_store(self, catalog, provider):
        assert catalog.search_and_ensure() == []
        assert provider.call_count == 0

    def test_local_hit_is_authoritative(self, catalog, provider, add_movies):
        add_movies("tt1")
        provider.add_search("Title", _hit("tt2", "Title two"))
        provider.add_record("tt2", "Title two")

        result = catalog.search_and_ensure(title="Title")

        assert [m.movie_id for m in result] == ["tt1"]
        assert provider.call_count == 0

    def test_filtered_discovery_seeds_all_returns_matching(self, catalog, provider, db_manager):
        provider.add_search(
            "Matrix",
            _hit("tt0133093", "The Matrix"),
            _hit("tt0234215", "The Matrix Reloaded"),
            _hit("tt0242653", "The Matrix Revolutions"),
        )
        provider.add_record("tt0133093", "The Matrix", genre="Action, Sci-Fi")
        provider.add_record("tt0234215", "The Matrix Reloaded", genre="Action")
        provider.add_record("tt0242653", "The Matrix Revolutions", genre="Action, Thriller")

        result = catalog.search_and_ensure(title="Matrix", genre="Sci-Fi")

        assert [m.movie_id for m in result] == ["tt0133093"]
        assert _movie_count(db_manager) == 3

    def test_results_ordered_by_title(self, catalog, provider):
        provider.add_search("Alien", _hit("tt2", "Aliens"), _hit("tt1", "Alien"))
        provider.add_record("tt2", "Aliens")
        provider.add_record("tt1", "Alien")

        result = catalog.search_and_ensure(title="Alien")

        assert [m.title for m in result] == ["Alien", "Aliens"]

    def test_type_filter_on_candidates(self, catalog, provider, db_manager):
        provider.add_search(
            "Office",
            _hit("tt1", "The Office", kind="series"),
            _hit("tt2", "Office Space", kind="movie"),
            _hit("tt3", "The Office: Pilot", kind="episode"),
        )
        provider.add_record("tt1", "The Office", kind="series")
        provider.add_record("tt2", "Office Space", kind="movie")
        provider.add_record("tt3", "The Office: Pilot", kind="episode")

        result = catalog.search_and_ensure(title="Office", movie_type="pelicula")

        assert [m.movie_id for m in result] == ["tt2"]
        assert provider.detail_calls == ["tt2"]
        assert _movie_count(db_manager) == 1

    def test_unknown_type_rejected_before_any_call(self, catalog, provider):
        with pytest.raises(ValidationError):
            catalog.search_and_ensure(title="Matrix", movie_type="documentary")
        assert provider.call_count == 0

    def test_failing_candidate_is_skipped(self, catalog, provider, db_manager):
        provider.add_search(
            "Heat",
            _hit("tt1", "Heat"),
            _hit("tt2", "Heat Wave"),
            _hit("tt3", "White Heat"),
        )
        provider.add_record("tt1", "Heat")
        provider.add_record("tt3", "White Heat")
        provider.failing.add("tt1")  # tt2 has no record: provider reports not found

        result = catalog.search_and_ensure(title="Heat")

        assert [m.movie_id for m in result] == ["tt3"]
        assert provider.detail_calls == ["tt1", "tt2", "tt3"]
        assert _movie_count(db_manager) == 1

    def test_existing_candidates_not_refetched(self, catalog, provider, add_movies):
        add_movies("tt1", genre="Comedy")
        provider.add_search("Title", _hit("tt1", "Title tt1"), _hit("tt2", "Title tt2"))
        provider.add_record("tt2", "Title tt2", genre="Drama")

        # Local search misses on genre, so the provider is consulted
        result = catalog.search_and_ensure(title="Title", genre="Drama")

        assert [m.movie_id for m in result] == ["tt2"]
        assert provider.detail_calls == ["tt2"]

    def test_search_failure_propagates(self, catalog, provider):
        def broken_search(title):
            raise TransientProviderError("search down")

        provider.search_by_title = broken_search
        with pytest.raises(TransientProviderError):
            catalog.search_and_ensure(title="Matrix")
