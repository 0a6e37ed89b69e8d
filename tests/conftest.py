"""
Shared fixtures: an in-memory database and a scripted metadata provider.
"""

from datetime import date

import pytest

from cinelist.core.catalog.provider import MetadataProvider, MovieRecord
from cinelist.database import crud
from cinelist.database.connection import DatabaseManager, sqlite_url
from cinelist.database.models import Movie, MovieKind
from cinelist.errors import TransientProviderError


class FakeProvider(MetadataProvider):
    """Metadata provider serving canned records and recording every call."""

    def __init__(self):
        self.records = {}
        self.searches = {}
        self.failing = set()
        self.detail_calls = []
        self.search_calls = []

    def add_record(self, movie_id, title, kind="movie", genre=None, **kwargs):
        record = MovieRecord(movie_id=movie_id, title=title, kind=kind, genre=genre, **kwargs)
        self.records[movie_id] = record
        return record

    def add_search(self, query, *hits):
        self.searches[query] = list(hits)

    def fetch_detail(self, id_or_title):
        self.detail_calls.append(id_or_title)
        if id_or_title in self.failing:
            raise TransientProviderError(f"provider down for {id_or_title}")
        return self.records.get(id_or_title)

    def search_by_title(self, title):
        self.search_calls.append(title)
        return list(self.searches.get(title, []))

    @property
    def call_count(self):
        return len(self.detail_calls) + len(self.search_calls)


@pytest.fixture
def db_manager():
    """In-memory SQLite database with all tables created."""
    manager = DatabaseManager(database_url="sqlite://")
    manager.create_tables()
    yield manager
    manager.close()


@pytest.fixture
def file_db_manager(tmp_path):
    """SQLite file database; every session gets its own connection."""
    manager = DatabaseManager(
        database_url=sqlite_url(str(tmp_path / "cinelist.db")),
        busy_timeout=10
    )
    manager.create_tables()
    yield manager
    manager.close()


@pytest.fixture
def provider():
    """Fresh scripted metadata provider."""
    return FakeProvider()


def _movie_adder(manager):
    def _add(*movie_ids, genre="Drama", kind=MovieKind.MOVIE):
        with manager.session_scope() as session:
            for movie_id in movie_ids:
                crud.create_movie(session, Movie(
                    movie_id=movie_id,
                    title=f"Title {movie_id}",
                    kind=kind,
                    genre=genre,
                    released=date(2000, 1, 1),
                ))
        return list(movie_ids)
    return _add


@pytest.fixture
def add_movies(db_manager):
    """Store movies directly, bypassing the provider."""
    return _movie_adder(db_manager)


@pytest.fixture
def add_file_movies(file_db_manager):
    """Same as add_movies, against the file database."""
    return _movie_adder(file_db_manager)
