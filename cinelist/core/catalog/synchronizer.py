"""
Cache-aside catalog synchronizer.

Guarantees a movie exists in the local store before anything references it,
fetching it from the metadata provider only on a miss, and backs title
searches with provider discovery when the local catalog has no match.
"""

import logging
from dataclasses import replace
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from cinelist.core.catalog.kinds import parse_movie_kind, try_parse_movie_kind
from cinelist.core.catalog.provider import MetadataProvider, MovieRecord
from cinelist.database import crud
from cinelist.database.connection import DatabaseManager
from cinelist.database.models import MemberRole, Movie, MovieKind, TeamMember
from cinelist.errors import (
    NotFoundError, StorageError, TransientProviderError, ValidationError
)

logger = logging.getLogger(__name__)


def split_names(names: Optional[str]) -> List[str]:
    """Split a comma-separated name list, trimming entries and dropping blanks."""
    if not names:
        return []
    return [name.strip() for name in names.split(",") if name.strip()]


def movie_from_record(record: MovieRecord) -> Movie:
    """
    Map a provider record into a Movie with its team members attached.

    The movie is keyed by the id the provider reports, and its team member
    collection is always initialized, even when the record names nobody.

    Returns:
        Transient Movie object (not yet added to a session)
    """
    kind = MovieKind.SERIES if (record.kind or "").strip().lower() == "series" else MovieKind.MOVIE
    movie = Movie(
        movie_id=record.movie_id,
        title=record.title or "",
        kind=kind,
        genre=record.genre,
        country=record.country,
        poster_url=record.poster_url,
        rating=record.rating,
        released=record.released,
        runtime_minutes=record.runtime_minutes,
        team_members=[],
    )

    for role, names in (
        (MemberRole.DIRECTOR, record.director),
        (MemberRole.WRITER, record.writer),
        (MemberRole.CAST, record.actors),
    ):
        for name in split_names(names):
            movie.team_members.append(TeamMember(name=name, role=role))

    return movie


class CatalogSynchronizer:
    """
    Local-first access to the movie catalog.

    Usage:
        catalog = CatalogSynchronizer(db_manager, OmdbClient(api_key))
        movie = catalog.ensure_by_id("tt0133093")
        movies = catalog.search_and_ensure(title="Matrix", genre="Sci-Fi")
    """

    def __init__(self, db_manager: DatabaseManager, provider: MetadataProvider):
        self.db_manager = db_manager
        self.provider = provider

    def get_movie(self, movie_id: str) -> Movie:
        """
        Get a stored movie with its team members. Never calls the provider.

        Raises:
            ValidationError: If movie_id is blank
            NotFoundError: If the movie is not stored locally
        """
        movie_id = self._require_id(movie_id)
        try:
            with self.db_manager.session_scope() as session:
                movie = crud.get_movie(session, movie_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read movie {movie_id}: {e}")
            raise StorageError(f"Could not read movie {movie_id}") from e

        if movie is None:
            raise NotFoundError(f"Movie {movie_id} not found")
        return movie

    def ensure_by_id(self, movie_id: str) -> Movie:
        """
        Return the movie, fetching and persisting it on a local miss.

        The movie is stored under the id the provider reports, so a title or a
        differently cased id resolves to the same row as the canonical id.
        The movie and its team members are written in a single transaction.

        Raises:
            ValidationError: If movie_id is blank
            NotFoundError: If the provider does not know the id
            TransientProviderError: If the provider fails
            StorageError: If the movie cannot be persisted
        """
        movie_id = self._require_id(movie_id)

        cached = self._find(movie_id)
        if cached is not None:
            logger.debug(f"Catalog hit for {movie_id}")
            return cached

        logger.info(f"Catalog miss for {movie_id}, fetching from provider")
        record = self.provider.fetch_detail(movie_id)
        if record is None:
            raise NotFoundError(f"Movie {movie_id} not found at the metadata provider")

        canonical_id = (record.movie_id or "").strip() or movie_id
        if canonical_id != record.movie_id:
            record = replace(record, movie_id=canonical_id)
        if canonical_id != movie_id:
            stored = self._find(canonical_id)
            if stored is not None:
                logger.info(f"{movie_id!r} resolved to stored movie {canonical_id}")
                return stored

        movie = movie_from_record(record)
        member_count = len(movie.team_members)
        try:
            with self.db_manager.session_scope() as session:
                crud.create_movie(session, movie)
        except IntegrityError as e:
            # Lost a race with a concurrent ensure of the same id
            winner = self._find(canonical_id)
            if winner is not None:
                logger.info(f"{canonical_id} was stored concurrently, using existing row")
                return winner
            logger.error(f"Failed to persist movie {canonical_id}: {e}")
            raise StorageError(f"Could not persist movie {canonical_id}") from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to persist movie {canonical_id}: {e}")
            raise StorageError(f"Could not persist movie {canonical_id}") from e

        logger.info(f"Stored {canonical_id} '{movie.title}' with {member_count} team members")
        return movie

    def search_and_ensure(
        self,
        movie_id: Optional[str] = None,
        title: Optional[str] = None,
        genre: Optional[str] = None,
        movie_type: Optional[str] = None
    ) -> List[Movie]:
        """
        Search the catalog, seeding it from the provider when it has no match.

        A non-empty local result is returned as-is. An empty one triggers a
        provider title search (only when a title is given); every candidate
        not yet stored is ensured, skipping the ones that fail, and the local
        search is run again with the original filters.

        Args:
            movie_id: Exact external id; short-circuits to ensure_by_id
            title: Case-insensitive title substring
            genre: Case-insensitive genre substring
            movie_type: Kind filter, e.g. "movie", "series", "pelicula"

        Returns:
            List of Movie objects ordered by title

        Raises:
            ValidationError: If movie_type is not a recognized kind
        """
        kind = parse_movie_kind(movie_type) if movie_type and movie_type.strip() else None
        title = title.strip() if title and title.strip() else None
        genre = genre.strip() if genre and genre.strip() else None

        if movie_id and movie_id.strip():
            return [self.ensure_by_id(movie_id)]

        local = self._search_local(title, genre, kind)
        if local:
            return local

        if title is None:
            return []

        hits = self.provider.search_by_title(title)
        if kind is not None:
            hits = [hit for hit in hits if try_parse_movie_kind(hit.kind) == kind]

        seeded = 0
        for hit in hits:
            if self._exists(hit.movie_id):
                continue
            try:
                self.ensure_by_id(hit.movie_id)
                seeded += 1
            except (NotFoundError, TransientProviderError) as e:
                logger.warning(f"Skipping candidate {hit.movie_id} for '{title}': {e}")

        logger.info(f"Seeded {seeded} of {len(hits)} provider candidates for '{title}'")
        return self._search_local(title, genre, kind)

    # ==================== HELPERS ====================

    @staticmethod
    def _require_id(movie_id: str) -> str:
        if not movie_id or not str(movie_id).strip():
            raise ValidationError("movie_id is required")
        return str(movie_id).strip()

    def _find(self, movie_id: str) -> Optional[Movie]:
        try:
            with self.db_manager.session_scope() as session:
                return crud.get_movie(session, movie_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read movie {movie_id}: {e}")
            raise StorageError(f"Could not read movie {movie_id}") from e

    def _exists(self, movie_id: str) -> bool:
        try:
            with self.db_manager.session_scope() as session:
                return crud.movie_exists(session, movie_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to check movie {movie_id}: {e}")
            raise StorageError(f"Could not read movie {movie_id}") from e

    def _search_local(
        self,
        title: Optional[str],
        genre: Optional[str],
        kind: Optional[MovieKind]
    ) -> List[Movie]:
        try:
            with self.db_manager.session_scope() as session:
                return crud.search_movies(session, title=title, genre=genre, kind=kind)
        except SQLAlchemyError as e:
            logger.error(f"Local search failed (title={title}, genre={genre}, kind={kind}): {e}")
            raise StorageError("Local catalog search failed") from e
