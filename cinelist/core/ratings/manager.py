"""
User ratings of stored movies.

A user holds at most one rating per movie; rating again replaces the score,
the comment and the rating time.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cinelist.database import crud
from cinelist.database.connection import DatabaseManager
from cinelist.database.models import Rating, utcnow
from cinelist.errors import ReferentialError, StorageError, ValidationError

logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 5


@dataclass(frozen=True)
class RatingEntry:
    """A user's rating of one movie."""
    user_id: str
    movie_id: str
    score: int
    rated_at: datetime
    comment: Optional[str] = None
    title: Optional[str] = None


def _to_entry(rating: Rating) -> RatingEntry:
    movie = rating.movie
    return RatingEntry(
        user_id=rating.user_id,
        movie_id=rating.movie_id,
        score=rating.score,
        rated_at=rating.rated_at,
        comment=rating.comment,
        title=movie.title if movie is not None else None,
    )


def _require(value: str, name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{name} is required")
    return str(value).strip()


class RatingManager:
    """
    Create, replace, list and delete user ratings.

    Only movies already in the catalog can be rated; callers ensure them
    through the catalog synchronizer first.

    Usage:
        ratings = RatingManager(db_manager)
        ratings.rate("user-1", "tt0133093", 5, comment="Still holds up")
        ratings.ratings_for_movie("tt0133093")
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager

    def rate(
        self,
        user_id: str,
        movie_id: str,
        score: int,
        comment: Optional[str] = None
    ) -> RatingEntry:
        """
        Rate a movie, replacing the user's previous rating of it.

        Raises:
            ValidationError: If an id is blank or score is not a whole number in 1..5
            ReferentialError: If the movie is not in the catalog
            StorageError: If the rating cannot be written
        """
        user_id = _require(user_id, "user_id")
        movie_id = _require(movie_id, "movie_id")
        if isinstance(score, bool) or not isinstance(score, int) \
                or not MIN_SCORE <= score <= MAX_SCORE:
            raise ValidationError(f"score must be a whole number from {MIN_SCORE} to {MAX_SCORE}")
        comment = comment.strip() if comment and comment.strip() else None

        try:
            return self._upsert(user_id, movie_id, score, comment)
        except IntegrityError:
            # A concurrent first rating by the same user won; update it instead
            logger.info(f"Rating of {movie_id} by {user_id} created concurrently, updating")
        except SQLAlchemyError as e:
            logger.error(f"Failed to rate {movie_id} for user {user_id}: {e}")
            raise StorageError(f"Could not rate movie {movie_id}") from e

        try:
            return self._upsert(user_id, movie_id, score, comment)
        except SQLAlchemyError as e:
            logger.error(f"Failed to rate {movie_id} for user {user_id}: {e}")
            raise StorageError(f"Could not rate movie {movie_id}") from e

    def delete_rating(self, user_id: str, movie_id: str) -> bool:
        """
        Delete the user's rating of a movie.

        Returns:
            True if a rating was deleted, False if the user had not rated it

        Raises:
            ReferentialError: If the movie is not in the catalog
        """
        user_id = _require(user_id, "user_id")
        movie_id = _require(movie_id, "movie_id")

        try:
            with self.db_manager.session_scope() as session:
                self._require_movie(session, movie_id)
                rating = crud.get_rating_by_user_movie(session, user_id, movie_id)
                if rating is None:
                    return False
                crud.delete_rating(session, rating)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete rating of {movie_id} by {user_id}: {e}")
            raise StorageError(f"Could not delete rating of movie {movie_id}") from e

        logger.info(f"Deleted rating of {movie_id} by user {user_id}")
        return True

    def ratings_for_movie(self, movie_id: str) -> List[RatingEntry]:
        """
        Ratings of a movie, most recent first.

        Raises:
            ReferentialError: If the movie is not in the catalog
        """
        movie_id = _require(movie_id, "movie_id")
        try:
            with self.db_manager.session_scope() as session:
                self._require_movie(session, movie_id)
                return [_to_entry(r) for r in crud.get_ratings_by_movie(session, movie_id)]
        except SQLAlchemyError as e:
            logger.error(f"Failed to read ratings of {movie_id}: {e}")
            raise StorageError(f"Could not read ratings of movie {movie_id}") from e

    def ratings_for_user(self, user_id: str) -> List[RatingEntry]:
        """Ratings given by a user, most recent first. Empty for unknown users."""
        user_id = _require(user_id, "user_id")
        try:
            with self.db_manager.session_scope() as session:
                return [_to_entry(r) for r in crud.get_ratings_by_user(session, user_id)]
        except SQLAlchemyError as e:
            logger.error(f"Failed to read ratings by user {user_id}: {e}")
            raise StorageError(f"Could not read ratings of user {user_id}") from e

    # ==================== HELPERS ====================

    @staticmethod
    def _require_movie(session: Session, movie_id: str) -> None:
        if not crud.movie_exists(session, movie_id):
            raise ReferentialError(f"Movie {movie_id} is not in the catalog; ensure it first")

    def _upsert(
        self,
        user_id: str,
        movie_id: str,
        score: int,
        comment: Optional[str]
    ) -> RatingEntry:
        with self.db_manager.session_scope() as session:
            self._require_movie(session, movie_id)
            rating = crud.get_rating_by_user_movie(session, user_id, movie_id)
            if rating is None:
                rating = crud.create_rating(session, user_id, movie_id, score, comment)
                action = "Created"
            else:
                rating.score = score
                rating.comment = comment
                rating.rated_at = utcnow()
                session.flush()
                action = "Updated"
            entry = _to_entry(rating)
        logger.info(f"{action} rating {score} of {movie_id} by user {user_id}")
        return entry
