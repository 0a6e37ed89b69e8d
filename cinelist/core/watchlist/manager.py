"""
Ranked watchlist engine.

Creates, reads and mutates a user's watchlist while keeping the positions of
its N items exactly 1..N after every successful operation.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cinelist.core.watchlist import renumbering
from cinelist.core.watchlist.locks import ListLockRegistry
from cinelist.database import crud
from cinelist.database.connection import DatabaseManager
from cinelist.database.models import WatchList, WatchListItem
from cinelist.errors import NotFoundError, ReferentialError, StorageError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WatchlistHandle:
    """Reference to a user's watchlist."""
    watchlist_id: int
    user_id: str


@dataclass(frozen=True)
class WatchlistEntry:
    """One ranked item of a watchlist."""
    movie_id: str
    position: int
    title: Optional[str] = None
    poster_url: Optional[str] = None


def _to_entry(item: WatchListItem) -> WatchlistEntry:
    movie = item.movie
    return WatchlistEntry(
        movie_id=item.movie_id,
        position=item.position,
        title=movie.title if movie is not None else None,
        poster_url=movie.poster_url if movie is not None else None,
    )


class WatchlistManager:
    """
    Ordered list manager for user watchlists.

    Every public method runs in its own transaction. Mutations additionally
    hold the per-list lock and a row lock on the watchlist, so two mutations
    of the same list never interleave.

    Usage:
        manager = WatchlistManager(db_manager)
        handle = manager.get_or_create_list("user-1")
        manager.add_item(handle, "tt0133093")
        manager.reorder_item(handle, "tt0133093", 1)
    """

    def __init__(self, db_manager: DatabaseManager, locks: Optional[ListLockRegistry] = None):
        self.db_manager = db_manager
        self.locks = locks if locks is not None else ListLockRegistry()

    # ==================== LIST ACCESS ====================

    def get_or_create_list(self, user_id: str) -> WatchlistHandle:
        """
        Fetch the user's watchlist, creating it on first access.

        A concurrent first creation that loses on the unique user constraint
        re-reads and returns the winner's list.

        Raises:
            ValidationError: If user_id is blank
            StorageError: If the list can neither be created nor read
        """
        if not user_id or not str(user_id).strip():
            raise ValidationError("user_id is required")
        user_id = str(user_id).strip()

        try:
            with self.db_manager.session_scope() as session:
                watchlist = crud.get_watchlist_by_user(session, user_id)
                if watchlist is not None:
                    return WatchlistHandle(watchlist.watchlist_id, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read watchlist for user {user_id}: {e}")
            raise StorageError(f"Could not read watchlist for user {user_id}") from e

        try:
            with self.db_manager.session_scope() as session:
                watchlist = crud.create_watchlist(session, user_id)
                handle = WatchlistHandle(watchlist.watchlist_id, user_id)
            logger.info(f"Created watchlist {handle.watchlist_id} for user {user_id}")
            return handle
        except IntegrityError:
            logger.info(f"Watchlist for user {user_id} created concurrently, re-reading")
        except SQLAlchemyError as e:
            logger.error(f"Failed to create watchlist for user {user_id}: {e}")
            raise StorageError(f"Could not create watchlist for user {user_id}") from e

        try:
            with self.db_manager.session_scope() as session:
                watchlist = crud.get_watchlist_by_user(session, user_id)
                if watchlist is not None:
                    return WatchlistHandle(watchlist.watchlist_id, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to re-read watchlist for user {user_id}: {e}")
            raise StorageError(f"Could not read watchlist for user {user_id}") from e
        raise StorageError(f"Could not create watchlist for user {user_id}")

    def list_items(self, handle: WatchlistHandle) -> List[WatchlistEntry]:
        """
        Get the items of a watchlist in ascending position order.

        Raises:
            NotFoundError: If the watchlist does not exist
        """
        try:
            with self.db_manager.session_scope() as session:
                self._load_list(session, handle)
                return self._entries(session, handle.watchlist_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to list watchlist {handle.watchlist_id}: {e}")
            raise StorageError("Could not read the watchlist") from e

    # ==================== MUTATIONS ====================

    def add_item(
        self,
        handle: WatchlistHandle,
        movie_id: str,
        position: Optional[int] = None
    ) -> WatchlistEntry:
        """
        Add a movie to the watchlist.

        Without ``position`` the movie is appended. With ``position`` it is
        clamped to ``[1, count + 1]`` and the items at or above it move down
        one slot. Adding a movie that is already listed changes nothing and
        returns its current entry.

        Raises:
            ReferentialError: If the movie is not in the catalog
            NotFoundError: If the watchlist does not exist
        """
        movie_id = self._require_movie_id(movie_id)

        with self.locks.hold(handle.watchlist_id):
            try:
                with self.db_manager.session_scope() as session:
                    self._load_list(session, handle, for_update=True)

                    existing = crud.get_watchlist_item(session, handle.watchlist_id, movie_id)
                    if existing is not None:
                        logger.debug(f"{movie_id} already in watchlist {handle.watchlist_id}")
                        return _to_entry(existing)

                    if not crud.movie_exists(session, movie_id):
                        raise ReferentialError(
                            f"Movie {movie_id} is not in the catalog; ensure it first"
                        )

                    if position is None:
                        target = crud.get_max_position(session, handle.watchlist_id) + 1
                    else:
                        count = crud.get_item_count(session, handle.watchlist_id)
                        target = renumbering.clamp_position(position, count + 1)
                        renumbering.shift_positions(session, handle.watchlist_id, target, +1)

                    item = crud.create_watchlist_item(session, handle.watchlist_id, movie_id, target)
                    entry = _to_entry(item)
                logger.info(f"Added {movie_id} to watchlist {handle.watchlist_id} at {entry.position}")
                return entry
            except SQLAlchemyError as e:
                logger.error(f"Failed to add {movie_id} to watchlist {handle.watchlist_id}: {e}")
                raise StorageError("Could not add the movie to the watchlist") from e

    def remove_item(self, handle: WatchlistHandle, movie_id: str) -> bool:
        """
        Remove a movie from the watchlist and close the gap it leaves.

        Returns:
            True if the movie was removed, False if it was not listed
        """
        movie_id = self._require_movie_id(movie_id)

        with self.locks.hold(handle.watchlist_id):
            try:
                with self.db_manager.session_scope() as session:
                    self._load_list(session, handle, for_update=True)

                    item = crud.get_watchlist_item(session, handle.watchlist_id, movie_id)
                    if item is None:
                        return False

                    removed_position = item.position
                    crud.delete_watchlist_item(session, item)
                    renumbering.shift_positions(
                        session, handle.watchlist_id, removed_position + 1, -1
                    )
                logger.info(f"Removed {movie_id} from watchlist {handle.watchlist_id}")
                return True
            except SQLAlchemyError as e:
                logger.error(f"Failed to remove {movie_id} from watchlist {handle.watchlist_id}: {e}")
                raise StorageError("Could not remove the movie from the watchlist") from e

    def reorder_item(
        self,
        handle: WatchlistHandle,
        movie_id: str,
        new_position: int
    ) -> List[WatchlistEntry]:
        """
        Move a listed movie to ``new_position`` (clamped to ``[1, N]``).

        The new order is written with parked renumbering in one transaction;
        on failure the list is left exactly as before.

        Returns:
            The reordered list

        Raises:
            ReferentialError: If the movie is not in this watchlist
        """
        movie_id = self._require_movie_id(movie_id)

        with self.locks.hold(handle.watchlist_id):
            try:
                with self.db_manager.session_scope() as session:
                    self._load_list(session, handle, for_update=True)

                    items = crud.get_watchlist_items(session, handle.watchlist_id)
                    current_order = [item.movie_id for item in items]
                    if movie_id not in current_order:
                        raise ReferentialError(
                            f"Movie {movie_id} is not in watchlist {handle.watchlist_id}"
                        )

                    new_order = renumbering.move_to(current_order, movie_id, new_position)
                    if new_order != current_order:
                        renumbering.renumber(session, handle.watchlist_id, new_order)
                    entries = self._entries(session, handle.watchlist_id)
                logger.info(
                    f"Moved {movie_id} in watchlist {handle.watchlist_id} "
                    f"to {new_order.index(movie_id) + 1}"
                )
                return entries
            except SQLAlchemyError as e:
                logger.error(f"Failed to reorder watchlist {handle.watchlist_id}: {e}")
                raise StorageError("Could not reorder the watchlist") from e

    # ==================== HELPERS ====================

    @staticmethod
    def _require_movie_id(movie_id: str) -> str:
        if not movie_id or not str(movie_id).strip():
            raise ValidationError("movie_id is required")
        return str(movie_id).strip()

    @staticmethod
    def _load_list(session: Session, handle: WatchlistHandle, for_update: bool = False) -> WatchList:
        watchlist = crud.get_watchlist(session, handle.watchlist_id, for_update=for_update)
        if watchlist is None:
            raise NotFoundError(f"Watchlist {handle.watchlist_id} not found")
        return watchlist

    @staticmethod
    def _entries(session: Session, watchlist_id: int) -> List[WatchlistEntry]:
        return [_to_entry(item) for item in crud.get_watchlist_items(session, watchlist_id)]
