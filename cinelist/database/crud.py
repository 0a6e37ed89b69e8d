"""
CRUD operations for Movie, TeamMember, WatchList, WatchListItem and Rating models.

Functions here never commit. They add, flush, and query inside the session
they are given; the calling component owns the transaction boundary.
"""

from typing import List, Optional
from sqlalchemy import func, and_, update
from sqlalchemy.orm import Session

from cinelist.database.models import (
    Movie, MovieKind, Rating, TeamMember, WatchList, WatchListItem
)


# ==================== MOVIE CRUD OPERATIONS ====================

def create_movie(session: Session, movie: Movie) -> Movie:
    """
    Stage a movie together with its team members.

    Args:
        session: Database session
        movie: Movie object, with team_members already attached

    Returns:
        The flushed Movie object
    """
    session.add(movie)
    session.flush()
    return movie


def get_movie(session: Session, movie_id: str) -> Optional[Movie]:
    """
    Get a movie by ID. Team members are loaded eagerly.

    Args:
        session: Database session
        movie_id: External movie ID

    Returns:
        Movie object or None if not found
    """
    return session.query(Movie).filter(Movie.movie_id == movie_id).first()


def movie_exists(session: Session, movie_id: str) -> bool:
    """Check whether a movie is already stored, without loading it."""
    return session.query(
        session.query(Movie.movie_id).filter(Movie.movie_id == movie_id).exists()
    ).scalar()


def get_movie_count(session: Session) -> int:
    """
    Get total count of movies.

    Args:
        session: Database session

    Returns:
        Total number of movies
    """
    return session.query(func.count(Movie.movie_id)).scalar()


def search_movies(
    session: Session,
    title: Optional[str] = None,
    genre: Optional[str] = None,
    kind: Optional[MovieKind] = None
) -> List[Movie]:
    """
    Search stored movies by title, genre and kind.

    Args:
        session: Database session
        title: Case-insensitive substring of the title
        genre: Case-insensitive substring of the genre list
        kind: Exact kind match

    Returns:
        List of Movie objects ordered by title ascending
    """
    query = session.query(Movie)

    if title:
        query = query.filter(Movie.title.ilike(f"%{title}%"))

    if genre:
        query = query.filter(Movie.genre.ilike(f"%{genre}%"))

    if kind is not None:
        query = query.filter(Movie.kind == kind)

    return query.order_by(Movie.title.asc(), Movie.movie_id.asc()).all()


def get_team_members(session: Session, movie_id: str) -> List[TeamMember]:
    """
    Get all team members of a movie.

    Args:
        session: Database session
        movie_id: External movie ID

    Returns:
        List of TeamMember objects in insertion order
    """
    return session.query(TeamMember).filter(
        TeamMember.movie_id == movie_id
    ).order_by(TeamMember.member_id).all()


# ==================== WATCHLIST CRUD OPERATIONS ====================

def create_watchlist(session: Session, user_id: str) -> WatchList:
    """
    Stage a new, empty watchlist for a user.

    Raises:
        sqlalchemy.exc.IntegrityError: If the user already owns a list
    """
    watchlist = WatchList(user_id=user_id)
    session.add(watchlist)
    session.flush()
    return watchlist


def get_watchlist(
    session: Session,
    watchlist_id: int,
    for_update: bool = False
) -> Optional[WatchList]:
    """
    Get a watchlist by ID.

    Args:
        session: Database session
        watchlist_id: Watchlist ID
        for_update: Lock the row until the transaction ends (ignored by SQLite)

    Returns:
        WatchList object or None if not found
    """
    query = session.query(WatchList).filter(WatchList.watchlist_id == watchlist_id)
    if for_update:
        query = query.with_for_update()
    return query.first()


def get_watchlist_by_user(session: Session, user_id: str) -> Optional[WatchList]:
    """Get the watchlist owned by a user, or None."""
    return session.query(WatchList).filter(WatchList.user_id == user_id).first()


def get_watchlist_count(session: Session) -> int:
    """Get total count of watchlists."""
    return session.query(func.count(WatchList.watchlist_id)).scalar()


def get_watchlist_items(session: Session, watchlist_id: int) -> List[WatchListItem]:
    """
    Get the items of a watchlist.

    Args:
        session: Database session
        watchlist_id: Watchlist ID

    Returns:
        List of WatchListItem objects in ascending position order
    """
    return session.query(WatchListItem).filter(
        WatchListItem.watchlist_id == watchlist_id
    ).order_by(WatchListItem.position.asc()).all()


def get_watchlist_item(
    session: Session,
    watchlist_id: int,
    movie_id: str
) -> Optional[WatchListItem]:
    """Get a single watchlist entry, or None if the movie is not listed."""
    return session.query(WatchListItem).filter(
        and_(
            WatchListItem.watchlist_id == watchlist_id,
            WatchListItem.movie_id == movie_id
        )
    ).first()


def get_item_count(session: Session, watchlist_id: int) -> int:
    """Number of items in a watchlist."""
    return session.query(func.count(WatchListItem.movie_id)).filter(
        WatchListItem.watchlist_id == watchlist_id
    ).scalar()


def get_max_position(session: Session, watchlist_id: int) -> int:
    """Highest position in a watchlist, 0 when it is empty."""
    value = session.query(func.max(WatchListItem.position)).filter(
        WatchListItem.watchlist_id == watchlist_id
    ).scalar()
    return value or 0


def create_watchlist_item(
    session: Session,
    watchlist_id: int,
    movie_id: str,
    position: int
) -> WatchListItem:
    """
    Stage a new watchlist entry at a position that is already free.

    Returns:
        The flushed WatchListItem object
    """
    item = WatchListItem(
        watchlist_id=watchlist_id,
        movie_id=movie_id,
        position=position
    )
    session.add(item)
    session.flush()
    return item


def delete_watchlist_item(session: Session, item: WatchListItem) -> None:
    """Delete a watchlist entry and flush so its position is released."""
    session.delete(item)
    session.flush()


def offset_positions(
    session: Session,
    watchlist_id: int,
    delta: int,
    min_position: Optional[int] = None
) -> int:
    """
    Add ``delta`` to the position of every item in a watchlist.

    Args:
        session: Database session
        watchlist_id: Watchlist ID
        delta: Amount added to each matching position
        min_position: Only touch items whose position is >= this value

    Returns:
        Number of rows updated
    """
    conditions = [WatchListItem.watchlist_id == watchlist_id]
    if min_position is not None:
        conditions.append(WatchListItem.position >= min_position)

    result = session.execute(
        update(WatchListItem)
        .where(and_(*conditions))
        .values(position=WatchListItem.position + delta)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


def set_position(
    session: Session,
    watchlist_id: int,
    movie_id: str,
    position: int
) -> None:
    """Write the position of a single watchlist entry."""
    session.execute(
        update(WatchListItem)
        .where(and_(
            WatchListItem.watchlist_id == watchlist_id,
            WatchListItem.movie_id == movie_id
        ))
        .values(position=position)
        .execution_options(synchronize_session=False)
    )


# ==================== RATING CRUD OPERATIONS ====================

def create_rating(
    session: Session,
    user_id: str,
    movie_id: str,
    score: int,
    comment: Optional[str] = None
) -> Rating:
    """
    Stage a new rating.

    Raises:
        sqlalchemy.exc.IntegrityError: If the user already rated the movie
    """
    rating = Rating(user_id=user_id, movie_id=movie_id, score=score, comment=comment)
    session.add(rating)
    session.flush()
    return rating


def get_rating_by_user_movie(session: Session, user_id: str, movie_id: str) -> Optional[Rating]:
    """Get a user's rating for a movie, or None."""
    return session.query(Rating).filter(
        and_(Rating.user_id == user_id, Rating.movie_id == movie_id)
    ).first()


def get_ratings_by_user(session: Session, user_id: str) -> List[Rating]:
    """
    Get all ratings by a user.

    Args:
        session: Database session
        user_id: User identifier

    Returns:
        List of Rating objects, most recent first
    """
    return session.query(Rating).filter(
        Rating.user_id == user_id
    ).order_by(Rating.rated_at.desc(), Rating.rating_id.desc()).all()


def get_ratings_by_movie(session: Session, movie_id: str) -> List[Rating]:
    """
    Get all ratings for a movie.

    Args:
        session: Database session
        movie_id: External movie ID

    Returns:
        List of Rating objects, most recent first
    """
    return session.query(Rating).filter(
        Rating.movie_id == movie_id
    ).order_by(Rating.rated_at.desc(), Rating.rating_id.desc()).all()


def delete_rating(session: Session, rating: Rating) -> None:
    """Delete a rating."""
    session.delete(rating)
    session.flush()


def get_rating_count(session: Session) -> int:
    """Get total count of ratings."""
    return session.query(func.count(Rating.rating_id)).scalar()
