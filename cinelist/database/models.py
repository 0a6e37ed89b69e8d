"""
SQLAlchemy ORM models for the CineList database.

This module defines the Movie, TeamMember, WatchList, WatchListItem and Rating
tables with the relationships and constraints the catalog, watchlist and rating
engines rely on.
"""

import enum
from datetime import date, datetime, timezone
from typing import List, Optional
from sqlalchemy import (
    Integer, String, Float, Text, Date, ForeignKey, Enum,
    CheckConstraint, UniqueConstraint, Index, TIMESTAMP
)
from sqlalchemy.orm import DeclarativeBase, relationship, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


class MovieKind(str, enum.Enum):
    """Kind of catalog entry."""
    MOVIE = "movie"
    SERIES = "series"


class MemberRole(str, enum.Enum):
    """Role of a team member within a movie."""
    CAST = "cast"
    DIRECTOR = "director"
    WRITER = "writer"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


def utcnow() -> datetime:
    """Naive UTC now, matching the TIMESTAMP columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Movie(Base):
    """
    Movie table storing catalog metadata fetched from the metadata provider.

    Attributes:
        movie_id: External IMDb id, primary key
        title: Movie title (required)
        kind: MovieKind.MOVIE or MovieKind.SERIES
        genre: Comma-separated genre list as reported by the provider
        country: Production country list
        poster_url: URL of the poster image
        rating: IMDb rating
        released: Release date
        runtime_minutes: Runtime in minutes
        created_at: Timestamp when the record was first ensured
    """
    __tablename__ = 'movies'
    __mapper_args__ = {'eager_defaults': True}

    movie_id: Mapped[str] = mapped_column(String(20), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    kind: Mapped[MovieKind] = mapped_column(
        Enum(MovieKind, name='movie_kind', values_callable=_enum_values),
        nullable=False,
        default=MovieKind.MOVIE
    )
    genre: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    country: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    poster_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    released: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    runtime_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        server_default=func.current_timestamp()
    )

    # Relationships
    team_members: Mapped[List["TeamMember"]] = relationship(
        "TeamMember",
        back_populates="movie",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="TeamMember.member_id"
    )
    watchlist_items: Mapped[List["WatchListItem"]] = relationship(
        "WatchListItem",
        back_populates="movie",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
    ratings: Mapped[List["Rating"]] = relationship(
        "Rating",
        back_populates="movie",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    __table_args__ = (
        Index('idx_movies_title', 'title'),
        Index('idx_movies_kind', 'kind'),
    )

    @property
    def year(self) -> Optional[int]:
        return self.released.year if self.released else None

    def members_by_role(self, role: MemberRole) -> List[str]:
        """Names of the team members holding ``role``, in insertion order."""
        return [m.name for m in self.team_members if m.role == role]

    def __repr__(self) -> str:
        kind = self.kind.value if self.kind else None
        return f"<Movie(movie_id='{self.movie_id}', title='{self.title}', kind='{kind}')>"


class TeamMember(Base):
    """
    Cast and crew entries owned by a single movie.

    Attributes:
        member_id: Primary key, auto-incremented
        name: Person name
        role: MemberRole
        movie_id: Foreign key to movies table
    """
    __tablename__ = 'team_members'

    member_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[MemberRole] = mapped_column(
        Enum(MemberRole, name='member_role', values_callable=_enum_values),
        nullable=False
    )
    movie_id: Mapped[str] = mapped_column(
        String(20),
        ForeignKey('movies.movie_id', ondelete='CASCADE'),
        nullable=False
    )

    movie: Mapped["Movie"] = relationship("Movie", back_populates="team_members")

    __table_args__ = (
        Index('idx_team_members_movie', 'movie_id'),
    )

    def __repr__(self) -> str:
        role = self.role.value if self.role else None
        return f"<TeamMember(member_id={self.member_id}, name='{self.name}', role='{role}')>"


class WatchList(Base):
    """
    A user's ranked watchlist. At most one per user.

    Attributes:
        watchlist_id: Primary key, auto-incremented
        user_id: Owning user identifier (unique)
        created_at: Timestamp when the list was created
    """
    __tablename__ = 'watchlists'
    __mapper_args__ = {'eager_defaults': True}

    watchlist_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        server_default=func.current_timestamp()
    )

    items: Mapped[List["WatchListItem"]] = relationship(
        "WatchListItem",
        back_populates="watchlist",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="WatchListItem.position"
    )

    __table_args__ = (
        UniqueConstraint('user_id', name='unique_watchlist_user'),
    )

    def __repr__(self) -> str:
        return f"<WatchList(watchlist_id={self.watchlist_id}, user_id='{self.user_id}')>"


class WatchListItem(Base):
    """
    Entry of a watchlist. Positions form exactly 1..N within a list.

    Attributes:
        watchlist_id: Foreign key to watchlists table (part of primary key)
        movie_id: Foreign key to movies table (part of primary key)
        position: 1-based rank, unique within the list
        added_at: Timestamp when the movie was added
    """
    __tablename__ = 'watchlist_items'
    __mapper_args__ = {'eager_defaults': True}

    watchlist_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey('watchlists.watchlist_id', ondelete='CASCADE'),
        primary_key=True
    )
    movie_id: Mapped[str] = mapped_column(
        String(20),
        ForeignKey('movies.movie_id', ondelete='CASCADE'),
        primary_key=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    added_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        server_default=func.current_timestamp()
    )

    watchlist: Mapped["WatchList"] = relationship("WatchList", back_populates="items")
    movie: Mapped["Movie"] = relationship("Movie", back_populates="watchlist_items")

    __table_args__ = (
        CheckConstraint("position >= 1", name='check_position_positive'),
        UniqueConstraint('watchlist_id', 'position', name='unique_watchlist_position'),
        Index('idx_watchlist_items_movie', 'movie_id'),
    )

    def __repr__(self) -> str:
        return (
            f"<WatchListItem(watchlist_id={self.watchlist_id}, "
            f"movie_id='{self.movie_id}', position={self.position})>"
        )


class Rating(Base):
    """
    A user's 1-5 score for a movie, with an optional comment.

    Attributes:
        rating_id: Primary key, auto-incremented
        user_id: Rating user identifier
        movie_id: Foreign key to movies table
        score: Whole number from 1 to 5
        comment: Free-text review
        rated_at: Time of the latest score, set again on every update
    """
    __tablename__ = 'ratings'

    rating_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    movie_id: Mapped[str] = mapped_column(
        String(20),
        ForeignKey('movies.movie_id', ondelete='CASCADE'),
        nullable=False
    )
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    rated_at: Mapped[datetime] = mapped_column(TIMESTAMP, nullable=False, default=utcnow)

    movie: Mapped["Movie"] = relationship("Movie", back_populates="ratings")

    __table_args__ = (
        CheckConstraint('score >= 1 AND score <= 5', name='check_score_range'),
        UniqueConstraint('user_id', 'movie_id', name='unique_user_movie'),
        Index('idx_ratings_user', 'user_id'),
        Index('idx_ratings_movie', 'movie_id'),
    )

    def __repr__(self) -> str:
        return (
            f"<Rating(user_id='{self.user_id}', movie_id='{self.movie_id}', "
            f"score={self.score})>"
        )
