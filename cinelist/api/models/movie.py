"""
Pydantic schemas for Movie API.
"""

from datetime import date

from pydantic import BaseModel

from cinelist.database.models import MemberRole, Movie


def _join(names: list[str]) -> str | None:
    return ", ".join(names) or None


class MovieListItem(BaseModel):
    """Response model for a movie in search results."""

    movie_id: str
    title: str
    kind: str
    genre: str | None
    poster_url: str | None
    rating: float | None
    year: int | None

    class Config:
        from_attributes = True

    @classmethod
    def from_movie(cls, movie: Movie) -> "MovieListItem":
        return cls(
            movie_id=movie.movie_id,
            title=movie.title,
            kind=movie.kind.value,
            genre=movie.genre,
            poster_url=movie.poster_url,
            rating=movie.rating,
            year=movie.year,
        )


class MovieDetail(MovieListItem):
    """Response model for a single movie with its team."""

    country: str | None
    released: date | None
    runtime_minutes: int | None
    director: str | None
    writer: str | None
    actors: str | None

    @classmethod
    def from_movie(cls, movie: Movie) -> "MovieDetail":
        return cls(
            movie_id=movie.movie_id,
            title=movie.title,
            kind=movie.kind.value,
            genre=movie.genre,
            poster_url=movie.poster_url,
            rating=movie.rating,
            year=movie.year,
            country=movie.country,
            released=movie.released,
            runtime_minutes=movie.runtime_minutes,
            director=_join(movie.members_by_role(MemberRole.DIRECTOR)),
            writer=_join(movie.members_by_role(MemberRole.WRITER)),
            actors=_join(movie.members_by_role(MemberRole.CAST)),
        )


class MovieList(BaseModel):
    """Response model for list of movies with total count."""

    movies: list[MovieListItem]
    total: int
