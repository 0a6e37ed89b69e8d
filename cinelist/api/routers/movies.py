"""
Movie API endpoints.
"""

from fastapi import APIRouter, Depends, Query

from cinelist.api.dependencies import get_catalog
from cinelist.api.models.movie import MovieDetail, MovieListItem, MovieList
from cinelist.core.catalog import CatalogSynchronizer

router = APIRouter(prefix="/api/movies", tags=["movies"])


@router.get("/search", response_model=MovieList)
def search_movies(
    imdb_id: str | None = Query(None),
    title: str | None = Query(None),
    genre: str | None = Query(None),
    movie_type: str | None = Query(None, alias="type", description="movie or series (synonyms accepted)"),
    catalog: CatalogSynchronizer = Depends(get_catalog),
):
    """Search the catalog, fetching from the metadata provider when nothing is stored yet."""
    movies = catalog.search_and_ensure(
        movie_id=imdb_id, title=title, genre=genre, movie_type=movie_type
    )
    return MovieList(
        movies=[MovieListItem.from_movie(m) for m in movies],
        total=len(movies),
    )


@router.get("/{movie_id}", response_model=MovieDetail)
def get_movie(movie_id: str, catalog: CatalogSynchronizer = Depends(get_catalog)):
    """Get stored movie details by ID."""
    return MovieDetail.from_movie(catalog.get_movie(movie_id))
