"""
Pydantic schemas for API request/response validation.
"""

from cinelist.api.models.movie import MovieDetail, MovieListItem, MovieList
from cinelist.api.models.watchlist import (
    WatchlistAddRequest, WatchlistReorderRequest, WatchlistItemResponse, WatchlistResponse
)
from cinelist.api.models.rating import RatingRequest, RatingResponse, RatingList

__all__ = [
    "MovieDetail",
    "MovieListItem",
    "MovieList",
    "WatchlistAddRequest",
    "WatchlistReorderRequest",
    "WatchlistItemResponse",
    "WatchlistResponse",
    "RatingRequest",
    "RatingResponse",
    "RatingList",
]
