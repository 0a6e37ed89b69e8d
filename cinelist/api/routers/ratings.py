"""
Rating API endpoints.

Users rate movies that are already in the catalog; one rating per user and movie.
"""

from fastapi import APIRouter, Depends, Response

from cinelist.api.dependencies import get_rating_manager
from cinelist.api.models.rating import RatingList, RatingRequest, RatingResponse
from cinelist.core.ratings import RatingEntry, RatingManager

router = APIRouter(tags=["ratings"])


def _listing(entries: list[RatingEntry]) -> RatingList:
    return RatingList(
        ratings=[RatingResponse.model_validate(e) for e in entries],
        count=len(entries),
    )


@router.put("/api/users/{user_id}/ratings/{movie_id}", response_model=RatingResponse)
def rate_movie(
    user_id: str,
    movie_id: str,
    body: RatingRequest,
    ratings: RatingManager = Depends(get_rating_manager),
):
    """Rate a stored movie, replacing the user's previous rating of it."""
    entry = ratings.rate(user_id, movie_id, body.score, body.comment)
    return RatingResponse.model_validate(entry)


@router.delete("/api/users/{user_id}/ratings/{movie_id}", status_code=204)
def delete_rating(
    user_id: str,
    movie_id: str,
    ratings: RatingManager = Depends(get_rating_manager),
):
    """Delete the user's rating of a movie. Deleting an absent rating is not an error."""
    ratings.delete_rating(user_id, movie_id)
    return Response(status_code=204)


@router.get("/api/users/{user_id}/ratings", response_model=RatingList)
def get_user_ratings(user_id: str, ratings: RatingManager = Depends(get_rating_manager)):
    """Get the ratings a user has given, most recent first."""
    return _listing(ratings.ratings_for_user(user_id))


@router.get("/api/movies/{movie_id}/ratings", response_model=RatingList)
def get_movie_ratings(movie_id: str, ratings: RatingManager = Depends(get_rating_manager)):
    """Get the ratings of a stored movie, most recent first."""
    return _listing(ratings.ratings_for_movie(movie_id))
