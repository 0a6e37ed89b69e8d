"""
Pydantic schemas for Rating API.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from cinelist.core.ratings import MAX_SCORE, MIN_SCORE


class RatingRequest(BaseModel):
    """Request body for rating a movie."""

    score: int = Field(..., ge=MIN_SCORE, le=MAX_SCORE, description="Whole number from 1 to 5")
    comment: str | None = Field(None, max_length=2000)


class RatingResponse(BaseModel):
    """Response model for one rating."""

    user_id: str
    movie_id: str
    score: int
    rated_at: datetime
    comment: str | None = None
    title: str | None = None

    class Config:
        from_attributes = True


class RatingList(BaseModel):
    """Response model for a list of ratings."""

    ratings: list[RatingResponse]
    count: int
