"""
Pydantic schemas for Watchlist API.
"""

from pydantic import BaseModel, Field


class WatchlistAddRequest(BaseModel):
    """Request body for adding a movie to a watchlist."""

    movie_id: str = Field(..., min_length=1, max_length=20)
    position: int | None = Field(None, description="1-based slot; appended when omitted")


class WatchlistReorderRequest(BaseModel):
    """Request body for moving a movie within a watchlist."""

    movie_id: str = Field(..., min_length=1, max_length=20)
    new_position: int = Field(..., ge=1)


class WatchlistItemResponse(BaseModel):
    """Response model for one watchlist entry."""

    movie_id: str
    position: int
    title: str | None = None
    poster_url: str | None = None

    class Config:
        from_attributes = True


class WatchlistResponse(BaseModel):
    """Response model for a user's ordered watchlist."""

    user_id: str
    items: list[WatchlistItemResponse]
