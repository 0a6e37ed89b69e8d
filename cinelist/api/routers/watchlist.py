"""
Watchlist API endpoints.

The user is identified by the path; authentication is handled upstream.
"""

from fastapi import APIRouter, Depends, Response

from cinelist.api.dependencies import get_watchlist_manager
from cinelist.api.models.watchlist import (
    WatchlistAddRequest, WatchlistReorderRequest, WatchlistItemResponse, WatchlistResponse
)
from cinelist.core.watchlist import WatchlistEntry, WatchlistManager

router = APIRouter(prefix="/api/users/{user_id}/watchlist", tags=["watchlist"])


def _response(user_id: str, entries: list[WatchlistEntry]) -> WatchlistResponse:
    return WatchlistResponse(
        user_id=user_id,
        items=[WatchlistItemResponse.model_validate(e) for e in entries],
    )


@router.get("", response_model=WatchlistResponse)
def get_watchlist(user_id: str, manager: WatchlistManager = Depends(get_watchlist_manager)):
    """Get the user's watchlist ordered by position."""
    handle = manager.get_or_create_list(user_id)
    return _response(handle.user_id, manager.list_items(handle))


@router.post("", response_model=WatchlistResponse)
def add_to_watchlist(
    user_id: str,
    body: WatchlistAddRequest,
    manager: WatchlistManager = Depends(get_watchlist_manager),
):
    """Add a stored movie to the watchlist, appended or at a given position."""
    handle = manager.get_or_create_list(user_id)
    manager.add_item(handle, body.movie_id, body.position)
    return _response(handle.user_id, manager.list_items(handle))


@router.delete("/{movie_id}", status_code=204)
def remove_from_watchlist(
    user_id: str,
    movie_id: str,
    manager: WatchlistManager = Depends(get_watchlist_manager),
):
    """Remove a movie from the watchlist. Removing an absent movie is not an error."""
    handle = manager.get_or_create_list(user_id)
    manager.remove_item(handle, movie_id)
    return Response(status_code=204)


@router.patch("/reorder", response_model=WatchlistResponse)
def reorder_watchlist(
    user_id: str,
    body: WatchlistReorderRequest,
    manager: WatchlistManager = Depends(get_watchlist_manager),
):
    """Move a listed movie to a new position."""
    handle = manager.get_or_create_list(user_id)
    entries = manager.reorder_item(handle, body.movie_id, body.new_position)
    return _response(handle.user_id, entries)
