"""
API route handlers.
"""

from cinelist.api.routers import movies, watchlist, ratings, system

__all__ = ["movies", "watchlist", "ratings", "system"]
