"""
System API endpoints (health).
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cinelist.api.dependencies import get_db
from cinelist.database import crud

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["system"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check: database reachable and row counts."""
    try:
        movie_count = crud.get_movie_count(db)
        watchlist_count = crud.get_watchlist_count(db)
        rating_count = crud.get_rating_count(db)
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return {"status": "unhealthy", "database": str(e)}
    return {
        "status": "healthy",
        "database": "connected",
        "movies": movie_count,
        "watchlists": watchlist_count,
        "ratings": rating_count,
    }
