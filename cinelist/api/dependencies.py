"""
FastAPI dependency injection for the database and the core components.
"""

import logging
from typing import Generator

from sqlalchemy.orm import Session

from cinelist.api.config import (
    get_database_url, get_omdb_api_key, get_omdb_base_url, get_omdb_timeout
)
from cinelist.core.catalog import CatalogSynchronizer, MetadataProvider, OmdbClient
from cinelist.core.ratings import RatingManager
from cinelist.core.watchlist import WatchlistManager
from cinelist.database.connection import DatabaseManager, get_db_manager
from cinelist.errors import TransientProviderError

logger = logging.getLogger(__name__)


_tables_ready = False


def get_database() -> DatabaseManager:
    """Get the process-wide DatabaseManager, creating tables on first use."""
    global _tables_ready
    db_manager = get_db_manager(database_url=get_database_url())
    if not _tables_ready:
        db_manager.create_tables()
        _tables_ready = True
    return db_manager


def get_db() -> Generator[Session, None, None]:
    """Yield database session for FastAPI Depends()."""
    with get_database().session_scope() as session:
        yield session


class UnconfiguredProvider(MetadataProvider):
    """Stand-in used when OMDB_API_KEY is not set; every call fails as unavailable."""

    def fetch_detail(self, id_or_title):
        raise TransientProviderError("Metadata provider is not configured (set OMDB_API_KEY)")

    def search_by_title(self, title):
        raise TransientProviderError("Metadata provider is not configured (set OMDB_API_KEY)")


# Singletons
_provider: MetadataProvider | None = None
_catalog: CatalogSynchronizer | None = None
_watchlists: WatchlistManager | None = None
_ratings: RatingManager | None = None


def get_metadata_provider() -> MetadataProvider:
    """Get or create singleton metadata provider."""
    global _provider
    if _provider is None:
        api_key = get_omdb_api_key()
        if api_key:
            _provider = OmdbClient(
                api_key=api_key,
                base_url=get_omdb_base_url(),
                timeout=get_omdb_timeout(),
            )
        else:
            logger.warning("OMDB_API_KEY not set; catalog misses will fail as provider errors")
            _provider = UnconfiguredProvider()
    return _provider


def get_catalog() -> CatalogSynchronizer:
    """Get or create singleton CatalogSynchronizer."""
    global _catalog
    if _catalog is None:
        _catalog = CatalogSynchronizer(get_database(), get_metadata_provider())
    return _catalog


def get_watchlist_manager() -> WatchlistManager:
    """Get or create singleton WatchlistManager (one lock registry per process)."""
    global _watchlists
    if _watchlists is None:
        _watchlists = WatchlistManager(get_database())
    return _watchlists


def get_rating_manager() -> RatingManager:
    """Get or create singleton RatingManager."""
    global _ratings
    if _ratings is None:
        _ratings = RatingManager(get_database())
    return _ratings
