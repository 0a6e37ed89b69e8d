"""
API fixtures: the real app wired to the in-memory database and scripted provider.
"""

import pytest
from fastapi.testclient import TestClient

from cinelist.api.dependencies import (
    get_catalog, get_db, get_rating_manager, get_watchlist_manager
)
from cinelist.api.main import app
from cinelist.core.catalog import CatalogSynchronizer
from cinelist.core.ratings import RatingManager
from cinelist.core.watchlist import WatchlistManager


@pytest.fixture
def client(db_manager, provider):
    def _get_db():
        with db_manager.session_scope() as session:
            yield session

    catalog = CatalogSynchronizer(db_manager, provider)
    manager = WatchlistManager(db_manager)
    ratings = RatingManager(db_manager)

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_watchlist_manager] = lambda: manager
    app.dependency_overrides[get_rating_manager] = lambda: ratings
    yield TestClient(app)
    app.dependency_overrides.clear()
