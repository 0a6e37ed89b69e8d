#!/usr/bin/env python
"""
Database initialization script for CineList.

This script:
1. Creates the database schema (tables, indexes, constraints)
2. Optionally seeds the catalog with movies fetched from OMDb by IMDb id
3. Verifies the schema

Usage:
    # Create tables
    python scripts/init_database.py

    # Drop and recreate all tables
    python scripts/init_database.py --reset

    # Seed a few movies (requires OMDB_API_KEY)
    python scripts/init_database.py --seed tt0133093 tt0234215
"""

import sys
import argparse
import logging
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cinelist.api.config import (
    get_database_url, get_omdb_api_key, get_omdb_base_url, get_omdb_timeout
)
from cinelist.core.catalog import CatalogSynchronizer, OmdbClient
from cinelist.database import init_database, verify_schema
from cinelist.errors import CineListError
from cinelist.utils.logging_config import configure_script_logging

logger = logging.getLogger("init_database")


def seed_movies(db_manager, movie_ids):
    """
    Ensure each movie id exists locally, fetching it from OMDb on a miss.

    Args:
        db_manager: DatabaseManager instance
        movie_ids: IMDb ids to ensure

    Returns:
        Number of ids that could not be ensured
    """
    api_key = get_omdb_api_key()
    if not api_key:
        logger.error("OMDB_API_KEY is not set; cannot seed movies")
        return len(movie_ids)

    provider = OmdbClient(api_key, base_url=get_omdb_base_url(), timeout=get_omdb_timeout())
    catalog = CatalogSynchronizer(db_manager, provider)

    failures = 0
    for movie_id in movie_ids:
        try:
            movie = catalog.ensure_by_id(movie_id)
            logger.info(f"  {movie.movie_id}: {movie.title} ({movie.year})")
        except CineListError as e:
            failures += 1
            logger.warning(f"  {movie_id}: {e}")
    return failures


def main():
    parser = argparse.ArgumentParser(description="Initialize the CineList database")
    parser.add_argument("--database-url", default=None,
                        help="SQLAlchemy URL (default: DATABASE_URL or data/cinelist.db)")
    parser.add_argument("--reset", action="store_true",
                        help="Drop existing tables before creating them")
    parser.add_argument("--seed", nargs="*", default=[], metavar="IMDB_ID",
                        help="IMDb ids to fetch into the catalog")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    configure_script_logging(debug=args.debug)

    database_url = args.database_url or get_database_url()
    db_manager = init_database(reset=args.reset, database_url=database_url)

    failures = 0
    if args.seed:
        logger.info(f"Seeding {len(args.seed)} movies")
        failures = seed_movies(db_manager, args.seed)

    if not verify_schema(db_manager):
        sys.exit(1)

    logger.info("Database initialization complete")
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
