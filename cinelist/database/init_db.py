"""
Database initialization and schema verification.
"""

import logging
from typing import Optional

from sqlalchemy import inspect

from cinelist.database.connection import DatabaseManager, get_db_manager, DEFAULT_DB_PATH

logger = logging.getLogger(__name__)

EXPECTED_TABLES = {'movies', 'team_members', 'watchlists', 'watchlist_items', 'ratings'}


def init_database(
    db_path: str = DEFAULT_DB_PATH,
    reset: bool = False,
    database_url: Optional[str] = None
) -> DatabaseManager:
    """
    Initialize the database and create all tables.

    Args:
        db_path: Path to SQLite database file
        reset: If True, drop existing tables before creating new ones
        database_url: Full SQLAlchemy URL; overrides db_path when given

    Returns:
        DatabaseManager instance
    """
    db_manager = get_db_manager(db_path=db_path, database_url=database_url)

    if reset:
        logger.warning("Resetting database (dropping all tables)")
        db_manager.reset_database()
    else:
        db_manager.create_tables()
    logger.info(f"Database tables ready at {db_manager.database_url}")

    return db_manager


def verify_schema(db_manager: DatabaseManager) -> bool:
    """
    Verify that all tables exist in the database.

    Args:
        db_manager: DatabaseManager instance

    Returns:
        True if all tables exist, False otherwise
    """
    inspector = inspect(db_manager.engine)
    existing_tables = set(inspector.get_table_names())

    missing_tables = EXPECTED_TABLES - existing_tables
    if missing_tables:
        logger.error(f"Missing tables: {sorted(missing_tables)}")
        return False

    logger.info(f"All tables exist: {sorted(existing_tables)}")
    return True
