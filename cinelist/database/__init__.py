"""
Database module for CineList.

This module provides database models, connection management, and CRUD operations
using SQLAlchemy ORM.
"""

from cinelist.database.models import (
    Base, Movie, MovieKind, MemberRole, TeamMember, WatchList, WatchListItem, Rating
)
from cinelist.database.connection import DatabaseManager, get_db_manager
from cinelist.database.init_db import init_database, verify_schema
from cinelist.database import crud

__all__ = [
    # Models
    'Base',
    'Movie',
    'MovieKind',
    'MemberRole',
    'TeamMember',
    'WatchList',
    'WatchListItem',
    'Rating',
    # Connection
    'DatabaseManager',
    'get_db_manager',
    # Initialization
    'init_database',
    'verify_schema',
    # CRUD module
    'crud',
]
