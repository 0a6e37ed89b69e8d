"""
CineList application package.

This package contains the catalog synchronizer, the ranked watchlist engine,
database operations, the HTTP API, and shared utilities.
"""

__version__ = "1.0.0"
