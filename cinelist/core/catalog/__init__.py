"""
Movie catalog backed by a remote metadata provider.

This package contains:
- The metadata provider contract and its OMDb implementation
- Movie kind parsing
- The cache-aside catalog synchronizer
"""

from cinelist.core.catalog.provider import MetadataProvider, MovieRecord, SearchHit
from cinelist.core.catalog.omdb_client import OmdbClient
from cinelist.core.catalog.kinds import parse_movie_kind, try_parse_movie_kind
from cinelist.core.catalog.synchronizer import CatalogSynchronizer

__all__ = [
    'MetadataProvider',
    'MovieRecord',
    'SearchHit',
    'OmdbClient',
    'parse_movie_kind',
    'try_parse_movie_kind',
    'CatalogSynchronizer',
]
