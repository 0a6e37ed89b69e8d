"""
Contract of the remote metadata provider consumed by the catalog synchronizer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import List, Optional


@dataclass
class MovieRecord:
    """
    Detailed record returned by a provider lookup.

    ``director``, ``writer`` and ``actors`` are the provider's comma-separated
    name lists; ``kind`` is the provider's raw type string.
    """
    movie_id: str
    title: str
    kind: Optional[str] = None
    genre: Optional[str] = None
    country: Optional[str] = None
    poster_url: Optional[str] = None
    rating: Optional[float] = None
    released: Optional[date] = None
    runtime_minutes: Optional[int] = None
    director: Optional[str] = None
    writer: Optional[str] = None
    actors: Optional[str] = None


@dataclass
class SearchHit:
    """Short entry returned by a provider title search."""
    movie_id: str
    title: str
    year: str = ""
    kind: str = ""
    poster_url: Optional[str] = None


class MetadataProvider(ABC):
    """Remote movie metadata source."""

    @abstractmethod
    def fetch_detail(self, id_or_title: str) -> Optional[MovieRecord]:
        """
        Look up one movie by external id or exact title.

        Returns:
            MovieRecord, or None when the provider reports not found

        Raises:
            TransientProviderError: Provider unreachable, timed out, or malformed reply
        """

    @abstractmethod
    def search_by_title(self, title: str) -> List[SearchHit]:
        """
        Search movies whose title matches ``title``.

        Returns:
            Possibly empty list of hits

        Raises:
            TransientProviderError: Provider unreachable, timed out, or malformed reply
        """
