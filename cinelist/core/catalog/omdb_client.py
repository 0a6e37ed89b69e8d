"""
OMDb implementation of the metadata provider.
"""

import logging
import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import requests

from cinelist.core.catalog.provider import MetadataProvider, MovieRecord, SearchHit
from cinelist.errors import TransientProviderError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.omdbapi.com/"
DEFAULT_TIMEOUT = 10.0


def _clean(value: Any) -> Optional[str]:
    """OMDb reports missing fields as "N/A"."""
    if value is None:
        return None
    value = str(value).strip()
    if not value or value.upper() == "N/A":
        return None
    return value


def _parse_rating(value: Any) -> Optional[float]:
    value = _clean(value)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _parse_released(value: Any) -> Optional[date]:
    value = _clean(value)
    if value is None:
        return None
    try:
        return datetime.strptime(value, "%d %b %Y").date()
    except ValueError:
        return None


def _parse_runtime(value: Any) -> Optional[int]:
    value = _clean(value)
    if value is None:
        return None
    digits = re.sub(r"\D", "", value)
    return int(digits) if digits else None


class OmdbClient(MetadataProvider):
    """
    Thin wrapper around the OMDb HTTP API.

    Every request carries a bounded timeout; transport failures, timeouts,
    server errors and non-JSON replies surface as TransientProviderError.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None
    ):
        if not api_key:
            raise ValueError("OMDb api_key is required")
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.http = session or requests.Session()

    def _get(self, params: Dict[str, str]) -> Optional[Dict[str, Any]]:
        """
        Perform one GET request.

        Returns:
            Decoded JSON payload, or None on HTTP 404
        """
        params = dict(params, apikey=self.api_key)
        try:
            resp = self.http.get(self.base_url, params=params, timeout=self.timeout)
        except requests.Timeout as e:
            raise TransientProviderError(f"OMDb timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise TransientProviderError(f"OMDb unreachable: {e}") from e

        if resp.status_code == 404:
            return None
        if not resp.ok:
            raise TransientProviderError(f"OMDb returned HTTP {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as e:
            raise TransientProviderError("OMDb returned a non-JSON response") from e
        if not isinstance(payload, dict):
            raise TransientProviderError("OMDb returned an unexpected payload")
        return payload

    def fetch_detail(self, id_or_title: str) -> Optional[MovieRecord]:
        key = "i" if id_or_title.lower().startswith("tt") else "t"
        payload = self._get({key: id_or_title, "plot": "short"})
        if payload is None or str(payload.get("Response", "")).lower() != "true":
            logger.debug(f"OMDb has no detail for {id_or_title!r}")
            return None

        movie_id = _clean(payload.get("imdbID"))
        if movie_id is None:
            raise TransientProviderError(f"OMDb detail for {id_or_title!r} has no imdbID")

        return MovieRecord(
            movie_id=movie_id,
            title=_clean(payload.get("Title")) or "",
            kind=_clean(payload.get("Type")),
            genre=_clean(payload.get("Genre")),
            country=_clean(payload.get("Country")),
            poster_url=_clean(payload.get("Poster")),
            rating=_parse_rating(payload.get("imdbRating")),
            released=_parse_released(payload.get("Released")),
            runtime_minutes=_parse_runtime(payload.get("Runtime")),
            director=_clean(payload.get("Director")),
            writer=_clean(payload.get("Writer")),
            actors=_clean(payload.get("Actors")),
        )

    def search_by_title(self, title: str) -> List[SearchHit]:
        payload = self._get({"s": title})
        if payload is None or str(payload.get("Response", "")).lower() != "true":
            return []

        hits = []
        for entry in payload.get("Search") or []:
            movie_id = _clean(entry.get("imdbID"))
            if movie_id is None:
                continue
            hits.append(SearchHit(
                movie_id=movie_id,
                title=entry.get("Title") or "",
                year=entry.get("Year") or "",
                kind=entry.get("Type") or "",
                poster_url=_clean(entry.get("Poster")),
            ))
        logger.debug(f"OMDb search {title!r} returned {len(hits)} hits")
        return hits
