"""
Parsing of user- and provider-supplied movie kind strings.
"""

from typing import Optional

from cinelist.database.models import MovieKind
from cinelist.errors import ValidationError


KIND_SYNONYMS = {
    "movie": MovieKind.MOVIE,
    "movies": MovieKind.MOVIE,
    "film": MovieKind.MOVIE,
    "pelicula": MovieKind.MOVIE,
    "película": MovieKind.MOVIE,
    "series": MovieKind.SERIES,
    "serie": MovieKind.SERIES,
    "tv": MovieKind.SERIES,
}


def try_parse_movie_kind(value: Optional[str]) -> Optional[MovieKind]:
    """Return the MovieKind for ``value``, or None if it is not recognized."""
    if value is None:
        return None
    return KIND_SYNONYMS.get(value.strip().lower())


def parse_movie_kind(value: str) -> MovieKind:
    """
    Parse a kind filter, accepting the known synonyms case-insensitively.

    Args:
        value: e.g. "Movie", "pelicula", "series"

    Returns:
        MovieKind

    Raises:
        ValidationError: If the value is not a recognized kind
    """
    kind = try_parse_movie_kind(value)
    if kind is None:
        raise ValidationError(
            f"Unrecognized type '{value}'; expected one of: {', '.join(sorted(KIND_SYNONYMS))}"
        )
    return kind
