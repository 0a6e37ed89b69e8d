"""
Error taxonomy shared by the catalog, watchlist and rating components.

Callers (the HTTP layer, scripts) translate these into their own responses.
"""


class CineListError(Exception):
    """Base class for all domain errors raised by CineList."""


class NotFoundError(CineListError):
    """A required entity is absent, locally or at the metadata provider."""


class ReferentialError(CineListError):
    """An operation references an entity that must already exist but doesn't."""


class ValidationError(CineListError):
    """Malformed caller input, e.g. an unrecognized type filter."""


class TransientProviderError(CineListError):
    """The metadata provider was unreachable, timed out, or returned garbage."""


class StorageError(CineListError):
    """Persistence failure, including translated constraint violations."""
