"""Exception types raised by the catalog services."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import DuplicateCheck


class MovieHubError(Exception):
    """Base class for every error raised by MovieHub services."""


class MovieValidationError(MovieHubError, ValueError):
    """A required field of a new movie is missing or unusable."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class DuplicateMovieError(MovieHubError):
    """A new movie clashes with an existing title or local poster."""

    def __init__(self, check: "DuplicateCheck"):
        conflicts = []
        if check.title_conflict:
            conflicts.append("a movie with this title already exists")
        if check.image_conflict:
            conflicts.append("this poster is already used by another movie")
        super().__init__("; ".join(conflicts) or "duplicate movie")
        self.check = check


class CatalogFetchError(MovieHubError):
    """The remote catalog could not be reached or returned an error."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MovieNotFoundError(CatalogFetchError):
    """The remote catalog has no movie with the requested identifier."""


class PersistenceError(MovieHubError):
    """The local collection could not be written to storage."""
