"""Collaborator contracts the catalog services depend on."""

from __future__ import annotations

from collections.abc import Collection
from typing import Protocol

from .models import Genre, MovieRecord


class CatalogClient(Protocol):
    """Remote movie catalog operations.

    Every method raises :class:`moviehub.errors.CatalogFetchError` on failure.
    """

    async def fetch_popular(self, page: int) -> list[MovieRecord]: ...

    async def search_by_title(self, text: str) -> list[MovieRecord]: ...

    async def discover(
        self,
        *,
        genre_ids: Collection[int] = (),
        year: str | None = None,
        min_rating: float | None = None,
    ) -> list[MovieRecord]: ...

    async def fetch_genres(self) -> list[Genre]: ...

    async def fetch_by_id(self, movie_id: int) -> MovieRecord: ...


class PersistentStore(Protocol):
    """String key/value storage holding serialized blobs."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None:
        """Store ``value``; raise :class:`moviehub.errors.PersistenceError` on failure."""
        ...
