"""Single-movie lookup across the local collection and the remote catalog."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..errors import CatalogFetchError, MovieNotFoundError
from ..interfaces import CatalogClient
from ..models import MovieRecord, MovieSource
from .collection import LocalCollectionStore

logger = logging.getLogger(__name__)


class DetailStatus(str, Enum):
    PENDING = "pending"
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(slots=True)
class DetailResult:
    """Outcome of a detail lookup, tagged with where the movie came from."""

    movie_id: int
    status: DetailStatus
    movie: MovieRecord | None = None
    source: MovieSource | None = None
    error: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.movie_id,
            "status": self.status.value,
            "source": self.source,
            "movie": self.movie.model_dump(mode="json", by_alias=True) if self.movie else None,
            "error": self.error,
        }


class DetailResolver:
    """Resolve movies by id, preferring the local collection."""

    def __init__(self, client: CatalogClient, collection: LocalCollectionStore):
        self._client = client
        self._collection = collection
        self._generation = 0
        self.current: DetailResult | None = None

    def lookup_local(self, movie_id: int) -> DetailResult | None:
        record = self._collection.find(movie_id)
        if record is None:
            return None
        return DetailResult(movie_id, DetailStatus.FOUND, movie=record, source="local")

    async def get_by_id(self, movie_id: int) -> DetailResult:
        """Return the local movie immediately or fetch it from the catalog.

        :attr:`current` reports ``pending`` while the remote fetch is in
        flight and is only updated by the most recent lookup.
        """

        self._generation += 1
        generation = self._generation

        local = self.lookup_local(movie_id)
        if local is not None:
            self.current = local
            return local

        self.current = DetailResult(movie_id, DetailStatus.PENDING)
        try:
            record = await self._client.fetch_by_id(movie_id)
        except MovieNotFoundError as exc:
            result = DetailResult(movie_id, DetailStatus.NOT_FOUND, error=str(exc))
        except CatalogFetchError as exc:
            logger.warning("Detail lookup for movie %s failed: %s", movie_id, exc)
            result = DetailResult(movie_id, DetailStatus.ERROR, error=str(exc))
        else:
            result = DetailResult(movie_id, DetailStatus.FOUND, movie=record, source="remote")

        if generation == self._generation:
            self.current = result
        else:
            logger.debug("Discarding stale detail response for movie %s", movie_id)
        return result
