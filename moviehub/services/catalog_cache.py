"""In-memory snapshot of the remote popular movies feed."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum

from ..errors import CatalogFetchError
from ..interfaces import CatalogClient
from ..models import Genre, MovieRecord

logger = logging.getLogger(__name__)


class FetchStatus(str, Enum):
    """Lifecycle of a remote fetch."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class CatalogCache:
    """Holds the popular movies snapshot and the genre reference list."""

    def __init__(self, client: CatalogClient, *, page_count: int = 3):
        if page_count < 1:
            raise ValueError("page_count must be at least 1")
        self._client = client
        self._page_count = page_count
        self._records: tuple[MovieRecord, ...] = ()
        self._status = FetchStatus.IDLE
        self._error: str | None = None
        self._genres: dict[int, Genre] = {}
        self._genres_loaded = False

    def status(self) -> FetchStatus:
        return self._status

    def error(self) -> str | None:
        return self._error

    def records(self) -> tuple[MovieRecord, ...]:
        return self._records

    async def refresh(self) -> bool:
        """Fetch every configured page and swap in the new snapshot.

        Pages are requested one after another and concatenated in page order.
        The previous snapshot is kept unless every page arrives. Returns
        ``False`` when the call was ignored because a refresh is running or
        when the fetch failed.
        """

        if self._status is FetchStatus.LOADING:
            logger.debug("Catalog refresh already in progress; ignoring request")
            return False

        self._status = FetchStatus.LOADING
        self._error = None
        logger.info("Refreshing popular catalog (%s pages)", self._page_count)

        collected: list[MovieRecord] = []
        try:
            for page in range(1, self._page_count + 1):
                collected.extend(await self._client.fetch_popular(page))
        except CatalogFetchError as exc:
            self._status = FetchStatus.FAILED
            self._error = str(exc)
            logger.warning(
                "Catalog refresh failed; keeping %s cached movies: %s",
                len(self._records),
                exc,
            )
            return False
        except BaseException:
            self._status = FetchStatus.FAILED
            self._error = "Catalog refresh interrupted"
            logger.warning(
                "Catalog refresh interrupted; keeping %s cached movies",
                len(self._records),
            )
            raise

        self._records = tuple(collected)
        self._status = FetchStatus.SUCCEEDED
        logger.info("Catalog refreshed with %s movies", len(self._records))
        return True

    async def load_genres(self) -> list[Genre]:
        """Fetch the genre reference list once."""

        if self._genres_loaded:
            return self.genres()
        try:
            genres = await self._client.fetch_genres()
        except CatalogFetchError as exc:
            logger.warning("Genre list unavailable: %s", exc)
            return []
        self._genres = {genre.id: genre for genre in genres}
        self._genres_loaded = True
        return self.genres()

    @property
    def genres_loaded(self) -> bool:
        return self._genres_loaded

    def genres(self) -> list[Genre]:
        return list(self._genres.values())

    def genre_name(self, genre_id: int) -> str:
        """Return the genre name, or the id itself for unknown genres."""

        genre = self._genres.get(genre_id)
        if genre is None or not genre.name:
            return str(genre_id)
        return genre.name

    def genre_labels(self, record: MovieRecord) -> list[str]:
        """Return display labels for a record's genres.

        Structured genres from detail payloads take precedence over raw ids.
        """

        if record.genres:
            return [genre.name or self.genre_name(genre.id) for genre in record.genres]
        return self.labels_for(record.genre_ids)

    def labels_for(self, genre_ids: Iterable[int]) -> list[str]:
        return [self.genre_name(genre_id) for genre_id in genre_ids]
