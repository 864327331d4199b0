"""The user's locally added movies and their persistence."""

from __future__ import annotations

import asyncio
import logging

from pydantic import TypeAdapter, ValidationError

from ..errors import PersistenceError
from ..interfaces import PersistentStore
from ..models import MovieRecord

logger = logging.getLogger(__name__)

_COLLECTION_ADAPTER = TypeAdapter(list[MovieRecord])


class LocalCollectionStore:
    """Ordered collection of custom movies persisted as a single JSON blob."""

    def __init__(self, store: PersistentStore, storage_key: str = "myMovies"):
        self._store = store
        self._storage_key = storage_key
        self._records: list[MovieRecord] = []
        self._write_lock = asyncio.Lock()

    async def load(self) -> tuple[MovieRecord, ...]:
        """Restore the collection from storage.

        A missing or unreadable blob yields an empty collection.
        """

        raw = await self._store.get(self._storage_key)
        if not raw:
            self._records = []
            return self.all()
        try:
            records = _COLLECTION_ADAPTER.validate_json(raw)
        except ValidationError as exc:
            logger.warning(
                "Ignoring malformed movie collection stored under %s (%s errors)",
                self._storage_key,
                exc.error_count(),
            )
            records = []
        self._records = records
        return self.all()

    async def append(self, record: MovieRecord) -> MovieRecord:
        """Add ``record`` and persist the whole collection.

        Appends are written one at a time. The record is dropped from memory
        again if its write fails so that memory never runs ahead of storage.
        """

        async with self._write_lock:
            self._records.append(record)
            try:
                await self._store.set(self._storage_key, self._serialize())
            except PersistenceError:
                self._records = [item for item in self._records if item is not record]
                raise
        return record

    def all(self) -> tuple[MovieRecord, ...]:
        return tuple(self._records)

    def find(self, movie_id: int) -> MovieRecord | None:
        for record in self._records:
            if record.id == movie_id:
                return record
        return None

    def ids(self) -> set[int]:
        return {record.id for record in self._records}

    def __len__(self) -> int:
        return len(self._records)

    def _serialize(self) -> str:
        return _COLLECTION_ADAPTER.dump_json(self._records, by_alias=True).decode("utf-8")
