"""Key/value storage bindings for the local movie collection."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..db_models import StoredValue
from ..errors import PersistenceError

logger = logging.getLogger(__name__)


class SqlKeyValueStore:
    """Persist string blobs in the ``stored_values`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, key: str) -> str | None:
        async with self._session_factory() as session:
            row = await session.get(StoredValue, key)
            return row.value if row is not None else None

    async def set(self, key: str, value: str) -> None:
        """Insert or replace the blob stored under ``key``."""

        try:
            async with self._session_factory() as session:
                row = await session.get(StoredValue, key)
                if row is None:
                    session.add(StoredValue(key=key, value=value))
                else:
                    row.value = value
                    row.updated_at = datetime.utcnow()
                await session.commit()
        except SQLAlchemyError as exc:
            logger.warning("Failed to persist %s: %s", key, exc)
            raise PersistenceError(f"Could not save {key}") from exc


class MemoryKeyValueStore:
    """Dictionary-backed store for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._values[key] = value
