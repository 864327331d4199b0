"""Injectable container wiring the catalog services together."""

from __future__ import annotations

import logging
from typing import Any

from ..config import Settings
from ..interfaces import CatalogClient, PersistentStore
from ..models import MovieRecord
from .catalog_cache import CatalogCache
from .collection import LocalCollectionStore
from .detail_resolver import DetailResolver
from .duplicate_guard import DuplicateGuard
from .merge import MoviePage, merge_view, paginate
from .query_engine import QueryEngine

logger = logging.getLogger(__name__)


class MovieLibrary:
    """Owns the local collection, the catalog cache and the services using them.

    Build one per application and hand it to every consumer.
    """

    def __init__(
        self,
        settings: Settings,
        client: CatalogClient,
        store: PersistentStore,
    ):
        self.settings = settings
        self.collection = LocalCollectionStore(store, settings.collection_storage_key)
        self.catalog = CatalogCache(client, page_count=settings.popular_page_count)
        self.guard = DuplicateGuard(
            self.collection,
            self.catalog,
            title_check_min_length=settings.title_check_min_length,
        )
        self.query = QueryEngine(
            client,
            self.collection,
            self.catalog,
            suggestion_limit=settings.suggestion_limit,
        )
        self.details = DetailResolver(client, self.collection)

    async def start(self) -> None:
        """Load the local collection, then fetch genres and the popular feed."""

        await self.collection.load()
        logger.info("Loaded %s custom movies", len(self.collection))
        await self.catalog.load_genres()
        await self.catalog.refresh()

    def merged(self) -> list[MovieRecord]:
        return merge_view(self.catalog.records(), self.collection.all())

    def page(self, number: int, page_size: int | None = None) -> MoviePage:
        """Return one page of the merged view."""

        return paginate(self.merged(), number, page_size or self.settings.page_size)

    def status(self) -> dict[str, Any]:
        return {
            "status": self.catalog.status().value,
            "error": self.catalog.error(),
            "catalogCount": len(self.catalog.records()),
            "customCount": len(self.collection),
            "genresLoaded": self.catalog.genres_loaded,
        }
