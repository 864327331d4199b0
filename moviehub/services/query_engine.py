"""Search and filtering across the remote catalog and the local collection."""

from __future__ import annotations

import logging

from ..errors import CatalogFetchError
from ..interfaces import CatalogClient
from ..models import MovieRecord, SearchParams
from .catalog_cache import CatalogCache
from .collection import LocalCollectionStore
from .merge import merge_view, unique_by_id

logger = logging.getLogger(__name__)


def matches_filters(record: MovieRecord, params: SearchParams) -> bool:
    """Return ``True`` when ``record`` satisfies the year, rating and genre filters.

    Filter types combine with AND; selected genres combine with OR.
    """

    if params.year is not None and record.release_year != params.year:
        return False
    if params.min_rating is not None and record.vote_average < params.min_rating:
        return False
    if params.genre_ids and not (record.genre_id_set & params.genre_ids):
        return False
    return True


def matches_search(record: MovieRecord, params: SearchParams) -> bool:
    """Full predicate: case-insensitive title substring plus every filter."""

    if params.text is not None and params.text.casefold() not in record.title.casefold():
        return False
    return matches_filters(record, params)


class QueryEngine:
    """Runs searches and keeps the latest result set for presentation."""

    def __init__(
        self,
        client: CatalogClient,
        collection: LocalCollectionStore,
        catalog: CatalogCache,
        *,
        suggestion_limit: int = 10,
    ):
        self._client = client
        self._collection = collection
        self._catalog = catalog
        self._suggestion_limit = suggestion_limit
        self._generation = 0
        self.results: list[MovieRecord] = []
        self.has_searched = False
        self.is_loading = False
        self.error: str | None = None

    async def search(self, params: SearchParams) -> list[MovieRecord]:
        """Execute a search and return the de-duplicated result list.

        Local matches come before remote ones. Only the most recently issued
        search updates :attr:`results`; older responses are returned to their
        caller but otherwise dropped.
        """

        if params.is_empty():
            self.reset()
            return []

        self._generation += 1
        generation = self._generation
        self.has_searched = True
        self.is_loading = True
        self.error = None

        error: str | None = None
        try:
            remote = await self._remote_matches(params)
        except CatalogFetchError as exc:
            logger.warning("Search failed for %s: %s", params.model_dump(), exc)
            error = str(exc)
            results: list[MovieRecord] = []
        else:
            local = [
                record for record in self._collection.all() if matches_search(record, params)
            ]
            results = unique_by_id([*local, *remote])

        if generation != self._generation:
            logger.debug("Discarding stale search response (generation %s)", generation)
            return results

        self.results = results
        self.error = error
        self.is_loading = False
        return results

    async def _remote_matches(self, params: SearchParams) -> list[MovieRecord]:
        if params.text is not None:
            found = await self._client.search_by_title(params.text)
            if not params.has_filters():
                return found
            return [record for record in found if matches_filters(record, params)]
        return await self._client.discover(
            genre_ids=params.genre_ids,
            year=params.year,
            min_rating=params.min_rating,
        )

    def suggest(self, text: str) -> list[MovieRecord]:
        """Return merged movies whose title starts with ``text``."""

        prefix = (text or "").strip().casefold()
        if not prefix:
            return []
        suggestions: list[MovieRecord] = []
        for record in merge_view(self._catalog.records(), self._collection.all()):
            if record.title and record.title.casefold().startswith(prefix):
                suggestions.append(record)
                if len(suggestions) >= self._suggestion_limit:
                    break
        return suggestions

    def reset(self) -> None:
        """Forget the current results; any in-flight search becomes stale."""

        self._generation += 1
        self.results = []
        self.has_searched = False
        self.is_loading = False
        self.error = None
