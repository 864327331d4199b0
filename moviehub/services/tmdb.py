"""Client for The Movie Database (TMDB) catalog endpoints."""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import Any

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..errors import CatalogFetchError, MovieNotFoundError
from ..models import Genre, MovieRecord

logger = logging.getLogger(__name__)


class TMDBClient:
    """Thin wrapper around the TMDB movie endpoints used by the catalog."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        if not settings.tmdb_api_key:
            raise ValueError("TMDB API key is required when initialising TMDBClient")
        self._settings = settings
        self._client = http_client

    async def fetch_popular(self, page: int) -> list[MovieRecord]:
        """Return one page of the popular movies feed."""

        payload = await self._get("/movie/popular", {"page": page})
        return self._parse_results(payload)

    async def search_by_title(self, text: str) -> list[MovieRecord]:
        """Return the first page of title matches for ``text``."""

        payload = await self._get(
            "/search/movie",
            {"query": text, "include_adult": "false", "page": 1},
        )
        return self._parse_results(payload)

    async def discover(
        self,
        *,
        genre_ids: Collection[int] = (),
        year: str | None = None,
        min_rating: float | None = None,
    ) -> list[MovieRecord]:
        """Return movies matching every supplied filter.

        Genres are joined with ``|`` so a movie needs only one of them.
        """

        params: dict[str, Any] = {"sort_by": "popularity.desc", "page": 1}
        if genre_ids:
            params["with_genres"] = "|".join(str(genre_id) for genre_id in sorted(genre_ids))
        if year:
            params["primary_release_year"] = year
        if min_rating is not None:
            params["vote_average.gte"] = min_rating
        payload = await self._get("/discover/movie", params)
        return self._parse_results(payload)

    async def fetch_genres(self) -> list[Genre]:
        payload = await self._get("/genre/movie/list", {})
        genres: list[Genre] = []
        for entry in payload.get("genres") or []:
            try:
                genres.append(Genre.model_validate(entry))
            except ValidationError:
                logger.debug("Skipping malformed TMDB genre entry: %s", entry)
        return genres

    async def fetch_by_id(self, movie_id: int) -> MovieRecord:
        """Fetch full details for a single movie."""

        payload = await self._get(f"/movie/{movie_id}", {})
        try:
            return MovieRecord.model_validate(payload)
        except ValidationError as exc:
            raise CatalogFetchError(f"Malformed TMDB payload for movie {movie_id}") from exc

    async def _get(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        query = {
            **params,
            "api_key": self._settings.tmdb_api_key,
            "language": self._settings.tmdb_language,
        }
        try:
            response = await self._client.get(endpoint, params=query)
        except httpx.HTTPError as exc:
            logger.warning("TMDB request to %s failed: %s", endpoint, exc)
            raise CatalogFetchError(f"TMDB request failed: {exc}") from exc

        if response.status_code == 404:
            raise MovieNotFoundError(
                f"TMDB resource not found: {endpoint}", status_code=404
            )
        if response.status_code >= 400:
            logger.warning(
                "TMDB request to %s failed (%s): %s",
                endpoint,
                response.status_code,
                response.text,
            )
            raise CatalogFetchError(
                f"TMDB responded with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            logger.warning("Unexpected non-JSON TMDB response for %s", endpoint)
            raise CatalogFetchError("TMDB returned a non-JSON response") from exc
        if not isinstance(data, dict):
            raise CatalogFetchError("Unexpected TMDB response structure")
        return data

    @staticmethod
    def _parse_results(payload: dict[str, Any]) -> list[MovieRecord]:
        records: list[MovieRecord] = []
        for entry in payload.get("results") or []:
            if not isinstance(entry, dict):
                continue
            try:
                records.append(MovieRecord.model_validate(entry))
            except ValidationError:
                logger.debug("Skipping TMDB result without a usable id: %s", entry.get("id"))
        return records
