"""Tests for the TMDB API client."""

from __future__ import annotations

import httpx
import pytest

from fakes import build_settings
from moviehub.errors import CatalogFetchError, MovieNotFoundError
from moviehub.services.tmdb import TMDBClient

BASE_URL = "https://api.example.com/3"


def _client(handler, **overrides) -> tuple[httpx.AsyncClient, TMDBClient]:
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url=BASE_URL
    )
    return http_client, TMDBClient(build_settings(**overrides), http_client)


def test_client_requires_api_key() -> None:
    with pytest.raises(ValueError, match="TMDB API key is required"):
        TMDBClient(build_settings(TMDB_API_KEY=None), httpx.AsyncClient())


@pytest.mark.anyio("asyncio")
async def test_fetch_popular_sends_page_and_credentials() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "page": 2,
                "results": [
                    {"id": 1, "title": "First", "genre_ids": [28], "vote_average": 7.2},
                    {"title": "No identifier"},
                    "garbage",
                    {"id": 2, "title": "Second", "poster_path": None},
                ],
            },
        )

    http_client, client = _client(handler, TMDB_LANGUAGE="fr-FR")
    async with http_client:
        records = await client.fetch_popular(2)

    assert [record.id for record in records] == [1, 2]
    assert records[0].genre_ids == [28]
    request = requests[0]
    assert request.url.path == "/3/movie/popular"
    assert request.url.params["page"] == "2"
    assert request.url.params["api_key"] == "test-key"
    assert request.url.params["language"] == "fr-FR"


@pytest.mark.anyio("asyncio")
async def test_search_by_title_passes_query() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"results": [{"id": 27205, "title": "Inception"}]})

    http_client, client = _client(handler)
    async with http_client:
        records = await client.search_by_title("Inception")

    assert records[0].title == "Inception"
    assert requests[0].url.path == "/3/search/movie"
    assert requests[0].url.params["query"] == "Inception"
    assert requests[0].url.params["include_adult"] == "false"


@pytest.mark.anyio("asyncio")
async def test_discover_encodes_every_filter() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"results": []})

    http_client, client = _client(handler)
    async with http_client:
        await client.discover(genre_ids={35, 18}, year="1999", min_rating=7.5)
        await client.discover()

    params = requests[0].url.params
    assert requests[0].url.path == "/3/discover/movie"
    assert params["with_genres"] == "18|35"
    assert params["primary_release_year"] == "1999"
    assert params["vote_average.gte"] == "7.5"
    assert "with_genres" not in requests[1].url.params
    assert "primary_release_year" not in requests[1].url.params


@pytest.mark.anyio("asyncio")
async def test_fetch_genres_and_details() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/3/genre/movie/list":
            return httpx.Response(
                200, json={"genres": [{"id": 28, "name": "Action"}, {"name": "No id"}]}
            )
        return httpx.Response(
            200,
            json={
                "id": 603,
                "title": "The Matrix",
                "runtime": 136,
                "genres": [{"id": 28, "name": "Action"}],
            },
        )

    http_client, client = _client(handler)
    async with http_client:
        genres = await client.fetch_genres()
        details = await client.fetch_by_id(603)

    assert [(genre.id, genre.name) for genre in genres] == [(28, "Action")]
    assert details.runtime_minutes == 136
    assert details.genres[0].name == "Action"


@pytest.mark.anyio("asyncio")
async def test_missing_movie_raises_not_found() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"status_message": "not found"})

    http_client, client = _client(handler)
    async with http_client:
        with pytest.raises(MovieNotFoundError):
            await client.fetch_by_id(1)


@pytest.mark.anyio("asyncio")
async def test_server_errors_raise_fetch_error() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"status_message": "unavailable"})

    http_client, client = _client(handler)
    async with http_client:
        with pytest.raises(CatalogFetchError) as excinfo:
            await client.fetch_popular(1)

    assert excinfo.value.status_code == 503
    assert not isinstance(excinfo.value, MovieNotFoundError)


@pytest.mark.anyio("asyncio")
async def test_transport_errors_and_bad_bodies_raise_fetch_error() -> None:
    def failing(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    http_client, client = _client(failing)
    async with http_client:
        with pytest.raises(CatalogFetchError):
            await client.search_by_title("x")

    def not_json(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>")

    http_client, client = _client(not_json)
    async with http_client:
        with pytest.raises(CatalogFetchError, match="non-JSON"):
            await client.fetch_genres()
