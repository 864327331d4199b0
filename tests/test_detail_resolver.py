"""Detail lookup tests."""

from __future__ import annotations

import asyncio

import pytest

from fakes import FakeCatalogClient, custom_movie, movie
from moviehub.services.collection import LocalCollectionStore
from moviehub.services.detail_resolver import DetailResolver, DetailStatus
from moviehub.services.storage import MemoryKeyValueStore


async def _resolver(client: FakeCatalogClient, local: list | None = None) -> DetailResolver:
    collection = LocalCollectionStore(MemoryKeyValueStore())
    for record in local or []:
        await collection.append(record)
    return DetailResolver(client, collection)


@pytest.mark.anyio("asyncio")
async def test_local_record_is_returned_without_remote_fetch() -> None:
    client = FakeCatalogClient(details={42: movie(42, "Remote Answer")})
    resolver = await _resolver(client, [custom_movie(42, "Local Answer")])

    result = await resolver.get_by_id(42)

    assert result.status is DetailStatus.FOUND
    assert result.source == "local"
    assert result.movie is not None and result.movie.title == "Local Answer"
    assert client.calls == []
    assert resolver.current is result


@pytest.mark.anyio("asyncio")
async def test_remote_record_is_tagged_with_its_source() -> None:
    detailed = movie(603, "The Matrix", runtime_minutes=136)
    client = FakeCatalogClient(details={603: detailed})
    resolver = await _resolver(client)

    result = await resolver.get_by_id(603)

    assert result.status is DetailStatus.FOUND
    assert result.source == "remote"
    assert result.movie == detailed
    assert client.calls == [("fetch_by_id", 603)]
    assert result.to_payload()["movie"]["runtime"] == 136


@pytest.mark.anyio("asyncio")
async def test_missing_remote_record_reports_not_found() -> None:
    resolver = await _resolver(FakeCatalogClient())

    result = await resolver.get_by_id(1)

    assert result.status is DetailStatus.NOT_FOUND
    assert result.movie is None
    assert result.to_payload()["status"] == "not_found"


@pytest.mark.anyio("asyncio")
async def test_fetch_failure_reports_error() -> None:
    client = FakeCatalogClient(details={1: movie(1, "Unreachable")})
    client.fail_on.add("fetch_by_id")
    resolver = await _resolver(client)

    result = await resolver.get_by_id(1)

    assert result.status is DetailStatus.ERROR
    assert result.error == "fetch_by_id unavailable"


@pytest.mark.anyio("asyncio")
async def test_pending_is_reported_while_fetch_is_in_flight() -> None:
    client = FakeCatalogClient(details={5: movie(5, "Eventually")})
    client.gate = asyncio.Event()
    resolver = await _resolver(client)

    task = asyncio.create_task(resolver.get_by_id(5))
    await asyncio.sleep(0)

    assert resolver.current is not None
    assert resolver.current.status is DetailStatus.PENDING
    assert resolver.current.movie_id == 5

    client.gate.set()
    result = await task
    assert resolver.current is result
    assert result.status is DetailStatus.FOUND


@pytest.mark.anyio("asyncio")
async def test_stale_detail_response_does_not_replace_newer_lookup() -> None:
    gate = asyncio.Event()
    client = FakeCatalogClient(details={5: movie(5, "Slow")})
    client.gate = gate
    resolver = await _resolver(client, [custom_movie(9, "Fast")])

    slow = asyncio.create_task(resolver.get_by_id(5))
    await asyncio.sleep(0)
    fast = await resolver.get_by_id(9)

    gate.set()
    await slow

    assert resolver.current is fast
