"""Tests for the visitor counter HTTP surface."""

import asyncio

import httpx
import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from synclock.api.dependencies import get_counter_store
from synclock.models import VisitorCounter
from synclock.services.counter import CounterStore, SqlCounterStore


def test_read_counter_starts_at_zero(client: TestClient) -> None:
    r = client.get("/api/counter")
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"count": 0}


def test_post_increments_and_returns_new_count(client: TestClient) -> None:
    assert client.post("/api/counter").json() == {"count": 1}
    assert client.post("/api/counter").json() == {"count": 2}
    assert client.get("/api/counter").json() == {"count": 2}


def test_get_does_not_increment(client: TestClient) -> None:
    for _ in range(3):
        client.get("/api/counter")
    assert client.get("/api/counter").json() == {"count": 0}


async def _post_concurrently(app: FastAPI, times: int) -> list[httpx.Response]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        return await asyncio.gather(*(ac.post("/api/counter") for _ in range(times)))


@pytest.mark.asyncio
async def test_three_concurrent_posts(app: FastAPI) -> None:
    responses = await _post_concurrently(app, 3)
    assert all(r.status_code == status.HTTP_200_OK for r in responses)
    assert sorted(r.json()["count"] for r in responses)[-1] == 3

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        r = await ac.get("/api/counter")
    assert r.json() == {"count": 3}


@pytest.mark.asyncio
async def test_concurrent_posts_against_durable_store(
    app: FastAPI, sql_store: SqlCounterStore
) -> None:
    app.dependency_overrides[get_counter_store] = lambda: sql_store
    responses = await _post_concurrently(app, 25)
    assert {r.status_code for r in responses} == {status.HTTP_200_OK}
    assert sql_store.get() == 25


@pytest.mark.asyncio
async def test_concurrent_post_counts_stay_in_range(app: FastAPI) -> None:
    responses = await _post_concurrently(app, 10)
    counts = [r.json()["count"] for r in responses]
    # Two POSTs may both report a total that already includes the other.
    assert all(1 <= count <= 10 for count in counts)
    assert max(counts) == 10


def test_counter_degrades_when_storage_fails(
    app: FastAPI, client: TestClient, sql_store: SqlCounterStore
) -> None:
    app.dependency_overrides[get_counter_store] = lambda: sql_store
    assert client.post("/api/counter").json() == {"count": 1}

    VisitorCounter.__table__.drop(sql_store.engine)

    r = client.post("/api/counter")
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"count": 1}
    assert client.get("/api/counter").json() == {"count": 1}


def test_counter_backend_reported_in_config(client: TestClient, counter_store: CounterStore) -> None:
    data = client.get("/api/config").json()
    assert data["counter"]["backend"] == counter_store.backend
