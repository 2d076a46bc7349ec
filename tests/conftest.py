# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

os.environ.setdefault("COUNTER_BACKEND", "memory")
os.environ.setdefault("GEO_ENABLED", "false")

from synclock.api.dependencies import get_clock_service_dep, get_counter_store
from synclock.main import app as fastapi_app
from synclock.services.clock import ClockSnapshotService
from synclock.services.counter import CounterStore, InMemoryCounterStore, SqlCounterStore

PINNED_UNIX_MS = 1_700_000_000_000
PINNED_INSTANT = datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def memory_store() -> InMemoryCounterStore:
    """Return a fresh in-memory counter starting at zero."""
    store = InMemoryCounterStore()
    store.open()
    return store


@pytest.fixture()
def database_url(tmp_path: Path) -> str:
    """Return a SQLite URL backed by a file in the test's temp directory."""
    return f"sqlite:///{tmp_path / 'counter.db'}"


@pytest.fixture()
def sql_store(database_url: str) -> Generator[SqlCounterStore, None, None]:
    """Return an opened durable counter backed by a temporary SQLite file."""
    store = SqlCounterStore(database_url)
    store.open()
    try:
        yield store
    finally:
        store.close()


@pytest.fixture(params=["memory", "database"])
def any_store(
    request: pytest.FixtureRequest, memory_store: InMemoryCounterStore, database_url: str
) -> Generator[CounterStore, None, None]:
    """Run a test once per persistence policy."""
    if request.param == "memory":
        yield memory_store
        return
    store = SqlCounterStore(database_url)
    store.open()
    try:
        yield store
    finally:
        store.close()


@pytest.fixture()
def counter_store(memory_store: InMemoryCounterStore) -> CounterStore:
    """Store injected into request handlers; override to switch policies."""
    return memory_store


@pytest.fixture(autouse=True)
def override_counter_store(app: FastAPI, counter_store: CounterStore) -> Iterator[None]:
    app.dependency_overrides[get_counter_store] = lambda: counter_store
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_counter_store, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def pinned_clock(app: FastAPI) -> Iterator[ClockSnapshotService]:
    """Pin the server clock to 2023-11-14T22:13:20Z (1700000000000 ms)."""
    service = ClockSnapshotService(now=lambda: PINNED_INSTANT)
    app.dependency_overrides[get_clock_service_dep] = lambda: service
    try:
        yield service
    finally:
        app.dependency_overrides.pop(get_clock_service_dep, None)
