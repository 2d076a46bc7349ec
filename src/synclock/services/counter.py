"""Visitor counter storage.

This module provides the CounterStore interface and its two persistence
policies:

- ``SqlCounterStore`` keeps the count in a single-row table and survives
  process restarts.
- ``InMemoryCounterStore`` keeps the count in process memory only.

Both serialize access with a readers-writer lock: reads share the lock, and an
increment holds it exclusively for the whole read-modify-write-and-persist
cycle, which is what prevents lost updates.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from sqlalchemy import select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from synclock.core.settings import Settings
from synclock.db.session import build_engine, build_session_factory, create_tables
from synclock.models import COUNTER_ROW_ID, VisitorCounter
from synclock.utils.rwlock import ReadWriteLock

# Configure logger for this module
logger = logging.getLogger(__name__)


class CounterStoreError(RuntimeError):
    """Base exception raised for counter storage failures."""


class StorageUnavailableError(CounterStoreError):
    """Raised when the durable backing store cannot be read or written.

    The store converts this into a logged, degraded result; it never reaches
    request handlers.
    """


class BootFailureError(CounterStoreError):
    """Raised when the backing store cannot be initialized at startup.

    This is the only counter failure that must stop the process.
    """


class CounterStore(ABC):
    """Single nonnegative visit counter shared by all request handlers."""

    def __init__(self) -> None:
        self._lock = ReadWriteLock()

    def open(self) -> None:
        """Prepare the backing store.  Raises BootFailureError on failure."""

    def close(self) -> None:
        """Release the backing store handle."""

    @abstractmethod
    def increment(self) -> None:
        """Atomically add one and persist the new value."""
        ...

    @abstractmethod
    def get(self) -> int:
        """Return the current count."""
        ...

    @property
    @abstractmethod
    def backend(self) -> str:
        """Short name of the persistence policy."""
        ...


class InMemoryCounterStore(CounterStore):
    """Counter held in process memory.  Resets to 0 on restart."""

    def __init__(self) -> None:
        super().__init__()
        self._value = 0

    @property
    def backend(self) -> str:
        return "memory"

    def increment(self) -> None:
        with self._lock.write_locked():
            self._value += 1

    def get(self) -> int:
        with self._lock.read_locked():
            return self._value


class SqlCounterStore(CounterStore):
    """Counter persisted in the ``visitor_counter`` table.

    Every increment is committed before the lock is released. The last value
    successfully read or written is cached in memory and served when the
    database cannot be read.
    """

    def __init__(
        self,
        database_url: str | None = None,
        *,
        engine: Engine | None = None,
        echo: bool = False,
    ) -> None:
        """Initialize the store.

        Args:
            database_url: SQLAlchemy URL of the backing database.
            engine: Optional pre-built engine; takes precedence over ``database_url``.
            echo: Log emitted SQL statements.
        """
        super().__init__()
        if engine is None and database_url is None:
            raise ValueError("SqlCounterStore requires a database_url or an engine")
        self._database_url = database_url
        self._engine = engine
        self._echo = echo
        self._owns_engine = engine is None
        self._session_factory: sessionmaker[Session] | None = None
        self._value = 0

    @property
    def backend(self) -> str:
        return "database"

    @property
    def engine(self) -> Engine | None:
        """Storage handle shared by all request threads, once opened."""
        return self._engine

    def open(self) -> None:
        """Create the table and the singleton row if absent, then load the count."""
        try:
            if self._engine is None and self._database_url is not None:
                self._engine = build_engine(self._database_url, echo=self._echo)
            create_tables(self._engine)
            self._session_factory = build_session_factory(self._engine)
            with self._lock.write_locked():
                with self._session_factory.begin() as db:
                    row = db.get(VisitorCounter, COUNTER_ROW_ID)
                    if row is None:
                        row = VisitorCounter(id=COUNTER_ROW_ID, guest_count=0)
                        db.add(row)
                        logger.info("Initialized visitor counter row")
                    self._value = int(row.guest_count)
        except SQLAlchemyError as exc:
            logger.critical("Unable to open visitor counter store: %s", exc)
            raise BootFailureError(f"cannot open counter store: {exc}") from exc
        logger.info("Visitor counter store opened at count %d", self._value)

    def close(self) -> None:
        if self._engine is not None and self._owns_engine:
            self._engine.dispose()
        self._session_factory = None

    def _sessions(self) -> sessionmaker[Session]:
        if self._session_factory is None:
            raise StorageUnavailableError("counter store is not open")
        return self._session_factory

    def _persist_increment(self) -> int:
        try:
            with self._sessions().begin() as db:
                db.execute(
                    update(VisitorCounter)
                    .where(VisitorCounter.id == COUNTER_ROW_ID)
                    .values(guest_count=VisitorCounter.guest_count + 1)
                )
                value = db.scalar(
                    select(VisitorCounter.guest_count).where(VisitorCounter.id == COUNTER_ROW_ID)
                )
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(str(exc)) from exc
        if value is None:
            raise StorageUnavailableError("visitor counter row is missing")
        return int(value)

    def _read(self) -> int:
        try:
            factory = self._sessions()
            with factory() as db:
                value = db.scalar(
                    select(VisitorCounter.guest_count).where(VisitorCounter.id == COUNTER_ROW_ID)
                )
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(str(exc)) from exc
        if value is None:
            raise StorageUnavailableError("visitor counter row is missing")
        return int(value)

    def increment(self) -> None:
        with self._lock.write_locked():
            try:
                self._value = self._persist_increment()
            except StorageUnavailableError as exc:
                logger.error("StorageUnavailable: increment not persisted: %s", exc)

    def get(self) -> int:
        with self._lock.read_locked():
            try:
                value = max(0, self._read())
            except StorageUnavailableError as exc:
                logger.error(
                    "StorageUnavailable: serving last known count %d: %s", self._value, exc
                )
                return self._value
            self._value = value
            return value


def build_counter_store(config: Settings) -> CounterStore:
    """Return an unopened counter store for the configured persistence policy."""
    if config.counter_backend == "memory":
        return InMemoryCounterStore()
    return SqlCounterStore(config.database_url, echo=config.sql_debug)
