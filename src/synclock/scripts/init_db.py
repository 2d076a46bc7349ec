# src/synclock/scripts/init_db.py
"""Create the visitor counter table and row without starting the server."""
from __future__ import annotations

import logging
import sys

from synclock.core.settings import settings
from synclock.services.counter import BootFailureError, SqlCounterStore

logger = logging.getLogger(__name__)


def init_db(database_url: str | None = None) -> int:
    """Open the durable counter store once and return its current value."""
    store = SqlCounterStore(database_url or settings.database_url)
    try:
        store.open()
        return store.get()
    finally:
        store.close()


def main() -> None:
    logging.basicConfig(level=settings.log_level.upper())
    try:
        count = init_db()
    except BootFailureError as exc:
        print(f"[init_db] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    print(f"[init_db] visitor counter ready at {count}")


if __name__ == "__main__":
    main()
