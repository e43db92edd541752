from __future__ import annotations

from collections.abc import AsyncIterator

from pagetree.core.ports.database import PageStore
from pagetree.core.ports.invalidation import PathInvalidator
from pagetree.db.engine import get_engine
from pagetree.db.postgres import PostgresPageStore
from pagetree.invalidation.logging_adapter import LoggingPathInvalidator

_store: PostgresPageStore | None = None
_invalidator = LoggingPathInvalidator()


async def get_store() -> AsyncIterator[PageStore]:
    """Yield a ``PageStore`` instance, creating it lazily on first call."""
    global _store  # noqa: PLW0603
    if _store is None:
        _store = PostgresPageStore(get_engine())
    yield _store


def get_invalidator() -> PathInvalidator:
    return _invalidator


async def shutdown_store() -> None:
    global _store  # noqa: PLW0603
    if _store is not None:
        await _store.dispose()
        _store = None
