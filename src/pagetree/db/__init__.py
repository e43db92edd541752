from pagetree.db.helpers import descendant_pattern, escape_like
from pagetree.db.memory import InMemoryPageStore
from pagetree.db.postgres import PostgresPageStore

__all__ = [
    "InMemoryPageStore",
    "PostgresPageStore",
    "descendant_pattern",
    "escape_like",
]
