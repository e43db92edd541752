"""Schema migrations: the page tables appear on upgrade and vanish on downgrade."""

import asyncio

from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import command
from alembic.config import Config


def _existing_tables(db_url: str) -> set[str]:
    async def _query() -> set[str]:
        engine = create_async_engine(db_url)
        try:
            async with engine.connect() as conn:
                result = await conn.execute(
                    text("SELECT tablename FROM pg_tables WHERE schemaname = 'public' AND tablename LIKE 'page%'")
                )
                return {row[0] for row in result}
        finally:
            await engine.dispose()

    return asyncio.run(_query())


def test_upgrade_and_downgrade_repeatedly(alembic_config: Config, test_db_url: str) -> None:
    for _ in range(2):
        command.downgrade(alembic_config, "base")
        assert _existing_tables(test_db_url) == set()

        command.upgrade(alembic_config, "head")
        assert _existing_tables(test_db_url) == {"pages", "page_translations"}


def test_upgrade_creates_prefix_index(alembic_config: Config, test_db_url: str) -> None:
    command.upgrade(alembic_config, "head")

    async def _indexes() -> set[str]:
        engine = create_async_engine(test_db_url)
        try:
            async with engine.connect() as conn:
                result = await conn.execute(text("SELECT indexname FROM pg_indexes WHERE tablename = 'pages'"))
                return {row[0] for row in result}
        finally:
            await engine.dispose()

    assert {"pages_parent_id_idx", "pages_full_path_idx", "pages_slug_key"} <= asyncio.run(_indexes())
