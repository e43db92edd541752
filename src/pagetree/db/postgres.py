import json
import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import bindparam, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine

from pagetree.core.errors import SlugConflictError
from pagetree.db.helpers import LIKE_ESCAPE, PAGE_COLUMNS, TRANSLATION_COLUMNS, descendant_pattern
from pagetree.models import NewPage, Page, PageUpdate, Translation

logger = logging.getLogger(__name__)

_SLUG_CONSTRAINT = "pages_slug_key"


def _row_to_page(row: Sequence[Any]) -> Page:
    return Page(
        id=int(row[0]),
        title=str(row[1]),
        slug=str(row[2]),
        parent_id=int(row[3]) if row[3] is not None else None,
        sort_order=int(row[4]),
        is_draft=bool(row[5]),
        show_on_menu=bool(row[6]),
        full_path=str(row[7]),
    )


def _row_to_translation(row: Sequence[Any]) -> Translation:
    content = row[3]
    if isinstance(content, str):
        content = json.loads(content)
    return Translation(
        page_id=int(row[0]),
        locale=str(row[1]),
        title=str(row[2]),
        content=content,
        published=bool(row[4]),
    )


def _is_slug_conflict(exc: IntegrityError) -> bool:
    return _SLUG_CONSTRAINT in str(exc.orig)


async def _ensure_tables(engine: AsyncEngine) -> None:
    pages_ddl = (
        "CREATE TABLE IF NOT EXISTS pages ("
        " id SERIAL PRIMARY KEY,"
        " title TEXT NOT NULL,"
        " slug TEXT NOT NULL CONSTRAINT pages_slug_key UNIQUE,"
        " parent_id INTEGER REFERENCES pages(id) ON DELETE RESTRICT,"
        " sort_order INTEGER NOT NULL DEFAULT 0,"
        " is_draft BOOLEAN NOT NULL DEFAULT TRUE,"
        " show_on_menu BOOLEAN NOT NULL DEFAULT FALSE,"
        " full_path TEXT NOT NULL DEFAULT ''"
        ")"
    )
    translations_ddl = (
        "CREATE TABLE IF NOT EXISTS page_translations ("
        " page_id INTEGER NOT NULL REFERENCES pages(id) ON DELETE CASCADE,"
        " locale TEXT NOT NULL,"
        " title TEXT NOT NULL,"
        " content JSONB,"
        " published BOOLEAN NOT NULL DEFAULT FALSE,"
        " PRIMARY KEY (page_id, locale)"
        ")"
    )
    async with engine.begin() as conn:
        await conn.execute(text(pages_ddl))
        await conn.execute(text("CREATE INDEX IF NOT EXISTS pages_parent_id_idx ON pages (parent_id)"))
        await conn.execute(
            text("CREATE INDEX IF NOT EXISTS pages_full_path_idx ON pages (full_path text_pattern_ops)")
        )
        await conn.execute(text(translations_ddl))


class PostgresPageStore:
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def ensure_ready(self) -> None:
        """Create the pages and translations tables if migrations have not run."""
        await _ensure_tables(self._engine)

    async def _fetch_pages(self, where: str = "", params: dict[str, Any] | None = None) -> list[Page]:
        sql = f"SELECT {PAGE_COLUMNS} FROM pages {where} ORDER BY sort_order, id"
        async with self._engine.connect() as conn:
            result = await conn.execute(text(sql), params or {})
            return [_row_to_page(row) for row in result.fetchall()]

    async def _fetch_page(self, where: str, params: dict[str, Any]) -> Page | None:
        pages = await self._fetch_pages(where, params)
        return pages[0] if pages else None

    async def list_pages(self) -> list[Page]:
        return await self._fetch_pages()

    async def get_page(self, page_id: int) -> Page | None:
        return await self._fetch_page("WHERE id = :id", {"id": page_id})

    async def get_page_by_slug(self, slug: str) -> Page | None:
        return await self._fetch_page("WHERE slug = :slug", {"slug": slug})

    async def get_page_by_full_path(self, full_path: str) -> Page | None:
        return await self._fetch_page("WHERE full_path = :full_path", {"full_path": full_path})

    async def list_child_pages(self, parent_id: int | None) -> list[Page]:
        if parent_id is None:
            return await self._fetch_pages("WHERE parent_id IS NULL")
        return await self._fetch_pages("WHERE parent_id = :parent_id", {"parent_id": parent_id})

    async def list_pages_by_path_prefix(self, prefix: str) -> list[Page]:
        """Return every page whose ``full_path`` lies below ``prefix``."""
        return await self._fetch_pages(
            f"WHERE full_path LIKE :pattern ESCAPE '{LIKE_ESCAPE}'",
            {"pattern": descendant_pattern(prefix)},
        )

    async def insert_page(self, page: NewPage) -> Page:
        try:
            async with self._engine.begin() as conn:
                result = await conn.execute(
                    text(
                        """
                        INSERT INTO pages (title, slug, parent_id, sort_order, is_draft, show_on_menu, full_path)
                        VALUES (:title, :slug, :parent_id, :sort_order, :is_draft, :show_on_menu, :full_path)
                        RETURNING """
                        + PAGE_COLUMNS
                    ),
                    page.model_dump(),
                )
                return _row_to_page(result.one())
        except IntegrityError as exc:
            if _is_slug_conflict(exc):
                raise SlugConflictError(page.slug) from exc
            raise

    async def update_page(self, page_id: int, update: PageUpdate) -> Page | None:
        changes = update.changes()
        if not changes:
            return await self.get_page(page_id)
        assignments = ", ".join(f"{column} = :{column}" for column in changes)
        try:
            async with self._engine.begin() as conn:
                result = await conn.execute(
                    text(f"UPDATE pages SET {assignments} WHERE id = :id RETURNING {PAGE_COLUMNS}"),
                    {**changes, "id": page_id},
                )
                row = result.fetchone()
        except IntegrityError as exc:
            if "slug" in changes and _is_slug_conflict(exc):
                raise SlugConflictError(changes["slug"]) from exc
            raise
        logger.debug("updated page %d: %s", page_id, sorted(changes))
        return _row_to_page(row) if row is not None else None

    async def delete_page(self, page_id: int) -> bool:
        async with self._engine.begin() as conn:
            result = await conn.execute(text("DELETE FROM pages WHERE id = :id RETURNING id"), {"id": page_id})
            return result.fetchone() is not None

    async def list_translations(self, page_ids: list[int] | None = None) -> list[Translation]:
        """Fetch translations for many pages in a single query."""
        async with self._engine.connect() as conn:
            if page_ids is None:
                result = await conn.execute(
                    text(f"SELECT {TRANSLATION_COLUMNS} FROM page_translations ORDER BY page_id, locale")
                )
            elif not page_ids:
                return []
            else:
                stmt = text(
                    f"SELECT {TRANSLATION_COLUMNS} FROM page_translations "
                    "WHERE page_id IN :page_ids ORDER BY page_id, locale"
                ).bindparams(bindparam("page_ids", expanding=True))
                result = await conn.execute(stmt, {"page_ids": page_ids})
            return [_row_to_translation(row) for row in result.fetchall()]

    async def get_translation(self, page_id: int, locale: str) -> Translation | None:
        async with self._engine.connect() as conn:
            result = await conn.execute(
                text(
                    f"SELECT {TRANSLATION_COLUMNS} FROM page_translations "
                    "WHERE page_id = :page_id AND locale = :locale"
                ),
                {"page_id": page_id, "locale": locale},
            )
            row = result.fetchone()
            return _row_to_translation(row) if row is not None else None

    async def upsert_translation(self, translation: Translation) -> Translation:
        params = translation.model_dump()
        params["content"] = json.dumps(translation.content) if translation.content is not None else None
        async with self._engine.begin() as conn:
            result = await conn.execute(
                text(
                    """
                    INSERT INTO page_translations (page_id, locale, title, content, published)
                    VALUES (:page_id, :locale, :title, CAST(:content AS JSONB), :published)
                    ON CONFLICT (page_id, locale) DO UPDATE
                    SET title = EXCLUDED.title, content = EXCLUDED.content, published = EXCLUDED.published
                    RETURNING """
                    + TRANSLATION_COLUMNS
                ),
                params,
            )
            return _row_to_translation(result.one())

    async def delete_translation(self, page_id: int, locale: str) -> bool:
        async with self._engine.begin() as conn:
            result = await conn.execute(
                text("DELETE FROM page_translations WHERE page_id = :page_id AND locale = :locale RETURNING page_id"),
                {"page_id": page_id, "locale": locale},
            )
            return result.fetchone() is not None

    async def ping(self) -> bool:
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception:
            return False

    async def has_schema(self) -> bool:
        """True when both page tables exist in the current search path."""
        async with self._engine.connect() as conn:
            result = await conn.execute(
                text("SELECT to_regclass('pages') IS NOT NULL AND to_regclass('page_translations') IS NOT NULL")
            )
            return bool(result.scalar())

    async def dispose(self) -> None:
        await self._engine.dispose()
