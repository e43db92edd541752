from typing import Protocol

from pagetree.models import NewPage, Page, PageUpdate, Translation


class PageStore(Protocol):
    async def ensure_ready(self) -> None: ...

    async def list_pages(self) -> list[Page]: ...

    async def get_page(self, page_id: int) -> Page | None: ...

    async def get_page_by_slug(self, slug: str) -> Page | None: ...

    async def get_page_by_full_path(self, full_path: str) -> Page | None: ...

    async def list_child_pages(self, parent_id: int | None) -> list[Page]: ...

    async def list_pages_by_path_prefix(self, prefix: str) -> list[Page]: ...

    async def insert_page(self, page: NewPage) -> Page: ...

    async def update_page(self, page_id: int, update: PageUpdate) -> Page | None: ...

    async def delete_page(self, page_id: int) -> bool: ...

    async def list_translations(self, page_ids: list[int] | None = None) -> list[Translation]: ...

    async def get_translation(self, page_id: int, locale: str) -> Translation | None: ...

    async def upsert_translation(self, translation: Translation) -> Translation: ...

    async def delete_translation(self, page_id: int, locale: str) -> bool: ...

    async def ping(self) -> bool: ...

    async def has_schema(self) -> bool: ...

    async def dispose(self) -> None: ...
