from pagetree.core.errors import SlugConflictError
from pagetree.core.paths import descendant_prefix
from pagetree.models import NewPage, Page, PageUpdate, Translation


class InMemoryPageStore:
    """Dict-backed ``PageStore`` for tests and local experiments.

    Mirrors the SQL store: global slug uniqueness, pages listed by
    ``(sort_order, id)``, translations removed together with their page.
    ``page_writes`` counts ``update_page`` calls per page id.
    """

    def __init__(self) -> None:
        self.pages: dict[int, Page] = {}
        self.translations: dict[tuple[int, str], Translation] = {}
        self.page_writes: dict[int, int] = {}
        self.lookups = 0
        self._next_page_id = 1

    def _check_slug(self, slug: str, page_id: int | None = None) -> None:
        for page in self.pages.values():
            if page.slug == slug and page.id != page_id:
                raise SlugConflictError(slug)

    def _sorted(self, pages: list[Page]) -> list[Page]:
        return sorted(pages, key=lambda p: (p.sort_order, p.id))

    def add(self, page: Page) -> Page:
        """Store a page with an explicit id and ``full_path``, bypassing slug checks."""
        self.pages[page.id] = page
        self._next_page_id = max(self._next_page_id, page.id + 1)
        return page

    async def ensure_ready(self) -> None:
        pass

    async def list_pages(self) -> list[Page]:
        return self._sorted(list(self.pages.values()))

    async def get_page(self, page_id: int) -> Page | None:
        self.lookups += 1
        return self.pages.get(page_id)

    async def get_page_by_slug(self, slug: str) -> Page | None:
        for page in self.pages.values():
            if page.slug == slug:
                return page
        return None

    async def get_page_by_full_path(self, full_path: str) -> Page | None:
        for page in self._sorted(list(self.pages.values())):
            if page.full_path == full_path:
                return page
        return None

    async def list_child_pages(self, parent_id: int | None) -> list[Page]:
        return self._sorted([p for p in self.pages.values() if p.parent_id == parent_id])

    async def list_pages_by_path_prefix(self, prefix: str) -> list[Page]:
        start = descendant_prefix(prefix)
        return self._sorted([p for p in self.pages.values() if p.full_path.startswith(start)])

    async def insert_page(self, page: NewPage) -> Page:
        self._check_slug(page.slug)
        page_id = self._next_page_id
        self._next_page_id += 1
        record = Page(id=page_id, **page.model_dump())
        self.pages[page_id] = record
        return record

    async def update_page(self, page_id: int, update: PageUpdate) -> Page | None:
        current = self.pages.get(page_id)
        if current is None:
            return None
        changes = update.changes()
        if "slug" in changes:
            self._check_slug(changes["slug"], page_id)
        record = current.model_copy(update=changes)
        self.pages[page_id] = record
        self.page_writes[page_id] = self.page_writes.get(page_id, 0) + 1
        return record

    async def delete_page(self, page_id: int) -> bool:
        if self.pages.pop(page_id, None) is None:
            return False
        for key in [k for k in self.translations if k[0] == page_id]:
            del self.translations[key]
        return True

    async def list_translations(self, page_ids: list[int] | None = None) -> list[Translation]:
        wanted = set(page_ids) if page_ids is not None else None
        return [
            t
            for (page_id, _), t in sorted(self.translations.items())
            if wanted is None or page_id in wanted
        ]

    async def get_translation(self, page_id: int, locale: str) -> Translation | None:
        return self.translations.get((page_id, locale))

    async def upsert_translation(self, translation: Translation) -> Translation:
        self.translations[(translation.page_id, translation.locale)] = translation
        return translation

    async def delete_translation(self, page_id: int, locale: str) -> bool:
        return self.translations.pop((page_id, locale), None) is not None

    async def ping(self) -> bool:
        return True

    async def has_schema(self) -> bool:
        return True

    async def dispose(self) -> None:
        pass
