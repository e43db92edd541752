"""Public navigation menu derived from the page tree."""

from __future__ import annotations

from collections.abc import Sequence

from pagetree.core.ports.database import PageStore
from pagetree.core.tree import group_by_parent
from pagetree.models import MenuItem, Page, Translation


def project_menu(pages: Sequence[Page], translations: Sequence[Translation], locale: str) -> list[MenuItem]:
    """Build the menu tree for ``locale`` from already loaded rows.

    A page is listed when ``show_on_menu`` is set and it has a published
    translation in ``locale``. Visibility is decided per page: a listed page
    whose parent is not listed is attached at the root level.
    """
    published: dict[int, Translation] = {}
    for translation in translations:
        if translation.locale == locale and translation.published:
            published.setdefault(translation.page_id, translation)

    visible = [page for page in pages if page.show_on_menu and page.id in published]
    visible_ids = {page.id for page in visible}
    reattached = [
        page if page.parent_id is None or page.parent_id in visible_ids else page.model_copy(update={"parent_id": None})
        for page in visible
    ]

    items = {
        page.id: MenuItem(id=page.id, title=published[page.id].title, slug=page.slug, full_path=page.full_path)
        for page in reattached
    }
    index = group_by_parent(reattached)
    for parent_id, siblings in index.items():
        if parent_id is not None:
            items[parent_id].children.extend(items[page.id] for page in siblings)
    return [items[page.id] for page in index.get(None, [])]


async def get_menu(store: PageStore, locale: str) -> list[MenuItem]:
    pages = await store.list_pages()
    candidates = [page.id for page in pages if page.show_on_menu]
    if not candidates:
        return []
    translations = await store.list_translations(candidates)
    return project_menu(pages, translations, locale)


def flatten_menu(items: Sequence[MenuItem]) -> list[MenuItem]:
    """Pre-order flat list of menu items with their children removed."""
    flat: list[MenuItem] = []
    stack = list(reversed(items))
    while stack:
        item = stack.pop()
        flat.append(item.model_copy(update={"children": []}))
        stack.extend(reversed(item.children))
    return flat
