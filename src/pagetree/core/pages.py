"""Page mutations and lookups used by the API and the CLI.

Each mutation validates its input, writes the page row(s) and then picks the
path update strategy that matches what changed.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from pagetree.core.errors import (
    InvalidParentError,
    InvalidSlugError,
    PageHasChildrenError,
    PageNotFoundError,
    SlugConflictError,
    TranslationNotFoundError,
)
from pagetree.core.locales import get_supported_locales
from pagetree.core.ports.database import PageStore
from pagetree.core.tree import build_tree, group_translations
from pagetree.core.updater import (
    PathChange,
    affected_paths,
    update_page_path,
    update_path_on_slug_change,
    update_paths_for_tree,
)
from pagetree.models import NewPage, Page, PageContent, PageOrderEntry, PageTreeNode, PageUpdate, Translation

logger = logging.getLogger(__name__)

HOME_PATH = "home"
HOME_TITLE = "Home"

_SLUG_PATTERN = re.compile(r"[^/\s]+")


@dataclass
class MutationResult:
    page: Page | None
    changes: list[PathChange] = field(default_factory=list)

    @property
    def affected_paths(self) -> list[str]:
        paths = affected_paths(self.changes)
        if self.page is not None and self.page.full_path and self.page.full_path not in paths:
            paths.append(self.page.full_path)
        return paths


async def _require_page(store: PageStore, page_id: int) -> Page:
    page = await store.get_page(page_id)
    if page is None:
        raise PageNotFoundError(page_id)
    return page


def _validate_slug(slug: str) -> None:
    if not _SLUG_PATTERN.fullmatch(slug):
        raise InvalidSlugError(slug)


async def _ensure_slug_available(store: PageStore, slug: str, page_id: int | None = None) -> None:
    existing = await store.get_page_by_slug(slug)
    if existing is not None and existing.id != page_id:
        raise SlugConflictError(slug)


def _check_parents(parents: dict[int, int | None], page_ids: Sequence[int]) -> None:
    """Reject parent assignments that make any of ``page_ids`` its own ancestor."""
    for page_id in page_ids:
        parent_id = parents.get(page_id)
        seen = {page_id}
        current = parent_id
        while current is not None:
            if current in seen:
                assert parent_id is not None
                raise InvalidParentError(page_id, parent_id)
            seen.add(current)
            current = parents.get(current)


async def load_page_tree(store: PageStore) -> tuple[list[Page], list[PageTreeNode]]:
    pages = await store.list_pages()
    translations = await store.list_translations()
    return pages, build_tree(pages, group_translations(translations))


async def get_page_tree(store: PageStore) -> list[PageTreeNode]:
    _, tree = await load_page_tree(store)
    return tree


async def get_page(store: PageStore, page_id: int) -> Page:
    return await _require_page(store, page_id)


async def get_page_by_full_path(store: PageStore, full_path: str) -> Page | None:
    normalized = full_path.strip("/") or HOME_PATH
    return await store.get_page_by_full_path(normalized)


async def get_or_create_home_page(store: PageStore) -> Page:
    """Return the root landing page, creating it on first access."""
    page = await store.get_page_by_full_path(HOME_PATH)
    if page is not None:
        return page
    result = await create_page(store, HOME_TITLE, HOME_PATH)
    assert result.page is not None
    logger.info("created missing landing page %d", result.page.id)
    return result.page


async def create_page(
    store: PageStore,
    title: str,
    slug: str,
    parent_id: int | None = None,
    is_draft: bool = True,
    show_on_menu: bool = False,
    locales: Sequence[str] | None = None,
) -> MutationResult:
    _validate_slug(slug)
    if parent_id is not None:
        await _require_page(store, parent_id)
    await _ensure_slug_available(store, slug)

    siblings = await store.list_child_pages(parent_id)
    sort_order = max((sibling.sort_order for sibling in siblings), default=-1) + 1

    page = await store.insert_page(
        NewPage(
            title=title,
            slug=slug,
            parent_id=parent_id,
            sort_order=sort_order,
            is_draft=is_draft,
            show_on_menu=show_on_menu,
        )
    )
    for locale in locales if locales is not None else get_supported_locales():
        await store.upsert_translation(Translation(page_id=page.id, locale=locale, title=title))

    change = await update_page_path(store, page.id)
    created = await _require_page(store, page.id)
    logger.info("created page %d at %r", created.id, created.full_path)
    return MutationResult(page=created, changes=[change] if change else [])


async def update_page(
    store: PageStore,
    page_id: int,
    title: str | None = None,
    slug: str | None = None,
    is_draft: bool | None = None,
    show_on_menu: bool | None = None,
) -> MutationResult:
    """Update page properties; a slug change is propagated to descendants by prefix."""
    if slug is not None:
        _validate_slug(slug)
    existing = await _require_page(store, page_id)
    if slug is not None and slug != existing.slug:
        await _ensure_slug_available(store, slug, page_id)

    fields: dict[str, Any] = {}
    if title is not None:
        fields["title"] = title
    if is_draft is not None:
        fields["is_draft"] = is_draft
    if show_on_menu is not None:
        fields["show_on_menu"] = show_on_menu
    if fields:
        await store.update_page(page_id, PageUpdate(**fields))

    changes: list[PathChange] = []
    if slug is not None and slug != existing.slug:
        changes = await update_path_on_slug_change(store, page_id, slug)

    return MutationResult(page=await _require_page(store, page_id), changes=changes)


async def move_page(
    store: PageStore,
    page_id: int,
    parent_id: int | None,
    sort_order: int | None = None,
) -> MutationResult:
    """Reparent one page. Paths are recomputed over the whole tree."""
    page = await _require_page(store, page_id)
    if parent_id is not None:
        if parent_id == page_id:
            raise InvalidParentError(page_id, parent_id)
        await _require_page(store, parent_id)
        parents = {p.id: p.parent_id for p in await store.list_pages()}
        parents[page_id] = parent_id
        _check_parents(parents, [page_id])

    if sort_order is None:
        siblings = [s for s in await store.list_child_pages(parent_id) if s.id != page_id]
        sort_order = max((s.sort_order for s in siblings), default=-1) + 1

    await store.update_page(page_id, PageUpdate(parent_id=parent_id, sort_order=sort_order))
    changes = await rebuild_paths(store)
    logger.info("moved page %d under %s", page.id, parent_id)
    return MutationResult(page=await _require_page(store, page_id), changes=changes)


async def save_page_order(store: PageStore, entries: Sequence[PageOrderEntry]) -> list[PathChange]:
    """Apply a drag-and-drop reorder: new parents and sort orders for many pages at once.

    The whole batch is validated before anything is written.
    """
    pages = await store.list_pages()
    parents = {page.id: page.parent_id for page in pages}
    for entry in entries:
        if entry.id not in parents:
            raise PageNotFoundError(entry.id)
        if entry.parent_id is not None and entry.parent_id not in parents:
            raise PageNotFoundError(entry.parent_id)
        if entry.parent_id == entry.id:
            raise InvalidParentError(entry.id, entry.id)
    for entry in entries:
        parents[entry.id] = entry.parent_id
    _check_parents(parents, [entry.id for entry in entries])

    for entry in entries:
        await store.update_page(entry.id, PageUpdate(parent_id=entry.parent_id, sort_order=entry.sort_order))
    return await rebuild_paths(store)


async def rebuild_paths(store: PageStore, only_changed: bool = True) -> list[PathChange]:
    _, tree = await load_page_tree(store)
    return await update_paths_for_tree(store, tree, only_changed=only_changed)


async def delete_page(store: PageStore, page_id: int) -> MutationResult:
    page = await _require_page(store, page_id)
    if await store.list_child_pages(page_id):
        raise PageHasChildrenError(page_id)
    await store.delete_page(page_id)
    logger.info("deleted page %d (%r)", page_id, page.full_path)
    return MutationResult(page=page)


async def get_page_content(store: PageStore, page_id: int, locale: str) -> Translation:
    translation = await store.get_translation(page_id, locale)
    if translation is None:
        raise TranslationNotFoundError(page_id, locale)
    return translation


async def get_page_content_with_fallback(store: PageStore, page_id: int, locale: str) -> PageContent | None:
    """Serve the published translation for ``locale``, or the first published one in locale order.

    Configured locales are tried in order, then any other published locale by
    name. Returns None when the page has no published translation at all.
    """
    await _require_page(store, page_id)
    published = {t.locale: t for t in await store.list_translations([page_id]) if t.published}
    if locale in published:
        return PageContent(translation=published[locale])
    configured = get_supported_locales()
    for candidate in [*configured, *sorted(set(published) - set(configured))]:
        if candidate in published:
            return PageContent(translation=published[candidate], fallback_locale=candidate)
    return None


async def save_translation(
    store: PageStore,
    page_id: int,
    locale: str,
    title: str | None = None,
    content: dict[str, Any] | None = None,
    published: bool | None = None,
) -> Translation:
    """Create or update one locale of a page. Unset fields keep their stored values."""
    page = await _require_page(store, page_id)
    current = await store.get_translation(page_id, locale)
    if current is None:
        current = Translation(page_id=page_id, locale=locale, title=page.title)
    updated = current.model_copy(
        update={
            key: value
            for key, value in {"title": title, "content": content, "published": published}.items()
            if value is not None
        }
    )
    return await store.upsert_translation(updated)


async def delete_translation(store: PageStore, page_id: int, locale: str) -> None:
    await _require_page(store, page_id)
    if not await store.delete_translation(page_id, locale):
        raise TranslationNotFoundError(page_id, locale)
