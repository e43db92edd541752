"""Re-materialize ``pages.full_path`` after structural changes.

Three strategies, picked by the caller from what changed:

* ``update_page_path`` - one page, database-mode walk. For newly created pages.
* ``update_path_on_slug_change`` - one page renamed in place; descendants are
  rewritten by prefix substitution found with a single prefix query.
* ``update_paths_for_tree`` - whole-tree recompute. Required whenever more
  than one page's ``parent_id`` or ``sort_order`` changed together.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from pagetree.core.paths import generate_path, join_path, parent_path_of, walk_paths
from pagetree.core.ports.database import PageStore
from pagetree.models import PageTreeNode, PageUpdate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathChange:
    page_id: int
    old_path: str
    new_path: str


def affected_paths(changes: Iterable[PathChange]) -> list[str]:
    """Old and new paths of every change, deduplicated, in first-seen order."""
    seen: dict[str, None] = {}
    for change in changes:
        for path in (change.old_path, change.new_path):
            if path:
                seen.setdefault(path, None)
    return list(seen)


async def update_page_path(store: PageStore, page_id: int) -> PathChange | None:
    page = await store.get_page(page_id)
    if page is None:
        return None

    new_path = await generate_path(store, page_id)
    await store.update_page(page_id, PageUpdate(full_path=new_path))
    logger.debug("full_path of page %d set to %r", page_id, new_path)
    return PathChange(page_id=page_id, old_path=page.full_path, new_path=new_path)


async def update_path_on_slug_change(store: PageStore, page_id: int, new_slug: str) -> list[PathChange]:
    """Rename a page's slug and rewrite its descendants' paths by prefix.

    Relies on the stored ``full_path`` values being correct and on this page
    being the only one that moved. Returns the page's change first, followed
    by one change per rewritten descendant.
    """
    t0 = time.perf_counter()
    page = await store.get_page(page_id)
    if page is None:
        return []

    old_full_path = page.full_path
    new_full_path = join_path(parent_path_of(old_full_path), new_slug)
    await store.update_page(page_id, PageUpdate(slug=new_slug, full_path=new_full_path))

    if new_full_path == old_full_path:
        return []

    changes = [PathChange(page_id=page_id, old_path=old_full_path, new_path=new_full_path)]
    descendants = await store.list_pages_by_path_prefix(old_full_path)
    for descendant in descendants:
        rewritten = new_full_path + descendant.full_path[len(old_full_path) :]
        await store.update_page(descendant.id, PageUpdate(full_path=rewritten))
        changes.append(PathChange(page_id=descendant.id, old_path=descendant.full_path, new_path=rewritten))

    logger.info(
        "slug change %r -> %r: rewrote %d descendant path(s) in %.3fs",
        old_full_path,
        new_full_path,
        len(descendants),
        time.perf_counter() - t0,
    )
    return changes


async def update_paths_for_tree(
    store: PageStore,
    tree: Sequence[PageTreeNode],
    only_changed: bool = True,
) -> list[PathChange]:
    """Write the path of every node computed from the in-memory tree.

    With ``only_changed`` (the default) nodes whose stored ``full_path``
    already matches are skipped; ``only_changed=False`` writes every node.
    """
    t0 = time.perf_counter()
    changes: list[PathChange] = []
    visited = 0
    for node, path in walk_paths(tree):
        visited += 1
        if only_changed and node.full_path == path:
            continue
        await store.update_page(node.id, PageUpdate(full_path=path))
        changes.append(PathChange(page_id=node.id, old_path=node.full_path, new_path=path))

    logger.info(
        "tree path recompute: %d page(s) visited, %d written in %.3fs",
        visited,
        len(changes),
        time.perf_counter() - t0,
    )
    return changes
