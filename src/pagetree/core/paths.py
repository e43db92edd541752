"""Path generation for pages.

Tree mode reads an already built tree and does no I/O. Database mode walks the
parent chain with one ``get_page`` call per ancestor and is meant for call
sites that only hold a single page id.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from pagetree.core.ports.database import PageStore
from pagetree.models import PageTreeNode

PATH_SEPARATOR = "/"


def join_path(parent_path: str, slug: str) -> str:
    if not parent_path:
        return slug
    return f"{parent_path}{PATH_SEPARATOR}{slug}"


def descendant_prefix(full_path: str) -> str:
    """The prefix shared by every descendant of ``full_path``."""
    return full_path + PATH_SEPARATOR


def parent_path_of(full_path: str) -> str:
    """Drop the last segment: ``"a/b/c"`` -> ``"a/b"``, ``"a"`` -> ``""``."""
    head, _, _ = full_path.rpartition(PATH_SEPARATOR)
    return head


def walk_paths(tree: Sequence[PageTreeNode]) -> Iterator[tuple[PageTreeNode, str]]:
    """Yield ``(node, path)`` depth-first, computing each path from the node's in-tree parent."""
    stack: list[tuple[PageTreeNode, str]] = [(node, "") for node in reversed(tree)]
    while stack:
        node, parent_path = stack.pop()
        path = join_path(parent_path, node.slug)
        yield node, path
        stack.extend((child, path) for child in reversed(node.children))


def build_path_map(tree: Sequence[PageTreeNode]) -> dict[int, str]:
    return {node.id: path for node, path in walk_paths(tree)}


def path_from_tree(tree: Sequence[PageTreeNode], page_id: int) -> str | None:
    for node, path in walk_paths(tree):
        if node.id == page_id:
            return path
    return None


async def generate_path(store: PageStore, page_id: int) -> str:
    """Compute a page's full path by walking its parents in the store.

    A missing row ends the walk: the segments collected so far are returned,
    so an unknown ``page_id`` gives ``""`` and a dangling ``parent_id`` gives a
    truncated path. A cyclic parent chain never terminates.
    """
    segments: list[str] = []
    current: int | None = page_id
    while current is not None:
        page = await store.get_page(current)
        if page is None:
            break
        segments.append(page.slug)
        current = page.parent_id
    return PATH_SEPARATOR.join(reversed(segments))
