"""Tree builder: turns the flat ``pages`` rows into nested ``PageTreeNode`` lists.

The build is pure (no store access) and iterative. Pages are indexed by
``parent_id`` in one pass and the nodes are wired up in a second pass, so the
cost is O(pages) regardless of depth.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence

from pagetree.models import Page, PageTreeNode, Translation, TranslationStatus


def group_by_parent(pages: Iterable[Page]) -> dict[int | None, list[Page]]:
    """Index pages by ``parent_id``, each sibling list ordered by ``sort_order``.

    ``sorted`` is stable, so siblings with equal ``sort_order`` keep the order
    in which they were given.
    """
    index: dict[int | None, list[Page]] = defaultdict(list)
    for page in sorted(pages, key=lambda p: p.sort_order):
        index[page.parent_id].append(page)
    return index


def group_translations(translations: Iterable[Translation]) -> dict[int, list[Translation]]:
    """Group one batched translation query by page id."""
    grouped: dict[int, list[Translation]] = defaultdict(list)
    for translation in translations:
        grouped[translation.page_id].append(translation)
    return dict(grouped)


def translation_status(translation: Translation) -> TranslationStatus:
    return TranslationStatus(
        locale=translation.locale,
        published=translation.published,
        has_content=bool(translation.content),
    )


def _make_node(page: Page, translations: Sequence[Translation]) -> PageTreeNode:
    return PageTreeNode(
        id=page.id,
        title=page.title,
        slug=page.slug,
        parent_id=page.parent_id,
        sort_order=page.sort_order,
        is_draft=page.is_draft,
        show_on_menu=page.show_on_menu,
        full_path=page.full_path,
        translations=[translation_status(t) for t in translations],
    )


def build_tree(
    pages: Sequence[Page],
    translations_by_page_id: Mapping[int, Sequence[Translation]] | None = None,
    parent_id: int | None = None,
) -> list[PageTreeNode]:
    """Build the subtree whose top-level nodes have the given ``parent_id``.

    ``parent_id=None`` builds the whole site. A ``parent_id`` with no matching
    pages (including one that does not exist at all) yields an empty list.
    """
    translations_by_page_id = translations_by_page_id or {}
    index = group_by_parent(pages)

    nodes = {page.id: _make_node(page, translations_by_page_id.get(page.id, ())) for page in pages}
    for key, siblings in index.items():
        if key is None or key not in nodes:
            continue
        parent_node = nodes[key]
        parent_node.children.extend(nodes[page.id] for page in siblings)

    return [nodes[page.id] for page in index.get(parent_id, [])]


def iter_nodes(tree: Sequence[PageTreeNode]) -> Iterable[PageTreeNode]:
    """Depth-first, pre-order traversal in sibling order."""
    stack = list(reversed(tree))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))
