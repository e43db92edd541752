"""Unit tests for the tree builder."""

from __future__ import annotations

from pagetree.core.tree import build_tree, group_by_parent, group_translations, iter_nodes
from pagetree.models import Page, Translation


def _page(page_id: int, slug: str, parent_id: int | None = None, sort_order: int = 0) -> Page:
    return Page(id=page_id, title=slug.title(), slug=slug, parent_id=parent_id, sort_order=sort_order)


class TestBuildTree:
    def test_nests_children_under_their_parents(self) -> None:
        pages = [_page(1, "about"), _page(2, "team", 1), _page(3, "lead", 2)]

        tree = build_tree(pages, {})

        assert [n.id for n in tree] == [1]
        assert [n.id for n in tree[0].children] == [2]
        assert [n.id for n in tree[0].children[0].children] == [3]
        assert tree[0].children[0].children[0].children == []

    def test_orders_siblings_by_sort_order(self) -> None:
        pages = [_page(1, "c", sort_order=2), _page(2, "a", sort_order=0), _page(3, "b", sort_order=1)]

        tree = build_tree(pages, {})

        assert [n.slug for n in tree] == ["a", "b", "c"]

    def test_ties_keep_input_order(self) -> None:
        pages = [_page(5, "first"), _page(2, "second"), _page(9, "third")]

        tree = build_tree(pages, {})

        assert [n.slug for n in tree] == ["first", "second", "third"]

    def test_builds_subtree_for_given_parent(self) -> None:
        pages = [_page(1, "about"), _page(2, "team", 1), _page(3, "history", 1, sort_order=1)]

        subtree = build_tree(pages, {}, parent_id=1)

        assert [n.slug for n in subtree] == ["team", "history"]

    def test_unknown_parent_yields_empty_list(self) -> None:
        pages = [_page(1, "about")]

        assert build_tree(pages, {}, parent_id=42) == []
        assert build_tree([], {}) == []

    def test_attaches_translation_status(self) -> None:
        pages = [_page(1, "about")]
        translations = group_translations(
            [
                Translation(page_id=1, locale="en", title="About", content={"root": {}}, published=True),
                Translation(page_id=1, locale="fa", title="درباره", published=False),
            ]
        )

        node = build_tree(pages, translations)[0]

        statuses = {t.locale: (t.published, t.has_content) for t in node.translations}
        assert statuses == {"en": (True, True), "fa": (False, False)}

    def test_does_not_recurse_on_deep_chains(self) -> None:
        depth = 5000
        pages = [_page(1, "p1")] + [_page(i, f"p{i}", i - 1) for i in range(2, depth + 1)]

        tree = build_tree(pages, {})

        assert sum(1 for _ in iter_nodes(tree)) == depth


class TestGroupHelpers:
    def test_group_by_parent_indexes_roots_under_none(self) -> None:
        index = group_by_parent([_page(1, "a"), _page(2, "b", 1), _page(3, "c")])

        assert [p.id for p in index[None]] == [1, 3]
        assert [p.id for p in index[1]] == [2]

    def test_group_translations_by_page(self) -> None:
        grouped = group_translations(
            [
                Translation(page_id=1, locale="en", title="A"),
                Translation(page_id=2, locale="en", title="B"),
                Translation(page_id=1, locale="fa", title="الف"),
            ]
        )

        assert sorted(grouped) == [1, 2]
        assert [t.locale for t in grouped[1]] == ["en", "fa"]

    def test_iter_nodes_is_preorder(self) -> None:
        pages = [_page(1, "a"), _page(2, "a1", 1), _page(3, "b", sort_order=1), _page(4, "a2", 1, sort_order=1)]

        assert [n.slug for n in iter_nodes(build_tree(pages, {}))] == ["a", "a1", "a2", "b"]
