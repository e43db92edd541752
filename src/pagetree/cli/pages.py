import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Annotated, TypeVar

import typer
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from pagetree.core import pages as page_service
from pagetree.core.errors import PageTreeError
from pagetree.core.locales import get_default_locale
from pagetree.core.menu import flatten_menu, get_menu
from pagetree.core.paths import generate_path, path_from_tree
from pagetree.core.ports.database import PageStore
from pagetree.core.updater import PathChange
from pagetree.models import MenuItem, PageTreeNode

pages_app = typer.Typer(help="Inspect and change the page tree.")
console = Console()

T = TypeVar("T")


def _get_store() -> "PageStore":
    from pagetree.db.engine import get_engine
    from pagetree.db.postgres import PostgresPageStore

    return PostgresPageStore(get_engine())


def _run(action: Callable[[PageStore], Awaitable[T]]) -> T:
    """Run ``action`` against a fresh store, turning domain errors into exit code 1."""
    store = _get_store()

    async def _main() -> T:
        try:
            return await action(store)
        finally:
            await store.dispose()

    try:
        return asyncio.run(_main())
    except PageTreeError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc


def _render_changes(changes: Sequence[PathChange]) -> None:
    table = Table(show_lines=False)
    for header in ("id", "old_path", "new_path"):
        table.add_column(header)
    for change in changes:
        table.add_row(str(change.page_id), change.old_path, change.new_path)
    console.print(table)
    console.print(f"({len(changes)} paths changed)")


def _add_branch(parent: Tree, nodes: Sequence[PageTreeNode]) -> None:
    for node in nodes:
        flags = []
        if node.is_draft:
            flags.append("draft")
        if node.show_on_menu:
            flags.append("menu")
        suffix = f" [dim]({', '.join(flags)})[/dim]" if flags else ""
        branch = parent.add(f"[bold]{node.slug}[/bold] #{node.id} /{node.full_path}{suffix}")
        _add_branch(branch, node.children)


def _add_menu_branch(parent: Tree, items: Sequence[MenuItem]) -> None:
    for item in items:
        _add_menu_branch(parent.add(f"{item.title} -> /{item.full_path}"), item.children)


@pages_app.command("tree")
def tree() -> None:
    """Show the full page tree."""
    nodes = _run(page_service.get_page_tree)
    root = Tree("[bold]pages[/bold]")
    _add_branch(root, nodes)
    console.print(root)


@pages_app.command("path")
def path(
    page_id: Annotated[int, typer.Argument(help="Page id.")],
    from_tree: Annotated[bool, typer.Option("--from-tree", help="Compute from the loaded tree.")] = False,
) -> None:
    """Compute a page's full path from its ancestors."""

    async def _action(store: PageStore) -> str | None:
        if from_tree:
            return path_from_tree(await page_service.get_page_tree(store), page_id)
        return await generate_path(store, page_id) or None

    result = _run(_action)
    if result is None:
        console.print(f"[yellow]Page {page_id} not found.[/yellow]")
        raise typer.Exit(1)
    console.print(result)


@pages_app.command("create")
def create(
    title: Annotated[str, typer.Argument(help="Page title.")],
    slug: Annotated[str, typer.Argument(help="URL segment, unique across all pages.")],
    parent: Annotated[int | None, typer.Option(help="Parent page id.")] = None,
    publish_menu: Annotated[bool, typer.Option("--menu", help="Show the page on the menu.")] = False,
) -> None:
    """Create a page with one empty translation per locale."""
    result = _run(
        lambda store: page_service.create_page(store, title, slug, parent_id=parent, show_on_menu=publish_menu)
    )
    assert result.page is not None
    console.print(f"[green]Created[/green] page {result.page.id} at /{result.page.full_path}")


@pages_app.command("rename")
def rename(
    page_id: Annotated[int, typer.Argument(help="Page id.")],
    slug: Annotated[str, typer.Argument(help="New slug.")],
) -> None:
    """Change a page's slug and rewrite its descendants' paths."""
    result = _run(lambda store: page_service.update_page(store, page_id, slug=slug))
    _render_changes(result.changes)


@pages_app.command("move")
def move(
    page_id: Annotated[int, typer.Argument(help="Page id.")],
    parent: Annotated[int | None, typer.Option(help="New parent id; omit to move to the root.")] = None,
    sort_order: Annotated[int | None, typer.Option(help="Position among the new siblings.")] = None,
) -> None:
    """Move a page under a new parent."""
    result = _run(lambda store: page_service.move_page(store, page_id, parent, sort_order))
    _render_changes(result.changes)


@pages_app.command("delete")
def delete(page_id: Annotated[int, typer.Argument(help="Page id.")]) -> None:
    """Delete a page without children."""
    _run(lambda store: page_service.delete_page(store, page_id))
    console.print(f"[green]Deleted[/green] page {page_id}")


@pages_app.command("rebuild")
def rebuild(
    force: Annotated[bool, typer.Option(help="Write every page, not only stale ones.")] = False,
) -> None:
    """Recompute every page's full path from the tree."""
    changes = _run(lambda store: page_service.rebuild_paths(store, only_changed=not force))
    _render_changes(changes)


@pages_app.command("menu")
def menu(
    locale: Annotated[str | None, typer.Argument(help="Locale code; defaults to the first configured locale.")] = None,
    flat: Annotated[bool, typer.Option(help="Print a flat list.")] = False,
) -> None:
    """Show the public menu for a locale."""
    code = locale or get_default_locale()
    items = _run(lambda store: get_menu(store, code))
    if flat:
        for item in flatten_menu(items):
            console.print(f"{item.title} -> /{item.full_path}")
        return
    root = Tree(f"[bold]menu ({code})[/bold]")
    _add_menu_branch(root, items)
    console.print(root)
