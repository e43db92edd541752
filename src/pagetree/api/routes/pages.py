from collections.abc import Sequence
from typing import Literal

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Response, status

from pagetree.api.dependencies import get_invalidator, get_store
from pagetree.api.schemas import (
    PageCreateRequest,
    PageMoveRequest,
    PageMutationResponse,
    PageOrderRequest,
    PagePathResponse,
    PageUpdateRequest,
    PathChangeRow,
    PathsResponse,
    TranslationRequest,
)
from pagetree.core import pages as page_service
from pagetree.core.paths import generate_path, path_from_tree
from pagetree.core.ports.database import PageStore
from pagetree.core.ports.invalidation import PathInvalidator
from pagetree.core.updater import PathChange, affected_paths
from pagetree.invalidation.logging_adapter import invalidate_in_background
from pagetree.models import Page, PageContent, PageTreeNode, Translation

router = APIRouter(prefix="/pages", tags=["pages"])


def _rows(changes: Sequence[PathChange]) -> list[PathChangeRow]:
    return [PathChangeRow(page_id=c.page_id, old_path=c.old_path, new_path=c.new_path) for c in changes]


def _mutation_response(
    result: page_service.MutationResult,
    background: BackgroundTasks,
    invalidator: PathInvalidator,
) -> PageMutationResponse:
    paths = result.affected_paths
    background.add_task(invalidate_in_background, invalidator, paths)
    return PageMutationResponse(page=result.page, changes=_rows(result.changes), affected_paths=paths)


def _paths_response(
    changes: Sequence[PathChange],
    background: BackgroundTasks,
    invalidator: PathInvalidator,
) -> PathsResponse:
    paths = affected_paths(changes)
    background.add_task(invalidate_in_background, invalidator, paths)
    return PathsResponse(changes=_rows(changes), affected_paths=paths)


@router.get("/tree", response_model=list[PageTreeNode])
async def tree(store: PageStore = Depends(get_store)) -> list[PageTreeNode]:
    return await page_service.get_page_tree(store)


@router.put("/order", response_model=PathsResponse)
async def save_order(
    body: PageOrderRequest,
    background: BackgroundTasks,
    store: PageStore = Depends(get_store),
    invalidator: PathInvalidator = Depends(get_invalidator),
) -> PathsResponse:
    changes = await page_service.save_page_order(store, body.pages)
    return _paths_response(changes, background, invalidator)


@router.post("/paths/rebuild", response_model=PathsResponse)
async def rebuild(
    background: BackgroundTasks,
    force: bool = Query(False, description="Write every page, not only stale ones."),
    store: PageStore = Depends(get_store),
    invalidator: PathInvalidator = Depends(get_invalidator),
) -> PathsResponse:
    changes = await page_service.rebuild_paths(store, only_changed=not force)
    return _paths_response(changes, background, invalidator)


@router.get("/by-path/{full_path:path}", response_model=Page)
async def by_path(full_path: str, store: PageStore = Depends(get_store)) -> Page:
    page = await page_service.get_page_by_full_path(store, full_path)
    if page is None:
        raise HTTPException(status_code=404, detail=f"No page at {full_path!r}")
    return page


@router.get("/home", response_model=Page)
async def home(store: PageStore = Depends(get_store)) -> Page:
    """The landing page, created on first request."""
    return await page_service.get_or_create_home_page(store)


@router.post("", response_model=PageMutationResponse, status_code=status.HTTP_201_CREATED)
async def create(
    body: PageCreateRequest,
    background: BackgroundTasks,
    store: PageStore = Depends(get_store),
    invalidator: PathInvalidator = Depends(get_invalidator),
) -> PageMutationResponse:
    result = await page_service.create_page(
        store,
        title=body.title,
        slug=body.slug,
        parent_id=body.parent_id,
        is_draft=body.is_draft,
        show_on_menu=body.show_on_menu,
    )
    return _mutation_response(result, background, invalidator)


@router.get("/{page_id}", response_model=Page)
async def get_page(page_id: int, store: PageStore = Depends(get_store)) -> Page:
    return await page_service.get_page(store, page_id)


@router.patch("/{page_id}", response_model=PageMutationResponse)
async def update(
    page_id: int,
    body: PageUpdateRequest,
    background: BackgroundTasks,
    store: PageStore = Depends(get_store),
    invalidator: PathInvalidator = Depends(get_invalidator),
) -> PageMutationResponse:
    result = await page_service.update_page(
        store,
        page_id,
        title=body.title,
        slug=body.slug,
        is_draft=body.is_draft,
        show_on_menu=body.show_on_menu,
    )
    return _mutation_response(result, background, invalidator)


@router.post("/{page_id}/move", response_model=PageMutationResponse)
async def move(
    page_id: int,
    body: PageMoveRequest,
    background: BackgroundTasks,
    store: PageStore = Depends(get_store),
    invalidator: PathInvalidator = Depends(get_invalidator),
) -> PageMutationResponse:
    result = await page_service.move_page(store, page_id, body.parent_id, body.sort_order)
    return _mutation_response(result, background, invalidator)


@router.delete("/{page_id}", response_model=PageMutationResponse)
async def delete(
    page_id: int,
    background: BackgroundTasks,
    store: PageStore = Depends(get_store),
    invalidator: PathInvalidator = Depends(get_invalidator),
) -> PageMutationResponse:
    result = await page_service.delete_page(store, page_id)
    return _mutation_response(result, background, invalidator)


@router.get("/{page_id}/path", response_model=PagePathResponse)
async def page_path(
    page_id: int,
    source: Literal["tree", "database"] = Query("database"),
    store: PageStore = Depends(get_store),
) -> PagePathResponse:
    if source == "tree":
        path = path_from_tree(await page_service.get_page_tree(store), page_id)
    else:
        path = await generate_path(store, page_id) or None
    return PagePathResponse(page_id=page_id, source=source, path=path)


@router.get("/{page_id}/content/{locale}", response_model=PageContent)
async def content(page_id: int, locale: str, store: PageStore = Depends(get_store)) -> PageContent:
    result = await page_service.get_page_content_with_fallback(store, page_id, locale)
    if result is None:
        raise HTTPException(status_code=404, detail=f"Page {page_id} has no published translation")
    return result


@router.get("/{page_id}/translations/{locale}", response_model=Translation)
async def get_translation(page_id: int, locale: str, store: PageStore = Depends(get_store)) -> Translation:
    return await page_service.get_page_content(store, page_id, locale)


@router.put("/{page_id}/translations/{locale}", response_model=Translation)
async def put_translation(
    page_id: int,
    locale: str,
    body: TranslationRequest,
    background: BackgroundTasks,
    store: PageStore = Depends(get_store),
    invalidator: PathInvalidator = Depends(get_invalidator),
) -> Translation:
    translation = await page_service.save_translation(
        store, page_id, locale, title=body.title, content=body.content, published=body.published
    )
    page = await page_service.get_page(store, page_id)
    background.add_task(invalidate_in_background, invalidator, [page.full_path])
    return translation


@router.delete("/{page_id}/translations/{locale}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_translation(
    page_id: int,
    locale: str,
    background: BackgroundTasks,
    store: PageStore = Depends(get_store),
    invalidator: PathInvalidator = Depends(get_invalidator),
) -> Response:
    page = await page_service.get_page(store, page_id)
    await page_service.delete_translation(store, page_id, locale)
    background.add_task(invalidate_in_background, invalidator, [page.full_path])
    return Response(status_code=status.HTTP_204_NO_CONTENT)
