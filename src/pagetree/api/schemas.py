from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from pagetree.models import Page, PageOrderEntry

# --- Request bodies ---


class PageCreateRequest(BaseModel):
    title: str = Field(min_length=1)
    slug: str = Field(min_length=1, pattern=r"^[^/\s]+$")
    parent_id: int | None = None
    is_draft: bool = True
    show_on_menu: bool = False


class PageUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    slug: str | None = Field(default=None, min_length=1, pattern=r"^[^/\s]+$")
    is_draft: bool | None = None
    show_on_menu: bool | None = None


class PageMoveRequest(BaseModel):
    parent_id: int | None = None
    sort_order: int | None = None


class PageOrderRequest(BaseModel):
    pages: list[PageOrderEntry]


class TranslationRequest(BaseModel):
    title: str | None = None
    content: dict[str, Any] | None = None
    published: bool | None = None


# --- Responses ---


class PathChangeRow(BaseModel):
    page_id: int
    old_path: str
    new_path: str


class PageMutationResponse(BaseModel):
    page: Page | None
    changes: list[PathChangeRow]
    affected_paths: list[str]


class PathsResponse(BaseModel):
    changes: list[PathChangeRow]
    affected_paths: list[str]


class PagePathResponse(BaseModel):
    page_id: int
    source: Literal["tree", "database"]
    path: str | None


class HealthResponse(BaseModel):
    status: str = "ok"


class ReadinessResponse(BaseModel):
    status: str = "ok"
    database: str = "up"
    schema_ready: bool = True
