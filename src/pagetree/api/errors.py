"""Map page tree domain errors onto HTTP responses."""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from pagetree.core.errors import (
    InvalidParentError,
    InvalidSlugError,
    PageHasChildrenError,
    PageNotFoundError,
    PageTreeError,
    SlugConflictError,
    TranslationNotFoundError,
)

_STATUS_BY_ERROR: dict[type[PageTreeError], int] = {
    PageNotFoundError: status.HTTP_404_NOT_FOUND,
    TranslationNotFoundError: status.HTTP_404_NOT_FOUND,
    SlugConflictError: status.HTTP_409_CONFLICT,
    PageHasChildrenError: status.HTTP_409_CONFLICT,
    InvalidParentError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidSlugError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(PageTreeError)
    async def handle_page_tree_error(_request: Request, exc: PageTreeError) -> JSONResponse:
        status_code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
        return JSONResponse(
            status_code=status_code,
            content={"error": type(exc).__name__, "detail": str(exc)},
        )
