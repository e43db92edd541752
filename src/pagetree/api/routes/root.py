from __future__ import annotations

from typing import Any

from fastapi import APIRouter

router = APIRouter()


@router.get("/")
async def root() -> dict[str, Any]:
    """Root discovery endpoint."""
    return {
        "meta": {
            "title": "Pagetree API",
            "description": "Hierarchical CMS pages with materialized URL paths.",
            "version": "0.1.0",
        },
        "links": {
            "self": "/",
            "pages": "/pages",
            "home": "/pages/home",
            "tree": "/pages/tree",
            "order": "/pages/order",
            "rebuild": "/pages/paths/rebuild",
            "menu": "/menu/{locale}",
            "openapi": "/openapi.json",
            "docs": "/docs",
        },
    }
