from __future__ import annotations

from fastapi import FastAPI

from pagetree.api.errors import register_error_handlers
from pagetree.api.lifespan import lifespan
from pagetree.api.routes.health import router as health_router
from pagetree.api.routes.menu import router as menu_router
from pagetree.api.routes.pages import router as pages_router
from pagetree.api.routes.root import router as root_router


def create_app() -> FastAPI:
    app = FastAPI(
        title="Pagetree API",
        description="Hierarchical CMS pages with materialized URL paths.",
        version="0.1.0",
        lifespan=lifespan,
    )

    register_error_handlers(app)

    app.include_router(root_router, include_in_schema=False)
    app.include_router(health_router, include_in_schema=False)
    app.include_router(pages_router)
    app.include_router(menu_router)

    return app
