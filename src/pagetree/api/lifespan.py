from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from pagetree.api.dependencies import shutdown_store
from pagetree.core.locales import get_supported_locales

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("%s starting; locales: %s", app.title, ", ".join(get_supported_locales()))
    try:
        yield
    finally:
        await shutdown_store()
        logger.info("%s stopped; page store disposed", app.title)
