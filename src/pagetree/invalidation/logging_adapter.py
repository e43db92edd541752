from __future__ import annotations

import logging
from collections.abc import Sequence

from pagetree.core.ports.invalidation import PathInvalidator

logger = logging.getLogger(__name__)


class LoggingPathInvalidator:
    """Record invalidated paths in the log.

    Implements the ``PathInvalidator`` protocol. Deployments behind a CDN swap
    in an adapter that purges the paths instead.
    """

    def __init__(self, prefix: str = "/") -> None:
        self._prefix = prefix

    async def invalidate(self, paths: Sequence[str]) -> None:
        for path in paths:
            logger.info("Invalidated %s%s", self._prefix, path)


async def invalidate_in_background(invalidator: PathInvalidator, paths: Sequence[str]) -> None:
    """Fire-and-forget wrapper: failures are logged, never raised."""
    if not paths:
        return
    try:
        await invalidator.invalidate(paths)
    except Exception:
        logger.exception("Error invalidating %d path(s)", len(paths))
