from collections.abc import Sequence
from typing import Protocol


class PathInvalidator(Protocol):
    async def invalidate(self, paths: Sequence[str]) -> None: ...
