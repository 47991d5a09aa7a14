"""Interface shared by every document provider."""

from __future__ import annotations

from typing import List

from ..core.errors import FrameError
from ..core.models import Document, Frame


class DocumentProvider:
    """Fetches or renders pages and exposes their frames.

    Providers are async context managers: resources are acquired in
    ``__aenter__`` and always released in ``__aexit__``.
    """

    async def __aenter__(self) -> "DocumentProvider":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def start(self) -> None:
        return None

    async def close(self) -> None:
        return None

    async def load(self, url: str) -> Document:
        raise NotImplementedError

    async def frames(self, document: Document) -> List[Frame]:
        return []

    async def load_frame(self, frame: Frame) -> Document:
        raise FrameError(f"{type(self).__name__} does not follow frames")
