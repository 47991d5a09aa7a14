"""Document providers for the static and rendered tiers."""

from __future__ import annotations

from ..core.config import ScannerConfig
from ..core.models import ScanLevel, StrictnessTier
from .base import DocumentProvider


def create_provider(level: ScanLevel, config: ScannerConfig) -> DocumentProvider:
    """Returns the provider matching the strictness tier of ``level``."""

    if level.tier is StrictnessTier.STATIC:
        from .static import StaticDocumentProvider

        return StaticDocumentProvider(config)

    from .rendered import RenderedDocumentProvider

    return RenderedDocumentProvider(config, level)


__all__ = ["DocumentProvider", "create_provider"]
