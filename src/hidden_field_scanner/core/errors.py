"""Error taxonomy for scan requests."""

from __future__ import annotations

from typing import List, Optional


class ScanError(RuntimeError):
    """Base class for failures raised by the scanner."""


class InputError(ScanError, ValueError):
    """Raised when a scan request is rejected before any traversal."""

    def __init__(self, message: str, errors: Optional[List[dict]] = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [{"message": message}])


class ProviderError(ScanError):
    """Raised when the page itself cannot be fetched or rendered."""


class FrameError(ScanError):
    """Raised when a single frame cannot be read."""
