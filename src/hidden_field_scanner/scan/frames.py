"""Runs field enumeration over the main document and every discoverable frame."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List

from ..core.models import (
    MAIN_PAGE_LOCATION,
    Document,
    FieldFinding,
    Frame,
    StrictnessTier,
    frame_location,
)
from ..dom.fields import enumerate_fields
from ..providers.base import DocumentProvider

logger = logging.getLogger(__name__)


@dataclass
class TraversalResult:
    findings: List[FieldFinding] = field(default_factory=list)
    frames_scanned: int = 0
    frames_failed: int = 0


@dataclass
class FrameOutcome:
    findings: List[FieldFinding]
    failed: bool = False


@dataclass
class FrameTraversal:
    """Collects findings from the main document and then from each frame.

    Frames are inspected concurrently, but their results are merged only after
    all of them finished and always in discovery order. A failing frame
    contributes nothing and never affects its siblings.
    """

    provider: DocumentProvider
    tier: StrictnessTier
    include_explicit_hidden: bool = False
    frame_timeout: float = 10.0
    follow_frames: bool = True

    async def run(self, document: Document) -> TraversalResult:
        result = TraversalResult(
            findings=self._enumerate(document, MAIN_PAGE_LOCATION),
        )
        if not self.follow_frames:
            return result

        try:
            frames = await self.provider.frames(document)
        except Exception as exc:
            logger.warning("Could not list frames of %s: %s", document.url, exc)
            return result

        outcomes = await asyncio.gather(*(self._scan_frame(frame) for frame in frames))
        for outcome in outcomes:
            if outcome.failed:
                result.frames_failed += 1
            else:
                result.frames_scanned += 1
            result.findings.extend(outcome.findings)
        return result

    async def _scan_frame(self, frame: Frame) -> FrameOutcome:
        location = frame_location(frame.url)
        try:
            document = await asyncio.wait_for(
                self.provider.load_frame(frame), timeout=self.frame_timeout
            )
            findings = self._enumerate(document, location)
        except Exception as exc:
            logger.warning("Skipping %s: %s", location, str(exc) or type(exc).__name__)
            return FrameOutcome(findings=[], failed=True)
        return FrameOutcome(findings=findings)

    def _enumerate(self, document: Document, location: str) -> List[FieldFinding]:
        return enumerate_fields(
            document,
            self.tier,
            location,
            include_explicit_hidden=self.include_explicit_hidden,
        )
