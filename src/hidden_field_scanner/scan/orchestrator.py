"""Entry point for executing a hidden field scan."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Tuple, Union
from urllib.parse import urlparse

from ..core.config import ScannerConfig, load_configuration
from ..core.errors import InputError, ProviderError
from ..core.models import ScanLevel, ScanReport, StrictnessTier
from ..providers import create_provider
from ..providers.base import DocumentProvider
from .frames import FrameTraversal
from .risk import assess_risk, failed_assessment

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[ScanLevel, ScannerConfig], DocumentProvider]

ALLOWED_SCHEMES = {"http", "https"}


def validate_request(url: object, level: object) -> Tuple[str, ScanLevel]:
    """Checks a scan request before any page is touched.

    Raises :class:`InputError` listing every problem found.
    """

    errors: List[dict] = []

    clean_url = url.strip() if isinstance(url, str) else ""
    if not clean_url:
        errors.append({"field": "url", "message": "URL is required"})
    else:
        parsed = urlparse(clean_url)
        if parsed.scheme.lower() not in ALLOWED_SCHEMES or not parsed.netloc:
            errors.append(
                {"field": "url", "message": "Invalid URL format. URL must start with http or https."}
            )

    scan_level: Optional[ScanLevel] = None
    try:
        scan_level = ScanLevel(level.lower() if isinstance(level, str) else level)
    except ValueError:
        allowed = ", ".join(item.value for item in ScanLevel)
        errors.append({"field": "level", "message": f"Invalid scan level. Expected one of: {allowed}"})

    if errors or scan_level is None:
        raise InputError("Invalid scan request", errors)
    return clean_url, scan_level


def failed_report(url: str, level: ScanLevel, reason: str) -> ScanReport:
    return ScanReport(
        url=url,
        scan_level=level,
        findings=[],
        assessment=failed_assessment(),
        error=reason,
    )


async def scan_page(
    url: str,
    level: Union[str, ScanLevel] = ScanLevel.SIMPLE,
    *,
    config: Optional[ScannerConfig] = None,
    provider_factory: ProviderFactory = create_provider,
) -> ScanReport:
    """Scans ``url`` at the requested level and returns the report.

    ``simple`` reads the static markup of the top document only. ``medium``
    and ``advanced`` render the page and also inspect every frame. A page
    that cannot be fetched or rendered yields an empty, low-risk report.
    """

    clean_url, scan_level = validate_request(url, level)
    config = config or load_configuration()
    tier = scan_level.tier

    try:
        provider = provider_factory(scan_level, config)
        async with provider:
            document = await provider.load(clean_url)
            traversal = FrameTraversal(
                provider=provider,
                tier=tier,
                include_explicit_hidden=config.include_explicit_hidden,
                frame_timeout=config.frame_timeout,
                follow_frames=tier is StrictnessTier.RENDERED,
            )
            result = await traversal.run(document)
    except ProviderError as exc:
        logger.error("Scan of %s failed: %s", clean_url, exc)
        return failed_report(clean_url, scan_level, str(exc))
    except Exception as exc:
        logger.exception("Unexpected failure scanning %s", clean_url)
        return failed_report(clean_url, scan_level, str(exc) or type(exc).__name__)

    return ScanReport(
        url=clean_url,
        scan_level=scan_level,
        findings=result.findings,
        assessment=assess_risk(len(result.findings)),
        frames_scanned=result.frames_scanned,
        frames_failed=result.frames_failed,
    )


def run_scan(
    url: str,
    level: Union[str, ScanLevel] = ScanLevel.SIMPLE,
    *,
    config: Optional[ScannerConfig] = None,
    provider_factory: ProviderFactory = create_provider,
) -> ScanReport:
    """Synchronous wrapper around :func:`scan_page`."""

    return asyncio.run(
        scan_page(url, level, config=config, provider_factory=provider_factory)
    )
