"""Configuration loading utilities."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)
TRUTHY = {"1", "true", "yes", "on"}


@dataclass(slots=True)
class ScannerConfig:
    """Holds runtime options shared by every scan request."""

    headless: bool = True
    page_timeout_ms: int = 30000
    frame_timeout: float = 10.0
    settle_ms: int = 3000
    http_timeout: float = 15.0
    user_agent: str = DEFAULT_USER_AGENT
    include_explicit_hidden: bool = False
    host: str = "127.0.0.1"
    port: int = 9500


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in TRUTHY


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


def load_configuration(
    *,
    headless: Optional[bool] = None,
    include_explicit_hidden: Optional[bool] = None,
    port: Optional[int] = None,
) -> ScannerConfig:
    """Builds a ``ScannerConfig`` from environment variables and CLI overrides."""

    load_dotenv()  # Loads .env values if present

    config = ScannerConfig(
        headless=_env_bool("HEADLESS", True),
        page_timeout_ms=_env_int("PAGE_TIMEOUT_MS", 30000),
        frame_timeout=_env_float("FRAME_TIMEOUT_S", 10.0),
        settle_ms=_env_int("SETTLE_MS", 3000),
        http_timeout=_env_float("HTTP_TIMEOUT_S", 15.0),
        user_agent=os.getenv("USER_AGENT") or DEFAULT_USER_AGENT,
        include_explicit_hidden=_env_bool("HFS_INCLUDE_EXPLICIT_HIDDEN", False),
        host=os.getenv("HOST") or "127.0.0.1",
        port=_env_int("PORT", 9500),
    )

    if headless is not None:
        config.headless = headless
    if include_explicit_hidden is not None:
        config.include_explicit_hidden = include_explicit_hidden
    if port is not None:
        config.port = port
    return config
