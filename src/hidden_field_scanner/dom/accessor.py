"""Read-only access to the style and geometry recorded for an element."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from ..core.models import BoundingBox, Element, Viewport

STYLE_DEFAULTS = {
    "display": "block",
    "visibility": "visible",
    "opacity": "1",
    "clip": "auto",
    "clip-path": "none",
    "font-size": "16px",
    "position": "static",
    "left": "auto",
    "overflow": "visible",
    "color": "",
    "background-color": "",
}

ZERO_BOX = BoundingBox(top=0.0, left=0.0, width=0.0, height=0.0)

_LEADING_NUMBER = re.compile(r"^\s*([-+]?\d+(?:\.\d+)?)")


def parse_px(value: Optional[str]) -> Optional[float]:
    """Leading numeric part of a CSS length, ``None`` when there is none."""

    if not value:
        return None
    match = _LEADING_NUMBER.match(str(value))
    if not match:
        return None
    return float(match.group(1))


def parse_float(value: Optional[str], default: float) -> float:
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return default


def normalize_value(value: object) -> str:
    if value is None:
        return ""
    return " ".join(str(value).split()).lower()


@dataclass(frozen=True)
class StyleSnapshot:
    display: str
    visibility: str
    opacity: str
    clip: str
    clip_path: str
    font_size: str
    position: str
    left: str
    overflow: str
    color: str
    background_color: str
    aria_hidden: str
    offset_width: float
    offset_height: float
    rect: BoundingBox
    viewport: Optional[Viewport]


def _style_value(element: Element, name: str) -> str:
    style = element.style if isinstance(element.style, dict) else {}
    value = normalize_value(style.get(name))
    return value or STYLE_DEFAULTS[name]


def _number(value: object) -> float:
    if isinstance(value, (int, float)):
        return float(value)
    return 0.0


def read_style(element: Element, viewport: Optional[Viewport] = None) -> StyleSnapshot:
    """Snapshot of everything the visibility heuristics look at.

    Missing or malformed values (detached nodes, partial snapshots) fall back
    to the defaults above so one odd node never aborts a scan.
    """

    attributes = element.attributes if isinstance(element.attributes, dict) else {}
    rect = element.rect if isinstance(element.rect, BoundingBox) else ZERO_BOX

    return StyleSnapshot(
        display=_style_value(element, "display"),
        visibility=_style_value(element, "visibility"),
        opacity=_style_value(element, "opacity"),
        clip=_style_value(element, "clip"),
        clip_path=_style_value(element, "clip-path"),
        font_size=_style_value(element, "font-size"),
        position=_style_value(element, "position"),
        left=_style_value(element, "left"),
        overflow=_style_value(element, "overflow"),
        color=_style_value(element, "color"),
        background_color=_style_value(element, "background-color"),
        aria_hidden=normalize_value(attributes.get("aria-hidden")),
        offset_width=_number(element.offset_width),
        offset_height=_number(element.offset_height),
        rect=rect,
        viewport=viewport,
    )
