"""Visibility heuristics deciding whether an element is effectively hidden."""

from __future__ import annotations

from typing import Callable, Optional, Tuple

from ..core.models import (
    BoundingBox,
    Element,
    HiddenVerdict,
    ReasonCode,
    StrictnessTier,
    Viewport,
)
from .accessor import StyleSnapshot, parse_float, parse_px, read_style

DEFAULT_CLIP_VALUES = frozenset({"", "auto", "rect(auto, auto, auto, auto)", "rect(auto auto auto auto)"})
OFFSCREEN_LEFT_LIMIT = -9999
TINY_BOX_LIMIT = 10

Check = Callable[[StyleSnapshot], bool]


def outside_viewport(rect: BoundingBox, viewport: Optional[Viewport]) -> bool:
    """``True`` when the box lies entirely above, left of, below or right of the viewport."""

    if rect.bottom <= 0 or rect.right <= 0:
        return True
    if viewport is None:
        return False
    return rect.top >= viewport.height or rect.left >= viewport.width


def _display_none(snapshot: StyleSnapshot) -> bool:
    return snapshot.display == "none"


def _visibility_hidden(snapshot: StyleSnapshot) -> bool:
    return snapshot.visibility == "hidden"


def _zero_opacity(snapshot: StyleSnapshot) -> bool:
    return parse_float(snapshot.opacity, 1.0) == 0


def _aria_hidden(snapshot: StyleSnapshot) -> bool:
    return snapshot.aria_hidden == "true"


def _zero_size(snapshot: StyleSnapshot) -> bool:
    return snapshot.offset_width == 0 or snapshot.offset_height == 0


def _clipped(snapshot: StyleSnapshot) -> bool:
    return snapshot.clip not in DEFAULT_CLIP_VALUES


def _clip_path(snapshot: StyleSnapshot) -> bool:
    return snapshot.clip_path != "none"


def _zero_font_size(snapshot: StyleSnapshot) -> bool:
    return parse_px(snapshot.font_size) == 0


def _offscreen_absolute(snapshot: StyleSnapshot) -> bool:
    if snapshot.position != "absolute":
        return False
    left = parse_px(snapshot.left)
    return left is not None and left <= OFFSCREEN_LEFT_LIMIT


def _offscreen_fixed(snapshot: StyleSnapshot) -> bool:
    return snapshot.position == "fixed" and outside_viewport(snapshot.rect, snapshot.viewport)


def _tiny_box(snapshot: StyleSnapshot) -> bool:
    return (
        snapshot.rect.width <= TINY_BOX_LIMIT
        or snapshot.rect.height <= TINY_BOX_LIMIT
        or snapshot.offset_width <= TINY_BOX_LIMIT
        or snapshot.offset_height <= TINY_BOX_LIMIT
    )


def _overflow_offscreen(snapshot: StyleSnapshot) -> bool:
    return snapshot.overflow == "hidden" and outside_viewport(snapshot.rect, snapshot.viewport)


def _color_match(snapshot: StyleSnapshot) -> bool:
    return bool(snapshot.color) and snapshot.color == snapshot.background_color


STATIC_CHECKS: Tuple[Tuple[ReasonCode, Check], ...] = (
    (ReasonCode.DISPLAY_NONE, _display_none),
    (ReasonCode.VISIBILITY_HIDDEN, _visibility_hidden),
    (ReasonCode.ZERO_OPACITY, _zero_opacity),
    (ReasonCode.ARIA_HIDDEN, _aria_hidden),
)

RENDERED_CHECKS: Tuple[Tuple[ReasonCode, Check], ...] = STATIC_CHECKS + (
    (ReasonCode.ZERO_SIZE, _zero_size),
    (ReasonCode.CLIP, _clipped),
    (ReasonCode.CLIP_PATH, _clip_path),
    (ReasonCode.ZERO_FONT_SIZE, _zero_font_size),
    (ReasonCode.OFFSCREEN_ABSOLUTE, _offscreen_absolute),
    (ReasonCode.OFFSCREEN_FIXED, _offscreen_fixed),
    (ReasonCode.TINY_BOX, _tiny_box),
    (ReasonCode.OVERFLOW_OFFSCREEN, _overflow_offscreen),
    (ReasonCode.COLOR_MATCH, _color_match),
)


def checks_for(tier: StrictnessTier) -> Tuple[Tuple[ReasonCode, Check], ...]:
    if tier is StrictnessTier.RENDERED:
        return RENDERED_CHECKS
    return STATIC_CHECKS


def classify(
    element: Element,
    tier: StrictnessTier,
    viewport: Optional[Viewport] = None,
) -> Optional[HiddenVerdict]:
    """Returns the first matching hidden verdict for ``element`` or ``None``.

    Checks run in a fixed priority order, so every element maps to exactly one
    primary reason. ``type="hidden"`` is deliberately not a signal here.
    """

    snapshot = read_style(element, viewport)
    for reason, check in checks_for(tier):
        if check(snapshot):
            return HiddenVerdict(reason=reason)
    return None


def has_hidden_ancestor(
    element: Element,
    tier: StrictnessTier,
    viewport: Optional[Viewport] = None,
) -> Optional[HiddenVerdict]:
    """Walks up the parent chain and returns the first ancestor verdict.

    A parent chain that revisits a node ends the walk with ``None``.
    """

    seen = {id(element)}
    parent = element.parent
    while parent is not None:
        if id(parent) in seen:
            return None
        seen.add(id(parent))

        verdict = classify(parent, tier, viewport)
        if verdict is not None:
            return verdict.as_inherited()
        parent = parent.parent
    return None
