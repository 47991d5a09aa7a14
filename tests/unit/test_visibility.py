from tests.helpers.fakes import VIEWPORT, make_element
from tests.helpers.scanner_imports import (
    BoundingBox,
    ReasonCode,
    StrictnessTier,
    classify,
    has_hidden_ancestor,
)

RENDERED = StrictnessTier.RENDERED
STATIC = StrictnessTier.STATIC


def test_display_none_wins_over_every_other_signal():
    element = make_element(
        style={"display": "none", "visibility": "hidden", "opacity": "0", "font-size": "0px"},
        attributes={"aria-hidden": "true"},
        rect=BoundingBox(top=-500, left=-500, width=0, height=0),
    )

    for tier in (STATIC, RENDERED):
        verdict = classify(element, tier, VIEWPORT)
        assert verdict is not None
        assert verdict.reason is ReasonCode.DISPLAY_NONE
        assert verdict.inherited is False


def test_visible_element_has_no_verdict():
    assert classify(make_element(), RENDERED, VIEWPORT) is None
    assert classify(make_element(rendered=False), STATIC) is None


def test_static_tier_ignores_geometry():
    element = make_element(rendered=False)

    assert element.offset_width == 0
    assert classify(element, STATIC) is None
    assert classify(element, RENDERED).reason is ReasonCode.ZERO_SIZE


def test_static_signals():
    cases = [
        ({"visibility": "hidden"}, {}, ReasonCode.VISIBILITY_HIDDEN),
        ({"opacity": "0.0"}, {}, ReasonCode.ZERO_OPACITY),
        ({}, {"aria-hidden": "true"}, ReasonCode.ARIA_HIDDEN),
    ]
    for style, attributes, expected in cases:
        element = make_element(style=style, attributes=attributes, rendered=False)
        assert classify(element, STATIC).reason is expected


def test_rendered_signals():
    cases = [
        ({"clip": "rect(0px, 0px, 0px, 0px)"}, None, ReasonCode.CLIP),
        ({"clip-path": "inset(50%)"}, None, ReasonCode.CLIP_PATH),
        ({"font-size": "0px"}, None, ReasonCode.ZERO_FONT_SIZE),
        ({"position": "absolute", "left": "-10000px"}, None, ReasonCode.OFFSCREEN_ABSOLUTE),
        (
            {"position": "fixed"},
            BoundingBox(top=2000, left=10, width=200, height=30),
            ReasonCode.OFFSCREEN_FIXED,
        ),
        ({}, BoundingBox(top=10, left=10, width=5, height=5), ReasonCode.TINY_BOX),
        (
            {"overflow": "hidden"},
            BoundingBox(top=-300, left=10, width=200, height=30),
            ReasonCode.OVERFLOW_OFFSCREEN,
        ),
        (
            {"color": "rgb(255, 255, 255)", "background-color": "rgb(255, 255, 255)"},
            None,
            ReasonCode.COLOR_MATCH,
        ),
    ]
    for style, rect, expected in cases:
        element = make_element(style=style, rect=rect)
        verdict = classify(element, RENDERED, VIEWPORT)
        assert verdict is not None, expected
        assert verdict.reason is expected


def test_rendered_signals_are_not_used_by_static_tier():
    element = make_element(style={"clip-path": "inset(50%)", "font-size": "0px"}, rendered=False)

    assert classify(element, STATIC) is None


def test_default_clip_and_positioning_are_visible():
    element = make_element(
        style={
            "clip": "rect(auto, auto, auto, auto)",
            "clip-path": "none",
            "position": "absolute",
            "left": "-20px",
        }
    )

    assert classify(element, RENDERED, VIEWPORT) is None


def test_fixed_element_inside_viewport_is_visible():
    element = make_element(style={"position": "fixed"})

    assert classify(element, RENDERED, VIEWPORT) is None


def test_explicit_hidden_type_is_not_a_style_signal():
    element = make_element(attributes={"type": "hidden", "name": "csrf"})

    assert classify(element, RENDERED, VIEWPORT) is None


def test_classify_is_idempotent():
    element = make_element(style={"visibility": "hidden"})

    first = classify(element, RENDERED, VIEWPORT)
    second = classify(element, RENDERED, VIEWPORT)

    assert first == second


def test_malformed_style_falls_back_to_defaults():
    element = make_element(style={"opacity": "not-a-number", "font-size": "large"})
    element.style["display"] = None  # type: ignore[assignment]

    assert classify(element, RENDERED, VIEWPORT) is None


def test_hidden_parent_is_inherited():
    parent = make_element("div", style={"display": "none"})
    child = make_element(parent=parent)

    assert classify(child, RENDERED, VIEWPORT) is None
    verdict = has_hidden_ancestor(child, RENDERED, VIEWPORT)

    assert verdict is not None
    assert verdict.reason is ReasonCode.DISPLAY_NONE
    assert verdict.inherited is True


def test_ancestor_walk_reaches_grandparents():
    grandparent = make_element("section", style={"opacity": "0"})
    parent = make_element("div", parent=grandparent)
    child = make_element(parent=parent)

    verdict = has_hidden_ancestor(child, RENDERED, VIEWPORT)

    assert verdict.reason is ReasonCode.ZERO_OPACITY
    assert verdict.inherited is True


def test_nearest_hidden_ancestor_is_reported():
    outer = make_element("div", style={"display": "none"})
    inner = make_element("div", style={"visibility": "hidden"}, parent=outer)
    child = make_element(parent=inner)

    assert has_hidden_ancestor(child, STATIC).reason is ReasonCode.VISIBILITY_HIDDEN


def test_ancestor_walk_stops_on_cycles():
    first = make_element("div")
    second = make_element("div", parent=first)
    first.parent = second
    child = make_element(parent=first)

    assert has_hidden_ancestor(child, RENDERED, VIEWPORT) is None


def test_root_without_parent_has_no_ancestor_verdict():
    assert has_hidden_ancestor(make_element(), RENDERED, VIEWPORT) is None
