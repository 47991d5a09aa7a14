"""Enumerates input-like elements of a document and reports concealed ones."""

from __future__ import annotations

from typing import List, Optional

from ..core.models import (
    MAX_SELECTOR_LENGTH,
    Document,
    Element,
    FieldFinding,
    HiddenVerdict,
    ReasonCode,
    StrictnessTier,
)
from .visibility import classify, has_hidden_ancestor


def truncate_selector(value: str, limit: int = MAX_SELECTOR_LENGTH) -> str:
    return value[:limit]


def build_selector(element: Element) -> str:
    """Best-effort locator for a field.

    Form-bound fields are addressed through their form's action; orphans fall
    back to a snippet of their own markup.
    """

    if element.form is None:
        markup = element.markup or f"<{element.tag.lower()}>"
        return truncate_selector(markup)

    action = element.form_action or element.form.get_attribute("action") or ""
    selector = f'form[action="{action}"] {element.tag.lower()}'
    name = element.get_attribute("name")
    if name:
        selector += f'[name="{name}"]'
    return truncate_selector(selector)


def evaluate_field(
    element: Element,
    tier: StrictnessTier,
    document: Document,
) -> Optional[HiddenVerdict]:
    verdict = classify(element, tier, document.viewport)
    if verdict is not None:
        return verdict
    return has_hidden_ancestor(element, tier, document.viewport)


def enumerate_fields(
    document: Document,
    tier: StrictnessTier,
    location: str,
    *,
    include_explicit_hidden: bool = True,
) -> List[FieldFinding]:
    """Returns findings for every concealed input-like element of ``document``.

    ``include_explicit_hidden`` decides whether ``type="hidden"`` inputs are
    reported at all. When it is ``False`` only fields concealed by style or
    layout are considered suspicious.
    """

    findings: List[FieldFinding] = []
    for element in document.fields:
        if not element.is_input_like:
            continue

        field_type = element.declared_type
        explicit_hidden = element.tag.lower() == "input" and field_type == "hidden"
        if explicit_hidden and not include_explicit_hidden:
            continue

        if explicit_hidden:
            # Browsers give these display: none, which is not evidence of concealment.
            verdict: Optional[HiddenVerdict] = HiddenVerdict(reason=ReasonCode.EXPLICIT_HIDDEN_TYPE)
        else:
            verdict = evaluate_field(element, tier, document)
        if verdict is None:
            continue

        findings.append(
            FieldFinding(
                name=element.get_attribute("name"),
                type=field_type,
                reason=verdict.reason,
                inherited=verdict.inherited,
                orphan=element.is_orphan,
                location=location,
                selector=build_selector(element),
                bounding_box=element.rect if tier is StrictnessTier.RENDERED else None,
            )
        )
    return findings
