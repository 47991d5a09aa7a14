"""Static-tier provider: fetched markup parsed with BeautifulSoup."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup, Tag

from ..core.config import ScannerConfig
from ..core.errors import ProviderError
from ..core.models import (
    INPUT_LIKE_TAGS,
    MAX_SELECTOR_LENGTH,
    Document,
    Element,
    StrictnessTier,
)
from .base import DocumentProvider

logger = logging.getLogger(__name__)

_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_RULE = re.compile(r"([^{}]+)\{([^{}]*)\}")
_IMPORTANT = re.compile(r"\s*!important\s*$", re.IGNORECASE)


def parse_declarations(text: Optional[str]) -> Dict[str, str]:
    """Parses ``prop: value; ...`` into a dict with lowercase property names."""

    declarations: Dict[str, str] = {}
    if not text:
        return declarations
    for chunk in text.split(";"):
        if ":" not in chunk:
            continue
        prop, value = chunk.split(":", 1)
        prop = prop.strip().lower()
        value = _IMPORTANT.sub("", value.strip())
        if prop and value:
            declarations[prop] = value
    return declarations


def iter_style_rules(css: str) -> Iterator[Tuple[str, Dict[str, str]]]:
    """Yields ``(selector, declarations)`` pairs in source order."""

    for match in _RULE.finditer(_COMMENT.sub("", css)):
        selector_group = match.group(1).strip()
        if not selector_group or selector_group.startswith("@"):
            continue
        declarations = parse_declarations(match.group(2))
        if not declarations:
            continue
        for selector in selector_group.split(","):
            selector = selector.strip()
            if selector:
                yield selector, declarations


def _attribute_map(tag: Tag) -> Dict[str, str]:
    attributes: Dict[str, str] = {}
    for name, value in tag.attrs.items():
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        attributes[name.lower()] = "" if value is None else str(value)
    return attributes


@dataclass
class StaticStyleResolver:
    """Resolves the declared style of tags from ``<style>`` blocks and inline styles.

    Rules are applied in source order; selector specificity is not modelled.
    Inline ``style`` attributes always win.
    """

    soup: BeautifulSoup

    def __post_init__(self) -> None:
        self._sheet: Dict[int, Dict[str, str]] = {}
        for style_tag in self.soup.find_all("style"):
            for selector, declarations in iter_style_rules(style_tag.get_text() or ""):
                try:
                    matches = self.soup.select(selector)
                except Exception:
                    logger.debug("Skipping unsupported selector %r", selector)
                    continue
                for matched in matches:
                    self._sheet.setdefault(id(matched), {}).update(declarations)

    def resolve(self, tag: Tag) -> Dict[str, str]:
        style: Dict[str, str] = {}
        if tag.has_attr("hidden"):
            style["display"] = "none"
        style.update(self._sheet.get(id(tag), {}))
        style.update(parse_declarations(tag.get("style")))
        return style


class StaticDocumentBuilder:
    """Turns parsed markup into the element tree the heuristics work on."""

    def __init__(self, html: str, url: str) -> None:
        self.url = url
        self.soup = BeautifulSoup(html or "", "html.parser")
        self._resolver = StaticStyleResolver(self.soup)
        self._elements: Dict[int, Element] = {}

    def build(self) -> Document:
        fields: List[Element] = []
        for tag in self.soup.find_all(sorted(INPUT_LIKE_TAGS)):
            fields.append(self._element_for(tag))
        return Document(url=self.url, fields=fields, tier=StrictnessTier.STATIC)

    def _element_for(self, tag: Tag) -> Element:
        cached = self._elements.get(id(tag))
        if cached is not None:
            return cached

        # Walk up until an already built ancestor, then link top-down.
        # Iterative so deeply nested markup cannot exhaust the stack.
        chain: List[Tag] = [tag]
        for ancestor in tag.parents:
            if isinstance(ancestor, BeautifulSoup) or id(ancestor) in self._elements:
                break
            chain.append(ancestor)

        top = chain[-1].parent
        parent_element = None
        if isinstance(top, Tag) and not isinstance(top, BeautifulSoup):
            parent_element = self._elements.get(id(top))

        for current in reversed(chain):
            element = self._new_element(current)
            element.parent = parent_element
            self._elements[id(current)] = element
            if element.is_input_like:
                self._link_form(current, element)
            parent_element = element

        return self._elements[id(tag)]

    def _link_form(self, tag: Tag, element: Element) -> None:
        form_tag = tag.find_parent("form")
        if form_tag is None:
            return
        # Ancestors are built before their descendants.
        element.form = self._elements.get(id(form_tag))
        element.form_action = urljoin(self.url, form_tag.get("action") or "")

    def _new_element(self, tag: Tag) -> Element:
        element = Element(
            tag=(tag.name or "").lower(),
            attributes=_attribute_map(tag),
            style=self._resolver.resolve(tag),
        )
        if element.is_input_like:
            element.markup = str(tag)[:MAX_SELECTOR_LENGTH]
        return element


def build_static_document(html: str, url: str) -> Document:
    return StaticDocumentBuilder(html, url).build()


class StaticDocumentProvider(DocumentProvider):
    """Fetches the page over HTTP without executing scripts or following frames."""

    def __init__(self, config: ScannerConfig, session: Optional[requests.Session] = None) -> None:
        self.config = config
        self._session = session
        self._owns_session = session is None

    async def start(self) -> None:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers["User-Agent"] = self.config.user_agent

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None

    def _fetch_markup(self, url: str) -> str:
        if self._session is None:
            raise ProviderError("Provider used before start()")
        try:
            response = self._session.get(url, timeout=self.config.http_timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise ProviderError(f"Could not fetch {url}: {exc}") from exc
        return response.text

    async def load(self, url: str) -> Document:
        html = await asyncio.to_thread(self._fetch_markup, url)
        return build_static_document(html, url)
