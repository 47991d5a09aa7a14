"""Rendered-tier provider backed by a headless Chromium through Playwright."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..core.config import ScannerConfig
from ..core.errors import FrameError, ProviderError
from ..core.models import (
    BoundingBox,
    Document,
    Element,
    Frame,
    ScanLevel,
    StrictnessTier,
    Viewport,
)
from .base import DocumentProvider

logger = logging.getLogger(__name__)

# Runs inside each frame. Captures input-like elements plus their ancestor
# chains so every decision can be taken in Python.
SNAPSHOT_SCRIPT = """
() => {
  const PROPS = [
    "display", "visibility", "opacity", "clip", "clip-path", "font-size",
    "position", "left", "overflow", "color", "background-color",
  ];
  const nodes = [];
  const ids = new Map();

  const visit = (el) => {
    if (ids.has(el)) return ids.get(el);
    const id = nodes.length;
    ids.set(el, id);
    const entry = {
      id,
      parent: null,
      tag: (el.tagName || "").toLowerCase(),
      attributes: {},
      style: {},
      offsetWidth: typeof el.offsetWidth === "number" ? el.offsetWidth : null,
      offsetHeight: typeof el.offsetHeight === "number" ? el.offsetHeight : null,
      rect: null,
      markup: "",
    };
    nodes.push(entry);
    for (const attr of Array.from(el.attributes || [])) {
      entry.attributes[attr.name] = attr.value;
    }
    try {
      const style = window.getComputedStyle(el);
      for (const prop of PROPS) entry.style[prop] = style.getPropertyValue(prop);
    } catch (e) {}
    try {
      const rect = el.getBoundingClientRect();
      entry.rect = { top: rect.top, left: rect.left, width: rect.width, height: rect.height };
    } catch (e) {}
    entry.markup = (el.outerHTML || "").slice(0, 100);
    if (el.parentElement) entry.parent = visit(el.parentElement);
    return id;
  };

  const fields = Array.from(document.querySelectorAll("input, textarea, select")).map((el) => {
    const id = visit(el);
    const form = el.closest("form");
    let formAction = null;
    if (form) {
      try {
        formAction = new URL(form.getAttribute("action") || "", document.baseURI).href;
      } catch (e) {
        formAction = form.getAttribute("action") || "";
      }
    }
    return { id, form: form ? visit(form) : null, formAction };
  });

  return {
    viewport: { width: window.innerWidth, height: window.innerHeight },
    nodes,
    fields,
  };
}
"""

WAIT_CONDITIONS = {
    ScanLevel.MEDIUM: "domcontentloaded",
    ScanLevel.ADVANCED: "networkidle",
}


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def _bounding_box(raw: Any) -> Optional[BoundingBox]:
    if not isinstance(raw, dict):
        return None
    values = [_as_float(raw.get(key)) for key in ("top", "left", "width", "height")]
    if any(value is None for value in values):
        return None
    top, left, width, height = values
    return BoundingBox(top=top, left=left, width=width, height=height)


def _string_map(raw: Any) -> Dict[str, str]:
    if not isinstance(raw, dict):
        return {}
    return {str(key).lower(): "" if value is None else str(value) for key, value in raw.items()}


def _viewport(raw: Any) -> Optional[Viewport]:
    if not isinstance(raw, dict):
        return None
    width = _as_float(raw.get("width"))
    height = _as_float(raw.get("height"))
    if width is None or height is None:
        return None
    return Viewport(width=width, height=height)


def document_from_snapshot(snapshot: Any, url: str) -> Document:
    """Builds a :class:`Document` from the payload returned by ``SNAPSHOT_SCRIPT``."""

    if not isinstance(snapshot, dict):
        return Document(url=url, tier=StrictnessTier.RENDERED)

    raw_nodes = [node for node in snapshot.get("nodes") or [] if isinstance(node, dict)]
    elements: Dict[int, Element] = {}
    for node in raw_nodes:
        rect = _bounding_box(node.get("rect"))
        offset_width = _as_float(node.get("offsetWidth"))
        offset_height = _as_float(node.get("offsetHeight"))
        # Non-HTML nodes (e.g. SVG) have no offset box; their rect stands in.
        if offset_width is None:
            offset_width = rect.width if rect else 0.0
        if offset_height is None:
            offset_height = rect.height if rect else 0.0
        elements[node.get("id")] = Element(
            tag=str(node.get("tag") or "").lower(),
            attributes=_string_map(node.get("attributes")),
            style=_string_map(node.get("style")),
            offset_width=offset_width,
            offset_height=offset_height,
            rect=rect,
            markup=str(node.get("markup") or ""),
        )

    for node in raw_nodes:
        parent_id = node.get("parent")
        if parent_id is not None and parent_id in elements:
            elements[node.get("id")].parent = elements[parent_id]

    fields: List[Element] = []
    for entry in snapshot.get("fields") or []:
        if not isinstance(entry, dict):
            continue
        element = elements.get(entry.get("id"))
        if element is None:
            continue
        form = elements.get(entry.get("form")) if entry.get("form") is not None else None
        if form is not None:
            element.form = form
            element.form_action = entry.get("formAction") or ""
        fields.append(element)

    return Document(
        url=url,
        fields=fields,
        viewport=_viewport(snapshot.get("viewport")),
        tier=StrictnessTier.RENDERED,
    )


class RenderedDocumentProvider(DocumentProvider):
    """Loads the page in Chromium, settles it and snapshots every frame."""

    def __init__(self, config: ScannerConfig, level: ScanLevel = ScanLevel.ADVANCED) -> None:
        self.config = config
        self.level = level
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def start(self) -> None:
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=self.config.headless)
            self._context = await self._browser.new_context(user_agent=self.config.user_agent)
            self._page = await self._context.new_page()
        except PlaywrightError as exc:
            await self.close()
            raise ProviderError(f"Could not start the browser: {exc}") from exc
        except Exception:
            await self.close()
            raise

    async def close(self) -> None:
        try:
            if self._browser is not None:
                await self._browser.close()
        except PlaywrightError:
            logger.debug("Browser close failed", exc_info=True)
        finally:
            self._browser = None
            self._context = None
            self._page = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None

    async def load(self, url: str) -> Document:
        if self._page is None:
            raise ProviderError("Provider used before start()")

        wait_until = WAIT_CONDITIONS.get(self.level, "networkidle")
        try:
            await self._page.goto(url, wait_until=wait_until, timeout=self.config.page_timeout_ms)
        except PlaywrightTimeoutError as exc:
            raise ProviderError(f"Timed out loading {url}") from exc
        except PlaywrightError as exc:
            raise ProviderError(f"Could not load {url}: {exc}") from exc

        try:
            await self._settle()
            snapshot = await self._page.main_frame.evaluate(SNAPSHOT_SCRIPT)
        except PlaywrightError as exc:
            raise ProviderError(f"Could not inspect {url}: {exc}") from exc
        return document_from_snapshot(snapshot, self._page.url or url)

    async def _settle(self) -> None:
        if self.level is not ScanLevel.ADVANCED or self.config.settle_ms <= 0:
            return
        await self._page.wait_for_timeout(self.config.settle_ms)

    async def frames(self, document: Document) -> List[Frame]:
        if self._page is None:
            return []
        main_frame = self._page.main_frame
        return [
            Frame(url=frame.url, name=frame.name, handle=frame)
            for frame in self._page.frames
            if frame != main_frame
        ]

    async def load_frame(self, frame: Frame) -> Document:
        if frame.handle is None:
            raise FrameError(f"Frame {frame.url} has no handle")
        try:
            snapshot = await frame.handle.evaluate(SNAPSHOT_SCRIPT)
        except PlaywrightError as exc:
            raise FrameError(f"Could not inspect frame {frame.url}: {exc}") from exc
        return document_from_snapshot(snapshot, frame.url)
