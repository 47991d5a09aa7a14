"""Hand-written element factories and a scripted document provider."""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional

from tests.helpers.scanner_imports import (
    BoundingBox,
    Document,
    DocumentProvider,
    Element,
    Frame,
    FrameError,
    ProviderError,
    StrictnessTier,
    Viewport,
)

VIEWPORT = Viewport(width=1280, height=720)


def visible_box() -> BoundingBox:
    return BoundingBox(top=100, left=100, width=200, height=30)


def make_element(
    tag: str = "input",
    *,
    style: Optional[Dict[str, str]] = None,
    attributes: Optional[Dict[str, str]] = None,
    parent: Optional[Element] = None,
    form: Optional[Element] = None,
    rendered: bool = True,
    rect: Optional[BoundingBox] = None,
) -> Element:
    """Builds an element that is visible unless ``style``/geometry say otherwise."""

    box = rect if rect is not None else (visible_box() if rendered else None)
    element = Element(
        tag=tag,
        attributes=dict(attributes or {}),
        style=dict(style or {}),
        offset_width=box.width if box else 0.0,
        offset_height=box.height if box else 0.0,
        rect=box,
        parent=parent,
        form=form,
    )
    if form is not None:
        element.form_action = form.get_attribute("action")
    name = element.get_attribute("name")
    element.markup = f'<{tag} name="{name}">' if name else f"<{tag}>"
    return element


def hidden_input(name: str, *, parent: Optional[Element] = None) -> Element:
    return make_element(attributes={"name": name}, style={"display": "none"}, parent=parent)


def make_document(
    url: str,
    fields: List[Element],
    tier: StrictnessTier = StrictnessTier.RENDERED,
) -> Document:
    return Document(url=url, fields=fields, viewport=VIEWPORT, tier=tier)


class ScriptedProvider(DocumentProvider):
    """Serves prepared documents; frames may fail, hang or resolve late."""

    def __init__(
        self,
        main: Optional[Document] = None,
        frames: Optional[List[Frame]] = None,
        frame_documents: Optional[Dict[str, Document]] = None,
        *,
        failing_frames: tuple = (),
        hanging_frames: tuple = (),
        delays: Optional[Dict[str, float]] = None,
        load_error: Optional[Exception] = None,
        start_error: Optional[Exception] = None,
    ) -> None:
        self.main = main
        self._frames = list(frames or [])
        self.frame_documents = dict(frame_documents or {})
        self.failing_frames = set(failing_frames)
        self.hanging_frames = set(hanging_frames)
        self.delays = dict(delays or {})
        self.load_error = load_error
        self.start_error = start_error
        self.started = False
        self.closed = False
        self.frames_requested = False

    async def start(self) -> None:
        self.started = True
        if self.start_error is not None:
            raise self.start_error

    async def close(self) -> None:
        self.closed = True

    async def load(self, url: str) -> Document:
        if self.load_error is not None:
            raise self.load_error
        if self.main is None:
            raise ProviderError(f"nothing scripted for {url}")
        return self.main

    async def frames(self, document: Document) -> List[Frame]:
        self.frames_requested = True
        return list(self._frames)

    async def load_frame(self, frame: Frame) -> Document:
        if frame.url in self.failing_frames:
            raise FrameError(f"cross-origin access denied for {frame.url}")
        if frame.url in self.hanging_frames:
            await asyncio.sleep(5)
        await asyncio.sleep(self.delays.get(frame.url, 0))
        return self.frame_documents[frame.url]
