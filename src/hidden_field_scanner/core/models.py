"""Shared data structures for documents, findings and reports."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

INPUT_LIKE_TAGS = frozenset({"input", "textarea", "select"})
MAIN_PAGE_LOCATION = "main page"
MAX_SELECTOR_LENGTH = 100


def frame_location(url: str) -> str:
    return f"iframe({url})"


class StrictnessTier(str, Enum):
    STATIC = "static"
    RENDERED = "rendered"


class ScanLevel(str, Enum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    ADVANCED = "advanced"

    @property
    def tier(self) -> StrictnessTier:
        if self is ScanLevel.SIMPLE:
            return StrictnessTier.STATIC
        return StrictnessTier.RENDERED


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReasonCode(str, Enum):
    """Closed set of signals that mark a field as concealed."""

    DISPLAY_NONE = "DISPLAY_NONE"
    VISIBILITY_HIDDEN = "VISIBILITY_HIDDEN"
    ZERO_OPACITY = "ZERO_OPACITY"
    ARIA_HIDDEN = "ARIA_HIDDEN"
    ZERO_SIZE = "ZERO_SIZE"
    CLIP = "CLIP"
    CLIP_PATH = "CLIP_PATH"
    ZERO_FONT_SIZE = "ZERO_FONT_SIZE"
    OFFSCREEN_ABSOLUTE = "OFFSCREEN_ABSOLUTE"
    OFFSCREEN_FIXED = "OFFSCREEN_FIXED"
    TINY_BOX = "TINY_BOX"
    OVERFLOW_OFFSCREEN = "OVERFLOW_OFFSCREEN"
    COLOR_MATCH = "COLOR_MATCH"
    # Not a style heuristic: the markup itself declares type="hidden".
    EXPLICIT_HIDDEN_TYPE = "EXPLICIT_HIDDEN_TYPE"

    @property
    def description(self) -> str:
        return _REASON_DESCRIPTIONS[self]


_REASON_DESCRIPTIONS = {
    ReasonCode.DISPLAY_NONE: "Hidden via display: none",
    ReasonCode.VISIBILITY_HIDDEN: "Hidden via visibility: hidden",
    ReasonCode.ZERO_OPACITY: "Hidden via opacity: 0",
    ReasonCode.ARIA_HIDDEN: "Hidden via aria-hidden attribute",
    ReasonCode.ZERO_SIZE: "Hidden via zero offset size",
    ReasonCode.CLIP: "Hidden via clip property",
    ReasonCode.CLIP_PATH: "Hidden via clip-path property",
    ReasonCode.ZERO_FONT_SIZE: "Hidden via font-size: 0",
    ReasonCode.OFFSCREEN_ABSOLUTE: "Hidden via absolute off-screen positioning",
    ReasonCode.OFFSCREEN_FIXED: "Hidden via fixed off-screen positioning",
    ReasonCode.TINY_BOX: "Hidden via near-zero size",
    ReasonCode.OVERFLOW_OFFSCREEN: "Hidden via overflow hidden and off-screen",
    ReasonCode.COLOR_MATCH: "Hidden via color matching background",
    ReasonCode.EXPLICIT_HIDDEN_TYPE: "Declared as type=hidden",
}


@dataclass(frozen=True)
class BoundingBox:
    top: float
    left: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def right(self) -> float:
        return self.left + self.width

    def to_dict(self) -> Dict[str, float]:
        return {
            "top": self.top,
            "left": self.left,
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float


@dataclass(eq=False)
class Element:
    """A node of the inspected document with its resolved style and geometry."""

    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    style: Dict[str, str] = field(default_factory=dict)
    offset_width: float = 0.0
    offset_height: float = 0.0
    rect: Optional[BoundingBox] = None
    parent: Optional["Element"] = field(default=None, repr=False)
    form: Optional["Element"] = field(default=None, repr=False)
    form_action: Optional[str] = None
    markup: str = ""

    @property
    def is_input_like(self) -> bool:
        return self.tag.lower() in INPUT_LIKE_TAGS

    @property
    def is_orphan(self) -> bool:
        return self.form is None

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    @property
    def declared_type(self) -> str:
        """Input type as the browser reports it (``text`` unless declared)."""

        tag = self.tag.lower()
        if tag == "textarea":
            return "textarea"
        if tag == "select":
            return "select-multiple" if "multiple" in self.attributes else "select-one"
        value = (self.attributes.get("type") or "").strip().lower()
        return value or "text"


@dataclass
class Document:
    url: str
    fields: List[Element] = field(default_factory=list)
    viewport: Optional[Viewport] = None
    tier: StrictnessTier = StrictnessTier.STATIC


@dataclass(frozen=True)
class Frame:
    url: str
    name: str = ""
    handle: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class HiddenVerdict:
    reason: ReasonCode
    inherited: bool = False

    def as_inherited(self) -> "HiddenVerdict":
        return HiddenVerdict(reason=self.reason, inherited=True)


@dataclass(frozen=True)
class FieldFinding:
    """A single concealed field and the evidence for it."""

    name: Optional[str]
    reason: ReasonCode
    location: str
    selector: str
    type: str = "text"
    inherited: bool = False
    orphan: bool = False
    bounding_box: Optional[BoundingBox] = None

    @property
    def description(self) -> str:
        text = self.reason.description
        if self.inherited:
            text = f"Ancestor: {text}"
        if self.orphan:
            text = f"{text} (not within a form)"
        return text

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "reasonCode": self.reason.value,
            "reason": self.description,
            "inheritedFromAncestor": self.inherited,
            "orphan": self.orphan,
            "location": self.location,
            "selector": self.selector,
            "suspicious": True,
        }
        if self.bounding_box is not None:
            data["boundingBox"] = self.bounding_box.to_dict()
        return data


@dataclass(frozen=True)
class RiskAssessment:
    level: RiskLevel
    recommendations: Tuple[str, ...]


@dataclass
class ScanReport:
    """Outcome of a single scan invocation."""

    url: str
    scan_level: ScanLevel
    findings: List[FieldFinding]
    assessment: RiskAssessment
    frames_scanned: int = 0
    frames_failed: int = 0
    error: Optional[str] = None

    @property
    def risk_level(self) -> RiskLevel:
        return self.assessment.level

    @property
    def has_findings(self) -> bool:
        return bool(self.findings)

    def to_dict(self) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {
            "riskLevel": self.assessment.level.value,
            "recommendations": list(self.assessment.recommendations),
            "totalFindings": len(self.findings),
            "framesScanned": self.frames_scanned,
            "framesFailed": self.frames_failed,
        }
        if self.error:
            metadata["error"] = self.error
        return {
            "scanLevel": self.scan_level.value,
            "url": self.url,
            "hiddenFields": [finding.to_dict() for finding in self.findings],
            "metadata": metadata,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=4)

    def save(self, path: Path) -> None:
        path.write_text(self.to_json(), encoding="utf-8")
