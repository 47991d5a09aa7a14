"""Centralized imports for the scanner package used in tests."""

from hidden_field_scanner.core.config import (  # type: ignore[import]
    ScannerConfig,
    load_configuration,
)
from hidden_field_scanner.core.errors import (  # type: ignore[import]
    FrameError,
    InputError,
    ProviderError,
)
from hidden_field_scanner.core.models import (  # type: ignore[import]
    BoundingBox,
    Document,
    Element,
    FieldFinding,
    Frame,
    HiddenVerdict,
    ReasonCode,
    RiskLevel,
    ScanLevel,
    ScanReport,
    StrictnessTier,
    Viewport,
)
from hidden_field_scanner.dom.fields import enumerate_fields  # type: ignore[import]
from hidden_field_scanner.dom.visibility import (  # type: ignore[import]
    classify,
    has_hidden_ancestor,
)
from hidden_field_scanner.providers.base import DocumentProvider  # type: ignore[import]
from hidden_field_scanner.scan.frames import FrameTraversal  # type: ignore[import]
from hidden_field_scanner.scan.risk import assess_risk  # type: ignore[import]

__all__ = [
    "BoundingBox",
    "Document",
    "DocumentProvider",
    "Element",
    "FieldFinding",
    "Frame",
    "FrameError",
    "FrameTraversal",
    "HiddenVerdict",
    "InputError",
    "ProviderError",
    "ReasonCode",
    "RiskLevel",
    "ScanLevel",
    "ScanReport",
    "ScannerConfig",
    "StrictnessTier",
    "Viewport",
    "assess_risk",
    "classify",
    "enumerate_fields",
    "has_hidden_ancestor",
    "load_configuration",
]
