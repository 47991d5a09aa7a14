"""Shared configuration, errors and data structures."""

from __future__ import annotations

from .config import ScannerConfig, load_configuration
from .errors import FrameError, InputError, ProviderError, ScanError
from .models import (
    BoundingBox,
    Document,
    Element,
    FieldFinding,
    Frame,
    HiddenVerdict,
    ReasonCode,
    RiskAssessment,
    RiskLevel,
    ScanLevel,
    ScanReport,
    StrictnessTier,
    Viewport,
)

__all__ = [
    "BoundingBox",
    "Document",
    "Element",
    "FieldFinding",
    "Frame",
    "FrameError",
    "HiddenVerdict",
    "InputError",
    "ProviderError",
    "ReasonCode",
    "RiskAssessment",
    "RiskLevel",
    "ScanError",
    "ScanLevel",
    "ScanReport",
    "ScannerConfig",
    "StrictnessTier",
    "Viewport",
    "load_configuration",
]
