from .frames import FrameTraversal, TraversalResult
from .orchestrator import run_scan, scan_page, validate_request
from .risk import assess_risk

__all__ = [
    "FrameTraversal",
    "TraversalResult",
    "assess_risk",
    "run_scan",
    "scan_page",
    "validate_request",
]
