from .accessor import StyleSnapshot, read_style
from .fields import build_selector, enumerate_fields
from .visibility import classify, has_hidden_ancestor

__all__ = [
    "StyleSnapshot",
    "build_selector",
    "classify",
    "enumerate_fields",
    "has_hidden_ancestor",
    "read_style",
]
