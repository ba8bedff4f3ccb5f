"""Element contract and host adapters."""

from .element import AnimatedElement, MicroTransform, REST_STATE, require_element, require_trackable
from .adapters import CAMEL_CASE_FIELDS, ElementAdapter, MicroAdapter, adapt

__all__ = [
    "AnimatedElement",
    "MicroTransform",
    "REST_STATE",
    "require_element",
    "require_trackable",
    "CAMEL_CASE_FIELDS",
    "ElementAdapter",
    "MicroAdapter",
    "adapt",
]
