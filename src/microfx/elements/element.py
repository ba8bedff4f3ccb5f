"""Canonical animated element contract.

Units: positions in host pixels, rotation in radians, anchors normalized
0-1, opacity in [0, 1]. Hosts with other shapes go through the adapters
in ``microfx.elements.adapters``.
"""

from dataclasses import dataclass, field
from typing import Any, Optional
import weakref

from microfx.core.errors import ElementContractError

# Neutral values of the fields the effect catalog animates
REST_STATE: dict[str, float] = {
    "x": 0.0,
    "y": 0.0,
    "scale_x": 1.0,
    "scale_y": 1.0,
    "rotation": 0.0,
}

MICRO_FIELDS = ("x", "y", "scale_x", "scale_y", "anchor_x", "anchor_y", "rotation")


@dataclass
class MicroTransform:
    """Local transform bag animated on top of an element's layout."""

    x: float = 0.0
    y: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    anchor_x: float = 0.5
    anchor_y: float = 0.5
    rotation: float = 0.0  # radians

    def reset(self) -> None:
        """Snap every animated field back to rest (anchors untouched)."""
        for key, value in REST_STATE.items():
            setattr(self, key, value)

    def is_at_rest(self, tolerance: float = 1e-9) -> bool:
        return all(abs(getattr(self, key) - value) <= tolerance for key, value in REST_STATE.items())


@dataclass
class AnimatedElement:
    """Minimal element satisfying the contract; hosts may use their own class."""

    opacity: float = 1.0
    micro: MicroTransform = field(default_factory=MicroTransform)
    name: Optional[str] = None


def require_element(element: Any) -> Any:
    """Check the canonical contract: an ``opacity`` field and a ``micro`` bag."""
    micro = getattr(element, "micro", None)
    if micro is None:
        raise ElementContractError(f"{type(element).__name__} has no 'micro' transform bag")
    missing = [name for name in MICRO_FIELDS if not hasattr(micro, name)]
    if missing:
        raise ElementContractError(
            f"{type(element).__name__}.micro is missing fields: {', '.join(missing)}"
        )
    if not hasattr(element, "opacity"):
        raise ElementContractError(
            f"{type(element).__name__} has no 'opacity'; wrap it with adapt(host, alpha='color')"
        )
    return element


def require_trackable(element: Any) -> Any:
    """Check that ``element`` can be weakly referenced, as looping effects require."""
    try:
        weakref.ref(element)
    except TypeError:
        raise ElementContractError(
            f"{type(element).__name__} cannot be weakly referenced; "
            "add '__weakref__' to its __slots__"
        ) from None
    return element
