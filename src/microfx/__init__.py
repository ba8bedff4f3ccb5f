"""microfx: micro-animation effects for interactive UI elements."""

from microfx.animation import (
    INFINITE,
    AnimationEngine,
    Completion,
    Easing,
    EffectKind,
    EffectRegistry,
    Timeline,
)
from microfx.core.errors import (
    CompletionCancelled,
    ConfigurationError,
    ElementContractError,
    MicrofxError,
)
from microfx.effects import EffectAnimator
from microfx.elements import AnimatedElement, MicroTransform, adapt

__version__ = "0.1.0"

__all__ = [
    "INFINITE",
    "AnimationEngine",
    "Completion",
    "Easing",
    "EffectKind",
    "EffectRegistry",
    "Timeline",
    "EffectAnimator",
    "AnimatedElement",
    "MicroTransform",
    "adapt",
    "CompletionCancelled",
    "ConfigurationError",
    "ElementContractError",
    "MicrofxError",
]
