"""Animation module for microfx."""

from microfx.animation.easing import Easing, get_easing, interpolate
from microfx.animation.tween import Tween
from microfx.animation.timeline import Timeline, PlayState, INFINITE
from microfx.animation.engine import AnimationEngine
from microfx.animation.completion import Completion, completion_for
from microfx.animation.registry import EffectKind, EffectRegistry

__all__ = [
    # Easing
    "Easing",
    "get_easing",
    "interpolate",
    # Tween / Timeline
    "Tween",
    "Timeline",
    "PlayState",
    "INFINITE",
    # Clock
    "AnimationEngine",
    "Completion",
    "completion_for",
    # Lifecycle
    "EffectKind",
    "EffectRegistry",
]
