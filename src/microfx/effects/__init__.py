"""Effect catalog: appear, disappear, click and looping attention calls."""

from microfx.effects.animator import EffectAnimator, as_elements
from microfx.effects.options import (
    AppearOptions,
    ClickOptions,
    DisappearOptions,
    JumpCallOptions,
    PulseOptions,
    ShakeOptions,
    SpinCallOptions,
    StopJumpCallOptions,
    StopOptions,
    StopPulseOptions,
    StopShakeOptions,
    StopSpinCallOptions,
    StopSwipeCallOptions,
    SwipeCallOptions,
    ToggleSelectOptions,
    resolve,
)

__all__ = [
    "EffectAnimator",
    "as_elements",
    "resolve",
    # One-shot options
    "AppearOptions",
    "DisappearOptions",
    "ClickOptions",
    "ToggleSelectOptions",
    # Looping options
    "PulseOptions",
    "JumpCallOptions",
    "SpinCallOptions",
    "SwipeCallOptions",
    "ShakeOptions",
    # Stop options
    "StopOptions",
    "StopPulseOptions",
    "StopJumpCallOptions",
    "StopSpinCallOptions",
    "StopSwipeCallOptions",
    "StopShakeOptions",
]
