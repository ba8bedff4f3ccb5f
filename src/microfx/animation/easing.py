"""Easing curves for tweens.

Every curve maps normalized progress (0.0 to 1.0) to eased progress and
hits 0 at 0 and 1 at 1 exactly. Back and elastic curves overshoot in
between. Curves are plain callables, so any ``(progress) -> progress``
function can be passed wherever an easing is expected.
"""

from enum import Enum
from typing import Callable, Union
import math

from microfx.core.errors import ConfigurationError


# Type alias for easing functions
EasingFunc = Callable[[float], float]


class Easing(Enum):
    """Named easing curves.

    Power curves are numbered like their exponent minus one:
    QUAD is power 1, CUBIC is power 2, QUART is power 3, QUINT is power 4.
    """

    LINEAR = "linear"

    QUAD_IN = "quad_in"
    QUAD_OUT = "quad_out"
    QUAD_IN_OUT = "quad_in_out"

    CUBIC_IN = "cubic_in"
    CUBIC_OUT = "cubic_out"
    CUBIC_IN_OUT = "cubic_in_out"

    QUART_IN = "quart_in"
    QUART_OUT = "quart_out"
    QUART_IN_OUT = "quart_in_out"

    QUINT_IN = "quint_in"
    QUINT_OUT = "quint_out"
    QUINT_IN_OUT = "quint_in_out"

    SINE_IN = "sine_in"
    SINE_OUT = "sine_out"
    SINE_IN_OUT = "sine_in_out"

    EXPO_IN = "expo_in"
    EXPO_OUT = "expo_out"
    EXPO_IN_OUT = "expo_in_out"

    CIRC_IN = "circ_in"
    CIRC_OUT = "circ_out"
    CIRC_IN_OUT = "circ_in_out"

    BACK_IN = "back_in"
    BACK_OUT = "back_out"
    BACK_IN_OUT = "back_in_out"

    ELASTIC_IN = "elastic_in"
    ELASTIC_OUT = "elastic_out"
    ELASTIC_IN_OUT = "elastic_in_out"

    BOUNCE_IN = "bounce_in"
    BOUNCE_OUT = "bounce_out"
    BOUNCE_IN_OUT = "bounce_in_out"


EasingSpec = Union[Easing, str, EasingFunc]

DEFAULT_OVERSHOOT = 1.70158


def linear(t: float) -> float:
    return t


# Power family

def power_in(power: int) -> EasingFunc:
    """Build an accelerating curve t**(power+1)."""
    exponent = power + 1

    def ease(t: float) -> float:
        return t ** exponent

    ease.__name__ = f"power{power}_in"
    return ease


def power_out(power: int) -> EasingFunc:
    """Build a decelerating curve, the mirror of power_in."""
    exponent = power + 1

    def ease(t: float) -> float:
        return 1 - (1 - t) ** exponent

    ease.__name__ = f"power{power}_out"
    return ease


def power_in_out(power: int) -> EasingFunc:
    """Accelerate through the first half, decelerate through the second."""
    exponent = power + 1
    scale = 2 ** power

    def ease(t: float) -> float:
        if t < 0.5:
            return scale * t ** exponent
        return 1 - (-2 * t + 2) ** exponent / 2

    ease.__name__ = f"power{power}_in_out"
    return ease


# Sine

def sine_in(t: float) -> float:
    return 1 - math.cos((t * math.pi) / 2)


def sine_out(t: float) -> float:
    return math.sin((t * math.pi) / 2)


def sine_in_out(t: float) -> float:
    return -(math.cos(math.pi * t) - 1) / 2


# Exponential

def expo_in(t: float) -> float:
    return 0.0 if t <= 0 else 2 ** (10 * t - 10)


def expo_out(t: float) -> float:
    return 1.0 if t >= 1 else 1 - 2 ** (-10 * t)


def expo_in_out(t: float) -> float:
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0
    if t < 0.5:
        return 2 ** (20 * t - 10) / 2
    return (2 - 2 ** (-20 * t + 10)) / 2


# Circular

def circ_in(t: float) -> float:
    return 1 - math.sqrt(max(0.0, 1 - t * t))


def circ_out(t: float) -> float:
    return math.sqrt(max(0.0, 1 - (t - 1) ** 2))


def circ_in_out(t: float) -> float:
    if t < 0.5:
        return (1 - math.sqrt(max(0.0, 1 - (2 * t) ** 2))) / 2
    return (math.sqrt(max(0.0, 1 - (-2 * t + 2) ** 2)) + 1) / 2


# Back (overshoot)

def back_in(overshoot: float = DEFAULT_OVERSHOOT) -> EasingFunc:
    """Pull back before moving forward. Larger overshoot pulls further."""

    def ease(t: float) -> float:
        return (overshoot + 1) * t ** 3 - overshoot * t * t

    ease.__name__ = f"back_in({overshoot})"
    return ease


def back_out(overshoot: float = DEFAULT_OVERSHOOT) -> EasingFunc:
    """Overshoot the target and settle back onto it."""

    def ease(t: float) -> float:
        u = t - 1
        return 1 + (overshoot + 1) * u ** 3 + overshoot * u * u

    ease.__name__ = f"back_out({overshoot})"
    return ease


def back_in_out(overshoot: float = DEFAULT_OVERSHOOT) -> EasingFunc:
    s = overshoot * 1.525

    def ease(t: float) -> float:
        if t < 0.5:
            return ((2 * t) ** 2 * ((s + 1) * 2 * t - s)) / 2
        return ((2 * t - 2) ** 2 * ((s + 1) * (t * 2 - 2) + s) + 2) / 2

    ease.__name__ = f"back_in_out({overshoot})"
    return ease


# Elastic

def elastic_in(t: float) -> float:
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0
    c4 = (2 * math.pi) / 3
    return -(2 ** (10 * t - 10)) * math.sin((t * 10 - 10.75) * c4)


def elastic_out(t: float) -> float:
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0
    c4 = (2 * math.pi) / 3
    return 2 ** (-10 * t) * math.sin((t * 10 - 0.75) * c4) + 1


def elastic_in_out(t: float) -> float:
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0
    c5 = (2 * math.pi) / 4.5
    if t < 0.5:
        return -(2 ** (20 * t - 10) * math.sin((20 * t - 11.125) * c5)) / 2
    return (2 ** (-20 * t + 10) * math.sin((20 * t - 11.125) * c5)) / 2 + 1


# Bounce

def bounce_out(t: float) -> float:
    n1 = 7.5625
    d1 = 2.75
    if t < 1 / d1:
        return n1 * t * t
    if t < 2 / d1:
        t -= 1.5 / d1
        return n1 * t * t + 0.75
    if t < 2.5 / d1:
        t -= 2.25 / d1
        return n1 * t * t + 0.9375
    t -= 2.625 / d1
    return n1 * t * t + 0.984375


def bounce_in(t: float) -> float:
    return 1 - bounce_out(1 - t)


def bounce_in_out(t: float) -> float:
    if t < 0.5:
        return (1 - bounce_out(1 - 2 * t)) / 2
    return (1 + bounce_out(2 * t - 1)) / 2


_EASING_FUNCTIONS: dict[Easing, EasingFunc] = {
    Easing.LINEAR: linear,

    Easing.QUAD_IN: power_in(1),
    Easing.QUAD_OUT: power_out(1),
    Easing.QUAD_IN_OUT: power_in_out(1),

    Easing.CUBIC_IN: power_in(2),
    Easing.CUBIC_OUT: power_out(2),
    Easing.CUBIC_IN_OUT: power_in_out(2),

    Easing.QUART_IN: power_in(3),
    Easing.QUART_OUT: power_out(3),
    Easing.QUART_IN_OUT: power_in_out(3),

    Easing.QUINT_IN: power_in(4),
    Easing.QUINT_OUT: power_out(4),
    Easing.QUINT_IN_OUT: power_in_out(4),

    Easing.SINE_IN: sine_in,
    Easing.SINE_OUT: sine_out,
    Easing.SINE_IN_OUT: sine_in_out,

    Easing.EXPO_IN: expo_in,
    Easing.EXPO_OUT: expo_out,
    Easing.EXPO_IN_OUT: expo_in_out,

    Easing.CIRC_IN: circ_in,
    Easing.CIRC_OUT: circ_out,
    Easing.CIRC_IN_OUT: circ_in_out,

    Easing.BACK_IN: back_in(),
    Easing.BACK_OUT: back_out(),
    Easing.BACK_IN_OUT: back_in_out(),

    Easing.ELASTIC_IN: elastic_in,
    Easing.ELASTIC_OUT: elastic_out,
    Easing.ELASTIC_IN_OUT: elastic_in_out,

    Easing.BOUNCE_IN: bounce_in,
    Easing.BOUNCE_OUT: bounce_out,
    Easing.BOUNCE_IN_OUT: bounce_in_out,
}

# Alternate spellings seen in design tools ("power1.out", "back.in", "ease_out_cubic")
_POWER_FAMILIES = {"1": "quad", "2": "cubic", "3": "quart", "4": "quint"}
_DIRECTIONS = {"in": "in", "out": "out", "inout": "in_out", "in_out": "in_out"}


def _normalize_name(name: str) -> str:
    key = name.strip().lower().replace("-", "_").replace(".", "_")
    if key == "none":
        return "linear"

    if key.startswith("power") and "_" in key:
        power, _, direction = key[len("power"):].partition("_")
        family = _POWER_FAMILIES.get(power)
        if family and direction in _DIRECTIONS:
            return f"{family}_{_DIRECTIONS[direction]}"

    if key.startswith("ease_"):
        # ease_out_cubic -> cubic_out
        rest = key[len("ease_"):]
        for direction in ("in_out", "out", "in"):
            if rest.startswith(direction + "_"):
                return f"{rest[len(direction) + 1:]}_{direction}"

    family, _, direction = key.partition("_")
    if direction in _DIRECTIONS:
        return f"{family}_{_DIRECTIONS[direction]}"
    return key


def get_easing(easing: EasingSpec) -> EasingFunc:
    """Resolve an easing enum, name or callable to a callable.

    Args:
        easing: Easing member, name such as "back_out" or "power1.inOut",
            or any callable mapping progress to progress

    Returns:
        The easing function

    Raises:
        ConfigurationError: If the name is not recognized
    """
    if isinstance(easing, Easing):
        return _EASING_FUNCTIONS[easing]

    if isinstance(easing, str):
        try:
            member = Easing(_normalize_name(easing))
        except ValueError:
            raise ConfigurationError(f"Unknown easing function: {easing!r}") from None
        return _EASING_FUNCTIONS[member]

    if callable(easing):
        return easing

    raise ConfigurationError(f"Easing must be a name, Easing or callable, got {type(easing).__name__}")


def interpolate(start: float, end: float, t: float, easing: EasingSpec = Easing.LINEAR) -> float:
    """Interpolate between two values using an easing function.

    Args:
        start: Starting value
        end: Ending value
        t: Progress (0.0 to 1.0), clamped
        easing: Easing function to use

    Returns:
        Interpolated value
    """
    eased_t = get_easing(easing)(max(0.0, min(1.0, t)))
    return start + (end - start) * eased_t
