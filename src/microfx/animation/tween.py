"""Single property-bag interpolation.

A tween animates a subset of keys on one target bag from a snapshot of
from-values to a mapping of to-values. The bag is any attribute object or
mutable mapping; the tween only ever assigns into existing fields.
"""

from collections.abc import Mapping, MutableMapping
from typing import Any, Dict, Optional
import math

import numpy as np

from microfx.animation.easing import Easing, EasingFunc, EasingSpec, get_easing
from microfx.core.errors import ConfigurationError


def read_value(target: Any, key: str) -> Any:
    """Read one animatable field from an attribute object or mapping."""
    if isinstance(target, Mapping):
        try:
            return target[key]
        except KeyError:
            raise ConfigurationError(f"Target has no key {key!r}") from None
    try:
        return getattr(target, key)
    except AttributeError:
        raise ConfigurationError(
            f"{type(target).__name__} has no animatable field {key!r}"
        ) from None


def write_value(target: Any, key: str, value: Any) -> None:
    """Assign into a field without replacing the bag itself."""
    if isinstance(target, MutableMapping):
        target[key] = value
    else:
        setattr(target, key, value)


def check_duration(name: str, value: float) -> float:
    """Reject negative and non-finite time spans."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigurationError(f"{name} must be finite, got {value!r}")
    if value < 0:
        raise ConfigurationError(f"{name} must be >= 0, got {value!r}")
    return float(value)


def _check_value(key: str, value: Any) -> Any:
    if isinstance(value, bool):
        raise ConfigurationError(f"Value for {key!r} must be numeric, got a bool")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ConfigurationError(f"Value for {key!r} must be finite, got {value!r}")
        return value
    if isinstance(value, (tuple, list, np.ndarray)):
        array = np.asarray(value, dtype=float)
        if array.ndim != 1 or not np.all(np.isfinite(array)):
            raise ConfigurationError(f"Vector value for {key!r} must be a finite 1-D sequence")
        return value
    raise ConfigurationError(f"Value for {key!r} must be a number or vector, got {value!r}")


def lerp(start: Any, end: Any, t: float) -> Any:
    """Interpolate scalars, or vectors component-wise keeping the start container type."""
    if isinstance(start, (int, float)) and isinstance(end, (int, float)):
        if t >= 1.0:
            return end
        return start + (end - start) * t

    a = np.asarray(start, dtype=float)
    b = np.asarray(end, dtype=float)
    if a.shape != b.shape:
        raise ConfigurationError(f"Cannot interpolate shapes {a.shape} and {b.shape}")
    result = b.copy() if t >= 1.0 else a + (b - a) * t

    if isinstance(start, tuple):
        return tuple(float(v) for v in result)
    if isinstance(start, list):
        return [float(v) for v in result]
    return result


class Tween:
    """One time-bounded interpolation of several keys on a single bag.

    Attributes:
        target: Property bag being animated
        to_values: Mapping of key -> end value; only these keys are written
        duration: Seconds, >= 0 (0 resolves straight to to_values)
        ease: Easing callable
        start_offset: Seconds from the owning timeline's cycle origin
    """

    def __init__(
        self,
        target: Any,
        to_values: Mapping[str, Any],
        duration: float,
        ease: EasingSpec = Easing.LINEAR,
        start_offset: float = 0.0,
        from_values: Optional[Mapping[str, Any]] = None,
    ):
        if target is None:
            raise ConfigurationError("Tween target must not be None")

        self.target = target
        self.to_values: Dict[str, Any] = {
            key: _check_value(key, value) for key, value in to_values.items()
        }
        self.duration = check_duration("duration", duration)
        self.start_offset = check_duration("start_offset", start_offset)
        self.ease: EasingFunc = get_easing(ease)

        self.from_values: Optional[Dict[str, Any]] = None
        if from_values is not None:
            missing = set(self.to_values) - set(from_values)
            if missing:
                raise ConfigurationError(f"from_values is missing keys: {sorted(missing)}")
            self.from_values = {
                key: _check_value(key, from_values[key]) for key in self.to_values
            }

    @property
    def end_offset(self) -> float:
        """Offset at which this tween reaches its to-values."""
        return self.start_offset + self.duration

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(self.to_values)

    @property
    def is_captured(self) -> bool:
        return self.from_values is not None

    def capture(self, initial: Optional[Mapping[str, Any]] = None) -> "Tween":
        """Snapshot from-values for every animated key.

        Args:
            initial: Values to use instead of the live target for some keys
                (a timeline passes the end values of earlier tweens on the
                same key so chained tweens continue from each other)

        Returns:
            Self for method chaining
        """
        if self.from_values is not None:
            return self

        snapshot: Dict[str, Any] = {}
        for key in self.to_values:
            if initial is not None and key in initial:
                value = initial[key]
            else:
                value = read_value(self.target, key)
            if isinstance(value, np.ndarray):
                value = value.copy()
            snapshot[key] = _check_value(key, value)
        self.from_values = snapshot
        return self

    def progress_at(self, local_time: float) -> float:
        """Raw (un-eased) progress for a time measured from the cycle origin."""
        if self.duration <= 0:
            return 1.0 if local_time >= self.start_offset else 0.0
        return max(0.0, min(1.0, (local_time - self.start_offset) / self.duration))

    def render(self, local_time: float) -> float:
        """Write interpolated values for a time measured from the cycle origin.

        Returns:
            The raw progress that was rendered
        """
        if self.from_values is None:
            self.capture()

        raw = self.progress_at(local_time)
        # the ease is never consulted at the endpoint so final values are exact
        eased = 1.0 if raw >= 1.0 else self.ease(raw)

        for key, end in self.to_values.items():
            write_value(self.target, key, lerp(self.from_values[key], end, eased))
        return raw

    def finish(self) -> None:
        """Write the to-values exactly."""
        self.render(self.end_offset)

    def __repr__(self) -> str:
        return (
            f"Tween(target={type(self.target).__name__}, keys={list(self.to_values)}, "
            f"offset={self.start_offset:.3f}, duration={self.duration:.3f})"
        )
