"""Effect configuration models.

Every effect takes a partial configuration: a mapping, an options model
or keyword overrides, merged over the defaults below by ``resolve()``.
Validation happens before any element is touched; failures surface as
``ConfigurationError``.
"""

from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from microfx.animation.easing import Easing, get_easing
from microfx.animation.timeline import INFINITE
from microfx.core.errors import ConfigurationError

EaseOption = Union[Easing, str, Callable[[float], float]]


class EffectOptions(BaseModel):
    """Shared validation for every options model."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        allow_inf_nan=False,
        arbitrary_types_allowed=True,
    )

    @field_validator("*", mode="after")
    @classmethod
    def _check_ease(cls, value: Any, info: ValidationInfo) -> Any:
        if info.field_name.startswith("ease") or info.field_name.endswith("_ease"):
            get_easing(value)
        return value


class LoopOptions(EffectOptions):
    """Options common to looping attention effects.

    ``iterations`` counts played cycles (1 = once); INFINITE loops until
    stopped. ``total_duration`` stops the effect after that many seconds.
    """

    iterations: int = INFINITE
    cooldown: float = Field(default=0.0, ge=0)
    start_with_cooldown: bool = False
    total_duration: Optional[float] = Field(default=None, ge=0)

    @field_validator("iterations")
    @classmethod
    def _check_iterations(cls, value: int) -> int:
        if value != INFINITE and value < 1:
            raise ValueError(f"iterations must be >= 1 or INFINITE ({INFINITE}), got {value}")
        return value

    @model_validator(mode="after")
    def _check_period(self):
        if self.iterations == INFINITE and self.cycle_duration + self.cooldown <= 0:
            raise ValueError("an infinite effect needs a non-zero duration or cooldown")
        return self

    @property
    def repeat(self) -> int:
        """Timeline repeat count for these iterations."""
        return INFINITE if self.iterations == INFINITE else self.iterations - 1

    @property
    def cycle_duration(self) -> float:
        return 0.0


# One-shot effects

class AppearOptions(EffectOptions):
    x_from: float = 0.0
    x_to: float = 0.0
    y_from: float = 0.0
    y_to: float = 0.0
    scale_from: float = 0.5
    scale_to: float = 1.0
    alpha_from: float = Field(default=0.0, ge=0, le=1)
    alpha_to: float = Field(default=1.0, ge=0, le=1)
    delay: float = Field(default=0.0, ge=0)
    duration: float = Field(default=0.25, ge=0)
    ease: EaseOption = Easing.BACK_OUT
    alpha_ease: EaseOption = Easing.QUAD_IN_OUT


class DisappearOptions(EffectOptions):
    """Targets left as None are not animated; from-values are the current ones."""

    x_to: Optional[float] = None
    y_to: Optional[float] = None
    scale_to: Optional[float] = 0.5
    alpha_to: Optional[float] = Field(default=0.0, ge=0, le=1)
    delay: float = Field(default=0.0, ge=0)
    duration: float = Field(default=0.25, ge=0)
    ease: EaseOption = Easing.BACK_IN
    alpha_ease: EaseOption = Easing.QUAD_IN_OUT


class ClickOptions(EffectOptions):
    x_offset: float = 0.0
    y_offset: float = -25.0
    x_scale: float = 0.85
    y_scale: float = 1.0
    delay: float = Field(default=0.0, ge=0)
    duration_in: float = Field(default=0.125, ge=0)
    duration_out: float = Field(default=0.25, ge=0)
    ease_in: EaseOption = Easing.QUAD_OUT
    ease_out: EaseOption = Easing.BACK_OUT


class ToggleSelectOptions(EffectOptions):
    selected: bool
    scale: float = Field(default=1.25, gt=0)
    duration: float = Field(default=0.25, ge=0)
    ease: EaseOption = Easing.QUAD_IN_OUT
    anchor_x: Optional[float] = Field(default=None, ge=0, le=1)
    anchor_y: Optional[float] = Field(default=None, ge=0, le=1)


# Looping effects

class PulseOptions(LoopOptions):
    scale: float = 1.1
    cooldown: float = Field(default=3.0, ge=0)
    start_with_cooldown: bool = True
    duration_in: float = Field(default=0.25, ge=0)
    duration_out: float = Field(default=0.5, ge=0)
    ease_in: EaseOption = Easing.QUAD_IN_OUT
    ease_out: EaseOption = Easing.QUAD_IN_OUT

    @property
    def cycle_duration(self) -> float:
        return self.duration_in + self.duration_out


class JumpCallOptions(LoopOptions):
    """Upward jump of ``jump_height`` pixels (negative y), then a fall back.

    A non-zero ``squash`` adds a short squash before take-off that
    stretches back to the rest scale during the rise.
    """

    jump_height: float = 25.0
    cooldown: float = Field(default=4.0, ge=0)
    duration_in: float = Field(default=0.5, ge=0)
    duration_out: float = Field(default=0.5, ge=0)
    ease_in: EaseOption = Easing.CUBIC_OUT
    ease_out: EaseOption = Easing.BOUNCE_OUT
    squash: float = Field(default=0.0, ge=0, lt=1)
    squash_duration: float = Field(default=0.1, ge=0)

    @property
    def cycle_duration(self) -> float:
        flourish = self.squash_duration if self.squash > 0 else 0.0
        return flourish + self.duration_in + self.duration_out


class SpinCallOptions(LoopOptions):
    """Rotation sway; ``duration`` covers the whole sway sequence."""

    anchor_x: float = Field(default=0.5, ge=0, le=1)
    anchor_y: float = Field(default=0.5, ge=0, le=1)
    rotation: float = 0.0435  # radians
    sway_count: int = Field(default=4, ge=0)
    damping: float = Field(default=1.0, ge=0, le=1)
    cooldown: float = Field(default=4.0, ge=0)
    duration: float = Field(default=1.5, ge=0)
    ease: EaseOption = Easing.QUAD_IN_OUT

    @property
    def cycle_duration(self) -> float:
        return self.duration


class SwipeCallOptions(LoopOptions):
    """Back-and-forth move by (dx, dy); ``duration`` is per leg."""

    dx: float = 25.0
    dy: float = 0.0
    duration: float = Field(default=0.4, ge=0)
    ease_in: EaseOption = Easing.QUAD_IN_OUT
    ease_out: EaseOption = Easing.QUAD_IN_OUT

    @property
    def cycle_duration(self) -> float:
        return 2 * self.duration


class ShakeOptions(LoopOptions):
    """Random jitter within ``radius`` pixels, ``frequency`` kicks per second."""

    radius: float = Field(default=5.0, ge=0)
    frequency: float = Field(default=10.0, gt=0)
    duration: float = Field(default=0.6, ge=0)
    ease: EaseOption = Easing.QUAD_OUT
    seed: Optional[int] = None

    @property
    def cycle_duration(self) -> float:
        return self.duration


# Stop options. Restore targets left as None fall back to the rest values
# of the fields the running effect animates.

class StopOptions(EffectOptions):
    duration: float = Field(default=0.25, ge=0)
    ease: EaseOption = Easing.QUAD_IN_OUT

    def restore_values(self) -> Dict[str, float]:
        return {}


class StopPulseOptions(StopOptions):
    scale: Optional[float] = None

    def restore_values(self) -> Dict[str, float]:
        if self.scale is None:
            return {}
        return {"scale_x": self.scale, "scale_y": self.scale}


class StopJumpCallOptions(StopOptions):
    y: Optional[float] = None

    def restore_values(self) -> Dict[str, float]:
        return {} if self.y is None else {"y": self.y}


class StopSpinCallOptions(StopOptions):
    rotation: Optional[float] = None

    def restore_values(self) -> Dict[str, float]:
        return {} if self.rotation is None else {"rotation": self.rotation}


class StopSwipeCallOptions(StopOptions):
    x: Optional[float] = None
    y: Optional[float] = None

    def restore_values(self) -> Dict[str, float]:
        values = {}
        if self.x is not None:
            values["x"] = self.x
        if self.y is not None:
            values["y"] = self.y
        return values


class StopShakeOptions(StopSwipeCallOptions):
    pass


M = TypeVar("M", bound=EffectOptions)
OptionsInput = Union[EffectOptions, Mapping[str, Any], None]


def resolve(model: Type[M], options: OptionsInput = None, overrides: Optional[Mapping[str, Any]] = None) -> M:
    """Merge partial options and keyword overrides over ``model``'s defaults.

    Args:
        model: Options model class
        options: A model instance, a mapping of field values, or None
        overrides: Field values applied on top of ``options``

    Returns:
        Validated options

    Raises:
        ConfigurationError: For unknown fields or invalid values
    """
    if isinstance(options, model) and not overrides:
        return options

    if options is None:
        data: Dict[str, Any] = {}
    elif isinstance(options, BaseModel):
        data = options.model_dump(exclude_unset=True)
    elif isinstance(options, Mapping):
        data = dict(options)
    else:
        raise ConfigurationError(
            f"{model.__name__} expects a mapping or options model, got {type(options).__name__}"
        )
    data.update(overrides or {})

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid {model.__name__}: {e}") from e
