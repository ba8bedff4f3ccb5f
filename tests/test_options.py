"""
Tests for effect option models and resolve().
"""
import pytest
from pydantic import ValidationError

from microfx.animation.easing import Easing
from microfx.animation.timeline import INFINITE
from microfx.core.errors import ConfigurationError
from microfx.effects.options import (
    AppearOptions,
    ClickOptions,
    JumpCallOptions,
    PulseOptions,
    ShakeOptions,
    StopPulseOptions,
    StopShakeOptions,
    StopSwipeCallOptions,
    SpinCallOptions,
    SwipeCallOptions,
    ToggleSelectOptions,
    resolve,
)


def test_defaults():
    assert resolve(AppearOptions) == AppearOptions()
    click = resolve(ClickOptions)
    assert click.y_offset == -25.0
    assert click.x_scale == 0.85
    assert click.duration_in == 0.125
    assert click.ease_out is Easing.BACK_OUT


def test_mapping_and_overrides_merge():
    opts = resolve(ClickOptions, {"y_offset": -10.0, "x_scale": 0.9}, {"x_scale": 1.0})

    assert opts.y_offset == -10.0
    assert opts.x_scale == 1.0
    assert opts.duration_out == 0.25


def test_model_passthrough():
    opts = PulseOptions(scale=1.2)

    assert resolve(PulseOptions, opts) is opts


def test_model_with_overrides_keeps_explicit_fields():
    base = PulseOptions(scale=1.2, cooldown=1.0)

    opts = resolve(PulseOptions, base, {"cooldown": 0.5})

    assert opts.scale == 1.2
    assert opts.cooldown == 0.5
    assert base.cooldown == 1.0


def test_unknown_field_rejected():
    with pytest.raises(ConfigurationError, match="wobble"):
        resolve(ClickOptions, {"wobble": 1})


def test_wrong_options_type_rejected():
    with pytest.raises(ConfigurationError):
        resolve(ClickOptions, 5)


@pytest.mark.parametrize("overrides", [
    {"duration": -0.1},
    {"duration": float("nan")},
    {"delay": float("inf")},
    {"alpha_from": 1.5},
    {"ease": "not-an-ease"},
    {"alpha_ease": 42},
])
def test_invalid_values_rejected(overrides):
    with pytest.raises(ConfigurationError):
        resolve(AppearOptions, None, overrides)


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        resolve(SwipeCallOptions, {"duration": -1})


def test_options_are_frozen():
    opts = ClickOptions()

    with pytest.raises(ValidationError):
        opts.y_offset = 3.0


def test_ease_accepts_names_and_callables():
    linear = lambda t: t

    assert resolve(AppearOptions, {"ease": "back.out"}).ease == "back.out"
    assert resolve(AppearOptions, {"ease": linear}).ease is linear
    assert resolve(AppearOptions, {"ease": Easing.SINE_IN_OUT}).ease is Easing.SINE_IN_OUT


def test_toggle_select_requires_selected():
    with pytest.raises(ConfigurationError):
        resolve(ToggleSelectOptions)

    assert resolve(ToggleSelectOptions, {"selected": False}).scale == 1.25


def test_iterations_map_to_repeat():
    assert PulseOptions().repeat == INFINITE
    assert PulseOptions(iterations=1).repeat == 0
    assert PulseOptions(iterations=3).repeat == 2

    with pytest.raises(ValidationError):
        PulseOptions(iterations=0)


def test_infinite_effect_needs_a_period():
    with pytest.raises(ConfigurationError):
        resolve(PulseOptions, {"duration_in": 0, "duration_out": 0, "cooldown": 0})

    # cooldown alone is a valid period, and a finite run may be empty
    assert resolve(PulseOptions, {"duration_in": 0, "duration_out": 0}).cooldown == 3.0
    assert resolve(SwipeCallOptions, {"duration": 0, "iterations": 1}).cycle_duration == 0.0


def test_cycle_durations():
    assert PulseOptions().cycle_duration == 0.75
    assert JumpCallOptions().cycle_duration == 1.0
    assert JumpCallOptions(squash=0.2, squash_duration=0.125).cycle_duration == 1.125
    assert SpinCallOptions(duration=2.0).cycle_duration == 2.0
    assert SwipeCallOptions(duration=0.4).cycle_duration == 0.8
    assert ShakeOptions().cycle_duration == 0.6


def test_loop_defaults():
    assert PulseOptions().start_with_cooldown is True
    assert JumpCallOptions().start_with_cooldown is False
    assert SpinCallOptions().cooldown == 4.0
    assert SwipeCallOptions().cooldown == 0.0


def test_range_checks():
    with pytest.raises(ValidationError):
        JumpCallOptions(squash=1.0)
    with pytest.raises(ValidationError):
        SpinCallOptions(damping=1.5)
    with pytest.raises(ValidationError):
        ShakeOptions(frequency=0)
    with pytest.raises(ValidationError):
        ToggleSelectOptions(selected=True, anchor_x=2.0)


def test_stop_restore_values():
    assert StopPulseOptions().restore_values() == {}
    assert StopPulseOptions(scale=1.5).restore_values() == {"scale_x": 1.5, "scale_y": 1.5}
    assert StopSwipeCallOptions(x=3.0).restore_values() == {"x": 3.0}
    assert StopShakeOptions(x=1.0, y=2.0).restore_values() == {"x": 1.0, "y": 2.0}
