"""Effect animator: the public entry point of the effect catalog.

One-shot effects (appear, disappear, click, toggle_select) return a
Completion covering every element passed in. Looping effects (pulse,
jump_call, spin_call, swipe_call, shake) register one handle per element
and run until stopped, superseded, or cut off by ``total_duration``.

Usage:
    animator = EffectAnimator()
    done = animator.appear(buttons, scale_from=0.8)
    animator.pulse(buttons[0], cooldown=2)
    ...
    animator.engine.update(delta)   # once per frame
    ...
    animator.stop_pulse(buttons[0])
"""

from typing import Any, Callable, List, Optional, Sequence, Type, Union
import logging

from microfx.animation.completion import Completion, completion_for
from microfx.animation.engine import AnimationEngine
from microfx.animation.registry import EffectKind, EffectRegistry, KindSpec
from microfx.animation.timeline import Timeline
from microfx.core.events import EventBus
from microfx.effects.appear import build_appear, build_disappear
from microfx.effects.click import build_click, build_toggle_select
from microfx.effects.jump import build_jump_call
from microfx.effects.options import (
    AppearOptions,
    ClickOptions,
    DisappearOptions,
    JumpCallOptions,
    LoopOptions,
    OptionsInput,
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
from microfx.effects.pulse import build_pulse
from microfx.effects.shake import build_shake
from microfx.effects.spin import build_spin_call
from microfx.effects.swipe import build_swipe_call
from microfx.elements.element import require_element, require_trackable

logger = logging.getLogger(__name__)

Targets = Union[Any, Sequence[Any], None]


def as_elements(targets: Targets) -> List[Any]:
    """Normalize one element or a sequence of elements to a checked list."""
    if targets is None:
        return []
    if isinstance(targets, (list, tuple)):
        elements = list(targets)
    else:
        elements = [targets]
    return [require_element(element) for element in elements]


class EffectAnimator:
    """Plays catalog effects on a shared clock.

    Args:
        engine: Clock to play on (a new one by default)
        registry: Lifecycle registry for looping effects (built on
            ``engine`` by default)
        bus: Event bus for lifecycle events when the registry is built here
    """

    def __init__(
        self,
        engine: Optional[AnimationEngine] = None,
        registry: Optional[EffectRegistry] = None,
        bus: Optional[EventBus] = None,
    ):
        if engine is None:
            engine = registry.engine if registry is not None else AnimationEngine()
        self.engine = engine
        # an empty registry is falsy (it has __len__)
        self.registry = registry if registry is not None else EffectRegistry(engine, bus=bus)

    # One-shot effects

    def appear(self, targets: Targets, options: OptionsInput = None, **overrides: Any) -> Completion:
        """Fade and scale elements in. From-values are applied immediately."""
        opts = resolve(AppearOptions, options, overrides)
        return self._play_once("appear", targets, lambda elements: build_appear(elements, opts))

    def disappear(self, targets: Targets, options: OptionsInput = None, **overrides: Any) -> Completion:
        """Fade and scale elements out from wherever they are."""
        opts = resolve(DisappearOptions, options, overrides)
        return self._play_once("disappear", targets, lambda elements: build_disappear(elements, opts))

    def click(self, targets: Targets, options: OptionsInput = None, **overrides: Any) -> Completion:
        """Press-and-release feedback."""
        opts = resolve(ClickOptions, options, overrides)
        return self._play_once("click", targets, lambda elements: build_click(elements, opts))

    def toggle_select(self, targets: Targets, options: OptionsInput = None, **overrides: Any) -> Completion:
        """Scale up selected elements, or back to 1 when deselected."""
        opts = resolve(ToggleSelectOptions, options, overrides)
        return self._play_once("toggle_select", targets, lambda elements: build_toggle_select(elements, opts))

    # Looping effects

    def pulse(self, targets: Targets, options: OptionsInput = None, **overrides: Any) -> None:
        opts = resolve(PulseOptions, options, overrides)
        self._start_loop(EffectKind.PULSE, targets, opts, build_pulse)

    def jump_call(self, targets: Targets, options: OptionsInput = None, **overrides: Any) -> None:
        opts = resolve(JumpCallOptions, options, overrides)
        self._start_loop(EffectKind.JUMP_CALL, targets, opts, build_jump_call)

    def spin_call(self, targets: Targets, options: OptionsInput = None, **overrides: Any) -> None:
        opts = resolve(SpinCallOptions, options, overrides)
        self._start_loop(EffectKind.SPIN_CALL, targets, opts, build_spin_call)

    def swipe_call(self, targets: Targets, options: OptionsInput = None, **overrides: Any) -> None:
        opts = resolve(SwipeCallOptions, options, overrides)
        self._start_loop(EffectKind.SWIPE_CALL, targets, opts, build_swipe_call)

    def shake(self, targets: Targets, options: OptionsInput = None, **overrides: Any) -> None:
        opts = resolve(ShakeOptions, options, overrides)
        self._start_loop(EffectKind.SHAKE, targets, opts, build_shake)

    # Stopping

    def stop_pulse(self, targets: Targets, options: OptionsInput = None, **overrides: Any) -> None:
        self._stop(EffectKind.PULSE, StopPulseOptions, targets, options, overrides)

    def stop_jump_call(self, targets: Targets, options: OptionsInput = None, **overrides: Any) -> None:
        self._stop(EffectKind.JUMP_CALL, StopJumpCallOptions, targets, options, overrides)

    def stop_spin_call(self, targets: Targets, options: OptionsInput = None, **overrides: Any) -> None:
        self._stop(EffectKind.SPIN_CALL, StopSpinCallOptions, targets, options, overrides)

    def stop_swipe_call(self, targets: Targets, options: OptionsInput = None, **overrides: Any) -> None:
        self._stop(EffectKind.SWIPE_CALL, StopSwipeCallOptions, targets, options, overrides)

    def stop_shake(self, targets: Targets, options: OptionsInput = None, **overrides: Any) -> None:
        self._stop(EffectKind.SHAKE, StopShakeOptions, targets, options, overrides)

    def stop_all(self, targets: Targets, options: OptionsInput = None, **overrides: Any) -> int:
        """Stop every looping effect on the elements.

        Returns:
            Number of effects stopped
        """
        opts = resolve(StopOptions, options, overrides)
        stopped = 0
        for element in as_elements(targets):
            for kind in self.registry.kinds(element):
                self.registry.stop(element, kind, duration=opts.duration, ease=opts.ease)
                stopped += 1
        return stopped

    # Internals

    def _play_once(
        self,
        name: str,
        targets: Targets,
        build: Callable[[List[Any]], Timeline],
    ) -> Completion:
        elements = as_elements(targets)
        if not elements:
            return Completion.resolved(name)

        timeline = build(elements)
        completion = completion_for(timeline, name)
        self.engine.play(timeline)
        logger.debug(f"{name} on {len(elements)} elements, {timeline.total_duration:.3f}s")
        return completion

    def _start_loop(
        self,
        kind: KindSpec,
        targets: Targets,
        opts: LoopOptions,
        build: Callable[[Any, Any], Timeline],
    ) -> None:
        # checked up front so a bad element leaves the batch untouched
        elements = [require_trackable(element) for element in as_elements(targets)]
        for element in elements:
            timeline = build(element, opts)
            self.registry.start(element, kind, timeline, cutoff=opts.total_duration)

    def _stop(
        self,
        kind: KindSpec,
        model: Type[StopOptions],
        targets: Targets,
        options: OptionsInput,
        overrides: dict,
    ) -> None:
        opts = resolve(model, options, overrides)
        for element in as_elements(targets):
            self.registry.stop(element, kind, opts.restore_values(), opts.duration, opts.ease)
