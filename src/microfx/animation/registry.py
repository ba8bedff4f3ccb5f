"""Effect lifecycle registry.

Associates at most one live timeline with each (element, effect kind)
pair. Starting a kind that is already running on an element replaces the
old timeline; stopping kills it and eases the element back to rest.

Elements are held weakly and keyed by identity, so two value-equal
elements never share a handle and a collected element takes its
handles (and their timelines) with it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union
import logging
import weakref

from microfx.animation.easing import Easing, EasingSpec
from microfx.animation.engine import AnimationEngine
from microfx.animation.timeline import Timeline
from microfx.animation.tween import check_duration
from microfx.core.events import EventBus, EventType, effect_event
from microfx.elements.element import REST_STATE
from microfx.utils.identity import WeakIdentityMap

logger = logging.getLogger(__name__)

DEFAULT_STOP_DURATION = 0.25
DEFAULT_STOP_EASE = Easing.QUAD_IN_OUT


class EffectKind(Enum):
    """Looping effects that are mutually exclusive per element."""

    PULSE = "pulse"
    JUMP_CALL = "jump_call"
    SPIN_CALL = "spin_call"
    SWIPE_CALL = "swipe_call"
    SHAKE = "shake"


KindSpec = Union[EffectKind, str]


def normalize_kind(kind: KindSpec) -> KindSpec:
    """Map known kind names to EffectKind; other strings stay free-form."""
    if isinstance(kind, EffectKind):
        return kind
    try:
        return EffectKind(kind)
    except ValueError:
        return kind


@dataclass
class EffectHandle:
    """The live timeline of one (element, kind) pair."""

    kind: KindSpec
    timeline: Timeline
    restore: Dict[str, Any] = field(default_factory=dict)
    cutoff: Optional[Timeline] = None

    def kill(self) -> None:
        if self.cutoff is not None:
            self.cutoff.kill()
        self.timeline.kill()


def _kill_handles(handles: Dict[KindSpec, EffectHandle]) -> None:
    for handle in list(handles.values()):
        handle.kill()
    handles.clear()


def rest_values_for(element: Any, timeline: Timeline) -> Dict[str, Any]:
    """Rest values of every micro field the timeline animates on ``element``."""
    micro = getattr(element, "micro", None)
    restore: Dict[str, Any] = {}
    for tween in timeline.tweens:
        if tween.target is not micro:
            continue
        for key in tween.keys:
            if key in REST_STATE:
                restore[key] = REST_STATE[key]
    return restore


class EffectRegistry:
    """Per-element, per-kind owner of looping effect timelines.

    Args:
        engine: Clock the timelines play on
        bus: Optional event bus for lifecycle events
    """

    def __init__(self, engine: AnimationEngine, bus: Optional[EventBus] = None):
        self.engine = engine
        self.bus = bus
        self._handles: WeakIdentityMap[Dict[KindSpec, EffectHandle]] = WeakIdentityMap(
            on_collect=_kill_handles
        )

    def start(
        self,
        element: Any,
        kind: KindSpec,
        timeline: Timeline,
        cutoff: Optional[float] = None,
        restore: Optional[Mapping[str, Any]] = None,
    ) -> Timeline:
        """Install and play ``timeline`` as the ``kind`` effect of ``element``.

        An existing handle for the same pair is killed first.

        Args:
            element: Animated element (must be weak-referenceable)
            kind: Effect kind key
            timeline: Unplayed timeline
            cutoff: Seconds after which the effect is stopped, or None
            restore: Rest values used by stop(); defaults to the rest
                values of the micro fields the timeline animates

        Returns:
            The playing timeline
        """
        kind = normalize_kind(kind)
        timeline.check_playable()
        if cutoff is not None:
            cutoff = check_duration("cutoff", cutoff)

        handles = self._handles.setdefault(element, dict)
        previous = handles.pop(kind, None)
        if previous is not None:
            previous.kill()
            logger.debug(f"{_kind_name(kind)} superseded on {_describe(element)}")
            self._publish(EventType.EFFECT_SUPERSEDED, element, kind)

        handle = EffectHandle(
            kind=kind,
            timeline=timeline,
            restore=dict(restore) if restore is not None else rest_values_for(element, timeline),
        )
        handles[kind] = handle

        element_ref = weakref.ref(element)
        timeline.add_complete_callback(lambda: self._on_finished(element_ref, kind, timeline))
        timeline.add_kill_callback(lambda: self._discard(element_ref, kind, timeline))

        self._publish(EventType.EFFECT_STARTED, element, kind, timeline=timeline.name)
        logger.debug(f"{_kind_name(kind)} started on {_describe(element)}")
        self.engine.play(timeline)

        if cutoff is not None and self._current(element, kind) is handle:
            handle.cutoff = self.engine.delayed_call(
                cutoff,
                lambda: self._cut_off(element_ref, kind, timeline),
                name=f"{_kind_name(kind)}_cutoff",
            )
        return timeline

    def stop(
        self,
        element: Any,
        kind: KindSpec,
        restore: Optional[Mapping[str, Any]] = None,
        duration: float = DEFAULT_STOP_DURATION,
        ease: EasingSpec = DEFAULT_STOP_EASE,
    ) -> Optional[Timeline]:
        """Kill the ``kind`` effect of ``element`` and ease it back to rest.

        A missing handle is a silent no-op.

        Args:
            element: Animated element
            kind: Effect kind key
            restore: Micro field values to return to, merged over the
                handle's rest values
            duration: Seconds for the restore tween
            ease: Easing of the restore tween

        Returns:
            The restore timeline, or None if nothing was running
        """
        kind = normalize_kind(kind)
        check_duration("duration", duration)

        handles = self._handles.get(element)
        if not handles or kind not in handles:
            return None

        handle = handles.pop(kind)
        if not handles:
            self._handles.pop(element)
        handle.kill()

        values = dict(handle.restore)
        values.update(restore or {})
        logger.debug(f"{_kind_name(kind)} stopped on {_describe(element)}")
        self._publish(EventType.EFFECT_STOPPED, element, kind)
        if not values:
            return None
        return self.engine.tween(
            element.micro, values, duration, ease, name=f"stop_{_kind_name(kind)}"
        )

    def get(self, element: Any, kind: KindSpec) -> Optional[Timeline]:
        """The live timeline for (element, kind), or None."""
        handle = self._current(element, normalize_kind(kind))
        return handle.timeline if handle is not None else None

    def has(self, element: Any, kind: KindSpec) -> bool:
        return self.get(element, kind) is not None

    def kinds(self, element: Any) -> List[KindSpec]:
        """Kinds currently running on ``element``."""
        handles = self._handles.get(element)
        return list(handles) if handles else []

    def dispose(self, element: Any) -> int:
        """Kill every effect of ``element`` without restoring.

        Returns:
            Number of handles removed
        """
        handles = self._handles.pop(element)
        if not handles:
            return 0
        count = len(handles)
        _kill_handles(handles)
        logger.debug(f"Disposed {count} effects on {_describe(element)}")
        return count

    def clear(self) -> None:
        """Kill every registered effect."""
        entries = list(self._handles.items())
        self._handles.clear()
        for _, handles in entries:
            _kill_handles(handles)

    def __len__(self) -> int:
        return sum(len(handles) for _, handles in self._handles.items())

    # Internals

    def _current(self, element: Any, kind: KindSpec) -> Optional[EffectHandle]:
        handles = self._handles.get(element)
        if not handles:
            return None
        return handles.get(kind)

    def _discard(self, element_ref: weakref.ref, kind: KindSpec, timeline: Timeline) -> bool:
        """Drop the handle only if it still belongs to ``timeline``."""
        element = element_ref()
        if element is None:
            return False
        handles = self._handles.get(element)
        if not handles:
            return False
        handle = handles.get(kind)
        if handle is None or handle.timeline is not timeline:
            return False
        del handles[kind]
        if handle.cutoff is not None:
            handle.cutoff.kill()
        if not handles:
            self._handles.pop(element)
        return True

    def _on_finished(self, element_ref: weakref.ref, kind: KindSpec, timeline: Timeline) -> None:
        if self._discard(element_ref, kind, timeline):
            element = element_ref()
            logger.debug(f"{_kind_name(kind)} completed on {_describe(element)}")
            self._publish(EventType.EFFECT_COMPLETED, element, kind)

    def _cut_off(self, element_ref: weakref.ref, kind: KindSpec, timeline: Timeline) -> None:
        element = element_ref()
        if element is None:
            return
        handle = self._current(element, kind)
        if handle is None or handle.timeline is not timeline:
            return
        logger.debug(f"{_kind_name(kind)} reached its total duration on {_describe(element)}")
        self.stop(element, kind)

    def _publish(self, event_type: EventType, element: Any, kind: KindSpec, **data: Any) -> None:
        if self.bus is not None and element is not None:
            self.bus.emit(effect_event(event_type, element, kind, **data))


def _kind_name(kind: KindSpec) -> str:
    return kind.value if isinstance(kind, EffectKind) else str(kind)


def _describe(element: Any) -> str:
    name = getattr(element, "name", None)
    return name or f"{type(element).__name__}@{id(element):x}"
