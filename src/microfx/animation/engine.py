"""Animation engine: the shared frame clock that drives every timeline."""

from typing import Any, Callable, List, Mapping, Optional
import asyncio
import logging

from microfx.animation.easing import Easing, EasingSpec
from microfx.animation.timeline import Timeline
from microfx.config.settings import EngineSettings

logger = logging.getLogger(__name__)


class AnimationEngine:
    """Central clock for all live timelines.

    Single-threaded and cooperative: every call to update() advances each
    live timeline once. Timelines started during a tick begin advancing on
    the next one. Finished and killed timelines are dropped at the end of
    the tick that observed them.
    """

    def __init__(
        self,
        max_frame_delta: Optional[float] = 0.5,
        global_speed: float = 1.0,
        fps: int = 60,
    ):
        self._timelines: List[Timeline] = []
        self._paused = False
        self._global_speed = max(0.0, global_speed)
        self.max_frame_delta = max_frame_delta
        self.fps = fps
        self._running = False
        self._time = 0.0

        # Animation event callbacks
        self._on_animation_start: List[Callable[[Timeline], None]] = []
        self._on_animation_end: List[Callable[[Timeline], None]] = []

        logger.debug("AnimationEngine initialized")

    @classmethod
    def from_settings(cls, settings: Optional[EngineSettings] = None) -> "AnimationEngine":
        """Build an engine from EngineSettings (defaults when omitted)."""
        settings = settings or EngineSettings()
        return cls(
            max_frame_delta=settings.max_frame_delta,
            global_speed=settings.global_speed,
            fps=settings.fps,
        )

    def play(self, timeline: Timeline) -> Timeline:
        """Start a timeline on this clock.

        A timeline that resolves instantly (nothing to wait for) completes
        inside this call and is never stored.

        Returns:
            The same timeline
        """
        timeline.play()
        if not timeline.is_alive:
            return timeline

        self._timelines.append(timeline)
        self._notify(self._on_animation_start, timeline)
        return timeline

    def tween(
        self,
        target: Any,
        values: Mapping[str, Any],
        duration: float,
        ease: EasingSpec = Easing.LINEAR,
        delay: float = 0.0,
        name: str = "tween",
    ) -> Timeline:
        """Play a one-shot single-tween timeline."""
        timeline = Timeline(name=name, delay=delay)
        timeline.to(target, values, duration, ease)
        return self.play(timeline)

    def delayed_call(self, delay: float, callback: Callable[[], None], name: str = "delayed_call") -> Timeline:
        """Invoke ``callback`` after ``delay`` seconds of clock time.

        The returned timeline can be killed to cancel the call.
        """
        timeline = Timeline(name=name, delay=delay, on_complete=callback)
        return self.play(timeline)

    def update(self, delta: float) -> int:
        """Advance every live timeline.

        Args:
            delta: Seconds since the previous tick

        Returns:
            Number of timelines still alive after the tick
        """
        if self._paused or delta <= 0:
            return len(self._timelines)

        if self.max_frame_delta is not None and delta > self.max_frame_delta:
            logger.debug(f"Large frame delta {delta:.3f}s clamped to {self.max_frame_delta:.3f}s")
            delta = self.max_frame_delta

        adjusted_delta = delta * self._global_speed
        self._time += adjusted_delta

        for timeline in list(self._timelines):
            timeline.update(adjusted_delta)

        ended = [t for t in self._timelines if not t.is_alive]
        if ended:
            self._timelines = [t for t in self._timelines if t.is_alive]
            for timeline in ended:
                self._notify(self._on_animation_end, timeline)

        return len(self._timelines)

    def kill_all(self) -> int:
        """Kill every live timeline.

        Returns:
            Number of timelines killed
        """
        timelines, self._timelines = self._timelines, []
        for timeline in timelines:
            timeline.kill()
            self._notify(self._on_animation_end, timeline)
        if timelines:
            logger.debug(f"Killed {len(timelines)} timelines")
        return len(timelines)

    def kill_targets(self, target: Any) -> int:
        """Kill every timeline touching ``target``.

        ``target`` may be a property bag or an element; for an element its
        ``micro`` and ``color`` bags count as well.
        """
        bags = {id(target)}
        for attr in ("micro", "color"):
            bag = getattr(target, attr, None)
            if bag is not None:
                bags.add(id(bag))

        killed = 0
        for timeline in list(self._timelines):
            if any(id(bag) in bags for bag in timeline.targets()):
                timeline.kill()
                killed += 1
        return killed

    def pause(self) -> None:
        """Freeze the clock; timelines keep their positions."""
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def global_speed(self) -> float:
        """Get the global speed multiplier."""
        return self._global_speed

    @global_speed.setter
    def global_speed(self, value: float) -> None:
        self._global_speed = max(0.0, value)

    @property
    def count(self) -> int:
        """Number of live timelines."""
        return len(self._timelines)

    @property
    def timelines(self) -> List[Timeline]:
        return list(self._timelines)

    @property
    def time(self) -> float:
        """Clock time accumulated by update(), in seconds."""
        return self._time

    # Event registration
    def on_animation_start(self, callback: Callable[[Timeline], None]) -> None:
        """Register a callback for when timelines start."""
        self._on_animation_start.append(callback)

    def on_animation_end(self, callback: Callable[[Timeline], None]) -> None:
        """Register a callback for when timelines finish or are killed."""
        self._on_animation_end.append(callback)

    def _notify(self, callbacks: List[Callable[[Timeline], None]], timeline: Timeline) -> None:
        for callback in callbacks:
            try:
                callback(timeline)
            except Exception as e:
                logger.warning(f"Animation listener failed for {timeline.name!r}: {e}")

    # Realtime driving

    async def run(self, fps: Optional[int] = None) -> None:
        """Drive the clock from the running asyncio loop until stop()."""
        frame_time = 1.0 / (fps or self.fps)
        loop = asyncio.get_running_loop()
        self._running = True
        last = loop.time()
        logger.info(f"AnimationEngine running at {fps or self.fps} fps")

        while self._running:
            await asyncio.sleep(frame_time)
            now = loop.time()
            self.update(now - last)
            last = now

        logger.info("AnimationEngine stopped")

    def stop(self) -> None:
        """Stop a run() loop. Live timelines are kept."""
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running
