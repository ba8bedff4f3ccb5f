"""Timeline: a schedulable group of tweens sharing one time origin.

Tweens sit at explicit start offsets inside a cycle. Tweens sharing an
offset run in parallel; later offsets run after earlier ones. A cycle
lasts until its last tween (or wait) ends, and can be repeated a finite
number of times or forever, with a cooldown between cycles.

Usage:
    timeline = Timeline("pulse", repeat=INFINITE, repeat_delay=3.0)
    timeline.to(element.micro, {"scale_x": 1.1, "scale_y": 1.1}, 0.25)
    timeline.to(element.micro, {"scale_x": 1.0, "scale_y": 1.0}, 0.5)
    engine.play(timeline)
"""

from typing import Any, Callable, Dict, List, Mapping, Optional
from enum import Enum, auto
import logging
import math

from microfx.animation.easing import Easing, EasingSpec
from microfx.animation.tween import Tween, check_duration
from microfx.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

INFINITE = -1


class PlayState(Enum):
    """Timeline playback state."""

    IDLE = auto()
    PLAYING = auto()
    PAUSED = auto()
    FINISHED = auto()
    KILLED = auto()


class Timeline:
    """Composed, repeatable group of tweens.

    Attributes:
        name: Identifier used in logs
        repeat: Extra cycles after the first (0 = play once, INFINITE = loop)
        repeat_delay: Cooldown in seconds between cycles
        cooldown_first: If True the cooldown also precedes the first cycle
        delay: One-time start delay in seconds
    """

    def __init__(
        self,
        name: str = "timeline",
        repeat: int = 0,
        repeat_delay: float = 0.0,
        cooldown_first: bool = False,
        delay: float = 0.0,
        on_complete: Optional[Callable[[], None]] = None,
    ):
        if isinstance(repeat, bool) or not isinstance(repeat, int) or repeat < INFINITE:
            raise ConfigurationError(f"repeat must be an int >= 0 or INFINITE, got {repeat!r}")

        self.name = name
        self.repeat = repeat
        self.repeat_delay = check_duration("repeat_delay", repeat_delay)
        self.cooldown_first = cooldown_first
        self.delay = check_duration("delay", delay)

        self._tweens: List[Tween] = []
        self._cursor = 0.0

        self._complete_callbacks: List[Callable[[], None]] = []
        self._kill_callbacks: List[Callable[[], None]] = []
        if on_complete is not None:
            self._complete_callbacks.append(on_complete)

        # Playback state
        self._state = PlayState.IDLE
        self._elapsed = 0.0
        self._cycle = -1
        self._done: List[bool] = []

    # Building

    def to(
        self,
        target: Any,
        values: Mapping[str, Any],
        duration: float,
        ease: EasingSpec = Easing.LINEAR,
        at: Optional[float] = None,
        from_values: Optional[Mapping[str, Any]] = None,
    ) -> "Timeline":
        """Add a tween on ``target``.

        Args:
            target: Property bag to animate
            values: Keys and end values
            duration: Seconds
            ease: Easing for this tween
            at: Offset in the cycle; None appends after everything so far
            from_values: Explicit start values; captured now when omitted

        Returns:
            Self for method chaining
        """
        offset = self._cursor if at is None else at
        return self.add(Tween(target, values, duration, ease, offset, from_values))

    def wait(self, duration: float) -> "Timeline":
        """Extend the cycle by an empty span."""
        self._cursor += check_duration("wait", duration)
        return self

    def add(self, tween: Tween) -> "Timeline":
        """Insert a tween, capturing its from-values at schedule time."""
        if self._state is not PlayState.IDLE:
            raise ConfigurationError(f"Cannot add tweens to {self.name!r} after it started")

        if not tween.is_captured:
            tween.capture(self._projected_values(tween))

        self._tweens.append(tween)
        # stable sort keeps insertion order among tweens sharing an offset
        self._tweens.sort(key=lambda t: t.start_offset)
        self._cursor = max(self._cursor, tween.end_offset)
        return self

    def _projected_values(self, tween: Tween) -> Dict[str, Any]:
        """End values left by earlier tweens of this timeline on the same keys."""
        projected: Dict[str, Any] = {}
        best_end: Dict[str, float] = {}
        for other in self._tweens:
            if other.target is not tween.target or other.start_offset > tween.start_offset:
                continue
            for key in tween.keys:
                if key in other.to_values and other.end_offset >= best_end.get(key, -1.0):
                    projected[key] = other.to_values[key]
                    best_end[key] = other.end_offset
        return projected

    # Callbacks

    def add_complete_callback(self, callback: Callable[[], None]) -> "Timeline":
        """Register a callback for finite completion (never fires when looping)."""
        self._complete_callbacks.append(callback)
        return self

    def add_kill_callback(self, callback: Callable[[], None]) -> "Timeline":
        """Register a callback for kill()."""
        self._kill_callbacks.append(callback)
        return self

    def _fire(self, callbacks: List[Callable[[], None]], what: str) -> None:
        for callback in list(callbacks):
            try:
                callback()
            except Exception as e:
                logger.error(f"Error in {what} callback of {self.name!r}: {e}", exc_info=True)

    # Timing

    @property
    def tweens(self) -> List[Tween]:
        return list(self._tweens)

    @property
    def cycle_duration(self) -> float:
        """Length of one cycle without cooldown."""
        return self._cursor

    @property
    def period(self) -> float:
        """Length of one cycle including its cooldown."""
        return self._cursor + self.repeat_delay

    @property
    def is_infinite(self) -> bool:
        return self.repeat == INFINITE

    @property
    def total_duration(self) -> float:
        """Seconds from play() to completion, math.inf when looping."""
        if self.is_infinite:
            return math.inf
        cycles = self.repeat + 1
        cooldowns = cycles if self.cooldown_first else self.repeat
        return self.delay + cycles * self._cursor + cooldowns * self.repeat_delay

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def current_cycle(self) -> int:
        """Index of the cycle being played, -1 before the first one starts."""
        return self._cycle

    @property
    def progress(self) -> float:
        """Normalized progress; for looping timelines, progress inside the current period."""
        if self._state is PlayState.FINISHED:
            return 1.0
        if self.is_infinite:
            active = self._elapsed - self.delay
            if active <= 0 or self.period <= 0:
                return 0.0
            return (active % self.period) / self.period
        total = self.total_duration
        if total <= 0:
            return 1.0 if self._state is not PlayState.IDLE else 0.0
        return min(1.0, self._elapsed / total)

    # State

    @property
    def state(self) -> PlayState:
        return self._state

    @property
    def is_alive(self) -> bool:
        """True while playing or paused."""
        return self._state in (PlayState.PLAYING, PlayState.PAUSED)

    @property
    def is_killed(self) -> bool:
        return self._state is PlayState.KILLED

    @property
    def is_finished(self) -> bool:
        return self._state is PlayState.FINISHED

    def targets(self) -> List[Any]:
        """Distinct property bags touched by this timeline."""
        seen: Dict[int, Any] = {}
        for tween in self._tweens:
            seen.setdefault(id(tween.target), tween.target)
        return list(seen.values())

    # Playback

    def check_playable(self) -> None:
        """Raise ConfigurationError if play() would reject this timeline."""
        if self.is_infinite and self.period <= 0:
            raise ConfigurationError(f"Looping timeline {self.name!r} has a zero-length period")

    def play(self) -> "Timeline":
        """Start playback from time zero.

        Raises:
            ConfigurationError: For a looping timeline with nothing to play
        """
        if self._state is not PlayState.IDLE:
            return self
        self.check_playable()

        self._state = PlayState.PLAYING
        self._elapsed = 0.0
        self._cycle = -1
        self._done = [False] * len(self._tweens)
        logger.debug(
            f"Timeline {self.name!r} playing: {len(self._tweens)} tweens, "
            f"cycle={self.cycle_duration:.3f}s, repeat={self.repeat}"
        )
        self._advance()
        return self

    def pause(self) -> "Timeline":
        if self._state is PlayState.PLAYING:
            self._state = PlayState.PAUSED
        return self

    def resume(self) -> "Timeline":
        if self._state is PlayState.PAUSED:
            self._state = PlayState.PLAYING
        return self

    def kill(self) -> "Timeline":
        """Halt immediately. No rewind, no completion callback. Idempotent."""
        if self._state in (PlayState.FINISHED, PlayState.KILLED):
            return self
        self._state = PlayState.KILLED
        logger.debug(f"Timeline {self.name!r} killed at {self._elapsed:.3f}s")
        self._fire(self._kill_callbacks, "kill")
        return self

    def update(self, delta: float) -> bool:
        """Advance by ``delta`` seconds.

        Returns:
            True if the timeline is still alive
        """
        if self._state is not PlayState.PLAYING:
            return self._state is PlayState.PAUSED

        self._elapsed += delta
        self._advance()
        return self.is_alive

    def _advance(self) -> None:
        active = self._elapsed - self.delay
        if active < 0:
            return

        if not self.is_infinite and self._elapsed >= self.total_duration:
            self._complete()
            return

        period = self.period
        cycle = int(active // period) if period > 0 else 0
        if not self.is_infinite:
            cycle = min(cycle, self.repeat)

        if cycle != self._cycle:
            if self._cycle >= 0:
                self._finish_cycle()
            self._cycle = cycle
            self._done = [False] * len(self._tweens)

        local = active - cycle * period
        if self.cooldown_first:
            local -= self.repeat_delay
        if local < 0:
            return
        self._render(min(local, self.cycle_duration))

    def _render(self, local: float) -> None:
        # parallel tweens all read the same local time for this tick
        for index, tween in enumerate(self._tweens):
            if self._done[index] or local < tween.start_offset:
                continue
            if tween.render(local) >= 1.0:
                self._done[index] = True

    def _finish_cycle(self) -> None:
        for index, tween in enumerate(self._tweens):
            if not self._done[index]:
                tween.finish()
                self._done[index] = True

    def _complete(self) -> None:
        last = self.repeat
        if self._cycle != last:
            self._cycle = last
            self._done = [False] * len(self._tweens)
        self._finish_cycle()

        self._state = PlayState.FINISHED
        logger.debug(f"Timeline {self.name!r} completed after {self._elapsed:.3f}s")
        self._fire(self._complete_callbacks, "complete")

    def __repr__(self) -> str:
        return (
            f"Timeline(name={self.name!r}, state={self._state.name}, tweens={len(self._tweens)}, "
            f"cycle={self.cycle_duration:.3f}, repeat={self.repeat})"
        )
