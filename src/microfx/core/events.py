"""
Event bus for microfx.

Carries effect lifecycle notices from the registry and frame ticks from
the clock driver to whoever listens (host UI, simulator, demo logger).
Handlers may be plain functions or coroutines.
"""

from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional
from enum import Enum, auto
import asyncio
import inspect
import logging
import time
import weakref

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Built-in event types."""
    # Effect lifecycle, data: {"element": weakref, "kind": EffectKind | str}
    EFFECT_STARTED = auto()
    EFFECT_STOPPED = auto()
    EFFECT_COMPLETED = auto()
    EFFECT_SUPERSEDED = auto()

    # Clock
    TICK = auto()  # data: {"delta": seconds, "frame": n}

    SHUTDOWN = auto()


@dataclass
class Event:
    """
    One published notice.

    Attributes:
        type: EventType member or a custom string topic
        data: Payload
        source: Publishing component ("registry", "clock", ...)
        timestamp: Wall-clock creation time
    """
    type: EventType | str
    data: dict[str, Any] = field(default_factory=dict)
    source: str = "system"
    timestamp: float = field(default_factory=time.time)


SyncHandler = Callable[[Event], None]
AsyncHandler = Callable[[Event], Awaitable[None]]
Handler = SyncHandler | AsyncHandler

# Subscription key for handlers that receive every topic
_ANY = None


class EventBus:
    """
    Topic-based publish/subscribe hub.

    ``emit`` delivers synchronously to plain handlers and is what the
    registry uses mid-tick. ``emit_async`` and the queue also await
    coroutine handlers. Handler failures are logged, never raised.

    Args:
        history_limit: Number of recent non-tick events kept for
            inspection
    """

    def __init__(self, history_limit: int = 100) -> None:
        self._subscribers: dict[Optional[EventType | str], list[Handler]] = defaultdict(list)
        self._pending: Optional[asyncio.Queue[Event]] = None
        self._history: deque[Event] = deque(maxlen=history_limit)

    @property
    def queue(self) -> asyncio.Queue[Event]:
        # built on first use so a bus can exist before the loop does
        if self._pending is None:
            self._pending = asyncio.Queue()
        return self._pending

    def subscribe(self, event_type: EventType | str, handler: Handler) -> Callable[[], None]:
        """
        Listen to one topic.

        Args:
            event_type: Topic to listen for
            handler: Function or coroutine function taking the Event

        Returns:
            Function that removes the subscription (safe to call twice)
        """
        return self._add(event_type, handler)

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        """Listen to every topic. Returns the unsubscribe function."""
        return self._add(_ANY, handler)

    def _add(self, key: Optional[EventType | str], handler: Handler) -> Callable[[], None]:
        handlers = self._subscribers[key]
        handlers.append(handler)
        logger.debug(f"Handler subscribed to {key or 'all events'}")

        def unsubscribe() -> None:
            if handler in handlers:
                handlers.remove(handler)
                logger.debug(f"Handler unsubscribed from {key or 'all events'}")

        return unsubscribe

    def emit(self, event: Event) -> None:
        """Publish now. Coroutine handlers are skipped; use emit_async for those."""
        self._record(event)
        for handler in self._targets(event):
            if not inspect.iscoroutinefunction(handler):
                self._call(handler, event)

    async def emit_async(self, event: Event) -> None:
        """Publish now and await coroutine handlers."""
        self._record(event)
        await self._deliver(event)

    def queue_event(self, event: Event) -> None:
        """Defer an event until the next process_queue()."""
        self.queue.put_nowait(event)

    async def process_queue(self) -> None:
        """Deliver every deferred event, in order."""
        while not self.queue.empty():
            event = self.queue.get_nowait()
            self._record(event)
            await self._deliver(event)
            self.queue.task_done()

    def get_history(self, event_type: EventType | str | None = None, limit: int = 10) -> list[Event]:
        """Most recent events, optionally of one topic, oldest first."""
        events = [e for e in self._history if event_type is None or e.type == event_type]
        return events[-limit:]

    def clear_history(self) -> None:
        self._history.clear()

    def _targets(self, event: Event) -> list[Handler]:
        # copied so handlers may unsubscribe while being called
        return [*self._subscribers.get(event.type, ()), *self._subscribers.get(_ANY, ())]

    def _call(self, handler: SyncHandler, event: Event) -> None:
        try:
            handler(event)
        except Exception as e:
            logger.error(f"Error in handler for {event.type}: {e}")

    async def _deliver(self, event: Event) -> None:
        coroutines = []
        for handler in self._targets(event):
            if inspect.iscoroutinefunction(handler):
                coroutines.append(handler(event))
            else:
                self._call(handler, event)
        if not coroutines:
            return

        for result in await asyncio.gather(*coroutines, return_exceptions=True):
            if isinstance(result, Exception):
                logger.error(f"Error in async handler for {event.type}: {result}")

    def _record(self, event: Event) -> None:
        # ticks arrive every frame and would flush everything else out
        if event.type is not EventType.TICK:
            self._history.append(event)


def tick_event(delta: float, frame: int) -> Event:
    """Frame tick published by the clock driver."""
    return Event(EventType.TICK, data={"delta": delta, "frame": frame}, source="clock")


def effect_event(event_type: EventType, element: Any, kind: Any, **data: Any) -> Event:
    """Effect lifecycle notice.

    The element travels as a weak reference (``data["element"]()``) so
    the history never keeps a discarded element alive.
    """
    return Event(event_type, data={"element": weakref.ref(element), "kind": kind, **data}, source="registry")
