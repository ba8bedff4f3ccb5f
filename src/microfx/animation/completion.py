"""Completion signal for one-shot effects.

A Completion is resolved by the animation clock when a timeline finishes
and cancelled when it is killed. It can be polled, given callbacks, or
awaited from asyncio code:

    done = animator.appear(button)
    ...
    await done
"""

from typing import Callable, Generator, List, Optional
import asyncio
import logging

from microfx.core.errors import CompletionCancelled

logger = logging.getLogger(__name__)


class Completion:
    """One-shot signal that a timeline has finished."""

    def __init__(self, name: str = "completion"):
        self.name = name
        self._done = False
        self._cancelled = False
        self._callbacks: List[Callable[["Completion"], None]] = []

    @classmethod
    def resolved(cls, name: str = "completion") -> "Completion":
        """An already-fulfilled signal (used for empty element sets)."""
        completion = cls(name)
        completion.set_done()
        return completion

    @property
    def done(self) -> bool:
        """True once fulfilled or cancelled."""
        return self._done or self._cancelled

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def set_done(self) -> None:
        if self.done:
            return
        self._done = True
        self._run_callbacks()

    def cancel(self) -> None:
        if self.done:
            return
        self._cancelled = True
        logger.debug(f"Completion {self.name!r} cancelled")
        self._run_callbacks()

    def add_done_callback(self, callback: Callable[["Completion"], None]) -> None:
        """Call ``callback(self)`` when settled; immediately if already settled."""
        if self.done:
            callback(self)
        else:
            self._callbacks.append(callback)

    def _run_callbacks(self) -> None:
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback(self)
            except Exception as e:
                logger.error(f"Error in completion callback for {self.name!r}: {e}", exc_info=True)

    def __await__(self) -> Generator[object, None, None]:
        if self._done:
            return None
        if self._cancelled:
            raise CompletionCancelled(f"{self.name} was cancelled")

        loop = asyncio.get_running_loop()
        future: "asyncio.Future[None]" = loop.create_future()

        def settle(completion: "Completion") -> None:
            if future.done():
                return
            if completion.cancelled:
                future.set_exception(CompletionCancelled(f"{self.name} was cancelled"))
            else:
                future.set_result(None)

        self.add_done_callback(settle)
        yield from future.__await__()
        return None

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "done" if self._done else "pending"
        return f"Completion({self.name!r}, {state})"


def completion_for(timeline, name: Optional[str] = None) -> Completion:
    """Tie a Completion to a timeline's complete/kill callbacks."""
    completion = Completion(name or timeline.name)
    timeline.add_complete_callback(completion.set_done)
    timeline.add_kill_callback(completion.cancel)
    if timeline.is_finished:
        completion.set_done()
    elif timeline.is_killed:
        completion.cancel()
    return completion
