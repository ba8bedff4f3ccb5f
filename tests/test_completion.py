"""
Tests for Completion signals.
"""
import asyncio

import pytest

from microfx.animation.completion import Completion, completion_for
from microfx.animation.timeline import Timeline
from microfx.core.errors import CompletionCancelled


def test_resolved_is_done():
    completion = Completion.resolved("empty")

    assert completion.done
    assert not completion.cancelled


def test_callbacks_run_once_on_done():
    completion = Completion()
    calls = []
    completion.add_done_callback(calls.append)

    completion.set_done()
    completion.set_done()
    completion.cancel()

    assert calls == [completion]
    assert not completion.cancelled


def test_callback_added_after_done_runs_immediately():
    completion = Completion.resolved()
    calls = []

    completion.add_done_callback(calls.append)

    assert calls == [completion]


def test_failing_callback_is_logged(caplog):
    completion = Completion("noisy")
    calls = []

    def broken(_):
        raise RuntimeError("callback failed")

    completion.add_done_callback(broken)
    completion.add_done_callback(calls.append)
    completion.set_done()

    assert "callback failed" in caplog.text
    assert calls == [completion]


def test_completion_follows_timeline():
    bag = {"a": 0.0}
    timeline = Timeline("fade").to(bag, {"a": 1.0}, 1.0)
    completion = completion_for(timeline)

    timeline.play()
    timeline.update(0.5)
    assert not completion.done

    timeline.update(0.5)
    assert completion.done
    assert completion.name == "fade"


def test_kill_cancels_completion():
    timeline = Timeline().to({"a": 0.0}, {"a": 1.0}, 1.0)
    completion = completion_for(timeline)

    timeline.play()
    timeline.kill()

    assert completion.cancelled
    assert completion.done


def test_completion_for_settled_timeline():
    finished = Timeline().to({"a": 0.0}, {"a": 1.0}, 0.0).play()
    killed = Timeline().to({"a": 0.0}, {"a": 1.0}, 1.0).play().kill()

    assert completion_for(finished).done
    assert completion_for(killed).cancelled


def test_await_resolves_when_set_later():
    async def main():
        completion = Completion()
        asyncio.get_running_loop().call_later(0.01, completion.set_done)
        await completion
        return completion.done

    assert asyncio.run(main())


def test_await_resolved_returns_immediately():
    async def main():
        await Completion.resolved()

    asyncio.run(main())


def test_await_cancelled_raises():
    async def main():
        completion = Completion("gone")
        asyncio.get_running_loop().call_later(0.01, completion.cancel)
        await completion

    with pytest.raises(CompletionCancelled):
        asyncio.run(main())


def test_await_already_cancelled_raises():
    completion = Completion()
    completion.cancel()

    async def main():
        await completion

    with pytest.raises(CompletionCancelled):
        asyncio.run(main())
