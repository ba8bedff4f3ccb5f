"""
Tests for the AnimationEngine clock.
"""
import asyncio

import pytest

from microfx.animation.completion import completion_for
from microfx.animation.engine import AnimationEngine
from microfx.animation.timeline import INFINITE, Timeline
from microfx.config.settings import EngineSettings
from microfx.elements.element import AnimatedElement


def test_update_advances_and_drops_finished(engine):
    bag = {"a": 0.0}
    engine.tween(bag, {"a": 1.0}, 0.5)

    assert engine.count == 1
    assert engine.update(0.25) == 1
    assert bag["a"] == pytest.approx(0.5)

    assert engine.update(0.25) == 0
    assert bag["a"] == 1.0
    assert engine.timelines == []


def test_large_delta_is_clamped():
    engine = AnimationEngine(max_frame_delta=0.1)
    bag = {"a": 0.0}
    engine.tween(bag, {"a": 1.0}, 1.0)

    engine.update(0.5)

    assert bag["a"] == pytest.approx(0.1)
    assert engine.time == pytest.approx(0.1)


def test_global_speed_scales_time(engine):
    bag = {"a": 0.0}
    engine.global_speed = 2.0
    engine.tween(bag, {"a": 1.0}, 1.0)

    engine.update(0.25)

    assert bag["a"] == pytest.approx(0.5)


def test_negative_speed_is_floored(engine):
    engine.global_speed = -1.0

    assert engine.global_speed == 0.0


def test_pause_freezes_every_timeline(engine):
    bag = {"a": 0.0}
    engine.tween(bag, {"a": 1.0}, 1.0)

    engine.pause()
    engine.update(0.5)
    assert engine.is_paused
    assert bag["a"] == 0.0

    engine.resume()
    engine.update(0.5)
    assert bag["a"] == pytest.approx(0.5)


def test_delayed_call_runs_on_the_clock(engine):
    calls = []
    engine.delayed_call(1.0, lambda: calls.append(engine.time))

    engine.update(0.5)
    assert calls == []

    engine.update(0.5)
    assert calls == [1.0]
    assert engine.count == 0


def test_killed_delayed_call_never_runs(engine):
    calls = []
    timer = engine.delayed_call(0.5, lambda: calls.append(1))

    timer.kill()
    engine.update(1.0)

    assert calls == []
    assert engine.count == 0


def test_timeline_started_during_tick_waits_for_next_tick(engine):
    bag = {"a": 0.0}
    engine.delayed_call(0.5, lambda: engine.tween(bag, {"a": 1.0}, 1.0))

    engine.update(0.5)
    assert engine.count == 1
    assert bag["a"] == 0.0

    engine.update(0.5)
    assert bag["a"] == pytest.approx(0.5)


def test_instant_timeline_is_not_stored(engine):
    bag = {"a": 0.0}
    engine.tween(bag, {"a": 1.0}, 0.0)

    assert bag["a"] == 1.0
    assert engine.count == 0


def test_kill_targets_matches_element_bags(engine):
    element = AnimatedElement()
    other = AnimatedElement()
    on_micro = engine.tween(element.micro, {"x": 5.0}, 1.0)
    on_opacity = engine.tween(element, {"opacity": 0.0}, 1.0)
    unrelated = engine.tween(other.micro, {"x": 5.0}, 1.0)

    assert engine.kill_targets(element) == 2

    assert on_micro.is_killed
    assert on_opacity.is_killed
    assert unrelated.is_alive
    engine.update(0.1)
    assert engine.count == 1


def test_kill_all_notifies_listeners(engine):
    ended = []
    engine.on_animation_end(ended.append)
    first = engine.tween({"a": 0.0}, {"a": 1.0}, 1.0)
    second = Timeline(repeat=INFINITE).to({"b": 0.0}, {"b": 1.0}, 1.0)
    engine.play(second)

    assert engine.kill_all() == 2
    assert ended == [first, second]
    assert engine.count == 0


def test_listeners_see_start_and_end(engine):
    started = []
    ended = []
    engine.on_animation_start(started.append)
    engine.on_animation_end(ended.append)

    timeline = engine.tween({"a": 0.0}, {"a": 1.0}, 0.5)
    engine.update(0.5)

    assert started == [timeline]
    assert ended == [timeline]


def test_failing_listener_does_not_break_tick(engine, caplog):
    def broken(timeline):
        raise RuntimeError("listener down")

    engine.on_animation_end(broken)
    bag = {"a": 0.0}
    engine.tween(bag, {"a": 1.0}, 0.25)
    engine.tween(bag, {"a": 1.0}, 0.25)

    engine.update(0.25)

    assert engine.count == 0
    assert "listener down" in caplog.text


def test_from_settings():
    engine = AnimationEngine.from_settings(EngineSettings(fps=30, global_speed=0.5, max_frame_delta=0.2))

    assert engine.fps == 30
    assert engine.global_speed == 0.5
    assert engine.max_frame_delta == 0.2


def test_run_drives_the_clock_from_asyncio():
    """Test that run() ticks timelines until stop()."""
    engine = AnimationEngine()
    bag = {"a": 0.0}

    async def main():
        done = completion_for(engine.tween(bag, {"a": 1.0}, 0.05))
        task = asyncio.create_task(engine.run(fps=200))
        await asyncio.wait_for(done, timeout=5.0)
        assert engine.is_running
        engine.stop()
        await task

    asyncio.run(main())

    assert bag["a"] == 1.0
    assert not engine.is_running
