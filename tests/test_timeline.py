"""
Tests for Timeline composition, repetition and state.
"""
import math

import pytest

from microfx.animation.timeline import INFINITE, PlayState, Timeline
from microfx.core.errors import ConfigurationError


def test_sequential_tweens_chain_from_previous_target():
    """Test that a later tween on the same key starts where the earlier one ends."""
    bag = {"a": 0.0}
    timeline = Timeline().to(bag, {"a": 1.0}, 1.0).to(bag, {"a": 3.0}, 1.0)

    assert timeline.cycle_duration == 2.0
    assert timeline.tweens[1].from_values == {"a": 1.0}

    timeline.play()
    timeline.update(1.5)

    assert bag["a"] == pytest.approx(2.0)


def test_parallel_tracks_share_progress():
    bag = {"a": 0.0}
    other = {"b": 0.0}
    timeline = Timeline()
    timeline.to(bag, {"a": 1.0}, 1.0, at=0)
    timeline.to(other, {"b": 10.0}, 2.0, at=0)

    assert timeline.cycle_duration == 2.0

    timeline.play()
    timeline.update(0.5)

    assert bag["a"] == pytest.approx(0.5)
    assert other["b"] == pytest.approx(2.5)


def test_from_values_captured_at_schedule_time():
    """Test that a start delay does not change the captured start pose."""
    bag = {"a": 0.0}
    timeline = Timeline(delay=1.0).to(bag, {"a": 1.0}, 1.0)

    bag["a"] = 5.0  # moved by someone else during the delay
    timeline.play()
    timeline.update(1.5)

    assert bag["a"] == pytest.approx(0.5)


def test_wait_extends_cycle():
    bag = {"a": 0.0}
    timeline = Timeline().to(bag, {"a": 1.0}, 1.0).wait(0.5).to(bag, {"a": 0.0}, 1.0)

    assert timeline.cycle_duration == 2.5
    assert timeline.tweens[1].start_offset == 1.5


@pytest.mark.parametrize("repeat, cooldown_first, delay, expected", [
    (0, False, 0.0, 1.0),
    (2, False, 0.0, 4.0),
    (2, True, 0.0, 4.5),
    (2, False, 1.0, 5.0),
])
def test_total_duration(repeat, cooldown_first, delay, expected):
    timeline = Timeline(repeat=repeat, repeat_delay=0.5, cooldown_first=cooldown_first, delay=delay)
    timeline.to({"a": 0.0}, {"a": 1.0}, 1.0)

    assert timeline.total_duration == pytest.approx(expected)


def test_infinite_total_duration():
    timeline = Timeline(repeat=INFINITE).to({"a": 0.0}, {"a": 1.0}, 1.0)

    assert timeline.is_infinite
    assert timeline.total_duration == math.inf


def test_on_complete_fires_once():
    calls = []
    timeline = Timeline(repeat=1, on_complete=lambda: calls.append("done"))
    timeline.to({"a": 0.0}, {"a": 1.0}, 0.5)

    timeline.play()
    for _ in range(10):
        timeline.update(0.25)

    assert calls == ["done"]
    assert timeline.is_finished
    assert timeline.progress == 1.0


def test_infinite_timeline_never_completes():
    calls = []
    timeline = Timeline(repeat=INFINITE, on_complete=lambda: calls.append("done"))
    timeline.to({"a": 0.0}, {"a": 1.0}, 0.5)

    timeline.play()
    for _ in range(40):
        assert timeline.update(0.25)

    assert calls == []
    assert timeline.current_cycle == 20


def test_cooldown_first_delays_first_cycle():
    bag = {"a": 0.0}
    timeline = Timeline(repeat_delay=2.0, cooldown_first=True).to(bag, {"a": 1.0}, 1.0)

    timeline.play()
    timeline.update(1.0)
    assert bag["a"] == 0.0

    timeline.update(1.5)
    assert bag["a"] == pytest.approx(0.5)


def test_cooldown_between_cycles_holds_end_value():
    bag = {"a": 0.0}
    timeline = Timeline(repeat=1, repeat_delay=1.0).to(bag, {"a": 1.0}, 1.0)

    timeline.play()
    timeline.update(1.5)  # inside the cooldown
    assert bag["a"] == 1.0

    timeline.update(1.0)  # half a second into cycle two
    assert bag["a"] == pytest.approx(0.5)


def test_cycle_boundary_writes_exact_end_values():
    """Test that a tick crossing a cycle boundary finishes the old cycle first."""
    seen = []

    class Recorder(dict):
        def __setitem__(self, key, value):
            seen.append(value)
            super().__setitem__(key, value)

    bag = Recorder(a=0.0)
    timeline = Timeline(repeat=1).to(bag, {"a": 1.0}, 1.0)

    timeline.play()
    timeline.update(0.75)
    timeline.update(0.5)

    assert 1.0 in seen
    assert bag["a"] == pytest.approx(0.25)


def test_kill_halts_without_rewind_or_completion():
    bag = {"a": 0.0}
    completed = []
    killed = []
    timeline = Timeline(on_complete=lambda: completed.append(1)).to(bag, {"a": 1.0}, 1.0)
    timeline.add_kill_callback(lambda: killed.append(1))

    timeline.play()
    timeline.update(0.5)
    timeline.kill()
    timeline.kill()

    assert timeline.is_killed
    assert timeline.state is PlayState.KILLED
    assert not timeline.update(0.5)
    assert bag["a"] == pytest.approx(0.5)
    assert completed == []
    assert killed == [1]


def test_pause_and_resume():
    bag = {"a": 0.0}
    timeline = Timeline().to(bag, {"a": 1.0}, 1.0).play()

    timeline.pause()
    assert timeline.update(0.5)
    assert bag["a"] == 0.0

    timeline.resume()
    timeline.update(0.5)
    assert bag["a"] == pytest.approx(0.5)


def test_zero_length_timeline_completes_on_play():
    bag = {"a": 0.0}
    timeline = Timeline().to(bag, {"a": 2.0}, 0.0)

    timeline.play()

    assert timeline.is_finished
    assert bag["a"] == 2.0


def test_infinite_zero_period_is_rejected():
    timeline = Timeline(repeat=INFINITE).to({"a": 0.0}, {"a": 1.0}, 0.0)

    with pytest.raises(ConfigurationError):
        timeline.play()
    assert timeline.state is PlayState.IDLE


def test_cooldown_alone_makes_infinite_period_valid():
    timeline = Timeline(repeat=INFINITE, repeat_delay=1.0)

    timeline.play()

    assert timeline.is_alive


def test_cannot_add_after_play():
    timeline = Timeline().to({"a": 0.0}, {"a": 1.0}, 1.0).play()

    with pytest.raises(ConfigurationError):
        timeline.to({"b": 0.0}, {"b": 1.0}, 1.0)


@pytest.mark.parametrize("kwargs", [
    {"repeat": -2},
    {"repeat": 1.5},
    {"repeat": True},
    {"repeat_delay": -1.0},
    {"delay": math.nan},
])
def test_invalid_timing_options(kwargs):
    with pytest.raises(ConfigurationError):
        Timeline(**kwargs)


def test_targets_are_distinct_bags():
    bag = {"a": 0.0}
    other = {"b": 0.0}
    timeline = Timeline().to(bag, {"a": 1.0}, 1.0).to(other, {"b": 1.0}, 1.0).to(bag, {"a": 0.0}, 1.0)

    targets = timeline.targets()

    assert len(targets) == 2
    assert targets[0] is bag
    assert targets[1] is other


def test_complete_callback_error_is_logged(caplog):
    def broken():
        raise RuntimeError("boom")

    timeline = Timeline(on_complete=broken).to({"a": 0.0}, {"a": 1.0}, 0.5).play()
    timeline.update(1.0)

    assert timeline.is_finished
    assert "boom" in caplog.text
