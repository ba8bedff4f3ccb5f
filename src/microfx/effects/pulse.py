"""Pulse: a looping scale-up and back, gated by a cooldown."""

from typing import Any

from microfx.animation.timeline import Timeline
from microfx.effects.options import PulseOptions


def build_pulse(element: Any, options: PulseOptions) -> Timeline:
    """Build one element's pulse loop.

    The return leg goes back to the scale the element had when the pulse
    was scheduled.
    """
    micro = element.micro
    rest = {"scale_x": micro.scale_x, "scale_y": micro.scale_y}

    timeline = Timeline(
        "pulse",
        repeat=options.repeat,
        repeat_delay=options.cooldown,
        cooldown_first=options.start_with_cooldown,
    )
    timeline.to(micro, {"scale_x": options.scale, "scale_y": options.scale}, options.duration_in, options.ease_in)
    timeline.to(micro, rest, options.duration_out, options.ease_out)
    return timeline
