"""Swipe call: a looping nudge along a vector and back."""

from typing import Any

from microfx.animation.timeline import Timeline
from microfx.effects.options import SwipeCallOptions


def build_swipe_call(element: Any, options: SwipeCallOptions) -> Timeline:
    """Build one element's swipe loop.

    Both legs are relative to the element's position at schedule time;
    an axis with a zero component is left alone.
    """
    micro = element.micro
    origin = {}
    shifted = {}
    for key, delta in (("x", options.dx), ("y", options.dy)):
        if delta != 0:
            origin[key] = getattr(micro, key)
            shifted[key] = origin[key] + delta

    timeline = Timeline(
        "swipe_call",
        repeat=options.repeat,
        repeat_delay=options.cooldown,
        cooldown_first=options.start_with_cooldown,
    )
    if shifted:
        timeline.to(micro, shifted, options.duration, options.ease_in)
        timeline.to(micro, origin, options.duration, options.ease_out)
    else:
        timeline.wait(2 * options.duration)
    return timeline
