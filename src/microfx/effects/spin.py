"""Spin call: a looping rotation sway around the element's anchor."""

from typing import Any

from microfx.animation.timeline import Timeline
from microfx.effects.options import SpinCallOptions


def sway_angles(options: SpinCallOptions) -> list[float]:
    """Rotation targets of every leg, ending at 0.

    The first leg swings to ``+rotation``; each of the ``sway_count``
    following legs flips the sign and scales the magnitude by ``damping``.
    """
    angle = options.rotation
    angles = [angle]
    for _ in range(options.sway_count):
        angle = -angle * options.damping
        angles.append(angle)
    angles.append(0.0)
    return angles


def build_spin_call(element: Any, options: SpinCallOptions) -> Timeline:
    """Build one element's spin loop.

    ``options.duration`` is split evenly over the ``sway_count + 2`` legs,
    so a cycle always takes exactly ``duration`` seconds. The anchor is
    set immediately.
    """
    micro = element.micro
    micro.anchor_x = options.anchor_x
    micro.anchor_y = options.anchor_y

    angles = sway_angles(options)
    leg = options.duration / len(angles)

    timeline = Timeline(
        "spin_call",
        repeat=options.repeat,
        repeat_delay=options.cooldown,
        cooldown_first=options.start_with_cooldown,
    )
    for angle in angles:
        timeline.to(micro, {"rotation": angle}, leg, options.ease)
    return timeline
