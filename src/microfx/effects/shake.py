"""Shake: looping random jitter around the element's position."""

from typing import Any, Optional

import numpy as np

from microfx.animation.timeline import Timeline
from microfx.effects.options import ShakeOptions


def shake_offsets(options: ShakeOptions, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Random (dx, dy) kicks for one cycle, shape (n, 2), within ``radius``.

    One kick per ``1 / frequency`` seconds, at least one; the cycle's last
    leg returns to the origin and is not included.
    """
    rng = rng if rng is not None else np.random.default_rng(options.seed)
    legs = max(2, int(round(options.duration * options.frequency)))
    angles = rng.uniform(0.0, 2 * np.pi, legs - 1)
    radii = rng.uniform(0.0, options.radius, legs - 1)
    return np.column_stack((np.cos(angles) * radii, np.sin(angles) * radii))


def build_shake(element: Any, options: ShakeOptions) -> Timeline:
    """Build one element's shake loop.

    The jitter path is drawn once per call, so a fixed ``seed`` gives the
    same path on every cycle and every run.
    """
    micro = element.micro
    origin_x, origin_y = micro.x, micro.y
    offsets = shake_offsets(options)
    leg = options.duration / (len(offsets) + 1)

    timeline = Timeline(
        "shake",
        repeat=options.repeat,
        repeat_delay=options.cooldown,
        cooldown_first=options.start_with_cooldown,
    )
    for dx, dy in offsets:
        timeline.to(micro, {"x": origin_x + float(dx), "y": origin_y + float(dy)}, leg, options.ease)
    timeline.to(micro, {"x": origin_x, "y": origin_y}, leg, options.ease)
    return timeline
