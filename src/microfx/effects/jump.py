"""Jump call: a looping hop up and back down."""

from typing import Any

from microfx.animation.easing import Easing
from microfx.animation.timeline import Timeline
from microfx.effects.options import JumpCallOptions


def build_jump_call(element: Any, options: JumpCallOptions) -> Timeline:
    """Build one element's jump loop.

    Up is negative y, measured from the element's y at schedule time. With
    ``squash`` set, the element first squashes (wider, shorter) and
    stretches back to its rest scale while rising.
    """
    micro = element.micro
    base_y = micro.y

    timeline = Timeline(
        "jump_call",
        repeat=options.repeat,
        repeat_delay=options.cooldown,
        cooldown_first=options.start_with_cooldown,
    )

    if options.squash > 0:
        rest = {"scale_x": micro.scale_x, "scale_y": micro.scale_y}
        squashed = {
            "scale_x": rest["scale_x"] * (1 + options.squash),
            "scale_y": rest["scale_y"] * (1 - options.squash),
        }
        timeline.to(micro, squashed, options.squash_duration, Easing.QUAD_OUT)
        take_off = timeline.cycle_duration
        timeline.to(micro, {"y": base_y - options.jump_height}, options.duration_in, options.ease_in)
        timeline.to(micro, rest, options.duration_in, Easing.QUAD_OUT, at=take_off)
    else:
        timeline.to(micro, {"y": base_y - options.jump_height}, options.duration_in, options.ease_in)

    timeline.to(micro, {"y": base_y}, options.duration_out, options.ease_out)
    return timeline
