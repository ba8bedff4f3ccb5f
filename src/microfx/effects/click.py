"""Click feedback and selection toggling."""

from typing import Any, Dict, Sequence

from microfx.animation.timeline import Timeline
from microfx.effects.options import ClickOptions, ToggleSelectOptions


def build_click(elements: Sequence[Any], options: ClickOptions) -> Timeline:
    """Squash into a pressed pose, then spring back to rest.

    The release tween starts strictly after the press tween ends. Only
    fields whose pressed value differs from rest are animated.
    """
    pressed: Dict[str, float] = {}
    released: Dict[str, float] = {}
    for key, value, rest in (
        ("x", options.x_offset, 0.0),
        ("y", options.y_offset, 0.0),
        ("scale_x", options.x_scale, 1.0),
        ("scale_y", options.y_scale, 1.0),
    ):
        if value != rest:
            pressed[key] = value
            released[key] = rest

    timeline = Timeline("click", delay=options.delay)
    for element in elements:
        if not pressed:
            break
        timeline.to(element.micro, pressed, options.duration_in, options.ease_in, at=0)
        timeline.to(element.micro, released, options.duration_out, options.ease_out, at=options.duration_in)

    if not timeline.tweens:
        timeline.wait(options.duration_in + options.duration_out)
    return timeline


def build_toggle_select(elements: Sequence[Any], options: ToggleSelectOptions) -> Timeline:
    """Scale up to ``options.scale`` when selected, back to 1 when not."""
    scale = options.scale if options.selected else 1.0
    timeline = Timeline("select" if options.selected else "deselect")

    for element in elements:
        # anchors jump immediately so the scale pivots around them
        if options.anchor_x is not None:
            element.micro.anchor_x = options.anchor_x
        if options.anchor_y is not None:
            element.micro.anchor_y = options.anchor_y
        timeline.to(element.micro, {"scale_x": scale, "scale_y": scale}, options.duration, options.ease, at=0)

    return timeline
