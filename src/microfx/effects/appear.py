"""Appear and disappear transitions.

Both animate opacity and ``micro.{x, y, scale_x, scale_y}`` in parallel.
A field joins the animated set only when its from and to values differ,
so fields a caller relies on are never force-written.
"""

from typing import Any, Dict, Sequence
import logging

from microfx.animation.timeline import Timeline
from microfx.effects.options import AppearOptions, DisappearOptions

logger = logging.getLogger(__name__)


def _changed_fields(pairs: Dict[str, tuple]) -> Dict[str, tuple]:
    return {key: (start, end) for key, (start, end) in pairs.items() if start != end}


def build_appear(elements: Sequence[Any], options: AppearOptions) -> Timeline:
    """Build the appear timeline for ``elements``.

    From-values are written to every element before this returns, so the
    elements sit at their start pose even while the delay runs.
    """
    fields = _changed_fields({
        "x": (options.x_from, options.x_to),
        "y": (options.y_from, options.y_to),
        "scale_x": (options.scale_from, options.scale_to),
        "scale_y": (options.scale_from, options.scale_to),
    })
    fade = options.alpha_from != options.alpha_to

    timeline = Timeline("appear", delay=options.delay)
    micro_to = {key: end for key, (_, end) in fields.items()}

    for element in elements:
        for key, (start, _) in fields.items():
            setattr(element.micro, key, start)
        if fade:
            element.opacity = options.alpha_from

        if micro_to:
            timeline.to(element.micro, micro_to, options.duration, options.ease, at=0)
        if fade:
            timeline.to(element, {"opacity": options.alpha_to}, options.duration, options.alpha_ease, at=0)

    if not timeline.tweens:
        timeline.wait(options.duration)

    logger.debug(f"appear: {len(elements)} elements, fields={sorted(micro_to)}, fade={fade}")
    return timeline


def build_disappear(elements: Sequence[Any], options: DisappearOptions) -> Timeline:
    """Build the disappear timeline, starting each element from where it is."""
    targets: Dict[str, float] = {}
    if options.x_to is not None:
        targets["x"] = options.x_to
    if options.y_to is not None:
        targets["y"] = options.y_to
    if options.scale_to is not None:
        targets["scale_x"] = options.scale_to
        targets["scale_y"] = options.scale_to

    timeline = Timeline("disappear", delay=options.delay)
    for element in elements:
        micro_to = {key: end for key, end in targets.items() if getattr(element.micro, key) != end}
        if micro_to:
            timeline.to(element.micro, micro_to, options.duration, options.ease, at=0)
        if options.alpha_to is not None and element.opacity != options.alpha_to:
            timeline.to(element, {"opacity": options.alpha_to}, options.duration, options.alpha_ease, at=0)

    if not timeline.tweens:
        timeline.wait(options.duration)
    return timeline
