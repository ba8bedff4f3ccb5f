"""
Main entry point for microfx.

Runs the pygame preview window in simulator mode, or a headless demo
that plays every effect on a scripted clock and logs element state.
"""

import asyncio
import logging
import sys

from microfx.config.settings import Settings, get_settings
from microfx.core.events import EventBus, EventType, Event


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


async def run_simulator(settings: Settings) -> None:
    """Run the preview window."""
    from microfx.animation.engine import AnimationEngine
    from microfx.simulator.window import SimulatorWindow, WindowConfig

    event_bus = EventBus()
    engine = AnimationEngine.from_settings(settings.engine)
    window = SimulatorWindow(
        config=WindowConfig.from_settings(settings.simulator),
        engine=engine,
        event_bus=event_bus
    )

    await window.run()


async def run_headless(settings: Settings) -> None:
    """Play every effect on a scripted clock and log what happens."""
    from microfx.animation.completion import Completion
    from microfx.animation.engine import AnimationEngine
    from microfx.effects.animator import EffectAnimator
    from microfx.elements.element import AnimatedElement

    logger = logging.getLogger(__name__)
    event_bus = EventBus()
    engine = AnimationEngine.from_settings(settings.engine)
    animator = EffectAnimator(engine, bus=event_bus)

    def on_effect(event: Event) -> None:
        element = event.data["element"]()
        name = element.name if element is not None else "<gone>"
        kind = event.data["kind"]
        logger.info(f"{event.type.name}: {getattr(kind, 'value', kind)} on {name}")

    for event_type in (
        EventType.EFFECT_STARTED,
        EventType.EFFECT_STOPPED,
        EventType.EFFECT_COMPLETED,
        EventType.EFFECT_SUPERSEDED,
    ):
        event_bus.subscribe(event_type, on_effect)

    button = AnimatedElement(opacity=0.0, name="button")
    badge = AnimatedElement(opacity=0.0, name="badge")
    frame = 1.0 / settings.engine.fps

    async def play_for(seconds: float) -> None:
        for _ in range(int(round(seconds / frame))):
            engine.update(frame)
            await asyncio.sleep(0)

    async def settle(completion: Completion) -> None:
        while not completion.done:
            engine.update(frame)
            await asyncio.sleep(0)
        await completion

    await settle(animator.appear([button, badge], scale_from=0.8))
    logger.info(f"Appeared: button={button.micro}, opacity={button.opacity:.2f}")

    await settle(animator.click(button))
    logger.info(f"Clicked: button={button.micro}")

    await settle(animator.toggle_select(badge, selected=True))
    logger.info(f"Selected: badge scale={badge.micro.scale_x:.2f}")

    animator.pulse(badge, cooldown=0.5, start_with_cooldown=False)
    animator.swipe_call(button, iterations=2)
    await play_for(1.0)
    animator.jump_call(button, cooldown=0.25, squash=0.1)
    animator.spin_call(badge, rotation=0.1)
    await play_for(1.0)
    animator.shake(button, seed=7, total_duration=0.6)
    await play_for(1.0)

    stopped = animator.stop_all([button, badge])
    await play_for(0.5)
    logger.info(f"Stopped {stopped} effects; button={button.micro}, badge={badge.micro}")

    await settle(animator.disappear([button, badge]))
    logger.info(f"Done: button opacity={button.opacity:.2f}, live timelines={engine.count}")


def main() -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    # Load environment variables
    load_dotenv()

    settings = get_settings()
    setup_logging(settings.debug)

    logger = logging.getLogger(__name__)
    logger.info("microfx starting...")

    try:
        if settings.env == "simulator":
            logger.info("Running in simulator mode")
            asyncio.run(run_simulator(settings))
        elif settings.env == "headless":
            logger.info("Running headless demo")
            asyncio.run(run_headless(settings))
        else:
            logger.error(f"Unknown environment: {settings.env}")
            sys.exit(1)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("microfx stopped")


if __name__ == "__main__":
    main()
