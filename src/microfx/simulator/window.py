"""
Preview window using pygame.

Draws a row of elements with their micro transform and opacity applied,
so effects can be tried out by hand.
"""

import pygame
import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Callable

from ..animation.engine import AnimationEngine
from ..config.settings import SimulatorSettings
from ..core.events import EventBus, EventType, Event, tick_event
from ..effects.animator import EffectAnimator
from ..elements.element import AnimatedElement

logger = logging.getLogger(__name__)


@dataclass
class WindowConfig:
    """Preview window configuration."""
    width: int = 960
    height: int = 540
    title: str = "microfx preview"
    fullscreen: bool = False
    fps: int = 60

    element_count: int = 4
    element_size: int = 96

    # Colors
    background: tuple[int, int, int] = (20, 20, 30)
    element_color: tuple[int, int, int] = (100, 150, 255)
    focus_color: tuple[int, int, int] = (255, 200, 80)
    status_color: tuple[int, int, int] = (200, 200, 220)

    @classmethod
    def from_settings(cls, settings: SimulatorSettings) -> "WindowConfig":
        return cls(
            width=settings.width,
            height=settings.height,
            title=settings.title,
            fullscreen=settings.fullscreen,
            fps=settings.fps,
            element_count=settings.element_count,
            element_size=settings.element_size,
        )


class SimulatorWindow:
    """
    Effect preview window.

    Keyboard Mapping:
        1: Appear          2: Disappear
        3: Click           4: Pulse
        5: Jump call       6: Spin call
        7: Swipe call      8: Shake
        9: Toggle select
        LEFT/RIGHT: Move focus
        A: Apply effects to every element instead of the focused one
        S: Stop every looping effect
        ESC: Exit
    """

    def __init__(
        self,
        config: WindowConfig | None = None,
        engine: AnimationEngine | None = None,
        event_bus: EventBus | None = None
    ) -> None:
        self.config = config or WindowConfig()
        self.event_bus = event_bus or EventBus()
        self.engine = engine or AnimationEngine(fps=self.config.fps)
        self.animator = EffectAnimator(self.engine, bus=self.event_bus)

        self.elements = [
            AnimatedElement(name=f"element-{i + 1}") for i in range(self.config.element_count)
        ]
        self._focus = 0
        self._all = False
        self._selected: set[int] = set()

        self._surface: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._font: pygame.font.Font | None = None
        self._running = False
        self._frame = 0

        # the clock reaches the engine only through the bus
        self._unsubscribe = self.event_bus.subscribe(EventType.TICK, self._on_tick)
        self._bindings = self._key_bindings()

        logger.info(f"SimulatorWindow created with {len(self.elements)} elements")

    def _open(self) -> None:
        """Create the display surface, clock and status font."""
        pygame.init()
        pygame.display.set_caption(self.config.title)

        flags = pygame.DOUBLEBUF | (pygame.FULLSCREEN if self.config.fullscreen else 0)
        size = (self.config.width, self.config.height)
        self._surface = pygame.display.set_mode(size, flags)
        self._clock = pygame.time.Clock()
        self._font = pygame.font.SysFont(None, 20)

        logger.info(f"Preview window open at {size[0]}x{size[1]}")

    def _on_tick(self, event: Event) -> None:
        self.engine.update(event.data.get("delta", 0.0))

    @property
    def targets(self) -> list[AnimatedElement]:
        """Elements the next effect key applies to."""
        if self._all:
            return list(self.elements)
        return [self.elements[self._focus]]

    # Input

    def _key_bindings(self) -> dict[int, Callable[[], None]]:
        fx = self.animator
        return {
            pygame.K_ESCAPE: self.stop,
            pygame.K_LEFT: lambda: self._move_focus(-1),
            pygame.K_RIGHT: lambda: self._move_focus(1),
            pygame.K_a: self._toggle_scope,
            pygame.K_s: self._stop_all,
            pygame.K_1: lambda: fx.appear(self.targets),
            pygame.K_2: lambda: fx.disappear(self.targets),
            pygame.K_3: lambda: fx.click(self.targets),
            pygame.K_4: lambda: fx.pulse(self.targets, cooldown=1.0),
            pygame.K_5: lambda: fx.jump_call(self.targets, cooldown=1.0, squash=0.15),
            pygame.K_6: lambda: fx.spin_call(self.targets, cooldown=1.0, rotation=0.2),
            pygame.K_7: lambda: fx.swipe_call(self.targets),
            pygame.K_8: lambda: fx.shake(self.targets, total_duration=2.0),
            pygame.K_9: self._toggle_selection,
        }

    def _poll_input(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.stop()
            elif event.type == pygame.KEYDOWN and event.key in self._bindings:
                self._bindings[event.key]()

    def _move_focus(self, step: int) -> None:
        self._focus = (self._focus + step) % len(self.elements)

    def _toggle_scope(self) -> None:
        self._all = not self._all

    def _stop_all(self) -> None:
        stopped = self.animator.stop_all(self.elements)
        logger.info(f"Stopped {stopped} looping effects")

    def _toggle_selection(self) -> None:
        for element in self.targets:
            index = self.elements.index(element)
            selected = index not in self._selected
            self._selected ^= {index}
            self.animator.toggle_select(element, selected=selected)

    # Drawing

    def _slot_center(self, index: int) -> tuple[float, float]:
        spacing = self.config.width / (len(self.elements) + 1)
        return spacing * (index + 1), self.config.height / 2

    def _draw(self) -> None:
        if self._surface is None:
            return

        self._surface.fill(self.config.background)
        for index, element in enumerate(self.elements):
            self._draw_element(index, element)
        self._draw_status()
        pygame.display.flip()

    def _draw_element(self, index: int, element: AnimatedElement) -> None:
        micro = element.micro
        size = self.config.element_size
        width = max(1, int(round(size * abs(micro.scale_x))))
        height = max(1, int(round(size * abs(micro.scale_y))))

        color = self.config.focus_color if index == self._focus else self.config.element_color
        box = pygame.Surface((width, height), pygame.SRCALPHA)
        box.fill((*color, 255))
        box.set_alpha(int(round(255 * max(0.0, min(1.0, element.opacity)))))

        # pivot is the anchor point of the unscaled layout box
        cx, cy = self._slot_center(index)
        pivot = pygame.math.Vector2(
            cx - size / 2 + micro.anchor_x * size + micro.x,
            cy - size / 2 + micro.anchor_y * size + micro.y,
        )
        to_center = pygame.math.Vector2(
            (0.5 - micro.anchor_x) * width,
            (0.5 - micro.anchor_y) * height,
        ).rotate(math.degrees(micro.rotation))

        # pygame rotates counter-clockwise for positive angles
        rotated = pygame.transform.rotate(box, -math.degrees(micro.rotation))
        self._surface.blit(rotated, rotated.get_rect(center=pivot + to_center))

    def _draw_status(self) -> None:
        if self._font is None:
            return
        scope = "all" if self._all else self.elements[self._focus].name
        fps = self._clock.get_fps() if self._clock else 0.0
        text = (
            f"target: {scope}   timelines: {self.engine.count}   "
            f"effects: {len(self.animator.registry)}   fps: {fps:.0f}"
        )
        label = self._font.render(text, True, self.config.status_color)
        self._surface.blit(label, (16, self.config.height - 32))

    # Loop

    async def run(self) -> None:
        """Poll input, tick the clock through the bus, draw, repeat until stopped."""
        self._open()
        self._running = True
        logger.info("Simulator started")

        try:
            while self._running:
                self._poll_input()

                # milliseconds the previous clock.tick() waited
                delta = self._clock.get_time() / 1000.0
                self.event_bus.emit(tick_event(delta, self._frame))
                await self.event_bus.process_queue()

                self._draw()
                self._clock.tick(self.config.fps)
                self._frame += 1
                await asyncio.sleep(0)
        finally:
            self._close()

    def _close(self) -> None:
        self._unsubscribe()
        self.animator.registry.clear()
        pygame.quit()
        logger.info("Simulator stopped")

    def stop(self) -> None:
        """Ask the loop to exit after the current frame."""
        self._running = False
