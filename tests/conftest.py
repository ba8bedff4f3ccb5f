"""
Shared pytest fixtures for microfx tests.
"""
import pytest

from microfx.animation.engine import AnimationEngine
from microfx.animation.registry import EffectRegistry
from microfx.core.events import EventBus
from microfx.effects.animator import EffectAnimator
from microfx.elements.element import AnimatedElement

# Power-of-two step: elapsed time sums exactly, so effect boundaries land on ticks
STEP = 1 / 64


@pytest.fixture
def engine():
    """Fresh animation clock."""
    engine = AnimationEngine()
    yield engine
    engine.kill_all()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def registry(engine, bus):
    """Effect registry on the test clock, publishing to ``bus``."""
    registry = EffectRegistry(engine, bus=bus)
    yield registry
    registry.clear()


@pytest.fixture
def animator(engine, registry):
    return EffectAnimator(engine, registry)


@pytest.fixture
def element():
    """Element at rest, fully visible."""
    return AnimatedElement(name="element")


@pytest.fixture
def advance(engine):
    """Tick the clock in fixed steps for ``seconds``."""
    def advance(seconds: float, step: float = STEP) -> None:
        for _ in range(int(round(seconds / step))):
            engine.update(step)
    return advance
