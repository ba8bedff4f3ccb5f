"""Core framework components for microfx."""

from .errors import (
    CompletionCancelled,
    ConfigurationError,
    ElementContractError,
    MicrofxError,
)
from .events import Event, EventBus, EventType

__all__ = [
    "CompletionCancelled",
    "ConfigurationError",
    "ElementContractError",
    "MicrofxError",
    "Event",
    "EventBus",
    "EventType",
]
