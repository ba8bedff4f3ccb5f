"""Configuration for microfx."""

from .settings import EngineSettings, SimulatorSettings, Settings, get_settings

__all__ = ["EngineSettings", "SimulatorSettings", "Settings", "get_settings"]
