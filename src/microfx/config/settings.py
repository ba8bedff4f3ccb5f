"""
Runtime settings using Pydantic.

Settings are loaded from environment variables (prefix ``MICROFX_``)
with .env file support. Nested groups use ``__`` as delimiter, e.g.
``MICROFX_ENGINE__FPS=30``.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Animation clock settings."""

    # Target tick rate for AnimationEngine.run()
    fps: int = Field(default=60, ge=1, le=480)

    # Largest delta applied in one tick, in seconds (long stalls are clamped)
    max_frame_delta: float = Field(default=0.5, gt=0, allow_inf_nan=False)

    # Playback speed multiplier for every timeline
    global_speed: float = Field(default=1.0, ge=0, allow_inf_nan=False)


class SimulatorSettings(BaseSettings):
    """Preview window settings."""

    width: int = 960
    height: int = 540
    title: str = "microfx preview"
    fps: int = 60
    fullscreen: bool = False

    # Elements laid out in a row
    element_count: int = Field(default=4, ge=1, le=12)
    element_size: int = 96


class Settings(BaseSettings):
    """Main settings."""

    model_config = SettingsConfigDict(
        env_prefix="MICROFX_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Environment
    env: Literal["simulator", "headless"] = "headless"
    debug: bool = False

    # Nested settings
    engine: EngineSettings = Field(default_factory=EngineSettings)
    simulator: SimulatorSettings = Field(default_factory=SimulatorSettings)

    @property
    def is_simulator(self) -> bool:
        """Check if the pygame preview should run."""
        return self.env == "simulator"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
