from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenRouter (generation service)
    OPENROUTER_API_KEY: str
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    NETWORK_MODEL: str = "anthropic/claude-sonnet-4.5"
    NETWORK_MAX_TOKENS: int = 16000
    NETWORK_TEMPERATURE: float = 0.2

    # LangSmith
    LANGSMITH_API_KEY: str = ""
    LANGSMITH_PROJECT: str = "landnet"
    LANGCHAIN_TRACING_V2: bool = False

    # Pipeline
    ANALYSIS_TIMEOUT_SECONDS: float = 180.0
    MIN_PROJECTS: int = 3
    DEFAULT_LANGUAGE: str = "es"

    # Response repair
    REPAIR_MAX_DISCARDED_TAIL: int = 500

    # Layout
    VIEWPORT_WIDTH: float = 960.0
    VIEWPORT_HEIGHT: float = 700.0
    LINK_BASE_DISTANCE: float = 200.0
    LINK_STRENGTH_STEP: float = 15.0
    LINK_MIN_DISTANCE: float = 20.0
    CHARGE_STRENGTH: float = -300.0
    COLLISION_MARGIN: float = 5.0
    ALPHA_MIN: float = 0.001
    ALPHA_DECAY: float = Field(
        default=1 - 0.001 ** (1 / 300),
        description="Per-tick decay of alpha; the default settles in ~300 ticks",
    )
    VELOCITY_DECAY: float = 0.4
    DRAG_ALPHA_TARGET: float = 0.3
    FRAME_INTERVAL_SECONDS: float = 1 / 60
    LAYOUT_SEED: int = 42

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="json", description="'json' for production, 'console' for dev")


def get_settings() -> Settings:
    return Settings()
