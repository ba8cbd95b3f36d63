"""Application configuration via environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote API (consumed by the dashboard client)
    api_base_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the dashboard REST API",
    )
    api_timeout_seconds: float = Field(
        default=30.0,
        description="HTTP timeout for dashboard API requests",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )

    # API Server
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")
    api_reload: bool = Field(default=False, description="Enable auto-reload for development")
    seed_demo_data: bool = Field(
        default=True,
        description="Seed the in-memory store with a demo user and content",
    )

    # Calendar
    display_timezone: str | None = Field(
        default=None,
        description="IANA timezone used to place posts on calendar days (system local if unset)",
    )

    # Engagement model training
    training_provider: str = Field(
        default="stub",
        description="Engagement model training provider (stub)",
    )
    default_lookback_period: int = Field(
        default=90,
        description="Default lookback window in days (30, 90, 180, 365)",
    )
    min_posts_for_training: int = Field(
        default=5,
        description="Posts needed before training results are considered reliable",
    )
    min_analytics_for_training: int = Field(
        default=10,
        description="Analytics records needed before training results are considered reliable",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


# Convenience alias
settings = get_settings()
