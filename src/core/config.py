"""
Application configuration using Pydantic Settings.

Centralizes all configuration with environment variable support.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/flashcards.db"

    # Daily caps (per user, per UTC day)
    new_cards_daily_cap: int = Field(default=20, ge=0)
    reviews_daily_cap: int = Field(default=100, ge=0)

    # Sessions
    session_retention_hours: float = Field(default=24.0, gt=0)
    session_cleanup_interval_minutes: float = Field(default=60.0, gt=0)

    # Card/Set Store calls (seconds)
    store_timeout_seconds: float = Field(default=5.0, gt=0)
    store_read_attempts: int = Field(default=3, ge=1)
    store_retry_base_delay: float = Field(default=0.2, ge=0)

    # Environment
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_to_file: bool = True
    logs_dir: str = "logs"

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
