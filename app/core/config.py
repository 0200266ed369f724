# app/core/config.py
from datetime import date
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables at runtime.

    These settings are used for:
    - DB connection
    - Admin API key
    - Logging level
    - Meeting generation defaults (epoch, default link, batch size)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "Team Calendar"
    APP_ENV: str = Field("local", description="Environment name: local/test/dev/stage/prod")

    DB_URL: str = Field(
        "sqlite+aiosqlite:///./team_calendar.db",
        description="SQLAlchemy-compatible database URL",
    )

    ADMIN_API_KEY: str | None = Field(
        default=None,
        description="API key required for hitting /admin endpoints",
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root level for the application logger (DEBUG, INFO, WARNING, ...).",
    )

    # --- Meeting generation ---
    SCHEDULE_EPOCH: date = Field(
        default=date(2019, 1, 1),
        description="First date considered when backfilling meetings since inception.",
    )
    DEFAULT_MEETING_LINK: str = Field(
        default="https://zoom.us/j/placeholder123456",
        description="Conferencing link installed with the default schedule configuration.",
    )
    BACKFILL_BATCH_SIZE: int = Field(
        default=500,
        ge=1,
        description="Number of generated meetings written per commit during a backfill.",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()
