"""Questions service configuration.

All configuration lives on a single pydantic-settings `Settings` object so
there is one place to look when wiring the service. Values are read from the
environment (prefix `QUESTIONS_`, e.g. `QUESTIONS_DATABASE_URL`) and from an
optional `.env` file in the working directory.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="QUESTIONS_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = Field(default="Questions", description="Application name")
    app_version: str = Field(default="0.1.0", description="Service version")

    database_url: str = Field(
        default="sqlite:///./questions.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = Field(default=False, description="Echo SQL to logs")
    auto_create_tables: bool = Field(
        default=True,
        description="Create missing tables on startup",
    )

    forgery_protection: bool = Field(
        default=True,
        description="Verify authenticity tokens on HTML form submissions",
    )

    log_level: str = Field(default="INFO", description="Root log level")
    json_logs: bool = Field(default=True, description="Render logs as JSON")

    cors_origins: list[str] = Field(
        default=["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call the JSON API from a browser",
    )

    host: str = Field(default="127.0.0.1", description="Bind host for `serve`")
    port: int = Field(default=8000, gt=0, lt=65536, description="Bind port")


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
