"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./campus_notify.db",
        description="Database connection URL used by SQLAlchemy for the SQL store",
        min_length=1,
    )
    store_backend: Literal["memory", "sql"] = Field(
        default="memory",
        description="Which notification store backs the HTTP interface",
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used to bucket dashboard activity by day",
    )
    directory_file: str | None = Field(
        default=None,
        description="Optional JSON file holding the department/class/student snapshot",
    )
    max_redispatch_attempts: int = Field(
        default=3,
        description="Upper bound for retries of failed notifications",
        ge=0,
    )
    default_page_size: int = Field(
        default=50,
        description="Page size applied when a listing does not provide a limit",
        gt=0,
    )
    max_page_size: int = Field(
        default=200,
        description="Largest page size accepted by listing endpoints",
        gt=0,
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:4200"],
        description="Origins allowed to call the API from a browser",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Format string passed to logging.basicConfig",
    )

    @model_validator(mode="after")
    def _validate_page_sizes(self) -> "Settings":
        if self.default_page_size > self.max_page_size:
            raise ValueError("DEFAULT_PAGE_SIZE cannot exceed MAX_PAGE_SIZE")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
