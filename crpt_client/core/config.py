"""Client configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from crpt_client.core.errors import ConfigurationAppError
from crpt_client.core.time_units import TimeUnit


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


DEFAULT_API_URL = "https://ismp.crpt.ru/api/v3/lk/documents/create"


def _build_api_settings() -> "ApiSettings":
    return ApiSettings()


def _build_log_settings() -> "LogSettings":
    return LogSettings()


class ApiSettings(BaseSettings):
    """Registration API and rate limit configuration."""

    api_url: str = Field(
        DEFAULT_API_URL,
        description="Document registration endpoint (HTTP POST)",
    )
    timeout_seconds: float = Field(
        30.0,
        description="HTTP request timeout in seconds",
        gt=0,
    )
    time_unit: TimeUnit = Field(
        TimeUnit.SECONDS,
        description="Rate limit window granularity; the window is one unit long",
    )
    request_limit: int = Field(
        1,
        description="Maximum number of requests allowed per window",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="CRPT_",
        case_sensitive=False,
    )

    @field_validator("time_unit", mode="before")
    @classmethod
    def _parse_time_unit(cls, value: object) -> TimeUnit:
        try:
            return TimeUnit.parse(value)  # type: ignore[arg-type]
        except ConfigurationAppError as exc:
            raise ValueError(exc.message) from exc


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level name")
    format: str = Field(
        "json",
        description="Log format: 'json' or 'plain'",
    )
    output: str = Field(
        "stdout",
        description="Log destination: 'stdout' or 'file'",
    )
    file_path: str | None = Field(
        None,
        description="Log file path when output is 'file'",
    )
    max_bytes: int = Field(
        0,
        description="Rotate the log file at this size (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(
        5,
        description="Number of rotated log files to keep",
        ge=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on import if a provided value is invalid.
    """

    app_env: str = APP_ENV
    api: ApiSettings = Field(default_factory=_build_api_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()
