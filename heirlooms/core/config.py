"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


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

# Production usually injects variables directly, so the file is optional
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ up front
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


# Fixed-window defaults for the transcription guard
RATE_LIMIT_REQUESTS = 10
RATE_LIMIT_WINDOW_MS = 60_000


def _build_app_settings() -> "AppSettings":
    """Build app settings from environment.

    BaseSettings populates fields from environment variables; static type
    checkers still treat them as constructor arguments, hence the ignore.
    """

    return AppSettings()  # type: ignore[call-arg]


def _build_media_settings() -> "MediaSettings":
    return MediaSettings()  # type: ignore[call-arg]


def _build_transcription_settings() -> "TranscriptionSettings":
    return TranscriptionSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    return LogSettings()  # type: ignore[call-arg]


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    max_upload_size_mb: int = Field(
        50,
        description="Maximum audio upload size in megabytes",
        ge=1,
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-client rate limiting on paid routes",
    )
    rate_limit_requests: int = Field(
        RATE_LIMIT_REQUESTS,
        description="Maximum number of requests allowed per window (per client)",
        ge=1,
    )
    rate_limit_window_ms: int = Field(
        RATE_LIMIT_WINDOW_MS,
        description="Rate limit window size in milliseconds",
        ge=1,
    )
    rate_limit_sweep_interval_ms: int | None = Field(
        None,
        description="How often expired limiter records are dropped (defaults to one window)",
        ge=1,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class MediaSettings(BaseSettings):
    """Media hosting configuration used when rewriting URLs."""

    cloudinary_cloud_name: str | None = Field(
        None,
        description="Cloudinary cloud name, required to build fetch URLs for Supabase Storage media",
    )
    placeholder_url: str = Field(
        "/placeholder.svg",
        description="Path returned when a blank media URL is rewritten",
    )

    model_config = SettingsConfigDict(
        env_prefix="MEDIA_",
        case_sensitive=False,
    )


class TranscriptionSettings(BaseSettings):
    """Speech-to-text provider configuration.

    Validation of provider-specific requirements happens in the factory.
    """

    provider: str = Field(
        "openai",
        description="Transcription provider name",
    )
    model: str = Field(
        "whisper-1",
        description="Transcription model name",
    )
    api_key: str | None = Field(
        None,
        description="API key for the provider",
    )
    base_url: str | None = Field(
        None,
        description="Custom API endpoint",
    )
    timeout_seconds: float = Field(
        60.0,
        description="Request timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="TRANSCRIPTION_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log output: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(5, description="Rotated log files to keep", ge=0)
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and echo the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=_build_app_settings)
    media: MediaSettings = Field(default_factory=_build_media_settings)
    transcription: TranscriptionSettings = Field(default_factory=_build_transcription_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Nested settings are created via default_factory so env loading works.
settings = Settings()
