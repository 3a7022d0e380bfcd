# ABOUTME: Configuration settings for the Cognitive Edge Protocol service using Pydantic Settings.
# ABOUTME: Loads environment variables and .env values and provides type-safe configuration access.

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    # OpenAI API Configuration
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key; required only when the OpenAI responder is used"
    )
    openai_model: str = Field(
        default="gpt-4o",
        description="OpenAI model producing protocol replies"
    )
    openai_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for protocol replies"
    )

    # Responder boundary
    responder_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Timeout for a single responder attempt in seconds"
    )
    responder_retry_attempts: int = Field(
        default=2,
        ge=1,
        description="Total responder attempts per turn"
    )
    responder_retry_wait_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Minimum backoff between responder attempts"
    )

    # Session storage
    session_backend: Literal["memory", "redis"] = Field(
        default="memory",
        description="Where session-backed turns persist phase and history"
    )
    redis_url: str = Field(
        default="redis://localhost:6379",
        description="Redis connection URL"
    )
    session_ttl_seconds: int = Field(
        default=7 * 86400,
        gt=0,
        description="Expiry for stored session state"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_dir: str = Field(
        default="logs",
        description="Directory for rotating log files"
    )
    log_to_file: bool = Field(
        default=False,
        description="Write logs to log_dir in addition to stderr"
    )

    # HTTP server
    host: str = Field(default="127.0.0.1", description="Bind address")
    port: int = Field(default=8000, description="Bind port")
    cors_origins: str = Field(
        default="*",
        description="Allowed CORS origins (comma-separated)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Lazy initialization to allow import without .env
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the shared settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
