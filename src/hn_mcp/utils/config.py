"""Type-safe environment configuration using Pydantic Settings."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Server configuration loaded from environment variables.

    Every field has a default, so the server starts with no environment at all.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields in .env
        env_ignore_empty=True,
    )

    SERVER_NAME: str = Field(
        default="hackernews-mcp-server",
        description="Name advertised to MCP clients"
    )

    SERVER_VERSION: str = Field(
        default="1.0.0",
        description="Version advertised to MCP clients"
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )

    LOG_FORMAT: Literal["text", "json"] = Field(
        default="text",
        description="Log line format on stderr: text or json"
    )

    # Upstream API
    HACKERNEWS_API_BASE_URL: str = Field(
        default="https://hacker-news.firebaseio.com/v0",
        description="Base URL of the HackerNews Firebase API"
    )

    HACKERNEWS_API_TIMEOUT: int = Field(
        default=10000,
        description="Per-request timeout in milliseconds",
        gt=0
    )

    # Cache tuning
    CACHE_TTL_SECONDS: int = Field(
        default=300,
        description="Time-to-live of cached items, users and lists",
        ge=0
    )

    CACHE_MAX_SIZE: int = Field(
        default=1000,
        description="Maximum number of entries per item/user cache",
        ge=0
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper == "WARN":
            v_upper = "WARNING"
        if v_upper not in valid_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of {valid_levels}, got '{v}'"
            )
        return v_upper

    @field_validator("LOG_FORMAT", mode="before")
    @classmethod
    def normalize_log_format(cls, v: str) -> str:
        """Accept the log format in any case."""
        return v.lower() if isinstance(v, str) else v

    @field_validator("HACKERNEWS_API_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended with a single slash."""
        return v.rstrip("/")


# Singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the server settings singleton.

    Loads settings from environment variables and .env file on first call.
    Subsequent calls return the cached instance.

    Returns:
        Settings: The server settings instance

    Raises:
        ValidationError: If an environment variable holds an invalid value
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton. Useful for testing."""
    global _settings
    _settings = None
