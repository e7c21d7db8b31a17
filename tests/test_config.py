"""Tests for environment configuration."""

import pytest
from pydantic import ValidationError

from hn_mcp.utils.config import Settings, get_settings, reset_settings


class TestSettings:
    """Test the Settings class."""

    def test_defaults_without_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that every field has a usable default."""
        for name in (
            "SERVER_NAME", "HACKERNEWS_API_BASE_URL", "HACKERNEWS_API_TIMEOUT",
            "CACHE_TTL_SECONDS", "CACHE_MAX_SIZE", "LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.SERVER_NAME == "hackernews-mcp-server"
        assert settings.HACKERNEWS_API_BASE_URL == "https://hacker-news.firebaseio.com/v0"
        assert settings.HACKERNEWS_API_TIMEOUT == 10000
        assert settings.CACHE_TTL_SECONDS == 300
        assert settings.CACHE_MAX_SIZE == 1000
        assert settings.LOG_LEVEL == "INFO"

    def test_fields_can_be_overridden(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that fields can be set via environment variables."""
        monkeypatch.setenv("HACKERNEWS_API_TIMEOUT", "5000")
        monkeypatch.setenv("CACHE_TTL_SECONDS", "60")
        monkeypatch.setenv("CACHE_MAX_SIZE", "0")
        monkeypatch.setenv("SERVER_VERSION", "2.0.0")

        settings = Settings()

        assert settings.HACKERNEWS_API_TIMEOUT == 5000
        assert settings.CACHE_TTL_SECONDS == 60
        assert settings.CACHE_MAX_SIZE == 0
        assert settings.SERVER_VERSION == "2.0.0"

    def test_base_url_trailing_slash_removed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HACKERNEWS_API_BASE_URL", "http://localhost:8080/v0/")

        assert Settings().HACKERNEWS_API_BASE_URL == "http://localhost:8080/v0"

    def test_timeout_must_be_positive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HACKERNEWS_API_TIMEOUT", "0")

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        assert "HACKERNEWS_API_TIMEOUT" in str(exc_info.value)

    def test_cache_size_cannot_be_negative(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CACHE_MAX_SIZE", "-1")

        with pytest.raises(ValidationError):
            Settings()

    def test_log_level_validation(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that LOG_LEVEL only accepts valid values."""
        monkeypatch.setenv("LOG_LEVEL", "VERBOSE")

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        assert "LOG_LEVEL" in str(exc_info.value)

    def test_log_level_case_insensitive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert Settings().LOG_LEVEL == "DEBUG"

    def test_log_level_warn_alias(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the common WARN spelling maps to WARNING."""
        monkeypatch.setenv("LOG_LEVEL", "warn")

        assert Settings().LOG_LEVEL == "WARNING"

    def test_log_format_defaults_to_text(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("LOG_FORMAT", raising=False)

        assert Settings(_env_file=None).LOG_FORMAT == "text"

    def test_log_format_accepts_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_FORMAT", "JSON")

        assert Settings().LOG_FORMAT == "json"

    def test_log_format_validation(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_FORMAT", "xml")

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        assert "LOG_FORMAT" in str(exc_info.value)


class TestSettingsSingleton:
    """Test the settings singleton pattern."""

    def test_get_settings_returns_same_instance(self) -> None:
        assert get_settings() is get_settings()

    def test_reset_settings_reloads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CACHE_TTL_SECONDS", "10")
        first = get_settings()

        monkeypatch.setenv("CACHE_TTL_SECONDS", "20")
        reset_settings()
        second = get_settings()

        assert first is not second
        assert second.CACHE_TTL_SECONDS == 20
