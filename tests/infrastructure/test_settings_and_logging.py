"""Tests for configuration and logging setup."""

import pytest
import structlog

from shoecatalog.infrastructure.config import Settings
from shoecatalog.infrastructure.logging_config import configure_logging


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("IMAGE_MAX_EDGE", raising=False)
        settings = Settings(_env_file=None)

        assert settings.image_max_edge == 1200
        assert settings.image_jpeg_quality == 90
        assert settings.images_bucket == "uploads"
        assert settings.documents_bucket == "pdfs"
        assert settings.max_upload_bytes == 10 * 1024 * 1024

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IMAGE_MAX_EDGE", "800")
        monkeypatch.setenv("BLOB_BACKEND", "memory")
        monkeypatch.setenv("IMAGE_FETCH_TIMEOUT", "2.5")

        settings = Settings(_env_file=None)

        assert settings.image_max_edge == 800
        assert settings.blob_backend == "memory"
        assert settings.image_fetch_timeout == 2.5


class TestConfigureLogging:
    """Tests for structlog configuration."""

    def test_configures_structlog(self) -> None:
        configure_logging("DEBUG", json_output=True)

        assert structlog.is_configured()
        processors = structlog.get_config()["processors"]
        assert structlog.contextvars.merge_contextvars in processors
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer(self) -> None:
        configure_logging("info")

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
