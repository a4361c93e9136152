"""Tests for build settings and logging setup."""

import logging
import os

import pytest
import structlog
from pydantic import ValidationError

from hother.mildoc.config import MildocSettings
from hother.mildoc.utils.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep stray MILDOC_ variables and .env files out of the tests."""
    for key in list(os.environ):
        if key.startswith("MILDOC_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


class TestMildocSettings:
    """Test MildocSettings."""

    def test_defaults(self):
        """Test default settings."""
        settings = MildocSettings()
        assert settings.strict is False
        assert settings.placeholder == "..."
        assert settings.renderers == ["solved", "exercise", "solutions", "docs"]
        assert settings.output_dir("exercise") == "exercises"
        assert settings.output_dir("docs") == "source"
        assert settings.output_dir("custom") == "custom"
        assert settings.timeout is None

    def test_environment(self, monkeypatch):
        """Test environment variables override defaults."""
        monkeypatch.setenv("MILDOC_PLACEHOLDER", "sorry")
        monkeypatch.setenv("MILDOC_STRICT", "true")
        monkeypatch.setenv("MILDOC_MAX_WORKERS", "2")
        monkeypatch.setenv("MILDOC_RENDERERS", '["exercise"]')
        monkeypatch.setenv("MILDOC_MARKERS__CODE_OPEN", "-- CODE:")

        settings = MildocSettings()
        assert settings.placeholder == "sorry"
        assert settings.strict is True
        assert settings.max_workers == 2
        assert settings.renderers == ["exercise"]
        assert settings.markers.code_open == "-- CODE:"
        assert settings.markers.code_close == "-- QUOTE."

    def test_dotenv(self, tmp_path):
        """Test settings are read from .env in the working directory."""
        (tmp_path / ".env").write_text("MILDOC_LOG_LEVEL=debug\n", encoding="utf-8")
        assert MildocSettings().log_level == "DEBUG"

    def test_invalid_values(self):
        """Test validation of numeric and suffix fields."""
        with pytest.raises(ValidationError):
            MildocSettings(max_workers=0)
        with pytest.raises(ValidationError):
            MildocSettings(timeout=0)
        with pytest.raises(ValidationError):
            MildocSettings(source_suffix="lean")

    def test_build_registry(self):
        """Test the registry follows enabled renderers and placeholder."""
        registry = MildocSettings(renderers=["docs", "exercise"], placeholder="sorry").build_registry()
        assert registry.list_names() == ["exercise", "docs"]
        assert registry.get_renderer("exercise").placeholder == "sorry"

    def test_build_registry_unknown(self):
        """Test unknown renderer names are rejected."""
        with pytest.raises(ValueError):
            MildocSettings(renderers=["html"]).build_registry()


class TestLogging:
    """Test logging configuration."""

    @pytest.fixture(autouse=True)
    def reset_logging(self):
        yield
        structlog.reset_defaults()
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)

    @pytest.mark.parametrize("json_output,dev_mode", [(True, True), (False, True), (False, False)])
    def test_configure(self, json_output, dev_mode):
        """Test every output mode configures the root logger."""
        configure_logging("debug", json_output=json_output, dev_mode=dev_mode)
        assert logging.getLogger().level == logging.DEBUG
        get_logger("mildoc.test").info("configured", mode="test")

    def test_unknown_level(self):
        """Test a bogus level is rejected."""
        with pytest.raises(ValueError):
            configure_logging("LOUD")

    def test_get_logger_default_name(self):
        """Test the logger name defaults to the calling module."""
        assert get_logger() is not None

    def test_get_logger_binds_context(self):
        """Test bound loggers are stdlib-backed once logging is configured."""
        configure_logging("info")
        logger = get_logger("mildoc.test").bind(section="C02_Basics/S01_Calculating")
        assert isinstance(logger, structlog.stdlib.BoundLogger)
        logger.info("bound")
