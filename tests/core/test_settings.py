"""Tests for tablestate.core.settings and tablestate.core.logging."""

import io
import json

import pytest
from pydantic import ValidationError

from tablestate.core.logging import bind_context, clear_context, configure_logging, get_logger
from tablestate.core.settings import TableSettings, get_settings, reset_settings


class TestTableSettings:
    def test_defaults(self):
        settings = get_settings()
        assert settings.default_page_size == 10
        assert settings.url_debounce_ms == 300
        assert settings.log_level == "INFO"
        assert settings.log_format == "console"

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("TABLESTATE_DEFAULT_PAGE_SIZE", "25")
        monkeypatch.setenv("TABLESTATE_URL_DEBOUNCE_MS", "0")
        reset_settings()
        settings = get_settings()
        assert settings.default_page_size == 25
        assert settings.url_debounce_ms == 0

    def test_invalid_page_size_rejected(self):
        with pytest.raises(ValidationError):
            TableSettings(default_page_size=0)


class TestLogging:
    def test_json_lines_carry_logger_name_and_service(self):
        stream = io.StringIO()
        configure_logging(level="DEBUG", json_format=True, stream=stream, cache_loggers=False)

        get_logger("tablestate.test").info("sort_toggled", column_id="age")

        line = json.loads(stream.getvalue().strip())
        assert line["event"] == "sort_toggled"
        assert line["column_id"] == "age"
        assert line["logger_name"] == "tablestate.test"
        assert line["service"] == "tablestate"
        assert line["level"] == "info"
        assert "timestamp" in line

    def test_level_filters(self):
        stream = io.StringIO()
        configure_logging(level="WARNING", json_format=True, stream=stream, cache_loggers=False)

        logger = get_logger("tablestate.test")
        logger.debug("hidden")
        logger.warning("shown")

        events = [json.loads(line)["event"] for line in stream.getvalue().splitlines()]
        assert events == ["shown"]

    def test_bound_context_appears_until_cleared(self):
        stream = io.StringIO()
        configure_logging(level="INFO", json_format=True, stream=stream, cache_loggers=False)
        logger = get_logger("tablestate.test")

        bind_context(table="users")
        logger.info("page_changed")
        clear_context()
        logger.info("page_changed")

        first, second = (json.loads(line) for line in stream.getvalue().splitlines())
        assert first["table"] == "users"
        assert "table" not in second
