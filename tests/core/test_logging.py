"""Tests for resilience_config.core.logging."""

from __future__ import annotations

import json

import structlog

from resilience_config.core.logging import LogContext, configure_logging, get_logger


def _last_json_line(text: str) -> dict:
    lines = [line for line in text.splitlines() if line.strip()]
    return json.loads(lines[-1])


class TestConfigureLogging:
    def test_json_output(self, capsys):
        configure_logging(level="INFO", json_format=True, service="test-svc")
        get_logger("test").info("config_resolved", instance="backendA")

        record = _last_json_line(capsys.readouterr().err)
        assert record["event"] == "config_resolved"
        assert record["instance"] == "backendA"
        assert record["service"] == "test-svc"
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_stdout_untouched(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger("test").info("hello")
        assert capsys.readouterr().out == ""

    def test_level_filters(self, capsys):
        configure_logging(level="WARNING", json_format=True)
        get_logger("test").info("hidden")
        assert "hidden" not in capsys.readouterr().err

    def test_unknown_level_falls_back_to_info(self, capsys):
        configure_logging(level="chatty", json_format=True)
        get_logger("test").debug("hidden")
        get_logger("test").info("shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_without_timestamp(self, capsys):
        configure_logging(level="INFO", json_format=True, add_timestamp=False)
        get_logger("test").info("plain")
        assert "timestamp" not in _last_json_line(capsys.readouterr().err)

    def test_none_values_dropped(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger("test").info("config_resolved", instance=None, kind="retry")
        record = _last_json_line(capsys.readouterr().err)
        assert "instance" not in record
        assert record["kind"] == "retry"


class TestLogContext:
    def test_scoped(self):
        with LogContext(kind="bulkhead", instance="a"):
            assert structlog.contextvars.get_contextvars() == {"kind": "bulkhead", "instance": "a"}
        assert structlog.contextvars.get_contextvars() == {}

    def test_nested_restores_outer(self):
        with LogContext(kind="bulkhead"):
            with LogContext(kind="retry"):
                assert structlog.contextvars.get_contextvars()["kind"] == "retry"
            assert structlog.contextvars.get_contextvars()["kind"] == "bulkhead"

    def test_context_in_output(self, capsys):
        configure_logging(level="INFO", json_format=True)
        with LogContext(kind="rate_limiter"):
            get_logger("test").info("primitive_registered")
        assert _last_json_line(capsys.readouterr().err)["kind"] == "rate_limiter"
