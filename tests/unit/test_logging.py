"""
Tests for the logging module.
"""

import json
import logging

import pytest
import structlog


class TestConfigureLogging:
    """Tests for configure_logging function."""

    @pytest.mark.parametrize("json_logs", [False, True])
    def test_configure_modes(self, json_logs):
        from core.logging import configure_logging

        configure_logging(json_logs=json_logs, log_level="DEBUG")

    def test_configure_log_level(self):
        from core.logging import configure_logging

        configure_logging(log_level="WARNING")

        assert logging.getLogger().level == logging.WARNING

    def test_http_client_loggers_are_quieted(self):
        from core.logging import configure_logging

        configure_logging(log_level="DEBUG")

        for name in ("httpx", "httpcore", "urllib3"):
            assert logging.getLogger(name).level == logging.WARNING


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_named_logger(self):
        from core.logging import get_logger

        logger = get_logger("binder.test")

        assert hasattr(logger, "info")
        assert hasattr(logger, "warning")

    def test_logger_accepts_key_values(self):
        from core.logging import configure_logging, get_logger

        configure_logging(json_logs=False, log_level="DEBUG")
        logger = get_logger("binder.test")

        logger.info("Deck ready", category="Fintech", size=30)
        logger.warning("Decision write failed", candidate_id="s1", error="timeout")


class TestContextBinding:
    """Tests for context binding functions."""

    def test_bind_and_clear(self):
        from core.logging import bind_context, clear_context

        clear_context()
        bind_context(actor_id="investor-a", request_id="abc")
        bind_context(category="Gaming")

        ctx = structlog.contextvars.get_contextvars()
        assert ctx.get("actor_id") == "investor-a"
        assert ctx.get("request_id") == "abc"
        assert ctx.get("category") == "Gaming"

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}


class TestLoggerMixin:
    """Tests for LoggerMixin class."""

    def test_mixin_logger_is_usable(self):
        from core.logging import LoggerMixin, configure_logging

        configure_logging(json_logs=False)

        class StatsWorker(LoggerMixin):
            def run(self):
                self.logger.info("Aggregating", candidates=3)

        StatsWorker().run()


class TestJSONOutput:
    """Tests for JSON logging output."""

    def test_json_output_is_valid_json(self, capsys):
        from core.logging import bind_context, clear_context, configure_logging, get_logger

        configure_logging(json_logs=True, log_level="INFO")
        bind_context(request_id="req-1")
        get_logger("json_test").info("Decision recorded", direction="positive")
        clear_context()

        captured = capsys.readouterr()
        for line in captured.out.strip().split("\n"):
            if line:
                data = json.loads(line)
                assert data["event"] == "Decision recorded"
                assert data["request_id"] == "req-1"
