"""Tests for logging setup module."""

import json
import logging
import sys

from informed360.logging_setup import (
    ROOT_LOGGER_NAME,
    JSONFormatter,
    SimpleFormatter,
    get_logger,
    reset_logging,
    setup_logging,
)


def _record(msg: str, *args, level: int = logging.INFO, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="informed360.news.pull",
        level=level,
        pathname="pull.py",
        lineno=1,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )


class TestJSONFormatter:
    """Tests for JSON formatter."""

    def test_basic_fields(self) -> None:
        data = json.loads(JSONFormatter().format(_record("Fetched %d items from %s", 3, "https://e.com")))

        assert "timestamp" in data
        assert data["level"] == "INFO"
        assert data["logger"] == "informed360.news.pull"
        assert data["message"] == "Fetched 3 items from https://e.com"

    def test_extra_fields_merged(self) -> None:
        record = _record("Skipping feed")
        record.extra_fields = {"feed": "https://e.com/rss", "reason": "timeout"}

        data = json.loads(JSONFormatter().format(record))

        assert data["feed"] == "https://e.com/rss"
        assert data["reason"] == "timeout"

    def test_exception_included(self) -> None:
        try:
            raise ValueError("bad feed list")
        except ValueError:
            record = _record("Aggregation failed", level=logging.ERROR, exc_info=sys.exc_info())

        data = json.loads(JSONFormatter().format(record))

        assert "ValueError: bad feed list" in data["exception"]


class TestSimpleFormatter:
    """Tests for simple formatter."""

    def test_pipe_separated(self) -> None:
        output = SimpleFormatter().format(_record("No items from %s", "bad.example", level=logging.WARNING))

        assert " | WARNING  | informed360.news.pull | No items from bad.example" in output


class TestLoggingSetup:
    """Tests for setup and child loggers."""

    def test_setup_adds_single_stderr_handler(self) -> None:
        setup_logging(level="DEBUG", format_type="simple")

        logger = logging.getLogger(ROOT_LOGGER_NAME)
        assert len(logger.handlers) == 1
        handler = logger.handlers[0]
        assert handler.stream is sys.stderr
        assert isinstance(handler.formatter, SimpleFormatter)
        assert logger.level == logging.DEBUG

    def test_setup_is_idempotent(self) -> None:
        setup_logging()
        setup_logging(level="ERROR")

        assert len(logging.getLogger(ROOT_LOGGER_NAME).handlers) == 1

    def test_level_and_format_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        monkeypatch.setenv("LOG_FORMAT", "json")

        setup_logging()

        logger = logging.getLogger(ROOT_LOGGER_NAME)
        assert logger.level == logging.WARNING
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_get_logger_prefixes_name(self) -> None:
        assert get_logger("news.topics").name == "informed360.news.topics"
        assert get_logger("informed360.markets").name == "informed360.markets"

    def test_reset_clears_handlers(self) -> None:
        setup_logging()
        reset_logging()

        assert logging.getLogger(ROOT_LOGGER_NAME).handlers == []

    def test_feed_failure_renders_structured_fields(self, caplog) -> None:
        """Test a skipped feed logs its URL and reason as JSON keys."""
        from urllib.error import URLError

        from informed360.news.models import FeedSource
        from informed360.news.pull import FeedClient

        def opener(url, headers, timeout):
            raise URLError("unreachable")

        with caplog.at_level(logging.INFO, logger=ROOT_LOGGER_NAME):
            FeedClient(opener=opener).fetch(FeedSource(url="https://down.example/rss"))

        record = [r for r in caplog.records if r.getMessage().startswith("Skipping feed")][0]
        data = json.loads(JSONFormatter().format(record))
        assert data["feed"] == "https://down.example/rss"
        assert data["reason"] == "URL error: unreachable"
