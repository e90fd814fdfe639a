"""Tests for core utilities."""

import logging
import pathlib
from collections.abc import Generator
from logging.handlers import TimedRotatingFileHandler

import pytest

from identity_verifier.core.settings.app_settings import LoggingSettings
from identity_verifier.core.utils import (
    APP_FILE_HANDLER_NAME,
    APP_STREAM_HANDLER_NAME,
    HealthCheckFilter,
    setup_logging,
)


def make_record(message: str) -> logging.LogRecord:
    """Create a log record with the given message."""
    return logging.LogRecord(
        name="uvicorn.access",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=message,
        args=(),
        exc_info=None,
    )


def app_handlers() -> list[logging.Handler]:
    """Get handlers installed by setup_logging."""
    return [
        h
        for h in logging.getLogger().handlers
        if h.name in (APP_STREAM_HANDLER_NAME, APP_FILE_HANDLER_NAME)
    ]


@pytest.fixture(autouse=True)
def restore_root_logger() -> Generator[None, None, None]:
    """Remove app handlers after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in app_handlers():
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)


class TestHealthCheckFilter:
    """Tests for HealthCheckFilter."""

    @pytest.mark.parametrize(
        "message",
        [
            '127.0.0.1:5000 - "GET /health HTTP/1.1" 200',
            '127.0.0.1:5000 - "GET /api/health HTTP/1.1" 200',
        ],
    )
    def test_filters_health_checks(self, message: str) -> None:
        """Test that health check access lines are dropped."""
        assert HealthCheckFilter().filter(make_record(message)) is False

    @pytest.mark.parametrize(
        "message",
        [
            '127.0.0.1:5000 - "POST /api/verify HTTP/1.1" 200',
            '127.0.0.1:5000 - "GET /api/stats HTTP/1.1" 200',
            '127.0.0.1:5000 - "POST /health HTTP/1.1" 405',
        ],
    )
    def test_keeps_other_requests(self, message: str) -> None:
        """Test that other access lines are kept."""
        assert HealthCheckFilter().filter(make_record(message)) is True


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_stream_handler(self) -> None:
        """Test that a stream handler is installed by default."""
        setup_logging(settings=LoggingSettings(log_level="DEBUG"))

        handlers = app_handlers()
        assert len(handlers) == 1
        assert handlers[0].name == APP_STREAM_HANDLER_NAME
        assert logging.getLogger().level == logging.DEBUG

    def test_no_duplicate_handlers(self) -> None:
        """Test that repeated setup replaces the handler."""
        setup_logging(settings=LoggingSettings())
        setup_logging(settings=LoggingSettings())

        assert len(app_handlers()) == 1

    def test_file_handler(self, tmp_path: pathlib.Path) -> None:
        """Test that a file handler is installed when a log file is set."""
        log_file = tmp_path / "logs" / "idv.log"
        setup_logging(settings=LoggingSettings(log_file=str(log_file)))

        handlers = app_handlers()
        assert handlers[0].name == APP_FILE_HANDLER_NAME
        assert isinstance(handlers[0], logging.FileHandler)
        assert log_file.parent.exists()

    def test_rotating_file_handler(self, tmp_path: pathlib.Path) -> None:
        """Test that rotation uses a timed rotating handler."""
        setup_logging(
            settings=LoggingSettings(log_file=str(tmp_path / "idv.log"), rotate_logs=True)
        )

        assert isinstance(app_handlers()[0], TimedRotatingFileHandler)

    def test_custom_logger_levels(self) -> None:
        """Test that per-logger levels are applied."""
        setup_logging(
            settings=LoggingSettings(log_level="INFO", loggers={"httpx": "warning"})
        )

        assert logging.getLogger("httpx").level == logging.WARNING
        assert app_handlers()[0].level == logging.INFO

    def test_handler_level_is_minimum(self) -> None:
        """Test that the handler passes the most verbose configured level."""
        setup_logging(
            settings=LoggingSettings(log_level="WARNING", loggers={"identity_verifier": "DEBUG"})
        )

        assert app_handlers()[0].level == logging.DEBUG

    def test_health_filter_added_once(self) -> None:
        """Test that the access log filter is not stacked."""
        setup_logging(settings=LoggingSettings())
        setup_logging(settings=LoggingSettings())

        filters = [
            f for f in logging.getLogger("uvicorn.access").filters if isinstance(f, HealthCheckFilter)
        ]
        assert len(filters) == 1
