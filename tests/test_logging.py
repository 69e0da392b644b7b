"""
Tests for logging utilities and configuration.
"""

import json
import logging
import sys
from pathlib import Path

import pytest

from crsgraph.core.config import settings
from crsgraph.core.crs.reference_system import ReferenceSystem
from crsgraph.core.logging_config import (
    ColoredFormatter,
    JSONFormatter,
    get_log_level,
    setup_logging,
)
from crsgraph.utils.logging import PerformanceTimer, log_performance


@pytest.fixture
def restore_logging():
    """Put the root and discovery loggers back the way pytest left them."""
    root = logging.getLogger()
    discovery = logging.getLogger("crsgraph.core.crs.discovery")
    handlers = list(root.handlers)
    level = root.level
    discovery_level = discovery.level

    yield

    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    discovery.setLevel(discovery_level)


def make_record(msg: str = "Test message", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.module",
        level=logging.INFO,
        pathname="/path/to/file.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLoggingConfig:
    """Tests for logging configuration."""

    def test_get_log_level(self) -> None:
        """Test log level name conversion."""
        assert get_log_level("DEBUG") == logging.DEBUG
        assert get_log_level("INFO") == logging.INFO
        assert get_log_level("WARNING") == logging.WARNING
        assert get_log_level("ERROR") == logging.ERROR
        assert get_log_level("CRITICAL") == logging.CRITICAL
        assert get_log_level("invalid") == logging.INFO  # Default

    def test_get_log_level_case_insensitive(self) -> None:
        assert get_log_level("debug") == logging.DEBUG
        assert get_log_level("DeBuG") == logging.DEBUG

    def test_setup_logging_console_only(self, restore_logging) -> None:
        """Test logging setup with console handler only."""
        setup_logging(log_level="DEBUG", log_file=None, json_logs=False, enable_console=True)

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        # Discovery tracing stays at INFO even when everything else is at DEBUG
        assert logging.getLogger("crsgraph.core.crs.discovery").level == logging.INFO

    def test_setup_logging_json_file(self, restore_logging, tmp_path: Path) -> None:
        """Test that file logs are written as JSON records."""
        log_file = tmp_path / "logs" / "crsgraph.log"
        setup_logging(log_level="INFO", log_file=log_file, json_logs=True, enable_console=False)

        ReferenceSystem("lonely").project(ReferenceSystem("other"), (0.0, 0.0))
        logging.getLogger("crsgraph.test").info("Converted viewport", extra={"source_crs": "3857"})
        for handler in logging.getLogger().handlers:
            handler.flush()

        records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        messages = [r["message"] for r in records]

        assert any(m.startswith("Logging initialized") for m in messages)
        assert records[-1]["message"] == "Converted viewport"
        assert records[-1]["source_crs"] == "3857"
        # Discovery DEBUG output is filtered
        assert not any("No conversion path" in m for m in messages)

    def test_setup_logging_plain_file(self, restore_logging, tmp_path: Path) -> None:
        log_file = tmp_path / "crsgraph.log"
        setup_logging(log_level="WARNING", log_file=log_file, json_logs=False, enable_console=False)

        logging.getLogger("crsgraph.test").warning("Albers parameters near degenerate")
        for handler in logging.getLogger().handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "WARNING - crsgraph.test" in text
        assert "Albers parameters near degenerate" in text

    def test_setup_logging_replaces_handlers(self, restore_logging, monkeypatch) -> None:
        """Calling setup twice leaves one set of handlers."""
        monkeypatch.setattr(settings, "environment", "development")
        setup_logging(log_level="INFO", log_file=None, enable_console=True)
        setup_logging(log_level="INFO", log_file=None, enable_console=True)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, ColoredFormatter)

    def test_setup_logging_production_console(self, restore_logging, monkeypatch) -> None:
        monkeypatch.setattr(settings, "environment", "production")
        setup_logging(log_level="INFO", log_file=None, enable_console=True)

        formatter = logging.getLogger().handlers[0].formatter
        assert not isinstance(formatter, ColoredFormatter)

    def test_setup_logging_quiet_discovery_respects_higher_level(self, restore_logging) -> None:
        setup_logging(log_level="ERROR", enable_console=False)

        assert logging.getLogger("crsgraph.core.crs.discovery").level == logging.ERROR


class TestFormatters:
    """Tests for log formatters."""

    def test_json_formatter_basic(self) -> None:
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "test.module"
        assert data["message"] == "Test message"
        assert data["line"] == 42
        assert "exception" not in data

    def test_json_formatter_with_extra_fields(self) -> None:
        data = json.loads(JSONFormatter().format(make_record(source_crs="3857", duration_ms=1.5)))

        assert data["source_crs"] == "3857"
        assert data["duration_ms"] == 1.5
        assert "msg" not in data

    def test_json_formatter_with_exception(self) -> None:
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord(
                name="test",
                level=logging.ERROR,
                pathname="",
                lineno=1,
                msg="failed",
                args=(),
                exc_info=sys.exc_info(),
            )

        data = json.loads(JSONFormatter().format(record))

        assert "ValueError: boom" in data["exception"]

    def test_colored_formatter_restores_levelname(self) -> None:
        record = make_record()

        formatted = ColoredFormatter("%(levelname)s %(message)s").format(record)

        assert "\033[32mINFO\033[0m" in formatted
        assert record.levelname == "INFO"


class TestPerformanceLogging:
    """Tests for timing helpers."""

    def test_log_performance(self, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger="crsgraph.utils.logging")

        @log_performance()
        def project() -> int:
            return 42

        assert project() == 42
        record = caplog.records[-1]
        assert "executed in" in record.getMessage()
        assert record.duration_ms >= 0

    def test_log_performance_threshold(self, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger="crsgraph.utils.logging")

        @log_performance(threshold_ms=10_000)
        def fast() -> None:
            return None

        fast()

        assert "executed in" not in caplog.text

    def test_log_performance_on_error(self, caplog) -> None:
        """Timing is logged even when the function raises."""
        caplog.set_level(logging.DEBUG, logger="crsgraph.utils.logging")

        @log_performance()
        def broken() -> None:
            raise RuntimeError("no")

        with pytest.raises(RuntimeError):
            broken()

        assert "broken executed in" in caplog.text

    def test_performance_timer(self, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger="crsgraph.utils.logging")

        with PerformanceTimer("albers_setup") as timer:
            pass

        assert timer.duration_ms is not None
        assert timer.duration_ms >= 0
        assert "albers_setup completed in" in caplog.text
