"""
Logging configuration for applications embedding crsgraph.

Library modules only create loggers with ``logging.getLogger(__name__)``.
Handlers and formats are installed by ``setup_logging``, which a host
application calls once at startup. Discovery and conversion code passes
context such as ``source_crs``, ``target_crs`` and ``duration_ms`` through
``extra``; the JSON formatter writes those fields out as top-level keys.
"""

import json
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from crsgraph.core.config import settings

# Attributes every LogRecord carries; anything else was added via ``extra``.
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}

# Loggers that trace graph searches; capped at INFO by setup_logging.
_CHATTY_LOGGERS = ("crsgraph.core.crs.discovery",)

_ROTATE_BYTES = 10 * 1024 * 1024
_ROTATE_BACKUPS = 5

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with ``extra`` fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(
            (key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES
        )

        return json.dumps(entry, default=str)


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        plain = record.levelname
        color = self.COLORS.get(plain)
        if color is None:
            return super().format(record)

        record.levelname = f"{color}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # Other handlers share the record
            record.levelname = plain


def get_log_level(level_name: str) -> int:
    """
    Convert a level name to its logging constant.

    Args:
        level_name: DEBUG, INFO, WARNING, ERROR or CRITICAL, any case

    Returns:
        Logging level constant, INFO for unknown names
    """
    return _LEVELS.get(level_name.upper(), logging.INFO)


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    if settings.environment == "development":
        handler.setFormatter(
            ColoredFormatter(
                "%(levelname)s | %(asctime)s | %(name)s:%(lineno)d | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(levelname)s - %(asctime)s - %(name)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    return handler


def _file_handler(path: Path, level: int, json_logs: bool) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=_ROTATE_BYTES,
        backupCount=_ROTATE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)

    if json_logs:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(levelname)s - %(name)s - "
                "%(module)s:%(funcName)s:%(lineno)d - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
    json_logs: Optional[bool] = None,
    enable_console: bool = True,
) -> None:
    """
    Configure process-wide logging.

    Replaces the root logger's handlers. Arguments left as None fall back to
    the values in ``settings``. Discovery tracing is capped at INFO even when
    the rest runs at DEBUG, since it logs every failed branch of a search.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to a rotating log file
        json_logs: Whether to use JSON format for file logs
        enable_console: Whether to enable console logging
    """
    log_level = log_level or settings.effective_log_level
    log_file = log_file if log_file is not None else settings.log_file
    json_logs = settings.json_logs if json_logs is None else json_logs

    level = get_log_level(log_level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if enable_console:
        root.addHandler(_console_handler(level))
    if log_file:
        root.addHandler(_file_handler(Path(log_file), level, json_logs))

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))

    root.info(
        f"Logging initialized: level={log_level}, "
        f"environment={settings.environment}, "
        f"json_logs={json_logs}, "
        f"console={enable_console}, "
        f"file={log_file is not None}"
    )
