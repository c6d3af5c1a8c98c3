"""
Structured logging for the audio device MCP server.

Log records are emitted as JSON objects by default so that request traces
(method, request id, client address) can be consumed by log shippers
without extra parsing. A plain text format is available for local runs.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mcp_audio.config import LoggingConfig

# Root logger name for the package
ROOT_LOGGER_NAME = "mcp_audio"

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# LogRecord attributes that are not user supplied extras
_RESERVED_RECORD_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }
)


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    # Insertion order of record.__dict__ keeps the extras in call order
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_RECORD_KEYS and value is not None
    }


class JSONFormatter(logging.Formatter):
    """
    A logging formatter that outputs log records as JSON objects.

    Each entry carries ``timestamp`` (record creation time, UTC, ISO 8601),
    ``level``, ``logger`` and ``message``, followed by any non-None fields
    passed via ``extra``. Values that are not JSON serializable are rendered
    with ``str``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        entry.update(_extra_fields(record))
        return json.dumps(entry, default=str)


def _resolve_level(name: str) -> int:
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _build_handler(json_format: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    formatter = (
        JSONFormatter() if json_format else logging.Formatter(DEFAULT_LOG_FORMAT)
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    config: LoggingConfig | None = None,
    *,
    level: str = "INFO",
    json_format: bool = True,
    log_to_stdout: bool = True,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        config: Optional LoggingConfig. When given, its values override the
            keyword arguments and ``debug_mode`` forces DEBUG.
        level: Log level used when no config is provided.
        json_format: Whether to emit JSON lines.
        log_to_stdout: Whether to attach a stdout handler at all.

    Returns:
        The configured ``mcp_audio`` logger. Calling this again replaces the
        previous handler instead of adding a second one.

    Example:
        >>> logger = setup_logging(level="DEBUG", json_format=False)
        >>> logger.info("Server started", extra={"port": 1234})
    """
    if config is not None:
        level = "DEBUG" if config.debug_mode else config.level
        json_format = config.json_format
        log_to_stdout = config.log_to_stdout

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(_resolve_level(level))
    logger.handlers.clear()
    if log_to_stdout:
        logger.addHandler(_build_handler(json_format))
    # Records are not forwarded to the root logger
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger of the package logger.

    Args:
        name: Usually ``__name__``. The ``mcp_audio.`` prefix is added when
            missing.

    Returns:
        A logger instance.
    """
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    return logging.getLogger(name)
