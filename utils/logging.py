"""
Logging Utility - Structured JSON Logging

Provides centralized, structured logging configuration for the worker.
Supports JSON format for production and human-readable format for development,
written to stdout, to a daily-rolled log file, or both.

Usage:
    from utils.logging import setup_logging

    setup_logging(level="INFO", format_type="json", output="both", log_dir="Logs")
    logger = logging.getLogger(__name__)
    logger.info("Processed URL", extra={"url": "https://example.com/a"})
"""

import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import orjson

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_NAME = "log.txt"

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object, including `extra` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return orjson.dumps(payload, default=str).decode("utf-8")


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def setup_logging(
    level: str = "INFO",
    format_type: str = "json",
    output: str = "stdout",
    log_dir: str = "Logs",
) -> None:
    """Configure application-wide logging.

    Replaces any handlers previously installed on the root logger, so calling it
    twice does not duplicate output.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Log format ('json' or 'text')
        output: Log output ('stdout', 'file' or 'both')
        log_dir: Directory for the daily-rolled log file

    Raises:
        ValueError: If format_type or output is not recognized
    """
    if format_type not in ("json", "text"):
        raise ValueError(f"Unsupported log format: {format_type}")

    if output not in ("stdout", "file", "both"):
        raise ValueError(f"Unsupported log output: {output}")

    formatter: logging.Formatter
    if format_type == "json":
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    handlers: list[logging.Handler] = []

    if output in ("stdout", "both"):
        handlers.append(logging.StreamHandler(sys.stdout))

    if output in ("file", "both"):
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.TimedRotatingFileHandler(
                log_path / LOG_FILE_NAME,
                when="midnight",
                encoding="utf-8",
            )
        )

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Silence discovery cache warnings from the API client
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)


def shutdown_logging() -> None:
    """Flush and close every handler."""
    logging.shutdown()
