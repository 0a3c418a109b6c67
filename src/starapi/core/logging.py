"""
StarAPI Logging Configuration

Console (and optional rotating file) logging for the ``starapi`` logger tree,
with key/value data attached through :func:`log_structured`.
"""

import logging
import logging.config
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from .config import StarAPIConfig, get_config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class StructuredFormatter(logging.Formatter):
    """Appends a record's ``structured_data`` as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        data = getattr(record, "structured_data", None)
        if data:
            pairs = " ".join(f"{key}={value}" for key, value in data.items())
            message = f"{message} | {pairs}"
        return message


def resolve_level(config: StarAPIConfig, log_level: Optional[str] = None) -> str:
    """
    Pick the ``starapi`` logger level.

    An explicit ``log_level`` wins; otherwise ``debug`` forces DEBUG, and the
    configured ``logging.level`` applies last.
    """
    if log_level:
        return log_level.upper()
    if config.debug:
        return "DEBUG"
    return config.logging.level


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
    config: Optional[StarAPIConfig] = None,
) -> None:
    """
    Configure logging for StarAPI.

    Args:
        log_level: Level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Rotating log file (falls back to ``logging.file_path``)
        config: Configuration to read (defaults to the global one)
    """
    config = config or get_config()
    level = resolve_level(config, log_level)

    if log_file is None and config.logging.file_path:
        log_file = Path(config.logging.file_path).expanduser()

    handlers = ["console"]
    logging_config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "()": StructuredFormatter,
                "format": LOG_FORMAT,
                "datefmt": DATE_FORMAT,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "structured",
                # stdout carries command output
                "stream": sys.stderr,
            }
        },
        "loggers": {
            "starapi": {"level": level, "handlers": handlers, "propagate": False},
            "aiohttp": {"level": "WARNING", "handlers": handlers, "propagate": False},
        },
        "root": {"level": "WARNING", "handlers": handlers},
    }

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logging_config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "structured",
            "filename": str(log_file),
            "maxBytes": config.logging.max_file_size,
            "backupCount": config.logging.backup_count,
            "encoding": "utf-8",
        }
        handlers.append("file")

    logging.config.dictConfig(logging_config)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given name (typically ``__name__``)."""
    return logging.getLogger(name)


def log_structured(
    logger: logging.Logger, level: int, message: str, **structured_data: Any
) -> None:
    """
    Log a message with structured data.

    The data is kept on the record as ``structured_data`` and rendered by
    :class:`StructuredFormatter`.

    Args:
        logger: Logger instance
        level: Logging level
        message: Log message
        **structured_data: Key/value pairs to attach
    """
    logger.log(level, message, extra={"structured_data": structured_data})
