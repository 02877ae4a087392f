"""
Logging configuration for Hebe.

Everything logs under the ``hebe`` logger. The console handler writes to
stderr so response bodies printed on stdout can be piped untouched; the
optional file handler rotates and keeps full debug detail.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "hebe"
DEFAULT_LOG_DIR = Path.home() / ".hebe" / "logs"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord has; anything else was passed through `extra`
_RECORD_FIELDS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """Pipe-separated formatter that appends ``extra`` fields as key=value."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)-24s | "
                "%(funcName)-18s | %(lineno)-4d | %(message)s",
            datefmt=DATE_FORMAT,
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = {k: v for k, v in vars(record).items() if k not in _RECORD_FIELDS}
        if extras:
            line += " | " + " ".join(f"{k}={v}" for k, v in sorted(extras.items()))
        return line


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt=DATE_FORMAT,
    ))
    return handler


def _file_handler(path: Path, max_bytes: int, backup_count: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(StructuredFormatter())
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    log_dir: str | None = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    enable_console: bool = True,
    enable_file: bool = False,
) -> logging.Logger:
    """
    Configure the ``hebe`` logger, replacing any handlers from an earlier call.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Log file path, takes precedence over log_dir
        log_dir: Directory for hebe.log (defaults to ~/.hebe/logs)
        max_bytes: Size at which the log file rotates
        backup_count: Rotated files to keep
        enable_console: Log to stderr at ``level``
        enable_file: Log everything down to DEBUG to a rotating file

    Returns:
        The ``hebe`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers.clear()

    if enable_console:
        logger.addHandler(_console_handler(logger.level))

    if enable_file:
        if log_file:
            path = Path(log_file)
        else:
            path = (Path(log_dir) if log_dir else DEFAULT_LOG_DIR) / "hebe.log"
        logger.addHandler(_file_handler(path, max_bytes, backup_count))

    # Keep hebe records out of whatever the root logger is doing
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a hebe module, e.g. ``get_logger(__name__)``."""
    return logging.getLogger(name)


def configure_logging(debug: bool = False, log_file: str | None = None) -> logging.Logger:
    """
    Logging setup used by the CLI: warnings only unless ``debug``.

    Args:
        debug: Log at DEBUG, including agent request/response dumps
        log_file: Also write logs to this file
    """
    return setup_logging(
        level="DEBUG" if debug else "WARNING",
        log_file=log_file,
        enable_console=True,
        enable_file=log_file is not None,
    )
