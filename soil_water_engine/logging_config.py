"""
Logging setup for soil-water-engine.

Engine modules only call ``get_logger(__name__)``; handlers are installed
by the CLI (``setup_logging`` with a verbosity-derived level) or by
library users through ``configure_from_env``.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import TextIO

DEFAULT_LOG_FILE = "soil_water_engine.log"

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def _parse_level(level: str) -> int:
    """Numeric level for a name; unknown names fall back to INFO."""
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else logging.INFO


def _console_handler(level: int, stream: TextIO | None) -> logging.Handler:
    # Default to stderr; stdout carries CLI output
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler(log_file: str) -> logging.Handler:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS
    )
    # Analysis details (per-step adjustments) are DEBUG; keep them on disk
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    enable_file_logging: bool = True,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Configure the root logger, replacing any existing handlers.

    Args:
        level: Console log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Rotating log file path (defaults to soil_water_engine.log)
        enable_file_logging: Whether to add the file handler
        stream: Console stream (defaults to sys.stderr)

    Returns:
        Configured root logger
    """
    numeric_level = _parse_level(level)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()

    root.addHandler(_console_handler(numeric_level, stream))
    if enable_file_logging:
        root.addHandler(_file_handler(log_file or DEFAULT_LOG_FILE))

    return root


def level_for_verbosity(verbosity: int, quiet: bool = False) -> str:
    """
    Map CLI verbosity flags to a log level name.

    Args:
        verbosity: Number of ``-v`` flags given (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        quiet: Only report errors

    Returns:
        Log level name accepted by setup_logging
    """
    if quiet:
        return "ERROR"
    if verbosity >= 2:
        return "DEBUG"
    if verbosity == 1:
        return "INFO"
    return "WARNING"


def get_logger(name: str) -> logging.Logger:
    """Module logger; use with ``__name__``."""
    return logging.getLogger(name)


def configure_from_env() -> logging.Logger:
    """
    Configure logging from LOG_LEVEL, LOG_FILE and DISABLE_FILE_LOGGING.

    Returns:
        Configured root logger
    """
    return setup_logging(
        level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=os.getenv("LOG_FILE", DEFAULT_LOG_FILE),
        enable_file_logging=not os.getenv("DISABLE_FILE_LOGGING"),
    )
