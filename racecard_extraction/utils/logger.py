"""
Logging Configuration Module.

All loggers live under the ``racecard_extraction`` namespace and share the
handlers installed once at startup from the ``logging`` settings section:
a colored console handler and, when enabled, a rotating log file.

Usage:
    from racecard_extraction.utils.logger import setup_logger_from_config, get_logger

    setup_logger_from_config()
    logger = get_logger(__name__)
    logger.info("Parsing race card...")
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import colorama
from colorama import Fore, Style

colorama.init()

ROOT_LOGGER_NAME = "racecard_extraction"

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors each record by level."""

    LEVEL_COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, '')
        return f"{color}{super().format(record)}{Style.RESET_ALL}"


def _rotating_file_handler(file_settings: Dict[str, Any]) -> logging.Handler:
    log_path = Path(file_settings.get('path', 'logs/racecard_extraction.log'))
    log_path.parent.mkdir(parents=True, exist_ok=True)

    return logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=file_settings.get('max_bytes', 10485760),
        backupCount=file_settings.get('backup_count', 5),
        encoding='utf-8'
    )


def setup_logger(settings: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """
    Install handlers on the package logger.

    Safe to call more than once; earlier handlers are replaced.

    Args:
        settings: The ``logging`` settings section (level, format,
                 date_format, console.colorize, file.*). Missing keys
                 fall back to INFO-level colored console output.

    Returns:
        The package root logger.
    """
    settings = settings or {}
    level = getattr(logging, str(settings.get('level', 'INFO')).upper(), logging.INFO)
    log_format = settings.get('format') or DEFAULT_FORMAT
    date_format = settings.get('date_format') or DEFAULT_DATE_FORMAT

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.propagate = False

    console_handler = logging.StreamHandler(sys.stdout)
    if settings.get('console', {}).get('colorize', True):
        console_handler.setFormatter(ColoredFormatter(log_format, datefmt=date_format))
    else:
        console_handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))
    root_logger.addHandler(console_handler)

    file_settings = settings.get('file', {})
    if file_settings.get('enabled', False):
        file_handler = _rotating_file_handler(file_settings)
        file_handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))
        root_logger.addHandler(file_handler)

    for handler in root_logger.handlers:
        handler.setLevel(level)

    root_logger.debug("Logging initialized")
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the package namespace (pass ``__name__``)."""
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logger_from_config() -> logging.Logger:
    """Initialize logging from the ``logging`` section of the settings file."""
    from config import get_config

    return setup_logger(get_config("logging", {}))
