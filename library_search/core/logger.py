"""
Process-wide logging for the library searcher.

Log records go to stdout and, when a logs directory is configured, to a
size-rotated library_search.log. Handlers are installed on the root
logger once; later calls reuse them.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from ..utils.file_utils import ensure_directory


LOG_FILENAME = "library_search.log"

# PDF libraries log every parsed object at DEBUG
QUIET_LOGGERS = ("pdfminer", "pdfplumber", "pypdf")

_logger_initialized = False


def _file_handler(
    logs_directory: Union[str, Path],
    max_file_size_mb: int,
    backup_count: int
) -> RotatingFileHandler:
    log_path = ensure_directory(logs_directory) / LOG_FILENAME
    return RotatingFileHandler(
        log_path,
        maxBytes=max_file_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8"
    )


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    logs_directory: Optional[Union[str, Path]] = None,
    max_file_size_mb: int = 10,
    backup_count: int = 5
) -> None:
    """
    Install console and file handlers on the root logger.

    Does nothing if logging was already set up in this process.

    Args:
        log_level: Name of the root level, e.g. "DEBUG" or "INFO".
        log_format: Format string shared by all handlers.
        logs_directory: Where library_search.log is written. None logs to
                        the console only.
        max_file_size_mb: Size at which the log file is rotated.
        backup_count: Rotated files kept next to the active one.
    """
    global _logger_initialized

    if _logger_initialized:
        return

    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    handlers = [logging.StreamHandler(sys.stdout)]
    if logs_directory:
        handlers.append(_file_handler(logs_directory, max_file_size_mb, backup_count))

    formatter = logging.Formatter(log_format)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    _logger_initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Return the logger for a module, setting up logging on first use.

    The settings come from the logging and paths sections of the
    configuration. If the configuration cannot be loaded, console
    logging at INFO is used instead.
    """
    if not _logger_initialized:
        try:
            from .config_loader import get_config
            config = get_config()
        except Exception:
            setup_logging()
        else:
            setup_logging(
                log_level=config.logging.level,
                log_format=config.logging.format,
                logs_directory=config.paths.logs_directory,
                max_file_size_mb=config.logging.max_file_size_mb,
                backup_count=config.logging.backup_count
            )

    return logging.getLogger(name)
