"""
================================================================================
Trendyol Tools Common Utilities
================================================================================

Shared configuration access and logging setup for the automation suites.

Exports:
    - ConfigLoader: Singleton YAML + environment configuration loader
    - get_config: Convenience function to get configuration values
    - init_logger: Initialize the loguru logger with standard settings
    - ensure_directory: Create a directory if it does not exist

Usage:
    from trendyol_tools.common import get_config, init_logger

    init_logger()
    keyword = get_config("test_data.search_keyword", "laptop")

================================================================================
"""

import os
import sys
from typing import Optional

from loguru import logger

from .global_config import ConfigLoader, ConfigurationError, get_config


# ============================================================
# Logging Setup
# ============================================================

_logger_initialized = False

DEFAULT_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def init_logger(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Route loguru output to a colourised stderr sink and, when ``logging.file``
    is configured, a rotating file shared by all xdist workers.

    Calls after the first are no-ops unless ``force`` is given.

    Example:
        init_logger()
        init_logger(level="DEBUG", log_file="logs/ui.log", force=True)
    """
    global _logger_initialized

    if _logger_initialized and not force:
        return

    level = (level or get_config("logging.level", "INFO")).upper()
    fmt = format_string or get_config("logging.format", DEFAULT_LOG_FORMAT)

    logger.remove()
    logger.add(sys.stderr, format=fmt, level=level, colorize=True)

    log_file = log_file or get_config("logging.file")
    if log_file:
        ensure_directory(os.path.dirname(log_file) or ".")
        # enqueue: several pytest-xdist workers append to the same file
        logger.add(
            log_file,
            format=fmt,
            level=level,
            rotation=get_config("logging.rotation", "10 MB"),
            retention=get_config("logging.retention", "7 days"),
            encoding="utf-8",
            enqueue=True,
        )

    _logger_initialized = True
    logger.debug(f"Logger ready (level={level}, file={log_file or '-'})")


# ============================================================
# Common Utilities
# ============================================================

def ensure_directory(path: str) -> str:
    """
    Ensures a directory exists, creating it if necessary.

    Args:
        path: Directory path

    Returns:
        The path (for chaining)
    """
    os.makedirs(path, exist_ok=True)
    return path


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "get_config",
    "init_logger",
    "ensure_directory",
]
