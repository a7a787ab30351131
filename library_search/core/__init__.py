"""
Core module providing foundational components.

This module contains the configuration loader, centralized logging setup,
and custom exception hierarchy. It has no internal dependencies.
"""

from .config_loader import get_config, reload_config, Config
from .logger import get_logger
from .exceptions import (
    LibrarySearchError,
    ConfigurationError,
    AccessError,
    SearchError
)

__all__ = [
    "get_config",
    "reload_config",
    "Config",
    "get_logger",
    "LibrarySearchError",
    "ConfigurationError",
    "AccessError",
    "SearchError"
]
