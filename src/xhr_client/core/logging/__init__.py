"""
Logging system for XHR Client.

Example:
    >>> from xhr_client.core.logging import LoggingConfig, RequestLogger
    >>> logger = RequestLogger(LoggingConfig.create(level="DEBUG", format="json"))
    >>> logger.info("Request dispatched", method="GET", url="https://api.com")
"""

from .config import LoggingConfig, LogFormat, parse_level
from .logger import RequestLogger, DEFAULT_LOGGER_NAME
from .formatters import JSONFormatter, TextFormatter, get_formatter
from .filters import ExtraFieldsFilter
from .handlers import build_handlers, open_log_file

__all__ = [
    # Config
    "LoggingConfig",
    "LogFormat",
    "parse_level",
    # Logger
    "RequestLogger",
    "DEFAULT_LOGGER_NAME",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "get_formatter",
    # Filters
    "ExtraFieldsFilter",
    # Handlers
    "build_handlers",
    "open_log_file",
]
