"""
Handlers for RequestLogger.

build_handlers() turns a LoggingConfig into ready handlers: one formatter
shared by all of them, static extra fields attached as a filter.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List

from .config import LoggingConfig
from .filters import ExtraFieldsFilter
from .formatters import get_formatter


def _console_stream(name: str):
    # Looked up per handler, sys.stdout may have been replaced
    return sys.stderr if name == "stderr" else sys.stdout


def _attach(handler: logging.Handler, config: LoggingConfig, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(config.level)
    handler.setFormatter(formatter)
    if config.extra_fields:
        handler.addFilter(ExtraFieldsFilter(dict(config.extra_fields)))
    return handler


def open_log_file(config: LoggingConfig) -> RotatingFileHandler:
    """Rotating handler for config.file_path; missing directories are created."""
    path = Path(config.file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        filename=str(path),
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding='utf-8'
    )


def build_handlers(config: LoggingConfig) -> List[logging.Handler]:
    """
    Create the handlers described by ``config``.

    Example:
        >>> for handler in build_handlers(LoggingConfig.create(format="json")):
        ...     logging.getLogger("xhr_client").addHandler(handler)
    """
    formatter = get_formatter(config.format.value)
    handlers: List[logging.Handler] = []

    if config.enable_console:
        handlers.append(_attach(
            logging.StreamHandler(_console_stream(config.console_stream)), config, formatter
        ))

    if config.enable_file:
        handlers.append(_attach(open_log_file(config), config, formatter))

    return handlers
