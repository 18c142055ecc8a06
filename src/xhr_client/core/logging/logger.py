"""
Main logger for XHR Client.

Wraps a stdlib logger configured from LoggingConfig. Keyword arguments of
every call become record extras after sensitive values are masked.
"""

import logging
from typing import Optional, Any

from ..states import ErrorState
from .config import LoggingConfig
from .handlers import build_handlers
from ...utils.sanitizer import mask_sensitive_data

DEFAULT_LOGGER_NAME = "xhr_client"


class RequestLogger:
    """
    Logger used by LifecycleController.

    Example:
        >>> config = LoggingConfig.create(level="DEBUG", format="json")
        >>> logger = RequestLogger(config)
        >>> logger.info("Request dispatched", method="GET", url="https://api.com")
        >>> logger.log_outcome(ErrorState.HTTPSTATUS, "Request completed", status=404)
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = DEFAULT_LOGGER_NAME):
        """
        Args:
            config: Logging configuration (uses defaults if None)
            name: Logger name; handlers of a previous RequestLogger with the
                same name are replaced
        """
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False

        self._logger = logging.getLogger(name)
        self._logger.setLevel(self.config.level)
        self._logger.propagate = False

        for handler in self._logger.handlers[:]:
            if not isinstance(handler, logging.NullHandler):
                self._logger.removeHandler(handler)

        for handler in build_handlers(self.config):
            self._logger.addHandler(handler)

    @property
    def logger(self) -> logging.Logger:
        """Underlying stdlib logger."""
        return self._logger

    def _log(self, level: int, message: str, fields: dict) -> None:
        self._logger.log(level, message, extra=mask_sensitive_data(fields))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def log_outcome(self, state: ErrorState, message: str, **kwargs: Any) -> None:
        """Record a completed request at the level configured for ``state``."""
        self._log(self.config.level_for(state), message, kwargs)

    def close(self) -> None:
        """
        Flush and close all handlers. Safe to call multiple times.
        """
        if self._closed:
            return

        for handler in self._logger.handlers[:]:
            if isinstance(handler, logging.NullHandler):
                continue
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
