"""
Log formatters: JSON for machines, key=value text for humans.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Tuple

# Attributes every LogRecord has; anything else came in through ``extra``
_STANDARD_FIELDS = frozenset(logging.LogRecord(
    "", logging.INFO, "", 0, "", (), None
).__dict__) | {"message", "asctime", "taskName"}


def iter_extra_fields(record: logging.LogRecord) -> Iterator[Tuple[str, Any]]:
    """Yield (name, value) for the fields passed via ``extra``."""
    for key, value in record.__dict__.items():
        if key not in _STANDARD_FIELDS and not key.startswith('_'):
            yield key, value


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Example output:
        {"timestamp": "2024-01-15T10:30:45.123000+00:00", "level": "INFO",
         "logger": "xhr_client", "message": "Request completed",
         "status": 200, "error_state": "NONE"}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(iter_extra_fields(record))

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """
    Plain text formatter.

    Format: [timestamp] [level] [logger] message key=value...

    Example output:
        [2024-01-15 10:30:45] [INFO] [xhr_client] Request dispatched method=GET url=https://api.com
    """

    def __init__(self):
        super().__init__(
            fmt='[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    def format(self, record: logging.LogRecord) -> str:
        base_msg = super().format(record)
        extra_fields = [f"{key}={value}" for key, value in iter_extra_fields(record)]
        if extra_fields:
            base_msg += " " + " ".join(extra_fields)
        return base_msg


def get_formatter(format_type: str) -> logging.Formatter:
    """
    Get formatter by type.

    Raises:
        ValueError: If format_type is unknown
    """
    formatters = {
        "json": JSONFormatter,
        "text": TextFormatter,
    }

    formatter_class = formatters.get(format_type.lower())
    if not formatter_class:
        raise ValueError(
            f"Unknown format type: {format_type}. "
            f"Available: {', '.join(formatters.keys())}"
        )

    return formatter_class()
