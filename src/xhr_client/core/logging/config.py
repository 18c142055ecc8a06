"""
Настройки логирования жизненного цикла запросов.

Besides the output (console stream, rotating file, format) the config
decides at which level each request outcome is recorded: by default a
successful request is INFO and every ErrorState is WARNING.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from ..states import ErrorState

LevelLike = Union[int, str]


class LogFormat(str, Enum):
    """Log output formats."""
    JSON = "json"
    TEXT = "text"


def parse_level(value: LevelLike) -> int:
    """
    Convert "debug", "WARNING" or logging.INFO to a stdlib level number.

    Raises:
        ValueError: Unknown level name
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    level = logging.getLevelName(str(value).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {value!r}")
    return level


def _default_outcome_levels() -> Mapping[ErrorState, int]:
    return MappingProxyType({
        ErrorState.NONE: logging.INFO,
        ErrorState.CONNECTION: logging.WARNING,
        ErrorState.HTTPSTATUS: logging.WARNING,
        ErrorState.BODYTYPE: logging.WARNING,
    })


@dataclass(frozen=True)
class LoggingConfig:
    """
    Attributes:
        level: Minimum stdlib level written by the handlers
        format: json or text
        console_stream: "stdout", "stderr" or None (no console output)
        file_path: Rotating log file (None = no file output)
        max_bytes: File size that triggers rotation
        backup_count: Rotated files to keep
        outcome_levels: Level of the "Request completed" record per ErrorState
        extra_fields: Static fields added to every record

    Example:
        >>> LoggingConfig.create(level="DEBUG", format="json",
        ...                      outcome_levels={"HTTPSTATUS": "ERROR"})
    """

    level: int = logging.INFO
    format: LogFormat = LogFormat.TEXT
    console_stream: Optional[str] = "stdout"
    file_path: Optional[str] = None
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5
    outcome_levels: Mapping[ErrorState, int] = field(default_factory=_default_outcome_levels)
    extra_fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.console_stream not in (None, "stdout", "stderr"):
            raise ValueError(f"console_stream must be 'stdout', 'stderr' or None, got {self.console_stream!r}")
        if self.max_bytes <= 0:
            raise ValueError("max_bytes must be positive")

    @property
    def enable_console(self) -> bool:
        return self.console_stream is not None

    @property
    def enable_file(self) -> bool:
        return bool(self.file_path)

    def level_for(self, state: ErrorState) -> int:
        """Level of the completion record for a request that ended with ``state``."""
        return self.outcome_levels.get(state, logging.WARNING)

    @classmethod
    def create(
        cls,
        level: LevelLike = "INFO",
        format: str = "text",
        enable_console: bool = True,
        enable_file: bool = False,
        file_path: Optional[str] = None,
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
        outcome_levels: Optional[Dict[str, LevelLike]] = None,
        extra_fields: Optional[Dict[str, Any]] = None,
        console_stream: str = "stdout"
    ) -> "LoggingConfig":
        """
        Build a config from plain values (environment, CLI flags).

        ``outcome_levels`` overrides single entries by ErrorState name, e.g.
        ``{"HTTPSTATUS": "ERROR"}``.

        Raises:
            ValueError: enable_file without file_path, unknown level or state name
        """
        if enable_file and not file_path:
            raise ValueError("file_path is required when enable_file=True")

        levels = dict(_default_outcome_levels())
        for name, value in (outcome_levels or {}).items():
            try:
                state = ErrorState[name.upper()]
            except KeyError:
                raise ValueError(f"Unknown error state: {name!r}") from None
            levels[state] = parse_level(value)

        return cls(
            level=parse_level(level),
            format=LogFormat(format.lower()),
            console_stream=console_stream if enable_console else None,
            file_path=file_path if enable_file else None,
            max_bytes=max_bytes,
            backup_count=backup_count,
            outcome_levels=MappingProxyType(levels),
            extra_fields=MappingProxyType(dict(extra_fields or {})),
        )
