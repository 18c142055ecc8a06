"""
Перечисления состояний запроса.

ReadyState повторяет стадии XMLHttpRequest, ResponseKind задает способ
декодирования тела ответа, ErrorState описывает причину неудачи.
"""

from enum import Enum, IntEnum
from typing import Optional, Union


class ReadyState(IntEnum):
    """Transport lifecycle stages."""
    UNSENT = 0
    OPENED = 1
    HEADERS_RECEIVED = 2
    LOADING = 3
    DONE = 4


class ResponseKind(str, Enum):
    """
    How the transport decodes the response body.

    TEXT is the default. An empty string is accepted as an alias for TEXT.
    """
    TEXT = "text"
    ARRAYBUFFER = "arraybuffer"
    BLOB = "blob"
    DOCUMENT = "document"
    JSON = "json"

    @classmethod
    def parse(cls, value: Union[str, "ResponseKind"]) -> Optional["ResponseKind"]:
        """
        Convert a string or member into ResponseKind.

        Returns:
            ResponseKind or None if value is not recognised

        Example:
            >>> ResponseKind.parse("json")
            <ResponseKind.JSON: 'json'>
            >>> ResponseKind.parse("") is ResponseKind.TEXT
            True
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        if value == "":
            return cls.TEXT
        try:
            return cls(value.lower())
        except ValueError:
            return None


class ErrorState(IntEnum):
    """
    Причина неудачи запроса.

    Проверки выполняются строго по порядку: CONNECTION, затем HTTPSTATUS,
    затем BODYTYPE.
    """
    NONE = 0
    CONNECTION = 1   # Connection failed
    HTTPSTATUS = 2   # HTTP status is not 2XX
    BODYTYPE = 3     # Body could not be decoded according to response kind

    def describe(self, status: int = 0) -> str:
        """Human readable message for this state."""
        if self is ErrorState.CONNECTION:
            return "Connection failed"
        if self is ErrorState.HTTPSTATUS:
            return f"HTTP {status}"
        if self is ErrorState.BODYTYPE:
            return "Unexpected response body format"
        return "No error"
