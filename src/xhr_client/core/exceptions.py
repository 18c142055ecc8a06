"""
Иерархия исключений XHR Client.

Классификация:
- ConfigurationError - ошибка конфигурации, выбрасывается синхронно из dispatch
- InvalidStateError - неверная последовательность вызовов транспорта
- RequestFailedError - неудачный запрос, используется только для отклонения future
"""

from typing import Any, Optional

from .states import ErrorState

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class XHRClientException(Exception):
    """Базовое исключение XHR Client."""

    fatal: bool = False

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ ИСПОЛЬЗОВАНИЯ (синхронные)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigurationError(XHRClientException):
    """
    Ошибка конфигурации.

    Примеры:
    - Пустой URL при dispatch
    - Невалидные значения в ClientConfig
    """
    fatal = True

class InvalidStateError(XHRClientException):
    """
    Операция недопустима в текущем состоянии транспорта.

    Примеры:
    - set_request_header() до open() или после send()
    - response_text при response_type отличном от text
    """
    pass

class RequestInProgressError(InvalidStateError):
    """
    Повторный dispatch до завершения предыдущего.

    Args:
        url: URL активного запроса
    """

    def __init__(self, url: Optional[str] = None):
        self.url = url
        msg = "A dispatch is already in flight on this controller"
        if url:
            msg += f" (url: {url})"
        super().__init__(msg)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# НЕУДАЧНЫЕ ЗАПРОСЫ (отклонение future)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class RequestFailedError(XHRClientException):
    """
    Запрос завершился неудачей.

    Не выбрасывается из dispatch: передается в future, созданный
    через to_future(), вместе с самим запросом.

    Args:
        request: Объект запроса (тот же, что получают обработчики)
        error_state: Причина неудачи
        message: Сообщение
    """

    def __init__(self, request: Any, error_state: ErrorState, message: str):
        self.request = request
        self.error_state = error_state
        self.url = getattr(request, "url", None)

        msg = message
        if self.url:
            msg += f" (url: {self.url})"

        super().__init__(msg)

class ConnectionFailedError(RequestFailedError):
    """Нет HTTP статуса: соединение не установлено, таймаут или сеть."""

    def __init__(self, request: Any):
        super().__init__(request, ErrorState.CONNECTION, ErrorState.CONNECTION.describe())

class HTTPStatusError(RequestFailedError):
    """
    HTTP статус вне диапазона 2XX.

    Args:
        request: Объект запроса
        status_code: HTTP статус
    """

    def __init__(self, request: Any, status_code: int):
        self.status_code = status_code
        super().__init__(request, ErrorState.HTTPSTATUS, ErrorState.HTTPSTATUS.describe(status_code))

class BodyTypeError(RequestFailedError):
    """2XX ответ, но тело не удалось декодировать согласно response kind."""

    def __init__(self, request: Any):
        super().__init__(request, ErrorState.BODYTYPE, ErrorState.BODYTYPE.describe())

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def classify_error_state(
    request: Any,
    error_state: ErrorState,
    status_code: int = 0
) -> RequestFailedError:
    """
    Построить исключение для причины неудачи.

    Args:
        request: Объект запроса
        error_state: Результат error_state()
        status_code: HTTP статус (нужен для HTTPSTATUS)

    Returns:
        Исключение соответствующего типа

    Examples:
        >>> exc = classify_error_state(req, ErrorState.HTTPSTATUS, 404)
        >>> assert isinstance(exc, HTTPStatusError)
        >>> assert str(exc).startswith("HTTP 404")
    """

    if error_state is ErrorState.CONNECTION:
        return ConnectionFailedError(request)

    elif error_state is ErrorState.HTTPSTATUS:
        return HTTPStatusError(request, status_code)

    elif error_state is ErrorState.BODYTYPE:
        return BodyTypeError(request)

    else:
        # NONE не является ошибкой, но future все равно должен получить исключение
        return RequestFailedError(request, error_state, error_state.describe())
