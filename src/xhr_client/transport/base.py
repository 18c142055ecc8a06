# src/xhr_client/transport/base.py
"""
Abstract transport with XMLHttpRequest semantics.

The transport owns the low-level state machine
(UNSENT -> OPENED -> HEADERS_RECEIVED -> LOADING -> DONE) and the decoded
response. Concrete subclasses only move bytes: they implement ``_start()``
and ``_cancel()`` and report progress through the ``_receive_*`` / ``_fail``
/ ``_time_out`` hooks, always from the event loop thread.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..core.exceptions import InvalidStateError
from ..core.states import ReadyState, ResponseKind
from .decoding import decode_body

Notification = Callable[[], Any]

_NOT_DECODED = object()


@dataclass
class PendingRequest:
    """
    Snapshot of a request handed to ``Transport._start()``.

    Attributes:
        method: HTTP method
        url: Request URL
        headers: Request headers (repeated names already combined)
        body: Request body or None
        auth: (user_name, password) or None
        timeout_ms: Timeout in milliseconds (0 = disabled)
        response_type: Expected response kind
        send_id: Sequence number of this send on the transport
    """
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    auth: Optional[Tuple[str, str]] = None
    timeout_ms: int = 0
    response_type: ResponseKind = ResponseKind.TEXT
    send_id: int = 0

    @property
    def timeout_seconds(self) -> Optional[float]:
        """Timeout for libraries that take seconds (None = no timeout)."""
        return self.timeout_ms / 1000.0 if self.timeout_ms > 0 else None


class Transport(ABC):
    """
    Transport capability consumed by LifecycleController.

    Example:
        >>> transport = MockTransport()
        >>> transport.on_ready_state_change = lambda: print(transport.ready_state)
        >>> transport.open("GET", "https://api.example.com/users")
        1
        >>> transport.send()
    """

    def __init__(self):
        self.on_ready_state_change: Optional[Notification] = None
        self.on_timeout: Optional[Notification] = None
        self.timeout: int = 0
        self._response_type = ResponseKind.TEXT
        self._ready_state = ReadyState.UNSENT
        self._send_id = 0
        self._reset_request()
        self._reset_response()

    def _reset_request(self) -> None:
        self._method = ""
        self._url = ""
        self._auth: Optional[Tuple[str, str]] = None
        self._request_headers: Dict[str, str] = {}
        self._send_flag = False

    def _reset_response(self) -> None:
        self._status = 0
        self._status_text = ""
        self._response_headers: List[Tuple[str, str]] = []
        self._content = b""
        self._decoded: Any = _NOT_DECODED

    # ==================== Public API ====================

    def open(
        self,
        method: str,
        url: str,
        is_async: bool = True,
        user_name: Optional[str] = None,
        password: Optional[str] = None
    ) -> None:
        """
        Initialize a new request, cancelling any request in progress.

        Args:
            method: HTTP method
            url: Request URL
            is_async: Must be True, synchronous mode is not supported
            user_name: User name for HTTP authentication
            password: Password for HTTP authentication
        """
        if not is_async:
            raise InvalidStateError("Synchronous requests are not supported")
        if not url:
            raise InvalidStateError("Cannot open a request without URL")

        if self._send_flag:
            self._send_id += 1
            self._cancel()

        self._reset_request()
        self._reset_response()
        self._method = method.upper()
        self._url = url
        if user_name is not None:
            self._auth = (user_name, password or "")
        self._set_state(ReadyState.OPENED)

    def set_request_header(self, name: str, value: str) -> None:
        """Add a request header. Repeated names are combined with ", "."""
        if self._ready_state != ReadyState.OPENED or self._send_flag:
            raise InvalidStateError("set_request_header() requires open() and no send()")
        for existing in self._request_headers:
            if existing.lower() == name.lower():
                self._request_headers[existing] += ", " + value
                return
        self._request_headers[name] = value

    def send(self, body: Any = None) -> None:
        """Start the request. Returns immediately."""
        if self._ready_state != ReadyState.OPENED or self._send_flag:
            raise InvalidStateError("send() requires open() and no previous send()")
        self._send_flag = True
        self._send_id += 1
        self._start(PendingRequest(
            method=self._method,
            url=self._url,
            headers=dict(self._request_headers),
            body=None if self._method in ("GET", "HEAD") else body,
            auth=self._auth,
            timeout_ms=self.timeout,
            response_type=self._response_type,
            send_id=self._send_id,
        ))

    def abort(self) -> None:
        """
        Cancel the request in progress.

        An active request is moved to DONE with status 0 (one notification)
        and the transport then returns to UNSENT.
        """
        if self._send_flag and self._ready_state not in (ReadyState.UNSENT, ReadyState.DONE):
            self._send_id += 1
            self._cancel()
            self._send_flag = False
            self._reset_response()
            self._set_state(ReadyState.DONE)
        elif self._ready_state == ReadyState.OPENED:
            self._reset_request()
        self._ready_state = ReadyState.UNSENT

    def close(self) -> None:
        """Release resources held by the transport. Nothing to release here."""

    async def aclose(self) -> None:
        self.close()

    # ==================== Properties ====================

    @property
    def ready_state(self) -> ReadyState:
        return self._ready_state

    @property
    def status(self) -> int:
        return self._status

    @property
    def status_text(self) -> str:
        return self._status_text

    @property
    def response_type(self) -> ResponseKind:
        return self._response_type

    @response_type.setter
    def response_type(self, value) -> None:
        if self._ready_state in (ReadyState.LOADING, ReadyState.DONE):
            raise InvalidStateError("response_type cannot be changed after loading started")
        kind = ResponseKind.parse(value)
        if kind is not None:
            self._response_type = kind

    def get_all_response_headers(self) -> str:
        """All response headers as "name: value" lines separated by CRLF."""
        if self._ready_state < ReadyState.HEADERS_RECEIVED:
            return ""
        combined: Dict[str, str] = {}
        for name, value in self._response_headers:
            key = name.lower()
            combined[key] = f"{combined[key]}, {value}" if key in combined else value
        return "".join(f"{name}: {combined[name]}\r\n" for name in sorted(combined))

    def get_response_header(self, name: str) -> Optional[str]:
        """Value of a response header (case-insensitive) or None."""
        if self._ready_state < ReadyState.HEADERS_RECEIVED:
            return None
        values = [v for n, v in self._response_headers if n.lower() == name.lower()]
        return ", ".join(values) if values else None

    @property
    def response_text(self) -> str:
        """Body as text. Only available for the TEXT response kind."""
        if self._response_type is not ResponseKind.TEXT:
            raise InvalidStateError(
                f"response_text is not available for response_type '{self._response_type.value}'"
            )
        if self._ready_state < ReadyState.LOADING:
            return ""
        return self.response

    @property
    def response(self) -> Any:
        """Body decoded according to response_type, or None before DONE."""
        if self._ready_state != ReadyState.DONE:
            return "" if self._response_type is ResponseKind.TEXT else None
        if self._decoded is _NOT_DECODED:
            if self._status == 0:
                self._decoded = "" if self._response_type is ResponseKind.TEXT else None
            else:
                self._decoded = decode_body(
                    self._content,
                    self._response_type,
                    self.get_response_header("Content-Type"),
                )
        return self._decoded

    # ==================== Hooks for subclasses ====================

    @abstractmethod
    def _start(self, request: PendingRequest) -> None:
        """Begin performing the request without blocking."""

    @abstractmethod
    def _cancel(self) -> None:
        """Stop the request in progress, if any."""

    def _is_current(self, send_id: int) -> bool:
        return self._send_flag and send_id == self._send_id

    def _receive_headers(
        self,
        send_id: int,
        status: int,
        headers: Iterable[Tuple[str, str]],
        status_text: str = ""
    ) -> None:
        if not self._is_current(send_id):
            return
        self._status = status
        self._status_text = status_text or ""
        self._response_headers = list(headers)
        self._set_state(ReadyState.HEADERS_RECEIVED)

    def _receive_body(self, send_id: int, content: bytes) -> None:
        if not self._is_current(send_id):
            return
        self._content = content or b""
        self._set_state(ReadyState.LOADING)
        if not self._is_current(send_id):
            # Re-opened or aborted by a LOADING handler
            return
        self._send_flag = False
        self._set_state(ReadyState.DONE)

    def _fail(self, send_id: int) -> None:
        """Network error: DONE with status 0."""
        if not self._is_current(send_id):
            return
        self._send_flag = False
        self._reset_response()
        self._set_state(ReadyState.DONE)

    def _time_out(self, send_id: int) -> None:
        """Timeout: DONE with status 0, then the timeout notification."""
        if not self._is_current(send_id):
            return
        # A DONE handler may re-open the transport and rebind on_timeout
        on_timeout = self.on_timeout
        self._fail(send_id)
        if on_timeout is not None:
            on_timeout()

    def _set_state(self, state: ReadyState) -> None:
        self._ready_state = state
        if self.on_ready_state_change is not None:
            self.on_ready_state_change()
