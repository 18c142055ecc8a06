"""
Mock transport for testing.

Records every request it is asked to send and completes it only when the
test says so, delivering notifications synchronously.
"""

from typing import Any, Dict, List, Optional, Tuple, Union

from ..core.states import ReadyState
from .base import _NOT_DECODED, PendingRequest, Transport


class MockTransport(Transport):
    """
    In-memory transport driven by the test.

    Example:
        >>> transport = MockTransport()
        >>> request = FluentRequest("https://api.example.com", transport=transport)
        >>> request.on_ready(handler).dispatch()
        >>> transport.respond(200, b'{"ok": true}', {"Content-Type": "application/json"})
    """

    def __init__(self):
        super().__init__()
        self.requests: List[PendingRequest] = []
        self.calls: List[str] = []
        self.cancelled = 0

    # Record every capability call made by the controller

    def open(self, method, url, is_async=True, user_name=None, password=None) -> None:
        self.calls.append("open")
        super().open(method, url, is_async, user_name, password)

    def set_request_header(self, name: str, value: str) -> None:
        self.calls.append("set_request_header")
        super().set_request_header(name, value)

    def send(self, body: Any = None) -> None:
        self.calls.append("send")
        super().send(body)

    def abort(self) -> None:
        self.calls.append("abort")
        super().abort()

    def close(self) -> None:
        self.calls.append("close")

    def _start(self, request: PendingRequest) -> None:
        self.requests.append(request)

    def _cancel(self) -> None:
        self.cancelled += 1

    @property
    def last_request(self) -> Optional[PendingRequest]:
        """The most recently sent request."""
        return self.requests[-1] if self.requests else None

    @property
    def pending(self) -> bool:
        """Check if a sent request is waiting for completion."""
        return self._send_flag

    # ==================== Scripted outcomes ====================

    def respond(
        self,
        status: int = 200,
        body: Union[bytes, str] = b"",
        headers: Optional[Dict[str, str]] = None,
        status_text: str = "",
        send_id: Optional[int] = None
    ) -> None:
        """
        Complete the pending request with a response.

        Args:
            status: HTTP status code
            body: Response body (str is encoded as utf-8)
            headers: Response headers
            status_text: Reason phrase
            send_id: Deliver for an older send (to simulate stale notifications)
        """
        if isinstance(body, str):
            body = body.encode("utf-8")
        sid = self._send_id if send_id is None else send_id
        header_items: List[Tuple[str, str]] = list((headers or {}).items())
        self._receive_headers(sid, status, header_items, status_text)
        self._receive_body(sid, body)

    def fail(self) -> None:
        """Complete the pending request with a network error."""
        self._fail(self._send_id)

    def time_out(self) -> None:
        """Complete the pending request with a timeout."""
        self._time_out(self._send_id)

    def force_done(self, status: int = 200, body: bytes = b"") -> None:
        """
        Deliver a DONE notification regardless of the transport's own
        bookkeeping, like a transport that does not suppress late events.
        """
        self._status = status
        self._content = body
        self._decoded = _NOT_DECODED
        self._set_state(ReadyState.DONE)
