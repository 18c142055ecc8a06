# src/xhr_client/transport/requests_transport.py
"""
Transport backed by requests.

requests is blocking, so the call runs in the event loop's default executor
and the result is handed back to the loop thread, where all ready state
notifications are delivered.
"""

import asyncio
import logging
from functools import partial
from typing import List, Optional, Tuple

import requests

from ..core.config import TransportConfig
from ..core.exceptions import InvalidStateError
from .base import PendingRequest, Transport

logger = logging.getLogger(__name__)

# (status, reason, headers, content)
_Result = Tuple[int, str, List[Tuple[str, str]], bytes]


class RequestsTransport(Transport):
    """
    Transport performing requests through a requests.Session.

    Must be used from a running asyncio event loop.

    Example:
        >>> async def main():
        ...     with RequestsTransport() as transport:
        ...         request = FluentRequest("https://api.example.com/users", transport=transport)
        ...         await request.response_kind("json").to_future()
    """

    def __init__(
        self,
        config: Optional[TransportConfig] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Args:
            config: Transport configuration
            session: Session to use (owned by the caller); created lazily if None
        """
        super().__init__()
        self._config = config or TransportConfig()
        self._session = session
        self._owns_session = session is None
        self._pending: Optional[asyncio.Future] = None
        self._deadline: Optional[asyncio.TimerHandle] = None

    def _create_session(self) -> requests.Session:
        """Create configured session."""
        session = requests.Session()
        session.max_redirects = self._config.max_redirects

        if self._config.proxies:
            session.proxies.update(self._config.proxies)

        return session

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = self._create_session()
        return self._session

    @property
    def config(self) -> TransportConfig:
        return self._config

    def close(self) -> None:
        """Close the session if it was created by this transport."""
        self._cancel()
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ==================== Transport hooks ====================

    def _start(self, request: PendingRequest) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._send_flag = False
            raise InvalidStateError("RequestsTransport requires a running event loop") from None

        self._pending = loop.run_in_executor(None, partial(self._perform, self.session, request))
        self._pending.add_done_callback(partial(self._on_performed, request.send_id))

        # requests only bounds connect and each read; timeout_ms bounds the whole exchange
        if request.timeout_seconds is not None:
            self._deadline = loop.call_later(
                request.timeout_seconds, self._on_deadline, request.send_id
            )

    def _cancel(self) -> None:
        # The worker thread cannot be interrupted; its result is discarded
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        self._clear_deadline()

    def _clear_deadline(self) -> None:
        if self._deadline is not None:
            self._deadline.cancel()
            self._deadline = None

    def _on_deadline(self, send_id: int) -> None:
        self._deadline = None
        if self._is_current(send_id):
            self._cancel()
            self._time_out(send_id)

    def _perform(self, session: requests.Session, request: PendingRequest) -> _Result:
        """Runs in a worker thread."""
        response = session.request(
            method=request.method,
            url=request.url,
            headers=request.headers,
            data=request.body,
            auth=request.auth,
            timeout=request.timeout_seconds,
            verify=self._config.verify_ssl,
            allow_redirects=self._config.allow_redirects,
        )
        try:
            return (
                response.status_code,
                response.reason or "",
                list(response.headers.items()),
                response.content,
            )
        finally:
            response.close()

    def _on_performed(self, send_id: int, future: asyncio.Future) -> None:
        """Runs on the event loop thread."""
        if future.cancelled():
            return
        if send_id == self._send_id:
            self._clear_deadline()

        error = future.exception()
        if error is None:
            status, reason, headers, content = future.result()
            self._receive_headers(send_id, status, headers, reason)
            self._receive_body(send_id, content)

        elif isinstance(error, requests.exceptions.Timeout):
            self._time_out(send_id)

        elif isinstance(error, requests.exceptions.RequestException):
            logger.debug("Request failed: %s", error)
            self._fail(send_id)

        else:
            # Not a network error: settle the request, then let the loop report it
            self._fail(send_id)
            raise error
