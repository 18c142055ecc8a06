# src/xhr_client/core/controller.py
"""
Request lifecycle controller.

Drives a Transport through open -> send -> settle, keeps a single observer
slot and classifies the terminal state.

Every dispatch gets a new generation number. Transport callbacks are bound
to the generation they were installed for, so notifications arriving after
abort() or after a newer dispatch are dropped instead of reaching handlers.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Optional, TYPE_CHECKING, Union

from .descriptor import RequestDescriptor
from .exceptions import ConfigurationError, RequestInProgressError, classify_error_state
from .logging import RequestLogger
from .states import ErrorState, ReadyState, ResponseKind
from ..utils.sanitizer import mask_headers

# Delayed import to avoid circular dependency
if TYPE_CHECKING:
    from ..transport.base import Transport

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# OBSERVER SLOT VARIANTS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class OnChange:
    """Called on every ready state transition."""
    handler: Optional[Handler]


@dataclass(frozen=True)
class OnReady:
    """Called once, when the request reaches DONE."""
    handler: Optional[Handler]


@dataclass(frozen=True)
class OnSuccess:
    """Called once at DONE, routed by classification."""
    on_success: Optional[Handler]
    on_error: Optional[Handler]


@dataclass(frozen=True)
class FutureObserver:
    """Resolves or rejects an asyncio future at DONE."""
    future: asyncio.Future


Observer = Union[OnChange, OnReady, OnSuccess, FutureObserver, None]


def _report_handler_error(error: Exception) -> None:
    """Hand an exception raised by a user handler to the event loop (or log it)."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.error("Exception in request handler", exc_info=error)
        return
    loop.call_exception_handler({
        "message": "Exception in request handler",
        "exception": error,
    })


class LifecycleController:
    """
    Owns a transport and delivers the outcome of each dispatch.

    Handlers registered through the ``register_on_*`` methods and
    ``to_future()`` share one slot: the last registration wins.

    Args:
        descriptor: Request configuration to dispatch
        transport: Transport exclusively owned by this controller
        subject: Object passed to every handler (defaults to the controller)
        logger: Optional RequestLogger

    Example:
        >>> controller = LifecycleController(descriptor, MockTransport())
        >>> controller.register_on_ready(lambda c: print(c.error_message()))
        >>> controller.dispatch()
    """

    def __init__(
        self,
        descriptor: RequestDescriptor,
        transport: 'Transport',
        subject: Any = None,
        logger: Optional[RequestLogger] = None
    ):
        self._descriptor = descriptor
        self._transport = transport
        self._subject = subject if subject is not None else self
        self._logger = logger

        self._observer: Observer = None
        self._timeout_handler: Optional[Handler] = None

        self._epoch = 0
        self._settled_epoch = 0
        self._in_flight = False
        self._request_id: Optional[str] = None

        # Future created by to_future() and the generation it belongs to
        self._future: Optional[asyncio.Future] = None
        self._future_epoch = -1

    @property
    def transport(self) -> 'Transport':
        return self._transport

    @property
    def descriptor(self) -> RequestDescriptor:
        return self._descriptor

    @property
    def epoch(self) -> int:
        """Generation number of the current dispatch."""
        return self._epoch

    @property
    def in_flight(self) -> bool:
        """Check if the current dispatch has not reached DONE yet."""
        return self._in_flight

    # ==================== Observer registration ====================

    def register_on_timeout(self, handler: Optional[Handler]) -> None:
        """Set the timeout handler. Independent of the observer slot."""
        self._timeout_handler = handler

    def register_on_change(self, handler: Optional[Handler]) -> None:
        self._observer = OnChange(handler)

    def register_on_ready(self, handler: Optional[Handler]) -> None:
        self._observer = OnReady(handler)

    def register_on_success(
        self,
        on_success: Optional[Handler] = None,
        on_error: Optional[Handler] = None
    ) -> None:
        self._observer = OnSuccess(on_success, on_error)

    def to_future(self, body: Any = None) -> asyncio.Future:
        """
        Get a future for the outcome of a dispatch.

        The future resolves with the subject when the response is classified
        as success and is rejected with a RequestFailedError otherwise.

        - A future already created for the current dispatch is returned as is
          (settled or still occupying the observer slot).
        - If a dispatch is in flight the new future attaches to it.
        - Otherwise a new dispatch is started with ``body``.

        Must be called with a running event loop.

        Raises:
            ConfigurationError: URL is empty
        """
        future = self._future
        if future is not None and self._future_epoch == self._epoch:
            if future.done() or self._observer == FutureObserver(future):
                return future

        future = asyncio.get_running_loop().create_future()
        self._observer = FutureObserver(future)

        if not self._in_flight:
            try:
                self.dispatch(body)
            except Exception:
                future.cancel()
                raise

        self._future = future
        self._future_epoch = self._epoch
        return future

    # ==================== Lifecycle ====================

    def dispatch(self, body: Any = None) -> None:
        """
        Open the transport with the accumulated configuration and send.

        Returns immediately; the outcome is delivered to the observer slot.

        Args:
            body: Body for this dispatch only (stored body is used if None)

        Raises:
            ConfigurationError: URL is empty (the transport is not touched)
            RequestInProgressError: Previous dispatch has not reached DONE
        """
        descriptor = self._descriptor

        if not descriptor.url:
            raise ConfigurationError("The request URL is empty")

        if self._in_flight:
            raise RequestInProgressError(descriptor.url)

        payload = body if body is not None else descriptor.body
        method = descriptor.method or ("POST" if payload else "GET")

        self._epoch += 1
        epoch = self._epoch
        self._request_id = str(uuid.uuid4())

        transport = self._transport
        transport.on_ready_state_change = partial(self._on_ready_state_change, epoch)
        transport.on_timeout = partial(self._on_timeout, epoch)

        if self._logger:
            self._logger.info(
                "Request dispatched",
                request_id=self._request_id,
                epoch=epoch,
                method=method,
                url=descriptor.url,
                headers=mask_headers(descriptor.headers),
                has_body=payload is not None,
                timeout_ms=descriptor.timeout_ms,
                response_kind=descriptor.response_kind().value,
            )

        self._in_flight = True
        try:
            transport.open(method, descriptor.url, True, descriptor.user_name, descriptor.password)
            transport.response_type = descriptor.response_kind()
            transport.timeout = descriptor.timeout_ms
            for name, value in descriptor.headers.items():
                transport.set_request_header(name, value)

            if payload is not None:
                transport.send(payload)
            else:
                transport.send()
        except Exception:
            if epoch == self._epoch:
                self._in_flight = False
            raise

    def abort(self) -> None:
        """
        Cancel the current dispatch.

        Handlers are not called for the aborted dispatch, even if the
        transport still delivers a DONE notification. A pending future
        created by to_future() is cancelled.
        """
        was_in_flight = self._in_flight
        self._epoch += 1
        self._in_flight = False

        if self._logger and was_in_flight:
            self._logger.info("Request aborted", request_id=self._request_id, url=self._descriptor.url)

        self._transport.abort()

        if self._future is not None and not self._future.done():
            self._future.cancel()

    # ==================== Notifications ====================

    def _on_ready_state_change(self, epoch: int) -> None:
        if epoch != self._epoch:
            if self._logger:
                self._logger.debug("Stale notification dropped", request_id=self._request_id, epoch=epoch)
            return

        terminal = self.is_completed()
        if terminal:
            if self._settled_epoch == epoch:
                if self._logger:
                    self._logger.debug("Duplicate DONE notification dropped", request_id=self._request_id)
                return
            self._settled_epoch = epoch
            self._in_flight = False
            self._log_outcome()

        self._deliver(terminal)

    def _on_timeout(self, epoch: int) -> None:
        if epoch != self._epoch:
            return
        if self._logger:
            self._logger.warning(
                "Request timed out",
                request_id=self._request_id,
                url=self._descriptor.url,
                timeout_ms=self._descriptor.timeout_ms,
            )
        self._call(self._timeout_handler)

    def _call(self, handler: Optional[Handler]) -> None:
        """Run a user handler. Its exceptions never unwind into the transport."""
        if not callable(handler):
            return
        try:
            handler(self._subject)
        except Exception as e:
            if self._logger:
                self._logger.error(
                    "Request handler raised",
                    request_id=self._request_id,
                    error_type=type(e).__name__,
                    error=str(e),
                )
            _report_handler_error(e)

    def _deliver(self, terminal: bool) -> None:
        observer = self._observer

        if isinstance(observer, OnChange):
            self._call(observer.handler)

        elif not terminal or observer is None:
            return

        elif isinstance(observer, OnReady):
            self._call(observer.handler)

        elif isinstance(observer, OnSuccess):
            if self.is_success_response():
                self._call(observer.on_success)
            else:
                self._call(observer.on_error)

        elif isinstance(observer, FutureObserver):
            future = observer.future
            if future.done():
                return
            if self.is_success_response():
                future.set_result(self._subject)
            else:
                future.set_exception(
                    classify_error_state(self._subject, self.error_state(), self.status())
                )

    def _log_outcome(self) -> None:
        if not self._logger:
            return
        state = self.error_state()
        self._logger.log_outcome(
            state,
            "Request completed",
            request_id=self._request_id,
            url=self._descriptor.url,
            status=self.status(),
            error_state=state.name,
            error_message=self.error_message(),
        )

    # ==================== Transport queries ====================

    def ready_state(self) -> ReadyState:
        return self._transport.ready_state

    def status(self) -> int:
        return self._transport.status

    def status_text(self) -> str:
        return self._transport.status_text

    def response_headers(self) -> str:
        """All response headers separated by CRLF."""
        return self._transport.get_all_response_headers()

    def response_header(self, name: str) -> Optional[str]:
        return self._transport.get_response_header(name)

    def response_text(self) -> str:
        """
        Body as string.

        Raises:
            InvalidStateError: response kind is not text
        """
        return self._transport.response_text

    def response(self) -> Any:
        """Body decoded according to the response kind."""
        return self._transport.response

    # ==================== Classification ====================

    def is_completed(self) -> bool:
        return self._transport.ready_state == ReadyState.DONE

    def is_status_ok(self) -> bool:
        return 200 <= self._transport.status < 300

    def is_success_response(self) -> bool:
        """
        Check if the status is 2XX and the body was decoded.

        With a non-text response kind a body that decodes to None (for
        example invalid JSON) makes the response unsuccessful.
        """
        if not self.is_status_ok():
            return False
        if self._transport.response_type is ResponseKind.TEXT:
            return True
        return self._transport.response is not None

    def error_state(self) -> ErrorState:
        """
        Reason of the request failure.

        Meaningful once the request is completed (from an on_ready handler,
        for example). Always NONE inside an on_success success handler.
        """
        if not self.status():
            return ErrorState.CONNECTION
        elif not self.is_status_ok():
            return ErrorState.HTTPSTATUS
        elif not self.is_success_response():
            return ErrorState.BODYTYPE
        else:
            return ErrorState.NONE

    def error_message(self) -> str:
        """Human readable form of error_state(), e.g. "HTTP 404"."""
        return self.error_state().describe(self.status())
