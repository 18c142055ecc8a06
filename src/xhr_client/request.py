# src/xhr_client/request.py
"""
FluentRequest: descriptor, controller and transport behind one object.

    >>> req = (FluentRequest("https://api.example.com/users")
    ...        .set_header("X-Test", "OK")
    ...        .response_kind("json")
    ...        .on_success(lambda r: print(r.response()),
    ...                    lambda r: print(r.url, r.error_message())))
    >>> req.dispatch()

Instances are reusable: configure once, then reset() and dispatch() again.

    >>> req = FluentRequest().on_ready(handler).set_timeout(5000)
    >>> req.reset(url).dispatch(body1)
    >>> # ... after the first one completes
    >>> req.dispatch(body2)
"""

import asyncio
from typing import Any, Callable, Optional, Union

from .core.config import ClientConfig
from .core.controller import Handler, LifecycleController
from .core.descriptor import RequestDescriptor
from .core.logging import RequestLogger
from .core.states import ErrorState, ReadyState, ResponseKind
from .render import Renderer
from .transport.base import Transport
from .transport.requests_transport import RequestsTransport


class FluentRequest(RequestDescriptor):
    """
    Chainable request.

    Every handler receives the FluentRequest itself as its only argument.
    on_change(), on_ready(), on_success(), to_future() and load_into() share
    one handler slot: each call replaces the previous registration.
    on_timeout() has its own slot.

    Args:
        url: Request URL
        body: Body sent by dispatch() when no body is passed
        method: Custom method ("" = GET without body, POST with body)
        transport: Transport to use (RequestsTransport by default)
        config: Defaults for headers, timeout, response kind and logging
        logger: RequestLogger to use instead of one built from config.logging
    """

    def __init__(
        self,
        url: Optional[str] = None,
        body: Any = None,
        method: Optional[str] = None,
        *,
        transport: Optional[Transport] = None,
        config: Optional[ClientConfig] = None,
        logger: Optional[RequestLogger] = None
    ):
        super().__init__(url, body, method)

        config = config or ClientConfig()
        self._config = config

        for name, value in config.headers.items():
            self.set_header(name, value)
        self.set_timeout(config.timeout_ms)
        self.response_kind(config.response_kind)

        if logger is None and config.logging:
            logger = RequestLogger(config=config.logging)

        # A default transport belongs to this request and is closed with it
        self._owns_transport = transport is None
        if transport is None:
            transport = RequestsTransport(config.transport)

        self._controller = LifecycleController(self, transport, subject=self, logger=logger)

    def __repr__(self) -> str:
        method = self.method or "auto"
        return f"<FluentRequest {method} {self.url or '(no url)'} state={self.ready_state().name}>"

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def controller(self) -> LifecycleController:
        return self._controller

    @property
    def transport(self) -> Transport:
        return self._controller.transport

    # ==================== Обработчики событий ====================

    def on_timeout(self, handler: Optional[Handler]):
        """
        Set the timeout handler.

        Example:
            >>> FluentRequest(url).set_timeout(5000).on_timeout(
            ...     lambda r: print(f"timed out after {r.timeout_ms}ms")
            ... ).dispatch()
        """
        self._controller.register_on_timeout(handler)
        return self

    def on_change(self, handler: Optional[Handler]):
        """
        Set a handler called on every ready state change.

        Example:
            >>> def handler(req):
            ...     if req.is_completed():
            ...         print(req.response() if req.is_success_response() else "Failed")
            >>> FluentRequest(url).on_change(handler).dispatch()
        """
        self._controller.register_on_change(handler)
        return self

    def on_ready(self, handler: Optional[Handler]):
        """Set a handler called once the request completes, regardless of errors."""
        self._controller.register_on_ready(handler)
        return self

    def on_success(self, on_success: Optional[Handler] = None, on_error: Optional[Handler] = None):
        """
        Set handlers called once the request completes.

        on_success is called when is_success_response() is true, on_error
        otherwise. Either can be omitted.
        """
        self._controller.register_on_success(on_success, on_error)
        return self

    def to_future(self, body: Any = None) -> asyncio.Future:
        """
        Dispatch (unless already dispatched) and return an awaitable future.

        Example:
            >>> try:
            ...     req = await FluentRequest(url).response_kind("json").to_future()
            ...     print(req.response())
            ... except RequestFailedError as e:
            ...     print(e.request.url, e.request.error_message())
        """
        return self._controller.to_future(body)

    # ==================== Жизненный цикл ====================

    def dispatch(self, body: Any = None):
        """
        Send the request with the configured method, headers and body.

        Raises:
            ConfigurationError: URL is empty
            RequestInProgressError: Previous dispatch has not completed
        """
        self._controller.dispatch(body)
        return self

    def abort(self):
        self._controller.abort()
        return self

    def close(self) -> None:
        """
        Abort a dispatch in flight and release the default transport.

        A transport passed to the constructor belongs to the caller and is
        left open.
        """
        if self._controller.in_flight:
            self._controller.abort()
        if self._owns_transport:
            self.transport.close()

    async def aclose(self) -> None:
        """Async version of close() for transports with async resources."""
        if self._controller.in_flight:
            self._controller.abort()
        if self._owns_transport:
            await self.transport.aclose()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    def load_into(
        self,
        renderer: Renderer,
        node: Any,
        show_preloader: bool = False,
        on_error: Union[str, Callable[["FluentRequest"], Optional[str]], None] = None
    ):
        """
        Dispatch and render the response text into ``node``.

        Resets the response kind to text and replaces the current handler.
        When the status is not 2XX, ``on_error(request)`` (if callable) or
        ``on_error`` itself is rendered instead.

        Args:
            renderer: Rendering capability
            node: Target node, passed through to the renderer
            show_preloader: Call renderer.show_preloader(node) first
            on_error: Markup or callable producing markup for failures
        """
        if show_preloader:
            renderer.show_preloader(node)

        def render(request: "FluentRequest") -> None:
            if request.is_status_ok():
                renderer.render_into(node, request.response_text())
            elif callable(on_error):
                renderer.render_into(node, on_error(request) or "")
            else:
                renderer.render_into(node, on_error or "")

        self.response_kind(ResponseKind.TEXT).on_ready(render).dispatch()
        return self

    # ==================== Ответ ====================

    def ready_state(self) -> ReadyState:
        return self._controller.ready_state()

    def status(self) -> int:
        return self._controller.status()

    def status_text(self) -> str:
        return self._controller.status_text()

    def response_headers(self) -> str:
        return self._controller.response_headers()

    def response_header(self, name: str) -> Optional[str]:
        return self._controller.response_header(name)

    def response_text(self) -> str:
        return self._controller.response_text()

    def response(self) -> Any:
        return self._controller.response()

    def is_completed(self) -> bool:
        return self._controller.is_completed()

    def is_status_ok(self) -> bool:
        return self._controller.is_status_ok()

    def is_success_response(self) -> bool:
        return self._controller.is_success_response()

    def error_state(self) -> ErrorState:
        return self._controller.error_state()

    def error_message(self) -> str:
        return self._controller.error_message()
