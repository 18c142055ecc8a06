# src/xhr_client/transport/httpx_transport.py
"""
Асинхронный транспорт на базе httpx.

Запрос выполняется как asyncio task на текущем event loop.
"""

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

try:
    import httpx
except ImportError:
    raise ImportError(
        "httpx is required for HttpxTransport. "
        "Install with: pip install xhr-client-core[async]"
    )

from ..core.config import TransportConfig
from ..core.exceptions import InvalidStateError
from .base import PendingRequest, Transport

logger = logging.getLogger(__name__)


class HttpxTransport(Transport):
    """
    Transport performing requests with httpx.AsyncClient.

    Example:
        >>> async with HttpxTransport() as transport:
        ...     request = FluentRequest("https://api.example.com/users", transport=transport)
        ...     await request.to_future()
    """

    def __init__(
        self,
        config: Optional[TransportConfig] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Args:
            config: Transport configuration
            client: AsyncClient to use (owned by the caller); created lazily if None
        """
        super().__init__()
        self._config = config or TransportConfig()
        self._client = client
        self._owns_client = client is None
        self._task: Optional[asyncio.Task] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Получить или создать httpx клиент."""
        if self._client is None:
            client_kwargs: Dict[str, Any] = {
                "verify": self._config.verify_ssl,
                "follow_redirects": self._config.allow_redirects,
                "max_redirects": self._config.max_redirects,
            }

            if self._config.proxies:
                client_kwargs["mounts"] = {
                    f"{scheme.rstrip(':/')}://": httpx.AsyncHTTPTransport(proxy=proxy)
                    for scheme, proxy in self._config.proxies.items()
                }

            self._client = httpx.AsyncClient(**client_kwargs)
        return self._client

    def close(self) -> None:
        """Cancel the request in progress. The client is closed by aclose()."""
        self._cancel()

    async def aclose(self) -> None:
        """Закрыть клиент и освободить ресурсы."""
        self._cancel()
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    # ==================== Transport hooks ====================

    def _start(self, request: PendingRequest) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._send_flag = False
            raise InvalidStateError("HttpxTransport requires a running event loop") from None

        self._task = loop.create_task(self._perform(request))

    def _cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    @staticmethod
    def _body_kwargs(body: Any) -> Dict[str, Any]:
        if body is None:
            return {}
        if isinstance(body, Mapping):
            return {"data": body}
        return {"content": body}

    async def _exchange(self, request: PendingRequest) -> bytes:
        kwargs: Dict[str, Any] = {
            "headers": request.headers,
            "timeout": httpx.Timeout(request.timeout_seconds),
        }
        if request.auth is not None:
            kwargs["auth"] = request.auth
        kwargs.update(self._body_kwargs(request.body))

        async with self._get_client().stream(request.method, request.url, **kwargs) as response:
            self._receive_headers(
                request.send_id,
                response.status_code,
                response.headers.multi_items(),
                response.reason_phrase,
            )
            return await response.aread()

    async def _perform(self, request: PendingRequest) -> None:
        send_id = request.send_id

        # timeout_ms bounds the whole exchange, body included
        try:
            content = await asyncio.wait_for(self._exchange(request), request.timeout_seconds)
        except (httpx.TimeoutException, asyncio.TimeoutError):
            self._time_out(send_id)
            return
        except httpx.HTTPError as e:
            logger.debug("Request failed: %s", e)
            self._fail(send_id)
            return
        except Exception as e:
            # Not a network error: settle the request, then let the loop report it
            self._fail(send_id)
            asyncio.get_running_loop().call_exception_handler({
                "message": "HttpxTransport request failed",
                "exception": e,
            })
            return

        self._receive_body(send_id, content)
