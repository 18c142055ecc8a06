"""XHR Client - fluent request configuration with a callback driven lifecycle."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .request import FluentRequest
from .render import Renderer, PRELOADER_HTML
from .core.states import ReadyState, ResponseKind, ErrorState
from .core.config import ClientConfig, TransportConfig
from .core.descriptor import RequestDescriptor, encode_cookie_value
from .core.controller import LifecycleController
from .core.env_config import load_from_env
from .core.logging import LoggingConfig, RequestLogger
from .core.exceptions import (
    XHRClientException,
    ConfigurationError,
    InvalidStateError,
    RequestInProgressError,
    RequestFailedError,
    ConnectionFailedError,
    HTTPStatusError,
    BodyTypeError,
)
from .transport import Transport, MockTransport, RequestsTransport, Blob

# Опциональный импорт HttpxTransport (требует httpx)
try:
    from .transport.httpx_transport import HttpxTransport
    _HAS_HTTPX = True
except ImportError:
    _HAS_HTTPX = False
    HttpxTransport = None  # type: ignore

# Set up logging - add NullHandler to prevent "No handler found" warnings
# Users can configure logging themselves using logging.getLogger('xhr_client')
logging.getLogger('xhr_client').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("xhr-client-core")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__license__ = "MIT"

# All public exports
__all__ = [
    # Core
    "FluentRequest",
    "RequestDescriptor",
    "LifecycleController",
    "encode_cookie_value",

    # States
    "ReadyState",
    "ResponseKind",
    "ErrorState",

    # Config
    "ClientConfig",
    "TransportConfig",
    "LoggingConfig",
    "RequestLogger",
    "load_from_env",

    # Rendering
    "Renderer",
    "PRELOADER_HTML",

    # Transports
    "Transport",
    "MockTransport",
    "RequestsTransport",
    "HttpxTransport",
    "Blob",

    # Exceptions
    "XHRClientException",
    "ConfigurationError",
    "InvalidStateError",
    "RequestInProgressError",
    "RequestFailedError",
    "ConnectionFailedError",
    "HTTPStatusError",
    "BodyTypeError",

    # Version
    "__version__",
]
