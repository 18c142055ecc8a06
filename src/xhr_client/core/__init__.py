"""Core XHR Client модули."""

from .states import ReadyState, ResponseKind, ErrorState
from .config import TransportConfig, ClientConfig
from .descriptor import RequestDescriptor, encode_cookie_value
from .controller import (
    LifecycleController,
    OnChange,
    OnReady,
    OnSuccess,
    FutureObserver,
)
from .exceptions import (
    XHRClientException,
    ConfigurationError,
    InvalidStateError,
    RequestInProgressError,
    RequestFailedError,
    ConnectionFailedError,
    HTTPStatusError,
    BodyTypeError,
    classify_error_state,
)

__all__ = [
    # States
    "ReadyState",
    "ResponseKind",
    "ErrorState",
    # Config
    "TransportConfig",
    "ClientConfig",
    # Core
    "RequestDescriptor",
    "encode_cookie_value",
    "LifecycleController",
    "OnChange",
    "OnReady",
    "OnSuccess",
    "FutureObserver",
    # Exceptions
    "XHRClientException",
    "ConfigurationError",
    "InvalidStateError",
    "RequestInProgressError",
    "RequestFailedError",
    "ConnectionFailedError",
    "HTTPStatusError",
    "BodyTypeError",
    "classify_error_state",
]
