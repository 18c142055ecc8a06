"""Transports: the network side of a request."""

from .base import PendingRequest, Transport
from .decoding import Blob, decode_body
from .mock import MockTransport
from .requests_transport import RequestsTransport

__all__ = [
    "Transport",
    "PendingRequest",
    "Blob",
    "decode_body",
    "MockTransport",
    "RequestsTransport",
]
