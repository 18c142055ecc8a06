# src/xhr_client/core/descriptor.py
"""
Request descriptor: accumulated configuration of one logical request.

Every builder method validates its input, silently ignores invalid values
and returns the descriptor itself, so calls can be chained:

    >>> d = RequestDescriptor("https://api.example.com/users")
    >>> d.set_header("Accept", "application/json").set_timeout(5000)
"""

import math
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import quote

from .states import ResponseKind

# Characters left unescaped by JavaScript's encodeURIComponent
_COOKIE_SAFE_CHARS = "-_.!~*'()"


def encode_cookie_value(value: str) -> str:
    """
    Percent-encode a cookie value.

    Example:
        >>> encode_cookie_value("a b;c")
        'a%20b%3Bc'
    """
    return quote(value, safe=_COOKIE_SAFE_CHARS)


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


class RequestDescriptor:
    """
    Mutable request configuration.

    Attributes:
        method: Custom request method ("" = infer GET/POST from body)
        url: Request URL
        body: Stored request body, used when dispatch gets no body
        user_name: User name for HTTP authentication
        password: Password for HTTP authentication
        headers: Request headers to send
        timeout_ms: Request timeout in milliseconds (0 = disabled)
        user_data: Arbitrary caller data, never read by the library
    """

    def __init__(self, url: Optional[str] = None, body: Any = None, method: Optional[str] = None):
        self.method: str = ""
        self.url: str = ""
        self.body: Any = None
        self.user_name: Optional[str] = None
        self.password: Optional[str] = None
        self.headers: Dict[str, str] = {}
        self.timeout_ms: int = 0
        self.user_data: Dict[str, Any] = {}
        self._response_kind: ResponseKind = ResponseKind.TEXT
        self.reset(url, body, method)

    def reset(self, url: Optional[str] = None, body: Any = None, method: Optional[str] = None):
        """
        Set the method, URL and body for the next dispatch.

        Args:
            url: Request URL
            body: Request body
            method: Custom request method
        """
        self.method = method or ""
        self.url = url or ""
        self.body = body or None
        return self

    def set_auth(self, user_name: Optional[str] = None, password: Optional[str] = None):
        """Set or clear (when called without arguments) the HTTP credentials."""
        self.user_name = user_name
        self.password = password
        return self

    def set_timeout(self, ms: Any = None):
        """
        Set the request timeout in milliseconds.

        Anything other than a positive finite number disables the timeout.
        """
        if isinstance(ms, (int, float)) and not isinstance(ms, bool) and math.isfinite(ms) and ms > 0:
            self.timeout_ms = int(ms)
        else:
            self.timeout_ms = 0
        return self

    def set_user_data(self, key: str, value: Any = None):
        """
        Store a (key -> value) pair in user_data.

        The key should be a non-empty string. A value of None removes the key.
        """
        if _is_non_empty_str(key):
            if value is not None:
                self.user_data[key] = value
            else:
                self.user_data.pop(key, None)
        return self

    def set_header(self, name: str, value: Optional[str] = None):
        """
        Add a request header.

        The name should be a non-empty string. If the value is not a
        non-empty string the header is removed instead.
        """
        if _is_non_empty_str(name):
            if _is_non_empty_str(value):
                self.headers[name] = value
            else:
                self.headers.pop(name, None)
        return self

    # ==================== Cookies ====================
    # Only server-side transports let callers set the Cookie header.
    # Browsers silently drop it; requests, httpx and the mock transport send it.

    def append_cookie(self, name: str, value: str):
        """
        Append a cookie to the "Cookie" request header.

        Both name and value should be non-empty strings.
        """
        if _is_non_empty_str(name) and _is_non_empty_str(value):
            pair = f"{name}={encode_cookie_value(value)}"
            if "Cookie" in self.headers:
                self.headers["Cookie"] += "; " + pair
            else:
                self.headers["Cookie"] = pair
        return self

    def set_cookies(self, cookies: Optional[Mapping[str, str]] = None):
        """
        Replace the "Cookie" request header.

        Uses the non-empty string values of the mapping in iteration order.
        An empty or missing mapping removes the header.
        """
        encoded = []
        if isinstance(cookies, Mapping):
            for name, value in cookies.items():
                if _is_non_empty_str(name) and _is_non_empty_str(value):
                    encoded.append(f"{name}={encode_cookie_value(value)}")

        if encoded:
            self.headers["Cookie"] = "; ".join(encoded)
        else:
            self.headers.pop("Cookie", None)
        return self

    def response_kind(self, value: Union[str, ResponseKind, None] = None):
        """
        Get or set the expected response kind.

        Without an argument returns the current ResponseKind. Otherwise sets
        it (unknown values are ignored) and returns self.
        """
        if value is None:
            return self._response_kind
        kind = ResponseKind.parse(value)
        if kind is not None:
            self._response_kind = kind
        return self
