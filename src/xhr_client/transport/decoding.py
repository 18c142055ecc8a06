# src/xhr_client/transport/decoding.py
"""
Response body decoding according to ResponseKind.

Decoders never raise: a body that cannot be decoded under the requested
kind yields None, which the controller classifies as a body type failure.
"""

import json
import xml.etree.ElementTree as ElementTree
from dataclasses import dataclass
from email.message import Message
from typing import Any, Optional

from bs4 import BeautifulSoup

from ..core.states import ResponseKind

DEFAULT_CHARSET = "utf-8"

_XML_MIME_TYPES = {"text/xml", "application/xml"}
_HTML_MIME_TYPES = {"text/html", "application/xhtml+xml"}


@dataclass(frozen=True)
class Blob:
    """
    Raw response body together with its media type.

    Attributes:
        content: Body bytes
        content_type: Value of the Content-Type header ("" if absent)
    """
    content: bytes
    content_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)


def parse_content_type(content_type: Optional[str]):
    """
    Split a Content-Type header into (mime type, charset).

    Example:
        >>> parse_content_type("text/html; charset=ISO-8859-1")
        ('text/html', 'iso-8859-1')
    """
    if not content_type:
        return "", None
    message = Message()
    message["Content-Type"] = content_type
    charset = message.get_param("charset")
    if isinstance(charset, tuple):
        charset = charset[2]
    return message.get_content_type(), charset.lower() if charset else None


def decode_text(content: bytes, content_type: Optional[str] = None) -> str:
    """Decode body bytes using the charset from Content-Type (utf-8 fallback)."""
    _, charset = parse_content_type(content_type)
    try:
        return content.decode(charset or DEFAULT_CHARSET, errors="replace")
    except LookupError:
        # Unknown charset name
        return content.decode(DEFAULT_CHARSET, errors="replace")


def decode_json(content: bytes, content_type: Optional[str] = None) -> Any:
    text = decode_text(content, content_type)
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def decode_document(content: bytes, content_type: Optional[str] = None) -> Any:
    """
    Parse an HTML or XML document.

    HTML (and unknown types) is parsed with BeautifulSoup, XML types with
    ElementTree. Other media types produce None.
    """
    mime, _ = parse_content_type(content_type)
    text = decode_text(content, content_type)

    if mime in _XML_MIME_TYPES or mime.endswith("+xml") and mime not in _HTML_MIME_TYPES:
        try:
            return ElementTree.fromstring(text)
        except ElementTree.ParseError:
            return None

    if mime in _HTML_MIME_TYPES or mime == "":
        return BeautifulSoup(text, "html.parser")

    return None


def decode_body(content: bytes, kind: ResponseKind, content_type: Optional[str] = None) -> Any:
    """
    Decode body bytes according to the response kind.

    Args:
        content: Raw body
        kind: Requested response kind
        content_type: Content-Type response header

    Returns:
        str for TEXT, bytes for ARRAYBUFFER, Blob for BLOB, parsed document
        for DOCUMENT, parsed JSON for JSON, or None when decoding fails

    Example:
        >>> decode_body(b'{"a": 1}', ResponseKind.JSON)
        {'a': 1}
        >>> decode_body(b'not json', ResponseKind.JSON) is None
        True
    """
    if kind is ResponseKind.TEXT:
        return decode_text(content, content_type)
    if kind is ResponseKind.ARRAYBUFFER:
        return bytes(content)
    if kind is ResponseKind.BLOB:
        return Blob(bytes(content), content_type or "")
    if kind is ResponseKind.DOCUMENT:
        return decode_document(content, content_type)
    if kind is ResponseKind.JSON:
        return decode_json(content, content_type)
    return None
