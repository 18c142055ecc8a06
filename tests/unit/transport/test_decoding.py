"""
Tests for response body decoding.
"""

import xml.etree.ElementTree as ElementTree

import pytest
from bs4 import BeautifulSoup

from xhr_client.core.states import ResponseKind
from xhr_client.transport.decoding import (
    Blob,
    decode_body,
    decode_document,
    decode_json,
    decode_text,
    parse_content_type,
)


class TestContentType:

    @pytest.mark.parametrize("header,expected", [
        (None, ("", None)),
        ("", ("", None)),
        ("application/json", ("application/json", None)),
        ("text/html; charset=ISO-8859-1", ("text/html", "iso-8859-1")),
        ('text/plain; charset="utf-8"', ("text/plain", "utf-8")),
    ])
    def test_parse_content_type(self, header, expected):
        assert parse_content_type(header) == expected


class TestText:

    def test_utf8_default(self):
        assert decode_text("привет".encode("utf-8")) == "привет"

    def test_charset_from_header(self):
        assert decode_text("café".encode("latin-1"), "text/plain; charset=latin-1") == "café"

    def test_unknown_charset_falls_back(self):
        assert decode_text(b"abc", "text/plain; charset=nope") == "abc"

    def test_invalid_bytes_replaced(self):
        assert decode_text(b"\xff") == "\ufffd"


class TestJSON:

    def test_valid(self):
        assert decode_json(b'{"a": [1, 2]}') == {"a": [1, 2]}

    def test_empty_object_is_valid(self):
        assert decode_json(b"{}") == {}

    @pytest.mark.parametrize("content", [b"", b"   ", b"{oops", b"<html></html>"])
    def test_invalid(self, content):
        assert decode_json(content) is None


class TestDocument:

    def test_html(self):
        doc = decode_document(b"<html><body><p id='x'>Hi</p></body></html>", "text/html")
        assert isinstance(doc, BeautifulSoup)
        assert doc.find(id="x").text == "Hi"

    def test_missing_content_type_parsed_as_html(self):
        assert isinstance(decode_document(b"<p>a</p>"), BeautifulSoup)

    def test_xml(self):
        doc = decode_document(b"<root><item>1</item></root>", "application/xml")
        assert isinstance(doc, ElementTree.Element)
        assert doc.find("item").text == "1"

    def test_suffix_xml(self):
        doc = decode_document(b"<feed/>", "application/atom+xml")
        assert doc.tag == "feed"

    def test_broken_xml(self):
        assert decode_document(b"<root>", "text/xml") is None

    def test_non_document_type(self):
        assert decode_document(b'{"a": 1}', "application/json") is None


class TestDecodeBody:
    """Test dispatch by ResponseKind."""

    def test_text(self):
        assert decode_body(b"hi", ResponseKind.TEXT) == "hi"

    def test_arraybuffer(self):
        assert decode_body(bytearray(b"\x00\x01"), ResponseKind.ARRAYBUFFER) == b"\x00\x01"

    def test_blob(self):
        blob = decode_body(b"PNG", ResponseKind.BLOB, "image/png")
        assert blob == Blob(b"PNG", "image/png")
        assert blob.size == 3

    def test_blob_without_content_type(self):
        assert decode_body(b"", ResponseKind.BLOB).content_type == ""

    def test_json(self):
        assert decode_body(b"[1]", ResponseKind.JSON, "application/json") == [1]
