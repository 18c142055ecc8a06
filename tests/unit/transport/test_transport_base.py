"""
Tests for the Transport state machine (through MockTransport).
"""

import pytest

from xhr_client.core.exceptions import InvalidStateError
from xhr_client.core.states import ReadyState, ResponseKind
from xhr_client.transport import MockTransport, PendingRequest


@pytest.fixture
def states(transport):
    recorded = []
    transport.on_ready_state_change = lambda: recorded.append(transport.ready_state)
    return recorded


class TestOpenSend:
    """Test open()/set_request_header()/send()."""

    def test_open_notifies(self, transport, states):
        transport.open("get", "https://a.example.com")
        assert transport.ready_state is ReadyState.OPENED
        assert states == [ReadyState.OPENED]

    def test_sync_mode_rejected(self, transport):
        with pytest.raises(InvalidStateError):
            transport.open("GET", "https://a.example.com", False)

    def test_empty_url_rejected(self, transport):
        with pytest.raises(InvalidStateError):
            transport.open("GET", "")

    def test_header_before_open_rejected(self, transport):
        with pytest.raises(InvalidStateError):
            transport.set_request_header("A", "1")

    def test_header_after_send_rejected(self, transport):
        transport.open("GET", "https://a.example.com")
        transport.send()
        with pytest.raises(InvalidStateError):
            transport.set_request_header("A", "1")

    def test_repeated_headers_combined(self, transport):
        transport.open("GET", "https://a.example.com")
        transport.set_request_header("Accept", "text/html")
        transport.set_request_header("accept", "application/json")
        transport.send()
        assert transport.last_request.headers == {"Accept": "text/html, application/json"}

    def test_send_twice_rejected(self, transport):
        transport.open("POST", "https://a.example.com")
        transport.send("x")
        with pytest.raises(InvalidStateError):
            transport.send("y")

    def test_pending_request_snapshot(self, transport):
        transport.open("post", "https://a.example.com", True, "bob")
        transport.response_type = "blob"
        transport.timeout = 1500
        transport.send(b"data")

        assert transport.last_request == PendingRequest(
            method="POST",
            url="https://a.example.com",
            headers={},
            body=b"data",
            auth=("bob", ""),
            timeout_ms=1500,
            response_type=ResponseKind.BLOB,
            send_id=1,
        )

    @pytest.mark.parametrize("method", ["GET", "HEAD"])
    def test_body_dropped_for_get_and_head(self, transport, method):
        transport.open(method, "https://a.example.com")
        transport.send("body")
        assert transport.last_request.body is None

    def test_timeout_seconds(self):
        assert PendingRequest("GET", "u").timeout_seconds is None
        assert PendingRequest("GET", "u", timeout_ms=250).timeout_seconds == 0.25


class TestResponse:
    """Test response accessors."""

    def test_full_lifecycle(self, transport, states):
        transport.open("GET", "https://a.example.com")
        transport.send()
        transport.respond(200, "hello", {"Content-Type": "text/plain", "Set-Cookie": "a=1"}, "OK")

        assert states == [
            ReadyState.OPENED,
            ReadyState.HEADERS_RECEIVED,
            ReadyState.LOADING,
            ReadyState.DONE,
        ]
        assert transport.status == 200
        assert transport.status_text == "OK"
        assert transport.response == "hello"
        assert transport.response_text == "hello"
        assert transport.get_response_header("content-type") == "text/plain"
        assert transport.get_response_header("missing") is None
        assert transport.get_all_response_headers() == "content-type: text/plain\r\nset-cookie: a=1\r\n"
        assert transport.pending is False

    def test_headers_unavailable_before_received(self, transport):
        transport.open("GET", "https://a.example.com")
        assert transport.get_all_response_headers() == ""
        assert transport.get_response_header("x") is None

    def test_response_text_requires_text_kind(self, transport):
        transport.open("GET", "https://a.example.com")
        transport.response_type = ResponseKind.JSON
        transport.send()
        transport.respond(200, "{}")
        assert transport.response == {}
        with pytest.raises(InvalidStateError):
            transport.response_text

    def test_response_type_locked_after_loading(self, transport):
        transport.open("GET", "https://a.example.com")
        transport.send()
        transport.respond(200, "x")
        with pytest.raises(InvalidStateError):
            transport.response_type = "json"

    def test_unknown_response_type_ignored(self, transport):
        transport.response_type = "xml"
        assert transport.response_type is ResponseKind.TEXT

    def test_response_before_done(self, transport):
        transport.response_type = "json"
        assert transport.response is None

    def test_failure_has_status_zero(self, transport, states):
        transport.open("GET", "https://a.example.com")
        transport.send()
        transport.fail()
        assert states[-1] is ReadyState.DONE
        assert transport.status == 0
        assert transport.response == ""


class TestStaleSends:
    """Test that results of superseded sends are ignored."""

    def test_reopen_ignores_old_result(self, transport, states):
        transport.open("GET", "https://a.example.com")
        transport.send()
        old_id = transport.last_request.send_id

        transport.open("GET", "https://b.example.com")
        assert transport.cancelled == 1
        transport.send()
        transport.respond(500, send_id=old_id)

        assert transport.ready_state is ReadyState.OPENED
        assert transport.status == 0

    def test_abort_active_request(self, transport, states):
        transport.open("GET", "https://a.example.com")
        transport.send()
        states.clear()

        transport.abort()
        assert states == [ReadyState.DONE]
        assert transport.ready_state is ReadyState.UNSENT
        assert transport.status == 0

        transport.respond(200, "late")
        assert transport.status == 0

    def test_abort_opened_request(self, transport, states):
        transport.open("GET", "https://a.example.com")
        states.clear()
        transport.abort()
        assert states == []
        assert transport.ready_state is ReadyState.UNSENT

    def test_timeout_notification(self, transport):
        events = []
        transport.on_ready_state_change = lambda: events.append(transport.ready_state)
        transport.on_timeout = lambda: events.append("timeout")
        transport.open("GET", "https://a.example.com")
        transport.send()
        transport.time_out()
        assert events[-2:] == [ReadyState.DONE, "timeout"]
