"""
Integration tests: FluentRequest over RequestsTransport with logging.
"""

import asyncio
import json

import pytest
import responses

from xhr_client import (
    ClientConfig,
    FluentRequest,
    LoggingConfig,
    RequestFailedError,
    RequestsTransport,
    load_from_env,
)


class TestLifecycleIntegration:
    """Integration tests for the full request lifecycle."""

    @pytest.mark.asyncio
    async def test_json_logging_to_file(self, mock_responses, tmp_path):
        """Completed request is logged to file as JSON."""
        mock_responses.add(
            responses.GET,
            "https://httpbin.org/get",
            json={"args": {}, "url": "https://httpbin.org/get"},
            status=200
        )
        log_file = tmp_path / "xhr.log"

        logging_config = LoggingConfig.create(
            level="INFO",
            format="json",
            enable_console=False,
            enable_file=True,
            file_path=str(log_file)
        )
        config = ClientConfig.create(response_kind="json", logging=logging_config)

        with RequestsTransport(config.transport) as transport:
            req = FluentRequest("https://httpbin.org/get", transport=transport, config=config)
            req.set_header("Authorization", "Bearer secret-token")
            await req.to_future()

        assert req.response()["url"] == "https://httpbin.org/get"

        entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        assert [e["message"] for e in entries] == ["Request dispatched", "Request completed"]
        assert entries[0]["headers"]["Authorization"] == "***REDACTED***"
        assert entries[1]["status"] == 200
        assert entries[0]["request_id"] == entries[1]["request_id"]
        assert "secret-token" not in log_file.read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_sequential_reuse(self, mock_responses):
        """One request object serves several dispatches."""
        mock_responses.add(responses.POST, "https://api.example.com/a", body="one")
        mock_responses.add(responses.POST, "https://api.example.com/a", body="two")

        req = FluentRequest().reset("https://api.example.com/a")
        first = await req.to_future("1")
        text1 = first.response_text()
        req.dispatch("2")
        await req.to_future()

        assert (text1, req.response_text()) == ("one", "two")
        assert [c.request.body for c in mock_responses.calls] == ["1", "2"]

    @pytest.mark.asyncio
    async def test_parallel_requests(self, mock_responses):
        """Independent requests complete concurrently."""
        for i in range(3):
            mock_responses.add(responses.GET, f"https://api.example.com/{i}", json={"i": i})

        requests_ = [FluentRequest(f"https://api.example.com/{i}").response_kind("json") for i in range(3)]
        results = await asyncio.gather(*(r.to_future() for r in requests_))

        assert [r.response()["i"] for r in results] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_failure_collected_with_gather(self, mock_responses):
        mock_responses.add(responses.GET, "https://api.example.com/ok", body="ok")
        mock_responses.add(responses.GET, "https://api.example.com/bad", status=500)

        outcomes = await asyncio.gather(
            FluentRequest("https://api.example.com/ok").to_future(),
            FluentRequest("https://api.example.com/bad").to_future(),
            return_exceptions=True,
        )

        assert outcomes[0].status() == 200
        assert isinstance(outcomes[1], RequestFailedError)
        assert outcomes[1].request.error_message() == "HTTP 500"

    @pytest.mark.asyncio
    async def test_env_config(self, mock_responses, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("XHR_CLIENT_RESPONSE_KIND", "json")
        monkeypatch.setenv("XHR_CLIENT_TIMEOUT_MS", "5000")
        mock_responses.add(responses.GET, "https://api.example.com/cfg", json=[1])

        req = FluentRequest("https://api.example.com/cfg", config=load_from_env())
        await req.to_future()

        assert req.timeout_ms == 5000
        assert req.response() == [1]
