"""
Pytest configuration and fixtures for xhr-client-core tests.
"""

import logging

import pytest
import responses as responses_lib

from xhr_client import FluentRequest, Renderer
from xhr_client.core.logging.config import LoggingConfig
from xhr_client.transport import MockTransport


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def transport():
    """Transport completed by the test."""
    return MockTransport()


@pytest.fixture
def request_factory(transport, base_url):
    """
    Build FluentRequest instances bound to the mock transport.

    Example:
        def test_something(request_factory, transport):
            req = request_factory("/users").dispatch()
            transport.respond(200, "ok")
    """
    def factory(path="", body=None, method=None, **kwargs):
        return FluentRequest(base_url + path, body, method, transport=transport, **kwargs)
    return factory


class RecordingRenderer(Renderer):
    """Renderer storing the markup rendered into each node."""

    def __init__(self):
        self.nodes = {}
        self.history = []

    def render_into(self, node, html):
        self.nodes[node] = html
        self.history.append((node, html))


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def logging_config():
    """
    LoggingConfig fixture for testing.

    Example:
        def test_with_logging(logging_config):
            config = ClientConfig.create(logging=logging_config)
            req = FluentRequest(url, config=config)
    """
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=True,
        enable_file=False
    )


@pytest.fixture(autouse=True)
def reset_xhr_logger():
    """Detach handlers installed by RequestLogger between tests."""
    yield
    logger = logging.getLogger("xhr_client")
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            handler.close()
            logger.removeHandler(handler)
    logger.propagate = True
