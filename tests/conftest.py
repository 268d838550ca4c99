"""
Pytest configuration for InstantSeek2Api tests.

Registers custom markers:
    live: Tests that hit the real InstantSeek API (require INSTANTSEEK_LIVE=1)

Usage:
    pytest tests/ -v                    # Run all tests (live ones skip)
    INSTANTSEEK_LIVE=1 pytest -m live   # Only run live upstream tests
"""

import httpx
import pytest
from starlette.testclient import TestClient

from instantseek2api.config import Settings
from instantseek2api.server import create_app


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "live: marks tests that hit the real InstantSeek API (slow, needs network)"
    )


class FakeUpstream:
    """Stands in for InstantSeek behind an httpx.MockTransport.

    Records every request it receives. ``reply`` is returned as JSON unless it
    is bytes (sent raw) or an exception (raised as a transport failure).
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.reply = {"response": "Hello! How can I help?", "conversation_id": "conv-1"}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.reply, Exception):
            raise self.reply
        if isinstance(self.reply, bytes):
            return httpx.Response(self.status_code, content=self.reply)
        return httpx.Response(self.status_code, json=self.reply)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def make_client(upstream):
    """Factory for TestClients running the full app (lifespan included)."""
    opened = []

    def _make(auth_token=None):
        app = create_app(Settings(auth_token=auth_token), transport=upstream.transport)
        client = TestClient(app)
        client.__enter__()
        opened.append(client)
        return client

    yield _make

    for client in opened:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()
