"""Shared fixtures for proxy and client tests."""

from typing import Any, Callable
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from app import app, get_tool_context
from tools.types import ToolContext


MIXED_BLOCKS = [
    {"type": "text", "text": "A"},
    {"type": "image", "data": "aGVsbG8=", "mimeType": "image/png"},
    {"type": "text", "text": "B"},
]


class FakeApi:
    """Stand-in for ProxyClient that records calls and replays canned blocks.

    ``on_call`` runs inside the request, before the response is returned, so
    tests can change the view while a request is "in flight".
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[str, ...]]] = []
        self.responses: dict[str, Any] = {
            "structure": [{"type": "text", "text": "Overview"}, {"type": "text", "text": "Hooks"}],
            "contents": MIXED_BLOCKS,
            "ask": [{"type": "text", "text": "It works like this."}],
        }
        self.on_call: Callable[[str, tuple[str, ...]], None] | None = None

    def _respond(self, action: str, *args: str) -> list[dict[str, Any]]:
        self.calls.append((action, args))
        hook, self.on_call = self.on_call, None
        if hook is not None:
            hook(action, args)
        response = self.responses[action]
        if callable(response):
            response = response(*args)
        if isinstance(response, Exception):
            raise response
        return response

    def structure(self, owner: str, repo: str) -> list[dict[str, Any]]:
        return self._respond("structure", owner, repo)

    def contents(self, owner: str, repo: str, topic: str) -> list[dict[str, Any]]:
        return self._respond("contents", owner, repo, topic)

    def ask(self, owner: str, repo: str, question: str) -> list[dict[str, Any]]:
        return self._respond("ask", owner, repo, question)


@pytest.fixture
def mixed_blocks():
    return [dict(b) for b in MIXED_BLOCKS]


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def connection(mixed_blocks):
    """Mock DeepWiki connection whose call_tool returns mixed content blocks."""
    conn = Mock()
    conn.call_tool = AsyncMock(return_value=mixed_blocks)
    return conn


@pytest.fixture
def client(connection):
    """TestClient with the tool context pointed at the mock connection."""
    app.dependency_overrides[get_tool_context] = lambda: ToolContext(connection=connection)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
