"""Shared test fixtures.

No network access — provider and LINE calls go through ``httpx.MockTransport``
or ``AsyncMock`` ports.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from assistant_bridge.domain.entities import Message, Prompt, Role
from assistant_bridge.infrastructure.config import Settings
from assistant_bridge.infrastructure.openai_transport import OpenAITransport, build_client

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingHandler:
    """Routes ``(method, path)`` to canned responses and records every request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def on(self, method: str, path: str, responder: Any) -> RecordingHandler:
        if callable(responder):
            self._routes[(method, path)] = responder
        else:
            self._routes[(method, path)] = lambda _req, body=responder: httpx.Response(200, json=body)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self._routes:
            return httpx.Response(404, json={"error": {"message": f"no route {key}"}})
        return self._routes[key](request)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content)


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def make_transport() -> Callable[[Handler], OpenAITransport]:
    def _make(fn: Handler, timeout: float = 5.0) -> OpenAITransport:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(fn))
        client = build_client("sk-test", "https://api.test", http_client=http_client)
        return OpenAITransport(client, timeout=timeout)

    return _make


@pytest.fixture
def hello_prompt() -> Prompt:
    return Prompt.of([Message(role=Role.USER, content="hello")])


def make_settings(**kwargs: Any) -> Settings:
    kwargs.setdefault("openai_api_key", "sk-test")
    return Settings(_env_file=None, **kwargs)  # type: ignore[call-arg]


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    return make_settings
