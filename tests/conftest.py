"""Shared fixtures: a scripted Graph API transport and a recording sleep.

The executor talks to httpx.MockTransport, so every request that would have
gone to graph.facebook.com is captured in ``graph.requests``.
"""

from __future__ import annotations

import random
from typing import Any, Callable

import httpx
import pytest

from social_analytics_mcp.executor import GRAPH_API_BASE_URL, RequestExecutor
from social_analytics_mcp.platforms import FacebookClient, InstagramClient

Reply = Callable[[httpx.Request], httpx.Response]


def reply(status: int = 200, json: Any = None, headers: dict[str, str] | None = None) -> Reply:
    """Build a reply; a fresh Response is created for every request."""

    def _reply(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=json, headers=headers)

    return _reply


def graph_error(status: int, code: int, message: str = "boom", type_: str = "GraphMethodException", **extra: Any) -> Reply:
    return reply(status, {"error": {"message": message, "type": type_, "code": code, **extra}})


def connect_error(message: str = "connection refused") -> Reply:
    def _reply(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError(message, request=request)

    return _reply


class FakeGraph:
    """Scripted replies keyed by URL path. The last reply for a path repeats."""

    def __init__(self) -> None:
        self.routes: dict[str, list[Reply]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, path: str, *replies: Reply) -> None:
        self.routes[path] = list(replies)

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get(request.url.path)
        if not queue:
            return httpx.Response(
                404,
                json={"error": {"message": f"Unknown path {request.url.path}", "type": "GraphMethodException", "code": 803}},
            )
        handler = queue.pop(0) if len(queue) > 1 else queue[0]
        return handler(request)


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def graph() -> FakeGraph:
    return FakeGraph()


@pytest.fixture
def sleeps() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def executor(graph, sleeps) -> RequestExecutor:
    http = httpx.AsyncClient(base_url=GRAPH_API_BASE_URL, transport=httpx.MockTransport(graph))
    return RequestExecutor(http, sleep=sleeps, rng=random.Random(0))


@pytest.fixture
def instagram(executor) -> InstagramClient:
    return InstagramClient(executor, access_token="ig-token")


@pytest.fixture
def facebook(executor) -> FacebookClient:
    return FacebookClient(executor, access_token="fb-token", page_id="555")
