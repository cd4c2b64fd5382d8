"""Shared fixtures: an in-memory gateway socket and a mock HTTP transport."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import httpx
import pytest

from evangeline.config import ConnectionConfig
from evangeline.gateway import GatewayConnection

_CLOSE = object()


# Configure anyio to only use asyncio backend (skip trio tests)
@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio to use only asyncio backend."""
    return "asyncio"


class FakeWebSocket:
    """Just enough of a websockets connection for GatewayConnection."""

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.close_calls: list[tuple[int, str]] = []
        self.close_code: int | None = None
        self.close_reason: str | None = None
        # When set, close() blocks until the event fires (a slow closing handshake)
        self.close_gate: asyncio.Event | None = None
        self._inbox: asyncio.Queue = asyncio.Queue()

    # Server side
    def feed(self, frame: str | bytes) -> None:
        self._inbox.put_nowait(frame)

    def drop(self, code: int = 1006, reason: str = "") -> None:
        self.close_code = code
        self.close_reason = reason
        self._inbox.put_nowait(_CLOSE)

    def fail(self, exc: BaseException) -> None:
        self._inbox.put_nowait(exc)

    # Client side
    async def send(self, data: str) -> None:
        if self.close_code is not None:
            raise OSError("socket is closed")
        self.sent.append(data)

    async def close(self, code: int = 1000, reason: str = "") -> None:
        self.close_calls.append((code, reason))
        if self.close_gate is not None:
            await self.close_gate.wait()
        if self.close_code is None:
            self.drop(code, reason)

    def __aiter__(self) -> "FakeWebSocket":
        return self

    async def __anext__(self) -> Any:
        item = await self._inbox.get()
        if item is _CLOSE:
            self._inbox.put_nowait(_CLOSE)
            raise StopAsyncIteration
        if isinstance(item, BaseException):
            raise item
        return item


class FakeConnector:
    """Stands in for ``websockets.connect``; records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.sockets: list[FakeWebSocket] = []
        self.error: BaseException | None = None
        # When set, the handshake blocks until the event fires
        self.gate: asyncio.Event | None = None

    async def __call__(self, url: str, **kwargs: Any) -> FakeWebSocket:
        self.calls.append((url, kwargs))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        ws = FakeWebSocket()
        self.sockets.append(ws)
        return ws

    @property
    def ws(self) -> FakeWebSocket:
        return self.sockets[-1]


class HTTPRecorder:
    """httpx.MockTransport handler that records requests and replays responses."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: list[httpx.Response] = []

    def reply(self, status_code: int = 200, **kwargs: Any) -> None:
        self.responses.append(httpx.Response(status_code, **kwargs))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if self.responses:
            return self.responses.pop(0)
        return httpx.Response(200, json={})

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def config() -> ConnectionConfig:
    return ConnectionConfig(
        gateway_url="wss://gateway.test/",
        rest_url="https://rest.test/",
        cdn_url="https://cdn.test",
    )


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
async def conn(config, connector):
    connection = GatewayConnection("evangeline test", config, connector=connector)
    yield connection
    await connection.close()


@pytest.fixture
def events(conn) -> list[tuple[str, tuple[Any, ...]]]:
    """Every event ``conn`` emits, as (kind, handler args)."""
    recorded: list[tuple[str, tuple[Any, ...]]] = []

    def record(kind: str) -> Callable[..., None]:
        return lambda *args: recorded.append((kind, args))

    for kind in ("ready", "messageCreate", "error", "close"):
        conn.on(kind, record(kind))
    return recorded


@pytest.fixture
def wait_until():
    async def _wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("condition not met before timeout")
            await asyncio.sleep(0.005)

    return _wait_until


@pytest.fixture
def http() -> HTTPRecorder:
    return HTTPRecorder()


@pytest.fixture
async def http_client(http):
    client = httpx.AsyncClient(transport=httpx.MockTransport(http))
    yield client
    await client.aclose()
