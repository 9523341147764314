"""Test fixtures for zerictrl tests."""

import asyncio
import json
import os
from collections.abc import AsyncGenerator, Callable, Iterator
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from fakes import FakeChannel, FakeWebSocket, WaitUntil
from websockets.asyncio.server import ServerConnection, serve

from zerictrl.errors import TransportError

# Run Qt headless when no display is available.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture
def fake_ws() -> FakeWebSocket:
    """Return a fresh fake WebSocket."""
    return FakeWebSocket()


@pytest.fixture
def mock_connect(fake_ws: FakeWebSocket) -> Iterator[AsyncMock]:
    """Patch the WebSocket connect() used by ConnectionManager.

    The mock returns fake_ws; set side_effect to change that.
    """
    mock = AsyncMock(return_value=fake_ws)
    with patch("zerictrl.api.connection.connect", new=mock):
        yield mock


@pytest.fixture
def channel() -> FakeChannel:
    """Return a ready FakeChannel."""
    return FakeChannel()


@pytest.fixture
def broken_channel() -> FakeChannel:
    """Return a ready FakeChannel whose sends fail."""
    return FakeChannel(error=TransportError("Send failed: connection reset"))


@pytest.fixture
def wait_until() -> WaitUntil:
    """Return a helper that polls a predicate until it holds or times out."""

    async def _wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("Condition not met before timeout")
            await asyncio.sleep(0.01)

    return _wait_until


@pytest_asyncio.fixture
async def robot_server() -> AsyncGenerator[tuple[str, int, list[str]], None]:
    """Run a local WebSocket server standing in for the robot.

    The server greets each client, records every text frame it receives
    and answers each one with a JSON-RPC result carrying the same id.

    Yields:
        Tuple of (host, port, received frames).
    """
    received: list[str] = []

    async def handler(websocket: ServerConnection) -> None:
        await websocket.send("hello from robot")
        async for message in websocket:
            text = message if isinstance(message, str) else message.decode()
            received.append(text)
            request = json.loads(text)
            await websocket.send(
                json.dumps({"jsonrpc": "2.0", "id": request.get("id"), "result": "OK"})
            )

    async with serve(handler, "127.0.0.1", 0) as server:
        port = next(iter(server.sockets)).getsockname()[1]
        yield "127.0.0.1", port, received
