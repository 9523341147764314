"""WebSocket connection manager for a single robot.

The manager owns at most one WebSocket session at a time and reports
everything that happens to it through an EventStream: connecting,
opened, inbound messages, closed and errors. Callers never get an
exception from connect() or disconnect(); they watch the events.
"""

import asyncio
import logging
from contextlib import suppress

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosedError, WebSocketException

from zerictrl.core.events import EventHandler, EventStream, Unsubscribe
from zerictrl.errors import InvalidAddressError, TransportError
from zerictrl.models.endpoint import DEFAULT_PATH, DEFAULT_PORT, Endpoint
from zerictrl.models.event import ConnectionEvent, ConnectionState, EventKind

logger = logging.getLogger(__name__)

_ACTIVE_STATES = (ConnectionState.CONNECTING, ConnectionState.OPEN)


class ConnectionManager:
    """Async WebSocket client owning the connection to one robot.

    A new connect() while a connection is open or still connecting tears
    the old one down first (a "closed" event is published for it) and
    then starts the new attempt.

    Example:
        manager = ConnectionManager()
        manager.on_event(lambda event: print(event.message))
        await manager.connect("192.168.1.17")
        ...
        await manager.disconnect()
    """

    _DEFAULT_TIMEOUT: float = 10.0
    _CLOSE_TIMEOUT: float = 1.0

    def __init__(
        self,
        port: int = DEFAULT_PORT,
        path: str = DEFAULT_PATH,
        timeout: float = _DEFAULT_TIMEOUT,
        events: EventStream | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            port: Port used when the address has none (default 8080).
            path: WebSocket path used when the address has none.
            timeout: Handshake timeout in seconds.
            events: Event stream to publish to (a new one if omitted).
        """
        self._port = port
        self._path = path
        self._timeout = timeout
        self._events = events if events is not None else EventStream()
        self._state = ConnectionState.IDLE
        self._endpoint: Endpoint | None = None
        self._websocket: ClientConnection | None = None
        self._session_task: asyncio.Task[None] | None = None
        # Serializes connect/disconnect so only one session is ever live
        self._lock = asyncio.Lock()

    @property
    def state(self) -> ConnectionState:
        """Return the current connection state."""
        return self._state

    @property
    def endpoint(self) -> Endpoint | None:
        """Return the endpoint of the current or last attempt."""
        return self._endpoint

    @property
    def events(self) -> EventStream:
        """Return the event stream."""
        return self._events

    def is_ready(self) -> bool:
        """Return True if the connection can accept sends."""
        return self._state is ConnectionState.OPEN and self._websocket is not None

    def on_event(self, handler: EventHandler) -> Unsubscribe:
        """Subscribe to connection events.

        Returns:
            A callable that removes the subscription.
        """
        return self._events.subscribe(handler)

    async def connect(self, address: str) -> None:
        """Start connecting to the robot at the given address.

        Returns as soon as the attempt is started; the outcome arrives as
        an "opened" or "error" event. An unusable address is reported as
        an "error" event and leaves the current connection untouched.

        Args:
            address: Operator-supplied host, host:port or ws:// URL.
        """
        try:
            endpoint = Endpoint.parse(address, port=self._port, path=self._path)
        except InvalidAddressError as e:
            logger.warning("Rejected robot address %r: %s", address, e)
            self._publish(EventKind.ERROR, str(e), error=e)
            return

        async with self._lock:
            if self._state in _ACTIVE_STATES:
                previous = self._endpoint.url if self._endpoint else "robot"
                logger.info("Replacing connection to %s with %s", previous, endpoint.url)
                await self._teardown()

            self._endpoint = endpoint
            self._state = ConnectionState.CONNECTING
            self._publish(
                EventKind.CONNECTING, f"Connecting to {endpoint.url}", endpoint=endpoint
            )
            self._session_task = asyncio.create_task(self._run_session(endpoint))

    async def disconnect(self) -> None:
        """Close the connection.

        Open or connecting sessions are cancelled and closed, and a
        "closed" event is published. A failed connection simply becomes
        closed. Idle and closed managers are left as they are.
        """
        async with self._lock:
            await self._teardown()

    async def _teardown(self) -> None:
        """Stop the current session. Caller holds the lock."""
        if self._state is ConnectionState.FAILED:
            self._state = ConnectionState.CLOSED
            return
        if self._state not in _ACTIVE_STATES:
            return

        task = self._session_task
        websocket = self._websocket
        self._session_task = None
        self._websocket = None
        self._state = ConnectionState.CLOSED

        # Cancel session task
        if task and task is not asyncio.current_task():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task

        # Close socket
        if websocket is not None:
            try:
                await asyncio.wait_for(websocket.close(), timeout=self._CLOSE_TIMEOUT)
            except (OSError, TimeoutError, WebSocketException):
                logger.debug("Error while closing WebSocket", exc_info=True)

        target = self._endpoint.url if self._endpoint else "robot"
        self._publish(EventKind.CLOSED, f"Disconnected from {target}")

    async def send(self, text: str) -> None:
        """Transmit one text frame.

        Args:
            text: Serialized message.

        Raises:
            TransportError: If not connected or the transport fails.
        """
        websocket = self._websocket
        if not self.is_ready() or websocket is None:
            raise TransportError("Not connected to robot")
        try:
            await websocket.send(text)
        except (OSError, WebSocketException) as e:
            raise TransportError(f"Send failed: {e}") from e
        logger.debug("Sent %s", text)

    async def _run_session(self, endpoint: Endpoint) -> None:
        """Open the WebSocket and pump inbound messages until it closes."""
        try:
            websocket = await connect(endpoint.url, open_timeout=self._timeout)
        except (OSError, TimeoutError, WebSocketException) as e:
            self._fail(TransportError(f"Failed to connect to {endpoint.url}: {e}"))
            return

        self._websocket = websocket
        self._state = ConnectionState.OPEN
        logger.info("Connected to %s", endpoint.url)
        self._publish(
            EventKind.OPENED, f"Connected to {endpoint.url}", connection=self, endpoint=endpoint
        )

        try:
            async for message in websocket:
                text = message if isinstance(message, str) else message.decode("utf-8", errors="replace")
                logger.debug("Received %s", text)
                self._publish(EventKind.MESSAGE, f"Received: {text}", data=text)
        except ConnectionClosedError as e:
            # Network drop or abnormal close frame
            self._close_session(f"Connection to {endpoint.url} lost: {e}")
            return
        except (OSError, WebSocketException) as e:
            self._fail(TransportError(f"Connection to {endpoint.url} failed: {e}"))
            return

        self._close_session(f"Connection closed by {endpoint.url}{_close_detail(websocket)}")

    def _close_session(self, message: str) -> None:
        """Mark the current session as closed by the remote side."""
        if not self._owns_session():
            return
        self._websocket = None
        self._session_task = None
        self._state = ConnectionState.CLOSED
        logger.info(message)
        self._publish(EventKind.CLOSED, message)

    def _fail(self, error: TransportError) -> None:
        """Mark the current session as failed."""
        if not self._owns_session():
            logger.debug("Ignoring failure of a replaced session: %s", error)
            return
        self._websocket = None
        self._session_task = None
        self._state = ConnectionState.FAILED
        logger.warning("%s", error)
        self._publish(EventKind.ERROR, str(error), error=error)

    def _owns_session(self) -> bool:
        """Return True if called from the live session task."""
        return asyncio.current_task() is self._session_task

    def _publish(
        self,
        kind: EventKind,
        message: str,
        *,
        data: str | None = None,
        error: Exception | None = None,
        connection: "ConnectionManager | None" = None,
        endpoint: Endpoint | None = None,
    ) -> None:
        """Publish an event stamped with the current state."""
        self._events.publish(
            ConnectionEvent(
                kind=kind,
                message=message,
                state=self._state,
                data=data,
                error=error,
                connection=connection,
                endpoint=endpoint,
            )
        )


def _close_detail(websocket: ClientConnection) -> str:
    """Describe the close code and reason, if the transport recorded one."""
    code = getattr(websocket, "close_code", None)
    if code is None:
        return ""
    reason = getattr(websocket, "close_reason", None)
    return f" (code {code}: {reason})" if reason else f" (code {code})"

