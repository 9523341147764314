"""QThread worker for running the async robot connection in a Qt application.

Qt widgets must run in the main thread, but the ConnectionManager uses
asyncio. This worker runs the asyncio event loop in a background thread
and bridges events to the main thread via Qt signals.
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from PySide6.QtCore import QThread, Signal

from zerictrl.api.connection import ConnectionManager
from zerictrl.core.dispatcher import CommandDispatcher, DispatchResult
from zerictrl.models.endpoint import DEFAULT_PATH, DEFAULT_PORT
from zerictrl.models.event import ConnectionEvent

logger = logging.getLogger(__name__)


class RobotWorker(QThread):
    """Background thread worker owning the robot connection.

    All connection and dispatch work happens on the worker's event loop.
    The public methods are thread-safe and return immediately; results
    come back through signals.

    Example:
        worker = RobotWorker()
        worker.event_received.connect(lambda e: print(e.message))
        worker.start()
        worker.connect_to("192.168.1.17")
        worker.send_walk("3", "700", "1")
    """

    # Event loop is running and accepting requests
    loop_started = Signal()

    # ConnectionEvent, in publish order
    event_received = Signal(object)

    # DispatchResult of each send request
    command_dispatched = Signal(object)

    # Exception that escaped the event loop
    error_occurred = Signal(object)

    def __init__(
        self,
        port: int = DEFAULT_PORT,
        path: str = DEFAULT_PATH,
        timeout: float = 10.0,
    ) -> None:
        """Initialize the worker.

        Args:
            port: Default robot port (8080).
            path: Default WebSocket path.
            timeout: Connection timeout in seconds.
        """
        super().__init__()
        self._manager = ConnectionManager(port=port, path=path, timeout=timeout)
        self._dispatcher = CommandDispatcher()
        self._manager.on_event(self._on_event)
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def manager(self) -> ConnectionManager:
        """Return the connection manager (use only from the worker loop)."""
        return self._manager

    @property
    def is_ready(self) -> bool:
        """Return True if the robot connection is open."""
        return self._manager.is_ready()

    @property
    def is_running(self) -> bool:
        """Return True if the event loop is accepting work."""
        return self._loop is not None and self._loop.is_running()

    def connect_to(self, address: str) -> None:
        """Connect to a robot, replacing any current connection.

        Thread-safe call from main thread.

        Args:
            address: Robot address as typed by the operator.
        """
        self._submit(lambda: self._manager.connect(address))

    def disconnect_from(self) -> None:
        """Close the robot connection.

        Thread-safe call from main thread.
        """
        self._submit(self._manager.disconnect)

    def send_walk(self, steps: str, speed: str, direction: str) -> None:
        """Send a walk command from raw form values.

        Thread-safe call from main thread. The outcome is emitted via
        command_dispatched.
        """
        self._submit(
            lambda: self._dispatch(
                self._dispatcher.send_walk_command(self._manager, steps, speed, direction)
            )
        )

    def send_action(self, action: str, **fields: str) -> None:
        """Send any robot action from raw form values.

        Thread-safe call from main thread.
        """
        self._submit(
            lambda: self._dispatch(self._dispatcher.send_action(self._manager, action, **fields))
        )

    def send_servo_sequence(self, sequence: str) -> None:
        """Send a custom servo sequence.

        Thread-safe call from main thread.
        """
        self._submit(
            lambda: self._dispatch(
                self._dispatcher.send_servo_sequence(self._manager, sequence)
            )
        )

    def call_tool(self, name: str) -> None:
        """Call an argument-less robot tool, e.g. "self.zeri.get_status".

        Thread-safe call from main thread.
        """
        self._submit(lambda: self._dispatch(self._dispatcher.call_tool(self._manager, name)))

    def stop(self) -> None:
        """Disconnect and stop the event loop (called from main thread)."""
        if self._loop and self._loop.is_running():
            asyncio.run_coroutine_threadsafe(self._shutdown(), self._loop)

    def run(self) -> None:
        """Run the worker thread (entry point)."""
        # Create new event loop for this thread
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)

        try:
            self._loop.call_soon(self.loop_started.emit)
            self._loop.run_forever()
        except Exception as e:
            self.error_occurred.emit(e)
        finally:
            # Clean up
            self._loop.run_until_complete(self._manager.disconnect())
            self._loop.close()
            self._loop = None

    def _submit(self, factory: Callable[[], Coroutine[Any, Any, None]]) -> None:
        """Schedule a coroutine on the worker loop, or drop it if not running."""
        if self._loop and self._loop.is_running():
            asyncio.run_coroutine_threadsafe(factory(), self._loop)
        else:
            logger.warning("Worker not running, dropping request")

    async def _dispatch(self, pending: Coroutine[Any, Any, DispatchResult]) -> None:
        """Await a dispatch and emit its result."""
        try:
            result = await pending
        except Exception as e:
            self.error_occurred.emit(e)
            return
        self.command_dispatched.emit(result)

    async def _shutdown(self) -> None:
        """Disconnect, then stop the loop."""
        await self._manager.disconnect()
        asyncio.get_running_loop().stop()

    def _on_event(self, event: ConnectionEvent) -> None:
        """Forward a connection event to the main thread."""
        self.event_received.emit(event)
