"""Ordered, observable stream of connection events.

Every published event is appended to the history and handed to each
current subscriber synchronously, in subscription order. Subscribers that
join later only see later events.
"""

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Callable
from contextlib import suppress

from zerictrl.models.event import ConnectionEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[ConnectionEvent], None]
Unsubscribe = Callable[[], None]


class EventStream:
    """Append-only event log with explicit subscription.

    Example:
        stream = EventStream()
        unsubscribe = stream.subscribe(lambda e: print(e.message))
        ...
        unsubscribe()
    """

    def __init__(self) -> None:
        """Initialize an empty stream."""
        self._history: list[ConnectionEvent] = []
        self._handlers: list[EventHandler] = []

    @property
    def history(self) -> list[ConnectionEvent]:
        """Return a snapshot of all events published so far."""
        return list(self._history)

    @property
    def subscriber_count(self) -> int:
        """Return the number of active subscribers."""
        return len(self._handlers)

    def subscribe(self, handler: EventHandler) -> Unsubscribe:
        """Register a handler for future events.

        Args:
            handler: Called with each event published after this call.

        Returns:
            A callable that removes the handler again.
        """
        self._handlers.append(handler)
        return lambda: self.unsubscribe(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        with suppress(ValueError):
            self._handlers.remove(handler)

    def publish(self, event: ConnectionEvent) -> None:
        """Append an event and deliver it to every subscriber."""
        self._history.append(event)
        # Copy so handlers may unsubscribe while being called
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                logger.exception("Event handler %r failed on %s event", handler, event.kind.value)

    async def listen(self) -> AsyncIterator[ConnectionEvent]:
        """Yield events published after the call, in order.

        The subscription is dropped when the iterator is closed.
        """
        queue: asyncio.Queue[ConnectionEvent] = asyncio.Queue()
        unsubscribe = self.subscribe(queue.put_nowait)
        try:
            while True:
                yield await queue.get()
        finally:
            unsubscribe()


def format_event(event: ConnectionEvent) -> str:
    """Render an event as a single log line, e.g. "12:30:01 [opened] Connected"."""
    stamp = time.strftime("%H:%M:%S", time.localtime(event.timestamp))
    return f"{stamp} [{event.kind.value}] {event.message}"
