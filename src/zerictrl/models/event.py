"""Connection state and lifecycle event models."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from zerictrl.models.endpoint import Endpoint


class ConnectionState(Enum):
    """Lifecycle state of the robot connection."""

    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"
    FAILED = "failed"


class EventKind(Enum):
    """Kind of connection event."""

    CONNECTING = "connecting"
    OPENED = "opened"
    MESSAGE = "message"
    CLOSED = "closed"
    ERROR = "error"


@dataclass(frozen=True)
class ConnectionEvent:
    """A timestamped entry in the connection event log.

    Attributes:
        kind: What happened.
        message: Human-readable description for the log view.
        state: Connection state at the time the event was published.
        timestamp: Unix timestamp (seconds).
        data: Raw inbound text for MESSAGE events.
        error: The exception behind an ERROR event.
        connection: The now-usable connection for OPENED events.
        endpoint: Where the session connects, for CONNECTING and OPENED events.
    """

    kind: EventKind
    message: str
    state: ConnectionState
    timestamp: float = field(default_factory=time.time)
    data: str | None = None
    error: Exception | None = None
    connection: Any = None
    endpoint: Endpoint | None = None

    @property
    def is_error(self) -> bool:
        """Return True for ERROR events."""
        return self.kind is EventKind.ERROR
