"""Data models for robot endpoints and connection events."""

from zerictrl.models.endpoint import DEFAULT_PATH, DEFAULT_PORT, Endpoint
from zerictrl.models.event import ConnectionEvent, ConnectionState, EventKind

__all__ = [
    "DEFAULT_PATH",
    "DEFAULT_PORT",
    "ConnectionEvent",
    "ConnectionState",
    "Endpoint",
    "EventKind",
]
