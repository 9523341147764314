"""API client for robot JSON-RPC over WebSocket."""

from zerictrl.api.connection import ConnectionManager
from zerictrl.api.protocol import JsonRpcRequest, tool_call

__all__ = [
    "ConnectionManager",
    "JsonRpcRequest",
    "tool_call",
]
