"""JSON-RPC protocol types for robot tool calls."""

import json
from dataclasses import dataclass
from typing import Any, Self

JSONRPC_VERSION = "2.0"
TOOLS_CALL = "tools/call"

# Tool names exposed by the robot firmware
ACTION_TOOL = "self.zeri.action"
STATUS_TOOL = "self.zeri.get_status"
IP_ADDRESS_TOOL = "self.zeri.get_ip_address"
SERVO_SEQUENCES_TOOL = "self.zeri.servo_sequences"


@dataclass(frozen=True)
class JsonRpcRequest:
    """A JSON-RPC 2.0 request.

    Attributes:
        id: Request identifier (int or str).
        method: Method name to call.
        params: Method parameters (dict or list).
    """

    id: int | str
    method: str
    params: dict[str, Any] | list[Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        result: dict[str, Any] = {
            "jsonrpc": JSONRPC_VERSION,
            "id": self.id,
            "method": self.method,
        }
        if self.params is not None:
            result["params"] = self.params
        return result

    def to_json(self) -> str:
        """Serialize to compact JSON text for a single text frame."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create request from JSON dict.

        Raises:
            ValueError: If the dict is not a JSON-RPC 2.0 request.
        """
        if data.get("jsonrpc") != JSONRPC_VERSION:
            raise ValueError(f"Not a JSON-RPC {JSONRPC_VERSION} message")
        method = data.get("method")
        if not isinstance(method, str) or not method:
            raise ValueError("Request has no method")
        request_id = data.get("id")
        if not isinstance(request_id, int | str) or isinstance(request_id, bool):
            raise ValueError("Request has no valid id")
        return cls(id=request_id, method=method, params=data.get("params"))

    @classmethod
    def from_json(cls, text: str) -> Self:
        """Parse a request from JSON text.

        Raises:
            ValueError: If the text is not valid JSON or not a request.
        """
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("JSON-RPC request must be an object")
        return cls.from_dict(data)

    @classmethod
    def call(
        cls,
        method: str,
        params: dict[str, Any] | list[Any] | None = None,
        request_id: int = 1,
    ) -> Self:
        """Create a method call request."""
        return cls(id=request_id, method=method, params=params)


def tool_call(
    name: str,
    arguments: dict[str, Any] | None = None,
    request_id: int = 1,
) -> JsonRpcRequest:
    """Create a tools/call request for a named robot tool.

    Args:
        name: Tool name, e.g. "self.zeri.action".
        arguments: Tool arguments (empty dict if omitted).
        request_id: Request identifier.

    Returns:
        The request, ready to serialize.
    """
    return JsonRpcRequest.call(
        TOOLS_CALL,
        {"name": name, "arguments": dict(arguments or {})},
        request_id,
    )
