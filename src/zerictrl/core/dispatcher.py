"""Command dispatcher: validate operator input and send robot tool calls.

All parsing of operator-typed numbers happens here. Failures are
returned as a DispatchResult instead of raised, so the UI can print
them straight into its log.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, Self

from zerictrl.api.protocol import ACTION_TOOL, SERVO_SEQUENCES_TOOL, JsonRpcRequest, tool_call
from zerictrl.errors import TransportError

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

# Integer arguments required by each action of the robot's action tool
ACTION_FIELDS: dict[str, tuple[str, ...]] = {
    "walk": ("steps", "speed", "direction"),
    "turn": ("steps", "speed", "direction"),
    "swing": ("steps", "speed", "amount"),
    "shake_tail": ("steps", "speed", "amount"),
    "sit": (),
    "home": (),
}


class CommandChannel(Protocol):
    """What the dispatcher may do with a connection: check it and send."""

    def is_ready(self) -> bool: ...

    async def send(self, text: str) -> None: ...


class DispatchErrorKind(Enum):
    """Why a dispatch failed."""

    NOT_READY = "not_ready"
    INVALID_ARGUMENT = "invalid_argument"
    TRANSPORT = "transport"


@dataclass(frozen=True)
class DispatchError:
    """A dispatch failure.

    Attributes:
        kind: Failure category.
        message: Human-readable explanation.
        field: Offending argument name, for INVALID_ARGUMENT.
    """

    kind: DispatchErrorKind
    message: str
    field: str | None = None

    def __str__(self) -> str:
        """Return error message representation."""
        return f"[{self.kind.value}] {self.message}"


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of a dispatch: the sent request, or an error."""

    request: JsonRpcRequest | None = None
    error: DispatchError | None = None

    @property
    def ok(self) -> bool:
        """Return True if the request was handed to the transport."""
        return self.error is None

    @classmethod
    def success(cls, request: JsonRpcRequest) -> Self:
        """Create a successful result."""
        return cls(request=request)

    @classmethod
    def failure(cls, kind: DispatchErrorKind, message: str, field: str | None = None) -> Self:
        """Create a failed result."""
        return cls(error=DispatchError(kind, message, field))


def parse_int_argument(name: str, value: object) -> int:
    """Parse an operator-supplied value as a base-10 integer.

    Args:
        name: Argument name, used in the error message.
        value: Text from a form field, or an int.

    Returns:
        The parsed integer.

    Raises:
        ValueError: If the value is not an integer.
    """
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER_RE.fullmatch(value.strip()):
        return int(value.strip())
    raise ValueError(f"{name} must be an integer, got {value!r}")


class CommandDispatcher:
    """Builds tools/call envelopes and sends them over a ready channel.

    Request ids start at 1 and increase by one for every request built.

    Example:
        dispatcher = CommandDispatcher()
        result = await dispatcher.send_walk_command(manager, "3", "700", "1")
        if not result.ok:
            print(result.error)
    """

    def __init__(self) -> None:
        """Initialize the dispatcher."""
        self._request_id: int = 0

    def _next_id(self) -> int:
        """Generate next request ID."""
        self._request_id += 1
        return self._request_id

    async def send_walk_command(
        self,
        channel: CommandChannel,
        steps: object,
        speed: object,
        direction: object,
    ) -> DispatchResult:
        """Send a walk action (1 = forward, -1 = backward).

        Args:
            channel: Open connection to the robot.
            steps: Number of steps.
            speed: Step duration used by the gait.
            direction: Walking direction.

        Returns:
            DispatchResult with the sent request, or the failure.
        """
        return await self.send_action(
            channel, "walk", steps=steps, speed=speed, direction=direction
        )

    async def send_action(
        self,
        channel: CommandChannel,
        action: str,
        **fields: object,
    ) -> DispatchResult:
        """Send any action known to the robot's action tool.

        Args:
            channel: Open connection to the robot.
            action: Action name, one of ACTION_FIELDS.
            **fields: The action's integer arguments, as text or int.

        Returns:
            DispatchResult with the sent request, or the failure.
        """
        if not channel.is_ready():
            return self._not_ready(action)

        required = ACTION_FIELDS.get(action)
        if required is None:
            return _invalid(f"Unknown action '{action}'", "action")

        unexpected = sorted(set(fields) - set(required))
        if unexpected:
            return _invalid(f"Unexpected argument for {action}: {', '.join(unexpected)}", unexpected[0])

        arguments: dict[str, Any] = {"action": action}
        for name in required:
            if name not in fields:
                return _invalid(f"Missing argument for {action}: {name}", name)
            try:
                arguments[name] = parse_int_argument(name, fields[name])
            except ValueError as e:
                return _invalid(str(e), name)

        return await self.call_tool(channel, ACTION_TOOL, arguments)

    async def send_servo_sequence(self, channel: CommandChannel, sequence: str) -> DispatchResult:
        """Send a custom servo sequence for the legs and tail.

        The sequence text is passed through as typed; the robot parses it.

        Args:
            channel: Open connection to the robot.
            sequence: Sequence text, must not be blank.

        Returns:
            DispatchResult with the sent request, or the failure.
        """
        if not channel.is_ready():
            return self._not_ready(SERVO_SEQUENCES_TOOL)
        if not sequence.strip():
            return _invalid("sequence must not be empty", "sequence")
        return await self.call_tool(channel, SERVO_SEQUENCES_TOOL, {"sequence": sequence})

    async def call_tool(
        self,
        channel: CommandChannel,
        name: str,
        arguments: Mapping[str, Any] | None = None,
    ) -> DispatchResult:
        """Send a tools/call request for any tool.

        Replies are not awaited; they show up as message events on the
        connection.

        Args:
            channel: Open connection to the robot.
            name: Tool name, e.g. "self.zeri.get_status".
            arguments: Tool arguments.

        Returns:
            DispatchResult with the sent request, or the failure.
        """
        if not channel.is_ready():
            return self._not_ready(name)

        request = tool_call(name, dict(arguments or {}), self._next_id())
        try:
            await channel.send(request.to_json())
        except TransportError as e:
            logger.warning("Request %s (%s) not sent: %s", request.id, name, e)
            return DispatchResult.failure(DispatchErrorKind.TRANSPORT, str(e))

        logger.info("Sent request %s: %s", request.id, name)
        return DispatchResult.success(request)

    @staticmethod
    def _not_ready(what: str) -> DispatchResult:
        logger.warning("Cannot send %s: not connected", what)
        return DispatchResult.failure(
            DispatchErrorKind.NOT_READY,
            f"Cannot send {what}: not connected to robot",
        )


def _invalid(message: str, field: str) -> DispatchResult:
    logger.warning("Invalid command: %s", message)
    return DispatchResult.failure(DispatchErrorKind.INVALID_ARGUMENT, message, field)
