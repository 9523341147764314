"""Robot endpoint model."""

from dataclasses import dataclass
from typing import Self
from urllib.parse import urlsplit

from zerictrl.errors import InvalidAddressError

DEFAULT_PORT = 8080
DEFAULT_PATH = "/ws"

_SCHEMES = ("ws", "wss")


@dataclass(frozen=True, slots=True)
class Endpoint:
    """WebSocket endpoint of a robot.

    Attributes:
        host: Robot hostname or IP address.
        port: TCP port (default 8080).
        path: WebSocket path (default "/ws").
        secure: Use wss:// instead of ws://.
    """

    host: str
    port: int = DEFAULT_PORT
    path: str = DEFAULT_PATH
    secure: bool = False

    @property
    def url(self) -> str:
        """Return the WebSocket URL, e.g. ws://192.168.1.17:8080/ws."""
        scheme = "wss" if self.secure else "ws"
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{scheme}://{host}:{self.port}{self.path}"

    @property
    def address(self) -> str:
        """Return the endpoint address (host:port)."""
        return f"{self.host}:{self.port}"

    @classmethod
    def parse(
        cls,
        address: str,
        port: int = DEFAULT_PORT,
        path: str = DEFAULT_PATH,
    ) -> Self:
        """Build an endpoint from operator-supplied text.

        Accepts a bare host ("192.168.1.17"), host:port, a bracketed IPv6
        literal, or a full ws:// / wss:// URL. Port and path fall back to
        the given defaults when the text does not carry them.

        Args:
            address: Text typed by the operator.
            port: Port used when the text has none.
            path: Path used when the text has none.

        Returns:
            The parsed Endpoint.

        Raises:
            InvalidAddressError: If the text is empty or malformed.
        """
        text = address.strip() if address else ""
        if not text:
            raise InvalidAddressError("Robot address is empty")

        if "://" not in text:
            text = f"ws://{text}"
        try:
            parts = urlsplit(text)
        except ValueError as e:
            raise InvalidAddressError(f"Invalid robot address: {address!r}") from e
        if parts.scheme not in _SCHEMES:
            raise InvalidAddressError(f"Unsupported scheme '{parts.scheme}' in {address!r}")

        host = parts.hostname
        if not host or any(c.isspace() for c in host):
            raise InvalidAddressError(f"Invalid robot address: {address!r}")

        try:
            parsed_port = parts.port
        except ValueError as e:
            raise InvalidAddressError(f"Invalid port in {address!r}") from e
        if parsed_port is not None and not 1 <= parsed_port <= 65535:
            raise InvalidAddressError(f"Invalid port in {address!r}")

        resolved_path = parts.path or path
        if not resolved_path.startswith("/"):
            resolved_path = f"/{resolved_path}"

        return cls(
            host=host,
            port=parsed_port if parsed_port is not None else port,
            path=resolved_path,
            secure=parts.scheme == "wss",
        )
