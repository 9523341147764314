"""Exception types raised by the connection layer."""


class InvalidAddressError(ValueError):
    """The operator-supplied robot address cannot be used."""


class TransportError(ConnectionError):
    """The WebSocket could not be opened, or failed while in use."""
