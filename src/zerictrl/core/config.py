"""Configuration manager using QSettings for persistent storage."""

import logging
from typing import cast

from PySide6.QtCore import QSettings

from zerictrl.models.endpoint import DEFAULT_PATH, DEFAULT_PORT

logger = logging.getLogger(__name__)

# Connection
_KEY_LAST_ADDRESS = "connection/last_address"
_KEY_RECENT_ADDRESSES = "connection/recent_addresses"
_KEY_PORT = "connection/port"
_KEY_PATH = "connection/path"
_KEY_TIMEOUT = "connection/timeout"

# Walk form defaults
_KEY_WALK_STEPS = "walk/steps"
_KEY_WALK_SPEED = "walk/speed"
_KEY_WALK_DIRECTION = "walk/direction"

_MAX_RECENT_ADDRESSES = 5
_DEFAULT_TIMEOUT = 10

DEFAULT_WALK_STEPS = "3"
DEFAULT_WALK_SPEED = "700"
DEFAULT_WALK_DIRECTION = "1"
DEFAULT_AMOUNT = "30"


class ConfigManager:
    """Wrapper around QSettings for type-safe config access.

    QSettings stores config in platform-specific locations:
    - Windows: HKEY_CURRENT_USER\\Software\\ZeriCtrl\\ZeriCtrl
    - macOS: ~/Library/Preferences/com.ZeriCtrl.ZeriCtrl.plist
    - Linux: ~/.config/ZeriCtrl/ZeriCtrl.conf

    Example:
        config = ConfigManager()
        manager = ConnectionManager(port=config.get_port(), path=config.get_path())
    """

    def __init__(self, organization: str = "ZeriCtrl", application: str = "ZeriCtrl") -> None:
        """Initialize the config manager.

        Args:
            organization: Organization name for QSettings.
            application: Application name for QSettings.
        """
        self._settings = QSettings(organization, application)

    @property
    def settings(self) -> QSettings:
        """Return the underlying QSettings instance."""
        return self._settings

    # -- Connection settings ---------------------------------------------------

    def get_last_address(self) -> str:
        """Return the last robot address that connected successfully.

        Returns:
            Address string, or empty string if none saved.
        """
        value = self._settings.value(_KEY_LAST_ADDRESS, "", str)
        return str(value) if value else ""

    def set_last_address(self, address: str) -> None:
        """Remember a robot address and move it to the front of the recent list.

        Args:
            address: Address as typed by the operator.
        """
        address = address.strip()
        if not address:
            return
        self._settings.setValue(_KEY_LAST_ADDRESS, address)
        recent = [a for a in self.get_recent_addresses() if a != address]
        recent.insert(0, address)
        self._settings.setValue(_KEY_RECENT_ADDRESSES, recent[:_MAX_RECENT_ADDRESSES])

    def get_recent_addresses(self) -> list[str]:
        """Return recently used addresses, most recent first."""
        raw_data = self._settings.value(_KEY_RECENT_ADDRESSES, [], list)
        if not isinstance(raw_data, list):
            # A single stored entry may come back as a plain string
            return [str(raw_data)] if raw_data else []
        data = cast(list[object], raw_data)
        return [str(item) for item in data if item][:_MAX_RECENT_ADDRESSES]

    def get_port(self) -> int:
        """Return the robot WebSocket port.

        Returns:
            Port number (default 8080).
        """
        value = self._settings.value(_KEY_PORT, DEFAULT_PORT, int)
        return max(1, min(65535, int(value)))  # type: ignore[arg-type]

    def set_port(self, port: int) -> None:
        """Set the robot WebSocket port.

        Args:
            port: Port number (1-65535).
        """
        self._settings.setValue(_KEY_PORT, max(1, min(65535, port)))

    def get_path(self) -> str:
        """Return the WebSocket path (default "/ws")."""
        value = self._settings.value(_KEY_PATH, DEFAULT_PATH, str)
        path = str(value) if value else DEFAULT_PATH
        return path if path.startswith("/") else f"/{path}"

    def set_path(self, path: str) -> None:
        """Set the WebSocket path."""
        self._settings.setValue(_KEY_PATH, path)

    def get_timeout(self) -> int:
        """Return the connect timeout in seconds.

        Returns:
            Timeout in seconds (default 10).
        """
        value = self._settings.value(_KEY_TIMEOUT, _DEFAULT_TIMEOUT, int)
        return max(1, min(60, int(value)))  # type: ignore[arg-type]

    def set_timeout(self, seconds: int) -> None:
        """Set the connect timeout.

        Args:
            seconds: Timeout in seconds (1-60).
        """
        self._settings.setValue(_KEY_TIMEOUT, max(1, min(60, seconds)))

    # -- Walk form defaults ----------------------------------------------------

    def get_walk_defaults(self) -> tuple[str, str, str]:
        """Return the pre-filled (steps, speed, direction) form values."""
        steps = self._settings.value(_KEY_WALK_STEPS, DEFAULT_WALK_STEPS, str)
        speed = self._settings.value(_KEY_WALK_SPEED, DEFAULT_WALK_SPEED, str)
        direction = self._settings.value(_KEY_WALK_DIRECTION, DEFAULT_WALK_DIRECTION, str)
        return (
            str(steps) if steps else DEFAULT_WALK_STEPS,
            str(speed) if speed else DEFAULT_WALK_SPEED,
            str(direction) if direction else DEFAULT_WALK_DIRECTION,
        )

    def set_walk_defaults(self, steps: str, speed: str, direction: str) -> None:
        """Remember the walk form values for the next start.

        Values are stored as typed; they are validated when sent.
        """
        self._settings.setValue(_KEY_WALK_STEPS, steps)
        self._settings.setValue(_KEY_WALK_SPEED, speed)
        self._settings.setValue(_KEY_WALK_DIRECTION, direction)

    # -- General settings ------------------------------------------------------

    def clear(self) -> None:
        """Clear all settings (useful for testing or reset)."""
        self._settings.clear()

    def sync(self) -> None:
        """Force settings to be written to disk."""
        self._settings.sync()
