"""Tests for MainWindow."""

import pytest
from PySide6.QtCore import Qt
from pytestqt.qtbot import QtBot

from zerictrl.models.event import ConnectionState
from zerictrl.ui.main_window import MainWindow


@pytest.fixture
def window(qtbot: QtBot) -> MainWindow:
    """Return a MainWindow registered with qtbot."""
    window = MainWindow(address="192.168.1.17")
    qtbot.addWidget(window)
    return window


class TestMainWindowBasics:
    """Test MainWindow creation and layout."""

    def test_creation(self, window: MainWindow) -> None:
        """Test that main window can be created."""
        assert window.windowTitle() == "ZeriCtrl"
        assert window.minimumWidth() == 420
        assert window.address == "192.168.1.17"

    def test_walk_defaults(self, window: MainWindow) -> None:
        """Test the walk form is pre-filled."""
        assert window.walk_values() == ("3", "700", "1")

    def test_custom_walk_defaults(self, qtbot: QtBot) -> None:
        """Test walk values passed to the constructor."""
        window = MainWindow(walk_defaults=("5", "400", "-1"))
        qtbot.addWidget(window)
        assert window.walk_values() == ("5", "400", "-1")
        assert window.address == ""

    def test_initial_state(self, window: MainWindow) -> None:
        """Test the window starts disconnected."""
        assert window._status_label.text() == "Not connected"
        assert not window._disconnect_button.isEnabled()


class TestMainWindowSignals:
    """Test the request signals."""

    def test_connect_button(self, qtbot: QtBot, window: MainWindow) -> None:
        """Test Connect emits the raw address text."""
        window._address_input.setText(" robot.local ")
        with qtbot.waitSignal(window.connect_requested, timeout=1000) as blocker:
            qtbot.mouseClick(window._connect_button, Qt.MouseButton.LeftButton)
        assert blocker.args == [" robot.local "]

    def test_return_in_address_connects(self, qtbot: QtBot, window: MainWindow) -> None:
        """Test pressing Return in the address field connects."""
        with qtbot.waitSignal(window.connect_requested, timeout=1000) as blocker:
            qtbot.keyClick(window._address_input, Qt.Key.Key_Return)
        assert blocker.args == ["192.168.1.17"]

    def test_disconnect_button(self, qtbot: QtBot, window: MainWindow) -> None:
        """Test Disconnect emits disconnect_requested."""
        window.set_connection_state(ConnectionState.OPEN)
        with qtbot.waitSignal(window.disconnect_requested, timeout=1000):
            qtbot.mouseClick(window._disconnect_button, Qt.MouseButton.LeftButton)

    def test_walk_button_passes_raw_text(self, qtbot: QtBot, window: MainWindow) -> None:
        """Test Walk emits field text without validating it."""
        window._steps_input.setText("abc")
        with qtbot.waitSignal(window.walk_requested, timeout=1000) as blocker:
            qtbot.mouseClick(window._walk_button, Qt.MouseButton.LeftButton)
        assert blocker.args == ["abc", "700", "1"]

    def test_walk_enabled_while_disconnected(self, window: MainWindow) -> None:
        """Test Walk stays clickable so the not-connected error is logged."""
        assert window._walk_button.isEnabled()

    @pytest.mark.parametrize(("button", "action"), [("_sit_button", "sit"), ("_home_button", "home")])
    def test_action_buttons(
        self, qtbot: QtBot, window: MainWindow, button: str, action: str
    ) -> None:
        """Test Sit and Home emit their action names."""
        with qtbot.waitSignal(window.action_requested, timeout=1000) as blocker:
            qtbot.mouseClick(getattr(window, button), Qt.MouseButton.LeftButton)
        assert blocker.args == [action]

    @pytest.mark.parametrize(
        ("button", "action", "third", "value"),
        [
            ("_turn_button", "turn", "direction", "1"),
            ("_swing_button", "swing", "amount", "30"),
            ("_shake_tail_button", "shake_tail", "amount", "30"),
        ],
    )
    def test_move_buttons(
        self, qtbot: QtBot, window: MainWindow, button: str, action: str, third: str, value: str
    ) -> None:
        """Test Turn, Swing and Shake tail emit their action and field text."""
        with qtbot.waitSignal(window.move_requested, timeout=1000) as blocker:
            qtbot.mouseClick(getattr(window, button), Qt.MouseButton.LeftButton)
        assert blocker.args == [action, {"steps": "3", "speed": "700", third: value}]

    def test_sequence_button(self, qtbot: QtBot, window: MainWindow) -> None:
        """Test Run emits the raw sequence text."""
        window._sequence_input.setText("ll:90,rl:90")
        with qtbot.waitSignal(window.sequence_requested, timeout=1000) as blocker:
            qtbot.mouseClick(window._sequence_button, Qt.MouseButton.LeftButton)
        assert blocker.args == ["ll:90,rl:90"]

    def test_status_button(self, qtbot: QtBot, window: MainWindow) -> None:
        """Test Status emits status_requested."""
        with qtbot.waitSignal(window.status_requested, timeout=1000):
            qtbot.mouseClick(window._status_button, Qt.MouseButton.LeftButton)

    def test_close_emits_closing(self, qtbot: QtBot, window: MainWindow) -> None:
        """Test closing the window emits closing."""
        window.show()
        with qtbot.waitSignal(window.closing, timeout=1000):
            window.close()


class TestMainWindowState:
    """Test connection state display and log."""

    @pytest.mark.parametrize(
        ("state", "text", "can_disconnect"),
        [
            (ConnectionState.IDLE, "Not connected", False),
            (ConnectionState.CONNECTING, "Connecting...", True),
            (ConnectionState.OPEN, "Connected", True),
            (ConnectionState.CLOSED, "Disconnected", False),
            (ConnectionState.FAILED, "Connection failed", False),
        ],
    )
    def test_set_connection_state(
        self, window: MainWindow, state: ConnectionState, text: str, can_disconnect: bool
    ) -> None:
        """Test status text and Disconnect availability per state."""
        window.set_connection_state(state)
        assert window._status_label.text() == text
        assert window._disconnect_button.isEnabled() is can_disconnect

    def test_log_append_order(self, window: MainWindow) -> None:
        """Test log lines are kept in order."""
        assert window.log_lines() == []
        window.append_log("first")
        window.append_log("second")
        assert window.log_lines() == ["first", "second"]
