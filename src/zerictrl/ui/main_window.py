"""Main application window.

Layout:
+--------------------------------------+
| Robot IP [__________] Connect  Disc. |
| Status                               |
+--------------------------------------+
| Steps [__] Speed [__] Direction [__] |
| Amount [__]                          |
| Walk  Turn  Swing  Shake tail        |
| Sit   Home  Status                   |
| Sequence [______________]  Run       |
+--------------------------------------+
| Log (append-only)                    |
+--------------------------------------+

The window does no validation of its own: it hands the raw text of its
fields to the worker and prints whatever comes back.
"""

import logging

from PySide6.QtCore import Signal, Slot
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from zerictrl.core.config import (
    DEFAULT_AMOUNT,
    DEFAULT_WALK_DIRECTION,
    DEFAULT_WALK_SPEED,
    DEFAULT_WALK_STEPS,
)
from zerictrl.models.event import ConnectionState

logger = logging.getLogger(__name__)

_STATE_TEXT = {
    ConnectionState.IDLE: "Not connected",
    ConnectionState.CONNECTING: "Connecting...",
    ConnectionState.OPEN: "Connected",
    ConnectionState.CLOSED: "Disconnected",
    ConnectionState.FAILED: "Connection failed",
}

_STATE_COLOR = {
    ConnectionState.IDLE: "#808080",
    ConnectionState.CONNECTING: "#c08000",
    ConnectionState.OPEN: "#2e8b57",
    ConnectionState.CLOSED: "#808080",
    ConnectionState.FAILED: "#c0392b",
}

# Cap for the log view; older lines scroll out
_MAX_LOG_LINES = 1000


class MainWindow(QMainWindow):
    """Robot control window: connect form, walk form and log view.

    Example:
        window = MainWindow(address="192.168.1.17")
        window.connect_requested.connect(worker.connect_to)
        window.walk_requested.connect(worker.send_walk)
        window.show()
    """

    connect_requested = Signal(str)  # address text
    disconnect_requested = Signal()
    walk_requested = Signal(str, str, str)  # steps, speed, direction text
    move_requested = Signal(str, object)  # action name, dict of field text
    action_requested = Signal(str)  # argument-less action name
    status_requested = Signal()
    sequence_requested = Signal(str)  # servo sequence text
    closing = Signal()

    def __init__(
        self,
        address: str = "",
        walk_defaults: tuple[str, str, str] = (
            DEFAULT_WALK_STEPS,
            DEFAULT_WALK_SPEED,
            DEFAULT_WALK_DIRECTION,
        ),
    ) -> None:
        """Initialize the main window.

        Args:
            address: Pre-filled robot address.
            walk_defaults: Pre-filled (steps, speed, direction).
        """
        super().__init__()
        self._setup_ui(address, walk_defaults)
        self._connect_signals()
        self.set_connection_state(ConnectionState.IDLE)

    def _setup_ui(self, address: str, walk_defaults: tuple[str, str, str]) -> None:
        """Set up the user interface."""
        self.setWindowTitle("ZeriCtrl")
        self.setMinimumSize(420, 520)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout(central_widget)

        # Connection
        connection_box = QGroupBox("Robot")
        connection_layout = QVBoxLayout(connection_box)
        address_row = QHBoxLayout()
        self._address_input = QLineEdit(address)
        self._address_input.setPlaceholderText("Robot IP (e.g. 192.168.1.17)")
        self._connect_button = QPushButton("Connect")
        self._disconnect_button = QPushButton("Disconnect")
        address_row.addWidget(self._address_input, 1)
        address_row.addWidget(self._connect_button)
        address_row.addWidget(self._disconnect_button)
        connection_layout.addLayout(address_row)
        self._status_label = QLabel()
        connection_layout.addWidget(self._status_label)
        layout.addWidget(connection_box)

        # Walk parameters
        steps, speed, direction = walk_defaults
        walk_box = QGroupBox("Walk")
        walk_layout = QVBoxLayout(walk_box)
        form = QFormLayout()
        self._steps_input = QLineEdit(steps)
        self._speed_input = QLineEdit(speed)
        self._direction_input = QLineEdit(direction)
        self._amount_input = QLineEdit(DEFAULT_AMOUNT)
        form.addRow("Steps:", self._steps_input)
        form.addRow("Speed:", self._speed_input)
        form.addRow("Direction (1 = forward, -1 = back):", self._direction_input)
        form.addRow("Amount (swing, shake tail):", self._amount_input)
        walk_layout.addLayout(form)

        move_row = QHBoxLayout()
        self._walk_button = QPushButton("Walk")
        self._turn_button = QPushButton("Turn")
        self._swing_button = QPushButton("Swing")
        self._shake_tail_button = QPushButton("Shake tail")
        for button in (self._walk_button, self._turn_button, self._swing_button, self._shake_tail_button):
            move_row.addWidget(button)
        walk_layout.addLayout(move_row)

        button_row = QHBoxLayout()
        self._sit_button = QPushButton("Sit")
        self._home_button = QPushButton("Home")
        self._status_button = QPushButton("Status")
        for button in (self._sit_button, self._home_button, self._status_button):
            button_row.addWidget(button)
        walk_layout.addLayout(button_row)

        sequence_row = QHBoxLayout()
        self._sequence_input = QLineEdit()
        self._sequence_input.setPlaceholderText("Servo sequence (ll/rl/bl/br/ta)")
        self._sequence_button = QPushButton("Run")
        sequence_row.addWidget(self._sequence_input, 1)
        sequence_row.addWidget(self._sequence_button)
        walk_layout.addLayout(sequence_row)
        layout.addWidget(walk_box)

        # Log
        self._log_view = QPlainTextEdit()
        self._log_view.setReadOnly(True)
        self._log_view.setMaximumBlockCount(_MAX_LOG_LINES)
        layout.addWidget(self._log_view, 1)

    def _connect_signals(self) -> None:
        """Wire widgets to the window's request signals."""
        self._connect_button.clicked.connect(self._on_connect_clicked)
        self._address_input.returnPressed.connect(self._on_connect_clicked)
        self._disconnect_button.clicked.connect(lambda: self.disconnect_requested.emit())
        self._walk_button.clicked.connect(self._on_walk_clicked)
        self._turn_button.clicked.connect(lambda: self._emit_move("turn", "direction"))
        self._swing_button.clicked.connect(lambda: self._emit_move("swing", "amount"))
        self._shake_tail_button.clicked.connect(lambda: self._emit_move("shake_tail", "amount"))
        self._sit_button.clicked.connect(lambda: self.action_requested.emit("sit"))
        self._home_button.clicked.connect(lambda: self.action_requested.emit("home"))
        self._status_button.clicked.connect(lambda: self.status_requested.emit())
        self._sequence_button.clicked.connect(self._on_sequence_clicked)
        self._sequence_input.returnPressed.connect(self._on_sequence_clicked)

    @property
    def address(self) -> str:
        """Return the address field text."""
        return self._address_input.text()

    def walk_values(self) -> tuple[str, str, str]:
        """Return the raw (steps, speed, direction) field texts."""
        return (
            self._steps_input.text(),
            self._speed_input.text(),
            self._direction_input.text(),
        )

    def log_lines(self) -> list[str]:
        """Return the lines currently in the log view."""
        text = self._log_view.toPlainText()
        return text.splitlines() if text else []

    @Slot(str)
    def append_log(self, line: str) -> None:
        """Append a line to the log view."""
        self._log_view.appendPlainText(line)

    def set_connection_state(self, state: ConnectionState) -> None:
        """Update the status indicator and button states.

        Args:
            state: Current connection state.
        """
        self._status_label.setText(_STATE_TEXT[state])
        self._status_label.setStyleSheet(f"color: {_STATE_COLOR[state]}; font-weight: bold;")
        self._disconnect_button.setEnabled(
            state in (ConnectionState.CONNECTING, ConnectionState.OPEN)
        )

    @Slot()
    def _on_connect_clicked(self) -> None:
        self.connect_requested.emit(self._address_input.text())

    @Slot()
    def _on_walk_clicked(self) -> None:
        self.walk_requested.emit(*self.walk_values())

    def _emit_move(self, action: str, third: str) -> None:
        """Emit a move with steps, speed and either direction or amount."""
        third_input = self._direction_input if third == "direction" else self._amount_input
        fields = {
            "steps": self._steps_input.text(),
            "speed": self._speed_input.text(),
            third: third_input.text(),
        }
        self.move_requested.emit(action, fields)

    @Slot()
    def _on_sequence_clicked(self) -> None:
        self.sequence_requested.emit(self._sequence_input.text())

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        """Notify listeners before the window closes."""
        self.closing.emit()
        super().closeEvent(event)
