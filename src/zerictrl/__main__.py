"""Main entry point for the ZeriCtrl application."""

import argparse
import logging
import sys

from PySide6.QtWidgets import QApplication

from zerictrl.api.protocol import STATUS_TOOL
from zerictrl.core.config import ConfigManager
from zerictrl.core.dispatcher import DispatchResult
from zerictrl.core.events import format_event
from zerictrl.core.worker import RobotWorker
from zerictrl.models.endpoint import Endpoint
from zerictrl.models.event import ConnectionEvent, EventKind
from zerictrl.ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments without the program name.

    Returns:
        Parsed namespace with address, port and debug.
    """
    parser = argparse.ArgumentParser(
        prog="zerictrl",
        description="ZeriCtrl - remote control for Zeri robots",
    )
    parser.add_argument(
        "address", nargs="?", default=None, help="robot IP or hostname (connects on start)",
    )
    parser.add_argument(
        "--port", type=int, default=None, help="WebSocket port (default: saved setting or 8080)",
    )
    parser.add_argument(
        "--debug", action="store_true", help="enable debug logging",
    )
    return parser.parse_args(argv)


def format_result(result: DispatchResult) -> str:
    """Render a dispatch outcome as a log line."""
    if result.ok and result.request is not None:
        return f"Sent request {result.request.id}: {result.request.to_json()}"
    return f"Command not sent: {result.error}"


def remembered_address(endpoint: Endpoint, port: int, path: str) -> str:
    """Return the shortest address that reconnects to endpoint.

    Args:
        endpoint: Endpoint that opened.
        port: Port applied to bare hosts.
        path: Path applied to bare hosts.

    Returns:
        The bare host when the defaults reach it, otherwise the full URL.
    """
    if endpoint.secure or ":" in endpoint.host:
        return endpoint.url
    if endpoint.port != port or endpoint.path != path:
        return endpoint.url
    return endpoint.host


def main() -> int:
    """Run the ZeriCtrl application.

    Returns:
        Exit code (0 for success).
    """
    QApplication.setApplicationName("ZeriCtrl")
    QApplication.setOrganizationName("ZeriCtrl")

    app = QApplication(sys.argv)
    args = parse_args(app.arguments()[1:])

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = ConfigManager()
    if args.port is not None:
        config.set_port(args.port)

    address: str = args.address or config.get_last_address()
    window = MainWindow(address=address, walk_defaults=config.get_walk_defaults())
    worker = RobotWorker(port=config.get_port(), path=config.get_path(), timeout=config.get_timeout())

    def on_event(event: ConnectionEvent) -> None:
        window.append_log(format_event(event))
        window.set_connection_state(event.state)
        if event.kind is EventKind.OPENED and event.endpoint is not None:
            config.set_last_address(
                remembered_address(event.endpoint, config.get_port(), config.get_path())
            )

    def on_dispatched(result: DispatchResult) -> None:
        window.append_log(format_result(result))

    def on_error(error: object) -> None:
        logger.error("Worker error: %s", error)
        window.append_log(f"Error: {error}")

    def on_walk(steps: str, speed: str, direction: str) -> None:
        config.set_walk_defaults(steps, speed, direction)
        worker.send_walk(steps, speed, direction)

    def on_closing() -> None:
        worker.stop()
        worker.wait(2000)
        config.sync()

    worker.event_received.connect(on_event)
    worker.command_dispatched.connect(on_dispatched)
    worker.error_occurred.connect(on_error)
    window.connect_requested.connect(worker.connect_to)
    window.disconnect_requested.connect(worker.disconnect_from)
    window.walk_requested.connect(on_walk)
    window.action_requested.connect(lambda action: worker.send_action(action))
    window.move_requested.connect(lambda action, fields: worker.send_action(action, **fields))
    window.status_requested.connect(lambda: worker.call_tool(STATUS_TOOL))
    window.sequence_requested.connect(worker.send_servo_sequence)
    window.closing.connect(on_closing)

    if args.address:
        worker.loop_started.connect(lambda: worker.connect_to(args.address))

    worker.start()
    window.show()
    logger.info("ZeriCtrl started")
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
