"""Tests for the command line entry point helpers."""

from zerictrl.__main__ import format_result, parse_args, remembered_address
from zerictrl.api.protocol import ACTION_TOOL, tool_call
from zerictrl.core.dispatcher import DispatchErrorKind, DispatchResult
from zerictrl.models.endpoint import Endpoint


class TestParseArgs:
    """Tests for parse_args()."""

    def test_defaults(self) -> None:
        """Test no arguments."""
        args = parse_args([])
        assert args.address is None
        assert args.port is None
        assert args.debug is False

    def test_all_arguments(self) -> None:
        """Test address, port and debug."""
        args = parse_args(["192.168.1.17", "--port", "8081", "--debug"])
        assert args.address == "192.168.1.17"
        assert args.port == 8081
        assert args.debug is True


class TestFormatResult:
    """Tests for format_result()."""

    def test_success(self) -> None:
        """Test a sent request is shown with its frame."""
        request = tool_call(ACTION_TOOL, {"action": "sit"}, request_id=4)
        line = format_result(DispatchResult.success(request))
        assert line == f"Sent request 4: {request.to_json()}"

    def test_failure(self) -> None:
        """Test a failure is shown with its kind."""
        result = DispatchResult.failure(
            DispatchErrorKind.NOT_READY, "Cannot send walk: not connected to robot"
        )
        assert format_result(result) == (
            "Command not sent: [not_ready] Cannot send walk: not connected to robot"
        )


class TestRememberedAddress:
    """Tests for remembered_address()."""

    def test_bare_host_for_defaults(self) -> None:
        """Test the host alone is saved when defaults reach it."""
        endpoint = Endpoint.parse("192.168.1.17")
        assert remembered_address(endpoint, 8080, "/ws") == "192.168.1.17"

    def test_url_for_other_port(self) -> None:
        """Test a non-default port keeps the full URL."""
        endpoint = Endpoint.parse("192.168.1.17:9000")
        assert remembered_address(endpoint, 8080, "/ws") == "ws://192.168.1.17:9000/ws"

    def test_url_for_secure(self) -> None:
        """Test wss endpoints keep their scheme."""
        endpoint = Endpoint.parse("wss://robot.local/ws")
        assert remembered_address(endpoint, 8080, "/ws") == endpoint.url

    def test_uses_connected_endpoint_not_typed_text(self) -> None:
        """Test the saved value comes from the endpoint that opened."""
        endpoint = Endpoint.parse("  10.0.0.5 ")
        assert remembered_address(endpoint, 8080, "/ws") == "10.0.0.5"
