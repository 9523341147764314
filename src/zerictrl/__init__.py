"""ZeriCtrl - remote control for Zeri robots over WebSocket JSON-RPC."""

__version__ = "0.1.0"
