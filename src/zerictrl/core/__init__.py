"""Core application logic.

Modules:
    events: EventStream, the ordered log of connection events.
    dispatcher: CommandDispatcher, validates and sends robot commands.
    config: ConfigManager, QSettings wrapper for preferences.
    worker: RobotWorker, QThread running the asyncio loop for the UI.
"""
