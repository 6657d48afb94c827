"""
User-facing notification sinks.
"""
import logging
import sys
from typing import Optional, Protocol, TextIO

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Receives one success or failure message per user operation."""

    def info(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


class LoggingNotifier:
    """Forwards notifications to the log."""

    def info(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)


class ConsoleNotifier:
    """Prints notifications for command line use."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def info(self, message: str) -> None:
        print(f"✅ {message}", file=self.stream or sys.stdout)

    def error(self, message: str) -> None:
        print(f"❌ {message}", file=self.stream or sys.stderr)
