"""Notification sinks for user-facing change notices."""

from __future__ import annotations

import logging
import sys
from typing import Protocol, TextIO

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, message: str, duration_ms: int) -> None:
        ...


class PrintNotifier:
    """Writes notices to a stream (stdout by default)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream

    def notify(self, message: str, duration_ms: int) -> None:
        stream = self.stream if self.stream is not None else sys.stdout
        print(message, file=stream, flush=True)


class LogNotifier:
    """Routes notices to the ``ksu.notice`` logger at INFO."""

    def notify(self, message: str, duration_ms: int) -> None:
        logger.info("notice: %s", message)
