"""Notification and navigation adapters.

The web UI renders flashes and follows redirects itself, so the server
and CLI only need to record them (for the response) or log them.
"""

import logging
from typing import Optional

from ..domain.entities import FlashLevel, Notification
from ..domain.ports import INavigator, INotifier

logger = logging.getLogger(__name__)


class RecordingNotifier(INotifier):
    """Collect flashes so they can be returned to the caller."""

    def __init__(self):
        self.notifications: list[Notification] = []

    def render_flash(self, level: FlashLevel, message: str) -> None:
        logger.info(f"Flash [{level.value}]: {message}")
        self.notifications.append(Notification(level=level, message=message))


class LoggingNotifier(INotifier):
    """Send flashes to a logger."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def render_flash(self, level: FlashLevel, message: str) -> None:
        if level == FlashLevel.ERROR:
            self.log.error(message)
        else:
            self.log.info(message)


class RecordingNavigator(INavigator):
    """Remember the navigation target instead of following it."""

    def __init__(self):
        self.history: list[str] = []

    @property
    def current_url(self) -> Optional[str]:
        return self.history[-1] if self.history else None

    def push(self, url: str) -> None:
        logger.info(f"Navigating to {url}")
        self.history.append(url)
