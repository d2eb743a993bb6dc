"""
User notification channel.

The core only decides *what* to tell the user; presentation layers decide
how to show it by providing a ``BaseNotifier`` implementation.
"""

import logging
from abc import ABC, abstractmethod

from songscout.core.exceptions import SongScoutError
from songscout.core.models import Notification, Severity

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = Notification(
    title="Error!",
    description="Unexpected error occurred.",
    severity=Severity.destructive,
)


def notification_for(exc: SongScoutError) -> Notification:
    """Build a destructive notification from a terminal domain error."""
    return Notification(title=exc.title, description=exc.detail, severity=Severity.destructive)


class BaseNotifier(ABC):
    """Interface that every notification sink must implement."""

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        """Show ``notification`` to the user."""


class LoggingNotifier(BaseNotifier):
    """Writes notifications to the log (default when no UI is attached)."""

    def notify(self, notification: Notification) -> None:
        level = logging.ERROR if notification.severity == Severity.destructive else logging.INFO
        logger.log(level, "%s %s", notification.title, notification.description)
