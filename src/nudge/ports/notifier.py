"""Notification delivery interface."""

from typing import Protocol

from nudge.core.notification import Notification


class Notifier(Protocol):
    """Interface for delivering a notification to the user."""

    async def send(self, notification: Notification) -> None:
        """Deliver a notification."""
        ...
