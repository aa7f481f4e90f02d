"""Notifier protocol implemented by every delivery channel."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from uptime_notifier.notifier.models import NotificationContext, NotifyResult


class Notifier(Protocol):
    """Protocol for notification delivery channels."""

    name: str

    async def send(self, context: NotificationContext) -> NotifyResult:
        """Send one notification. Failures are returned, never raised."""
        ...
