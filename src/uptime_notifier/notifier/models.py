"""Data models for the notifier module."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uptime_notifier.errors import NotificationError
    from uptime_notifier.templating.models import HeartbeatInfo, MonitorInfo

SENT_SUCCESSFULLY = "Sent Successfully."


@dataclass(frozen=True)
class NotificationContext:
    """Everything a channel needs to compose one notification.

    Attributes:
        msg: Generic message produced by the monitoring tool.
        monitor: Monitor details, for up/down notifications only.
        heartbeat: Heartbeat details, for up/down notifications only.
    """

    msg: str
    monitor: MonitorInfo | None = None
    heartbeat: HeartbeatInfo | None = None


@dataclass(frozen=True)
class NotifyResult:
    """Result of sending one notification through one channel."""

    channel: str
    message: str | None = None
    error: NotificationError | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def ok(self) -> bool:
        """Return True if the notification was delivered."""
        return self.error is None

    @classmethod
    def success(cls, channel: str, message: str = SENT_SUCCESSFULLY) -> NotifyResult:
        """Create a successful result."""
        return cls(channel=channel, message=message)

    @classmethod
    def failure(cls, channel: str, error: NotificationError) -> NotifyResult:
        """Create a failed result."""
        return cls(channel=channel, error=error)
