"""Notifier layer - Delivery of rendered notifications."""

from uptime_notifier.notifier.base import Notifier
from uptime_notifier.notifier.channels.smtp import SmtpNotifier
from uptime_notifier.notifier.channels.webhook import WebhookNotifier
from uptime_notifier.notifier.models import NotificationContext, NotifyResult

__all__ = [
    "NotificationContext",
    "Notifier",
    "NotifyResult",
    "SmtpNotifier",
    "WebhookNotifier",
]
