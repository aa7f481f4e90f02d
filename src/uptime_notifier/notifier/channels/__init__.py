"""Notification channel implementations."""

from uptime_notifier.notifier.channels.smtp import SmtpNotifier
from uptime_notifier.notifier.channels.webhook import WebhookNotifier

__all__ = [
    "SmtpNotifier",
    "WebhookNotifier",
]
