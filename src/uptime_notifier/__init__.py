"""Uptime Notifier - Notification message rendering and delivery for uptime monitors."""

__version__ = "0.1.0"
