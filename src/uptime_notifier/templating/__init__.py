"""Templating layer - Notification message rendering."""

from uptime_notifier.templating.conditionals import resolve_conditionals
from uptime_notifier.templating.dictionary import build_dictionary
from uptime_notifier.templating.models import (
    HeartbeatInfo,
    HeartbeatStatus,
    MonitorInfo,
    RenderResult,
    TemplateContext,
    TokenDictionary,
)
from uptime_notifier.templating.renderer import MessageRenderer, render
from uptime_notifier.templating.substitution import stringify_value, substitute
from uptime_notifier.templating.timezones import localize_times, parse_instant

__all__ = [
    "HeartbeatInfo",
    "HeartbeatStatus",
    "MessageRenderer",
    "MonitorInfo",
    "RenderResult",
    "TemplateContext",
    "TokenDictionary",
    "build_dictionary",
    "localize_times",
    "parse_instant",
    "render",
    "resolve_conditionals",
    "stringify_value",
    "substitute",
]
