"""Token dictionary assembly from monitor and heartbeat context."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from uptime_notifier.templating.models import HeartbeatStatus, TokenDictionary

if TYPE_CHECKING:
    from uptime_notifier.templating.models import HeartbeatInfo, MonitorInfo

# Monitor types whose target is a URL rather than a hostname
HTTP_MONITOR_TYPES = frozenset({"http", "keyword"})

STATUS_DOWN_TEXT = "🔴 Down"
STATUS_UP_TEXT = "✅ Up"
NO_NAME_TEXT = "(no name)"

# Values used when rendering without context (previews and test messages)
DEFAULT_TOKENS: TokenDictionary = {
    "{{NAME}}": "Test",
    "{{HOSTNAME_OR_URL}}": "testing.hostname",
    "{{STATUS}}": "⚠️ Test",
}


def _or_empty(value: object) -> object:
    return "" if value is None else value


def format_time_utc(time: object) -> object:
    """Get the heartbeat time as ``{{TIME_UTC}}`` shows it.

    Strings are kept as given and datetimes are ISO formatted. None stays None
    so it renders as the missing-value marker. Anything else is shown as text.
    """
    if time is None or isinstance(time, str):
        return time
    if isinstance(time, datetime):
        return time.isoformat()
    return str(time)


def get_hostname_or_url(monitor: MonitorInfo) -> str:
    """Get the address a monitor checks: its URL for HTTP checks, else its hostname."""
    if monitor.type in HTTP_MONITOR_TYPES:
        return monitor.url or ""
    return monitor.hostname or ""


def monitor_tokens(monitor: MonitorInfo) -> TokenDictionary:
    """Build the tokens describing a monitor."""
    return {
        "{{ID}}": _or_empty(monitor.id),
        "{{NAME}}": monitor.name or NO_NAME_TEXT,
        "{{HOSTNAME_OR_URL}}": get_hostname_or_url(monitor),
        "{{HOSTNAME}}": _or_empty(monitor.hostname),
        "{{PORT}}": _or_empty(monitor.port),
        "{{URL}}": _or_empty(monitor.url),
        "{{TYPE}}": _or_empty(monitor.type),
        "{{INTERVAL}}": _or_empty(monitor.interval),
    }


def heartbeat_tokens(heartbeat: HeartbeatInfo) -> TokenDictionary:
    """Build the tokens describing a heartbeat.

    ``{{DOWN_COUNT}}`` stays None when absent so the substitution step can
    render it with the configured missing-value marker.
    """
    status = HeartbeatStatus.coerce(heartbeat.status)
    return {
        "{{STATUS}}": STATUS_DOWN_TEXT if status == HeartbeatStatus.DOWN else STATUS_UP_TEXT,
        "{{TIME_UTC}}": format_time_utc(heartbeat.time),
        "{{MSG}}": heartbeat.msg,
        "{{DOWN_COUNT}}": heartbeat.down_count,
        "{{PING}}": heartbeat.ping,
        "{{DURATION}}": heartbeat.duration if heartbeat.duration is not None else 0,
        "{{IMPORTANT}}": heartbeat.important,
    }


def build_dictionary(
    monitor: MonitorInfo | None = None,
    heartbeat: HeartbeatInfo | None = None,
) -> TokenDictionary:
    """Assemble the token dictionary for one render.

    Defaults are overridden by monitor tokens, which are overridden by
    heartbeat tokens.

    Args:
        monitor: Monitor the notification is about, if any.
        heartbeat: Heartbeat that triggered the notification, if any.

    Returns:
        A new mapping of placeholder text to value.
    """
    dictionary: TokenDictionary = dict(DEFAULT_TOKENS)

    if monitor is not None:
        dictionary.update(monitor_tokens(monitor))

    if heartbeat is not None:
        dictionary.update(heartbeat_tokens(heartbeat))

    return dictionary
