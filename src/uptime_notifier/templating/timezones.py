"""Localized timestamp placeholders.

Expands ``{{TIME:<zone>}}`` placeholders into the heartbeat instant rendered
in the named IANA time zone, e.g. ``{{TIME:Europe/Berlin}}``.
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

TIME_PLACEHOLDER_RE = re.compile(r"\{\{TIME:([^}]+)\}\}")


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DD HH:MM:SS.mmm``."""
    return f"{moment:%Y-%m-%d %H:%M:%S}.{moment.microsecond // 1000:03d}"


def parse_instant(value: object) -> datetime | None:
    """Parse a heartbeat time into an aware UTC datetime.

    Naive values are taken to be UTC. Returns None when the value is not a
    string or datetime, cannot be parsed, or falls outside the datetime range
    once converted to UTC.
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str):
        try:
            moment = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    try:
        return moment.astimezone(UTC)
    except OverflowError:
        return None


def convert_to_zone(instant_utc: datetime, zone_name: str) -> str | None:
    """Render an instant in the named zone.

    Returns None if the zone is unknown or the instant cannot be represented
    in it, as happens at the edges of the datetime range.
    """
    try:
        zone = ZoneInfo(zone_name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return None
    try:
        return format_timestamp(instant_utc.astimezone(zone))
    except (OverflowError, ValueError):
        return None


def localize_times(text: str, instant_utc: datetime) -> str:
    """Replace every ``{{TIME:<zone>}}`` placeholder in text.

    Identical placeholders resolve identically. Placeholders naming an
    unknown zone are left unexpanded and do not stop the others.

    Args:
        text: Template text.
        instant_utc: Aware datetime to render.

    Returns:
        Text with recognized time placeholders expanded.
    """
    placeholders = {match.group(0): match.group(1) for match in TIME_PLACEHOLDER_RE.finditer(text)}

    for placeholder, zone_name in placeholders.items():
        localized = convert_to_zone(instant_utc, zone_name)
        if localized is None:
            logger.debug(f"Skipping time zone that cannot be rendered: {zone_name}")
            continue
        text = text.replace(placeholder, localized)

    return text
