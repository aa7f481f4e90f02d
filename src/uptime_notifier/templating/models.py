"""Data models for the templating module."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any

from uptime_notifier.errors import InvalidInputError

# Placeholder text -> value. Built fresh for every render.
TokenDictionary = dict[str, object]


class HeartbeatStatus(IntEnum):
    """Result of a single monitoring check.

    The numeric values match the status codes stored by the monitoring tool.
    """

    DOWN = 0
    UP = 1

    @classmethod
    def coerce(cls, value: object) -> HeartbeatStatus:
        """Convert a raw status into a HeartbeatStatus.

        Accepts the enum itself, the integers 0 and 1, and the strings
        ``"UP"`` / ``"DOWN"`` in any case.

        Raises:
            InvalidInputError: If the value is not one of the two statuses.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidInputError(f"Invalid heartbeat status: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise InvalidInputError(f"Invalid heartbeat status: {value!r}") from None
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise InvalidInputError(f"Invalid heartbeat status: {value!r}") from None
        raise InvalidInputError(f"Invalid heartbeat status: {value!r}")


@dataclass(frozen=True)
class MonitorInfo:
    """Snapshot of a monitor's configuration at render time."""

    id: int | str | None = None
    name: str | None = None
    type: str | None = None
    url: str | None = None
    hostname: str | None = None
    port: int | str | None = None
    interval: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MonitorInfo:
        """Create a MonitorInfo from a monitor JSON object."""
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            type=data.get("type"),
            url=data.get("url"),
            hostname=data.get("hostname"),
            port=data.get("port"),
            interval=data.get("interval"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the monitor JSON shape."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "url": self.url,
            "hostname": self.hostname,
            "port": self.port,
            "interval": self.interval,
        }


@dataclass(frozen=True)
class HeartbeatInfo:
    """Snapshot of one monitoring check result.

    Attributes:
        time: UTC timestamp of the check, as a string or datetime. Other
            values from JSON are kept as given and only shown as text.
        status: Check status. Validated when rendering, so raw values from
            JSON are kept as given.
        msg: Message produced by the check.
        down_count: Consecutive down count, if tracked.
        ping: Response time in milliseconds.
        duration: Seconds since the previous heartbeat.
        important: Whether the status changed with this heartbeat.
    """

    time: str | datetime
    status: HeartbeatStatus | int | str
    msg: str | None = None
    down_count: int | None = None
    ping: float | None = None
    duration: float | None = None
    important: bool | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HeartbeatInfo:
        """Create a HeartbeatInfo from a heartbeat JSON object."""
        return cls(
            time=data["time"],
            status=data["status"],
            msg=data.get("msg"),
            down_count=data.get("downCount", data.get("down_count")),
            ping=data.get("ping"),
            duration=data.get("duration"),
            important=data.get("important"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the heartbeat JSON shape."""
        return {
            "time": self.time.isoformat() if isinstance(self.time, datetime) else self.time,
            "status": int(self.status) if isinstance(self.status, HeartbeatStatus) else self.status,
            "msg": self.msg,
            "downCount": self.down_count,
            "ping": self.ping,
            "duration": self.duration,
            "important": self.important,
        }


@dataclass(frozen=True)
class TemplateContext:
    """A template paired with the optional state it is rendered against."""

    template: str
    monitor: MonitorInfo | None = None
    heartbeat: HeartbeatInfo | None = None


@dataclass(frozen=True)
class RenderResult:
    """Outcome of rendering one template without raising."""

    text: str | None = None
    error: InvalidInputError | None = None

    @property
    def ok(self) -> bool:
        """Return True if the template rendered."""
        return self.error is None
