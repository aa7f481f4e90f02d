"""Error types shared by the templating engine and the notifiers.

Rendering raises :class:`InvalidInputError` only when a caller breaks the
input contract. Delivery problems are never raised: channels return a
:class:`NotificationError` value so that one failing notification cannot take
down a batch of independent ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class InvalidInputError(ValueError):
    """Raised when a render is requested with input outside its contract."""


class ErrorKind(str, Enum):
    """Category of a notification failure."""

    TRANSPORT = "transport"
    INVALID_INPUT = "invalid_input"
    CONFIGURATION = "configuration"


@dataclass(frozen=True)
class NotificationError:
    """A failed notification, returned rather than raised.

    Attributes:
        kind: Failure category.
        message: Human-readable description.
        upstream: Payload returned by the remote side, if any.
    """

    kind: ErrorKind
    message: str
    upstream: Any = None

    def __str__(self) -> str:
        return self.message
