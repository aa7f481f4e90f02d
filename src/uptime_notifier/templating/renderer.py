"""Notification message renderer.

Expands a user-authored template against monitor and heartbeat state. The
steps run in a fixed order: time placeholders, then conditional blocks, then
plain tokens. Time and conditional markers must be resolved before the plain
token pass because they are not simple key/value tokens.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from uptime_notifier.errors import InvalidInputError
from uptime_notifier.templating.conditionals import resolve_conditionals
from uptime_notifier.templating.dictionary import build_dictionary
from uptime_notifier.templating.models import (
    HeartbeatInfo,
    HeartbeatStatus,
    MonitorInfo,
    RenderResult,
    TemplateContext,
)
from uptime_notifier.templating.substitution import DEFAULT_MISSING_VALUE, substitute
from uptime_notifier.templating.timezones import localize_times, parse_instant

logger = logging.getLogger(__name__)


class MessageRenderer:
    """Renders notification templates.

    Stateless apart from its settings, so one instance can be shared by all
    notifiers and used from several threads or tasks at once.
    """

    def __init__(self, missing_value: str = DEFAULT_MISSING_VALUE) -> None:
        """Initialize the renderer.

        Args:
            missing_value: Text substituted for absent values such as
                ``{{DOWN_COUNT}}`` when the heartbeat has none. Use
                ``"null"`` to reproduce the legacy output.
        """
        self.missing_value = missing_value

    def render(
        self,
        template: str,
        monitor: MonitorInfo | None = None,
        heartbeat: HeartbeatInfo | None = None,
    ) -> str:
        """Render a template.

        Args:
            template: Template text.
            monitor: Monitor the notification is about, if any.
            heartbeat: Heartbeat that triggered the notification, if any.

        Returns:
            The rendered message.

        Raises:
            InvalidInputError: If the heartbeat status is neither UP nor DOWN.
        """
        text = template
        logger.debug(f"Before variable expansion: {text}")

        if heartbeat is not None:
            status = HeartbeatStatus.coerce(heartbeat.status)

            instant = parse_instant(heartbeat.time)
            if instant is None:
                logger.warning(f"Unparseable heartbeat time {heartbeat.time!r}, skipping time zones")
            else:
                text = localize_times(text, instant)

            text = resolve_conditionals(text, status)

        dictionary = build_dictionary(monitor, heartbeat)
        text = substitute(text, dictionary, self.missing_value)

        logger.debug(f"After variable expansion: {text}")
        return text

    def try_render(
        self,
        template: str,
        monitor: MonitorInfo | None = None,
        heartbeat: HeartbeatInfo | None = None,
    ) -> RenderResult:
        """Render a template, returning invalid input as a result instead of raising."""
        try:
            return RenderResult(text=self.render(template, monitor, heartbeat))
        except InvalidInputError as e:
            logger.warning(f"Template not rendered: {e}")
            return RenderResult(error=e)

    def render_many(self, contexts: Iterable[TemplateContext]) -> list[RenderResult]:
        """Render independent templates.

        A context with invalid input yields an error result and does not
        affect the others.
        """
        return [self.try_render(ctx.template, ctx.monitor, ctx.heartbeat) for ctx in contexts]


_default_renderer = MessageRenderer()


def render(
    template: str,
    monitor: MonitorInfo | None = None,
    heartbeat: HeartbeatInfo | None = None,
) -> str:
    """Render a template with the default settings.

    See :meth:`MessageRenderer.render`.
    """
    return _default_renderer.render(template, monitor, heartbeat)
