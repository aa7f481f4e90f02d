"""Generic JSON webhook channel implementation."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import httpx

from uptime_notifier.errors import ErrorKind, InvalidInputError, NotificationError
from uptime_notifier.notifier.models import NotifyResult
from uptime_notifier.templating.models import HeartbeatStatus
from uptime_notifier.templating.renderer import MessageRenderer

if TYPE_CHECKING:
    from uptime_notifier.config import WebhookSettings
    from uptime_notifier.notifier.models import NotificationContext

logger = logging.getLogger(__name__)


def decode_response(response: httpx.Response) -> Any:
    """Get a response payload as JSON, falling back to text."""
    try:
        return response.json()
    except ValueError:
        return response.text


def format_upstream_error(error: object, data: Any = None) -> str:
    """Describe a failed request, including the payload the server returned."""
    msg = f"Error: {error} "
    if data:
        msg += data if isinstance(data, str) else json.dumps(data, default=str)
    return msg


class WebhookNotifier:
    """Webhook channel posting notifications as JSON.

    The payload carries the message along with the raw monitor and heartbeat
    objects, so receivers can build their own presentation.
    """

    def __init__(
        self,
        url: str,
        *,
        body_template: str | None = None,
        renderer: MessageRenderer | None = None,
        timeout: float = 10.0,
    ) -> None:
        """Initialize webhook channel.

        Args:
            url: Endpoint receiving the POST requests.
            body_template: Template rendered into the ``msg`` field. The
                generic message is sent when unset.
            renderer: Renderer for the body template.
            timeout: HTTP request timeout in seconds.
        """
        self.url = url
        self.body_template = body_template
        self.renderer = renderer or MessageRenderer()
        self.timeout = timeout
        self.name = "webhook"

    @classmethod
    def from_settings(
        cls, settings: WebhookSettings, renderer: MessageRenderer | None = None
    ) -> WebhookNotifier:
        """Create a channel from webhook settings."""
        return cls(
            url=settings.url or "",
            body_template=settings.body_template,
            renderer=renderer,
            timeout=settings.timeout,
        )

    def build_payload(self, context: NotificationContext) -> dict[str, Any]:
        """Build the JSON payload for a notification.

        Raises:
            InvalidInputError: If the heartbeat status is neither UP nor DOWN.
        """
        if context.heartbeat is not None:
            HeartbeatStatus.coerce(context.heartbeat.status)

        msg = context.msg
        template = (self.body_template or "").strip()
        if template:
            msg = self.renderer.render(template, context.monitor, context.heartbeat)

        return {
            "heartbeat": context.heartbeat.to_dict() if context.heartbeat else None,
            "monitor": context.monitor.to_dict() if context.monitor else None,
            "msg": msg,
        }

    async def send(self, context: NotificationContext) -> NotifyResult:
        """Send a notification to the webhook.

        Args:
            context: Message and optional monitor/heartbeat state.

        Returns:
            NotifyResult describing the outcome.
        """
        if not self.url:
            return NotifyResult.failure(
                self.name, NotificationError(ErrorKind.CONFIGURATION, "Webhook URL is required")
            )

        try:
            payload = self.build_payload(context)
        except InvalidInputError as e:
            logger.error(f"Webhook message not rendered: {e}")
            return NotifyResult.failure(
                self.name, NotificationError(ErrorKind.INVALID_INPUT, str(e))
            )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.url, json=payload)
        except httpx.TimeoutException as e:
            logger.warning(f"Webhook timeout: {e}")
            return NotifyResult.failure(
                self.name, NotificationError(ErrorKind.TRANSPORT, format_upstream_error(e))
            )
        except httpx.HTTPError as e:
            logger.error(f"Webhook error: {e}")
            return NotifyResult.failure(
                self.name, NotificationError(ErrorKind.TRANSPORT, format_upstream_error(e))
            )

        if 200 <= response.status_code < 300:
            logger.info("Webhook notification delivered successfully")
            return NotifyResult.success(self.name)

        data = decode_response(response)
        logger.error(f"Webhook failed: {response.status_code} {response.text}")
        return NotifyResult.failure(
            self.name,
            NotificationError(
                ErrorKind.TRANSPORT,
                format_upstream_error(f"Request failed with status code {response.status_code}", data),
                upstream=data,
            ),
        )
