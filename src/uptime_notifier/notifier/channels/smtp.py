"""SMTP mail channel implementation."""

from __future__ import annotations

import logging
from email.message import EmailMessage
from typing import TYPE_CHECKING

import aiosmtplib

from uptime_notifier.errors import ErrorKind, NotificationError
from uptime_notifier.notifier.models import NotifyResult
from uptime_notifier.templating.dictionary import format_time_utc
from uptime_notifier.templating.models import HeartbeatStatus
from uptime_notifier.templating.renderer import MessageRenderer
from uptime_notifier.templating.substitution import stringify_value

if TYPE_CHECKING:
    from uptime_notifier.config import SmtpSettings
    from uptime_notifier.notifier.models import NotificationContext

logger = logging.getLogger(__name__)

# Messages ending with this are test notifications
TEST_MESSAGE_SUFFIX = "Testing"


class SmtpNotifier:
    """SMTP channel for sending notifications by mail.

    Subject and body default to the generic message and can be replaced by
    custom templates, rendered against the monitor and heartbeat.
    """

    def __init__(
        self,
        host: str,
        to: str,
        *,
        port: int = 587,
        secure: bool = False,
        ignore_tls_error: bool = False,
        username: str | None = None,
        password: str | None = None,
        from_address: str | None = None,
        cc: str | None = None,
        bcc: str | None = None,
        custom_subject: str | None = None,
        custom_body: str | None = None,
        renderer: MessageRenderer | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize SMTP channel.

        Args:
            host: SMTP server hostname.
            to: Comma-separated recipient addresses.
            port: SMTP server port.
            secure: Use implicit TLS; otherwise STARTTLS is used when offered.
            ignore_tls_error: Skip certificate verification.
            username: Login name. No login is attempted without credentials.
            password: Login password.
            from_address: Sender address.
            cc: Carbon copy recipients.
            bcc: Blind carbon copy recipients.
            custom_subject: Subject template for up/down notifications.
            custom_body: Body template.
            renderer: Renderer for the custom templates.
            timeout: Connection timeout in seconds.
        """
        self.host = host
        self.to = to
        self.port = port
        self.secure = secure
        self.ignore_tls_error = ignore_tls_error
        self.username = username
        self.password = password
        self.from_address = from_address
        self.cc = cc
        self.bcc = bcc
        self.custom_subject = custom_subject
        self.custom_body = custom_body
        self.renderer = renderer or MessageRenderer()
        self.timeout = timeout
        self.name = "smtp"

    @classmethod
    def from_settings(
        cls, settings: SmtpSettings, renderer: MessageRenderer | None = None
    ) -> SmtpNotifier:
        """Create a channel from SMTP settings."""
        return cls(
            host=settings.host or "",
            to=settings.to or "",
            port=settings.port,
            secure=settings.secure,
            ignore_tls_error=settings.ignore_tls_error,
            username=settings.username,
            password=settings.password.get_secret_value() if settings.password else None,
            from_address=settings.from_address,
            cc=settings.cc,
            bcc=settings.bcc,
            custom_subject=settings.custom_subject,
            custom_body=settings.custom_body,
            renderer=renderer,
        )

    def build_subject(self, context: NotificationContext) -> str:
        """Build the mail subject.

        The custom subject only applies to up/down notifications and test
        messages.
        """
        subject = context.msg

        is_status_change = context.monitor is not None and context.heartbeat is not None
        if is_status_change or context.msg.endswith(TEST_MESSAGE_SUFFIX):
            # Trailing whitespace in subjects raises spam scores
            custom_subject = (self.custom_subject or "").strip()
            if custom_subject:
                subject = self.renderer.render(custom_subject, context.monitor, context.heartbeat)

        # Headers cannot span lines
        return " ".join(subject.splitlines())

    def build_body(self, context: NotificationContext) -> str:
        """Build the plain text mail body."""
        custom_body = (self.custom_body or "").strip()
        if custom_body:
            return self.renderer.render(custom_body, context.monitor, context.heartbeat)

        if context.heartbeat is not None:
            time_utc = stringify_value(
                format_time_utc(context.heartbeat.time), self.renderer.missing_value
            )
            return f"{context.msg}\nTime (UTC): {time_utc}"
        return context.msg

    def build_message(self, context: NotificationContext) -> EmailMessage:
        """Compose the mail for a notification.

        Raises:
            InvalidInputError: If the heartbeat status is neither UP nor DOWN.
            ValueError: If a header value cannot be encoded, e.g. contains a
                line break.
        """
        if context.heartbeat is not None:
            HeartbeatStatus.coerce(context.heartbeat.status)

        message = EmailMessage()
        if self.from_address:
            message["From"] = self.from_address
        message["To"] = self.to
        if self.cc:
            message["Cc"] = self.cc
        if self.bcc:
            message["Bcc"] = self.bcc
        message["Subject"] = self.build_subject(context)
        message.set_content(self.build_body(context))
        return message

    async def send(self, context: NotificationContext) -> NotifyResult:
        """Send a notification by mail.

        Args:
            context: Message and optional monitor/heartbeat state.

        Returns:
            NotifyResult describing the outcome.
        """
        if not self.host or not self.to:
            return NotifyResult.failure(
                self.name,
                NotificationError(ErrorKind.CONFIGURATION, "SMTP host and recipient are required"),
            )

        try:
            message = self.build_message(context)
        except ValueError as e:
            # InvalidInputError, or a header value email refuses
            logger.error(f"SMTP message not built: {e}")
            return NotifyResult.failure(
                self.name, NotificationError(ErrorKind.INVALID_INPUT, str(e))
            )

        # aiosmtplib only logs in when credentials are given
        has_credentials = bool(self.username or self.password)

        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=(self.username or "") if has_credentials else None,
                password=(self.password or "") if has_credentials else None,
                use_tls=self.secure,
                validate_certs=not self.ignore_tls_error,
                timeout=self.timeout,
            )
        except aiosmtplib.SMTPException as e:
            logger.error(f"SMTP error: {e}")
            return NotifyResult.failure(
                self.name, NotificationError(ErrorKind.TRANSPORT, f"Error: {e}")
            )
        except OSError as e:
            logger.error(f"SMTP connection failed: {e}")
            return NotifyResult.failure(
                self.name, NotificationError(ErrorKind.TRANSPORT, f"Error: {e}")
            )
        except ValueError as e:
            logger.error(f"SMTP message rejected: {e}")
            return NotifyResult.failure(
                self.name, NotificationError(ErrorKind.INVALID_INPUT, str(e))
            )

        logger.info(f"SMTP notification sent to {self.to}")
        return NotifyResult.success(self.name)
