"""Configuration management service with Pydantic Settings.

This module provides centralized configuration management for the
notifier, loading and validating environment variables at startup.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TemplateSettings(BaseSettings):
    """Message rendering settings."""

    model_config = SettingsConfigDict(env_prefix="TEMPLATE_")

    missing_value: str = Field(
        default="",
        alias="TEMPLATE_MISSING_VALUE",
        description='Text rendered for absent values (set to "null" for legacy output)',
    )


class SmtpSettings(BaseSettings):
    """SMTP mail notification settings."""

    model_config = SettingsConfigDict(env_prefix="SMTP_")

    host: str | None = Field(
        default=None,
        alias="SMTP_HOST",
        description="SMTP server hostname",
    )
    port: int = Field(
        default=587,
        alias="SMTP_PORT",
        description="SMTP server port",
    )
    secure: bool = Field(
        default=False,
        alias="SMTP_SECURE",
        description="Connect with implicit TLS instead of STARTTLS",
    )
    ignore_tls_error: bool = Field(
        default=False,
        alias="SMTP_IGNORE_TLS_ERROR",
        description="Skip TLS certificate verification",
    )
    username: str | None = Field(
        default=None,
        alias="SMTP_USERNAME",
        description="SMTP login name",
    )
    password: SecretStr | None = Field(
        default=None,
        alias="SMTP_PASSWORD",
        description="SMTP login password",
    )
    from_address: str | None = Field(
        default=None,
        alias="SMTP_FROM",
        description="Sender address",
    )
    to: str | None = Field(
        default=None,
        alias="SMTP_TO",
        description="Comma-separated recipient addresses",
    )
    cc: str | None = Field(default=None, alias="SMTP_CC", description="Carbon copy recipients")
    bcc: str | None = Field(
        default=None, alias="SMTP_BCC", description="Blind carbon copy recipients"
    )
    custom_subject: str | None = Field(
        default=None,
        alias="SMTP_CUSTOM_SUBJECT",
        description="Subject template for up/down notifications",
    )
    custom_body: str | None = Field(
        default=None,
        alias="SMTP_CUSTOM_BODY",
        description="Body template",
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate SMTP port range."""
        if not 1 <= v <= 65535:
            raise ValueError("SMTP_PORT must be between 1 and 65535")
        return v

    @property
    def enabled(self) -> bool:
        """Check if mail notifications are enabled."""
        return self.host is not None and self.to is not None


class WebhookSettings(BaseSettings):
    """Webhook notification settings."""

    model_config = SettingsConfigDict(env_prefix="WEBHOOK_")

    url: str | None = Field(
        default=None,
        alias="WEBHOOK_URL",
        description="URL receiving notification POSTs",
    )
    body_template: str | None = Field(
        default=None,
        alias="WEBHOOK_BODY_TEMPLATE",
        description="Template rendered into the msg field",
    )
    timeout: float = Field(
        default=10.0,
        alias="WEBHOOK_TIMEOUT",
        description="HTTP request timeout in seconds",
        gt=0,
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        """Validate webhook URL format."""
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError("WEBHOOK_URL must be an HTTP(S) endpoint")
        return v

    @property
    def enabled(self) -> bool:
        """Check if webhook notifications are enabled."""
        return self.url is not None


class Settings(BaseSettings):
    """Main application settings.

    Loads configuration from environment variables with support for
    .env files via python-dotenv.

    Example:
        ```python
        from uptime_notifier.config import get_settings

        settings = get_settings()
        print(settings.smtp.host)
        print(settings.log_level)
        ```
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Nested configuration groups
    template: TemplateSettings = Field(default_factory=TemplateSettings)
    smtp: SmtpSettings = Field(default_factory=SmtpSettings)
    webhook: WebhookSettings = Field(default_factory=WebhookSettings)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level",
    )

    def get_logging_level(self) -> int:
        """Get the numeric logging level."""
        level: int = getattr(logging, self.log_level)
        return level

    def redacted_summary(self) -> dict[str, str | dict[str, str]]:
        """Get a summary of settings with secrets redacted.

        Returns:
            Dictionary of settings with sensitive values masked.
        """
        return {
            "smtp": {
                "host": self.smtp.host or "(not set)",
                "port": str(self.smtp.port),
                "username": self.smtp.username or "(not set)",
                "password": "(set)" if self.smtp.password else "(not set)",
                "to": self.smtp.to or "(not set)",
            },
            "webhook": {
                "url": self._redact_url(self.webhook.url) if self.webhook.url else "(not set)",
            },
            "smtp_enabled": str(self.smtp.enabled),
            "webhook_enabled": str(self.webhook.enabled),
            "missing_value": repr(self.template.missing_value),
            "log_level": self.log_level,
        }

    @staticmethod
    def _redact_url(url: str) -> str:
        """Redact password from URL if present."""
        if "@" in url and "://" in url:
            # URL has credentials - redact the password
            protocol_end = url.index("://") + 3
            at_pos = url.index("@")
            creds_part = url[protocol_end:at_pos]
            if ":" in creds_part:
                username = creds_part.split(":")[0]
                return f"{url[:protocol_end]}{username}:***@{url[at_pos + 1 :]}"
        return url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Uses LRU cache to ensure settings are loaded only once and
    reused across the application.

    Returns:
        The Settings instance.

    Raises:
        ValidationError: If environment variables have invalid values.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing when you need to reload settings with
    different environment variables.
    """
    get_settings.cache_clear()
