"""CLI entry point for Uptime Notifier.

This module renders a notification template from the command line, and
optionally sends it through a configured channel.

Usage:
    python -m uptime_notifier [options]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import Any, NoReturn

from pydantic import ValidationError

from uptime_notifier import __version__
from uptime_notifier.config import Settings, clear_settings_cache, get_settings
from uptime_notifier.errors import InvalidInputError
from uptime_notifier.notifier import (
    NotificationContext,
    Notifier,
    SmtpNotifier,
    WebhookNotifier,
)
from uptime_notifier.templating import HeartbeatInfo, MessageRenderer, MonitorInfo

# Application info
APP_NAME = "Uptime Notifier"
APP_VERSION = __version__

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

CHANNELS = ("smtp", "webhook")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="uptime-notifier",
        description="Render uptime notification templates and send them.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m uptime_notifier --template "{{NAME}} is {{STATUS}}"    Preview with defaults
  python -m uptime_notifier --template-file body.txt \\
      --monitor monitor.json --heartbeat heartbeat.json         Render against state
  python -m uptime_notifier --send smtp --msg "Testing"           Send a test mail
  python -m uptime_notifier --config-check                         Validate config and exit
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )

    parser.add_argument(
        "--config-check",
        action="store_true",
        help="Validate configuration and exit",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override logging level (default: from settings)",
    )

    template_group = parser.add_mutually_exclusive_group()
    template_group.add_argument(
        "--template",
        default=None,
        help="Template text to render",
    )
    template_group.add_argument(
        "--template-file",
        type=Path,
        default=None,
        help="File containing the template to render",
    )

    parser.add_argument(
        "--monitor",
        type=Path,
        default=None,
        help="JSON file with monitor details",
    )

    parser.add_argument(
        "--heartbeat",
        type=Path,
        default=None,
        help="JSON file with heartbeat details",
    )

    parser.add_argument(
        "--msg",
        default=None,
        help="Generic message for --send (default: the rendered template)",
    )

    parser.add_argument(
        "--send",
        choices=CHANNELS,
        default=None,
        help="Send the notification through this channel",
    )

    return parser


def configure_logging(level: str) -> None:
    """Configure logging for the application.

    Args:
        level: Logging level string (DEBUG, INFO, etc.)
    """
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": (
                    "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"
                ),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "detailed" if level == "DEBUG" else "standard",
                "stream": "ext://sys.stderr",
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
        # Quieter logging for noisy libraries
        "loggers": {
            "httpx": {"level": "WARNING"},
            "httpcore": {"level": "WARNING"},
            "aiosmtplib": {"level": "WARNING"},
        },
    }
    logging.config.dictConfig(config)


def print_config_summary(settings: Settings) -> None:
    """Print a summary of the configuration.

    Args:
        settings: Application settings.
    """
    summary = settings.redacted_summary()
    print("Configuration:")
    print(f"  Log Level: {summary['log_level']}")
    print(f"  Missing Value: {summary['missing_value']}")
    print(f"  SMTP: {'enabled' if summary['smtp_enabled'] == 'True' else 'disabled'}")
    print(f"  Webhook: {'enabled' if summary['webhook_enabled'] == 'True' else 'disabled'}")
    print()


def validate_config() -> Settings | None:
    """Validate and load configuration.

    Returns:
        Settings instance if valid, None if invalid.
    """
    try:
        # Clear cache to force reload
        clear_settings_cache()
        return get_settings()
    except ValidationError as e:
        print("Configuration validation failed:", file=sys.stderr)
        for error in e.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            msg = error["msg"]
            print(f"  {field}: {msg}", file=sys.stderr)
        return None


def run_config_check(settings: Settings) -> int:
    """Run configuration check and exit.

    Args:
        settings: Validated settings.

    Returns:
        Exit code (0 for success).
    """
    print("Configuration is valid!")
    print()
    print_config_summary(settings)

    print("Checking channel availability...")
    print(f"  SMTP: {'configured' if settings.smtp.enabled else 'not configured'}")
    print(f"  Webhook: {'configured' if settings.webhook.enabled else 'not configured'}")
    return EXIT_SUCCESS


def load_json(path: Path) -> dict[str, Any]:
    """Load a JSON object from a file.

    Raises:
        ValueError: If the file does not hold a JSON object.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return data


def create_notifier(channel: str, settings: Settings, renderer: MessageRenderer) -> Notifier:
    """Create the notifier for a channel name."""
    if channel == "smtp":
        return SmtpNotifier.from_settings(settings.smtp, renderer)
    return WebhookNotifier.from_settings(settings.webhook, renderer)


async def send_notification(notifier: Notifier, context: NotificationContext) -> int:
    """Send one notification and report the outcome.

    Returns:
        Exit code.
    """
    result = await notifier.send(context)
    if result.ok:
        print(result.message)
        return EXIT_SUCCESS

    print(f"{notifier.name} delivery failed: {result.error}", file=sys.stderr)
    return EXIT_ERROR


def run(args: argparse.Namespace, settings: Settings) -> int:
    """Render, and optionally send, the requested notification.

    Args:
        args: Parsed command line arguments.
        settings: Validated settings.

    Returns:
        Exit code.
    """
    logger = logging.getLogger(__name__)
    renderer = MessageRenderer(missing_value=settings.template.missing_value)

    try:
        monitor = MonitorInfo.from_dict(load_json(args.monitor)) if args.monitor else None
        heartbeat = HeartbeatInfo.from_dict(load_json(args.heartbeat)) if args.heartbeat else None
        if args.template_file is not None:
            template = args.template_file.read_text(encoding="utf-8")
        else:
            template = args.template
    except (OSError, ValueError, KeyError) as e:
        print(f"Could not load input: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.send is None:
        if template is None:
            print("Nothing to render: pass --template or --template-file", file=sys.stderr)
            return EXIT_ERROR
        try:
            print(renderer.render(template, monitor, heartbeat))
        except InvalidInputError as e:
            print(f"Invalid input: {e}", file=sys.stderr)
            return EXIT_ERROR
        return EXIT_SUCCESS

    msg = args.msg
    if msg is None:
        if template is None:
            print("Nothing to send: pass --msg or a template", file=sys.stderr)
            return EXIT_ERROR
        result = renderer.try_render(template, monitor, heartbeat)
        if not result.ok:
            print(f"Invalid input: {result.error}", file=sys.stderr)
            return EXIT_ERROR
        msg = result.text or ""

    notifier = create_notifier(args.send, settings, renderer)
    context = NotificationContext(msg=msg, monitor=monitor, heartbeat=heartbeat)

    try:
        return asyncio.run(send_notification(notifier, context))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Validate configuration first
    settings = validate_config()
    if settings is None:
        sys.exit(EXIT_CONFIG_ERROR)

    # Determine effective log level
    log_level = args.log_level or settings.log_level
    configure_logging(log_level)

    # Config check mode
    if args.config_check:
        sys.exit(run_config_check(settings))

    sys.exit(run(args, settings))


if __name__ == "__main__":
    main()
