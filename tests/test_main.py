"""Tests for the CLI entry point."""

from __future__ import annotations

import json
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from uptime_notifier.__main__ import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_SUCCESS,
    configure_logging,
    create_parser,
    main,
    run_config_check,
    validate_config,
)
from uptime_notifier.errors import ErrorKind, NotificationError
from uptime_notifier.notifier.models import NotifyResult


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove notifier settings from the environment."""
    for name in (
        "SMTP_HOST",
        "SMTP_PORT",
        "SMTP_TO",
        "WEBHOOK_URL",
        "TEMPLATE_MISSING_VALUE",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def heartbeat_file(tmp_path):
    """Write a DOWN heartbeat JSON file."""
    path = tmp_path / "heartbeat.json"
    path.write_text(
        json.dumps({"time": "2024-01-01 00:00:00", "status": 0, "msg": "timeout"}),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def monitor_file(tmp_path):
    """Write a monitor JSON file."""
    path = tmp_path / "monitor.json"
    path.write_text(
        json.dumps({"id": 1, "name": "API", "type": "http", "url": "https://api.test"}),
        encoding="utf-8",
    )
    return path


class TestCreateParser:
    """Tests for argument parser creation."""

    def test_parser_has_version(self):
        """Parser should have version flag."""
        parser = create_parser()
        with pytest.raises(SystemExit) as exc_info:
            parser.parse_args(["--version"])
        assert exc_info.value.code == 0

    def test_parser_config_check(self):
        """Parser should accept --config-check flag."""
        parser = create_parser()
        args = parser.parse_args(["--config-check"])
        assert args.config_check is True

    def test_parser_send(self):
        """Parser should accept known channels only."""
        parser = create_parser()
        assert parser.parse_args(["--send", "webhook"]).send == "webhook"
        with pytest.raises(SystemExit):
            parser.parse_args(["--send", "pigeon"])

    def test_parser_template_sources_exclusive(self):
        """Parser should reject both template sources at once."""
        parser = create_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["--template", "x", "--template-file", "y"])

    def test_parser_default_values(self):
        """Parser should have correct defaults."""
        parser = create_parser()
        args = parser.parse_args([])
        assert args.config_check is False
        assert args.log_level is None
        assert args.template is None
        assert args.template_file is None
        assert args.send is None


class TestConfigureLogging:
    """Tests for logging configuration."""

    def test_configure_logging_info(self):
        """Should configure logging at INFO level."""
        configure_logging("INFO")
        assert logging.getLogger().level == logging.INFO

    def test_configure_logging_debug(self):
        """Should configure logging at DEBUG level."""
        configure_logging("DEBUG")
        assert logging.getLogger().level == logging.DEBUG


class TestValidateConfig:
    """Tests for configuration validation."""

    def test_validate_config_success(self):
        """Should return settings on valid config."""
        assert validate_config() is not None

    def test_validate_config_failure(self, monkeypatch, capsys):
        """Should return None on invalid config."""
        monkeypatch.setenv("SMTP_PORT", "0")

        assert validate_config() is None

        captured = capsys.readouterr()
        assert "Configuration validation failed" in captured.err


class TestRunConfigCheck:
    """Tests for config check mode."""

    def test_config_check_prints_summary(self, monkeypatch, capsys):
        """Config check should print configuration summary."""
        monkeypatch.setenv("WEBHOOK_URL", "https://hooks.example.com/x")

        settings = validate_config()
        assert settings is not None

        result = run_config_check(settings)
        assert result == EXIT_SUCCESS

        captured = capsys.readouterr()
        assert "Configuration is valid!" in captured.out
        assert "Webhook: configured" in captured.out
        assert "SMTP: not configured" in captured.out


class TestMain:
    """Tests for main entry point."""

    def test_main_with_config_check(self):
        """Main should exit successfully with --config-check."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--config-check"])

        assert exc_info.value.code == EXIT_SUCCESS

    def test_main_with_invalid_config(self, monkeypatch):
        """Main should exit with config error on invalid config."""
        monkeypatch.setenv("WEBHOOK_URL", "not-a-url")

        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == EXIT_CONFIG_ERROR

    def test_main_renders_preview(self, capsys):
        """Main should print the rendered template."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--template", "{{NAME}} is {{STATUS}}"])

        assert exc_info.value.code == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == "Test is ⚠️ Test"

    def test_main_renders_with_context(self, capsys, tmp_path, monitor_file, heartbeat_file):
        """Main should render a template file against monitor and heartbeat."""
        template_file = tmp_path / "body.txt"
        template_file.write_text(
            "{{NAME}} {{IF_DOWN}}down: {{MSG}}{{END_DOWN}} [{{DOWN_COUNT}}]", encoding="utf-8"
        )

        with pytest.raises(SystemExit) as exc_info:
            main(
                [
                    "--template-file",
                    str(template_file),
                    "--monitor",
                    str(monitor_file),
                    "--heartbeat",
                    str(heartbeat_file),
                ]
            )

        assert exc_info.value.code == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == "API down: timeout []"

    def test_main_uses_missing_value_setting(self, monkeypatch, capsys, heartbeat_file):
        """Main should apply the configured missing-value marker."""
        monkeypatch.setenv("TEMPLATE_MISSING_VALUE", "null")

        with pytest.raises(SystemExit) as exc_info:
            main(["--template", "{{DOWN_COUNT}}", "--heartbeat", str(heartbeat_file)])

        assert exc_info.value.code == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == "null"

    def test_main_invalid_status(self, capsys, tmp_path):
        """Main should report invalid heartbeat status."""
        path = tmp_path / "heartbeat.json"
        path.write_text(json.dumps({"time": "2024-01-01", "status": 2}), encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            main(["--template", "{{STATUS}}", "--heartbeat", str(path)])

        assert exc_info.value.code == EXIT_ERROR
        assert "Invalid heartbeat status" in capsys.readouterr().err

    def test_main_missing_file(self, capsys, tmp_path):
        """Main should report unreadable input files."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--template", "x", "--monitor", str(tmp_path / "missing.json")])

        assert exc_info.value.code == EXIT_ERROR
        assert "Could not load input" in capsys.readouterr().err

    def test_main_nothing_to_render(self, capsys):
        """Main should fail without a template."""
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == EXIT_ERROR

    @patch("uptime_notifier.__main__.create_notifier")
    def test_main_sends(self, mock_create_notifier, capsys):
        """Main should send the rendered template through the channel."""
        notifier = MagicMock()
        notifier.name = "webhook"
        notifier.send = AsyncMock(return_value=NotifyResult.success("webhook"))
        mock_create_notifier.return_value = notifier

        with pytest.raises(SystemExit) as exc_info:
            main(["--send", "webhook", "--template", "{{NAME}} Testing"])

        assert exc_info.value.code == EXIT_SUCCESS
        context = notifier.send.call_args.args[0]
        assert context.msg == "Test Testing"
        assert "Sent Successfully." in capsys.readouterr().out

    @patch("uptime_notifier.__main__.create_notifier")
    def test_main_send_failure(self, mock_create_notifier, capsys):
        """Main should exit with error when delivery fails."""
        notifier = MagicMock()
        notifier.name = "smtp"
        notifier.send = AsyncMock(
            return_value=NotifyResult.failure(
                "smtp", NotificationError(ErrorKind.TRANSPORT, "Error: refused")
            )
        )
        mock_create_notifier.return_value = notifier

        with pytest.raises(SystemExit) as exc_info:
            main(["--send", "smtp", "--msg", "Hello"])

        assert exc_info.value.code == EXIT_ERROR
        assert "smtp delivery failed: Error: refused" in capsys.readouterr().err


class TestIntegration:
    """Integration tests for CLI invocation."""

    def test_cli_help_option(self, capsys):
        """CLI should display help with -h option."""
        with pytest.raises(SystemExit) as exc_info:
            main(["-h"])

        assert exc_info.value.code == 0
        captured = capsys.readouterr()
        assert "uptime-notifier" in captured.out
        assert "--config-check" in captured.out
        assert "--template" in captured.out
        assert "--send" in captured.out

    def test_cli_version_option(self, capsys):
        """CLI should display version with --version option."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        captured = capsys.readouterr()
        assert "0.1.0" in captured.out

    def test_cli_invalid_log_level(self, capsys):
        """CLI should reject invalid log level."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--log-level", "INVALID"])

        assert exc_info.value.code != 0
        captured = capsys.readouterr()
        assert "invalid choice" in captured.err
