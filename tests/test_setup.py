"""Test that the project setup is working correctly."""

import uptime_notifier


def test_version() -> None:
    """Test that version is defined."""
    assert uptime_notifier.__version__ == "0.1.0"


def test_import_modules() -> None:
    """Test that all submodules can be imported."""
    from uptime_notifier import config, errors, notifier, templating

    # Just verify imports work
    assert templating is not None
    assert notifier is not None
    assert config is not None
    assert errors is not None
