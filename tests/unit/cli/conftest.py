"""Fixtures for CLI tests."""

import pytest


@pytest.fixture(autouse=True)
def _skip_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CLI invocations from replacing the root logger's handlers."""
    monkeypatch.setattr("shaper.cli._logging_configured", True)
