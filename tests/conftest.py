"""Shared test fixtures for rrulekit."""

import os
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from rrulekit.config.settings import RRuleSettings, reset_settings
from rrulekit.rrule.models import RecurringEvent


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep the global settings instance free of user config and env leakage."""
    for key in list(os.environ):
        if key.startswith("RRULEKIT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("RRULEKIT_CONFIG_DIR", str(tmp_path / "config"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def test_settings():
    """Create mock settings with default expansion limits."""
    settings = Mock(spec=RRuleSettings)
    settings.fallback_horizon_seconds = 126230400
    settings.max_occurrences = None
    settings.log_level = "ERROR"
    return settings


@pytest.fixture
def anchor_event():
    """Create a one-hour anchor event at 09:00 UTC on 2025-01-01."""
    return RecurringEvent(
        uid="anchor-event",
        summary="Daily Standup",
        start=datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc),
        end=datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc),
    )
